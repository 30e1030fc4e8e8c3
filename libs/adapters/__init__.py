"""Concrete implementations of the ports, plus test fakes."""
