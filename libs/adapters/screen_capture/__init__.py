"""Screen capture through mss."""
