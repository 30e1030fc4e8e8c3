from .inproc import InprocChannel, InprocConnection

__all__ = ["InprocChannel", "InprocConnection"]
