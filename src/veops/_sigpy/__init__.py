"""SigPy import."""

from . import linop

__all__ = ["linop"]
