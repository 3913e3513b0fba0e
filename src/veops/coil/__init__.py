"""Coil sensitivity operators."""

__all__ = []

from . import _sense_op  # noqa

from ._sense_op import *  # noqa

__all__.extend(_sense_op.__all__)
