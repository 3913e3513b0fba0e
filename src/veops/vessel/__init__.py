"""Vessel encoding operators."""

__all__ = []

from . import _vemat  # noqa
from . import _ve_op  # noqa

from ._vemat import *  # noqa
from ._ve_op import *  # noqa

__all__.extend(_vemat.__all__)
__all__.extend(_ve_op.__all__)
