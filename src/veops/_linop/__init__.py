"""Built-in MR Linear Operators."""

__all__ = []

from . import _veasl_op  # noqa

from ._veasl_op import *  # noqa

__all__.extend(_veasl_op.__all__)
