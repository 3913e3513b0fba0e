"""Toeplitz embedding of non-Cartesian normal operators."""

__all__ = []

from . import _toep  # noqa
from . import _toep_op  # noqa

from ._toep import *  # noqa
from ._toep_op import *  # noqa

__all__.extend(_toep.__all__)
__all__.extend(_toep_op.__all__)
