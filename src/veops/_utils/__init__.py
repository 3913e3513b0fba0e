"""Utilities."""

__all__ = []

from ._coords import *  # noqa
from ._parallel import *  # noqa
from ._shapes import *  # noqa

from . import _coords  # noqa
from . import _parallel  # noqa
from . import _shapes  # noqa

__all__.extend(_coords.__all__)
__all__.extend(_parallel.__all__)
__all__.extend(_shapes.__all__)
