"""Main VEOps API."""

__all__ = []

from . import base  # noqa
from . import coil  # noqa
from . import toep  # noqa
from . import vessel  # noqa

from . import _linop  # noqa

from ._linop import *  # noqa

__all__.extend(_linop.__all__)
