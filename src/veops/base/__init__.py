"""Basic Linear operators for MRI encoding."""

__all__ = []

from . import _dcf  # noqa
from . import _fftc  # noqa
from . import _nufft  # noqa
from . import _fft_op  # noqa
from . import _nufft_op  # noqa

from ._dcf import *  # noqa
from ._fftc import *  # noqa
from ._nufft import *  # noqa
from ._fft_op import *  # noqa
from ._nufft_op import *  # noqa

__all__.extend(_dcf.__all__)
__all__.extend(_fftc.__all__)
__all__.extend(_nufft.__all__)
__all__.extend(_fft_op.__all__)
__all__.extend(_nufft_op.__all__)
