"""Fast Fourier Transform Linear Operator."""

__all__ = ["FFT"]

from .._sigpy.linop import Linop, Identity

from ._fftc import fft, ifft


class FFT(Linop):
    """
    Orthonormal FFT linear operator.

    The zero frequency sits at index ``0``, matching the layout
    of the Toeplitz kernels.

    Parameters
    ----------
    shape : list[int] | tuple[int]
        Input shape.
    axes : int | list[int] | tuple[int] | None, optional
        Axes over which to compute the FFT.
        The default is ``None`` (all axes).

    """

    def __init__(
        self,
        shape: list[int] | tuple[int],
        axes: int | list[int] | tuple[int] | None = None,
    ):
        self.axes = axes
        super().__init__(shape, shape)

    def _apply(self, input):
        return fft(input, axes=self.axes)

    def _adjoint_linop(self):
        return _IFFT(self.ishape, axes=self.axes)

    def _normal_linop(self):
        return Identity(self.ishape)


class _IFFT(Linop):
    def __init__(self, shape, axes=None):
        self.axes = axes
        super().__init__(shape, shape)

    def _apply(self, input):
        return ifft(input, axes=self.axes)

    def _adjoint_linop(self):
        return FFT(self.ishape, axes=self.axes)

    def _normal_linop(self):
        return Identity(self.ishape)
