"""Fast Fourier Transform."""

__all__ = ["fft", "ifft"]

import numpy as np
from numpy.typing import NDArray


def fft(
    input: NDArray[complex],
    axes: int | list[int] | tuple[int] | None = None,
) -> NDArray[complex]:
    """
    Orthonormal FFT with the zero frequency at index ``0``.

    Parameters
    ----------
    input : NDArray[complex]
        Input array.
    axes :  int | list[int] | tuple[int] | None, optional
        Axes over which to compute the FFT.
        The default is ``None`` (all axes).

    Returns
    -------
    NDArray[complex]
        FFT result.

    """
    if axes is not None and np.isscalar(axes):
        axes = (axes,)
    if not np.iscomplexobj(input):
        input = input.astype(np.complex64)

    output = np.fft.fftn(input, axes=axes, norm="ortho")
    return output.astype(input.dtype, copy=False)


def ifft(
    input: NDArray[complex],
    axes: int | list[int] | tuple[int] | None = None,
) -> NDArray[complex]:
    """
    Orthonormal inverse FFT, adjoint of :func:`fft`.

    Parameters
    ----------
    input : NDArray[complex]
        Input array.
    axes :  int | list[int] | tuple[int] | None, optional
        Axes over which to compute the iFFT.
        The default is ``None`` (all axes).

    Returns
    -------
    NDArray[complex]
        iFFT result.

    """
    if axes is not None and np.isscalar(axes):
        axes = (axes,)
    if not np.iscomplexobj(input):
        input = input.astype(np.complex64)

    output = np.fft.ifftn(input, axes=axes, norm="ortho")
    return output.astype(input.dtype, copy=False)
