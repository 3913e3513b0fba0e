"""Coordinates scaling helper."""

__all__ = ["rescale_coords"]

import numpy as np
from numpy.typing import NDArray


def rescale_coords(coords: NDArray[float], amp: float | NDArray[float]) -> NDArray[float]:
    """
    Rescale Fourier domain coordinates to desired amplitude.

    Parameters
    ----------
    coords : NDArray[float]
        Fourier domain coordinate array of shape ``(..., ndim)``.
        Can have arbitrary units or scaling.
    amp : float | NDArray[float]
        Output scale. This represent the full dynamic range ``2 * kmax``,
        i.e., output coordinates will be scaled between ``(-0.5 * amp, 0.5 * amp)``.
        If array, must have ``ndim`` elements.

    Returns
    -------
    NDArray[float]
        Scaled domain coordinate array of shape ``(..., ndim)``.

    """
    coords = np.asarray(coords)
    coords = coords.astype(np.result_type(coords.dtype, np.float32), copy=False)
    cmax = abs(coords).reshape(-1, coords.shape[-1]).max(axis=0)
    cmax[cmax == 0] = 1.0
    if np.isscalar(amp):
        amp = coords.shape[-1] * [amp]
    return 0.5 * np.asarray(amp, dtype=coords.dtype) * coords / cmax
