"""Toeplitz kernel calculators."""

__all__ = ["calc_toeplitz_kernel"]

import itertools
import math

import numpy as np
from numpy.typing import NDArray

from .._utils import for_each_pair

from ..base._fftc import fft
from ..base._nufft import NUFFTPlan, nufft, nufft_adjoint


def calc_toeplitz_kernel(
    plans: NDArray[object],
    weights: NDArray[float] | None = None,
    norm: float = 1.0,
    num_workers: int = 1,
    verbose: bool = False,
) -> NDArray[complex]:
    """
    Toeplitz PSF for fast Normal non-uniform Fast Fourier Transform.

    For every ``(encoding, timepoint)`` pair, the normal operator
    ``F^H diag(w) F`` is a multi-level Toeplitz matrix. This computes the
    Fourier diagonal of its circulant embedding on a grid twice as large
    as the image along each axis, so that the normal operator can be applied
    with zero-padded FFTs only.

    While fast, this is more memory intensive.

    Parameters
    ----------
    plans : NDArray[object]
        Grid of NUFFT plans of shape ``(nenc, nt)``, all sharing
        the same image shape.
    weights : NDArray[float] | None, optional
        Density compensation weights of shape ``(nenc, nt, nsamples)``
        (not square-rooted). The default is ``None`` (no weighting).
    norm : float, optional
        Global operator gain; the kernel is scaled by ``norm**2``.
        The default is ``1.0``.
    num_workers : int, optional
        Number of threads. The default is ``1``.
    verbose : bool, optional
        Print progress. The default is ``False``.

    Returns
    -------
    NDArray[complex]
        Toeplitz kernel of shape ``(nenc, nt, *(2 * n for n in shape))``.

    """
    plans = np.asarray(plans, dtype=object)
    if plans.ndim != 2:
        raise ValueError(f"plans must be shaped (nenc, nt), got {plans.shape}")
    nenc, nt = plans.shape

    shape = plans[0, 0].shape
    for plan in plans.ravel():
        if plan.shape != shape:
            raise ValueError(
                f"all plans must share the same image shape, got {shape} and {plan.shape}"
            )
    if len(shape) != 2 and len(shape) != 3:
        raise ValueError("shape must be either (ny, nx) or (nz, ny, nx)")

    if weights is None:
        weights = np.ones((nenc, nt, plans[0, 0].n_samples), dtype=np.float64)
    weights = np.asarray(weights, dtype=np.float64)
    if weights.shape[:2] != (nenc, nt):
        raise ValueError(
            f"weights must be shaped (nenc, nt, nsamples) = ({nenc}, {nt}, ...),"
            f" got {weights.shape}"
        )

    if verbose:
        print("Computing Toeplitz Embedding")

    kernel = np.zeros((nenc, nt, *[2 * n for n in shape]), dtype=np.complex64)

    def _compute(enc, t):
        kernel[enc, t] = _toeplitz_kernel(plans[enc, t], weights[enc, t], norm)

    for_each_pair(_compute, nenc, nt, num_workers)

    return kernel


# %% local subroutines
def _toeplitz_kernel(plan: NUFFTPlan, weights, norm):
    shape = plan.shape
    ndim = len(shape)

    # Columns of the normal operator for an impulse at every corner of the
    # inner axes. The outermost axis always starts at 0: its negative lags
    # follow from Hermitian symmetry.
    columns = {}
    for corner in itertools.product((0, 1), repeat=ndim - 1):
        idx = (0,) + tuple(c * (n - 1) for c, n in zip(corner, shape[1:]))
        delta = np.zeros(shape, dtype=np.complex128)
        delta[idx] = 1.0
        columns[corner] = nufft_adjoint(weights * nufft(delta, plan), plan)

    # circulant embedding of inner axes, innermost first
    for axis in range(ndim - 1, 0, -1):
        columns = {
            key[:-1]: _embed_axis(columns[key], columns[key[:-1] + (1,)], axis)
            for key in columns
            if key[-1] == 0
        }
    first = columns[()]

    # outermost axis: mirrored lags are conjugate and reversed on every axis
    inner = tuple(range(1, ndim))
    last = np.roll(np.flip(first.conj(), inner), 1, inner)
    last = np.flip(last, 0)
    psf = _embed_axis(first, last, 0)

    # Kernel is FFT of PSF
    axes = tuple(range(-ndim, 0))
    scale = math.sqrt(psf.size) * norm**2
    return fft(psf, axes=axes) * scale


def _embed_axis(first, last, axis):
    """
    Double ``axis`` turning a Toeplitz column pair into a circulant column.

    ``first`` holds lags ``0 ... n - 1`` and ``last`` holds lags
    ``-(n - 1) ... 0``; the lag ``n`` sample of the result is zero.
    """
    idx = [slice(None)] * last.ndim
    idx[axis] = -1
    last = last.copy()
    last[tuple(idx)] = 0.0
    return np.concatenate((first, np.roll(last, 1, axis=axis)), axis=axis)
