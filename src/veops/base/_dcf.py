"""Density compensation factors."""

__all__ = ["pipe_dcf", "prepare_weights"]

import numpy as np
from numpy.typing import NDArray

from .._utils import for_each_pair
from ._nufft import NUFFTPlan, interp, gridding


def pipe_dcf(
    plan: NUFFTPlan, niter: int = 5, weights: NDArray[float] | None = None
) -> NDArray[float]:
    """
    Estimate density compensation with Pipe's fixed point iteration.

    Each pass updates ``w <- w / Re(P P^H w)``, with ``P`` the plan
    interpolation matrix.

    Parameters
    ----------
    plan : NUFFTPlan
        NUFFT plan.
    niter : int, optional
        Number of fixed point iterations. The default is ``5``.
    weights : NDArray[float] | None, optional
        Initial weights of shape ``(nsamples,)``.
        The default is ``None`` (all ones).

    Returns
    -------
    NDArray[float]
        Density compensation weights of shape ``(nsamples,)``.

    Notes
    -----
    See Pipe & Menon, MRM 41(1):179-186 (1999).

    """
    if weights is None:
        weights = np.ones(plan.n_samples, dtype=np.float64)
    else:
        weights = np.asarray(weights, dtype=np.float64).reshape(-1)
        if weights.size != plan.n_samples:
            raise ValueError(
                f"weights must have {plan.n_samples} samples, got {weights.size}"
            )

    for _ in range(niter):
        tmp = interp(plan, gridding(plan, weights.astype(np.complex128)))
        weights = weights / tmp.real

    return weights


def prepare_weights(
    weights: float | NDArray[float] | None,
    plans: NDArray[object],
    num_workers: int = 1,
    verbose: bool = False,
) -> NDArray[float]:
    """
    Build the square-rooted density compensation weights.

    Parameters
    ----------
    weights : float | NDArray[float] | None
        Weights specification:

        * ``None``: estimate weights independently for every
          ``(encoding, timepoint)`` pair.
        * ``0``: estimate weights for the first pair only and share
          them across all pairs.
        * scalar: use the same weight for every sample.
        * array: per-sample weights, reshaped to ``(nenc, nt, nsamples)``.

    plans : NDArray[object]
        Grid of NUFFT plans of shape ``(nenc, nt)``.
    num_workers : int, optional
        Number of threads used for estimation. The default is ``1``.
    verbose : bool, optional
        Print progress. The default is ``False``.

    Returns
    -------
    NDArray[float]
        Square root of the density compensation weights,
        of shape ``(nenc, nt, nsamples)``.

    """
    nenc, nt = plans.shape
    nsamples = plans[0, 0].n_samples
    shape = (nenc, nt, nsamples)

    if weights is None:
        if verbose:
            print("Generating Density Compensation Weights")
        output = np.zeros(shape, dtype=np.float64)

        def _estimate(enc, t):
            output[enc, t] = pipe_dcf(plans[enc, t])

        for_each_pair(_estimate, nenc, nt, num_workers)
    elif np.ndim(weights) == 0 and weights == 0:
        if verbose:
            print("Generating Shared Density Compensation Weights")
        output = np.broadcast_to(pipe_dcf(plans[0, 0]), shape).copy()
    elif np.ndim(weights) == 0:
        output = np.full(shape, float(weights), dtype=np.float64)
    else:
        weights = np.asarray(weights, dtype=np.float64)
        if weights.size != np.prod(shape):
            raise ValueError(
                f"weights must have {np.prod(shape)} elements"
                f" (nenc, nt, nsamples) = {shape}, got {weights.shape}"
            )
        output = weights.reshape(shape)

    if np.any(output < 0):
        raise ValueError("density compensation weights must be non-negative")

    return np.sqrt(output)
