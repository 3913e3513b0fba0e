"""Non Uniform Fast Fourier Transform."""

__all__ = [
    "NUFFTPlan",
    "nufft_init",
    "nufft",
    "nufft_adjoint",
    "nufft_norm",
    "interp",
    "gridding",
]

import math

from dataclasses import dataclass

import numpy as np
from numpy.typing import NDArray

from mrrt.nufft import NufftBase

from .._utils import as_axis_tuple


@dataclass(frozen=True, eq=False)
class NUFFTPlan:
    """
    NUFFT state for a single trajectory.

    All per-axis attributes follow the image axis order
    (i.e., ``(ny, nx)`` or ``(nz, ny, nx)``).

    Attributes
    ----------
    shape : tuple[int]
        Image grid shape.
    oversamp_shape : tuple[int]
        Oversampled grid shape.
    width : tuple[int]
        Interpolation kernel width.
    shift : tuple[float]
        Spatial index mapped to the phase origin.
    operator : mrrt.nufft.NufftBase
        Underlying NUFFT object, in ``"sparse"`` mode (precomputed
        interpolation matrix) or ``"table"`` mode (kernel lookup table).

    """

    shape: tuple
    oversamp_shape: tuple
    width: tuple
    shift: tuple
    operator: NufftBase

    @property
    def ndim(self) -> int:
        return len(self.shape)

    @property
    def n_samples(self) -> int:
        return self.operator.M

    @property
    def lowmem(self) -> bool:
        return self.operator.mode == "table"

    @property
    def sn(self) -> NDArray[float]:
        return self.operator.sn


def nufft_init(
    coords: NDArray[float],
    shape: list[int] | tuple[int],
    width: int | list[int] | tuple[int] = 6,
    oversamp_shape: int | list[int] | tuple[int] | None = None,
    shift: float | list[float] | tuple[float] | None = None,
    lowmem: bool = False,
    table_size: int = 2**11,
) -> NUFFTPlan:
    """
    Prepare NUFFT plan.

    Parameters
    ----------
    coords : NDArray[float]
        Fourier domain coordinate array of shape ``(..., ndim)``,
        in radians (``-pi`` to ``pi``). ``coords[..., 0]`` is
        ``kx`` and pairs with the last image axis. Extra trailing
        components (e.g., ``kz`` for a 2D grid) are ignored.
    shape : list[int] | tuple[int]
        Image shape ``(ny, nx)`` (2D) or ``(nz, ny, nx)`` (3D).
    width : int | list[int] | tuple[int], optional
        Interpolation kernel width. The default is ``6``.
    oversamp_shape : int | list[int] | tuple[int] | None, optional
        Oversampled grid shape. The default is ``None`` (``2 * shape``).
    shift : float | list[float] | tuple[float] | None, optional
        Image index placed at the phase origin.
        The default is ``None`` (``shape // 2``).
    lowmem : bool, optional
        If ``True``, interpolate from a kernel lookup table at each application
        instead of storing the sparse interpolation matrix.
        The default is ``False``.
    table_size : int, optional
        Lookup table oversampling (``lowmem=True`` only).
        The default is ``2**11``.

    Returns
    -------
    NUFFTPlan
        Immutable NUFFT plan.

    """
    shape = tuple(int(n) for n in shape)
    ndim = len(shape)
    if ndim != 2 and ndim != 3:
        raise ValueError("shape must be either (ny, nx) or (nz, ny, nx)")

    coords = np.asarray(coords)
    if coords.shape[-1] < ndim:
        raise ValueError(
            f"coords must have at least {ndim} components, got {coords.shape[-1]}"
        )

    # broadcast per-axis parameters
    width = as_axis_tuple(width, ndim, "width")
    if oversamp_shape is None:
        oversamp_shape = tuple(2 * n for n in shape)
    oversamp_shape = as_axis_tuple(oversamp_shape, ndim, "oversamp_shape")
    if shift is None:
        shift = tuple(n // 2 for n in shape)
    shift = as_axis_tuple(shift, ndim, "shift", float)

    if any(k < n for k, n in zip(oversamp_shape, shape)):
        raise ValueError(
            f"oversamp_shape {oversamp_shape} must not be smaller than shape {shape}"
        )
    if any(j < 1 or j > k for j, k in zip(width, oversamp_shape)):
        raise ValueError(f"width {width} must be between 1 and {oversamp_shape}")

    # reorder (kx, ky, kz) to image axis order
    omega = coords[..., :ndim][..., ::-1].reshape(-1, ndim).astype(np.float64)

    operator = NufftBase(
        Nd=shape,
        omega=omega,
        Jd=width,
        Kd=oversamp_shape,
        precision="double",
        mode="table" if lowmem else "sparse",
        Ld=table_size,
        n_shift=shift,
        phasing="real",
    )

    return NUFFTPlan(
        shape=shape,
        oversamp_shape=oversamp_shape,
        width=width,
        shift=shift,
        operator=operator,
    )


def nufft(input: NDArray[complex], plan: NUFFTPlan) -> NDArray[complex]:
    """
    Non-uniform Fast Fourier Transform.

    Parameters
    ----------
    input : NDArray[complex]
        Input signal domain array of shape ``(..., *plan.shape)``.
        The NUFFT is applied on the trailing ``plan.ndim`` axes
        and broadcast over the remaining ones.
    plan : NUFFTPlan
        NUFFT plan.

    Returns
    -------
    NDArray[complex]
        Fourier domain data of shape ``(..., nsamples)``.

    """
    return _apply(plan, input)


def nufft_adjoint(input: NDArray[complex], plan: NUFFTPlan) -> NDArray[complex]:
    """
    Adjoint non-uniform Fast Fourier Transform.

    Parameters
    ----------
    input : NDArray[complex]
        Input Fourier domain array of shape ``(..., nsamples)``.
    plan : NUFFTPlan
        NUFFT plan.

    Returns
    -------
    NDArray[complex]
        Signal domain data of shape ``(..., *plan.shape)``.

    """
    return _apply_adj(plan, input)


def nufft_norm(plan: NUFFTPlan) -> float:
    """
    Global gain normalization for a NUFFT plan.

    Computed from the roll-off correction at the grid center and the
    oversampled grid size, so that the operator gain does not depend
    on the oversampling factor.

    """
    center = tuple(n // 2 for n in plan.shape)
    return math.sqrt(float(abs(plan.sn[center])) ** -2 / math.prod(plan.oversamp_shape))


def interp(plan: NUFFTPlan, input: NDArray[complex]) -> NDArray[complex]:
    """
    Interpolate oversampled grid onto the plan samples.

    Parameters
    ----------
    plan : NUFFTPlan
        NUFFT plan.
    input : NDArray[complex]
        Oversampled grid data of shape ``(..., *plan.oversamp_shape)``.

    Returns
    -------
    NDArray[complex]
        Non-uniform data of shape ``(..., nsamples)``.

    """
    ndim = plan.ndim
    broadcast_shape = input.shape[:-ndim]

    # (..., *grid_shape) -> (prod(grid_shape), B), column-major as in the interpolator
    grid = np.moveaxis(input.reshape(-1, *plan.oversamp_shape), 0, -1)
    grid = grid.astype(np.complex128).reshape(-1, grid.shape[-1], order="F")

    if plan.lowmem:
        output = plan.operator.interp_table(plan.operator, np.asfortranarray(grid))
    else:
        output = plan.operator.p @ grid

    output = np.reshape(output, (plan.n_samples, -1), order="F")
    return output.T.reshape(*broadcast_shape, plan.n_samples)


def gridding(plan: NUFFTPlan, input: NDArray[complex]) -> NDArray[complex]:
    """
    Adjoint of :func:`interp` (spread samples onto the oversampled grid).

    Parameters
    ----------
    plan : NUFFTPlan
        NUFFT plan.
    input : NDArray[complex]
        Non-uniform data of shape ``(..., nsamples)``.

    Returns
    -------
    NDArray[complex]
        Oversampled grid data of shape ``(..., *plan.oversamp_shape)``.

    """
    broadcast_shape = input.shape[:-1]
    samples = input.reshape(-1, plan.n_samples).T.astype(np.complex128)

    if plan.lowmem:
        output = plan.operator.interp_table_adj(
            plan.operator, np.asfortranarray(samples)
        )
    else:
        output = plan.operator.p.conj().T @ samples

    output = np.reshape(output, (*plan.oversamp_shape, -1), order="F")
    output = np.moveaxis(output, -1, 0)
    return output.reshape(*broadcast_shape, *plan.oversamp_shape)


# %% local subroutines
def _apply(plan, input):
    ndim = plan.ndim
    if tuple(input.shape[-ndim:]) != plan.shape:
        raise ValueError(
            f"input spatial shape must be {plan.shape}, got {input.shape[-ndim:]}"
        )

    # reshape from (..., *grid_shape) to (*grid_shape, B)
    broadcast_shape = input.shape[:-ndim]
    input = np.moveaxis(input.reshape(-1, *plan.shape), 0, -1)

    # actual computation
    output = plan.operator.fft(input)

    # reshape from (samples, B) to (..., samples)
    output = np.reshape(output, (plan.n_samples, -1))
    return output.T.reshape(*broadcast_shape, plan.n_samples)


def _apply_adj(plan, input):
    if input.shape[-1] != plan.n_samples:
        raise ValueError(
            f"input must have {plan.n_samples} samples, got {input.shape[-1]}"
        )

    # reshape from (..., samples) to (samples, B)
    broadcast_shape = input.shape[:-1]
    input = input.reshape(-1, plan.n_samples).T

    # actual computation
    output = plan.operator.adj(input)

    # reshape from (*grid_shape, B) to (..., *grid_shape)
    output = np.moveaxis(np.reshape(output, (*plan.shape, -1)), -1, 0)
    return output.reshape(*broadcast_shape, *plan.shape)
