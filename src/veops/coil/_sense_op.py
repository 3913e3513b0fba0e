"""Coil sensitivity encoding operator."""

__all__ = ["SenseOp", "SenseAdjointOp"]

import numpy as np
from numpy.typing import NDArray

from .._sigpy import linop


class SenseOp(linop.Linop):
    """
    Multiply an image by a set of coil sensitivity maps.

    Parameters
    ----------
    smaps : NDArray[complex]
        Coil sensitivity maps of shape ``(nc, *shape)``.
    ishape : list[int] | tuple[int]
        Input shape ``(*batch, *shape)``.
    coils : list[int] | tuple[int] | NDArray[int] | None, optional
        Coil indices to synthesize. The default is ``None`` (all coils).

    Notes
    -----
    Output is shaped ``(len(coils), *batch, *shape)``: coils are stacked
    along a new leading axis and the batch axes are broadcast.

    """

    def __init__(
        self,
        smaps: NDArray[complex],
        ishape: list[int] | tuple[int],
        coils: list[int] | tuple[int] | NDArray[int] | None = None,
    ):
        self.smaps = smaps
        self.coils = _check_coils(coils, smaps.shape[0])
        self.grid_shape = _check_smaps(smaps, ishape)
        self.batch_shape = list(ishape[: len(ishape) - len(self.grid_shape)])

        oshape = [len(self.coils)] + list(ishape)
        super().__init__(oshape, ishape)

    def _apply(self, input):
        mult = self.smaps[self.coils]
        mult = mult.reshape(
            mult.shape[0], *([1] * len(self.batch_shape)), *self.grid_shape
        )
        return mult * input[None, ...]

    def _adjoint_linop(self):
        return SenseAdjointOp(self.smaps, self.ishape, self.coils)

    def _normal_linop(self):
        return self.H * self


class SenseAdjointOp(linop.Linop):
    """
    Coil combination with conjugate sensitivity maps.

    Parameters
    ----------
    smaps : NDArray[complex]
        Coil sensitivity maps of shape ``(nc, *shape)``.
    oshape : list[int] | tuple[int]
        Output shape ``(*batch, *shape)``.
    coils : list[int] | tuple[int] | NDArray[int] | None, optional
        Coil indices to combine. The default is ``None`` (all coils).

    """

    def __init__(
        self,
        smaps: NDArray[complex],
        oshape: list[int] | tuple[int],
        coils: list[int] | tuple[int] | NDArray[int] | None = None,
    ):
        self.smaps = smaps
        self.coils = _check_coils(coils, smaps.shape[0])
        self.grid_shape = _check_smaps(smaps, oshape)
        self.batch_shape = list(oshape[: len(oshape) - len(self.grid_shape)])

        ishape = [len(self.coils)] + list(oshape)
        super().__init__(oshape, ishape)

    def _apply(self, input):
        mult = self.smaps[self.coils].conj()
        mult = mult.reshape(
            mult.shape[0], *([1] * len(self.batch_shape)), *self.grid_shape
        )
        return (mult * input).sum(axis=0)

    def _adjoint_linop(self):
        return SenseOp(self.smaps, self.oshape, self.coils)


# %% local subroutines
def _check_coils(coils, ncoils):
    if coils is None:
        return np.arange(ncoils)
    coils = np.atleast_1d(np.asarray(coils, dtype=int))
    if coils.ndim != 1 or coils.size == 0:
        raise ValueError(f"coils must be a non-empty sequence, got {coils}")
    if np.any(coils < 0) or np.any(coils >= ncoils):
        raise ValueError(f"coil indices must be in [0, {ncoils}), got {coils}")
    return coils


def _check_smaps(smaps, shape):
    grid_shape = list(smaps.shape[1:])
    if len(grid_shape) > len(shape) or list(shape[-len(grid_shape) :]) != grid_shape:
        raise ValueError(
            f"sensitivity maps grid {grid_shape} does not match image shape {shape}"
        )
    return grid_shape
