"""Toeplitz Operator."""

__all__ = ["ToeplitzOp", "VesselEncodedToeplitzOp"]

import math

import numpy as np
from numpy.typing import NDArray

from .._sigpy import linop
from .._sigpy.linop import Multiply

from .._utils import for_each_pair

from ..base import FFT
from ..coil import SenseOp
from ..vessel import VesselEncodingOp


class ToeplitzOp(linop.Linop):
    """
    Single pair Fourier Normal operator.

    Applies ``R^H F^H diag(kernel) F R``, where ``R`` zero-pads the image
    to the kernel grid and ``F`` is the orthonormal (non-centered) FFT.

    Parameters
    ----------
    shape : list[int] | tuple[int]
        Image shape ``(ny, nx)`` (2D) or ``(nz, ny, nx)`` (3D).
    kernel : NDArray[complex]
        Toeplitz kernel of shape ``2 * shape``
        (see :func:`veops.toep.calc_toeplitz_kernel`).
    batch_shape : list[int] | tuple[int], optional
        Leading batch axes (e.g., ``(nc,)``). The default is ``()``.

    """

    def __init__(
        self,
        shape: list[int] | tuple[int],
        kernel: NDArray[complex],
        batch_shape: list[int] | tuple[int] = (),
    ):
        ndim = len(shape)
        if list(kernel.shape) != [2 * n for n in shape]:
            raise ValueError(
                f"kernel shape must be {[2 * n for n in shape]}, got {list(kernel.shape)}"
            )
        fft_axes = tuple(range(-ndim, 0))
        ishape = list(batch_shape) + list(shape)
        pshape = list(batch_shape) + list(kernel.shape)

        # Compose operator
        R = linop.Resize(pshape, ishape)
        F = FFT(pshape, axes=fft_axes)
        P = Multiply(pshape, kernel)
        self._linops = R.H * F.H * P * F * R
        super().__init__(self._linops.oshape, self._linops.ishape)

    def _apply(self, input):
        return self._linops._apply(input)

    def _normal_linop(self):
        return self * self

    def _adjoint_linop(self):
        return self


class VesselEncodedToeplitzOp(linop.Linop):
    """
    Toeplitz based normal operator of the vessel encoded multicoil NUFFT.

    Parameters
    ----------
    kernel : NDArray[complex]
        Toeplitz kernel of shape ``(nenc, nt, *(2 * n for n in shape))``.
    smaps : NDArray[complex]
        Coil sensitivity maps of shape ``(nc, *shape)``.
    vemat : NDArray
        Vessel encoding matrix of shape ``(nenc, nvc)``.
    ishape : list[int] | tuple[int]
        Input (and output) shape. Trailing axes after ``(nvc, nt)`` may be
        the image shape, the image shape with a leading singleton
        (``(1, ny, nx)``) or the flattened image (Casorati form).
    lowmem : bool, optional
        Process one coil at a time. The default is ``False``.
    num_workers : int, optional
        Number of threads over ``(encoding, timepoint)`` pairs.
        The default is ``1``.

    """

    def __init__(
        self,
        kernel: NDArray[complex],
        smaps: NDArray[complex],
        vemat: NDArray,
        ishape: list[int] | tuple[int],
        lowmem: bool = False,
        num_workers: int = 1,
    ):
        nenc, nt = kernel.shape[:2]
        grid = [n // 2 for n in kernel.shape[2:]]
        ishape = list(ishape)

        if len(ishape) < 3 or ishape[1] != nt:
            raise ValueError(
                f"input must be shaped (nvc, {nt}, ...) to match the kernel, got {ishape}"
            )
        if math.prod(ishape[2:]) != math.prod(grid):
            raise ValueError(
                f"image shape {ishape[2:]} does not match the kernel grid {grid}"
            )
        if smaps.size // smaps.shape[0] != math.prod(grid):
            raise ValueError(
                f"sensitivity maps shape {smaps.shape} does not match the kernel grid {grid}"
            )

        self.kernel = kernel
        self.smaps = smaps.reshape(smaps.shape[0], *grid)
        self.grid_shape = grid
        self.num_workers = num_workers

        # vessel encoding
        self._encode = VesselEncodingOp(vemat, [ishape[0], nt] + grid)
        if self._encode.oshape[0] != nenc:
            raise ValueError(
                f"vessel encoding matrix has {self._encode.oshape[0]} encodings,"
                f" kernel has {nenc}"
            )
        self._decode = self._encode.H

        # coil groups
        ncoils = self.smaps.shape[0]
        if lowmem:
            groups = [[c] for c in range(ncoils)]
        else:
            groups = [list(range(ncoils))]
        self._sense = [SenseOp(self.smaps, grid, coils) for coils in groups]
        self._toeplitz = [
            [ToeplitzOp(grid, kernel[enc, t], [len(groups[0])]) for t in range(nt)]
            for enc in range(nenc)
        ]

        super().__init__(ishape, ishape)

    def _apply(self, input):
        if list(input.shape) != self.ishape:
            raise ValueError(f"input shape must be {self.ishape}, got {input.shape}")
        nenc, nt = self.kernel.shape[:2]

        x = self._encode.apply(input.reshape(self._encode.ishape))
        dtype = np.result_type(x.dtype, self.smaps.dtype, np.complex64)
        output = np.zeros(x.shape, dtype=dtype)

        def _normal(enc, t):
            for S in self._sense:
                tmp = self._toeplitz[enc][t].apply(S.apply(x[enc, t]))
                output[enc, t] += S.H.apply(tmp)

        for_each_pair(_normal, nenc, nt, self.num_workers)

        return self._decode.apply(output).reshape(self.ishape)

    def _normal_linop(self):
        return self * self

    def _adjoint_linop(self):
        return self
