"""Vessel Encoded multicoil Non Cartesian MRI operator."""

__all__ = ["VesselEncodedNUFFT", "VesselEncodedNUFFTAdjoint"]

import math

import numpy as np
from numpy.typing import NDArray

from .._sigpy import linop

from .._utils import for_each_pair, rescale_coords, squeeze_shape

from ..base import nufft, nufft_adjoint, nufft_init, nufft_norm, prepare_weights
from ..coil import SenseOp
from ..toep import VesselEncodedToeplitzOp, calc_toeplitz_kernel
from ..vessel import VesselEncodingOp, vessel_encoding_matrix


class VesselEncodedNUFFT(linop.Linop):
    """
    Vessel encoded multicoil Non Cartesian MR operator.

    Maps vessel component images of shape ``(nvc, nt, *shape)`` to
    multicoil k-space data of shape ``(nc, nenc, nt, nsamples)``.
    For every ``(encoding, timepoint)`` pair, components are mixed by the
    vessel encoding matrix, multiplied by the coil sensitivities, Fourier
    transformed with that pair's trajectory and finally weighted by the
    square root of the density compensation and the global gain ``norm``.

    Parameters
    ----------
    shape : list[int] | tuple[int]
        Image shape ``(ny, nx)`` (2D) or ``(nz, ny, nx)`` (3D).
        ``(1, ny, nx)`` describes a 2D problem.
    coords : NDArray[float]
        Fourier domain coordinate array of shape ``(nenc, nt, nsamples, ndim)``,
        in radians (``-pi`` to ``pi``). ``coords[..., 0]`` is ``kx``.
    smaps : NDArray[complex] | None, optional
        Coil sensitivity maps of shape ``(nc, *shape)``.
        The default is ``None`` (single coil with unit sensitivity).
    vemat : NDArray | None, optional
        Vessel encoding matrix of shape ``(nenc, nvc)``.
        The default is ``None`` (2-point Hadamard tag/control scheme).
    weights : float | NDArray[float] | None, optional
        Density compensation weights. ``None`` estimates them for each
        ``(encoding, timepoint)`` pair; ``0`` estimates them once and
        shares them; a scalar is broadcast; an array is used as is
        (``nenc * nt * nsamples`` elements). The default is ``None``.
    width : int | list[int] | tuple[int], optional
        Interpolation kernel width. The default is ``6``.
    oversamp_shape : int | list[int] | tuple[int] | None, optional
        Oversampled grid shape. The default is ``None`` (``2 * shape``).
    shift : float | list[float] | tuple[float] | None, optional
        Image index at the phase origin. The default is ``None`` (``shape // 2``).
    lowmem : bool, optional
        Use table based interpolation and process one coil at a time.
        The default is ``False``.
    toeplitz : bool, optional
        Use Toeplitz embedding to evaluate normal operator.
        The default is ``False``.
    casorati : bool, optional
        Represent images with flattened spatial axes,
        i.e., ``(nvc, nt, prod(shape))``. The default is ``False``.
    normalize_coords : bool, optional
        Normalize coordinates between ``-pi`` and ``pi``. If ``False``,
        assume they are correctly normalized already. The default
        is ``False``.
    num_workers : int, optional
        Number of threads over ``(encoding, timepoint)`` pairs.
        The default is ``1``.
    verbose : bool, optional
        Print progress. The default is ``False``.

    """

    def __init__(
        self,
        shape: list[int] | tuple[int],
        coords: NDArray[float],
        smaps: NDArray[complex] | None = None,
        vemat: NDArray | None = None,
        weights: float | NDArray[float] | None = None,
        width: int | list[int] | tuple[int] = 6,
        oversamp_shape: int | list[int] | tuple[int] | None = None,
        shift: float | list[float] | tuple[float] | None = None,
        lowmem: bool = False,
        toeplitz: bool = False,
        casorati: bool = False,
        normalize_coords: bool = False,
        num_workers: int = 1,
        verbose: bool = False,
    ):
        self.shape = tuple(int(n) for n in shape)
        self.grid_shape = squeeze_shape(self.shape)
        ndim = len(self.grid_shape)

        # trajectory
        coords = np.asarray(coords)
        if coords.ndim != 4:
            raise ValueError(
                f"coords must be shaped (nenc, nt, nsamples, ndim), got {coords.shape}"
            )
        if coords.shape[-1] < ndim:
            raise ValueError(
                f"coords must have at least {ndim} components for a {ndim}D grid,"
                f" got {coords.shape[-1]}"
            )
        if normalize_coords:
            coords = rescale_coords(coords, 2 * math.pi)
        self.coords = coords
        nenc, nt, nsamples = coords.shape[:3]

        # vessel encoding
        self.vemat = vessel_encoding_matrix(vemat)
        if self.vemat.shape[0] != nenc:
            raise ValueError(
                f"vessel encoding matrix has {self.vemat.shape[0]} encodings,"
                f" coords have {nenc}"
            )
        nvc = self.vemat.shape[1]

        # coil sensitivities
        if smaps is None:
            smaps = np.ones((1, *self.grid_shape), dtype=np.complex64)
        smaps = np.asarray(smaps)
        if smaps.ndim < 2 or math.prod(smaps.shape[1:]) != math.prod(self.grid_shape):
            raise ValueError(
                f"sensitivity maps must be shaped (nc, *{self.shape}), got {smaps.shape}"
            )
        if squeeze_shape(smaps.shape[1:]) != self.grid_shape:
            raise ValueError(
                f"sensitivity maps must be shaped (nc, *{self.shape}), got {smaps.shape}"
            )
        self.smaps = smaps.reshape(smaps.shape[0], *self.grid_shape)
        ncoils = self.smaps.shape[0]

        self.lowmem = lowmem
        self.toeplitz = toeplitz
        self.casorati = casorati
        self.num_workers = num_workers
        self.verbose = verbose

        # NUFFT plans
        if verbose:
            print("Initialising NUFFT(s)")
        self.plans = np.empty((nenc, nt), dtype=object)

        def _init(enc, t):
            self.plans[enc, t] = nufft_init(
                coords[enc, t], self.grid_shape, width, oversamp_shape, shift, lowmem
            )

        for_each_pair(_init, nenc, nt, num_workers)

        # density compensation (square root)
        self.weights = prepare_weights(weights, self.plans, num_workers, verbose)
        self.norm = nufft_norm(self.plans[0, 0])

        # vessel and coil operators
        self._encode = VesselEncodingOp(self.vemat, [nvc, nt, *self.grid_shape])
        self._decode = self._encode.H
        if lowmem:
            groups = [[c] for c in range(ncoils)]
        else:
            groups = [list(range(ncoils))]
        self._sense = [SenseOp(self.smaps, self.grid_shape, coils) for coils in groups]
        self._sense_adj = [S.H for S in self._sense]

        if casorati:
            ishape = [nvc, nt, math.prod(self.shape)]
        else:
            ishape = [nvc, nt, *self.shape]
        oshape = [ncoils, nenc, nt, nsamples]
        super().__init__(oshape, ishape)

        self._kernel = None
        self._adjoint = VesselEncodedNUFFTAdjoint(self)

    def _apply(self, input):
        if list(input.shape) != self.ishape:
            raise ValueError(f"input shape must be {self.ishape}, got {input.shape}")
        nenc, nt = self.plans.shape

        x = self._encode.apply(input.reshape(self._encode.ishape))
        dtype = np.result_type(x.dtype, self.smaps.dtype, np.complex64)
        output = np.zeros(self.oshape, dtype=dtype)

        def _forward(enc, t):
            plan = self.plans[enc, t]
            scale = self.weights[enc, t] * self.norm
            for S in self._sense:
                output[S.coils, enc, t] = nufft(S.apply(x[enc, t]), plan) * scale

        for_each_pair(_forward, nenc, nt, self.num_workers)

        return output

    def _apply_adjoint(self, input):
        if list(input.shape) != self.oshape:
            raise ValueError(f"input shape must be {self.oshape}, got {input.shape}")
        nenc, nt = self.plans.shape

        dtype = np.result_type(input.dtype, self.smaps.dtype, np.complex64)
        output = np.zeros(self._decode.ishape, dtype=dtype)

        def _adjoint(enc, t):
            plan = self.plans[enc, t]
            scale = self.weights[enc, t]
            for S, SH in zip(self._sense, self._sense_adj):
                tmp = nufft_adjoint(input[S.coils, enc, t] * scale, plan)
                output[enc, t] += SH.apply(tmp)
            output[enc, t] *= self.norm

        for_each_pair(_adjoint, nenc, nt, self.num_workers)

        return self._decode.apply(output).reshape(self.ishape)

    def _adjoint_linop(self):
        return self._adjoint

    def _normal_linop(self):
        if self.toeplitz:
            return self.toeplitz_op()
        return self.H * self

    def toeplitz_kernel(self) -> NDArray[complex]:
        """
        Build (once) and return the Toeplitz embedding.

        Returns
        -------
        NDArray[complex]
            Fourier domain kernel of shape ``(nenc, nt, *(2 * n for n in shape))``,
            where ``shape`` excludes a singleton ``nz`` for 2D problems.

        """
        if self._kernel is None:
            self._kernel = calc_toeplitz_kernel(
                self.plans,
                self.weights**2,
                self.norm,
                self.num_workers,
                self.verbose,
            )
        return self._kernel

    def toeplitz_op(self) -> VesselEncodedToeplitzOp:
        """
        Normal operator evaluated through the cached Toeplitz embedding.

        Returns
        -------
        VesselEncodedToeplitzOp
            Self-adjoint operator with the same input shape as this one.

        """
        return VesselEncodedToeplitzOp(
            self.toeplitz_kernel(),
            self.smaps,
            self.vemat,
            self.ishape,
            self.lowmem,
            self.num_workers,
        )


class VesselEncodedNUFFTAdjoint(linop.Linop):
    """
    Adjoint view of :class:`VesselEncodedNUFFT`.

    Shares plans, weights and sensitivities with the forward operator;
    ``op.H.H`` returns ``op`` itself.

    Parameters
    ----------
    op : VesselEncodedNUFFT
        Forward operator.

    """

    def __init__(self, op: VesselEncodedNUFFT):
        self._op = op
        super().__init__(op.ishape, op.oshape)

    def _apply(self, input):
        return self._op._apply_adjoint(input)

    def _adjoint_linop(self):
        return self._op

    def _normal_linop(self):
        return self._op * self
