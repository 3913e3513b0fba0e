"""Non-Uniform Fast Fourier Transform Linear Operator."""

__all__ = ["NUFFT", "NUFFTAdjoint"]

from numpy.typing import NDArray

from .._sigpy.linop import Linop

from ._nufft import NUFFTPlan, nufft_init, _apply, _apply_adj


class NUFFT(Linop):
    """
    NUFFT linear operator.

    Parameters
    ----------
    ishape : list[int] | tuple[int]
        Input shape ``(..., ny, nx)`` (2D) or ``(..., nz, ny, nx)`` (3D).
        Leading axes are treated as batch axes.
    coords : NDArray[float]
        Fourier domain coordinate array of shape ``(..., ndim)``,
        in radians. ``coords[..., 0]`` is ``kx``.
    width : int | list[int] | tuple[int], optional
        Interpolation kernel width. The default is ``6``.
    oversamp_shape : int | list[int] | tuple[int] | None, optional
        Oversampled grid shape. The default is ``None`` (``2 * shape``).
    shift : float | list[float] | tuple[float] | None, optional
        Image index at the phase origin. The default is ``None`` (``shape // 2``).
    lowmem : bool, optional
        Use table based interpolation. The default is ``False``.
    plan : NUFFTPlan | None, optional
        Precomputed plan. If provided, the other NUFFT parameters are ignored.
    ndim : int | None, optional
        Number of spatial axes.
        The default is ``None`` (``coords.shape[-1]``).

    """

    def __init__(
        self,
        ishape: list[int] | tuple[int],
        coords: NDArray[float],
        width: int | list[int] | tuple[int] = 6,
        oversamp_shape: int | list[int] | tuple[int] | None = None,
        shift: float | list[float] | tuple[float] | None = None,
        lowmem: bool = False,
        plan: NUFFTPlan | None = None,
        ndim: int | None = None,
    ):
        if ndim is None:
            ndim = coords.shape[-1]
        self.coords = coords
        self.fourier_shape = list(coords.shape[:-1])

        # build plan
        if plan is not None:
            self.plan = plan
        else:
            self.plan = nufft_init(
                coords, ishape[-ndim:], width, oversamp_shape, shift, lowmem
            )
        self.signal_ndim = self.plan.ndim

        # get input and output shape
        oshape = list(ishape[: -self.signal_ndim]) + self.fourier_shape

        # initalize operator
        super().__init__(oshape, ishape)

    def _apply(self, input):
        output = _apply(self.plan, input)
        return output.reshape(*output.shape[:-1], *self.fourier_shape)

    def _adjoint_linop(self):
        return NUFFTAdjoint(self.ishape, self.coords, plan=self.plan)

    def _normal_linop(self):
        return self.H * self


class NUFFTAdjoint(Linop):
    """
    NUFFT Adjoint linear operator.

    Parameters
    ----------
    oshape : list[int] | tuple[int]
        Output shape ``(..., ny, nx)`` (2D) or ``(..., nz, ny, nx)`` (3D).
    coords : NDArray[float]
        Fourier domain coordinate array of shape ``(..., ndim)``,
        in radians. ``coords[..., 0]`` is ``kx``.
    width : int | list[int] | tuple[int], optional
        Interpolation kernel width. The default is ``6``.
    oversamp_shape : int | list[int] | tuple[int] | None, optional
        Oversampled grid shape. The default is ``None`` (``2 * shape``).
    shift : float | list[float] | tuple[float] | None, optional
        Image index at the phase origin. The default is ``None`` (``shape // 2``).
    lowmem : bool, optional
        Use table based interpolation. The default is ``False``.
    plan : NUFFTPlan | None, optional
        Precomputed plan. If provided, the other NUFFT parameters are ignored.
    ndim : int | None, optional
        Number of spatial axes.
        The default is ``None`` (``coords.shape[-1]``).

    """

    def __init__(
        self,
        oshape: list[int] | tuple[int],
        coords: NDArray[float],
        width: int | list[int] | tuple[int] = 6,
        oversamp_shape: int | list[int] | tuple[int] | None = None,
        shift: float | list[float] | tuple[float] | None = None,
        lowmem: bool = False,
        plan: NUFFTPlan | None = None,
        ndim: int | None = None,
    ):
        if ndim is None:
            ndim = coords.shape[-1]
        self.coords = coords
        self.fourier_shape = list(coords.shape[:-1])
        self.fourier_ndim = len(self.fourier_shape)

        # build plan
        if plan is not None:
            self.plan = plan
        else:
            self.plan = nufft_init(
                coords, oshape[-ndim:], width, oversamp_shape, shift, lowmem
            )
        self.signal_ndim = self.plan.ndim

        # get input and output shape
        ishape = list(oshape[: -self.signal_ndim]) + self.fourier_shape

        # initalize operator
        super().__init__(oshape, ishape)

    def _apply(self, input):
        input = input.reshape(*input.shape[: -self.fourier_ndim], -1)
        return _apply_adj(self.plan, input)

    def _adjoint_linop(self):
        return NUFFT(self.oshape, self.coords, plan=self.plan)
