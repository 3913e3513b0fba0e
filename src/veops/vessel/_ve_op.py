"""Vessel Encoding Linear Operator."""

__all__ = ["VesselEncodingOp", "VesselDecodingOp"]

import numpy as np
from numpy.typing import NDArray

from .._sigpy import linop

from ._vemat import vessel_encoding_matrix


class VesselEncodingOp(linop.Linop):
    """
    Mix vessel components into vessel encodings.

    Parameters
    ----------
    vemat : NDArray
        Encoding matrix of shape ``(nenc, nvc)``.
    ishape : list[int] | tuple[int]
        Input shape ``(nvc, ...)``.

    """

    def __init__(self, vemat: NDArray, ishape: list[int] | tuple[int]):
        self.vemat = vessel_encoding_matrix(vemat)
        if ishape[0] != self.vemat.shape[1]:
            raise ValueError(
                f"leading input axis must have {self.vemat.shape[1]} components,"
                f" got {ishape[0]}"
            )
        oshape = [self.vemat.shape[0]] + list(ishape[1:])
        super().__init__(oshape, ishape)

    def _apply(self, input):
        return _contract(self.vemat, input)

    def _adjoint_linop(self):
        return VesselDecodingOp(self.vemat, self.ishape)


class VesselDecodingOp(linop.Linop):
    """
    Apply the conjugate transpose of a vessel encoding matrix.

    Parameters
    ----------
    vemat : NDArray
        Encoding matrix of shape ``(nenc, nvc)``.
    oshape : list[int] | tuple[int]
        Output shape ``(nvc, ...)``.

    """

    def __init__(self, vemat: NDArray, oshape: list[int] | tuple[int]):
        self.vemat = vessel_encoding_matrix(vemat)
        ishape = [self.vemat.shape[0]] + list(oshape[1:])
        super().__init__(oshape, ishape)

    def _apply(self, input):
        return _contract(self.vemat.conj().T, input)

    def _adjoint_linop(self):
        return VesselEncodingOp(self.vemat, self.oshape)


# %% local subroutines
def _contract(matrix, input):
    output = np.tensordot(matrix, input, axes=(1, 0))
    return output.astype(np.result_type(matrix.dtype, input.dtype), copy=False)
