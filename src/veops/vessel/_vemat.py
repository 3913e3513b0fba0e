"""Vessel encoding matrices."""

__all__ = ["vessel_encoding_matrix", "decode"]

import numpy as np
from numpy.typing import NDArray

from scipy.linalg import hadamard


def vessel_encoding_matrix(vemat: NDArray | None = None) -> NDArray:
    """
    Validate a vessel encoding matrix.

    Parameters
    ----------
    vemat : NDArray | None, optional
        Encoding matrix of shape ``(nenc, nvc)``. A 1D array is
        interpreted as a single component scheme ``(nenc, 1)``.
        The default is ``None`` (2-point Hadamard tag/control scheme).

    Returns
    -------
    NDArray
        Encoding matrix of shape ``(nenc, nvc)``.

    """
    if vemat is None:
        return hadamard(2).astype(np.float32)

    vemat = np.asarray(vemat)
    if vemat.ndim == 1:
        vemat = vemat[:, None]
    if vemat.ndim != 2 or vemat.size == 0:
        raise ValueError(
            f"vessel encoding matrix must be shaped (nenc, nvc), got {vemat.shape}"
        )
    if vemat.shape[1] > vemat.shape[0]:
        raise ValueError(
            f"number of components ({vemat.shape[1]}) cannot exceed"
            f" number of encodings ({vemat.shape[0]})"
        )

    return vemat


def decode(vemat: NDArray) -> NDArray:
    """
    Decoding matrix for a vessel encoding scheme.

    Parameters
    ----------
    vemat : NDArray
        Encoding matrix of shape ``(nenc, nvc)``.

    Returns
    -------
    NDArray
        Decoding matrix of shape ``(nvc, nenc)``. For square invertible
        schemes this is the inverse of ``vemat`` (e.g., ``H.T / n`` for
        an ``n``-point Hadamard matrix).

    """
    return np.linalg.pinv(vessel_encoding_matrix(vemat))
