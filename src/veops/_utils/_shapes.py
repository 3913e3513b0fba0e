"""Shape and per-axis parameter helpers."""

__all__ = ["as_axis_tuple", "squeeze_shape"]


def squeeze_shape(shape: list[int] | tuple[int]) -> tuple[int]:
    """
    Return the spatial grid actually used by the transforms.

    ``(ny, nx)`` and ``(nz, ny, nx)`` are returned unchanged, while
    ``(1, ny, nx)`` collapses to the in-plane grid ``(ny, nx)``.

    """
    shape = tuple(int(n) for n in shape)
    if len(shape) != 2 and len(shape) != 3:
        raise ValueError(f"shape must be either (ny, nx) or (nz, ny, nx), got {shape}")
    if min(shape) < 1:
        raise ValueError(f"shape must be positive, got {shape}")
    if len(shape) == 3 and shape[0] == 1:
        return shape[1:]
    return shape


def as_axis_tuple(
    value: int | float | list | tuple, ndim: int, name: str, dtype: type = int
) -> tuple:
    """
    Broadcast a per-axis NUFFT parameter to ``ndim`` entries.

    Scalars are repeated on every axis. Sequences must be ordered as the
    image shape; a 3-element sequence used on a 2-D grid keeps its
    in-plane (last two) entries.

    """
    if value is None:
        raise ValueError(f"{name} must be provided")
    if isinstance(value, (int, float)) or getattr(value, "ndim", None) == 0:
        return (dtype(value),) * ndim
    value = tuple(dtype(v) for v in value)
    if len(value) == 3 and ndim == 2:
        value = value[1:]
    if len(value) != ndim:
        raise ValueError(f"{name} must have {ndim} entries, got {value}")
    return value
