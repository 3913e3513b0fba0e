"""Common operator fixtures."""

import math

import pytest

import numpy as np


def radial_coords(nenc, nt, nspokes, nread, seed=0):
    """2D radial trajectory of shape (nenc, nt, nspokes * nread, 2), in radians."""
    rng = np.random.default_rng(seed)
    radius = np.linspace(-math.pi, math.pi, nread, endpoint=False) + math.pi / nread
    coords = np.zeros((nenc, nt, nspokes, nread, 2))
    for enc in range(nenc):
        for t in range(nt):
            theta = np.arange(nspokes) * math.pi / nspokes + rng.uniform(0, math.pi)
            coords[enc, t, ..., 0] = np.cos(theta)[:, None] * radius
            coords[enc, t, ..., 1] = np.sin(theta)[:, None] * radius
    return coords.reshape(nenc, nt, -1, 2)


def stack_of_stars_coords(nenc, nt, nspokes, nread, nz, seed=0):
    """3D stack-of-stars trajectory of shape (nenc, nt, nz * nspokes * nread, 3)."""
    radial = radial_coords(nenc, nt, nspokes, nread, seed)
    kz = 2 * math.pi * (np.arange(nz) - nz // 2) / nz
    coords = np.zeros((nenc, nt, nz, radial.shape[2], 3))
    coords[..., :2] = radial[:, :, None]
    coords[..., 2] = kz[:, None]
    return coords.reshape(nenc, nt, -1, 3)


def random_complex(shape, seed=0):
    rng = np.random.default_rng(seed)
    return rng.standard_normal(shape) + 1j * rng.standard_normal(shape)


@pytest.fixture
def crand():
    """Random complex array factory."""
    return random_complex


@pytest.fixture
def relerr():
    """Relative l2 error."""

    def _relerr(actual, desired):
        return np.linalg.norm(actual - desired) / np.linalg.norm(desired)

    return _relerr


@pytest.fixture
def shape2d():
    return (8, 8)


@pytest.fixture
def shape3d():
    return (4, 8, 8)


@pytest.fixture
def coords2d():
    return radial_coords(nenc=2, nt=2, nspokes=8, nread=16)


@pytest.fixture
def coords3d():
    return stack_of_stars_coords(nenc=2, nt=1, nspokes=6, nread=16, nz=4)


@pytest.fixture
def smaps2d(shape2d):
    return random_complex((3, *shape2d), seed=42)


@pytest.fixture
def smaps3d(shape3d):
    return random_complex((2, *shape3d), seed=42)


@pytest.fixture
def coords2d_4enc():
    return radial_coords(nenc=4, nt=1, nspokes=6, nread=12, seed=3)
