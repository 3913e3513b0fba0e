"""Vessel encoded multicoil NUFFT operator tests."""

import math

import pytest

import numpy as np

from scipy.linalg import hadamard

from veops import VesselEncodedNUFFT


@pytest.fixture
def op2d(shape2d, coords2d, smaps2d):
    return VesselEncodedNUFFT(shape2d, coords2d, smaps2d)


@pytest.fixture
def op3d(shape3d, coords3d, smaps3d):
    return VesselEncodedNUFFT(shape3d, coords3d, smaps3d, toeplitz=True)


def _adjointness(op, crand):
    x = crand(op.ishape, seed=1)
    y = crand(op.oshape, seed=2)
    np.testing.assert_allclose(np.vdot(op(x), y), np.vdot(x, op.H(y)), rtol=1e-8)


def test_shapes(op2d):
    assert op2d.ishape == [2, 2, 8, 8]
    assert op2d.oshape == [3, 2, 2, 128]
    assert op2d.H.ishape == op2d.oshape
    assert op2d.H.oshape == op2d.ishape
    assert op2d.H.H is op2d


def test_adjointness_2d(op2d, crand):
    _adjointness(op2d, crand)


def test_adjointness_3d(op3d, crand):
    _adjointness(op3d, crand)


def test_adjointness_lowmem(shape2d, coords2d, smaps2d, crand):
    op = VesselEncodedNUFFT(shape2d, coords2d, smaps2d, lowmem=True)
    _adjointness(op, crand)


def test_adjointness_four_encodings(shape2d, coords2d_4enc, smaps2d, crand):
    coords = coords2d_4enc
    H = hadamard(4)[:, :3]
    op = VesselEncodedNUFFT(shape2d, coords, smaps2d, vemat=H, weights=0)
    assert op.ishape == [3, 1, 8, 8]
    assert op.oshape == [3, 4, 1, 72]
    _adjointness(op, crand)


def test_zero_in_zero_out(op2d):
    y = op2d(np.zeros(op2d.ishape, dtype=np.complex64))
    assert y.shape == (3, 2, 2, 128)
    assert not np.any(y)

    x = op2d.H(np.zeros(op2d.oshape, dtype=np.complex64))
    assert x.shape == (2, 2, 8, 8)
    assert not np.any(x)


def test_forward_composition(shape2d, coords2d, smaps2d, crand):
    from veops.base import nufft

    op = VesselEncodedNUFFT(shape2d, coords2d, smaps2d, weights=1.0)
    x = crand(op.ishape)
    y = op(x)

    # coil 2, encoding 1 (x0 - x1), timepoint 0
    mixed = x[0, 0] - x[1, 0]
    expected = op.norm * nufft(smaps2d[2] * mixed, op.plans[1, 0])
    np.testing.assert_allclose(y[2, 1, 0], expected, rtol=1e-10)


def test_lowmem_equivalence(shape2d, coords2d, smaps2d, crand, relerr):
    full = VesselEncodedNUFFT(shape2d, coords2d, smaps2d)
    table = VesselEncodedNUFFT(shape2d, coords2d, smaps2d, lowmem=True)
    x = crand(full.ishape, seed=1)
    y = crand(full.oshape, seed=2)
    assert relerr(table(x), full(x)) < 1e-3
    assert relerr(table.H(y), full.H(y)) < 1e-3


def test_threads_equivalence(shape2d, coords2d, smaps2d, crand):
    serial = VesselEncodedNUFFT(shape2d, coords2d, smaps2d)
    threaded = VesselEncodedNUFFT(shape2d, coords2d, smaps2d, num_workers=4)
    x = crand(serial.ishape, seed=1)
    y = crand(serial.oshape, seed=2)
    np.testing.assert_allclose(threaded.weights, serial.weights)
    np.testing.assert_allclose(threaded(x), serial(x), rtol=1e-12)
    np.testing.assert_allclose(threaded.H(y), serial.H(y), rtol=1e-12)
    np.testing.assert_allclose(threaded.toeplitz_kernel(), serial.toeplitz_kernel())


def test_normal_without_toeplitz(op2d, crand):
    x = crand(op2d.ishape)
    np.testing.assert_allclose(op2d.N(x), op2d.H(op2d(x)), rtol=1e-12)


def test_toeplitz_equivalence_2d(op2d, crand, relerr):
    x = crand(op2d.ishape)
    T = op2d.toeplitz_op()
    assert T.ishape == T.oshape == op2d.ishape
    assert relerr(T(x), op2d.H(op2d(x))) < 1e-3


def test_toeplitz_equivalence_3d(op3d, crand, relerr):
    x = crand(op3d.ishape)
    assert op3d.toeplitz_kernel().shape == (2, 1, 8, 16, 16)
    assert relerr(op3d.N(x), op3d.H(op3d(x))) < 1e-3


def test_toeplitz_lowmem(shape2d, coords2d, smaps2d, crand, relerr):
    op = VesselEncodedNUFFT(shape2d, coords2d, smaps2d, lowmem=True, toeplitz=True)
    x = crand(op.ishape)
    assert relerr(op.N(x), op.H(op(x))) < 1e-3


def test_toeplitz_kernel_cached(op2d):
    kernel = op2d.toeplitz_kernel()
    assert kernel.shape == (2, 2, 16, 16)
    assert op2d.toeplitz_kernel() is kernel


def test_dimensionality_switch(shape2d, coords2d, smaps2d, crand):
    op2 = VesselEncodedNUFFT(shape2d, coords2d, smaps2d)
    op3 = VesselEncodedNUFFT((1, *shape2d), coords2d, smaps2d[:, None])
    assert op3.ishape == [2, 2, 1, 8, 8]

    x = crand(op2.ishape, seed=1)
    y = crand(op2.oshape, seed=2)
    np.testing.assert_allclose(op3(x[:, :, None]), op2(x), rtol=1e-12)
    np.testing.assert_allclose(op3.H(y), op2.H(y)[:, :, None], rtol=1e-12)

    k2, k3 = op2.toeplitz_kernel(), op3.toeplitz_kernel()
    assert k3.shape == k2.shape == (2, 2, 16, 16)
    np.testing.assert_allclose(k3, k2)
    np.testing.assert_allclose(
        op3.toeplitz_op()(x[:, :, None]), op2.toeplitz_op()(x)[:, :, None], rtol=1e-6
    )


def test_casorati(shape2d, coords2d, smaps2d, crand):
    op = VesselEncodedNUFFT(shape2d, coords2d, smaps2d)
    flat = VesselEncodedNUFFT(shape2d, coords2d, smaps2d, casorati=True)
    assert flat.ishape == [2, 2, 64]

    x = crand(op.ishape, seed=1)
    y = crand(op.oshape, seed=2)
    np.testing.assert_allclose(flat(x.reshape(2, 2, 64)), op(x), rtol=1e-12)
    np.testing.assert_allclose(flat.H(y), op.H(y).reshape(2, 2, 64), rtol=1e-12)
    assert flat.toeplitz_op()(x.reshape(2, 2, 64)).shape == (2, 2, 64)


def test_single_coil_default(shape2d, coords2d, crand):
    op = VesselEncodedNUFFT(shape2d, coords2d)
    assert op.oshape == [1, 2, 2, 128]
    _adjointness(op, crand)


def test_normalize_coords(shape2d, coords2d):
    op = VesselEncodedNUFFT(shape2d, 10.0 * coords2d, normalize_coords=True)
    kmax = abs(op.coords).reshape(-1, 2).max(axis=0)
    np.testing.assert_allclose(kmax, math.pi)


def test_normalize_integer_coords(shape2d, coords2d, crand):
    coords = np.round(10 * coords2d).astype(np.int64)
    op = VesselEncodedNUFFT(shape2d, coords, normalize_coords=True)
    assert np.issubdtype(op.coords.dtype, np.floating)

    kmax = abs(op.coords).reshape(-1, 2).max(axis=0)
    np.testing.assert_allclose(kmax, math.pi)

    expected = VesselEncodedNUFFT(shape2d, coords.astype(float), normalize_coords=True)
    x = crand(op.ishape)
    np.testing.assert_allclose(op(x), expected(x), rtol=1e-12)


def test_verbose(shape2d, coords2d, capsys):
    op = VesselEncodedNUFFT(shape2d, coords2d, weights=0, verbose=True)
    op.toeplitz_kernel()
    out = capsys.readouterr().out
    assert "Initialising NUFFT(s)" in out
    assert "Density Compensation Weights" in out
    assert "Computing Toeplitz Embedding" in out


def test_configuration_errors(shape2d, coords2d, smaps2d):
    with pytest.raises(ValueError):
        VesselEncodedNUFFT(shape2d, coords2d, smaps2d, vemat=hadamard(4))
    with pytest.raises(ValueError):
        VesselEncodedNUFFT(shape2d, coords2d, smaps2d[:, :6])
    with pytest.raises(ValueError):
        VesselEncodedNUFFT(shape2d, coords2d[0])
    with pytest.raises(ValueError):
        VesselEncodedNUFFT((4, 8, 8), coords2d)
    with pytest.raises(ValueError):
        VesselEncodedNUFFT((8,), coords2d)
    with pytest.raises(ValueError):
        VesselEncodedNUFFT(shape2d, coords2d, weights=np.ones((2, 2, 100)))


def test_apply_shape_errors(op2d, crand):
    with pytest.raises((RuntimeError, ValueError)):
        op2d(crand((2, 2, 8, 6)))
    with pytest.raises((RuntimeError, ValueError)):
        op2d(crand((2, 2, 8)))
    with pytest.raises((RuntimeError, ValueError)):
        op2d.H(crand((3, 2, 2, 100)))
    with pytest.raises((RuntimeError, ValueError)):
        op2d.toeplitz_op()(crand((1, 2, 8, 8)))
