"""FFT helpers and operator tests."""

import numpy as np

from veops.base import FFT, fft, ifft


def test_fft_unitary(crand):
    x = crand((3, 6, 5))
    F = FFT(x.shape, axes=(-2, -1))

    y = F(x)
    np.testing.assert_allclose(np.linalg.norm(y), np.linalg.norm(x))
    np.testing.assert_allclose(F.H(y), x, atol=1e-12)
    np.testing.assert_allclose(F.N(x), x, atol=1e-12)
    assert F.H.H.axes == (-2, -1)


def test_fft_zero_frequency_first(crand):
    x = crand((6, 5))
    y = fft(x)
    np.testing.assert_allclose(y[0, 0], x.sum() / np.sqrt(x.size))
    np.testing.assert_allclose(y, np.fft.fftn(x, norm="ortho"))
    np.testing.assert_allclose(ifft(y), x, atol=1e-12)


def test_fft_axes(crand):
    x = crand((4, 3, 8))
    np.testing.assert_allclose(fft(x, axes=-1), np.fft.fft(x, norm="ortho"))


def test_fft_real_input():
    x = np.ones((4, 4), dtype=np.float32)
    y = fft(x)
    assert y.dtype == np.complex64
    np.testing.assert_allclose(y[0, 0], 4.0)
