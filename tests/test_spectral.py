import numpy as np
import pytest

from iwmark.spectral import (
    dct2,
    fft2,
    fft_magnitude_image,
    gaussian_filter,
    inverse_dct2,
    inverse_fft2,
    luminance,
)


def test_luminance_of_gray_keeps_level():
    image = np.full((3, 4, 3), 100, dtype=np.uint8)
    result = luminance(image)
    assert result.shape == (3, 4)
    assert np.allclose(result, 100.0)


def test_luminance_ignores_alpha():
    rgb = np.random.default_rng(1).integers(0, 256, (5, 5, 3), dtype=np.uint8)
    rgba = np.concatenate([rgb, np.full((5, 5, 1), 7, dtype=np.uint8)], axis=2)
    assert np.array_equal(luminance(rgb), luminance(rgba))


def test_luminance_rejects_flat_array():
    with pytest.raises(ValueError):
        luminance(np.zeros((4, 4)))


def test_fft2_constant_has_only_dc():
    values = np.ones((4, 6))
    spectrum = fft2(values)
    assert spectrum[0, 0] == pytest.approx(24.0)
    rest = spectrum.copy()
    rest[0, 0] = 0
    assert np.allclose(rest, 0)


def test_fft2_uses_positive_exponent():
    values = np.random.default_rng(2).random((5, 7))
    assert np.allclose(fft2(values), np.conj(np.fft.fft2(values)))


def test_fft_round_trip():
    values = np.random.default_rng(3).random((6, 8)) * 255
    restored = inverse_fft2(fft2(values))
    assert np.allclose(restored.real, values)


def test_dct2_constant_block():
    result = dct2(np.ones((8, 8)))
    assert result[0, 0] == pytest.approx(256.0)
    rest = result.copy()
    rest[0, 0] = 0
    assert np.allclose(rest, 0)


def test_dct_round_trip_non_square():
    values = np.random.default_rng(4).random((4, 6)) * 100
    assert np.allclose(inverse_dct2(dct2(values)), values)


def test_dct_rejects_three_dimensions():
    with pytest.raises(ValueError):
        dct2(np.zeros((2, 2, 2)))


def test_gaussian_filter_shape_and_imaginary_part():
    kernel = gaussian_filter(10, 6, 1.5)
    assert kernel.shape == (6, 10)
    assert np.all(kernel.imag == 0)


def test_gaussian_filter_sums_to_one():
    kernel = gaussian_filter(64, 64, 2.0)
    assert kernel.real.sum() == pytest.approx(1.0)


def test_gaussian_filter_is_symmetric_and_peaks_at_origin():
    kernel = gaussian_filter(16, 16, 3.0).real
    assert kernel[0, 1] == pytest.approx(kernel[0, -1])
    assert kernel[1, 0] == pytest.approx(kernel[-1, 0])
    assert np.unravel_index(np.argmax(kernel), kernel.shape) == (0, 0)


def test_fft_magnitude_of_black_image_is_black():
    result = fft_magnitude_image(np.zeros((8, 8, 3), dtype=np.uint8))
    assert result.shape == (8, 8, 3)
    assert not result.any()


def test_fft_magnitude_of_constant_image():
    result = fft_magnitude_image(np.full((8, 8, 3), 100, dtype=np.uint8))
    assert result[0, 0, 0] == 255
    assert np.all(result[..., 0] == result[..., 1])
    assert np.all(result[..., 1] == result[..., 2])
    rest = result[..., 0].copy()
    rest[0, 0] = 0
    assert not rest.any()