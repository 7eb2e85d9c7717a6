"""Frequency-domain helpers: 2-D Fourier and cosine transforms on grayscale planes."""

from __future__ import annotations

import math
from functools import lru_cache

import numpy as np

_GAUSS_K = 1.0 / (2.0 * 1.4142136)


def _as_pixels(image: np.ndarray) -> np.ndarray:
    pixels = np.asarray(image)
    if pixels.ndim != 3 or pixels.shape[2] < 3:
        raise ValueError(
            f"Expected an image of shape (height, width, channels>=3), got {pixels.shape}."
        )
    return pixels


def luminance(image: np.ndarray) -> np.ndarray:
    """Weighted grayscale plane ``0.3 R + 0.6 G + 0.1 B`` as floats, shape (height, width)."""
    pixels = _as_pixels(image).astype(np.float64)
    return 0.3 * pixels[..., 0] + 0.6 * pixels[..., 1] + 0.1 * pixels[..., 2]


def fft2(values: np.ndarray) -> np.ndarray:
    """Unnormalised 2-D DFT with a positive exponent sign."""
    array = np.asarray(values, dtype=np.complex128)
    return np.fft.ifft2(array) * array.size


def inverse_fft2(values: np.ndarray) -> np.ndarray:
    """Inverse of :func:`fft2`; only the real part is normalised."""
    array = np.asarray(values, dtype=np.complex128)
    result = np.fft.fft2(array)
    return result.real / array.size + 1j * result.imag


@lru_cache(maxsize=None)
def _dct_ii_matrix(n: int) -> np.ndarray:
    k = np.arange(n)[:, None]
    j = np.arange(n)[None, :]
    return 2.0 * np.cos(np.pi * (j + 0.5) * k / n)


@lru_cache(maxsize=None)
def _dct_iii_matrix(n: int) -> np.ndarray:
    k = np.arange(n)[:, None]
    j = np.arange(n)[None, :]
    matrix = 2.0 * np.cos(np.pi * j * (k + 0.5) / n)
    matrix[:, 0] = 1.0
    return matrix


def _as_plane(values: np.ndarray) -> np.ndarray:
    plane = np.asarray(values, dtype=np.float64)
    if plane.ndim != 2:
        raise ValueError(f"Expected a 2-D array, got shape {plane.shape}.")
    return plane


def dct2(values: np.ndarray) -> np.ndarray:
    """Unnormalised 2-D DCT-II applied along both axes."""
    plane = _as_plane(values)
    height, width = plane.shape
    return _dct_ii_matrix(height) @ plane @ _dct_ii_matrix(width).T


def inverse_dct2(values: np.ndarray) -> np.ndarray:
    """Inverse of :func:`dct2`: DCT-III along both axes, divided by ``4 * width * height``."""
    plane = _as_plane(values)
    height, width = plane.shape
    result = _dct_iii_matrix(height) @ plane @ _dct_iii_matrix(width).T
    return result / (4 * width * height)


def gaussian_filter(width: int, height: int, scale: float) -> np.ndarray:
    """Frequency-wrapped Gaussian kernel built from integrated erf steps."""
    a = 1.0 / (_GAUSS_K * scale)

    def profile(size: int) -> np.ndarray:
        half = size // 2
        return np.array(
            [
                math.erf(a * (p - 0.5)) - math.erf(a * (p + 0.5))
                for p in (i - size if i >= half else i for i in range(size))
            ]
        )

    real = np.outer(profile(height), profile(width)) * 0.25
    return real.astype(np.complex128)


def fft_magnitude_image(image: np.ndarray) -> np.ndarray:
    """Log-scaled Fourier magnitude of the image's luminance, as a gray RGB image."""
    plane = luminance(image)
    height, width = plane.shape
    magnitude = np.abs(fft2(plane))
    scaled = np.trunc(1024.0 * np.log(1 + magnitude / (width * height)))
    gray = np.minimum(255, scaled).astype(np.uint8)
    return np.repeat(gray[..., None], 3, axis=2)