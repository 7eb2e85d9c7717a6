"""Embedding a watermark key into an image with the supported techniques."""

from __future__ import annotations

import io
import math
import time
from collections.abc import Sequence
from enum import Enum
from itertools import product
from os import PathLike

import numpy as np

from iwmark.modes import (
    EMBEDDING_KEY,
    MIDB_K_COEFF,
    MIDB_SECRET_KEY_A,
    MIDB_SECRET_KEY_B,
    WATERMARK_BYTES_COUNT,
    WatermarkMode,
)
from iwmark.pixels import (
    bits_to_value,
    color_difference,
    fourbytes_to_uint,
    key_bit,
    pick_range,
    signed_color_difference,
)
from iwmark.rng import MT19937
from iwmark.spectral import dct2, fft2, inverse_dct2, inverse_fft2, luminance

_WATERMARK_BITS = WATERMARK_BYTES_COUNT * 8

_PBM_HEADER = b"P4\n# Generated by iwm_checker\n32 32\n"

MIDBAND_MATRIX = (
    (0, 0, 0, 1, 1, 1, 1, 0),
    (0, 0, 1, 1, 1, 1, 0, 0),
    (0, 1, 1, 1, 1, 0, 0, 0),
    (1, 1, 1, 1, 0, 0, 0, 0),
    (1, 1, 1, 0, 0, 0, 0, 0),
    (1, 1, 0, 0, 0, 0, 0, 0),
    (1, 0, 0, 0, 0, 0, 0, 0),
    (0, 0, 0, 0, 0, 0, 0, 0),
)
"""Mid-band coefficients of an 8x8 DCT block, indexed ``[row][column]``."""

_MIDBAND_POSITIONS = tuple(
    (dy, dx) for dx in range(8) for dy in range(8) if MIDBAND_MATRIX[dy][dx]
)


class DisplayMode(Enum):
    """What the watermarked view shows."""

    WATERMARKED = 0
    DIFFERENCE = 1
    DIFFERENCE_10X = 2
    DIFFERENCE_100X = 3

    def next(self) -> DisplayMode:
        """The following mode, wrapping around."""
        members = list(DisplayMode)
        return members[(members.index(self) + 1) % len(members)]

    def previous(self) -> DisplayMode:
        """The preceding mode, wrapping around."""
        members = list(DisplayMode)
        return members[(members.index(self) - 1) % len(members)]


_DIFFERENCE_STRENGTH = {
    DisplayMode.DIFFERENCE: 1,
    DisplayMode.DIFFERENCE_10X: 10,
    DisplayMode.DIFFERENCE_100X: 100,
}


class _PositionPicker:
    """Yields distinct pixel positions from the keyed generator."""

    def __init__(self, columns: int, rows: int) -> None:
        if columns <= 0 or rows <= 0:
            raise ValueError("Image too small to hold the watermark.")
        self._rng = MT19937(EMBEDDING_KEY)
        self._columns = columns
        self._rows = rows
        self._used: set[tuple[int, int]] = set()
        self._free = columns * rows

    def mark(self, x: int, y: int) -> None:
        if (x, y) in self._used:
            return
        self._used.add((x, y))
        if x < self._columns and y < self._rows:
            self._free -= 1

    def pick(self) -> tuple[int, int]:
        if self._free <= 0:
            raise ValueError("Image too small to hold the watermark.")
        while True:
            x = self._rng() % self._columns
            y = self._rng() % self._rows
            if (x, y) not in self._used:
                break
        self.mark(x, y)
        return x, y


def _as_image(image: np.ndarray) -> np.ndarray:
    pixels = np.array(image, dtype=np.uint8)
    if pixels.ndim != 3 or pixels.shape[2] < 3:
        raise ValueError(
            f"Expected an image of shape (height, width, channels>=3), got {pixels.shape}."
        )
    return pixels


def _require_key(key: Sequence[int], size: int) -> bytes:
    data = bytes(key)
    if len(data) < size:
        raise ValueError(f"Watermark key needs {size} bytes, got {len(data)}.")
    return data


def _color(image: np.ndarray, x: int, y: int) -> list[int]:
    return [int(v) for v in image[y, x, :3]]


def apply_lsb_spatial(image: np.ndarray, key: Sequence[int]) -> np.ndarray:
    """Hide the key bits in the lowest bit of channels at keyed pixel positions."""
    source = _as_image(image)
    data = _require_key(key, WATERMARK_BYTES_COUNT)
    output = source.copy()
    height, width = source.shape[:2]
    picker = _PositionPicker(width, height)

    current_bit = 0
    while current_bit < _WATERMARK_BITS:
        x, y = picker.pick()
        color = _color(source, x, y)
        for channel in range(3):
            color[channel] = (color[channel] & ~0x1) | key_bit(data, current_bit)
            current_bit += 1
            if current_bit >= _WATERMARK_BITS:
                break
        output[y, x, :3] = color
    return output


def _take_bits(data: bytes, start: int, count: int) -> list[bool]:
    available = max(0, min(count, _WATERMARK_BITS - start))
    bits = [bool(key_bit(data, start + j)) for j in range(available)]
    return bits + [False] * (count - available)


def apply_pvd_spatial(image: np.ndarray, key: Sequence[int]) -> np.ndarray:
    """Encode key bits in the differences of horizontally adjacent pixel pairs."""
    source = _as_image(image)
    data = _require_key(key, WATERMARK_BYTES_COUNT)
    output = source.copy()
    height, width = source.shape[:2]
    picker = _PositionPicker(width - 1, height)

    current_bit = 0
    while current_bit < _WATERMARK_BITS:
        x, y = picker.pick()
        picker.mark(x + 1, y)

        color_a = _color(source, x, y)
        color_b = _color(source, x + 1, y)
        diff = signed_color_difference(color_b, color_a)
        new_a = list(color_a)
        new_b = list(color_b)

        for channel in range(3):
            low, high = pick_range(abs(diff[channel]))
            bit_count = int(math.log2(high >> 1))
            bits = _take_bits(data, current_bit, bit_count)
            current_bit += bit_count

            new_difference = low + bits_to_value(bits)
            if diff[channel] < 0:
                new_difference = -new_difference
            m = (new_difference - diff[channel]) * 0.5

            if diff[channel] % 2:
                new_a[channel] = (color_a[channel] - math.ceil(m)) & 0xFF
                new_b[channel] = (color_b[channel] + math.floor(m)) & 0xFF
            else:
                new_a[channel] = (color_a[channel] - math.floor(m)) & 0xFF
                new_b[channel] = (color_b[channel] + math.ceil(m)) & 0xFF

            if current_bit >= _WATERMARK_BITS:
                break

        output[y, x, :3] = new_a
        output[y, x + 1, :3] = new_b
    return output


def apply_ae_spatial(image: np.ndarray, key: Sequence[int]) -> np.ndarray:
    """Add four-byte little-endian key values to channels at keyed pixels, clamped to 255."""
    source = _as_image(image)
    data = _require_key(key, WATERMARK_BYTES_COUNT)
    output = source.copy()
    height, width = source.shape[:2]
    picker = _PositionPicker(width, height)

    current_byte = 0
    while current_byte < WATERMARK_BYTES_COUNT:
        x, y = picker.pick()
        color = _color(source, x, y)
        for channel in range(3):
            value = fourbytes_to_uint(data[current_byte:current_byte + 4])
            color[channel] = min((color[channel] + value) & 0xFFFFFFFF, 255)
            current_byte += 4
            if current_byte >= WATERMARK_BYTES_COUNT:
                break
        output[y, x, :3] = color
    return output


def apply_midb_emb(image: np.ndarray, key: Sequence[int]) -> np.ndarray:
    """Add keyed noise to mid-band DCT coefficients of the Fourier magnitude.

    One key bit goes into each 8x8 block; the result is a grayscale image.
    """
    source = _as_image(image)
    data = bytes(key)
    if not data:
        raise ValueError("Watermark key is empty.")
    height, width = source.shape[:2]

    spectrum = fft2(luminance(source))
    magnitude = np.abs(spectrum).ravel()
    phase = np.angle(spectrum).ravel()

    offsets = np.arange(8)[:, None] * width + np.arange(8)[None, :]
    pn0 = MT19937(MIDB_SECRET_KEY_A)
    pn1 = MT19937(MIDB_SECRET_KEY_B)
    half_max = MT19937.MAX / 2.0
    total_bits = len(data) * 8

    current_bit = 0
    for y, x in product(range(0, height, 8), range(0, width, 8)):
        indices = x + y * width + offsets
        if indices.max() >= magnitude.size:
            raise ValueError("Image too small for an 8x8 block at this position.")
        block = dct2(magnitude[indices])

        bit_value = key_bit(data, current_bit)
        current_bit += 1

        for dy, dx in _MIDBAND_POSITIONS:
            value0 = (pn0() - half_max) / MT19937.MAX
            value1 = (pn1() - half_max) / MT19937.MAX
            block[dy, dx] += (value1 if bit_value else value0) * MIDB_K_COEFF

        magnitude[indices] = inverse_dct2(block)
        if current_bit >= total_bits:
            break

    rebuilt = (magnitude * np.cos(phase) + 1j * magnitude * np.sin(phase)).reshape(
        height, width
    )
    restored = inverse_fft2(rebuilt).real
    gray = np.clip(np.trunc(restored), 0, 255).astype(np.uint8)

    output = source.copy()
    output[..., :3] = gray[..., None]
    return output


def difference_image(
    original: np.ndarray, watermarked: np.ndarray, strength: int
) -> np.ndarray:
    """Gray image of the absolute luminance difference, multiplied by ``strength`` mod 256."""
    first = _as_image(original)
    second = _as_image(watermarked)
    if first.shape[:2] != second.shape[:2]:
        raise ValueError("Images differ in size.")
    output = second.copy()
    height, width = first.shape[:2]
    for y, x in product(range(height), range(width)):
        gray = color_difference(first[y, x, :3], second[y, x, :3])[0]
        output[y, x, :3] = (gray * strength) & 0xFF
    return output


_APPLIERS = {
    WatermarkMode.LSB_SPATIAL: apply_lsb_spatial,
    WatermarkMode.PVD_SPATIAL: apply_pvd_spatial,
    WatermarkMode.AE_SPATIAL: apply_ae_spatial,
    WatermarkMode.MIDB_EMB: apply_midb_emb,
}


def apply_watermark(
    image: np.ndarray,
    key: Sequence[int],
    mode: WatermarkMode,
    display_mode: DisplayMode = DisplayMode.WATERMARKED,
) -> np.ndarray:
    """Watermark ``image`` with ``mode`` and render it as ``display_mode`` asks."""
    watermarked = _APPLIERS[mode](image, key)
    strength = _DIFFERENCE_STRENGTH.get(display_mode)
    if strength is None:
        return watermarked
    return difference_image(image, watermarked, strength)


def generate_watermark_key(seed: int | None = None) -> bytes:
    """A fresh key of WATERMARK_BYTES_COUNT bytes; the seed defaults to the current time."""
    rng = MT19937(int(time.time()) if seed is None else seed)
    return bytes(rng() & 0xFF for _ in range(WATERMARK_BYTES_COUNT))


def _read_int(stream: io.BytesIO) -> int:
    char = stream.read(1)
    while char and char.isspace():
        char = stream.read(1)
    text = b""
    if char in (b"+", b"-"):
        text, char = char, stream.read(1)
    while char and char.isdigit():
        text += char
        char = stream.read(1)
    if char:
        stream.seek(-1, io.SEEK_CUR)
    if not text.lstrip(b"+-"):
        raise ValueError("Malformed watermark header.")
    return int(text)


def read_watermark_key(path: str | PathLike[str]) -> bytes:
    """Read a key stored as a P4 bitmap: two header lines, dimensions, then raw bytes."""
    with open(path, "rb") as handle:
        stream = io.BytesIO(handle.read())
    stream.readline()
    stream.readline()
    _read_int(stream)
    _read_int(stream)
    stream.read(1)
    return stream.read(WATERMARK_BYTES_COUNT)


def write_watermark_key(path: str | PathLike[str], key: Sequence[int]) -> None:
    """Store ``key`` as a 32x32 P4 bitmap."""
    with open(path, "wb") as handle:
        handle.write(_PBM_HEADER)
        handle.write(bytes(key))