"""Reading an embedded watermark back out of an image."""

from __future__ import annotations

import math
from collections.abc import Sequence
from itertools import product
from os import PathLike

import numpy as np

from iwmark.embed import (
    _MIDBAND_POSITIONS,
    _PositionPicker,
    _as_image,
    write_watermark_key,
)
from iwmark.modes import (
    MIDB_SECRET_KEY_A,
    MIDB_SECRET_KEY_B,
    WATERMARK_BYTES_COUNT,
    WatermarkMode,
)
from iwmark.pixels import bits_to_bytes, pick_range, signed_color_difference
from iwmark.rng import MT19937
from iwmark.spectral import dct2, fft2, luminance

_WATERMARK_BITS = WATERMARK_BYTES_COUNT * 8

_MIDBAND_COUNT = len(_MIDBAND_POSITIONS)


def _color(image: np.ndarray, x: int, y: int) -> list[int]:
    return [int(v) for v in image[y, x, :3]]


def extract_lsb_spatial(image: np.ndarray) -> bytes:
    """Read the watermark from the lowest bit of channels at keyed pixel positions."""
    source = _as_image(image)
    height, width = source.shape[:2]
    picker = _PositionPicker(width, height)

    bits: list[bool] = []
    while len(bits) < _WATERMARK_BITS:
        x, y = picker.pick()
        for value in _color(source, x, y):
            bits.append(bool(value & 0x1))
            if len(bits) >= _WATERMARK_BITS:
                break
    return bits_to_bytes(bits)


def extract_pvd_spatial(image: np.ndarray) -> bytes:
    """Read the watermark from differences of horizontally adjacent pixel pairs."""
    source = _as_image(image)
    height, width = source.shape[:2]
    picker = _PositionPicker(width - 1, height)

    bits: list[bool] = []
    while len(bits) < _WATERMARK_BITS:
        x, y = picker.pick()
        picker.mark(x + 1, y)

        diff = signed_color_difference(_color(source, x + 1, y), _color(source, x, y))
        for channel_diff in diff:
            difference = abs(channel_diff)
            _, high = pick_range(difference)
            bit_count = int(math.log2(high >> 1))
            bits.extend(
                bool((difference >> shift) & 1)
                for shift in reversed(range(bit_count))
            )
            if len(bits) >= _WATERMARK_BITS:
                break
    return bits_to_bytes(bits[:_WATERMARK_BITS])


def extract_midb_emb(image: np.ndarray) -> bytes:
    """Read one bit per 8x8 block by correlating mid-band DCT coefficients with keyed noise."""
    source = _as_image(image)
    height, width = source.shape[:2]

    magnitude = np.abs(fft2(luminance(source))).ravel()
    offsets = np.arange(8)[:, None] * width + np.arange(8)[None, :]

    pn0 = MT19937(MIDB_SECRET_KEY_A)
    pn1 = MT19937(MIDB_SECRET_KEY_B)
    half_max = MT19937.MAX / 2.0

    bits: list[bool] = []
    for y, x in product(range(0, height, 8), range(0, width, 8)):
        indices = x + y * width + offsets
        if indices.max() >= magnitude.size:
            raise ValueError("Image too small for an 8x8 block at this position.")
        block = dct2(magnitude[indices])

        pn0_correlation = 0.0
        pn1_correlation = 0.0
        for dy, dx in _MIDBAND_POSITIONS:
            value0 = (pn0() - half_max) / MT19937.MAX
            value1 = (pn1() - half_max) / MT19937.MAX
            value = block[dy, dx]
            pn0_correlation += value0 * value / 22.0
            pn1_correlation += value1 * value / 22.0

        bits.append(not pn0_correlation > pn1_correlation)
        if len(bits) >= _WATERMARK_BITS:
            break
    return bits_to_bytes(bits)


_EXTRACTORS = {
    WatermarkMode.LSB_SPATIAL: extract_lsb_spatial,
    WatermarkMode.PVD_SPATIAL: extract_pvd_spatial,
    WatermarkMode.AE_SPATIAL: extract_lsb_spatial,
    WatermarkMode.MIDB_EMB: extract_midb_emb,
}


def extract_watermark(image: np.ndarray, mode: WatermarkMode) -> bytes:
    """Read the watermark embedded with ``mode``; additive embedding is read as LSB."""
    return _EXTRACTORS[mode](image)


def write_watermark(path: str | PathLike[str], watermark: Sequence[int]) -> None:
    """Store an extracted watermark as a 32x32 P4 bitmap."""
    write_watermark_key(path, watermark)