"""Colour arithmetic and bit packing used by the watermarking modes."""

from __future__ import annotations

from collections.abc import Sequence

Color = tuple[int, int, int]

_BRACKETS = (0, 4, 8, 16, 32, 64, 128, 256)


def grayscale(color: Sequence[int]) -> int:
    """Weighted luminance of an RGB colour, truncated to an integer."""
    return int(0.3 * color[0] + 0.6 * color[1] + 0.1 * color[2])


def color_difference(color_a: Sequence[int], color_b: Sequence[int]) -> Color:
    """Absolute grayscale difference of two colours, as a gray colour."""
    diff = abs(grayscale(color_a) - grayscale(color_b)) & 0xFF
    return (diff, diff, diff)


def signed_color_difference(color_a: Sequence[int], color_b: Sequence[int]) -> Color:
    """Per-channel difference ``color_a - color_b``."""
    return (
        int(color_a[0]) - int(color_b[0]),
        int(color_a[1]) - int(color_b[1]),
        int(color_a[2]) - int(color_b[2]),
    )


def bits_to_value(bits: Sequence[bool]) -> int:
    """Read a bit sequence as an unsigned integer, most significant bit first."""
    value = 0
    for bit in bits:
        value = (value << 1) | (1 if bit else 0)
    return value


def bits_to_bytes(bits: Sequence[bool]) -> bytes:
    """Pack bits into bytes, each group of eight least significant bit first."""
    if len(bits) % 8:
        raise ValueError(f"Bit count {len(bits)} is not a multiple of 8.")
    return bytes(
        bits_to_value(list(reversed(bits[start:start + 8])))
        for start in range(0, len(bits), 8)
    )


def fourbytes_to_uint(data: Sequence[int]) -> int:
    """Little-endian unsigned value of the first four bytes of ``data``."""
    if len(data) < 4:
        raise ValueError(f"Need four bytes, got {len(data)}.")
    return int.from_bytes(bytes(data[:4]), "little")


def pick_range(abs_value: int) -> tuple[int, int]:
    """Return the difference bracket ``(low, high)`` holding ``abs_value``."""
    for low, high in zip(_BRACKETS, _BRACKETS[1:]):
        if low <= abs_value < high:
            return (low, high)
    raise ValueError(
        f"Absolute value out of possible ranges. Value: {abs_value}"
    )


def key_bit(key: Sequence[int], index: int) -> int:
    """Bit ``index`` of ``key``, counting from the low bit of each byte."""
    return (key[index // 8] >> (index % 8)) & 0x1