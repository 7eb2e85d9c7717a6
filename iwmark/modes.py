"""Watermarking modes and the constants shared by embedding and extraction."""

from __future__ import annotations

from enum import Enum

WATERMARK_BYTES_COUNT = 128
"""Number of watermark bytes embedded into or read out of an image."""

EMBEDDING_KEY = 195589293
"""Seed of the generator that picks pixel positions in the spatial modes."""

MIDB_SECRET_KEY_A = 2137
"""Seed of the pseudo-noise pattern that encodes a zero bit in mid-band mode."""

MIDB_SECRET_KEY_B = 420
"""Seed of the pseudo-noise pattern that encodes a one bit in mid-band mode."""

MIDB_K_COEFF = 1000000
"""Strength of the mid-band pattern; values much lower give poor results."""


class WatermarkMode(Enum):
    """A watermarking technique, identified by its short code."""

    LSB_SPATIAL = "lsb_spatial"
    PVD_SPATIAL = "pvd_spatial"
    AE_SPATIAL = "ae_spatial"
    MIDB_EMB = "midb_emb"

    @property
    def code(self) -> str:
        """The short code used on the command line."""
        return self.value

    @property
    def full_name(self) -> str:
        """The human-readable name of the technique."""
        return _FULL_NAMES[self]


_FULL_NAMES = {
    WatermarkMode.LSB_SPATIAL: "Least Significant Bit Insertion",
    WatermarkMode.PVD_SPATIAL: "Pixel Value Differencing",
    WatermarkMode.AE_SPATIAL: "Additive Embedding",
    WatermarkMode.MIDB_EMB: "Middle band DFT-DCT Embedding",
}


def parse_mode(text: str) -> WatermarkMode:
    """Return the mode whose code is exactly ``text``."""
    for mode in WatermarkMode:
        if mode.code == text:
            return mode
    raise ValueError(f"{text} is not a recognizable IWM Mode.")