"""Invisible image watermarking: embedding keys in images and reading them back."""

__version__ = "0.1.0"
__all__ = ["modes", "rng", "pixels", "spectral", "embed", "extract", "creator", "checker"]