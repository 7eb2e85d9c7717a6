"""Command that embeds a watermark key into an image."""

from __future__ import annotations

import sys
from collections.abc import Sequence
from dataclasses import dataclass

import numpy as np
from PIL import Image

from iwmark.embed import (
    DisplayMode,
    apply_watermark,
    generate_watermark_key,
    read_watermark_key,
)
from iwmark.modes import WatermarkMode, parse_mode

USAGE = "Usage: iwm_creator -i <input img path> [options]"


class UsageError(ValueError):
    """The command line lacks a required option or an option's value."""


@dataclass
class CreatorOptions:
    """Settings of one embedding run."""

    input_path: str = ""
    mode: WatermarkMode = WatermarkMode.LSB_SPATIAL
    key_path: str = ""
    output_path: str = "watermarkedImage"
    jpeg_quality: int = 100


def _value_after(argv: Sequence[str], index: int) -> str:
    if index + 1 >= len(argv):
        raise UsageError(f"Option {argv[index]} needs a value.")
    return argv[index + 1]


def parse_options(argv: Sequence[str]) -> CreatorOptions:
    """Build options from ``-i``, ``-m``, ``-k``, ``-o`` and ``-q`` flags."""
    options = CreatorOptions()
    for index, arg in enumerate(argv):
        if arg == "-i":
            options.input_path = _value_after(argv, index)
        elif arg == "-m":
            options.mode = parse_mode(_value_after(argv, index))
        elif arg == "-k":
            options.key_path = _value_after(argv, index)
        elif arg == "-o":
            options.output_path = _value_after(argv, index)
        elif arg == "-q":
            options.jpeg_quality = int(_value_after(argv, index))
    if not options.input_path:
        raise UsageError(USAGE)
    return options


def _load_image(path: str) -> np.ndarray:
    with Image.open(path) as picture:
        target = "RGBA" if "A" in picture.getbands() else "RGB"
        return np.array(picture.convert(target), dtype=np.uint8)


def _save_outputs(pixels: np.ndarray, base: str, quality: int) -> None:
    picture = Image.fromarray(pixels)
    picture.save(f"{base}.png", format="PNG")
    picture.convert("RGB").save(f"{base}.jpg", format="JPEG", quality=quality)


def main(argv: Sequence[str] | None = None) -> int:
    """Embed a watermark key into the input image and save PNG and JPEG copies."""
    args = list(sys.argv[1:] if argv is None else argv)
    try:
        options = parse_options(args)
    except UsageError as error:
        print(error, file=sys.stderr)
        return 1
    except ValueError as error:
        print(f"error: {error}", file=sys.stderr)
        return 1

    try:
        if options.key_path:
            key = read_watermark_key(options.key_path)
        else:
            key = generate_watermark_key()
            print(
                "Generated a new watermark key: "
                + "".join(f"{byte:x}" for byte in key)
            )
        image = _load_image(options.input_path)
        watermarked = apply_watermark(
            image, key, options.mode, DisplayMode.WATERMARKED
        )
        _save_outputs(watermarked, options.output_path, options.jpeg_quality)
    except (ValueError, OSError) as error:
        print(f"error: {error}", file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())