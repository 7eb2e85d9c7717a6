"""Command that extracts a watermark from an image into a bitmap file."""

from __future__ import annotations

import sys
from collections.abc import Sequence
from dataclasses import dataclass

import numpy as np
from PIL import Image

from iwmark.extract import extract_watermark, write_watermark
from iwmark.modes import WatermarkMode, parse_mode

USAGE = "Usage: iwm_checker -i <input image path> [options]"


class UsageError(ValueError):
    """The command line lacks a required option or an option's value."""


@dataclass
class CheckerOptions:
    """Settings of one extraction run."""

    input_path: str = ""
    mode: WatermarkMode = WatermarkMode.LSB_SPATIAL
    output_path: str = "output.pbm"


def _value_after(argv: Sequence[str], index: int) -> str:
    if index + 1 >= len(argv):
        raise UsageError(f"Option {argv[index]} needs a value.")
    return argv[index + 1]


def parse_options(argv: Sequence[str]) -> CheckerOptions:
    """Build options from ``-i``, ``-m`` and ``-o`` flags."""
    options = CheckerOptions()
    for index, arg in enumerate(argv):
        if arg == "-i":
            options.input_path = _value_after(argv, index)
        elif arg == "-m":
            options.mode = parse_mode(_value_after(argv, index))
        elif arg == "-o":
            options.output_path = _value_after(argv, index)
    if not options.input_path:
        raise UsageError(USAGE)
    return options


def _load_image(path: str) -> np.ndarray:
    with Image.open(path) as picture:
        target = "RGBA" if "A" in picture.getbands() else "RGB"
        return np.array(picture.convert(target), dtype=np.uint8)


def main(argv: Sequence[str] | None = None) -> int:
    """Extract the watermark from the input image and write it as a P4 bitmap."""
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
        image = _load_image(options.input_path)
        watermark = extract_watermark(image, options.mode)
        write_watermark(options.output_path, watermark)
    except (ValueError, OSError) as error:
        print(f"error: {error}", file=sys.stderr)
        return 1
    print("Watermark written to file.")
    return 0


if __name__ == "__main__":
    sys.exit(main())