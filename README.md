# iwmark

Invisible watermarking of raster images. A 128-byte watermark key is hidden
in an image and can later be read back out of it.

There are four embedding modes (`iwmark.modes.WatermarkMode`):

| Code          | Method                          |
|---------------|---------------------------------|
| `lsb_spatial` | Least Significant Bit Insertion |
| `pvd_spatial` | Pixel Value Differencing        |
| `ae_spatial`  | Additive Embedding              |
| `midb_emb`    | Middle band DFT-DCT Embedding   |

The spatial modes pick pixel positions from a fixed-seed Mersenne Twister
(`iwmark.rng.MT19937`). The checker therefore visits the same positions that
the creator wrote to. The mid-band mode puts one key bit into each 8×8 block
of the image's Fourier magnitude. It adds keyed noise to the block's mid-band
DCT coefficients. The image it produces is grayscale.

## Installation

```
pip install .
```

## Embedding a watermark

```
iwm-creator -i photo.png -m lsb_spatial -o watermarkedImage -q 100
```

Options:

- `-i <path>`: the input image. This option is required.
- `-m <mode>`: the embedding mode, given as one of the codes above. The
  default is `lsb_spatial`.
- `-k <path>`: a watermark key file. The file has two header lines and two
  integers (the dimensions), and then the raw key bytes. At most 128 bytes
  are read. A 32×32 P4 bitmap in the form that `iwmark.embed.write_watermark_key`
  writes meets this layout. If you leave out `-k`, a new key is generated
  from the current time and printed in hexadecimal. Each byte is printed
  without zero padding.
- `-o <name>`: the base name for the output. The command writes `<name>.png`
  and `<name>.jpg`. The default is `watermarkedImage`.
- `-q <n>`: the JPEG quality. The default is 100.

## Extracting a watermark

```
iwm-checker -i watermarkedImage.png -m lsb_spatial -o output.pbm
```

Options:

- `-i <path>`: the watermarked image. This option is required.
- `-m <mode>`: the mode that was used to embed. The default is `lsb_spatial`.
- `-o <path>`: where to write the extracted watermark as a 32×32 P4 bitmap.
  The default is `output.pbm`.

When extraction succeeds, the command prints `Watermark written to file.`
To check the result, compare the extracted file with the key file. Both
commands print a message on standard error and exit with status 1 in these
cases: a required option is missing, the mode is unknown, or the image or
key cannot be used.

## Using the library

```python
import numpy as np
from PIL import Image

from iwmark.embed import DisplayMode, apply_watermark, generate_watermark_key, write_watermark_key
from iwmark.extract import extract_watermark
from iwmark.modes import parse_mode

image = np.asarray(Image.open("photo.png").convert("RGB"))
key = generate_watermark_key(1234)
write_watermark_key("key.pbm", key)
mode = parse_mode("lsb_spatial")

marked = apply_watermark(image, key, mode, DisplayMode.WATERMARKED)
recovered = extract_watermark(marked, mode)
assert recovered == key
```

Modules:

- `iwmark.modes`: `WatermarkMode`, `parse_mode`, and the shared constants
  (`WATERMARK_BYTES_COUNT`, `EMBEDDING_KEY`, the mid-band keys and strength).
- `iwmark.embed`: `apply_lsb_spatial`, `apply_pvd_spatial`,
  `apply_ae_spatial`, `apply_midb_emb`, `apply_watermark`,
  `difference_image`, `generate_watermark_key`, `read_watermark_key`,
  `write_watermark_key`, and `DisplayMode`. `DisplayMode.next` and
  `DisplayMode.previous` cycle through the modes. Passing
  `DisplayMode.DIFFERENCE`, `DIFFERENCE_10X` or `DIFFERENCE_100X` to
  `apply_watermark` returns the absolute luminance difference instead of the
  watermarked image. The difference is multiplied by 1, 10 or 100 and wraps
  modulo 256.
- `iwmark.extract`: `extract_lsb_spatial`, `extract_pvd_spatial`,
  `extract_midb_emb`, `extract_watermark`, `write_watermark`.
- `iwmark.pixels`: colour differences, bit packing and `pick_range`.
- `iwmark.spectral`: 2-D FFT and DCT helpers, `gaussian_filter`, and
  `fft_magnitude_image`.
- `iwmark.rng`: `MT19937`, a 32-bit Mersenne Twister that gives the standard
  `mt19937` output sequence.

Images are NumPy arrays of shape `(height, width, channels)`, with at least
three channels. The functions raise `ValueError` in these cases: the image is
too small to hold the watermark, the key is too short, or a value is out of
range.

## Limitations

- The commands do not open a window. They do not show the difference views
  either; to get those, use `apply_watermark` with a `DisplayMode`.
- `iwm-creator` does not save a key that it generates. To check the image
  later, generate and store the key yourself with `generate_watermark_key`
  and `write_watermark_key`, then pass the file with `-k`.
- `ae_spatial` has no extractor of its own. `extract_watermark` reads it as
  `lsb_spatial`, and that does not recover the key.
- `midb_emb` changes the image as a whole. The watermark it reads back is not
  guaranteed to match the key. Extraction needs an image that holds 1024 full
  8×8 blocks.