import numpy as np
import pytest
from PIL import Image

from iwmark.checker import CheckerOptions, UsageError, main, parse_options
from iwmark.embed import apply_lsb_spatial, read_watermark_key
from iwmark.modes import WatermarkMode


def _watermarked_image(path, key):
    rng = np.random.default_rng(3)
    pixels = rng.integers(0, 256, size=(32, 32, 3), dtype=np.uint8)
    marked = apply_lsb_spatial(pixels, key)
    Image.fromarray(marked).save(path, format="PNG")


def test_parse_defaults():
    options = parse_options(["-i", "picture.png"])
    assert options == CheckerOptions(input_path="picture.png")
    assert options.output_path == "output.pbm"
    assert options.mode is WatermarkMode.LSB_SPATIAL


def test_parse_flags():
    options = parse_options(["-i", "a.png", "-m", "midb_emb", "-o", "w.pbm"])
    assert options.mode is WatermarkMode.MIDB_EMB
    assert options.output_path == "w.pbm"


def test_parse_missing_input():
    with pytest.raises(UsageError):
        parse_options(["-m", "lsb_spatial"])


def test_parse_bad_mode():
    with pytest.raises(ValueError, match="not a recognizable IWM Mode"):
        parse_options(["-i", "a.png", "-m", "nothing"])


def test_main_without_input(capsys):
    assert main([]) == 1
    assert "Usage" in capsys.readouterr().err


def test_main_round_trip(tmp_path, capsys):
    key = bytes(reversed(range(128)))
    image_path = tmp_path / "marked.png"
    _watermarked_image(image_path, key)
    out = tmp_path / "wm.pbm"

    assert main(["-i", str(image_path), "-o", str(out)]) == 0
    assert "Watermark written to file." in capsys.readouterr().out
    assert read_watermark_key(out) == key
    assert out.read_bytes().startswith(b"P4\n# Generated by iwm_checker\n32 32\n")


def test_main_ae_mode_reads_lsb(tmp_path):
    key = bytes(range(128))
    image_path = tmp_path / "marked.png"
    _watermarked_image(image_path, key)
    out = tmp_path / "ae.pbm"

    assert main(["-i", str(image_path), "-m", "ae_spatial", "-o", str(out)]) == 0
    assert read_watermark_key(out) == key


def test_main_missing_image(tmp_path, capsys):
    assert main(["-i", str(tmp_path / "absent.png")]) == 1
    assert "error" in capsys.readouterr().err