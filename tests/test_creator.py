import numpy as np
import pytest
from PIL import Image

from iwmark.creator import CreatorOptions, UsageError, main, parse_options
from iwmark.embed import write_watermark_key
from iwmark.extract import extract_lsb_spatial
from iwmark.modes import WatermarkMode


def _make_image(path, size=32):
    rng = np.random.default_rng(7)
    pixels = rng.integers(0, 256, size=(size, size, 3), dtype=np.uint8)
    Image.fromarray(pixels).save(path, format="PNG")
    return pixels


def test_parse_defaults():
    options = parse_options(["-i", "picture.png"])
    assert options == CreatorOptions(input_path="picture.png")
    assert options.output_path == "watermarkedImage"
    assert options.jpeg_quality == 100
    assert options.mode is WatermarkMode.LSB_SPATIAL


def test_parse_all_flags():
    options = parse_options(
        ["-i", "in.png", "-m", "pvd_spatial", "-k", "key.pbm", "-o", "out", "-q", "80"]
    )
    assert options.input_path == "in.png"
    assert options.mode is WatermarkMode.PVD_SPATIAL
    assert options.key_path == "key.pbm"
    assert options.output_path == "out"
    assert options.jpeg_quality == 80


def test_parse_missing_input():
    with pytest.raises(UsageError):
        parse_options(["-o", "out"])


def test_parse_flag_without_value():
    with pytest.raises(UsageError):
        parse_options(["-i"])


def test_parse_bad_mode():
    with pytest.raises(ValueError, match="not a recognizable IWM Mode"):
        parse_options(["-i", "in.png", "-m", "bogus"])


def test_parse_bad_quality():
    with pytest.raises(ValueError):
        parse_options(["-i", "in.png", "-q", "high"])


def test_main_without_input_prints_usage(capsys):
    assert main([]) == 1
    assert "Usage" in capsys.readouterr().err


def test_main_embeds_key_from_file(tmp_path):
    source = tmp_path / "in.png"
    _make_image(source)
    key = bytes(range(128))
    key_file = tmp_path / "key.pbm"
    write_watermark_key(key_file, key)
    base = tmp_path / "out"

    assert main(["-i", str(source), "-k", str(key_file), "-o", str(base)]) == 0
    assert (tmp_path / "out.jpg").exists()
    with Image.open(tmp_path / "out.png") as picture:
        result = np.array(picture.convert("RGB"))
    assert extract_lsb_spatial(result) == key


def test_main_generates_key(tmp_path, capsys):
    source = tmp_path / "in.png"
    original = _make_image(source)
    base = tmp_path / "gen"

    assert main(["-i", str(source), "-o", str(base)]) == 0
    assert capsys.readouterr().out.startswith("Generated a new watermark key: ")
    with Image.open(tmp_path / "gen.png") as picture:
        result = np.array(picture.convert("RGB"))
    assert result.shape == original.shape
    assert int(np.abs(result.astype(int) - original.astype(int)).max()) <= 1


def test_main_missing_image(tmp_path, capsys):
    assert main(["-i", str(tmp_path / "absent.png"), "-o", str(tmp_path / "x")]) == 1
    assert "error" in capsys.readouterr().err