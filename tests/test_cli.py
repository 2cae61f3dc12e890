"""Tests for the command line front end."""

import numpy as np
import pytest
from click.testing import CliRunner
from PIL import Image

from text_region_mask.cli import main, parse_size


@pytest.fixture
def input_png(tmp_path, glyph_image):
    path = tmp_path / "plate.png"
    Image.fromarray(glyph_image).save(path)
    return path


def test_parse_size():
    """'WxH' strings parse to positive integer pairs."""
    assert parse_size("5x3") == (5, 3)
    assert parse_size(" 7 X 2 ") == (7, 2)
    assert parse_size("5") is None
    assert parse_size("0x3") is None
    assert parse_size("axb") is None
    assert parse_size(None) is None


def test_cli_writes_mask(tmp_path, input_png):
    """The mask is written with the padded size by default."""
    output = tmp_path / "mask.png"
    result = CliRunner().invoke(main, [str(input_png), str(output)])

    assert result.exit_code == 0, result.output
    mask = np.array(Image.open(output))
    assert mask.shape == (220, 300)
    assert set(np.unique(mask)) <= {0, 255}


def test_cli_strip_margin_and_extras(tmp_path, input_png):
    """Stripped mask, plate bounds image and region preview are all written."""
    output = tmp_path / "out" / "mask.png"
    bounds = tmp_path / "bounds.png"
    preview = tmp_path / "preview.png"
    result = CliRunner().invoke(
        main,
        [
            str(input_png),
            str(output),
            "--strip-margin",
            "--plate-bounds",
            str(bounds),
            "--debug-preview",
            str(preview),
        ],
    )

    assert result.exit_code == 0, result.output
    assert np.array(Image.open(output)).shape == (120, 200)
    assert bounds.exists()
    assert preview.exists()
    assert "Binarization Complete" in result.output


def test_cli_rejects_bad_kernel(tmp_path, input_png):
    """An unparsable erosion element aborts."""
    result = CliRunner().invoke(
        main, [str(input_png), str(tmp_path / "mask.png"), "--plate-kernel", "five"]
    )
    assert result.exit_code != 0
    assert not (tmp_path / "mask.png").exists()


def test_cli_rejects_unreadable_image(tmp_path):
    """Files that are not images abort with an input error."""
    bogus = tmp_path / "not_an_image.png"
    bogus.write_text("hello")
    result = CliRunner().invoke(main, [str(bogus), str(tmp_path / "mask.png")])
    assert result.exit_code != 0


def test_cli_margin_bounds(tmp_path, input_png):
    """Margin 0 disables padding; a negative margin is refused."""
    output = tmp_path / "mask.png"
    result = CliRunner().invoke(main, [str(input_png), str(output), "--margin", "0"])
    assert result.exit_code == 0, result.output
    assert np.array(Image.open(output)).shape == (120, 200)
    assert "Dark coverage" in result.output

    result = CliRunner().invoke(
        main, [str(input_png), str(tmp_path / "neg.png"), "--margin", "-1"]
    )
    assert result.exit_code != 0
    assert not (tmp_path / "neg.png").exists()
