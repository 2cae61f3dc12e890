"""End-to-end tests for the text binarization pipeline."""

import numpy as np
import pytest

from text_region_mask.edge_map import EdgeMapBuilder
from text_region_mask.text_binarizer import TextBinarizer

MARGIN = 50


def test_edge_map_pads_and_detects(glyph_image):
    """Edge map is padded on every side and finds the glyph outline."""
    edge_map = EdgeMapBuilder().build(glyph_image)

    assert edge_map.padded.shape == (220, 300, 3)
    assert edge_map.edges.shape == (220, 300)
    assert edge_map.size == (300, 220)
    assert set(np.unique(edge_map.edges)) <= {0, 255}
    assert np.any(edge_map.edges[MARGIN + 45 : MARGIN + 75, MARGIN + 89 : MARGIN + 111])


def test_edge_map_rejects_inverted_thresholds():
    """Low threshold above high threshold is a configuration error."""
    with pytest.raises(ValueError):
        EdgeMapBuilder(canny_low=300, canny_high=100)


GLYPH_CROPS = [
    # (crop width, crop height, glyph x, glyph y, glyph width, glyph height)
    (200, 120, 90, 45, 20, 30),
    (80, 60, 35, 22, 10, 16),
    (60, 40, 25, 12, 10, 16),
]


@pytest.mark.parametrize(
    "width, height, gx, gy, gw, gh",
    GLYPH_CROPS,
    ids=[f"{c[0]}x{c[1]}" for c in GLYPH_CROPS],
)
def test_single_dark_glyph(width, height, gx, gy, gw, gh):
    """One isolated dark glyph yields one painted box covering exactly the glyph."""
    image = np.full((height, width, 3), 220, dtype=np.uint8)
    image[gy : gy + gh, gx : gx + gw] = 40
    binarizer = TextBinarizer()
    mask = binarizer.binarize(image)

    assert mask.shape == (height + 2 * MARGIN, width + 2 * MARGIN)
    assert set(np.unique(mask)) <= {0, 255}
    assert binarizer.last_stats["selected"] == 1
    assert binarizer.last_stats["painted"] == 1

    ys, xs = np.nonzero(mask == 0)
    assert len(ys) == gw * gh
    assert (xs.min(), xs.max()) == (MARGIN + gx, MARGIN + gx + gw - 1)
    assert (ys.min(), ys.max()) == (MARGIN + gy, MARGIN + gy + gh - 1)


def test_small_crop_seam_is_not_selected(capsys):
    """On a small crop the padding seam is rejected and the glyph still paints."""
    image = np.full((40, 60, 3), 220, dtype=np.uint8)
    image[12:28, 25:35] = 40
    binarizer = TextBinarizer(verbose=True)
    mask = binarizer.binarize(image, strip_margin=True)

    assert "reject (padding seam)" in capsys.readouterr().out
    assert np.count_nonzero(mask == 0) == 160
    assert np.all(mask[12:28, 25:35] == 0)


def test_strip_margin(glyph_image):
    """Stripped masks match the source size and keep the glyph in place."""
    mask = TextBinarizer().binarize(glyph_image, strip_margin=True)

    assert mask.shape == glyph_image.shape[:2]
    assert np.all(mask[45:75, 90:110] == 0)
    assert np.count_nonzero(mask == 0) == 20 * 30


def test_grayscale_input(glyph_image):
    """Single-channel sources give the same mask as their RGB form."""
    gray = glyph_image[:, :, 0].copy()
    binarizer = TextBinarizer()
    assert np.array_equal(binarizer.binarize(gray), binarizer.binarize(glyph_image))


def test_idempotent(glyph_image):
    """Two runs on the same image give bit-identical masks."""
    binarizer = TextBinarizer()
    first = binarizer.binarize(glyph_image)
    second = binarizer.binarize(glyph_image)
    assert np.array_equal(first, second)
    assert np.array_equal(first, TextBinarizer().binarize(glyph_image))


def test_input_not_modified(glyph_image):
    """The source image is read only."""
    before = glyph_image.copy()
    TextBinarizer().binarize(glyph_image)
    assert np.array_equal(glyph_image, before)


@pytest.mark.parametrize("value", [0, 220])
def test_uniform_image_gives_blank_mask(value):
    """Without text-shaped contours the mask stays background."""
    image = np.full((60, 80, 3), value, dtype=np.uint8)
    binarizer = TextBinarizer()
    mask = binarizer.binarize(image)

    assert mask.shape == (160, 180)
    assert np.all(mask == 255)
    assert binarizer.last_stats["selected"] == 0
    assert binarizer.last_stats["dark_coverage"] == 0


def test_empty_image_rejected():
    """Empty input is an error, not an empty mask."""
    with pytest.raises(ValueError):
        TextBinarizer().binarize(np.zeros((0, 0, 3), dtype=np.uint8))


def test_negative_margin_rejected():
    """A negative margin is a configuration error; zero disables padding."""
    with pytest.raises(ValueError):
        TextBinarizer(margin=-1)

    image = np.full((120, 200, 3), 220, dtype=np.uint8)
    assert TextBinarizer(margin=0).binarize(image).shape == (120, 200)


def test_dark_coverage(glyph_image):
    """Dark coverage is the share of mask pixels painted 0."""
    binarizer = TextBinarizer()
    binarizer.binarize(glyph_image)
    assert binarizer.last_stats["dark_coverage"] == pytest.approx(600 / (220 * 300) * 100)


def test_failing_region_is_skipped(glyph_image, monkeypatch):
    """A region whose estimate fails is skipped and counted."""
    binarizer = TextBinarizer()

    def broken(source_luma, region):
        raise ValueError("broken region")

    monkeypatch.setattr(binarizer.estimator, "estimate", broken)
    mask = binarizer.binarize(glyph_image)

    assert binarizer.last_stats["skipped"] == 1
    assert binarizer.last_stats["painted"] == 0
    assert np.all(mask == 255)


def test_failing_paint_is_skipped(glyph_image, monkeypatch):
    """A region that fails to paint is skipped and counted."""
    binarizer = TextBinarizer()

    def broken(target, padded_luma, box, thresholds):
        raise ValueError("broken paint")

    monkeypatch.setattr(binarizer.compositor, "_paint_into", broken)
    mask = binarizer.binarize(glyph_image)

    assert binarizer.last_stats["skipped"] == 1
    assert binarizer.last_stats["painted"] == 0
    assert np.all(mask == 255)


def test_verbose_reports_regions(glyph_image, capsys):
    """Verbose runs print contour and region diagnostics."""
    TextBinarizer(verbose=True).binarize(glyph_image)
    out = capsys.readouterr().out
    assert "Traced" in out
    assert "numChildren" in out
    assert "reject" in out


def test_preview_regions(glyph_image, tmp_path):
    """Preview draws the selected box on the edge map."""
    path = tmp_path / "preview.png"
    preview = TextBinarizer().preview_regions(glyph_image, output_path=path)

    assert preview.shape == (220, 300, 3)
    assert path.exists()
    red = (preview[:, :, 0] == 255) & (preview[:, :, 1] == 0)
    assert np.any(red)


def test_preview_reuses_last_run(glyph_image, monkeypatch):
    """Without an image the preview draws the regions of the last binarize run."""
    binarizer = TextBinarizer()
    binarizer.binarize(glyph_image)
    expected = binarizer.preview_regions(glyph_image)

    def no_rerun(image):
        raise AssertionError("pipeline ran again")

    monkeypatch.setattr(binarizer, "find_regions", no_rerun)
    assert np.array_equal(binarizer.preview_regions(), expected)


def test_preview_without_run_rejected():
    """Preview with no image and no previous run is an error."""
    with pytest.raises(ValueError):
        TextBinarizer().preview_regions()
