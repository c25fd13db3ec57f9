"""
Unit tests for histogram construction and the Histogram value.
"""
import numpy as np
import pytest

from conftest import rgba_array
from median_palette.bucket import color_index
from median_palette.constants import HISTOGRAM_SIZE
from median_palette.core_types import Area, PixelColor
from median_palette.errors import BlankImageError, InvalidArgumentError
from median_palette.histogram import Histogram, build_histogram
from median_palette.image_io import ArrayPixelSource


class ListPixelSource:
    """Plain PixelSource without the vectorised fast path."""

    def __init__(self, rows):
        self.rows = rows
        self.reads = 0

    def width(self):
        return len(self.rows[0])

    def height(self):
        return len(self.rows)

    def pixel_color_at(self, x, y):
        self.reads += 1
        return self.rows[y][x]


SAMPLE = {29510: 2, 16496: 3, 28589: 1, 27811: 1, 30234: 1}


class TestHistogramValue:
    def test_from_mapping(self):
        h = Histogram.from_mapping(SAMPLE)
        assert len(h) == 5
        assert h.total() == 8
        assert h[16496] == 3
        assert h[0] == 0
        assert h.to_dict() == SAMPLE
        assert sorted(h) == sorted(SAMPLE)

    def test_bounds(self):
        h = Histogram.from_mapping(SAMPLE)
        assert h.bounds() == ((16, 29), (3, 29), (3, 26))

    def test_counts_are_read_only(self):
        h = Histogram.from_mapping(SAMPLE)
        with pytest.raises(ValueError):
            h.counts[0] = 5

    def test_source_array_is_copied(self):
        arr = np.zeros(HISTOGRAM_SIZE, dtype=np.int64)
        arr[3] = 4
        h = Histogram(arr)
        arr[3] = 0
        assert h[3] == 4

    def test_from_colors_merges_same_bucket(self):
        h = Histogram.from_colors({(255, 0, 0): 1, (250, 1, 2): 1, (0, 0, 255): 4})
        assert len(h) == 2
        assert h[color_index(255, 0, 0)] == 2

    def test_cube_view_matches_flat_index(self):
        h = Histogram.from_mapping({color_index(80, 160, 240): 7})
        assert h.cube[10, 20, 30] == 7

    def test_rejects_bad_input(self):
        with pytest.raises(InvalidArgumentError):
            Histogram(np.zeros(10))
        bad = np.zeros(HISTOGRAM_SIZE, dtype=np.int64)
        bad[0] = -1
        with pytest.raises(InvalidArgumentError):
            Histogram(bad)
        with pytest.raises(InvalidArgumentError):
            Histogram.from_mapping({HISTOGRAM_SIZE: 1})

    def test_empty(self):
        h = Histogram(np.zeros(HISTOGRAM_SIZE))
        assert h.is_empty()
        assert len(h) == 0
        with pytest.raises(InvalidArgumentError):
            h.bounds()


class TestBuildHistogram:
    def test_white_pixel_is_skipped(self, rgbw_rgba):
        h, useful = build_histogram(ArrayPixelSource(rgbw_rgba), quality=1)
        assert useful == 3
        assert len(h) == 3
        assert h[color_index(255, 255, 255)] == 0
        for rgb in [(255, 0, 0), (0, 255, 0), (0, 0, 255)]:
            assert h[color_index(*rgb)] == 1

    def test_quality_stride_wraps_rows(self):
        rgb = np.full((2, 3, 3), 255, dtype=np.uint8)
        # offsets 0, 2, 4 -> (0,0), (2,0), (1,1)
        rgb[0, 0] = (10, 10, 10)
        rgb[0, 2] = (100, 10, 10)
        rgb[1, 1] = (10, 100, 10)
        rgb[0, 1] = (10, 10, 100)  # never sampled
        h, useful = build_histogram(ArrayPixelSource(rgba_array(rgb)), quality=2)
        assert useful == 3
        assert h[color_index(10, 10, 100)] == 0
        assert h[color_index(100, 10, 10)] == 1

    def test_alpha_threshold(self):
        rgb = np.zeros((1, 3, 3), dtype=np.uint8)
        rgb[...] = (40, 80, 120)
        alpha = np.array([[255, 130, 128]], dtype=np.uint8)
        # 0..127 scale: 0, 62 (kept), 63 (skipped)
        _h, useful = build_histogram(ArrayPixelSource(rgba_array(rgb, alpha)), quality=1)
        assert useful == 2

    def test_white_threshold_needs_all_channels(self):
        rgb = np.array([[[251, 251, 251], [250, 251, 251]]], dtype=np.uint8)
        _h, useful = build_histogram(ArrayPixelSource(rgba_array(rgb)), quality=1)
        assert useful == 1

    @pytest.mark.parametrize("fixture", ["white_rgba", "transparent_rgba"])
    def test_blank_image_raises(self, request, fixture):
        source = ArrayPixelSource(request.getfixturevalue(fixture))
        with pytest.raises(BlankImageError):
            build_histogram(source, quality=1)

    def test_quality_must_be_positive(self, rgbw_rgba):
        with pytest.raises(InvalidArgumentError):
            build_histogram(ArrayPixelSource(rgbw_rgba), quality=0)

    def test_area_restricts_sampling(self, halves_rgba):
        h, useful = build_histogram(
            ArrayPixelSource(halves_rgba), quality=1, area=Area(0, 0, 16, 16)
        )
        assert useful == 256
        assert len(h) == 1
        assert h[color_index(220, 20, 20)] == 256

    def test_area_defaults_to_remaining_extent(self, halves_rgba):
        _h, useful = build_histogram(
            ArrayPixelSource(halves_rgba), quality=1, area={"x": 16}
        )
        assert useful == 16 * 16

    def test_area_out_of_bounds(self, halves_rgba):
        source = ListPixelSource([[PixelColor(0, 0, 0)] * 4] * 4)
        with pytest.raises(InvalidArgumentError, match="out of image bounds"):
            build_histogram(source, quality=1, area=(2, 2, 3, 3))
        assert source.reads == 0
        with pytest.raises(InvalidArgumentError):
            build_histogram(ArrayPixelSource(halves_rgba), area=Area(30, 0, 4, 4))

    def test_generic_source_matches_array_source(self, gradient_rgba):
        array_source = ArrayPixelSource(gradient_rgba)
        rows = [
            [array_source.pixel_color_at(x, y) for x in range(array_source.width())]
            for y in range(array_source.height())
        ]
        slow = ListPixelSource(rows)
        h1, n1 = build_histogram(array_source, quality=7)
        h2, n2 = build_histogram(slow, quality=7)
        assert n1 == n2
        assert h1 == h2
        assert slow.reads == len(range(0, 64 * 64, 7))
