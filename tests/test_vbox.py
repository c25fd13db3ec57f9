"""
Unit tests for VBox geometry, counting and averaging.
"""
import numpy as np
import pytest

from median_palette.bucket import colors_from_index
from median_palette.constants import HISTOGRAM_SIZE, RSHIFT
from median_palette.core_types import Axis
from median_palette.errors import InvalidArgumentError
from median_palette.histogram import Histogram
from median_palette.vbox import VBox


def brute_count(histogram, box):
    total = 0
    for index, n in histogram.to_dict().items():
        r, g, b = colors_from_index(index)
        if box.r1 <= r <= box.r2 and box.g1 <= g <= box.g2 and box.b1 <= b <= box.b2:
            total += n
    return total


@pytest.fixture
def random_histogram():
    rng = np.random.default_rng(1234)
    counts = np.zeros(HISTOGRAM_SIZE, dtype=np.int64)
    picks = rng.choice(HISTOGRAM_SIZE, size=400, replace=False)
    counts[picks] = rng.integers(1, 50, size=400)
    return Histogram(counts)


def single_bucket_histogram(r, g, b, n):
    return Histogram.from_colors({(r << RSHIFT, g << RSHIFT, b << RSHIFT): n})


class TestVolumeAndCount:
    def test_volume_is_inclusive(self, random_histogram):
        assert VBox(0, 0, 0, 0, 0, 0, random_histogram).volume() == 1
        assert VBox(0, 1, 2, 4, 5, 8, random_histogram).volume() == 2 * 3 * 4
        assert VBox(0, 31, 0, 31, 0, 31, random_histogram).volume() == 32768

    @pytest.mark.parametrize(
        "bounds",
        [
            (0, 31, 0, 31, 0, 31),  # volume > populated buckets: walk the histogram
            (3, 20, 0, 31, 7, 9),
            (4, 5, 10, 11, 12, 13),  # volume < populated buckets: walk the box
            (0, 3, 0, 3, 0, 3),
        ],
    )
    def test_both_count_strategies_agree(self, random_histogram, bounds):
        box = VBox(*bounds, random_histogram)
        assert box.count() == brute_count(random_histogram, box)

    def test_full_box_counts_everything(self, random_histogram):
        box = VBox.from_histogram(random_histogram)
        assert box.count() == random_histogram.total()

    def test_from_histogram_single_color(self):
        h = Histogram.from_mapping({26756: 120000})
        box = VBox.from_histogram(h)
        assert (box.r1, box.g1, box.b1) == (box.r2, box.g2, box.b2)
        assert box.volume() == 1
        assert box.histogram is h


class TestAvg:
    def test_single_bucket_midpoint(self):
        h = single_bucket_histogram(22, 28, 3, 5)
        assert VBox.from_histogram(h).avg() == (180, 228, 28)

    def test_weighted_by_population(self):
        h = Histogram.from_colors({(0, 0, 0): 3, (248, 0, 0): 1})
        box = VBox.from_histogram(h)
        # red midpoints 4 and 252 weighted 3:1
        assert box.avg() == (int((3 * 4 + 252) / 4), 4, 4)

    def test_empty_box_uses_geometric_centre(self):
        h = single_bucket_histogram(0, 0, 0, 1)
        box = VBox(10, 11, 0, 3, 30, 31, h)
        assert box.count() == 0
        assert box.avg() == (int(8 * 22 / 2), int(8 * 4 / 2), int(8 * 62 / 2))

    def test_empty_box_at_top_of_range_stays_in_gamut(self):
        h = single_bucket_histogram(0, 0, 0, 1)
        box = VBox(31, 31, 31, 31, 31, 31, h)
        assert all(0 <= c <= 255 for c in box.avg())

    def test_avg_in_gamut_for_random_boxes(self, random_histogram):
        rng = np.random.default_rng(99)
        for _ in range(50):
            lo = rng.integers(0, 32, size=3)
            hi = [int(rng.integers(l, 32)) for l in lo]
            box = VBox(int(lo[0]), hi[0], int(lo[1]), hi[1], int(lo[2]), hi[2], random_histogram)
            assert all(0 <= c <= 255 for c in box.avg())


class TestShape:
    def test_copy_is_independent_but_shares_histogram(self, random_histogram):
        box = VBox(0, 31, 0, 31, 0, 31, random_histogram)
        before = box.count()
        twin = box.copy()
        twin.set_bounds(Axis.RED, 0, 10)
        assert box.as_tuple() == (0, 31, 0, 31, 0, 31)
        assert box.count() == before
        assert twin.histogram is box.histogram
        assert twin.count() == brute_count(random_histogram, twin)

    def test_set_bounds_drops_cache(self, random_histogram):
        box = VBox(0, 31, 0, 31, 0, 31, random_histogram)
        assert box.volume() == 32768
        box.set_bounds(Axis.BLUE, 4, 4)
        assert box.volume() == 32 * 32
        assert box.bounds(Axis.BLUE) == (4, 4)

    def test_contains(self):
        h = single_bucket_histogram(22, 28, 3, 1)
        box = VBox(20, 22, 28, 28, 0, 5, h)
        assert box.contains((180, 228, 28))
        assert not box.contains((184, 228, 28))
        assert box.contains((21, 28, 5), shift=0)
        assert not box.contains((21, 27, 5), shift=0)

    @pytest.mark.parametrize(
        "bounds, axis",
        [
            ((0, 5, 0, 5, 0, 5), Axis.RED),
            ((0, 4, 0, 5, 0, 5), Axis.GREEN),
            ((0, 4, 0, 4, 0, 5), Axis.BLUE),
            ((0, 9, 0, 9, 0, 2), Axis.RED),
            ((0, 0, 0, 0, 0, 0), Axis.RED),
        ],
    )
    def test_longest_axis_ties_prefer_red_then_green(self, random_histogram, bounds, axis):
        assert VBox(*bounds, random_histogram).longest_axis() is axis

    @pytest.mark.parametrize(
        "bounds", [(5, 4, 0, 0, 0, 0), (0, 32, 0, 0, 0, 0), (-1, 0, 0, 0, 0, 0)]
    )
    def test_invalid_bounds(self, random_histogram, bounds):
        with pytest.raises(InvalidArgumentError):
            VBox(*bounds, random_histogram)

    def test_axis_labels(self):
        assert Axis.from_label("g") is Axis.GREEN
        assert Axis.from_label("Blue") is Axis.BLUE
        assert Axis.RED.label == "r"
        with pytest.raises(InvalidArgumentError):
            Axis.from_label("")
        with pytest.raises(InvalidArgumentError):
            Axis.from_label("x")
