"""
Unit tests for histogram module.
"""

import numpy as np
import pytest

from PV_Libs.ImageOpsLib.histogram import (
    calculate_histogram,
    histogram_comparison,
    render_histogram,
)

NAVY = (0, 0, 128)
WHITE = (255, 255, 255)


class TestCalculateHistogram:
    def test_counts_every_pixel(self, rgba_image):
        hist = calculate_histogram(rgba_image)

        assert hist.shape == (256,)
        assert hist.sum() == 40 * 60

    def test_constant_image(self, flat_image):
        hist = calculate_histogram(flat_image)

        assert hist[100] == flat_image.size
        assert np.count_nonzero(hist) == 1


class TestRenderHistogram:
    def test_default_size(self):
        chart = render_histogram(np.ones(256))

        assert chart.shape == (100, 256, 3)
        assert chart.dtype == np.uint8

    def test_empty_histogram_is_blank(self):
        chart = render_histogram(np.zeros(256))

        assert np.all(chart == 255)

    def test_single_bin_fills_its_column(self):
        hist = np.zeros(256)
        hist[10] = 5

        chart = render_histogram(hist)

        assert np.all(chart[:, 10] == NAVY)
        assert np.all(chart[:, 11] == WHITE)

    def test_bars_scale_to_max(self):
        hist = np.zeros(256)
        hist[0] = 10
        hist[1] = 5

        chart = render_histogram(hist, height=100)

        bar_height = np.count_nonzero(np.all(chart[:, 1] == NAVY, axis=-1))
        assert bar_height == 50

    def test_invalid_size(self):
        with pytest.raises(ValueError):
            render_histogram(np.ones(256), width=0)


class TestHistogramComparison:
    def test_pair_of_charts(self, gray_image, flat_image):
        before, after = histogram_comparison(gray_image, flat_image)

        assert before.shape == (80, 256, 3)
        assert after.shape == (80, 256, 3)
        assert np.all(after[:, 100] == NAVY)
