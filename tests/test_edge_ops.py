"""
Unit tests for edge_ops module.

Tests Sobel, Prewitt, Canny, Laplacian, LoG and Harris corners.
"""

import cv2
import numpy as np
import pytest

from PV_Libs.ImageOpsLib.edge_ops import (
    canny_edge,
    harris_corners,
    laplacian_edge,
    log_edge,
    prewitt_edge,
    sobel_edge,
)
from PV_Libs.ImageOpsLib.image_models import ensure_gray, ensure_rgba


@pytest.fixture
def step_image():
    """Left half black, right half white."""
    image = np.zeros((20, 20), dtype=np.uint8)
    image[:, 10:] = 255
    return image


class TestSobelEdge:
    def test_flat_image_has_no_edges(self, flat_image):
        assert np.all(sobel_edge(flat_image) == 0)

    def test_vertical_step_only_in_x(self, step_image):
        assert sobel_edge(step_image, use_x=True, use_y=False).max() > 0
        assert np.all(sobel_edge(step_image, use_x=False, use_y=True) == 0)

    def test_both_directions_are_averaged(self, rgba_image):
        grad_x = sobel_edge(rgba_image, use_x=True, use_y=False)
        grad_y = sobel_edge(rgba_image, use_x=False, use_y=True)

        result = sobel_edge(rgba_image)

        assert np.array_equal(result, cv2.addWeighted(grad_x, 0.5, grad_y, 0.5, 0))

    def test_no_direction_returns_gray(self, rgba_image):
        result = sobel_edge(rgba_image, use_x=False, use_y=False)

        assert np.array_equal(result, ensure_gray(rgba_image))

    def test_even_kernel_size_bumped(self, gray_image):
        assert np.array_equal(sobel_edge(gray_image, ksize=4), sobel_edge(gray_image, ksize=5))

    def test_invalid_kernel_size(self, gray_image):
        with pytest.raises(ValueError):
            sobel_edge(gray_image, ksize=9)

    def test_source_not_modified(self, rgba_image):
        original = rgba_image.copy()

        sobel_edge(rgba_image, ksize=5)

        assert np.array_equal(rgba_image, original)


class TestPrewittEdge:
    def test_vertical_step_only_in_x(self, step_image):
        result_x = prewitt_edge(step_image, use_x=True, use_y=False)

        assert result_x[:, 9:11].max() == 255
        assert np.all(prewitt_edge(step_image, use_x=False, use_y=True) == 0)

    def test_shape(self, rgba_image):
        assert prewitt_edge(rgba_image).shape == (40, 60)


class TestCannyEdge:
    def test_output_is_binary(self, binary_image):
        result = canny_edge(binary_image, 50, 150)

        assert set(np.unique(result)) <= {0, 255}
        assert result.max() == 255

    def test_zero_low_threshold_allowed(self, binary_image):
        assert canny_edge(binary_image, 0, 150).shape == binary_image.shape

    def test_negative_threshold_raises(self, binary_image):
        with pytest.raises(ValueError):
            canny_edge(binary_image, -1, 150)


class TestLaplacianEdges:
    def test_flat_laplacian(self, flat_image):
        assert np.all(laplacian_edge(flat_image) == 0)

    def test_log_detects_step(self, step_image):
        assert log_edge(step_image).max() > 0

    def test_log_even_kernel_raises(self, step_image):
        with pytest.raises(ValueError):
            log_edge(step_image, ksize=4)


class TestHarrisCorners:
    def test_returns_rgba(self, binary_image):
        result = harris_corners(binary_image)

        assert result.shape == (40, 40, 4)
        assert np.all(result[..., 3] == 255)

    def test_marks_corners_red(self, binary_image):
        result = harris_corners(binary_image, block_size=2, k=0.04, thresh=100)

        red = np.all(result[..., :3] == (255, 0, 0), axis=-1)
        assert red.any()

    def test_threshold_above_range_leaves_copy(self, rgba_image):
        """Normalised responses stay within 0-255, so nothing is painted."""
        result = harris_corners(rgba_image, thresh=1000)

        assert np.array_equal(result, ensure_rgba(rgba_image))

    def test_source_not_modified(self, rgba_image):
        original = rgba_image.copy()

        harris_corners(rgba_image, thresh=10)

        assert np.array_equal(rgba_image, original)

    def test_invalid_block_size(self, binary_image):
        with pytest.raises(ValueError):
            harris_corners(binary_image, block_size=0)
