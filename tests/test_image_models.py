"""
Unit tests for image_models module.

Tests image validation, channel helpers and image type detection.
"""

from pathlib import Path

import numpy as np
import pytest

from PV_Libs.ImageOpsLib.image_models import (
    ImageRecord,
    ImageType,
    channels,
    detect_image_type,
    ensure_gray,
    ensure_rgba,
    validate_image,
)


class TestValidateImage:
    """Tests for validate_image function."""

    def test_accepts_supported_shapes(self, rgba_image, gray_image):
        """Should return gray, RGB and RGBA arrays unchanged."""
        rgb = rgba_image[..., :3].copy()

        assert validate_image(rgba_image) is rgba_image
        assert validate_image(gray_image) is gray_image
        assert validate_image(rgb) is rgb

    def test_rejects_non_array(self):
        """Should raise TypeError for non-ndarray input."""
        with pytest.raises(TypeError):
            validate_image([[0, 1], [2, 3]])

    def test_rejects_empty(self):
        """Should raise ValueError for an empty array."""
        with pytest.raises(ValueError):
            validate_image(np.zeros((0, 0), dtype=np.uint8))

    def test_rejects_wrong_dtype(self):
        """Should raise ValueError for non-uint8 data."""
        with pytest.raises(ValueError):
            validate_image(np.zeros((4, 4), dtype=np.float32))

    def test_rejects_two_channels(self):
        """Should raise ValueError for an unsupported channel count."""
        with pytest.raises(ValueError):
            validate_image(np.zeros((4, 4, 2), dtype=np.uint8))


class TestChannelHelpers:
    """Tests for channels, ensure_gray and ensure_rgba."""

    def test_channels(self, rgba_image, gray_image):
        assert channels(rgba_image) == 4
        assert channels(gray_image) == 1
        assert channels(np.zeros((3, 3, 1), dtype=np.uint8)) == 1

    def test_ensure_gray_copies_single_channel(self, gray_image):
        """Should return an equal but separate array."""
        result = ensure_gray(gray_image)

        assert result is not gray_image
        assert np.array_equal(result, gray_image)

    def test_ensure_gray_flattens_trailing_channel(self):
        image = np.full((5, 6, 1), 42, dtype=np.uint8)

        result = ensure_gray(image)

        assert result.shape == (5, 6)
        assert np.all(result == 42)

    def test_ensure_gray_converts_rgba(self, rgba_image):
        result = ensure_gray(rgba_image)

        assert result.shape == rgba_image.shape[:2]
        assert result.dtype == np.uint8

    def test_ensure_rgba_from_gray(self, gray_image):
        """Gray input should expand to opaque RGBA with equal color channels."""
        result = ensure_rgba(gray_image)

        assert result.shape == gray_image.shape + (4,)
        assert np.array_equal(result[..., 0], gray_image)
        assert np.array_equal(result[..., 2], gray_image)
        assert np.all(result[..., 3] == 255)

    def test_ensure_rgba_copies_rgba(self, rgba_image):
        result = ensure_rgba(rgba_image)

        assert result is not rgba_image
        assert np.array_equal(result, rgba_image)


class TestDetectImageType:
    """Tests for detect_image_type function."""

    def test_none(self):
        assert detect_image_type(None) is None

    def test_color(self, rgba_image):
        assert detect_image_type(rgba_image) == ImageType.COLOR

    def test_gray(self, gray_image):
        assert detect_image_type(gray_image) == ImageType.GRAY

    def test_binary(self, binary_image):
        assert detect_image_type(binary_image) == ImageType.BINARY

    def test_only_first_hundred_pixels_sampled(self):
        """A gray value past the first 100 pixels should not change the result."""
        image = np.zeros((20, 20), dtype=np.uint8)
        image[7, 10] = 128  # row-major index 150

        assert detect_image_type(image) == ImageType.BINARY

        image[2, 10] = 128  # row-major index 50
        assert detect_image_type(image) == ImageType.GRAY

    def test_tiny_image(self):
        """Images smaller than the sample size are fully sampled."""
        image = np.array([[0, 255], [255, 7]], dtype=np.uint8)

        assert detect_image_type(image) == ImageType.GRAY


class TestImageRecord:
    def test_size_label(self, rgba_image):
        record = ImageRecord(path=Path("photo.png"), image=rgba_image)

        assert record.size_label == "60x40"
