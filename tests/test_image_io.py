"""
Unit tests for image_io module.

Tests file loading and saving, download naming and canvas fitting.
"""

from datetime import datetime
from pathlib import Path

import numpy as np
import pytest

from PV_Libs.ImageOpsLib.image_io import (
    compose_display,
    download_filename,
    fit_to_canvas,
    get_supported_formats,
    is_supported_format,
    load_image,
    make_preview,
    save_image,
)


class TestSupportedFormats:
    def test_lists_png(self):
        assert ".png" in get_supported_formats()

    def test_extension_check_is_case_insensitive(self):
        assert is_supported_format(Path("photo.JPG"))
        assert not is_supported_format(Path("notes.txt"))


class TestLoadImage:
    def test_loads_as_rgba(self, tmp_path, rgba_image):
        path = save_image(rgba_image, tmp_path / "input.png")

        loaded = load_image(path)

        assert loaded.shape == (40, 60, 4)
        assert np.array_equal(loaded, rgba_image)

    def test_gray_file_expands_to_rgba(self, tmp_path, gray_image):
        path = save_image(gray_image, tmp_path / "gray.png")

        loaded = load_image(path)

        assert loaded.shape == (40, 60, 4)
        assert np.array_equal(loaded[..., 1], gray_image)
        assert np.all(loaded[..., 3] == 255)

    def test_missing_file(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            load_image(tmp_path / "missing.png")

    def test_directory_rejected(self, tmp_path):
        with pytest.raises(ValueError):
            load_image(tmp_path)

    def test_corrupt_file(self, tmp_path):
        path = tmp_path / "broken.png"
        path.write_bytes(b"not an image")

        with pytest.raises(IOError):
            load_image(path)


class TestSaveImage:
    def test_missing_directory(self, tmp_path, rgba_image):
        with pytest.raises(OSError):
            save_image(rgba_image, tmp_path / "nope" / "out.png")

    def test_jpeg_drops_alpha(self, tmp_path, rgba_image):
        path = save_image(rgba_image, tmp_path / "out.jpg", save_format="jpg")

        assert path.exists()
        assert load_image(path).shape == (40, 60, 4)


class TestDownloadFilename:
    def test_timestamp_format(self):
        name = download_filename(datetime(2024, 5, 1, 13, 4, 5))

        assert name == "previz-output-2024-05-01T13-04-05.png"

    def test_defaults_to_now(self):
        name = download_filename()

        assert name.startswith("previz-output-")
        assert ":" not in name


class TestFitToCanvas:
    def test_exact_downscale(self):
        assert fit_to_canvas(1024, 768) == (0.5, 512, 384, 0, 0)

    def test_square_is_centred_horizontally(self):
        scale, width, height, offset_x, offset_y = fit_to_canvas(100, 100)

        assert scale == pytest.approx(3.84)
        assert (width, height) == (384, 384)
        assert (offset_x, offset_y) == (64, 0)

    def test_wide_is_centred_vertically(self):
        assert fit_to_canvas(1024, 384) == (0.5, 512, 192, 0, 96)

    def test_invalid_size(self):
        with pytest.raises(ValueError):
            fit_to_canvas(0, 10)


class TestComposeDisplay:
    def test_canvas_size_and_background(self, flat_image):
        canvas = compose_display(flat_image)

        assert canvas.shape == (384, 512, 3)
        assert np.all(canvas[0, 0] == 255)
        assert np.all(canvas[192, 256] == 100)

    def test_source_not_modified(self, rgba_image):
        original = rgba_image.copy()

        compose_display(rgba_image)

        assert np.array_equal(rgba_image, original)


class TestMakePreview:
    def test_downscales_long_side(self):
        image = np.zeros((500, 1000, 4), dtype=np.uint8)

        preview = make_preview(image, max_side=512)

        assert preview.shape == (256, 512, 4)

    def test_small_image_copied(self, gray_image):
        preview = make_preview(gray_image)

        assert preview is not gray_image
        assert np.array_equal(preview, gray_image)
