"""
Image file I/O and display geometry for PreViz.

Loading goes through Pillow so every supported file arrives as an RGBA
NumPy array. Saving converts the array back to a Pillow image. The display
helpers fit a full-resolution image into the fixed editor canvas while
keeping its aspect ratio.

Functions:
    get_supported_formats: List of supported file extensions
    is_supported_format: Check a path's extension
    load_image: Read a file into an RGBA array
    save_image: Write an array to disk
    download_filename: Timestamped name for a downloaded output
    fit_to_canvas: Scale and offset that centre an image on the canvas
    compose_display: Render an image onto a canvas-sized white background
    make_preview: Downscaled copy for the preview slot
"""

import logging
from datetime import datetime
from pathlib import Path
from typing import List, Optional, Tuple

import cv2
import numpy as np

from PV_Libs.constants import (
    CANVAS_BACKGROUND,
    CANVAS_HEIGHT,
    CANVAS_WIDTH,
    DEFAULT_OUTPUT_FORMAT,
    DOWNLOAD_EXTENSION,
    DOWNLOAD_FILE_PREFIX,
    PREVIEW_MAX_SIDE,
    SUPPORTED_STANDARD_IMAGES,
)
from PV_Libs.ImageOpsLib.image_models import channels, validate_image
from PV_Libs.pillow_compat import Image, UnidentifiedImageError

logger = logging.getLogger(__name__)


def get_supported_formats() -> List[str]:
    """Return the sorted list of supported image extensions."""
    return sorted(SUPPORTED_STANDARD_IMAGES)


def is_supported_format(file_path: Path) -> bool:
    """Check whether a path has a supported image extension."""
    return Path(file_path).suffix.lower() in SUPPORTED_STANDARD_IMAGES


def load_image(file_path: Path) -> np.ndarray:
    """
    Load an image file as an RGBA array.

    Args:
        file_path: Path to the image file

    Returns:
        (H, W, 4) uint8 array at full resolution

    Raises:
        FileNotFoundError: If the file does not exist
        ValueError: If the path is not a file
        IOError: If the file cannot be decoded
    """
    file_path = Path(file_path)

    if not file_path.exists():
        raise FileNotFoundError(f"Image file not found: {file_path}")

    if not file_path.is_file():
        raise ValueError(f"Path is not a file: {file_path}")

    try:
        with Image.open(file_path) as img:
            rgba = img.convert("RGBA")
            array = np.array(rgba, dtype=np.uint8)
    except (UnidentifiedImageError, OSError) as e:
        raise IOError(f"Failed to load image from {file_path}: {str(e)}")

    logger.info(f"Image loaded: {array.shape[1]}x{array.shape[0]} from {file_path.name}")
    return array


def save_image(image: np.ndarray, file_path: Path, save_format: str = DEFAULT_OUTPUT_FORMAT) -> Path:
    """
    Save an image array to disk.

    Args:
        image: Gray, RGB or RGBA uint8 array
        file_path: Destination path
        save_format: Pillow format name (PNG, JPEG, BMP, ...)

    Returns:
        The path written

    Raises:
        OSError: If the parent directory does not exist or the write fails
    """
    validate_image(image)
    file_path = Path(file_path)

    if not file_path.parent.exists():
        raise OSError(f"Output directory does not exist: {file_path.parent}")

    count = channels(image)
    pixels = image.reshape(image.shape[:2]) if count == 1 else image
    pil_image = Image.fromarray(pixels)

    save_format = save_format.upper()
    if save_format == "JPG":
        save_format = "JPEG"
    if save_format == "JPEG" and pil_image.mode == "RGBA":
        pil_image = pil_image.convert("RGB")

    pil_image.save(file_path, format=save_format)
    logger.info(f"Image saved to {file_path}")
    return file_path


def download_filename(now: Optional[datetime] = None) -> str:
    """
    Build the timestamped download filename.

    Example:
        >>> download_filename(datetime(2024, 5, 1, 13, 4, 5))
        'previz-output-2024-05-01T13-04-05.png'
    """
    now = now or datetime.now()
    timestamp = now.strftime("%Y-%m-%dT%H:%M:%S").replace(":", "-")
    return f"{DOWNLOAD_FILE_PREFIX}{timestamp}{DOWNLOAD_EXTENSION}"


def fit_to_canvas(
    width: int,
    height: int,
    canvas_width: int = CANVAS_WIDTH,
    canvas_height: int = CANVAS_HEIGHT,
) -> Tuple[float, int, int, int, int]:
    """
    Compute the aspect-preserving fit of an image inside the canvas.

    Args:
        width: Image width in pixels
        height: Image height in pixels
        canvas_width: Canvas width
        canvas_height: Canvas height

    Returns:
        (scale, scaled_width, scaled_height, offset_x, offset_y) with the
        scaled image centred on the canvas

    Raises:
        ValueError: If any dimension is not positive
    """
    if width <= 0 or height <= 0:
        raise ValueError(f"Image size must be positive, got {width}x{height}")
    if canvas_width <= 0 or canvas_height <= 0:
        raise ValueError(f"Canvas size must be positive, got {canvas_width}x{canvas_height}")

    scale = min(canvas_width / width, canvas_height / height)
    scaled_width = max(1, int(round(width * scale)))
    scaled_height = max(1, int(round(height * scale)))
    offset_x = (canvas_width - scaled_width) // 2
    offset_y = (canvas_height - scaled_height) // 2
    return scale, scaled_width, scaled_height, offset_x, offset_y


def _to_rgb(image: np.ndarray) -> np.ndarray:
    count = channels(image)
    if count == 1:
        return cv2.cvtColor(image.reshape(image.shape[:2]), cv2.COLOR_GRAY2RGB)
    if count == 4:
        return cv2.cvtColor(image, cv2.COLOR_RGBA2RGB)
    return image


def compose_display(
    image: np.ndarray,
    canvas_width: int = CANVAS_WIDTH,
    canvas_height: int = CANVAS_HEIGHT,
) -> np.ndarray:
    """
    Render an image scaled-to-fit and centred on a white canvas.

    The full-resolution image is never modified; only the returned canvas
    is sized for display.

    Returns:
        (canvas_height, canvas_width, 3) uint8 RGB array
    """
    validate_image(image)
    height, width = image.shape[:2]
    scale, scaled_width, scaled_height, offset_x, offset_y = fit_to_canvas(
        width, height, canvas_width, canvas_height
    )

    interpolation = cv2.INTER_AREA if scale < 1 else cv2.INTER_LINEAR
    scaled = cv2.resize(_to_rgb(image), (scaled_width, scaled_height), interpolation=interpolation)

    canvas = np.empty((canvas_height, canvas_width, 3), dtype=np.uint8)
    canvas[:, :] = CANVAS_BACKGROUND
    canvas[offset_y:offset_y + scaled_height, offset_x:offset_x + scaled_width] = scaled
    return canvas


def make_preview(image: np.ndarray, max_side: int = PREVIEW_MAX_SIDE) -> np.ndarray:
    """
    Downscale an image so its longer side is at most max_side.

    Images already small enough are copied unchanged.
    """
    validate_image(image)
    if max_side < 1:
        raise ValueError(f"max_side must be >= 1, got {max_side}")

    height, width = image.shape[:2]
    longest = max(width, height)
    if longest <= max_side:
        return image.copy()

    scale = max_side / longest
    size = (max(1, int(round(width * scale))), max(1, int(round(height * scale))))
    return cv2.resize(image, size, interpolation=cv2.INTER_AREA)
