"""
Image data models for PreViz.

This module defines the core data structures and helpers shared by every
image operation. Images are NumPy ``uint8`` arrays laid out the way OpenCV
expects them: ``(H, W)`` for single channel, ``(H, W, 3)`` for RGB and
``(H, W, 4)`` for RGBA. Images loaded from disk are always RGBA.

Classes:
    ImageType: Classification of an image (color, gray, binary)
    ImageRecord: Container for a loaded file path and its pixel data

Functions:
    validate_image: Raise if an object is not a usable image array
    channels: Number of channels of an image
    ensure_gray: Single-channel copy of an image
    detect_image_type: Classify an image as color, gray or binary
"""

from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Any, Optional

import cv2
import numpy as np

from PV_Libs.constants import BINARY_SAMPLE_COUNT


class ImageType(str, Enum):
    COLOR = "color"
    GRAY = "gray"
    BINARY = "binary"


@dataclass
class ImageRecord:
    path: Path
    image: np.ndarray

    @property
    def size_label(self) -> str:
        height, width = self.image.shape[:2]
        return f"{width}x{height}"


def validate_image(image: Any) -> np.ndarray:
    """
    Check that an object is an image array the operations can consume.

    Args:
        image: Object to validate

    Returns:
        The same array, unchanged

    Raises:
        TypeError: If image is not a NumPy array
        ValueError: If the array is empty, not uint8, or has an unsupported shape
    """
    if not isinstance(image, np.ndarray):
        raise TypeError(f"Expected numpy.ndarray image, got {type(image)}")

    if image.size == 0:
        raise ValueError("Image is empty")

    if image.dtype != np.uint8:
        raise ValueError(f"Image dtype must be uint8, got {image.dtype}")

    if image.ndim == 3 and image.shape[2] in (1, 3, 4):
        return image

    if image.ndim == 2:
        return image

    raise ValueError(f"Unsupported image shape: {image.shape}")


def channels(image: np.ndarray) -> int:
    """Return the number of channels (1 for a 2-D array)."""
    return 1 if image.ndim == 2 else int(image.shape[2])


def ensure_gray(image: np.ndarray) -> np.ndarray:
    """
    Return a single-channel copy of an image.

    Single-channel input is copied as-is. RGBA and RGB input is converted
    with OpenCV's luminance weights.

    Args:
        image: Source image (never modified)

    Returns:
        New (H, W) uint8 array
    """
    validate_image(image)
    count = channels(image)

    if count == 1:
        return image.reshape(image.shape[:2]).copy()
    if count == 4:
        return cv2.cvtColor(image, cv2.COLOR_RGBA2GRAY)
    return cv2.cvtColor(image, cv2.COLOR_RGB2GRAY)


def ensure_rgba(image: np.ndarray) -> np.ndarray:
    """Return a 4-channel RGBA copy of an image."""
    validate_image(image)
    count = channels(image)

    if count == 4:
        return image.copy()
    if count == 3:
        return cv2.cvtColor(image, cv2.COLOR_RGB2RGBA)
    return cv2.cvtColor(image.reshape(image.shape[:2]), cv2.COLOR_GRAY2RGBA)


def _is_binary(image: np.ndarray) -> bool:
    # Only the first pixels in row-major order are sampled
    flat = image.reshape(-1)
    samples = flat[:min(BINARY_SAMPLE_COUNT, flat.size)]
    return bool(np.all((samples == 0) | (samples == 255)))


def detect_image_type(image: Optional[np.ndarray]) -> Optional[ImageType]:
    """
    Classify an image.

    Args:
        image: Image array or None

    Returns:
        ImageType.BINARY for single-channel images whose sampled pixels are
        all 0 or 255, ImageType.GRAY for other single-channel images,
        ImageType.COLOR for multi-channel images, None for None
    """
    if image is None:
        return None

    if channels(image) == 1:
        return ImageType.BINARY if _is_binary(image) else ImageType.GRAY

    return ImageType.COLOR
