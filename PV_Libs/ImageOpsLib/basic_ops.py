"""
Basic image operations.

Color/gray transforms, inversion, transpose, channel swap, gray-level
quantization, histogram equalization and thresholding. Every function
returns a new array and leaves its input untouched.

Example:
    >>> from PV_Libs.ImageOpsLib.image_io import load_image
    >>> img = load_image("photo.png")
    >>>
    >>> gray = color_to_gray(img)
    >>> poster = quantize_image(img, levels=4)
    >>> binary = threshold_image(img, thresh=127)
"""

from typing import Dict

import cv2
import numpy as np

from PV_Libs.ImageOpsLib.image_models import channels, ensure_gray, validate_image


THRESHOLD_TYPE_FLAGS: Dict[str, int] = {
    "binary": cv2.THRESH_BINARY,
    "binary inverted": cv2.THRESH_BINARY_INV,
    "truncate": cv2.THRESH_TRUNC,
    "to zero": cv2.THRESH_TOZERO,
    "to zero inverted": cv2.THRESH_TOZERO_INV,
}


def color_to_gray(src: np.ndarray) -> np.ndarray:
    """Convert an image to single-channel grayscale."""
    return ensure_gray(src)


def invert_image(src: np.ndarray) -> np.ndarray:
    """Invert every channel (bitwise NOT), alpha included."""
    validate_image(src)
    return cv2.bitwise_not(src)


def transpose_image(src: np.ndarray) -> np.ndarray:
    """Flip an image over its main diagonal."""
    validate_image(src)
    return cv2.transpose(src)


def swap_bgr_rgb(src: np.ndarray) -> np.ndarray:
    """
    Swap the red and blue channels.

    Grayscale input is returned as a copy.
    """
    validate_image(src)
    count = channels(src)

    if count == 4:
        return cv2.cvtColor(src, cv2.COLOR_RGBA2BGRA)
    if count == 3:
        return cv2.cvtColor(src, cv2.COLOR_RGB2BGR)
    return src.copy()


def quantize_image(src: np.ndarray, levels: int = 8) -> np.ndarray:
    """
    Reduce the number of gray levels.

    Args:
        src: Source image (converted to grayscale)
        levels: Number of levels, clamped to 2-256

    Returns:
        Grayscale image where each pixel is floor(v / step) * step,
        step = 256 // levels
    """
    gray = ensure_gray(src)
    levels = max(2, min(256, int(levels)))
    step = 256 // levels

    # Integer division stays in 0-255 so uint8 is safe
    return ((gray // step) * step).astype(np.uint8)


def histogram_equalization(src: np.ndarray) -> np.ndarray:
    """Equalize the grayscale histogram to stretch contrast."""
    gray = ensure_gray(src)
    return cv2.equalizeHist(gray)


def threshold_image(
    src: np.ndarray,
    thresh: float = 127,
    max_value: float = 255,
    threshold_type: str = "Binary",
) -> np.ndarray:
    """
    Threshold a grayscale copy of an image.

    Args:
        src: Source image (converted to grayscale)
        thresh: Threshold value 0-255
        max_value: Value written for pixels passing the threshold
        threshold_type: One of Binary, Binary Inverted, Truncate, To Zero,
                        To Zero Inverted (case-insensitive)

    Returns:
        Thresholded grayscale image

    Raises:
        ValueError: If threshold_type is unknown or values are out of range
    """
    flag = THRESHOLD_TYPE_FLAGS.get(str(threshold_type).strip().lower())
    if flag is None:
        valid = ", ".join(sorted(THRESHOLD_TYPE_FLAGS))
        raise ValueError(f"Unknown threshold_type: {threshold_type}. Valid types: {valid}")

    if not (0 <= thresh <= 255):
        raise ValueError(f"thresh must be 0-255, got {thresh}")

    if not (0 <= max_value <= 255):
        raise ValueError(f"max_value must be 0-255, got {max_value}")

    gray = ensure_gray(src)
    _, dst = cv2.threshold(gray, float(thresh), float(max_value), flag)
    return dst
