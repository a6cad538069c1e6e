"""
Morphological operations.

Dilation, erosion, opening, closing and hole filling. The first four run on
a grayscale copy of the input with a structuring element chosen by shape
(Rectangle, Ellipse, Cross) and size. Hole filling thresholds the input to
binary, flood fills the background from the top-left corner, and merges
the inverted fill back into the binary image.

Example:
    >>> opened = opening_image(img, ksize=5, kernel_shape="Ellipse")
    >>> filled = hole_fill_image(img, thresh=127, connectivity=4)
"""

from typing import Dict

import cv2
import numpy as np

from PV_Libs.constants import KERNEL_SHAPE_RECT
from PV_Libs.ImageOpsLib.image_models import ensure_gray
from PV_Libs.ImageOpsLib.kernel_ops import normalize_kernel_size


KERNEL_SHAPE_FLAGS: Dict[str, int] = {
    "rectangle": cv2.MORPH_RECT,
    "ellipse": cv2.MORPH_ELLIPSE,
    "cross": cv2.MORPH_CROSS,
}

MAX_ITERATIONS = 10


def build_structuring_element(ksize: int, kernel_shape: str = KERNEL_SHAPE_RECT) -> np.ndarray:
    """
    Create a square uint8 structuring element.

    Args:
        ksize: Kernel size (odd, 1-101; even sizes are bumped)
        kernel_shape: Rectangle, Ellipse or Cross (case-insensitive)

    Raises:
        ValueError: If the shape is unknown or the size is invalid
    """
    ksize = normalize_kernel_size(ksize)
    shape_flag = KERNEL_SHAPE_FLAGS.get(str(kernel_shape).strip().lower())
    if shape_flag is None:
        valid = ", ".join(sorted(KERNEL_SHAPE_FLAGS))
        raise ValueError(f"Unknown kernel_shape: {kernel_shape}. Valid shapes: {valid}")

    if shape_flag == cv2.MORPH_RECT:
        return np.ones((ksize, ksize), dtype=np.uint8)
    return cv2.getStructuringElement(shape_flag, (ksize, ksize))


def _check_iterations(iterations: int) -> int:
    iterations = int(iterations)
    if iterations < 1 or iterations > MAX_ITERATIONS:
        raise ValueError(f"iterations must be 1-{MAX_ITERATIONS}, got {iterations}")
    return iterations


def dilate_image(
    src: np.ndarray,
    ksize: int = 5,
    kernel_shape: str = KERNEL_SHAPE_RECT,
    iterations: int = 1,
) -> np.ndarray:
    """Expand bright regions."""
    kernel = build_structuring_element(ksize, kernel_shape)
    iterations = _check_iterations(iterations)
    gray = ensure_gray(src)
    return cv2.dilate(gray, kernel, iterations=iterations)


def erode_image(
    src: np.ndarray,
    ksize: int = 5,
    kernel_shape: str = KERNEL_SHAPE_RECT,
    iterations: int = 1,
) -> np.ndarray:
    """Shrink bright regions."""
    kernel = build_structuring_element(ksize, kernel_shape)
    iterations = _check_iterations(iterations)
    gray = ensure_gray(src)
    return cv2.erode(gray, kernel, iterations=iterations)


def opening_image(
    src: np.ndarray,
    ksize: int = 5,
    kernel_shape: str = KERNEL_SHAPE_RECT,
    iterations: int = 1,
) -> np.ndarray:
    """Erosion followed by dilation; removes small bright specks."""
    kernel = build_structuring_element(ksize, kernel_shape)
    iterations = _check_iterations(iterations)
    gray = ensure_gray(src)
    return cv2.morphologyEx(gray, cv2.MORPH_OPEN, kernel, iterations=iterations)


def closing_image(
    src: np.ndarray,
    ksize: int = 5,
    kernel_shape: str = KERNEL_SHAPE_RECT,
    iterations: int = 1,
) -> np.ndarray:
    """Dilation followed by erosion; closes small dark gaps."""
    kernel = build_structuring_element(ksize, kernel_shape)
    iterations = _check_iterations(iterations)
    gray = ensure_gray(src)
    return cv2.morphologyEx(gray, cv2.MORPH_CLOSE, kernel, iterations=iterations)


def hole_fill_image(src: np.ndarray, thresh: float = 127, connectivity: int = 8) -> np.ndarray:
    """
    Fill holes inside binary objects.

    Steps:
        1. Threshold the grayscale image to binary (THRESH_BINARY, max 255)
        2. Flood fill the background from (0, 0) with 255
        3. Invert the flood-filled image, leaving only the enclosed holes
        4. OR the holes back into the binary image

    Args:
        src: Source image
        thresh: Binarisation threshold 0-255
        connectivity: Flood fill connectivity, 4 or 8

    Returns:
        Binary image with holes filled

    Raises:
        ValueError: If connectivity is not 4 or 8
    """
    connectivity = int(connectivity)
    if connectivity not in (4, 8):
        raise ValueError(f"connectivity must be 4 or 8, got {connectivity}")

    gray = ensure_gray(src)
    _, binary = cv2.threshold(gray, float(thresh), 255, cv2.THRESH_BINARY)

    flood_filled = binary.copy()
    # floodFill requires a mask two pixels larger than the image
    height, width = binary.shape[:2]
    mask = np.zeros((height + 2, width + 2), dtype=np.uint8)
    cv2.floodFill(flood_filled, mask, (0, 0), 255, flags=connectivity)

    holes = cv2.bitwise_not(flood_filled)
    return cv2.bitwise_or(binary, holes)
