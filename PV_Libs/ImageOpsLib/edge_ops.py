"""
Edge and corner detection operations.

Provides gradient and second-derivative edge detectors plus a Harris
corner overlay:
- Sobel: first-derivative gradients in X and/or Y
- Prewitt: fixed 3x3 gradient kernels in X and/or Y
- Canny: multi-stage detector with hysteresis thresholds
- Laplacian: second derivative (fixed 3x3 aperture)
- LoG: Gaussian smoothing followed by the Laplacian
- Harris: corner response painted red over the source

All detectors work on a grayscale copy of the input. Gradient results are
brought back to uint8 with ``cv2.convertScaleAbs``.
"""

import cv2
import numpy as np

from PV_Libs.constants import HARRIS_MARKER_COLOR
from PV_Libs.ImageOpsLib.image_models import ensure_gray, ensure_rgba


PREWITT_KERNEL_X = np.array(
    [
        [-1, 0, 1],
        [-1, 0, 1],
        [-1, 0, 1],
    ],
    dtype=np.float32,
)

PREWITT_KERNEL_Y = np.array(
    [
        [1, 1, 1],
        [0, 0, 0],
        [-1, -1, -1],
    ],
    dtype=np.float32,
)

SOBEL_KERNEL_SIZES = (1, 3, 5, 7)


def _combine_gradients(gray, grad_x, grad_y):
    """Average both gradients, return the one present, or the gray input when neither is."""
    if grad_x is not None and grad_y is not None:
        return cv2.addWeighted(grad_x, 0.5, grad_y, 0.5, 0)
    if grad_x is not None:
        return grad_x
    if grad_y is not None:
        return grad_y
    return gray


def sobel_edge(
    src: np.ndarray,
    use_x: bool = True,
    use_y: bool = True,
    ksize: int = 3,
) -> np.ndarray:
    """
    Sobel gradient magnitude approximation.

    Args:
        src: Source image
        use_x: Compute the horizontal derivative
        use_y: Compute the vertical derivative
        ksize: Sobel aperture, one of 1, 3, 5, 7 (even sizes are bumped)

    Returns:
        Grayscale edge image. With both directions the two absolute
        gradients are averaged; with neither the grayscale input is returned.

    Raises:
        ValueError: If ksize is not a valid aperture
    """
    ksize = int(ksize)
    if ksize % 2 == 0:
        ksize += 1
    if ksize not in SOBEL_KERNEL_SIZES:
        raise ValueError(f"ksize must be one of {SOBEL_KERNEL_SIZES}, got {ksize}")

    gray = ensure_gray(src)
    grad_x = None
    grad_y = None

    if use_x:
        grad_x = cv2.convertScaleAbs(cv2.Sobel(gray, cv2.CV_16S, 1, 0, ksize=ksize))
    if use_y:
        grad_y = cv2.convertScaleAbs(cv2.Sobel(gray, cv2.CV_16S, 0, 1, ksize=ksize))

    return _combine_gradients(gray, grad_x, grad_y)


def prewitt_edge(src: np.ndarray, use_x: bool = True, use_y: bool = True) -> np.ndarray:
    """Prewitt gradients; same direction rules as sobel_edge."""
    gray = ensure_gray(src)
    grad_x = None
    grad_y = None

    if use_x:
        grad_x = cv2.convertScaleAbs(cv2.filter2D(gray, cv2.CV_16S, PREWITT_KERNEL_X))
    if use_y:
        grad_y = cv2.convertScaleAbs(cv2.filter2D(gray, cv2.CV_16S, PREWITT_KERNEL_Y))

    return _combine_gradients(gray, grad_x, grad_y)


def canny_edge(src: np.ndarray, low_thresh: float = 50, high_thresh: float = 150) -> np.ndarray:
    """
    Canny edge detection.

    Args:
        src: Source image
        low_thresh: Lower hysteresis threshold (0-255)
        high_thresh: Upper hysteresis threshold (0-255)

    Returns:
        Binary edge map (0 or 255)
    """
    if low_thresh < 0 or high_thresh < 0:
        raise ValueError(f"thresholds must be >= 0, got {low_thresh}, {high_thresh}")

    gray = ensure_gray(src)
    return cv2.Canny(gray, float(low_thresh), float(high_thresh))


def laplacian_edge(src: np.ndarray, ksize: int = 3) -> np.ndarray:
    """Absolute Laplacian of the grayscale image."""
    gray = ensure_gray(src)
    lap = cv2.Laplacian(gray, cv2.CV_16S, ksize=int(ksize))
    return cv2.convertScaleAbs(lap)


def log_edge(src: np.ndarray, ksize: int = 5) -> np.ndarray:
    """
    Laplacian of Gaussian.

    The Gaussian sigma is derived by OpenCV from the kernel size; the
    Laplacian uses its default aperture.
    """
    ksize = int(ksize)
    if ksize < 1 or ksize % 2 == 0:
        raise ValueError(f"ksize must be a positive odd number, got {ksize}")

    gray = ensure_gray(src)
    blurred = cv2.GaussianBlur(gray, (ksize, ksize), 0, 0, cv2.BORDER_DEFAULT)
    lap = cv2.Laplacian(blurred, cv2.CV_16S)
    return cv2.convertScaleAbs(lap)


def harris_corners(
    src: np.ndarray,
    block_size: int = 2,
    k: float = 0.04,
    thresh: float = 100,
) -> np.ndarray:
    """
    Mark Harris corners on an RGBA copy of the source.

    The corner response is min-max normalised to 0-255; pixels whose
    normalised response exceeds ``thresh`` are painted red. Alpha is kept.

    Args:
        src: Source image
        block_size: Neighbourhood size for the covariance matrix (>= 1)
        k: Harris free parameter (typically 0.04-0.06)
        thresh: Normalised response threshold

    Returns:
        RGBA image with corners marked
    """
    block_size = int(block_size)
    if block_size < 1:
        raise ValueError(f"block_size must be >= 1, got {block_size}")

    gray = ensure_gray(src)
    color = ensure_rgba(src)

    response = cv2.cornerHarris(gray, block_size, 3, float(k))
    normalized = cv2.normalize(response, None, 0, 255, cv2.NORM_MINMAX)

    corners = normalized > float(thresh)
    red, green, blue = HARRIS_MARKER_COLOR
    color[corners, 0] = red
    color[corners, 1] = green
    color[corners, 2] = blue

    return color
