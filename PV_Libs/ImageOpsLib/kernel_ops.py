"""
Kernel (neighbourhood) filters.

Box, weighted average, median, Gaussian, max and min filters. Each works
on a grayscale copy of the input and uses a square kernel of the given
size. Even sizes are bumped to the next odd number, matching how the
panel sliders step through odd values only.
"""

import cv2
import numpy as np

from PV_Libs.ImageOpsLib.image_models import ensure_gray


MAX_KERNEL_SIZE = 101


def normalize_kernel_size(ksize: int) -> int:
    """
    Return an odd kernel size within 1-101.

    Raises:
        ValueError: If ksize is below 1 or above 101 after rounding up to odd
    """
    ksize = int(ksize)
    if ksize % 2 == 0:
        ksize += 1

    if ksize < 1 or ksize > MAX_KERNEL_SIZE:
        raise ValueError(f"kernel size must be 1-{MAX_KERNEL_SIZE} and odd, got {ksize}")

    return ksize


def box_mean_filter(src: np.ndarray, ksize: int = 3) -> np.ndarray:
    """Simple averaging over a ksize x ksize window."""
    ksize = normalize_kernel_size(ksize)
    gray = ensure_gray(src)
    return cv2.blur(gray, (ksize, ksize))


def weighted_average_filter(src: np.ndarray, ksize: int = 5) -> np.ndarray:
    """Gaussian-weighted average with sigma derived from the kernel size."""
    ksize = normalize_kernel_size(ksize)
    gray = ensure_gray(src)
    return cv2.GaussianBlur(gray, (ksize, ksize), 0, 0, cv2.BORDER_DEFAULT)


def median_filter(src: np.ndarray, ksize: int = 5) -> np.ndarray:
    """Median of each ksize x ksize window."""
    ksize = normalize_kernel_size(ksize)
    gray = ensure_gray(src)
    return cv2.medianBlur(gray, ksize)


def gaussian_filter(src: np.ndarray, ksize: int = 5) -> np.ndarray:
    """Gaussian blur with sigma derived from the kernel size."""
    ksize = normalize_kernel_size(ksize)
    gray = ensure_gray(src)
    return cv2.GaussianBlur(gray, (ksize, ksize), 0, 0, cv2.BORDER_DEFAULT)


def max_filter(src: np.ndarray, ksize: int = 3) -> np.ndarray:
    """Maximum of each window (grayscale dilation with a flat kernel)."""
    ksize = normalize_kernel_size(ksize)
    gray = ensure_gray(src)
    kernel = np.ones((ksize, ksize), dtype=np.uint8)
    return cv2.dilate(gray, kernel)


def min_filter(src: np.ndarray, ksize: int = 3) -> np.ndarray:
    """Minimum of each window (grayscale erosion with a flat kernel)."""
    ksize = normalize_kernel_size(ksize)
    gray = ensure_gray(src)
    kernel = np.ones((ksize, ksize), dtype=np.uint8)
    return cv2.erode(gray, kernel)
