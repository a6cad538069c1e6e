"""
Histogram calculation and rendering.

Functions:
    calculate_histogram: 256-bin gray-level histogram of an image
    render_histogram: Draw a histogram as an RGB bar chart image
    histogram_comparison: Before/after pair of rendered histograms
"""

from typing import Tuple

import cv2
import numpy as np

from PV_Libs.constants import (
    HISTOGRAM_BACKGROUND,
    HISTOGRAM_BAR_COLOR,
    HISTOGRAM_BINS,
    HISTOGRAM_COMPARISON_HEIGHT,
    HISTOGRAM_HEIGHT,
    HISTOGRAM_WIDTH,
)
from PV_Libs.ImageOpsLib.image_models import ensure_gray


def calculate_histogram(image: np.ndarray) -> np.ndarray:
    """
    Count gray levels.

    Args:
        image: Any image; color input is converted to grayscale first

    Returns:
        int64 array of 256 bin counts summing to H * W
    """
    gray = ensure_gray(image)
    hist = cv2.calcHist([gray], [0], None, [HISTOGRAM_BINS], [0, 256])
    return hist.reshape(-1).astype(np.int64)


def render_histogram(
    hist: np.ndarray,
    width: int = HISTOGRAM_WIDTH,
    height: int = HISTOGRAM_HEIGHT,
) -> np.ndarray:
    """
    Draw a histogram as vertical bars on a white background.

    Bar heights are scaled so the tallest bin fills the full height.

    Args:
        hist: Bin counts (any length, usually 256)
        width: Output width in pixels
        height: Output height in pixels

    Returns:
        (height, width, 3) uint8 RGB image
    """
    if width < 1 or height < 1:
        raise ValueError(f"width and height must be >= 1, got {width}x{height}")

    canvas = np.empty((height, width, 3), dtype=np.uint8)
    canvas[:, :] = HISTOGRAM_BACKGROUND

    counts = np.asarray(hist, dtype=np.float64).reshape(-1)
    max_val = counts.max() if counts.size else 0.0
    if max_val <= 0:
        return canvas

    bar_width = width / counts.size
    for index, value in enumerate(counts):
        bar_height = int(round((value / max_val) * height))
        if bar_height <= 0:
            continue
        x0 = int(index * bar_width)
        x1 = max(x0 + 1, int((index + 1) * bar_width))
        canvas[height - bar_height:, x0:x1] = HISTOGRAM_BAR_COLOR

    return canvas


def histogram_comparison(before: np.ndarray, after: np.ndarray) -> Tuple[np.ndarray, np.ndarray]:
    """Render the histograms of two images at the comparison size."""
    before_chart = render_histogram(
        calculate_histogram(before), HISTOGRAM_WIDTH, HISTOGRAM_COMPARISON_HEIGHT
    )
    after_chart = render_histogram(
        calculate_histogram(after), HISTOGRAM_WIDTH, HISTOGRAM_COMPARISON_HEIGHT
    )
    return before_chart, after_chart
