"""
Operation executors.

An executor turns the options-panel parameters (keyed by control id) into
a call to the matching image operation. All executors share the signature
``executor(image, params) -> image`` so the registry can dispatch them
uniformly.

A parameter that is missing or None falls back to the operation default.
Direction checkboxes (``use-x``, ``use-y``) are on unless explicitly False.
"""

from typing import Any, Dict, Optional

import numpy as np

from PV_Libs.constants import CONNECTIVITY_4, KERNEL_SHAPE_RECT, THRESHOLD_TYPES
from PV_Libs.ImageOpsLib.basic_ops import (
    color_to_gray,
    histogram_equalization,
    invert_image,
    quantize_image,
    swap_bgr_rgb,
    threshold_image,
    transpose_image,
)
from PV_Libs.ImageOpsLib.edge_ops import (
    canny_edge,
    harris_corners,
    laplacian_edge,
    log_edge,
    prewitt_edge,
    sobel_edge,
)
from PV_Libs.ImageOpsLib.kernel_ops import (
    box_mean_filter,
    gaussian_filter,
    max_filter,
    median_filter,
    min_filter,
    weighted_average_filter,
)
from PV_Libs.ImageOpsLib.morph_ops import (
    closing_image,
    dilate_image,
    erode_image,
    hole_fill_image,
    opening_image,
)

Params = Optional[Dict[str, Any]]


def _value(params: Params, key: str, default: Any) -> Any:
    if not params:
        return default
    value = params.get(key)
    return default if value is None else value


def _int_param(params: Params, key: str, default: int) -> int:
    value = _value(params, key, default)
    try:
        return int(round(float(value)))
    except (TypeError, ValueError):
        raise ValueError(f"Parameter '{key}' must be a number, got {value!r}")


def _float_param(params: Params, key: str, default: float) -> float:
    value = _value(params, key, default)
    try:
        return float(value)
    except (TypeError, ValueError):
        raise ValueError(f"Parameter '{key}' must be a number, got {value!r}")


def _flag_param(params: Params, key: str) -> bool:
    if not params:
        return True
    return params.get(key) is not False


def _connectivity_param(params: Params, key: str = "connectivity") -> int:
    value = str(_value(params, key, "")).strip()
    return 4 if value == CONNECTIVITY_4 or value == "4" else 8


# ============================================================================
# Basic
# ============================================================================

def execute_color_to_gray(image: np.ndarray, params: Params = None) -> np.ndarray:
    return color_to_gray(image)


def execute_invert(image: np.ndarray, params: Params = None) -> np.ndarray:
    return invert_image(image)


def execute_transpose(image: np.ndarray, params: Params = None) -> np.ndarray:
    return transpose_image(image)


def execute_bgr_rgb(image: np.ndarray, params: Params = None) -> np.ndarray:
    return swap_bgr_rgb(image)


def execute_quantize(image: np.ndarray, params: Params = None) -> np.ndarray:
    return quantize_image(image, _int_param(params, "levels", 8))


def execute_hist_eq(image: np.ndarray, params: Params = None) -> np.ndarray:
    return histogram_equalization(image)


def execute_threshold(image: np.ndarray, params: Params = None) -> np.ndarray:
    return threshold_image(
        image,
        thresh=_float_param(params, "threshold-value", 127),
        max_value=_float_param(params, "max-value", 255),
        threshold_type=str(_value(params, "threshold-type", THRESHOLD_TYPES[0])),
    )


# ============================================================================
# Edge
# ============================================================================

def execute_sobel(image: np.ndarray, params: Params = None) -> np.ndarray:
    return sobel_edge(
        image,
        use_x=_flag_param(params, "use-x"),
        use_y=_flag_param(params, "use-y"),
        ksize=_int_param(params, "kernel-size", 3),
    )


def execute_prewitt(image: np.ndarray, params: Params = None) -> np.ndarray:
    return prewitt_edge(
        image,
        use_x=_flag_param(params, "use-x"),
        use_y=_flag_param(params, "use-y"),
    )


def execute_canny(image: np.ndarray, params: Params = None) -> np.ndarray:
    return canny_edge(
        image,
        _float_param(params, "low-threshold", 50),
        _float_param(params, "high-threshold", 150),
    )


def execute_laplace(image: np.ndarray, params: Params = None) -> np.ndarray:
    return laplacian_edge(image, 3)


def execute_log(image: np.ndarray, params: Params = None) -> np.ndarray:
    return log_edge(image, 5)


def execute_harris(image: np.ndarray, params: Params = None) -> np.ndarray:
    return harris_corners(
        image,
        block_size=_int_param(params, "block-size", 2),
        k=_float_param(params, "k-param", 0.04),
        thresh=_float_param(params, "threshold", 100),
    )


# ============================================================================
# Kernel filters
# ============================================================================

def execute_box_blur(image: np.ndarray, params: Params = None) -> np.ndarray:
    return box_mean_filter(image, _int_param(params, "kernel-size", 3))


def execute_gaussian(image: np.ndarray, params: Params = None) -> np.ndarray:
    return gaussian_filter(image, _int_param(params, "kernel-size", 5))


def execute_median(image: np.ndarray, params: Params = None) -> np.ndarray:
    return median_filter(image, _int_param(params, "kernel-size", 5))


def execute_mean(image: np.ndarray, params: Params = None) -> np.ndarray:
    return weighted_average_filter(image, _int_param(params, "kernel-size", 5))


def execute_max(image: np.ndarray, params: Params = None) -> np.ndarray:
    return max_filter(image, _int_param(params, "kernel-size", 3))


def execute_min(image: np.ndarray, params: Params = None) -> np.ndarray:
    return min_filter(image, _int_param(params, "kernel-size", 3))


# ============================================================================
# Morphology
# ============================================================================

def _morph_args(params: Params) -> Dict[str, Any]:
    return {
        "ksize": _int_param(params, "kernel-size", 5),
        "kernel_shape": str(_value(params, "kernel-shape", KERNEL_SHAPE_RECT)),
        "iterations": _int_param(params, "iterations", 1),
    }


def execute_dilate(image: np.ndarray, params: Params = None) -> np.ndarray:
    return dilate_image(image, **_morph_args(params))


def execute_erode(image: np.ndarray, params: Params = None) -> np.ndarray:
    return erode_image(image, **_morph_args(params))


def execute_open(image: np.ndarray, params: Params = None) -> np.ndarray:
    return opening_image(image, **_morph_args(params))


def execute_close(image: np.ndarray, params: Params = None) -> np.ndarray:
    return closing_image(image, **_morph_args(params))


def execute_hole_fill(image: np.ndarray, params: Params = None) -> np.ndarray:
    return hole_fill_image(
        image,
        thresh=_float_param(params, "threshold", 127),
        connectivity=_connectivity_param(params),
    )
