"""
ImageOpsLib - OpenCV image operations

This module provides the pixel operations, image models, histogram
helpers and file I/O for the PreViz editor.
"""

from PV_Libs.ImageOpsLib.image_models import (
    ImageRecord,
    ImageType,
    channels,
    detect_image_type,
    ensure_gray,
    ensure_rgba,
    validate_image,
)
from PV_Libs.ImageOpsLib.basic_ops import (
    color_to_gray,
    invert_image,
    transpose_image,
    swap_bgr_rgb,
    quantize_image,
    histogram_equalization,
    threshold_image,
)
from PV_Libs.ImageOpsLib.edge_ops import (
    sobel_edge,
    prewitt_edge,
    canny_edge,
    laplacian_edge,
    log_edge,
    harris_corners,
)
from PV_Libs.ImageOpsLib.kernel_ops import (
    box_mean_filter,
    weighted_average_filter,
    median_filter,
    gaussian_filter,
    max_filter,
    min_filter,
)
from PV_Libs.ImageOpsLib.morph_ops import (
    dilate_image,
    erode_image,
    opening_image,
    closing_image,
    hole_fill_image,
)
from PV_Libs.ImageOpsLib.histogram import (
    calculate_histogram,
    render_histogram,
    histogram_comparison,
)
from PV_Libs.ImageOpsLib.image_io import (
    load_image,
    save_image,
    download_filename,
    fit_to_canvas,
    compose_display,
    make_preview,
)

__all__ = [
    "ImageRecord",
    "ImageType",
    "channels",
    "detect_image_type",
    "ensure_gray",
    "ensure_rgba",
    "validate_image",
    "color_to_gray",
    "invert_image",
    "transpose_image",
    "swap_bgr_rgb",
    "quantize_image",
    "histogram_equalization",
    "threshold_image",
    "sobel_edge",
    "prewitt_edge",
    "canny_edge",
    "laplacian_edge",
    "log_edge",
    "harris_corners",
    "box_mean_filter",
    "weighted_average_filter",
    "median_filter",
    "gaussian_filter",
    "max_filter",
    "min_filter",
    "dilate_image",
    "erode_image",
    "opening_image",
    "closing_image",
    "hole_fill_image",
    "calculate_histogram",
    "render_histogram",
    "histogram_comparison",
    "load_image",
    "save_image",
    "download_filename",
    "fit_to_canvas",
    "compose_display",
    "make_preview",
]
