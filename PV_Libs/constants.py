"""
Constants and configuration values for PreViz.

This module centralizes all constant values, magic numbers, and
configuration settings used throughout the application.
"""

import os

# Logging
LOG_LEVEL_ENV_VAR = "PREVIZ_LOG_LEVEL"
DEFAULT_LOG_LEVEL = "INFO"
LOG_FORMAT = "[%(name)s] %(levelname)s: %(message)s"

# Display canvases (input and output share the same size)
CANVAS_WIDTH = 512
CANVAS_HEIGHT = 384
CANVAS_BACKGROUND = (255, 255, 255)
PLACEHOLDER_BACKGROUND = (240, 240, 240)
PLACEHOLDER_TEXT_COLOR = (153, 153, 153)

# Preview slot
PREVIEW_MAX_SIDE = 512

# Binary detection
BINARY_SAMPLE_COUNT = 100

# Histogram rendering
HISTOGRAM_BINS = 256
HISTOGRAM_WIDTH = 256
HISTOGRAM_HEIGHT = 100
HISTOGRAM_COMPARISON_HEIGHT = 80
HISTOGRAM_BAR_COLOR = (0, 0, 128)
HISTOGRAM_BACKGROUND = (255, 255, 255)

# Harris corner marker (R, G, B)
HARRIS_MARKER_COLOR = (255, 0, 0)

# Download naming
DOWNLOAD_FILE_PREFIX = "previz-output-"
DEFAULT_OUTPUT_FORMAT = "PNG"
DOWNLOAD_EXTENSION = ".png"

# Operation categories
CATEGORY_BASIC = "basic"
CATEGORY_EDGE = "edge"
CATEGORY_KERNEL = "kernel"
CATEGORY_MORPH = "morph"
CATEGORY_NEIGHBOUR = "neighbour"
CATEGORY_TEXTURE = "texture"

# Kernel shapes and connectivity options shown in the panel
KERNEL_SHAPE_RECT = "Rectangle"
KERNEL_SHAPE_ELLIPSE = "Ellipse"
KERNEL_SHAPE_CROSS = "Cross"
KERNEL_SHAPES = [KERNEL_SHAPE_RECT, KERNEL_SHAPE_ELLIPSE, KERNEL_SHAPE_CROSS]
CONNECTIVITY_4 = "4-connected"
CONNECTIVITY_8 = "8-connected"
CONNECTIVITY_OPTIONS = [CONNECTIVITY_4, CONNECTIVITY_8]

# Threshold types shown in the panel
THRESHOLD_TYPES = ["Binary", "Binary Inverted", "Truncate", "To Zero", "To Zero Inverted"]

# Supported file formats
SUPPORTED_STANDARD_IMAGES = {".png", ".jpg", ".jpeg", ".bmp", ".gif", ".tiff", ".webp"}

# UI constants
DEFAULT_WINDOW_WIDTH = 1400
DEFAULT_WINDOW_HEIGHT = 850
OPTIONS_PANEL_WIDTH = 320


def get_log_level() -> str:
    """Return the configured log level name (PREVIZ_LOG_LEVEL, default INFO)."""
    return os.getenv(LOG_LEVEL_ENV_VAR, DEFAULT_LOG_LEVEL).strip().upper() or DEFAULT_LOG_LEVEL
