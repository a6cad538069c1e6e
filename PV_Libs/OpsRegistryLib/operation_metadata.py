"""
Operation metadata for the options panel.

Each operation the editor offers has a title, a description and a list of
controls. The options panel builds its widgets from this table, and the
values it reads back are keyed by control id (``kernel-size``,
``use-x``, ``low-threshold``...). Those ids are what the operation
executors consume.

Classes:
    ControlSpec: One panel control (slider, select, checkbox, ...)
    OperationMetadata: Title, description, controls, warnings and extras

Functions:
    get_operation_metadata: Look up metadata with a generic fallback
    has_operation_metadata: Check whether an operation has a table entry
    list_operation_names: All operations in the table
    default_control_values: Parameter dict the panel yields before edits
"""

from dataclasses import asdict, dataclass, field
from typing import Any, Dict, List, Optional

from PV_Libs.constants import (
    CONNECTIVITY_8,
    CONNECTIVITY_OPTIONS,
    KERNEL_SHAPE_RECT,
    KERNEL_SHAPES,
    THRESHOLD_TYPES,
)


CONTROL_TYPES = ("slider", "select", "checkbox", "checkboxgroup", "color", "info")
EXTRA_VIEWS = ("histogram", "histogram-comparison", "metrics-output")


@dataclass
class ControlSpec:
    """A single control in the options panel.

    Attributes:
        type: One of slider, select, checkbox, checkboxgroup, color, info
        id: Parameter key produced by the control (empty for info/checkboxgroup)
        label: Text shown next to the control
        min: Slider minimum
        max: Slider maximum
        step: Slider step
        value: Initial slider value, selected option or color
        checked: Initial checkbox state
        options: Select options (strings) or checkbox-group members
        hint: Small hint under a slider
        text: Body of an info box
    """
    type: str
    id: str = ""
    label: str = ""
    min: Optional[float] = None
    max: Optional[float] = None
    step: Optional[float] = None
    value: Any = None
    checked: bool = False
    options: List[Any] = field(default_factory=list)
    hint: str = ""
    text: str = ""

    def __post_init__(self):
        if self.type not in CONTROL_TYPES:
            raise ValueError(f"Unsupported control type: {self.type}")

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary."""
        return asdict(self)


@dataclass
class OperationMetadata:
    """Panel description of one operation."""
    title: str
    description: str
    controls: List[ControlSpec] = field(default_factory=list)
    warnings: List[str] = field(default_factory=list)
    extras: List[str] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary."""
        return {
            "title": self.title,
            "description": self.description,
            "controls": [control.to_dict() for control in self.controls],
            "warnings": list(self.warnings),
            "extras": list(self.extras),
        }

    def control_ids(self) -> List[str]:
        """Ids of every value-producing control, checkbox-group members included."""
        ids = []
        for control in self.controls:
            if control.type == "checkboxgroup":
                ids.extend(option.id for option in control.options)
            elif control.id:
                ids.append(control.id)
        return ids


def _slider(control_id: str, label: str, min_value: float, max_value: float,
            step: float, value: float, hint: str = "") -> ControlSpec:
    return ControlSpec(type="slider", id=control_id, label=label, min=min_value,
                       max=max_value, step=step, value=value, hint=hint)


def _select(control_id: str, label: str, options: List[str], value: str) -> ControlSpec:
    return ControlSpec(type="select", id=control_id, label=label, options=list(options), value=value)


def _checkbox(control_id: str, label: str, checked: bool) -> ControlSpec:
    return ControlSpec(type="checkbox", id=control_id, label=label, checked=checked)


def _info(text: str) -> ControlSpec:
    return ControlSpec(type="info", text=text)


def _odd_kernel_slider(min_value: int = 3, max_value: int = 21, value: int = 5) -> ControlSpec:
    return _slider("kernel-size", "Kernel Size", min_value, max_value, 2, value, hint="Must be odd")


def _morph_controls() -> List[ControlSpec]:
    return [
        _select("kernel-shape", "Kernel Shape", KERNEL_SHAPES, KERNEL_SHAPE_RECT),
        _odd_kernel_slider(min_value=1),
        _slider("iterations", "Iterations", 1, 10, 1, 1),
    ]


def _build_metadata_table() -> Dict[str, OperationMetadata]:
    return {
        # Kernel filters
        "blur": OperationMetadata(
            "BOX BLUR", "Simple averaging filter", [_odd_kernel_slider()]
        ),
        "gaussian": OperationMetadata(
            "GAUSSIAN BLUR", "Weighted blur using Gaussian kernel", [_odd_kernel_slider()]
        ),
        "median": OperationMetadata(
            "MEDIAN FILTER", "Non-linear noise reduction filter", [_odd_kernel_slider()]
        ),
        "mean": OperationMetadata(
            "MEAN FILTER", "Average intensity in kernel area", [_odd_kernel_slider()]
        ),
        "max": OperationMetadata(
            "MAX FILTER", "Maximum intensity in kernel area", [_odd_kernel_slider()]
        ),
        "min": OperationMetadata(
            "MIN FILTER", "Minimum intensity in kernel area", [_odd_kernel_slider()]
        ),
        # Edge detection
        "sobel": OperationMetadata(
            "SOBEL EDGE DETECTION",
            "Gradient-based edge detector (choose directions + kernel)",
            [
                _checkbox("use-x", "Detect X direction", True),
                _checkbox("use-y", "Detect Y direction", True),
                _slider("kernel-size", "Kernel size (odd)", 1, 7, 2, 3, hint="3 or 5 recommended"),
            ],
        ),
        "prewitt": OperationMetadata(
            "PREWITT EDGE DETECTION",
            "Simple gradient filter (prewitt)",
            [
                _checkbox("use-x", "Detect X direction", True),
                _checkbox("use-y", "Detect Y direction", True),
            ],
        ),
        "canny": OperationMetadata(
            "CANNY EDGE DETECTION",
            "Multi-stage edge detector with hysteresis",
            [
                _slider("low-threshold", "Lower Threshold", 0, 255, 1, 50),
                _slider("high-threshold", "Upper Threshold", 0, 255, 1, 150),
            ],
        ),
        "laplace": OperationMetadata(
            "LAPLACIAN",
            "Laplacian operator (fixed ksize = 3)",
            [_info("Kernel size fixed to 3 in current implementation")],
        ),
        "log": OperationMetadata(
            "LoG (Laplacian of Gaussian)",
            "LoG (fixed ksize = 5)",
            [_info("Kernel size fixed to 5 in current implementation")],
        ),
        "harris": OperationMetadata(
            "HARRIS CORNER DETECTION",
            "Corner detector (block size, Harris k, threshold)",
            [
                _slider("block-size", "Block size", 1, 7, 1, 2),
                _slider("k-param", "Harris k (0.01 - 0.2)", 0.01, 0.2, 0.01, 0.04),
                _slider("threshold", "Corner threshold", 1, 500, 1, 100),
            ],
        ),
        # Morphology
        "dilate": OperationMetadata(
            "DILATION", "Expand white regions", _morph_controls(), warnings=["Requires binary image"]
        ),
        "erode": OperationMetadata(
            "EROSION", "Shrink white regions", _morph_controls(), warnings=["Requires binary image"]
        ),
        "open": OperationMetadata(
            "OPENING", "Erosion followed by dilation", _morph_controls(),
            warnings=["Requires binary image"],
        ),
        "close": OperationMetadata(
            "CLOSING", "Dilation followed by erosion", _morph_controls(),
            warnings=["Requires binary image"],
        ),
        "holefill": OperationMetadata(
            "HOLE FILLING",
            "Fill holes in binary objects",
            [
                _slider("threshold", "Binarize Threshold", 0, 255, 1, 127),
                _select("connectivity", "Connectivity", CONNECTIVITY_OPTIONS, CONNECTIVITY_8),
            ],
            warnings=["Requires binary image"],
        ),
        # Neighbourhood (display only)
        "neighbours4": OperationMetadata(
            "4-NEIGHBOURHOOD",
            "Show 4-connected neighbours",
            [_info("Click on image pixel to select"), _checkbox("show-overlay", "Show overlay", True)],
        ),
        "neighbours8": OperationMetadata(
            "8-NEIGHBOURHOOD",
            "Show 8-connected neighbours",
            [_info("Click on image pixel to select"), _checkbox("show-overlay", "Show overlay", True)],
        ),
        "connectivity": OperationMetadata(
            "CONNECTIVITY ANALYSIS",
            "Analyze pixel connectivity",
            [
                _select("connectivity", "Connectivity", CONNECTIVITY_OPTIONS, CONNECTIVITY_8),
                _info("Click on image pixel to analyze connected region"),
            ],
        ),
        "components": OperationMetadata(
            "CONNECTED COMPONENTS",
            "Label connected regions",
            [
                _select("connectivity", "Connectivity", CONNECTIVITY_OPTIONS, CONNECTIVITY_8),
                _checkbox("colorize", "Colorize components", True),
            ],
            warnings=["Requires binary image"],
        ),
        # Texture (display only)
        "glcm": OperationMetadata(
            "GLCM TEXTURE ANALYSIS",
            "Gray-Level Co-occurrence Matrix features",
            [
                _slider("distance", "Distance", 1, 10, 1, 1, hint="Pixel offset"),
                _select(
                    "angle",
                    "Angle",
                    ["0° (Horizontal)", "45° (Diagonal)", "90° (Vertical)", "135° (Anti-diagonal)"],
                    "0° (Horizontal)",
                ),
                _slider("levels", "Quantization Levels", 4, 32, 1, 8, hint="Gray levels"),
                _checkbox("show-matrix", "Show GLCM matrix", False),
                ControlSpec(
                    type="checkboxgroup",
                    label="Features to compute:",
                    options=[
                        _checkbox("feat-contrast", "Contrast", True),
                        _checkbox("feat-correlation", "Correlation", True),
                        _checkbox("feat-energy", "Energy", True),
                        _checkbox("feat-homogeneity", "Homogeneity", True),
                    ],
                ),
                _checkbox("use-roi", "Use ROI selector", False),
            ],
            extras=["metrics-output"],
        ),
        "moments": OperationMetadata(
            "IMAGE MOMENTS",
            "Compute spatial moments and centroids",
            [
                _checkbox("show-centroid", "Show centroid overlay", True),
                _checkbox("use-roi", "Use ROI selector", False),
            ],
            warnings=["Works best on binary images"],
            extras=["metrics-output"],
        ),
        # Basic
        "threshold": OperationMetadata(
            "THRESHOLD",
            "Convert to binary image",
            [
                _slider("threshold-value", "Threshold Value", 0, 255, 1, 127),
                _select("threshold-type", "Type", THRESHOLD_TYPES, THRESHOLD_TYPES[0]),
                _slider("max-value", "Max Value", 0, 255, 1, 255),
                _checkbox("show-histogram", "Show histogram", False),
            ],
            extras=["histogram"],
        ),
        "colorToGray": OperationMetadata(
            "COLOR TO GRAYSCALE",
            "Convert color image to grayscale",
            [_info("Converts RGB/RGBA image to single-channel grayscale")],
        ),
        "invert": OperationMetadata(
            "INVERT IMAGE",
            "Invert all pixel values (bitwise NOT)",
            [_info("Black becomes white, white becomes black")],
        ),
        "transpose": OperationMetadata(
            "TRANSPOSE IMAGE",
            "Flip image over its diagonal",
            [_info("Rows become columns, columns become rows")],
        ),
        "bgrRgb": OperationMetadata(
            "BGR ↔ RGB CONVERSION",
            "Swap red and blue channels",
            [_info("Useful for format conversions between OpenCV and other libraries")],
        ),
        "quantize": OperationMetadata(
            "COLOR QUANTIZATION",
            "Reduce number of colors",
            [_slider("levels", "Color Levels", 2, 32, 1, 8, hint="Per channel")],
        ),
        "histEq": OperationMetadata(
            "HISTOGRAM EQUALIZATION",
            "Enhance contrast using histogram equalization",
            [
                _info("Works best on grayscale images"),
                _checkbox("show-histogram", "Show before/after histogram", True),
            ],
            extras=["histogram-comparison"],
        ),
    }


_METADATA: Dict[str, OperationMetadata] = _build_metadata_table()


def get_operation_metadata(operation: str) -> OperationMetadata:
    """
    Get the panel metadata for an operation.

    Unknown operations get a generic entry (upper-cased title, no controls)
    so the panel can still open.

    Args:
        operation: Operation name (e.g. 'blur', 'sobel')

    Returns:
        OperationMetadata for the operation
    """
    metadata = _METADATA.get(operation)
    if metadata is not None:
        return metadata

    return OperationMetadata(
        title=str(operation).upper(),
        description="Operation configuration",
        controls=[],
    )


def has_operation_metadata(operation: str) -> bool:
    """Check whether the table has an entry for an operation."""
    return operation in _METADATA


def list_operation_names() -> List[str]:
    """Sorted names of every operation in the metadata table."""
    return sorted(_METADATA.keys())


def default_control_values(metadata: OperationMetadata) -> Dict[str, Any]:
    """
    Build the parameter dict the panel produces before any edits.

    Sliders yield floats, selects their selected option, checkboxes their
    checked state and color pickers their hex value. Info boxes yield nothing.
    """
    params: Dict[str, Any] = {}

    for control in metadata.controls:
        if control.type == "slider":
            params[control.id] = float(control.value)
        elif control.type == "select":
            params[control.id] = control.value
        elif control.type == "checkbox":
            params[control.id] = bool(control.checked)
        elif control.type == "color":
            params[control.id] = control.value or "#ff0000"
        elif control.type == "checkboxgroup":
            for option in control.options:
                params[option.id] = bool(option.checked)

    return params
