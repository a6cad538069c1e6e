"""
Editor session controller.

EditorSession holds the editor workflow independently of any widget
toolkit: loading images, selecting an operation, previewing, applying,
chaining the output back as input and downloading. The Qt window is a thin
layer that forwards button clicks here and shows the raised
``EditorError`` messages to the user.

Classes:
    EditorError: Base class of user-facing editor failures
    OperationOutcome: Image (and optional histograms) produced by a run
    EditorSession: The workflow controller
"""

import logging
from dataclasses import dataclass
from datetime import datetime
from pathlib import Path
from typing import Any, Dict, Optional, Tuple

import numpy as np

from PV_Libs.constants import DEFAULT_OUTPUT_FORMAT
from PV_Libs.EditorStateLib.editor_state import EditorState
from PV_Libs.ImageOpsLib.histogram import (
    calculate_histogram,
    histogram_comparison,
    render_histogram,
)
from PV_Libs.ImageOpsLib.image_io import (
    download_filename,
    get_supported_formats,
    is_supported_format,
    load_image,
    make_preview,
    save_image,
)
from PV_Libs.ImageOpsLib.image_models import ImageRecord
from PV_Libs.OpsRegistryLib.operation_metadata import (
    OperationMetadata,
    get_operation_metadata,
    has_operation_metadata,
)
from PV_Libs.OpsRegistryLib.operation_registry import (
    OperationRegistry,
    get_default_registry,
)

logger = logging.getLogger(__name__)


class EditorError(Exception):
    """Base class for failures reported to the user."""


class NoSourceImageError(EditorError):
    pass


class NoOperationSelectedError(EditorError):
    pass


class UnknownOperationError(EditorError):
    pass


class OperationFailedError(EditorError):
    pass


@dataclass
class OperationOutcome:
    """Result of a preview or apply.

    Attributes:
        operation: Name of the operation that ran
        image: The produced image
        histograms: Rendered histogram images, or None when not requested.
            histEq yields (before, after); threshold yields (source,).
    """
    operation: str
    image: np.ndarray
    histograms: Optional[Tuple[np.ndarray, ...]] = None


class EditorSession:
    """Drive an EditorState through the editor workflow.

    Example:
        >>> session = EditorSession()
        >>> session.load_array(image)
        >>> session.select_operation("canny")
        >>> session.apply({"low-threshold": 30})
    """

    def __init__(
        self,
        state: Optional[EditorState] = None,
        registry: Optional[OperationRegistry] = None,
    ) -> None:
        self.state = state if state is not None else EditorState()
        self.registry = registry if registry is not None else get_default_registry()
        self.current_category: Optional[str] = None
        self.record: Optional[ImageRecord] = None

    # ------------------------------------------------------------------
    # Input
    # ------------------------------------------------------------------

    def load_image(self, file_path: Path) -> np.ndarray:
        """
        Load an image file as the new source.

        Raises:
            FileNotFoundError: If the file does not exist
            ValueError: If the extension is not a supported image format
            IOError: If the file cannot be decoded
        """
        file_path = Path(file_path)
        if not is_supported_format(file_path):
            supported = ", ".join(get_supported_formats())
            raise ValueError(
                f"Unsupported image format: {file_path.suffix or file_path.name} "
                f"(expected one of {supported})"
            )

        image = load_image(file_path)
        self.state.set_source(image)
        self.record = ImageRecord(path=file_path, image=self.state.get_source())
        return self.state.get_source()

    def load_array(self, image: np.ndarray) -> np.ndarray:
        """Use an in-memory image as the new source."""
        self.state.set_source(image)
        self.record = None
        return self.state.get_source()

    # ------------------------------------------------------------------
    # Operations
    # ------------------------------------------------------------------

    def select_operation(self, name: str, category: Optional[str] = None) -> OperationMetadata:
        """Make ``name`` the current operation and return its panel metadata."""
        self.state.current_operation = name
        self.current_category = category
        logger.info(f"Operation selected: {name} ({category or 'uncategorized'})")
        return get_operation_metadata(name)

    def cancel_operation(self) -> None:
        """Close the options panel without touching any image."""
        self.state.current_operation = None
        self.current_category = None

    def _run(self, params: Optional[Dict[str, Any]]) -> OperationOutcome:
        source = self.state.get_source()
        if source is None:
            raise NoSourceImageError("Please load an image first.")

        operation = self.state.current_operation
        if not operation:
            raise NoOperationSelectedError("Please select an operation first.")

        if not self.registry.has_operation(operation):
            if has_operation_metadata(operation):
                raise UnknownOperationError(f"Operation '{operation}' is not yet implemented.")
            raise UnknownOperationError(f"Unknown operation: {operation}")

        params = params or {}
        try:
            image = self.registry.execute(operation, source, params)
        except Exception as e:
            logger.error(f"Operation '{operation}' failed: {str(e)}")
            raise OperationFailedError(f"Operation '{operation}' failed: {str(e)}") from e

        return OperationOutcome(
            operation=operation,
            image=image,
            histograms=self._histograms(operation, source, image, params),
        )

    @staticmethod
    def _histograms(
        operation: str,
        source: np.ndarray,
        image: np.ndarray,
        params: Dict[str, Any],
    ) -> Optional[Tuple[np.ndarray, ...]]:
        if not params.get("show-histogram"):
            return None
        if operation == "histEq":
            return histogram_comparison(source, image)
        if operation == "threshold":
            return (render_histogram(calculate_histogram(source)),)
        return None

    def preview(self, params: Optional[Dict[str, Any]] = None) -> OperationOutcome:
        """
        Run the current operation on the source and store it as the preview.

        The stored preview is downscaled for display; the outcome keeps
        the full-resolution image. The result slot is left untouched.

        Raises:
            NoSourceImageError: If no image is loaded
            NoOperationSelectedError: If no operation is selected
            UnknownOperationError: If the operation has no executor
            OperationFailedError: If the operation raised
        """
        outcome = self._run(params)
        self.state.set_preview(make_preview(outcome.image))
        logger.info(f"Preview generated: {outcome.operation}")
        return outcome

    def apply(self, params: Optional[Dict[str, Any]] = None) -> OperationOutcome:
        """
        Run the current operation on the source and store it as the result.

        Raises the same errors as ``preview``.
        """
        outcome = self._run(params)
        self.state.set_result(outcome.image)
        logger.info(f"Operation applied: {outcome.operation}")
        return outcome

    # ------------------------------------------------------------------
    # Output
    # ------------------------------------------------------------------

    def clear_output(self) -> Optional[np.ndarray]:
        """Drop result and preview. Returns the source for redisplay."""
        self.state.reset_output()
        self.current_category = None
        return self.state.get_source()

    def use_output_as_input(self) -> np.ndarray:
        """
        Promote the result to be the new source.

        Raises:
            EditorError: If there is no result yet
        """
        result = self.state.get_result()
        if result is None:
            raise EditorError("No output available to use as input")

        self.state.set_source(result)
        self.state.reset_output()
        if self.record is not None:
            self.record.image = self.state.get_source()
        logger.info("Output promoted to input")
        return self.state.get_source()

    def download(self, directory: Path, now: Optional[datetime] = None) -> Path:
        """
        Save the active image as a timestamped PNG in ``directory``.

        Raises:
            NoSourceImageError: If there is nothing to save
            OSError: If the directory does not exist or the write fails
        """
        image = self.state.get_active()
        if image is None:
            raise NoSourceImageError("No image to download.")

        path = Path(directory) / download_filename(now)
        return save_image(image, path, save_format=DEFAULT_OUTPUT_FORMAT)

    def new_upload(self) -> None:
        """Forget everything so a new image can be loaded."""
        self.state.reset_state()
        self.current_category = None
        self.record = None
