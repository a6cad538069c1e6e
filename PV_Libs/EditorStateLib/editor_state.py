"""
Editor state container.

EditorState owns the three image slots of the editor (source, result and
preview) together with the selected operation and the detected image type.
Every slot holds a private copy: callers can keep mutating the arrays they
pass in without affecting the editor.
"""

import logging
from typing import Any, Dict, Optional

import numpy as np

from PV_Libs.ImageOpsLib.image_models import ImageType, detect_image_type, validate_image

logger = logging.getLogger(__name__)


def _size_label(image: Optional[np.ndarray]) -> Optional[str]:
    if image is None:
        return None
    height, width = image.shape[:2]
    return f"{width}x{height}"


class EditorState:
    """Source, result and preview images plus the current operation.

    Notes:
        - ``set_source`` starts a fresh edit: result and preview are dropped.
        - The image type follows the result once one exists, else the source.
        - ``get_active`` is what the next operation should run on for display.
    """

    def __init__(self) -> None:
        self._source: Optional[np.ndarray] = None
        self._result: Optional[np.ndarray] = None
        self._preview: Optional[np.ndarray] = None
        self._current_operation: Optional[str] = None
        self._image_type: Optional[ImageType] = None

    # ------------------------------------------------------------------
    # Slots
    # ------------------------------------------------------------------

    def set_source(self, image: np.ndarray) -> None:
        """Replace the source with a copy of ``image`` and clear the outputs."""
        validate_image(image)
        self._release_images()
        self._source = image.copy()
        self._image_type = detect_image_type(self._source)
        logger.debug(
            f"Source set: {_size_label(self._source)}, type={self._image_type.value}"
        )

    def set_preview(self, image: np.ndarray) -> None:
        validate_image(image)
        self._preview = image.copy()
        logger.debug(f"Preview set: {_size_label(self._preview)}")

    def set_result(self, image: np.ndarray) -> None:
        """Replace the result with a copy of ``image`` and re-detect the type."""
        validate_image(image)
        self._result = image.copy()
        self._image_type = detect_image_type(self._result)
        logger.debug(
            f"Result set: {_size_label(self._result)}, type={self._image_type.value}"
        )

    def get_source(self) -> Optional[np.ndarray]:
        return self._source

    def get_result(self) -> Optional[np.ndarray]:
        return self._result

    def get_preview(self) -> Optional[np.ndarray]:
        return self._preview

    def get_active(self) -> Optional[np.ndarray]:
        """Result if present, otherwise the source, otherwise None."""
        if self._result is not None:
            return self._result
        return self._source

    @property
    def has_source(self) -> bool:
        return self._source is not None

    @property
    def has_result(self) -> bool:
        return self._result is not None

    # ------------------------------------------------------------------
    # Operation and type
    # ------------------------------------------------------------------

    @property
    def current_operation(self) -> Optional[str]:
        return self._current_operation

    @current_operation.setter
    def current_operation(self, operation: Optional[str]) -> None:
        self._current_operation = operation
        logger.debug(f"Current operation: {operation}")

    @property
    def image_type(self) -> Optional[ImageType]:
        return self._image_type

    def is_binary(self) -> bool:
        return self._image_type == ImageType.BINARY

    def is_grayscale(self) -> bool:
        """True for gray and binary images."""
        return self._image_type in (ImageType.GRAY, ImageType.BINARY)

    def is_color(self) -> bool:
        return self._image_type == ImageType.COLOR

    # ------------------------------------------------------------------
    # Reset and release
    # ------------------------------------------------------------------

    def reset_output(self) -> None:
        """Drop result, preview and operation. The type reverts to the source's."""
        self._result = None
        self._preview = None
        self._current_operation = None
        self._image_type = detect_image_type(self._source)
        logger.info("Output reset")

    def reset_state(self) -> None:
        """Drop every image and all metadata."""
        self._release_images()
        self._current_operation = None
        self._image_type = None
        logger.info("State reset")

    def free_all(self) -> None:
        """Release every image slot."""
        self._release_images()
        logger.info("All images released")

    def _release_images(self) -> None:
        self._source = None
        self._result = None
        self._preview = None

    def summary(self) -> Dict[str, Any]:
        """Snapshot of the state for logging and debugging."""
        return {
            "has_src": self._source is not None,
            "has_dst": self._result is not None,
            "has_preview": self._preview is not None,
            "src_size": _size_label(self._source),
            "dst_size": _size_label(self._result),
            "image_type": self._image_type.value if self._image_type else None,
            "current_op": self._current_operation,
        }
