"""
Operation Registry.

This module provides a centralized registry of image operations. It enables
registration, lookup, and execution of the operations the editor exposes in
its toolbar.

Classes:
    OperationRegistry: Registry for operation executors

Functions:
    get_default_registry: Get the global default registry (singleton)
    register_default_operations: Register all built-in operations
"""

from typing import Any, Callable, Dict, List, Optional
import logging

import numpy as np

from PV_Libs.constants import (
    CATEGORY_BASIC,
    CATEGORY_EDGE,
    CATEGORY_KERNEL,
    CATEGORY_MORPH,
)

logger = logging.getLogger(__name__)

# Type alias for executor function
OperationExecutor = Callable[[np.ndarray, Optional[Dict[str, Any]]], np.ndarray]


class OperationRegistry:
    """
    Registry for image operation executors.

    Example:
        >>> registry = OperationRegistry()
        >>> registry.register("invert", execute_invert, category="basic")
        >>> result = registry.execute("invert", image, {})
    """

    def __init__(self):
        """Initialize an empty registry."""
        self._executors: Dict[str, OperationExecutor] = {}
        self._metadata: Dict[str, Dict[str, Any]] = {}

    def register(
        self,
        name: str,
        executor: OperationExecutor,
        category: str = CATEGORY_BASIC,
        description: str = "",
        tags: Optional[List[str]] = None,
    ) -> None:
        """
        Register an operation executor.

        Args:
            name: Unique operation name (e.g. "sobel")
            executor: Callable accepting (image, params) and returning an image
            category: Toolbar category (basic, edge, kernel, morph)
            description: Human-readable description
            tags: Optional descriptive tags

        Raises:
            ValueError: If name is empty or executor is not callable
            RuntimeError: If name is already registered
        """
        name = str(name).strip()

        if not name:
            raise ValueError("operation name cannot be empty")

        if not callable(executor):
            raise ValueError(f"executor must be callable, got {type(executor)}")

        if name in self._executors:
            raise RuntimeError(
                f"Operation '{name}' is already registered. "
                f"Use unregister() first to replace it."
            )

        self._executors[name] = executor
        self._metadata[name] = {
            "category": str(category).strip().lower(),
            "description": str(description),
            "tags": list(tags) if tags else [],
        }

        logger.debug(f"Registered operation: {name}")

    def unregister(self, name: str) -> bool:
        """
        Unregister an operation.

        Returns:
            True if unregistered, False if the name was not registered
        """
        name = str(name).strip()

        if name in self._executors:
            del self._executors[name]
            del self._metadata[name]
            logger.debug(f"Unregistered operation: {name}")
            return True

        return False

    def get_executor(self, name: str) -> OperationExecutor:
        """
        Get the executor for an operation.

        Raises:
            KeyError: If the operation is not registered
        """
        name = str(name).strip()

        if name not in self._executors:
            available = ", ".join(self.list_operations())
            raise KeyError(
                f"No executor registered for operation '{name}'. "
                f"Available operations: {available}"
            )

        return self._executors[name]

    def has_operation(self, name: str) -> bool:
        """Check if an operation is registered."""
        return str(name).strip() in self._executors

    def execute(
        self,
        name: str,
        image: np.ndarray,
        params: Optional[Dict[str, Any]] = None,
    ) -> np.ndarray:
        """
        Run an operation on an image.

        Args:
            name: The operation to run
            image: Source image (left unmodified)
            params: Panel parameters keyed by control id

        Returns:
            The new image produced by the operation

        Raises:
            KeyError: If the operation is not registered
            Exception: Any exception raised by the executor
        """
        executor = self.get_executor(name)
        return executor(image, params or {})

    def list_operations(self) -> List[str]:
        """Sorted list of registered operation names."""
        return sorted(self._executors.keys())

    def list_by_category(self, category: str) -> List[str]:
        """Sorted operation names in a category."""
        category = str(category).strip().lower()
        return sorted(
            name
            for name, meta in self._metadata.items()
            if meta["category"] == category
        )

    def get_metadata(self, name: str) -> Dict[str, Any]:
        """
        Get registry metadata (category, description, tags) for an operation.

        Raises:
            KeyError: If the operation is not registered
        """
        name = str(name).strip()

        if name not in self._metadata:
            raise KeyError(f"No metadata for operation: {name}")

        return dict(self._metadata[name])

    def clear(self) -> None:
        """Clear all registered operations. Use with caution."""
        self._executors.clear()
        self._metadata.clear()
        logger.warning("Operation registry cleared")


# Global singleton registry
_default_registry: Optional[OperationRegistry] = None


def get_default_registry() -> OperationRegistry:
    """
    Get the global default registry (singleton).

    Creates the registry on first call and registers the built-in operations.
    """
    global _default_registry

    if _default_registry is None:
        _default_registry = OperationRegistry()
        register_default_operations(_default_registry)

    return _default_registry


def register_default_operations(registry: OperationRegistry) -> None:
    """
    Register every built-in operation.

    Args:
        registry: The registry to register operations with
    """
    from PV_Libs.OpsRegistryLib import operation_executors as ex

    builtins = [
        # name, executor, category, description, tags
        ("colorToGray", ex.execute_color_to_gray, CATEGORY_BASIC, "Convert to grayscale", ["color"]),
        ("invert", ex.execute_invert, CATEGORY_BASIC, "Bitwise NOT of every channel", ["color"]),
        ("transpose", ex.execute_transpose, CATEGORY_BASIC, "Flip over the main diagonal", ["geometry"]),
        ("bgrRgb", ex.execute_bgr_rgb, CATEGORY_BASIC, "Swap red and blue channels", ["color"]),
        ("quantize", ex.execute_quantize, CATEGORY_BASIC, "Reduce gray levels", ["gray"]),
        ("histEq", ex.execute_hist_eq, CATEGORY_BASIC, "Histogram equalization", ["gray", "histogram"]),
        ("threshold", ex.execute_threshold, CATEGORY_BASIC, "Threshold to binary", ["gray", "binary"]),
        ("sobel", ex.execute_sobel, CATEGORY_EDGE, "Sobel gradients", ["gradient"]),
        ("prewitt", ex.execute_prewitt, CATEGORY_EDGE, "Prewitt gradients", ["gradient"]),
        ("canny", ex.execute_canny, CATEGORY_EDGE, "Canny edge detector", ["binary"]),
        ("laplace", ex.execute_laplace, CATEGORY_EDGE, "Laplacian (ksize 3)", ["second-derivative"]),
        ("log", ex.execute_log, CATEGORY_EDGE, "Laplacian of Gaussian (ksize 5)", ["second-derivative"]),
        ("harris", ex.execute_harris, CATEGORY_EDGE, "Harris corners overlay", ["corners", "color"]),
        ("blur", ex.execute_box_blur, CATEGORY_KERNEL, "Box (mean) filter", ["smoothing"]),
        ("gaussian", ex.execute_gaussian, CATEGORY_KERNEL, "Gaussian filter", ["smoothing"]),
        ("median", ex.execute_median, CATEGORY_KERNEL, "Median filter", ["smoothing", "nonlinear"]),
        ("mean", ex.execute_mean, CATEGORY_KERNEL, "Weighted average filter", ["smoothing"]),
        ("max", ex.execute_max, CATEGORY_KERNEL, "Max filter", ["nonlinear"]),
        ("min", ex.execute_min, CATEGORY_KERNEL, "Min filter", ["nonlinear"]),
        ("dilate", ex.execute_dilate, CATEGORY_MORPH, "Dilation", ["binary"]),
        ("erode", ex.execute_erode, CATEGORY_MORPH, "Erosion", ["binary"]),
        ("open", ex.execute_open, CATEGORY_MORPH, "Opening", ["binary"]),
        ("close", ex.execute_close, CATEGORY_MORPH, "Closing", ["binary"]),
        ("holefill", ex.execute_hole_fill, CATEGORY_MORPH, "Hole filling", ["binary"]),
    ]

    for name, executor, category, description, tags in builtins:
        registry.register(
            name=name,
            executor=executor,
            category=category,
            description=description,
            tags=tags,
        )

    logger.info("Registered default operations")
