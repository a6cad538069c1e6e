"""
Tests for the Operation Registry and executors.

Tests cover:
- Registry creation and basic operations
- Registration and lookup
- Metadata and category filtering
- Execution of every built-in operation
- Parameter defaults and conversion in executors
- Singleton pattern
"""

import unittest

import numpy as np

from PV_Libs.ImageOpsLib.edge_ops import canny_edge, sobel_edge
from PV_Libs.ImageOpsLib.morph_ops import dilate_image, hole_fill_image
from PV_Libs.OpsRegistryLib.operation_metadata import default_control_values, get_operation_metadata
from PV_Libs.OpsRegistryLib.operation_registry import (
    OperationRegistry,
    get_default_registry,
    register_default_operations,
)


def _make_rgba(height: int = 32, width: int = 48) -> np.ndarray:
    image = np.zeros((height, width, 4), dtype=np.uint8)
    image[..., 0] = np.linspace(0, 255, width).astype(np.uint8)[None, :]
    image[..., 1] = np.linspace(0, 255, height).astype(np.uint8)[:, None]
    image[8:24, 12:36, 2] = 255
    image[..., 3] = 255
    return image


def _make_binary() -> np.ndarray:
    image = np.zeros((40, 40), dtype=np.uint8)
    image[10:30, 10:30] = 255
    image[15:25, 15:25] = 0
    return image


class TestOperationRegistry(unittest.TestCase):
    """Test OperationRegistry basic functionality."""

    def setUp(self):
        """Create a fresh registry for each test."""
        self.registry = OperationRegistry()

    def test_registry_creation(self):
        """Test creating a new registry."""
        self.assertEqual(len(self.registry.list_operations()), 0)

    def test_register_operation(self):
        """Test registering an executor."""
        def dummy_executor(image, params):
            return image

        self.registry.register("dummy", dummy_executor)

        self.assertTrue(self.registry.has_operation("dummy"))
        self.assertIn("dummy", self.registry.list_operations())

    def test_register_with_metadata(self):
        """Test registering with category, description and tags."""
        def dummy_executor(image, params):
            return image

        self.registry.register(
            "dummy",
            dummy_executor,
            category="Edge",
            description="A test operation",
            tags=["test", "example"],
        )

        meta = self.registry.get_metadata("dummy")

        self.assertEqual(meta["category"], "edge")
        self.assertEqual(meta["description"], "A test operation")
        self.assertIn("example", meta["tags"])

    def test_register_empty_name_raises_error(self):
        """Test that an empty name raises ValueError."""
        with self.assertRaises(ValueError):
            self.registry.register("  ", lambda image, params: image)

    def test_register_non_callable_raises_error(self):
        """Test that a non-callable executor raises ValueError."""
        with self.assertRaises(ValueError):
            self.registry.register("dummy", "not callable")

    def test_register_duplicate_raises_error(self):
        """Test that registering a name twice raises RuntimeError."""
        self.registry.register("dummy", lambda image, params: image)

        with self.assertRaises(RuntimeError):
            self.registry.register("dummy", lambda image, params: image)

    def test_unregister(self):
        """Test unregistering an operation."""
        self.registry.register("dummy", lambda image, params: image)

        self.assertTrue(self.registry.unregister("dummy"))
        self.assertFalse(self.registry.unregister("dummy"))
        self.assertFalse(self.registry.has_operation("dummy"))

    def test_get_executor_unknown_lists_available(self):
        """Test that an unknown lookup names the available operations."""
        self.registry.register("dummy", lambda image, params: image)

        with self.assertRaises(KeyError) as context:
            self.registry.get_executor("missing")

        self.assertIn("dummy", str(context.exception))

    def test_get_metadata_unknown_raises(self):
        with self.assertRaises(KeyError):
            self.registry.get_metadata("missing")

    def test_execute_passes_params(self):
        """Test that execute forwards image and params."""
        received = {}

        def recording_executor(image, params):
            received.update(params)
            return image

        self.registry.register("record", recording_executor)
        self.registry.execute("record", _make_rgba(), {"levels": 4})

        self.assertEqual(received, {"levels": 4})

    def test_execute_none_params_becomes_empty_dict(self):
        received = []
        self.registry.register("record", lambda image, params: received.append(params) or image)

        self.registry.execute("record", _make_rgba(), None)

        self.assertEqual(received, [{}])

    def test_list_by_category(self):
        self.registry.register("a", lambda image, params: image, category="edge", tags=["Gradient"])
        self.registry.register("b", lambda image, params: image, category="basic")

        self.assertEqual(self.registry.list_by_category("EDGE"), ["a"])
        self.assertEqual(self.registry.get_metadata("a")["tags"], ["Gradient"])

    def test_clear(self):
        self.registry.register("dummy", lambda image, params: image)

        self.registry.clear()

        self.assertEqual(self.registry.list_operations(), [])


class TestDefaultOperations(unittest.TestCase):
    """Test the built-in operations."""

    def setUp(self):
        self.registry = OperationRegistry()
        register_default_operations(self.registry)
        self.image = _make_rgba()

    def test_all_builtins_registered(self):
        self.assertEqual(len(self.registry.list_operations()), 24)
        self.assertEqual(
            self.registry.list_by_category("kernel"),
            ["blur", "gaussian", "max", "mean", "median", "min"],
        )
        self.assertEqual(
            self.registry.list_by_category("morph"),
            ["close", "dilate", "erode", "holefill", "open"],
        )

    def test_display_only_operations_not_registered(self):
        for name in ("neighbours4", "neighbours8", "connectivity", "components", "glcm", "moments"):
            self.assertFalse(self.registry.has_operation(name))

    def test_every_operation_with_panel_defaults(self):
        """Every built-in returns a uint8 image of the right size and leaves the source alone."""
        original = self.image.copy()

        for name in self.registry.list_operations():
            params = default_control_values(get_operation_metadata(name))
            result = self.registry.execute(name, self.image, params)

            self.assertEqual(result.dtype, np.uint8, name)
            if name == "transpose":
                self.assertEqual(result.shape[:2], (48, 32))
            else:
                self.assertEqual(result.shape[:2], (32, 48), name)
            self.assertTrue(np.array_equal(self.image, original), name)

    def test_every_operation_with_empty_params(self):
        for name in self.registry.list_operations():
            result = self.registry.execute(name, self.image, {})
            self.assertEqual(result.dtype, np.uint8, name)

    def test_color_preserving_operations(self):
        for name in ("invert", "transpose", "bgrRgb", "harris"):
            result = self.registry.execute(name, self.image, {})
            self.assertEqual(result.ndim, 3, name)
            self.assertEqual(result.shape[2], 4, name)

    def test_grayscale_operations(self):
        for name in ("colorToGray", "quantize", "sobel", "canny", "median", "dilate"):
            result = self.registry.execute(name, self.image, {})
            self.assertEqual(result.ndim, 2, name)


class TestExecutorParameters(unittest.TestCase):
    """Test how executors map panel parameters to operation arguments."""

    def setUp(self):
        self.registry = OperationRegistry()
        register_default_operations(self.registry)
        self.image = _make_rgba()
        self.binary = _make_binary()

    def test_zero_is_kept(self):
        """A legitimate 0 must not be replaced by the default."""
        result = self.registry.execute("canny", self.binary, {"low-threshold": 0, "high-threshold": 150})

        self.assertTrue(np.array_equal(result, canny_edge(self.binary, 0, 150)))

    def test_none_takes_default(self):
        result = self.registry.execute("canny", self.binary, {"low-threshold": None})

        self.assertTrue(np.array_equal(result, canny_edge(self.binary, 50, 150)))

    def test_direction_flags(self):
        only_x = self.registry.execute("sobel", self.image, {"use-y": False})
        missing = self.registry.execute("sobel", self.image, {"use-x": None})

        self.assertTrue(np.array_equal(only_x, sobel_edge(self.image, True, False)))
        self.assertTrue(np.array_equal(missing, sobel_edge(self.image, True, True)))

    def test_float_slider_values(self):
        result = self.registry.execute("quantize", self.image, {"levels": 4.0})

        self.assertTrue(set(np.unique(result)) <= {0, 64, 128, 192})

    def test_non_numeric_value_raises(self):
        with self.assertRaises(ValueError):
            self.registry.execute("blur", self.image, {"kernel-size": "big"})

    def test_morph_parameters(self):
        params = {"kernel-size": 3.0, "kernel-shape": "Ellipse", "iterations": 2.0}

        result = self.registry.execute("dilate", self.binary, params)

        expected = dilate_image(self.binary, ksize=3, kernel_shape="Ellipse", iterations=2)
        self.assertTrue(np.array_equal(result, expected))

    def test_hole_fill_connectivity(self):
        result = self.registry.execute("holefill", self.binary, {"connectivity": "4-connected"})

        expected = hole_fill_image(self.binary, thresh=127, connectivity=4)
        self.assertTrue(np.array_equal(result, expected))
        self.assertEqual(result[20, 20], 255)

    def test_threshold_type(self):
        result = self.registry.execute(
            "threshold", self.binary, {"threshold-type": "Binary Inverted", "threshold-value": 127}
        )

        self.assertEqual(result[0, 0], 255)
        self.assertEqual(result[12, 12], 0)


class TestDefaultRegistry(unittest.TestCase):
    """Test the global default registry."""

    def test_singleton(self):
        self.assertIs(get_default_registry(), get_default_registry())

    def test_has_builtins(self):
        self.assertTrue(get_default_registry().has_operation("sobel"))


if __name__ == "__main__":
    unittest.main()
