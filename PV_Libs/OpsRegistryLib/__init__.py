"""
OpsRegistryLib - Operation metadata and dispatch

This module maps operation names to their options-panel metadata and
to the executors that run them on an image.
"""

from PV_Libs.OpsRegistryLib.operation_metadata import (
    ControlSpec,
    OperationMetadata,
    get_operation_metadata,
    has_operation_metadata,
    list_operation_names,
    default_control_values,
)
from PV_Libs.OpsRegistryLib.operation_registry import (
    OperationRegistry,
    get_default_registry,
    register_default_operations,
)

__all__ = [
    "ControlSpec",
    "OperationMetadata",
    "get_operation_metadata",
    "has_operation_metadata",
    "list_operation_names",
    "default_control_values",
    "OperationRegistry",
    "get_default_registry",
    "register_default_operations",
]
