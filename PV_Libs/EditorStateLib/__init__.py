"""
EditorStateLib - Editor state and workflow

This module holds the editor's image slots and the toolkit-independent
controller that the desktop window drives.
"""

from PV_Libs.EditorStateLib.editor_state import EditorState
from PV_Libs.EditorStateLib.editor_session import (
    EditorError,
    EditorSession,
    NoOperationSelectedError,
    NoSourceImageError,
    OperationFailedError,
    OperationOutcome,
    UnknownOperationError,
)

__all__ = [
    "EditorState",
    "EditorError",
    "EditorSession",
    "NoOperationSelectedError",
    "NoSourceImageError",
    "OperationFailedError",
    "OperationOutcome",
    "UnknownOperationError",
]
