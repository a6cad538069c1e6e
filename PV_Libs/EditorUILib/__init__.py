"""
EditorUILib - PyQt5 editor window

This module provides the desktop window, its options panel and the
NumPy to Qt image conversion helpers.
"""

from PV_Libs.EditorUILib.qt_image import (
    ndarray_to_qimage,
    ndarray_to_qpixmap,
    show_on_canvas,
    show_scaled,
)
from PV_Libs.EditorUILib.operation_panel import OperationPanel
from PV_Libs.EditorUILib.editor_window import PreVizEditorWindow, TOOLBAR_GROUPS

__all__ = [
    "ndarray_to_qimage",
    "ndarray_to_qpixmap",
    "show_on_canvas",
    "show_scaled",
    "OperationPanel",
    "PreVizEditorWindow",
    "TOOLBAR_GROUPS",
]
