"""
PV_Libs - PreViz Library Modules

This package contains core functionality for the PreViz editor,
organized into specialized sub-packages:

- ImageOpsLib: OpenCV image operations, image models, histograms and file I/O
- OpsRegistryLib: Operation metadata, parameter executors and the operation registry
- EditorStateLib: Source/result/preview state and the editor session controller
- EditorUILib: PyQt5 editor window and options panel
"""

__version__ = "0.1.0"
