"""
PreViz main editor window.

Layout: a top bar (Clear Output, New Upload, Use Output as Input, Download),
the input and output canvases side by side, an operation toolbar grouped by
category under them, and the options panel on the right. All workflow
logic lives in EditorSession; this window forwards clicks and shows
results and errors.
"""

import logging
from pathlib import Path
from typing import Dict, List, Optional, Tuple

from PyQt5.QtCore import QPoint, Qt
from PyQt5.QtWidgets import (
    QFileDialog,
    QHBoxLayout,
    QLabel,
    QMainWindow,
    QMenu,
    QMessageBox,
    QPushButton,
    QVBoxLayout,
    QWidget,
)

from PV_Libs.constants import (
    CANVAS_HEIGHT,
    CANVAS_WIDTH,
    CATEGORY_BASIC,
    CATEGORY_EDGE,
    CATEGORY_KERNEL,
    CATEGORY_MORPH,
    CATEGORY_NEIGHBOUR,
    CATEGORY_TEXTURE,
    DEFAULT_WINDOW_HEIGHT,
    DEFAULT_WINDOW_WIDTH,
)
from PV_Libs.EditorStateLib.editor_session import EditorError, EditorSession, OperationOutcome
from PV_Libs.EditorUILib.operation_panel import OperationPanel
from PV_Libs.EditorUILib.qt_image import show_on_canvas
from PV_Libs.ImageOpsLib.image_io import get_supported_formats

logger = logging.getLogger(__name__)

INPUT_PLACEHOLDER = "No image loaded"
OUTPUT_PLACEHOLDER = "Output will appear here"
WINDOW_TITLE = "PreViz Editor"

# (category, [(operation, button label), ...])
TOOLBAR_GROUPS: List[Tuple[str, List[Tuple[str, str]]]] = [
    (CATEGORY_BASIC, [
        ("colorToGray", "Gray"),
        ("invert", "Invert"),
        ("transpose", "Transpose"),
        ("bgrRgb", "BGR↔RGB"),
        ("quantize", "Quantize"),
        ("histEq", "Hist Eq"),
        ("threshold", "Threshold"),
    ]),
    (CATEGORY_EDGE, [
        ("sobel", "Sobel"),
        ("prewitt", "Prewitt"),
        ("canny", "Canny"),
        ("laplace", "Laplace"),
        ("log", "LoG"),
        ("harris", "Harris"),
    ]),
    (CATEGORY_KERNEL, [
        ("blur", "Box Blur"),
        ("gaussian", "Gaussian"),
        ("median", "Median"),
        ("mean", "Mean"),
        ("max", "Max"),
        ("min", "Min"),
    ]),
    (CATEGORY_MORPH, [
        ("dilate", "Dilate"),
        ("erode", "Erode"),
        ("open", "Open"),
        ("close", "Close"),
        ("holefill", "Hole Fill"),
    ]),
    (CATEGORY_NEIGHBOUR, [
        ("neighbours4", "N4"),
        ("neighbours8", "N8"),
        ("connectivity", "Connectivity"),
        ("components", "Components"),
    ]),
    (CATEGORY_TEXTURE, [
        ("glcm", "GLCM"),
        ("moments", "Moments"),
    ]),
]


class PreVizEditorWindow(QMainWindow):
    def __init__(self, session: Optional[EditorSession] = None) -> None:
        super().__init__()
        self.setWindowTitle(WINDOW_TITLE)
        self.resize(DEFAULT_WINDOW_WIDTH, DEFAULT_WINDOW_HEIGHT)

        self.session = session if session is not None else EditorSession()
        self.operation_buttons: Dict[str, QPushButton] = {}
        self.kernel_menu: Optional[QMenu] = None

        self._build_ui()
        self._connect_signals()
        self.refresh_canvases()

    def _build_ui(self) -> None:
        central = QWidget(self)
        self.setCentralWidget(central)

        root = QHBoxLayout(central)
        main_col = QVBoxLayout()

        top_bar = QHBoxLayout()
        self.btn_clear_output = QPushButton("Clear Output")
        self.btn_new_upload = QPushButton("New Upload")
        self.btn_use_output = QPushButton("Use Output as Input")
        self.btn_download = QPushButton("Download Output")
        self.btn_use_output.setVisible(False)
        top_bar.addWidget(self.btn_clear_output)
        top_bar.addWidget(self.btn_new_upload)
        top_bar.addWidget(self.btn_use_output)
        top_bar.addStretch(1)
        top_bar.addWidget(self.btn_download)

        canvases = QHBoxLayout()
        self.label_input = self._new_canvas()
        self.label_output = self._new_canvas()
        canvases.addLayout(self._captioned("Input", self.label_input))
        canvases.addLayout(self._captioned("Output", self.label_output))

        main_col.addLayout(top_bar)
        main_col.addLayout(canvases)
        main_col.addLayout(self._build_toolbar())
        main_col.addStretch(1)

        self.panel = OperationPanel(self)
        self.panel.setVisible(False)

        root.addLayout(main_col, stretch=3)
        root.addWidget(self.panel)

    def _new_canvas(self) -> QLabel:
        label = QLabel("")
        label.setAlignment(Qt.AlignCenter)
        label.setFixedSize(CANVAS_WIDTH, CANVAS_HEIGHT)
        label.setStyleSheet("border: 1px solid #888; background: #f0f0f0; color: #999;")
        return label

    @staticmethod
    def _captioned(caption: str, canvas: QLabel) -> QVBoxLayout:
        column = QVBoxLayout()
        column.addWidget(QLabel(caption))
        column.addWidget(canvas)
        return column

    def _build_toolbar(self) -> QHBoxLayout:
        toolbar = QHBoxLayout()

        for category, operations in TOOLBAR_GROUPS:
            if category == CATEGORY_KERNEL:
                # Kernel filters share one drop-up menu
                button = QPushButton("Kernel Filters ▴")
                menu = QMenu(button)
                for operation, label in operations:
                    action = menu.addAction(label)
                    action.triggered.connect(
                        lambda _checked=False, op=operation, cat=category: self.select_operation(op, cat)
                    )
                button.clicked.connect(
                    lambda _checked=False, b=button, m=menu: self._show_drop_up(b, m)
                )
                self.kernel_menu = menu
                toolbar.addWidget(button)
                continue

            for operation, label in operations:
                button = QPushButton(label)
                button.setToolTip(operation)
                button.clicked.connect(
                    lambda _checked=False, op=operation, cat=category: self.select_operation(op, cat)
                )
                self.operation_buttons[operation] = button
                toolbar.addWidget(button)

        toolbar.addStretch(1)
        return toolbar

    @staticmethod
    def _show_drop_up(button: QPushButton, menu: QMenu) -> None:
        # Open above the button
        anchor = button.mapToGlobal(button.rect().topLeft())
        menu.exec_(QPoint(anchor.x(), anchor.y() - menu.sizeHint().height()))

    def _connect_signals(self) -> None:
        self.btn_clear_output.clicked.connect(self.clear_output)
        self.btn_new_upload.clicked.connect(self.new_upload)
        self.btn_use_output.clicked.connect(self.use_output_as_input)
        self.btn_download.clicked.connect(self.download_output)
        self.panel.previewRequested.connect(self.preview_operation)
        self.panel.applyRequested.connect(self.apply_operation)
        self.panel.cancelRequested.connect(self.cancel_operation)
        self.panel.closeRequested.connect(self.cancel_operation)

    # ------------------------------------------------------------------
    # Input
    # ------------------------------------------------------------------

    def load_image(self, file_path: Path) -> bool:
        try:
            self.session.load_image(Path(file_path))
        except (FileNotFoundError, ValueError, OSError) as e:
            logger.error(f"Failed to load image: {str(e)}")
            QMessageBox.critical(self, "Load Failed", str(e))
            return False

        self.btn_use_output.setVisible(False)
        self.refresh_canvases()
        self._update_title()
        return True

    def prompt_upload(self) -> bool:
        patterns = " ".join(f"*{ext}" for ext in get_supported_formats())
        file_path, _ = QFileDialog.getOpenFileName(self, "Upload Image", "", f"Images ({patterns})")
        if not file_path:
            return False
        return self.load_image(Path(file_path))

    # ------------------------------------------------------------------
    # Operations
    # ------------------------------------------------------------------

    def select_operation(self, operation: str, category: str) -> None:
        if not self.session.state.has_source:
            QMessageBox.warning(self, "No Image", "Please load an image first.")
            return

        metadata = self.session.select_operation(operation, category)
        self.panel.set_operation(metadata)
        self.panel.setVisible(True)

    def preview_operation(self) -> None:
        outcome = self._run(self.session.preview)
        if outcome is None:
            return
        show_on_canvas(self.label_output, outcome.image)
        self._show_histograms(outcome)

    def apply_operation(self) -> None:
        outcome = self._run(self.session.apply)
        if outcome is None:
            return
        show_on_canvas(self.label_output, outcome.image)
        self._show_histograms(outcome)
        self.btn_use_output.setVisible(True)

    def _run(self, action) -> Optional[OperationOutcome]:
        try:
            return action(self.panel.control_values())
        except EditorError as e:
            QMessageBox.warning(self, "PreViz", str(e))
            return None

    def _show_histograms(self, outcome: OperationOutcome) -> None:
        if outcome.histograms:
            self.panel.show_histograms(*outcome.histograms)

    def cancel_operation(self) -> None:
        self.session.cancel_operation()
        self.panel.setVisible(False)

    # ------------------------------------------------------------------
    # Top bar
    # ------------------------------------------------------------------

    def clear_output(self) -> None:
        self.session.clear_output()
        self.panel.setVisible(False)
        self.btn_use_output.setVisible(False)
        self.refresh_canvases()

    def new_upload(self) -> None:
        reply = QMessageBox.question(
            self,
            "New Upload",
            "Discard the current image and upload a new one?",
            QMessageBox.Yes | QMessageBox.No,
        )
        if reply != QMessageBox.Yes:
            return

        self.session.new_upload()
        self.panel.setVisible(False)
        self.btn_use_output.setVisible(False)
        self.refresh_canvases()
        self._update_title()
        self.prompt_upload()

    def use_output_as_input(self) -> None:
        if not self.session.state.has_result:
            QMessageBox.warning(self, "PreViz", "No output available to use as input")
            return

        reply = QMessageBox.question(
            self,
            "Use Output as Input",
            "Replace the input image with the current output?",
            QMessageBox.Yes | QMessageBox.No,
        )
        if reply != QMessageBox.Yes:
            return

        try:
            self.session.use_output_as_input()
        except EditorError as e:
            QMessageBox.warning(self, "PreViz", str(e))
            return

        self.panel.setVisible(False)
        self.btn_use_output.setVisible(False)
        self.refresh_canvases()
        self._update_title()

    def download_output(self) -> None:
        if self.session.state.get_active() is None:
            QMessageBox.warning(self, "PreViz", "No image to download.")
            return

        folder = QFileDialog.getExistingDirectory(self, "Select Download Directory")
        if not folder:
            return

        try:
            saved_path = self.session.download(Path(folder))
        except EditorError as e:
            QMessageBox.warning(self, "PreViz", str(e))
            return
        except OSError as e:
            logger.error(f"Download failed: {str(e)}")
            QMessageBox.critical(self, "Download Failed", str(e))
            return

        QMessageBox.information(self, "Success", f"Image saved to {saved_path}")

    # ------------------------------------------------------------------
    # Display
    # ------------------------------------------------------------------

    def refresh_canvases(self) -> None:
        state = self.session.state
        show_on_canvas(self.label_input, state.get_source(), INPUT_PLACEHOLDER)
        show_on_canvas(self.label_output, state.get_active(), OUTPUT_PLACEHOLDER)

    def _update_title(self) -> None:
        record = self.session.record
        if record is None:
            self.setWindowTitle(WINDOW_TITLE)
        else:
            self.setWindowTitle(f"{WINDOW_TITLE} - {record.path.name} ({record.size_label})")

    def closeEvent(self, event) -> None:
        self.session.state.free_all()
        event.accept()
