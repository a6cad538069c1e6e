"""
Options panel built from operation metadata.

The panel shows the selected operation's title, description, warnings
and controls, and reads the control values back as a parameter dict keyed
by control id. Preview, Apply, Cancel and Close are re-emitted as signals
for the editor window.
"""

import math
from typing import Any, Callable, Dict, List, Optional, Tuple

import numpy as np
from PyQt5.QtCore import Qt, pyqtSignal
from PyQt5.QtGui import QColor
from PyQt5.QtWidgets import (
    QCheckBox,
    QColorDialog,
    QComboBox,
    QDoubleSpinBox,
    QFormLayout,
    QGroupBox,
    QHBoxLayout,
    QLabel,
    QPushButton,
    QSlider,
    QSpinBox,
    QVBoxLayout,
    QWidget,
)

from PV_Libs.constants import OPTIONS_PANEL_WIDTH
from PV_Libs.EditorUILib.qt_image import show_scaled
from PV_Libs.OpsRegistryLib.operation_metadata import ControlSpec, OperationMetadata

ValueReader = Callable[[], Any]


def _decimals_for_step(step: float) -> int:
    if step >= 1:
        return 0
    return max(1, int(math.ceil(-math.log10(step))))


def _snap_to_step(value: float, min_value: float, max_value: float, step: float) -> float:
    """Nearest value on the ``min + k * step`` grid, halves rounding up."""
    steps = math.floor((value - min_value) / step + 0.5)
    snapped = min_value + steps * step
    while snapped > max_value:
        snapped -= step
    return max(min_value, snapped)


class OperationPanel(QWidget):
    """Right-hand options panel for one operation."""

    previewRequested = pyqtSignal()
    applyRequested = pyqtSignal()
    cancelRequested = pyqtSignal()
    closeRequested = pyqtSignal()

    def __init__(self, parent=None) -> None:
        super().__init__(parent)
        self.setFixedWidth(OPTIONS_PANEL_WIDTH)

        self.metadata: Optional[OperationMetadata] = None
        self._readers: Dict[str, ValueReader] = {}
        self.sliders: Dict[str, QSlider] = {}
        self._histogram_labels: List[QLabel] = []
        self.metrics_label: Optional[QLabel] = None

        self._build_ui()
        self._connect_signals()

    def _build_ui(self) -> None:
        root = QVBoxLayout(self)

        self.label_title = QLabel("")
        self.label_title.setStyleSheet("font-weight: bold; font-size: 14px;")
        self.label_description = QLabel("")
        self.label_description.setWordWrap(True)

        self.controls_container = QWidget(self)
        self.controls_layout = QVBoxLayout(self.controls_container)
        self.controls_layout.setContentsMargins(0, 0, 0, 0)

        self.btn_preview = QPushButton("Preview")
        self.btn_apply = QPushButton("Apply")
        self.btn_cancel = QPushButton("Cancel")
        self.btn_close = QPushButton("Close")

        buttons = QHBoxLayout()
        buttons.addWidget(self.btn_preview)
        buttons.addWidget(self.btn_apply)
        buttons.addWidget(self.btn_cancel)

        root.addWidget(self.btn_close, alignment=Qt.AlignRight)
        root.addWidget(self.label_title)
        root.addWidget(self.label_description)
        root.addWidget(self.controls_container)
        root.addStretch(1)
        root.addLayout(buttons)

    def _connect_signals(self) -> None:
        self.btn_preview.clicked.connect(self.previewRequested.emit)
        self.btn_apply.clicked.connect(self.applyRequested.emit)
        self.btn_cancel.clicked.connect(self.cancelRequested.emit)
        self.btn_close.clicked.connect(self.closeRequested.emit)

    # ------------------------------------------------------------------
    # Building
    # ------------------------------------------------------------------

    def set_operation(self, metadata: OperationMetadata) -> None:
        """Rebuild the panel for an operation."""
        self._clear_controls()
        self.metadata = metadata
        self.label_title.setText(metadata.title)
        self.label_description.setText(metadata.description)

        for warning in metadata.warnings:
            label = QLabel(f"⚠ {warning}")
            label.setWordWrap(True)
            label.setStyleSheet(
                "background: #fff3cd; color: #856404; padding: 6px; border-radius: 4px;"
            )
            self.controls_layout.addWidget(label)

        form = QFormLayout()
        for control in metadata.controls:
            self._add_control(form, control)
        self.controls_layout.addLayout(form)

        for extra in metadata.extras:
            self._add_extra(extra)

    def _clear_controls(self) -> None:
        self._readers.clear()
        self.sliders.clear()
        self._histogram_labels = []
        self.metrics_label = None
        self._clear_layout(self.controls_layout)

    def _clear_layout(self, layout) -> None:
        while layout.count():
            item = layout.takeAt(0)
            widget = item.widget()
            if widget is not None:
                widget.deleteLater()
            elif item.layout() is not None:
                self._clear_layout(item.layout())
                item.layout().deleteLater()

    def _add_control(self, form: QFormLayout, control: ControlSpec) -> None:
        if control.type == "info":
            label = QLabel(control.text)
            label.setWordWrap(True)
            label.setStyleSheet("background: #e7f1ff; padding: 6px; border-radius: 4px;")
            form.addRow(label)
            return

        if control.type == "slider":
            widget, reader = self._create_slider(control)
            form.addRow(control.label, widget)
            if control.hint:
                hint = QLabel(control.hint)
                hint.setStyleSheet("color: #666; font-size: 10px;")
                form.addRow("", hint)
        elif control.type == "select":
            widget, reader = self._create_select(control)
            form.addRow(control.label, widget)
        elif control.type == "checkbox":
            widget, reader = self._create_checkbox(control)
            form.addRow(widget)
        elif control.type == "color":
            widget, reader = self._create_color(control)
            form.addRow(control.label, widget)
        else:
            self._add_checkbox_group(form, control)
            return

        self._readers[control.id] = reader

    def _create_slider(self, control: ControlSpec) -> Tuple[QWidget, ValueReader]:
        min_value = float(control.min if control.min is not None else 0)
        max_value = float(control.max if control.max is not None else 100)
        step = float(control.step or 1)
        value = float(control.value if control.value is not None else min_value)
        decimals = _decimals_for_step(step)
        scale = 10 ** decimals

        container = QWidget(self)
        row = QHBoxLayout(container)
        row.setContentsMargins(0, 0, 0, 0)

        slider = QSlider(Qt.Horizontal, self)
        slider.setMinimum(int(round(min_value * scale)))
        slider.setMaximum(int(round(max_value * scale)))
        slider.setSingleStep(max(1, int(round(step * scale))))
        row.addWidget(slider, stretch=3)

        if decimals == 0:
            spin = QSpinBox(self)
            spin.setMinimum(int(min_value))
            spin.setMaximum(int(max_value))
            spin.setSingleStep(max(1, int(step)))
            spin.setValue(int(round(value)))
        else:
            spin = QDoubleSpinBox(self)
            spin.setDecimals(decimals)
            spin.setMinimum(min_value)
            spin.setMaximum(max_value)
            spin.setSingleStep(step)
            spin.setValue(value)

        def snapped() -> float:
            return round(_snap_to_step(float(spin.value()), min_value, max_value, step), decimals)

        def on_slider_change(raw: int) -> None:
            # Dragging can land between steps (e.g. 4 on an odd-only kernel slider)
            on_grid = round(_snap_to_step(float(raw) / scale, min_value, max_value, step), decimals)
            spin.blockSignals(True)
            spin.setValue(int(round(on_grid)) if decimals == 0 else on_grid)
            spin.blockSignals(False)

        def on_spin_change(new_value) -> None:
            slider.blockSignals(True)
            slider.setValue(int(round(new_value * scale)))
            slider.blockSignals(False)

        slider.valueChanged.connect(on_slider_change)
        spin.valueChanged.connect(on_spin_change)
        slider.setValue(int(round(spin.value() * scale)))
        row.addWidget(spin, stretch=1)
        self.sliders[control.id] = slider

        return container, snapped

    def _create_select(self, control: ControlSpec) -> Tuple[QWidget, ValueReader]:
        combo = QComboBox(self)
        combo.addItems([str(option) for option in control.options])
        if control.value is not None:
            index = combo.findText(str(control.value))
            if index >= 0:
                combo.setCurrentIndex(index)
        return combo, combo.currentText

    def _create_checkbox(self, control: ControlSpec) -> Tuple[QWidget, ValueReader]:
        checkbox = QCheckBox(control.label, self)
        checkbox.setChecked(bool(control.checked))
        return checkbox, checkbox.isChecked

    def _create_color(self, control: ControlSpec) -> Tuple[QWidget, ValueReader]:
        button = QPushButton(self)
        current = {"color": QColor(control.value or "#ff0000")}

        def refresh_chip() -> None:
            name = current["color"].name()
            button.setText(name)
            button.setStyleSheet(f"background: {name};")

        def choose_color() -> None:
            color = QColorDialog.getColor(current["color"], self, control.label or "Pick color")
            if color.isValid():
                current["color"] = color
                refresh_chip()

        button.clicked.connect(choose_color)
        refresh_chip()
        return button, lambda: current["color"].name()

    def _add_checkbox_group(self, form: QFormLayout, control: ControlSpec) -> None:
        group = QGroupBox(control.label, self)
        layout = QVBoxLayout(group)
        for option in control.options:
            checkbox, reader = self._create_checkbox(option)
            layout.addWidget(checkbox)
            self._readers[option.id] = reader
        form.addRow(group)

    def _add_extra(self, extra: str) -> None:
        if extra == "histogram":
            label = self._new_histogram_label("Histogram")
            self._histogram_labels = [label]
        elif extra == "histogram-comparison":
            before = self._new_histogram_label("Before")
            after = self._new_histogram_label("After")
            self._histogram_labels = [before, after]
        elif extra == "metrics-output":
            self.metrics_label = QLabel("")
            self.metrics_label.setWordWrap(True)
            self.metrics_label.setStyleSheet("font-family: monospace;")
            self.controls_layout.addWidget(self.metrics_label)

    def _new_histogram_label(self, caption: str) -> QLabel:
        self.controls_layout.addWidget(QLabel(caption))
        label = QLabel("")
        label.setAlignment(Qt.AlignCenter)
        label.setFixedSize(OPTIONS_PANEL_WIDTH - 40, 80)
        label.setStyleSheet("border: 1px solid #ccc; background: white;")
        self.controls_layout.addWidget(label)
        return label

    # ------------------------------------------------------------------
    # Reading back
    # ------------------------------------------------------------------

    def control_values(self) -> Dict[str, Any]:
        """Current parameter dict keyed by control id."""
        return {control_id: reader() for control_id, reader in self._readers.items()}

    def show_histograms(self, *images: np.ndarray) -> None:
        """Show rendered histogram images in the panel's histogram slots, in order."""
        for label, image in zip(self._histogram_labels, images):
            show_scaled(label, image)
