"""
NumPy to Qt image conversion.

Qt does not own the NumPy buffer, so every QImage built here is detached
with ``copy()`` before the array can go out of scope.
"""

from typing import Optional

import numpy as np
from PyQt5.QtCore import Qt
from PyQt5.QtGui import QImage, QPixmap
from PyQt5.QtWidgets import QLabel

from PV_Libs.constants import CANVAS_HEIGHT, CANVAS_WIDTH
from PV_Libs.ImageOpsLib.image_io import compose_display
from PV_Libs.ImageOpsLib.image_models import channels, validate_image


def ndarray_to_qimage(image: np.ndarray) -> QImage:
    """
    Convert a gray, RGB or RGBA uint8 array to a QImage.

    Raises:
        TypeError: If image is not a NumPy array
        ValueError: If the array is not a supported image
    """
    validate_image(image)
    count = channels(image)
    pixels = np.ascontiguousarray(image.reshape(image.shape[:2]) if count == 1 else image)
    height, width = pixels.shape[:2]

    if count == 1:
        qformat = QImage.Format_Grayscale8
    elif count == 3:
        qformat = QImage.Format_RGB888
    else:
        qformat = QImage.Format_RGBA8888

    qimage = QImage(pixels.data, width, height, int(pixels.strides[0]), qformat)
    return qimage.copy()


def ndarray_to_qpixmap(image: np.ndarray) -> QPixmap:
    return QPixmap.fromImage(ndarray_to_qimage(image))


def show_on_canvas(label: QLabel, image: Optional[np.ndarray], placeholder: str = "") -> None:
    """Draw an image fitted and centred on a canvas label, or show placeholder text."""
    if image is None:
        label.setPixmap(QPixmap())
        label.setText(placeholder)
        return

    canvas = compose_display(image, CANVAS_WIDTH, CANVAS_HEIGHT)
    label.setText("")
    label.setPixmap(ndarray_to_qpixmap(canvas))


def show_scaled(label: QLabel, image: np.ndarray) -> None:
    """Show an image scaled into a label, keeping its aspect ratio."""
    pixmap = ndarray_to_qpixmap(image)
    scaled = pixmap.scaled(label.width(), label.height(), Qt.KeepAspectRatio, Qt.SmoothTransformation)
    label.setPixmap(scaled)
