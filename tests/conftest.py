"""
Pytest configuration and shared fixtures for PreViz tests.

This module provides small synthetic images used across multiple
test modules, so no test depends on image files on disk.
"""

import numpy as np
import pytest


@pytest.fixture
def rgba_image():
    """
    Provide a 60x40 RGBA gradient.

    Red ramps left to right, green ramps top to bottom, blue is constant
    and alpha is opaque.
    """
    height, width = 40, 60
    image = np.zeros((height, width, 4), dtype=np.uint8)
    image[..., 0] = np.linspace(0, 255, width).astype(np.uint8)[None, :]
    image[..., 1] = np.linspace(0, 255, height).astype(np.uint8)[:, None]
    image[..., 2] = 80
    image[..., 3] = 255
    return image


@pytest.fixture
def gray_image():
    """Provide a 60x40 single-channel horizontal gradient."""
    height, width = 40, 60
    row = np.linspace(0, 255, width).astype(np.uint8)
    return np.tile(row, (height, 1))


@pytest.fixture
def binary_image():
    """
    Provide a 40x40 binary image: a white square ring around a black hole.

    The ring spans rows/cols 10-29, the hole rows/cols 15-24.
    """
    image = np.zeros((40, 40), dtype=np.uint8)
    image[10:30, 10:30] = 255
    image[15:25, 15:25] = 0
    return image


@pytest.fixture
def flat_image():
    """Provide a 30x30 gray image with every pixel set to 100."""
    return np.full((30, 30), 100, dtype=np.uint8)
