"""
Pillow access point for PreViz.

Pillow is loaded through importlib so the rest of the package imports
file decoding and encoding from one place. Re-exports `Image` (the
PIL.Image module) and `UnidentifiedImageError`, which `Image.open` raises
for bytes that are not a decodable image.
"""
from importlib import import_module
from types import ModuleType
from typing import Optional


def _import(name: str) -> Optional[ModuleType]:
    try:
        return import_module(name)
    except ImportError:
        return None


_pil = _import("PIL")
_pil_image = _import("PIL.Image")

if _pil is None or _pil_image is None:
    raise ImportError("pillow (PIL) is required: install with 'pip install Pillow'")

Image = _pil_image

UnidentifiedImageError = _pil.UnidentifiedImageError
