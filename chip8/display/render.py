"""Bitmap conversion helpers: numpy arrays, text frames and PIL images."""

from __future__ import annotations

from typing import Tuple

import numpy as np
from PIL import Image

from ..constants import DISPLAY_HEIGHT, DISPLAY_WIDTH
from ..interfaces import Bitmap

_COLUMN_BITS = np.arange(DISPLAY_WIDTH, dtype=np.uint64)


def bitmap_to_array(bitmap: Bitmap) -> np.ndarray:
    """Expand packed rows into a ``(32, 64)`` uint8 array of 0/1 pixels."""

    rows = np.array([int(row) for row in bitmap], dtype=np.uint64)
    if rows.shape != (DISPLAY_HEIGHT,):
        raise ValueError(f"expected {DISPLAY_HEIGHT} rows, got {rows.shape[0]}")
    return ((rows[:, None] >> _COLUMN_BITS[None, :]) & np.uint64(1)).astype(np.uint8)


def bitmap_to_text(bitmap: Bitmap, on: str = "#", off: str = ".") -> str:
    pixels = bitmap_to_array(bitmap)
    return "\n".join("".join(on if px else off for px in row) for row in pixels)


def bitmap_to_image(
    bitmap: Bitmap,
    zoom: int = 1,
    on_color: Tuple[int, int, int] = (255, 255, 255),
    off_color: Tuple[int, int, int] = (0, 0, 0),
) -> Image.Image:
    """Render the bitmap as an RGB image, each pixel a ``zoom``-sized block."""

    if zoom < 1:
        raise ValueError(f"zoom must be >= 1, got {zoom}")
    pixels = bitmap_to_array(bitmap)
    rgb = np.empty((DISPLAY_HEIGHT, DISPLAY_WIDTH, 3), dtype=np.uint8)
    rgb[pixels == 1] = on_color
    rgb[pixels == 0] = off_color
    if zoom > 1:
        rgb = rgb.repeat(zoom, axis=0).repeat(zoom, axis=1)
    return Image.fromarray(rgb)


__all__ = ["bitmap_to_array", "bitmap_to_image", "bitmap_to_text"]
