"""Display adapters for the CHIP-8 interpreter."""

from .framebuffer import FrameBuffer, ImageRenderer
from .render import bitmap_to_array, bitmap_to_image, bitmap_to_text

__all__ = [
    "FrameBuffer",
    "ImageRenderer",
    "bitmap_to_array",
    "bitmap_to_image",
    "bitmap_to_text",
]
