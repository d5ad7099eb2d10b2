"""Headless ``Display`` adapters."""

from __future__ import annotations

from pathlib import Path
from typing import Callable, List, Optional, Tuple

from PIL import Image

from ..constants import DISPLAY_HEIGHT
from ..interfaces import Bitmap
from .render import bitmap_to_image, bitmap_to_text

Observer = Callable[[Tuple[int, ...]], None]


class FrameBuffer:
    """Keeps the most recent bitmap and notifies subscribers on every draw."""

    def __init__(self) -> None:
        self._frame: Tuple[int, ...] = (0,) * DISPLAY_HEIGHT
        self._observers: List[Observer] = []
        self.draw_count = 0

    @property
    def frame(self) -> Tuple[int, ...]:
        return self._frame

    def subscribe(self, observer: Observer) -> None:
        self._observers.append(observer)

    def draw(self, bitmap: Bitmap) -> None:
        self._frame = tuple(bitmap)
        self.draw_count += 1
        for observer in self._observers:
            observer(self._frame)

    def pixel(self, x: int, y: int) -> bool:
        return bool((self._frame[y] >> x) & 1)

    def to_text(self, on: str = "#", off: str = ".") -> str:
        return bitmap_to_text(self._frame, on=on, off=off)


class ImageRenderer(FrameBuffer):
    """Frame buffer that also keeps a PIL rendering of the latest frame."""

    def __init__(
        self,
        zoom: int = 8,
        on_color: Tuple[int, int, int] = (255, 255, 255),
        off_color: Tuple[int, int, int] = (0, 0, 0),
    ) -> None:
        super().__init__()
        self.zoom = zoom
        self.on_color = on_color
        self.off_color = off_color
        self._image: Optional[Image.Image] = None

    def draw(self, bitmap: Bitmap) -> None:
        super().draw(bitmap)
        # Re-rendered on next access.
        self._image = None

    @property
    def image(self) -> Image.Image:
        if self._image is None:
            self._image = bitmap_to_image(
                self.frame,
                zoom=self.zoom,
                on_color=self.on_color,
                off_color=self.off_color,
            )
        return self._image

    def save(self, path: str | Path) -> Path:
        target = Path(path)
        self.image.save(target)
        return target


__all__ = ["FrameBuffer", "ImageRenderer"]
