"""Decode-level inspection of image buffers via Pillow."""

from __future__ import annotations

import io
from dataclasses import dataclass

from PIL import Image


@dataclass(frozen=True)
class ImageProbe:
    format: str
    width: int
    height: int
    frames: int

    @property
    def is_animated(self) -> bool:
        return self.frames > 1


def probe_image(buffer: bytes) -> ImageProbe:
    """Read format, size and frame count without trusting any caller claims.

    Raises whatever Pillow raises for unreadable data (``UnidentifiedImageError``
    is an ``OSError``).
    """
    with Image.open(io.BytesIO(buffer)) as image:
        width, height = image.size
        return ImageProbe(
            format=(image.format or "").upper(),
            width=width,
            height=height,
            frames=int(getattr(image, "n_frames", 1) or 1),
        )
