"""Converter shaping still images onto the 512x512 sticker canvas with Pillow."""

from __future__ import annotations

import io
from typing import Tuple

from PIL import Image, ImageChops, ImageColor, ImageDraw, ImageOps

from ...errors import StickerInputError
from ...limits import WHATSAPP_LIMITS
from ...models import MediaKind, StickerType
from ..base import TRANSPARENT, Color, ConversionInput, ConversionResult, StickerConverter
from ..registry import REGISTRY

CANVAS = (WHATSAPP_LIMITS.STICKER_SIZE, WHATSAPP_LIMITS.STICKER_SIZE)
ROUNDED_RADIUS = 50


def parse_color(color: Color) -> Tuple[int, int, int, int]:
    try:
        if isinstance(color, str):
            return ImageColor.getcolor(color, "RGBA")  # type: ignore[return-value]
        channels = tuple(color)
    except (TypeError, ValueError) as exc:
        raise StickerInputError(f"Invalid background colour {color!r}: {exc}") from exc
    if len(channels) not in (3, 4) or not all(isinstance(c, int) and 0 <= c <= 255 for c in channels):
        raise StickerInputError(f"Invalid background colour {color!r}")
    return channels if len(channels) == 4 else channels + (255,)  # type: ignore[return-value]


def _contain(image: Image.Image, background: Color) -> Image.Image:
    fitted = ImageOps.contain(image, CANVAS, Image.Resampling.LANCZOS)
    canvas = Image.new("RGBA", CANVAS, parse_color(background))
    offset = ((CANVAS[0] - fitted.width) // 2, (CANVAS[1] - fitted.height) // 2)
    canvas.alpha_composite(fitted, offset)
    return canvas


def _apply_mask(image: Image.Image, mask: Image.Image) -> Image.Image:
    alpha = ImageChops.multiply(image.getchannel("A"), mask)
    image.putalpha(alpha)
    return image


def circle_mask() -> Image.Image:
    mask = Image.new("L", CANVAS, 0)
    ImageDraw.Draw(mask).ellipse((0, 0, CANVAS[0] - 1, CANVAS[1] - 1), fill=255)
    return mask


def rounded_mask(radius: int = ROUNDED_RADIUS) -> Image.Image:
    mask = Image.new("L", CANVAS, 0)
    ImageDraw.Draw(mask).rounded_rectangle((0, 0, CANVAS[0] - 1, CANVAS[1] - 1), radius=radius, fill=255)
    return mask


def shape_image(image: Image.Image, sticker_type: StickerType, background: Color = TRANSPARENT) -> Image.Image:
    """Return a 512x512 RGBA image shaped according to ``sticker_type``."""

    image = image.convert("RGBA")
    if sticker_type is StickerType.FULL:
        return _contain(image, background)
    if sticker_type is StickerType.DEFAULT:
        return _contain(image, TRANSPARENT)

    cropped = ImageOps.fit(image, CANVAS, Image.Resampling.LANCZOS, centering=(0.5, 0.5))
    if sticker_type is StickerType.CIRCLE:
        return _apply_mask(cropped, circle_mask())
    if sticker_type is StickerType.ROUNDED:
        return _apply_mask(cropped, rounded_mask())
    return cropped


def encode_webp(image: Image.Image, quality: int) -> bytes:
    buffer = io.BytesIO()
    image.save(buffer, format="WEBP", quality=quality, method=6)
    return buffer.getvalue()


class ImageToWebpConverter(StickerConverter):
    slug = "image-to-webp"
    media_kind = MediaKind.IMAGE

    def convert(self, payload: ConversionInput) -> ConversionResult:
        with Image.open(io.BytesIO(payload.data)) as source:
            source = ImageOps.exif_transpose(source)
            shaped = shape_image(source, payload.sticker_type, payload.background)
        buffer = encode_webp(shaped, payload.quality)
        return ConversionResult(buffer=buffer, animated=False, metadata={"note": "Shaped via Pillow"})


REGISTRY.register(ImageToWebpConverter)
