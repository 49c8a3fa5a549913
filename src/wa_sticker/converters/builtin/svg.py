"""Converter rasterizing inline SVG with Inkscape before shaping it."""

from __future__ import annotations

import io
import subprocess

from PIL import Image

from ...errors import StickerInputError
from ...limits import WHATSAPP_LIMITS
from ...models import MediaKind
from ...scratch import ScratchStorage
from ..base import ConversionInput, ConversionResult, StickerConverter
from ..registry import REGISTRY
from .static_image import encode_webp, shape_image


class SvgToWebpConverter(StickerConverter):
    slug = "svg-to-webp"
    media_kind = MediaKind.SVG

    def rasterize(self, svg: bytes) -> bytes:
        scratch = ScratchStorage(self.settings.scratch_dir)
        with scratch.reserve(".svg", svg) as input_path, scratch.reserve(".png") as output_path:
            cmd = [
                self.settings.static.inkscape_binary,
                str(input_path),
                "--export-type=png",
                f"--export-width={WHATSAPP_LIMITS.STICKER_SIZE}",
                f"--export-filename={output_path}",
            ]
            try:
                subprocess.run(cmd, check=True, stdout=subprocess.PIPE, stderr=subprocess.PIPE)
            except (OSError, subprocess.CalledProcessError) as exc:
                raise StickerInputError(f"Failed to rasterize SVG: {exc}") from exc
            return output_path.read_bytes()

    def convert(self, payload: ConversionInput) -> ConversionResult:
        png = self.rasterize(payload.data)
        with Image.open(io.BytesIO(png)) as source:
            shaped = shape_image(source, payload.sticker_type, payload.background)
        buffer = encode_webp(shaped, payload.quality)
        return ConversionResult(buffer=buffer, animated=False, metadata={"note": "Rasterized via Inkscape CLI"})


REGISTRY.register(SvgToWebpConverter)
