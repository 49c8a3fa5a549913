"""Converters sending video and animated images through the adaptive transcoder."""

from __future__ import annotations

from typing import TYPE_CHECKING

from ...models import MediaKind, StickerType
from ...sources import animated_webp_to_gif
from ...transcoder import AdaptiveTranscoder, build_transcoder
from ..base import ConversionInput, ConversionResult, StickerConverter
from ..registry import REGISTRY

if TYPE_CHECKING:  # pragma: no cover
    from ...config import Settings


class VideoToWebpConverter(StickerConverter):
    slug = "video-to-webp"
    media_kind = MediaKind.VIDEO

    def __init__(
        self, settings: "Settings | None" = None, transcoder: AdaptiveTranscoder | None = None
    ) -> None:
        super().__init__(settings)
        self.transcoder = transcoder or build_transcoder(self.settings)

    def prepare(self, data: bytes) -> bytes:
        return data

    def convert(self, payload: ConversionInput) -> ConversionResult:
        fit = "crop" if payload.sticker_type is StickerType.CROPPED else "pad"
        data = payload.data
        if not self.transcoder.can_pass_through(data, payload.target_size_bytes):
            data = self.prepare(data)
        result = self.transcoder.transcode(data, payload.target_size_bytes, fit=fit)
        metadata = {
            "note": "Transcoded via FFmpeg",
            "within_target": result.within_target,
            "preset": result.chosen_preset.describe() if result.chosen_preset else None,
        }
        return ConversionResult(buffer=result.buffer, animated=True, transcode=result, metadata=metadata)


class AnimatedImageToWebpConverter(VideoToWebpConverter):
    slug = "animated-to-webp"
    media_kind = MediaKind.ANIMATED

    def prepare(self, data: bytes) -> bytes:
        # ffmpeg has no animated WebP decoder
        return animated_webp_to_gif(data)


for converter_cls in (VideoToWebpConverter, AnimatedImageToWebpConverter):
    REGISTRY.register(converter_cls)
