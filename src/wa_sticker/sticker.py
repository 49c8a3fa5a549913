"""Sticker assembly: resolve input, convert, embed metadata, validate."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, Dict, Optional, Sequence
from uuid import uuid4

from .config import Settings, get_settings
from .converters import REGISTRY, load_converters_from_settings
from .converters.base import TRANSPARENT, Color, ConversionInput, ConversionResult
from .converters.builtin.static_image import parse_color
from .exif import add_metadata, extract_metadata
from .models import MediaKind, StickerMetadata, StickerType
from .monitoring import record_sticker_built
from .sources import StickerSource, load_source, sniff_kind
from .transcoder import AdaptiveTranscoder
from .validation import ComplianceReport, ComplianceValidator, generate_report

logger = logging.getLogger(__name__)

_TRANSCODED_KINDS = {MediaKind.VIDEO, MediaKind.ANIMATED}


def generate_sticker_id() -> str:
    return uuid4().hex


class Sticker:
    """A sticker built from a file path, URL, inline SVG or raw bytes.

    Metadata attributes (``pack``, ``author``, ``id``, ``categories``) and the
    shaping options (``type``, ``quality``, ``background``) may be changed
    between builds.
    """

    def __init__(
        self,
        data: StickerSource,
        *,
        pack: str = "",
        author: str = "",
        id: Optional[str] = None,
        categories: Sequence[str] = (),
        type: StickerType | str | None = None,
        quality: Optional[int] = None,
        background: Color = TRANSPARENT,
        settings: Settings | None = None,
        transcoder: AdaptiveTranscoder | None = None,
        validator: ComplianceValidator | None = None,
    ) -> None:
        self.settings = settings or get_settings()
        self.data = data
        self.pack = pack
        self.author = author
        self.id = id if id is not None else generate_sticker_id()
        self.categories = tuple(categories)
        self.type = StickerType.parse(type or self.settings.default_type)
        self.quality = self.settings.static.default_quality if quality is None else quality
        self.background = background
        self.transcoder = transcoder
        self.validator = validator or ComplianceValidator()
        self.last_result: ConversionResult | None = None

    @property
    def metadata(self) -> StickerMetadata:
        return StickerMetadata(pack=self.pack, author=self.author, id=self.id, categories=self.categories)

    @property
    def default_filename(self) -> str:
        return f"./{self.pack}-{self.author}.webp"

    def _converter_kwargs(self, kind: MediaKind) -> Dict[str, Any]:
        kwargs: Dict[str, Any] = {"settings": self.settings}
        if kind in _TRANSCODED_KINDS and self.transcoder is not None:
            kwargs["transcoder"] = self.transcoder
        return kwargs

    def build(self) -> bytes:
        parse_color(self.background)
        fetch = self.settings.fetch
        raw = load_source(self.data, timeout=fetch.timeout_sec, max_bytes=fetch.max_size_mb * 1024 * 1024)
        kind = sniff_kind(raw)
        load_converters_from_settings(self.settings)
        converter = REGISTRY.get(kind, **self._converter_kwargs(kind))
        logger.debug("Building %s sticker with %s", kind.value, converter.slug)

        try:
            result = converter.convert(
                ConversionInput(
                    data=raw,
                    kind=kind,
                    sticker_type=self.type,
                    quality=self.quality,
                    background=self.background,
                    target_size_bytes=self.settings.transcode.target_size_bytes,
                )
            )
            buffer = add_metadata(result.buffer, self.metadata)
        except Exception:
            record_sticker_built(kind.value, "failed")
            raise

        if result.transcode is not None and not result.transcode.within_target:
            logger.warning(
                "Animated sticker is %.1fKB, over the %.1fKB target",
                len(result.buffer) / 1024,
                self.settings.transcode.target_size_bytes / 1024,
            )
        record_sticker_built(kind.value, "ok")
        self.last_result = result
        return buffer

    to_buffer = build

    def to_file(self, filename: str | Path | None = None) -> Path:
        path = Path(filename or self.default_filename)
        path.write_bytes(self.build())
        return path

    def to_message(self) -> Dict[str, bytes]:
        return {"sticker": self.build()}

    def validate(self) -> ComplianceReport:
        return self.validator.validate(self.build(), self.metadata)

    def compliance_report(self) -> str:
        return generate_report(self.validate())

    extract_metadata = staticmethod(extract_metadata)


def create_sticker(data: StickerSource, **options: Any) -> bytes:
    return Sticker(data, **options).build()
