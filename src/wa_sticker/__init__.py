"""WhatsApp sticker conversion, metadata embedding and compliance checks."""

from __future__ import annotations

from typing import TYPE_CHECKING

from .errors import CodecError, StickerError, StickerInputError, TranscodeExhausted
from .exif import add_metadata, extract_metadata
from .ladder import presets
from .limits import WHATSAPP_LIMITS
from .models import EncodingPreset, StickerMetadata, StickerType, TranscodeResult
from .sticker import Sticker, create_sticker
from .transcoder import AdaptiveTranscoder
from .validation import ComplianceReport, ComplianceValidator, generate_report, validate

if TYPE_CHECKING:  # pragma: no cover
    from fastapi import FastAPI


def create_app() -> "FastAPI":
    from .app import create_app as _create_app

    return _create_app()


__all__ = [
    "AdaptiveTranscoder",
    "CodecError",
    "ComplianceReport",
    "ComplianceValidator",
    "EncodingPreset",
    "Sticker",
    "StickerError",
    "StickerInputError",
    "StickerMetadata",
    "StickerType",
    "TranscodeExhausted",
    "TranscodeResult",
    "WHATSAPP_LIMITS",
    "add_metadata",
    "create_app",
    "create_sticker",
    "extract_metadata",
    "generate_report",
    "presets",
    "validate",
]
