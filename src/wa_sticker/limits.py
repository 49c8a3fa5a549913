"""WhatsApp sticker platform limits.

Downstream callers branch on these values directly, so every limit used by the
validator and the transcoder is exposed here under a stable name.
"""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class WhatsAppLimits:
    # File size limits in bytes
    STATIC_MAX_SIZE: int = 100 * 1024
    ANIMATED_MAX_SIZE: int = 500 * 1024
    TRAY_ICON_MAX_SIZE: int = 50 * 1024

    # Dimensions in pixels
    STICKER_SIZE: int = 512
    TRAY_ICON_SIZE: int = 96

    # Metadata
    PACK_NAME_MAX_LENGTH: int = 128
    AUTHOR_MAX_LENGTH: int = 128
    ID_MAX_LENGTH: int = 128

    # Emoji categories per sticker
    MAX_CATEGORIES_PER_STICKER: int = 3
    MIN_CATEGORIES_PER_STICKER: int = 1

    # Packs
    MIN_STICKERS_PER_PACK: int = 3
    MAX_STICKERS_PER_PACK: int = 30
    MAX_PACKS_PER_APP: int = 10

    # Animation
    MAX_ANIMATION_DURATION: int = 10  # seconds
    MIN_FRAME_DURATION: int = 8  # milliseconds
    HIGH_FRAME_COUNT: int = 150  # ~15fps for the full 10 seconds

    # Recommendations
    RECOMMENDED_QUALITY_MIN: int = 75
    RECOMMENDED_FILE_SIZE: int = 15 * 1024


WHATSAPP_LIMITS = WhatsAppLimits()

ID_PATTERN = r"[a-zA-Z0-9_\-. ]+"

__all__ = ["WHATSAPP_LIMITS", "WhatsAppLimits", "ID_PATTERN"]
