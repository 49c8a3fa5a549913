"""Value types shared by the sticker pipeline."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Optional, Sequence, Tuple

from .limits import WHATSAPP_LIMITS


class StickerType(str, Enum):
    """How a static image is shaped onto the 512x512 canvas."""

    DEFAULT = "default"
    CROPPED = "crop"
    FULL = "full"
    CIRCLE = "circle"
    ROUNDED = "rounded"

    @classmethod
    def parse(cls, value: "StickerType | str | None") -> "StickerType":
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value).lower())
        except ValueError:
            return cls.DEFAULT


class MediaKind(str, Enum):
    IMAGE = "image"
    ANIMATED = "animated"
    VIDEO = "video"
    SVG = "svg"


@dataclass(frozen=True)
class StickerMetadata:
    pack: str = ""
    author: str = ""
    id: str = ""
    categories: Tuple[str, ...] = ()

    def __post_init__(self) -> None:
        # accept lists from callers while keeping the value hashable
        object.__setattr__(self, "categories", tuple(self.categories or ()))

    def to_raw(self) -> Dict[str, Any]:
        """Container JSON as stored inside the WebP EXIF chunk."""
        return {
            "sticker-pack-id": self.id,
            "sticker-pack-name": self.pack,
            "sticker-pack-publisher": self.author,
            "emojis": list(self.categories),
        }

    @classmethod
    def from_raw(cls, raw: Dict[str, Any]) -> "StickerMetadata":
        return cls(
            pack=str(raw.get("sticker-pack-name") or ""),
            author=str(raw.get("sticker-pack-publisher") or ""),
            id=str(raw.get("sticker-pack-id") or ""),
            categories=tuple(str(emoji) for emoji in raw.get("emojis") or ()),
        )


@dataclass(frozen=True)
class EncodingPreset:
    """One rung of the quality ladder."""

    quality: int
    frame_rate: float
    max_duration_seconds: float
    compression_effort: int = 6
    decimate_duplicate_frames: bool = False

    def __post_init__(self) -> None:
        if not 0 <= self.quality <= 100:
            raise ValueError(f"quality must be within 0-100, got {self.quality}")
        if self.frame_rate <= 0:
            raise ValueError("frame_rate must be positive")
        if self.max_duration_seconds <= 0:
            raise ValueError("max_duration_seconds must be positive")
        if self.max_duration_seconds > WHATSAPP_LIMITS.MAX_ANIMATION_DURATION:
            raise ValueError(
                f"max_duration_seconds exceeds {WHATSAPP_LIMITS.MAX_ANIMATION_DURATION}s animation limit"
            )
        if 1000.0 / self.frame_rate < WHATSAPP_LIMITS.MIN_FRAME_DURATION:
            raise ValueError(
                f"frame_rate {self.frame_rate} gives frames shorter than "
                f"{WHATSAPP_LIMITS.MIN_FRAME_DURATION}ms"
            )
        if not 0 <= self.compression_effort <= 6:
            raise ValueError("compression_effort must be within 0-6")

    def describe(self) -> Dict[str, Any]:
        return {
            "quality": self.quality,
            "frame_rate": self.frame_rate,
            "max_duration_seconds": self.max_duration_seconds,
            "compression_effort": self.compression_effort,
            "decimate_duplicate_frames": self.decimate_duplicate_frames,
        }


@dataclass(frozen=True)
class TranscodeAttempt:
    preset: EncodingPreset
    output_buffer: Optional[bytes] = None
    size_bytes: int = 0
    succeeded: bool = False
    error: Optional[str] = None


@dataclass(frozen=True)
class TranscodeResult:
    buffer: bytes
    chosen_preset: Optional[EncodingPreset]
    within_target: bool
    attempts: Sequence[TranscodeAttempt] = field(default=(), repr=False)

    @property
    def size_bytes(self) -> int:
        return len(self.buffer)
