"""Base classes for sticker converters."""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Dict, Optional, Tuple, Union

from ..limits import WHATSAPP_LIMITS
from ..models import MediaKind, StickerType, TranscodeResult

if TYPE_CHECKING:  # pragma: no cover
    from ..config import Settings

Color = Union[str, Tuple[int, int, int], Tuple[int, int, int, int]]
TRANSPARENT: Tuple[int, int, int, int] = (0, 0, 0, 0)


@dataclass
class ConversionInput:
    data: bytes
    kind: MediaKind
    sticker_type: StickerType = StickerType.DEFAULT
    quality: int = 100
    background: Color = TRANSPARENT
    target_size_bytes: int = WHATSAPP_LIMITS.ANIMATED_MAX_SIZE


@dataclass
class ConversionResult:
    buffer: bytes
    animated: bool = False
    transcode: Optional[TranscodeResult] = None
    metadata: Dict[str, Any] | None = None


class StickerConverter(ABC):
    slug: str = ""
    media_kind: MediaKind = MediaKind.IMAGE

    def __init__(self, settings: "Settings | None" = None) -> None:
        if settings is None:
            from ..config import get_settings

            settings = get_settings()
        self.settings = settings
        self.slug = self.slug or f"{self.media_kind.value}-to-webp"

    @abstractmethod
    def convert(self, payload: ConversionInput) -> ConversionResult:
        """Produce an encoded WebP sticker body (without pack metadata)."""

    def describe(self) -> Dict[str, str]:
        return {
            "slug": self.slug,
            "source": self.media_kind.value,
            "target": "webp",
        }
