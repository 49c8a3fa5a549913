"""WhatsApp compliance validation for finished sticker buffers.

The validator re-derives everything it needs from the buffer itself: whether
the sticker is animated, its byte size and its pixel dimensions. Nothing an
upstream step claims about the buffer is trusted. Metadata is checked against
the character and count limits in :mod:`wa_sticker.limits`.

``validate`` always returns a report. Faults while decoding the buffer become a
single ``Validation failed`` error instead of an exception.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Mapping, Optional, Sequence, Tuple, Union

from .limits import ID_PATTERN, WHATSAPP_LIMITS
from .models import StickerMetadata
from .probe import ImageProbe, probe_image

_ID_RE = re.compile(ID_PATTERN)
_EMOJI_RE = re.compile(
    "[\U0001F600-\U0001F64F]|[\U0001F300-\U0001F5FF]|[\U0001F680-\U0001F6FF]|"
    "[\U0001F900-\U0001F9FF]|[\U0001F1E0-\U0001F1FF]|[☀-⛿]|[✀-➿]"
)

STROKE_ADVISORY = (
    "Consider adding an 8px white stroke around your sticker for better visibility "
    "on different backgrounds (as recommended by WhatsApp)"
)
NO_CATEGORIES_WARNING = (
    "No emoji categories provided. Adding 1-3 relevant emojis helps users discover "
    "your stickers through search"
)
ANIMATED_ADVISORY = (
    f"Animated sticker detected. Ensure animation duration is <={WHATSAPP_LIMITS.MAX_ANIMATION_DURATION} "
    f"seconds and frame duration is >={WHATSAPP_LIMITS.MIN_FRAME_DURATION}ms"
)


@dataclass(frozen=True)
class FileSizeCheck:
    size: int = 0
    is_valid: bool = True
    limit: int = 0
    kind: str = "static"


@dataclass(frozen=True)
class DimensionsCheck:
    width: int = 0
    height: int = 0
    is_valid: bool = True


@dataclass(frozen=True)
class FieldCheck:
    value: str = ""
    is_valid: bool = True
    limit: int = 0


@dataclass(frozen=True)
class CategoriesCheck:
    value: Tuple[str, ...] = ()
    is_valid: bool = True
    count: int = 0
    limit: int = WHATSAPP_LIMITS.MAX_CATEGORIES_PER_STICKER


@dataclass(frozen=True)
class MetadataChecks:
    pack: FieldCheck = FieldCheck(limit=WHATSAPP_LIMITS.PACK_NAME_MAX_LENGTH)
    author: FieldCheck = FieldCheck(limit=WHATSAPP_LIMITS.AUTHOR_MAX_LENGTH)
    id: FieldCheck = FieldCheck(limit=WHATSAPP_LIMITS.ID_MAX_LENGTH)
    categories: CategoriesCheck = CategoriesCheck()


@dataclass(frozen=True)
class ComplianceReport:
    errors: Tuple[str, ...] = ()
    warnings: Tuple[str, ...] = ()
    file_size: FileSizeCheck = FileSizeCheck()
    dimensions: DimensionsCheck = DimensionsCheck()
    metadata: MetadataChecks = field(default_factory=MetadataChecks)

    @property
    def is_valid(self) -> bool:
        return not self.errors

    def to_dict(self) -> Dict[str, Any]:
        def _field(check: FieldCheck) -> Dict[str, Any]:
            return {"value": check.value, "isValid": check.is_valid, "limit": check.limit}

        categories = self.metadata.categories
        return {
            "isValid": self.is_valid,
            "errors": list(self.errors),
            "warnings": list(self.warnings),
            "fileSize": {
                "size": self.file_size.size,
                "isValid": self.file_size.is_valid,
                "limit": self.file_size.limit,
                "type": self.file_size.kind,
            },
            "dimensions": {
                "width": self.dimensions.width,
                "height": self.dimensions.height,
                "isValid": self.dimensions.is_valid,
            },
            "metadata": {
                "pack": _field(self.metadata.pack),
                "author": _field(self.metadata.author),
                "id": _field(self.metadata.id),
                "categories": {
                    "value": list(categories.value),
                    "isValid": categories.is_valid,
                    "count": categories.count,
                    "limit": categories.limit,
                },
            },
        }


MetadataInput = Optional[Union[StickerMetadata, Mapping[str, Any]]]


def coerce_metadata(metadata: MetadataInput) -> StickerMetadata:
    if metadata is None:
        return StickerMetadata()
    if isinstance(metadata, StickerMetadata):
        return metadata
    return StickerMetadata(
        pack=str(metadata.get("pack") or ""),
        author=str(metadata.get("author") or ""),
        id=str(metadata.get("id") or ""),
        categories=tuple(metadata.get("categories") or ()),
    )


def check_file_size(size: int, animated: bool, errors: List[str], warnings: List[str]) -> FileSizeCheck:
    limit = WHATSAPP_LIMITS.ANIMATED_MAX_SIZE if animated else WHATSAPP_LIMITS.STATIC_MAX_SIZE
    kind = "animated" if animated else "static"
    is_valid = size <= limit
    if not is_valid:
        errors.append(
            f"File size {size / 1024:.1f}KB exceeds WhatsApp limit of {limit / 1024:.1f}KB for {kind} stickers"
        )
    if size > WHATSAPP_LIMITS.RECOMMENDED_FILE_SIZE * 3:
        warnings.append(
            f"File size {size / 1024:.1f}KB is much larger than the recommended "
            f"~{WHATSAPP_LIMITS.RECOMMENDED_FILE_SIZE // 1024}KB for optimal performance"
        )
    return FileSizeCheck(size=size, is_valid=is_valid, limit=limit, kind=kind)


def check_dimensions(width: int, height: int, errors: List[str]) -> DimensionsCheck:
    size = WHATSAPP_LIMITS.STICKER_SIZE
    is_valid = width == size and height == size
    if not is_valid:
        errors.append(f"Sticker dimensions {width}x{height} must be exactly {size}x{size} pixels")
    return DimensionsCheck(width=width, height=height, is_valid=is_valid)


def _check_length(value: str, limit: int, label: str, errors: List[str]) -> FieldCheck:
    is_valid = len(value) <= limit
    if not is_valid:
        errors.append(f"{label} exceeds {limit} character limit")
    return FieldCheck(value=value, is_valid=is_valid, limit=limit)


def check_metadata(metadata: StickerMetadata, errors: List[str], warnings: List[str]) -> MetadataChecks:
    pack = _check_length(metadata.pack, WHATSAPP_LIMITS.PACK_NAME_MAX_LENGTH, "Pack name", errors)
    author = _check_length(metadata.author, WHATSAPP_LIMITS.AUTHOR_MAX_LENGTH, "Author name", errors)
    sticker_id = _check_length(metadata.id, WHATSAPP_LIMITS.ID_MAX_LENGTH, "Sticker ID", errors)

    if metadata.id and not _ID_RE.fullmatch(metadata.id):
        sticker_id = FieldCheck(value=metadata.id, is_valid=False, limit=sticker_id.limit)
        errors.append(
            'Sticker ID contains invalid characters. Only a-z, A-Z, 0-9, "_", "-", ".", and " " are allowed'
        )

    categories = metadata.categories
    limit = WHATSAPP_LIMITS.MAX_CATEGORIES_PER_STICKER
    categories_valid = len(categories) <= limit
    if not categories_valid:
        errors.append(f"Too many categories ({len(categories)}). Maximum {limit} emojis allowed per sticker")
    if not categories:
        warnings.append(NO_CATEGORIES_WARNING)

    warnings.append(STROKE_ADVISORY)

    return MetadataChecks(
        pack=pack,
        author=author,
        id=sticker_id,
        categories=CategoriesCheck(
            value=tuple(categories), is_valid=categories_valid, count=len(categories), limit=limit
        ),
    )


def check_animation(probe: ImageProbe, warnings: List[str]) -> None:
    # Frame timing is not available from the decoder, so frame count stands in
    # for the duration check and only ever produces warnings.
    warnings.append(ANIMATED_ADVISORY)
    if probe.frames > WHATSAPP_LIMITS.HIGH_FRAME_COUNT:
        warnings.append(
            f"High frame count ({probe.frames}). Consider reducing frames to keep within "
            f"{WHATSAPP_LIMITS.MAX_ANIMATION_DURATION}-second duration limit"
        )


class ComplianceValidator:
    def __init__(self, probe: Callable[[bytes], ImageProbe] = probe_image) -> None:
        self._probe = probe

    def validate(self, buffer: bytes, metadata: MetadataInput = None) -> ComplianceReport:
        errors: List[str] = []
        warnings: List[str] = []
        try:
            meta = coerce_metadata(metadata)
            probe = self._probe(buffer)
            file_size = check_file_size(len(buffer), probe.is_animated, errors, warnings)
            dimensions = check_dimensions(probe.width, probe.height, errors)
            metadata_checks = check_metadata(meta, errors, warnings)
            if probe.is_animated:
                check_animation(probe, warnings)
        except Exception as exc:  # the report is the only output channel
            return ComplianceReport(errors=(f"Validation failed: {exc}",))

        return ComplianceReport(
            errors=tuple(errors),
            warnings=tuple(warnings),
            file_size=file_size,
            dimensions=dimensions,
            metadata=metadata_checks,
        )


def validate(buffer: bytes, metadata: MetadataInput = None) -> ComplianceReport:
    return ComplianceValidator().validate(buffer, metadata)


def find_invalid_emojis(emojis: Sequence[str]) -> List[str]:
    """Return entries that do not look like emoji.

    This only checks common emoji blocks, not WhatsApp's published list.
    """
    return [emoji for emoji in emojis if not _EMOJI_RE.search(emoji)]


def _mark(ok: bool) -> str:
    return "✅" if ok else "❌"


def generate_report(report: ComplianceReport) -> str:
    lines: List[str] = []
    size = WHATSAPP_LIMITS.STICKER_SIZE

    lines.append("=== WhatsApp Sticker Compliance Report ===\n")
    lines.append(f"Overall Status: {'✅ COMPLIANT' if report.is_valid else '❌ NON-COMPLIANT'}\n")

    lines.append("📁 File Size:")
    lines.append(f"   Size: {report.file_size.size / 1024:.1f}KB")
    lines.append(f"   Limit: {report.file_size.limit / 1024:.1f}KB ({report.file_size.kind})")
    lines.append(f"   Status: {_mark(report.file_size.is_valid)}\n")

    lines.append("📐 Dimensions:")
    lines.append(f"   Size: {report.dimensions.width}x{report.dimensions.height}px")
    lines.append(f"   Required: {size}x{size}px")
    lines.append(f"   Status: {_mark(report.dimensions.is_valid)}\n")

    meta = report.metadata
    lines.append("📋 Metadata:")
    for label, check in (("Pack", meta.pack), ("Author", meta.author), ("ID", meta.id)):
        lines.append(f'   {label}: "{check.value}" ({len(check.value)}/{check.limit}) {_mark(check.is_valid)}')
    lines.append(
        f"   Categories: {meta.categories.count}/{meta.categories.limit} {_mark(meta.categories.is_valid)}\n"
    )

    if report.errors:
        lines.append("❌ Errors:")
        lines.extend(f"   • {error}" for error in report.errors)
        lines.append("")

    if report.warnings:
        lines.append("⚠️  Warnings:")
        lines.extend(f"   • {warning}" for warning in report.warnings)
        lines.append("")

    lines.append("📚 Learn more: https://github.com/WhatsApp/stickers")
    return "\n".join(lines)
