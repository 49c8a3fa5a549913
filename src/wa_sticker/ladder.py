"""Quality ladder used by the adaptive transcoder.

Presets are ordered from best fidelity (largest output) to the most aggressive
compression. The transcoder walks them in order and never reorders them.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Tuple

from .models import EncodingPreset

if TYPE_CHECKING:  # pragma: no cover
    from .config import TranscodeSettings


DEFAULT_LADDER: Tuple[EncodingPreset, ...] = (
    EncodingPreset(quality=60, frame_rate=12, max_duration_seconds=8, compression_effort=4),
    EncodingPreset(quality=50, frame_rate=10, max_duration_seconds=6, compression_effort=5),
    EncodingPreset(
        quality=40, frame_rate=8, max_duration_seconds=5, compression_effort=6, decimate_duplicate_frames=True
    ),
    EncodingPreset(
        quality=30, frame_rate=6, max_duration_seconds=4, compression_effort=6, decimate_duplicate_frames=True
    ),
    EncodingPreset(
        quality=20, frame_rate=5, max_duration_seconds=3, compression_effort=6, decimate_duplicate_frames=True
    ),
)


def presets() -> Tuple[EncodingPreset, ...]:
    return DEFAULT_LADDER


def ladder_from_settings(settings: "TranscodeSettings | None") -> Tuple[EncodingPreset, ...]:
    """Build the ladder configured in settings, or the default one."""

    if settings is None or not settings.ladder:
        return presets()
    return tuple(EncodingPreset(**entry.model_dump()) for entry in settings.ladder)


__all__ = ["DEFAULT_LADDER", "presets", "ladder_from_settings"]
