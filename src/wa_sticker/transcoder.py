"""Adaptive transcoding of animated input under a byte-size ceiling."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, List, Literal, Optional, Sequence

from .codec import CodecRequest, CodecService, FfmpegCodec
from .errors import CodecError, TranscodeExhausted
from .ladder import ladder_from_settings
from .limits import WHATSAPP_LIMITS
from .models import EncodingPreset, TranscodeAttempt, TranscodeResult
from .monitoring import record_attempt, record_transcode
from .probe import probe_image
from .scratch import ScratchStorage

if TYPE_CHECKING:  # pragma: no cover
    from .config import Settings

logger = logging.getLogger(__name__)


class AdaptiveTranscoder:
    """Walks a quality ladder and keeps the first output that fits.

    Presets are tried strictly in order. The first one whose output is at or
    under the target is accepted without looking at later presets. When none
    fits, the output of the last preset that produced anything is returned with
    ``within_target=False``. Only a ladder where every codec call failed raises
    :class:`TranscodeExhausted`.
    """

    def __init__(
        self,
        codec: CodecService,
        scratch: ScratchStorage,
        *,
        ladder: Sequence[EncodingPreset] | None = None,
        fast_path: bool = False,
    ) -> None:
        self.codec = codec
        self.scratch = scratch
        self.ladder = tuple(ladder) if ladder is not None else ladder_from_settings(None)
        self.fast_path = fast_path

    def transcode(
        self,
        data: bytes,
        target_size_bytes: int = WHATSAPP_LIMITS.ANIMATED_MAX_SIZE,
        ladder: Sequence[EncodingPreset] | None = None,
        *,
        fit: Literal["pad", "crop"] = "pad",
    ) -> TranscodeResult:
        presets = tuple(ladder) if ladder is not None else self.ladder
        if target_size_bytes <= 0:
            raise ValueError("target_size_bytes must be positive")
        if not presets:
            raise ValueError("ladder must contain at least one preset")

        if self.can_pass_through(data, target_size_bytes):
            logger.info("Input already compliant (%d bytes); skipping transcode", len(data))
            record_transcode("passthrough")
            return TranscodeResult(buffer=data, chosen_preset=None, within_target=True)

        attempts: List[TranscodeAttempt] = []
        fallback: Optional[TranscodeAttempt] = None

        with self.scratch.reserve(".media", data) as source:
            for index, preset in enumerate(presets, start=1):
                request = CodecRequest.from_preset(preset, fit=fit)
                with self.scratch.reserve(".webp") as output:
                    try:
                        self.codec.encode(source, request, output)
                        buffer = output.read_bytes()
                    except (CodecError, OSError) as exc:
                        logger.warning(
                            "Transcode attempt %d/%d failed at quality %d: %s",
                            index,
                            len(presets),
                            preset.quality,
                            exc,
                        )
                        attempts.append(TranscodeAttempt(preset=preset, error=str(exc)))
                        record_attempt("failed")
                        continue

                attempt = TranscodeAttempt(
                    preset=preset, output_buffer=buffer, size_bytes=len(buffer), succeeded=True
                )
                attempts.append(attempt)
                logger.info(
                    "Transcode attempt %d/%d: quality %d, %.1fKB",
                    index,
                    len(presets),
                    preset.quality,
                    attempt.size_bytes / 1024,
                )

                if attempt.size_bytes <= target_size_bytes:
                    record_attempt("accepted")
                    record_transcode("within_target")
                    return TranscodeResult(
                        buffer=buffer, chosen_preset=preset, within_target=True, attempts=tuple(attempts)
                    )

                record_attempt("oversized")
                fallback = attempt

        if fallback is None:
            record_transcode("exhausted")
            raise TranscodeExhausted(
                f"Failed to convert media with any of {len(presets)} quality presets", attempts
            )

        logger.warning(
            "No preset met %.1fKB; using quality %d output at %.1fKB",
            target_size_bytes / 1024,
            fallback.preset.quality,
            fallback.size_bytes / 1024,
        )
        record_transcode("over_target")
        return TranscodeResult(
            buffer=fallback.output_buffer or b"",
            chosen_preset=fallback.preset,
            within_target=False,
            attempts=tuple(attempts),
        )

    def can_pass_through(self, data: bytes, target_size_bytes: int) -> bool:
        """True when the fast path is on and ``data`` is already a fitting animated WebP."""
        if not self.fast_path or len(data) > target_size_bytes:
            return False
        try:
            probe = probe_image(data)
        except (OSError, ValueError):
            return False
        size = WHATSAPP_LIMITS.STICKER_SIZE
        return probe.format == "WEBP" and probe.is_animated and probe.width == size and probe.height == size


def build_transcoder(settings: "Settings") -> AdaptiveTranscoder:
    cfg = settings.transcode
    return AdaptiveTranscoder(
        FfmpegCodec(cfg.ffmpeg_binary, timeout_sec=cfg.timeout_sec),
        ScratchStorage(settings.scratch_dir),
        ladder=ladder_from_settings(cfg),
        fast_path=cfg.fast_path,
    )
