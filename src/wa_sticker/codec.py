"""FFmpeg-backed codec service producing animated WebP output."""

from __future__ import annotations

import logging
import subprocess
from dataclasses import dataclass
from pathlib import Path
from typing import List, Literal, Optional, Protocol

from .errors import CodecError
from .limits import WHATSAPP_LIMITS
from .models import EncodingPreset

logger = logging.getLogger(__name__)

DECIMATE_FILTER = "mpdecimate=hi=64*12:lo=64*5:frac=0.33"


@dataclass(frozen=True)
class CodecRequest:
    """Everything the codec needs for one encode.

    Size, looping and audio stripping are fixed by the sticker format; the
    remaining fields come from an :class:`EncodingPreset`.
    """

    frame_rate: float
    max_duration_seconds: float
    quality: int
    compression_level: int
    decimate_duplicate_frames: bool = False
    fit: Literal["pad", "crop"] = "pad"
    size: int = WHATSAPP_LIMITS.STICKER_SIZE
    loop_forever: bool = True
    strip_audio: bool = True

    @classmethod
    def from_preset(cls, preset: EncodingPreset, *, fit: Literal["pad", "crop"] = "pad") -> "CodecRequest":
        return cls(
            frame_rate=preset.frame_rate,
            max_duration_seconds=preset.max_duration_seconds,
            quality=preset.quality,
            compression_level=preset.compression_effort,
            decimate_duplicate_frames=preset.decimate_duplicate_frames,
            fit=fit,
        )


class CodecService(Protocol):
    def encode(self, source: Path, request: CodecRequest, output: Path) -> None:
        """Encode ``source`` into ``output`` or raise :class:`CodecError`."""


def _format_number(value: float) -> str:
    return str(int(value)) if float(value).is_integer() else f"{value:g}"


def build_filter_chain(request: CodecRequest) -> str:
    size = request.size
    filters = [f"fps={_format_number(request.frame_rate)}"]
    if request.fit == "crop":
        filters.extend(
            [
                "crop=w='min(iw\\,ih)':h='min(iw\\,ih)'",
                f"scale={size}:{size}:flags=lanczos",
                "setsar=1",
                "format=rgba",
            ]
        )
    else:
        filters.extend(
            [
                f"scale={size}:{size}:force_original_aspect_ratio=decrease:flags=lanczos",
                "format=rgba",
                f"pad={size}:{size}:(ow-iw)/2:(oh-ih)/2:color=black@0",
            ]
        )
    if request.decimate_duplicate_frames:
        filters.append(DECIMATE_FILTER)
    return ",".join(filters)


def build_command(binary: str, source: Path, request: CodecRequest, output: Path) -> List[str]:
    cmd = [binary, "-y", "-hide_banner", "-loglevel", "error", "-i", str(source)]
    if request.strip_audio:
        cmd.append("-an")
    cmd.extend(
        [
            "-vsync",
            "0",
            "-vcodec",
            "libwebp",
            "-loop",
            "0" if request.loop_forever else "1",
            "-t",
            _format_number(request.max_duration_seconds),
            "-preset",
            "default",
            "-compression_level",
            str(request.compression_level),
            "-q:v",
            str(request.quality),
            "-vf",
            build_filter_chain(request),
            "-f",
            "webp",
            str(output),
        ]
    )
    return cmd


class FfmpegCodec:
    """Runs one blocking ffmpeg process per encode request."""

    def __init__(self, binary: str = "ffmpeg", timeout_sec: Optional[float] = None) -> None:
        self.binary = binary
        self.timeout_sec = timeout_sec

    def encode(self, source: Path, request: CodecRequest, output: Path) -> None:
        cmd = build_command(self.binary, source, request, output)
        logger.debug("Running codec: %s", " ".join(cmd))
        try:
            subprocess.run(
                cmd,
                check=True,
                stdout=subprocess.PIPE,
                stderr=subprocess.PIPE,
                timeout=self.timeout_sec,
            )
        except FileNotFoundError as exc:
            raise CodecError(f"Codec binary not found: {self.binary}") from exc
        except subprocess.TimeoutExpired as exc:
            raise CodecError(f"Codec timed out after {self.timeout_sec}s") from exc
        except subprocess.CalledProcessError as exc:
            stderr = (exc.stderr or b"").decode("utf-8", errors="replace").strip()
            tail = stderr.splitlines()[-1] if stderr else f"exit status {exc.returncode}"
            raise CodecError(f"Codec failed: {tail}") from exc

        if not output.exists() or output.stat().st_size == 0:
            raise CodecError("Codec produced no output")
