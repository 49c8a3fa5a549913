"""Resolve sticker input (bytes, path, URL or inline SVG) and sniff its kind."""

from __future__ import annotations

import io
import logging
from pathlib import Path
from typing import Union
from urllib.parse import urlparse

import requests
from PIL import Image, UnidentifiedImageError

from .errors import StickerInputError
from .models import MediaKind

logger = logging.getLogger(__name__)

StickerSource = Union[bytes, bytearray, str, Path]


def _looks_like_svg(data: bytes) -> bool:
    head = data[:1024].lstrip().lower()
    return head.startswith(b"<svg") or (head.startswith(b"<?xml") and b"<svg" in head)


def fetch_url(url: str, *, timeout: float = 30.0, max_bytes: int | None = None) -> bytes:
    try:
        response = requests.get(url, timeout=timeout)
        response.raise_for_status()
    except requests.RequestException as exc:
        raise StickerInputError(f"Failed to fetch {url}: {exc}") from exc

    content = response.content
    if max_bytes is not None and len(content) > max_bytes:
        raise StickerInputError(f"Remote input {url} exceeds {max_bytes} bytes")
    return content


def load_source(source: StickerSource, *, timeout: float = 30.0, max_bytes: int | None = None) -> bytes:
    """Turn any accepted input form into raw bytes."""

    if isinstance(source, (bytes, bytearray)):
        return bytes(source)

    if isinstance(source, Path):
        if not source.is_file():
            raise StickerInputError(f"Input file not found: {source}")
        return source.read_bytes()

    if isinstance(source, str):
        text = source.strip()
        if text.startswith("<svg") or text.startswith("<?xml"):
            return text.encode("utf-8")

        parsed = urlparse(text)
        if parsed.scheme in {"http", "https"}:
            logger.debug("Fetching sticker input from %s", text)
            return fetch_url(text, timeout=timeout, max_bytes=max_bytes)

        path = Path(text).expanduser()
        if path.is_file():
            return path.read_bytes()
        raise StickerInputError(f"Input is neither an existing file nor an http(s) URL: {text[:80]}")

    raise StickerInputError(f"Unsupported input type: {type(source).__name__}")


def sniff_kind(data: bytes) -> MediaKind:
    if not data:
        raise StickerInputError("Input is empty")
    if _looks_like_svg(data):
        return MediaKind.SVG
    try:
        with Image.open(io.BytesIO(data)) as image:
            frames = int(getattr(image, "n_frames", 1) or 1)
    except (UnidentifiedImageError, OSError, ValueError):
        # anything Pillow cannot open is handed to the codec as video
        return MediaKind.VIDEO
    return MediaKind.ANIMATED if frames > 1 else MediaKind.IMAGE


def animated_webp_to_gif(data: bytes) -> bytes:
    """Repack an animated WebP as GIF so FFmpeg can decode the frames."""

    with Image.open(io.BytesIO(data)) as image:
        if (image.format or "").upper() != "WEBP":
            return data
        durations = []
        frames = []
        for index in range(image.n_frames):
            image.seek(index)
            durations.append(image.info.get("duration", 100))
            frames.append(image.convert("RGBA"))
    buffer = io.BytesIO()
    frames[0].save(
        buffer,
        format="GIF",
        save_all=True,
        append_images=frames[1:],
        duration=durations,
        loop=0,
        disposal=2,
    )
    return buffer.getvalue()
