"""Embed and read sticker pack metadata in the WebP EXIF chunk."""

from __future__ import annotations

import io
import json
import logging
import struct
from typing import Any, Dict, Iterator, List, Tuple

from PIL import Image

from .models import StickerMetadata

logger = logging.getLogger(__name__)

# Little-endian TIFF header with a single IFD entry (tag 0x5741, type UNDEFINED)
# whose value starts at offset 22. Bytes 14-18 hold the payload length.
EXIF_HEADER = bytes(
    [0x49, 0x49, 0x2A, 0x00, 0x08, 0x00, 0x00, 0x00, 0x01, 0x00, 0x41, 0x57, 0x07, 0x00]
    + [0x00, 0x00, 0x00, 0x00]
    + [0x16, 0x00, 0x00, 0x00]
)

VP8X_FLAG_EXIF = 0x08
VP8X_FLAG_ALPHA = 0x10

Chunk = Tuple[bytes, bytes]


def build_exif(metadata: StickerMetadata) -> bytes:
    payload = json.dumps(metadata.to_raw(), ensure_ascii=False).encode("utf-8")
    header = bytearray(EXIF_HEADER)
    header[14:18] = struct.pack("<I", len(payload))
    return bytes(header) + payload


def _iter_chunks(buffer: bytes) -> Iterator[Chunk]:
    if len(buffer) < 12 or buffer[:4] != b"RIFF" or buffer[8:12] != b"WEBP":
        raise ValueError("Not a WebP container")
    end = min(len(buffer), 8 + struct.unpack("<I", buffer[4:8])[0])
    pos = 12
    while pos + 8 <= end:
        fourcc = buffer[pos : pos + 4]
        size = struct.unpack("<I", buffer[pos + 4 : pos + 8])[0]
        data = buffer[pos + 8 : pos + 8 + size]
        if len(data) < size:
            raise ValueError(f"Truncated {fourcc.decode('latin-1')} chunk")
        yield fourcc, data
        pos += 8 + size + (size & 1)


def _vp8x_for(buffer: bytes) -> bytes:
    with Image.open(io.BytesIO(buffer)) as image:
        width, height = image.size
        flags = VP8X_FLAG_ALPHA if "A" in image.mode else 0
    return (
        bytes([flags, 0, 0, 0])
        + (width - 1).to_bytes(3, "little")
        + (height - 1).to_bytes(3, "little")
    )


def _serialize(chunks: List[Chunk]) -> bytes:
    body = io.BytesIO()
    body.write(b"WEBP")
    for fourcc, data in chunks:
        body.write(fourcc)
        body.write(struct.pack("<I", len(data)))
        body.write(data)
        if len(data) & 1:
            body.write(b"\x00")
    payload = body.getvalue()
    return b"RIFF" + struct.pack("<I", len(payload)) + payload


def add_metadata(buffer: bytes, metadata: StickerMetadata) -> bytes:
    """Return a copy of ``buffer`` carrying ``metadata`` in its EXIF chunk.

    Any existing EXIF chunk is replaced. Simple-format (VP8/VP8L only) files get
    an extended VP8X header, which the container requires for metadata chunks.
    """
    chunks = [chunk for chunk in _iter_chunks(buffer) if chunk[0] != b"EXIF"]
    if not chunks:
        raise ValueError("WebP container has no image data")

    if chunks[0][0] == b"VP8X":
        header = bytearray(chunks[0][1])
        header[0] |= VP8X_FLAG_EXIF
        chunks[0] = (b"VP8X", bytes(header))
    else:
        header = bytearray(_vp8x_for(buffer))
        header[0] |= VP8X_FLAG_EXIF
        chunks.insert(0, (b"VP8X", bytes(header)))

    exif_chunk = (b"EXIF", build_exif(metadata))
    xmp_index = next((i for i, (fourcc, _) in enumerate(chunks) if fourcc == b"XMP "), None)
    if xmp_index is None:
        chunks.append(exif_chunk)
    else:
        chunks.insert(xmp_index, exif_chunk)
    return _serialize(chunks)


def _payload_from_exif(exif: bytes) -> bytes:
    if exif.startswith(b"Exif\x00\x00"):
        exif = exif[6:]
    if exif[:4] == EXIF_HEADER[:4] and len(exif) >= 22:
        length = struct.unpack("<I", exif[14:18])[0]
        offset = struct.unpack("<I", exif[18:22])[0]
        return exif[offset : offset + length]
    start, end = exif.find(b"{"), exif.rfind(b"}")
    return exif[start : end + 1] if start != -1 and end > start else b""


def extract_metadata(buffer: bytes) -> Dict[str, Any]:
    """Read the sticker JSON back out of a WebP buffer.

    Returns an empty dict when the image carries no (readable) sticker
    metadata. Unreadable images raise Pillow's ``UnidentifiedImageError``.
    """
    with Image.open(io.BytesIO(buffer)) as image:
        exif = image.info.get("exif")
    if not exif:
        return {}

    payload = _payload_from_exif(bytes(exif))
    if not payload:
        return {}
    try:
        data = json.loads(payload.decode("utf-8"))
    except (UnicodeDecodeError, json.JSONDecodeError) as exc:
        logger.warning("Ignoring malformed sticker metadata: %s", exc)
        return {}
    return data if isinstance(data, dict) else {}
