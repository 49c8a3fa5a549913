"""Shared pytest fixtures for the sticker tests."""

from __future__ import annotations

import io
from pathlib import Path
from typing import Callable, Sequence, Union

import pytest
from PIL import Image

from wa_sticker.codec import CodecRequest
from wa_sticker.config import APISettings, LoggingSettings, Settings, TranscodeSettings
from wa_sticker.errors import CodecError
from wa_sticker.scratch import ScratchStorage

Outcome = Union[int, bytes, Exception]

_PALETTE = [(255, 0, 0, 255), (0, 255, 0, 255), (0, 0, 255, 255), (255, 255, 0, 255), (0, 255, 255, 255)]


@pytest.fixture()
def test_settings(tmp_path) -> Settings:
    return Settings(
        service_name="wa-sticker-test",
        environment="test",
        scratch_dir=str(tmp_path / "scratch"),
        logging=LoggingSettings(level="DEBUG", log_dir=str(tmp_path / "logs")),
        transcode=TranscodeSettings(timeout_sec=5),
        api=APISettings(base_url="/api/v1", max_upload_size_mb=1),
    )


@pytest.fixture()
def scratch(tmp_path) -> ScratchStorage:
    return ScratchStorage(tmp_path / "work")


class FakeCodec:
    """Codec stand-in that replays a scripted outcome per call.

    An ``int`` writes that many bytes, ``bytes`` are written verbatim and an
    exception instance is raised.
    """

    def __init__(self, outcomes: Sequence[Outcome]) -> None:
        self.outcomes = outcomes
        self.requests: list[CodecRequest] = []
        self.sources: list[bytes] = []

    @property
    def calls(self) -> int:
        return len(self.requests)

    def encode(self, source: Path, request: CodecRequest, output: Path) -> None:
        self.sources.append(source.read_bytes())
        self.requests.append(request)
        outcome = self.outcomes[len(self.requests) - 1]
        if isinstance(outcome, Exception):
            raise outcome
        output.write_bytes(outcome if isinstance(outcome, bytes) else b"\x00" * outcome)


@pytest.fixture()
def fake_codec() -> Callable[[Sequence[Outcome]], FakeCodec]:
    return FakeCodec


@pytest.fixture()
def codec_failure() -> CodecError:
    return CodecError("Codec failed: simulated")


def _image_bytes(
    size: tuple[int, int] = (512, 512),
    fmt: str = "PNG",
    frames: int = 1,
    mode: str = "RGBA",
    **save_kwargs,
) -> bytes:
    images = [Image.new(mode, size, _PALETTE[index % len(_PALETTE)][: len(mode)]) for index in range(frames)]
    buffer = io.BytesIO()
    if frames > 1:
        images[0].save(
            buffer,
            format=fmt,
            save_all=True,
            append_images=images[1:],
            duration=100,
            loop=0,
            **save_kwargs,
        )
    else:
        images[0].save(buffer, format=fmt, **save_kwargs)
    return buffer.getvalue()


@pytest.fixture()
def make_image() -> Callable[..., bytes]:
    return _image_bytes


@pytest.fixture()
def static_webp() -> bytes:
    return _image_bytes(fmt="WEBP", quality=80)


@pytest.fixture()
def animated_webp() -> bytes:
    return _image_bytes(fmt="WEBP", frames=3, quality=80)


@pytest.fixture()
def png_bytes() -> bytes:
    return _image_bytes(size=(640, 480))
