"""Tests for end-to-end sticker assembly."""

from __future__ import annotations

import io

import pytest
from PIL import Image

from wa_sticker import Sticker, create_sticker, extract_metadata
from wa_sticker.errors import StickerInputError, TranscodeExhausted
from wa_sticker.models import StickerType
from wa_sticker.transcoder import AdaptiveTranscoder

MP4_HEADER = b"\x00\x00\x00\x18ftypmp42\x00\x00\x00\x00mp42isom" + b"\x00" * 64


def test_static_sticker_carries_metadata(test_settings, png_bytes):
    sticker = Sticker(
        png_bytes,
        pack="Cats",
        author="Me",
        id="cats-1",
        categories=["😺"],
        type=StickerType.ROUNDED,
        settings=test_settings,
    )

    buffer = sticker.build()

    assert extract_metadata(buffer) == {
        "sticker-pack-id": "cats-1",
        "sticker-pack-name": "Cats",
        "sticker-pack-publisher": "Me",
        "emojis": ["😺"],
    }
    with Image.open(io.BytesIO(buffer)) as image:
        assert image.size == (512, 512)
    assert sticker.last_result is not None
    assert sticker.last_result.animated is False


def test_static_sticker_passes_validation(test_settings, png_bytes):
    sticker = Sticker(png_bytes, pack="Cats", author="Me", categories=["😺"], settings=test_settings)
    report = sticker.validate()

    assert report.is_valid, report.errors
    assert report.file_size.kind == "static"
    assert "COMPLIANT" in sticker.compliance_report()


def test_generated_id_is_used_when_missing(test_settings, png_bytes):
    sticker = Sticker(png_bytes, settings=test_settings)

    assert len(sticker.id) == 32
    assert extract_metadata(sticker.build())["sticker-pack-id"] == sticker.id


def test_type_falls_back_to_settings_default(test_settings, png_bytes):
    test_settings.default_type = "circle"
    assert Sticker(png_bytes, settings=test_settings).type is StickerType.CIRCLE
    assert Sticker(png_bytes, type="unknown", settings=test_settings).type is StickerType.DEFAULT


def test_quality_defaults_from_settings(test_settings, png_bytes):
    assert Sticker(png_bytes, settings=test_settings).quality == 100
    assert Sticker(png_bytes, quality=40, settings=test_settings).quality == 40


def test_video_sticker_goes_through_the_ladder(test_settings, fake_codec, scratch, animated_webp):
    codec = fake_codec([600 * 1024, animated_webp])
    transcoder = AdaptiveTranscoder(codec, scratch)
    sticker = Sticker(MP4_HEADER, pack="Clips", author="Me", settings=test_settings, transcoder=transcoder)

    buffer = sticker.build()

    assert codec.calls == 2
    assert sticker.last_result.animated is True
    assert sticker.last_result.transcode.within_target is True
    assert extract_metadata(buffer)["sticker-pack-name"] == "Clips"
    with Image.open(io.BytesIO(buffer)) as image:
        assert image.n_frames == 3


def test_video_sticker_over_target_is_still_returned(test_settings, fake_codec, scratch, animated_webp):
    test_settings.transcode.target_size_bytes = 10
    codec = fake_codec([animated_webp] * 5)
    sticker = Sticker(MP4_HEADER, settings=test_settings, transcoder=AdaptiveTranscoder(codec, scratch))

    buffer = sticker.build()

    assert codec.calls == 5
    assert sticker.last_result.transcode.within_target is False
    assert extract_metadata(buffer)["sticker-pack-id"] == sticker.id


def test_video_sticker_exhausted(test_settings, fake_codec, scratch, codec_failure):
    codec = fake_codec([codec_failure] * 5)
    sticker = Sticker(MP4_HEADER, settings=test_settings, transcoder=AdaptiveTranscoder(codec, scratch))

    with pytest.raises(TranscodeExhausted):
        sticker.build()
    assert sticker.last_result is None


def test_metadata_can_change_between_builds(test_settings, png_bytes):
    sticker = Sticker(png_bytes, pack="One", settings=test_settings)
    sticker.build()
    sticker.pack = "Two"

    assert extract_metadata(sticker.build())["sticker-pack-name"] == "Two"


def test_to_file_uses_given_path(test_settings, png_bytes, tmp_path):
    sticker = Sticker(png_bytes, pack="P", author="A", settings=test_settings)
    path = sticker.to_file(tmp_path / "out.webp")

    assert path.exists()
    assert extract_metadata(path.read_bytes())["sticker-pack-publisher"] == "A"


def test_to_file_default_name(test_settings, png_bytes, tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    sticker = Sticker(png_bytes, pack="P", author="A", settings=test_settings)

    assert sticker.default_filename == "./P-A.webp"
    assert sticker.to_file().resolve() == (tmp_path / "P-A.webp").resolve()


def test_to_message_wraps_buffer(test_settings, png_bytes):
    message = Sticker(png_bytes, settings=test_settings).to_message()
    assert list(message) == ["sticker"]
    assert message["sticker"][:4] == b"RIFF"


def test_create_sticker_shortcut(test_settings, png_bytes):
    buffer = create_sticker(png_bytes, pack="Quick", settings=test_settings)
    assert extract_metadata(buffer)["sticker-pack-name"] == "Quick"


def test_file_path_input(test_settings, png_bytes, tmp_path):
    source = tmp_path / "cat.png"
    source.write_bytes(png_bytes)

    buffer = Sticker(str(source), settings=test_settings).build()
    assert buffer[8:12] == b"WEBP"


def test_bad_input_raises_input_error(test_settings):
    with pytest.raises(StickerInputError):
        Sticker("no such file", settings=test_settings).build()


def test_extract_metadata_is_available_on_class(test_settings, png_bytes):
    buffer = Sticker(png_bytes, pack="Static", settings=test_settings).build()
    assert Sticker.extract_metadata(buffer)["sticker-pack-name"] == "Static"
