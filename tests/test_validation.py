"""Tests for WhatsApp compliance validation."""

from __future__ import annotations

import pytest

from wa_sticker.models import StickerMetadata
from wa_sticker.probe import ImageProbe
from wa_sticker.validation import (
    ANIMATED_ADVISORY,
    NO_CATEGORIES_WARNING,
    STROKE_ADVISORY,
    ComplianceValidator,
    find_invalid_emojis,
    generate_report,
    validate,
)


def _probe(width=512, height=512, frames=1, fmt="WEBP"):
    return lambda _buffer: ImageProbe(format=fmt, width=width, height=height, frames=frames)


def _meta(**overrides) -> StickerMetadata:
    values = dict(pack="Pack", author="Author", id="pack_1", categories=("😀",))
    values.update(overrides)
    return StickerMetadata(**values)


def test_static_size_limit_is_inclusive():
    validator = ComplianceValidator(probe=_probe())

    at_limit = validator.validate(b"\x00" * 102400, _meta())
    over_limit = validator.validate(b"\x00" * 102401, _meta())

    assert at_limit.is_valid
    assert at_limit.file_size.limit == 102400
    assert at_limit.file_size.kind == "static"
    assert not over_limit.is_valid
    assert over_limit.file_size.is_valid is False
    assert over_limit.errors == ("File size 100.0KB exceeds WhatsApp limit of 100.0KB for static stickers",)


def test_animated_buffers_use_animated_limit():
    validator = ComplianceValidator(probe=_probe(frames=12))

    report = validator.validate(b"\x00" * 200 * 1024, _meta())

    assert report.is_valid
    assert report.file_size.kind == "animated"
    assert report.file_size.limit == 500 * 1024
    assert ANIMATED_ADVISORY in report.warnings


def test_animated_over_limit_is_an_error():
    report = ComplianceValidator(probe=_probe(frames=12)).validate(b"\x00" * (500 * 1024 + 1), _meta())
    assert "for animated stickers" in report.errors[0]


def test_large_file_gets_size_advisory():
    report = ComplianceValidator(probe=_probe()).validate(b"\x00" * 50 * 1024, _meta())

    assert report.is_valid
    assert "recommended ~15KB" in report.warnings[0]


def test_exact_dimensions_pass(make_image):
    report = validate(make_image(size=(512, 512), fmt="WEBP"), _meta())

    assert report.is_valid
    assert report.dimensions.width == 512
    assert report.dimensions.is_valid


@pytest.mark.parametrize("width, height", [(511, 512), (512, 511)])
def test_off_by_one_dimensions_fail(make_image, width, height):
    report = validate(make_image(size=(width, height), fmt="WEBP"), _meta())

    assert not report.is_valid
    assert report.dimensions.is_valid is False
    assert (report.dimensions.width, report.dimensions.height) == (width, height)
    assert f"Sticker dimensions {width}x{height} must be exactly 512x512 pixels" in report.errors


def test_pack_name_limit_is_inclusive():
    validator = ComplianceValidator(probe=_probe())

    assert validator.validate(b"x", _meta(pack="A" * 128)).is_valid
    report = validator.validate(b"x", _meta(pack="A" * 129))
    assert report.errors == ("Pack name exceeds 128 character limit",)
    assert report.metadata.pack.is_valid is False


def test_author_and_id_length_limits():
    report = ComplianceValidator(probe=_probe()).validate(b"x", _meta(author="B" * 129, id="c" * 129))

    assert "Author name exceeds 128 character limit" in report.errors
    assert "Sticker ID exceeds 128 character limit" in report.errors


def test_id_with_allowed_characters_passes():
    report = ComplianceValidator(probe=_probe()).validate(b"x", _meta(id="a_b-c.d e"))
    assert report.is_valid


@pytest.mark.parametrize("bad_id", ["a@b", "pack/1", "emoji😀"])
def test_id_with_other_characters_fails(bad_id):
    report = ComplianceValidator(probe=_probe()).validate(b"x", _meta(id=bad_id))

    assert not report.is_valid
    assert report.metadata.id.is_valid is False
    assert report.errors[0].startswith("Sticker ID contains invalid characters")


def test_empty_id_is_not_checked_for_charset():
    report = ComplianceValidator(probe=_probe()).validate(b"x", _meta(id=""))
    assert report.is_valid


def test_too_many_categories():
    report = ComplianceValidator(probe=_probe()).validate(b"x", _meta(categories=("😀", "😂", "😍", "😎")))

    assert report.errors == ("Too many categories (4). Maximum 3 emojis allowed per sticker",)
    assert report.metadata.categories.count == 4


def test_missing_categories_only_warns():
    report = ComplianceValidator(probe=_probe()).validate(b"x", _meta(categories=()))

    assert report.is_valid
    assert report.warnings == (NO_CATEGORIES_WARNING, STROKE_ADVISORY)


def test_stroke_advisory_is_always_present():
    report = ComplianceValidator(probe=_probe()).validate(b"x", _meta())
    assert report.warnings == (STROKE_ADVISORY,)


def test_metadata_can_be_a_mapping():
    report = ComplianceValidator(probe=_probe()).validate(
        b"x", {"pack": "P" * 140, "author": "me", "categories": ["😀"]}
    )
    assert report.errors == ("Pack name exceeds 128 character limit",)
    assert report.metadata.author.value == "me"


def test_missing_metadata_checks_empty_fields():
    report = ComplianceValidator(probe=_probe()).validate(b"x")
    assert report.is_valid
    assert report.metadata.pack.value == ""


def test_long_pack_name_without_categories_end_to_end(static_webp):
    report = validate(static_webp, {"pack": "A" * 140, "author": "ok", "categories": []})

    assert report.is_valid is False
    assert report.errors == ("Pack name exceeds 128 character limit",)
    assert NO_CATEGORIES_WARNING in report.warnings
    assert report.metadata.author.is_valid is True
    assert report.to_dict()["metadata"]["pack"]["isValid"] is False


def test_high_frame_count_warns():
    # frame count approximates the duration limit, so it only ever warns
    report = ComplianceValidator(probe=_probe(frames=200)).validate(b"x", _meta())

    assert report.is_valid
    assert any(warning.startswith("High frame count (200)") for warning in report.warnings)


def test_validation_is_idempotent(static_webp):
    meta = _meta()
    assert validate(static_webp, meta) == validate(static_webp, meta)


def test_is_valid_matches_errors():
    validator = ComplianceValidator(probe=_probe(width=100))
    for meta in (_meta(), _meta(pack="A" * 200), _meta(id="!")):
        report = validator.validate(b"x", meta)
        assert report.is_valid == (len(report.errors) == 0)


def test_corrupt_buffer_returns_single_error():
    report = validate(b"definitely not an image", _meta())

    assert report.is_valid is False
    assert len(report.errors) == 1
    assert report.errors[0].startswith("Validation failed: ")
    assert report.warnings == ()
    assert report.file_size.size == 0


def test_probe_failure_becomes_report_error():
    def _boom(_buffer):
        raise RuntimeError("decoder crashed")

    report = ComplianceValidator(probe=_boom).validate(b"x", _meta())
    assert report.errors == ("Validation failed: decoder crashed",)


def test_to_dict_uses_report_keys():
    data = ComplianceValidator(probe=_probe(frames=3)).validate(b"\x00" * 10, _meta()).to_dict()

    assert data["isValid"] is True
    assert data["fileSize"] == {"size": 10, "isValid": True, "limit": 500 * 1024, "type": "animated"}
    assert data["dimensions"] == {"width": 512, "height": 512, "isValid": True}
    assert data["metadata"]["categories"] == {"value": ["😀"], "isValid": True, "count": 1, "limit": 3}
    assert data["metadata"]["id"]["value"] == "pack_1"


def test_generate_report_marks_status():
    validator = ComplianceValidator(probe=_probe())

    good = generate_report(validator.validate(b"x", _meta()))
    bad = generate_report(validator.validate(b"x", _meta(pack="A" * 129)))

    assert "Overall Status: ✅ COMPLIANT" in good
    assert "Overall Status: ❌ NON-COMPLIANT" in bad
    assert "Pack name exceeds 128 character limit" in bad
    assert 'Pack: "Pack" (4/128) ✅' in good


def test_find_invalid_emojis():
    assert find_invalid_emojis(["😀", "abc", "❤", "🤖", ""]) == ["abc", ""]
