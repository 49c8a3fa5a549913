"""API route definitions for the sticker service."""

from __future__ import annotations

import base64
import binascii
import logging
from dataclasses import asdict

from fastapi import APIRouter, Depends
from PIL import UnidentifiedImageError

from ..config import Settings, settings_dependency
from ..errors import StickerError, StickerInputError, TranscodeExhausted, raise_error
from ..exif import extract_metadata
from ..limits import WHATSAPP_LIMITS
from ..models import StickerMetadata
from ..sticker import Sticker
from ..transcoder import AdaptiveTranscoder, build_transcoder
from ..validation import ComplianceValidator, generate_report
from .schemas import (
    BuildRequest,
    BuildResponse,
    LimitsResponse,
    MetadataRequest,
    MetadataResponse,
    TranscodeInfo,
    ValidateRequest,
    ValidateResponse,
)

logger = logging.getLogger(__name__)
router = APIRouter()


def transcoder_dependency(settings: Settings = Depends(settings_dependency)) -> AdaptiveTranscoder:
    return build_transcoder(settings)


def _decode_payload(value: str, settings: Settings) -> bytes:
    try:
        data = base64.b64decode(value, validate=True)
    except (binascii.Error, ValueError):
        raise_error("ERR_INPUT_INVALID", detail="Invalid base64_data payload")
    if not data:
        raise_error("ERR_INPUT_INVALID", detail="base64_data is empty")
    if len(data) > settings.api.max_upload_size_mb * 1024 * 1024:
        raise_error("ERR_FILE_TOO_LARGE")
    return data


def _metadata_from(payload: ValidateRequest) -> StickerMetadata:
    return StickerMetadata(
        pack=payload.pack,
        author=payload.author,
        id=payload.id or "",
        categories=tuple(payload.categories),
    )


@router.post("/stickers", response_model=BuildResponse)
def build_sticker(
    payload: BuildRequest,
    settings: Settings = Depends(settings_dependency),
    transcoder: AdaptiveTranscoder = Depends(transcoder_dependency),
) -> BuildResponse:
    if payload.base64_data:
        source: bytes | str = _decode_payload(payload.base64_data, settings)
    elif payload.input_url:
        source = str(payload.input_url)
    else:
        raise_error("ERR_INPUT_INVALID", detail="Either base64_data or input_url is required")

    sticker = Sticker(
        source,
        pack=payload.pack,
        author=payload.author,
        id=payload.id,
        categories=payload.categories,
        type=payload.type,
        quality=payload.quality,
        background=payload.background or (0, 0, 0, 0),
        settings=settings,
        transcoder=transcoder,
    )

    try:
        buffer = sticker.build()
    except StickerInputError as exc:
        raise_error("ERR_INPUT_INVALID", detail=str(exc))
    except TranscodeExhausted as exc:
        raise_error("ERR_TRANSCODE_EXHAUSTED", detail=str(exc))
    except KeyError as exc:
        raise_error("ERR_FORMAT_UNSUPPORTED", detail=str(exc))
    except (StickerError, OSError, ValueError) as exc:
        logger.exception("Sticker build failed")
        raise_error("ERR_TASK_FAILED", detail=str(exc))

    result = sticker.last_result
    transcode = None
    if result is not None and result.transcode is not None:
        chosen = result.transcode.chosen_preset
        transcode = TranscodeInfo(
            within_target=result.transcode.within_target,
            preset=chosen.describe() if chosen else None,
            attempts=len(result.transcode.attempts),
        )

    report = None
    if payload.check_compliance:
        report = ComplianceValidator().validate(buffer, sticker.metadata).to_dict()

    return BuildResponse(
        sticker_base64=base64.b64encode(buffer).decode("ascii"),
        size_bytes=len(buffer),
        animated=bool(result and result.animated),
        transcode=transcode,
        report=report,
    )


@router.post("/stickers/validate", response_model=ValidateResponse)
def validate_sticker(
    payload: ValidateRequest, settings: Settings = Depends(settings_dependency)
) -> ValidateResponse:
    buffer = _decode_payload(payload.base64_data, settings)
    report = ComplianceValidator().validate(buffer, _metadata_from(payload))
    return ValidateResponse(report=report.to_dict(), text=generate_report(report))


@router.post("/stickers/metadata", response_model=MetadataResponse)
def read_metadata(
    payload: MetadataRequest, settings: Settings = Depends(settings_dependency)
) -> MetadataResponse:
    buffer = _decode_payload(payload.base64_data, settings)
    try:
        metadata = extract_metadata(buffer)
    except (UnidentifiedImageError, OSError, ValueError) as exc:
        raise_error("ERR_INPUT_INVALID", detail=f"Unreadable sticker: {exc}")
    return MetadataResponse(metadata=metadata)


@router.get("/limits", response_model=LimitsResponse)
def get_limits() -> LimitsResponse:
    return LimitsResponse(limits=asdict(WHATSAPP_LIMITS))
