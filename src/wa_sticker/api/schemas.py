"""Request and response models for the sticker API."""

from __future__ import annotations

from typing import Any, Dict, List, Literal, Optional

from pydantic import BaseModel, Field, HttpUrl


class StickerFields(BaseModel):
    pack: str = Field("", description="Sticker pack title")
    author: str = Field("", description="Sticker pack publisher")
    id: Optional[str] = Field(None, description="Sticker pack id; random when omitted")
    categories: List[str] = Field(default_factory=list, description="Emoji categories (1-3)")


class BuildRequest(StickerFields):
    base64_data: str | None = Field(None, description="Base64-encoded image, GIF or video")
    input_url: HttpUrl | None = Field(None, description="URL to fetch the input from")
    type: Literal["default", "crop", "full", "circle", "rounded"] | None = None
    quality: int | None = Field(None, ge=0, le=100, description="WebP quality for still images")
    background: str | None = Field(None, description="Background colour for type=full, e.g. #ffffff00")
    check_compliance: bool = Field(False, description="Also return a compliance report")


class TranscodeInfo(BaseModel):
    within_target: bool
    preset: Dict[str, Any] | None = None
    attempts: int = 0


class BuildResponse(BaseModel):
    status: Literal["success"] = "success"
    sticker_base64: str
    size_bytes: int
    animated: bool
    transcode: TranscodeInfo | None = None
    report: Dict[str, Any] | None = None


class ValidateRequest(StickerFields):
    base64_data: str = Field(..., description="Base64-encoded WebP sticker")


class ValidateResponse(BaseModel):
    report: Dict[str, Any]
    text: str


class MetadataRequest(BaseModel):
    base64_data: str = Field(..., description="Base64-encoded WebP sticker")


class MetadataResponse(BaseModel):
    metadata: Dict[str, Any]


class LimitsResponse(BaseModel):
    limits: Dict[str, int]
