"""Exception types and the API error code registry."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Dict, Optional, Sequence

from fastapi import HTTPException, status

if TYPE_CHECKING:  # pragma: no cover
    from .models import TranscodeAttempt


class StickerError(Exception):
    """Base class for sticker pipeline failures."""


class StickerInputError(StickerError):
    """The input could not be resolved into media bytes."""


class CodecError(StickerError):
    """A single codec invocation failed; the caller may try other parameters."""


class TranscodeExhausted(StickerError):
    """Every ladder preset failed to produce output."""

    def __init__(self, message: str, attempts: Sequence["TranscodeAttempt"] = ()) -> None:
        super().__init__(message)
        self.attempts = tuple(attempts)


@dataclass(frozen=True)
class ErrorCodeSpec:
    code: str
    zh: str
    en: str
    status: int
    http_status: int


class ErrorRegistry:
    def __init__(self) -> None:
        self._codes: Dict[str, ErrorCodeSpec] = {}

    def register(self, spec: ErrorCodeSpec) -> None:
        if spec.code in self._codes:
            raise ValueError(f"Error code {spec.code} already registered")
        self._codes[spec.code] = spec

    def get(self, code: str) -> ErrorCodeSpec:
        if code not in self._codes:
            raise KeyError(f"Unknown error code: {code}")
        return self._codes[code]

    def to_dict(self) -> Dict[str, ErrorCodeSpec]:
        return dict(self._codes)


ERRORS = ErrorRegistry()


def register_default_errors() -> None:
    ERRORS.register(
        ErrorCodeSpec(
            code="ERR_INPUT_INVALID",
            zh="输入内容无法解析",
            en="Input could not be read",
            status=4001,
            http_status=status.HTTP_400_BAD_REQUEST,
        )
    )
    ERRORS.register(
        ErrorCodeSpec(
            code="ERR_FORMAT_UNSUPPORTED",
            zh="文件格式暂不支持",
            en="Unsupported source format",
            status=4203,
            http_status=status.HTTP_400_BAD_REQUEST,
        )
    )
    ERRORS.register(
        ErrorCodeSpec(
            code="ERR_FILE_TOO_LARGE",
            zh="文件大小超出限制",
            en="Input exceeds the allowed size",
            status=4131,
            http_status=status.HTTP_413_REQUEST_ENTITY_TOO_LARGE,
        )
    )
    ERRORS.register(
        ErrorCodeSpec(
            code="ERR_TRANSCODE_EXHAUSTED",
            zh="所有编码参数均转换失败",
            en="Media could not be encoded with any quality preset",
            status=4221,
            http_status=status.HTTP_422_UNPROCESSABLE_ENTITY,
        )
    )
    ERRORS.register(
        ErrorCodeSpec(
            code="ERR_TASK_FAILED",
            zh="任务执行失败",
            en="Sticker conversion failed",
            status=5001,
            http_status=status.HTTP_500_INTERNAL_SERVER_ERROR,
        )
    )


register_default_errors()


def raise_error(code: str, *, detail: Optional[str] = None) -> None:
    spec = ERRORS.get(code)
    raise HTTPException(
        status_code=spec.http_status,
        detail={
            "status": "failure",
            "error_code": spec.code,
            "error_status": spec.status,
            "message": detail or spec.en,
            "zh_message": spec.zh,
        },
    )
