"""
Image Input Adapter: 업로드 파일 → ImageFile.

규칙:
- payload는 base64 텍스트로 재인코딩, 선언된 content type 유지
- 허용 형식: PNG, JPEG, WEBP (크기 제한 없음)
- 실패 시 ImageReadError, 호출측은 해당 슬롯을 비움
- 공유 상태 변경 없음 (결과만 반환)
"""

import base64
import binascii
import logging
from pathlib import Path
from typing import Protocol

from src.domain.constants import (
    ALLOWED_IMAGE_MIME_TYPES,
    GENERIC_MIME_TYPES,
    MIME_ALIASES,
)
from src.domain.errors import ErrorCodes, ImageReadError
from src.domain.schemas import ImageFile

logger = logging.getLogger(__name__)


class UploadLike(Protocol):
    """FastAPI UploadFile 중 어댑터가 쓰는 부분."""

    filename: str | None
    content_type: str | None

    async def read(self, size: int = -1) -> bytes: ...


# =============================================================================
# MIME Type
# =============================================================================


def normalize_mime_type(declared: str | None, filename: str | None = None) -> str:
    """
    선언된 content type을 표준 MIME으로 정규화.

    - 대소문자 무시, 파라미터(;charset=...) 제거
    - 별칭 정리 (image/jpg → image/jpeg)
    - 선언값이 없거나 generic이면 파일 확장자로 추정

    Returns:
        정규화된 MIME (추정 불가 시 application/octet-stream)
    """
    mime = (declared or "").split(";", 1)[0].strip().lower()
    mime = MIME_ALIASES.get(mime, mime)

    if mime in GENERIC_MIME_TYPES and filename:
        suffix = Path(filename).suffix.lower()
        mime = MIME_ALIASES.get(suffix, mime)

    return mime or "application/octet-stream"


def is_allowed_mime_type(mime_type: str) -> bool:
    return mime_type in ALLOWED_IMAGE_MIME_TYPES


# =============================================================================
# Encode / Decode
# =============================================================================


def encode_image(
    data: bytes,
    mime_type: str,
    filename: str | None = None,
) -> ImageFile:
    """
    바이트 → ImageFile.

    Args:
        data: 원본 파일 바이트
        mime_type: 선언된 content type (정규화 전 값도 허용)
        filename: 원본 파일명 (확장자 추정/표시용)

    Raises:
        ImageReadError: IMAGE_EMPTY, UNSUPPORTED_IMAGE_TYPE
    """
    if not data:
        raise ImageReadError(ErrorCodes.IMAGE_EMPTY, filename=filename)

    normalized = normalize_mime_type(mime_type, filename)
    if not is_allowed_mime_type(normalized):
        raise ImageReadError(
            ErrorCodes.UNSUPPORTED_IMAGE_TYPE,
            filename=filename,
            mime_type=normalized,
        )

    return ImageFile(
        data=base64.b64encode(data).decode("ascii"),
        mime_type=normalized,
        filename=filename,
    )


def decode_image(image: ImageFile) -> bytes:
    """
    ImageFile → 원본 바이트.

    Raises:
        ImageReadError: IMAGE_READ_FAILED (base64 손상)
    """
    try:
        return base64.b64decode(image.data, validate=True)
    except (binascii.Error, ValueError) as e:
        raise ImageReadError(
            ErrorCodes.IMAGE_READ_FAILED,
            filename=image.filename,
            error=str(e),
        ) from e


async def read_upload(upload: UploadLike) -> ImageFile:
    """
    업로드 파일을 비동기로 읽어 ImageFile 생성.

    Raises:
        ImageReadError: 읽기 실패, 빈 파일, 지원하지 않는 형식
    """
    filename = upload.filename or None

    try:
        data = await upload.read()
    except Exception as e:
        logger.error(f"Failed to read upload {filename!r}: {e}", exc_info=True)
        raise ImageReadError(
            ErrorCodes.IMAGE_READ_FAILED,
            filename=filename,
            error=str(e),
        ) from e

    image = encode_image(data, upload.content_type or "", filename)
    logger.debug(
        f"Converted upload {filename!r} ({len(data)} bytes, {image.mime_type})"
    )
    return image
