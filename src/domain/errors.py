"""
Error definitions for the fitting room.

규칙:
- 조용한 실패 금지 → FittingError로 명시적 실패
- 슬롯 일부만 채워진 상태 금지 (읽기 실패 시 슬롯은 비움)
- 사용자 노출 메시지는 라우트에서 escape 후 표시
"""

from typing import Any


class FittingError(Exception):
    """
    피팅 흐름에서 발생하는 에러.

    Usage:
        raise FittingError("IMAGE_READ_FAILED", slot="top", cause=e)
    """

    def __init__(self, code: str, **context: Any) -> None:
        self.code = code
        self.context = context
        super().__init__(self._format_message())

    def _format_message(self) -> str:
        ctx_str = ", ".join(f"{k}={v!r}" for k, v in self.context.items())
        return f"[{self.code}] {ctx_str}" if ctx_str else f"[{self.code}]"

    def to_dict(self) -> dict[str, Any]:
        """로그/JSON 직렬화용."""
        return {
            "code": self.code,
            **self.context,
        }


class ImageReadError(FittingError):
    """업로드 파일 → ImageFile 변환 실패."""
    pass


class RequestInFlightError(FittingError):
    """이미 생성 요청이 진행 중일 때 재요청."""
    pass


# =============================================================================
# Error Codes
# =============================================================================

class ErrorCodes:
    """에러 코드 상수."""

    # === Image Input ===
    IMAGE_READ_FAILED = "IMAGE_READ_FAILED"
    IMAGE_EMPTY = "IMAGE_EMPTY"
    UNSUPPORTED_IMAGE_TYPE = "UNSUPPORTED_IMAGE_TYPE"
    UNKNOWN_SLOT = "UNKNOWN_SLOT"

    # === Orchestrator ===
    MISSING_IMAGES = "MISSING_IMAGES"
    REQUEST_IN_FLIGHT = "REQUEST_IN_FLIGHT"

    # === Remote generation ===
    GENERATION_FAILED = "GENERATION_FAILED"
    NO_IMAGE_RETURNED = "NO_IMAGE_RETURNED"
    AUTH_OR_INPUT_ERROR = "AUTH_OR_INPUT_ERROR"
    SERVICE_UNAVAILABLE = "SERVICE_UNAVAILABLE"
    GEMINI_NOT_INSTALLED = "GEMINI_NOT_INSTALLED"
