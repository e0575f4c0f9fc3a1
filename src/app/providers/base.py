"""
이미지 생성 Provider 추상 인터페이스.

- Provider 추상화로 모델 교체 가능
- model_requested + model_used 기록
- 트리거 1회 = 원격 호출 1회 (재시도/fallback 없음)
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any

from src.domain.schemas import ImageFile

# =============================================================================
# Result Data Classes
# =============================================================================

@dataclass
class GenerationResult:
    """
    피팅 이미지 생성 결과.

    image: 생성된 이미지 (data URL로 바로 표시 가능)
    text: 모델이 이미지와 함께 돌려준 텍스트 (있는 경우)
    """
    success: bool
    image: ImageFile | None = None
    text: str | None = None

    # 모델 추적
    model_requested: str | None = None
    model_used: str | None = None

    generated_at: str | None = None
    error_message: str | None = None
    error_code: str | None = None

    def to_dict(self) -> dict[str, Any]:
        result = {
            "success": self.success,
            "image": self.image.to_dict() if self.image else None,
            "text": self.text,
            "model_requested": self.model_requested,
            "model_used": self.model_used,
            "generated_at": self.generated_at,
            "error_message": self.error_message,
            "error_code": self.error_code,
        }
        # None 값 제거
        return {k: v for k, v in result.items() if v is not None}


# =============================================================================
# Provider Exceptions
# =============================================================================

class ProviderError(Exception):
    """Provider 관련 에러. message는 사용자에게 그대로 노출."""

    def __init__(self, code: str, message: str, **context: Any) -> None:
        self.code = code
        self.message = message
        self.context = context
        super().__init__(f"[{code}] {message}")


class GenerationError(ProviderError):
    """이미지 생성 관련 에러."""
    pass


# =============================================================================
# Abstract Provider
# =============================================================================

class ImageGenerationProvider(ABC):
    """
    원격 이미지 생성 Provider 추상 인터페이스.

    오케스트레이터는 이 인터페이스만 알고, 실제 서비스는 모름.
    """

    model: str

    @abstractmethod
    async def generate_fitting(
        self,
        model_image: ImageFile,
        top_image: ImageFile,
        bottom_image: ImageFile,
    ) -> GenerationResult:
        """
        모델 사진에 상의/하의를 입힌 이미지 생성.

        Args:
            model_image: 인물(모델) 사진
            top_image: 상의 사진
            bottom_image: 하의 사진

        Returns:
            GenerationResult (success=True, image 포함)

        Raises:
            GenerationError: 원격 호출 실패, 응답에 이미지 없음
        """
        ...
