"""
Google Gemini Image Provider.

예외 정책 (재시도/fallback 없음, 호출 1회):
- UNAVAILABLE_ERRORS: NotFound, ServiceUnavailable, ResourceExhausted → SERVICE_UNAVAILABLE
- REJECT_IMMEDIATELY: InvalidArgument, PermissionDenied, Unauthenticated → AUTH_OR_INPUT_ERROR
- 그 외 → GENERATION_FAILED
"""

import base64
import logging
import os
from datetime import UTC, datetime
from typing import Any

from src.core.images import decode_image
from src.domain.constants import DEFAULT_GENERATION_MODEL, DEFAULT_RESULT_MIME_TYPE
from src.domain.errors import ErrorCodes
from src.domain.schemas import ImageFile

from .base import GenerationError, GenerationResult, ImageGenerationProvider

logger = logging.getLogger(__name__)

# =============================================================================
# Exception Mapping
# =============================================================================

# 서비스 측 일시 장애/쿼터
UNAVAILABLE_ERRORS: tuple[type[Exception], ...] = ()

# 인증/입력 오류
REJECT_IMMEDIATELY: tuple[type[Exception], ...] = ()

# Google API 예외 동적 로드
try:
    from google.api_core.exceptions import (
        InvalidArgument,
        NotFound,
        PermissionDenied,
        ResourceExhausted,
        ServiceUnavailable,
        Unauthenticated,
    )

    UNAVAILABLE_ERRORS = (
        NotFound,           # 모델명 오류/미지원
        ServiceUnavailable,  # 5xx
        ResourceExhausted,   # 429 쿼터/레이트리밋
    )

    REJECT_IMMEDIATELY = (
        InvalidArgument,    # 입력 오류
        PermissionDenied,   # 인증 오류
        Unauthenticated,    # API 키 오류
    )
except ImportError:
    pass


TRYON_PROMPT = """
You are a virtual fitting room. Three images follow, in this order:
1. A photo of a person (the model).
2. A top garment.
3. A bottom garment.

Generate one photorealistic image of the same person wearing the top and the
bottom garment. Keep the person's face, hair, body shape, pose and the
original background unchanged. Reproduce the garments' colors, patterns,
materials and details faithfully, fitted naturally to the person's pose with
consistent lighting and shadows. Return only the final image.
"""


class GeminiImageProvider(ImageGenerationProvider):
    """
    Gemini 이미지 생성 Provider.

    Usage:
        provider = GeminiImageProvider(model="gemini-2.5-flash-image-preview")
        result = await provider.generate_fitting(model_img, top_img, bottom_img)
    """

    def __init__(
        self,
        model: str = DEFAULT_GENERATION_MODEL,
        api_key: str | None = None,
        prompt: str = TRYON_PROMPT,
    ):
        """
        Args:
            model: 이미지 생성 모델 ID (config에서 주입)
            api_key: API 키 (환경변수 GOOGLE_API_KEY, GEMINI_API_KEY 사용 가능)
            prompt: 피팅 지시 프롬프트
        """
        self.model = model
        self.api_key = (
            api_key
            or os.environ.get("GOOGLE_API_KEY")
            or os.environ.get("GEMINI_API_KEY")
        )
        self.prompt = prompt
        self._client: Any = None

    def _get_client(self) -> Any:
        """Gemini 클라이언트 (lazy init)."""
        if self._client is None:
            try:
                import google.generativeai as genai
                genai.configure(api_key=self.api_key)
                self._client = genai
            except ImportError as e:
                raise GenerationError(
                    ErrorCodes.GEMINI_NOT_INSTALLED,
                    "google-generativeai package not installed. "
                    "Run: pip install google-generativeai",
                ) from e
        return self._client

    async def generate_fitting(
        self,
        model_image: ImageFile,
        top_image: ImageFile,
        bottom_image: ImageFile,
    ) -> GenerationResult:
        """
        피팅 이미지 생성 (원격 호출 1회).

        Raises:
            GenerationError: 코드별 사용자 메시지 포함
        """
        try:
            result = await self._call_api(model_image, top_image, bottom_image)
            result.model_requested = self.model
            result.model_used = self.model
            return result

        except GenerationError:
            raise

        except UNAVAILABLE_ERRORS as e:
            logger.warning(f"Generation model ({self.model}) unavailable: {e}")
            raise GenerationError(
                ErrorCodes.SERVICE_UNAVAILABLE,
                self._get_user_friendly_error_message(e),
                model=self.model,
            ) from e

        except REJECT_IMMEDIATELY as e:
            logger.error(f"Authentication or input error: {e}", exc_info=True)
            raise GenerationError(
                ErrorCodes.AUTH_OR_INPUT_ERROR,
                self._get_user_friendly_error_message(e),
                model=self.model,
            ) from e

        except Exception as e:
            logger.error(f"Generation failed with unexpected error: {e}", exc_info=True)
            raise GenerationError(
                ErrorCodes.GENERATION_FAILED,
                self._get_user_friendly_error_message(e),
                model=self.model,
            ) from e

    def _get_user_friendly_error_message(self, error: Exception) -> str:
        """사용자 친화적인 에러 메시지 생성."""
        try:
            from google.api_core.exceptions import (
                InvalidArgument,
                NotFound,
                PermissionDenied,
                ResourceExhausted,
                ServiceUnavailable,
                Unauthenticated,
            )

            if isinstance(error, Unauthenticated):
                return (
                    "Google API 인증에 실패했습니다. "
                    "GOOGLE_API_KEY 환경변수를 확인해주세요."
                )
            elif isinstance(error, PermissionDenied):
                return (
                    "이 작업을 수행할 권한이 없습니다. "
                    "API 키의 권한을 확인해주세요."
                )
            elif isinstance(error, ResourceExhausted):
                return (
                    "API 사용량 한도를 초과했습니다. "
                    "잠시 후 다시 시도하거나 할당량을 확인해주세요."
                )
            elif isinstance(error, ServiceUnavailable):
                return (
                    "Google API 서비스를 일시적으로 사용할 수 없습니다. "
                    "잠시 후 다시 시도해주세요."
                )
            elif isinstance(error, NotFound):
                return (
                    f"이미지 생성 모델({self.model})을 찾을 수 없습니다. "
                    "설정의 모델명을 확인해주세요."
                )
            elif isinstance(error, InvalidArgument):
                return (
                    "요청 형식이 올바르지 않습니다. "
                    "업로드한 이미지의 형식과 크기를 확인해주세요."
                )
        except ImportError:
            pass

        # 기본 메시지
        error_str = str(error)
        if "api_key" in error_str.lower() or "api key" in error_str.lower():
            return "API 키 설정을 확인해주세요."
        elif "quota" in error_str.lower() or "limit" in error_str.lower():
            return "API 사용량 한도를 초과했습니다. 잠시 후 다시 시도해주세요."
        elif "connection" in error_str.lower():
            return "네트워크 연결 오류가 발생했습니다."
        elif "timeout" in error_str.lower():
            return "요청 시간이 초과되었습니다. 다시 시도해주세요."

        return f"이미지 생성 중 오류가 발생했습니다: {error_str}"

    def _build_contents(
        self,
        model_image: ImageFile,
        top_image: ImageFile,
        bottom_image: ImageFile,
    ) -> list[Any]:
        """프롬프트 + 이미지 3장 (model → top → bottom 순서)."""
        contents: list[Any] = [self.prompt]
        for image in (model_image, top_image, bottom_image):
            contents.append(
                {
                    "mime_type": image.mime_type,
                    "data": decode_image(image),
                }
            )
        return contents

    async def _call_api(
        self,
        model_image: ImageFile,
        top_image: ImageFile,
        bottom_image: ImageFile,
    ) -> GenerationResult:
        """실제 Gemini API 호출."""
        genai = self._get_client()
        model_instance = genai.GenerativeModel(self.model)

        contents = self._build_contents(model_image, top_image, bottom_image)
        response = await model_instance.generate_content_async(contents)

        image, text = self._extract_image(response)
        if image is None:
            block_reason = self._get_block_reason(response)
            raise GenerationError(
                ErrorCodes.NO_IMAGE_RETURNED,
                "생성된 이미지가 응답에 없습니다."
                + (f" (사유: {block_reason})" if block_reason else "")
                + (f" {text}" if text else ""),
                model=self.model,
            )

        return GenerationResult(
            success=True,
            image=image,
            text=text,
            generated_at=datetime.now(UTC).isoformat(),
        )

    def _extract_image(self, response: Any) -> tuple[ImageFile | None, str | None]:
        """
        첫 번째 candidate에서 inline 이미지와 텍스트 추출.

        inline_data.data는 raw bytes 또는 base64 문자열일 수 있음.
        """
        candidates = getattr(response, "candidates", None) or []
        if not candidates:
            return None, None

        content = getattr(candidates[0], "content", None)
        parts = getattr(content, "parts", None) or []

        image: ImageFile | None = None
        texts: list[str] = []

        for part in parts:
            inline = getattr(part, "inline_data", None)
            data = getattr(inline, "data", None) if inline is not None else None
            if image is None and data:
                if isinstance(data, bytes):
                    encoded = base64.b64encode(data).decode("ascii")
                else:
                    encoded = str(data)
                image = ImageFile(
                    data=encoded,
                    mime_type=getattr(inline, "mime_type", None)
                    or DEFAULT_RESULT_MIME_TYPE,
                )
                continue

            part_text = getattr(part, "text", None)
            if isinstance(part_text, str) and part_text.strip():
                texts.append(part_text.strip())

        return image, ("\n".join(texts) if texts else None)

    def _get_block_reason(self, response: Any) -> str | None:
        """prompt_feedback.block_reason (없으면 None)."""
        feedback = getattr(response, "prompt_feedback", None)
        reason = getattr(feedback, "block_reason", None) if feedback else None
        if not reason:
            return None
        return str(getattr(reason, "name", reason))
