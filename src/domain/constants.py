"""
Domain Constants: 피팅룸 전역 상수.

허용 이미지 형식, 사용자 메시지, 설정 기본값.
"""

# =============================================================================
# Image Input (허용 형식)
# =============================================================================
# 파일 선택기 accept 속성과 어댑터 검증에 같이 사용.

ALLOWED_IMAGE_MIME_TYPES = ("image/png", "image/jpeg", "image/webp")
FILE_PICKER_ACCEPT = ", ".join(ALLOWED_IMAGE_MIME_TYPES)

# 확장자/별칭 → 표준 MIME
MIME_ALIASES = {
    ".png": "image/png",
    ".jpg": "image/jpeg",
    ".jpeg": "image/jpeg",
    ".webp": "image/webp",
    "png": "image/png",
    "jpg": "image/jpeg",
    "jpeg": "image/jpeg",
    "webp": "image/webp",
    "image/jpg": "image/jpeg",
    "image/pjpeg": "image/jpeg",
}

GENERIC_MIME_TYPES = frozenset({"", "application/octet-stream"})

# 생성 결과에 MIME 정보가 없을 때
DEFAULT_RESULT_MIME_TYPE = "image/png"

# =============================================================================
# User Messages (사용자 노출 문구)
# =============================================================================

VALIDATION_MESSAGE = "모델, 상의, 하의 이미지를 모두 업로드해주세요."
GENERIC_ERROR_MESSAGE = "알 수 없는 오류가 발생했습니다. 다시 시도해주세요."
IMAGE_READ_ERROR_MESSAGE = "이미지를 읽지 못했습니다. 다른 파일을 선택해주세요."
UNSUPPORTED_TYPE_MESSAGE = "PNG, JPEG, WEBP 이미지만 업로드할 수 있습니다."

# =============================================================================
# Config Defaults (default.yaml 누락 시)
# =============================================================================

DEFAULT_GENERATION_MODEL = "gemini-2.5-flash-image-preview"
DEFAULT_MAX_SESSIONS = 200

# 세션별로 보관하는 생성 RunLog 수 (오래된 것부터 버림)
MAX_RUN_LOGS_PER_SESSION = 20
DEFAULT_LOG_LEVEL = "INFO"
