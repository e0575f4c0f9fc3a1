"""
Data schemas for the fitting room.

규칙:
- ImageFile은 생성 후 불변 (교체만 가능)
- 생성 라이프사이클은 태그드 variant로 표현
  (loading + error 동시 true 같은 조합은 표현 자체가 불가)
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, ClassVar

# =============================================================================
# Slots
# =============================================================================

class Slot(str, Enum):
    """
    이미지 입력 슬롯.

    생성 요청 시 이 순서(model → top → bottom)로 전달.
    """
    MODEL = "model"
    TOP = "top"
    BOTTOM = "bottom"

    @property
    def label(self) -> str:
        return SLOT_LABELS[self]


SLOT_LABELS: dict[Slot, str] = {
    Slot.MODEL: "모델",
    Slot.TOP: "상의",
    Slot.BOTTOM: "하의",
}


# =============================================================================
# Image File
# =============================================================================

@dataclass(frozen=True)
class ImageFile:
    """
    사용자가 선택한 이미지의 메모리 표현.

    data: base64 인코딩된 payload (전송 가능한 텍스트)
    mime_type: 업로드 시 선언된 content type
    """
    data: str
    mime_type: str
    filename: str | None = None

    def to_data_url(self) -> str:
        """<img src>에 바로 쓸 수 있는 data URL."""
        return f"data:{self.mime_type};base64,{self.data}"

    def to_dict(self) -> dict[str, Any]:
        # payload는 크기 때문에 제외
        return {
            "mime_type": self.mime_type,
            "filename": self.filename,
            "size": len(self.data),
        }


# =============================================================================
# Lifecycle (Idle → Requesting → Succeeded | Failed)
# =============================================================================

@dataclass(frozen=True)
class Idle:
    """요청 전."""
    kind: ClassVar[str] = "idle"


@dataclass(frozen=True)
class Requesting:
    """생성 요청 1건 진행 중."""
    run_id: str
    kind: ClassVar[str] = "requesting"


@dataclass(frozen=True)
class Succeeded:
    """생성 이미지 수신."""
    result: ImageFile
    run_id: str
    kind: ClassVar[str] = "succeeded"


@dataclass(frozen=True)
class Failed:
    """
    검증 실패 또는 원격 호출 실패.

    run_id가 None이면 원격 호출 없이 끝난 검증 에러.
    """
    message: str
    code: str
    run_id: str | None = None
    kind: ClassVar[str] = "failed"


FittingStatus = Idle | Requesting | Succeeded | Failed


# =============================================================================
# Generation Run Log
# =============================================================================

@dataclass
class GenerationRunLog:
    """
    생성 요청 1건의 실행 로그.

    트리거 1회 = 원격 호출 1회 = RunLog 1개.
    """
    run_id: str
    session_id: str
    started_at: str  # ISO 8601
    finished_at: str | None = None
    result: str = "pending"  # pending, success, failed

    # 슬롯별 입력 해시 (payload 원문은 기록하지 않음)
    input_hashes: dict[str, str] = field(default_factory=dict)

    model_used: str | None = None

    # Error (if failed)
    error_code: str | None = None
    error_message: str | None = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "run_id": self.run_id,
            "session_id": self.session_id,
            "started_at": self.started_at,
            "finished_at": self.finished_at,
            "result": self.result,
            "input_hashes": self.input_hashes,
            "model_used": self.model_used,
            "error_code": self.error_code,
            "error_message": self.error_message,
        }
