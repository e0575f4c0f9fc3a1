"""
Run logging: 생성 요청 단위 실행 로그 + 로거 설정.

규칙:
- 트리거 1회마다 RunLog 1개 (검증 실패로 호출이 없으면 RunLog 없음)
- payload 원문 금지, 해시만 기록
- 파일 저장 없음: 세션 메모리 + JSON 로그 라인
"""

import json
import logging
from datetime import UTC, datetime

from src.core.ids import generate_run_id
from src.domain.constants import DEFAULT_LOG_LEVEL
from src.domain.schemas import GenerationRunLog

logger = logging.getLogger(__name__)

LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"


# =============================================================================
# Logger Setup
# =============================================================================


def configure_logging(config: dict) -> None:
    """
    config의 logging.level로 루트 로거 설정.

    Args:
        config: default.yaml 내용 (없으면 {})
    """
    level_name = str(
        config.get("logging", {}).get("level", DEFAULT_LOG_LEVEL)
    ).upper()
    level = logging.getLevelName(level_name)
    if not isinstance(level, int):
        level = logging.INFO

    logging.basicConfig(level=level, format=LOG_FORMAT)
    logging.getLogger("src").setLevel(level)


# =============================================================================
# Run Log Management
# =============================================================================


def create_run_log(
    session_id: str,
    input_hashes: dict[str, str] | None = None,
) -> GenerationRunLog:
    """
    새 RunLog 생성.

    Args:
        session_id: 세션 ID
        input_hashes: 슬롯별 입력 해시

    Returns:
        초기화된 RunLog
    """
    now = datetime.now(UTC).isoformat()

    return GenerationRunLog(
        run_id=generate_run_id(),
        session_id=session_id,
        started_at=now,
        result="pending",
        input_hashes=dict(input_hashes or {}),
    )


def complete_run_log(
    run_log: GenerationRunLog,
    success: bool,
    model_used: str | None = None,
    error_code: str | None = None,
    error_message: str | None = None,
) -> None:
    """
    RunLog 완료 처리.

    Args:
        run_log: RunLog 인스턴스
        success: 성공 여부
        model_used: 실제 호출된 모델
        error_code: 에러 코드 (실패 시)
        error_message: 사용자 노출 메시지 (실패 시)
    """
    run_log.finished_at = datetime.now(UTC).isoformat()
    run_log.result = "success" if success else "failed"
    run_log.model_used = model_used

    if not success:
        run_log.error_code = error_code
        run_log.error_message = error_message


def emit_run_log(run_log: GenerationRunLog) -> None:
    """RunLog를 JSON 한 줄로 기록."""
    payload = json.dumps(run_log.to_dict(), ensure_ascii=False, sort_keys=True)
    if run_log.result == "failed":
        logger.warning(f"generation run: {payload}")
    else:
        logger.info(f"generation run: {payload}")
