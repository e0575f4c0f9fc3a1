"""
ID 생성: session_id, run_id

규칙:
- session_id는 페이지 로드마다 새로 발급
- run_id는 생성 트리거마다 새로 발급
"""

import uuid
from datetime import UTC, datetime


def generate_session_id() -> str:
    """
    Session ID 생성.

    포맷: UUID v4 문자열 (hidden input 값으로 사용)
    """
    return str(uuid.uuid4())


def generate_run_id() -> str:
    """
    Run ID 생성.

    고유성 보장: UUID v4
    포맷: RUN-{timestamp}-{uuid[:8]}

    Returns:
        run_id 문자열
    """
    now = datetime.now(UTC)
    timestamp = now.strftime("%Y%m%d%H%M%S")
    unique = uuid.uuid4().hex[:8]

    return f"RUN-{timestamp}-{unique}"


def is_valid_session_id(value: str | None) -> bool:
    """hidden input으로 돌아온 값이 UUID 형식인지 확인."""
    if not value:
        return False
    try:
        uuid.UUID(value)
    except ValueError:
        return False
    return True
