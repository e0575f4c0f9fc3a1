"""
FastAPI 애플리케이션 진입점.

실행:
- 개발: uv run uvicorn src.app.main:app --reload
- 프로덕션: uv run uvicorn src.app.main:app
"""

from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager
from pathlib import Path
from typing import Any

import yaml
from fastapi import FastAPI
from fastapi.staticfiles import StaticFiles

# Routes
from src.app.routes import fitting
from src.app.services.fitting import SessionStore, create_provider
from src.core.logging import configure_logging
from src.domain.constants import DEFAULT_MAX_SESSIONS

# =============================================================================
# Configuration
# =============================================================================


def load_config(config_path: Path | None = None) -> dict:
    """설정 파일 로드."""
    if config_path is None:
        # 프로젝트 루트의 default.yaml
        config_path = Path(__file__).parent.parent.parent / "default.yaml"

    if not config_path.exists():
        return {}

    with open(config_path, encoding="utf-8") as f:
        data: dict[Any, Any] | None = yaml.safe_load(f)
        return data or {}


# =============================================================================
# Lifespan
# =============================================================================


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """
    애플리케이션 생명주기 관리.

    시작 시: 설정 로드, 로거 설정, 세션 저장소/Provider 준비
    종료 시: 메모리 세션 정리

    테스트에서 app.state에 미리 넣어둔 sessions/provider는 유지.
    """
    # Startup
    config = load_config()
    app.state.config = config
    configure_logging(config)

    if getattr(app.state, "sessions", None) is None:
        max_sessions = config.get("sessions", {}).get(
            "max_sessions", DEFAULT_MAX_SESSIONS
        )
        app.state.sessions = SessionStore(max_sessions=max_sessions)

    if getattr(app.state, "provider", None) is None:
        app.state.provider = create_provider(config)

    yield

    # Shutdown
    app.state.sessions.clear()


# =============================================================================
# App Instance
# =============================================================================

app = FastAPI(
    title="Virtual Fitting Room",
    description="모델 사진 + 상의 + 하의 → AI 가상 피팅 이미지",
    version="0.1.0",
    lifespan=lifespan,
)

# Static files (CSS)
static_dir = Path(__file__).parent / "static"
if static_dir.exists():
    app.mount("/static", StaticFiles(directory=static_dir), name="static")


# =============================================================================
# Routes
# =============================================================================

# 페이지 라우트 (HTML)
app.include_router(fitting.router, prefix="", tags=["Fitting"])

# API 라우트
app.include_router(fitting.api_router, prefix="/api/fitting", tags=["Fitting API"])


# =============================================================================
# Root Endpoints
# =============================================================================


@app.get("/health")
async def health() -> dict[str, str]:
    """헬스 체크."""
    return {"status": "ok"}


# =============================================================================
# CLI Entry Point
# =============================================================================

if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "src.app.main:app",
        host="127.0.0.1",
        port=8000,
        reload=True,
    )
