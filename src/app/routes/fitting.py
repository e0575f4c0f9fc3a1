"""
Fitting Routes: 가상 피팅 (메인 기능).

- GET / → 피팅 화면 (Jinja2 + HTMX)
- GET /api/fitting/workspace → 현재 작업 영역 HTML
- POST /api/fitting/slots/{slot} → 슬롯 이미지 업로드
- DELETE /api/fitting/slots/{slot} → 슬롯 이미지 제거
- POST /api/fitting/generate → 피팅 이미지 생성
- GET /api/fitting/state → 상태 JSON

모든 HTML 응답은 #workspace 전체를 교체하는 조각.
"""

import logging
from pathlib import Path
from typing import Any

from fastapi import APIRouter, File, Form, HTTPException, Query, Request, UploadFile
from fastapi.responses import HTMLResponse
from fastapi.templating import Jinja2Templates

from src.app.providers.base import ImageGenerationProvider
from src.app.services.fitting import FittingSession, SessionStore
from src.app.views import (
    build_workspace_html,
    is_trigger_disabled,
    result_pane_kind,
    upload_error_message,
)
from src.core.ids import generate_session_id, is_valid_session_id
from src.core.images import read_upload
from src.domain.errors import ErrorCodes, ImageReadError, RequestInFlightError
from src.domain.schemas import Slot

logger = logging.getLogger(__name__)

# Jinja2 템플릿 설정
_templates_dir = Path(__file__).parent.parent / "templates"
jinja_templates = (
    Jinja2Templates(directory=_templates_dir) if _templates_dir.exists() else None
)

# Routers
router = APIRouter()  # HTML pages
api_router = APIRouter()  # API endpoints


# =============================================================================
# Dependencies
# =============================================================================


def get_store(request: Request) -> SessionStore:
    store: SessionStore = request.app.state.sessions
    return store


def get_provider(request: Request) -> ImageGenerationProvider:
    provider: ImageGenerationProvider = request.app.state.provider
    return provider


def get_session(request: Request, session_id: str | None) -> FittingSession:
    """
    세션 ID에 대응하는 FittingSession 반환.

    처음 보는 ID면 빈 세션 생성 (서버 재시작 후 페이지가 남아 있는 경우).
    """
    if not session_id or not is_valid_session_id(session_id):
        raise HTTPException(status_code=400, detail="Invalid session_id")
    return get_store(request).get_or_create(session_id)


def parse_slot(slot: str) -> Slot:
    try:
        return Slot(slot)
    except ValueError:
        raise HTTPException(
            status_code=404,
            detail=f"[{ErrorCodes.UNKNOWN_SLOT}] Unknown slot: {slot}",
        ) from None


# =============================================================================
# Page Routes (HTML)
# =============================================================================


@router.get("/", response_class=HTMLResponse)
async def fitting_page(request: Request) -> HTMLResponse:
    """
    피팅 화면.

    페이지 로드마다 새 세션 발급.
    """
    session_id = generate_session_id()
    session = get_store(request).get_or_create(session_id)
    workspace_html = build_workspace_html(session)

    if jinja_templates:
        return jinja_templates.TemplateResponse(
            request,
            "index.html",
            {
                "session_id": session_id,
                "workspace_html": workspace_html,
            },
        )

    # Fallback: Jinja2 템플릿이 없는 경우 기본 HTML
    return HTMLResponse(
        content=f"""
<!DOCTYPE html>
<html lang="ko">
<head>
    <meta charset="UTF-8">
    <title>가상 피팅룸</title>
    <script src="https://unpkg.com/htmx.org@1.9.10"></script>
</head>
<body>
    <h1>가상 피팅룸</h1>
    <input type="hidden" id="session-id" name="session_id" value="{session_id}">
    {workspace_html}
</body>
</html>
    """
    )


# =============================================================================
# API Routes
# =============================================================================


@api_router.get("/workspace", response_class=HTMLResponse)
async def get_workspace(
    request: Request,
    session_id: str | None = Query(None),
) -> HTMLResponse:
    """현재 작업 영역 (진행 중 polling 포함)."""
    session = get_session(request, session_id)
    return HTMLResponse(content=build_workspace_html(session))


@api_router.post("/slots/{slot}", response_class=HTMLResponse)
async def upload_slot_image(
    request: Request,
    slot: str,
    file: UploadFile = File(...),
    session_id: str | None = Form(None),
) -> HTMLResponse:
    """
    슬롯 이미지 업로드.

    실패 시 해당 슬롯은 비워지고 슬롯 아래에 에러 표시
    (HTMX가 swap하도록 200 응답).
    """
    target = parse_slot(slot)
    session = get_session(request, session_id)

    try:
        image = await read_upload(file)
    except ImageReadError as e:
        logger.info(f"Upload rejected for slot {target.value}: {e}")
        session.clear_image(target)
        return HTMLResponse(
            content=build_workspace_html(
                session, slot_errors={target: upload_error_message(e)}
            )
        )

    session.set_image(target, image)
    return HTMLResponse(content=build_workspace_html(session))


@api_router.delete("/slots/{slot}", response_class=HTMLResponse)
async def remove_slot_image(
    request: Request,
    slot: str,
    session_id: str | None = Query(None),
) -> HTMLResponse:
    """
    슬롯 이미지 제거 (해당 슬롯만).

    htmx 1.x는 DELETE 파라미터를 body(form-urlencoded)로 보냄.
    query에 없으면 form body에서 session_id를 읽음.
    """
    target = parse_slot(slot)
    if session_id is None:
        form = await request.form()
        value = form.get("session_id")
        session_id = value if isinstance(value, str) else None
    session = get_session(request, session_id)
    session.clear_image(target)
    return HTMLResponse(content=build_workspace_html(session))


@api_router.post("/generate", response_class=HTMLResponse)
async def generate_fitting(
    request: Request,
    session_id: str | None = Form(None),
) -> HTMLResponse:
    """
    피팅 이미지 생성.

    - 슬롯 누락: 원격 호출 없이 검증 에러 표시
    - 진행 중 재요청: 409 (상태 변경 없음)
    - 그 외: 원격 호출 1회 후 결과/에러 표시
    """
    session = get_session(request, session_id)

    try:
        await session.generate(get_provider(request))
    except RequestInFlightError:
        return HTMLResponse(
            content=build_workspace_html(session),
            status_code=409,
        )

    return HTMLResponse(content=build_workspace_html(session))


@api_router.get("/state")
async def get_state(
    request: Request,
    session_id: str | None = Query(None),
) -> dict[str, Any]:
    """세션 상태 JSON (스크립트/디버깅용)."""
    session = get_session(request, session_id)
    return {
        **session.to_dict(),
        "trigger_disabled": is_trigger_disabled(session),
        "result_pane": result_pane_kind(session).value,
    }
