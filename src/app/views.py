"""
Presentation: FittingSession → HTML 조각 (HTMX swap용).

모든 함수는 세션 상태만 보고 결정적으로 렌더링.

결과 영역 우선순위:
- Requesting → 스피너
- Failed → 에러 패널
- Succeeded → 생성 이미지
- 그 외 → 빈 placeholder
"""

import html as html_escape_module
from enum import Enum

from src.app.services.fitting import SLOT_ORDER, FittingSession
from src.domain.constants import (
    FILE_PICKER_ACCEPT,
    IMAGE_READ_ERROR_MESSAGE,
    UNSUPPORTED_TYPE_MESSAGE,
)
from src.domain.errors import ErrorCodes, FittingError
from src.domain.schemas import Slot

API_PREFIX = "/api/fitting"

# 진행 중 상태를 다른 요청에서 본 경우 완료까지 다시 조회
LOADING_POLL_TRIGGER = "every 2s"


class ResultPane(str, Enum):
    """결과 영역 표시 종류."""
    LOADING = "loading"
    ERROR = "error"
    IMAGE = "image"
    EMPTY = "empty"


def escape_html(text: str) -> str:
    """HTML 이스케이프."""
    return html_escape_module.escape(text)


# =============================================================================
# State → Display Decisions
# =============================================================================


def result_pane_kind(session: FittingSession) -> ResultPane:
    if session.is_loading:
        return ResultPane.LOADING
    if session.error is not None:
        return ResultPane.ERROR
    if session.result is not None:
        return ResultPane.IMAGE
    return ResultPane.EMPTY


def is_trigger_disabled(session: FittingSession) -> bool:
    """진행 중이거나 슬롯이 하나라도 비어 있으면 비활성."""
    return session.is_loading or not session.is_complete


def upload_error_message(error: FittingError) -> str:
    """업로드 실패 코드 → 슬롯 아래 표시할 문구."""
    if error.code == ErrorCodes.UNSUPPORTED_IMAGE_TYPE:
        return UNSUPPORTED_TYPE_MESSAGE
    return IMAGE_READ_ERROR_MESSAGE


# =============================================================================
# HTML Builders
# =============================================================================


def build_slot_html(
    session: FittingSession,
    slot: Slot,
    upload_error: str | None = None,
) -> str:
    """
    업로드 슬롯 1개.

    - 채워짐: 미리보기 + hover 시 보이는 제거 버튼 (클릭 시 교체 업로드)
    - 비어 있음: 업로드 안내
    """
    label = escape_html(slot.label)
    image = session.get_image(slot)

    if image is not None:
        body = (
            f'<img class="slot-preview" src="{escape_html(image.to_data_url())}" '
            f'alt="{label}">'
        )
    else:
        body = (
            '<div class="slot-placeholder">'
            f'<span class="slot-icon slot-icon-{slot.value}"></span>'
            "<p>클릭해서 업로드</p>"
            "</div>"
        )

    picker = f"""<form class="slot-form"
          hx-post="{API_PREFIX}/slots/{slot.value}"
          hx-encoding="multipart/form-data"
          hx-trigger="change"
          hx-include="#session-id">
        <label class="slot-drop">
            <input type="file" name="file" accept="{escape_html(FILE_PICKER_ACCEPT)}" hidden>
            {body}
        </label>
    </form>"""

    remove_button = ""
    if image is not None:
        remove_button = f"""<button type="button" class="slot-remove"
            hx-delete="{API_PREFIX}/slots/{slot.value}?session_id={escape_html(session.session_id)}"
            hx-include="#session-id"
            aria-label="이미지 제거">&times;</button>"""

    error_html = ""
    if upload_error:
        error_html = f'<p class="slot-error">{escape_html(upload_error)}</p>'

    state = "filled" if image is not None else "empty"
    return f"""<div class="slot slot-{state}" id="slot-{slot.value}" data-slot="{slot.value}">
    <span class="slot-label">{label}</span>
    <div class="slot-frame">
        {picker}
        {remove_button}
    </div>
    {error_html}
</div>"""


def build_trigger_html(session: FittingSession) -> str:
    """생성 버튼. 진행 중 재클릭은 hx-disabled-elt로 막음."""
    disabled = " disabled" if is_trigger_disabled(session) else ""
    text = "생성 중..." if session.is_loading else "피팅 생성"
    return f"""<button type="button" id="generate-button" class="generate-button"
        hx-post="{API_PREFIX}/generate"
        hx-include="#session-id"
        hx-disabled-elt="this"
        hx-indicator="#result-pane"{disabled}>{text}</button>"""


def build_result_html(session: FittingSession) -> str:
    """결과 영역."""
    kind = result_pane_kind(session)
    poll = ""

    if kind is ResultPane.LOADING:
        content = (
            '<div class="result-loading">'
            '<div class="spinner"></div>'
            "<p>AI가 피팅 이미지를 만들고 있습니다... 잠시만 기다려주세요.</p>"
            "</div>"
        )
        poll = (
            f' hx-get="{API_PREFIX}/workspace"'
            f' hx-trigger="{LOADING_POLL_TRIGGER}"'
            ' hx-include="#session-id"'
        )
    elif kind is ResultPane.ERROR:
        content = (
            '<div class="result-error" role="alert">'
            "<h3>오류</h3>"
            f"<p>{escape_html(session.error or '')}</p>"
            "</div>"
        )
    elif kind is ResultPane.IMAGE:
        result = session.result
        src = escape_html(result.to_data_url()) if result else ""
        content = (
            f'<img class="result-image" src="{src}" alt="생성된 피팅 이미지">'
        )
    else:
        content = (
            '<div class="result-empty">'
            "<p>생성된 이미지가 여기에 표시됩니다.</p>"
            "</div>"
        )

    # 요청 중에는 htmx-request 클래스로 클라이언트 측 스피너가 먼저 보임
    return f"""<div id="result-pane" class="result-pane result-{kind.value}"{poll}>
    <div class="loading-indicator"><div class="spinner"></div></div>
    <div class="result-content">{content}</div>
</div>"""


def build_workspace_html(
    session: FittingSession,
    slot_errors: dict[Slot, str] | None = None,
) -> str:
    """슬롯 3개 + 생성 버튼 + 결과 영역 전체."""
    slot_errors = slot_errors or {}
    slots_html = "\n".join(
        build_slot_html(session, slot, slot_errors.get(slot)) for slot in SLOT_ORDER
    )

    return f"""<div id="workspace" class="workspace"
     hx-target="#workspace" hx-swap="outerHTML">
    <section class="panel inputs-panel">
        <h2>이미지 업로드</h2>
        <div class="slots">
{slots_html}
        </div>
        {build_trigger_html(session)}
    </section>
    <section class="panel result-panel">
        {build_result_html(session)}
    </section>
</div>"""
