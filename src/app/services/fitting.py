"""
Fitting Service: 세 이미지 보관 + 생성 요청 라이프사이클.

상태 전이:
- Idle → Requesting → Succeeded | Failed
- 재트리거 시 이전 결과/에러를 버리고 Requesting부터 다시 시작

규칙:
- 진행 중(Requesting)에는 재트리거 거절 (큐잉/병합 없음)
- 슬롯이 하나라도 비면 원격 호출 없이 검증 에러
- 트리거 1회 = 원격 호출 1회 (재시도 없음)
- 진행 중 입력이 바뀌어도 요청은 취소되지 않고 결과는 그대로 반영
"""

import logging
from collections import OrderedDict, deque

from src.app.providers.base import (
    GenerationError,
    ImageGenerationProvider,
    ProviderError,
)
from src.app.providers.gemini import GeminiImageProvider
from src.core.hashing import compute_input_hashes
from src.core.logging import complete_run_log, create_run_log, emit_run_log
from src.domain.constants import (
    DEFAULT_GENERATION_MODEL,
    DEFAULT_MAX_SESSIONS,
    GENERIC_ERROR_MESSAGE,
    MAX_RUN_LOGS_PER_SESSION,
    VALIDATION_MESSAGE,
)
from src.domain.errors import ErrorCodes, RequestInFlightError
from src.domain.schemas import (
    Failed,
    FittingStatus,
    GenerationRunLog,
    Idle,
    ImageFile,
    Requesting,
    Slot,
    Succeeded,
)

logger = logging.getLogger(__name__)

SLOT_ORDER: tuple[Slot, ...] = (Slot.MODEL, Slot.TOP, Slot.BOTTOM)


def create_provider(config: dict) -> ImageGenerationProvider:
    """config(ai.generation) 기반 기본 Provider 생성."""
    generation_config = config.get("ai", {}).get("generation", {})
    return GeminiImageProvider(
        model=generation_config.get("model", DEFAULT_GENERATION_MODEL),
    )


class FittingSession:
    """
    세션 1개의 UI 상태.

    images: 슬롯별 ImageFile (비어 있으면 키 없음)
    status: 생성 라이프사이클 (태그드 variant)
    runs: 이 세션에서 발생한 생성 RunLog (최근 MAX_RUN_LOGS_PER_SESSION개)
    """

    def __init__(self, session_id: str):
        self.session_id = session_id
        self.images: dict[Slot, ImageFile] = {}
        self.status: FittingStatus = Idle()
        self.runs: deque[GenerationRunLog] = deque(maxlen=MAX_RUN_LOGS_PER_SESSION)

    # -------------------------------------------------------------------------
    # Slots
    # -------------------------------------------------------------------------

    def set_image(self, slot: Slot, image: ImageFile) -> None:
        """슬롯 교체. 다른 슬롯/진행 중 요청에는 영향 없음."""
        self.images[slot] = image

    def clear_image(self, slot: Slot) -> None:
        """슬롯 비우기. 다른 슬롯/진행 중 요청에는 영향 없음."""
        self.images.pop(slot, None)

    def get_image(self, slot: Slot) -> ImageFile | None:
        return self.images.get(slot)

    def missing_slots(self) -> list[Slot]:
        return [slot for slot in SLOT_ORDER if slot not in self.images]

    @property
    def is_complete(self) -> bool:
        return not self.missing_slots()

    @property
    def is_loading(self) -> bool:
        return isinstance(self.status, Requesting)

    @property
    def can_generate(self) -> bool:
        return self.is_complete and not self.is_loading

    @property
    def error(self) -> str | None:
        return self.status.message if isinstance(self.status, Failed) else None

    @property
    def result(self) -> ImageFile | None:
        return self.status.result if isinstance(self.status, Succeeded) else None

    # -------------------------------------------------------------------------
    # Generation
    # -------------------------------------------------------------------------

    async def generate(self, provider: ImageGenerationProvider) -> FittingStatus:
        """
        생성 트리거.

        Returns:
            트리거 처리 후 상태 (Succeeded 또는 Failed)

        Raises:
            RequestInFlightError: 이미 Requesting 상태
        """
        if isinstance(self.status, Requesting):
            logger.warning(
                f"Trigger refused: session {self.session_id} already requesting "
                f"({self.status.run_id})"
            )
            raise RequestInFlightError(
                ErrorCodes.REQUEST_IN_FLIGHT,
                session_id=self.session_id,
                run_id=self.status.run_id,
            )

        missing = self.missing_slots()
        if missing:
            logger.info(
                f"Trigger rejected: session {self.session_id} missing "
                f"{[slot.value for slot in missing]}"
            )
            self.status = Failed(
                message=VALIDATION_MESSAGE,
                code=ErrorCodes.MISSING_IMAGES,
            )
            return self.status

        # 트리거 시점 입력 스냅샷 (이후 슬롯 변경과 무관)
        inputs = {slot: self.images[slot] for slot in SLOT_ORDER}

        run_log = create_run_log(self.session_id, compute_input_hashes(inputs))
        self.runs.append(run_log)
        self.status = Requesting(run_id=run_log.run_id)

        try:
            result = await provider.generate_fitting(
                inputs[Slot.MODEL],
                inputs[Slot.TOP],
                inputs[Slot.BOTTOM],
            )
            if not result.success or result.image is None:
                raise GenerationError(
                    result.error_code or ErrorCodes.NO_IMAGE_RETURNED,
                    result.error_message or GENERIC_ERROR_MESSAGE,
                )

        except ProviderError as e:
            self._fail(run_log, e.code, e.message)

        except Exception as e:
            # 네트워크/응답 파싱 등 Provider가 감싸지 못한 예외
            logger.error(
                f"Generation call raised unexpectedly: {e}", exc_info=True
            )
            self._fail(run_log, ErrorCodes.GENERATION_FAILED, str(e))

        else:
            complete_run_log(run_log, success=True, model_used=result.model_used)
            self.status = Succeeded(result=result.image, run_id=run_log.run_id)

        finally:
            # 취소 등으로 결과 없이 빠져나간 경우 Requesting 고착 방지
            if isinstance(self.status, Requesting) and (
                self.status.run_id == run_log.run_id
            ):
                self._fail(run_log, ErrorCodes.GENERATION_FAILED, "")

            emit_run_log(run_log)

        return self.status

    def _fail(self, run_log: GenerationRunLog, code: str, message: str) -> None:
        message = message.strip() or GENERIC_ERROR_MESSAGE
        complete_run_log(
            run_log,
            success=False,
            error_code=code,
            error_message=message,
        )
        self.status = Failed(message=message, code=code, run_id=run_log.run_id)

    def to_dict(self) -> dict:
        return {
            "session_id": self.session_id,
            "status": self.status.kind,
            "filled_slots": [slot.value for slot in SLOT_ORDER if slot in self.images],
            "missing_slots": [slot.value for slot in self.missing_slots()],
            "error": self.error,
            "has_result": self.result is not None,
            "runs": [run.to_dict() for run in self.runs],
        }


class SessionStore:
    """
    세션 ID → FittingSession (메모리 전용).

    max_sessions 초과 시 가장 오래 사용되지 않은 세션부터 제거.
    Requesting 상태 세션은 제거하지 않음.
    """

    def __init__(self, max_sessions: int = DEFAULT_MAX_SESSIONS):
        self.max_sessions = max_sessions
        self._sessions: OrderedDict[str, FittingSession] = OrderedDict()

    def __len__(self) -> int:
        return len(self._sessions)

    def __contains__(self, session_id: object) -> bool:
        return session_id in self._sessions

    def get(self, session_id: str) -> FittingSession | None:
        session = self._sessions.get(session_id)
        if session is not None:
            self._sessions.move_to_end(session_id)
        return session

    def get_or_create(self, session_id: str) -> FittingSession:
        session = self.get(session_id)
        if session is None:
            session = FittingSession(session_id)
            self._sessions[session_id] = session
            self._evict(keep=session_id)
        return session

    def discard(self, session_id: str) -> None:
        self._sessions.pop(session_id, None)

    def clear(self) -> None:
        self._sessions.clear()

    def _evict(self, keep: str) -> None:
        while len(self._sessions) > self.max_sessions:
            victim = next(
                (
                    sid
                    for sid, session in self._sessions.items()
                    if sid != keep and not session.is_loading
                ),
                None,
            )
            if victim is None:
                break
            logger.debug(f"Evicting idle session {victim}")
            del self._sessions[victim]
