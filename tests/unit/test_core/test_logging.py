"""
test_logging.py - 생성 RunLog 테스트

검증 포인트:
1. create_run_log: pending 상태, 입력 해시 보관
2. complete_run_log: 성공/실패 기록
3. emit_run_log: JSON 한 줄 로그 (실패는 WARNING)
4. configure_logging: config 레벨 반영
"""

import json
import logging

from src.core.logging import (
    complete_run_log,
    configure_logging,
    create_run_log,
    emit_run_log,
)


class TestCreateRunLog:
    """create_run_log 테스트."""

    def test_initial_state(self):
        run_log = create_run_log("session-1", {"model": "sha256:abc"})

        assert run_log.run_id.startswith("RUN-")
        assert run_log.session_id == "session-1"
        assert run_log.result == "pending"
        assert run_log.finished_at is None
        assert run_log.input_hashes == {"model": "sha256:abc"}

    def test_input_hashes_copied(self):
        """원본 dict 변경이 RunLog에 영향 없음."""
        hashes = {"model": "sha256:abc"}
        run_log = create_run_log("session-1", hashes)

        hashes["top"] = "sha256:def"

        assert "top" not in run_log.input_hashes

    def test_unique_run_ids(self):
        assert create_run_log("s").run_id != create_run_log("s").run_id


class TestCompleteRunLog:
    """complete_run_log 테스트."""

    def test_success(self):
        run_log = create_run_log("s")

        complete_run_log(run_log, success=True, model_used="model-x")

        assert run_log.result == "success"
        assert run_log.finished_at is not None
        assert run_log.model_used == "model-x"
        assert run_log.error_code is None

    def test_failure(self):
        run_log = create_run_log("s")

        complete_run_log(
            run_log,
            success=False,
            error_code="GENERATION_FAILED",
            error_message="boom",
        )

        assert run_log.result == "failed"
        assert run_log.error_code == "GENERATION_FAILED"
        assert run_log.error_message == "boom"

    def test_to_dict(self):
        run_log = create_run_log("s", {"top": "sha256:1"})
        complete_run_log(run_log, success=True)

        data = run_log.to_dict()

        assert data["run_id"] == run_log.run_id
        assert data["result"] == "success"
        assert data["input_hashes"] == {"top": "sha256:1"}


class TestEmitRunLog:
    """emit_run_log 테스트."""

    def test_success_logged_as_info(self, caplog):
        run_log = create_run_log("s")
        complete_run_log(run_log, success=True)

        with caplog.at_level(logging.INFO, logger="src.core.logging"):
            emit_run_log(run_log)

        record = caplog.records[-1]
        assert record.levelno == logging.INFO
        payload = json.loads(record.getMessage().split("generation run: ", 1)[1])
        assert payload["run_id"] == run_log.run_id

    def test_failure_logged_as_warning(self, caplog):
        run_log = create_run_log("s")
        complete_run_log(run_log, success=False, error_code="X", error_message="에러")

        with caplog.at_level(logging.INFO, logger="src.core.logging"):
            emit_run_log(run_log)

        record = caplog.records[-1]
        assert record.levelno == logging.WARNING
        assert "에러" in record.getMessage()


class TestConfigureLogging:
    """configure_logging 테스트."""

    def test_level_from_config(self):
        configure_logging({"logging": {"level": "debug"}})

        assert logging.getLogger("src").level == logging.DEBUG

    def test_default_level(self):
        configure_logging({})

        assert logging.getLogger("src").level == logging.INFO

    def test_invalid_level_falls_back_to_info(self):
        configure_logging({"logging": {"level": "LOUD"}})

        assert logging.getLogger("src").level == logging.INFO
