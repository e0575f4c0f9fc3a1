"""
Pytest fixtures for the fitting room tests.

테스트 구성:
- 이미지 바이트/ImageFile 샘플
- 원격 호출 대신 쓰는 FakeProvider (호출 기록 + 결과/예외 지정)
"""

import asyncio
import base64
import uuid
from pathlib import Path

import pytest
import yaml

from src.app.providers.base import (
    GenerationError,
    GenerationResult,
    ImageGenerationProvider,
)
from src.app.services.fitting import FittingSession
from src.core.images import encode_image
from src.domain.schemas import ImageFile, Slot

# 1x1 white pixel PNG (valid minimal PNG)
PNG_BYTES = base64.b64decode(
    "iVBORw0KGgoAAAANSUhEUgAAAAEAAAABCAYAAAAfFcSJAAAADUlEQVR42mP8/5+hHgAHggJ/PchI7wAAAABJRU5ErkJggg=="
)

# JPEG SOI/EOI 마커만 있는 가짜 JPEG (어댑터는 내용 검증 안 함)
JPEG_BYTES = b"\xff\xd8\xff\xe0fake jpeg body\xff\xd9"


class FakeProvider(ImageGenerationProvider):
    """
    테스트용 Provider.

    - result: 반환할 GenerationResult (기본: 성공 + PNG)
    - error: 지정 시 해당 예외 발생
    - gate: 지정 시 set() 될 때까지 대기 (진행 중 상태 재현용)
    """

    def __init__(
        self,
        result: GenerationResult | None = None,
        error: Exception | None = None,
        gate: asyncio.Event | None = None,
    ):
        self.model = "fake-image-model"
        self.result = result or GenerationResult(
            success=True,
            image=ImageFile(
                data=base64.b64encode(b"generated image").decode("ascii"),
                mime_type="image/png",
            ),
            model_requested=self.model,
            model_used=self.model,
        )
        self.error = error
        self.gate = gate
        self.calls: list[tuple[ImageFile, ImageFile, ImageFile]] = []

    async def generate_fitting(
        self,
        model_image: ImageFile,
        top_image: ImageFile,
        bottom_image: ImageFile,
    ) -> GenerationResult:
        self.calls.append((model_image, top_image, bottom_image))
        if self.gate is not None:
            await self.gate.wait()
        if self.error is not None:
            raise self.error
        return self.result


# =============================================================================
# Path / Config Fixtures
# =============================================================================

@pytest.fixture
def project_root() -> Path:
    """프로젝트 루트 경로."""
    return Path(__file__).parent.parent


@pytest.fixture
def default_config(project_root: Path) -> dict:
    """default.yaml 로드."""
    with open(project_root / "default.yaml", encoding="utf-8") as f:
        return yaml.safe_load(f)


# =============================================================================
# Image Fixtures
# =============================================================================

@pytest.fixture
def png_bytes() -> bytes:
    return PNG_BYTES


@pytest.fixture
def jpeg_bytes() -> bytes:
    return JPEG_BYTES


@pytest.fixture
def model_image() -> ImageFile:
    return encode_image(PNG_BYTES, "image/png", "model.png")


@pytest.fixture
def top_image() -> ImageFile:
    return encode_image(JPEG_BYTES, "image/jpeg", "top.jpg")


@pytest.fixture
def bottom_image() -> ImageFile:
    return encode_image(b"RIFF\x00\x00\x00\x00WEBPVP8 ", "image/webp", "bottom.webp")


@pytest.fixture
def all_images(
    model_image: ImageFile,
    top_image: ImageFile,
    bottom_image: ImageFile,
) -> dict[Slot, ImageFile]:
    return {
        Slot.MODEL: model_image,
        Slot.TOP: top_image,
        Slot.BOTTOM: bottom_image,
    }


# =============================================================================
# Session / Provider Fixtures
# =============================================================================

@pytest.fixture
def session_id() -> str:
    return str(uuid.uuid4())


@pytest.fixture
def session(session_id: str) -> FittingSession:
    """빈 세션."""
    return FittingSession(session_id)


@pytest.fixture
def full_session(
    session: FittingSession,
    all_images: dict[Slot, ImageFile],
) -> FittingSession:
    """세 슬롯 모두 채워진 세션."""
    for slot, image in all_images.items():
        session.set_image(slot, image)
    return session


@pytest.fixture
def fake_provider() -> FakeProvider:
    """성공 Provider."""
    return FakeProvider()


@pytest.fixture
def failing_provider() -> FakeProvider:
    """GenerationError를 던지는 Provider."""
    return FakeProvider(
        error=GenerationError("SERVICE_UNAVAILABLE", "서비스를 일시적으로 사용할 수 없습니다.")
    )


@pytest.fixture
def provider_factory() -> type[FakeProvider]:
    """FakeProvider 클래스 (result/error/gate 지정용)."""
    return FakeProvider
