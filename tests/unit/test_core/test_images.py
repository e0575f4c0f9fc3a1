"""
test_images.py - Image Input Adapter 테스트

검증 포인트:
1. 변환 후 decode 결과가 원본 바이트와 동일
2. 선언된 content type 유지 (정규화만)
3. 읽기 실패/빈 파일/미지원 형식 → ImageReadError
"""

import base64
from unittest.mock import AsyncMock

import pytest

from src.core.images import (
    decode_image,
    encode_image,
    is_allowed_mime_type,
    normalize_mime_type,
    read_upload,
)
from src.domain.errors import ErrorCodes, FittingError, ImageReadError
from src.domain.schemas import ImageFile


class FakeUpload:
    """UploadFile 대용 (filename, content_type, async read)."""

    def __init__(
        self,
        content: bytes = b"",
        filename: str | None = "photo.png",
        content_type: str | None = "image/png",
        error: Exception | None = None,
    ):
        self.filename = filename
        self.content_type = content_type
        self.read = AsyncMock(return_value=content, side_effect=error)


# =============================================================================
# MIME Type 정규화 테스트
# =============================================================================


class TestNormalizeMimeType:
    """MIME 타입 정규화 테스트."""

    def test_declared_mime_kept(self):
        """표준 MIME은 그대로."""
        assert normalize_mime_type("image/png") == "image/png"
        assert normalize_mime_type("image/jpeg") == "image/jpeg"
        assert normalize_mime_type("image/webp") == "image/webp"

    def test_aliases(self):
        """별칭 정리."""
        assert normalize_mime_type("image/jpg") == "image/jpeg"
        assert normalize_mime_type("image/pjpeg") == "image/jpeg"

    def test_case_and_parameters(self):
        """대소문자/파라미터 무시."""
        assert normalize_mime_type("IMAGE/PNG") == "image/png"
        assert normalize_mime_type("image/jpeg; charset=binary") == "image/jpeg"

    def test_generic_uses_extension(self):
        """generic 선언값 → 확장자로 추정."""
        assert normalize_mime_type("application/octet-stream", "a.JPG") == "image/jpeg"
        assert normalize_mime_type("", "b.webp") == "image/webp"
        assert normalize_mime_type(None, "c.png") == "image/png"

    def test_specific_declared_type_wins_over_extension(self):
        """선언값이 구체적이면 확장자 무시."""
        assert normalize_mime_type("image/png", "photo.jpg") == "image/png"

    def test_unknown(self):
        """추정 불가."""
        assert normalize_mime_type(None) == "application/octet-stream"
        assert normalize_mime_type("", "notes.txt") == "application/octet-stream"

    def test_allowed_types(self):
        assert is_allowed_mime_type("image/png")
        assert not is_allowed_mime_type("image/gif")
        assert not is_allowed_mime_type("application/pdf")


# =============================================================================
# encode / decode 테스트
# =============================================================================


class TestEncodeImage:
    """encode_image 테스트."""

    def test_payload_is_base64_text(self, png_bytes):
        """payload는 base64 텍스트."""
        image = encode_image(png_bytes, "image/png", "model.png")

        assert isinstance(image.data, str)
        assert base64.b64decode(image.data) == png_bytes
        assert image.mime_type == "image/png"
        assert image.filename == "model.png"

    def test_round_trip_identical_bytes(self, png_bytes, jpeg_bytes):
        """변환 → decode 결과가 원본과 동일."""
        all_bytes = bytes(range(256)) * 4

        for original, mime in (
            (png_bytes, "image/png"),
            (jpeg_bytes, "image/jpeg"),
            (all_bytes, "image/webp"),
        ):
            assert decode_image(encode_image(original, mime)) == original

    def test_data_url(self, png_bytes):
        """data URL 형식."""
        image = encode_image(png_bytes, "image/png")

        assert image.to_data_url() == f"data:image/png;base64,{image.data}"

    def test_empty_rejected(self):
        """빈 파일 → IMAGE_EMPTY."""
        with pytest.raises(ImageReadError) as exc_info:
            encode_image(b"", "image/png", "empty.png")

        assert exc_info.value.code == ErrorCodes.IMAGE_EMPTY

    def test_unsupported_type_rejected(self):
        """GIF 등 → UNSUPPORTED_IMAGE_TYPE."""
        with pytest.raises(ImageReadError) as exc_info:
            encode_image(b"GIF89a", "image/gif", "anim.gif")

        assert exc_info.value.code == ErrorCodes.UNSUPPORTED_IMAGE_TYPE
        assert exc_info.value.context["mime_type"] == "image/gif"

    def test_image_read_error_is_fitting_error(self):
        """ImageReadError는 FittingError 계열."""
        with pytest.raises(FittingError):
            encode_image(b"", "image/png")


class TestDecodeImage:
    """decode_image 테스트."""

    def test_corrupt_payload(self):
        """base64 손상 → IMAGE_READ_FAILED."""
        image = ImageFile(data="not base64!!", mime_type="image/png")

        with pytest.raises(ImageReadError) as exc_info:
            decode_image(image)

        assert exc_info.value.code == ErrorCodes.IMAGE_READ_FAILED


# =============================================================================
# read_upload 테스트
# =============================================================================


class TestReadUpload:
    """read_upload 테스트."""

    @pytest.mark.asyncio
    async def test_successful_read(self, png_bytes):
        """정상 업로드."""
        upload = FakeUpload(png_bytes, "model.png", "image/png")

        image = await read_upload(upload)

        assert decode_image(image) == png_bytes
        assert image.mime_type == "image/png"
        assert image.filename == "model.png"
        upload.read.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_missing_content_type_uses_extension(self, jpeg_bytes):
        """content type 없음 → 확장자."""
        upload = FakeUpload(jpeg_bytes, "top.jpeg", None)

        image = await read_upload(upload)

        assert image.mime_type == "image/jpeg"

    @pytest.mark.asyncio
    async def test_read_failure(self):
        """읽기 중 I/O 에러 → IMAGE_READ_FAILED."""
        upload = FakeUpload(error=OSError("disk gone"))

        with pytest.raises(ImageReadError) as exc_info:
            await read_upload(upload)

        assert exc_info.value.code == ErrorCodes.IMAGE_READ_FAILED
        assert "disk gone" in exc_info.value.context["error"]

    @pytest.mark.asyncio
    async def test_empty_upload(self):
        """빈 파일."""
        upload = FakeUpload(b"", "model.png", "image/png")

        with pytest.raises(ImageReadError) as exc_info:
            await read_upload(upload)

        assert exc_info.value.code == ErrorCodes.IMAGE_EMPTY

    @pytest.mark.asyncio
    async def test_non_image_upload(self):
        """이미지가 아닌 파일."""
        upload = FakeUpload(b"%PDF-1.7", "doc.pdf", "application/pdf")

        with pytest.raises(ImageReadError) as exc_info:
            await read_upload(upload)

        assert exc_info.value.code == ErrorCodes.UNSUPPORTED_IMAGE_TYPE
