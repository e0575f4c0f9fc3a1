"""
해시 계산: 입력 이미지 식별용.

규칙:
- 원문 payload 대신 해시만 로그에 기록
- SHA-256, 앞 16자리
"""

import hashlib

from src.domain.schemas import ImageFile, Slot


def compute_bytes_hash(content: bytes) -> str:
    """바이트 SHA-256 해시 (prefix 포함)."""
    return f"sha256:{hashlib.sha256(content).hexdigest()[:16]}"


def compute_image_hash(image: ImageFile) -> str:
    """
    ImageFile 해시.

    mime_type + base64 payload 기준.
    동일 파일 재업로드 시 같은 값.
    """
    return compute_bytes_hash(f"{image.mime_type}:{image.data}".encode())


def compute_input_hashes(images: dict[Slot, ImageFile]) -> dict[str, str]:
    """
    슬롯별 입력 해시.

    Returns:
        {"model": "sha256:...", "top": ..., "bottom": ...}
    """
    return {slot.value: compute_image_hash(image) for slot, image in images.items()}
