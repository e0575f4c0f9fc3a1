"""
Core layer: 입력 변환과 실행 추적.

역할:
- 이미지 입력 어댑터 (업로드 → ImageFile)
- ID, 해시, 생성 RunLog
"""

from .hashing import compute_bytes_hash, compute_image_hash, compute_input_hashes
from .ids import generate_run_id, generate_session_id
from .images import decode_image, encode_image, normalize_mime_type, read_upload
from .logging import complete_run_log, configure_logging, create_run_log, emit_run_log

__all__ = [
    # images
    "read_upload",
    "encode_image",
    "decode_image",
    "normalize_mime_type",
    # ids
    "generate_session_id",
    "generate_run_id",
    # hashing
    "compute_bytes_hash",
    "compute_image_hash",
    "compute_input_hashes",
    # logging
    "configure_logging",
    "create_run_log",
    "complete_run_log",
    "emit_run_log",
]
