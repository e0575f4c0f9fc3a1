"""
Application Services.

역할:
- fitting: 슬롯 보관 + 생성 요청 라이프사이클 + 세션 저장소
"""

from .fitting import FittingSession, SessionStore, create_provider

__all__ = [
    "FittingSession",
    "SessionStore",
    "create_provider",
]
