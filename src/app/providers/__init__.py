"""
Image Generation Provider Abstraction.

모델 교체 가능하게 설계.
모델명은 config만 SSOT.
"""

from .base import (
    GenerationError,
    GenerationResult,
    ImageGenerationProvider,
    ProviderError,
)
from .gemini import GeminiImageProvider

__all__ = [
    "ImageGenerationProvider",
    "GenerationResult",
    "ProviderError",
    "GenerationError",
    "GeminiImageProvider",
]
