"""Domain layer: errors and schemas."""

from .errors import FittingError, ImageReadError, RequestInFlightError
from .schemas import (
    Failed,
    FittingStatus,
    GenerationRunLog,
    Idle,
    ImageFile,
    Requesting,
    Slot,
    Succeeded,
)

__all__ = [
    "FittingError",
    "ImageReadError",
    "RequestInFlightError",
    "ImageFile",
    "Slot",
    "Idle",
    "Requesting",
    "Succeeded",
    "Failed",
    "FittingStatus",
    "GenerationRunLog",
]
