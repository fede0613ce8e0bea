"""Core module - models, constants and errors."""

from .models import (
    KPIResult,
    KPIStatus,
    Platform,
    Position,
    RewardEvent,
    Token,
    Valuation,
)
from .constants import SECONDS_PER_DAY, WAD
from .errors import (
    DataUnavailable,
    InvalidArgument,
    RewardCalculatorError,
    UnsupportedPlatform,
)

__all__ = [
    "KPIResult",
    "KPIStatus",
    "Platform",
    "Position",
    "RewardEvent",
    "Token",
    "Valuation",
    "SECONDS_PER_DAY",
    "WAD",
    "DataUnavailable",
    "InvalidArgument",
    "RewardCalculatorError",
    "UnsupportedPlatform",
]
