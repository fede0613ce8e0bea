"""Core data models for the reward calculator."""

from .token import Token
from .position import AccrualKind, Platform, PoolRef, Position
from .reward import (
    PricePoint,
    PriceWarning,
    RewardEvent,
    StrategyRewards,
    Valuation,
    WarningReason,
)
from .vault import Strategy, StrategyInfo, VaultInfo
from .kpi import KPIResult, KPIStatus
from .registry import RegistrySnapshot, ScanReport, VaultRewards

__all__ = [
    "Token",
    "AccrualKind",
    "Platform",
    "PoolRef",
    "Position",
    "PricePoint",
    "PriceWarning",
    "RewardEvent",
    "StrategyRewards",
    "Valuation",
    "WarningReason",
    "Strategy",
    "StrategyInfo",
    "VaultInfo",
    "KPIResult",
    "KPIStatus",
    "RegistrySnapshot",
    "ScanReport",
    "VaultRewards",
]
