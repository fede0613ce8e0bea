"""Vault and strategy data models."""

from dataclasses import dataclass, field
from typing import List, Optional, Tuple

from .position import Platform, PoolRef, Position
from .token import Token


@dataclass(frozen=True)
class StrategyInfo:
    """Strategy state as read from chain."""

    address: str
    name: str
    platform: Platform
    underlying: Optional[Token] = None
    pools: Tuple[PoolRef, ...] = ()


@dataclass
class Strategy:
    """Strategy identity with its resolved positions."""

    address: str
    name: str = ""
    platform: Platform = Platform.UNKNOWN
    positions: List[Position] = field(default_factory=list)

    @property
    def position_count(self) -> int:
        return len(self.positions)


@dataclass(frozen=True)
class VaultInfo:
    """User-facing deposit contract linked to one active strategy."""

    address: str
    name: str
    active: bool
    strategy: str  # Currently linked strategy address
    underlying: Token
    total_assets: int = 0  # Raw units of underlying under management
    strategy_name: str = ""
    platform: Platform = Platform.UNKNOWN

    @property
    def is_empty(self) -> bool:
        return self.total_assets == 0
