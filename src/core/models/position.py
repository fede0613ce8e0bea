"""Position data model for reward-bearing strategy positions."""

from dataclasses import dataclass, field
from enum import Enum
from typing import Optional, Tuple

from .token import Token


class Platform(Enum):
    """Kinds of yield sources a strategy can deploy into."""

    LENDING = "lending"
    AMM_LP = "amm_lp"
    SINGLE_STAKE = "single_stake"
    UNKNOWN = "unknown"


class AccrualKind(Enum):
    """How rewards of a position are measured over a window."""

    RATE = "rate"  # emission rate x pool share x duration
    DELTA = "delta"  # balance(end) - balance(start)


@dataclass(frozen=True)
class PoolRef:
    """A reward pool as reported by chain state for one strategy."""

    pool_id: str
    reward_tokens: Tuple[Token, ...] = ()


@dataclass(frozen=True)
class Position:
    """Reward-bearing position held by a strategy.

    Discovered at query time from on-chain state and never persisted.
    """

    strategy: str  # Strategy address
    platform: Platform
    pool_id: str  # Pool identifier within the platform
    reward_tokens: Tuple[Token, ...] = field(default_factory=tuple)
    deposit_token: Optional[Token] = None

    @property
    def key(self) -> Tuple[str, str, str]:
        return (self.strategy.lower(), self.platform.value, self.pool_id.lower())

    def __str__(self) -> str:
        return f"{self.platform.value}:{self.pool_id}"
