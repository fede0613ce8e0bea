"""Reward, price and valuation data models."""

from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional

from src.core.fixed_point import from_wad

from .position import Position
from .token import Token


@dataclass(frozen=True)
class RewardEvent:
    """Raw token amount accrued to a position, stamped at the window end."""

    token: Token
    amount: int  # Raw token units
    timestamp: int  # Unix seconds

    def __post_init__(self):
        if self.amount < 0:
            raise ValueError(f"Reward amount must be non-negative, got {self.amount}")


@dataclass(frozen=True)
class PricePoint:
    """USD price of a token as reported by a price oracle."""

    token: Token
    price: int  # USD per whole token, WAD scaled
    timestamp: Optional[int] = None  # When the price was observed, if known

    def age(self, at: int) -> Optional[int]:
        """Seconds between observation and ``at`` (None if unknown)."""
        if self.timestamp is None:
            return None
        return max(0, at - self.timestamp)


class WarningReason(Enum):
    """Why a token contributed zero to a valuation."""

    MISSING = "missing"  # Oracle reported no price
    STALE = "stale"  # Price older than the allowed age
    UNAVAILABLE = "unavailable"  # Oracle query failed or timed out


@dataclass(frozen=True)
class PriceWarning:
    """A token skipped during valuation."""

    token: Token
    timestamp: int
    reason: WarningReason
    detail: str = ""

    def __str__(self) -> str:
        msg = f"{self.token} at {self.timestamp}: {self.reason.value}"
        return f"{msg} ({self.detail})" if self.detail else msg


@dataclass
class Valuation:
    """USD total of a set of reward events plus the tokens that were skipped."""

    total_usd: int = 0  # WAD
    warnings: List[PriceWarning] = field(default_factory=list)

    @property
    def is_partial(self) -> bool:
        """True when some tokens were valued at zero for lack of a price."""
        return bool(self.warnings)

    @property
    def display_value(self) -> str:
        return f"${from_wad(self.total_usd):,.2f}"


@dataclass
class StrategyRewards:
    """Rewards earned by one strategy over a window, with valuation detail."""

    strategy: str
    window_start: int
    window_end: int
    positions: List[Position] = field(default_factory=list)
    events: List[RewardEvent] = field(default_factory=list)
    valuation: Valuation = field(default_factory=Valuation)

    @property
    def usd(self) -> int:
        return self.valuation.total_usd

    @property
    def warnings(self) -> List[PriceWarning]:
        return self.valuation.warnings

    @property
    def period_seconds(self) -> int:
        return self.window_end - self.window_start
