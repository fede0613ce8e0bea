"""Platform adapter interface.

A platform adapter knows how one kind of yield source reports rewards.
The accumulator only talks to adapters, so supporting a new platform is a
matter of registering a new adapter.
"""

from abc import ABC, abstractmethod
from decimal import Decimal

from src.core.models import AccrualKind, Platform, Position, Token
from src.data.clients.base import ChainStateReader


class PlatformAdapter(ABC):
    """Reward capabilities of one platform.

    Rate-based adapters implement ``emission_rate`` and ``share_at``;
    delta-based adapters implement ``balance_at``.
    """

    def __init__(self, reader: ChainStateReader):
        self.reader = reader

    @property
    @abstractmethod
    def platform(self) -> Platform:
        """Platform tag this adapter serves."""
        ...

    @property
    @abstractmethod
    def accrual_kind(self) -> AccrualKind:
        """How rewards are measured over a window."""
        ...

    async def emission_rate(self, position: Position, token: Token, at: int) -> Decimal:
        """Pool-wide emission of ``token`` in raw units per second."""
        raise NotImplementedError(f"{self.platform.value} does not report emission rates")

    async def share_at(self, position: Position, at: int) -> Decimal:
        """Fraction of the pool owned by the position, in [0, 1]."""
        raise NotImplementedError(f"{self.platform.value} does not report pool shares")

    async def balance_at(self, position: Position, token: Token, at: int) -> int:
        """Cumulative reward balance of the position in raw units."""
        raise NotImplementedError(f"{self.platform.value} does not report reward balances")
