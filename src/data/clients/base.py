"""Base interfaces for the external data the calculator consumes.

Defines the abstract readers for chain state and USD prices. The reward
pipeline only depends on these interfaces, so it runs the same against a
live node, a pricing API or in-memory fakes.
"""

from abc import ABC, abstractmethod
from decimal import Decimal
from enum import Enum
from typing import List, Optional, Tuple

from src.core.models import PricePoint, StrategyInfo, Token, VaultInfo


class PriceSource(str, Enum):
    """Names of the supported price oracle backends."""

    ONCHAIN = "onchain"
    GRAPHQL = "graphql"


class PriceOracle(ABC):
    """Abstract USD price oracle.

    The oracle's own aggregation (which DEX, which route) is a black box.
    """

    @property
    @abstractmethod
    def source_name(self) -> str:
        """Return a human-readable name of the price source."""
        ...

    @abstractmethod
    async def get_usd_price(self, token: Token, at: int) -> Optional[PricePoint]:
        """Fetch the USD price of a token at a point in time.

        Args:
            token: Token to price
            at: Unix timestamp the price should refer to

        Returns:
            PricePoint with a WAD-scaled price, or None if the source has
            no price for the token

        Raises:
            DataUnavailable: If the source could not be queried
        """
        ...

    async def close(self) -> None:
        """Close any open connections and clean up resources."""
        return None


class ChainStateReader(ABC):
    """Abstract read-only view of strategy, vault and pool state."""

    @abstractmethod
    async def current_timestamp(self) -> int:
        """Return the timestamp of the latest block."""
        ...

    @abstractmethod
    async def get_strategy(self, strategy: str) -> Optional[StrategyInfo]:
        """Fetch a strategy and the reward pools it participates in.

        Args:
            strategy: Strategy contract address

        Returns:
            StrategyInfo or None if the address is not a known strategy
        """
        ...

    @abstractmethod
    async def get_vault(self, vault: str) -> Optional[VaultInfo]:
        """Fetch a vault with its linked strategy and deposits.

        Args:
            vault: Vault contract address

        Returns:
            VaultInfo or None if not found
        """
        ...

    @abstractmethod
    async def list_vaults(self) -> List[str]:
        """Return every vault address known to the registry, in registry order."""
        ...

    @abstractmethod
    async def pool_emission_rate(
        self,
        platform: str,
        pool_id: str,
        token: Token,
        at: int,
    ) -> Decimal:
        """Fetch the pool-wide emission rate of a reward token.

        Args:
            platform: Platform tag value of the pool
            pool_id: Pool identifier within the platform
            token: Reward token
            at: Unix timestamp of the read

        Returns:
            Raw token units emitted per second to the whole pool
        """
        ...

    @abstractmethod
    async def pool_stake(
        self,
        strategy: str,
        platform: str,
        pool_id: str,
        at: int,
    ) -> Tuple[int, int]:
        """Fetch the strategy's stake and the pool's total stake.

        Returns:
            Tuple of (strategy stake, total stake) in raw units
        """
        ...

    @abstractmethod
    async def position_balance(
        self,
        strategy: str,
        platform: str,
        pool_id: str,
        token: Token,
        at: int,
    ) -> int:
        """Fetch the cumulative reward balance of a strategy in a pool.

        Used by platforms whose rewards are observed as a growing balance.

        Returns:
            Raw token units accrued to the strategy up to ``at``

        Raises:
            UnsupportedPlatform: If the pool does not accrue ``token``
        """
        ...

    async def close(self) -> None:
        """Close any open connections and clean up resources."""
        return None
