"""Position resolution: which reward-bearing positions a strategy holds."""

import logging
from typing import List, Optional

from web3 import Web3

from src.core.errors import InvalidArgument
from src.core.models import Position, Strategy, StrategyInfo
from src.data.clients.base import ChainStateReader
from src.data.query import QueryRunner
from src.rewards.platforms import PlatformRegistry

logger = logging.getLogger(__name__)


def validate_address(address: str, what: str = "address") -> str:
    """Raise InvalidArgument unless ``address`` is a well-formed address."""
    if not isinstance(address, str) or not Web3.is_address(address):
        raise InvalidArgument(f"Invalid {what}: {address!r}")
    return address


class PositionResolver:
    """Discovers the positions of a strategy from chain state.

    Positions are recomputed on every call. Unknown strategies and
    strategies without reward pools resolve to no positions.
    """

    def __init__(
        self,
        reader: ChainStateReader,
        registry: PlatformRegistry,
        runner: Optional[QueryRunner] = None,
    ):
        self.reader = reader
        self.registry = registry
        self.runner = runner or QueryRunner()

    async def resolve_positions(self, strategy: str) -> List[Position]:
        """Resolve the positions a strategy currently holds.

        Args:
            strategy: Strategy contract address

        Returns:
            Positions ordered by platform registration order, then by pool
            order as reported on chain

        Raises:
            InvalidArgument: If ``strategy`` is not a valid address
            DataUnavailable: If the strategy state could not be read
        """
        resolved = await self.resolve_strategy(strategy)
        return resolved.positions

    async def resolve_strategy(self, strategy: str) -> Strategy:
        """Resolve a strategy with its name, platform and ordered positions."""
        validate_address(strategy, "strategy address")

        info = await self.runner.run(self.reader.get_strategy(strategy), f"get_strategy({strategy})")
        if info is None:
            logger.info(f"Strategy {strategy} not found, no positions")
            return Strategy(address=strategy)

        positions = self.positions_of(info)
        logger.debug(f"Strategy {strategy} ({info.name}) holds {len(positions)} position(s)")
        return Strategy(address=strategy, name=info.name, platform=info.platform, positions=positions)

    def positions_of(self, info: StrategyInfo) -> List[Position]:
        """Build ordered, de-duplicated positions from strategy state."""
        positions = []
        seen = set()
        for pool in info.pools:
            position = Position(
                strategy=info.address,
                platform=info.platform,
                pool_id=pool.pool_id,
                reward_tokens=tuple(pool.reward_tokens),
                deposit_token=info.underlying,
            )
            if position.key in seen:
                continue
            seen.add(position.key)
            positions.append(position)

        # sorted() is stable, so pool order survives within a platform
        return sorted(positions, key=lambda p: self.registry.index_of(p.platform))
