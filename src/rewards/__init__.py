"""Reward calculation: positions, accrual, valuation and the calculator.

Use ``build_reward_calculator`` to wire the pipeline from settings.
"""

import logging
from typing import Optional

from config.settings import Settings, get_settings
from src.data.clients.base import ChainStateReader, PriceOracle, PriceSource
from src.data.query import QueryRunner

from .accrual import RewardAccumulator
from .calculator import RewardCalculator
from .platforms import PlatformRegistry, default_registry
from .positions import PositionResolver
from .valuation import ValuationEngine

logger = logging.getLogger(__name__)


def build_price_oracle(settings: Settings, reader: Optional[ChainStateReader] = None) -> PriceOracle:
    """Create the configured price oracle, wrapped in the disk cache if enabled."""
    # Import here to keep the pipeline importable without network clients
    from src.data.clients.prices import CachedPriceOracle, GraphQLPriceOracle, OnChainPriceOracle
    from src.data.clients.web3_reader import Web3ChainStateReader

    if settings.price_source == PriceSource.GRAPHQL.value:
        oracle: PriceOracle = GraphQLPriceOracle(settings)
    else:
        if not isinstance(reader, Web3ChainStateReader):
            reader = Web3ChainStateReader(settings)
        oracle = OnChainPriceOracle(reader, settings)

    if settings.price_cache_enabled:
        oracle = CachedPriceOracle(oracle, settings=settings)
    logger.info(f"Using {oracle.source_name} price oracle")
    return oracle


def build_reward_calculator(
    settings: Optional[Settings] = None,
    *,
    reader: Optional[ChainStateReader] = None,
    oracle: Optional[PriceOracle] = None,
    registry: Optional[PlatformRegistry] = None,
    runner: Optional[QueryRunner] = None,
) -> RewardCalculator:
    """Wire a RewardCalculator from settings.

    Any collaborator passed in is used as is; the rest are built from
    settings.
    """
    settings = settings or get_settings()
    if reader is None:
        from src.data.clients.web3_reader import Web3ChainStateReader

        reader = Web3ChainStateReader(settings)
    oracle = oracle or build_price_oracle(settings, reader)
    registry = registry or default_registry(reader)
    runner = runner or QueryRunner(
        timeout=settings.query_timeout_seconds,
        max_concurrency=settings.max_concurrency,
    )

    return RewardCalculator(
        reader=reader,
        resolver=PositionResolver(reader, registry, runner),
        accumulator=RewardAccumulator(registry, runner),
        valuation=ValuationEngine(oracle, runner, max_price_age=settings.max_price_age_seconds),
        runner=runner,
    )


__all__ = [
    "PlatformRegistry",
    "PositionResolver",
    "RewardAccumulator",
    "RewardCalculator",
    "ValuationEngine",
    "build_price_oracle",
    "build_reward_calculator",
    "default_registry",
]
