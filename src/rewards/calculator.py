"""Reward calculator: strategy rewards in USD over a trailing period."""

import asyncio
import logging
from typing import Awaitable, List, Optional, TypeVar

from src.core.errors import InvalidArgument
from src.core.models import RewardEvent, StrategyRewards
from src.data.clients.base import ChainStateReader
from src.data.query import QueryRunner
from src.rewards.accrual import RewardAccumulator
from src.rewards.positions import PositionResolver
from src.rewards.valuation import ValuationEngine

logger = logging.getLogger(__name__)

T = TypeVar("T")


def check_period(period_seconds: int) -> int:
    """Raise InvalidArgument unless the period is a positive int."""
    if isinstance(period_seconds, bool) or not isinstance(period_seconds, int):
        raise InvalidArgument(f"period_seconds must be an integer, got {period_seconds!r}")
    if period_seconds <= 0:
        raise InvalidArgument(f"period_seconds must be positive, got {period_seconds}")
    return period_seconds


async def run_cancellable(work: Awaitable[T], cancel: Optional[asyncio.Event]) -> T:
    """Await ``work``, aborting it when ``cancel`` is set.

    Raises:
        asyncio.CancelledError: If ``cancel`` was set before ``work`` finished
    """
    if cancel is None:
        return await work
    if cancel.is_set():
        if asyncio.iscoroutine(work):
            work.close()
        raise asyncio.CancelledError("cancelled before start")

    task = asyncio.ensure_future(work)
    waiter = asyncio.ensure_future(cancel.wait())
    try:
        await asyncio.wait({task, waiter}, return_when=asyncio.FIRST_COMPLETED)
    finally:
        waiter.cancel()
        if not task.done():
            task.cancel()

    if task.cancelled() or not task.done():
        # Let the work unwind its own sub-queries before reporting
        await asyncio.gather(task, return_exceptions=True)
        raise asyncio.CancelledError("cancelled by caller")
    return task.result()


class RewardCalculator:
    """Computes the USD value of the rewards a strategy earned.

    Composes the position resolver, reward accumulator and valuation
    engine. Every call re-reads chain state, nothing is cached between
    calls.
    """

    def __init__(
        self,
        reader: ChainStateReader,
        resolver: PositionResolver,
        accumulator: RewardAccumulator,
        valuation: ValuationEngine,
        runner: Optional[QueryRunner] = None,
    ):
        self.reader = reader
        self.resolver = resolver
        self.accumulator = accumulator
        self.valuation = valuation
        self.runner = runner or QueryRunner()

    async def strategy_rewards_usd(
        self,
        strategy: str,
        period_seconds: int,
        cancel: Optional[asyncio.Event] = None,
    ) -> int:
        """USD value (WAD) of rewards earned over the trailing period.

        Args:
            strategy: Strategy contract address
            period_seconds: Length of the window ending at the current
                chain time
            cancel: Optional event that aborts the computation when set

        Returns:
            WAD-scaled USD total, zero when the strategy holds no positions

        Raises:
            InvalidArgument: If the address or period is invalid
            DataUnavailable: If reward state could not be read
            UnsupportedPlatform: If a position's platform has no adapter
        """
        rewards = await self.strategy_rewards(strategy, period_seconds, cancel=cancel)
        return rewards.usd

    async def strategy_rewards(
        self,
        strategy: str,
        period_seconds: int,
        cancel: Optional[asyncio.Event] = None,
    ) -> StrategyRewards:
        """Same as ``strategy_rewards_usd`` with events and price warnings attached."""
        check_period(period_seconds)
        return await run_cancellable(self._compute(strategy, period_seconds), cancel)

    async def _compute(self, strategy: str, period_seconds: int) -> StrategyRewards:
        positions = await self.resolver.resolve_positions(strategy)
        window_end = await self.runner.run(self.reader.current_timestamp(), "current_timestamp")
        window_start = window_end - period_seconds
        result = StrategyRewards(
            strategy=strategy,
            window_start=window_start,
            window_end=window_end,
            positions=positions,
        )
        if not positions:
            return result

        per_position = await self.runner.gather(
            [self.accumulator.accrue_rewards(p, window_start, window_end) for p in positions]
        )
        events: List[RewardEvent] = [e for batch in per_position for e in batch]
        result.events = events
        result.valuation = await self.valuation.value_usd(events)

        logger.info(
            f"Strategy {strategy}: {len(positions)} position(s), {len(events)} reward event(s), "
            f"{result.valuation.display_value} over {period_seconds}s"
        )
        if result.valuation.is_partial:
            logger.warning(
                f"Strategy {strategy} rewards are partial: "
                f"{len(result.valuation.warnings)} token(s) without a usable price"
            )
        return result
