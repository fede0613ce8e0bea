"""Reward accrual over a time window."""

import logging
from decimal import ROUND_HALF_EVEN, Context, Decimal, localcontext
from typing import List, Optional

from src.core.constants import ACCRUAL_PRECISION
from src.core.errors import InvalidArgument
from src.core.models import AccrualKind, Position, RewardEvent, Token
from src.data.query import QueryRunner
from src.rewards.platforms import PlatformAdapter, PlatformRegistry

logger = logging.getLogger(__name__)


def rate_accrual(rate_per_second: Decimal, share: Decimal, duration: int) -> int:
    """Raw units emitted to a share of a pool over ``duration`` seconds.

    Computed at full precision and rounded half-even to a whole raw unit.
    """
    with localcontext(Context(prec=ACCRUAL_PRECISION)):
        amount = Decimal(rate_per_second) * Decimal(share) * Decimal(duration)
        return int(amount.to_integral_value(rounding=ROUND_HALF_EVEN))


def delta_accrual(balance_start: int, balance_end: int) -> int:
    """Balance growth over a window; decreases count as zero reward."""
    return max(balance_end - balance_start, 0)


def _check_window(window_start: int, window_end: int) -> None:
    for name, value in (("window_start", window_start), ("window_end", window_end)):
        if isinstance(value, bool) or not isinstance(value, int):
            raise InvalidArgument(f"{name} must be an integer timestamp, got {value!r}")
    if window_end < window_start:
        raise InvalidArgument(f"window_end {window_end} is before window_start {window_start}")


class RewardAccumulator:
    """Computes raw reward amounts a position earned within a window.

    The adapter registered for the position's platform decides between
    rate-based and delta-based accrual. Read failures propagate.
    """

    def __init__(self, registry: PlatformRegistry, runner: Optional[QueryRunner] = None):
        self.registry = registry
        self.runner = runner or QueryRunner()

    async def accrue_rewards(
        self,
        position: Position,
        window_start: int,
        window_end: int,
    ) -> List[RewardEvent]:
        """Accrue the rewards of one position.

        Args:
            position: Position to accrue
            window_start: Window start (unix seconds, inclusive)
            window_end: Window end (unix seconds)

        Returns:
            One event per reward token with a non-zero amount, stamped at
            ``window_end``, in reward token order

        Raises:
            InvalidArgument: If the window is malformed
            UnsupportedPlatform: If no adapter serves the position's platform
            DataUnavailable: If chain state for the window could not be read
        """
        _check_window(window_start, window_end)
        if window_end == window_start or not position.reward_tokens:
            return []

        adapter = self.registry.require(position.platform)
        if adapter.accrual_kind == AccrualKind.RATE:
            amounts = await self._accrue_rate(adapter, position, window_start, window_end)
        else:
            amounts = await self._accrue_delta(adapter, position, window_start, window_end)

        events = [
            RewardEvent(token=token, amount=amount, timestamp=window_end)
            for token, amount in zip(position.reward_tokens, amounts)
            if amount > 0
        ]
        logger.debug(
            f"{position} accrued {len(events)} reward event(s) over "
            f"{window_end - window_start}s ({adapter.accrual_kind.value})"
        )
        return events

    async def _accrue_rate(
        self,
        adapter: PlatformAdapter,
        position: Position,
        window_start: int,
        window_end: int,
    ) -> List[int]:
        # Start-of-window snapshot of both share and rate
        share, *rates = await self.runner.gather(
            [self.runner.run(adapter.share_at(position, window_start), f"share_at({position})")]
            + [self._rate(adapter, position, token, window_start) for token in position.reward_tokens]
        )
        duration = window_end - window_start
        return [rate_accrual(rate, share, duration) for rate in rates]

    async def _rate(self, adapter: PlatformAdapter, position: Position, token: Token, at: int) -> Decimal:
        return await self.runner.run(
            adapter.emission_rate(position, token, at),
            f"emission_rate({position}, {token.symbol})",
        )

    async def _accrue_delta(
        self,
        adapter: PlatformAdapter,
        position: Position,
        window_start: int,
        window_end: int,
    ) -> List[int]:
        reads = []
        for token in position.reward_tokens:
            for at in (window_start, window_end):
                reads.append(
                    self.runner.run(
                        adapter.balance_at(position, token, at),
                        f"balance_at({position}, {token.symbol}, {at})",
                    )
                )
        balances = await self.runner.gather(reads)
        return [delta_accrual(balances[i], balances[i + 1]) for i in range(0, len(balances), 2)]
