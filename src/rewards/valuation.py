"""USD valuation of reward events."""

import logging
from collections import OrderedDict
from typing import Dict, Iterable, Optional, Tuple

from src.core.errors import DataUnavailable
from src.core.fixed_point import token_to_usd
from src.core.models import (
    PricePoint,
    PriceWarning,
    RewardEvent,
    Token,
    Valuation,
    WarningReason,
)
from src.data.clients.base import PriceOracle
from src.data.query import QueryRunner

logger = logging.getLogger(__name__)


class ValuationEngine:
    """Converts reward events into a single WAD-scaled USD total.

    A token without a usable price contributes zero and is reported as a
    warning on the result instead of failing the valuation.
    """

    def __init__(
        self,
        oracle: PriceOracle,
        runner: Optional[QueryRunner] = None,
        max_price_age: Optional[int] = None,
    ):
        self.oracle = oracle
        self.runner = runner or QueryRunner()
        self.max_price_age = max_price_age

    @staticmethod
    def group_amounts(events: Iterable[RewardEvent]) -> "OrderedDict[Tuple[Token, int], int]":
        """Sum amounts per (token, timestamp), keeping first-seen order."""
        grouped: "OrderedDict[Tuple[Token, int], int]" = OrderedDict()
        for event in events:
            key = (event.token, event.timestamp)
            grouped[key] = grouped.get(key, 0) + event.amount
        return grouped

    async def value_usd(self, events: Iterable[RewardEvent]) -> Valuation:
        """Value a set of reward events in USD.

        Args:
            events: Reward events, in any order

        Returns:
            Valuation with the floor-rounded USD total and a warning for
            every (token, timestamp) that could not be priced
        """
        grouped = self.group_amounts(events)
        if not grouped:
            return Valuation()

        # One query per distinct pair
        lookups = await self.runner.gather([self._lookup(token, at) for token, at in grouped])

        valuation = Valuation()
        for ((token, at), amount), (point, warning) in zip(grouped.items(), lookups):
            if warning is not None:
                logger.warning(f"Valuing {token} at zero: {warning}")
                valuation.warnings.append(warning)
                continue
            valuation.total_usd += token_to_usd(amount, token.decimals, point.price)

        logger.debug(
            f"Valued {len(grouped)} token amount(s) at {valuation.display_value}"
            f" with {len(valuation.warnings)} warning(s)"
        )
        return valuation

    async def _lookup(self, token: Token, at: int) -> Tuple[Optional[PricePoint], Optional[PriceWarning]]:
        """Fetch one price; failures turn into a warning."""
        try:
            point = await self.runner.run(
                self.oracle.get_usd_price(token, at),
                f"price({token.symbol}, {at})",
            )
        except DataUnavailable as e:
            return None, PriceWarning(token, at, WarningReason.UNAVAILABLE, str(e))

        if point is None or point.price <= 0:
            return None, PriceWarning(token, at, WarningReason.MISSING)

        age = point.age(at)
        if self.max_price_age is not None and age is not None and age > self.max_price_age:
            return None, PriceWarning(
                token, at, WarningReason.STALE, f"price is {age}s old, limit {self.max_price_age}s"
            )
        return point, None

    @staticmethod
    def total_by_token(events: Iterable[RewardEvent]) -> Dict[Token, int]:
        """Raw amounts per token across timestamps."""
        totals: Dict[Token, int] = {}
        for event in events:
            totals[event.token] = totals.get(event.token, 0) + event.amount
        return totals
