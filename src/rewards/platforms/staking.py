"""Rate-based adapters for staking pools and liquidity farms."""

import logging
from decimal import Context, Decimal, localcontext

from src.core.constants import ACCRUAL_PRECISION
from src.core.models import AccrualKind, Platform, Position, Token

from .base import PlatformAdapter

logger = logging.getLogger(__name__)


class StakingPoolAdapter(PlatformAdapter):
    """Pools that emit rewards at a rate split by stake.

    Covers single-asset staking and LP farms, which differ only in what
    is staked.
    """

    def __init__(self, reader, platform: Platform = Platform.SINGLE_STAKE):
        super().__init__(reader)
        self._platform = platform

    @property
    def platform(self) -> Platform:
        return self._platform

    @property
    def accrual_kind(self) -> AccrualKind:
        return AccrualKind.RATE

    async def emission_rate(self, position: Position, token: Token, at: int) -> Decimal:
        rate = await self.reader.pool_emission_rate(position.platform.value, position.pool_id, token, at)
        return max(Decimal(rate), Decimal(0))

    async def share_at(self, position: Position, at: int) -> Decimal:
        staked, total = await self.reader.pool_stake(
            position.strategy, position.platform.value, position.pool_id, at
        )
        if total <= 0:
            return Decimal(0)
        if staked > total:
            logger.warning(f"{position} stake {staked} exceeds pool total {total}, clamping share to 1")
            return Decimal(1)
        with localcontext(Context(prec=ACCRUAL_PRECISION)):
            return Decimal(max(staked, 0)) / Decimal(total)
