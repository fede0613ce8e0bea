"""Delta-based adapter for lending markets."""

from src.core.models import AccrualKind, Platform, Position, Token

from .base import PlatformAdapter


class LendingAdapter(PlatformAdapter):
    """Lending markets that accrue rewards into a per-holder balance."""

    @property
    def platform(self) -> Platform:
        return Platform.LENDING

    @property
    def accrual_kind(self) -> AccrualKind:
        return AccrualKind.DELTA

    async def balance_at(self, position: Position, token: Token, at: int) -> int:
        return await self.reader.position_balance(
            position.strategy, position.platform.value, position.pool_id, token, at
        )
