"""Disk-backed cache layer over any price oracle."""

import logging
import time
from typing import Optional

from config.settings import Settings, get_settings
from src.core.models import PricePoint, Token
from src.data.cache.disk_cache import CacheKeys, DiskCache
from src.data.clients.base import PriceOracle

logger = logging.getLogger(__name__)

# Prices for timestamps older than this are treated as final
SETTLED_AFTER_SECONDS = 3600


class CachedPriceOracle(PriceOracle):
    """Wraps an oracle and persists historical price points.

    Only settled timestamps are cached, so live prices always come from
    the wrapped oracle. Missing prices are never cached.
    """

    def __init__(
        self,
        oracle: PriceOracle,
        cache: Optional[DiskCache] = None,
        settings: Optional[Settings] = None,
    ):
        self.settings = settings or get_settings()
        self.oracle = oracle
        self.cache = cache or DiskCache(self.settings, namespace=f"prices-{oracle.source_name}")

    @property
    def source_name(self) -> str:
        return self.oracle.source_name

    def is_settled(self, at: int) -> bool:
        return at <= int(time.time()) - SETTLED_AFTER_SECONDS

    async def get_usd_price(self, token: Token, at: int) -> Optional[PricePoint]:
        if not self.is_settled(at):
            return await self.oracle.get_usd_price(token, at)

        key = CacheKeys.price(self.source_name, token.address, at)
        cached = self.cache.get(key)
        if cached is not None:
            logger.debug(f"Price cache hit for {token} at {at}")
            price, observed = cached
            return PricePoint(token=token, price=price, timestamp=observed)

        point = await self.oracle.get_usd_price(token, at)
        if point is not None:
            self.cache.set(key, (point.price, point.timestamp))
        return point

    async def close(self) -> None:
        self.cache.close()
        await self.oracle.close()
