"""GraphQL pricing API client implementing the PriceOracle interface."""

import logging
import time
from decimal import Decimal, InvalidOperation
from typing import Any, Dict, List, Optional

import aiohttp
from aiolimiter import AsyncLimiter
from gql import Client, gql
from gql.transport.aiohttp import AIOHTTPTransport
from gql.transport.exceptions import TransportError, TransportQueryError

from config.settings import Settings, get_settings
from src.core.constants import SECONDS_PER_HOUR
from src.core.errors import DataUnavailable
from src.core.fixed_point import to_wad
from src.core.models import PricePoint, Token
from src.data.clients.base import PriceOracle, PriceSource
from src.data.clients.prices.queries import PriceQueries

logger = logging.getLogger(__name__)

# Pricing API rate limits
PRICE_API_RATE_LIMIT = 5000  # requests per 5 minutes
PRICE_API_RATE_WINDOW = 300  # seconds

# Requests this close to now use the live price
LIVE_PRICE_WINDOW = 300  # seconds


class GraphQLPriceOracle(PriceOracle):
    """USD prices from a GraphQL asset pricing API.

    Recent timestamps use the live ``priceUsd``. Older ones take the last
    hourly ``historicalPriceUsd`` point at or before the timestamp.
    """

    def __init__(self, settings: Optional[Settings] = None):
        self.settings = settings or get_settings()
        self._rate_limiter = AsyncLimiter(PRICE_API_RATE_LIMIT, PRICE_API_RATE_WINDOW)
        self._chain_id = self.settings.chain_id

    @property
    def source_name(self) -> str:
        return PriceSource.GRAPHQL.value

    async def _execute(self, query: str, variables: Dict[str, Any]) -> Dict[str, Any]:
        """Execute a GraphQL query with rate limiting."""
        async with self._rate_limiter:
            transport = AIOHTTPTransport(url=self.settings.price_api_url)
            client = Client(transport=transport, fetch_schema_from_transport=False)
            async with client as session:
                result = await session.execute(gql(query), variable_values=variables)
                return result

    @staticmethod
    def parse_price(value: Any) -> Optional[int]:
        """Convert an API USD price to WAD, None when absent or not positive."""
        if value is None:
            return None
        try:
            price = to_wad(Decimal(str(value)))
        except (InvalidOperation, ValueError):
            return None
        return price if price > 0 else None

    @staticmethod
    def pick_point(points: List[Dict[str, Any]], at: int) -> Optional[Dict[str, Any]]:
        """Return the latest timeseries point at or before ``at``."""
        best = None
        for point in points or []:
            x = point.get("x")
            if x is None or point.get("y") is None or int(x) > at:
                continue
            if best is None or int(x) > int(best["x"]):
                best = point
        return best

    async def get_usd_price(self, token: Token, at: int) -> Optional[PricePoint]:
        now = int(time.time())
        try:
            if at >= now - LIVE_PRICE_WINDOW:
                return await self._live_price(token, now)
            return await self._historical_price(token, at)
        except TransportQueryError as e:
            # The API answers unknown assets with a query error
            logger.debug(f"Price API has no asset {token}: {e}")
            return None
        except (TransportError, aiohttp.ClientError, OSError) as e:
            logger.error(f"Failed to fetch price for {token} at {at}: {e}")
            raise DataUnavailable(f"Price API failed for {token}: {e}", source=self.source_name) from e

    async def _live_price(self, token: Token, now: int) -> Optional[PricePoint]:
        result = await self._execute(
            PriceQueries.ASSET_PRICE_QUERY,
            {"address": token.address, "chainId": self._chain_id},
        )
        asset = result.get("assetByAddress")
        if not asset:
            return None
        price = self.parse_price(asset.get("priceUsd"))
        if price is None:
            return None
        return PricePoint(token=token, price=price, timestamp=now)

    async def _historical_price(self, token: Token, at: int) -> Optional[PricePoint]:
        window = max(self.settings.max_price_age_seconds, SECONDS_PER_HOUR)
        result = await self._execute(
            PriceQueries.ASSET_PRICE_HISTORY_QUERY,
            {
                "address": token.address,
                "chainId": self._chain_id,
                "options": {
                    "startTimestamp": at - window,
                    "endTimestamp": at,
                    "interval": "HOUR",
                },
            },
        )
        asset = result.get("assetByAddress")
        if not asset:
            return None
        point = self.pick_point(asset.get("historicalPriceUsd"), at)
        if point is None:
            return None
        price = self.parse_price(point["y"])
        if price is None:
            return None
        return PricePoint(token=token, price=price, timestamp=int(point["x"]))
