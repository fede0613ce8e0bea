"""USD price oracle implementations."""

from src.data.clients.prices.cached import CachedPriceOracle
from src.data.clients.prices.graphql import GraphQLPriceOracle
from src.data.clients.prices.onchain import OnChainPriceOracle

__all__ = [
    "CachedPriceOracle",
    "GraphQLPriceOracle",
    "OnChainPriceOracle",
]
