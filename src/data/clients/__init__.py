"""External data clients.

Provides the chain state and price oracle interfaces the reward pipeline
consumes, and their network implementations.
"""

from src.data.clients.base import ChainStateReader, PriceOracle, PriceSource
from src.data.clients.web3_reader import Web3ChainStateReader

__all__ = [
    "ChainStateReader",
    "PriceOracle",
    "PriceSource",
    "Web3ChainStateReader",
]
