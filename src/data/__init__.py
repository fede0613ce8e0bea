"""Data layer for the reward calculator."""

from .cache.disk_cache import DiskCache, CacheKeys
from .clients.base import ChainStateReader, PriceOracle, PriceSource
from .query import QueryRunner

__all__ = [
    "DiskCache",
    "CacheKeys",
    "ChainStateReader",
    "PriceOracle",
    "PriceSource",
    "QueryRunner",
]
