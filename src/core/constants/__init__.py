"""Core constants module.

Re-exports all constants for convenience.
"""

from src.core.constants.generic import (
    SECONDS_PER_HOUR,
    SECONDS_PER_DAY,
    WAD,
    MAX_TOKEN_DECIMALS,
    ACCRUAL_PRECISION,
    DEFAULT_REFERENCE_PERIOD,
    DEFAULT_QUERY_TIMEOUT,
    DEFAULT_MAX_CONCURRENCY,
    DEFAULT_SCAN_CONCURRENCY,
    DEFAULT_EXCLUDED_STRATEGIES,
)

__all__ = [
    "SECONDS_PER_HOUR",
    "SECONDS_PER_DAY",
    "WAD",
    "MAX_TOKEN_DECIMALS",
    "ACCRUAL_PRECISION",
    "DEFAULT_REFERENCE_PERIOD",
    "DEFAULT_QUERY_TIMEOUT",
    "DEFAULT_MAX_CONCURRENCY",
    "DEFAULT_SCAN_CONCURRENCY",
    "DEFAULT_EXCLUDED_STRATEGIES",
]
