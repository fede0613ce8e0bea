"""Tetu protocol-specific implementations.

Configuration: src.protocols.tetu.config
Contract ABIs: src.protocols.tetu.abis
"""

from .config import (
    BOOKKEEPER_ADDRESS,
    PRICE_CALCULATOR_ADDRESS,
    PLATFORM_CODES,
    platform_from_code,
    platform_name,
)

__all__ = [
    "BOOKKEEPER_ADDRESS",
    "PRICE_CALCULATOR_ADDRESS",
    "PLATFORM_CODES",
    "platform_from_code",
    "platform_name",
]
