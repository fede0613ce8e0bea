"""Tetu (Polygon) protocol-specific configuration and constants."""

from src.core.models.position import Platform

# Core contract addresses (Polygon)
BOOKKEEPER_ADDRESS = "0x0A0846c978a56D6ea9D2602eeFb6fB7BdD1F2e95"
PRICE_CALCULATOR_ADDRESS = "0x0B62ad43837A69Ad60289EEea7C6e907e759F6E8"

# Strategy platform codes as reported by IStrategy.platform()
PLATFORM_CODES = {
    0: "UNKNOWN",
    1: "TETU",
    2: "QUICK",
    3: "SUSHI",
    4: "WAULT",
    5: "IRON",
    6: "COSMIC",
    7: "CURVE",
    8: "DINO",
    9: "IRON_LEND",
    10: "HERMES",
    11: "CAFE",
    12: "TETU_SWAP",
    13: "SPOOKY",
    14: "AAVE_LEND",
    15: "AAVE_MAI_BAL",
    16: "GEIST",
    17: "HARVEST",
    18: "SCREAM_LEND",
    19: "KLIMA",
}

# How each platform's rewards are earned
PLATFORM_KINDS = {
    "TETU": Platform.SINGLE_STAKE,
    "QUICK": Platform.AMM_LP,
    "SUSHI": Platform.AMM_LP,
    "WAULT": Platform.AMM_LP,
    "IRON": Platform.SINGLE_STAKE,
    "COSMIC": Platform.AMM_LP,
    "CURVE": Platform.SINGLE_STAKE,
    "DINO": Platform.AMM_LP,
    "IRON_LEND": Platform.LENDING,
    "HERMES": Platform.AMM_LP,
    "CAFE": Platform.AMM_LP,
    "TETU_SWAP": Platform.AMM_LP,
    "SPOOKY": Platform.AMM_LP,
    "AAVE_LEND": Platform.LENDING,
    "GEIST": Platform.LENDING,
    "SCREAM_LEND": Platform.LENDING,
    "KLIMA": Platform.SINGLE_STAKE,
}

# Separates a chef address from its pool index in a pool id
POOL_ID_SEPARATOR = ":"


def platform_from_code(code: int) -> Platform:
    """Map an on-chain platform code to its reward platform kind."""
    name = PLATFORM_CODES.get(code, "UNKNOWN")
    return PLATFORM_KINDS.get(name, Platform.UNKNOWN)


def platform_name(code: int) -> str:
    return PLATFORM_CODES.get(code, "UNKNOWN")
