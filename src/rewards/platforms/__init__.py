"""Platform adapters.

Lending: src.rewards.platforms.lending
Staking pools and LP farms: src.rewards.platforms.staking
"""

from .base import PlatformAdapter
from .lending import LendingAdapter
from .registry import PlatformRegistry, default_registry
from .staking import StakingPoolAdapter

__all__ = [
    "PlatformAdapter",
    "LendingAdapter",
    "PlatformRegistry",
    "StakingPoolAdapter",
    "default_registry",
]
