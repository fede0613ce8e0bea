"""Platform adapter registry."""

import logging
from typing import Dict, List, Optional

from src.core.errors import UnsupportedPlatform
from src.core.models import Platform
from src.data.clients.base import ChainStateReader

from .base import PlatformAdapter
from .lending import LendingAdapter
from .staking import StakingPoolAdapter

logger = logging.getLogger(__name__)


class PlatformRegistry:
    """Ordered mapping of platform tags to adapters.

    Registration order is also the order in which a strategy's positions
    are reported.
    """

    def __init__(self):
        self._adapters: Dict[Platform, PlatformAdapter] = {}
        self._order: List[Platform] = []

    def register(self, adapter: PlatformAdapter) -> None:
        """Register an adapter, replacing any adapter for the same platform.

        A replaced adapter keeps its original position in the order.
        """
        platform = adapter.platform
        if platform not in self._adapters:
            self._order.append(platform)
        self._adapters[platform] = adapter
        logger.debug(f"Registered {type(adapter).__name__} for {platform.value}")

    def get(self, platform: Platform) -> Optional[PlatformAdapter]:
        return self._adapters.get(platform)

    def require(self, platform: Platform) -> PlatformAdapter:
        """Get the adapter for a platform.

        Raises:
            UnsupportedPlatform: If no adapter is registered for the platform
        """
        adapter = self.get(platform)
        if adapter is None:
            raise UnsupportedPlatform(
                f"No adapter registered for platform: {platform.value}. "
                f"Available platforms: {[p.value for p in self._order]}"
            )
        return adapter

    def index_of(self, platform: Platform) -> int:
        """Registration index of a platform; unregistered platforms sort last."""
        try:
            return self._order.index(platform)
        except ValueError:
            return len(self._order)

    @property
    def platforms(self) -> List[Platform]:
        return list(self._order)

    def __contains__(self, platform: Platform) -> bool:
        return platform in self._adapters

    def __len__(self) -> int:
        return len(self._adapters)


def default_registry(reader: ChainStateReader) -> PlatformRegistry:
    """Build the registry with the built-in adapters."""
    registry = PlatformRegistry()
    registry.register(LendingAdapter(reader))
    registry.register(StakingPoolAdapter(reader, Platform.AMM_LP))
    registry.register(StakingPoolAdapter(reader, Platform.SINGLE_STAKE))
    return registry
