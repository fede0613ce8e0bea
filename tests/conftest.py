"""Pytest configuration and fixtures.

In-memory chain state and price oracle stand in for a node and a pricing
API, so every test runs against a fixed, fully known state.
"""

from collections import Counter
from decimal import Decimal
from typing import Dict, Iterable, List, Optional, Set, Tuple

import pytest

from config.settings import Settings
from src.analytics.kpi import build_kpi_engine
from src.analytics.scan import build_scanner
from src.core.errors import DataUnavailable
from src.core.models import Platform, PoolRef, PricePoint, StrategyInfo, Token, VaultInfo
from src.data.clients.base import ChainStateReader, PriceOracle
from src.rewards import build_reward_calculator

NOW = 1_700_000_000


class FakeChainState(ChainStateReader):
    """Chain state held in dicts. Addresses are matched case-insensitively."""

    def __init__(self, now: int = NOW):
        self.now = now
        self.strategies: Dict[str, StrategyInfo] = {}
        self.vaults: Dict[str, VaultInfo] = {}
        self.vault_order: List[str] = []
        self.rates: Dict[Tuple[str, str], Decimal] = {}
        self.stakes: Dict[Tuple[str, str], Tuple[int, int]] = {}
        self.balances: Dict[Tuple[str, str, str, int], int] = {}
        self.failing: Set[str] = set()
        self.calls: Counter = Counter()

    # ========== SETUP ==========

    def add_strategy(
        self,
        address: str,
        platform: Platform,
        pools: Iterable[PoolRef],
        name: str = "TestStrategy",
        underlying: Optional[Token] = None,
    ) -> StrategyInfo:
        info = StrategyInfo(
            address=address,
            name=name,
            platform=platform,
            underlying=underlying,
            pools=tuple(pools),
        )
        self.strategies[address.lower()] = info
        return info

    def add_vault(
        self,
        address: str,
        strategy: str,
        underlying: Token,
        total_assets: int,
        active: bool = True,
        name: str = "Test Vault",
    ) -> VaultInfo:
        strategy_info = self.strategies.get(strategy.lower())
        info = VaultInfo(
            address=address,
            name=name,
            active=active,
            strategy=strategy,
            underlying=underlying,
            total_assets=total_assets,
            strategy_name=strategy_info.name if strategy_info else "",
            platform=strategy_info.platform if strategy_info else Platform.UNKNOWN,
        )
        self.vaults[address.lower()] = info
        self.vault_order.append(address)
        return info

    def set_rate(self, pool_id: str, token: Token, rate: Decimal) -> None:
        self.rates[(pool_id.lower(), token.key)] = Decimal(rate)

    def set_stake(self, strategy: str, pool_id: str, staked: int, total: int) -> None:
        self.stakes[(strategy.lower(), pool_id.lower())] = (staked, total)

    def set_balance(self, strategy: str, pool_id: str, token: Token, at: int, amount: int) -> None:
        self.balances[(strategy.lower(), pool_id.lower(), token.key, at)] = amount

    def _check(self, *keys: str) -> None:
        for key in keys:
            if key.lower() in self.failing:
                raise DataUnavailable(f"state of {key} unavailable", source="fake")

    # ========== ChainStateReader ==========

    async def current_timestamp(self) -> int:
        self.calls["current_timestamp"] += 1
        return self.now

    async def get_strategy(self, strategy: str) -> Optional[StrategyInfo]:
        self.calls["get_strategy"] += 1
        self._check(strategy)
        return self.strategies.get(strategy.lower())

    async def get_vault(self, vault: str) -> Optional[VaultInfo]:
        self.calls["get_vault"] += 1
        self._check(vault)
        return self.vaults.get(vault.lower())

    async def list_vaults(self) -> List[str]:
        self.calls["list_vaults"] += 1
        return list(self.vault_order)

    async def pool_emission_rate(self, platform: str, pool_id: str, token: Token, at: int) -> Decimal:
        self.calls["pool_emission_rate"] += 1
        self._check(pool_id)
        return self.rates.get((pool_id.lower(), token.key), Decimal(0))

    async def pool_stake(self, strategy: str, platform: str, pool_id: str, at: int) -> Tuple[int, int]:
        self.calls["pool_stake"] += 1
        self._check(pool_id)
        return self.stakes.get((strategy.lower(), pool_id.lower()), (0, 0))

    async def position_balance(self, strategy: str, platform: str, pool_id: str, token: Token, at: int) -> int:
        self.calls["position_balance"] += 1
        self._check(pool_id)
        key = (strategy.lower(), pool_id.lower(), token.key, at)
        if key not in self.balances:
            raise DataUnavailable(f"no balance of {token.symbol} in {pool_id} at {at}", source="fake")
        return self.balances[key]


class StaticPriceOracle(PriceOracle):
    """Fixed WAD prices per token."""

    def __init__(self):
        self.prices: Dict[str, int] = {}
        self.ages: Dict[str, int] = {}
        self.unavailable: Set[str] = set()
        self.calls: List[Tuple[str, int]] = []

    @property
    def source_name(self) -> str:
        return "static"

    def set_price(self, token: Token, price: int, age: int = 0) -> None:
        self.prices[token.key] = price
        self.ages[token.key] = age

    async def get_usd_price(self, token: Token, at: int) -> Optional[PricePoint]:
        self.calls.append((token.key, at))
        if token.key in self.unavailable:
            raise DataUnavailable(f"oracle down for {token.symbol}", source="static")
        price = self.prices.get(token.key)
        if price is None:
            return None
        return PricePoint(token=token, price=price, timestamp=at - self.ages.get(token.key, 0))


@pytest.fixture
def chain() -> FakeChainState:
    """Empty in-memory chain state."""
    return FakeChainState()


@pytest.fixture
def oracle() -> StaticPriceOracle:
    """Price oracle with no prices."""
    return StaticPriceOracle()


@pytest.fixture
def settings() -> Settings:
    """Settings independent of the environment and any .env file."""
    return Settings(
        _env_file=None,
        rpc_url="http://localhost:8545",
        query_timeout_seconds=5.0,
        max_price_age_seconds=3600,
        reference_period_seconds=86400,
        excluded_strategy_names=["NoopStrategy"],
    )


@pytest.fixture
def calculator(settings, chain, oracle):
    """RewardCalculator over the fake chain and oracle."""
    return build_reward_calculator(settings, reader=chain, oracle=oracle)


@pytest.fixture
def kpi_engine(settings, calculator):
    """KpiEngine sharing the calculator's collaborators."""
    return build_kpi_engine(settings, calculator=calculator)


@pytest.fixture
def scanner(settings, calculator):
    """VaultScanner sharing the calculator's collaborators."""
    return build_scanner(settings, calculator=calculator)
