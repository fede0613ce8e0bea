"""Unit tests for the vault KPI engine."""

from decimal import Decimal

import pytest

from src.core.constants import SECONDS_PER_DAY, WAD
from src.core.errors import DataUnavailable, InvalidArgument
from src.core.models import KPIStatus, Platform, PoolRef, Token

VAULT = "0x" + "c1" * 20
STRATEGY = "0x" + "a1" * 20
POOL = "0x" + "b1" * 20
RWD = Token("0x" + "11" * 20, 18, "RWD")
USDC = Token("0x" + "22" * 20, 6, "USDC")


class TestKpiEngine:
    """Tests for KpiEngine."""

    @pytest.fixture
    def earning_strategy(self, chain, oracle):
        """10 RWD per day at $2 = $20 per day."""
        chain.add_strategy(STRATEGY, Platform.AMM_LP, [PoolRef(POOL, (RWD,))], underlying=USDC)
        chain.set_rate(POOL, RWD, Decimal(10 * 10**18) / Decimal(SECONDS_PER_DAY))
        chain.set_stake(STRATEGY, POOL, 7, 7)
        oracle.set_price(RWD, 2 * WAD)
        oracle.set_price(USDC, WAD)

    @pytest.mark.asyncio
    async def test_kpi_ratio(self, kpi_engine, chain, earning_strategy):
        chain.add_vault(VAULT, STRATEGY, USDC, total_assets=1000 * 10**6)

        # $20 of rewards on $1000 deposited
        assert await kpi_engine.kpi(VAULT) == WAD * 2 // 100

    @pytest.mark.asyncio
    async def test_vault_kpi_details(self, kpi_engine, chain, earning_strategy):
        chain.add_vault(VAULT, STRATEGY, USDC, total_assets=1000 * 10**6, name="USDC vault")

        result = await kpi_engine.vault_kpi(VAULT)

        assert result.status == KPIStatus.SUCCESS
        assert result.rewards_usd == 20 * WAD
        assert result.deposited_usd == 1000 * WAD
        assert result.period_seconds == SECONDS_PER_DAY
        assert result.display_value == "2.0000%"
        assert result.metadata["vault_name"] == "USDC vault"
        assert result.signal == "positive"

    @pytest.mark.asyncio
    async def test_inactive_vault_is_zero(self, kpi_engine, chain, oracle, earning_strategy):
        chain.add_vault(VAULT, STRATEGY, USDC, total_assets=1000 * 10**6, active=False)

        result = await kpi_engine.vault_kpi(VAULT)

        assert result.value == 0
        assert result.status == KPIStatus.INACTIVE
        assert chain.calls["get_strategy"] == 0
        assert oracle.calls == []

    @pytest.mark.asyncio
    async def test_empty_vault_is_zero(self, kpi_engine, chain, earning_strategy):
        chain.add_vault(VAULT, STRATEGY, USDC, total_assets=0)

        result = await kpi_engine.vault_kpi(VAULT)

        assert result.value == 0
        assert result.status == KPIStatus.EMPTY_VAULT

    @pytest.mark.asyncio
    async def test_dust_deposit_worth_zero_usd(self, kpi_engine, chain, oracle, earning_strategy):
        tiny = Token("0x" + "66" * 20, 18, "TINY")
        oracle.set_price(tiny, 1)  # 1e-18 USD per whole token
        chain.add_vault(VAULT, STRATEGY, tiny, total_assets=1)

        result = await kpi_engine.vault_kpi(VAULT)

        assert result.value == 0
        assert result.status == KPIStatus.EMPTY_VAULT

    @pytest.mark.asyncio
    async def test_no_rewards_is_zero(self, kpi_engine, chain, oracle):
        chain.add_strategy(STRATEGY, Platform.SINGLE_STAKE, [], name="NoopStrategy")
        chain.add_vault(VAULT, STRATEGY, USDC, total_assets=1000 * 10**6)
        oracle.set_price(USDC, WAD)

        result = await kpi_engine.vault_kpi(VAULT)

        assert result.value == 0
        assert result.status == KPIStatus.SUCCESS
        assert result.signal == "negative"

    @pytest.mark.asyncio
    async def test_missing_deposit_price_raises(self, kpi_engine, chain, oracle, earning_strategy):
        del oracle.prices[USDC.key]
        chain.add_vault(VAULT, STRATEGY, USDC, total_assets=1000 * 10**6)

        with pytest.raises(DataUnavailable):
            await kpi_engine.kpi(VAULT)

    @pytest.mark.asyncio
    async def test_stale_deposit_price_raises(self, kpi_engine, chain, oracle, earning_strategy):
        oracle.set_price(USDC, WAD, age=10 * 3600)
        chain.add_vault(VAULT, STRATEGY, USDC, total_assets=1000 * 10**6)

        with pytest.raises(DataUnavailable):
            await kpi_engine.kpi(VAULT)

    @pytest.mark.asyncio
    async def test_reward_price_warnings_carried(self, kpi_engine, chain, oracle, earning_strategy):
        oracle.unavailable.add(RWD.key)
        chain.add_vault(VAULT, STRATEGY, USDC, total_assets=1000 * 10**6)

        result = await kpi_engine.vault_kpi(VAULT)

        assert result.value == 0
        assert [w.token for w in result.warnings] == [RWD]

    @pytest.mark.asyncio
    async def test_unknown_vault(self, kpi_engine):
        with pytest.raises(InvalidArgument):
            await kpi_engine.kpi(VAULT)

    @pytest.mark.asyncio
    async def test_invalid_vault_address(self, kpi_engine):
        with pytest.raises(InvalidArgument):
            await kpi_engine.kpi("vault")
