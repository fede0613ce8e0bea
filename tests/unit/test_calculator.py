"""Unit tests for the reward calculator."""

import asyncio
from decimal import Decimal

import pytest

from src.core.constants import SECONDS_PER_DAY, WAD
from src.core.errors import DataUnavailable, InvalidArgument
from src.core.models import Platform, PoolRef, Token, WarningReason
from src.rewards.calculator import check_period, run_cancellable

STRATEGY = "0x" + "a1" * 20
POOL_A = "0x" + "b1" * 20
POOL_B = "0x" + "b2" * 20
RWD = Token("0x" + "11" * 20, 18, "RWD")
GOOD = Token("0x" + "44" * 20, 18, "GOOD")
BAD = Token("0x" + "55" * 20, 18, "BAD")


@pytest.fixture
def staking_strategy(chain, oracle):
    """Earns 10 RWD per day with 100% of the pool, RWD at $2."""
    chain.add_strategy(STRATEGY, Platform.SINGLE_STAKE, [PoolRef(POOL_A, (RWD,))])
    chain.set_rate(POOL_A, RWD, Decimal(10 * 10**18) / Decimal(SECONDS_PER_DAY))
    chain.set_stake(STRATEGY, POOL_A, 1000, 1000)
    oracle.set_price(RWD, 2 * WAD)


@pytest.fixture
def lending_strategy(chain, oracle):
    """Two lending positions; BAD has no reachable oracle, GOOD earns 3 tokens at $5."""
    chain.add_strategy(
        STRATEGY,
        Platform.LENDING,
        [PoolRef(POOL_A, (BAD,)), PoolRef(POOL_B, (GOOD,))],
    )
    start = chain.now - SECONDS_PER_DAY
    chain.set_balance(STRATEGY, POOL_A, BAD, start, 0)
    chain.set_balance(STRATEGY, POOL_A, BAD, chain.now, 8 * 10**18)
    chain.set_balance(STRATEGY, POOL_B, GOOD, start, 2 * 10**18)
    chain.set_balance(STRATEGY, POOL_B, GOOD, chain.now, 5 * 10**18)
    oracle.set_price(GOOD, 5 * WAD)
    oracle.set_price(BAD, 1 * WAD)
    oracle.unavailable.add(BAD.key)


class TestStrategyRewardsUsd:
    """Tests for RewardCalculator.strategy_rewards_usd."""

    @pytest.mark.asyncio
    async def test_ten_tokens_a_day_at_two_dollars(self, calculator, staking_strategy):
        usd = await calculator.strategy_rewards_usd(STRATEGY, SECONDS_PER_DAY)
        assert usd == 20 * 10**18

    @pytest.mark.asyncio
    async def test_unavailable_price_degrades_to_warning(self, calculator, lending_strategy):
        rewards = await calculator.strategy_rewards(STRATEGY, SECONDS_PER_DAY)

        assert rewards.usd == 15 * 10**18
        assert len(rewards.warnings) == 1
        assert rewards.warnings[0].token == BAD
        assert rewards.warnings[0].reason == WarningReason.UNAVAILABLE

    @pytest.mark.asyncio
    async def test_events_follow_position_order(self, calculator, lending_strategy):
        rewards = await calculator.strategy_rewards(STRATEGY, SECONDS_PER_DAY)

        assert [e.token for e in rewards.events] == [BAD, GOOD]
        assert [str(p) for p in rewards.positions] == [f"lending:{POOL_A}", f"lending:{POOL_B}"]
        assert rewards.period_seconds == SECONDS_PER_DAY

    @pytest.mark.asyncio
    async def test_zero_positions_is_zero(self, calculator, chain, oracle):
        chain.add_strategy(STRATEGY, Platform.SINGLE_STAKE, [], name="NoopStrategy")

        assert await calculator.strategy_rewards_usd(STRATEGY, SECONDS_PER_DAY) == 0
        assert oracle.calls == []

    @pytest.mark.asyncio
    async def test_unknown_strategy_is_zero(self, calculator):
        assert await calculator.strategy_rewards_usd(STRATEGY, SECONDS_PER_DAY) == 0

    @pytest.mark.asyncio
    async def test_deterministic(self, calculator, staking_strategy):
        first = await calculator.strategy_rewards_usd(STRATEGY, SECONDS_PER_DAY)
        second = await calculator.strategy_rewards_usd(STRATEGY, SECONDS_PER_DAY)
        assert first == second

    @pytest.mark.asyncio
    async def test_window_ends_at_chain_time(self, calculator, chain, staking_strategy):
        rewards = await calculator.strategy_rewards(STRATEGY, 3600)

        assert rewards.window_end == chain.now
        assert rewards.window_start == chain.now - 3600
        # 10/24 tokens, rounded to the nearest raw unit
        assert rewards.events[0].amount == 416666666666666667

    @pytest.mark.asyncio
    @pytest.mark.parametrize("period", [0, -1, -SECONDS_PER_DAY])
    async def test_non_positive_period(self, calculator, staking_strategy, period):
        with pytest.raises(InvalidArgument):
            await calculator.strategy_rewards_usd(STRATEGY, period)

    @pytest.mark.asyncio
    @pytest.mark.parametrize("period", [1.5, "86400", True, None])
    async def test_non_integer_period(self, calculator, period):
        with pytest.raises(InvalidArgument):
            await calculator.strategy_rewards_usd(STRATEGY, period)

    @pytest.mark.asyncio
    async def test_invalid_strategy_address(self, calculator):
        with pytest.raises(InvalidArgument):
            await calculator.strategy_rewards_usd("0xnope", SECONDS_PER_DAY)

    @pytest.mark.asyncio
    async def test_accrual_failure_is_fatal(self, calculator, chain, staking_strategy):
        chain.failing.add(POOL_A)

        with pytest.raises(DataUnavailable):
            await calculator.strategy_rewards_usd(STRATEGY, SECONDS_PER_DAY)


class TestCancellation:
    """Tests for caller cancellation."""

    @pytest.mark.asyncio
    async def test_cancel_set_before_start(self, calculator, staking_strategy, chain):
        cancel = asyncio.Event()
        cancel.set()

        with pytest.raises(asyncio.CancelledError):
            await calculator.strategy_rewards_usd(STRATEGY, SECONDS_PER_DAY, cancel=cancel)
        assert chain.calls["get_strategy"] == 0

    @pytest.mark.asyncio
    async def test_cancel_aborts_in_flight_work(self):
        cancel = asyncio.Event()
        started = asyncio.Event()
        finished = []

        async def slow():
            started.set()
            try:
                await asyncio.sleep(10)
            finally:
                finished.append(True)
            return 1

        async def trigger():
            await started.wait()
            cancel.set()

        trigger_task = asyncio.ensure_future(trigger())
        with pytest.raises(asyncio.CancelledError):
            await run_cancellable(slow(), cancel)
        await trigger_task

        # The work was unwound, not left running
        assert finished == [True]

    @pytest.mark.asyncio
    async def test_unset_cancel_returns_result(self, calculator, staking_strategy):
        cancel = asyncio.Event()
        usd = await calculator.strategy_rewards_usd(STRATEGY, SECONDS_PER_DAY, cancel=cancel)
        assert usd == 20 * 10**18


class TestCheckPeriod:
    """Tests for period validation."""

    def test_accepts_positive_int(self):
        assert check_period(60) == 60

    def test_invalid_argument_is_value_error(self):
        with pytest.raises(ValueError):
            check_period(0)
