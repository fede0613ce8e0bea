"""Unit tests for fixed-point helpers and core models."""

import pytest
from decimal import Decimal

from src.core.constants import WAD
from src.core.fixed_point import format_wad, from_wad, mul_div, to_wad, token_to_usd
from src.core.models import PricePoint, RewardEvent, Token


class TestFixedPoint:
    """Tests for WAD conversions."""

    def test_to_wad_from_string(self):
        assert to_wad("2") == 2 * WAD
        assert to_wad("0.5") == WAD // 2

    def test_to_wad_floors(self):
        assert to_wad(Decimal("0.0000000000000000019")) == 1

    def test_to_wad_none_is_zero(self):
        assert to_wad(None) == 0

    def test_to_wad_rejects_bool(self):
        with pytest.raises(TypeError):
            to_wad(True)

    def test_from_wad_exact(self):
        assert from_wad(15 * WAD) == Decimal(15)
        assert from_wad(1) == Decimal("0.000000000000000001")

    def test_mul_div_floors(self):
        assert mul_div(10, 1, 3) == 3

    def test_mul_div_zero_denominator(self):
        with pytest.raises(ZeroDivisionError):
            mul_div(1, 1, 0)

    def test_token_to_usd_normalizes_decimals(self):
        # 3 USDC (6 decimals) at $1 and 3 WETH-like (18 decimals) at $5
        assert token_to_usd(3 * 10**6, 6, WAD) == 3 * WAD
        assert token_to_usd(3 * 10**18, 18, 5 * WAD) == 15 * WAD

    def test_token_to_usd_floors_dust(self):
        # 1 raw unit of an 18-decimal token at $0.5 is below 1 wei of USD
        assert token_to_usd(1, 18, WAD // 2) == 0

    def test_format_wad(self):
        assert format_wad(20 * WAD) == "20.000000"
        assert format_wad(WAD // 3, 2) == "0.33"


class TestModels:
    """Tests for model invariants."""

    def test_token_identity_is_case_insensitive(self):
        a = Token("0x" + "AB" * 20, 18, "A")
        b = Token("0x" + "ab" * 20, 18, "B")
        assert a == b
        assert len({a, b}) == 1

    def test_token_decimals_range(self):
        with pytest.raises(ValueError):
            Token("0x" + "11" * 20, decimals=78)
        with pytest.raises(ValueError):
            Token("0x" + "11" * 20, decimals=-1)

    def test_reward_event_rejects_negative_amount(self):
        token = Token("0x" + "11" * 20)
        with pytest.raises(ValueError):
            RewardEvent(token=token, amount=-1, timestamp=0)

    def test_price_point_age(self):
        token = Token("0x" + "11" * 20)
        assert PricePoint(token, WAD, timestamp=100).age(160) == 60
        assert PricePoint(token, WAD, timestamp=200).age(160) == 0
        assert PricePoint(token, WAD).age(160) is None
