"""Tests for traction.core.amounts: Token, TokenAmount, Price."""

from __future__ import annotations

from decimal import Decimal

import pytest
from factories import make_token
from hypothesis import given
from hypothesis import strategies as st

from traction.core.amounts import Price, Token, TokenAmount
from traction.core.result import Err, Ok, unwrap

USDC = make_token(2, 6, "USDC")
SOL = make_token(1, 9, "SOL")


class TestToken:
    def test_one(self) -> None:
        assert USDC.one == 1_000_000
        assert SOL.one == 10**9

    def test_from_mint_placeholder(self) -> None:
        t = Token.from_mint(USDC.mint, 6)
        assert t.symbol == "TOKN"
        assert t.chain_id == 101

    def test_decimals_bounds(self) -> None:
        with pytest.raises(TypeError):
            Token(mint=USDC.mint, decimals=256, symbol="X")


class TestTokenAmount:
    def test_negative_rejected(self) -> None:
        assert isinstance(TokenAmount.create(USDC, -1), Err)
        with pytest.raises(TypeError):
            TokenAmount(token=USDC, raw=-1)

    def test_from_units(self) -> None:
        assert unwrap(TokenAmount.from_units(USDC, Decimal("1.5"))).raw == 1_500_000

    def test_from_units_too_precise(self) -> None:
        assert isinstance(TokenAmount.from_units(USDC, Decimal("0.0000001")), Err)

    def test_to_exact_strips_zeros(self) -> None:
        assert TokenAmount(USDC, 1_500_000).to_exact() == "1.5"
        assert TokenAmount(USDC, 100_000_000).to_exact() == "100"
        assert TokenAmount(USDC, 0).to_exact() == "0"
        assert TokenAmount(USDC, 1).to_exact() == "0.000001"

    def test_format_units_groups_thousands(self) -> None:
        assert TokenAmount(USDC, 1_234_500_000).format_units() == "1,234.5"
        assert TokenAmount(USDC, 100_000_000_000).format_units() == "100,000"

    @given(st.integers(min_value=0, max_value=2**64 - 1))
    def test_exact_roundtrips_through_from_units(self, raw: int) -> None:
        amount = TokenAmount(USDC, raw)
        assert unwrap(TokenAmount.from_units(USDC, Decimal(amount.to_exact()))) == amount


class TestPrice:
    def test_from_decimal(self) -> None:
        price = unwrap(Price.from_decimal(SOL, USDC, Decimal("150")))
        assert price.quote_raw(SOL.one) == 150 * USDC.one

    def test_from_decimal_rejects_negative(self) -> None:
        assert isinstance(Price.from_decimal(SOL, USDC, Decimal("-1")), Err)

    def test_from_decimal_rejects_nan(self) -> None:
        assert isinstance(Price.from_decimal(SOL, USDC, Decimal("NaN")), Err)

    def test_quote_truncates(self) -> None:
        price = Price(base=SOL, quote=USDC, numerator=1, denominator=3)
        assert price.convert(TokenAmount(SOL, 10)) == TokenAmount(USDC, 3)

    def test_invert(self) -> None:
        price = Price(base=SOL, quote=USDC, numerator=150, denominator=1000)
        inverted = price.invert()
        assert inverted.base == USDC
        assert inverted.quote == SOL
        assert (inverted.numerator, inverted.denominator) == (1000, 150)

    def test_same_ratio(self) -> None:
        a = Price(base=SOL, quote=USDC, numerator=1, denominator=2)
        b = Price(base=SOL, quote=USDC, numerator=50, denominator=100)
        assert a.same_ratio(b)

    def test_zero_denominator_rejected(self) -> None:
        with pytest.raises(TypeError):
            Price(base=SOL, quote=USDC, numerator=1, denominator=0)

    def test_from_decimal_fraction_is_exact(self) -> None:
        match Price.from_decimal(SOL, USDC, Decimal("0.1")):
            case Ok(price):
                assert price.quote_raw(10 * SOL.one) == USDC.one
            case Err(e):
                pytest.fail(e)
