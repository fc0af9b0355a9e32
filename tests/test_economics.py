"""Tests for traction.instrument: roles, strike normalization, fees, strike renderings."""

from __future__ import annotations

from decimal import Decimal

from factories import descriptors, make_token, ts
from hypothesis import given
from hypothesis import strategies as st

from traction.core.amounts import Price
from traction.core.errors import ValidationError
from traction.core.result import Err, Ok, unwrap
from traction.instrument.descriptor import (
    ContractDescriptor,
    OptionDirection,
    collateral_token,
    exercise_token,
    option_roles,
)
from traction.instrument.economics import (
    exercise_amount_for_options,
    exercise_payment,
    fee_amount,
    format_strike,
    normalize_strike,
    rendered_strike,
    strike_from_normalized,
    strike_quote_for_underlying,
    strike_underlying_for_quote,
)

UND = make_token(1, 6, "UND")
QTE = make_token(2, 6, "QTE")


def _descriptor(num: int, den: int, direction: OptionDirection = OptionDirection.CALL) -> ContractDescriptor:
    return ContractDescriptor.create(
        Price(base=UND, quote=QTE, numerator=num, denominator=den), ts(2027, 1, 15), direction,
    )


class TestRoles:
    def test_call(self) -> None:
        roles = option_roles(_descriptor(100, 1))
        assert (roles.collateral, roles.exercise) == (UND, QTE)
        assert roles.direction is OptionDirection.CALL

    def test_put(self) -> None:
        roles = option_roles(_descriptor(100, 1, OptionDirection.PUT))
        assert (roles.collateral, roles.exercise) == (QTE, UND)

    @given(descriptors())
    def test_symmetry(self, d: ContractDescriptor) -> None:
        other = d.counterpart()
        assert collateral_token(d) == exercise_token(other)
        assert exercise_token(d) == collateral_token(other)
        assert {collateral_token(d), exercise_token(d)} == {d.underlying, d.quote}


class TestNormalizeStrike:
    def test_scenario_strike(self) -> None:
        # 100 QTE per UND, both 6 decimals
        assert normalize_strike(_descriptor(100 * QTE.one, UND.one)) == Ok(100 * 10**9)

    def test_from_decimal_price(self) -> None:
        price = unwrap(Price.from_decimal(UND, QTE, Decimal("2.5")))
        d = ContractDescriptor.create(price, 0, OptionDirection.CALL)
        assert normalize_strike(d) == Ok(2_500_000_000)

    def test_inexact_rejected(self) -> None:
        match normalize_strike(_descriptor(1, 3 * 10**9)):
            case Err(ValidationError() as e):
                assert e.fields[0].path == "descriptor.strike"
            case other:
                raise AssertionError(f"expected ValidationError, got {other}")

    def test_overflow_rejected(self) -> None:
        assert isinstance(normalize_strike(_descriptor(2**64, 1)), Err)

    def test_zero_strike(self) -> None:
        assert normalize_strike(_descriptor(0, 1)) == Ok(0)

    @given(st.integers(min_value=0, max_value=2**64 - 1))
    def test_inverse_of_strike_from_normalized(self, normalized: int) -> None:
        price = strike_from_normalized(_descriptor(1, 1).strike, normalized)
        d = ContractDescriptor.create(price, 0, OptionDirection.PUT)
        assert normalize_strike(d) == Ok(normalized)


class TestFee:
    def test_one_basis_point(self) -> None:
        assert fee_amount(1_000_000) == 100
        assert fee_amount(100_000_000_000) == 10_000_000

    def test_truncates(self) -> None:
        assert fee_amount(9_999) == 0
        assert fee_amount(10_000) == 1
        assert fee_amount(19_999) == 1

    @given(st.integers(min_value=0, max_value=2**64 - 1))
    def test_floor_of_one_ten_thousandth(self, q: int) -> None:
        assert fee_amount(q) == q // 10_000


class TestExerciseAmount:
    def test_scenario(self) -> None:
        # 1,000 options at 100 quote per underlying, 6 decimals
        assert exercise_amount_for_options(10**9, 100 * 10**9) == Ok(100 * 10**9)

    def test_payment_split(self) -> None:
        payment = unwrap(exercise_payment(10**9, 100 * 10**9))
        assert payment.gross == 100_000_000_000
        assert payment.fee == 10_000_000
        assert payment.to_pool == 99_990_000_000

    def test_result_outside_u64(self) -> None:
        assert isinstance(exercise_amount_for_options(2**63, 4 * 10**9), Err)

    def test_negative_amount(self) -> None:
        assert isinstance(exercise_amount_for_options(-1, 10**9), Err)


class TestRenderings:
    def test_quote_per_underlying(self) -> None:
        d = _descriptor(150 * QTE.one, UND.one)
        assert strike_quote_for_underlying(d).to_exact() == "150"
        assert strike_quote_for_underlying(d).token == QTE

    def test_call_renders_underlying_per_quote(self) -> None:
        d = _descriptor(4 * QTE.one, UND.one)
        assert rendered_strike(d) == strike_underlying_for_quote(d)
        assert rendered_strike(d).token == UND
        assert format_strike(d) == "0.25"

    def test_put_renders_underlying_per_quote(self) -> None:
        d = _descriptor(4 * QTE.one, UND.one, OptionDirection.PUT)
        assert strike_underlying_for_quote(d).to_exact() == "0.25"
        assert rendered_strike(d) == rendered_strike(d.counterpart())

    def test_truncates_to_underlying_decimals(self) -> None:
        # 1 QTE buys 1/150 UND; UND has 6 decimals
        assert format_strike(_descriptor(150 * QTE.one, UND.one)) == "0.006666"

    def test_thousands_separator(self) -> None:
        assert format_strike(_descriptor(QTE.one, 25_000 * UND.one)) == "25,000"

    def test_zero_strike_put(self) -> None:
        d = _descriptor(0, 1, OptionDirection.PUT)
        assert strike_underlying_for_quote(d).raw == 0
