"""Strike normalization, exercise quoting and the protocol fee.

All arithmetic is integer arithmetic with the same truncation the program
uses, so the client never quotes an amount the program would compute
differently.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import final

from traction.core.amounts import Price, TokenAmount
from traction.core.errors import ValidationError, validation_error
from traction.core.result import Err, Ok
from traction.core.types import U64_MAX, check_u64
from traction.instrument.descriptor import ContractDescriptor
from traction.program.constants import (
    EXERCISE_FEE_DENOMINATOR,
    EXERCISE_FEE_KBPS,
    STRIKE_PRICE_UNITS,
)


def normalize_strike(descriptor: ContractDescriptor) -> Ok[int] | Err[ValidationError]:
    """Quote raw units for 10**9 raw underlying units.

    The division must be exact: a strike that cannot be represented at this
    resolution would derive a different contract address than intended.
    """
    strike = descriptor.strike
    scaled = STRIKE_PRICE_UNITS * strike.numerator
    quotient, remainder = divmod(scaled, strike.denominator)
    if remainder:
        return Err(validation_error(
            "instrument.economics.normalize_strike", "descriptor.strike",
            f"must be an integer per {STRIKE_PRICE_UNITS} underlying units",
            f"{scaled}/{strike.denominator}",
        ))
    if quotient > U64_MAX:
        return Err(validation_error(
            "instrument.economics.normalize_strike", "descriptor.strike",
            "must fit in u64 once normalized", quotient,
        ))
    return Ok(quotient)


def strike_from_normalized(price: Price, normalized: int) -> Price:
    """Inverse of normalize_strike: rebuild a Price from the on-chain u64."""
    return Price(base=price.base, quote=price.quote, numerator=normalized,
                 denominator=STRIKE_PRICE_UNITS)


def fee_amount(quantity: int) -> int:
    """Protocol exercise fee (1bp), truncated exactly like the program."""
    return quantity * EXERCISE_FEE_KBPS // EXERCISE_FEE_DENOMINATOR


def exercise_amount_for_options(
    option_amount: int, normalized_strike: int,
) -> Ok[int] | Err[ValidationError]:
    """Exercise-asset raw units owed for `option_amount` options.

    The product is taken at 128-bit width as the program does; only the
    resulting amount has to fit in u64.
    """
    source = "instrument.economics.exercise_amount_for_options"
    match check_u64(option_amount):
        case Err(msg):
            return Err(validation_error(source, "option_amount", msg, option_amount))
        case Ok(_):
            pass
    amount = option_amount * normalized_strike // STRIKE_PRICE_UNITS
    if amount > U64_MAX:
        return Err(validation_error(source, "option_amount", "overflows u64 at this strike",
                                    option_amount))
    return Ok(amount)


@final
@dataclass(frozen=True, slots=True)
class ExercisePayment:
    """Split of one exercise payment."""

    gross: int  # debited from the holder
    fee: int  # to the fee owner's account
    to_pool: int  # credited to the writer crate


def exercise_payment(
    option_amount: int, normalized_strike: int,
) -> Ok[ExercisePayment] | Err[ValidationError]:
    match exercise_amount_for_options(option_amount, normalized_strike):
        case Err(e):
            return Err(e)
        case Ok(gross):
            fee = fee_amount(gross)
            return Ok(ExercisePayment(gross=gross, fee=fee, to_pool=gross - fee))


# ---------------------------------------------------------------------------
# Strike renderings
# ---------------------------------------------------------------------------


def strike_quote_for_underlying(descriptor: ContractDescriptor) -> TokenAmount:
    """Quote amount for one whole underlying token."""
    underlying = descriptor.underlying
    return descriptor.strike.convert(TokenAmount(token=underlying, raw=underlying.one))


def strike_underlying_for_quote(descriptor: ContractDescriptor) -> TokenAmount:
    """Underlying amount for one whole quote token. Zero for a zero strike."""
    if descriptor.strike.numerator == 0:
        return TokenAmount(token=descriptor.underlying, raw=0)
    quote = descriptor.quote
    return descriptor.strike.invert().convert(TokenAmount(token=quote, raw=quote.one))


def rendered_strike(descriptor: ContractDescriptor) -> TokenAmount:
    """Strike as printed in symbols and names: underlying per one whole quote token.

    Calls and puts render the same way; the P/C marker carries the direction.
    """
    return strike_underlying_for_quote(descriptor)


def format_strike(descriptor: ContractDescriptor) -> str:
    return rendered_strike(descriptor).format_units()
