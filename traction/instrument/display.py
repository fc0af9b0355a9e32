"""Deterministic display strings for options tokens.

Symbols are matched by downstream consumers, so the grammar is fixed:

    symbol := short_expiry "-" risk "-" ("P" | "C") strike "-" other
    short_expiry := [day] MON [year]      day omitted on the 1st,
                                          year omitted in the current year
    strike := underlying per one whole quote token, for calls and puts
    name := expiry " " risk " " strike "  " ("PUT" | "CALL")

Expiries are rendered in UTC with fixed English month abbreviations; the
current year is supplied by the caller so every function stays pure.
"""

from __future__ import annotations

from datetime import UTC, datetime

from solders.pubkey import Pubkey

from traction.core.amounts import Token
from traction.instrument.descriptor import ContractDescriptor
from traction.instrument.economics import format_strike, rendered_strike

_MONTHS: tuple[str, ...] = (
    "Jan", "Feb", "Mar", "Apr", "May", "Jun",
    "Jul", "Aug", "Sep", "Oct", "Nov", "Dec",
)

WEBSITE_BASE: str = "https://traction.market/#/option/"


def expiry_datetime(descriptor: ContractDescriptor) -> datetime:
    return datetime.fromtimestamp(descriptor.expiry_ts, tz=UTC)


def current_year() -> int:
    """Call-site helper for the `current_year` argument."""
    return datetime.now(tz=UTC).year


def formatted_expiry(descriptor: ContractDescriptor, current_year: int) -> str:
    """'Jan 15' in the current year, 'Jan 15, 2027' otherwise."""
    expiry = expiry_datetime(descriptor)
    text = f"{_MONTHS[expiry.month - 1]} {expiry.day}"
    if expiry.year == current_year:
        return text
    return f"{text}, {expiry.year}"


def formatted_expiry_short(descriptor: ContractDescriptor, current_year: int) -> str:
    """'15JAN2027', 'JAN' (1st of a month in the current year), ..."""
    expiry = expiry_datetime(descriptor)
    day = "" if expiry.day == 1 else str(expiry.day)
    year = "" if expiry.year == current_year else str(expiry.year)
    return f"{day}{_MONTHS[expiry.month - 1].upper()}{year}"


def _risk_and_other(descriptor: ContractDescriptor) -> tuple[Token, Token]:
    if descriptor.is_put:
        return descriptor.quote, descriptor.underlying
    return descriptor.underlying, descriptor.quote


def symbol(descriptor: ContractDescriptor, current_year: int) -> str:
    risk, other = _risk_and_other(descriptor)
    marker = "P" if descriptor.is_put else "C"
    strike = rendered_strike(descriptor).to_exact()
    return (
        f"{formatted_expiry_short(descriptor, current_year)}-{risk.symbol}-"
        f"{marker}{strike}-{other.symbol}"
    )


def name(descriptor: ContractDescriptor, current_year: int) -> str:
    risk, _ = _risk_and_other(descriptor)
    # the direction keeps its own leading space, so names read "... 0.25  PUT"
    kind = " PUT" if descriptor.is_put else " CALL"
    return (
        f"{formatted_expiry(descriptor, current_year)} {risk.symbol} "
        f"{format_strike(descriptor)} {kind}"
    )


def option_decimals(descriptor: ContractDescriptor) -> int:
    """Option and writer tokens share the underlying's decimals."""
    return descriptor.underlying.decimals


def writer_token_symbol(descriptor: ContractDescriptor, current_year: int) -> str:
    return f"wrt{symbol(descriptor, current_year)}"


def writer_token_name(descriptor: ContractDescriptor, current_year: int) -> str:
    return f"{name(descriptor, current_year)} Writer"


def token_info(
    descriptor: ContractDescriptor, address: Pubkey, current_year: int,
) -> dict[str, object]:
    """Token-list entry for the option token minted by the contract at `address`."""
    return {
        "chainId": descriptor.underlying.chain_id,
        "address": str(address),
        "name": name(descriptor, current_year),
        "symbol": symbol(descriptor, current_year),
        "decimals": option_decimals(descriptor),
        "extensions": {
            "source": "traction",
            "website": f"{WEBSITE_BASE}{address}",
        },
    }
