"""Token, TokenAmount and Price: integer arithmetic on raw token units.

Every quantity is an int in the token's smallest unit. Decimal is only used
at the edges: parsing a human price and rendering an amount for display.
"""

from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal, localcontext
from typing import final

from solders.pubkey import Pubkey

from traction.core.result import Err, Ok

MAINNET_CHAIN_ID: int = 101

# Wide enough for any u64 raw amount divided by 10**255.
_RENDER_PRECISION: int = 80


@final
@dataclass(frozen=True, slots=True)
class Token:
    """An SPL mint plus the metadata needed to render amounts."""

    mint: Pubkey
    decimals: int
    symbol: str
    name: str = ""
    chain_id: int = MAINNET_CHAIN_ID

    def __post_init__(self) -> None:
        if not 0 <= self.decimals <= 255:
            raise TypeError(f"Token.decimals must be in [0, 255], got {self.decimals}")

    @staticmethod
    def from_mint(mint: Pubkey, decimals: int, chain_id: int = MAINNET_CHAIN_ID) -> Token:
        """Token with placeholder metadata, for mints known only by address."""
        return Token(mint=mint, decimals=decimals, symbol="TOKN", name=f"Token {mint}",
                     chain_id=chain_id)

    @property
    def one(self) -> int:
        """Raw units in one whole token."""
        return 10**self.decimals


@final
@dataclass(frozen=True, slots=True)
class TokenAmount:
    """Unsigned raw quantity of a token."""

    token: Token
    raw: int

    def __post_init__(self) -> None:
        if isinstance(self.raw, bool) or not isinstance(self.raw, int) or self.raw < 0:
            raise TypeError(f"TokenAmount.raw must be a non-negative int, got {self.raw!r}")

    @staticmethod
    def create(token: Token, raw: int) -> Ok[TokenAmount] | Err[str]:
        if isinstance(raw, bool) or not isinstance(raw, int):
            return Err(f"TokenAmount.raw must be int, got {type(raw).__name__}")
        if raw < 0:
            return Err(f"TokenAmount.raw must be >= 0, got {raw}")
        return Ok(TokenAmount(token=token, raw=raw))

    @staticmethod
    def from_units(token: Token, units: Decimal) -> Ok[TokenAmount] | Err[str]:
        """Whole-token Decimal to raw units. Err if it has more precision than the mint."""
        with localcontext() as ctx:
            ctx.prec = _RENDER_PRECISION
            scaled = units * token.one
        if scaled != scaled.to_integral_value():
            return Err(f"{units} has more than {token.decimals} decimal places")
        return TokenAmount.create(token, int(scaled))

    def to_decimal(self) -> Decimal:
        with localcontext() as ctx:
            ctx.prec = _RENDER_PRECISION
            return Decimal(self.raw) / Decimal(self.token.one)

    def to_exact(self) -> str:
        """Exact decimal string, no exponent, no trailing zeros: 1500000 @6 -> '1.5'."""
        return _plain(self.to_decimal())

    def format_units(self) -> str:
        """Exact value with thousands separators: 1234500000 @6 -> '1,234.5'."""
        exact = self.to_exact()
        whole, _, frac = exact.partition(".")
        grouped = f"{int(whole):,}"
        return f"{grouped}.{frac}" if frac else grouped


@final
@dataclass(frozen=True, slots=True)
class Price:
    """Exchange rate between two tokens in raw units.

    `numerator` raw quote units buy `denominator` raw base units.
    """

    base: Token
    quote: Token
    numerator: int
    denominator: int

    def __post_init__(self) -> None:
        if self.denominator <= 0:
            raise TypeError(f"Price.denominator must be > 0, got {self.denominator}")
        if self.numerator < 0:
            raise TypeError(f"Price.numerator must be >= 0, got {self.numerator}")

    @staticmethod
    def from_decimal(base: Token, quote: Token, units: Decimal) -> Ok[Price] | Err[str]:
        """Build an exact ratio from a human price: `units` quote tokens per base token."""
        if not isinstance(units, Decimal) or not units.is_finite():
            return Err(f"Price requires a finite Decimal, got {units!r}")
        if units < 0:
            return Err(f"Price must be >= 0, got {units}")
        num, den = units.as_integer_ratio()
        return Ok(Price(
            base=base,
            quote=quote,
            numerator=num * quote.one,
            denominator=den * base.one,
        ))

    def quote_raw(self, base_raw: int) -> int:
        """Raw quote units for `base_raw` raw base units, truncating."""
        return base_raw * self.numerator // self.denominator

    def convert(self, amount: TokenAmount) -> TokenAmount:
        return TokenAmount(token=self.quote, raw=self.quote_raw(amount.raw))

    def invert(self) -> Price:
        return Price(
            base=self.quote,
            quote=self.base,
            numerator=self.denominator,
            denominator=self.numerator,
        )

    def same_ratio(self, other: Price) -> bool:
        return (
            self.base == other.base
            and self.quote == other.quote
            and self.numerator * other.denominator == other.numerator * self.denominator
        )


def _plain(value: Decimal) -> str:
    if value == 0:
        return "0"
    text = format(value.normalize(), "f")
    if "." in text:
        text = text.rstrip("0").rstrip(".")
    return text
