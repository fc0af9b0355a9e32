"""ContractDescriptor and the collateral/exercise role split.

Every Traction contract is a call on `underlying` struck in `quote`; a put is
the same contract rendered the other way round. The role split below is the
single place where is_put is branched on. Callers resolve OptionRoles once and
read .collateral / .exercise from it.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import final

from traction.core.amounts import Price, Token


class OptionDirection(Enum):
    CALL = "call"
    PUT = "put"


@final
@dataclass(frozen=True, slots=True)
class ContractDescriptor:
    """Caller-supplied economic parameters of one options contract."""

    strike: Price
    expiry_ts: int  # unix seconds
    is_put: bool

    @staticmethod
    def create(strike: Price, expiry_ts: int, direction: OptionDirection) -> ContractDescriptor:
        return ContractDescriptor(
            strike=strike, expiry_ts=expiry_ts, is_put=direction is OptionDirection.PUT,
        )

    @property
    def underlying(self) -> Token:
        return self.strike.base

    @property
    def quote(self) -> Token:
        return self.strike.quote

    @property
    def direction(self) -> OptionDirection:
        return OptionDirection.PUT if self.is_put else OptionDirection.CALL

    def counterpart(self) -> ContractDescriptor:
        """Same assets, strike and expiry, opposite direction."""
        return ContractDescriptor(strike=self.strike, expiry_ts=self.expiry_ts,
                                  is_put=not self.is_put)


@final
@dataclass(frozen=True, slots=True)
class OptionRoles:
    """Which asset the writer deposits and which one the holder pays with."""

    collateral: Token
    exercise: Token
    direction: OptionDirection


def option_roles(descriptor: ContractDescriptor) -> OptionRoles:
    if descriptor.is_put:
        return OptionRoles(collateral=descriptor.quote, exercise=descriptor.underlying,
                           direction=OptionDirection.PUT)
    return OptionRoles(collateral=descriptor.underlying, exercise=descriptor.quote,
                       direction=OptionDirection.CALL)


def collateral_token(descriptor: ContractDescriptor) -> Token:
    return option_roles(descriptor).collateral


def exercise_token(descriptor: ContractDescriptor) -> Token:
    return option_roles(descriptor).exercise
