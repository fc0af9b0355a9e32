"""Hypothesis profiles and pytest fixtures for the Traction client."""

from __future__ import annotations

import pytest
from factories import make_token, ts
from hypothesis import HealthCheck, settings
from solders.pubkey import Pubkey

from traction.core.amounts import Price, Token
from traction.instrument.descriptor import ContractDescriptor, OptionDirection

# ---------------------------------------------------------------------------
# Hypothesis global settings
# ---------------------------------------------------------------------------

settings.register_profile(
    "ci",
    max_examples=200,
    suppress_health_check=[HealthCheck.too_slow],
    deadline=None,
)
settings.register_profile(
    "dev",
    max_examples=50,
    suppress_health_check=[HealthCheck.too_slow],
    deadline=None,
)
settings.load_profile("dev")


# ===================================================================
# FIXTURES
# ===================================================================


@pytest.fixture
def sol() -> Token:
    return make_token(1, 9, "SOL")


@pytest.fixture
def usdc() -> Token:
    return make_token(2, 6, "USDC")


@pytest.fixture
def sol_call(sol: Token, usdc: Token) -> ContractDescriptor:
    """SOL call struck at 150 USDC, expiring 15 Jan 2027."""
    strike = Price(base=sol, quote=usdc, numerator=150 * usdc.one, denominator=sol.one)
    return ContractDescriptor.create(strike, ts(2027, 1, 15), OptionDirection.CALL)


@pytest.fixture
def sol_put(sol_call: ContractDescriptor) -> ContractDescriptor:
    return sol_call.counterpart()


@pytest.fixture
def wallet() -> Pubkey:
    return Pubkey(bytes([9]) * 32)
