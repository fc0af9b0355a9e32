"""Program-derived addresses.

A PDA is an address derived from seeds and a program id that is NOT a valid
ed25519 point, so no keypair can sign for it. find_program_address walks the
bump byte from 255 down to 1 and returns the first seed list solders accepts,
which is the search the on-chain runtime performs.

All functions here are pure: same inputs, same (address, bump).
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass
from typing import final

from construct import Flag, Int64ul
from solders.pubkey import Pubkey

from traction.core.errors import DerivationExhaustedError, ValidationError, validation_error
from traction.core.result import Err, Ok
from traction.core.types import UtcDatetime, check_u64
from traction.program.constants import (
    CRATE_TOKEN_PROGRAM_ID,
    CRATE_TOKEN_SEED,
    FEE_OWNER_SEED,
    OPTIONS_CONTRACT_SEED,
    TRACTION_PROGRAM_ID,
)


@final
@dataclass(frozen=True, slots=True)
class ContractAddress:
    """A derived address and the bump that pushed it off the curve."""

    address: Pubkey
    bump: int


def create_program_address(
    seeds: Sequence[bytes], program_id: Pubkey,
) -> Ok[Pubkey] | Err[ValidationError]:
    """Address for an explicit seed list (bump included).

    Err when the seeds land on the curve or break the runtime's seed limits.
    """
    try:
        return Ok(Pubkey.create_program_address(list(seeds), program_id))
    except Exception as exc:  # solders.PubkeyError is not exported
        return Err(validation_error(
            "program.pda.create_program_address", "seeds", str(exc), len(seeds),
        ))


def find_program_address(
    seeds: Sequence[bytes], program_id: Pubkey,
) -> Ok[ContractAddress] | Err[DerivationExhaustedError]:
    """Search bumps 255..1 for the first off-curve address."""
    prefix = list(seeds)
    last = ""
    for bump in range(255, 0, -1):
        match create_program_address([*prefix, bytes([bump])], program_id):
            case Ok(address):
                return Ok(ContractAddress(address=address, bump=bump))
            case Err(e):
                last = e.fields[0].constraint
    return Err(DerivationExhaustedError(
        message=f"no off-curve bump for {len(seeds)} seeds under {program_id}: {last}",
        code="DERIVATION_EXHAUSTED",
        timestamp=UtcDatetime.now(),
        source="program.pda.find_program_address",
        program_id=str(program_id),
        seed_count=len(seeds),
    ))


def options_contract_seeds(
    underlying_mint: Pubkey,
    quote_mint: Pubkey,
    strike: int,
    expiry_ts: int,
    is_put: bool,
) -> Ok[list[bytes]] | Err[ValidationError]:
    """Seed list of an OptionsContract. strike and expiry are u64 little-endian."""
    match check_u64(strike):
        case Err(msg):
            return Err(validation_error("program.pda.options_contract_seeds", "strike", msg, strike))
        case Ok(_):
            pass
    match check_u64(expiry_ts):
        case Err(msg):
            return Err(validation_error(
                "program.pda.options_contract_seeds", "expiry_ts", msg, expiry_ts,
            ))
        case Ok(_):
            pass
    return Ok([
        OPTIONS_CONTRACT_SEED,
        bytes(underlying_mint),
        bytes(quote_mint),
        Int64ul.build(strike),
        Int64ul.build(expiry_ts),
        Flag.build(is_put),
    ])


def find_options_contract_address(
    underlying_mint: Pubkey,
    quote_mint: Pubkey,
    strike: int,
    expiry_ts: int,
    is_put: bool,
    program_id: Pubkey = TRACTION_PROGRAM_ID,
) -> Ok[ContractAddress] | Err[ValidationError | DerivationExhaustedError]:
    """Address of the OptionsContract for a normalized strike."""
    match options_contract_seeds(underlying_mint, quote_mint, strike, expiry_ts, is_put):
        case Err(e):
            return Err(e)
        case Ok(seeds):
            return find_program_address(seeds, program_id)


def find_crate_address(
    crate_mint: Pubkey, crate_program_id: Pubkey = CRATE_TOKEN_PROGRAM_ID,
) -> Ok[ContractAddress] | Err[DerivationExhaustedError]:
    """CrateToken account for a writer mint."""
    return find_program_address([CRATE_TOKEN_SEED, bytes(crate_mint)], crate_program_id)


def find_fee_owner_address(
    program_id: Pubkey = TRACTION_PROGRAM_ID,
) -> Ok[ContractAddress] | Err[DerivationExhaustedError]:
    return find_program_address([FEE_OWNER_SEED], program_id)
