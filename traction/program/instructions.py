"""Traction instruction ABI.

Instruction data is the Anchor sighash sha256("global:<name>")[:8] followed by
the borsh-encoded arguments. Account lists are positional: each *Accounts
dataclass declares its fields in the exact order the program reads them, and
to_metas() emits them in declaration order. Reordering a field is a protocol
break.
"""

from __future__ import annotations

import hashlib
from dataclasses import dataclass, fields
from enum import Enum
from typing import ClassVar, final

from construct import ConstructError, Int8ul, Int64sl, Int64ul
from construct import Struct as cStruct
from solders.instruction import AccountMeta, Instruction
from solders.pubkey import Pubkey
from solders.system_program import ID as SYSTEM_PROGRAM_ID
from spl.token.constants import TOKEN_PROGRAM_ID

from traction.core.errors import ValidationError, validation_error
from traction.core.result import Err, Ok
from traction.core.types import U8_MAX, check_i64, check_u64
from traction.program.constants import CRATE_TOKEN_PROGRAM_ID, TRACTION_PROGRAM_ID
from traction.program.layout import BOOL


def instruction_sighash(name: str) -> bytes:
    return hashlib.sha256(f"global:{name}".encode()).digest()[:8]


class TractionInstruction(Enum):
    NEW_CONTRACT = "new_contract"
    OPTION_BURN = "option_burn"
    OPTION_WRITE = "option_write"
    OPTION_EXERCISE = "option_exercise"
    OPTION_REDEEM = "option_redeem"

    @property
    def sighash(self) -> bytes:
        return instruction_sighash(self.value)


_BY_SIGHASH: dict[bytes, TractionInstruction] = {i.sighash: i for i in TractionInstruction}

NEW_CONTRACT_ARGS_LAYOUT = cStruct(
    "strike" / Int64ul,
    "expiry_ts" / Int64sl,
    "is_put" / BOOL,
    "contract_bump" / Int8ul,
    "crate_bump" / Int8ul,
)
AMOUNT_ARGS_LAYOUT = cStruct("amount" / Int64ul)


# ---------------------------------------------------------------------------
# Account lists
# ---------------------------------------------------------------------------


class _AccountList:
    """Mixin: emit AccountMetas in field declaration order."""

    SIGNERS: ClassVar[frozenset[str]] = frozenset()
    WRITABLE: ClassVar[frozenset[str]] = frozenset()

    def to_metas(self) -> list[AccountMeta]:
        return [
            AccountMeta(
                pubkey=getattr(self, f.name),
                is_signer=f.name in self.SIGNERS,
                is_writable=f.name in self.WRITABLE,
            )
            for f in fields(self)  # type: ignore[arg-type]
        ]


@final
@dataclass(frozen=True, slots=True)
class NewContractAccounts(_AccountList):
    SIGNERS: ClassVar[frozenset[str]] = frozenset({"payer"})
    WRITABLE: ClassVar[frozenset[str]] = frozenset({"contract", "crate_token", "payer"})

    contract: Pubkey
    underlying_mint: Pubkey
    quote_mint: Pubkey
    # writer crate
    crate_mint: Pubkey
    crate_token: Pubkey
    crate_token_program: Pubkey
    option_mint: Pubkey
    payer: Pubkey
    system_program: Pubkey = SYSTEM_PROGRAM_ID


@final
@dataclass(frozen=True, slots=True)
class OptionWriteAccounts(_AccountList):
    SIGNERS: ClassVar[frozenset[str]] = frozenset({"writer_authority"})
    WRITABLE: ClassVar[frozenset[str]] = frozenset({
        "writer_authority", "user_collateral_funding_tokens", "option_token_destination",
        "crate_collateral_tokens", "writer_token_destination", "writer_mint", "option_mint",
    })

    writer_authority: Pubkey
    contract: Pubkey
    user_collateral_funding_tokens: Pubkey
    option_token_destination: Pubkey
    crate_collateral_tokens: Pubkey
    writer_token_destination: Pubkey
    writer_crate_token: Pubkey
    writer_mint: Pubkey
    option_mint: Pubkey
    token_program: Pubkey = TOKEN_PROGRAM_ID
    crate_token_program: Pubkey = CRATE_TOKEN_PROGRAM_ID


@final
@dataclass(frozen=True, slots=True)
class OptionExerciseAccounts(_AccountList):
    SIGNERS: ClassVar[frozenset[str]] = frozenset({"exerciser_authority"})
    WRITABLE: ClassVar[frozenset[str]] = frozenset({
        "exerciser_authority", "exercise_token_source", "option_mint", "option_token_source",
        "crate_collateral_tokens", "crate_exercise_tokens", "collateral_token_destination",
        "exercise_fee_destination",
    })

    exerciser_authority: Pubkey
    contract: Pubkey
    exercise_token_source: Pubkey
    option_mint: Pubkey
    option_token_source: Pubkey
    writer_crate_token: Pubkey
    crate_collateral_tokens: Pubkey
    crate_exercise_tokens: Pubkey
    collateral_token_destination: Pubkey
    exercise_fee_destination: Pubkey
    token_program: Pubkey = TOKEN_PROGRAM_ID
    crate_token_program: Pubkey = CRATE_TOKEN_PROGRAM_ID


@final
@dataclass(frozen=True, slots=True)
class OptionRedeemAccounts(_AccountList):
    SIGNERS: ClassVar[frozenset[str]] = frozenset({"writer_authority"})
    WRITABLE: ClassVar[frozenset[str]] = frozenset({
        "writer_authority", "writer_token_source", "writer_mint",
        "underlying_token_destination", "quote_token_destination",
        "crate_collateral_tokens", "crate_exercise_tokens",
    })

    writer_authority: Pubkey
    contract: Pubkey
    writer_token_source: Pubkey
    writer_mint: Pubkey
    underlying_token_destination: Pubkey
    quote_token_destination: Pubkey
    writer_crate_token: Pubkey
    crate_collateral_tokens: Pubkey
    crate_exercise_tokens: Pubkey
    token_program: Pubkey = TOKEN_PROGRAM_ID
    crate_token_program: Pubkey = CRATE_TOKEN_PROGRAM_ID


@final
@dataclass(frozen=True, slots=True)
class OptionBurnAccounts(_AccountList):
    SIGNERS: ClassVar[frozenset[str]] = frozenset({"writer_authority"})
    WRITABLE: ClassVar[frozenset[str]] = frozenset({
        "writer_authority", "writer_mint", "option_mint", "writer_token_source",
        "option_token_source", "crate_collateral_tokens", "collateral_token_destination",
        "crate_token", "crate_exercise_tokens",
    })

    writer_authority: Pubkey
    contract: Pubkey
    writer_mint: Pubkey
    option_mint: Pubkey
    writer_token_source: Pubkey
    option_token_source: Pubkey
    crate_collateral_tokens: Pubkey
    collateral_token_destination: Pubkey
    collateral_mint: Pubkey
    writer_crate_token: Pubkey
    # writer crate
    crate_mint: Pubkey
    crate_token: Pubkey
    writer_crate_program: Pubkey
    crate_exercise_tokens: Pubkey
    token_program: Pubkey = TOKEN_PROGRAM_ID
    crate_token_program: Pubkey = CRATE_TOKEN_PROGRAM_ID


# ---------------------------------------------------------------------------
# Instruction builders
# ---------------------------------------------------------------------------


def _amount_data(
    kind: TractionInstruction, amount: int,
) -> Ok[bytes] | Err[ValidationError]:
    match check_u64(amount):
        case Err(msg):
            return Err(validation_error(
                f"program.instructions.{kind.value}", "amount", msg, amount,
            ))
        case Ok(v):
            return Ok(kind.sighash + AMOUNT_ARGS_LAYOUT.build({"amount": v}))


def new_contract_instruction(
    strike: int,
    expiry_ts: int,
    is_put: bool,
    contract_bump: int,
    crate_bump: int,
    accounts: NewContractAccounts,
    program_id: Pubkey = TRACTION_PROGRAM_ID,
) -> Ok[Instruction] | Err[ValidationError]:
    source = "program.instructions.new_contract"
    match check_u64(strike):
        case Err(msg):
            return Err(validation_error(source, "strike", msg, strike))
        case Ok(_):
            pass
    match check_i64(expiry_ts):
        case Err(msg):
            return Err(validation_error(source, "expiry_ts", msg, expiry_ts))
        case Ok(_):
            pass
    for name, bump in (("contract_bump", contract_bump), ("crate_bump", crate_bump)):
        if not 0 <= bump <= U8_MAX:
            return Err(validation_error(source, name, "must fit in u8", bump))
    data = TractionInstruction.NEW_CONTRACT.sighash + NEW_CONTRACT_ARGS_LAYOUT.build({
        "strike": strike,
        "expiry_ts": expiry_ts,
        "is_put": is_put,
        "contract_bump": contract_bump,
        "crate_bump": crate_bump,
    })
    return Ok(Instruction(program_id, data, accounts.to_metas()))


def option_write_instruction(
    amount: int, accounts: OptionWriteAccounts, program_id: Pubkey = TRACTION_PROGRAM_ID,
) -> Ok[Instruction] | Err[ValidationError]:
    return _amount_data(TractionInstruction.OPTION_WRITE, amount).map(
        lambda data: Instruction(program_id, data, accounts.to_metas()),
    )


def option_exercise_instruction(
    amount: int, accounts: OptionExerciseAccounts, program_id: Pubkey = TRACTION_PROGRAM_ID,
) -> Ok[Instruction] | Err[ValidationError]:
    return _amount_data(TractionInstruction.OPTION_EXERCISE, amount).map(
        lambda data: Instruction(program_id, data, accounts.to_metas()),
    )


def option_redeem_instruction(
    amount: int, accounts: OptionRedeemAccounts, program_id: Pubkey = TRACTION_PROGRAM_ID,
) -> Ok[Instruction] | Err[ValidationError]:
    return _amount_data(TractionInstruction.OPTION_REDEEM, amount).map(
        lambda data: Instruction(program_id, data, accounts.to_metas()),
    )


def option_burn_instruction(
    amount: int, accounts: OptionBurnAccounts, program_id: Pubkey = TRACTION_PROGRAM_ID,
) -> Ok[Instruction] | Err[ValidationError]:
    return _amount_data(TractionInstruction.OPTION_BURN, amount).map(
        lambda data: Instruction(program_id, data, accounts.to_metas()),
    )


# ---------------------------------------------------------------------------
# Decoding (explorers, tests, log parsing)
# ---------------------------------------------------------------------------


@final
@dataclass(frozen=True, slots=True)
class NewContractArgs:
    strike: int
    expiry_ts: int
    is_put: bool
    contract_bump: int
    crate_bump: int


@final
@dataclass(frozen=True, slots=True)
class AmountArgs:
    amount: int


def decode_instruction(
    data: bytes,
) -> Ok[tuple[TractionInstruction, NewContractArgs | AmountArgs]] | Err[str]:
    kind = _BY_SIGHASH.get(bytes(data[:8]))
    if kind is None:
        return Err(f"unknown instruction sighash {bytes(data[:8]).hex()}")
    body = bytes(data[8:])
    layout = NEW_CONTRACT_ARGS_LAYOUT if kind is TractionInstruction.NEW_CONTRACT \
        else AMOUNT_ARGS_LAYOUT
    if len(body) != layout.sizeof():
        return Err(f"{kind.value} expects {layout.sizeof()} arg bytes, got {len(body)}")
    try:
        parsed = layout.parse(body)
    except ConstructError as exc:
        return Err(f"{kind.value}: {exc}")
    if kind is TractionInstruction.NEW_CONTRACT:
        return Ok((kind, NewContractArgs(
            parsed.strike, parsed.expiry_ts, parsed.is_put, parsed.contract_bump, parsed.crate_bump,
        )))
    return Ok((kind, AmountArgs(parsed.amount)))
