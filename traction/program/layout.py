"""Account layouts: the OptionsContract account and the SPL mint fields we read.

OptionsContract is an Anchor account: an 8-byte discriminator,
sha256("account:OptionsContract")[:8], followed by the borsh body declared in
OPTIONS_CONTRACT_LAYOUT (250 bytes in total). The SPL layouts come from
solana-py's own construct declarations.
"""

from __future__ import annotations

import hashlib
from dataclasses import dataclass, fields
from typing import Any, final

from construct import (
    Adapter,
    Bytes,
    Const,
    ConstError,
    ConstructError,
    ExplicitError,
    Int8ul,
    Int64sl,
    Int64ul,
)
from construct import Struct as cStruct
from solders.pubkey import Pubkey
from spl.token._layouts import MINT_LAYOUT
from spl.token.constants import MINT_LEN

from traction.core.errors import DecodeError
from traction.core.result import Err, Ok
from traction.core.types import UtcDatetime


def account_discriminator(name: str) -> bytes:
    return hashlib.sha256(f"account:{name}".encode()).digest()[:8]


OPTIONS_CONTRACT_DISCRIMINATOR: bytes = account_discriminator("OptionsContract")


class _PubkeyAdapter(Adapter):
    """32 raw bytes as a solders Pubkey."""

    def __init__(self) -> None:
        super().__init__(Bytes(32))

    def _decode(self, obj: bytes, context: Any, path: str) -> Pubkey:
        return Pubkey(obj)

    def _encode(self, obj: Pubkey, context: Any, path: str) -> bytes:
        return bytes(obj)


class _BoolAdapter(Adapter):
    """borsh bool: one byte, 0 or 1. Any other byte is rejected."""

    def __init__(self) -> None:
        super().__init__(Int8ul)

    def _decode(self, obj: int, context: Any, path: str) -> bool:
        if obj > 1:
            raise ExplicitError(f"bool must be 0 or 1, got {obj}", path=path)
        return obj == 1

    def _encode(self, obj: bool, context: Any, path: str) -> int:
        return 1 if obj else 0


PUBKEY = _PubkeyAdapter()
BOOL = _BoolAdapter()

OPTIONS_CONTRACT_LAYOUT = cStruct(
    "discriminator" / Const(OPTIONS_CONTRACT_DISCRIMINATOR),
    "underlying_mint" / PUBKEY,
    "quote_mint" / PUBKEY,
    # quote units per 10**9 underlying units
    "strike" / Int64ul,
    "expiry_ts" / Int64sl,
    "is_put" / BOOL,
    "bump" / Int8ul,
    "writer_mint" / PUBKEY,
    "writer_crate" / PUBKEY,
    "crate_collateral_tokens" / PUBKEY,
    "crate_exercise_tokens" / PUBKEY,
    "option_mint" / PUBKEY,
)
OPTIONS_CONTRACT_SIZE: int = OPTIONS_CONTRACT_LAYOUT.sizeof()


@final
@dataclass(frozen=True, slots=True)
class OptionsContractState:
    """Decoded OptionsContract. Read-only from the client's point of view."""

    underlying_mint: Pubkey
    quote_mint: Pubkey
    strike: int
    expiry_ts: int
    is_put: bool
    bump: int
    writer_mint: Pubkey
    writer_crate: Pubkey
    crate_collateral_tokens: Pubkey
    crate_exercise_tokens: Pubkey
    option_mint: Pubkey

    @property
    def collateral_mint(self) -> Pubkey:
        return self.quote_mint if self.is_put else self.underlying_mint

    @property
    def exercise_mint(self) -> Pubkey:
        return self.underlying_mint if self.is_put else self.quote_mint


def _decode_error(account: str, reason: str, source: str) -> DecodeError:
    return DecodeError(
        message=f"cannot decode {account}: {reason}",
        code="DECODE_ERROR",
        timestamp=UtcDatetime.now(),
        source=source,
        account=account,
        reason=reason,
    )


def decode_options_contract(
    data: bytes, account: str = "OptionsContract",
) -> Ok[OptionsContractState] | Err[DecodeError]:
    """Decode raw account data. Trailing bytes (account padding) are ignored."""
    source = "program.layout.decode_options_contract"
    if len(data) < OPTIONS_CONTRACT_SIZE:
        return Err(_decode_error(
            account, f"expected {OPTIONS_CONTRACT_SIZE} bytes, got {len(data)}", source,
        ))
    try:
        parsed = OPTIONS_CONTRACT_LAYOUT.parse(data)
    except ConstError:
        return Err(_decode_error(account, "discriminator mismatch", source))
    except ConstructError as exc:
        return Err(_decode_error(account, str(exc), source))
    return Ok(OptionsContractState(
        **{f.name: parsed[f.name] for f in fields(OptionsContractState)},
    ))


def encode_options_contract(state: OptionsContractState) -> bytes:
    return OPTIONS_CONTRACT_LAYOUT.build(
        {f.name: getattr(state, f.name) for f in fields(OptionsContractState)},
    )


def decode_mint_decimals(data: bytes, account: str = "Mint") -> Ok[int] | Err[DecodeError]:
    if len(data) < MINT_LEN:
        return Err(_decode_error(
            account, f"expected {MINT_LEN} bytes, got {len(data)}",
            "program.layout.decode_mint_decimals",
        ))
    return Ok(MINT_LAYOUT.parse(data).decimals)
