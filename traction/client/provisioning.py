"""Resolve-or-create for associated token accounts.

For each (role -> mint) the associated account of `owner` is computed with the
SPL derivation; absent accounts get a create instruction to prepend to the
transaction. The existence reads are issued concurrently. The check and the
create are not atomic here: the submitted transaction is what makes them so.
"""

from __future__ import annotations

import asyncio
from collections.abc import Mapping
from dataclasses import dataclass
from typing import final

from loguru import logger
from solders.instruction import Instruction
from solders.pubkey import Pubkey
from spl.token.instructions import create_associated_token_account, get_associated_token_address

from traction.core.errors import TransportError
from traction.core.result import Err, Ok
from traction.infra.protocols import AccountReader


@final
@dataclass(frozen=True, slots=True)
class AtaResolution:
    accounts: Mapping[str, Pubkey]
    instructions: tuple[Instruction, ...]

    def __getitem__(self, role: str) -> Pubkey:
        return self.accounts[role]


async def get_or_create_atas(
    reader: AccountReader,
    payer: Pubkey,
    owner: Pubkey,
    mints: Mapping[str, Pubkey],
) -> Ok[AtaResolution] | Err[TransportError]:
    """Associated accounts of `owner` per role, plus creates for the missing ones.

    Roles sharing a mint share one account and at most one create instruction.
    """
    addresses = {role: get_associated_token_address(owner, mint) for role, mint in mints.items()}
    unique = list(dict.fromkeys(addresses.values()))
    results = await asyncio.gather(*(reader.get_account_data(a) for a in unique))

    mint_of = {addresses[role]: mint for role, mint in mints.items()}
    instructions: list[Instruction] = []
    for address, result in zip(unique, results, strict=True):
        match result:
            case Err(e):
                return Err(e)
            case Ok(None):
                logger.debug("ATA {} (owner {}) missing, adding create", address, owner)
                instructions.append(create_associated_token_account(payer, owner, mint_of[address]))
            case Ok(_):
                pass
    return Ok(AtaResolution(accounts=addresses, instructions=tuple(instructions)))
