"""Unsigned transaction envelope handed back to the caller."""

from __future__ import annotations

from dataclasses import dataclass
from typing import final

from solders.hash import Hash
from solders.instruction import Instruction
from solders.keypair import Keypair
from solders.message import Message
from solders.pubkey import Pubkey


@final
@dataclass(frozen=True, slots=True)
class TransactionEnvelope:
    """Ordered instructions plus keypairs generated for them (e.g. new mints).

    All instructions land in one transaction, so account provisioning and the
    main instruction succeed or fail together once submitted.
    """

    fee_payer: Pubkey
    instructions: tuple[Instruction, ...]
    signers: tuple[Keypair, ...] = ()

    def combine(self, other: TransactionEnvelope) -> TransactionEnvelope:
        return TransactionEnvelope(
            fee_payer=self.fee_payer,
            instructions=self.instructions + other.instructions,
            signers=self.signers + other.signers,
        )

    def to_message(self, recent_blockhash: Hash) -> Message:
        return Message.new_with_blockhash(
            list(self.instructions), self.fee_payer, recent_blockhash,
        )

    @property
    def signer_keys(self) -> tuple[Pubkey, ...]:
        return tuple(kp.pubkey() for kp in self.signers)
