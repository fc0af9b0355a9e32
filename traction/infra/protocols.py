"""Infrastructure protocol: read-only access to chain accounts.

Client code depends on this abstraction; adapters implement it. Both methods
return Ok | Err[TransportError] so a failed read is a value in the type
system, never an invisible exception.

Invariants:
  - get_account_data returns Ok(None) for a missing account, never Err.
  - No adapter retries; the caller owns recovery policy.
"""

from __future__ import annotations

from typing import Protocol, runtime_checkable

from solders.pubkey import Pubkey

from traction.core.errors import TransportError
from traction.core.result import Err, Ok


@runtime_checkable
class AccountReader(Protocol):
    async def get_account_data(
        self, address: Pubkey,
    ) -> Ok[bytes | None] | Err[TransportError]: ...

    async def minimum_balance_for_rent_exemption(
        self, size: int,
    ) -> Ok[int] | Err[TransportError]: ...
