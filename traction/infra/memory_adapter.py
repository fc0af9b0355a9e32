"""In-memory AccountReader.

Test double that lets the client and builders run without a validator.
Not production code.
"""

from __future__ import annotations

from typing import final

from solders.pubkey import Pubkey

from traction.core.errors import TransportError
from traction.core.result import Err, Ok
from traction.core.types import UtcDatetime

# lamports per byte-year * 2 years, as on mainnet
_LAMPORTS_PER_BYTE: int = 6960
_ACCOUNT_STORAGE_OVERHEAD: int = 128


def transport_error(operation: str, detail: str, source: str) -> TransportError:
    return TransportError(
        message=detail,
        code="TRANSPORT_ERROR",
        timestamp=UtcDatetime.now(),
        source=source,
        operation=operation,
        cause=detail,
    )


@final
class InMemoryAccountReader:
    """Accounts keyed by address. `reads` counts get_account_data calls."""

    def __init__(self, accounts: dict[Pubkey, bytes] | None = None) -> None:
        self._accounts: dict[Pubkey, bytes] = dict(accounts or {})
        self._failing: set[Pubkey] = set()
        self.reads: int = 0

    async def get_account_data(
        self, address: Pubkey,
    ) -> Ok[bytes | None] | Err[TransportError]:
        self.reads += 1
        if address in self._failing:
            return Err(transport_error(
                "get_account_data", f"simulated failure reading {address}",
                "infra.memory_adapter.InMemoryAccountReader.get_account_data",
            ))
        return Ok(self._accounts.get(address))

    async def minimum_balance_for_rent_exemption(
        self, size: int,
    ) -> Ok[int] | Err[TransportError]:
        return Ok((size + _ACCOUNT_STORAGE_OVERHEAD) * _LAMPORTS_PER_BYTE)

    def put(self, address: Pubkey, data: bytes) -> None:
        """Test-only helper."""
        self._accounts[address] = data

    def remove(self, address: Pubkey) -> None:
        """Test-only helper."""
        self._accounts.pop(address, None)

    def fail_reads_of(self, address: Pubkey) -> None:
        """Test-only helper: make reads of `address` return Err."""
        self._failing.add(address)

    def __contains__(self, address: object) -> bool:
        return address in self._accounts
