"""OptionsContract: one contract's address, cached state, and lifecycle builders.

State cache: one explicit cell per instance. The first fetch() reads the
chain; later calls return the cached copy until refresh(). Concurrent first
fetches share a single in-flight read. There is no TTL: if the program has
changed the account since, builders will target the stale addresses, and it
is the caller's job to refresh().
"""

from __future__ import annotations

import asyncio
from dataclasses import dataclass
from typing import TypeAlias, final

from loguru import logger
from solders.pubkey import Pubkey

from traction.client.builder import (
    LifecycleRequest,
    build_burn_transaction,
    build_exercise_transaction,
    build_redeem_transaction,
    build_write_transaction,
)
from traction.client.envelope import TransactionEnvelope
from traction.core.amounts import Token
from traction.core.errors import (
    DecodeError,
    DerivationExhaustedError,
    NotFoundError,
    TractionError,
    TransportError,
    ValidationError,
)
from traction.core.result import Err, Ok
from traction.core.types import UtcDatetime
from traction.infra.config import TractionConfig
from traction.infra.protocols import AccountReader
from traction.instrument import display
from traction.instrument.descriptor import ContractDescriptor, OptionRoles, option_roles
from traction.instrument.economics import normalize_strike
from traction.program.layout import OptionsContractState, decode_options_contract
from traction.program.pda import ContractAddress, find_options_contract_address

LocateError: TypeAlias = ValidationError | DerivationExhaustedError
FetchError: TypeAlias = LocateError | NotFoundError | TransportError | DecodeError


@final
@dataclass(frozen=True, slots=True)
class ContractAccount:
    """A fetched contract: its address and decoded state."""

    key: Pubkey
    state: OptionsContractState


@dataclass(slots=True)
class StateCache:
    """Present/absent cell for the decoded state, plus the read in progress."""

    state: OptionsContractState | None = None
    in_flight: asyncio.Task[Ok[OptionsContractState] | Err[FetchError]] | None = None

    def clear(self) -> None:
        self.state = None
        self.in_flight = None


@final
class OptionsContract:
    """Client for one options contract.

    `wallet` is the default acting party and fee payer; lifecycle methods
    resolve it at their call site when no authority is given.
    """

    def __init__(
        self,
        descriptor: ContractDescriptor,
        reader: AccountReader,
        wallet: Pubkey,
        config: TractionConfig,
    ) -> None:
        self.descriptor = descriptor
        self.reader = reader
        self.wallet = wallet
        self.config = config
        self.roles: OptionRoles = option_roles(descriptor)
        self._cache = StateCache()

    def __repr__(self) -> str:
        d = self.descriptor
        return (
            f"OptionsContract({d.underlying.symbol}/{d.quote.symbol}, "
            f"{d.direction.value}, expiry={d.expiry_ts})"
        )

    # ------------------------------------------------------------------
    # Address
    # ------------------------------------------------------------------

    def locate(self) -> Ok[ContractAddress] | Err[LocateError]:
        """Derived address and bump. Recomputed on every call, never cached."""
        match normalize_strike(self.descriptor):
            case Err(e):
                return Err(e)
            case Ok(strike):
                pass
        return find_options_contract_address(
            self.descriptor.underlying.mint,
            self.descriptor.quote.mint,
            strike,
            self.descriptor.expiry_ts,
            self.descriptor.is_put,
            self.config.program_id,
        )

    # ------------------------------------------------------------------
    # State
    # ------------------------------------------------------------------

    @property
    def cached_state(self) -> OptionsContractState | None:
        return self._cache.state

    async def fetch(self) -> Ok[ContractAccount] | Err[FetchError]:
        """Cached state, or one read of the contract account. NotFound if it does not exist."""
        match self.locate():
            case Err(e):
                return Err(e)
            case Ok(located):
                key = located.address

        if self._cache.state is not None:
            logger.debug("OptionsContract {} served from cache", key)
            return Ok(ContractAccount(key=key, state=self._cache.state))

        task = self._cache.in_flight
        if task is None:
            task = asyncio.get_running_loop().create_task(self._read(key))
            self._cache.in_flight = task
        try:
            result = await asyncio.shield(task)
        finally:
            # a cancelled caller leaves the shielded read running for the next fetch
            if self._cache.in_flight is task and task.done():
                self._cache.in_flight = None

        match result:
            case Err(e):
                return Err(e)
            case Ok(state):
                self._cache.state = state
                return Ok(ContractAccount(key=key, state=state))

    async def refresh(self) -> Ok[ContractAccount] | Err[FetchError]:
        """Drop the cached state and read it again."""
        self._cache.clear()
        return await self.fetch()

    async def _read(self, key: Pubkey) -> Ok[OptionsContractState] | Err[FetchError]:
        logger.debug("Reading OptionsContract {}", key)
        match await self.reader.get_account_data(key):
            case Err(e):
                return Err(e)
            case Ok(None):
                return Err(NotFoundError(
                    message=f"could not fetch OptionsContract at {key}",
                    code="NOT_FOUND",
                    timestamp=UtcDatetime.now(),
                    source="client.contract.OptionsContract.fetch",
                    address=str(key),
                ))
            case Ok(data):
                return decode_options_contract(data, account=str(key))

    # ------------------------------------------------------------------
    # Tokens
    # ------------------------------------------------------------------

    async def generate_token_info(
        self, current_year: int | None = None,
    ) -> Ok[dict[str, object]] | Err[FetchError]:
        """Token-list entry for the option token."""
        year = display.current_year() if current_year is None else current_year
        return (await self.fetch()).map(
            lambda account: display.token_info(self.descriptor, account.state.option_mint, year),
        )

    async def fetch_option_token(
        self, current_year: int | None = None,
    ) -> Ok[Token] | Err[FetchError]:
        year = display.current_year() if current_year is None else current_year
        return (await self.fetch()).map(lambda account: Token(
            mint=account.state.option_mint,
            decimals=display.option_decimals(self.descriptor),
            symbol=display.symbol(self.descriptor, year),
            name=display.name(self.descriptor, year),
            chain_id=self.descriptor.underlying.chain_id,
        ))

    async def fetch_writer_token(
        self, current_year: int | None = None,
    ) -> Ok[Token] | Err[FetchError]:
        year = display.current_year() if current_year is None else current_year
        return (await self.fetch()).map(lambda account: Token(
            mint=account.state.writer_mint,
            decimals=display.option_decimals(self.descriptor),
            symbol=display.writer_token_symbol(self.descriptor, year),
            name=display.writer_token_name(self.descriptor, year),
            chain_id=self.descriptor.underlying.chain_id,
        ))

    # ------------------------------------------------------------------
    # Lifecycle (authority defaults to the wallet, resolved here)
    # ------------------------------------------------------------------

    async def write(
        self, amount: int, writer_authority: Pubkey | None = None,
    ) -> Ok[TransactionEnvelope] | Err[TractionError]:
        authority = self.wallet if writer_authority is None else writer_authority
        return await build_write_transaction(self, LifecycleRequest(authority, amount))

    async def exercise(
        self, amount: int, exerciser_authority: Pubkey | None = None,
    ) -> Ok[TransactionEnvelope] | Err[TractionError]:
        authority = self.wallet if exerciser_authority is None else exerciser_authority
        return await build_exercise_transaction(self, LifecycleRequest(authority, amount))

    async def redeem(
        self, amount: int, writer_authority: Pubkey | None = None,
    ) -> Ok[TransactionEnvelope] | Err[TractionError]:
        authority = self.wallet if writer_authority is None else writer_authority
        return await build_redeem_transaction(self, LifecycleRequest(authority, amount))

    async def burn(
        self, amount: int, writer_authority: Pubkey | None = None,
    ) -> Ok[TransactionEnvelope] | Err[TractionError]:
        authority = self.wallet if writer_authority is None else writer_authority
        return await build_burn_transaction(self, LifecycleRequest(authority, amount))
