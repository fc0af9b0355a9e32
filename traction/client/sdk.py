"""TractionSDK: entry point binding a reader, a wallet and a configuration."""

from __future__ import annotations

import asyncio
from dataclasses import replace
from typing import final

from loguru import logger
from solders.keypair import Keypair
from solders.pubkey import Pubkey

from traction.client.builder import build_new_contract_transaction
from traction.client.contract import FetchError, OptionsContract
from traction.client.envelope import TransactionEnvelope
from traction.core.amounts import Price, Token
from traction.core.errors import NotFoundError, TractionError, validation_error
from traction.core.result import Err, Ok
from traction.core.types import UtcDatetime
from traction.infra.config import TractionConfig
from traction.infra.protocols import AccountReader
from traction.instrument.descriptor import ContractDescriptor, OptionDirection
from traction.program.constants import STRIKE_PRICE_UNITS
from traction.program.layout import decode_mint_decimals, decode_options_contract


@final
class TractionSDK:
    def __init__(
        self,
        reader: AccountReader,
        wallet: Pubkey,
        config: TractionConfig | None = None,
    ) -> None:
        self.reader = reader
        self.wallet = wallet
        self.config = TractionConfig() if config is None else config

    def with_signer(self, wallet: Pubkey) -> TractionSDK:
        """Same reader and configuration, different default wallet."""
        return TractionSDK(self.reader, wallet, replace(self.config))

    def load_contract(
        self, strike: Price, expiry_ts: int, direction: OptionDirection,
    ) -> OptionsContract:
        """Client for the contract these parameters derive to. Does no I/O."""
        return OptionsContract(
            ContractDescriptor.create(strike, expiry_ts, direction),
            self.reader, self.wallet, self.config,
        )

    async def load_contract_from_key(
        self, key: Pubkey,
    ) -> Ok[OptionsContract] | Err[FetchError | TractionError]:
        """Rebuild a client from a contract address by reading the account and both mints.

        Token metadata beyond decimals is unknown on chain, so the tokens carry
        placeholder symbols.
        """
        match await self.reader.get_account_data(key):
            case Err(e):
                return Err(e)
            case Ok(None):
                return Err(_not_found(key, "OptionsContract"))
            case Ok(data):
                pass
        match decode_options_contract(data, account=str(key)):
            case Err(e):
                return Err(e)
            case Ok(state):
                pass

        underlying_data, quote_data = await asyncio.gather(
            self.reader.get_account_data(state.underlying_mint),
            self.reader.get_account_data(state.quote_mint),
        )
        decimals: list[int] = []
        for mint, result in ((state.underlying_mint, underlying_data), (state.quote_mint, quote_data)):
            match result:
                case Err(e):
                    return Err(e)
                case Ok(None):
                    return Err(_not_found(mint, "Mint"))
                case Ok(raw):
                    match decode_mint_decimals(raw, account=str(mint)):
                        case Err(e):
                            return Err(e)
                        case Ok(d):
                            decimals.append(d)

        underlying = Token.from_mint(state.underlying_mint, decimals[0])
        quote = Token.from_mint(state.quote_mint, decimals[1])
        strike = Price(base=underlying, quote=quote, numerator=state.strike,
                       denominator=STRIKE_PRICE_UNITS)
        contract = OptionsContract(
            ContractDescriptor(strike=strike, expiry_ts=state.expiry_ts, is_put=state.is_put),
            self.reader, self.wallet, self.config,
        )
        match contract.locate():
            case Err(e):
                return Err(e)
            case Ok(located) if located.address != key:
                return Err(validation_error(
                    "client.sdk.TractionSDK.load_contract_from_key", "key",
                    f"is not the contract address its own parameters derive to ({located.address})",
                    str(key),
                ))
            case Ok(_):
                pass
        logger.debug("Loaded {} from {}", contract, key)
        return Ok(contract)

    async def new_contract(
        self,
        strike: Price,
        expiry_ts: int,
        direction: OptionDirection,
        payer: Pubkey | None = None,
        writer_mint: Keypair | None = None,
        option_mint: Keypair | None = None,
    ) -> Ok[tuple[OptionsContract, TransactionEnvelope]] | Err[TractionError]:
        """Client for a contract not yet on chain, plus the transaction that creates it."""
        contract = self.load_contract(strike, expiry_ts, direction)
        fee_payer = self.wallet if payer is None else payer
        return (
            await build_new_contract_transaction(contract, fee_payer, writer_mint, option_mint)
        ).map(lambda envelope: (contract, envelope))


def _not_found(address: Pubkey, kind: str) -> NotFoundError:
    return NotFoundError(
        message=f"could not fetch {kind} at {address}",
        code="NOT_FOUND",
        timestamp=UtcDatetime.now(),
        source="client.sdk.TractionSDK.load_contract_from_key",
        address=str(address),
    )
