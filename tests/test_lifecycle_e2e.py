"""End-to-end: create, write, exercise, expire and redeem call and put contracts.

One wallet plays both writer and holder. Both assets have 6 decimals and the
strike is 100 quote per underlying, so exercising 1000 options costs 100000
quote tokens of which 1bp is the protocol fee.
"""

from __future__ import annotations

import pytest
from factories import make_token, ts
from loguru import logger
from program_sim import ProgramSimulator, SimulationError, deploy
from solders.hash import Hash
from solders.pubkey import Pubkey

from traction.client.sdk import TractionSDK
from traction.core.amounts import Price
from traction.core.result import unwrap
from traction.instrument.descriptor import OptionDirection
from traction.instrument.economics import exercise_payment
from traction.program.constants import FEE_OWNER

UND = make_token(21, 6, "UND")
QTE = make_token(22, 6, "QTE")
WALLET = Pubkey(bytes([9]) * 32)
EXPIRY = ts(2027, 1, 15)
STRIKE = Price(base=UND, quote=QTE, numerator=100 * QTE.one, denominator=UND.one)

OPTIONS = 10**9
START_QUOTE = 2 * 10**11


def _sim() -> ProgramSimulator:
    sim = ProgramSimulator(now=ts(2026, 11, 1))
    mint_authority = Pubkey(bytes([99]) * 32)
    sim.create_mint(UND.mint, UND.decimals, mint_authority)
    sim.create_mint(QTE.mint, QTE.decimals, mint_authority)
    sim.airdrop(WALLET, UND.mint, OPTIONS)
    sim.airdrop(WALLET, QTE.mint, START_QUOTE)
    return sim


class TestCallLifecycle:
    @pytest.mark.asyncio
    async def test_full_lifecycle(self) -> None:
        sim = _sim()
        sdk = TractionSDK(sim, WALLET)
        contract = await deploy(sim, sdk, STRIKE, EXPIRY, OptionDirection.CALL)
        state = unwrap(await contract.fetch()).state
        assert state.strike == 100 * 10**9

        # write
        sim.execute(unwrap(await contract.write(OPTIONS)))
        assert sim.balance(WALLET, state.writer_mint) == OPTIONS
        assert sim.balance(WALLET, state.option_mint) == OPTIONS
        assert sim.balance(WALLET, UND.mint) == 0

        # exercise
        payment = unwrap(exercise_payment(OPTIONS, state.strike))
        assert payment.gross == 100 * 10**9
        assert payment.fee == 10**7
        sim.execute(unwrap(await contract.exercise(OPTIONS)))
        assert sim.balance(WALLET, QTE.mint) == START_QUOTE - payment.gross
        assert sim.balance(FEE_OWNER, QTE.mint) == payment.fee
        assert sim.balance(WALLET, UND.mint) == OPTIONS
        assert sim.balance(WALLET, state.option_mint) == 0
        assert sim.token_accounts[state.crate_exercise_tokens].amount == payment.to_pool

        # expire, then redeem
        sim.advance_to(EXPIRY + 1)
        sim.execute(unwrap(await contract.redeem(OPTIONS)))
        assert sim.balance(WALLET, state.writer_mint) == 0
        assert sim.balance(WALLET, QTE.mint) == 199_990 * 10**6
        assert sim.balance(WALLET, UND.mint) == OPTIONS
        assert sim.token_accounts[state.crate_collateral_tokens].amount == 0
        assert sim.token_accounts[state.crate_exercise_tokens].amount == 0

    @pytest.mark.asyncio
    async def test_reloaded_client_sees_same_contract(self) -> None:
        sim = _sim()
        sdk = TractionSDK(sim, WALLET)
        contract = await deploy(sim, sdk, STRIKE, EXPIRY, OptionDirection.CALL)
        key = unwrap(contract.locate()).address
        reloaded = unwrap(await sdk.load_contract_from_key(key))
        sim.execute(unwrap(await reloaded.write(OPTIONS)))
        assert sim.balance(WALLET, unwrap(await contract.refresh()).state.option_mint) == OPTIONS


class TestEnvelope:
    @pytest.mark.asyncio
    async def test_combined_write_and_exercise(self) -> None:
        sim = _sim()
        sdk = TractionSDK(sim, WALLET)
        contract = await deploy(sim, sdk, STRIKE, EXPIRY, OptionDirection.CALL)
        sim.execute(unwrap(await contract.write(OPTIONS // 2)))
        write = unwrap(await contract.write(OPTIONS // 2))
        exercise = unwrap(await contract.exercise(OPTIONS // 2))
        combined = write.combine(exercise)
        assert combined.fee_payer == WALLET
        assert combined.instructions == write.instructions + exercise.instructions
        sim.execute(combined)
        state = unwrap(await contract.fetch()).state
        assert sim.balance(WALLET, state.option_mint) == OPTIONS // 2

    @pytest.mark.asyncio
    async def test_to_message(self) -> None:
        sim = _sim()
        sdk = TractionSDK(sim, WALLET)
        _, envelope = unwrap(await sdk.new_contract(STRIKE, EXPIRY, OptionDirection.CALL))
        message = envelope.to_message(Hash.default())
        assert message.account_keys[0] == WALLET
        assert len(message.instructions) == len(envelope.instructions)
        # fee payer plus the two fresh mint keypairs
        assert message.header.num_required_signatures == 3


class TestLogging:
    @pytest.mark.asyncio
    async def test_builders_log_when_enabled(self) -> None:
        messages: list[str] = []
        logger.enable("traction")
        sink = logger.add(lambda m: messages.append(m.record["message"]), level="DEBUG")
        try:
            sim = _sim()
            await deploy(sim, TractionSDK(sim, WALLET), STRIKE, EXPIRY, OptionDirection.CALL)
        finally:
            logger.remove(sink)
            logger.disable("traction")
        assert any(m.startswith("new_contract") for m in messages)


PUT_OPTIONS = 10**6
PUT_EXERCISED = 4 * 10**5


class TestPutLifecycle:
    @pytest.mark.asyncio
    async def test_exercise_then_redeem(self) -> None:
        sim = _sim()
        sdk = TractionSDK(sim, WALLET)
        contract = await deploy(sim, sdk, STRIKE, EXPIRY, OptionDirection.PUT)
        state = unwrap(await contract.fetch()).state
        assert state.is_put
        assert state.collateral_mint == QTE.mint
        assert state.exercise_mint == UND.mint

        # write: the writer locks quote
        sim.execute(unwrap(await contract.write(PUT_OPTIONS)))
        assert sim.balance(WALLET, QTE.mint) == START_QUOTE - PUT_OPTIONS
        assert sim.token_accounts[state.crate_collateral_tokens].amount == PUT_OPTIONS

        # partial exercise: the holder pays underlying and receives quote
        payment = unwrap(exercise_payment(PUT_EXERCISED, state.strike))
        assert payment.gross == 4 * 10**7
        assert payment.fee == 4 * 10**3
        sim.execute(unwrap(await contract.exercise(PUT_EXERCISED)))
        assert sim.balance(FEE_OWNER, UND.mint) == payment.fee
        assert sim.balance(FEE_OWNER, QTE.mint) == 0
        assert sim.balance(WALLET, UND.mint) == OPTIONS - payment.gross
        assert sim.balance(WALLET, QTE.mint) == START_QUOTE - PUT_OPTIONS + PUT_EXERCISED
        assert sim.balance(WALLET, state.option_mint) == PUT_OPTIONS - PUT_EXERCISED
        assert sim.token_accounts[state.crate_exercise_tokens].amount == payment.to_pool
        assert sim.token_accounts[state.crate_collateral_tokens].amount == (
            PUT_OPTIONS - PUT_EXERCISED
        )

        # redeem pays out the unexercised quote and the pooled underlying
        sim.advance_to(EXPIRY + 1)
        sim.execute(unwrap(await contract.redeem(PUT_OPTIONS)))
        assert sim.balance(WALLET, state.writer_mint) == 0
        assert sim.balance(WALLET, QTE.mint) == START_QUOTE
        assert sim.balance(WALLET, UND.mint) == OPTIONS - payment.fee
        assert sim.token_accounts[state.crate_collateral_tokens].amount == 0
        assert sim.token_accounts[state.crate_exercise_tokens].amount == 0

    @pytest.mark.asyncio
    async def test_exercise_after_expiry_rejected(self) -> None:
        sim = _sim()
        sdk = TractionSDK(sim, WALLET)
        contract = await deploy(sim, sdk, STRIKE, EXPIRY, OptionDirection.PUT)
        sim.execute(unwrap(await contract.write(PUT_OPTIONS)))
        sim.advance_to(EXPIRY + 1)
        envelope = unwrap(await contract.exercise(PUT_OPTIONS))
        with pytest.raises(SimulationError, match="ContractExpired"):
            sim.execute(envelope)
        state = unwrap(await contract.fetch()).state
        assert sim.balance(WALLET, state.option_mint) == PUT_OPTIONS
        assert sim.balance(FEE_OWNER, UND.mint) == 0
