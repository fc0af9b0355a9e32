"""Lifecycle transaction assembly.

Every builder follows the same shape: fetch the contract state, resolve the
acting party's associated token accounts, resolve the writer crate's accounts,
then append the program instruction. The envelope instruction order is fixed:
authority account creates, crate account creates, main instruction. The first
Err aborts the build; no partial envelope is ever returned.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, final

from loguru import logger
from solders.instruction import Instruction
from solders.keypair import Keypair
from solders.pubkey import Pubkey
from solders.system_program import CreateAccountParams, create_account
from spl.token.constants import MINT_LEN
from spl.token.instructions import (
    get_associated_token_address,
    initialize_mint,
)
from spl.token.models import InitializeMintParams

from traction.client.envelope import TransactionEnvelope
from traction.client.provisioning import AtaResolution, get_or_create_atas
from traction.core.errors import TractionError
from traction.core.result import Err, Ok
from traction.instrument.display import option_decimals
from traction.instrument.economics import normalize_strike
from traction.program.instructions import (
    NewContractAccounts,
    OptionBurnAccounts,
    OptionExerciseAccounts,
    OptionRedeemAccounts,
    OptionWriteAccounts,
    new_contract_instruction,
    option_burn_instruction,
    option_exercise_instruction,
    option_redeem_instruction,
    option_write_instruction,
)
from traction.program.pda import find_crate_address

if TYPE_CHECKING:
    from traction.client.contract import OptionsContract


@final
@dataclass(frozen=True, slots=True)
class LifecycleRequest:
    """Who acts, and how many raw units. The authority is also the fee payer."""

    authority: Pubkey
    amount: int


async def _provision(
    contract: OptionsContract,
    request: LifecycleRequest,
    writer_crate: Pubkey,
    authority_mints: dict[str, Pubkey],
    crate_mints: dict[str, Pubkey],
) -> Ok[tuple[AtaResolution, AtaResolution]] | Err[TractionError]:
    reader = contract.reader
    match await get_or_create_atas(reader, request.authority, request.authority, authority_mints):
        case Err(e):
            return Err(e)
        case Ok(own):
            pass
    match await get_or_create_atas(reader, request.authority, writer_crate, crate_mints):
        case Err(e):
            return Err(e)
        case Ok(crate):
            pass
    return Ok((own, crate))


def _envelope(
    request: LifecycleRequest, own: AtaResolution, crate: AtaResolution, ix: Instruction,
) -> TransactionEnvelope:
    instructions = (*own.instructions, *crate.instructions, ix)
    logger.debug(
        "Assembled envelope: {} account creates + {}",
        len(instructions) - 1, ix.program_id,
    )
    return TransactionEnvelope(fee_payer=request.authority, instructions=instructions)


# ---------------------------------------------------------------------------
# Write / exercise / redeem / burn
# ---------------------------------------------------------------------------


async def build_write_transaction(
    contract: OptionsContract, request: LifecycleRequest,
) -> Ok[TransactionEnvelope] | Err[TractionError]:
    """Lock collateral, mint the same amount of option and writer tokens."""
    collateral = contract.roles.collateral.mint
    match await contract.fetch():
        case Err(e):
            return Err(e)
        case Ok(fetched):
            state = fetched.state
    match await _provision(
        contract, request, state.writer_crate,
        {"collateral": collateral, "writer": state.writer_mint, "option": state.option_mint},
        {"collateral": collateral},
    ):
        case Err(e):
            return Err(e)
        case Ok((own, crate)):
            pass
    accounts = OptionWriteAccounts(
        writer_authority=request.authority,
        contract=fetched.key,
        user_collateral_funding_tokens=own["collateral"],
        option_token_destination=own["option"],
        crate_collateral_tokens=crate["collateral"],
        writer_token_destination=own["writer"],
        writer_crate_token=state.writer_crate,
        writer_mint=state.writer_mint,
        option_mint=state.option_mint,
        token_program=contract.config.token_program_id,
        crate_token_program=contract.config.crate_token_program_id,
    )
    return option_write_instruction(request.amount, accounts, contract.config.program_id).map(
        lambda ix: _envelope(request, own, crate, ix),
    )


async def build_exercise_transaction(
    contract: OptionsContract, request: LifecycleRequest,
) -> Ok[TransactionEnvelope] | Err[TractionError]:
    """Burn options, pay the exercise asset, receive collateral. 1bp of the payment goes to the fee owner."""
    collateral = contract.roles.collateral.mint
    exercise = contract.roles.exercise.mint
    match await contract.fetch():
        case Err(e):
            return Err(e)
        case Ok(fetched):
            state = fetched.state
    match await _provision(
        contract, request, state.writer_crate,
        {"collateral": collateral, "option": state.option_mint, "exercise": exercise},
        {"collateral": collateral, "exercise": exercise},
    ):
        case Err(e):
            return Err(e)
        case Ok((own, crate)):
            pass
    accounts = OptionExerciseAccounts(
        exerciser_authority=request.authority,
        contract=fetched.key,
        exercise_token_source=own["exercise"],
        option_mint=state.option_mint,
        option_token_source=own["option"],
        writer_crate_token=state.writer_crate,
        crate_collateral_tokens=crate["collateral"],
        crate_exercise_tokens=crate["exercise"],
        collateral_token_destination=own["collateral"],
        exercise_fee_destination=get_associated_token_address(contract.config.fee_owner, exercise),
        token_program=contract.config.token_program_id,
        crate_token_program=contract.config.crate_token_program_id,
    )
    return option_exercise_instruction(request.amount, accounts, contract.config.program_id).map(
        lambda ix: _envelope(request, own, crate, ix),
    )


async def build_redeem_transaction(
    contract: OptionsContract, request: LifecycleRequest,
) -> Ok[TransactionEnvelope] | Err[TractionError]:
    """Burn writer tokens for a pro-rata share of both crate balances."""
    match await contract.fetch():
        case Err(e):
            return Err(e)
        case Ok(fetched):
            state = fetched.state
    match await _provision(
        contract, request, state.writer_crate,
        {"underlying": state.underlying_mint, "writer": state.writer_mint, "quote": state.quote_mint},
        {"collateral": contract.roles.collateral.mint, "exercise": contract.roles.exercise.mint},
    ):
        case Err(e):
            return Err(e)
        case Ok((own, crate)):
            pass
    accounts = OptionRedeemAccounts(
        writer_authority=request.authority,
        contract=fetched.key,
        writer_token_source=own["writer"],
        writer_mint=state.writer_mint,
        underlying_token_destination=own["underlying"],
        quote_token_destination=own["quote"],
        writer_crate_token=state.writer_crate,
        crate_collateral_tokens=crate["collateral"],
        crate_exercise_tokens=crate["exercise"],
        token_program=contract.config.token_program_id,
        crate_token_program=contract.config.crate_token_program_id,
    )
    return option_redeem_instruction(request.amount, accounts, contract.config.program_id).map(
        lambda ix: _envelope(request, own, crate, ix),
    )


async def build_burn_transaction(
    contract: OptionsContract, request: LifecycleRequest,
) -> Ok[TransactionEnvelope] | Err[TractionError]:
    """Burn matching option and writer tokens to take the collateral back."""
    collateral = contract.roles.collateral.mint
    match await contract.fetch():
        case Err(e):
            return Err(e)
        case Ok(fetched):
            state = fetched.state
    match await _provision(
        contract, request, state.writer_crate,
        {"collateral": collateral, "writer": state.writer_mint, "option": state.option_mint},
        {},
    ):
        case Err(e):
            return Err(e)
        case Ok((own, crate)):
            pass
    accounts = OptionBurnAccounts(
        writer_authority=request.authority,
        contract=fetched.key,
        writer_mint=state.writer_mint,
        option_mint=state.option_mint,
        writer_token_source=own["writer"],
        option_token_source=own["option"],
        crate_collateral_tokens=state.crate_collateral_tokens,
        collateral_token_destination=own["collateral"],
        collateral_mint=collateral,
        writer_crate_token=state.writer_crate,
        crate_mint=state.writer_mint,
        crate_token=state.writer_crate,
        writer_crate_program=contract.config.crate_token_program_id,
        crate_exercise_tokens=state.crate_exercise_tokens,
        token_program=contract.config.token_program_id,
        crate_token_program=contract.config.crate_token_program_id,
    )
    return option_burn_instruction(request.amount, accounts, contract.config.program_id).map(
        lambda ix: _envelope(request, own, crate, ix),
    )


# ---------------------------------------------------------------------------
# New contract
# ---------------------------------------------------------------------------


async def _create_mint_instructions(
    contract: OptionsContract,
    payer: Pubkey,
    mint: Keypair,
    decimals: int,
    authority: Pubkey,
) -> Ok[list[Instruction]] | Err[TractionError]:
    match await contract.reader.minimum_balance_for_rent_exemption(MINT_LEN):
        case Err(e):
            return Err(e)
        case Ok(lamports):
            pass
    token_program = contract.config.token_program_id
    return Ok([
        create_account(CreateAccountParams(
            from_pubkey=payer,
            to_pubkey=mint.pubkey(),
            lamports=lamports,
            space=MINT_LEN,
            owner=token_program,
        )),
        initialize_mint(InitializeMintParams(
            decimals=decimals,
            program_id=token_program,
            mint=mint.pubkey(),
            mint_authority=authority,
            freeze_authority=authority,
        )),
    ])


async def build_new_contract_transaction(
    contract: OptionsContract,
    payer: Pubkey,
    writer_mint: Keypair | None = None,
    option_mint: Keypair | None = None,
) -> Ok[TransactionEnvelope] | Err[TractionError]:
    """Create the writer and option mints and the contract account in one transaction.

    The writer mint is owned by its crate and the option mint by the contract,
    as the program requires. The crate's collateral/exercise accounts and the
    fee owner's exercise-asset account are created here so later builders
    find them present.
    """
    writer_kp = Keypair() if writer_mint is None else writer_mint
    option_kp = Keypair() if option_mint is None else option_mint
    descriptor = contract.descriptor
    roles = contract.roles
    config = contract.config

    match contract.locate():
        case Err(e):
            return Err(e)
        case Ok(located):
            pass
    match normalize_strike(descriptor):
        case Err(e):
            return Err(e)
        case Ok(strike):
            pass
    match find_crate_address(writer_kp.pubkey(), config.crate_token_program_id):
        case Err(e):
            return Err(e)
        case Ok(crate_token):
            pass

    match await _create_mint_instructions(
        contract, payer, writer_kp, descriptor.underlying.decimals, crate_token.address,
    ):
        case Err(e):
            return Err(e)
        case Ok(writer_mint_ixs):
            pass
    match await _create_mint_instructions(
        contract, payer, option_kp, option_decimals(descriptor), located.address,
    ):
        case Err(e):
            return Err(e)
        case Ok(option_mint_ixs):
            pass
    match await get_or_create_atas(
        contract.reader, payer, crate_token.address,
        {"collateral": roles.collateral.mint, "exercise": roles.exercise.mint},
    ):
        case Err(e):
            return Err(e)
        case Ok(crate_atas):
            pass
    match await get_or_create_atas(
        contract.reader, payer, config.fee_owner, {"exercise": roles.exercise.mint},
    ):
        case Err(e):
            return Err(e)
        case Ok(fee_atas):
            pass

    accounts = NewContractAccounts(
        contract=located.address,
        underlying_mint=descriptor.underlying.mint,
        quote_mint=descriptor.quote.mint,
        crate_mint=writer_kp.pubkey(),
        crate_token=crate_token.address,
        crate_token_program=config.crate_token_program_id,
        option_mint=option_kp.pubkey(),
        payer=payer,
    )
    match new_contract_instruction(
        strike, descriptor.expiry_ts, descriptor.is_put,
        located.bump, crate_token.bump, accounts, config.program_id,
    ):
        case Err(e):
            return Err(e)
        case Ok(ix):
            pass

    logger.debug(
        "new_contract {} (writer mint {}, option mint {})",
        located.address, writer_kp.pubkey(), option_kp.pubkey(),
    )
    return Ok(TransactionEnvelope(
        fee_payer=payer,
        instructions=(
            *writer_mint_ixs,
            *option_mint_ixs,
            *crate_atas.instructions,
            *fee_atas.instructions,
            ix,
        ),
        signers=(writer_kp, option_kp),
    ))
