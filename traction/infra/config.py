"""Process-wide configuration: program ids, fee owner, RPC endpoint.

Pure configuration data, immutable after construction. Shared by every
OptionsContract a TractionSDK hands out.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, replace
from typing import final

from solders.pubkey import Pubkey
from spl.token.constants import ASSOCIATED_TOKEN_PROGRAM_ID, TOKEN_PROGRAM_ID

from traction.core.errors import ValidationError, validation_error
from traction.core.result import Err, Ok
from traction.program.constants import CRATE_TOKEN_PROGRAM_ID, FEE_OWNER, TRACTION_PROGRAM_ID

ENV_RPC_URL: str = "TRACTION_RPC_URL"
ENV_PROGRAM_ID: str = "TRACTION_PROGRAM_ID"
ENV_FEE_OWNER: str = "TRACTION_FEE_OWNER"
ENV_COMMITMENT: str = "TRACTION_COMMITMENT"

COMMITMENTS: frozenset[str] = frozenset({"processed", "confirmed", "finalized"})


@final
@dataclass(frozen=True, slots=True)
class TractionConfig:
    """Addresses and endpoint the client is bound to.

    Defaults point at the mainnet deployment. The fee owner must be the one
    the deployed program checks against, otherwise every exercise is rejected.
    """

    program_id: Pubkey = TRACTION_PROGRAM_ID
    fee_owner: Pubkey = FEE_OWNER
    crate_token_program_id: Pubkey = CRATE_TOKEN_PROGRAM_ID
    token_program_id: Pubkey = TOKEN_PROGRAM_ID
    associated_token_program_id: Pubkey = ASSOCIATED_TOKEN_PROGRAM_ID
    rpc_url: str = "https://api.mainnet-beta.solana.com"
    commitment: str = "confirmed"

    @staticmethod
    def from_env(environ: Mapping[str, str]) -> Ok[TractionConfig] | Err[ValidationError]:
        """Overlay TRACTION_* variables on the defaults. Unset variables keep the default."""
        config = TractionConfig()
        source = "infra.config.TractionConfig.from_env"
        if url := environ.get(ENV_RPC_URL):
            config = replace(config, rpc_url=url)
        for env_name, field_name in ((ENV_PROGRAM_ID, "program_id"), (ENV_FEE_OWNER, "fee_owner")):
            raw = environ.get(env_name)
            if not raw:
                continue
            try:
                key = Pubkey.from_string(raw)
            except ValueError:
                return Err(validation_error(source, env_name, "must be a base58 public key", raw))
            config = replace(config, **{field_name: key})
        if commitment := environ.get(ENV_COMMITMENT):
            if commitment not in COMMITMENTS:
                return Err(validation_error(
                    source, ENV_COMMITMENT, f"must be one of {sorted(COMMITMENTS)}", commitment,
                ))
            config = replace(config, commitment=commitment)
        return Ok(config)
