"""AccountReader over solana-py's AsyncClient."""

from __future__ import annotations

from typing import final

from loguru import logger
from solana.exceptions import SolanaRpcException
from solana.rpc.async_api import AsyncClient
from solana.rpc.commitment import Commitment
from solders.pubkey import Pubkey

from traction.core.errors import TransportError
from traction.core.result import Err, Ok
from traction.infra.config import TractionConfig
from traction.infra.memory_adapter import transport_error


@final
class SolanaAccountReader:
    """Reads accounts through JSON-RPC. Exceptions from the client become Err values."""

    def __init__(self, client: AsyncClient, commitment: str = "confirmed") -> None:
        self._client = client
        self._commitment = Commitment(commitment)

    @staticmethod
    def from_config(config: TractionConfig) -> SolanaAccountReader:
        return SolanaAccountReader(AsyncClient(config.rpc_url), config.commitment)

    async def get_account_data(
        self, address: Pubkey,
    ) -> Ok[bytes | None] | Err[TransportError]:
        try:
            resp = await self._client.get_account_info(address, commitment=self._commitment)
        except SolanaRpcException as e:
            logger.warning("getAccountInfo {} failed: {}", address, e)
            return Err(transport_error(
                "get_account_info", str(e),
                "infra.solana_adapter.SolanaAccountReader.get_account_data",
            ))
        if resp.value is None:
            return Ok(None)
        return Ok(bytes(resp.value.data))

    async def minimum_balance_for_rent_exemption(
        self, size: int,
    ) -> Ok[int] | Err[TransportError]:
        try:
            resp = await self._client.get_minimum_balance_for_rent_exemption(
                size, commitment=self._commitment,
            )
        except SolanaRpcException as e:
            logger.warning("getMinimumBalanceForRentExemption({}) failed: {}", size, e)
            return Err(transport_error(
                "get_minimum_balance_for_rent_exemption", str(e),
                "infra.solana_adapter.SolanaAccountReader.minimum_balance_for_rent_exemption",
            ))
        return Ok(resp.value)

    async def close(self) -> None:
        await self._client.close()
