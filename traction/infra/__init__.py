"""traction.infra: configuration and account-reader adapters."""

from traction.infra.config import TractionConfig as TractionConfig
from traction.infra.memory_adapter import InMemoryAccountReader as InMemoryAccountReader
from traction.infra.protocols import AccountReader as AccountReader
from traction.infra.solana_adapter import SolanaAccountReader as SolanaAccountReader
