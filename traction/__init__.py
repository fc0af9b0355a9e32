"""Client library for the Traction American options program on Solana.

Logging goes through loguru under the "traction" name and is disabled until
the application calls ``logger.enable("traction")``.
"""

from loguru import logger

from traction.client import OptionsContract as OptionsContract
from traction.client import TractionSDK as TractionSDK
from traction.client import TransactionEnvelope as TransactionEnvelope
from traction.core import Err as Err
from traction.core import Ok as Ok
from traction.core import Price as Price
from traction.core import Token as Token
from traction.core import TokenAmount as TokenAmount
from traction.infra import TractionConfig as TractionConfig
from traction.instrument import ContractDescriptor as ContractDescriptor
from traction.instrument import OptionDirection as OptionDirection

logger.disable("traction")
