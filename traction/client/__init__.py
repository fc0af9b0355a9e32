"""traction.client: contract state cache, transaction builders and the SDK facade."""

from traction.client.builder import LifecycleRequest as LifecycleRequest
from traction.client.builder import build_burn_transaction as build_burn_transaction
from traction.client.builder import build_exercise_transaction as build_exercise_transaction
from traction.client.builder import build_new_contract_transaction as build_new_contract_transaction
from traction.client.builder import build_redeem_transaction as build_redeem_transaction
from traction.client.builder import build_write_transaction as build_write_transaction
from traction.client.contract import ContractAccount as ContractAccount
from traction.client.contract import OptionsContract as OptionsContract
from traction.client.envelope import TransactionEnvelope as TransactionEnvelope
from traction.client.provisioning import AtaResolution as AtaResolution
from traction.client.provisioning import get_or_create_atas as get_or_create_atas
from traction.client.sdk import TractionSDK as TractionSDK
