"""traction.program: on-chain program constants, address derivation, ABI and layouts."""

from traction.program.constants import CRATE_TOKEN_PROGRAM_ID as CRATE_TOKEN_PROGRAM_ID
from traction.program.constants import EXERCISE_FEE_KBPS as EXERCISE_FEE_KBPS
from traction.program.constants import FEE_OWNER as FEE_OWNER
from traction.program.constants import STRIKE_PRICE_UNITS as STRIKE_PRICE_UNITS
from traction.program.constants import TRACTION_PROGRAM_ID as TRACTION_PROGRAM_ID
from traction.program.instructions import AmountArgs as AmountArgs
from traction.program.instructions import NewContractAccounts as NewContractAccounts
from traction.program.instructions import NewContractArgs as NewContractArgs
from traction.program.instructions import OptionBurnAccounts as OptionBurnAccounts
from traction.program.instructions import OptionExerciseAccounts as OptionExerciseAccounts
from traction.program.instructions import OptionRedeemAccounts as OptionRedeemAccounts
from traction.program.instructions import OptionWriteAccounts as OptionWriteAccounts
from traction.program.instructions import TractionInstruction as TractionInstruction
from traction.program.instructions import decode_instruction as decode_instruction
from traction.program.layout import OptionsContractState as OptionsContractState
from traction.program.layout import decode_options_contract as decode_options_contract
from traction.program.layout import encode_options_contract as encode_options_contract
from traction.program.pda import ContractAddress as ContractAddress
from traction.program.pda import create_program_address as create_program_address
from traction.program.pda import find_crate_address as find_crate_address
from traction.program.pda import find_fee_owner_address as find_fee_owner_address
from traction.program.pda import find_options_contract_address as find_options_contract_address
from traction.program.pda import find_program_address as find_program_address
