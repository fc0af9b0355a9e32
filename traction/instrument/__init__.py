"""traction.instrument: pure economics and display rules over a ContractDescriptor."""

from traction.instrument.descriptor import ContractDescriptor as ContractDescriptor
from traction.instrument.descriptor import OptionDirection as OptionDirection
from traction.instrument.descriptor import OptionRoles as OptionRoles
from traction.instrument.descriptor import collateral_token as collateral_token
from traction.instrument.descriptor import exercise_token as exercise_token
from traction.instrument.descriptor import option_roles as option_roles
from traction.instrument.display import formatted_expiry as formatted_expiry
from traction.instrument.display import formatted_expiry_short as formatted_expiry_short
from traction.instrument.display import name as name
from traction.instrument.display import symbol as symbol
from traction.instrument.display import token_info as token_info
from traction.instrument.economics import ExercisePayment as ExercisePayment
from traction.instrument.economics import exercise_amount_for_options as exercise_amount_for_options
from traction.instrument.economics import exercise_payment as exercise_payment
from traction.instrument.economics import fee_amount as fee_amount
from traction.instrument.economics import format_strike as format_strike
from traction.instrument.economics import normalize_strike as normalize_strike
from traction.instrument.economics import rendered_strike as rendered_strike
