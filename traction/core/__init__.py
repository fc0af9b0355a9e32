"""traction.core: result type, error values, amounts."""

from traction.core.amounts import Price as Price
from traction.core.amounts import Token as Token
from traction.core.amounts import TokenAmount as TokenAmount
from traction.core.errors import DecodeError as DecodeError
from traction.core.errors import DerivationExhaustedError as DerivationExhaustedError
from traction.core.errors import FieldViolation as FieldViolation
from traction.core.errors import NotFoundError as NotFoundError
from traction.core.errors import TractionError as TractionError
from traction.core.errors import TransportError as TransportError
from traction.core.errors import ValidationError as ValidationError
from traction.core.result import Err as Err
from traction.core.result import Ok as Ok
from traction.core.result import Result as Result
from traction.core.result import unwrap as unwrap
from traction.core.types import UtcDatetime as UtcDatetime
