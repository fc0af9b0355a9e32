"""Core scalar types: UtcDatetime and the fixed-width integer bounds of the program ABI."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import UTC, datetime
from typing import final

from traction.core.result import Err, Ok

U8_MAX: int = 2**8 - 1
U64_MAX: int = 2**64 - 1
I64_MIN: int = -(2**63)
I64_MAX: int = 2**63 - 1


@final
@dataclass(frozen=True, slots=True)
class UtcDatetime:
    """Timezone-aware UTC datetime. Naive datetimes are rejected."""

    value: datetime

    def __post_init__(self) -> None:
        if self.value.tzinfo is None:
            raise TypeError("UtcDatetime requires timezone-aware datetime, got naive")

    @staticmethod
    def now() -> UtcDatetime:
        return UtcDatetime(value=datetime.now(tz=UTC))


def check_u64(value: int) -> Ok[int] | Err[str]:
    """Accept ints in [0, 2^64). bool is rejected even though it is an int."""
    if isinstance(value, bool) or not isinstance(value, int):
        return Err(f"expected int, got {type(value).__name__}")
    if value < 0:
        return Err(f"must be >= 0, got {value}")
    if value > U64_MAX:
        return Err(f"must fit in u64, got {value}")
    return Ok(value)


def check_i64(value: int) -> Ok[int] | Err[str]:
    if isinstance(value, bool) or not isinstance(value, int):
        return Err(f"expected int, got {type(value).__name__}")
    if not I64_MIN <= value <= I64_MAX:
        return Err(f"must fit in i64, got {value}")
    return Ok(value)
