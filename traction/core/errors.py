"""Error value hierarchy: no domain function raises exceptions.

Every error is a frozen dataclass value that can be pattern-matched,
serialized, and logged. Base class TractionError, @final subclasses:

  ValidationError           caller-supplied value cannot be encoded (strike, amount, seeds)
  NotFoundError             no account at the derived address
  DerivationExhaustedError  no off-curve bump in the search range
  TransportError            RPC read failed (carried unchanged, never retried)
  DecodeError               account bytes do not match the expected layout
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from typing import final

from traction.core.types import UtcDatetime


@dataclass(frozen=True, slots=True)
class TractionError:
    """Base error value. NOT @final: has subclasses."""

    message: str
    code: str
    timestamp: UtcDatetime
    source: str  # "module.function" that produced this error

    def with_context(self, context: str) -> TractionError:
        """Return a copy with context prepended to message."""
        return replace(self, message=f"{context}: {self.message}")

    def to_dict(self) -> dict[str, object]:
        return {
            "message": self.message,
            "code": self.code,
            "timestamp": self.timestamp.value.isoformat(),
            "source": self.source,
        }


@final
@dataclass(frozen=True, slots=True)
class FieldViolation:
    """Describes a single field validation failure."""

    path: str  # e.g. "descriptor.strike"
    constraint: str  # e.g. "must fit in u64"
    actual_value: str


@final
@dataclass(frozen=True, slots=True)
class ValidationError(TractionError):
    """One or more fields cannot be represented in the program ABI."""

    fields: tuple[FieldViolation, ...]

    def to_dict(self) -> dict[str, object]:
        return {
            **TractionError.to_dict(self),
            "fields": [
                {"path": f.path, "constraint": f.constraint, "actual_value": f.actual_value}
                for f in self.fields
            ],
        }


@final
@dataclass(frozen=True, slots=True)
class NotFoundError(TractionError):
    """No account exists at the derived address."""

    address: str

    def to_dict(self) -> dict[str, object]:
        return {**TractionError.to_dict(self), "address": self.address}


@final
@dataclass(frozen=True, slots=True)
class DerivationExhaustedError(TractionError):
    """Every bump in the search range produced an on-curve point."""

    program_id: str
    seed_count: int

    def to_dict(self) -> dict[str, object]:
        return {
            **TractionError.to_dict(self),
            "program_id": self.program_id,
            "seed_count": self.seed_count,
        }


@final
@dataclass(frozen=True, slots=True)
class TransportError(TractionError):
    """An external read failed. `cause` holds the raised exception text."""

    operation: str
    cause: str

    def to_dict(self) -> dict[str, object]:
        return {**TractionError.to_dict(self), "operation": self.operation, "cause": self.cause}


@final
@dataclass(frozen=True, slots=True)
class DecodeError(TractionError):
    """Account data has the wrong discriminator or length."""

    account: str
    reason: str

    def to_dict(self) -> dict[str, object]:
        return {**TractionError.to_dict(self), "account": self.account, "reason": self.reason}


def validation_error(
    source: str, path: str, constraint: str, actual: object,
) -> ValidationError:
    """Single-field ValidationError with consistent formatting."""
    return ValidationError(
        message=f"{path} {constraint}",
        code="INVALID_FIELD",
        timestamp=UtcDatetime.now(),
        source=source,
        fields=(FieldViolation(path=path, constraint=constraint, actual_value=str(actual)),),
    )
