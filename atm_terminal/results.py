"""
Operation Results Module

Structured outcomes returned by every account operation. Expected business
conditions are reported as an ErrorKind instead of being raised, so the
console driver decides how to present them.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Optional

from .currency import Money


class ErrorKind(Enum):
    """Recoverable failure kinds, local to the operation that produced them"""
    INVALID_AMOUNT = "invalid_amount"
    INSUFFICIENT_FUNDS = "insufficient_funds"
    LIMIT_EXCEEDED = "limit_exceeded"
    MOBILE_MISMATCH = "mobile_mismatch"
    INVALID_MOBILE_FORMAT = "invalid_mobile_format"
    AUTHENTICATION_FAILED = "authentication_failed"
    ACCOUNT_LOCKED = "account_locked"


@dataclass(frozen=True)
class OperationResult:
    """
    Outcome of a core operation: success with an optional payload, or a
    specific failure kind.
    """
    error: Optional[ErrorKind] = None
    balance: Optional[Money] = None
    attempts_remaining: Optional[int] = None
    mobile_number: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.error is None

    @classmethod
    def success(
        cls,
        balance: Optional[Money] = None,
        mobile_number: Optional[str] = None
    ) -> 'OperationResult':
        return cls(balance=balance, mobile_number=mobile_number)

    @classmethod
    def failure(
        cls,
        error: ErrorKind,
        balance: Optional[Money] = None,
        attempts_remaining: Optional[int] = None
    ) -> 'OperationResult':
        return cls(error=error, balance=balance, attempts_remaining=attempts_remaining)

    def __bool__(self) -> bool:
        return self.ok
