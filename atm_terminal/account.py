"""
Account Module

The single stateful entity behind the terminal: identity, balance, mobile
number, lock state, consecutive PIN failures and the transaction ledger.
Every operation returns an OperationResult; the account never prints.
"""

from datetime import datetime, timedelta
from dataclasses import dataclass, field
from typing import Callable, Optional, Tuple
from enum import Enum
import hashlib
import hmac
import secrets
import threading

from .currency import Money, Currency
from .ledger import Ledger, LedgerEntry, LedgerEventType
from .results import OperationResult, ErrorKind
from .logging_config import get_logger, log_action

MAX_ATTEMPTS = 3
MAX_WITHDRAWAL = Money.from_decimal("20000.00", Currency.INR)
LOCKOUT_SECONDS = 30
MOBILE_NUMBER_LENGTH = 10

logger = get_logger(__name__)


class AccountState(Enum):
    """Account lock states"""
    ACTIVE = "active"    # Normal operation
    LOCKED = "locked"    # Rejects authentication and financial operations


@dataclass(frozen=True)
class LockoutPolicy:
    """Authentication lockout and withdrawal limits"""
    max_attempts: int = MAX_ATTEMPTS
    lockout_seconds: int = LOCKOUT_SECONDS
    max_withdrawal: Money = field(default=MAX_WITHDRAWAL)

    def __post_init__(self):
        if self.max_attempts < 1:
            raise ValueError("max_attempts must be at least 1")
        if self.lockout_seconds < 0:
            raise ValueError("lockout_seconds cannot be negative")
        if not self.max_withdrawal.is_positive():
            raise ValueError("max_withdrawal must be positive")


@dataclass(frozen=True)
class AccountDetails:
    """Read-only snapshot of the account for display"""
    account_id: int
    owner_name: str
    balance: Money
    mobile_number: str
    state: AccountState

    @property
    def is_locked(self) -> bool:
        return self.state == AccountState.LOCKED


def _local_now() -> datetime:
    return datetime.now().astimezone()


class Account:
    """
    Bank account guarded by a PIN and a consecutive-failure lockout
    """

    def __init__(
        self,
        account_id: int,
        owner_name: str,
        pin: int,
        initial_balance: Money,
        mobile_number: str,
        policy: Optional[LockoutPolicy] = None,
        clock: Optional[Callable[[], datetime]] = None
    ):
        """
        Args:
            account_id: Immutable account number
            owner_name: Display name of the account holder
            pin: Numeric PIN; only a salted hash is retained
            initial_balance: Opening balance, must not be negative
            mobile_number: Registered mobile number, exactly 10 characters
            policy: Lockout and withdrawal limits (defaults apply when omitted)
            clock: Callable returning the current time, used for ledger
                timestamps and lockout deadlines
        """
        if not isinstance(initial_balance, Money):
            raise TypeError("initial_balance must be Money")
        if initial_balance.is_negative():
            raise ValueError("Initial balance cannot be negative")
        if len(mobile_number) != MOBILE_NUMBER_LENGTH:
            raise ValueError(f"Mobile number must be {MOBILE_NUMBER_LENGTH} characters")

        self.policy = policy or LockoutPolicy()
        if self.policy.max_withdrawal.currency != initial_balance.currency:
            raise ValueError("Withdrawal limit currency must match account currency")

        self._account_id = account_id
        self._owner_name = owner_name
        self._pin_salt = secrets.token_hex(16)
        self._pin_hash = self._hash_pin(pin, self._pin_salt)
        self._balance = initial_balance
        self._mobile_number = mobile_number
        self._state = AccountState.ACTIVE
        self._pin_attempts = 0
        self._locked_at: Optional[datetime] = None
        self._ledger = Ledger()
        self._clock = clock or _local_now
        self._lock = threading.RLock()

    # Read-only accessors

    @property
    def account_id(self) -> int:
        return self._account_id

    @property
    def owner_name(self) -> str:
        return self._owner_name

    @property
    def currency(self) -> Currency:
        return self._balance.currency

    @property
    def balance(self) -> Money:
        with self._lock:
            return self._balance

    @property
    def mobile_number(self) -> str:
        with self._lock:
            return self._mobile_number

    @property
    def state(self) -> AccountState:
        with self._lock:
            return self._state

    @property
    def is_locked(self) -> bool:
        return self.state == AccountState.LOCKED

    @property
    def pin_attempts(self) -> int:
        with self._lock:
            return self._pin_attempts

    @property
    def locked_at(self) -> Optional[datetime]:
        with self._lock:
            return self._locked_at

    @property
    def ledger(self) -> Ledger:
        return self._ledger

    @property
    def transaction_history(self) -> Tuple[str, ...]:
        """Timestamped ledger lines, oldest first"""
        return self._ledger.lines()

    @property
    def user_details(self) -> AccountDetails:
        with self._lock:
            return AccountDetails(
                account_id=self._account_id,
                owner_name=self._owner_name,
                balance=self._balance,
                mobile_number=self._mobile_number,
                state=self._state
            )

    # Authentication and lockout

    def authenticate(self, account_id: int, pin: int) -> OperationResult:
        """
        Verify credentials against this account.

        A locked account rejects every attempt without touching the failure
        counter. Reaching the attempt limit locks the account.
        """
        with self._lock:
            if self._state == AccountState.LOCKED:
                self._log("warning", "Authentication rejected, account locked", "authenticate")
                return OperationResult.failure(ErrorKind.ACCOUNT_LOCKED, attempts_remaining=0)

            id_matches = account_id == self._account_id
            pin_matches = self._verify_pin(pin)
            if id_matches and pin_matches:
                self._pin_attempts = 0
                self._log("info", "Authentication succeeded", "authenticate")
                return OperationResult.success(balance=self._balance)

            self._pin_attempts += 1
            if self._pin_attempts >= self.policy.max_attempts:
                self._transition_to_locked(reason="max_pin_attempts")

            remaining = max(0, self.policy.max_attempts - self._pin_attempts)
            self._log(
                "warning", "Authentication failed", "authenticate",
                extra={"pin_attempts": self._pin_attempts, "attempts_remaining": remaining}
            )
            return OperationResult.failure(
                ErrorKind.AUTHENTICATION_FAILED, attempts_remaining=remaining
            )

    def lock(self) -> OperationResult:
        """Lock the account on request. Locking twice records nothing new."""
        with self._lock:
            if self._state != AccountState.LOCKED:
                self._transition_to_locked(reason="requested")
            return OperationResult.success()

    def unlock(self) -> OperationResult:
        """
        Return the account to Active and clear the failure counter.

        Timing is not enforced here; callers consult unlock_available_at.
        """
        with self._lock:
            was_locked = self._state == AccountState.LOCKED
            self._state = AccountState.ACTIVE
            self._pin_attempts = 0
            self._locked_at = None
            if was_locked:
                self._record(LedgerEventType.ACCOUNT_UNLOCKED, "Account unlocked")
                self._log("info", "Account unlocked", "unlock")
            return OperationResult.success()

    @property
    def unlock_available_at(self) -> Optional[datetime]:
        """Earliest time an automated flow may unlock, or None while active"""
        with self._lock:
            if self._locked_at is None:
                return None
            return self._locked_at + timedelta(seconds=self.policy.lockout_seconds)

    def seconds_until_unlock(self, now: Optional[datetime] = None) -> float:
        deadline = self.unlock_available_at
        if deadline is None:
            return 0.0
        now = now or self._clock()
        return max(0.0, (deadline - now).total_seconds())

    def can_unlock(self, now: Optional[datetime] = None) -> bool:
        return self.is_locked and self.seconds_until_unlock(now) == 0.0

    # Financial operations

    def withdraw(self, amount: Money) -> OperationResult:
        """
        Debit the account.

        Checks run in a fixed order: positive amount, sufficient funds,
        per-transaction limit.
        """
        self._require_money(amount)
        with self._lock:
            if self._state == AccountState.LOCKED:
                return self._reject("withdraw", ErrorKind.ACCOUNT_LOCKED, amount)
            if not amount.is_positive():
                return self._reject("withdraw", ErrorKind.INVALID_AMOUNT, amount)
            if amount > self._balance:
                return self._reject("withdraw", ErrorKind.INSUFFICIENT_FUNDS, amount)
            if amount > self.policy.max_withdrawal:
                return self._reject("withdraw", ErrorKind.LIMIT_EXCEEDED, amount)

            self._balance = self._balance - amount
            self._record(
                LedgerEventType.WITHDRAWAL,
                f"Withdrew {amount.to_plain_string()}",
                {"amount": amount.to_plain_string(), "balance": self._balance.to_plain_string()}
            )
            self._log("info", "Cash withdrawn", "withdraw", extra={"amount": amount.to_plain_string()})
            return OperationResult.success(balance=self._balance)

    def deposit(self, amount: Money) -> OperationResult:
        """Credit the account. Deposits have no upper bound."""
        self._require_money(amount)
        with self._lock:
            if self._state == AccountState.LOCKED:
                return self._reject("deposit", ErrorKind.ACCOUNT_LOCKED, amount)
            if not amount.is_positive():
                return self._reject("deposit", ErrorKind.INVALID_AMOUNT, amount)

            self._balance = self._balance + amount
            self._record(
                LedgerEventType.DEPOSIT,
                f"Deposited {amount.to_plain_string()}",
                {"amount": amount.to_plain_string(), "balance": self._balance.to_plain_string()}
            )
            self._log("info", "Cash deposited", "deposit", extra={"amount": amount.to_plain_string()})
            return OperationResult.success(balance=self._balance)

    def update_mobile(self, old_number: str, new_number: str) -> OperationResult:
        """Replace the registered mobile number after confirming the old one"""
        with self._lock:
            if self._state == AccountState.LOCKED:
                return self._reject("update_mobile", ErrorKind.ACCOUNT_LOCKED)
            if old_number != self._mobile_number:
                return self._reject("update_mobile", ErrorKind.MOBILE_MISMATCH)
            # Length only; digit content is not checked
            if len(new_number) != MOBILE_NUMBER_LENGTH:
                return self._reject("update_mobile", ErrorKind.INVALID_MOBILE_FORMAT)

            self._mobile_number = new_number
            self._record(LedgerEventType.MOBILE_UPDATED, "Mobile number updated")
            self._log("info", "Mobile number updated", "update_mobile")
            return OperationResult.success(mobile_number=new_number)

    # Internals

    def _transition_to_locked(self, reason: str) -> None:
        self._state = AccountState.LOCKED
        self._locked_at = self._clock()
        self._record(LedgerEventType.ACCOUNT_LOCKED, "Account locked", {"reason": reason})
        self._log("warning", "Account locked", "lock", extra={"reason": reason})

    def _record(self, event_type: LedgerEventType, description: str, metadata=None) -> LedgerEntry:
        return self._ledger.append(event_type, description, self._clock(), metadata)

    def _reject(self, action: str, error: ErrorKind, amount: Optional[Money] = None) -> OperationResult:
        extra = {"error": error.value}
        if amount is not None:
            extra["amount"] = amount.to_plain_string()
        self._log("warning", "Operation rejected", action, extra=extra)
        return OperationResult.failure(error, balance=self._balance)

    def _require_money(self, amount: Money) -> None:
        if not isinstance(amount, Money):
            raise TypeError(f"Amount must be Money, got {type(amount).__name__}")
        if amount.currency != self.currency:
            raise ValueError(
                f"Amount currency {amount.currency.code} does not match account currency {self.currency.code}"
            )

    def _log(self, level: str, message: str, action: str, extra: Optional[dict] = None) -> None:
        log_action(logger, level, message, account_id=self._account_id,
                   action=action, resource="account", extra=extra)

    @staticmethod
    def _hash_pin(pin: int, salt: str) -> str:
        """Hash PIN with salt using scrypt"""
        return hashlib.scrypt(
            str(pin).encode(),
            salt=salt.encode(),
            n=16384, r=8, p=1
        ).hex()

    def _verify_pin(self, pin: int) -> bool:
        candidate = self._hash_pin(pin, self._pin_salt)
        return hmac.compare_digest(candidate, self._pin_hash)

    def __repr__(self) -> str:
        return f"Account(account_id={self._account_id}, state={self.state.value})"
