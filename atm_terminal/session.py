"""
Terminal Session Module

One customer session at the terminal: login state over a single Account and
the timed lockout wait. The wait polls the account's unlock deadline through
a cancellable event instead of freezing the process for the whole period.
"""

import threading
import uuid
from typing import Optional

from .account import Account
from .results import OperationResult, ErrorKind
from .logging_config import get_logger, log_action

logger = get_logger(__name__)


class TerminalSession:
    """Tracks authentication for one session against an account"""

    def __init__(self, account: Account, poll_interval: float = 1.0):
        self.account = account
        self.poll_interval = poll_interval
        self.session_id = str(uuid.uuid4())
        self.authenticated = False
        self._cancelled = threading.Event()

    def login(self, account_id: int, pin: int) -> OperationResult:
        result = self.account.authenticate(account_id, pin)
        self.authenticated = result.ok
        log_action(
            logger, "info" if result.ok else "warning",
            "Login succeeded" if result.ok else "Login failed",
            account_id=self.account.account_id, action="login",
            resource="session", correlation_id=self.session_id
        )
        return result

    def logout(self) -> None:
        self.authenticated = False

    def require_authenticated(self) -> Optional[OperationResult]:
        """
        Gate for menu operations. Returns a failure result when the session
        may not operate on the account, otherwise None.
        """
        if self.account.is_locked:
            self.authenticated = False
            return OperationResult.failure(ErrorKind.ACCOUNT_LOCKED)
        if not self.authenticated:
            return OperationResult.failure(ErrorKind.AUTHENTICATION_FAILED)
        return None

    def lock_account(self) -> OperationResult:
        result = self.account.lock()
        self.logout()
        return result

    def wait_for_unlock(self) -> bool:
        """
        Block the calling session until the lockout deadline passes, then
        unlock the account.

        Returns:
            True if the account was unlocked, False if the wait was cancelled
        """
        log_action(
            logger, "info", "Waiting for lockout to expire",
            account_id=self.account.account_id, action="wait_for_unlock",
            resource="session", correlation_id=self.session_id,
            extra={"seconds": self.account.seconds_until_unlock()}
        )
        try:
            while True:
                remaining = self.account.seconds_until_unlock()
                if remaining <= 0:
                    break
                if self._cancelled.wait(min(self.poll_interval, remaining)):
                    return False

            if self._cancelled.is_set():
                return False
            self.account.unlock()
            return True
        finally:
            # A cancel only applies to the wait it interrupted
            self._cancelled.clear()

    def cancel(self) -> None:
        """Abort a pending wait_for_unlock"""
        self._cancelled.set()
