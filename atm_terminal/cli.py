"""
Console Driver Module

Interactive menu for the terminal. Collects well-typed input through the
pydantic schemas, calls into the session/account core, and renders the
structured results. All user-facing text lives here.
"""

import sys
from typing import Callable, Optional

from pydantic import ValidationError

from .account import Account
from .config import AtmConfig, get_config
from .currency import Money
from .logging_config import setup_logging, get_logger
from .results import OperationResult, ErrorKind
from .schemas import CredentialsInput, AmountInput, MobileUpdateInput
from .session import TerminalSession

logger = get_logger(__name__)

MENU = """
================================
       ATM MAIN MENU
================================
1. Check Balance
2. Withdraw Cash
3. Deposit Cash
4. Show User Details
5. Update Mobile Number
6. View Transaction History
7. Lock Account
8. Exit
"""

ERROR_MESSAGES = {
    ErrorKind.INVALID_AMOUNT: "Invalid amount! Must be positive.",
    ErrorKind.INSUFFICIENT_FUNDS: "Insufficient balance!",
    ErrorKind.LIMIT_EXCEEDED: "Withdrawal limit exceeded!",
    ErrorKind.MOBILE_MISMATCH: "Incorrect old mobile number!",
    ErrorKind.INVALID_MOBILE_FORMAT: "Invalid mobile number! Must be 10 digits.",
    ErrorKind.AUTHENTICATION_FAILED: "Invalid credentials!",
    ErrorKind.ACCOUNT_LOCKED: "Account is locked. Please contact support.",
}


def format_money(money: Money) -> str:
    return f"{money.currency.symbol}{money.amount:,.{money.currency.precision}f}"


class AtmConsole:
    """Text menu over a TerminalSession"""

    def __init__(
        self,
        session: TerminalSession,
        input_fn: Callable[[str], str] = input,
        output_fn: Callable[[str], None] = print
    ):
        self.session = session
        self._input = input_fn
        self._output = output_fn

    @property
    def account(self) -> Account:
        return self.session.account

    def say(self, text: str = "") -> None:
        self._output(text)

    def ask(self, prompt: str) -> str:
        return self._input(prompt).strip()

    def confirm(self, prompt: str) -> bool:
        return self.ask(prompt).lower() == "y"

    # Flow

    def run(self) -> None:
        try:
            self._run()
        except EOFError:
            self.say("\nGoodbye!")

    def _run(self) -> None:
        while True:
            result = self.login()
            if result is None or not result.ok:
                if self.account.is_locked:
                    if self.confirm("\nWould you like to try again? (y/n): "):
                        self.say(
                            f"\nPlease wait {self.account.seconds_until_unlock():.0f} "
                            "seconds before retrying..."
                        )
                        if self.session.wait_for_unlock():
                            self.say("\nAccount unlocked. You may try again.")
                        continue
                    self.say("\nGoodbye!")
                    break
                continue

            self.main_menu()

            if not self.confirm("\n\nStart new session? (y/n): "):
                self.say("\nThank you for using our ATM. Goodbye!")
                break

    def login(self) -> Optional[OperationResult]:
        self.say("\n================================\n      WELCOME TO ATM\n================================")
        try:
            credentials = CredentialsInput(
                account_id=self.ask("Enter Account Number: "),
                pin=self.ask("Enter PIN: ")
            )
        except ValidationError:
            self.say("\nInvalid input! Please enter numbers only.")
            return None

        result = self.session.login(credentials.account_id, credentials.pin)
        if not result.ok:
            self.render_failure(result)
        return result

    def main_menu(self) -> None:
        actions = {
            "1": self.show_balance,
            "2": self.withdraw,
            "3": self.deposit,
            "4": self.show_user_details,
            "5": self.update_mobile,
            "6": self.show_history,
        }
        while True:
            blocked = self.session.require_authenticated()
            if blocked is not None:
                self.render_failure(blocked)
                return

            self.say(MENU)
            choice = self.ask("Enter your choice: ")
            if choice in actions:
                actions[choice]()
            elif choice == "7":
                self.session.lock_account()
                self.say("\nAccount has been locked for security.")
                return
            elif choice == "8":
                self.session.logout()
                self.say("\nThank you for using our ATM. Goodbye!")
                return
            else:
                self.say("\nInvalid choice! Please select 1-8.")

    # Menu actions

    def show_balance(self) -> None:
        self.say(f"\nCurrent Balance: {format_money(self.account.balance)}")

    def _read_amount(self, prompt: str) -> Optional[Money]:
        try:
            parsed = AmountInput(amount=self.ask(prompt))
            return parsed.to_money(self.account.currency)
        except (ValidationError, ValueError):
            self.say("\nInvalid amount!")
            return None

    def withdraw(self) -> None:
        amount = self._read_amount(f"\nEnter withdrawal amount: {self.account.currency.symbol}")
        if amount is None:
            return
        result = self.account.withdraw(amount)
        if result.ok:
            self.say("\nPlease collect your cash")
            self.say(f"Amount withdrawn: {format_money(amount)}")
            self.say(f"Available balance: {format_money(result.balance)}")
        else:
            self.render_failure(result)

    def deposit(self) -> None:
        amount = self._read_amount(f"\nEnter deposit amount: {self.account.currency.symbol}")
        if amount is None:
            return
        result = self.account.deposit(amount)
        if result.ok:
            self.say("\nAmount deposited successfully")
            self.say(f"New balance: {format_money(result.balance)}")
        else:
            self.render_failure(result)

    def show_user_details(self) -> None:
        details = self.account.user_details
        self.say("\n================================\n       USER DETAILS\n================================")
        self.say(f"Account No : {details.account_id}")
        self.say(f"Name       : {details.owner_name}")
        self.say(f"Balance    : {format_money(details.balance)}")
        self.say(f"Mobile     : {details.mobile_number}")
        self.say(f"Status     : {'Locked' if details.is_locked else 'Active'}")

    def update_mobile(self) -> None:
        request = MobileUpdateInput(
            old_mobile=self.ask("\nEnter old mobile number: "),
            new_mobile=self.ask("Enter new mobile number: ")
        )
        result = self.account.update_mobile(request.old_mobile, request.new_mobile)
        if result.ok:
            self.say("\nSuccessfully updated mobile number.")
        else:
            self.render_failure(result)

    def show_history(self) -> None:
        self.say("\n================================\n     TRANSACTION HISTORY\n================================")
        history = self.account.transaction_history
        if not history:
            self.say("No transactions yet.")
        for line in history:
            self.say(f"* {line}")

    # Rendering

    def render_failure(self, result: OperationResult) -> None:
        self.say(f"\n{ERROR_MESSAGES[result.error]}")
        if result.error == ErrorKind.INSUFFICIENT_FUNDS:
            self.say(f"Available balance: {format_money(result.balance)}")
        elif result.error == ErrorKind.LIMIT_EXCEEDED:
            limit = self.account.policy.max_withdrawal
            self.say(f"Maximum withdrawal per transaction: {format_money(limit)}")
        elif result.error == ErrorKind.AUTHENTICATION_FAILED and result.attempts_remaining:
            self.say(f"{result.attempts_remaining} attempt(s) remaining.")


def main(config: Optional[AtmConfig] = None) -> int:
    """Console entry point"""
    config = config or get_config()
    setup_logging(config.log_level, log_format=config.log_format, log_file=config.log_file)

    try:
        account = config.build_seed_account()
        session = TerminalSession(account, poll_interval=config.lockout_poll_seconds)
        AtmConsole(session).run()
    except KeyboardInterrupt:
        print("\nGoodbye!")
    except Exception as e:
        logger.exception("Terminal stopped on unexpected error")
        print(f"Error: {e}", file=sys.stderr)
        return 1
    return 0
