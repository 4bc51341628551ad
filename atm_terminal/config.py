"""
Configuration Management Module

Provides centralized configuration using pydantic-settings for environment-based configuration.
"""

from decimal import Decimal
from pydantic_settings import BaseSettings, SettingsConfigDict
from typing import Callable, Optional
from datetime import datetime

from .account import Account, LockoutPolicy
from .currency import Currency, Money


class AtmConfig(BaseSettings):
    """ATM terminal configuration"""

    model_config = SettingsConfigDict(
        env_prefix="ATM_",
        env_file=".env",
        case_sensitive=False,
        extra="ignore",
    )

    # Lockout policy
    max_pin_attempts: int = 3
    lockout_seconds: int = 30
    lockout_poll_seconds: float = 1.0

    # Business rules configuration
    max_withdrawal: str = "20000.00"  # Per-transaction cap, major units
    currency: str = "INR"

    # Logging configuration
    log_level: str = "WARNING"
    log_format: str = "json"  # json or text
    log_file: Optional[str] = None  # If None, logs to stderr

    # Seed account loaded at startup
    seed_account_id: int = 987654321
    seed_owner_name: str = "Hardik"
    seed_pin: int = 1234
    seed_balance: str = "50000.00"
    seed_mobile_number: str = "9370054900"

    def build_policy(self) -> LockoutPolicy:
        """Lockout and withdrawal policy derived from this configuration"""
        currency = Currency[self.currency.upper()]
        return LockoutPolicy(
            max_attempts=self.max_pin_attempts,
            lockout_seconds=self.lockout_seconds,
            max_withdrawal=Money.from_decimal(Decimal(self.max_withdrawal), currency),
        )

    def build_seed_account(self, clock: Optional[Callable[[], datetime]] = None) -> Account:
        """Construct the single in-memory account the terminal serves"""
        currency = Currency[self.currency.upper()]
        return Account(
            account_id=self.seed_account_id,
            owner_name=self.seed_owner_name,
            pin=self.seed_pin,
            initial_balance=Money.from_decimal(Decimal(self.seed_balance), currency),
            mobile_number=self.seed_mobile_number,
            policy=self.build_policy(),
            clock=clock,
        )


# Global configuration instance
config = AtmConfig()


def get_config() -> AtmConfig:
    """Get global configuration instance"""
    return config


def reload_config() -> AtmConfig:
    """Reload configuration from environment"""
    global config
    config = AtmConfig()
    return config
