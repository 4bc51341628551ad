"""
Test suite for configuration module
"""

import pytest
from decimal import Decimal

from atm_terminal import config as config_module
from atm_terminal.config import AtmConfig, get_config, reload_config
from atm_terminal.currency import Currency, Money


class TestAtmConfig:

    def test_defaults(self, monkeypatch, tmp_path):
        monkeypatch.chdir(tmp_path)  # keep a developer .env out of the test
        config = AtmConfig()
        assert config.max_pin_attempts == 3
        assert config.lockout_seconds == 30
        assert config.max_withdrawal == "20000.00"
        assert config.currency == "INR"
        assert config.seed_account_id == 987654321
        assert config.seed_mobile_number == "9370054900"
        assert config.log_level == "WARNING"

    def test_environment_overrides(self, monkeypatch, tmp_path):
        monkeypatch.chdir(tmp_path)
        monkeypatch.setenv("ATM_MAX_PIN_ATTEMPTS", "5")
        monkeypatch.setenv("ATM_LOCKOUT_SECONDS", "60")
        monkeypatch.setenv("ATM_MAX_WITHDRAWAL", "10000.50")
        monkeypatch.setenv("ATM_LOG_FORMAT", "text")

        config = AtmConfig()
        policy = config.build_policy()
        assert policy.max_attempts == 5
        assert policy.lockout_seconds == 60
        assert policy.max_withdrawal == Money.from_decimal(Decimal("10000.50"), Currency.INR)
        assert config.log_format == "text"

    def test_env_file(self, monkeypatch, tmp_path):
        monkeypatch.chdir(tmp_path)
        (tmp_path / ".env").write_text("ATM_SEED_OWNER_NAME=Asha\n")
        assert AtmConfig().seed_owner_name == "Asha"

    def test_build_seed_account(self, monkeypatch, tmp_path):
        monkeypatch.chdir(tmp_path)
        account = AtmConfig(seed_balance="1234.56").build_seed_account()

        assert account.account_id == 987654321
        assert account.owner_name == "Hardik"
        assert account.balance == Money(123456, Currency.INR)
        assert account.mobile_number == "9370054900"
        assert account.authenticate(987654321, 1234).ok

    def test_unknown_currency(self):
        with pytest.raises(KeyError):
            AtmConfig(currency="XYZ").build_policy()

    def test_reload_config(self, monkeypatch, tmp_path):
        monkeypatch.chdir(tmp_path)
        original = get_config()
        try:
            monkeypatch.setenv("ATM_LOG_LEVEL", "DEBUG")
            reloaded = reload_config()
            assert reloaded is get_config()
            assert reloaded.log_level == "DEBUG"
        finally:
            config_module.config = original
