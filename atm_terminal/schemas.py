"""
Pydantic schemas for console input
"""

from decimal import Decimal
from pydantic import BaseModel, ConfigDict, Field, field_validator

from .currency import Money, Currency, decimal_from_string


class CredentialsInput(BaseModel):
    account_id: int = Field(..., description="Account number")
    pin: int = Field(..., ge=0, description="Numeric PIN")


class AmountInput(BaseModel):
    amount: Decimal = Field(..., allow_inf_nan=False, max_digits=18, description="Amount in major units")

    @field_validator("amount", mode="before")
    @classmethod
    def parse_amount(cls, value):
        if isinstance(value, str):
            return decimal_from_string(value)
        return value

    def to_money(self, currency: Currency) -> Money:
        return Money.from_decimal(self.amount, currency)


class MobileUpdateInput(BaseModel):
    model_config = ConfigDict(str_strip_whitespace=True)

    old_mobile: str
    new_mobile: str
