# wallet_schema.py
from pydantic import BaseModel, EmailStr, Field, ConfigDict
from pydantic.alias_generators import to_camel
from typing import List, Optional
from decimal import Decimal

from core.money import Money
from models.models import PaymentMethod, Wallet
from schemas.money_format import as_number


class BillingInfoCreate(BaseModel):
    name: Optional[str] = Field(default=None, max_length=255)
    email: Optional[EmailStr] = None
    country: Optional[str] = Field(default=None, min_length=2, max_length=2)
    address: Optional[str] = Field(default=None, max_length=500)


class CashUpdate(BaseModel):
    cash: Decimal = Field(..., ge=0, max_digits=14)


class PaymentMethodCreate(BaseModel):
    payment_method_id: str = Field(..., min_length=1, max_length=255)

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class PaymentMethodRead(BaseModel):
    payment_method_id: str
    active: bool

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    @classmethod
    def from_method(cls, method: PaymentMethod) -> "PaymentMethodRead":
        return cls(payment_method_id=method.identifier, active=method.active)


class WalletRead(BaseModel):
    type: str
    active: bool
    cash: float
    debt: float
    available: float
    payment_methods: List[PaymentMethodRead] = []

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    @classmethod
    def from_wallet(cls, wallet: Wallet) -> "WalletRead":
        return cls(
            type=wallet.type,
            active=wallet.active,
            cash=as_number(Money(wallet.cash)),
            debt=as_number(Money(wallet.debt)),
            available=as_number(Money(wallet.available)),
            payment_methods=[PaymentMethodRead.from_method(m) for m in wallet.payment_methods],
        )
