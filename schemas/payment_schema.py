# payment_schema.py
from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel
from typing import Optional
from datetime import datetime

from core.money import Money
from models.models import Invoice, Payment
from schemas.money_format import format_currency


class PaymentRead(BaseModel):
    transaction_id: Optional[str]
    status: str
    # Absent for SUCCESSFUL payments
    fail_reason: Optional[str] = None

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    @classmethod
    def from_payment(cls, payment: Payment) -> "PaymentRead":
        if payment.is_successful:
            return cls(transaction_id=payment.transaction_id, status=payment.status)
        return cls(
            transaction_id=payment.transaction_id,
            status=payment.status,
            fail_reason=payment.fail_reason,
        )


class InvoiceRead(BaseModel):
    id: int
    created_at: datetime
    amount: str
    total_amount: str
    is_paid: bool
    latest: Optional[PaymentRead]

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    @classmethod
    def from_invoice(cls, invoice: Invoice) -> "InvoiceRead":
        latest = invoice.latest
        return cls(
            id=invoice.id,
            created_at=invoice.created_at,
            amount=format_currency(Money(invoice.amount)),
            total_amount=format_currency(Money(invoice.total_amount)),
            is_paid=invoice.is_paid,
            latest=PaymentRead.from_payment(latest) if latest else None,
        )


class PayInvoiceRead(BaseModel):
    paid: int
    # Absent when the invoice was already paid and nothing was dispatched
    payment: Optional[PaymentRead] = None
    active: InvoiceRead
