# ================================================================
# services/gateways.py — Wallet funding sources (Fake + Stripe)
# ================================================================
"""
Each wallet type has a gateway that knows how to charge an invoice. A
gateway never raises on a declined or broken charge: it returns an unsaved
``Payment`` whose status says what happened.
"""
import logging
import uuid
from typing import Dict, Optional, Protocol

import stripe

from core.config import settings
from models.models import Invoice, Payment, PaymentStatus, Wallet, WalletType, utcnow

logger = logging.getLogger(__name__)


class Gateway(Protocol):
    def pay(self, wallet: Wallet, invoice: Invoice) -> Payment: ...


def _payment(status: PaymentStatus, transaction_id: Optional[str] = None, fail_reason: str = "") -> Payment:
    return Payment(
        invoice_id=0,
        wallet_type="",
        status=status.value,
        transaction_id=transaction_id,
        fail_reason=fail_reason,
        payment_time=utcnow(),
    )


class FakeGateway:
    """Funding source for projects without a real wallet; always succeeds."""

    def pay(self, wallet: Wallet, invoice: Invoice) -> Payment:
        transaction_id = f"fake_{uuid.uuid4().hex[:24]}"
        logger.info(f"🧪 Fake payment {transaction_id} for invoice #{invoice.id}")
        return _payment(PaymentStatus.SUCCESSFUL, transaction_id)


class StripeGateway:
    """Charges the wallet's active payment method off-session."""

    def __init__(self, api_key: Optional[str] = None, currency: Optional[str] = None):
        self.api_key = api_key if api_key is not None else settings.STRIPE_SECRET_KEY
        self.currency = currency or settings.STRIPE_CURRENCY

    def pay(self, wallet: Wallet, invoice: Invoice) -> Payment:
        total = invoice.total_amount
        if total > wallet.available:
            return _payment(
                PaymentStatus.FAILED,
                fail_reason="Not enough cash available in the wallet to pay this invoice.",
            )

        method = wallet.active_payment_method
        if method is None or not wallet.identifier:
            return _payment(
                PaymentStatus.FAILED,
                fail_reason="The wallet has no active payment method.",
            )

        if not self.api_key:
            return _payment(PaymentStatus.ERROR, fail_reason="Stripe is not configured.")

        try:
            intent = stripe.PaymentIntent.create(
                amount=total,
                currency=self.currency,
                customer=wallet.identifier,
                payment_method=method.identifier,
                confirm=True,
                off_session=True,
                description=f"Invoice #{invoice.id}",
                metadata={"invoice_id": str(invoice.id)},
                api_key=self.api_key,
            )
        except stripe.CardError as e:
            logger.warning(f"💳 Card declined for invoice #{invoice.id}: {e.user_message}")
            return _payment(PaymentStatus.FAILED, fail_reason=e.user_message or str(e))
        except stripe.StripeError as e:
            logger.error(f"❌ Stripe error while paying invoice #{invoice.id}: {e}")
            return _payment(PaymentStatus.ERROR, fail_reason=str(e))

        if intent.status == "succeeded":
            logger.info(f"✅ Stripe payment {intent.id} for invoice #{invoice.id}")
            return _payment(PaymentStatus.SUCCESSFUL, intent.id)
        return _payment(
            PaymentStatus.FAILED,
            transaction_id=intent.id,
            fail_reason=f"Payment intent ended in status '{intent.status}'.",
        )

    def register_customer(self, name: Optional[str], email: Optional[str],
                          country: Optional[str], address: Optional[str]) -> Optional[str]:
        """Create a Stripe customer for a new wallet; None when Stripe is off."""
        if not self.api_key:
            logger.warning("⚠️ STRIPE_SECRET_KEY not set, wallet created without a Stripe customer.")
            return None
        params = {"name": name, "email": email}
        if country or address:
            params["address"] = {"country": country, "line1": address}
        customer = stripe.Customer.create(
            api_key=self.api_key,
            **{key: value for key, value in params.items() if value is not None},
        )
        return customer.id

    def delete_customer(self, customer_id: str) -> None:
        """Remove a customer whose wallet was never stored."""
        try:
            stripe.Customer.delete(customer_id, api_key=self.api_key)
            logger.info(f"🧹 Stripe customer {customer_id} removed")
        except stripe.StripeError as e:
            logger.error(f"❌ Could not remove Stripe customer {customer_id}: {e}")

    def attach_payment_method(self, customer_id: Optional[str], payment_method_id: str) -> None:
        """Attach a card to the wallet's customer so it can be charged off-session."""
        if not self.api_key or not customer_id:
            logger.warning(f"⚠️ Payment method {payment_method_id} stored without attaching it to Stripe.")
            return
        stripe.PaymentMethod.attach(payment_method_id, customer=customer_id, api_key=self.api_key)


class GatewayRegistry:
    def __init__(self, gateways: Optional[Dict[str, Gateway]] = None):
        self._gateways: Dict[str, Gateway] = gateways or {
            WalletType.FAKE.value: FakeGateway(),
            WalletType.STRIPE.value: StripeGateway(),
        }

    def for_wallet(self, wallet: Wallet) -> Gateway:
        try:
            return self._gateways[wallet.type]
        except KeyError:
            raise ValueError(f"No gateway for wallet type {wallet.type}") from None

    def pay(self, wallet: Wallet, invoice: Invoice) -> Payment:
        return self.for_wallet(wallet).pay(wallet, invoice)

    def stripe(self) -> Optional[StripeGateway]:
        gateway = self._gateways.get(WalletType.STRIPE.value)
        return gateway if isinstance(gateway, StripeGateway) else None
