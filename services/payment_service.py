# ================================================================
# services/payment_service.py — Pay a contract invoice
# ================================================================
import logging
from dataclasses import dataclass
from typing import Optional

from core.exceptions import NoActiveWallet, NothingToPay
from core.locks import KeyedLocks, payment_locks
from models.models import ContractId, Invoice, Payment
from services.gateways import GatewayRegistry
from services.store import Store

logger = logging.getLogger(__name__)


@dataclass
class PaymentResult:
    paid: int
    active: Invoice
    payment: Optional[Payment] = None


class PaymentService:
    """
    Drives one invoice payment: resolve, skip if settled, dispatch to the
    project's active wallet, record the outcome.

    A FAILED or ERROR payment is a normal result, not an exception.
    """

    def __init__(self, store: Store, gateways: GatewayRegistry, provider: str,
                 locks: KeyedLocks = payment_locks):
        self.store = store
        self.gateways = gateways
        self.provider = provider
        self.locks = locks

    def pay_invoice(self, owner: str, repo: str, username: str, role: str, invoice_id: int) -> PaymentResult:
        repo_full_name = f"{owner}/{repo}"
        project = self.store.get_project(repo_full_name, self.provider)
        if project is None:
            raise NothingToPay(f"Project {repo_full_name} not found.")
        contract = self.store.find_contract(
            project, ContractId(repo_full_name, username, self.provider, role)
        )
        if contract is None:
            raise NothingToPay(f"Contract of {username} ({role}) not found in {repo_full_name}.")
        invoice = self.store.get_invoice(contract, invoice_id)
        if invoice is None:
            raise NothingToPay(f"Invoice #{invoice_id} not found.")

        if invoice.is_paid:
            return PaymentResult(paid=invoice.id, active=self.store.active_invoice(contract))

        with self.locks.hold(f"invoice:{invoice.id}"):
            # Another request may have settled it while we waited.
            invoice = self.store.get_invoice(contract, invoice_id, for_update=True)
            if invoice is None:
                raise NothingToPay(f"Invoice #{invoice_id} not found.")
            if invoice.is_paid:
                logger.info(f"🔁 Invoice #{invoice.id} already paid, skipping dispatch")
                return PaymentResult(paid=invoice.id, active=self.store.active_invoice(contract))

            wallet = self.store.active_wallet(project)
            if wallet is None:
                raise NoActiveWallet(repo_full_name)

            payment = self.gateways.pay(wallet, invoice)
            payment = self.store.register_payment(invoice, wallet, payment)

        if payment.is_successful:
            logger.info(f"💰 Invoice #{invoice.id} paid with {wallet.type} wallet ({payment.transaction_id})")
        else:
            logger.warning(
                f"⚠️ Payment of invoice #{invoice.id} ended {payment.status}: {payment.fail_reason}"
            )
        return PaymentResult(
            paid=invoice.id,
            active=self.store.active_invoice(contract),
            payment=payment,
        )
