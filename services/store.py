# ================================================================
# services/store.py — Projects / Contracts / Invoices / Wallets store
# ================================================================
"""
The services never touch the database directly. They depend on the ``Store``
protocol below; ``SqlStore`` is the SQLModel implementation wired into the
API, and any other object with the same methods (an in-memory fake, a
remote client) can be substituted.
"""
import logging
from typing import List, Optional, Protocol

from sqlalchemy.exc import IntegrityError
from sqlmodel import Session, select

from core.exceptions import WalletAlreadyExists
from core.money import Money
from models.models import (
    Contract,
    ContractId,
    Invoice,
    Payment,
    PaymentMethod,
    Project,
    Wallet,
    utcnow,
)

logger = logging.getLogger(__name__)


class ContractRejected(Exception):
    """The store refused to create a contract (duplicate identity)."""


class Store(Protocol):
    # ------------------------
    # Projects
    # ------------------------
    def get_project(self, repo_full_name: str, provider: str) -> Optional[Project]: ...

    # ------------------------
    # Contracts
    # ------------------------
    def contracts_of(self, project: Project) -> List[Contract]: ...

    def find_contract(self, project: Project, contract_id: ContractId) -> Optional[Contract]: ...

    def add_contract(
        self, project: Project, contributor_username: str, hourly_rate: Money, role: str
    ) -> Contract: ...

    def restore_contract(self, contract: Contract) -> Contract: ...

    # ------------------------
    # Invoices & payments
    # ------------------------
    def invoices_of(self, contract: Contract) -> List[Invoice]: ...

    def get_invoice(self, contract: Contract, invoice_id: int, for_update: bool = False) -> Optional[Invoice]: ...

    def active_invoice(self, contract: Contract) -> Invoice: ...

    def register_payment(self, invoice: Invoice, wallet: Wallet, payment: Payment) -> Payment: ...

    # ------------------------
    # Wallets
    # ------------------------
    def wallets_of(self, project: Project) -> List[Wallet]: ...

    def active_wallet(self, project: Project) -> Optional[Wallet]: ...

    def create_wallet(self, project: Project, wallet: Wallet) -> Wallet: ...

    def activate_wallet(self, project: Project, wallet: Wallet) -> Wallet: ...

    def update_cash(self, wallet: Wallet, cash: Money) -> Wallet: ...

    def add_payment_method(self, wallet: Wallet, identifier: str, active: bool = False) -> PaymentMethod: ...


class SqlStore:
    """Store backed by a SQLModel session."""

    def __init__(self, session: Session):
        self.session = session

    # ------------------------
    # Projects
    # ------------------------
    def get_project(self, repo_full_name: str, provider: str) -> Optional[Project]:
        return self.session.exec(
            select(Project).where(
                Project.repo_full_name == repo_full_name,
                Project.provider == provider,
            )
        ).first()

    # ------------------------
    # Contracts
    # ------------------------
    def contracts_of(self, project: Project) -> List[Contract]:
        return list(
            self.session.exec(
                select(Contract)
                .where(Contract.project_id == project.id)
                .order_by(Contract.id)
            ).all()
        )

    def find_contract(self, project: Project, contract_id: ContractId) -> Optional[Contract]:
        return self.session.exec(
            select(Contract).where(
                Contract.project_id == project.id,
                Contract.repo_full_name == contract_id.repo_full_name,
                Contract.contributor_username == contract_id.contributor_username,
                Contract.provider == contract_id.provider,
                Contract.role == contract_id.role,
            )
        ).first()

    def add_contract(
        self, project: Project, contributor_username: str, hourly_rate: Money, role: str
    ) -> Contract:
        """
        Create the contract together with its first (empty) invoice.

        Raises ContractRejected if a contract with the same identity exists.
        """
        contract = Contract(
            project_id=project.id,
            repo_full_name=project.repo_full_name,
            contributor_username=contributor_username,
            provider=project.provider,
            role=role,
            hourly_rate=hourly_rate.cents,
        )
        contract_id = contract.contract_id
        try:
            self.session.add(contract)
            self.session.flush()
            self.session.add(Invoice(contract_id=contract.id))
            self.session.commit()
        except IntegrityError as e:
            self.session.rollback()
            raise ContractRejected(f"Contract {contract_id} already exists.") from e
        self.session.refresh(contract)
        return contract

    def restore_contract(self, contract: Contract) -> Contract:
        contract.marked_for_removal = None
        self.session.add(contract)
        self.session.commit()
        self.session.refresh(contract)
        return contract

    def mark_contract_for_removal(self, contract: Contract) -> Contract:
        contract.marked_for_removal = utcnow()
        self.session.add(contract)
        self.session.commit()
        self.session.refresh(contract)
        return contract

    # ------------------------
    # Invoices & payments
    # ------------------------
    def invoices_of(self, contract: Contract) -> List[Invoice]:
        return list(
            self.session.exec(
                select(Invoice)
                .where(Invoice.contract_id == contract.id)
                .order_by(Invoice.id.desc())
            ).all()
        )

    def get_invoice(self, contract: Contract, invoice_id: int, for_update: bool = False) -> Optional[Invoice]:
        statement = select(Invoice).where(
            Invoice.id == invoice_id,
            Invoice.contract_id == contract.id,
        )
        if for_update:
            # Row lock on PostgreSQL, ignored by SQLite.
            statement = statement.with_for_update().execution_options(populate_existing=True)
        return self.session.exec(statement).first()

    def active_invoice(self, contract: Contract) -> Invoice:
        """Latest unpaid invoice; opens a new one if every invoice is paid."""
        invoice = self.session.exec(
            select(Invoice)
            .where(Invoice.contract_id == contract.id, Invoice.is_paid == False)  # noqa: E712
            .order_by(Invoice.id.desc())
        ).first()
        if invoice is None:
            invoice = Invoice(contract_id=contract.id)
            self.session.add(invoice)
            self.session.commit()
            self.session.refresh(invoice)
        return invoice

    def register_payment(self, invoice: Invoice, wallet: Wallet, payment: Payment) -> Payment:
        """
        Record one payment attempt. A successful attempt settles the invoice,
        charges the wallet's debt and opens the contract's next invoice, all
        in the same transaction.
        """
        payment.invoice_id = invoice.id
        payment.wallet_type = wallet.type
        payment.value = invoice.total_amount
        self.session.add(payment)
        if payment.is_successful:
            invoice.is_paid = True
            invoice.paid_at = payment.payment_time
            wallet.debt = wallet.debt + invoice.total_amount
            self.session.add(invoice)
            self.session.add(wallet)
            self.session.add(Invoice(contract_id=invoice.contract_id))
        self.session.commit()
        self.session.refresh(payment)
        self.session.refresh(invoice)
        return payment

    # ------------------------
    # Wallets
    # ------------------------
    def wallets_of(self, project: Project) -> List[Wallet]:
        return list(
            self.session.exec(
                select(Wallet).where(Wallet.project_id == project.id).order_by(Wallet.id)
            ).all()
        )

    def active_wallet(self, project: Project) -> Optional[Wallet]:
        return self.session.exec(
            select(Wallet).where(Wallet.project_id == project.id, Wallet.active == True)  # noqa: E712
        ).first()

    def create_wallet(self, project: Project, wallet: Wallet) -> Wallet:
        wallet.project_id = project.id
        wallet.active = False
        repo_full_name, wallet_type = project.repo_full_name, wallet.type
        try:
            self.session.add(wallet)
            self.session.commit()
        except IntegrityError as e:
            self.session.rollback()
            raise WalletAlreadyExists(repo_full_name, wallet_type) from e
        self.session.refresh(wallet)
        return wallet

    def activate_wallet(self, project: Project, wallet: Wallet) -> Wallet:
        """Deactivate every other wallet and activate this one in one commit."""
        for other in self.wallets_of(project):
            if other.id != wallet.id and other.active:
                other.active = False
                self.session.add(other)
        wallet.active = True
        self.session.add(wallet)
        self.session.commit()
        self.session.refresh(wallet)
        return wallet

    def update_cash(self, wallet: Wallet, cash: Money) -> Wallet:
        wallet.cash = cash.cents
        self.session.add(wallet)
        self.session.commit()
        self.session.refresh(wallet)
        return wallet

    def add_payment_method(self, wallet: Wallet, identifier: str, active: bool = False) -> PaymentMethod:
        if active:
            for method in wallet.payment_methods:
                if method.active:
                    method.active = False
                    self.session.add(method)
        method = PaymentMethod(wallet_id=wallet.id, identifier=identifier, active=active)
        self.session.add(method)
        self.session.commit()
        self.session.refresh(method)
        self.session.refresh(wallet)
        return method
