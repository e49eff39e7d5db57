# models/models.py
from typing import Optional, List, NamedTuple
from datetime import datetime, timezone
from enum import Enum
from sqlmodel import SQLModel, Field, Relationship
from sqlalchemy import DateTime, UniqueConstraint


# ============================================================
# ENUMS
# ============================================================
class WalletType(str, Enum):
    FAKE = "FAKE"
    STRIPE = "STRIPE"


class PaymentStatus(str, Enum):
    SUCCESSFUL = "SUCCESSFUL"
    FAILED = "FAILED"
    ERROR = "ERROR"


class ContractRole(str, Enum):
    DEV = "DEV"
    REV = "REV"
    QA = "QA"
    ARCH = "ARCH"
    PO = "PO"


def utcnow() -> datetime:
    """Timezone-aware UTC now; every stored timestamp goes through here."""
    return datetime.now(timezone.utc)


class ContractId(NamedTuple):
    """Identity of a Contract; unique and immutable once created."""
    repo_full_name: str
    contributor_username: str
    provider: str
    role: str


# ============================================================
# PROJECT
# ============================================================
class Project(SQLModel, table=True):
    __tablename__ = "project"
    __table_args__ = (UniqueConstraint("repo_full_name", "provider", name="uq_project_repo"),)

    id: Optional[int] = Field(default=None, primary_key=True)
    repo_full_name: str = Field(max_length=255, index=True)
    provider: str = Field(max_length=50)
    owner: str = Field(max_length=100)
    project_manager: Optional[str] = Field(default=None, max_length=100)
    created_at: datetime = Field(default_factory=utcnow, sa_type=DateTime(timezone=True))

    contracts: List["Contract"] = Relationship(back_populates="project")
    wallets: List["Wallet"] = Relationship(
        back_populates="project",
        sa_relationship_kwargs={"order_by": "Wallet.id"}
    )


# ============================================================
# CONTRACT
# ============================================================
class Contract(SQLModel, table=True):
    __tablename__ = "contract"
    __table_args__ = (
        UniqueConstraint(
            "repo_full_name", "contributor_username", "provider", "role",
            name="uq_contract_identity"
        ),
    )

    id: Optional[int] = Field(default=None, primary_key=True)
    project_id: int = Field(foreign_key="project.id", nullable=False, index=True)

    repo_full_name: str = Field(max_length=255)
    contributor_username: str = Field(max_length=100)
    provider: str = Field(max_length=50)
    role: str = Field(max_length=20)

    # Minor units (cents)
    hourly_rate: int = Field(default=0)
    value: int = Field(default=0)
    revenue: int = Field(default=0)

    marked_for_removal: Optional[datetime] = Field(default=None, sa_type=DateTime(timezone=True))
    created_at: datetime = Field(default_factory=utcnow, sa_type=DateTime(timezone=True))

    project: "Project" = Relationship(back_populates="contracts")
    invoices: List["Invoice"] = Relationship(
        back_populates="contract",
        sa_relationship_kwargs={"order_by": "Invoice.id"}
    )

    @property
    def contract_id(self) -> ContractId:
        return ContractId(
            self.repo_full_name, self.contributor_username, self.provider, self.role
        )

    @property
    def is_marked(self) -> bool:
        return self.marked_for_removal is not None


# ============================================================
# INVOICE
# ============================================================
class Invoice(SQLModel, table=True):
    __tablename__ = "invoice"

    id: Optional[int] = Field(default=None, primary_key=True)
    contract_id: int = Field(foreign_key="contract.id", nullable=False, index=True)

    # Minor units (cents)
    amount: int = Field(default=0)
    fees: int = Field(default=0)

    is_paid: bool = Field(default=False, index=True)
    created_at: datetime = Field(default_factory=utcnow, sa_type=DateTime(timezone=True))
    paid_at: Optional[datetime] = Field(default=None, sa_type=DateTime(timezone=True))

    contract: "Contract" = Relationship(back_populates="invoices")
    payments: List["Payment"] = Relationship(
        back_populates="invoice",
        sa_relationship_kwargs={"order_by": "Payment.id"}
    )

    @property
    def total_amount(self) -> int:
        return self.amount + self.fees

    @property
    def latest(self) -> Optional["Payment"]:
        """Most recent payment attempt, if any."""
        return self.payments[-1] if self.payments else None


# ============================================================
# PAYMENT (one row per attempt)
# ============================================================
class Payment(SQLModel, table=True):
    __tablename__ = "payment"

    id: Optional[int] = Field(default=None, primary_key=True)
    invoice_id: int = Field(foreign_key="invoice.id", nullable=False, index=True)

    wallet_type: str = Field(max_length=20)
    transaction_id: Optional[str] = Field(default=None, max_length=255, index=True)
    status: str = Field(max_length=20)
    fail_reason: str = Field(default="", max_length=1000)
    value: int = Field(default=0)
    payment_time: datetime = Field(default_factory=utcnow, sa_type=DateTime(timezone=True))

    invoice: "Invoice" = Relationship(back_populates="payments")

    @property
    def is_successful(self) -> bool:
        return self.status == PaymentStatus.SUCCESSFUL.value


# ============================================================
# WALLET
# ============================================================
class Wallet(SQLModel, table=True):
    __tablename__ = "wallet"
    __table_args__ = (UniqueConstraint("project_id", "type", name="uq_project_wallet_type"),)

    id: Optional[int] = Field(default=None, primary_key=True)
    project_id: int = Field(foreign_key="project.id", nullable=False, index=True)

    type: str = Field(max_length=20)
    active: bool = Field(default=False)

    # Minor units (cents)
    cash: int = Field(default=0)
    debt: int = Field(default=0)

    # Gateway customer id (Stripe "cus_..."), None for FAKE wallets
    identifier: Optional[str] = Field(default=None, max_length=255)

    billing_name: Optional[str] = Field(default=None, max_length=255)
    billing_email: Optional[str] = Field(default=None, max_length=255)
    billing_country: Optional[str] = Field(default=None, max_length=2)
    billing_address: Optional[str] = Field(default=None, max_length=500)

    created_at: datetime = Field(default_factory=utcnow, sa_type=DateTime(timezone=True))

    project: "Project" = Relationship(back_populates="wallets")
    payment_methods: List["PaymentMethod"] = Relationship(
        back_populates="wallet",
        sa_relationship_kwargs={"order_by": "PaymentMethod.id"}
    )

    @property
    def available(self) -> int:
        return self.cash - self.debt

    @property
    def active_payment_method(self) -> Optional["PaymentMethod"]:
        return next((m for m in self.payment_methods if m.active), None)


# ============================================================
# PAYMENT METHOD
# ============================================================
class PaymentMethod(SQLModel, table=True):
    __tablename__ = "payment_method"

    id: Optional[int] = Field(default=None, primary_key=True)
    wallet_id: int = Field(foreign_key="wallet.id", nullable=False, index=True)
    identifier: str = Field(max_length=255)
    active: bool = Field(default=False)
    created_at: datetime = Field(default_factory=utcnow, sa_type=DateTime(timezone=True))

    wallet: "Wallet" = Relationship(back_populates="payment_methods")
