# ================================================================
# services/wallet_service.py — Create / activate / fund project wallets
# ================================================================
import logging
from decimal import Decimal
from typing import List, Optional

import stripe

from core.exceptions import WalletAlreadyExists, WalletOperationFailed
from core.locks import KeyedLocks, wallet_locks
from core.money import Money
from models.models import Project, Wallet, WalletType
from schemas.wallet_schema import BillingInfoCreate
from services.gateways import GatewayRegistry
from services.store import Store

logger = logging.getLogger(__name__)


def _wallet_type(value: str) -> WalletType:
    try:
        return WalletType(value.upper())
    except ValueError:
        raise WalletOperationFailed(f"Unknown wallet type: {value}") from None


class WalletService:
    """Keeps at most one active wallet per project."""

    def __init__(self, store: Store, gateways: GatewayRegistry, provider: str,
                 locks: KeyedLocks = wallet_locks):
        self.store = store
        self.gateways = gateways
        self.provider = provider
        self.locks = locks

    def _project(self, owner: str, repo: str) -> Optional[Project]:
        return self.store.get_project(f"{owner}/{repo}", self.provider)

    def _require_project(self, owner: str, repo: str) -> Project:
        project = self._project(owner, repo)
        if project is None:
            raise WalletOperationFailed(f"Project {owner}/{repo} not found.")
        return project

    def _require_wallet(self, project: Project, wallet_type: WalletType) -> Wallet:
        wallet = next(
            (w for w in self.store.wallets_of(project) if w.type == wallet_type.value),
            None,
        )
        if wallet is None:
            raise WalletOperationFailed(
                f"Project {project.repo_full_name} has no {wallet_type.value} wallet."
            )
        return wallet

    def list_wallets(self, owner: str, repo: str) -> List[Wallet]:
        project = self._project(owner, repo)
        if project is None:
            return []
        return self.store.wallets_of(project)

    def create_wallet(self, owner: str, repo: str, wallet_type: str,
                      billing: BillingInfoCreate) -> Wallet:
        """
        Register a new, inactive wallet of ``wallet_type``.

        Raises:
            WalletOperationFailed: Unknown type, missing project or the
                gateway refused the billing info.
            WalletAlreadyExists: The project already has such a wallet.
        """
        kind = _wallet_type(wallet_type)
        project = self._require_project(owner, repo)
        if any(w.type == kind.value for w in self.store.wallets_of(project)):
            raise WalletAlreadyExists(project.repo_full_name, kind.value)

        identifier = None
        gateway = self.gateways.stripe() if kind is WalletType.STRIPE else None
        if gateway is not None:
            try:
                identifier = gateway.register_customer(
                    billing.name, billing.email, billing.country, billing.address
                )
            except stripe.StripeError as e:
                logger.error(f"❌ Stripe refused billing info for {project.repo_full_name}: {e}")
                raise WalletOperationFailed(f"Could not register billing info: {e}") from e

        try:
            wallet = self.store.create_wallet(
                project,
                Wallet(
                    project_id=project.id,
                    type=kind.value,
                    identifier=identifier,
                    billing_name=billing.name,
                    billing_email=billing.email,
                    billing_country=billing.country,
                    billing_address=billing.address,
                ),
            )
        except WalletAlreadyExists:
            # Lost a race with another request creating the same wallet.
            if gateway is not None and identifier:
                gateway.delete_customer(identifier)
            raise
        logger.info(f"👛 {kind.value} wallet created for {project.repo_full_name}")
        return wallet

    def activate(self, owner: str, repo: str, wallet_type: str) -> Wallet:
        kind = _wallet_type(wallet_type)
        project = self._require_project(owner, repo)
        with self.locks.hold(f"project:{project.id}"):
            wallet = self._require_wallet(project, kind)
            if wallet.active:
                return wallet
            wallet = self.store.activate_wallet(project, wallet)
        logger.info(f"🔀 {kind.value} wallet is now active for {project.repo_full_name}")
        return wallet

    def update_cash(self, owner: str, repo: str, wallet_type: str, cash: Decimal) -> Wallet:
        """
        Set the spending limit of a real wallet.

        The FAKE wallet is rejected before anything is looked up.
        """
        kind = _wallet_type(wallet_type)
        if kind is WalletType.FAKE:
            raise WalletOperationFailed("Cash limit cannot be set on the FAKE wallet.")
        project = self._require_project(owner, repo)
        wallet = self._require_wallet(project, kind)
        limit = Money.from_decimal(cash)
        if limit.is_negative:
            raise WalletOperationFailed("Cash limit cannot be negative.")
        wallet = self.store.update_cash(wallet, limit)
        logger.info(f"💶 Cash limit of {kind.value} wallet in {project.repo_full_name} set to {limit}")
        return wallet

    def add_payment_method(self, owner: str, repo: str, wallet_type: str,
                           payment_method_id: str) -> Wallet:
        """
        Register a gateway payment method on a real wallet and make it the
        one that gets charged. The previously active method is deactivated.
        """
        kind = _wallet_type(wallet_type)
        if kind is WalletType.FAKE:
            raise WalletOperationFailed("The FAKE wallet has no payment methods.")
        project = self._require_project(owner, repo)
        wallet = self._require_wallet(project, kind)
        if any(m.identifier == payment_method_id for m in wallet.payment_methods):
            raise WalletOperationFailed(f"Payment method {payment_method_id} is already registered.")

        gateway = self.gateways.stripe()
        if gateway is not None:
            try:
                gateway.attach_payment_method(wallet.identifier, payment_method_id)
            except stripe.StripeError as e:
                logger.error(f"❌ Stripe refused payment method for {project.repo_full_name}: {e}")
                raise WalletOperationFailed(f"Could not attach payment method: {e}") from e

        self.store.add_payment_method(wallet, payment_method_id, active=True)
        logger.info(f"💳 Payment method added to {kind.value} wallet of {project.repo_full_name}")
        return wallet
