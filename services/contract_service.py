# ================================================================
# services/contract_service.py — Add / list / restore contracts
# ================================================================
import logging
from decimal import Decimal
from typing import List, Optional

from core.exceptions import ContractCreationFailed
from core.money import Money
from models.models import Contract, ContractId, Invoice, Project
from services.store import ContractRejected, Store

logger = logging.getLogger(__name__)


class ContractService:
    def __init__(self, store: Store, provider: str):
        self.store = store
        self.provider = provider

    def _project(self, owner: str, repo: str) -> Optional[Project]:
        return self.store.get_project(f"{owner}/{repo}", self.provider)

    def _contract(self, owner: str, repo: str, username: str, role: str) -> Optional[Contract]:
        project = self._project(owner, repo)
        if project is None:
            return None
        return self.store.find_contract(
            project, ContractId(f"{owner}/{repo}", username, self.provider, role)
        )

    def list_contracts(self, owner: str, repo: str) -> List[Contract]:
        """Contracts of the project; empty when the project is unknown."""
        project = self._project(owner, repo)
        if project is None:
            return []
        return self.store.contracts_of(project)

    def active_wallet_type(self, owner: str, repo: str) -> Optional[str]:
        project = self._project(owner, repo)
        if project is None:
            return None
        wallet = self.store.active_wallet(project)
        return wallet.type if wallet else None

    def add_contract(
        self, owner: str, repo: str, username: str, hourly_rate: Decimal, role: str
    ) -> Contract:
        """
        Create a contract for ``username`` in ``owner/repo``.

        The hourly rate arrives in major units and is stored in cents after
        HALF_UP rounding to two fractional digits.

        Raises:
            ContractCreationFailed: The project does not exist or a contract
                with the same identity is already there.
        """
        project = self._project(owner, repo)
        if project is None:
            raise ContractCreationFailed(f"Project {owner}/{repo} not found.")
        rate = Money.from_decimal(hourly_rate)
        try:
            contract = self.store.add_contract(project, username, rate, role)
        except ContractRejected as e:
            logger.warning(f"⚠️ Contract not created for {username} ({role}) in {owner}/{repo}: {e}")
            raise ContractCreationFailed(str(e)) from e
        logger.info(f"✅ Contract added: {contract.contract_id} at {rate} per hour")
        return contract

    def restore_contract(self, owner: str, repo: str, username: str, role: str) -> None:
        """Un-mark a contract; does nothing if there is nothing to restore."""
        contract = self._contract(owner, repo, username, role)
        if contract is None or not contract.is_marked:
            return
        self.store.restore_contract(contract)
        logger.info(f"♻️ Contract restored: {contract.contract_id}")

    def list_invoices(self, owner: str, repo: str, username: str, role: str) -> List[Invoice]:
        contract = self._contract(owner, repo, username, role)
        if contract is None:
            return []
        return self.store.invoices_of(contract)
