# core/dependencies.py
from fastapi import Depends
from sqlmodel import Session

from core.config import settings
from core.database import get_session
from services.contract_service import ContractService
from services.gateways import GatewayRegistry
from services.payment_service import PaymentService
from services.store import SqlStore, Store
from services.wallet_service import WalletService

_gateways = GatewayRegistry()


def get_store(session: Session = Depends(get_session)) -> Store:
    return SqlStore(session)


def get_gateways() -> GatewayRegistry:
    """Overridden in tests with a registry of counting fakes."""
    return _gateways


def get_contract_service(store: Store = Depends(get_store)) -> ContractService:
    return ContractService(store, settings.PROVIDER)


def get_payment_service(
    store: Store = Depends(get_store),
    gateways: GatewayRegistry = Depends(get_gateways),
) -> PaymentService:
    return PaymentService(store, gateways, settings.PROVIDER)


def get_wallet_service(
    store: Store = Depends(get_store),
    gateways: GatewayRegistry = Depends(get_gateways),
) -> WalletService:
    return WalletService(store, gateways, settings.PROVIDER)
