# routes/wallets.py
import logging
from typing import List, Optional

from fastapi import APIRouter, Body, Depends, HTTPException, status

from core.dependencies import get_wallet_service
from core.exceptions import BadRequest
from schemas.wallet_schema import BillingInfoCreate, CashUpdate, PaymentMethodCreate, WalletRead
from services.wallet_service import WalletService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/repositories/{owner}/{name}/wallets", tags=["Wallets"])


# ==================================================================
#  ✅ List Project Wallets (empty if the project is unknown)
# ==================================================================
@router.get("", response_model=List[WalletRead])
def list_wallets(
    owner: str,
    name: str,
    service: WalletService = Depends(get_wallet_service),
):
    return [WalletRead.from_wallet(w) for w in service.list_wallets(owner, name)]


# ==================================================================
#  ✅ Create Wallet (starts inactive)
# ==================================================================
@router.post("/{wallet_type}", response_model=WalletRead)
def create_wallet(
    owner: str,
    name: str,
    wallet_type: str,
    billing: Optional[BillingInfoCreate] = Body(default=None),
    service: WalletService = Depends(get_wallet_service),
):
    try:
        wallet = service.create_wallet(owner, name, wallet_type, billing or BillingInfoCreate())
    except BadRequest as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=e.message)
    return WalletRead.from_wallet(wallet)


# ==================================================================
#  ✅ Activate Wallet (deactivates the previous one)
# ==================================================================
@router.put("/{wallet_type}/activate", response_model=WalletRead)
def activate_wallet(
    owner: str,
    name: str,
    wallet_type: str,
    service: WalletService = Depends(get_wallet_service),
):
    try:
        wallet = service.activate(owner, name, wallet_type)
    except BadRequest as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=e.message)
    return WalletRead.from_wallet(wallet)


# ==================================================================
#  ✅ Update Cash Limit
# ==================================================================
@router.put("/{wallet_type}/cash", response_model=WalletRead)
def update_cash(
    owner: str,
    name: str,
    wallet_type: str,
    data: CashUpdate,
    service: WalletService = Depends(get_wallet_service),
):
    try:
        wallet = service.update_cash(owner, name, wallet_type, data.cash)
    except BadRequest as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=e.message)
    return WalletRead.from_wallet(wallet)


# ==================================================================
#  ✅ Add Payment Method (becomes the active one)
# ==================================================================
@router.post("/{wallet_type}/paymentMethods", response_model=WalletRead)
def add_payment_method(
    owner: str,
    name: str,
    wallet_type: str,
    data: PaymentMethodCreate,
    service: WalletService = Depends(get_wallet_service),
):
    try:
        wallet = service.add_payment_method(owner, name, wallet_type, data.payment_method_id)
    except BadRequest as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=e.message)
    return WalletRead.from_wallet(wallet)
