# routes/contracts.py
import logging
from typing import List

from fastapi import APIRouter, Depends, HTTPException, Query, Response, status

from core.dependencies import get_contract_service, get_payment_service
from core.exceptions import ContractCreationFailed, NoActiveWallet, NothingToPay
from schemas.contract_schema import ContractCreate, ContractRead
from schemas.payment_schema import InvoiceRead, PaymentRead, PayInvoiceRead
from services.contract_service import ContractService
from services.payment_service import PaymentService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/repositories/{owner}/{name}/contracts", tags=["Contracts"])


# ==================================================================
#  ✅ List Project Contracts (empty if the project is unknown)
# ==================================================================
@router.get("", response_model=List[ContractRead], response_model_exclude_unset=True)
def list_contracts(
    owner: str,
    name: str,
    with_wallet_type: bool = Query(False, alias="walletType"),
    service: ContractService = Depends(get_contract_service),
):
    contracts = service.list_contracts(owner, name)
    wallet_type = service.active_wallet_type(owner, name) if with_wallet_type and contracts else None
    return [
        ContractRead.from_contract(c, wallet_type, with_wallet_type=with_wallet_type)
        for c in contracts
    ]


# ==================================================================
#  ✅ Add Contract
# ==================================================================
@router.post(
    "",
    response_model=ContractRead,
    response_model_exclude_unset=True,
    status_code=status.HTTP_201_CREATED,
)
def add_contract(
    owner: str,
    name: str,
    data: ContractCreate,
    service: ContractService = Depends(get_contract_service),
):
    try:
        contract = service.add_contract(
            owner, name, data.username, data.hourly_rate, data.role.value
        )
    except ContractCreationFailed as e:
        raise HTTPException(status_code=status.HTTP_412_PRECONDITION_FAILED, detail=e.message)
    return ContractRead.from_contract(contract)


# ==================================================================
#  ✅ Restore Contract (always 204)
# ==================================================================
@router.put("/{username}/restore", status_code=status.HTTP_204_NO_CONTENT)
def restore_contract(
    owner: str,
    name: str,
    username: str,
    role: str = Query(...),
    service: ContractService = Depends(get_contract_service),
):
    service.restore_contract(owner, name, username, role)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


# ==================================================================
#  ✅ Invoices of a Contract
# ==================================================================
@router.get("/{username}/invoices", response_model=List[InvoiceRead])
def list_invoices(
    owner: str,
    name: str,
    username: str,
    role: str = Query(...),
    service: ContractService = Depends(get_contract_service),
):
    return [InvoiceRead.from_invoice(i) for i in service.list_invoices(owner, name, username, role)]


# ==================================================================
#  ✅ Pay Invoice (a FAILED/ERROR payment is still a 200)
# ==================================================================
@router.put(
    "/{username}/invoices/{invoice_id}/pay",
    response_model=PayInvoiceRead,
    response_model_exclude_unset=True,
    responses={204: {"description": "Project, contract or invoice not found"}},
)
def pay_invoice(
    owner: str,
    name: str,
    username: str,
    invoice_id: int,
    role: str = Query(...),
    service: PaymentService = Depends(get_payment_service),
):
    try:
        result = service.pay_invoice(owner, name, username, role, invoice_id)
    except NothingToPay as e:
        logger.info(f"ℹ️ Nothing to pay: {e.message}")
        return Response(status_code=status.HTTP_204_NO_CONTENT)
    except NoActiveWallet as e:
        raise HTTPException(status_code=status.HTTP_412_PRECONDITION_FAILED, detail=e.message)

    fields = {"paid": result.paid, "active": InvoiceRead.from_invoice(result.active)}
    if result.payment is not None:
        fields["payment"] = PaymentRead.from_payment(result.payment)
    return PayInvoiceRead(**fields)
