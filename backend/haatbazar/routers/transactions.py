# haatbazar/routers/transactions.py
from fastapi import APIRouter, Depends, status

from haatbazar.core.auth import get_principal, require_admin
from haatbazar.core.deps import get_payment_service
from haatbazar.schemas.transaction import TransactionCreate, TransactionOut, TransactionStatusBody
from haatbazar.services.payment_service import PaymentService

router = APIRouter(prefix="/transactions", tags=["Transactions"], dependencies=[Depends(get_principal)])
admin_router = APIRouter(prefix="/transactions", tags=["Admin Transactions"], dependencies=[Depends(require_admin)])


@router.post("", response_model=TransactionOut, status_code=status.HTTP_201_CREATED)
def record_transaction(payload: TransactionCreate, svc: PaymentService = Depends(get_payment_service)):
    return svc.record(payload)


@router.get("/{transaction_id}", response_model=TransactionOut)
def get_transaction(transaction_id: str, svc: PaymentService = Depends(get_payment_service)):
    return svc.get(transaction_id)


@admin_router.patch("/{transaction_id}/status", response_model=TransactionOut)
def update_transaction_status(
    transaction_id: str,
    payload: TransactionStatusBody,
    svc: PaymentService = Depends(get_payment_service),
):
    """Payment callback / admin override. Any status may replace any other."""
    return svc.update_status(transaction_id, payload.status)
