"""
Balance endpoints
"""

from typing import Optional
from uuid import UUID

from fastapi import APIRouter, Depends, File, Form, UploadFile, status

from .auth import get_current_user, get_service, get_settings
from .errors import http_error
from .receipts import discard_receipt, store_receipt
from ..config import FinancialServiceConfig
from ..errors import LedgerError
from ..models import TransferenceKind
from ..service import FinancialService


router = APIRouter(dependencies=[Depends(get_current_user)])


@router.get("/balance/{user_id}")
def get_user_balance(
    user_id: UUID,
    service: FinancialService = Depends(get_service)
):
    """Get the user balance, treasury and pending credit not yet reviewed"""
    return service.get_balance(str(user_id)).to_dict()


@router.post("/balance/{sender_id}", status_code=status.HTTP_201_CREATED)
def place_deposit(
    sender_id: UUID,
    recipient_id: UUID = Form(...),
    amount: int = Form(..., ge=1),
    receipt: UploadFile = File(...),
    description: Optional[str] = Form(None),
    service: FinancialService = Depends(get_service),
    config: FinancialServiceConfig = Depends(get_settings)
):
    """Place a deposit from sender to recipient. It must be reviewed"""
    receipt_path = store_receipt(receipt, config.upload_directory)
    try:
        deposit = service.create_pending_transference(
            sender_id=str(sender_id),
            amount=amount,
            receipt=receipt_path,
            recipient_id=str(recipient_id),
            description=description,
            kind=TransferenceKind.CREDIT,
        )
    except LedgerError as e:
        discard_receipt(receipt_path)
        raise http_error(e)
    return deposit.to_dict()
