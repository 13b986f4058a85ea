"""
Transference, purchase, history and debit endpoints
"""

from typing import Optional
from uuid import UUID

from fastapi import APIRouter, Depends, File, Form, UploadFile, status

from .auth import get_current_user, get_service, get_settings
from .errors import http_error
from .receipts import discard_receipt, store_receipt
from .schemas import DebitRequest, page_params
from ..config import FinancialServiceConfig
from ..errors import LedgerError
from ..models import Page
from ..service import FinancialService


router = APIRouter(dependencies=[Depends(get_current_user)])


@router.get("/purchase", tags=["History"])
def get_verified_purchases(
    page: Page = Depends(page_params),
    service: FinancialService = Depends(get_service)
):
    """Get the list of accepted purchases"""
    return [item.to_dict() for item in service.list_verified_purchases(page)]


@router.post("/purchase", status_code=status.HTTP_201_CREATED)
def place_purchase(
    sender_id: UUID = Form(...),
    amount: int = Form(..., ge=1),
    receipt: UploadFile = File(...),
    description: Optional[str] = Form(None),
    service: FinancialService = Depends(get_service),
    config: FinancialServiceConfig = Depends(get_settings)
):
    """Place a treasury purchase. It must be reviewed"""
    receipt_path = store_receipt(receipt, config.upload_directory)
    try:
        purchase = service.create_purchase(
            sender_id=str(sender_id),
            amount=amount,
            receipt=receipt_path,
            description=description,
        )
    except LedgerError as e:
        discard_receipt(receipt_path)
        raise http_error(e)
    return purchase.to_dict()


@router.get("/history/{user_id}", tags=["History"])
def get_user_history(
    user_id: UUID,
    page: Page = Depends(page_params),
    service: FinancialService = Depends(get_service)
):
    """Get the transferences placed by a user"""
    return [item.to_dict() for item in service.list_history(str(user_id), page)]


@router.get("/transference/{transference_id}")
def get_transference(
    transference_id: UUID,
    service: FinancialService = Depends(get_service)
):
    """Get a transference, with its review if it has one"""
    try:
        return service.get_transference(str(transference_id)).to_dict()
    except LedgerError as e:
        raise http_error(e)


@router.post("/debit/{user_id}", status_code=status.HTTP_201_CREATED)
def place_debit(
    user_id: UUID,
    request: DebitRequest,
    service: FinancialService = Depends(get_service)
):
    """Debit the user balance"""
    try:
        debit = service.create_debit(str(user_id), request.amount, request.description)
    except LedgerError as e:
        raise http_error(e)
    return debit.to_dict()
