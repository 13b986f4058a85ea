"""
Review endpoints
"""

from uuid import UUID

from fastapi import APIRouter, Depends

from .auth import get_current_user, get_service
from .errors import http_error
from .schemas import ReviewRequest, page_params
from ..errors import LedgerError
from ..models import Page
from ..service import FinancialService


router = APIRouter(dependencies=[Depends(get_current_user)])


@router.get("/verify")
def get_pending_transferences(
    page: Page = Depends(page_params),
    service: FinancialService = Depends(get_service)
):
    """Get the transferences waiting for review"""
    return [item.to_dict() for item in service.list_pending(page)]


@router.get("/verify/{transference_id}")
def get_unverified_transference(
    transference_id: UUID,
    service: FinancialService = Depends(get_service)
):
    """Get a transference that is still waiting for review"""
    try:
        return service.get_pending_transference(str(transference_id)).to_dict()
    except LedgerError as e:
        raise http_error(e)


@router.post("/verify/{transference_id}")
def review_transference(
    transference_id: UUID,
    request: ReviewRequest,
    service: FinancialService = Depends(get_service)
):
    """Accept or reject a pending transference"""
    try:
        reviewed = service.review_transference(
            str(transference_id),
            reviewer_id=str(request.reviewer_id),
            amount=request.amount,
            action=request.action,
        )
    except LedgerError as e:
        raise http_error(e)
    return reviewed.to_dict()
