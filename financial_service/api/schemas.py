"""
Request models and query parameters
"""

from typing import Optional
from uuid import UUID

from fastapi import Query
from pydantic import BaseModel, Field

from ..models import MAX_PAGE_SIZE, OrderDirection, Page, ReviewAction


class DebitRequest(BaseModel):
    amount: int = Field(..., ge=1, description="Positive integer amount in the smallest currency unit")
    description: Optional[str] = None


class ReviewRequest(BaseModel):
    amount: int = Field(..., ge=1, description="Amount verified against the receipt")
    action: ReviewAction = Field(..., description="ACCEPT or REJECT")
    reviewer_id: UUID


def page_params(
    pageNumber: int = Query(1, ge=1, description="Page index"),
    pageSize: int = Query(50, ge=1, le=MAX_PAGE_SIZE, description="Elements per page"),
    orderDateBy: OrderDirection = Query(OrderDirection.DESC, description="Date order, asc or desc"),
) -> Page:
    return Page(number=pageNumber, size=pageSize, order=orderDateBy)
