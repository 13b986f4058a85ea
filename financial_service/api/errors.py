"""
Translation of ledger failures into HTTP errors
"""

from fastapi import HTTPException

from ..errors import (
    AlreadyReviewed, AmountMismatch, ConcurrentReviewConflict, InsufficientBalance,
    InvalidAmount, LedgerError, NotFound, SelfReviewForbidden, SelfTransferNotAllowed
)


ERROR_STATUS = {
    InvalidAmount: 400,
    SelfTransferNotAllowed: 400,
    SelfReviewForbidden: 400,
    AmountMismatch: 400,
    InsufficientBalance: 400,
    NotFound: 404,
    AlreadyReviewed: 403,
    ConcurrentReviewConflict: 409,
}


def http_error(error: LedgerError) -> HTTPException:
    """Map a ledger failure to the HTTP exception returned to the client"""
    status_code = ERROR_STATUS.get(type(error), 400)
    headers = None
    if error.retryable:
        headers = {"Retry-After": "0"}
    return HTTPException(status_code=status_code, detail=str(error), headers=headers)
