"""
Ledger Data Model

Transferences are immutable records of a monetary movement. CREDIT and
PURCHASE transferences carry exactly one Review which is resolved once by a
reviewer; DEBIT transferences never have one. Amounts are integers in the
smallest currency unit.
"""

from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Any, Dict, Optional

from .errors import InvalidAmount


class TransferenceKind(Enum):
    """Kinds of monetary movement"""
    DEBIT = "DEBIT"          # Withdrawal from personal balance, no review
    CREDIT = "CREDIT"        # Deposit from sender to recipient, reviewed
    PURCHASE = "PURCHASE"    # Treasury expense, reviewed

    @property
    def requires_review(self) -> bool:
        return self is not TransferenceKind.DEBIT


class ReviewStatus(Enum):
    """States of a review"""
    PENDING = "PENDING"
    ACCEPTED = "ACCEPTED"
    REJECTED = "REJECTED"

    @property
    def is_terminal(self) -> bool:
        return self is not ReviewStatus.PENDING


class ReviewAction(Enum):
    """Decisions a reviewer can take"""
    ACCEPT = "ACCEPT"
    REJECT = "REJECT"

    @property
    def target_status(self) -> ReviewStatus:
        if self is ReviewAction.ACCEPT:
            return ReviewStatus.ACCEPTED
        return ReviewStatus.REJECTED


class OrderDirection(Enum):
    """Date ordering for history listings"""
    ASC = "asc"
    DESC = "desc"


def validate_amount(amount: Any) -> int:
    """Return amount if it is a positive integer, raise InvalidAmount otherwise"""
    # bool is an int subclass but never a valid amount
    if isinstance(amount, bool) or not isinstance(amount, int) or amount <= 0:
        raise InvalidAmount(amount)
    return amount


@dataclass(frozen=True)
class Transference:
    """Immutable record of a monetary movement"""
    id: str
    sender_id: str
    amount: int
    kind: TransferenceKind
    date: datetime
    recipient_id: Optional[str] = None
    description: Optional[str] = None

    def __post_init__(self):
        validate_amount(self.amount)
        if not self.sender_id:
            raise ValueError("Transference must have a sender")

    @property
    def requires_review(self) -> bool:
        return self.kind.requires_review

    def to_record(self) -> Dict[str, Any]:
        """Convert to dictionary for storage"""
        return {
            'id': self.id,
            'sender_id': self.sender_id,
            'recipient_id': self.recipient_id,
            'amount': self.amount,
            'kind': self.kind.value,
            'description': self.description,
            'date': self.date.isoformat(),
        }

    @classmethod
    def from_record(cls, data: Dict[str, Any]) -> 'Transference':
        """Create instance from a storage dictionary"""
        return cls(
            id=data['id'],
            sender_id=data['sender_id'],
            recipient_id=data.get('recipient_id'),
            amount=int(data['amount']),
            kind=TransferenceKind(data['kind']),
            description=data.get('description'),
            date=datetime.fromisoformat(data['date']),
        )


@dataclass(frozen=True)
class Review:
    """Review attached 1:1 to a CREDIT or PURCHASE transference"""
    transference_id: str
    receipt: str
    status: ReviewStatus = ReviewStatus.PENDING
    reviewer_id: Optional[str] = None
    reviewed_date: Optional[datetime] = None

    @property
    def is_pending(self) -> bool:
        return self.status == ReviewStatus.PENDING

    def to_record(self) -> Dict[str, Any]:
        return {
            'transference_id': self.transference_id,
            'receipt': self.receipt,
            'status': self.status.value,
            'reviewer_id': self.reviewer_id,
            'reviewed_date': self.reviewed_date.isoformat() if self.reviewed_date else None,
        }

    @classmethod
    def from_record(cls, data: Dict[str, Any]) -> 'Review':
        reviewed_date = None
        if data.get('reviewed_date'):
            reviewed_date = datetime.fromisoformat(data['reviewed_date'])
        return cls(
            transference_id=data['transference_id'],
            receipt=data['receipt'],
            status=ReviewStatus(data['status']),
            reviewer_id=data.get('reviewer_id'),
            reviewed_date=reviewed_date,
        )


@dataclass(frozen=True)
class ReviewedTransference:
    """A transference together with its review, if it has one"""
    transference: Transference
    review: Optional[Review] = None

    @property
    def id(self) -> str:
        return self.transference.id

    @property
    def status(self) -> Optional[ReviewStatus]:
        return self.review.status if self.review else None

    @property
    def is_pending(self) -> bool:
        return self.review is not None and self.review.is_pending

    def to_dict(self) -> Dict[str, Any]:
        """Flatten into the transference DTO, adding review fields when reviewed"""
        t = self.transference
        result = {
            'id': t.id,
            'sender_id': t.sender_id,
            'recipient_id': t.recipient_id,
            'amount': t.amount,
            'date': t.date.isoformat(),
            'kind': t.kind.value,
            'description': t.description,
        }
        if self.review is not None:
            result.update({
                'receipt': self.review.receipt,
                'reviewer_id': self.review.reviewer_id,
                'reviewed_date': self.review.reviewed_date.isoformat() if self.review.reviewed_date else None,
                'status': self.review.status.value,
            })
        return result


@dataclass(frozen=True)
class Balance:
    """Balance figures computed from a user's transference history"""
    balance: int = 0
    treasury: int = 0
    pending_balance: int = 0

    def to_dict(self) -> Dict[str, int]:
        return {
            'balance': self.balance,
            'treasury': self.treasury,
            'pending_balance': self.pending_balance,
        }


MAX_PAGE_SIZE = 255


@dataclass(frozen=True)
class Page:
    """Pagination window over a date-ordered listing"""
    number: int = 1
    size: int = 50
    order: OrderDirection = OrderDirection.DESC

    def __post_init__(self):
        if self.number < 1:
            raise ValueError("Page number must be a positive integer")
        if not 1 <= self.size <= MAX_PAGE_SIZE:
            raise ValueError(f"Page size must be between 1 and {MAX_PAGE_SIZE}")

    @property
    def offset(self) -> int:
        return self.size * (self.number - 1)
