"""
Review State Machine

PENDING -> ACCEPTED | REJECTED, exactly once. The read-side checks give
precise failures; the conditional update is what actually decides, so two
reviewers racing on the same transference can't both succeed.
"""

from datetime import datetime, timezone
from typing import Dict, FrozenSet

from .errors import (
    AlreadyReviewed, AmountMismatch, ConcurrentReviewConflict, NotFound,
    SelfReviewForbidden
)
from .logging_config import get_logger, log_action
from .models import ReviewAction, ReviewedTransference, ReviewStatus
from .persistence import TransferenceStore


ALLOWED_TRANSITIONS: Dict[ReviewStatus, FrozenSet[ReviewStatus]] = {
    ReviewStatus.PENDING: frozenset({ReviewStatus.ACCEPTED, ReviewStatus.REJECTED}),
    ReviewStatus.ACCEPTED: frozenset(),
    ReviewStatus.REJECTED: frozenset(),
}


def can_transition(current: ReviewStatus, target: ReviewStatus) -> bool:
    return target in ALLOWED_TRANSITIONS[current]


class ReviewStateMachine:
    """Resolves pending reviews"""

    def __init__(self, store: TransferenceStore):
        self.store = store
        self.logger = get_logger("financial_service.review")

    def review(self, transference_id: str, reviewer_id: str, amount: int,
               action: ReviewAction) -> ReviewedTransference:
        """
        Accept or reject a pending transference.

        Args:
            transference_id: Transference under review
            reviewer_id: Reviewer, must not be the sender
            amount: Amount the reviewer verified against the receipt
            action: ReviewAction.ACCEPT or ReviewAction.REJECT

        Returns:
            The transference with its resolved review

        Raises:
            NotFound: no such transference, or it carries no review
            AlreadyReviewed: the review is in a terminal state
            SelfReviewForbidden: the reviewer sent the transference
            AmountMismatch: amount differs from the recorded one
            ConcurrentReviewConflict: the conditional update matched nothing
        """
        target = ReviewAction(action).target_status

        current = self.store.get_transference(transference_id)
        if current is None or current.review is None:
            raise NotFound(transference_id)

        if not can_transition(current.review.status, target):
            raise AlreadyReviewed(transference_id, current.review.status)

        if reviewer_id == current.transference.sender_id:
            log_action(
                self.logger, "warning", "Self review refused",
                user_id=reviewer_id, action="review_transference",
                resource=f"transference:{transference_id}"
            )
            raise SelfReviewForbidden(transference_id, reviewer_id)

        if amount != current.transference.amount:
            raise AmountMismatch(transference_id, current.transference.amount, amount)

        reviewed = self.store.conditional_update_review(
            transference_id,
            expected_status=ReviewStatus.PENDING,
            expected_amount=amount,
            new_status=target,
            reviewer_id=reviewer_id,
            reviewed_date=datetime.now(timezone.utc),
        )
        if reviewed is None:
            log_action(
                self.logger, "warning", "Review lost a concurrent update",
                user_id=reviewer_id, action="review_transference",
                resource=f"transference:{transference_id}"
            )
            raise ConcurrentReviewConflict(transference_id)

        log_action(
            self.logger, "info", f"Transference {target.value.lower()}",
            user_id=reviewer_id, action="review_transference",
            resource=f"transference:{transference_id}",
            extra={"amount": amount, "status": target.value}
        )
        return reviewed
