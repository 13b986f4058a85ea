"""
Transference Persistence Gateway

Maps transferences and reviews onto a StorageInterface. Reviews are keyed by
their transference id, so the storage's create-only insert enforces the 1:1
relation. The review transition is a single conditional update whose outcome
is either the updated record or None ("no match"); storage errors are left
to propagate.
"""

from datetime import datetime
from typing import List, Optional

from .models import (
    OrderDirection, Page, Review, ReviewedTransference, ReviewStatus,
    Transference, TransferenceKind
)
from .storage import StorageInterface


TRANSFERENCES_TABLE = "transferences"
REVIEWS_TABLE = "reviews"


class TransferenceStore:
    """Persistence gateway for transferences and their reviews"""

    def __init__(self, storage: StorageInterface):
        self.storage = storage

    def atomic(self):
        """Group gateway calls into one serialized transaction"""
        return self.storage.atomic()

    def get_transference(self, transference_id: str) -> Optional[ReviewedTransference]:
        data = self.storage.load(TRANSFERENCES_TABLE, transference_id)
        if data is None:
            return None
        return self._attach_review(Transference.from_record(data))

    def find_transferences_by_sender(self, user_id: str, page: Optional[Page] = None,
                                     include_received: bool = False) -> List[ReviewedTransference]:
        """
        Transferences sent by the user, with their reviews.

        include_received also returns transferences where the user is the
        recipient. Without a page the whole history is returned.
        """
        records = {
            data['id']: data
            for data in self.storage.find(TRANSFERENCES_TABLE, {'sender_id': user_id})
        }
        if include_received:
            for data in self.storage.find(TRANSFERENCES_TABLE, {'recipient_id': user_id}):
                records.setdefault(data['id'], data)

        history = [self._attach_review(Transference.from_record(data)) for data in records.values()]
        return self._paginate(history, page)

    def find_by_review_status(self, status: ReviewStatus,
                              kind: Optional[TransferenceKind] = None,
                              page: Optional[Page] = None) -> List[ReviewedTransference]:
        """Reviewed transferences whose review is in the given status"""
        result = []
        for review_data in self.storage.find(REVIEWS_TABLE, {'status': status.value}):
            data = self.storage.load(TRANSFERENCES_TABLE, review_data['transference_id'])
            if data is None:
                continue
            transference = Transference.from_record(data)
            if kind is not None and transference.kind != kind:
                continue
            result.append(ReviewedTransference(transference, Review.from_record(review_data)))
        return self._paginate(result, page)

    def insert_transference_and_review(self, transference: Transference,
                                       review: Optional[Review] = None) -> ReviewedTransference:
        """Insert a transference and its review (if any) as one atomic write"""
        if review is not None and review.transference_id != transference.id:
            raise ValueError("Review must reference the transference it is created with")
        with self.storage.atomic():
            self.storage.insert(TRANSFERENCES_TABLE, transference.id, transference.to_record())
            if review is not None:
                self.storage.insert(REVIEWS_TABLE, transference.id, review.to_record())
        return ReviewedTransference(transference, review)

    def conditional_update_review(self, transference_id: str, expected_status: ReviewStatus,
                                  expected_amount: int, new_status: ReviewStatus,
                                  reviewer_id: str,
                                  reviewed_date: datetime) -> Optional[ReviewedTransference]:
        """
        Resolve a review only if it is still in expected_status and its
        transference still records expected_amount.

        Returns the updated transference, or None when nothing matched.

        Transferences are never updated, so the amount check can read ahead
        of the write. The review itself changes in one conditional statement
        outside any explicit transaction: a reviewer that loses the race
        matches no row instead of hitting a serialization failure.
        """
        data = self.storage.load(TRANSFERENCES_TABLE, transference_id)
        if data is None or int(data['amount']) != expected_amount:
            return None
        updated = self.storage.update_where(
            REVIEWS_TABLE,
            transference_id,
            expected={'status': expected_status.value},
            changes={
                'status': new_status.value,
                'reviewer_id': reviewer_id,
                'reviewed_date': reviewed_date.isoformat(),
            },
        )
        if updated is None:
            return None
        return ReviewedTransference(Transference.from_record(data), Review.from_record(updated))

    def _attach_review(self, transference: Transference) -> ReviewedTransference:
        review = None
        if transference.requires_review:
            review_data = self.storage.load(REVIEWS_TABLE, transference.id)
            if review_data is not None:
                review = Review.from_record(review_data)
        return ReviewedTransference(transference, review)

    @staticmethod
    def _paginate(items: List[ReviewedTransference],
                  page: Optional[Page]) -> List[ReviewedTransference]:
        order = page.order if page else OrderDirection.DESC
        ordered = sorted(
            items,
            key=lambda item: (item.transference.date, item.transference.id),
            reverse=order == OrderDirection.DESC,
        )
        if page is None:
            return ordered
        return ordered[page.offset:page.offset + page.size]
