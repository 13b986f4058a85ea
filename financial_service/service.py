"""
Financial Service

The operations offered to callers (the HTTP layer or anything else). Each
returns plain records or raises a LedgerError subclass; nothing here knows
about HTTP status codes. A service is built around one storage handle, so
tests can construct as many isolated instances as they need.
"""

from typing import List, Optional

from .errors import NotFound, SelfTransferNotAllowed
from .ledger import LedgerEngine
from .models import (
    Balance, Page, ReviewAction, ReviewedTransference, ReviewStatus,
    TransferenceKind
)
from .persistence import TransferenceStore
from .review import ReviewStateMachine
from .storage import StorageInterface
from .transferences import TransferenceFactory


class FinancialService:
    """Ledger, transference factory and review workflow over one storage backend"""

    def __init__(self, storage: StorageInterface, include_received_in_balance: bool = True):
        self.storage = storage
        self.store = TransferenceStore(storage)
        self.ledger = LedgerEngine(self.store, include_received=include_received_in_balance)
        self.factory = TransferenceFactory(self.store, self.ledger)
        self.review_machine = ReviewStateMachine(self.store)

    def get_balance(self, user_id: str) -> Balance:
        return self.ledger.get_balance(user_id)

    def create_debit(self, user_id: str, amount: int,
                     description: Optional[str] = None) -> ReviewedTransference:
        return self.factory.create_debit(user_id, amount, description)

    def create_pending_transference(self, sender_id: str, amount: int, receipt: str,
                                    recipient_id: Optional[str] = None,
                                    description: Optional[str] = None,
                                    kind: TransferenceKind = TransferenceKind.CREDIT) -> ReviewedTransference:
        """Place a deposit (CREDIT) or purchase awaiting review"""
        if recipient_id is not None and sender_id == recipient_id:
            raise SelfTransferNotAllowed(sender_id)
        return self.factory.create_pending_credit(
            sender_id, amount, receipt, recipient_id, description, kind
        )

    def create_purchase(self, sender_id: str, amount: int, receipt: str,
                        description: Optional[str] = None) -> ReviewedTransference:
        return self.factory.create_purchase(sender_id, amount, receipt, description)

    def review_transference(self, transference_id: str, reviewer_id: str, amount: int,
                            action: ReviewAction) -> ReviewedTransference:
        return self.review_machine.review(transference_id, reviewer_id, amount, action)

    def list_history(self, user_id: str, page: Optional[Page] = None) -> List[ReviewedTransference]:
        return self.store.find_transferences_by_sender(user_id, page or Page())

    def get_transference(self, transference_id: str) -> ReviewedTransference:
        transference = self.store.get_transference(transference_id)
        if transference is None:
            raise NotFound(transference_id)
        return transference

    def get_pending_transference(self, transference_id: str) -> ReviewedTransference:
        """A transference that is still awaiting review"""
        transference = self.store.get_transference(transference_id)
        if transference is None or not transference.is_pending:
            raise NotFound(transference_id)
        return transference

    def list_pending(self, page: Optional[Page] = None) -> List[ReviewedTransference]:
        return self.store.find_by_review_status(ReviewStatus.PENDING, page=page or Page())

    def list_verified_purchases(self, page: Optional[Page] = None) -> List[ReviewedTransference]:
        return self.store.find_by_review_status(
            ReviewStatus.ACCEPTED, kind=TransferenceKind.PURCHASE, page=page or Page()
        )
