"""
Transference Factory

Creates debits, deposits (credits) and purchases. Debits take effect
immediately and are checked against the balance inside the same transaction
that inserts them. Credits and purchases are created together with their
PENDING review.
"""

from datetime import datetime, timezone
from typing import Optional
import uuid

from .errors import InsufficientBalance
from .ledger import LedgerEngine
from .logging_config import get_logger, log_action
from .models import (
    Review, ReviewedTransference, ReviewStatus, Transference, TransferenceKind,
    validate_amount
)
from .persistence import TransferenceStore


class TransferenceFactory:
    """Creates transference records with the correct initial review state"""

    def __init__(self, store: TransferenceStore, ledger: LedgerEngine):
        self.store = store
        self.ledger = ledger
        self.logger = get_logger("financial_service.transferences")

    def create_debit(self, sender_id: str, amount: int,
                     description: Optional[str] = None) -> ReviewedTransference:
        """
        Debit the sender's personal balance.

        The balance check and the insert run in one atomic block, so two
        concurrent debits can't both pass the check.

        Raises:
            InvalidAmount: amount is not a positive integer
            InsufficientBalance: the balance doesn't cover the amount
        """
        validate_amount(amount)

        with self.store.atomic():
            available = self.ledger.get_balance(sender_id).balance
            if available < amount:
                log_action(
                    self.logger, "warning", "Debit refused: insufficient balance",
                    user_id=sender_id, action="create_debit",
                    extra={"requested": amount, "available": available}
                )
                raise InsufficientBalance(sender_id, amount, available)

            transference = Transference(
                id=str(uuid.uuid4()),
                sender_id=sender_id,
                recipient_id=None,
                amount=amount,
                kind=TransferenceKind.DEBIT,
                description=description,
                date=datetime.now(timezone.utc),
            )
            created = self.store.insert_transference_and_review(transference)

        log_action(
            self.logger, "info", "Debit created",
            user_id=sender_id, action="create_debit",
            resource=f"transference:{transference.id}",
            extra={"amount": amount, "balance_before": available}
        )
        return created

    def create_pending_credit(self, sender_id: str, amount: int, receipt: str,
                              recipient_id: Optional[str] = None,
                              description: Optional[str] = None,
                              kind: TransferenceKind = TransferenceKind.CREDIT) -> ReviewedTransference:
        """
        Create a CREDIT or PURCHASE transference with its PENDING review.

        Args:
            sender_id: User placing the transference
            amount: Positive integer amount
            receipt: Reference to the supporting evidence
            recipient_id: Recipient of a credit; always None for purchases
            description: Optional free text
            kind: TransferenceKind.CREDIT or TransferenceKind.PURCHASE

        Returns:
            The created transference with its review
        """
        if not kind.requires_review:
            raise ValueError(f"{kind.value} transferences are not reviewed, use create_debit")
        validate_amount(amount)
        if not receipt:
            raise ValueError("A receipt is required for reviewed transferences")
        if kind == TransferenceKind.PURCHASE:
            recipient_id = None

        transference = Transference(
            id=str(uuid.uuid4()),
            sender_id=sender_id,
            recipient_id=recipient_id,
            amount=amount,
            kind=kind,
            description=description,
            date=datetime.now(timezone.utc),
        )
        review = Review(
            transference_id=transference.id,
            receipt=receipt,
            status=ReviewStatus.PENDING,
        )
        created = self.store.insert_transference_and_review(transference, review)

        log_action(
            self.logger, "info", f"Pending {kind.value.lower()} created",
            user_id=sender_id, action="create_pending_transference",
            resource=f"transference:{transference.id}",
            extra={"amount": amount, "recipient_id": recipient_id, "kind": kind.value}
        )
        return created

    def create_deposit(self, sender_id: str, recipient_id: Optional[str], amount: int,
                       receipt: str, description: Optional[str] = None) -> ReviewedTransference:
        return self.create_pending_credit(
            sender_id, amount, receipt, recipient_id, description, TransferenceKind.CREDIT
        )

    def create_purchase(self, sender_id: str, amount: int, receipt: str,
                        description: Optional[str] = None) -> ReviewedTransference:
        return self.create_pending_credit(
            sender_id, amount, receipt, None, description, TransferenceKind.PURCHASE
        )
