"""
Ledger Engine

Computes the balance figures of a user by folding over their transference
history. The fold never depends on the order of the history.

- DEBIT                      -> balance - amount
- PURCHASE, ACCEPTED         -> treasury - amount
- CREDIT, PENDING (sender)   -> pending_balance + amount
- CREDIT, ACCEPTED, sender   -> balance + amount
- CREDIT, ACCEPTED, recipient-> treasury + amount
- anything REJECTED          -> no effect

A negative treasury is never shown: its deficit is added to both balance and
treasury after the fold.
"""

from typing import Iterable

from .models import Balance, ReviewedTransference, ReviewStatus, TransferenceKind
from .persistence import TransferenceStore
from .logging_config import get_logger


def compute_balance(user_id: str, transferences: Iterable[ReviewedTransference]) -> Balance:
    """
    Compute balance, treasury and pending figures for a user.

    Args:
        user_id: User whose figures are computed
        transferences: Transferences where the user is sender or recipient,
            with their reviews attached

    Returns:
        Balance with every figure non-negative
    """
    balance = 0
    treasury = 0
    pending = 0

    for item in transferences:
        transference = item.transference
        amount = transference.amount
        is_sender = transference.sender_id == user_id
        status = item.status

        if transference.kind == TransferenceKind.DEBIT:
            if is_sender:
                balance -= amount

        elif transference.kind == TransferenceKind.PURCHASE:
            if is_sender and status == ReviewStatus.ACCEPTED:
                treasury -= amount

        elif transference.kind == TransferenceKind.CREDIT:
            if status == ReviewStatus.PENDING:
                if is_sender:
                    pending += amount
            elif status == ReviewStatus.ACCEPTED:
                if is_sender:
                    balance += amount
                elif transference.recipient_id == user_id:
                    treasury += amount
            elif status is None:
                raise ValueError(f"Credit transference {transference.id} has no review")

        else:
            raise ValueError(f"Unknown transference kind: {transference.kind}")

    # The treasury borrows its deficit so it is never displayed negative
    surplus = abs(min(0, treasury))
    balance += surplus
    treasury += surplus

    # Only reachable from histories the atomic debit path never writes
    balance = max(0, balance)

    return Balance(balance=balance, treasury=treasury, pending_balance=pending)


class LedgerEngine:
    """Reads a user's history through the persistence gateway and folds it"""

    def __init__(self, store: TransferenceStore, include_received: bool = True):
        self.store = store
        self.include_received = include_received
        self.logger = get_logger("financial_service.ledger")

    def get_balance(self, user_id: str) -> Balance:
        history = self.store.find_transferences_by_sender(
            user_id, include_received=self.include_received
        )
        balance = compute_balance(user_id, history)
        self.logger.debug(
            "Computed balance for %s from %d transferences: %s",
            user_id, len(history), balance.to_dict()
        )
        return balance
