"""
Ledger error taxonomy.

Every business-rule refusal raised by the core is a subclass of LedgerError.
The class alone is enough for a boundary layer to choose a response; the
attributes carry the details for the message. Storage transport failures are
never wrapped in these.
"""


class LedgerError(Exception):
    """Base class for business-rule failures raised by the core"""

    retryable = False


class InvalidAmount(LedgerError):
    """Raised when an amount is not a positive integer."""

    def __init__(self, amount):
        self.amount = amount
        super().__init__(f"Amount must be a positive integer, got {amount!r}")


class SelfTransferNotAllowed(LedgerError):
    """Raised when a credit names its own sender as recipient."""

    def __init__(self, user_id):
        self.user_id = user_id
        super().__init__(
            f"User {user_id} can't send a deposit to themselves, a purchase was probably intended"
        )


class SelfReviewForbidden(LedgerError):
    """Raised when a reviewer tries to review a transference they sent."""

    def __init__(self, transference_id, reviewer_id):
        self.transference_id = transference_id
        self.reviewer_id = reviewer_id
        super().__init__(
            f"Reviewer {reviewer_id} can't review transference {transference_id} that they made"
        )


class NotFound(LedgerError):
    """Raised when a transference does not exist."""

    def __init__(self, transference_id):
        self.transference_id = transference_id
        super().__init__(f"No transference exists with the id {transference_id}")


class AlreadyReviewed(LedgerError):
    """Raised when the review of a transference already reached a terminal state."""

    def __init__(self, transference_id, status):
        self.transference_id = transference_id
        self.status = status
        super().__init__(
            f"Transference {transference_id} was already reviewed ({getattr(status, 'value', status)})"
        )


class AmountMismatch(LedgerError):
    """Raised when the reviewed amount differs from the recorded one."""

    def __init__(self, transference_id, expected, supplied):
        self.transference_id = transference_id
        self.expected = expected
        self.supplied = supplied
        super().__init__(
            f"Reviewed amount {supplied} doesn't correspond to the declared amount of transference {transference_id}"
        )


class ConcurrentReviewConflict(LedgerError):
    """
    Raised when the conditional review update matched no row.

    The transference was resolved (or changed) between the read-side checks
    and the write. Callers may re-fetch and try again.
    """

    retryable = True

    def __init__(self, transference_id):
        self.transference_id = transference_id
        super().__init__(
            f"Transference {transference_id} may have already been reviewed by someone else"
        )


class InsufficientBalance(LedgerError):
    """Raised when a debit exceeds the user's available balance."""

    def __init__(self, user_id, requested, available):
        self.user_id = user_id
        self.requested = requested
        self.available = available
        super().__init__(
            f"User {user_id}: requested {requested}, available {available}"
        )
