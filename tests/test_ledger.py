"""
Test suite for the ledger engine

Covers every kind/status combination of the balance fold, the treasury
surplus adjustment, order independence and the engine's storage reads.
"""

import itertools
import random
import pytest
from datetime import datetime, timezone, timedelta

from financial_service.ledger import compute_balance, LedgerEngine
from financial_service.models import (
    Balance, Review, ReviewedTransference, ReviewStatus, Transference, TransferenceKind
)
from financial_service.persistence import TransferenceStore
from financial_service.storage import InMemoryStorage


USER = "user-a"
OTHER = "user-b"
BASE_DATE = datetime(2024, 1, 1, tzinfo=timezone.utc)

_counter = itertools.count()


def make(kind, amount, sender=USER, recipient=None, status=None):
    """Build a transference with a review in the given status (None for debits)"""
    n = next(_counter)
    transference = Transference(
        id=f"t-{n}",
        sender_id=sender,
        recipient_id=recipient,
        amount=amount,
        kind=kind,
        date=BASE_DATE + timedelta(minutes=n),
    )
    review = None
    if status is not None:
        review = Review(transference_id=transference.id, receipt=f"r-{n}", status=status)
    return ReviewedTransference(transference, review)


def credit(amount, status, sender=USER, recipient=OTHER):
    return make(TransferenceKind.CREDIT, amount, sender, recipient, status)


def purchase(amount, status, sender=USER):
    return make(TransferenceKind.PURCHASE, amount, sender, None, status)


def debit(amount, sender=USER):
    return make(TransferenceKind.DEBIT, amount, sender)


class TestComputeBalance:
    """Balance fold rules"""

    def test_empty_history(self):
        assert compute_balance(USER, []) == Balance(0, 0, 0)

    def test_pending_credit_counts_as_pending(self):
        result = compute_balance(USER, [credit(100, ReviewStatus.PENDING)])
        assert result == Balance(balance=0, treasury=0, pending_balance=100)

    def test_accepted_credit_adds_to_sender_balance(self):
        result = compute_balance(USER, [credit(100, ReviewStatus.ACCEPTED)])
        assert result == Balance(balance=100, treasury=0, pending_balance=0)

    def test_accepted_credit_adds_to_recipient_treasury(self):
        result = compute_balance(OTHER, [credit(100, ReviewStatus.ACCEPTED)])
        assert result == Balance(balance=0, treasury=100, pending_balance=0)

    def test_pending_credit_not_pending_for_recipient(self):
        result = compute_balance(OTHER, [credit(100, ReviewStatus.PENDING)])
        assert result == Balance(0, 0, 0)

    def test_rejected_credit_has_no_effect(self):
        result = compute_balance(USER, [credit(100, ReviewStatus.REJECTED)])
        assert result == Balance(0, 0, 0)
        assert compute_balance(OTHER, [credit(100, ReviewStatus.REJECTED)]) == Balance(0, 0, 0)

    def test_debit_subtracts_from_balance(self):
        history = [credit(100, ReviewStatus.ACCEPTED), debit(30)]
        assert compute_balance(USER, history) == Balance(balance=70, treasury=0, pending_balance=0)

    def test_accepted_purchase_drains_treasury(self):
        history = [
            credit(500, ReviewStatus.ACCEPTED, sender=OTHER, recipient=USER),
            purchase(200, ReviewStatus.ACCEPTED),
        ]
        assert compute_balance(USER, history) == Balance(balance=0, treasury=300, pending_balance=0)

    def test_pending_and_rejected_purchases_have_no_effect(self):
        history = [purchase(200, ReviewStatus.PENDING), purchase(300, ReviewStatus.REJECTED)]
        assert compute_balance(USER, history) == Balance(0, 0, 0)

    def test_negative_treasury_surplus_is_added_to_both(self):
        history = [credit(100, ReviewStatus.ACCEPTED), purchase(40, ReviewStatus.ACCEPTED)]
        # treasury -40 -> surplus 40 is added to balance and treasury
        assert compute_balance(USER, history) == Balance(balance=140, treasury=0, pending_balance=0)

    def test_pending_balance_is_never_adjusted(self):
        history = [credit(70, ReviewStatus.PENDING), purchase(40, ReviewStatus.ACCEPTED)]
        result = compute_balance(USER, history)
        assert result.pending_balance == 70
        assert result.treasury == 0
        assert result.balance == 40

    def test_balance_floor_at_zero(self):
        assert compute_balance(USER, [debit(50)]).balance == 0

    def test_unrelated_debits_ignored(self):
        assert compute_balance(USER, [debit(50, sender=OTHER)]) == Balance(0, 0, 0)

    def test_credit_without_review_is_rejected(self):
        broken = make(TransferenceKind.CREDIT, 10, USER, OTHER, status=None)
        with pytest.raises(ValueError):
            compute_balance(USER, [broken])

    def test_mixed_history(self):
        history = [
            credit(100, ReviewStatus.ACCEPTED),
            credit(50, ReviewStatus.PENDING),
            credit(25, ReviewStatus.REJECTED),
            credit(80, ReviewStatus.ACCEPTED, sender=OTHER, recipient=USER),
            purchase(30, ReviewStatus.ACCEPTED),
            debit(60),
        ]
        assert compute_balance(USER, history) == Balance(balance=40, treasury=50, pending_balance=50)


class TestBalanceProperties:
    """Properties that hold for every history"""

    def _random_history(self, rng, size):
        history = []
        for _ in range(size):
            amount = rng.randint(1, 500)
            choice = rng.choice(["debit", "credit_out", "credit_in", "purchase"])
            status = rng.choice(list(ReviewStatus))
            if choice == "debit":
                history.append(debit(amount))
            elif choice == "credit_out":
                history.append(credit(amount, status))
            elif choice == "credit_in":
                history.append(credit(amount, status, sender=OTHER, recipient=USER))
            else:
                history.append(purchase(amount, status))
        return history

    def test_order_independent_for_all_permutations(self):
        history = [
            credit(100, ReviewStatus.ACCEPTED),
            credit(40, ReviewStatus.PENDING),
            purchase(150, ReviewStatus.ACCEPTED),
            debit(20),
            credit(60, ReviewStatus.ACCEPTED, sender=OTHER, recipient=USER),
        ]
        expected = compute_balance(USER, history)
        for permutation in itertools.permutations(history):
            assert compute_balance(USER, list(permutation)) == expected

    def test_order_independent_random_histories(self):
        rng = random.Random(1234)
        for _ in range(50):
            history = self._random_history(rng, rng.randint(0, 25))
            expected = compute_balance(USER, history)
            shuffled = list(history)
            rng.shuffle(shuffled)
            assert compute_balance(USER, shuffled) == expected

    def test_figures_never_negative(self):
        rng = random.Random(99)
        for _ in range(100):
            result = compute_balance(USER, self._random_history(rng, rng.randint(0, 30)))
            assert result.balance >= 0
            assert result.treasury >= 0
            assert result.pending_balance >= 0

    def test_accepts_any_iterable(self):
        history = [credit(10, ReviewStatus.ACCEPTED), credit(5, ReviewStatus.PENDING)]
        assert compute_balance(USER, iter(history)) == compute_balance(USER, history)


class TestLedgerEngine:
    """Engine reads through the persistence gateway"""

    def setup_method(self):
        self.storage = InMemoryStorage()
        self.store = TransferenceStore(self.storage)

    def _save(self, item):
        self.store.insert_transference_and_review(item.transference, item.review)

    def test_balance_from_storage(self):
        self._save(credit(100, ReviewStatus.ACCEPTED))
        self._save(credit(80, ReviewStatus.ACCEPTED, sender=OTHER, recipient=USER))
        self._save(debit(30))

        engine = LedgerEngine(self.store)
        assert engine.get_balance(USER) == Balance(balance=70, treasury=80, pending_balance=0)

    def test_sender_only_variant(self):
        self._save(credit(100, ReviewStatus.ACCEPTED))
        self._save(credit(80, ReviewStatus.ACCEPTED, sender=OTHER, recipient=USER))

        engine = LedgerEngine(self.store, include_received=False)
        assert engine.get_balance(USER) == Balance(balance=100, treasury=0, pending_balance=0)

    def test_unknown_user_is_all_zero(self):
        engine = LedgerEngine(self.store)
        assert engine.get_balance("nobody") == Balance(0, 0, 0)
