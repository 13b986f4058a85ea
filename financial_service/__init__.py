"""
Financial Service

Transference ledger for users and a shared treasury. Credits and purchases
are reconciled through a reviewer approval workflow; debits take effect
immediately and are checked against the balance atomically.
"""

__version__ = "1.0.0"
