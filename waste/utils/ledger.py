# waste/utils/ledger.py
"""
Points ledger helpers.

The Transaction table is the only record of points. Balances are folded from
it on demand and never stored.
"""

import logging
from typing import Iterable, List, Optional

from django.conf import settings
from django.db import DatabaseError

from ..models import Transaction

logger = logging.getLogger(__name__)


def _entry_value(entry) -> int:
    if isinstance(entry, dict):
        entry = Transaction(type=entry['type'], amount=entry['amount'])
    return entry.signed_amount


def fold_balance(transactions: Iterable) -> int:
    """Sum earned_* entries minus redeemed entries, floored at zero."""
    total = 0
    for entry in transactions:
        total += _entry_value(entry)
    return max(total, 0)


def record_transaction(user, transaction_type: str, amount: int, description: str, reward=None) -> Transaction:
    """Append one ledger entry. Database errors propagate to the caller."""
    if amount < 0:
        raise ValueError("Ledger amounts are never negative; the type carries the sign.")
    entry = Transaction.objects.create(
        user=user,
        type=transaction_type,
        amount=amount,
        description=description,
        reward=reward,
    )
    logger.info("Ledger %s: user=%s amount=%s (%s)", transaction_type, user.pk, amount, description)
    return entry


def ledger_balance(user, window: Optional[int] = None) -> int:
    """Fold the user's ledger, newest first, optionally over the latest ``window`` entries."""
    queryset = Transaction.objects.filter(user=user).order_by('-date', '-id').values('type', 'amount')
    if window is not None:
        queryset = queryset[:window]
    return fold_balance(queryset)


def get_user_balance(user) -> int:
    """Current spendable balance. Fails closed: a ledger query error yields 0."""
    try:
        return ledger_balance(user, window=settings.LEDGER_BALANCE_WINDOW)
    except DatabaseError:
        logger.exception("Error computing balance for user %s", user.pk)
        return 0


def recent_transactions(user, limit: Optional[int] = None) -> List[Transaction]:
    if limit is None:
        limit = settings.RECENT_TRANSACTIONS_LIMIT
    try:
        return list(Transaction.objects.filter(user=user).order_by('-date', '-id')[:limit])
    except DatabaseError:
        logger.exception("Error getting reward transactions for user %s", user.pk)
        return []
