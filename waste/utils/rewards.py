# waste/utils/rewards.py
import logging

from django.conf import settings
from django.db import DatabaseError, transaction

from ..models import RewardCatalogEntry, Transaction, User
from .ledger import get_user_balance, ledger_balance, record_transaction

logger = logging.getLogger(__name__)

# Synthetic catalog id meaning "redeem my whole balance"
REDEEM_ALL_REWARD_ID = 0


class RedemptionError(Exception):
    """Raised when a redemption is refused. Nothing has been written."""


def points_entry(balance):
    return {
        'id': REDEEM_ALL_REWARD_ID,
        'name': 'Your Points',
        'cost': balance,
        'description': 'Redeem your earned points',
        'collection_info': 'Points earned from reporting and collecting waste',
    }


def available_rewards(user):
    """The "Your Points" entry followed by every available catalog entry."""
    balance = get_user_balance(user)
    try:
        catalog = list(
            RewardCatalogEntry.objects.filter(is_available=True)
            .order_by('cost', 'name')
            .values('id', 'name', 'cost', 'description', 'collection_info')
        )
    except DatabaseError:
        logger.exception("Error fetching available rewards")
        return []
    return [points_entry(balance)] + catalog


def redeem_reward(user, reward_id):
    """
    Redeem a catalog entry, or the whole balance when ``reward_id`` is 0.

    The user row is locked for the duration so two redemptions by the same
    user are serialized; the balance check and the ledger append commit
    together. Returns the appended ``Transaction``.
    """
    reward_id = int(reward_id)
    with transaction.atomic():
        User.objects.select_for_update().filter(pk=user.pk).first()
        balance = ledger_balance(user, window=settings.LEDGER_BALANCE_WINDOW)

        if reward_id == REDEEM_ALL_REWARD_ID:
            entry = record_transaction(
                user,
                Transaction.Type.REDEEMED,
                balance,
                f"Redeemed all points: {balance}",
            )
            return entry

        reward = RewardCatalogEntry.objects.filter(pk=reward_id, is_available=True).first()
        if reward is None or balance < reward.cost:
            logger.info("Refused redemption of reward %s by user %s (balance %s)", reward_id, user.pk, balance)
            raise RedemptionError("Insufficient points or invalid reward")

        return record_transaction(
            user,
            Transaction.Type.REDEEMED,
            reward.cost,
            f"Redeemed: {reward.name}",
            reward=reward,
        )
