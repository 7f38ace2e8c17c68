# waste/utils/__init__.py
from .ledger import (
    fold_balance,
    get_user_balance,
    record_transaction,
    recent_transactions,
)
from .rewards import (
    REDEEM_ALL_REWARD_ID,
    RedemptionError,
    available_rewards,
    redeem_reward,
)
from .lifecycle import (
    ClaimError,
    LifecycleError,
    VerificationOutcome,
    claim_task,
    submit_report,
    verify_collection,
)
from .notifications import (
    mark_notification_as_read,
    notify,
    unread_notifications,
)

__all__ = [
    'fold_balance',
    'get_user_balance',
    'record_transaction',
    'recent_transactions',
    'REDEEM_ALL_REWARD_ID',
    'RedemptionError',
    'available_rewards',
    'redeem_reward',
    'ClaimError',
    'LifecycleError',
    'VerificationOutcome',
    'claim_task',
    'submit_report',
    'verify_collection',
    'mark_notification_as_read',
    'notify',
    'unread_notifications',
]
