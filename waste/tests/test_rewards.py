from unittest.mock import patch

from django.db import DatabaseError
from django.test import TestCase

from waste.models import RewardCatalogEntry, Transaction
from waste.utils.ledger import get_user_balance, record_transaction
from waste.utils.rewards import REDEEM_ALL_REWARD_ID, RedemptionError, available_rewards, redeem_reward

from .helpers import make_user


class AvailableRewardsTests(TestCase):
    def setUp(self):
        self.user = make_user()
        record_transaction(self.user, Transaction.Type.EARNED_REPORT, 10, "Points earned for reporting waste")
        self.bag = RewardCatalogEntry.objects.create(name='Reusable Bag', cost=50, description='Cotton bag')
        RewardCatalogEntry.objects.create(name='Retired Mug', cost=5, is_available=False)

    def test_points_entry_comes_first_and_carries_balance(self):
        rewards = available_rewards(self.user)
        self.assertEqual(rewards[0]['id'], REDEEM_ALL_REWARD_ID)
        self.assertEqual(rewards[0]['name'], 'Your Points')
        self.assertEqual(rewards[0]['cost'], 10)

    def test_unavailable_entries_are_hidden(self):
        names = [r['name'] for r in available_rewards(self.user)]
        self.assertEqual(names, ['Your Points', 'Reusable Bag'])


class RedeemRewardTests(TestCase):
    def setUp(self):
        self.user = make_user()
        record_transaction(self.user, Transaction.Type.EARNED_REPORT, 10, "Points earned for reporting waste")
        record_transaction(self.user, Transaction.Type.EARNED_COLLECT, 45, "Points earned for collecting waste")

    def test_redeem_all_spends_whole_balance(self):
        entry = redeem_reward(self.user, REDEEM_ALL_REWARD_ID)

        self.assertEqual(entry.type, Transaction.Type.REDEEMED)
        self.assertEqual(entry.amount, 55)
        self.assertEqual(entry.description, "Redeemed all points: 55")
        self.assertEqual(get_user_balance(self.user), 0)

    def test_redeem_all_with_empty_balance_records_zero_entry(self):
        redeem_reward(self.user, REDEEM_ALL_REWARD_ID)
        entry = redeem_reward(self.user, REDEEM_ALL_REWARD_ID)

        self.assertEqual(entry.amount, 0)
        self.assertEqual(get_user_balance(self.user), 0)

    def test_redeem_catalog_entry_deducts_cost(self):
        bag = RewardCatalogEntry.objects.create(name='Reusable Bag', cost=50)

        entry = redeem_reward(self.user, bag.pk)

        self.assertEqual(entry.amount, 50)
        self.assertEqual(entry.reward, bag)
        self.assertEqual(entry.description, "Redeemed: Reusable Bag")
        self.assertEqual(get_user_balance(self.user), 5)

    def test_reward_id_may_arrive_as_string(self):
        bag = RewardCatalogEntry.objects.create(name='Reusable Bag', cost=50)
        entry = redeem_reward(self.user, str(bag.pk))
        self.assertEqual(entry.reward, bag)

    def test_insufficient_points_leave_ledger_untouched(self):
        bottle = RewardCatalogEntry.objects.create(name='Steel Bottle', cost=150)
        before = Transaction.objects.count()

        with self.assertRaisesMessage(RedemptionError, "Insufficient points or invalid reward"):
            redeem_reward(self.user, bottle.pk)

        self.assertEqual(Transaction.objects.count(), before)
        self.assertEqual(get_user_balance(self.user), 55)

    def test_unknown_reward_is_refused(self):
        with self.assertRaises(RedemptionError):
            redeem_reward(self.user, 9999)

    def test_unavailable_reward_is_refused(self):
        mug = RewardCatalogEntry.objects.create(name='Retired Mug', cost=5, is_available=False)
        with self.assertRaises(RedemptionError):
            redeem_reward(self.user, mug.pk)
        self.assertFalse(Transaction.objects.filter(type=Transaction.Type.REDEEMED).exists())

    def test_exact_balance_can_be_spent(self):
        voucher = RewardCatalogEntry.objects.create(name='Voucher', cost=55)
        redeem_reward(self.user, voucher.pk)
        self.assertEqual(get_user_balance(self.user), 0)

    @patch('waste.utils.rewards.record_transaction', side_effect=DatabaseError("down"))
    def test_database_error_propagates_and_nothing_is_redeemed(self, mock_record):
        bag = RewardCatalogEntry.objects.create(name='Reusable Bag', cost=50)

        for reward_id in (bag.pk, REDEEM_ALL_REWARD_ID):
            with self.assertRaises(DatabaseError):
                redeem_reward(self.user, reward_id)

        self.assertFalse(Transaction.objects.filter(type=Transaction.Type.REDEEMED).exists())
        self.assertEqual(get_user_balance(self.user), 55)
