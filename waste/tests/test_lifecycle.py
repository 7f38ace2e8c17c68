from unittest.mock import patch

from django.db import DatabaseError
from django.test import TestCase, override_settings

from waste.models import CollectedWaste, Notification, Report, Transaction
from waste.utils.classification import ClassificationError, MalformedClassificationError, MatchResult
from waste.utils.ledger import get_user_balance
from waste.utils.lifecycle import (
    ClaimError,
    LifecycleError,
    VerificationOutcome,
    claim_task,
    collection_tasks,
    pending_reports,
    recent_reports,
    submit_report,
    verify_collection,
)

from .helpers import StubClassifier, make_report, make_user


class SubmitReportTests(TestCase):
    def setUp(self):
        self.user = make_user()

    def test_submit_creates_pending_report_with_bonus_and_notification(self):
        report = submit_report(self.user, '12 Market Street', 'plastic', '2 kg',
                               verification_result={'wasteType': 'plastic', 'quantity': '2 kg', 'confidence': 0.9})

        self.assertEqual(report.status, Report.Status.PENDING)
        self.assertIsNone(report.collector)
        self.assertEqual(report.verification_result['wasteType'], 'plastic')

        entries = Transaction.objects.filter(user=self.user)
        self.assertEqual(entries.count(), 1)
        self.assertEqual(entries[0].type, Transaction.Type.EARNED_REPORT)
        self.assertEqual(entries[0].amount, 10)
        self.assertEqual(entries[0].description, "Points earned for reporting waste")

        notes = Notification.objects.filter(user=self.user)
        self.assertEqual(notes.count(), 1)
        self.assertEqual(notes[0].message, "You've earned 10 points for reporting waste!")
        self.assertEqual(notes[0].type, Notification.Type.REWARD)
        self.assertFalse(notes[0].is_read)

    @override_settings(REPORT_REWARD_POINTS=25)
    def test_report_bonus_is_configurable(self):
        submit_report(self.user, 'Park', 'paper', '1 kg')
        self.assertEqual(get_user_balance(self.user), 25)

    def test_missing_fields_write_nothing(self):
        with self.assertRaises(LifecycleError):
            submit_report(self.user, '', 'plastic', '2 kg')
        self.assertFalse(Report.objects.exists())
        self.assertFalse(Transaction.objects.exists())

    @patch('waste.utils.lifecycle.push_new_report')
    def test_push_is_sent_after_commit(self, mock_push):
        with self.captureOnCommitCallbacks(execute=True):
            report = submit_report(self.user, 'Park', 'paper', '1 kg')
        mock_push.assert_called_once_with(report)

    @patch('waste.utils.lifecycle.push_new_report', side_effect=RuntimeError("push down"))
    def test_push_failure_does_not_undo_report(self, mock_push):
        with self.captureOnCommitCallbacks(execute=True):
            submit_report(self.user, 'Park', 'paper', '1 kg')
        self.assertEqual(Report.objects.count(), 1)
        self.assertEqual(get_user_balance(self.user), 10)


class ClaimTaskTests(TestCase):
    def setUp(self):
        self.reporter = make_user()
        self.collector = make_user('collector@example.com', 'Collector')
        self.report = make_report(self.reporter)

    def test_claim_moves_report_in_progress(self):
        report = claim_task(self.collector, self.report.pk)
        self.assertEqual(report.status, Report.Status.IN_PROGRESS)
        self.assertEqual(report.collector, self.collector)
        self.assertIsNotNone(report.claimed_at)

    def test_second_claim_fails(self):
        claim_task(self.collector, self.report.pk)
        rival = make_user('rival@example.com', 'Rival')

        with self.assertRaises(ClaimError):
            claim_task(rival, self.report.pk)

        self.report.refresh_from_db()
        self.assertEqual(self.report.collector, self.collector)

    def test_claiming_verified_report_fails(self):
        done = make_report(self.reporter, status=Report.Status.VERIFIED, collector=self.collector)
        with self.assertRaises(ClaimError):
            claim_task(self.collector, done.pk)

    def test_unknown_report(self):
        with self.assertRaises(Report.DoesNotExist):
            claim_task(self.collector, 9999)


class VerifyCollectionTests(TestCase):
    def setUp(self):
        self.reporter = make_user()
        self.collector = make_user('collector@example.com', 'Collector')
        self.report = make_report(self.reporter, status=Report.Status.IN_PROGRESS, collector=self.collector)

    def test_match_verifies_and_rewards_collector(self):
        classifier = StubClassifier(result=MatchResult(True, True, 0.95))

        outcome = verify_collection(self.collector, self.report.pk, b'photo', 'image/png', classifier=classifier)

        self.assertTrue(outcome.verified)
        self.assertTrue(10 <= outcome.reward <= 59)
        self.assertEqual(classifier.calls, [('image/png', 'plastic', '2 kg')])

        self.report.refresh_from_db()
        self.assertEqual(self.report.status, Report.Status.VERIFIED)
        self.assertIsNotNone(self.report.verified_at)

        collected = CollectedWaste.objects.get(report=self.report)
        self.assertEqual(collected.collector, self.collector)
        self.assertEqual(collected.verification_result, {'wasteTypeMatch': True, 'quantityMatch': True, 'confidence': 0.95})

        earned = Transaction.objects.filter(user=self.collector, type=Transaction.Type.EARNED_COLLECT)
        self.assertEqual(earned.count(), 1)
        self.assertEqual(earned[0].amount, outcome.reward)
        self.assertEqual(Notification.objects.filter(user=self.collector).count(), 1)

    @patch('waste.utils.lifecycle.random.randint', return_value=42)
    def test_reward_message_names_awarded_points(self, mock_randint):
        verify_collection(self.collector, self.report.pk, b'photo', 'image/png',
                          classifier=StubClassifier(result=MatchResult(True, True, 0.9)))

        mock_randint.assert_called_once_with(10, 59)
        note = Notification.objects.get(user=self.collector)
        self.assertEqual(note.message, "Verification successful! You earned 42 tokens for collecting waste.")
        self.assertEqual(get_user_balance(self.collector), 42)

    def test_policy_promotes_partial_match(self):
        outcome = verify_collection(self.collector, self.report.pk, b'photo', 'image/png',
                                    classifier=StubClassifier(result=MatchResult(True, False, 0.5)))
        self.assertTrue(outcome.verified)
        self.assertEqual(outcome.result, MatchResult(True, True, 0.5))

    def test_mismatch_leaves_task_in_progress(self):
        outcome = verify_collection(self.collector, self.report.pk, b'photo', 'image/png',
                                    classifier=StubClassifier(result=MatchResult(False, True, 0.7)))

        self.assertEqual(outcome.status, VerificationOutcome.REJECTED)
        self.report.refresh_from_db()
        self.assertEqual(self.report.status, Report.Status.IN_PROGRESS)
        self.assertFalse(CollectedWaste.objects.exists())
        self.assertFalse(Transaction.objects.exists())
        self.assertFalse(Notification.objects.exists())

    def test_classifier_failure_is_reported_as_failed(self):
        for error in (ClassificationError("timeout"), MalformedClassificationError("not json")):
            outcome = verify_collection(self.collector, self.report.pk, b'photo', 'image/png',
                                        classifier=StubClassifier(error=error))
            self.assertEqual(outcome.status, VerificationOutcome.FAILED)
            self.assertIsNotNone(outcome.error)

        self.report.refresh_from_db()
        self.assertEqual(self.report.status, Report.Status.IN_PROGRESS)
        self.assertFalse(Transaction.objects.exists())

    def test_only_assigned_collector_may_verify(self):
        stranger = make_user('stranger@example.com', 'Stranger')
        classifier = StubClassifier(result=MatchResult(True, True, 0.95))

        with self.assertRaises(LifecycleError):
            verify_collection(stranger, self.report.pk, b'photo', 'image/png', classifier=classifier)
        self.assertEqual(classifier.calls, [])

    def test_losing_claimant_cannot_verify(self):
        report = make_report(self.reporter)
        rival = make_user('rival@example.com', 'Rival')
        claim_task(rival, report.pk)
        with self.assertRaises(ClaimError):
            claim_task(self.collector, report.pk)

        with self.assertRaises(LifecycleError):
            verify_collection(self.collector, report.pk, b'photo', 'image/png',
                              classifier=StubClassifier(result=MatchResult(True, True, 0.95)))
        self.assertFalse(CollectedWaste.objects.exists())

    def test_pending_report_cannot_be_verified(self):
        pending = make_report(self.reporter)
        with self.assertRaises(LifecycleError):
            verify_collection(self.collector, pending.pk, b'photo', 'image/png',
                              classifier=StubClassifier(result=MatchResult(True, True, 0.95)))

    def test_report_is_only_rewarded_once(self):
        classifier = StubClassifier(result=MatchResult(True, True, 0.95))
        verify_collection(self.collector, self.report.pk, b'photo', 'image/png', classifier=classifier)

        with self.assertRaises(LifecycleError):
            verify_collection(self.collector, self.report.pk, b'photo', 'image/png', classifier=classifier)
        self.assertEqual(Transaction.objects.filter(type=Transaction.Type.EARNED_COLLECT).count(), 1)

    @patch('waste.utils.lifecycle.get_classifier')
    def test_default_classifier_is_used_when_none_given(self, mock_get_classifier):
        mock_get_classifier.return_value = StubClassifier(result=MatchResult(True, True, 0.95))
        outcome = verify_collection(self.collector, self.report.pk, b'photo', 'image/png')
        self.assertTrue(outcome.verified)


class ReadPathTests(TestCase):
    def test_recent_reports_newest_first(self):
        user = make_user()
        first = make_report(user, waste_type='paper')
        second = make_report(user, waste_type='glass')
        self.assertEqual(recent_reports(limit=10), [second, first])
        self.assertEqual(recent_reports(limit=1), [second])

    def test_collection_tasks_include_every_status(self):
        user = make_user()
        make_report(user)
        make_report(user, status=Report.Status.VERIFIED)
        self.assertEqual(len(collection_tasks()), 2)

    def test_pending_reports_excludes_claimed(self):
        user = make_user()
        open_report = make_report(user)
        make_report(user, status=Report.Status.IN_PROGRESS, collector=user)
        self.assertEqual(pending_reports(), [open_report])


class WriteFailureTests(TestCase):
    """A database error part-way through a write rolls the whole step back."""

    def setUp(self):
        self.reporter = make_user()
        self.collector = make_user('collector@example.com', 'Collector')

    @patch('waste.utils.lifecycle.notify', side_effect=DatabaseError("down"))
    def test_submit_rolls_back_report_and_points(self, mock_notify):
        with self.assertRaises(DatabaseError):
            submit_report(self.reporter, '12 Market Street', 'plastic', '2 kg')

        self.assertFalse(Report.objects.exists())
        self.assertFalse(Transaction.objects.exists())
        self.assertFalse(Notification.objects.exists())

    @patch('waste.utils.lifecycle.notify', side_effect=DatabaseError("down"))
    def test_verify_rolls_back_status_points_and_collection(self, mock_notify):
        report = make_report(self.reporter, status=Report.Status.IN_PROGRESS, collector=self.collector)

        with self.assertRaises(DatabaseError):
            verify_collection(self.collector, report.pk, b'photo', 'image/png',
                              classifier=StubClassifier(result=MatchResult(True, True, 0.95)))

        report.refresh_from_db()
        self.assertEqual(report.status, Report.Status.IN_PROGRESS)
        self.assertIsNone(report.verified_at)
        self.assertFalse(Transaction.objects.exists())
        self.assertFalse(CollectedWaste.objects.exists())
        self.assertFalse(Notification.objects.exists())

    @patch('waste.utils.lifecycle.record_transaction', side_effect=DatabaseError("down"))
    def test_verify_rolls_back_when_ledger_write_fails(self, mock_record):
        report = make_report(self.reporter, status=Report.Status.IN_PROGRESS, collector=self.collector)

        with self.assertRaises(DatabaseError):
            verify_collection(self.collector, report.pk, b'photo', 'image/png',
                              classifier=StubClassifier(result=MatchResult(True, True, 0.95)))

        report.refresh_from_db()
        self.assertEqual(report.status, Report.Status.IN_PROGRESS)
        self.assertFalse(CollectedWaste.objects.exists())
