# waste/utils/lifecycle.py
"""
Report / collection-task lifecycle.

    pending --claim--> in_progress --verify--> verified

``completed`` exists on Report.Status but nothing moves a report into it.
Every function takes the acting user explicitly.
"""

import logging
import random

from django.conf import settings
from django.db import DatabaseError, transaction
from django.utils import timezone

from ..models import CollectedWaste, Notification, Report, Transaction
from .classification import ClassificationError, MalformedClassificationError, apply_match_policy, get_classifier
from .ledger import record_transaction
from .notifications import notify
from .push import push_new_report

logger = logging.getLogger(__name__)


class LifecycleError(Exception):
    """An action is not allowed in the report's current state."""


class ClaimError(LifecycleError):
    """The task was already claimed (or is no longer pending)."""


class VerificationOutcome:
    VERIFIED = 'verified'
    REJECTED = 'rejected'
    FAILED = 'failed'

    def __init__(self, status, result=None, reward=None, collected_waste=None, error=None):
        self.status = status
        self.result = result
        self.reward = reward
        self.collected_waste = collected_waste
        self.error = error

    @property
    def verified(self):
        return self.status == self.VERIFIED


def draw_collection_reward():
    return random.randint(settings.COLLECT_REWARD_MIN, settings.COLLECT_REWARD_MAX)


# --- SUBMIT ---

def submit_report(user, location, waste_type, amount, image=None, verification_result=None):
    """
    Create a pending report and award the reporting bonus.

    The report, the earned_report ledger entry and the notification are
    written in one transaction. Collectors are pushed after commit.
    """
    if not location or not waste_type or not amount:
        raise LifecycleError("Location, waste type and amount are required.")

    points = settings.REPORT_REWARD_POINTS
    with transaction.atomic():
        report = Report.objects.create(
            user=user,
            location=location,
            waste_type=waste_type,
            amount=amount,
            image=image,
            verification_result=verification_result or {},
            status=Report.Status.PENDING,
        )
        record_transaction(user, Transaction.Type.EARNED_REPORT, points, "Points earned for reporting waste")
        notify(user, f"You've earned {points} points for reporting waste!", Notification.Type.REWARD)

    transaction.on_commit(lambda: _push_quietly(report))
    logger.info("Report %s submitted by user %s", report.pk, user.pk)
    return report


def _push_quietly(report):
    try:
        push_new_report(report)
    except Exception:
        logger.exception("Webpush notification error for report %s", report.pk)


# --- CLAIM ---

def claim_task(user, report_id):
    """
    Claim a pending report for collection.

    The UPDATE only matches an unclaimed pending row, so of two concurrent
    claims exactly one succeeds.
    """
    report = Report.objects.get(pk=report_id)
    claimed = Report.objects.filter(
        pk=report.pk,
        status=Report.Status.PENDING,
        collector__isnull=True,
    ).update(
        status=Report.Status.IN_PROGRESS,
        collector=user,
        claimed_at=timezone.now(),
    )
    if not claimed:
        raise ClaimError("This task is no longer available.")

    report.refresh_from_db()
    logger.info("Report %s claimed by user %s", report.pk, user.pk)
    return report


# --- VERIFY ---

def _ensure_collector(report, user):
    if report.status != Report.Status.IN_PROGRESS or report.collector_id != user.pk:
        raise LifecycleError("Only the collector holding this task can verify it.")


def verify_collection(user, report_id, image_bytes, mime_type, classifier=None):
    """
    Check a collector's photo against the report and, on a match, close the task.

    Returns a VerificationOutcome. A classifier failure or a negative match
    leaves the report in progress and writes nothing.
    """
    report = Report.objects.get(pk=report_id)
    _ensure_collector(report, user)

    classifier = classifier or get_classifier()
    try:
        raw = classifier.verify_collection(image_bytes, mime_type, report.waste_type, report.amount)
    except MalformedClassificationError as e:
        logger.warning("Unparseable verification reply for report %s: %s", report.pk, e)
        return VerificationOutcome(VerificationOutcome.FAILED, error=str(e))
    except ClassificationError as e:
        logger.error("Error verifying waste for report %s: %s", report.pk, e)
        return VerificationOutcome(VerificationOutcome.FAILED, error=str(e))

    result = apply_match_policy(raw)
    if not result.is_match:
        logger.info("Verification rejected for report %s: %r", report.pk, result)
        return VerificationOutcome(VerificationOutcome.REJECTED, result=result)

    with transaction.atomic():
        report = Report.objects.select_for_update().get(pk=report_id)
        _ensure_collector(report, user)

        report.status = Report.Status.VERIFIED
        report.verified_at = timezone.now()
        report.save(update_fields=['status', 'verified_at'])

        reward = draw_collection_reward()
        record_transaction(user, Transaction.Type.EARNED_COLLECT, reward, "Points earned for collecting waste")
        collected = CollectedWaste.objects.create(
            report=report,
            collector=user,
            status=Report.Status.VERIFIED,
            verification_result=result.to_dict(),
        )
        notify(user, f"Verification successful! You earned {reward} tokens for collecting waste.", Notification.Type.REWARD)

    logger.info("Report %s verified by user %s, %s points awarded", report.pk, user.pk, reward)
    return VerificationOutcome(VerificationOutcome.VERIFIED, result=result, reward=reward, collected_waste=collected)


# --- READ PATHS ---

def recent_reports(limit=10):
    try:
        return list(Report.objects.select_related('user').order_by('-created_at', '-id')[:limit])
    except DatabaseError:
        logger.exception("Error fetching recent reports")
        return []


def reports_for_user(user):
    try:
        return list(Report.objects.filter(user=user).order_by('-created_at', '-id'))
    except DatabaseError:
        logger.exception("Error fetching reports for user %s", user.pk)
        return []


def pending_reports():
    try:
        return list(Report.objects.filter(status=Report.Status.PENDING).order_by('-created_at', '-id'))
    except DatabaseError:
        logger.exception("Error fetching pending reports")
        return []


def collection_tasks(limit=20):
    try:
        return list(Report.objects.order_by('-created_at', '-id')[:limit])
    except DatabaseError:
        logger.exception("Error fetching waste collection tasks")
        return []


def collected_wastes_for(user):
    try:
        return list(CollectedWaste.objects.filter(collector=user).select_related('report').order_by('-collection_date'))
    except DatabaseError:
        logger.exception("Error fetching collected wastes for user %s", user.pk)
        return []
