# waste/utils/push.py
"""
Best-effort web push to users who stored a browser subscription.
"""

import json
import logging

from django.conf import settings
from pywebpush import webpush, WebPushException

from ..models import User

logger = logging.getLogger(__name__)


def push_configured():
    return bool(settings.WEBPUSH_SETTINGS.get('VAPID_PRIVATE_KEY'))


def send_push(user, message_data):
    """Send one push message. Returns False when the user has no usable subscription."""
    if not user.webpush_subscription:
        return False
    try:
        subscription_info = json.loads(user.webpush_subscription)
    except json.JSONDecodeError:
        logger.warning("Discarding malformed push subscription for user %s", user.pk)
        return False

    webpush(
        subscription_info=subscription_info,
        data=json.dumps(message_data),
        vapid_private_key=settings.WEBPUSH_SETTINGS['VAPID_PRIVATE_KEY'],
        vapid_claims={
            "sub": f"mailto:{settings.WEBPUSH_SETTINGS['VAPID_ADMIN_EMAIL']}"
        }
    )
    return True


def push_new_report(report):
    """Tell subscribed collectors that a new report is waiting. Returns the number of pushes sent."""
    if not push_configured():
        return 0

    message_data = {
        'title': 'New waste report nearby',
        'body': f'{report.waste_type} ({report.amount}) at {report.location}',
        'url': '/collect/',
    }
    subscribers = User.objects.exclude(pk=report.user_id).exclude(
        webpush_subscription__isnull=True
    ).exclude(webpush_subscription='')

    sent = 0
    for subscriber in subscribers:
        try:
            if send_push(subscriber, message_data):
                sent += 1
        except WebPushException as e:
            logger.warning("Failed to send push to user %s: %s", subscriber.pk, e)
    return sent
