# waste/utils/notifications.py
import logging

from django.db import DatabaseError

from ..models import Notification

logger = logging.getLogger(__name__)


def notify(user, message, notification_type=Notification.Type.REWARD):
    """Create an unread notification for ``user``."""
    return Notification.objects.create(user=user, message=message, type=notification_type)


def unread_notifications(user):
    try:
        return list(Notification.objects.filter(user=user, is_read=False).order_by('created_at', 'id'))
    except DatabaseError:
        logger.exception("Error getting notifications for user %s", user.pk)
        return []


def mark_notification_as_read(user, notification_id):
    """Flip the read flag on one of the user's notifications. Returns False when the notification is not theirs or does not exist."""
    try:
        updated = Notification.objects.filter(pk=notification_id, user=user).update(is_read=True)
    except DatabaseError:
        logger.exception("Error marking notification %s as read", notification_id)
        return False
    return updated > 0
