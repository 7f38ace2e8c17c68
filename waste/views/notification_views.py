# waste/views/notification_views.py
import json
import logging

from django.http import JsonResponse
from django.views.decorators.http import require_http_methods

from ..decorators import login_required_json
from ..utils.notifications import mark_notification_as_read

logger = logging.getLogger(__name__)


@login_required_json
@require_http_methods(["POST"])
def mark_notification_read_view(request, notification_id):
    if not mark_notification_as_read(request.user, notification_id):
        return JsonResponse({'success': False, 'message': 'Notification not found.'}, status=404)
    return JsonResponse({'success': True})


@login_required_json
@require_http_methods(["POST"])
def save_webpush_subscription(request):
    """Store the browser's push subscription so new reports can be pushed to this user"""
    try:
        data = json.loads(request.body)
    except json.JSONDecodeError:
        return JsonResponse({'success': False, 'message': 'Invalid JSON'}, status=400)

    if not isinstance(data, dict) or not data.get('endpoint'):
        return JsonResponse({'success': False, 'message': 'Subscription endpoint is required'}, status=400)

    request.user.webpush_subscription = json.dumps(data)
    request.user.save(update_fields=['webpush_subscription'])
    logger.info("Saved push subscription for user %s", request.user.pk)
    return JsonResponse({'success': True, 'message': 'Subscription saved successfully'})
