# waste/views/__init__.py

# Import all views from the separated files
from .report_views import *
from .collection_views import *
from .reward_views import *
from .notification_views import *
from .api_views import *

# --- PUBLIC VIEWS ---
from django.conf import settings
from django.http import JsonResponse
from django.views.decorators.http import require_GET


@require_GET
def client_config(request):
    """Keys and intervals the browser needs: maps autocomplete, push, notification polling."""
    return JsonResponse({
        'google_maps_api_key': settings.GOOGLE_MAPS_API_KEY,
        'vapid_public_key': settings.WEBPUSH_SETTINGS['VAPID_PUBLIC_KEY'],
        'notification_poll_seconds': settings.NOTIFICATION_POLL_SECONDS,
        'authenticated': request.user.is_authenticated,
    })
