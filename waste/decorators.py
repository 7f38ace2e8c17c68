# waste/decorators.py
from functools import wraps

from django.http import JsonResponse


def login_required_json(view_func):
    """Like login_required, but answers 401 JSON instead of redirecting to a login page."""
    @wraps(view_func)
    def _wrapped_view(request, *args, **kwargs):
        if not request.user.is_authenticated:
            return JsonResponse({'success': False, 'message': 'Please log in first.'}, status=401)
        return view_func(request, *args, **kwargs)
    return _wrapped_view
