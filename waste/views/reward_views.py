# waste/views/reward_views.py
import logging

from django.http import JsonResponse
from django.views.decorators.http import require_http_methods

from ..decorators import login_required_json
from ..serializers import TransactionSerializer
from ..utils.ledger import get_user_balance
from ..utils.rewards import RedemptionError, redeem_reward

logger = logging.getLogger(__name__)


@login_required_json
@require_http_methods(["POST"])
def redeem_reward_view(request, reward_id):
    try:
        entry = redeem_reward(request.user, reward_id)
    except RedemptionError as e:
        return JsonResponse({'success': False, 'message': str(e)}, status=400)
    except Exception:
        logger.exception("Error redeeming reward %s for user %s", reward_id, request.user.pk)
        return JsonResponse({'success': False, 'message': 'An unexpected error occurred.'}, status=500)

    return JsonResponse({
        'success': True,
        'message': entry.description,
        'transaction': TransactionSerializer(entry).data,
        'balance': get_user_balance(request.user),
    })
