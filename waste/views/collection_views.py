# waste/views/collection_views.py
import logging

from django.http import JsonResponse
from django.views.decorators.http import require_http_methods

from ..decorators import login_required_json
from ..forms import WastePhotoForm
from ..models import Report
from ..serializers import CollectionTaskSerializer
from ..utils.lifecycle import ClaimError, LifecycleError, VerificationOutcome, claim_task, verify_collection

logger = logging.getLogger(__name__)


@login_required_json
@require_http_methods(["POST"])
def claim_task_view(request, report_id):
    try:
        report = claim_task(request.user, report_id)
        return JsonResponse({
            'success': True,
            'message': 'Task claimed! Upload a photo once the waste is collected.',
            'task': CollectionTaskSerializer(report).data,
        })
    except Report.DoesNotExist:
        return JsonResponse({'success': False, 'message': 'Task not found.'}, status=404)
    except ClaimError as e:
        return JsonResponse({'success': False, 'message': str(e)}, status=409)
    except Exception:
        logger.exception("Error in claim_task_view for report %s", report_id)
        return JsonResponse({'success': False, 'message': 'An unexpected error occurred.'}, status=500)


@login_required_json
@require_http_methods(["POST"])
def verify_task_view(request, report_id):
    """
    Collector uploads a photo of the collected waste. A matching photo closes
    the task and awards a random number of points.
    """
    form = WastePhotoForm(request.POST, request.FILES)
    if not form.is_valid():
        return JsonResponse({'success': False, 'message': 'A valid photo is required.'}, status=400)

    photo = form.cleaned_data['image']
    photo.seek(0)
    try:
        outcome = verify_collection(request.user, report_id, photo.read(), photo.content_type)
    except Report.DoesNotExist:
        return JsonResponse({'success': False, 'message': 'Task not found.'}, status=404)
    except LifecycleError as e:
        return JsonResponse({'success': False, 'message': str(e)}, status=403)
    except Exception:
        logger.exception("Error verifying report %s", report_id)
        return JsonResponse({'success': False, 'message': 'An unexpected error occurred.'}, status=500)

    if outcome.status == VerificationOutcome.FAILED:
        return JsonResponse({
            'success': False,
            'status': outcome.status,
            'message': 'Verification could not be completed. Please try again.',
        }, status=502)

    if outcome.status == VerificationOutcome.REJECTED:
        return JsonResponse({
            'success': False,
            'status': outcome.status,
            'result': outcome.result.to_dict(),
            'message': 'Verification failed. The collected waste does not match the reported waste.',
        })

    return JsonResponse({
        'success': True,
        'status': outcome.status,
        'result': outcome.result.to_dict(),
        'reward': outcome.reward,
        'message': f'Verification successful! You earned {outcome.reward} tokens!',
    })
