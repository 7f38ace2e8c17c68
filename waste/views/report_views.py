# waste/views/report_views.py
import logging

from django.http import JsonResponse
from django.views.decorators.http import require_http_methods

from ..decorators import login_required_json
from ..forms import ReportForm, WastePhotoForm
from ..serializers import ReportSerializer
from ..utils.classification import ClassificationError, get_classifier
from ..utils.lifecycle import LifecycleError, submit_report

logger = logging.getLogger(__name__)


def _form_errors(form):
    return {field: [str(e) for e in errors] for field, errors in form.errors.items()}


@login_required_json
@require_http_methods(["POST"])
def analyze_report_image(request):
    """
    Classify a photo before a report is submitted, so the UI can pre-fill
    waste type and amount. Nothing is stored.
    """
    form = WastePhotoForm(request.POST, request.FILES)
    if not form.is_valid():
        return JsonResponse({'success': False, 'message': 'A valid photo is required.', 'errors': _form_errors(form)}, status=400)

    photo = form.cleaned_data['image']
    photo.seek(0)
    try:
        analysis = get_classifier().analyze_waste(photo.read(), photo.content_type)
    except ClassificationError as e:
        logger.warning("Waste analysis failed for user %s: %s", request.user.pk, e)
        return JsonResponse({'success': False, 'message': 'Could not analyze the photo. Please try again.'}, status=502)

    return JsonResponse({'success': True, 'result': analysis.to_dict()})


@login_required_json
@require_http_methods(["POST"])
def submit_report_view(request):
    form = ReportForm(request.POST, request.FILES)
    if not form.is_valid():
        return JsonResponse({'success': False, 'message': 'Please correct the errors below.', 'errors': _form_errors(form)}, status=400)

    try:
        report = submit_report(
            request.user,
            location=form.cleaned_data['location'],
            waste_type=form.cleaned_data['waste_type'],
            amount=form.cleaned_data['amount'],
            image=form.cleaned_data.get('image'),
            verification_result=form.cleaned_data.get('verification_result'),
        )
    except LifecycleError as e:
        return JsonResponse({'success': False, 'message': str(e)}, status=400)
    except Exception:
        logger.exception("Error creating report for user %s", request.user.pk)
        return JsonResponse({'success': False, 'message': 'An unexpected error occurred.'}, status=500)

    return JsonResponse({
        'success': True,
        'message': 'Report submitted successfully! You earned points for reporting waste.',
        'report': ReportSerializer(report).data,
    }, status=201)
