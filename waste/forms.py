# waste/forms.py

from django import forms
from django.core.exceptions import ValidationError

from .models import Report

MAX_PHOTO_BYTES = 10 * 1024 * 1024


def validate_photo_size(photo):
    if photo and photo.size > MAX_PHOTO_BYTES:
        raise ValidationError("Photos must be 10 MB or smaller.")


class ReportForm(forms.ModelForm):
    """
    A form for submitting a new waste report. Waste type and amount usually
    arrive pre-filled from the classifier and may be edited by the user.
    """
    verification_result = forms.JSONField(required=False)

    class Meta:
        model = Report
        fields = ['location', 'waste_type', 'amount', 'image']
        labels = {
            'location': 'Location',
            'waste_type': 'Waste Type',
            'amount': 'Estimated Amount (e.g., 2 kg)',
            'image': 'Photo',
        }
        widgets = {
            'location': forms.TextInput(attrs={'placeholder': 'Enter waste location'}),
        }

    def clean_location(self):
        location = self.cleaned_data.get('location', '').strip()
        if not location:
            raise ValidationError('Location is required.')
        return location

    def clean_image(self):
        image = self.cleaned_data.get('image')
        validate_photo_size(image)
        return image

    def clean_verification_result(self):
        result = self.cleaned_data.get('verification_result')
        if result in (None, ''):
            return {}
        if not isinstance(result, dict):
            raise ValidationError('Verification result must be a JSON object.')
        return result


class WastePhotoForm(forms.Form):
    """A single photo upload, used for classification and collection verification."""
    image = forms.ImageField(validators=[validate_photo_size])
