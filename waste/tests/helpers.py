from io import BytesIO

from django.core.files.uploadedfile import SimpleUploadedFile
from PIL import Image

from waste.models import Report, User
from waste.utils.classification import ClassificationError


def make_user(email='reporter@example.com', display_name='Reporter'):
    username = email.split('@')[0]
    return User.objects.create_user(username=username, email=email, password='unused-pass-123', display_name=display_name)


def make_report(user, status=Report.Status.PENDING, collector=None, waste_type='plastic', amount='2 kg'):
    return Report.objects.create(
        user=user,
        location='12 Market Street',
        waste_type=waste_type,
        amount=amount,
        status=status,
        collector=collector,
    )


def make_png(name='waste.png'):
    buffer = BytesIO()
    Image.new('RGB', (8, 8), 'green').save(buffer, 'PNG')
    return SimpleUploadedFile(name, buffer.getvalue(), content_type='image/png')


class StubClassifier:
    """Stands in for GeminiVisionClient; returns a fixed verdict or raises."""

    def __init__(self, result=None, error=None, analysis=None):
        self.result = result
        self.error = error
        self.analysis = analysis
        self.calls = []

    def verify_collection(self, image_bytes, mime_type, waste_type, amount):
        self.calls.append((mime_type, waste_type, amount))
        if self.error:
            raise self.error
        return self.result

    def analyze_waste(self, image_bytes, mime_type):
        if self.error:
            raise self.error
        if self.analysis is None:
            raise ClassificationError("no analysis configured")
        return self.analysis
