# waste/serializers.py
from rest_framework import serializers

from .models import CollectedWaste, Notification, Report, Transaction, User


class UserSerializer(serializers.ModelSerializer):
    class Meta:
        model = User
        fields = ['id', 'email', 'display_name', 'created_at']


class ReportSerializer(serializers.ModelSerializer):
    image_url = serializers.SerializerMethodField()

    class Meta:
        model = Report
        fields = [
            'id', 'user', 'location', 'waste_type', 'amount', 'image_url',
            'verification_result', 'status', 'collector', 'created_at',
        ]

    def get_image_url(self, obj):
        return obj.image.url if obj.image else ''


class CollectionTaskSerializer(serializers.ModelSerializer):
    """A report as seen by collectors."""
    date = serializers.DateTimeField(source='created_at', format='%Y-%m-%d')

    class Meta:
        model = Report
        fields = ['id', 'location', 'waste_type', 'amount', 'status', 'date', 'collector']


class CollectedWasteSerializer(serializers.ModelSerializer):
    class Meta:
        model = CollectedWaste
        fields = ['id', 'report', 'collector', 'collection_date', 'status', 'verification_result']


class TransactionSerializer(serializers.ModelSerializer):
    date = serializers.DateTimeField(format='%Y-%m-%d')

    class Meta:
        model = Transaction
        fields = ['id', 'type', 'amount', 'description', 'date']


class RewardSerializer(serializers.Serializer):
    """Catalog entries plus the synthetic "Your Points" entry."""
    id = serializers.IntegerField()
    name = serializers.CharField()
    cost = serializers.IntegerField()
    description = serializers.CharField(allow_blank=True)
    collection_info = serializers.CharField(allow_blank=True)


class NotificationSerializer(serializers.ModelSerializer):
    class Meta:
        model = Notification
        fields = ['id', 'message', 'type', 'is_read', 'created_at']
