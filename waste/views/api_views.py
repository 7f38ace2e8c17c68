# waste/views/api_views.py
"""
Read-only JSON API polled by the UI.
"""

from rest_framework.permissions import AllowAny
from rest_framework.response import Response
from rest_framework.views import APIView

from ..serializers import (
    CollectedWasteSerializer,
    CollectionTaskSerializer,
    NotificationSerializer,
    ReportSerializer,
    RewardSerializer,
    TransactionSerializer,
    UserSerializer,
)
from ..utils.impact import impact_stats, leaderboard
from ..utils.ledger import get_user_balance, recent_transactions
from ..utils.lifecycle import collected_wastes_for, collection_tasks, pending_reports, recent_reports, reports_for_user
from ..utils.notifications import unread_notifications
from ..utils.rewards import available_rewards


def _limit(request, default, maximum=100):
    try:
        value = int(request.query_params.get('limit', default))
    except (TypeError, ValueError):
        return default
    return max(1, min(value, maximum))


class MeAPIView(APIView):
    def get(self, request):
        return Response(UserSerializer(request.user).data)


class RecentReportsAPIView(APIView):
    def get(self, request):
        reports = recent_reports(limit=_limit(request, 10))
        return Response(ReportSerializer(reports, many=True).data)


class MyReportsAPIView(APIView):
    def get(self, request):
        return Response(ReportSerializer(reports_for_user(request.user), many=True).data)


class PendingReportsAPIView(APIView):
    """Reports nobody has claimed yet."""
    def get(self, request):
        return Response(ReportSerializer(pending_reports(), many=True).data)


class CollectionTasksAPIView(APIView):
    def get(self, request):
        tasks = collection_tasks(limit=_limit(request, 20))
        return Response(CollectionTaskSerializer(tasks, many=True).data)


class CollectedWasteAPIView(APIView):
    def get(self, request):
        return Response(CollectedWasteSerializer(collected_wastes_for(request.user), many=True).data)


class BalanceAPIView(APIView):
    def get(self, request):
        return Response({'balance': get_user_balance(request.user)})


class TransactionsAPIView(APIView):
    def get(self, request):
        entries = recent_transactions(request.user)
        return Response(TransactionSerializer(entries, many=True).data)


class RewardsAPIView(APIView):
    def get(self, request):
        return Response(RewardSerializer(available_rewards(request.user), many=True).data)


class NotificationsAPIView(APIView):
    def get(self, request):
        return Response(NotificationSerializer(unread_notifications(request.user), many=True).data)


class ImpactAPIView(APIView):
    permission_classes = [AllowAny]

    def get(self, request):
        return Response(impact_stats())


class LeaderboardAPIView(APIView):
    def get(self, request):
        return Response(leaderboard(limit=_limit(request, 20)))
