# waste/urls.py
from django.urls import path
from . import views

urlpatterns = [
    # --- Public ---
    path('api/config/', views.client_config, name='client_config'),
    path('api/impact/', views.ImpactAPIView.as_view(), name='impact_stats'),

    # --- Reports ---
    path('api/reports/analyze/', views.analyze_report_image, name='analyze_report_image'),
    path('reports/submit/', views.submit_report_view, name='submit_report'),
    path('api/reports/recent/', views.RecentReportsAPIView.as_view(), name='recent_reports'),
    path('api/reports/mine/', views.MyReportsAPIView.as_view(), name='my_reports'),
    path('api/reports/pending/', views.PendingReportsAPIView.as_view(), name='pending_reports'),

    # --- Collection tasks ---
    path('api/tasks/', views.CollectionTasksAPIView.as_view(), name='collection_tasks'),
    path('tasks/<int:report_id>/claim/', views.claim_task_view, name='claim_task'),
    path('tasks/<int:report_id>/verify/', views.verify_task_view, name='verify_task'),
    path('api/collected/', views.CollectedWasteAPIView.as_view(), name='collected_wastes'),

    # --- Points & rewards ---
    path('api/balance/', views.BalanceAPIView.as_view(), name='balance'),
    path('api/transactions/', views.TransactionsAPIView.as_view(), name='transactions'),
    path('api/rewards/', views.RewardsAPIView.as_view(), name='available_rewards'),
    path('rewards/<int:reward_id>/redeem/', views.redeem_reward_view, name='redeem_reward'),
    path('api/leaderboard/', views.LeaderboardAPIView.as_view(), name='leaderboard'),

    # --- Notifications ---
    path('api/notifications/', views.NotificationsAPIView.as_view(), name='notifications'),
    path('notifications/<int:notification_id>/read/', views.mark_notification_read_view, name='mark_notification_read'),
    path('api/save-webpush-subscription/', views.save_webpush_subscription, name='save_webpush_subscription'),

    # --- Account ---
    path('api/me/', views.MeAPIView.as_view(), name='me'),
]
