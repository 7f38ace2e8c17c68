from django.contrib import admin
from django.contrib.auth.admin import UserAdmin

from .models import CollectedWaste, Notification, Report, RewardCatalogEntry, Transaction, User


@admin.register(User)
class WasteUserAdmin(UserAdmin):
    list_display = ('username', 'email', 'display_name', 'is_staff', 'created_at')
    search_fields = ('username', 'email', 'display_name')
    fieldsets = UserAdmin.fieldsets + (
        ('Profile', {'fields': ('display_name', 'webpush_subscription')}),
    )


@admin.register(Report)
class ReportAdmin(admin.ModelAdmin):
    list_display = ('id', 'waste_type', 'amount', 'status', 'user', 'collector', 'created_at')
    list_filter = ('status',)
    search_fields = ('location', 'waste_type')
    raw_id_fields = ('user', 'collector')


@admin.register(CollectedWaste)
class CollectedWasteAdmin(admin.ModelAdmin):
    list_display = ('report', 'collector', 'status', 'collection_date')


@admin.register(RewardCatalogEntry)
class RewardCatalogEntryAdmin(admin.ModelAdmin):
    list_display = ('name', 'cost', 'is_available', 'updated_at')
    list_filter = ('is_available',)
    list_editable = ('is_available',)


@admin.register(Transaction)
class TransactionAdmin(admin.ModelAdmin):
    """The ledger is append-only, so the admin can only look."""
    list_display = ('user', 'type', 'amount', 'description', 'date')
    list_filter = ('type',)
    search_fields = ('user__email', 'description')

    def has_add_permission(self, request):
        return False

    def has_change_permission(self, request, obj=None):
        return False

    def has_delete_permission(self, request, obj=None):
        return False


@admin.register(Notification)
class NotificationAdmin(admin.ModelAdmin):
    list_display = ('user', 'type', 'message', 'is_read', 'created_at')
    list_filter = ('type', 'is_read')
