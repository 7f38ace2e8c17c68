from django.db import models
from django.contrib.auth.models import AbstractUser
from django.conf import settings


# --- CORE USER MODEL ---
class User(AbstractUser):
    email = models.EmailField(unique=True)
    display_name = models.CharField(max_length=255, blank=True, default='')
    webpush_subscription = models.TextField(blank=True, null=True, help_text="Web push subscription data (JSON)")
    created_at = models.DateTimeField(auto_now_add=True)

    def __str__(self):
        return f"{self.display_name or self.username} <{self.email}>"


# --- REPORTS & COLLECTION ---
class Report(models.Model):
    class Status(models.TextChoices):
        PENDING = 'pending', 'Pending'
        IN_PROGRESS = 'in_progress', 'In Progress'
        # Declared for completeness; no action moves a report here
        COMPLETED = 'completed', 'Completed'
        VERIFIED = 'verified', 'Verified'

    user = models.ForeignKey(settings.AUTH_USER_MODEL, on_delete=models.CASCADE, related_name='reports')
    location = models.TextField()
    waste_type = models.CharField(max_length=255)
    amount = models.CharField(max_length=255, help_text="e.g., 2 kg, 5 bottles")
    image = models.ImageField(upload_to='reports/', null=True, blank=True)
    verification_result = models.JSONField(default=dict, blank=True, help_text="Classifier output captured at submission")
    status = models.CharField(max_length=20, choices=Status.choices, default=Status.PENDING, db_index=True)
    collector = models.ForeignKey(settings.AUTH_USER_MODEL, on_delete=models.SET_NULL, null=True, blank=True, related_name='collection_tasks', db_index=True)
    created_at = models.DateTimeField(auto_now_add=True, db_index=True)
    claimed_at = models.DateTimeField(null=True, blank=True)
    verified_at = models.DateTimeField(null=True, blank=True)

    def __str__(self):
        return f"{self.waste_type} at {self.location} ({self.status})"


class CollectedWaste(models.Model):
    report = models.OneToOneField(Report, on_delete=models.CASCADE, related_name='collected_waste')
    collector = models.ForeignKey(settings.AUTH_USER_MODEL, on_delete=models.CASCADE, related_name='collected_wastes')
    collection_date = models.DateTimeField(auto_now_add=True)
    status = models.CharField(max_length=20, default=Report.Status.VERIFIED)
    verification_result = models.JSONField(default=dict, blank=True)

    def __str__(self):
        return f"Report #{self.report_id} collected by {self.collector}"


# --- REWARDS & LEDGER ---
class RewardCatalogEntry(models.Model):
    """A redeemable reward. Catalog configuration only; awards live in the ledger."""
    name = models.CharField(max_length=255)
    cost = models.PositiveIntegerField(help_text="Points required to redeem")
    description = models.TextField(blank=True, default='')
    collection_info = models.TextField(blank=True, default='', help_text="How the reward is handed over")
    is_available = models.BooleanField(default=True, db_index=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        verbose_name_plural = 'reward catalog entries'
        ordering = ['cost', 'name']

    def __str__(self):
        return f"{self.name} ({self.cost} pts)"


class Transaction(models.Model):
    """
    One immutable ledger entry. ``amount`` is never negative; the sign is
    implied by ``type`` (earned_* adds, redeemed subtracts).
    """
    class Type(models.TextChoices):
        EARNED_REPORT = 'earned_report', 'Earned (report)'
        EARNED_COLLECT = 'earned_collect', 'Earned (collection)'
        REDEEMED = 'redeemed', 'Redeemed'

    user = models.ForeignKey(settings.AUTH_USER_MODEL, on_delete=models.CASCADE, related_name='transactions')
    type = models.CharField(max_length=20, choices=Type.choices)
    amount = models.PositiveIntegerField()
    description = models.CharField(max_length=255)
    reward = models.ForeignKey(RewardCatalogEntry, on_delete=models.SET_NULL, null=True, blank=True, related_name='redemptions')
    date = models.DateTimeField(auto_now_add=True, db_index=True)

    class Meta:
        ordering = ['-date', '-id']

    def __str__(self):
        return f"{self.user} {self.type} {self.amount}"

    @property
    def is_earning(self):
        return self.type.startswith('earned')

    @property
    def signed_amount(self):
        return self.amount if self.is_earning else -self.amount

    def save(self, *args, **kwargs):
        if not self._state.adding:
            raise ValueError("Ledger entries are append-only and cannot be modified.")
        super().save(*args, **kwargs)

    def delete(self, *args, **kwargs):
        raise ValueError("Ledger entries are append-only and cannot be deleted.")


# --- NOTIFICATIONS ---
class Notification(models.Model):
    class Type(models.TextChoices):
        REWARD = 'reward', 'Reward'
        TASK = 'task', 'Task'

    user = models.ForeignKey(settings.AUTH_USER_MODEL, on_delete=models.CASCADE, related_name='notifications')
    message = models.TextField()
    type = models.CharField(max_length=20, choices=Type.choices, default=Type.REWARD)
    is_read = models.BooleanField(default=False, db_index=True)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ['created_at', 'id']

    def __str__(self):
        return f"Notification for {self.user}: {self.message[:40]}"
