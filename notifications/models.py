from django.conf import settings
from django.db import models
from django.utils import timezone
from .enums import Category, DeliveryMethod, NotificationStatus

class NotificationQuerySet(models.QuerySet):
    def unread(self):
        return self.filter(read_at__isnull=True)

    def deliverable(self, max_attempts: int):
        """Rows the delivery worker should (re)try."""
        return self.exclude(delivery_method=DeliveryMethod.IN_APP).filter(
            models.Q(status=NotificationStatus.PENDING)
            | models.Q(status=NotificationStatus.FAILED, attempts__lt=max_attempts)
        )

    def mark_read(self) -> int:
        """
        Stamp read_at on unread rows. Only rows with nothing left to deliver
        move to `read`; queued email/SMS rows keep their delivery status.
        """
        now = timezone.now()
        unread = self.filter(read_at__isnull=True)
        settled = unread.filter(
            models.Q(delivery_method=DeliveryMethod.IN_APP) | models.Q(status=NotificationStatus.SENT)
        ).update(read_at=now, status=NotificationStatus.READ)
        return settled + unread.update(read_at=now)

class Notification(models.Model):
    """
    A single notification for exactly one user on exactly one delivery method.
    In-app rows are born `sent`; the rest start `pending` and go through the
    delivery queue.
    """
    user = models.ForeignKey(settings.AUTH_USER_MODEL, on_delete=models.CASCADE, related_name="notifications")

    category = models.CharField(max_length=20, choices=Category.choices, default=Category.GENERAL)
    delivery_method = models.CharField(max_length=10, choices=DeliveryMethod.choices, default=DeliveryMethod.IN_APP)
    status = models.CharField(max_length=10, choices=NotificationStatus.choices, default=NotificationStatus.PENDING)

    title = models.CharField(max_length=200)
    message = models.TextField(blank=True)
    data = models.JSONField(default=dict, blank=True)  # arbitrary payload (IDs, routes, errors)
    locale = models.CharField(max_length=8, default="en")

    sent_at = models.DateTimeField(null=True, blank=True)
    read_at = models.DateTimeField(null=True, blank=True)
    attempts = models.PositiveIntegerField(default=0)
    last_error = models.TextField(blank=True)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    objects = NotificationQuerySet.as_manager()

    class Meta:
        indexes = [
            models.Index(fields=["user", "read_at", "created_at"], name="notif_user_read_idx"),
            models.Index(fields=["status", "delivery_method"], name="notif_status_method_idx"),
            models.Index(fields=["category"], name="notif_category_idx"),
        ]
        ordering = ["-created_at", "-id"]

    def __str__(self):
        return f"{self.delivery_method}:{self.title} -> {self.user_id} ({self.status})"

    @property
    def is_read(self) -> bool:
        return self.read_at is not None

    @property
    def is_settled(self) -> bool:
        return self.delivery_method == DeliveryMethod.IN_APP or self.status in (
            NotificationStatus.SENT, NotificationStatus.READ,
        )

    def mark_read(self):
        if self.read_at is None:
            self.read_at = timezone.now()
            if self.is_settled:
                self.status = NotificationStatus.READ
            self.save(update_fields=["read_at", "status", "updated_at"])

    def mark_sent(self):
        # read before delivery finished: keep the read state
        self.status = NotificationStatus.READ if self.read_at else NotificationStatus.SENT
        self.sent_at = timezone.now()
        self.last_error = ""
        self.save(update_fields=["status", "sent_at", "last_error", "attempts", "updated_at"])

    def mark_failed(self, error: str):
        self.status = NotificationStatus.FAILED
        self.last_error = error[:2000]
        self.data = {**(self.data or {}), "error": self.last_error}
        self.save(update_fields=["status", "last_error", "data", "attempts", "updated_at"])
