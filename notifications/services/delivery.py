import logging
import threading

from django.conf import settings
from django.db import close_old_connections, transaction

from ..enums import DeliveryMethod
from ..models import Notification
from . import channels

logger = logging.getLogger(__name__)


def delivery_mode(override: str | None = None) -> str:
    return (override or getattr(settings, "NOTIFICATIONS_DELIVERY_MODE", "THREAD") or "THREAD").upper()


def max_attempts() -> int:
    return int(getattr(settings, "NOTIFICATIONS_MAX_ATTEMPTS", 3))


def enqueue_delivery(notification: Notification, *, mode: str | None = None) -> None:
    """
    Hand a notification to the delivery queue.

    Delivery modes:
    - INLINE: deliver during the request
    - THREAD: deliver in a background thread once the transaction commits
    - QUEUE: do not deliver now; rely on `python manage.py process_notifications`
    """
    if notification.delivery_method == DeliveryMethod.IN_APP:
        return

    m = delivery_mode(mode)
    if m == "INLINE":
        deliver(notification)
    elif m == "THREAD":
        nid = notification.id
        transaction.on_commit(lambda: _start_async_delivery(notification_id=nid))
    else:
        # QUEUE (or unknown) -> leave as pending for the worker
        pass


def _start_async_delivery(*, notification_id: int):
    def _run():
        close_old_connections()
        try:
            n = Notification.objects.select_related("user").filter(id=notification_id).first()
            if n:
                deliver(n)
        finally:
            close_old_connections()

    t = threading.Thread(target=_run, name=f"notification-send-{notification_id}", daemon=True)
    t.start()


def deliver(notification: Notification) -> bool:
    """Send one notification over its channel. Records the outcome, never raises."""
    sender = channels.SENDERS.get(notification.delivery_method)
    notification.attempts += 1
    try:
        if sender is None:
            err = f"Unsupported delivery method: {notification.delivery_method}"
        else:
            _, err = sender(notification)
    except Exception as e:
        err = str(e) or e.__class__.__name__

    try:
        if err:
            notification.mark_failed(err)
            logger.warning(
                "Notification %s (%s) delivery failed on attempt %s: %s",
                notification.id, notification.delivery_method, notification.attempts, err,
            )
            return False
        notification.mark_sent()
        return True
    except Exception:
        logger.exception("Could not record delivery outcome for notification %s", notification.id)
        return False


def process_pending(*, limit: int = 200, dry_run: bool = False) -> dict:
    """Drain the queue: pending rows and failed rows still under the attempt cap."""
    qs = (
        Notification.objects.deliverable(max_attempts())
        .select_related("user")
        .order_by("created_at", "id")[:limit]
    )
    counts = {"processed": 0, "sent": 0, "failed": 0}
    for n in qs:
        counts["processed"] += 1
        if dry_run:
            continue
        if deliver(n):
            counts["sent"] += 1
        else:
            counts["failed"] += 1
    return counts

