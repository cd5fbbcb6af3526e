import logging
from typing import Iterable

from django.contrib.auth import get_user_model
from django.db import transaction
from django.utils import timezone

from accounts.enums import UserRole
from notifications.enums import Category, DeliveryMethod, NotificationStatus
from notifications.models import Notification
from .delivery import enqueue_delivery

logger = logging.getLogger(__name__)

User = get_user_model()

@transaction.atomic
def notify_user(
    *,
    user,
    category: str = Category.GENERAL,
    title: str,
    message: str = "",
    data: dict | None = None,
    delivery_method: str = DeliveryMethod.IN_APP,
    locale: str = "en",
) -> Notification:
    """
    Record a notification for one user. In-app rows are final on creation;
    every other method is handed to the delivery queue.
    """
    in_app = delivery_method == DeliveryMethod.IN_APP
    n = Notification.objects.create(
        user=user,
        category=category,
        delivery_method=delivery_method,
        status=NotificationStatus.SENT if in_app else NotificationStatus.PENDING,
        sent_at=timezone.now() if in_app else None,
        title=title,
        message=message,
        data=data or {},
        locale=locale,
    )
    if not in_app:
        enqueue_delivery(n)
    return n

def create_in_app_notification(
    *,
    user,
    title: str,
    message: str = "",
    category: str = Category.GENERAL,
    data: dict | None = None,
    locale: str = "en",
) -> Notification:
    return notify_user(
        user=user,
        category=category,
        title=title,
        message=message,
        data=data,
        delivery_method=DeliveryMethod.IN_APP,
        locale=locale,
    )

def notify_users(
    *,
    users: Iterable,
    category: str = Category.GENERAL,
    title: str,
    message: str = "",
    data: dict | None = None,
    delivery_method: str = DeliveryMethod.IN_APP,
    locale: str = "en",
) -> list[Notification]:
    return [
        notify_user(
            user=u,
            category=category,
            title=title,
            message=message,
            data=data,
            delivery_method=delivery_method,
            locale=locale,
        )
        for u in users
    ]

def notify_role(
    *,
    role: str,
    category: str = Category.GENERAL,
    title: str,
    message: str = "",
    data: dict | None = None,
    delivery_method: str = DeliveryMethod.IN_APP,
    locale: str = "en",
    exclude_ids: Iterable[int] = (),
) -> list[Notification]:
    """Send the same notification to every active user holding `role`."""
    users = User.objects.active().filter(role=role).exclude(id__in=list(exclude_ids))
    return notify_users(
        users=users,
        category=category,
        title=title,
        message=message,
        data=data,
        delivery_method=delivery_method,
        locale=locale,
    )

def send_bulk_notification(
    *,
    user_ids: Iterable[int],
    title: str,
    message: str,
    category: str = Category.SYSTEM,
    delivery_method: str = DeliveryMethod.EMAIL,
    data: dict | None = None,
    locale: str = "en",
) -> list[Notification]:
    users = User.objects.filter(id__in=list(user_ids))
    sent = notify_users(
        users=users,
        category=category,
        title=title,
        message=message,
        data=data,
        delivery_method=delivery_method,
        locale=locale,
    )
    logger.info("Bulk notification %r queued for %s user(s) via %s", title, len(sent), delivery_method)
    return sent

# ─────────────────────────────────────────────────────────────
# Registration
# ─────────────────────────────────────────────────────────────

def notify_registration(user, locale: str = "en") -> list[Notification]:
    """Welcome the new patient and tell clinical staff someone registered."""
    now = timezone.now().isoformat()
    out = [
        notify_user(
            user=user,
            category=Category.REGISTRATION,
            title="Registration confirmed",
            message="Welcome to the University Health Center. Your account has been created.",
            data={"patient_id": user.id, "registration_date": now},
            delivery_method=DeliveryMethod.EMAIL,
            locale=locale,
        ),
        create_in_app_notification(
            user=user,
            category=Category.REGISTRATION,
            title="Welcome",
            message="Your registration was successful. You can now request appointments.",
            locale=locale,
        ),
    ]
    payload = {"patient_id": user.id, "patient_name": user.get_full_name(), "patient_role": user.role}
    for method in (DeliveryMethod.EMAIL, DeliveryMethod.IN_APP):
        out += notify_role(
            role=UserRole.CLINICAL_STAFF,
            category=Category.REGISTRATION,
            title="New patient registered",
            message=f"{user.get_full_name()} has registered and may need attention.",
            data=payload,
            delivery_method=method,
            locale=locale,
        )
    return out

# ─────────────────────────────────────────────────────────────
# Appointments
# ─────────────────────────────────────────────────────────────

def appointment_message_data(appt) -> dict:
    """Interpolation data for appointments.workflow.get_notification_message."""
    doctor = getattr(appt, "doctor", None)
    return {
        "doctor_name": doctor.get_full_name() if doctor else "",
        "date": appt.date.strftime("%d/%m/%Y") if appt.date else "",
        "time": appt.time.strftime("%H:%M") if appt.time else "",
        "new_date": appt.rescheduled_date.strftime("%d/%m/%Y") if appt.rescheduled_date else "",
        "new_time": appt.rescheduled_time.strftime("%H:%M") if appt.rescheduled_time else "",
        "rejection_reason": appt.rejection_reason,
        "cancel_reason": appt.cancellation_reason,
    }

def _appt_payload(appt, **extra) -> dict:
    return {"appointment_id": appt.id, "status": appt.status, **extra}

def notify_appointment_requested(appt, locale: str = "en") -> list[Notification]:
    from appointments.workflow import get_notification_message

    msg = get_notification_message(appt.status, appointment_message_data(appt))
    out = [
        create_in_app_notification(
            user=appt.patient,
            category=Category.APPOINTMENT,
            title=msg["title"],
            message=msg["message"],
            data=_appt_payload(appt, type=msg["type"]),
            locale=locale,
        )
    ]
    out += notify_role(
        role=UserRole.CLINICAL_STAFF,
        category=Category.APPOINTMENT,
        title="New appointment request",
        message=f"{appt.patient.get_full_name()} requested an appointment on "
                f"{appt.date:%d/%m/%Y} at {appt.time:%H:%M} ({appt.priority}).",
        data=_appt_payload(appt, patient_id=appt.patient_id, priority=appt.priority),
        locale=locale,
    )
    return out

def notify_appointment_status(appt, previous_status: str | None = None, locale: str = "en") -> list[Notification]:
    """
    The patient gets the status message on every change (in-app and email).
    The doctor is told when an appointment lands on their list.
    """
    from appointments.enums import ApptStatus
    from appointments.workflow import get_notification_message

    msg = get_notification_message(appt.status, appointment_message_data(appt))
    payload = _appt_payload(appt, previous_status=previous_status, type=msg["type"])
    out = [
        notify_user(
            user=appt.patient,
            category=Category.APPOINTMENT,
            title=msg["title"],
            message=msg["message"],
            data=payload,
            delivery_method=method,
            locale=locale,
        )
        for method in (DeliveryMethod.IN_APP, DeliveryMethod.EMAIL)
    ]

    if appt.status == ApptStatus.ASSIGNED and appt.doctor_id:
        for method in (DeliveryMethod.IN_APP, DeliveryMethod.EMAIL):
            out.append(
                notify_user(
                    user=appt.doctor,
                    category=Category.APPOINTMENT,
                    title="New appointment assigned",
                    message=f"{appt.patient.get_full_name()} on {appt.date:%d/%m/%Y} at "
                            f"{appt.time:%H:%M} is waiting for your confirmation.",
                    data=_appt_payload(appt, patient_id=appt.patient_id),
                    delivery_method=method,
                    locale=locale,
                )
            )
    return out

def notify_appointment_reminder(appt, locale: str = "en") -> list[Notification]:
    doctor = appt.doctor.get_full_name() if appt.doctor_id else ""
    text = f"Reminder: you have an appointment with Dr. {doctor} on {appt.date:%d/%m/%Y} at {appt.time:%H:%M}."
    data = _appt_payload(appt, appointment_date=appt.date.isoformat(), appointment_time=appt.time.strftime("%H:%M"))
    return [
        notify_user(
            user=appt.patient,
            category=Category.REMINDER,
            title="Appointment reminder",
            message=text,
            data=data,
            delivery_method=method,
            locale=locale,
        )
        for method in (DeliveryMethod.EMAIL, DeliveryMethod.IN_APP)
    ]
