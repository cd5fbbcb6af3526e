"""appointments.signals

In-process announcements of appointment lifecycle events. Receivers below
turn them into notification records; other apps may connect their own.

    appointment_requested(sender, appointment)
    appointment_status_changed(sender, appointment, previous_status, actor, action)
"""

import logging

from django.dispatch import Signal, receiver

from notifications.services.notify import notify_appointment_requested, notify_appointment_status

logger = logging.getLogger(__name__)

appointment_requested = Signal()
appointment_status_changed = Signal()


@receiver(appointment_requested)
def _notify_new_request(sender, appointment, **kwargs):
    try:
        notify_appointment_requested(appointment)
    except Exception:
        logger.exception("Could not queue notifications for new appointment %s", appointment.id)


@receiver(appointment_status_changed)
def _notify_status_change(sender, appointment, previous_status=None, **kwargs):
    try:
        notify_appointment_status(appointment, previous_status=previous_status)
    except Exception:
        logger.exception("Could not queue notifications for appointment %s", appointment.id)
