"""
Queue day-before reminders for confirmed appointments.

Usage:
    python manage.py send_reminders                     # appointments tomorrow
    python manage.py send_reminders --date 2025-03-14
    python manage.py send_reminders --dry-run
"""

import logging

from django.core.management.base import BaseCommand, CommandError
from django.utils import timezone
from django.utils.dateparse import parse_date

from appointments.enums import ApptStatus
from appointments.models import Appointment
from notifications.services.notify import notify_appointment_reminder

logger = logging.getLogger(__name__)


class Command(BaseCommand):
    help = "Queue reminders for confirmed appointments on a given day (default: tomorrow)"

    def add_arguments(self, parser):
        parser.add_argument("--date", type=str, default=None, help="Day to remind about (YYYY-MM-DD)")
        parser.add_argument("--dry-run", action="store_true", help="List appointments without queueing reminders")

    def handle(self, *args, **options):
        if options["date"]:
            day = parse_date(options["date"])
            if day is None:
                raise CommandError(f"Invalid date: {options['date']}")
        else:
            day = timezone.localdate() + timezone.timedelta(days=1)

        qs = Appointment.objects.select_related("patient", "doctor").filter(
            date=day, status=ApptStatus.CONFIRMED, reminder_sent_at__isnull=True
        )
        if options["dry_run"]:
            self.stdout.write(f"[DRY RUN] {qs.count()} reminder(s) would be queued for {day}")
            return

        sent = 0
        for appt in qs:
            notify_appointment_reminder(appt)
            appt.reminder_sent_at = timezone.now()
            appt.save(update_fields=["reminder_sent_at", "updated_at"])
            sent += 1
        logger.info("Queued %s appointment reminder(s) for %s", sent, day)
        self.stdout.write(self.style.SUCCESS(f"Queued {sent} reminder(s) for {day}"))
