"""
Deliver queued notifications.

Usage:
    python manage.py process_notifications               # deliver up to 200 rows
    python manage.py process_notifications --limit 50
    python manage.py process_notifications --dry-run     # count what would be sent
"""

from django.core.management.base import BaseCommand

from notifications.services.delivery import process_pending


class Command(BaseCommand):
    help = "Send pending notifications and retry failed ones below the attempt cap"

    def add_arguments(self, parser):
        parser.add_argument("--limit", type=int, default=200, help="Maximum rows to process (default: 200)")
        parser.add_argument("--dry-run", action="store_true", help="Count deliverable rows without sending")

    def handle(self, *args, **options):
        counts = process_pending(limit=options["limit"], dry_run=options["dry_run"])
        if not counts["processed"]:
            self.stdout.write("Notification queue empty")
            return
        if options["dry_run"]:
            self.stdout.write(f"[DRY RUN] {counts['processed']} notification(s) would be processed")
            return
        self.stdout.write(
            self.style.SUCCESS(
                f"Processed {counts['processed']} notification(s): "
                f"{counts['sent']} sent, {counts['failed']} failed"
            )
        )
