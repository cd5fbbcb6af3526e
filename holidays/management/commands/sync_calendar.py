"""
Sync the academic calendar.

Usage:
    python manage.py sync_calendar          # current year
    python manage.py sync_calendar 2025
"""

from django.core.management.base import BaseCommand, CommandError
from django.utils import timezone

from holidays.services.sync import CalendarSyncService


class Command(BaseCommand):
    help = "Sync academic holidays from calendar sources and the national holiday list"

    def add_arguments(self, parser):
        parser.add_argument("year", nargs="?", type=int, default=None, help="Academic year (default: current year)")

    def handle(self, *args, **options):
        year = options["year"] or timezone.localdate().year
        self.stdout.write(f"Starting calendar sync for year: {year}")
        try:
            result = CalendarSyncService().sync(year)
        except Exception as e:
            raise CommandError(f"Calendar sync failed: {e}") from e

        self.stdout.write(self.style.SUCCESS("Calendar sync completed:"))
        self.stdout.write(f"- New holidays synced: {result['synced']}")
        self.stdout.write(f"- Holidays updated: {result['updated']}")
        self.stdout.write(f"- Failed syncs: {result['failed']}")
        self.stdout.write(f"- Sources checked: {result['sources_checked']}")
        self.stdout.write(f"- New calendars found: {result['new_calendars_found']}")
