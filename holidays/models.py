from django.db import models
from django.utils import timezone
from .enums import HolidayType, StaffScope, SourceType, HolidaySource

class AcademicHolidayQuerySet(models.QuerySet):
    def active(self):
        return self.filter(is_active=True)

    def blocking(self):
        return self.filter(blocks_appointments=True)

    def for_date(self, day):
        return self.filter(start_date__lte=day, end_date__gte=day)

    def for_range(self, start, end):
        """Holidays overlapping [start, end]."""
        return self.filter(start_date__lte=end, end_date__gte=start)

    def affecting(self, staff_type: str):
        return self.filter(affects_staff_type__in=[StaffScope.ALL, staff_type])

    def for_year(self, year: int):
        return self.filter(academic_year=year)

class AcademicHoliday(models.Model):
    name = models.CharField(max_length=200)
    description = models.TextField(blank=True)
    start_date = models.DateField()
    end_date = models.DateField()
    type = models.CharField(max_length=24, choices=HolidayType.choices, default=HolidayType.UNIVERSITY_CLOSURE)
    affects_staff_type = models.CharField(max_length=10, choices=StaffScope.choices, default=StaffScope.ALL)
    blocks_appointments = models.BooleanField(default=True)
    academic_year = models.PositiveIntegerField()
    source = models.CharField(max_length=32, choices=HolidaySource.choices, default=HolidaySource.MANUAL)
    is_active = models.BooleanField(default=True)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    objects = AcademicHolidayQuerySet.as_manager()

    class Meta:
        constraints = [
            models.UniqueConstraint(fields=["name", "academic_year"], name="holiday_name_year_uniq"),
        ]
        indexes = [
            models.Index(fields=["start_date", "end_date"], name="holiday_range_idx"),
        ]
        ordering = ["start_date", "id"]

    def __str__(self):
        return f"{self.name} ({self.start_date} - {self.end_date})"

    def is_active_on(self, day) -> bool:
        return self.is_active and self.start_date <= day <= self.end_date

    @property
    def duration_days(self) -> int:
        return (self.end_date - self.start_date).days + 1

    def affects_staff(self, staff_type: str) -> bool:
        return self.affects_staff_type in (StaffScope.ALL, staff_type)

class CalendarSource(models.Model):
    """
    Where academic calendars are fetched from. `url_pattern` may carry
    `{year}` and `{next_year}` placeholders.
    """
    MAX_FAILURES = 5
    RELIABLE_BELOW = 3

    name = models.CharField(max_length=200)
    url_pattern = models.CharField(max_length=500, unique=True)
    type = models.CharField(max_length=8, choices=SourceType.choices, default=SourceType.PDF)
    priority = models.PositiveSmallIntegerField(default=1)  # lower first
    is_active = models.BooleanField(default=True)
    auto_discovered = models.BooleanField(default=False)

    last_checked = models.DateTimeField(null=True, blank=True)
    last_successful_sync = models.DateTimeField(null=True, blank=True)
    consecutive_failures = models.PositiveIntegerField(default=0)
    last_error = models.TextField(blank=True)
    sync_metadata = models.JSONField(default=dict, blank=True)

    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ["priority", "id"]

    def __str__(self):
        return f"{self.name} [{self.type}]"

    def build_url(self, year: int) -> str:
        return self.url_pattern.replace("{year}", str(year)).replace("{next_year}", str(year + 1))

    def mark_checked(self):
        self.last_checked = timezone.now()
        self.save(update_fields=["last_checked"])

    def mark_successful(self, metadata: dict | None = None):
        now = timezone.now()
        self.last_checked = now
        self.last_successful_sync = now
        self.consecutive_failures = 0
        self.last_error = ""
        self.sync_metadata = metadata or {}
        self.save(update_fields=[
            "last_checked", "last_successful_sync", "consecutive_failures", "last_error", "sync_metadata",
        ])

    def mark_failed(self, error: str):
        self.consecutive_failures += 1
        self.last_error = (error or "")[:2000]
        self.last_checked = timezone.now()
        if self.consecutive_failures >= self.MAX_FAILURES:
            self.is_active = False
        self.save(update_fields=["consecutive_failures", "last_error", "last_checked", "is_active"])

    @property
    def is_reliable(self) -> bool:
        return self.consecutive_failures < self.RELIABLE_BELOW
