from django.db import models

class HolidayType(models.TextChoices):
    NATIONAL_HOLIDAY    = "national_holiday", "National Holiday"
    RELIGIOUS_HOLIDAY   = "religious_holiday", "Religious Holiday"
    SEMESTER_BREAK      = "semester_break", "Semester Break"
    EXAM_PERIOD         = "exam_period", "Exam Period"
    REGISTRATION_PERIOD = "registration_period", "Registration Period"
    UNIVERSITY_CLOSURE  = "university_closure", "University Closure"

class StaffScope(models.TextChoices):
    ALL      = "all", "All Staff"
    ACADEMIC = "academic", "Academic Staff"
    CLINICAL = "clinical", "Clinical Staff"
    NONE     = "none", "No Staff"

class SourceType(models.TextChoices):
    PDF  = "pdf", "PDF"
    HTML = "html", "HTML"
    API  = "api", "API"

class HolidaySource(models.TextChoices):
    PDF_SYNC        = "pdf_sync", "Calendar document"
    NATIONAL        = "auto_national_holidays", "National holidays"
    MANUAL_FALLBACK = "manual_fallback", "Manual fallback"
    MANUAL          = "manual", "Entered by an administrator"
