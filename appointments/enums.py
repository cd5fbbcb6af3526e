from django.db import models

class ApptType(models.TextChoices):
    CONSULTATION = "consultation", "Consultation"
    FOLLOW_UP = "follow_up", "Follow-up"
    VACCINATION = "vaccination", "Vaccination"
    BLOOD_TEST = "blood_test", "Blood Test"
    PHYSICAL_THERAPY = "physical_therapy", "Physical Therapy"
    EMERGENCY = "emergency", "Emergency"

class ApptStatus(models.TextChoices):
    PENDING = "pending", "Pending Review"
    UNDER_REVIEW = "under_review", "Under Review"
    ASSIGNED = "assigned", "Assigned to Doctor"
    REJECTED = "rejected", "Rejected"
    CONFIRMED = "confirmed", "Confirmed"
    RESCHEDULED = "rescheduled", "Rescheduled"
    COMPLETED = "completed", "Completed"
    CANCELLED = "cancelled", "Cancelled"

class ApptPriority(models.TextChoices):
    URGENT = "urgent", "Urgent"
    HIGH = "high", "High"
    NORMAL = "normal", "Normal"
    LOW = "low", "Low"
