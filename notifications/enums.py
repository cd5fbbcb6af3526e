from django.db import models

class Category(models.TextChoices):
    APPOINTMENT  = "appointment", "Appointment"
    REGISTRATION = "registration", "Registration"
    SYSTEM       = "system", "System"
    GENERAL      = "general", "General"
    REMINDER     = "reminder", "Reminder"

class DeliveryMethod(models.TextChoices):
    EMAIL  = "email", "Email"
    SMS    = "sms", "SMS"
    PUSH   = "push", "Push"
    IN_APP = "in_app", "In-App"

class NotificationStatus(models.TextChoices):
    PENDING = "pending", "Pending"
    SENT    = "sent", "Sent"
    FAILED  = "failed", "Failed"
    READ    = "read", "Read"
