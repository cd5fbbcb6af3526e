from django.conf import settings
from django.db import models
from .enums import ApptType, ApptStatus, ApptPriority

class Appointment(models.Model):
    patient = models.ForeignKey(settings.AUTH_USER_MODEL, on_delete=models.CASCADE, related_name="appointments")
    doctor = models.ForeignKey(settings.AUTH_USER_MODEL, null=True, blank=True, on_delete=models.SET_NULL, related_name="appointments_as_doctor")
    reviewed_by = models.ForeignKey(settings.AUTH_USER_MODEL, null=True, blank=True, on_delete=models.SET_NULL, related_name="appointments_reviewed")
    assigned_by = models.ForeignKey(settings.AUTH_USER_MODEL, null=True, blank=True, on_delete=models.SET_NULL, related_name="appointments_assigned")

    date = models.DateField()
    time = models.TimeField()
    type = models.CharField(max_length=20, choices=ApptType.choices, default=ApptType.CONSULTATION)
    priority = models.CharField(max_length=10, choices=ApptPriority.choices, default=ApptPriority.NORMAL)
    status = models.CharField(max_length=16, choices=ApptStatus.choices, default=ApptStatus.PENDING)

    reason = models.CharField(max_length=255, blank=True)
    notes = models.TextField(blank=True)

    # transition timestamps
    reviewed_at = models.DateTimeField(null=True, blank=True)
    assigned_at = models.DateTimeField(null=True, blank=True)
    confirmed_at = models.DateTimeField(null=True, blank=True)
    completed_at = models.DateTimeField(null=True, blank=True)
    cancelled_at = models.DateTimeField(null=True, blank=True)
    rejected_at = models.DateTimeField(null=True, blank=True)

    rejection_reason = models.TextField(blank=True)
    cancellation_reason = models.TextField(blank=True)
    reschedule_reason = models.TextField(blank=True)
    rescheduled_date = models.DateField(null=True, blank=True)
    rescheduled_time = models.TimeField(null=True, blank=True)
    reassignment_count = models.PositiveIntegerField(default=0)

    # reminders
    reminder_sent_at = models.DateTimeField(null=True, blank=True)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        indexes = [
            models.Index(fields=["status", "date"], name="appt_status_date_idx"),
            models.Index(fields=["doctor", "date"], name="appt_doctor_date_idx"),
            models.Index(fields=["patient", "date"], name="appt_patient_date_idx"),
        ]
        ordering = ["date", "time", "id"]

    def __str__(self):
        return f"Appt#{self.id} P:{self.patient_id} {self.date} {self.time} ({self.status})"
