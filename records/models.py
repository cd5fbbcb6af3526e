from decimal import Decimal, ROUND_HALF_UP
from django.conf import settings
from django.core.validators import MinValueValidator, MaxValueValidator
from django.db import models
from django.utils import timezone
from .enums import RecordType

def _bmi(weight_kg: Decimal | None, height_cm: Decimal | None):
    if not weight_kg or not height_cm:
        return None
    h_m = height_cm / Decimal("100")
    return (weight_kg / (h_m * h_m)).quantize(Decimal("0.01"), rounding=ROUND_HALF_UP)

class MedicalRecord(models.Model):
    patient = models.ForeignKey(settings.AUTH_USER_MODEL, on_delete=models.CASCADE, related_name="medical_records")
    doctor = models.ForeignKey(settings.AUTH_USER_MODEL, null=True, on_delete=models.SET_NULL, related_name="authored_records")
    appointment = models.ForeignKey("appointments.Appointment", null=True, blank=True, on_delete=models.SET_NULL, related_name="medical_records")

    type = models.CharField(max_length=16, choices=RecordType.choices, default=RecordType.CONSULTATION)
    diagnosis = models.TextField(blank=True)
    treatment = models.TextField(blank=True)
    notes = models.TextField(blank=True)

    # optional vitals taken during the visit
    blood_pressure = models.CharField(max_length=10, blank=True)  # "120/80"
    heart_rate = models.PositiveSmallIntegerField(null=True, blank=True, validators=[MinValueValidator(20), MaxValueValidator(250)])
    temperature = models.DecimalField(max_digits=4, decimal_places=1, null=True, blank=True)  # °C
    weight = models.DecimalField(max_digits=5, decimal_places=2, null=True, blank=True)  # kg
    height = models.DecimalField(max_digits=5, decimal_places=2, null=True, blank=True)  # cm

    visit_date = models.DateField(default=timezone.localdate)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        indexes = [
            models.Index(fields=["patient", "visit_date"], name="record_patient_visit_idx"),
            models.Index(fields=["doctor", "visit_date"], name="record_doctor_visit_idx"),
        ]
        ordering = ["-visit_date", "-id"]

    def __str__(self):
        return f"Record#{self.id} P:{self.patient_id} {self.visit_date} ({self.type})"

    @property
    def bmi(self):
        return _bmi(self.weight, self.height)
