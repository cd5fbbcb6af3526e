from django.contrib.auth import get_user_model
from rest_framework import serializers

from accounts.enums import UserRole
from appointments.models import Appointment
from .models import MedicalRecord

User = get_user_model()


class MedicalRecordSerializer(serializers.ModelSerializer):
    patient_name = serializers.SerializerMethodField(read_only=True)
    doctor_name = serializers.SerializerMethodField(read_only=True)
    bmi = serializers.DecimalField(max_digits=6, decimal_places=2, read_only=True)
    patient = serializers.PrimaryKeyRelatedField(
        queryset=User.objects.filter(role__in=[UserRole.STUDENT, UserRole.ACADEMIC_STAFF])
    )

    class Meta:
        model = MedicalRecord
        fields = [
            "id",
            "patient",
            "patient_name",
            "doctor",
            "doctor_name",
            "appointment",
            "type",
            "diagnosis",
            "treatment",
            "notes",
            "blood_pressure",
            "heart_rate",
            "temperature",
            "weight",
            "height",
            "bmi",
            "visit_date",
            "created_at",
            "updated_at",
        ]
        read_only_fields = ["doctor", "created_at", "updated_at"]

    def get_patient_name(self, obj):
        return obj.patient.get_full_name() if obj.patient_id else None

    def get_doctor_name(self, obj):
        return obj.doctor.get_full_name() if obj.doctor_id else None

    def validate_blood_pressure(self, value):
        if not value:
            return value
        parts = value.split("/")
        if len(parts) != 2 or not all(p.strip().isdigit() for p in parts):
            raise serializers.ValidationError("Use the form systolic/diastolic, e.g. 120/80.")
        return value

    def validate(self, attrs):
        request = self.context.get("request")
        user = getattr(request, "user", None)
        patient = attrs.get("patient", getattr(self.instance, "patient", None))
        appt = attrs.get("appointment")

        if appt is not None and appt.patient_id != patient.id:
            raise serializers.ValidationError({"appointment": "Appointment belongs to a different patient."})

        if user is not None and user.role == UserRole.DOCTOR:
            if appt is not None and appt.doctor_id != user.id:
                raise serializers.ValidationError({"appointment": "You are not the doctor on this appointment."})
            if not Appointment.objects.filter(patient=patient, doctor=user).exists():
                raise serializers.ValidationError({"patient": "You have no appointments with this patient."})
        return attrs
