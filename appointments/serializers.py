from django.contrib.auth import get_user_model
from django.utils import timezone
from rest_framework import serializers

from .enums import ApptStatus
from .models import Appointment
from .workflow import (
    get_appointment_timeline,
    get_available_actions,
    get_priority_badge,
    get_status_badge_class,
    get_status_text,
    is_terminal,
)

User = get_user_model()

ACTIVE_STATUSES = [
    ApptStatus.PENDING,
    ApptStatus.UNDER_REVIEW,
    ApptStatus.ASSIGNED,
    ApptStatus.CONFIRMED,
    ApptStatus.RESCHEDULED,
]


def _not_in_past(value):
    if value < timezone.localdate():
        raise serializers.ValidationError("Date cannot be in the past.")
    return value


class AppointmentSerializer(serializers.ModelSerializer):
    """
    Appointment payload with the display hints and the actions the requesting
    user may take, so clients never keep their own copy of the workflow.
    """
    patient_name = serializers.SerializerMethodField(read_only=True)
    doctor_name = serializers.SerializerMethodField(read_only=True)
    status_text = serializers.SerializerMethodField(read_only=True)
    status_badge = serializers.SerializerMethodField(read_only=True)
    priority_badge = serializers.SerializerMethodField(read_only=True)
    is_terminal = serializers.SerializerMethodField(read_only=True)
    available_actions = serializers.SerializerMethodField(read_only=True)

    class Meta:
        model = Appointment
        fields = [
            "id",
            "patient",
            "patient_name",
            "doctor",
            "doctor_name",
            "date",
            "time",
            "type",
            "priority",
            "priority_badge",
            "reason",
            "notes",
            "status",
            "status_text",
            "status_badge",
            "is_terminal",
            "available_actions",
            "reviewed_at",
            "assigned_at",
            "confirmed_at",
            "completed_at",
            "cancelled_at",
            "rejected_at",
            "rejection_reason",
            "cancellation_reason",
            "reschedule_reason",
            "rescheduled_date",
            "rescheduled_time",
            "reassignment_count",
            "created_at",
            "updated_at",
        ]
        read_only_fields = [
            "patient",
            "doctor",
            "status",
            "reviewed_at",
            "assigned_at",
            "confirmed_at",
            "completed_at",
            "cancelled_at",
            "rejected_at",
            "rejection_reason",
            "cancellation_reason",
            "reschedule_reason",
            "rescheduled_date",
            "rescheduled_time",
            "reassignment_count",
            "created_at",
            "updated_at",
        ]

    def get_patient_name(self, obj):
        return obj.patient.get_full_name() if obj.patient_id else None

    def get_doctor_name(self, obj):
        return obj.doctor.get_full_name() if obj.doctor_id else None

    def get_status_text(self, obj):
        return get_status_text(obj.status)

    def get_status_badge(self, obj):
        return get_status_badge_class(obj.status)

    def get_priority_badge(self, obj):
        return get_priority_badge(obj.priority)

    def get_is_terminal(self, obj):
        return is_terminal(obj.status)

    def get_available_actions(self, obj):
        request = self.context.get("request")
        role = getattr(getattr(request, "user", None), "role", None)
        if not role:
            return []
        return [a.as_dict() for a in get_available_actions(obj.status, role)]

    def validate_date(self, value):
        return _not_in_past(value)

    def validate(self, attrs):
        request = self.context.get("request")
        patient = getattr(request, "user", None)
        if self.instance is None and patient is not None:
            clash = Appointment.objects.filter(
                patient=patient,
                date=attrs.get("date"),
                time=attrs.get("time"),
                status__in=ACTIVE_STATUSES,
            ).exists()
            if clash:
                raise serializers.ValidationError(
                    "You already have an active appointment at this date and time."
                )
        return attrs


class AppointmentDetailSerializer(AppointmentSerializer):
    timeline = serializers.SerializerMethodField(read_only=True)

    class Meta(AppointmentSerializer.Meta):
        fields = AppointmentSerializer.Meta.fields + ["timeline"]

    def get_timeline(self, obj):
        return get_appointment_timeline(obj)


# ─────────────────────────────────────────────────────────────
# Action payloads
# ─────────────────────────────────────────────────────────────

class NotesSerializer(serializers.Serializer):
    notes = serializers.CharField(required=False, allow_blank=True)


class AssignSerializer(NotesSerializer):
    doctor_id = serializers.PrimaryKeyRelatedField(queryset=User.objects.doctors(), source="doctor")


class RejectSerializer(NotesSerializer):
    reason = serializers.CharField()


class RescheduleSerializer(NotesSerializer):
    new_date = serializers.DateField()
    new_time = serializers.TimeField()
    reason = serializers.CharField(required=False, allow_blank=True)

    def validate_new_date(self, value):
        return _not_in_past(value)


class CancelSerializer(NotesSerializer):
    reason = serializers.CharField(required=False, allow_blank=True)


class StatusUpdateSerializer(NotesSerializer):
    status = serializers.ChoiceField(choices=ApptStatus.choices)
    doctor_id = serializers.PrimaryKeyRelatedField(
        queryset=User.objects.doctors(), source="doctor", required=False
    )
    reason = serializers.CharField(required=False, allow_blank=True)
    new_date = serializers.DateField(required=False)
    new_time = serializers.TimeField(required=False)

    def validate_new_date(self, value):
        return _not_in_past(value)
