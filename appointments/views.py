from django.db.models import Case, Count, IntegerField, Q, Value, When
from django.utils import timezone
from rest_framework import mixins, status, viewsets
from rest_framework.decorators import action
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response

from accounts.enums import UserRole
from accounts.permissions import IsPatient
from core.exceptions import DateBlocked
from core.settings_cache import settings_cache
from holidays.services.blocking import is_date_blocked
from .enums import ApptPriority, ApptStatus
from .models import Appointment
from .permissions import CanViewAppointment
from .serializers import (
    AppointmentDetailSerializer,
    AppointmentSerializer,
    AssignSerializer,
    CancelSerializer,
    NotesSerializer,
    RejectSerializer,
    RescheduleSerializer,
    StatusUpdateSerializer,
)
from .services.transitions import apply_action, ensure_role_has_action, update_status
from .signals import appointment_requested
from .workflow import (
    STATUS_WORKFLOW,
    get_appointment_timeline,
    get_available_actions,
    get_status_badge_class,
    get_status_text,
    is_terminal,
)


def _ensure_bookable(day, settings=settings_cache):
    if not settings.get("appointments.block_on_holidays", True):
        return
    holiday = is_date_blocked(day)
    if holiday is not None:
        raise DateBlocked(holiday=holiday)


class AppointmentViewSet(
    viewsets.GenericViewSet,
    mixins.CreateModelMixin,
    mixins.RetrieveModelMixin,
    mixins.ListModelMixin,
):
    queryset = Appointment.objects.select_related("patient", "doctor", "reviewed_by", "assigned_by")
    permission_classes = [IsAuthenticated, CanViewAppointment]

    def get_permissions(self):
        if self.action == "create":
            return [IsPatient()]
        return super().get_permissions()

    def get_serializer_class(self):
        if self.action == "retrieve":
            return AppointmentDetailSerializer
        return AppointmentSerializer

    def _scoped(self, q):
        u = self.request.user
        if u.role in UserRole.patient_roles():
            q = q.filter(patient=u)
        elif u.role == UserRole.DOCTOR:
            q = q.filter(doctor=u)
        elif u.role not in (UserRole.CLINICAL_STAFF, UserRole.ADMIN, UserRole.SUPERADMIN):
            q = q.none()
        return q

    def get_queryset(self):
        q = self._scoped(self.queryset)

        # Query params filtering
        params = self.request.query_params
        status_ = params.get("status")
        priority = params.get("priority")
        doctor_id = params.get("doctor")
        date_filter = params.get("date")
        s = params.get("s") or params.get("q")

        if status_:
            q = q.filter(status__in=[v.strip().lower() for v in status_.split(",") if v.strip()])
        if priority:
            q = q.filter(priority=priority.lower())
        if doctor_id:
            q = q.filter(doctor_id=doctor_id)
        if s:
            q = q.filter(Q(reason__icontains=s) | Q(notes__icontains=s) | Q(patient__name__icontains=s))

        # Date presets for convenience
        if date_filter:
            today = timezone.localdate()
            if date_filter == "today":
                q = q.filter(date=today)
            elif date_filter == "tomorrow":
                q = q.filter(date=today + timezone.timedelta(days=1))
            elif date_filter == "upcoming":
                q = q.filter(date__gte=today)
            elif date_filter == "past":
                q = q.filter(date__lt=today)
            # 'all' or unknown values = no date filter

        # Most urgent first, then soonest
        priority_rank = Case(
            When(priority=ApptPriority.URGENT, then=Value(0)),
            When(priority=ApptPriority.HIGH, then=Value(1)),
            When(priority=ApptPriority.NORMAL, then=Value(2)),
            When(priority=ApptPriority.LOW, then=Value(3)),
            default=Value(99),
            output_field=IntegerField(),
        )
        return q.annotate(_priority_rank=priority_rank).order_by("_priority_rank", "date", "time", "id")

    def perform_create(self, serializer):
        _ensure_bookable(serializer.validated_data["date"])
        appt = serializer.save(patient=self.request.user, status=ApptStatus.PENDING)
        appointment_requested.send(sender=Appointment, appointment=appt)

    # ─────────────────────────────────────────────────────────────
    # Status transition actions
    # ─────────────────────────────────────────────────────────────

    def _run_action(self, request, name: str, payload_class=NotesSerializer, on_valid=None):
        ensure_role_has_action(request.user.role, name)
        appt = self.get_object()
        s = payload_class(data=request.data)
        s.is_valid(raise_exception=True)
        if on_valid:
            on_valid(s.validated_data)
        appt = apply_action(appt.pk, name, actor=request.user, data=s.validated_data)
        return Response(AppointmentDetailSerializer(appt, context={"request": request}).data)

    @action(detail=True, methods=["post"])
    def review(self, request, pk=None):
        """Clinical staff picks a pending request up for review."""
        return self._run_action(request, "review")

    @action(detail=True, methods=["post"])
    def assign(self, request, pk=None):
        return self._run_action(request, "assign", AssignSerializer)

    @action(detail=True, methods=["post"])
    def reject(self, request, pk=None):
        return self._run_action(request, "reject", RejectSerializer)

    @action(detail=True, methods=["post"])
    def reassign(self, request, pk=None):
        """Hand an assigned appointment to a different doctor; status stays `assigned`."""
        return self._run_action(request, "reassign", AssignSerializer)

    @action(detail=True, methods=["post"])
    def confirm(self, request, pk=None):
        return self._run_action(request, "confirm")

    @action(detail=True, methods=["post"])
    def reschedule(self, request, pk=None):
        """Doctor proposes a new date/time; the patient is told and the doctor confirms later."""
        return self._run_action(
            request, "reschedule", RescheduleSerializer,
            on_valid=lambda d: _ensure_bookable(d["new_date"]),
        )

    @action(detail=True, methods=["post"])
    def complete(self, request, pk=None):
        return self._run_action(request, "complete")

    @action(detail=True, methods=["post"])
    def cancel(self, request, pk=None):
        return self._run_action(request, "cancel", CancelSerializer)

    @action(detail=True, methods=["post"], url_path="status")
    def set_status(self, request, pk=None):
        """
        Move to an explicit status. Used for the moves that have no named
        action, e.g. confirming or cancelling a rescheduled appointment.
        """
        appt = self.get_object()
        s = StatusUpdateSerializer(data=request.data)
        s.is_valid(raise_exception=True)
        data = dict(s.validated_data)
        target = data.pop("status")
        if data.get("new_date"):
            _ensure_bookable(data["new_date"])
        appt = update_status(appt.pk, target, actor=request.user, data=data)
        return Response(AppointmentDetailSerializer(appt, context={"request": request}).data)

    @action(detail=True, methods=["get"])
    def timeline(self, request, pk=None):
        appt = self.get_object()
        return Response(get_appointment_timeline(appt))

    # ─────────────────────────────────────────────────────────────
    # Workflow metadata
    # ─────────────────────────────────────────────────────────────

    @action(detail=False, methods=["get"])
    def workflow(self, request):
        """The status table and the caller's actions per status."""
        role = request.user.role
        return Response([
            {
                "status": str(s),
                "label": get_status_text(s),
                "badge": get_status_badge_class(s),
                "terminal": is_terminal(s),
                "next": [str(n) for n in nxt],
                "actions": [a.as_dict() for a in get_available_actions(s, role)],
            }
            for s, nxt in STATUS_WORKFLOW.items()
        ])

    @action(detail=False, methods=["get"])
    def summary(self, request):
        q = self._scoped(Appointment.objects.all())
        counts = {s.value: 0 for s in ApptStatus}
        for row in q.values("status").annotate(n=Count("id")):
            counts[row["status"]] = row["n"]
        return Response({
            "total": sum(counts.values()),
            "by_status": counts,
            "urgent": q.filter(priority=ApptPriority.URGENT).exclude(
                status__in=[ApptStatus.REJECTED, ApptStatus.COMPLETED, ApptStatus.CANCELLED]
            ).count(),
        }, status=status.HTTP_200_OK)
