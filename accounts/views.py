import logging

from django.db.models import Count, Q
from django.utils import timezone
from rest_framework import mixins, permissions, serializers, status, viewsets
from rest_framework.decorators import action, api_view, permission_classes
from rest_framework.response import Response
from rest_framework_simplejwt.tokens import RefreshToken

from appointments.enums import ApptPriority, ApptStatus
from appointments.models import Appointment
from core.exceptions import AccountInactive, MaintenanceMode, RegistrationDisabled
from core.settings_cache import settings_cache
from notifications.services.notify import notify_registration
from .enums import UserRole, UserStatus
from .models import User
from .permissions import IsAdmin, IsTriageOrAdmin
from .serializers import DoctorSerializer, LoginSerializer, RegisterSerializer, UserSerializer

logger = logging.getLogger(__name__)

def _jwt_pair_for(user: User) -> dict:
    refresh = RefreshToken.for_user(user)
    return {"access": str(refresh.access_token), "refresh": str(refresh)}

@api_view(["GET"])
def me(request):
    """
    Return basic info about the currently authenticated user.
    Used by the frontend dashboards for greetings, etc.
    """
    return Response(UserSerializer(request.user).data)

@api_view(["POST"])
@permission_classes([permissions.AllowAny])
def register(request):
    if not settings_cache.is_registration_enabled():
        raise RegistrationDisabled()
    s = RegisterSerializer(data=request.data)
    s.is_valid(raise_exception=True)
    user = s.save(email_verified=not settings_cache.get("general.email_verification_required", True))
    logger.info("Registered %s user id=%s", user.role, user.id)
    notify_registration(user)
    return Response({"user": UserSerializer(user).data}, status=status.HTTP_201_CREATED)

@api_view(["POST"])
@permission_classes([permissions.AllowAny])
def login_password(request):
    s = LoginSerializer(data=request.data)
    s.is_valid(raise_exception=True)
    user = s.validated_data["user"]
    if not user.is_account_active:
        raise AccountInactive()
    if settings_cache.is_maintenance_mode() and user.role not in UserRole.admin_roles():
        raise MaintenanceMode()
    return Response({"tokens": _jwt_pair_for(user), "user": UserSerializer(user).data})

@api_view(["GET"])
@permission_classes([IsTriageOrAdmin])
def doctors(request):
    qs = User.objects.doctors().order_by("name", "email")
    return Response(DoctorSerializer(qs, many=True).data)

def _status_counts(qs) -> dict:
    counts = {s.value: 0 for s in ApptStatus}
    for row in qs.values("status").annotate(n=Count("id")):
        counts[row["status"]] = row["n"]
    return counts

@api_view(["GET"])
def dashboard(request):
    user = request.user
    today = timezone.localdate()
    data = {"role": user.role, "user": UserSerializer(user).data}

    if user.role in UserRole.patient_roles():
        mine = Appointment.objects.filter(patient=user)
        data["appointments"] = {
            "upcoming": mine.filter(
                date__gte=today, status__in=[ApptStatus.CONFIRMED, ApptStatus.RESCHEDULED]
            ).count(),
            "pending": mine.filter(
                status__in=[ApptStatus.PENDING, ApptStatus.UNDER_REVIEW, ApptStatus.ASSIGNED]
            ).count(),
            "completed": mine.filter(status=ApptStatus.COMPLETED).count(),
        }
    elif user.role == UserRole.CLINICAL_STAFF:
        qs = Appointment.objects.all()
        data["queue"] = _status_counts(qs)
        data["urgent"] = qs.filter(
            priority=ApptPriority.URGENT, status__in=[ApptStatus.PENDING, ApptStatus.UNDER_REVIEW]
        ).count()
    elif user.role == UserRole.DOCTOR:
        mine = Appointment.objects.filter(doctor=user)
        data["appointments"] = {
            "today": mine.filter(date=today, status=ApptStatus.CONFIRMED).count(),
            "pending_confirmation": mine.filter(status=ApptStatus.ASSIGNED).count(),
            "upcoming": mine.filter(date__gte=today, status=ApptStatus.CONFIRMED).count(),
        }
    else:
        data["users"] = {
            "total": User.objects.count(),
            "active": User.objects.active().count(),
            "by_role": {
                row["role"]: row["n"] for row in User.objects.values("role").annotate(n=Count("id"))
            },
        }
        data["appointments"] = _status_counts(Appointment.objects.all())
        data["appointments_total"] = Appointment.objects.count()
    return Response(data)


class UserAdminViewSet(viewsets.GenericViewSet, mixins.ListModelMixin, mixins.RetrieveModelMixin):
    """
    User management for admins.
    Filters:
      - q: search email/name/student_id/staff_no
      - role: exact role
      - status: active/inactive
    """
    serializer_class = UserSerializer
    permission_classes = [IsAdmin]
    queryset = User.objects.all().order_by("-date_joined", "-id")

    def get_queryset(self):
        qs = super().get_queryset()
        qp = self.request.query_params

        q = (qp.get("q") or "").strip()
        if q:
            qs = qs.filter(
                Q(email__icontains=q)
                | Q(name__icontains=q)
                | Q(student_id__icontains=q)
                | Q(staff_no__icontains=q)
            )
        role = (qp.get("role") or "").strip()
        if role:
            qs = qs.filter(role=role)
        status_ = (qp.get("status") or "").strip()
        if status_:
            qs = qs.filter(status=status_)
        return qs

    def _set_status(self, request, new_status):
        u = self.get_object()
        if u.pk == request.user.pk and new_status != UserStatus.ACTIVE:
            raise serializers.ValidationError({"status": ["You cannot deactivate your own account."]})
        u.status = new_status
        u.save(update_fields=["status"])
        logger.info("User %s set to %s by admin=%s", u.id, new_status, request.user.id)
        return Response(UserSerializer(u).data)

    @action(detail=True, methods=["post"])
    def activate(self, request, pk=None):
        return self._set_status(request, UserStatus.ACTIVE)

    @action(detail=True, methods=["post"])
    def deactivate(self, request, pk=None):
        return self._set_status(request, UserStatus.INACTIVE)

    @action(detail=True, methods=["post"], url_path="verify-email")
    def verify_email(self, request, pk=None):
        u = self.get_object()
        u.email_verified = True
        u.status = UserStatus.ACTIVE
        u.save(update_fields=["email_verified", "status"])
        logger.info("User %s email verified by admin=%s", u.id, request.user.id)
        return Response(UserSerializer(u).data)
