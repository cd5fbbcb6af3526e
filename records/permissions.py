from rest_framework.permissions import SAFE_METHODS, BasePermission
from accounts.enums import UserRole

class CanWriteRecords(BasePermission):
    """Doctors and admins write; everyone authenticated may read what their queryset shows."""
    message = "Only doctors can write medical records."
    code = "ROLE_MISMATCH"

    def has_permission(self, request, view):
        u = request.user
        if not u or not u.is_authenticated:
            return False
        if request.method in SAFE_METHODS:
            return True
        return u.role in (UserRole.DOCTOR, UserRole.ADMIN, UserRole.SUPERADMIN)

    def has_object_permission(self, request, view, obj):
        if request.method in SAFE_METHODS:
            return True
        u = request.user
        if u.role == UserRole.DOCTOR:
            return obj.doctor_id == u.id
        return u.role in (UserRole.ADMIN, UserRole.SUPERADMIN)
