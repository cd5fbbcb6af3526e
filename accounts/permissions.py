from rest_framework.permissions import BasePermission
from .enums import UserRole

class IsRole(BasePermission):
    required_roles: tuple[str, ...] = ()
    message = "Access denied. Your role cannot perform this action."
    code = "ROLE_MISMATCH"

    def has_permission(self, request, view):
        return bool(request.user and request.user.is_authenticated and request.user.role in self.required_roles)

class IsAdmin(IsRole):         required_roles = (UserRole.ADMIN, UserRole.SUPERADMIN)
class IsDoctor(IsRole):        required_roles = (UserRole.DOCTOR,)
class IsClinicalStaff(IsRole): required_roles = (UserRole.CLINICAL_STAFF,)
class IsPatient(IsRole):       required_roles = (UserRole.STUDENT, UserRole.ACADEMIC_STAFF)
class IsClinicOrAdmin(IsRole):
    required_roles = (UserRole.DOCTOR, UserRole.CLINICAL_STAFF, UserRole.ADMIN, UserRole.SUPERADMIN)
class IsTriageOrAdmin(IsRole):
    required_roles = (UserRole.CLINICAL_STAFF, UserRole.ADMIN, UserRole.SUPERADMIN)
