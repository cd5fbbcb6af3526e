from rest_framework.permissions import BasePermission
from accounts.enums import UserRole

class CanViewAppointment(BasePermission):
    """
    Patient: own appointments.
    Doctor: appointments assigned to them.
    Clinical staff and admins: everything.
    """
    def has_object_permission(self, request, view, obj):
        u = request.user
        if not u or not u.is_authenticated:
            return False
        if obj.patient_id == u.id:
            return True
        if u.role == UserRole.DOCTOR:
            return obj.doctor_id == u.id
        return u.role in (UserRole.CLINICAL_STAFF, UserRole.ADMIN, UserRole.SUPERADMIN)
