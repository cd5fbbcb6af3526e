from django.db.models import Subquery
from rest_framework import mixins, viewsets

from accounts.enums import UserRole
from appointments.models import Appointment
from .models import MedicalRecord
from .permissions import CanWriteRecords
from .serializers import MedicalRecordSerializer


class MedicalRecordViewSet(viewsets.GenericViewSet,
                           mixins.CreateModelMixin,
                           mixins.RetrieveModelMixin,
                           mixins.UpdateModelMixin,
                           mixins.ListModelMixin):
    queryset = MedicalRecord.objects.select_related("patient", "doctor", "appointment")
    serializer_class = MedicalRecordSerializer
    permission_classes = [CanWriteRecords]

    def get_queryset(self):
        q = self.queryset
        u = self.request.user

        # Patients: see only their own records
        if u.role in UserRole.patient_roles():
            return q.filter(patient=u)

        # Doctors: patients they have appointments with
        if u.role == UserRole.DOCTOR:
            patient_ids = Appointment.objects.filter(doctor=u).values("patient_id")
            q = q.filter(patient_id__in=Subquery(patient_ids))
        elif u.role not in (UserRole.CLINICAL_STAFF, UserRole.ADMIN, UserRole.SUPERADMIN):
            return q.none()

        # Filters
        patient_id = self.request.query_params.get("patient")
        type_ = self.request.query_params.get("type")
        if patient_id:
            q = q.filter(patient_id=patient_id)
        if type_:
            q = q.filter(type=type_)
        return q

    def perform_create(self, serializer):
        serializer.save(doctor=self.request.user)
