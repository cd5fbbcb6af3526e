from django.db import models

class UserRole(models.TextChoices):
    STUDENT        = "student", "Student"
    DOCTOR         = "doctor", "Doctor"
    CLINICAL_STAFF = "clinical_staff", "Clinical Staff"
    ACADEMIC_STAFF = "academic_staff", "Academic Staff"
    ADMIN          = "admin", "Admin"
    SUPERADMIN     = "superadmin", "Super Admin"

    @classmethod
    def patient_roles(cls):
        return {cls.STUDENT, cls.ACADEMIC_STAFF}

    @classmethod
    def admin_roles(cls):
        return {cls.ADMIN, cls.SUPERADMIN}

    @classmethod
    def clinic_roles(cls):
        return {cls.DOCTOR, cls.CLINICAL_STAFF}

class UserStatus(models.TextChoices):
    ACTIVE   = "active", "Active"
    INACTIVE = "inactive", "Inactive"
