from django.contrib.auth.base_user import BaseUserManager
from django.contrib.auth.models import AbstractUser
from django.db import models
from django.utils.translation import gettext_lazy as _
from .enums import UserRole, UserStatus

class UserManager(BaseUserManager):
    use_in_migrations = True

    def _create_user(self, email, password, **extra_fields):
        if not email:
            raise ValueError("The Email must be set")
        email = self.normalize_email(email)
        user = self.model(email=email, **extra_fields)
        if password:
            user.set_password(password)
        else:
            user.set_unusable_password()
        user.save(using=self._db)
        return user

    def create_user(self, email, password=None, **extra_fields):
        extra_fields.setdefault("is_staff", False)
        extra_fields.setdefault("is_superuser", False)
        return self._create_user(email, password, **extra_fields)

    def create_superuser(self, email, password=None, **extra_fields):
        extra_fields.setdefault("is_staff", True)
        extra_fields.setdefault("is_superuser", True)
        extra_fields.setdefault("role", UserRole.SUPERADMIN)
        if extra_fields.get("is_staff") is not True:
            raise ValueError("Superuser must have is_staff=True.")
        if extra_fields.get("is_superuser") is not True:
            raise ValueError("Superuser must have is_superuser=True.")
        return self._create_user(email, password, **extra_fields)

    def active(self):
        return self.filter(status=UserStatus.ACTIVE)

    def doctors(self):
        return self.active().filter(role=UserRole.DOCTOR)

class User(AbstractUser):
    # email is the login identifier; a single display name replaces first/last
    username = None
    first_name = None
    last_name = None
    email = models.EmailField(_("email address"), unique=True)
    name = models.CharField(max_length=150, blank=True)

    role = models.CharField(max_length=20, choices=UserRole.choices, default=UserRole.STUDENT)
    status = models.CharField(max_length=10, choices=UserStatus.choices, default=UserStatus.ACTIVE)
    email_verified = models.BooleanField(default=False)

    student_id = models.CharField(max_length=32, blank=True)
    staff_no = models.CharField(max_length=32, blank=True)
    phone = models.CharField(max_length=32, blank=True)
    department = models.CharField(max_length=120, blank=True)
    specialization = models.CharField(max_length=120, blank=True)  # doctors

    USERNAME_FIELD = "email"
    REQUIRED_FIELDS = []

    objects = UserManager()

    class Meta:
        indexes = [
            models.Index(fields=["role", "status"], name="user_role_status_idx"),
        ]

    def __str__(self):
        return f"{self.email} ({self.role})"

    def get_full_name(self):
        return self.name or self.email

    def get_short_name(self):
        return (self.name or self.email).split(" ")[0]

    @property
    def is_patient(self) -> bool:
        return self.role in UserRole.patient_roles()

    @property
    def is_account_active(self) -> bool:
        return self.status == UserStatus.ACTIVE
