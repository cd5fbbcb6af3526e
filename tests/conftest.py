"""
Test configuration and fixtures.

Provides:
- Queue-mode notification delivery and an in-memory mail outbox
- One user fixture per role
- An API client that authenticates with a real JWT
"""
from datetime import time, timedelta
from itertools import count

import pytest
from django.core.cache import cache
from django.utils import timezone
from rest_framework.test import APIClient
from rest_framework_simplejwt.tokens import RefreshToken

from accounts.enums import UserRole, UserStatus
from accounts.models import User
from appointments.enums import ApptStatus
from appointments.models import Appointment

PASSWORD = "Str0ngPassw0rd!"

_seq = count(1)


@pytest.fixture(autouse=True)
def _isolated_settings(settings):
    settings.NOTIFICATIONS_DELIVERY_MODE = "QUEUE"
    settings.EMAIL_BACKEND = "django.core.mail.backends.locmem.EmailBackend"
    settings.CALENDAR_BASE_URLS = []
    cache.clear()
    yield
    cache.clear()


# =============================================================================
# Users
# =============================================================================

@pytest.fixture
def make_user(db):
    def _make(role=UserRole.STUDENT, **extra):
        n = next(_seq)
        extra.setdefault("email", f"{role}{n}@uni.test")
        extra.setdefault("name", f"{role.replace('_', ' ').title()} {n}")
        if role == UserRole.STUDENT:
            extra.setdefault("student_id", f"S{n:05d}")
        return User.objects.create_user(password=PASSWORD, role=role, **extra)
    return _make


@pytest.fixture
def student(make_user):
    return make_user(UserRole.STUDENT)


@pytest.fixture
def doctor(make_user):
    return make_user(UserRole.DOCTOR, specialization="General Practice")


@pytest.fixture
def other_doctor(make_user):
    return make_user(UserRole.DOCTOR, specialization="Physiotherapy")


@pytest.fixture
def nurse(make_user):
    return make_user(UserRole.CLINICAL_STAFF)


@pytest.fixture
def admin_user(make_user):
    return make_user(UserRole.ADMIN)


@pytest.fixture
def inactive_student(make_user):
    return make_user(UserRole.STUDENT, status=UserStatus.INACTIVE)


# =============================================================================
# API client
# =============================================================================

@pytest.fixture
def api_client():
    return APIClient()


@pytest.fixture
def auth_client():
    """auth_client(user) -> APIClient sending that user's bearer token."""
    def _client(user):
        client = APIClient()
        token = RefreshToken.for_user(user).access_token
        client.credentials(HTTP_AUTHORIZATION=f"Bearer {token}")
        return client
    return _client


# =============================================================================
# Appointments
# =============================================================================

@pytest.fixture
def future_day():
    return timezone.localdate() + timedelta(days=7)


@pytest.fixture
def make_appointment(db, future_day):
    def _make(patient, status=ApptStatus.PENDING, **extra):
        extra.setdefault("date", future_day)
        extra.setdefault("time", time(10, 30))
        extra.setdefault("reason", "Persistent headache")
        return Appointment.objects.create(patient=patient, status=status, **extra)
    return _make
