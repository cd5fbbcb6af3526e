from datetime import time, timedelta

import pytest
from django.utils import timezone

from accounts.enums import UserRole, UserStatus
from accounts.models import User
from accounts.serializers import check_password_requirements
from appointments.enums import ApptStatus
from core.models import SystemSetting
from notifications.enums import Category
from notifications.models import Notification
from tests.conftest import PASSWORD

pytestmark = pytest.mark.django_db

BASE = "/api/accounts/"


def _registration(**overrides):
    payload = {
        "email": "new.student@uni.test",
        "password": PASSWORD,
        "name": "Deniz Yılmaz",
        "role": "student",
        "student_id": "20251234",
    }
    payload.update(overrides)
    return payload


# =============================================================================
# Registration
# =============================================================================

def test_register_student(api_client, nurse):
    res = api_client.post(f"{BASE}register/", _registration(), format="json")
    assert res.status_code == 201, res.data
    user = User.objects.get(email="new.student@uni.test")
    assert res.json()["user"]["role"] == "student"
    assert user.check_password(PASSWORD)
    assert user.is_account_active

    assert Notification.objects.filter(user=user, category=Category.REGISTRATION).count() == 2
    assert Notification.objects.filter(user=nurse, title="New patient registered").count() == 2


def test_register_academic_staff_needs_staff_number(api_client):
    res = api_client.post(f"{BASE}register/", _registration(role="academic_staff", student_id=""), format="json")
    assert res.status_code == 422
    assert "staff_no" in res.json()["errors"]

    res = api_client.post(
        f"{BASE}register/", _registration(role="academic_staff", student_id="", staff_no="AC-77"), format="json"
    )
    assert res.status_code == 201


def test_students_need_a_student_number(api_client):
    res = api_client.post(f"{BASE}register/", _registration(student_id=""), format="json")
    assert res.status_code == 422
    assert "student_id" in res.json()["errors"]


@pytest.mark.parametrize("role", ["doctor", "clinical_staff", "admin"])
def test_clinic_roles_cannot_self_register(api_client, role):
    res = api_client.post(f"{BASE}register/", _registration(role=role), format="json")
    assert res.status_code == 422
    assert "role" in res.json()["errors"]


def test_weak_password(api_client):
    res = api_client.post(f"{BASE}register/", _registration(password="alllowercase1"), format="json")
    assert res.status_code == 422
    assert res.json()["error_code"] == "VALIDATION_ERROR"
    assert "Password must contain an uppercase letter." in res.json()["errors"]["password"]


def test_duplicate_email(api_client, student):
    res = api_client.post(f"{BASE}register/", _registration(email=student.email), format="json")
    assert res.status_code == 422
    assert "email" in res.json()["errors"]


def test_registration_can_be_closed(api_client):
    SystemSetting.get_instance().update_section("general", {"registration_enabled": False})
    res = api_client.post(f"{BASE}register/", _registration(), format="json")
    assert res.status_code == 403
    assert res.json()["error_code"] == "REGISTRATION_DISABLED"
    assert not User.objects.filter(email="new.student@uni.test").exists()


def test_password_requirements():
    rules = {"min_length": 10, "require_uppercase": True, "require_numbers": True, "require_symbols": True}
    problems = check_password_requirements("short", rules)
    assert len(problems) == 4
    assert check_password_requirements("Longer1234!", rules) == []


# =============================================================================
# Login and tokens
# =============================================================================

def test_login(api_client, student):
    res = api_client.post(f"{BASE}login/", {"email": student.email, "password": PASSWORD}, format="json")
    assert res.status_code == 200
    body = res.json()
    assert body["user"]["id"] == student.id
    assert {"access", "refresh"} <= set(body["tokens"])

    refreshed = api_client.post(f"{BASE}token/refresh/", {"refresh": body["tokens"]["refresh"]}, format="json")
    assert refreshed.status_code == 200
    assert "access" in refreshed.json()


def test_login_with_a_wrong_password(api_client, student):
    res = api_client.post(f"{BASE}login/", {"email": student.email, "password": "nope"}, format="json")
    assert res.status_code == 422
    assert res.json()["error_code"] == "VALIDATION_ERROR"


def test_inactive_accounts_cannot_log_in(api_client, inactive_student):
    res = api_client.post(f"{BASE}login/", {"email": inactive_student.email, "password": PASSWORD}, format="json")
    assert res.status_code == 403
    assert res.json()["error_code"] == "ACCOUNT_INACTIVE"


def test_tokens_of_deactivated_accounts_stop_working(auth_client, student):
    client = auth_client(student)
    assert client.get(f"{BASE}me/").status_code == 200
    User.objects.filter(pk=student.pk).update(status=UserStatus.INACTIVE)
    res = client.get(f"{BASE}me/")
    assert res.status_code == 403
    assert res.json()["error_code"] == "ACCOUNT_INACTIVE"


def test_me(auth_client, doctor):
    body = auth_client(doctor).get(f"{BASE}me/").json()
    assert body["email"] == doctor.email
    assert body["role"] == "doctor"
    assert body["specialization"] == "General Practice"


def test_me_requires_auth(api_client):
    res = api_client.get(f"{BASE}me/")
    assert res.status_code == 401
    assert res.json()["error_code"] == "AUTH_REQUIRED"


def test_bad_token(api_client):
    api_client.credentials(HTTP_AUTHORIZATION="Bearer not-a-jwt")
    res = api_client.get(f"{BASE}me/")
    assert res.status_code == 401


# =============================================================================
# Doctors and dashboards
# =============================================================================

def test_doctor_directory(auth_client, nurse, doctor, make_user):
    make_user(UserRole.DOCTOR, status=UserStatus.INACTIVE)
    res = auth_client(nurse).get(f"{BASE}doctors/")
    assert res.status_code == 200
    assert [d["id"] for d in res.json()] == [doctor.id]


def test_doctor_directory_is_for_triage(auth_client, student):
    res = auth_client(student).get(f"{BASE}doctors/")
    assert res.status_code == 403
    assert res.json()["error_code"] == "ROLE_MISMATCH"


def test_patient_dashboard(auth_client, student, doctor, make_appointment):
    make_appointment(student)
    make_appointment(student, status=ApptStatus.CONFIRMED, doctor=doctor, time=time(11, 0))
    make_appointment(
        student, status=ApptStatus.COMPLETED, doctor=doctor,
        date=timezone.localdate() - timedelta(days=3),
    )
    body = auth_client(student).get(f"{BASE}dashboard/").json()
    assert body["role"] == "student"
    assert body["appointments"] == {"upcoming": 1, "pending": 1, "completed": 1}


def test_doctor_dashboard(auth_client, student, doctor, make_appointment):
    make_appointment(student, status=ApptStatus.ASSIGNED, doctor=doctor)
    make_appointment(student, status=ApptStatus.CONFIRMED, doctor=doctor, date=timezone.localdate())
    body = auth_client(doctor).get(f"{BASE}dashboard/").json()
    assert body["appointments"] == {"today": 1, "pending_confirmation": 1, "upcoming": 1}


def test_clinical_staff_dashboard(auth_client, student, nurse, make_appointment):
    from appointments.enums import ApptPriority

    make_appointment(student, priority=ApptPriority.URGENT)
    make_appointment(student, status=ApptStatus.UNDER_REVIEW, time=time(12, 0))
    body = auth_client(nurse).get(f"{BASE}dashboard/").json()
    assert body["queue"]["pending"] == 1
    assert body["queue"]["under_review"] == 1
    assert body["urgent"] == 1


def test_admin_dashboard(auth_client, admin_user, student, doctor):
    body = auth_client(admin_user).get(f"{BASE}dashboard/").json()
    assert body["users"]["total"] == 3
    assert body["users"]["by_role"] == {"admin": 1, "student": 1, "doctor": 1}
    assert body["appointments_total"] == 0
