import pytest

from accounts.enums import UserRole, UserStatus
from accounts.models import User
from core.models import SystemSetting
from core.settings_cache import settings_cache
from tests.conftest import PASSWORD

pytestmark = pytest.mark.django_db

USERS = "/api/accounts/users/"
SETTINGS = "/api/settings/"


# =============================================================================
# User management
# =============================================================================

def test_admin_lists_and_filters_users(auth_client, admin_user, student, doctor):
    client = auth_client(admin_user)
    assert {u["id"] for u in client.get(USERS).json()} == {admin_user.id, student.id, doctor.id}
    assert [u["id"] for u in client.get(USERS, {"role": "doctor"}).json()] == [doctor.id]
    assert [u["id"] for u in client.get(USERS, {"q": student.student_id}).json()] == [student.id]


def test_deactivate_and_activate(auth_client, admin_user, student):
    client = auth_client(admin_user)

    res = client.post(f"{USERS}{student.id}/deactivate/")
    assert res.status_code == 200
    assert res.json()["status"] == "inactive"
    assert auth_client(student).get("/api/accounts/me/").json()["error_code"] == "ACCOUNT_INACTIVE"
    assert [u["id"] for u in client.get(USERS, {"status": "inactive"}).json()] == [student.id]

    res = client.post(f"{USERS}{student.id}/activate/")
    assert res.json()["status"] == "active"
    assert auth_client(student).get("/api/accounts/me/").status_code == 200


def test_admins_cannot_deactivate_themselves(auth_client, admin_user):
    res = auth_client(admin_user).post(f"{USERS}{admin_user.id}/deactivate/")
    assert res.status_code == 422
    admin_user.refresh_from_db()
    assert admin_user.status == UserStatus.ACTIVE


def test_verify_email(auth_client, admin_user, inactive_student):
    res = auth_client(admin_user).post(f"{USERS}{inactive_student.id}/verify-email/")
    assert res.status_code == 200
    inactive_student.refresh_from_db()
    assert inactive_student.email_verified
    assert inactive_student.is_account_active


@pytest.mark.parametrize("role", [UserRole.STUDENT, UserRole.DOCTOR, UserRole.CLINICAL_STAFF])
def test_user_management_is_admin_only(auth_client, make_user, student, role):
    client = auth_client(make_user(role))
    assert client.get(USERS).status_code == 403
    res = client.post(f"{USERS}{student.id}/deactivate/")
    assert res.status_code == 403
    assert res.json()["error_code"] == "ROLE_MISMATCH"


# =============================================================================
# System settings
# =============================================================================

def test_admin_reads_merged_settings(auth_client, admin_user):
    body = auth_client(admin_user).get(SETTINGS).json()
    assert body["general"]["registration_enabled"] is True
    assert body["appointments"]["block_on_holidays"] is True


def test_admin_updates_a_section(auth_client, admin_user):
    assert settings_cache.is_registration_enabled() is True
    res = auth_client(admin_user).patch(
        SETTINGS,
        {"general": {"registration_enabled": False}, "authentication": {"password_min_length": 12}},
        format="json",
    )
    assert res.status_code == 200, res.data
    assert res.json()["general"]["registration_enabled"] is False
    assert res.json()["general"]["site_name"] == "University Health System"
    assert settings_cache.is_registration_enabled() is False
    assert settings_cache.get_password_requirements()["min_length"] == 12


@pytest.mark.parametrize(
    "payload,field",
    [
        ({"billing": {"x": 1}}, "billing"),
        ({"general": "off"}, "general"),
        ({"general": {"unknown_flag": True}}, "general"),
        ({"authentication": {"password_min_length": "twelve"}}, "authentication"),
        ({"general": {"maintenance_mode": 1}}, "general"),
    ],
)
def test_invalid_settings_are_refused(auth_client, admin_user, payload, field):
    res = auth_client(admin_user).patch(SETTINGS, payload, format="json")
    assert res.status_code == 422
    assert field in res.json()["errors"]
    assert SystemSetting.get_instance().get_all_settings()["general"]["maintenance_mode"] is False


def test_settings_are_admin_only(auth_client, nurse):
    res = auth_client(nurse).patch(SETTINGS, {"general": {"registration_enabled": False}}, format="json")
    assert res.status_code == 403
    assert settings_cache.is_registration_enabled() is True


# =============================================================================
# Maintenance mode
# =============================================================================

@pytest.fixture
def maintenance(db):
    SystemSetting.get_instance().update_section("general", {"maintenance_mode": True})


def test_maintenance_turns_users_away(maintenance, auth_client, api_client, student):
    res = auth_client(student).get("/api/appointments/")
    assert res.status_code == 503
    assert res.json()["error_code"] == "MAINTENANCE_MODE"
    assert api_client.get("/api/holidays/").status_code == 503


def test_maintenance_lets_admins_work(maintenance, auth_client, admin_user):
    client = auth_client(admin_user)
    assert client.get("/api/appointments/").status_code == 200
    res = client.patch(SETTINGS, {"general": {"maintenance_mode": False}}, format="json")
    assert res.status_code == 200
    assert settings_cache.is_maintenance_mode() is False


def test_maintenance_login(maintenance, api_client, student, admin_user):
    res = api_client.post("/api/accounts/login/", {"email": student.email, "password": PASSWORD}, format="json")
    assert res.status_code == 503
    assert res.json()["error_code"] == "MAINTENANCE_MODE"

    res = api_client.post("/api/accounts/login/", {"email": admin_user.email, "password": PASSWORD}, format="json")
    assert res.status_code == 200


def test_registration_honours_email_verification_setting(api_client):
    payload = {
        "email": "walk.in@uni.test", "password": PASSWORD, "name": "Walk In",
        "role": "student", "student_id": "20259999",
    }
    SystemSetting.get_instance().update_section("general", {"email_verification_required": False})
    assert api_client.post("/api/accounts/register/", payload, format="json").status_code == 201
    assert User.objects.get(email="walk.in@uni.test").email_verified is True
