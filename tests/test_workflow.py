from datetime import datetime, timedelta, timezone as dt_timezone
from types import SimpleNamespace

import pytest

from accounts.enums import UserRole
from appointments.enums import ApptPriority, ApptStatus
from appointments.workflow import (
    ROLE_ACTIONS,
    STATUS_WORKFLOW,
    TERMINAL_STATUSES,
    can_transition_to,
    find_action,
    get_appointment_timeline,
    get_available_actions,
    get_notification_message,
    get_priority_badge,
    get_status_badge_class,
    get_status_text,
    is_terminal,
    role_has_action,
)


# =============================================================================
# Status table
# =============================================================================

def test_every_status_has_a_row():
    assert set(STATUS_WORKFLOW) == {s for s in ApptStatus}


def test_terminal_statuses():
    assert TERMINAL_STATUSES == {ApptStatus.REJECTED, ApptStatus.COMPLETED, ApptStatus.CANCELLED}
    for s in TERMINAL_STATUSES:
        assert is_terminal(s)
        assert STATUS_WORKFLOW[s] == ()
    assert not is_terminal(ApptStatus.PENDING)


def test_no_status_transitions_to_itself():
    for current, nxt in STATUS_WORKFLOW.items():
        assert current not in nxt


def test_can_transition_to_matches_the_table_exactly():
    for current in ApptStatus:
        for requested in ApptStatus:
            assert can_transition_to(current, requested) is (requested in STATUS_WORKFLOW[current])


@pytest.mark.parametrize(
    "current,requested,allowed",
    [
        (ApptStatus.PENDING, ApptStatus.UNDER_REVIEW, True),
        (ApptStatus.PENDING, ApptStatus.CONFIRMED, False),
        (ApptStatus.UNDER_REVIEW, ApptStatus.ASSIGNED, True),
        (ApptStatus.UNDER_REVIEW, ApptStatus.REJECTED, True),
        (ApptStatus.ASSIGNED, ApptStatus.RESCHEDULED, True),
        (ApptStatus.ASSIGNED, ApptStatus.COMPLETED, False),
        (ApptStatus.CONFIRMED, ApptStatus.COMPLETED, True),
        (ApptStatus.RESCHEDULED, ApptStatus.CONFIRMED, True),
        (ApptStatus.RESCHEDULED, ApptStatus.ASSIGNED, False),
        (ApptStatus.COMPLETED, ApptStatus.CANCELLED, False),
        ("unknown", ApptStatus.PENDING, False),
    ],
)
def test_can_transition_to(current, requested, allowed):
    assert can_transition_to(current, requested) is allowed


# =============================================================================
# Action resolver
# =============================================================================

def test_action_targets_stay_inside_the_table():
    for (role, status), actions in ROLE_ACTIONS.items():
        for a in actions:
            assert a.next_status == status or can_transition_to(status, a.next_status), (role, a)


def test_only_reassign_loops():
    loops = [
        a.action
        for (_, status), actions in ROLE_ACTIONS.items()
        for a in actions
        if a.next_status == status
    ]
    assert loops == ["reassign"]


def test_clinical_staff_actions_on_under_review():
    actions = get_available_actions(ApptStatus.UNDER_REVIEW, UserRole.CLINICAL_STAFF)
    assert [a.action for a in actions] == ["assign", "reject"]
    assert actions[0].as_dict() == {
        "action": "assign",
        "label": "Assign to Doctor",
        "style": "btn-primary",
        "next_status": "assigned",
    }


def test_doctor_actions_on_assigned_and_confirmed():
    assert [a.action for a in get_available_actions(ApptStatus.ASSIGNED, UserRole.DOCTOR)] == [
        "confirm",
        "reschedule",
    ]
    assert [a.action for a in get_available_actions(ApptStatus.CONFIRMED, UserRole.DOCTOR)] == [
        "complete",
        "cancel",
    ]


@pytest.mark.parametrize("role", [UserRole.STUDENT, UserRole.ACADEMIC_STAFF, UserRole.ADMIN])
def test_roles_without_actions(role):
    for status in ApptStatus:
        assert get_available_actions(status, role) == []


def test_terminal_statuses_offer_nothing():
    for status in TERMINAL_STATUSES:
        for role in UserRole:
            assert get_available_actions(status, role) == []


def test_find_action_and_role_has_action():
    assert find_action(ApptStatus.PENDING, UserRole.CLINICAL_STAFF, "review").next_status == ApptStatus.UNDER_REVIEW
    assert find_action(ApptStatus.ASSIGNED, UserRole.CLINICAL_STAFF, "review") is None
    assert role_has_action(UserRole.DOCTOR, "confirm")
    assert not role_has_action(UserRole.DOCTOR, "assign")
    assert not role_has_action(UserRole.STUDENT, "cancel")


# =============================================================================
# Notification messages
# =============================================================================

def test_every_status_has_a_message():
    for status in ApptStatus:
        msg = get_notification_message(status)
        assert set(msg) == {"title", "message", "type"}
        assert msg["title"] != "Appointment Updated"


def test_rejection_reason_is_quoted_verbatim():
    msg = get_notification_message(ApptStatus.REJECTED, {"rejection_reason": "Outside clinic hours <b>"})
    assert msg["type"] == "error"
    assert msg["message"].endswith("Reason: Outside clinic hours <b>")


def test_confirmed_message_interpolates_doctor_and_slot():
    msg = get_notification_message(
        ApptStatus.CONFIRMED, {"doctor_name": "Ayşe Demir", "date": "14/03/2025", "time": "10:30"}
    )
    assert msg["title"] == "Appointment Confirmed"
    assert msg["message"] == "Your appointment with Dr. Ayşe Demir is confirmed for 14/03/2025 at 10:30."
    assert msg["type"] == "success"


def test_missing_data_renders_empty():
    msg = get_notification_message(ApptStatus.ASSIGNED)
    assert "None" not in msg["message"]
    assert "Dr. ." in msg["message"]


def test_cancel_reason_is_optional():
    assert get_notification_message(ApptStatus.CANCELLED)["message"] == "Your appointment has been cancelled."
    with_reason = get_notification_message(ApptStatus.CANCELLED, {"cancel_reason": "Doctor ill"})
    assert with_reason["message"].endswith("Reason: Doctor ill")


def test_unknown_status_gets_generic_message():
    msg = get_notification_message("archived")
    assert msg == {
        "title": "Appointment Updated",
        "message": "Your appointment status has been updated.",
        "type": "info",
    }


# =============================================================================
# Display helpers
# =============================================================================

def test_status_text_and_badges():
    assert get_status_text(ApptStatus.UNDER_REVIEW) == "Under Review"
    assert get_status_text("mystery") == "mystery"
    assert get_status_badge_class(ApptStatus.CONFIRMED) == "badge bg-success"
    assert get_status_badge_class("mystery") == "badge bg-secondary"


def test_priority_badge_falls_back_to_normal():
    assert get_priority_badge(ApptPriority.URGENT) == {"class": "badge bg-danger", "text": "Urgent"}
    assert get_priority_badge("whenever") == get_priority_badge(ApptPriority.NORMAL)


def test_priority_badge_returns_a_copy():
    badge = get_priority_badge(ApptPriority.LOW)
    badge["text"] = "changed"
    assert get_priority_badge(ApptPriority.LOW)["text"] == "Low"


# =============================================================================
# Timeline
# =============================================================================

def test_timeline_lists_populated_steps_in_order():
    t0 = datetime(2025, 3, 1, 9, 0, tzinfo=dt_timezone.utc)
    appt = SimpleNamespace(
        created_at=t0,
        reviewed_at=t0 + timedelta(hours=1),
        assigned_at=t0 + timedelta(hours=2),
        rejected_at=None,
        confirmed_at=t0 + timedelta(hours=3),
        completed_at=None,
        cancelled_at=None,
        doctor=SimpleNamespace(name="Mehmet Kaya"),
    )
    timeline = get_appointment_timeline(appt)
    assert [e["status"] for e in timeline] == ["pending", "under_review", "assigned", "confirmed"]
    assert timeline[2]["description"] == "Assigned to Dr. Mehmet Kaya"
    assert timeline[0]["timestamp"] == t0


def test_timeline_sorts_by_timestamp():
    t0 = datetime(2025, 3, 1, 9, 0, tzinfo=dt_timezone.utc)
    appt = SimpleNamespace(
        created_at=t0,
        reviewed_at=None,
        assigned_at=None,
        rejected_at=None,
        confirmed_at=None,
        completed_at=None,
        # cancellation recorded with an earlier clock than creation
        cancelled_at=t0 - timedelta(minutes=5),
        doctor=None,
    )
    assert [e["status"] for e in get_appointment_timeline(appt)] == ["cancelled", "pending"]
