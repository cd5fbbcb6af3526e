"""appointments.workflow

The appointment status model and the two resolvers built on it.

Everything here is pure: no database access, no side effects. The HTTP layer
(appointments.views) and the transition service consult these functions
before mutating anything, and every appointment payload carries
`available_actions` so clients never need their own copy of the table.
"""

from typing import NamedTuple

from accounts.enums import UserRole
from .enums import ApptPriority, ApptStatus

STATUS_WORKFLOW: dict[str, tuple[str, ...]] = {
    ApptStatus.PENDING: (ApptStatus.UNDER_REVIEW,),
    ApptStatus.UNDER_REVIEW: (ApptStatus.ASSIGNED, ApptStatus.REJECTED),
    ApptStatus.ASSIGNED: (ApptStatus.CONFIRMED, ApptStatus.RESCHEDULED, ApptStatus.REJECTED),
    ApptStatus.CONFIRMED: (ApptStatus.COMPLETED, ApptStatus.CANCELLED),
    ApptStatus.RESCHEDULED: (ApptStatus.CONFIRMED, ApptStatus.CANCELLED),
    ApptStatus.REJECTED: (),
    ApptStatus.COMPLETED: (),
    ApptStatus.CANCELLED: (),
}

TERMINAL_STATUSES = frozenset(s for s, nxt in STATUS_WORKFLOW.items() if not nxt)


def can_transition_to(current: str, requested: str) -> bool:
    return requested in STATUS_WORKFLOW.get(current, ())


def is_terminal(status: str) -> bool:
    return status in TERMINAL_STATUSES


class Action(NamedTuple):
    action: str
    label: str
    style: str
    next_status: str

    def as_dict(self) -> dict:
        return {**self._asdict(), "next_status": str(self.next_status)}


# (role, status) -> ordered actions. "reassign" is the only self-loop.
ROLE_ACTIONS: dict[tuple[str, str], tuple[Action, ...]] = {
    (UserRole.CLINICAL_STAFF, ApptStatus.PENDING): (
        Action("review", "Start Review", "btn-info", ApptStatus.UNDER_REVIEW),
    ),
    (UserRole.CLINICAL_STAFF, ApptStatus.UNDER_REVIEW): (
        Action("assign", "Assign to Doctor", "btn-primary", ApptStatus.ASSIGNED),
        Action("reject", "Reject", "btn-danger", ApptStatus.REJECTED),
    ),
    (UserRole.CLINICAL_STAFF, ApptStatus.ASSIGNED): (
        Action("reassign", "Reassign", "btn-warning", ApptStatus.ASSIGNED),
    ),
    (UserRole.DOCTOR, ApptStatus.ASSIGNED): (
        Action("confirm", "Confirm", "btn-success", ApptStatus.CONFIRMED),
        Action("reschedule", "Reschedule", "btn-warning", ApptStatus.RESCHEDULED),
    ),
    (UserRole.DOCTOR, ApptStatus.CONFIRMED): (
        Action("complete", "Mark Complete", "btn-success", ApptStatus.COMPLETED),
        Action("cancel", "Cancel", "btn-danger", ApptStatus.CANCELLED),
    ),
}

def get_available_actions(status: str, role: str) -> list[Action]:
    return list(ROLE_ACTIONS.get((role, status), ()))


def find_action(status: str, role: str, name: str) -> Action | None:
    for a in get_available_actions(status, role):
        if a.action == name:
            return a
    return None


def role_has_action(role: str, name: str) -> bool:
    return any(
        a.action == name
        for (r, _), actions in ROLE_ACTIONS.items() if r == role
        for a in actions
    )


def get_notification_message(status: str, data: dict | None = None) -> dict:
    """
    Patient-facing title/message/type for a status. Missing data keys render
    as empty strings; the rejection reason is inserted as given.
    """
    d = data or {}
    doctor = d.get("doctor_name") or ""
    cancel_reason = d.get("cancel_reason")

    messages = {
        ApptStatus.PENDING: (
            "Appointment Request Submitted",
            "Your appointment request has been submitted and is pending review by clinical staff.",
            "info",
        ),
        ApptStatus.UNDER_REVIEW: (
            "Appointment Under Review",
            "Clinical staff is reviewing your appointment request.",
            "info",
        ),
        ApptStatus.ASSIGNED: (
            "Appointment Assigned",
            f"Your appointment has been assigned to Dr. {doctor}. Awaiting doctor confirmation.",
            "info",
        ),
        ApptStatus.REJECTED: (
            "Appointment Rejected",
            f"Your appointment request has been rejected. Reason: {d.get('rejection_reason') or ''}",
            "error",
        ),
        ApptStatus.CONFIRMED: (
            "Appointment Confirmed",
            f"Your appointment with Dr. {doctor} is confirmed for {d.get('date') or ''} at {d.get('time') or ''}.",
            "success",
        ),
        ApptStatus.RESCHEDULED: (
            "Appointment Rescheduled",
            f"Dr. {doctor} has requested to reschedule your appointment. "
            f"New time: {d.get('new_date') or ''} at {d.get('new_time') or ''}.",
            "warning",
        ),
        ApptStatus.COMPLETED: (
            "Appointment Completed",
            "Your appointment has been completed successfully.",
            "success",
        ),
        ApptStatus.CANCELLED: (
            "Appointment Cancelled",
            "Your appointment has been cancelled." + (f" Reason: {cancel_reason}" if cancel_reason else ""),
            "error",
        ),
    }
    title, message, kind = messages.get(
        status,
        ("Appointment Updated", "Your appointment status has been updated.", "info"),
    )
    return {"title": title, "message": message, "type": kind}


def get_status_text(status: str) -> str:
    try:
        return str(ApptStatus(status).label)
    except ValueError:
        return status


STATUS_BADGES = {
    ApptStatus.PENDING: "badge bg-warning text-dark",
    ApptStatus.UNDER_REVIEW: "badge bg-info",
    ApptStatus.ASSIGNED: "badge bg-primary",
    ApptStatus.REJECTED: "badge bg-danger",
    ApptStatus.CONFIRMED: "badge bg-success",
    ApptStatus.RESCHEDULED: "badge bg-secondary",
    ApptStatus.COMPLETED: "badge bg-dark",
    ApptStatus.CANCELLED: "badge bg-secondary",
}

PRIORITY_BADGES = {
    ApptPriority.URGENT: {"class": "badge bg-danger", "text": "Urgent"},
    ApptPriority.HIGH: {"class": "badge bg-warning text-dark", "text": "High"},
    ApptPriority.NORMAL: {"class": "badge bg-success", "text": "Normal"},
    ApptPriority.LOW: {"class": "badge bg-secondary", "text": "Low"},
}


def get_status_badge_class(status: str) -> str:
    return STATUS_BADGES.get(status, "badge bg-secondary")


def get_priority_badge(priority: str) -> dict:
    return dict(PRIORITY_BADGES.get(priority, PRIORITY_BADGES[ApptPriority.NORMAL]))


# (timestamp attribute, status, title, description)
_TIMELINE_STEPS = (
    ("created_at", ApptStatus.PENDING, "Request Submitted", "Appointment request submitted by patient"),
    ("reviewed_at", ApptStatus.UNDER_REVIEW, "Under Review", "Clinical staff started reviewing the request"),
    ("assigned_at", ApptStatus.ASSIGNED, "Assigned to Doctor", None),
    ("rejected_at", ApptStatus.REJECTED, "Rejected", "Request was rejected by clinical staff"),
    ("confirmed_at", ApptStatus.CONFIRMED, "Confirmed", "Doctor confirmed the appointment"),
    ("completed_at", ApptStatus.COMPLETED, "Completed", "Appointment completed successfully"),
    ("cancelled_at", ApptStatus.CANCELLED, "Cancelled", "Appointment was cancelled"),
)


def get_appointment_timeline(appointment) -> list[dict]:
    """One entry per populated timestamp, oldest first."""
    timeline = []
    for attr, status, title, description in _TIMELINE_STEPS:
        ts = getattr(appointment, attr, None)
        if not ts:
            continue
        if description is None:
            doctor = getattr(appointment, "doctor", None)
            name = getattr(doctor, "name", "") if doctor is not None else ""
            description = f"Assigned to Dr. {name}".strip()
        timeline.append({"status": str(status), "timestamp": ts, "title": title, "description": description})
    timeline.sort(key=lambda e: e["timestamp"])
    return timeline
