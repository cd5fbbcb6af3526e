"""appointments/services/transitions.py

The only code that changes an appointment's status.

Two entry points share one mutation path:

* `apply_action`: a named action from the resolver ("review", "assign", ...).
  The action must be offered by `get_available_actions(current, role)`.
* `update_status`: a raw target status. The target must be owned by the
  actor's role (STATUS_OWNERS) and either match an action the resolver offers
  or be one of the UNNAMED_MOVES out of `rescheduled`.

Rows are locked with select_for_update for the duration of the check and the
write; the status-changed signal fires once the lock is released.
"""

import logging

from django.db import transaction
from django.utils import timezone
from rest_framework.exceptions import ValidationError

from accounts.enums import UserRole
from core.exceptions import InvalidTransition, NotAssignedDoctor, RoleMismatch
from ..enums import ApptStatus
from ..models import Appointment
from ..signals import appointment_status_changed
from ..workflow import (
    ROLE_ACTIONS,
    can_transition_to,
    find_action,
    get_available_actions,
    role_has_action,
)

logger = logging.getLogger(__name__)

# Which role may move an appointment into each status.
STATUS_OWNERS = {
    ApptStatus.UNDER_REVIEW: UserRole.CLINICAL_STAFF,
    ApptStatus.ASSIGNED: UserRole.CLINICAL_STAFF,
    ApptStatus.REJECTED: UserRole.CLINICAL_STAFF,
    ApptStatus.CONFIRMED: UserRole.DOCTOR,
    ApptStatus.RESCHEDULED: UserRole.DOCTOR,
    ApptStatus.COMPLETED: UserRole.DOCTOR,
    ApptStatus.CANCELLED: UserRole.DOCTOR,
}

# Moves no named action covers.
UNNAMED_MOVES = {
    (ApptStatus.RESCHEDULED, ApptStatus.CONFIRMED),
    (ApptStatus.RESCHEDULED, ApptStatus.CANCELLED),
}


def ensure_role_has_action(role: str, action: str) -> None:
    if not role_has_action(role, action):
        raise RoleMismatch()


def _action_target(role: str, action: str) -> str | None:
    for (r, _), actions in ROLE_ACTIONS.items():
        if r != role:
            continue
        for a in actions:
            if a.action == action:
                return a.next_status
    return None


def _raw_move_action(current: str, target: str, role: str) -> str | None:
    """
    Name of the resolver action behind a raw move, "" for an unnamed move,
    None when the caller is not offered the move.
    """
    for a in get_available_actions(current, role):
        if a.next_status == target and target != current:
            return a.action
    if (current, target) in UNNAMED_MOVES and STATUS_OWNERS.get(target) == role:
        return ""
    return None


def _check_doctor(appt: Appointment, actor) -> None:
    if actor.role == UserRole.DOCTOR and appt.doctor_id != actor.id:
        raise NotAssignedDoctor()


def _require(data: dict, key: str, message: str):
    value = data.get(key)
    if value in (None, ""):
        raise ValidationError({key: [message]})
    return value


def _apply(appt: Appointment, target: str, *, actor, data: dict, action: str | None) -> list[str]:
    """Mutate `appt` for the move to `target`. Returns the fields touched."""
    now = timezone.now()
    previous = appt.status
    fields = ["status", "updated_at"]

    if target == ApptStatus.UNDER_REVIEW:
        appt.reviewed_by = actor
        appt.reviewed_at = now
        fields += ["reviewed_by", "reviewed_at"]

    elif target == ApptStatus.ASSIGNED:
        doctor = _require(data, "doctor", "A doctor is required.")
        if action == "reassign" or previous == ApptStatus.ASSIGNED:
            if doctor.id == appt.doctor_id:
                raise ValidationError({"doctor": ["Appointment is already assigned to this doctor."]})
            appt.reassignment_count += 1
            fields.append("reassignment_count")
        appt.doctor = doctor
        appt.assigned_by = actor
        appt.assigned_at = now
        fields += ["doctor", "assigned_by", "assigned_at"]

    elif target == ApptStatus.REJECTED:
        appt.rejection_reason = _require(data, "reason", "A rejection reason is required.")
        appt.rejected_at = now
        fields += ["rejection_reason", "rejected_at"]

    elif target == ApptStatus.CONFIRMED:
        if previous == ApptStatus.RESCHEDULED and appt.rescheduled_date:
            appt.date = appt.rescheduled_date
            appt.time = appt.rescheduled_time or appt.time
            fields += ["date", "time"]
        appt.confirmed_at = now
        fields.append("confirmed_at")

    elif target == ApptStatus.RESCHEDULED:
        appt.rescheduled_date = _require(data, "new_date", "A new date is required.")
        appt.rescheduled_time = _require(data, "new_time", "A new time is required.")
        appt.reschedule_reason = data.get("reason") or ""
        fields += ["rescheduled_date", "rescheduled_time", "reschedule_reason"]

    elif target == ApptStatus.COMPLETED:
        appt.completed_at = now
        fields.append("completed_at")

    elif target == ApptStatus.CANCELLED:
        appt.cancellation_reason = data.get("reason") or ""
        appt.cancelled_at = now
        fields += ["cancellation_reason", "cancelled_at"]

    notes = (data.get("notes") or "").strip()
    if notes:
        appt.notes = f"{appt.notes}\n{notes}".strip()
        fields.append("notes")

    appt.status = target
    return fields


def _announce(appt: Appointment, previous: str, actor, action: str | None) -> None:
    logger.info(
        "Appointment %s: %s -> %s by user=%s (%s) action=%s",
        appt.id, previous, appt.status, actor.id, actor.role, action or "status",
    )
    appointment_status_changed.send(
        sender=Appointment,
        appointment=appt,
        previous_status=previous,
        actor=actor,
        action=action,
    )


def apply_action(pk: int, action: str, *, actor, data: dict | None = None) -> Appointment:
    data = data or {}
    ensure_role_has_action(actor.role, action)

    with transaction.atomic():
        appt = Appointment.objects.select_for_update().get(pk=pk)
        current = appt.status
        act = find_action(current, actor.role, action)
        if act is None:
            raise InvalidTransition(current=current, requested=_action_target(actor.role, action))
        # reassign is the only self-loop; everything else must be in the table
        if act.next_status != current and not can_transition_to(current, act.next_status):
            raise InvalidTransition(current=current, requested=act.next_status)
        _check_doctor(appt, actor)

        fields = _apply(appt, act.next_status, actor=actor, data=data, action=action)
        appt.save(update_fields=fields)
    _announce(appt, current, actor, action)
    return appt


def update_status(pk: int, target: str, *, actor, data: dict | None = None) -> Appointment:
    data = data or {}
    if STATUS_OWNERS.get(target) != actor.role:
        raise RoleMismatch()

    with transaction.atomic():
        appt = Appointment.objects.select_for_update().get(pk=pk)
        current = appt.status
        if not can_transition_to(current, target):
            raise InvalidTransition(current=current, requested=target)
        action = _raw_move_action(current, target, actor.role)
        if action is None:
            raise InvalidTransition(current=current, requested=target)
        _check_doctor(appt, actor)

        fields = _apply(appt, target, actor=actor, data=data, action=action or None)
        appt.save(update_fields=fields)
    _announce(appt, current, actor, action or None)
    return appt
