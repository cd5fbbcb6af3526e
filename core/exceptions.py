"""core.exceptions

Domain errors raised by views and services. Each carries the `error_code`
that core.handlers renders next to the message.
"""

from rest_framework import exceptions, status


class AccountInactive(exceptions.APIException):
    status_code = status.HTTP_403_FORBIDDEN
    default_detail = "Account is not active."
    default_code = "ACCOUNT_INACTIVE"
    error_code = "ACCOUNT_INACTIVE"


class RegistrationDisabled(exceptions.APIException):
    status_code = status.HTTP_403_FORBIDDEN
    default_detail = "Registration is currently disabled."
    default_code = "REGISTRATION_DISABLED"
    error_code = "REGISTRATION_DISABLED"


class RoleMismatch(exceptions.PermissionDenied):
    default_detail = "Access denied. Your role cannot perform this action."
    default_code = "ROLE_MISMATCH"
    error_code = "ROLE_MISMATCH"


class NotAssignedDoctor(exceptions.PermissionDenied):
    default_detail = "Only the assigned doctor can act on this appointment."
    default_code = "NOT_ASSIGNED_DOCTOR"
    error_code = "NOT_ASSIGNED_DOCTOR"


class InvalidTransition(exceptions.APIException):
    status_code = status.HTTP_422_UNPROCESSABLE_ENTITY
    default_detail = "This status change is not allowed."
    default_code = "INVALID_STATUS_TRANSITION"
    error_code = "INVALID_STATUS_TRANSITION"

    def __init__(self, current=None, requested=None, detail=None):
        self.current = current
        self.requested = requested
        if detail is None and current is not None:
            detail = f"Cannot move appointment from '{current}' to '{requested}'."
        super().__init__(detail=detail)


class DateBlocked(exceptions.APIException):
    status_code = status.HTTP_409_CONFLICT
    default_detail = "Appointments cannot be booked on this date."
    default_code = "DATE_BLOCKED"
    error_code = "DATE_BLOCKED"

    def __init__(self, holiday=None, detail=None):
        self.holiday = holiday
        if detail is None and holiday is not None:
            detail = f"Appointments cannot be booked during '{holiday.name}'."
        super().__init__(detail=detail)


class MaintenanceMode(exceptions.APIException):
    status_code = status.HTTP_503_SERVICE_UNAVAILABLE
    default_detail = "The clinic system is under maintenance. Please try again later."
    default_code = "MAINTENANCE_MODE"
    error_code = "MAINTENANCE_MODE"
