"""core.handlers

Every API error leaves as JSON with a human `message` and a machine-readable
`error_code`. Validation errors are 422 and carry field-level `errors`.

Kept apart from core.exceptions: rest_framework.views pulls in the
authentication classes, which import core.exceptions.
"""

import logging

from django.http import Http404
from django.core.exceptions import PermissionDenied as DjangoPermissionDenied
from rest_framework import exceptions, status
from rest_framework.views import exception_handler

from .exceptions import InvalidTransition

logger = logging.getLogger(__name__)

DEFAULT_ERROR_CODES = {
    "not_authenticated": "AUTH_REQUIRED",
    "authentication_failed": "AUTH_FAILED",
    "permission_denied": "ACCESS_DENIED",
    "not_found": "NOT_FOUND",
    "method_not_allowed": "METHOD_NOT_ALLOWED",
    "parse_error": "PARSE_ERROR",
    "unsupported_media_type": "UNSUPPORTED_MEDIA_TYPE",
    "throttled": "THROTTLED",
}


def _error_code(exc) -> str:
    code = getattr(exc, "error_code", None)
    if code:
        return code
    try:
        codes = exc.get_codes()
    except AttributeError:
        codes = None
    if isinstance(codes, str):
        return DEFAULT_ERROR_CODES.get(codes, codes.upper())
    if isinstance(exc, exceptions.AuthenticationFailed):
        return "AUTH_FAILED"
    return "ERROR"


def _message(data) -> str:
    if isinstance(data, dict):
        detail = data.get("detail", data)
        if isinstance(detail, (list, tuple)) and detail:
            return str(detail[0])
        return str(detail)
    if isinstance(data, list) and data:
        return str(data[0])
    return str(data)


def api_exception_handler(exc, context):
    if isinstance(exc, Http404):
        exc = exceptions.NotFound()
    elif isinstance(exc, DjangoPermissionDenied):
        exc = exceptions.PermissionDenied()

    response = exception_handler(exc, context)
    if response is None:
        return None

    if isinstance(exc, exceptions.ValidationError):
        response.status_code = status.HTTP_422_UNPROCESSABLE_ENTITY
        response.data = {
            "message": "The given data was invalid.",
            "error_code": "VALIDATION_ERROR",
            "errors": response.data,
        }
        return response

    body = {"message": _message(response.data), "error_code": _error_code(exc)}
    if isinstance(exc, InvalidTransition):
        body["current_status"] = exc.current
        body["requested_status"] = exc.requested
    if response.status_code == status.HTTP_403_FORBIDDEN:
        request = context.get("request")
        logger.warning(
            "Access denied: user=%s path=%s code=%s",
            getattr(getattr(request, "user", None), "id", None),
            getattr(request, "path", ""),
            body["error_code"],
        )
    response.data = body
    return response
