from django.http import JsonResponse
from rest_framework.exceptions import APIException

from accounts.authentication import HeaderJWTAuthentication
from accounts.enums import UserRole
from .exceptions import MaintenanceMode
from .settings_cache import settings_cache

# reachable during maintenance so admins can still sign in
EXEMPT_PATHS = (
    "/api/accounts/login/",
    "/api/accounts/token/refresh/",
    "/api/schema/",
)


def _is_admin_request(request) -> bool:
    try:
        result = HeaderJWTAuthentication().authenticate(request)
    except APIException:
        return False
    return bool(result) and result[0].role in UserRole.admin_roles()


class MaintenanceModeMiddleware:
    """
    While general.maintenance_mode is on, API calls answer 503 unless they
    carry an admin's token.
    """
    def __init__(self, get_response):
        self.get_response = get_response

    def __call__(self, request):
        if (
            request.path.startswith("/api/")
            and not request.path.startswith(EXEMPT_PATHS)
            and settings_cache.is_maintenance_mode()
            and not _is_admin_request(request)
        ):
            exc = MaintenanceMode()
            return JsonResponse(
                {"message": str(exc.detail), "error_code": exc.error_code},
                status=exc.status_code,
            )
        return self.get_response(request)
