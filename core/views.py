import logging

from rest_framework.decorators import api_view, permission_classes
from rest_framework.response import Response

from accounts.permissions import IsAdmin
from .models import SystemSetting
from .serializers import SettingsUpdateSerializer

logger = logging.getLogger(__name__)


@api_view(["GET", "PATCH"])
@permission_classes([IsAdmin])
def system_settings(request):
    """GET returns every section merged over defaults; PATCH merges into sections."""
    row = SystemSetting.get_instance()
    if request.method == "PATCH":
        s = SettingsUpdateSerializer(data=request.data)
        s.is_valid(raise_exception=True)
        for section, values in s.validated_data.items():
            row.update_section(section, values)
        logger.info(
            "Settings updated by user=%s sections=%s", request.user.id, sorted(s.validated_data)
        )
    return Response(row.get_all_settings())
