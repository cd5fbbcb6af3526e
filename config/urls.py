from django.contrib import admin
from django.urls import path, include
from drf_spectacular.views import SpectacularAPIView

urlpatterns = [
    path("admin/", admin.site.urls),
    path("api/schema/", SpectacularAPIView.as_view(), name="schema"),
    path("api/settings/", include("core.urls")),
    path("api/accounts/", include("accounts.urls")),
    path("api/appointments/", include("appointments.urls")),
    path("api/notifications/", include("notifications.urls")),
    path("api/holidays/", include("holidays.urls")),
    path("api/records/", include("records.urls")),
]
