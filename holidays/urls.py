from django.urls import include, path
from rest_framework.routers import DefaultRouter

from .views import CalendarSourceViewSet, HolidayViewSet

router = DefaultRouter()
router.register(r"sources", CalendarSourceViewSet, basename="calendar-source")
router.register(r"", HolidayViewSet, basename="holiday")

urlpatterns = [
    path("", include(router.urls)),
]
