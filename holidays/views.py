from django.utils import timezone
from django.utils.dateparse import parse_date
from rest_framework import serializers, status, viewsets
from rest_framework.decorators import action
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response

from accounts.permissions import IsAdmin
from .models import AcademicHoliday, CalendarSource
from .serializers import AcademicHolidaySerializer, CalendarSourceSerializer, SyncRequestSerializer
from .services.blocking import is_date_blocked
from .services.sync import CalendarSyncService


class HolidayViewSet(viewsets.ModelViewSet):
    serializer_class = AcademicHolidaySerializer
    queryset = AcademicHoliday.objects.all()

    def get_permissions(self):
        if self.action in ("list", "retrieve", "check"):
            return [IsAuthenticated()]
        return [IsAdmin()]

    def get_queryset(self):
        q = self.queryset
        params = self.request.query_params
        year = params.get("year")
        type_ = params.get("type")
        blocks = params.get("blocks")
        if year:
            q = q.filter(academic_year=year)
        if type_:
            q = q.filter(type=type_)
        if blocks is not None and blocks != "":
            q = q.filter(blocks_appointments=blocks.lower() in ("1", "true", "yes"))
        return q.order_by("start_date", "id")

    @action(detail=False, methods=["post"])
    def sync(self, request):
        s = SyncRequestSerializer(data=request.data)
        s.is_valid(raise_exception=True)
        year = s.validated_data.get("year") or timezone.localdate().year
        result = CalendarSyncService().sync(year)
        return Response({"year": year, **result})

    @action(detail=False, methods=["get"])
    def check(self, request):
        raw = request.query_params.get("date")
        day = parse_date(raw) if raw else None
        if day is None:
            raise serializers.ValidationError({"date": ["Provide a date as YYYY-MM-DD."]})
        holiday = is_date_blocked(day, staff_type=request.query_params.get("staff_type") or None)
        return Response({
            "date": day.isoformat(),
            "blocked": holiday is not None,
            "holiday": AcademicHolidaySerializer(holiday).data if holiday else None,
        })


class CalendarSourceViewSet(viewsets.ModelViewSet):
    serializer_class = CalendarSourceSerializer
    queryset = CalendarSource.objects.all().order_by("priority", "id")
    permission_classes = [IsAdmin]

    @action(detail=True, methods=["post"])
    def test(self, request, pk=None):
        """Check that the source's URL answers for a year without importing anything."""
        source = self.get_object()
        year = int(request.data.get("year") or timezone.localdate().year)
        url = source.build_url(year)
        reachable = CalendarSyncService().url_exists(url)
        source.mark_checked()
        return Response({"url": url, "reachable": reachable})

    @action(detail=False, methods=["post"])
    def discover(self, request):
        s = SyncRequestSerializer(data=request.data)
        s.is_valid(raise_exception=True)
        year = s.validated_data.get("year") or timezone.localdate().year
        found = CalendarSyncService().discover(year)
        return Response({"year": year, "new_calendars_found": found}, status=status.HTTP_200_OK)
