from rest_framework import serializers

from .enums import HolidaySource
from .models import AcademicHoliday, CalendarSource


class AcademicHolidaySerializer(serializers.ModelSerializer):
    duration_days = serializers.IntegerField(read_only=True)
    academic_year = serializers.IntegerField(required=False)

    class Meta:
        model = AcademicHoliday
        fields = [
            "id",
            "name",
            "description",
            "start_date",
            "end_date",
            "duration_days",
            "type",
            "affects_staff_type",
            "blocks_appointments",
            "academic_year",
            "source",
            "is_active",
            "created_at",
            "updated_at",
        ]
        read_only_fields = ["source", "created_at", "updated_at"]
        # (name, academic_year) is checked in validate() since academic_year may be derived
        validators = []

    def validate(self, attrs):
        start = attrs.get("start_date", getattr(self.instance, "start_date", None))
        end = attrs.get("end_date", getattr(self.instance, "end_date", None))
        if start and end and end < start:
            raise serializers.ValidationError({"end_date": "End date must be on or after the start date."})
        if "academic_year" not in attrs and self.instance is None and start:
            attrs["academic_year"] = start.year

        name = attrs.get("name", getattr(self.instance, "name", None))
        year = attrs.get("academic_year", getattr(self.instance, "academic_year", None))
        clash = AcademicHoliday.objects.filter(name=name, academic_year=year)
        if self.instance is not None:
            clash = clash.exclude(pk=self.instance.pk)
        if clash.exists():
            raise serializers.ValidationError({"name": "A holiday with this name already exists for that year."})
        return attrs

    def create(self, validated):
        validated.setdefault("source", HolidaySource.MANUAL)
        return super().create(validated)


class CalendarSourceSerializer(serializers.ModelSerializer):
    is_reliable = serializers.BooleanField(read_only=True)

    class Meta:
        model = CalendarSource
        fields = [
            "id",
            "name",
            "url_pattern",
            "type",
            "priority",
            "is_active",
            "auto_discovered",
            "is_reliable",
            "last_checked",
            "last_successful_sync",
            "consecutive_failures",
            "last_error",
            "sync_metadata",
        ]
        read_only_fields = [
            "auto_discovered",
            "last_checked",
            "last_successful_sync",
            "consecutive_failures",
            "last_error",
            "sync_metadata",
        ]


class SyncRequestSerializer(serializers.Serializer):
    year = serializers.IntegerField(required=False, min_value=2000, max_value=2100)
