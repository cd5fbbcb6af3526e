from django.contrib import admin
from .models import AcademicHoliday, CalendarSource

@admin.register(AcademicHoliday)
class AcademicHolidayAdmin(admin.ModelAdmin):
    list_display = ("name","start_date","end_date","type","affects_staff_type","blocks_appointments","academic_year","source","is_active")
    list_filter = ("type","blocks_appointments","academic_year","source","is_active")
    search_fields = ("name","description")

@admin.register(CalendarSource)
class CalendarSourceAdmin(admin.ModelAdmin):
    list_display = ("name","url_pattern","type","priority","is_active","consecutive_failures","last_successful_sync")
    list_filter = ("type","is_active","auto_discovered")
    search_fields = ("name","url_pattern")
