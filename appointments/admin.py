from django.contrib import admin
from .models import Appointment

@admin.register(Appointment)
class AppointmentAdmin(admin.ModelAdmin):
    list_display = ("id","patient","doctor","type","priority","status","date","time","created_at")
    list_filter = ("status","priority","type")
    search_fields = ("patient__name","patient__email","doctor__name","reason","notes")
    readonly_fields = ("reviewed_at","assigned_at","confirmed_at","completed_at","cancelled_at","rejected_at")
