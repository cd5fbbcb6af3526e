from django.contrib import admin
from .models import MedicalRecord

@admin.register(MedicalRecord)
class MedicalRecordAdmin(admin.ModelAdmin):
    list_display = ("id","patient","doctor","type","visit_date","created_at")
    list_filter = ("type",)
    search_fields = ("patient__name","patient__email","diagnosis","treatment")
