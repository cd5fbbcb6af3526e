from django.contrib import admin
from .models import Notification

@admin.register(Notification)
class NotificationAdmin(admin.ModelAdmin):
    list_display = ("id","user","category","delivery_method","status","title","attempts","created_at")
    list_filter = ("category","delivery_method","status")
    search_fields = ("title","message","user__email")
    readonly_fields = ("sent_at","read_at","attempts","last_error")
