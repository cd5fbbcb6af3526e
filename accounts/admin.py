from django.contrib import admin
from django.contrib.auth.admin import UserAdmin as BaseUserAdmin
from .models import User

@admin.register(User)
class UserAdmin(BaseUserAdmin):
    list_display = ("email","name","role","status","email_verified","last_login")
    list_filter = ("role","status","email_verified")
    search_fields = ("email","name","student_id","staff_no")
    ordering = ("-date_joined",)
    fieldsets = (
        (None, {"fields": ("email","password")}),
        ("Profile", {"fields": ("name","phone","student_id","staff_no","department","specialization")}),
        ("Clinic", {"fields": ("role","status","email_verified")}),
        ("Permissions", {"fields": ("is_active","is_staff","is_superuser","groups","user_permissions")}),
        ("Dates", {"fields": ("last_login","date_joined")}),
    )
    add_fieldsets = (
        (None, {"classes": ("wide",), "fields": ("email","name","role","password1","password2")}),
    )
