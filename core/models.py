import copy

from django.db import models


DEFAULT_SETTINGS = {
    "general": {
        "site_name": "University Health System",
        "timezone": "UTC+3",
        "default_language": "en",
        "maintenance_mode": False,
        "registration_enabled": True,
        "email_verification_required": True,
    },
    "authentication": {
        "password_min_length": 8,
        "password_require_uppercase": True,
        "password_require_lowercase": True,
        "password_require_numbers": True,
        "password_require_symbols": False,
        "session_timeout": 1440,
        "max_login_attempts": 5,
    },
    "appointments": {
        "block_on_holidays": True,
    },
}

SECTIONS = tuple(DEFAULT_SETTINGS.keys())


class SystemSetting(models.Model):
    """
    Singleton row holding grouped system settings as JSON.
    Read through core.settings_cache, never directly on hot paths.
    """
    data = models.JSONField(default=dict, blank=True)
    updated_at = models.DateTimeField(auto_now=True)

    def __str__(self):
        return f"SystemSetting#{self.pk}"

    @classmethod
    def get_instance(cls) -> "SystemSetting":
        obj = cls.objects.order_by("id").first()
        if obj is None:
            obj = cls.objects.create(data=copy.deepcopy(DEFAULT_SETTINGS))
        return obj

    def get_all_settings(self) -> dict:
        merged = copy.deepcopy(DEFAULT_SETTINGS)
        for section, values in (self.data or {}).items():
            if isinstance(values, dict):
                merged.setdefault(section, {}).update(values)
            else:
                merged[section] = values
        return merged

    def update_section(self, section: str, values: dict) -> bool:
        if section not in SECTIONS:
            return False
        data = dict(self.data or {})
        data[section] = {**data.get(section, {}), **values}
        self.data = data
        self.save(update_fields=["data", "updated_at"])
        return True

    def save(self, *args, **kwargs):
        super().save(*args, **kwargs)
        from .settings_cache import settings_cache
        settings_cache.invalidate()
