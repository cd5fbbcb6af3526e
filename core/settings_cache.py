"""core.settings_cache

Process-wide cache over the SystemSetting row.

The cache is an explicit object so services can take it as a dependency:

    def is_open(cache: SettingsCache = settings_cache): ...

Values live in Django's cache framework under a single key with a fixed TTL.
Writes to SystemSetting call `invalidate()`.
"""

import logging
from typing import Any, Callable

from django.conf import settings
from django.core.cache import cache as default_cache

logger = logging.getLogger(__name__)

CACHE_KEY = "system_settings"
_MISSING = object()


def _load_from_db() -> dict:
    from core.models import SystemSetting
    return SystemSetting.get_instance().get_all_settings()


class SettingsCache:
    def __init__(
        self,
        cache=None,
        ttl: int | None = None,
        key: str = CACHE_KEY,
        loader: Callable[[], dict] | None = None,
    ):
        self._cache = cache
        self._ttl = ttl
        self.key = key
        self._loader = loader or _load_from_db

    @property
    def cache(self):
        return self._cache if self._cache is not None else default_cache

    @property
    def ttl(self) -> int:
        if self._ttl is not None:
            return self._ttl
        return int(getattr(settings, "SETTINGS_CACHE_TTL", 3600))

    def all(self) -> dict:
        data = self.cache.get(self.key, _MISSING)
        if data is _MISSING:
            data = self._loader()
            self.cache.set(self.key, data, self.ttl)
            logger.debug("Settings cache refreshed (ttl=%ss)", self.ttl)
        return data

    def get(self, key: str, default: Any = None) -> Any:
        """Dot-notation lookup, e.g. get("general.site_name")."""
        node: Any = self.all()
        for part in key.split("."):
            if not isinstance(node, dict) or part not in node:
                return default
            node = node[part]
        return node

    def invalidate(self) -> None:
        self.cache.delete(self.key)

    # Convenience readers

    def is_maintenance_mode(self) -> bool:
        return bool(self.get("general.maintenance_mode", False))

    def is_registration_enabled(self) -> bool:
        return bool(self.get("general.registration_enabled", True))

    def get_password_requirements(self) -> dict:
        return {
            "min_length": self.get("authentication.password_min_length", 8),
            "require_uppercase": self.get("authentication.password_require_uppercase", True),
            "require_lowercase": self.get("authentication.password_require_lowercase", True),
            "require_numbers": self.get("authentication.password_require_numbers", True),
            "require_symbols": self.get("authentication.password_require_symbols", False),
        }


settings_cache = SettingsCache()
