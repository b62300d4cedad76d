"""Repository for the single site settings row."""

import os
import time

import structlog

from sitecms.models.settings import SETTINGS_PK, SETTINGS_SK, SiteSettings, UpdateSettingsRequest
from sitecms.repositories.base import BaseRepository

logger = structlog.get_logger()

# Warm Lambda containers reuse this between invocations.
_settings_cache: SiteSettings | None = None
_settings_cache_time: float = 0


def _cache_ttl() -> float:
    return float(os.environ.get("SETTINGS_CACHE_TTL", "60"))


def invalidate_settings_cache() -> None:
    """Drop the cached settings so the next read hits the table."""
    global _settings_cache, _settings_cache_time
    _settings_cache = None
    _settings_cache_time = 0


class SettingsRepository(BaseRepository[SiteSettings]):
    """Repository for SiteSettings.

    Reads are cached for ``SETTINGS_CACHE_TTL`` seconds; every write
    invalidates the cache.
    """

    def __init__(self, table_name: str | None = None):
        super().__init__(SiteSettings, table_name)

    def get_settings(self, use_cache: bool = True) -> SiteSettings:
        """Get current settings, falling back to defaults when never saved."""
        global _settings_cache, _settings_cache_time

        now = time.time()
        if use_cache and _settings_cache is not None and (now - _settings_cache_time) < _cache_ttl():
            return _settings_cache.model_copy(deep=True)

        settings = self.get(pk=SETTINGS_PK, sk=SETTINGS_SK) or SiteSettings()
        _settings_cache = settings
        _settings_cache_time = now
        return settings.model_copy(deep=True)

    def update_settings(self, updates: UpdateSettingsRequest, author: str | None = None) -> SiteSettings:
        """Merge a partial update into the stored settings and save.

        Nested ``integrations`` and ``seoPrompt`` objects merge key by key.
        """
        stored = self.get(pk=SETTINGS_PK, sk=SETTINGS_SK)
        current = stored or SiteSettings()
        data = current.model_dump(mode="json", by_alias=True)

        changes = updates.model_dump(by_alias=True, exclude_unset=True)
        for key in ("integrations", "seoPrompt"):
            nested = changes.pop(key, None)
            if nested:
                data[key] = {**data.get(key, {}), **nested}
        data.update(changes)

        settings = SiteSettings.model_validate(data)
        settings.updated_by = author
        if stored is not None:
            settings.increment_version()

        self.put(settings)
        invalidate_settings_cache()
        logger.info("Settings updated", updated_by=author, fields=sorted(changes))
        return settings
