"""Repository classes for DynamoDB data access."""

from sitecms.repositories.base import BaseRepository
from sitecms.repositories.media import MediaRepository
from sitecms.repositories.page_record import PageRecordRepository
from sitecms.repositories.settings import SettingsRepository

__all__ = [
    "BaseRepository",
    "MediaRepository",
    "PageRecordRepository",
    "SettingsRepository",
]
