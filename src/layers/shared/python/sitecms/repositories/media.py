"""Media item repository."""

from sitecms.models.media import MEDIA_PK_PREFIX, MediaItem
from sitecms.repositories.base import BaseRepository


class MediaRepository(BaseRepository[MediaItem]):
    """Repository for MediaItem entities."""

    def __init__(self, table_name: str | None = None):
        super().__init__(MediaItem, table_name)

    def get_by_id(self, media_id: str) -> MediaItem | None:
        return self.get(pk=f"{MEDIA_PK_PREFIX}{media_id}", sk="metadata")

    def list_all(self) -> list[MediaItem]:
        return self.scan_by_prefix(MEDIA_PK_PREFIX, sk="metadata")

    def delete_item(self, media_id: str) -> bool:
        return self.delete(pk=f"{MEDIA_PK_PREFIX}{media_id}", sk="metadata")
