"""Page record repository for DynamoDB operations."""

import structlog

from sitecms.models.page_record import PAGE_PK_PREFIX, LifecycleState, PageRecord
from sitecms.repositories.base import BaseRepository

logger = structlog.get_logger()


class PageRecordRepository(BaseRepository[PageRecord]):
    """Repository for PageRecord entities.

    One item per (page, lifecycle state). There are no secondary indexes;
    cross-page listings scan the ``PAGE#`` prefix.
    """

    def __init__(self, table_name: str | None = None):
        """Initialize page record repository."""
        super().__init__(PageRecord, table_name)

    def get_record(self, page_id: str, status: LifecycleState | str) -> PageRecord | None:
        """Get one lifecycle state of a page.

        Args:
            page_id: The page ID.
            status: ``draft`` or ``published``.

        Returns:
            PageRecord or None if not found.
        """
        return self.get(pk=f"{PAGE_PK_PREFIX}{page_id}", sk=LifecycleState(status).value)

    def get_draft(self, page_id: str) -> PageRecord | None:
        return self.get_record(page_id, LifecycleState.DRAFT)

    def get_published(self, page_id: str) -> PageRecord | None:
        return self.get_record(page_id, LifecycleState.PUBLISHED)

    def get_both(self, page_id: str) -> tuple[PageRecord | None, PageRecord | None]:
        """Get the draft and published records of a page with one query."""
        records, _ = self.query(pk=f"{PAGE_PK_PREFIX}{page_id}")
        by_status = {r.status: r for r in records}
        return by_status.get(LifecycleState.DRAFT.value), by_status.get(LifecycleState.PUBLISHED.value)

    def save(self, record: PageRecord) -> PageRecord:
        """Overwrite the record for ``(record.page_id, record.status)``."""
        return self.put(record)

    def list_by_status(self, status: LifecycleState | str) -> list[PageRecord]:
        """All page records in one lifecycle state."""
        return self.scan_by_prefix(PAGE_PK_PREFIX, sk=LifecycleState(status).value)

    def list_all(self) -> list[PageRecord]:
        """Every page record in both lifecycle states."""
        return self.scan_by_prefix(PAGE_PK_PREFIX)

    def delete_page(self, page_id: str) -> int:
        """Delete both lifecycle records of a page.

        Returns:
            Number of records removed (0, 1 or 2).
        """
        pk = f"{PAGE_PK_PREFIX}{page_id}"
        deleted = sum(
            1 for state in LifecycleState if self.delete(pk=pk, sk=state.value)
        )
        logger.info("Page deleted", page_id=page_id, records=deleted)
        return deleted
