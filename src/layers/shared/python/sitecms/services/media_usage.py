"""Media usage index.

Answers "where is this media item used?" by scanning page records for
strings that reference it. The answer is derived and advisory: it is cached
briefly, any DRAFT write invalidates it, and a store failure yields an empty
answer rather than an error. Deletion uses a strict scan that fails instead.
Page records remain the source of truth.
"""

import os
import time
from collections.abc import Iterator
from typing import Any

import structlog

from sitecms.models.media import MediaItem, MediaUsage
from sitecms.models.page_record import LifecycleState, PageRecord
from sitecms.repositories.media import MediaRepository
from sitecms.repositories.page_record import PageRecordRepository
from sitecms.services.asset_store import AssetStore
from sitecms.utils.exceptions import MediaInUseError, NotFoundError, StoreUnavailableError

logger = structlog.get_logger()

# (media_id, include_published) -> (computed_at, usages)
_usage_cache: dict[tuple[str, bool], tuple[float, list[MediaUsage]]] = {}


def _cache_ttl() -> float:
    return float(os.environ.get("MEDIA_USAGE_CACHE_TTL", "30"))


def invalidate() -> None:
    """Forget every cached usage answer."""
    _usage_cache.clear()


def _store(cache_key: tuple[str, bool], usages: list[MediaUsage]) -> None:
    """Cache an answer, dropping entries that have already expired."""
    now = time.monotonic()
    ttl = _cache_ttl()
    for key in [k for k, (at, _) in _usage_cache.items() if now - at >= ttl]:
        del _usage_cache[key]
    _usage_cache[cache_key] = (now, usages)


def _strings(value: Any) -> Iterator[str]:
    """Yield every string nested anywhere inside ``value``."""
    if isinstance(value, str):
        yield value
    elif isinstance(value, dict):
        for v in value.values():
            yield from _strings(v)
    elif isinstance(value, list):
        for v in value:
            yield from _strings(v)


def references_media(value: Any, refs: set[str], s3_key: str | None = None) -> bool:
    """True if any string inside ``value`` references the media item.

    A string references the item when it equals one of ``refs`` or, for full
    URLs, ends with the item's S3 key.
    """
    for s in _strings(value):
        if s in refs:
            return True
        if s3_key and s.endswith(f"/{s3_key}"):
            return True
    return False


def find_usages(records: list[PageRecord], refs: set[str], s3_key: str | None = None) -> list[MediaUsage]:
    """Locations in ``records`` whose sections reference the media item."""
    usages = []
    for record in records:
        for section in record.sections:
            data = section.model_dump(mode="json", by_alias=True)
            if references_media(data, refs, s3_key):
                usages.append(MediaUsage(page_id=record.page_id, section_id=section.id, status=record.status))
        if record.seo.og_image and references_media(record.seo.og_image, refs, s3_key):
            usages.append(MediaUsage(page_id=record.page_id, section_id="seo", status=record.status))
    return usages


class MediaUsageIndex:
    """Reverse lookup from a media item to the content that references it."""

    def __init__(
        self,
        page_repo: PageRecordRepository | None = None,
        media_repo: MediaRepository | None = None,
    ):
        self._page_repo = page_repo
        self._media_repo = media_repo

    @property
    def page_repo(self) -> PageRecordRepository:
        if self._page_repo is None:
            self._page_repo = PageRecordRepository()
        return self._page_repo

    @property
    def media_repo(self) -> MediaRepository:
        if self._media_repo is None:
            self._media_repo = MediaRepository()
        return self._media_repo

    def usage_of(
        self,
        media_id: str,
        include_published: bool = False,
        item: MediaItem | None = None,
        strict: bool = False,
    ) -> list[MediaUsage]:
        """Pages and sections currently referencing ``media_id``.

        Args:
            media_id: Media item ID.
            include_published: Also scan PUBLISHED records.
            item: The media item, if the caller already loaded it.
            strict: Bypass the cache and raise on store failure instead of
                reporting no usages.

        Returns:
            Usage locations; empty if the store could not be read and
            ``strict`` is False.

        Raises:
            StoreUnavailableError: Store failure while ``strict``.
        """
        cache_key = (media_id, include_published)
        cached = None if strict else _usage_cache.get(cache_key)
        if cached and (time.monotonic() - cached[0]) < _cache_ttl():
            return list(cached[1])

        try:
            if item is None:
                item = self.media_repo.get_by_id(media_id)
            refs = item.references() if item else {media_id}
            s3_key = item.s3_key if item else None

            records = self.page_repo.list_by_status(LifecycleState.DRAFT)
            if include_published:
                records += self.page_repo.list_by_status(LifecycleState.PUBLISHED)
        except StoreUnavailableError as e:
            if strict:
                raise
            logger.warning("Media usage scan failed, reporting no usages", media_id=media_id, error=str(e))
            return []

        usages = find_usages(records, refs, s3_key)
        _store(cache_key, usages)

        logger.debug(
            "Media usage computed",
            media_id=media_id,
            records_scanned=len(records),
            usages=len(usages),
        )
        return list(usages)


class MediaService:
    """Media library operations that need the usage index."""

    def __init__(
        self,
        media_repo: MediaRepository | None = None,
        usage_index: MediaUsageIndex | None = None,
        asset_store: AssetStore | None = None,
    ):
        self._media_repo = media_repo
        self._usage_index = usage_index
        self._asset_store = asset_store

    @property
    def media_repo(self) -> MediaRepository:
        if self._media_repo is None:
            self._media_repo = MediaRepository()
        return self._media_repo

    @property
    def usage_index(self) -> MediaUsageIndex:
        if self._usage_index is None:
            self._usage_index = MediaUsageIndex(media_repo=self.media_repo)
        return self._usage_index

    @property
    def asset_store(self) -> AssetStore:
        if self._asset_store is None:
            self._asset_store = AssetStore()
        return self._asset_store

    def delete_media(self, media_id: str, force: bool = False) -> list[MediaUsage]:
        """Delete a media item and its stored object.

        Args:
            media_id: Media item ID.
            force: Delete even if content still references the item.

        Returns:
            The usages that existed at delete time (non-empty only when forced).

        Raises:
            NotFoundError: If the media item does not exist.
            MediaInUseError: If the item is in use and ``force`` is False.
            StoreUnavailableError: If usage could not be checked.
        """
        item = self.media_repo.get_by_id(media_id)
        if item is None:
            raise NotFoundError("Media", media_id)

        usages = self.usage_index.usage_of(media_id, include_published=True, item=item, strict=True)
        if usages and not force:
            logger.info("Media delete refused, item in use", media_id=media_id, usages=len(usages))
            raise MediaInUseError(
                media_id,
                [u.model_dump(by_alias=True) for u in usages],
            )

        self.asset_store.delete_object(item.s3_key)
        self.media_repo.delete_item(media_id)
        invalidate()

        logger.info("Media deleted", media_id=media_id, forced=bool(usages), usages=len(usages))
        return usages
