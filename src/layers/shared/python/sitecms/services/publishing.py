"""Draft/publish state machine for page records.

Every page moves through three states:

    NO_DRAFT --edit/seed--> HAS_DRAFT --publish--> HAS_DRAFT_AND_PUBLISHED

Editors only ever write the DRAFT record. ``publish`` copies the DRAFT
verbatim (sections, SEO and version) into the PUBLISHED record, which is
all public readers see. There is no unpublish; deleting a page removes both
records.

Every DRAFT write is a read-modify-write of the whole record and increments
``version`` once. Nothing here locks: two editors saving the same page at the
same moment race, and the later write wins.
"""

import structlog
from pydantic import ValidationError as PydanticValidationError

from sitecms.content import get_page_schema, list_page_ids
from sitecms.models.change import ChangeResult, FieldChange
from sitecms.models.page_record import (
    LifecycleState,
    PageRecord,
    PageSEO,
    PageState,
    PageSummary,
    renumber,
)
from sitecms.models.section import SectionBase
from sitecms.models.section_registry import (
    check_constraints,
    default_instance,
    variant_from_section_id,
)
from sitecms.repositories.page_record import PageRecordRepository
from sitecms.services import media_usage
from sitecms.services.field_changes import apply_field_change
from sitecms.utils.exceptions import (
    ConflictError,
    NoDraftToPublishError,
    NotFoundError,
    SiteCMSError,
    StoreUnavailableError,
    ValidationError,
)

logger = structlog.get_logger()


def _build_record(**fields) -> PageRecord:
    """Construct a PageRecord, reporting pydantic errors as ValidationError."""
    try:
        return PageRecord(**fields)
    except PydanticValidationError as e:
        raise ValidationError([
            {"field": ".".join(str(x) for x in err["loc"]), "message": err["msg"]}
            for err in e.errors()
        ])


class PublishingService:
    """Reads, mutates and promotes page records."""

    def __init__(self, repo: PageRecordRepository | None = None):
        """Initialize publishing service.

        Args:
            repo: Optional PageRecordRepository (created lazily if not provided).
        """
        self._repo = repo

    @property
    def repo(self) -> PageRecordRepository:
        """Get page record repository (lazy init)."""
        if self._repo is None:
            self._repo = PageRecordRepository()
        return self._repo

    # -------------------------------------------------------------------------
    # Reads
    # -------------------------------------------------------------------------

    def read(self, page_id: str, status: LifecycleState | str = LifecycleState.PUBLISHED) -> PageRecord | None:
        """Look up one lifecycle record. Never mutates anything."""
        return self.repo.get_record(page_id, status)

    def state(self, page_id: str) -> PageState:
        """Where ``page_id`` sits in the state machine."""
        draft, published = self.repo.get_both(page_id)
        if draft is None:
            return PageState.NO_DRAFT
        if published is None:
            return PageState.HAS_DRAFT
        return PageState.HAS_DRAFT_AND_PUBLISHED

    def list_pages(self) -> list[PageSummary]:
        """Summaries of every stored page plus registered pages never saved."""
        drafts: dict[str, PageRecord] = {}
        published: dict[str, PageRecord] = {}
        for record in self.repo.list_all():
            target = drafts if record.status == LifecycleState.DRAFT.value else published
            target[record.page_id] = record

        page_ids = list(dict.fromkeys([*list_page_ids(), *sorted(drafts), *sorted(published)]))

        summaries = []
        for page_id in page_ids:
            draft = drafts.get(page_id)
            pub = published.get(page_id)
            schema = get_page_schema(page_id)

            if draft is None:
                state = PageState.NO_DRAFT
            elif pub is None:
                state = PageState.HAS_DRAFT
            else:
                state = PageState.HAS_DRAFT_AND_PUBLISHED

            current = draft or pub
            summaries.append(PageSummary(
                page_id=page_id,
                name=(current.name if current else "") or (schema.name if schema else page_id),
                state=state,
                section_count=len(current.sections) if current else 0,
                draft_version=draft.version if draft else None,
                published_version=pub.version if pub else None,
                draft_updated_at=draft.updated_at if draft else None,
                published_at=pub.published_at if pub else None,
            ))
        return summaries

    # -------------------------------------------------------------------------
    # Draft mutations
    # -------------------------------------------------------------------------

    def _new_draft(self, page_id: str, author: str | None) -> PageRecord:
        """Create an unsaved DRAFT from the page's static schema, or empty."""
        schema = get_page_schema(page_id)
        if schema is not None:
            logger.info("Creating draft from page schema", page_id=page_id)
            return _build_record(
                page_id=page_id,
                name=schema.name,
                sections=schema.build_sections(),
                seo=schema.build_seo(),
                created_by=author,
                updated_by=author,
            )

        logger.info("Creating empty draft", page_id=page_id)
        return _build_record(
            page_id=page_id,
            name=page_id.replace("-", " ").title(),
            created_by=author,
            updated_by=author,
        )

    def _load_draft(self, page_id: str, author: str | None, create: bool = True) -> tuple[PageRecord, bool]:
        """Get the DRAFT for a read-modify-write.

        Returns:
            Tuple of (draft, created) where ``created`` means it is not stored yet.

        Raises:
            NotFoundError: If no draft exists and ``create`` is False.
        """
        draft = self.repo.get_draft(page_id)
        if draft is not None:
            return draft, False
        if not create:
            raise NotFoundError("Draft", page_id)
        return self._new_draft(page_id, author), True

    def _save_draft(self, draft: PageRecord, author: str | None, created: bool) -> PageRecord:
        """Write a DRAFT back, bumping its version unless it is brand new."""
        if not created:
            draft.increment_version()
        if author:
            draft.updated_by = author

        self.repo.save(draft)
        media_usage.invalidate()

        logger.info(
            "Draft saved",
            page_id=draft.page_id,
            version=draft.version,
            sections=len(draft.sections),
            created=created,
        )
        return draft

    def _apply_one(self, draft: PageRecord, change: FieldChange) -> list[dict[str, str]]:
        """Apply one change to an in-memory draft.

        A change aimed at a section the draft lacks appends a default
        instance of the variant named by the section id prefix first.

        Returns:
            Constraint warnings for the changed section.

        Raises:
            NotFoundError: Section absent and its id names no variant.
            ValidationError: The change does not fit the section.
        """
        index = draft.section_index(change.section_id)
        sections = list(draft.sections)

        if index < 0:
            tag = variant_from_section_id(change.section_id)
            if tag is None:
                raise NotFoundError("Section", change.section_id)
            section = default_instance(tag, order=len(sections), section_id=change.section_id)
            sections.append(section)
            index = len(sections) - 1
            logger.info(
                "Appending default section for change",
                page_id=draft.page_id,
                section_id=change.section_id,
                section_type=tag,
            )

        updated = apply_field_change(sections[index], change)
        sections[index] = updated
        draft.replace_sections(sections)

        warnings = check_constraints(updated)
        if warnings:
            logger.warning(
                "Field constraints exceeded",
                page_id=draft.page_id,
                section_id=updated.id,
                violations=warnings,
            )
        return warnings

    def edit(self, page_id: str, change: FieldChange, author: str | None = None) -> PageRecord:
        """Apply one field change to the DRAFT, creating the DRAFT if needed.

        Raises:
            NotFoundError: Target section absent and not inferable.
            ValidationError: Value rejected by the section's model.
        """
        if change.page_id != page_id:
            raise ValidationError(f"Change targets page '{change.page_id}', not '{page_id}'")

        draft, created = self._load_draft(page_id, author)
        self._apply_one(draft, change)
        return self._save_draft(draft, author, created)

    def apply_changes(
        self,
        page_id: str,
        changes: list[FieldChange],
        author: str | None = None,
    ) -> tuple[PageRecord | None, list[ChangeResult]]:
        """Apply several changes to one page with a single DRAFT write.

        Changes apply in submission order; each succeeds or fails on its own.
        When the final write fails, every change that had applied is reported
        as failed, since none of them reached the store.

        Returns:
            Tuple of (saved draft or None when nothing applied, per-change results).
        """
        try:
            draft, created = self._load_draft(page_id, author)
        except SiteCMSError as e:
            return None, [
                ChangeResult(key=c.key.token, success=False, error=e.message, error_code=e.error_code)
                for c in changes
            ]

        results: list[ChangeResult] = []
        for change in changes:
            try:
                warnings = self._apply_one(draft, change)
            except SiteCMSError as e:
                logger.info(
                    "Change rejected",
                    key=change.key.token,
                    error_code=e.error_code,
                    error=e.message,
                )
                results.append(ChangeResult(
                    key=change.key.token, success=False, error=e.message, error_code=e.error_code
                ))
                continue
            except Exception as e:
                logger.exception("Change failed unexpectedly", key=change.key.token, error=str(e))
                results.append(ChangeResult(
                    key=change.key.token, success=False, error="Internal error", error_code="INTERNAL_ERROR"
                ))
                continue
            results.append(ChangeResult(key=change.key.token, success=True, warnings=warnings))

        if not any(r.success for r in results):
            return None, results

        try:
            saved = self._save_draft(draft, author, created)
        except StoreUnavailableError as e:
            for result in results:
                if result.success:
                    result.success = False
                    result.error = e.message
                    result.error_code = e.error_code
            return None, results

        for result in results:
            if result.success:
                result.version = saved.version
        return saved, results

    def save_sections(
        self,
        page_id: str,
        sections: list[SectionBase],
        seo: PageSEO | None = None,
        name: str | None = None,
        author: str | None = None,
    ) -> PageRecord:
        """Replace the DRAFT's sections wholesale.

        ``order`` is reassigned from list position. SEO and name are kept
        from the existing DRAFT when not given.
        """
        existing = self.repo.get_draft(page_id)
        schema = get_page_schema(page_id)

        if existing is not None:
            default_name = existing.name
        else:
            default_name = schema.name if schema else page_id.replace("-", " ").title()

        fields = {
            "page_id": page_id,
            "status": LifecycleState.DRAFT,
            "name": name or default_name,
            "sections": renumber(sections),
            "seo": seo or (existing.seo if existing else PageSEO()),
            "created_by": existing.created_by if existing else author,
            "updated_by": author,
        }
        if existing is not None:
            fields.update(version=existing.version, created_at=existing.created_at)
        draft = _build_record(**fields)

        for section in draft.sections:
            warnings = check_constraints(section)
            if warnings:
                logger.warning(
                    "Field constraints exceeded",
                    page_id=page_id,
                    section_id=section.id,
                    violations=warnings,
                )

        return self._save_draft(draft, author, created=existing is None)

    def add_section(
        self,
        page_id: str,
        section_type: str,
        position: int | None = None,
        section_id: str | None = None,
        author: str | None = None,
    ) -> PageRecord:
        """Insert a default instance of ``section_type`` into the DRAFT.

        Raises:
            UnknownVariantError: If the type is not registered.
            ConflictError: If ``section_id`` is already used on the page.
        """
        draft, created = self._load_draft(page_id, author)
        if section_id and draft.find_section(section_id) is not None:
            raise ConflictError(f"Section '{section_id}' already exists on page '{page_id}'")

        section = default_instance(section_type, section_id=section_id)
        sections = list(draft.sections)
        index = len(sections) if position is None else min(position, len(sections))
        sections.insert(index, section)
        draft.replace_sections(sections)

        logger.info("Section added", page_id=page_id, section_id=section.id, section_type=section_type, position=index)
        return self._save_draft(draft, author, created)

    def remove_section(self, page_id: str, section_id: str, author: str | None = None) -> PageRecord:
        """Remove a section from the DRAFT and close the gap in ``order``.

        Raises:
            NotFoundError: If there is no DRAFT or no such section.
        """
        draft, _ = self._load_draft(page_id, author, create=False)
        index = draft.section_index(section_id)
        if index < 0:
            raise NotFoundError("Section", section_id)

        sections = list(draft.sections)
        sections.pop(index)
        draft.replace_sections(sections)

        logger.info("Section removed", page_id=page_id, section_id=section_id)
        return self._save_draft(draft, author, created=False)

    def move_section(
        self,
        page_id: str,
        section_id: str,
        position: int,
        author: str | None = None,
    ) -> PageRecord:
        """Move a section to ``position`` (clamped to the end of the list).

        Raises:
            NotFoundError: If there is no DRAFT or no such section.
        """
        draft, _ = self._load_draft(page_id, author, create=False)
        index = draft.section_index(section_id)
        if index < 0:
            raise NotFoundError("Section", section_id)

        sections = list(draft.sections)
        section = sections.pop(index)
        target = max(0, min(position, len(sections)))
        sections.insert(target, section)
        draft.replace_sections(sections)

        logger.info("Section moved", page_id=page_id, section_id=section_id, from_index=index, to_index=target)
        return self._save_draft(draft, author, created=False)

    # -------------------------------------------------------------------------
    # Promotion
    # -------------------------------------------------------------------------

    def publish(self, page_id: str, author: str | None = None) -> PageRecord:
        """Copy the DRAFT into the PUBLISHED record.

        The PUBLISHED record gets the DRAFT's sections, SEO and version
        verbatim. Republishing an unchanged DRAFT rewrites the same content.

        Raises:
            NoDraftToPublishError: If the page has no DRAFT.
        """
        draft = self.repo.get_draft(page_id)
        if draft is None:
            logger.warning("Publish requested without draft", page_id=page_id)
            raise NoDraftToPublishError(page_id)

        published = draft.snapshot(LifecycleState.PUBLISHED, author=author)
        self.repo.save(published)
        media_usage.invalidate()

        logger.info(
            "Page published",
            page_id=page_id,
            version=published.version,
            sections=len(published.sections),
            published_by=author,
        )
        return published

    def delete_page(self, page_id: str) -> int:
        """Delete both lifecycle records of a page.

        Raises:
            NotFoundError: If neither record exists.
        """
        deleted = self.repo.delete_page(page_id)
        if deleted == 0:
            raise NotFoundError("Page", page_id)
        media_usage.invalidate()
        return deleted
