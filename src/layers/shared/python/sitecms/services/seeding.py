"""Schema seeding pipeline.

Pushes the static page schemas into the table: for each page, write the
DRAFT and then publish it. Pages are processed one after another, never in
parallel, to stay inside the table's write throughput.

By default seeding merges: content already published for a section id is
kept, and the schema only contributes section order, section SEO, fields
the stored section lacks, new list items and brand-new sections. ``force``
overwrites the page with the schema as-is.
"""

import copy
from dataclasses import dataclass, field
from typing import Any, Literal

import structlog

from sitecms.content import ALL_PAGE_IDS, get_page_schema
from sitecms.models.page_record import LifecycleState, PageSEO
from sitecms.models.section import SectionBase
from sitecms.models.section_registry import parse_section
from sitecms.services.publishing import PublishingService
from sitecms.utils.exceptions import SiteCMSError, UnknownPageError, ValidationError

logger = structlog.get_logger()

SEED_AUTHOR = "seed-api"

# List fields whose items carry ids; seeding appends schema items by id.
ITEM_LIST_FIELDS = {
    "feature-grid": "features",
    "image-gallery": "images",
    "testimonials": "testimonials",
    "faq": "items",
    "stats": "items",
}

PLACEHOLDER_IMAGE_PREFIX = "/images/generated/"


@dataclass
class SeedPageResult:
    page_id: str
    status: Literal["ok", "error"]
    merged: bool = False
    version: int | None = None
    error: str | None = None

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {"pageId": self.page_id, "status": self.status}
        if self.status == "ok":
            data["merged"] = self.merged
            data["version"] = self.version
        else:
            data["error"] = self.error
        return data


@dataclass
class SeedReport:
    mode: Literal["merge", "overwrite"]
    results: list[SeedPageResult] = field(default_factory=list)

    @property
    def total(self) -> int:
        return len(self.results)

    @property
    def succeeded(self) -> int:
        return sum(1 for r in self.results if r.status == "ok")

    @property
    def failed(self) -> int:
        return self.total - self.succeeded

    def to_dict(self) -> dict[str, Any]:
        return {
            "mode": self.mode,
            "summary": {"total": self.total, "succeeded": self.succeeded, "failed": self.failed},
            "results": [r.to_dict() for r in self.results],
        }


def _append_new_items(merged: list, schema_items: list) -> list:
    existing_ids = {item.get("id") for item in merged if isinstance(item, dict) and item.get("id")}
    new_items = [
        item for item in schema_items
        if isinstance(item, dict) and item.get("id") and item["id"] not in existing_ids
    ]
    return [*merged, *new_items]


def merge_section(schema_section: dict[str, Any], existing_section: dict[str, Any]) -> dict[str, Any]:
    """Merge one schema section over the stored section with the same id.

    A type change means the schema restructured the section, so the schema
    wins outright.
    """
    if schema_section.get("type") != existing_section.get("type"):
        return copy.deepcopy(schema_section)

    merged = copy.deepcopy(existing_section)
    merged["order"] = schema_section.get("order", merged.get("order", 0))
    if schema_section.get("seo") is not None:
        merged["seo"] = copy.deepcopy(schema_section["seo"])

    for key, value in schema_section.items():
        if merged.get(key) is None and value is not None:
            merged[key] = copy.deepcopy(value)

    list_field = ITEM_LIST_FIELDS.get(merged["type"])
    if list_field and isinstance(schema_section.get(list_field), list) and isinstance(merged.get(list_field), list):
        merged[list_field] = _append_new_items(merged[list_field], copy.deepcopy(schema_section[list_field]))

    if merged["type"] == "columns":
        schema_columns = schema_section.get("columns") or []
        merged_columns = merged.get("columns") or []
        for col_index, column in enumerate(merged_columns):
            if col_index >= len(schema_columns):
                break
            existing_children = {child["id"]: child for child in column.get("sections", [])}
            column["sections"] = [
                merge_section(child, existing_children[child["id"]])
                if child["id"] in existing_children
                else copy.deepcopy(child)
                for child in schema_columns[col_index].get("sections", [])
            ]

    return merged


def merge_seo(schema_seo: dict[str, Any], existing_seo: dict[str, Any] | None) -> dict[str, Any]:
    """Stored page SEO wins; a placeholder OG image is refreshed from the schema."""
    if not existing_seo:
        return copy.deepcopy(schema_seo)

    merged = copy.deepcopy(existing_seo)
    og_image = existing_seo.get("ogImage")
    if not og_image or og_image.startswith(PLACEHOLDER_IMAGE_PREFIX):
        merged["ogImage"] = schema_seo.get("ogImage")
    return merged


def merge_page(
    schema_sections: list[SectionBase],
    schema_seo: PageSEO,
    existing_sections: list[SectionBase],
    existing_seo: PageSEO | None,
) -> tuple[list[SectionBase], PageSEO]:
    """Merge a page schema with stored content.

    The schema decides which sections exist and their order; stored content
    is kept for every section id the schema still has.
    """
    existing = {s.id: s.model_dump(mode="json", by_alias=True) for s in existing_sections}

    sections = []
    for schema_section in schema_sections:
        schema_data = schema_section.model_dump(mode="json", by_alias=True)
        stored = existing.get(schema_section.id)
        data = merge_section(schema_data, stored) if stored else schema_data
        sections.append(parse_section(data))

    seo = merge_seo(
        schema_seo.model_dump(mode="json", by_alias=True),
        existing_seo.model_dump(mode="json", by_alias=True) if existing_seo else None,
    )
    return sections, PageSEO.model_validate(seo)


class SeedingService:
    """Seeds page records from the static schema registry."""

    def __init__(self, publishing: PublishingService | None = None):
        self._publishing = publishing

    @property
    def publishing(self) -> PublishingService:
        if self._publishing is None:
            self._publishing = PublishingService()
        return self._publishing

    def resolve(self, page_ids: list[str]) -> list[str]:
        """Expand ``["all"]`` and check every id against the registry.

        Raises:
            ValidationError: If ``page_ids`` is empty.
            UnknownPageError: If any id is not registered.
        """
        if not page_ids:
            raise ValidationError([{"field": "pageIds", "message": "At least one page id is required"}])

        if list(page_ids) == ["all"]:
            return list(ALL_PAGE_IDS)

        resolved = list(dict.fromkeys(page_ids))
        unknown = [p for p in resolved if get_page_schema(p) is None]
        if unknown:
            raise UnknownPageError(unknown, list(ALL_PAGE_IDS))
        return resolved

    def seed_page(self, page_id: str, force: bool = False, author: str = SEED_AUTHOR) -> SeedPageResult:
        """Write one page's DRAFT from its schema, then publish it."""
        schema = get_page_schema(page_id)
        sections = schema.build_sections()
        seo = schema.build_seo()
        merged = False

        if not force:
            existing = self.publishing.read(page_id, LifecycleState.PUBLISHED)
            if existing is not None:
                sections, seo = merge_page(sections, seo, existing.sections, existing.seo)
                merged = True

        self.publishing.save_sections(page_id, sections, seo=seo, name=schema.name, author=author)
        published = self.publishing.publish(page_id, author=author)
        return SeedPageResult(page_id=page_id, status="ok", merged=merged, version=published.version)

    def seed(self, page_ids: list[str], force: bool = False, author: str = SEED_AUTHOR) -> SeedReport:
        """Seed pages sequentially, recording each page's outcome.

        Args:
            page_ids: Page ids, or ``["all"]`` for every registered page.
            force: Overwrite stored content instead of merging.
            author: Identity recorded on the written records.

        Raises:
            UnknownPageError: Before any write, if an id is not registered.
        """
        resolved = self.resolve(page_ids)
        report = SeedReport(mode="overwrite" if force else "merge")

        logger.info("Seeding pages", pages=len(resolved), mode=report.mode)

        for page_id in resolved:
            try:
                result = self.seed_page(page_id, force=force, author=author)
            except SiteCMSError as e:
                logger.warning("Seeding page failed", page_id=page_id, error=e.message)
                result = SeedPageResult(page_id=page_id, status="error", error=e.message)
            except Exception as e:
                logger.exception("Seeding page failed unexpectedly", page_id=page_id)
                result = SeedPageResult(page_id=page_id, status="error", error=str(e))
            report.results.append(result)

        logger.info(
            "Seeding complete",
            mode=report.mode,
            total=report.total,
            succeeded=report.succeeded,
            failed=report.failed,
        )
        return report
