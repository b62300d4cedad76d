"""Page record model.

One record per (page, lifecycle state). The DRAFT record is what editors
mutate; the PUBLISHED record is a snapshot of a DRAFT and is the only thing
public readers see.
"""

import copy
from datetime import datetime
from enum import Enum

from pydantic import BaseModel as PydanticBaseModel, ConfigDict, Field, model_validator
from pydantic.alias_generators import to_camel

from sitecms.models.base import BaseModel, CamelModel, utc_now
from sitecms.models.section import SectionBase, SectionList

PAGE_PK_PREFIX = "PAGE#"
PAGE_ID_PATTERN = r"^[a-z0-9][a-z0-9-]*$"


class LifecycleState(str, Enum):
    """Lifecycle state of a page record. Doubles as the sort key."""

    DRAFT = "draft"
    PUBLISHED = "published"


class PageState(str, Enum):
    """Where a page sits in the draft/publish state machine."""

    NO_DRAFT = "no_draft"
    HAS_DRAFT = "has_draft"
    HAS_DRAFT_AND_PUBLISHED = "has_draft_and_published"


class PageSEO(CamelModel):
    """Page-level SEO metadata."""

    page_title: str = Field(default="", max_length=70)
    meta_description: str = Field(default="", max_length=160)
    og_image: str | None = None
    og_title: str | None = None
    og_description: str | None = None
    canonical_url: str | None = None


def renumber(sections: list[SectionBase]) -> list[SectionBase]:
    """Return copies of ``sections`` with ``order`` set to their list position."""
    return [s.model_copy(update={"order": i}) for i, s in enumerate(sections)]


class PageRecord(BaseModel):
    """A page in one lifecycle state.

    Key Pattern:
        PK: PAGE#{page_id}
        SK: draft | published
    """

    page_id: str = Field(..., min_length=1, max_length=100, pattern=PAGE_ID_PATTERN)
    status: LifecycleState = Field(default=LifecycleState.DRAFT)
    name: str = Field(default="", max_length=255)
    sections: SectionList = Field(default_factory=list)
    seo: PageSEO = Field(default_factory=PageSEO)

    created_by: str | None = None
    updated_by: str | None = None
    published_at: datetime | None = None

    @model_validator(mode="after")
    def validate_section_order(self) -> "PageRecord":
        """Section ids are unique and orders run 0..n-1 in list order."""
        seen: set[str] = set()
        for position, section in enumerate(self.sections):
            if section.id in seen:
                raise ValueError(f"Duplicate section id '{section.id}'")
            seen.add(section.id)
            if section.order != position:
                raise ValueError(
                    f"Section '{section.id}' has order {section.order}, expected {position}"
                )
        return self

    def get_pk(self) -> str:
        return f"{PAGE_PK_PREFIX}{self.page_id}"

    def get_sk(self) -> str:
        return LifecycleState(self.status).value

    @property
    def is_draft(self) -> bool:
        return self.status == LifecycleState.DRAFT.value

    def find_section(self, section_id: str) -> SectionBase | None:
        for section in self.sections:
            if section.id == section_id:
                return section
        return None

    def section_index(self, section_id: str) -> int:
        for i, section in enumerate(self.sections):
            if section.id == section_id:
                return i
        return -1

    def replace_sections(self, sections: list[SectionBase]) -> None:
        """Assign a new section list, renumbering ``order`` by position."""
        self.sections = renumber(sections)

    def to_api(self, public: bool = False) -> dict:
        """API response body. Public responses omit audit fields."""
        data = self.model_dump(mode="json", by_alias=True)
        if public:
            return {
                "pageId": data["pageId"],
                "sections": data["sections"],
                "seo": data["seo"],
                "version": data["version"],
                "updatedAt": data["updatedAt"],
            }
        return data

    def snapshot(self, status: LifecycleState, author: str | None = None) -> "PageRecord":
        """Deep copy this record into another lifecycle state.

        The copy keeps ``version``, sections and SEO verbatim.
        """
        data = copy.deepcopy(self.model_dump(mode="json", by_alias=True))
        data["status"] = status.value
        record = PageRecord.model_validate(data)
        if author:
            record.updated_by = author
        if status == LifecycleState.PUBLISHED:
            record.published_at = utc_now()
        return record


class PageSummary(CamelModel):
    """Per-page overview for the admin page list."""

    page_id: str
    name: str = ""
    state: PageState
    section_count: int = 0
    draft_version: int | None = None
    published_version: int | None = None
    draft_updated_at: datetime | None = None
    published_at: datetime | None = None

    @property
    def has_draft(self) -> bool:
        return self.draft_version is not None

    @property
    def has_published(self) -> bool:
        return self.published_version is not None

    @property
    def has_unpublished_changes(self) -> bool:
        return self.has_draft and self.draft_version != self.published_version

    def to_api(self) -> dict:
        data = self.model_dump(mode="json", by_alias=True)
        data.update({
            "hasDraft": self.has_draft,
            "hasPublished": self.has_published,
            "hasUnpublishedChanges": self.has_unpublished_changes,
        })
        return data


class _RequestModel(PydanticBaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class SaveSectionsRequest(_RequestModel):
    """Request model for replacing a draft's sections."""

    page_id: str = Field(..., pattern=PAGE_ID_PATTERN)
    sections: SectionList
    seo: PageSEO | None = None
    name: str | None = Field(None, max_length=255)


class AddSectionRequest(_RequestModel):
    """Request model for inserting a default section."""

    page_id: str = Field(..., pattern=PAGE_ID_PATTERN)
    type: str
    position: int | None = Field(None, ge=0)
    section_id: str | None = Field(None, pattern=r"^[^:]+$")


class MoveSectionRequest(_RequestModel):
    """Request model for moving a section to a new position."""

    page_id: str = Field(..., pattern=PAGE_ID_PATTERN)
    position: int = Field(..., ge=0)


class PublishRequest(_RequestModel):
    page_id: str = Field(..., pattern=PAGE_ID_PATTERN)
