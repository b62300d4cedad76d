"""Static page schema registry.

Maps a page id to the default content that page starts from. Used by the
seed pipeline and as the starting point when a page is edited before it has
ever been saved.
"""

import copy
from dataclasses import dataclass, field
from typing import Any

from sitecms.content.pages import ABOUT_PAGE, CONTACT_PAGE, FAQS_PAGE, HOME_PAGE, SERVICES_PAGE
from sitecms.models.page_record import PageSEO
from sitecms.models.section import SectionBase
from sitecms.models.section_registry import parse_section


@dataclass(frozen=True)
class PageSchema:
    """Default content for one page."""

    page_id: str
    name: str
    sections: list[dict[str, Any]] = field(default_factory=list)
    seo: dict[str, Any] = field(default_factory=dict)

    def build_sections(self) -> list[SectionBase]:
        """Fresh, validated section models with ``order`` set by position."""
        sections = []
        for position, raw in enumerate(self.sections):
            data = copy.deepcopy(raw)
            data["order"] = position
            sections.append(parse_section(data))
        return sections

    def build_seo(self) -> PageSEO:
        return PageSEO.model_validate(copy.deepcopy(self.seo))


def _schema(page_id: str, page: dict[str, Any]) -> PageSchema:
    return PageSchema(page_id=page_id, name=page["name"], sections=page["sections"], seo=page["seo"])


SCHEMA_REGISTRY: dict[str, PageSchema] = {
    "home": _schema("home", HOME_PAGE),
    "about": _schema("about", ABOUT_PAGE),
    "services": _schema("services", SERVICES_PAGE),
    "faqs": _schema("faqs", FAQS_PAGE),
    "contact": _schema("contact", CONTACT_PAGE),
}

ALL_PAGE_IDS: list[str] = list(SCHEMA_REGISTRY)


def get_page_schema(page_id: str) -> PageSchema | None:
    """Get the static schema for a page, or None if the page is not registered."""
    return SCHEMA_REGISTRY.get(page_id)


def list_page_ids() -> list[str]:
    return list(ALL_PAGE_IDS)
