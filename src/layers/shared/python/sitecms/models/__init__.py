"""Pydantic models for sitecms entities."""

from sitecms.models.base import BaseModel, CamelModel, TimestampMixin
from sitecms.models.change import BatchRequest, ChangeResult, FieldChange, FieldType
from sitecms.models.content_key import ContentKey, decode, encode
from sitecms.models.media import MediaItem, MediaUsage, UploadRequest
from sitecms.models.page_record import (
    AddSectionRequest,
    LifecycleState,
    MoveSectionRequest,
    PageRecord,
    PageSEO,
    PageState,
    PageSummary,
    PublishRequest,
    SaveSectionsRequest,
)
from sitecms.models.section import SECTION_MODELS, SectionBase, SectionList
from sitecms.models.section_registry import (
    SECTION_REGISTRY,
    FieldConstraint,
    SectionTypeSpec,
    default_instance,
    list_section_types,
    parse_section,
    register_section_type,
)
from sitecms.models.settings import SiteSettings, UpdateSettingsRequest

__all__ = [
    "AddSectionRequest",
    "BaseModel",
    "BatchRequest",
    "CamelModel",
    "ChangeResult",
    "ContentKey",
    "FieldChange",
    "FieldConstraint",
    "FieldType",
    "LifecycleState",
    "MediaItem",
    "MediaUsage",
    "MoveSectionRequest",
    "PageRecord",
    "PageSEO",
    "PageState",
    "PageSummary",
    "PublishRequest",
    "SECTION_MODELS",
    "SECTION_REGISTRY",
    "SaveSectionsRequest",
    "SectionBase",
    "SectionList",
    "SectionTypeSpec",
    "SiteSettings",
    "TimestampMixin",
    "UpdateSettingsRequest",
    "UploadRequest",
    "decode",
    "default_instance",
    "encode",
    "list_section_types",
    "parse_section",
    "register_section_type",
]
