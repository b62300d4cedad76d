"""Field-level change models used by the batch pipeline."""

from enum import Enum
from typing import Any

from pydantic import BaseModel as PydanticBaseModel, ConfigDict, Field, model_validator
from pydantic.alias_generators import to_camel

from sitecms.models.content_key import ContentKey, decode


class FieldType(str, Enum):
    """How a change's value is interpreted."""

    TEXT = "text"
    HTML = "html"
    IMAGE = "image"
    JSON = "json"


class FieldChange(PydanticBaseModel):
    """One edit to one content key.

    Accepts either the three key components or a ``contentKey`` token.
    """

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    page_id: str
    section_id: str
    field_key: str
    value: Any = None
    field_type: FieldType = FieldType.TEXT

    @model_validator(mode="before")
    @classmethod
    def expand_content_key(cls, data: Any) -> Any:
        if isinstance(data, dict) and data.get("contentKey"):
            key = decode(data["contentKey"])
            data = {k: v for k, v in data.items() if k != "contentKey"}
            data.update({"pageId": key.page_id, "sectionId": key.section_id, "fieldKey": key.field_key})
        return data

    @model_validator(mode="after")
    def check_key(self) -> "FieldChange":
        """Key components obey the content key rules (raises MalformedKeyError)."""
        ContentKey.from_parts(self.page_id, self.section_id, self.field_key)
        return self

    @property
    def key(self) -> ContentKey:
        return ContentKey.from_parts(self.page_id, self.section_id, self.field_key)


class ChangeResult(PydanticBaseModel):
    """Outcome of a single change."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    key: str
    success: bool
    error: str | None = None
    error_code: str | None = None
    version: int | None = None
    warnings: list[dict[str, str]] = Field(default_factory=list)


class BatchRequest(PydanticBaseModel):
    """Raw batch payload; each change is parsed independently."""

    changes: list[Any] = Field(..., min_length=1, max_length=500)
