"""Media library models."""

from pydantic import BaseModel as PydanticBaseModel, Field

from sitecms.models.base import BaseModel, CamelModel, generate_ulid

MEDIA_PK_PREFIX = "MEDIA#"

ALLOWED_MIME_TYPES = {
    "image/jpeg",
    "image/png",
    "image/webp",
    "image/gif",
    "image/svg+xml",
    "image/avif",
}


class MediaItem(BaseModel):
    """An uploaded binary asset. The bytes live in the asset bucket.

    Key Pattern:
        PK: MEDIA#{media_id}
        SK: metadata
    """

    media_id: str = Field(default_factory=generate_ulid)
    filename: str = Field(..., min_length=1, max_length=255)
    s3_key: str = Field(..., min_length=1)
    public_url: str
    mime_type: str = "image/jpeg"
    size_bytes: int | None = Field(None, ge=0)
    width: int | None = None
    height: int | None = None
    alt: str = Field(default="", max_length=250)
    description: str = ""
    tags: list[str] = Field(default_factory=list)
    uploaded_by: str | None = None

    def get_pk(self) -> str:
        return f"{MEDIA_PK_PREFIX}{self.media_id}"

    def get_sk(self) -> str:
        return "metadata"

    def references(self) -> set[str]:
        """Strings that, found in section content, count as a use of this item."""
        return {r for r in (self.media_id, self.s3_key, self.public_url) if r}


class MediaUsage(CamelModel):
    """One content location referencing a media item."""

    page_id: str
    section_id: str
    status: str = "draft"

    def __hash__(self) -> int:
        return hash((self.page_id, self.section_id, self.status))


class UploadRequest(PydanticBaseModel):
    """Request model for a presigned upload."""

    filename: str = Field(..., min_length=1, max_length=255)
    content_type: str = Field(..., alias="contentType")
    size_bytes: int | None = Field(None, alias="sizeBytes", ge=0)
    alt: str = ""

    model_config = {"populate_by_name": True}
