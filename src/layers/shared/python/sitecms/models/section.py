"""Section models.

A page is an ordered list of sections. Each section is one variant of a
tagged union discriminated by ``type``; the variant model carries the
fields specific to that kind of block. Stored attribute names are camelCase.

Sections are dispatched to their variant model through ``SECTION_MODELS``.
New variants are added by registering them (see ``section_registry``), never
by editing the models that already exist.
"""

from typing import Annotated, Any, Literal

from pydantic import (
    BeforeValidator,
    ConfigDict,
    Field,
    SerializeAsAny,
    field_validator,
)
from pydantic.alias_generators import to_camel

from sitecms.models.base import CamelModel


class SectionSEO(CamelModel):
    """SEO and accessibility attributes rendered on the section wrapper."""

    aria_label: str = Field(default="", max_length=120)
    section_id: str | None = Field(None, description="HTML anchor id, kebab-case")
    data_section_name: str | None = None
    heading_level: int | None = Field(None, ge=1, le=6)


class CTAButton(CamelModel):
    """A call-to-action button."""

    text: str
    href: str
    variant: Literal["primary", "secondary"] = "primary"


class LinkField(CamelModel):
    text: str
    href: str


class ImageField(CamelModel):
    """An image reference with alt text.

    ``src`` is a public URL; ``media_id`` is set when the image came from the
    media library.
    """

    id: str | None = None
    src: str
    alt: str = ""
    caption: str | None = None
    width: int | None = None
    height: int | None = None
    position_y: int | None = Field(None, ge=0, le=100)
    media_id: str | None = None


class FeatureCard(CamelModel):
    id: str
    icon: str = "Star"
    title: str
    description: str = ""
    link: LinkField | None = None


class Testimonial(CamelModel):
    id: str
    quote: str
    author_name: str
    author_title: str = ""
    author_image: ImageField | None = None


class FAQItem(CamelModel):
    id: str
    question: str
    answer: str


class StatItem(CamelModel):
    id: str
    value: str
    label: str
    suffix: str | None = None


class SectionBase(CamelModel):
    """Fields shared by every section variant."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        use_enum_values=True,
        extra="allow",
    )

    id: str = Field(..., min_length=1, pattern=r"^[^:]+$")
    type: str
    order: int = Field(default=0, ge=0)
    seo: SectionSEO = Field(default_factory=SectionSEO)


# Variant tag -> model class. Populated below and by register_section_type().
SECTION_MODELS: dict[str, type[SectionBase]] = {}


def _coerce_sections(value: Any) -> Any:
    """Dispatch raw section dicts to their variant model by ``type``."""
    if not isinstance(value, list):
        return value

    sections = []
    for item in value:
        if isinstance(item, SectionBase):
            sections.append(item)
            continue
        if not isinstance(item, dict):
            raise ValueError("Section must be an object")
        tag = item.get("type")
        model = SECTION_MODELS.get(tag)
        if model is None:
            raise ValueError(f"Unknown section type '{tag}'")
        sections.append(model.model_validate(item))
    return sections


SectionList = Annotated[list[SerializeAsAny[SectionBase]], BeforeValidator(_coerce_sections)]


class HeroSection(SectionBase):
    """Full-width hero banner. Headline renders as h1."""

    type: Literal["hero"] = "hero"
    variant: Literal["full-height", "half-height", "banner"] = "full-height"
    headline: str = Field(..., min_length=1)
    subheadline: str = ""
    description: str | None = None
    background_image: ImageField | None = None
    buttons: list[CTAButton] = Field(default_factory=list, max_length=2)


class TextBlockSection(SectionBase):
    """Free-form rich text with an optional h2 heading."""

    type: Literal["text-block"] = "text-block"
    heading: str | None = None
    content: str
    alignment: Literal["left", "center", "right"] | None = None


class FeatureGridSection(SectionBase):
    type: Literal["feature-grid"] = "feature-grid"
    heading: str | None = None
    subheading: str | None = None
    columns: Literal[2, 3, 4] = 3
    features: list[FeatureCard] = Field(default_factory=list)


class ImageGallerySection(SectionBase):
    type: Literal["image-gallery"] = "image-gallery"
    heading: str | None = None
    layout: Literal["grid", "slider", "masonry", "single"] = "grid"
    images: list[ImageField] = Field(default_factory=list)


class CTASection(SectionBase):
    """Call to action with a primary and optional secondary button."""

    type: Literal["cta"] = "cta"
    headline: str = Field(..., min_length=1)
    subtext: str = ""
    background_type: Literal["solid", "gradient", "image"] = "solid"
    background_value: str = "#0A0A0A"
    image_position_y: int | None = Field(None, ge=0, le=100)
    primary_button: CTAButton
    secondary_button: CTAButton | None = None


class TestimonialsSection(SectionBase):
    type: Literal["testimonials"] = "testimonials"
    heading: str | None = None
    layout: Literal["single", "carousel", "grid"] = "carousel"
    card_variant: Literal["dark", "light"] | None = None
    testimonials: list[Testimonial] = Field(default_factory=list)


class FAQSection(SectionBase):
    """FAQ accordion. Items also feed FAQPage structured data."""

    type: Literal["faq"] = "faq"
    heading: str | None = None
    items: list[FAQItem] = Field(default_factory=list)


class StatsSection(SectionBase):
    type: Literal["stats"] = "stats"
    heading: str | None = None
    items: list[StatItem] = Field(default_factory=list)


class ColumnData(CamelModel):
    sections: SectionList = Field(default_factory=list)


class ColumnsSection(SectionBase):
    """Layout container holding child sections side by side."""

    type: Literal["columns"] = "columns"
    layout: Literal["equal-2", "1/3-2/3", "2/3-1/3", "1/4-3/4", "3/4-1/4", "equal-3"] = "equal-2"
    columns: list[ColumnData] = Field(default_factory=list, max_length=3)

    @field_validator("columns")
    @classmethod
    def validate_children(cls, v: list[ColumnData]) -> list[ColumnData]:
        """Hero and nested columns are not allowed inside a column."""
        for column in v:
            for child in column.sections:
                if child.type in ("hero", "columns"):
                    raise ValueError(f"'{child.type}' sections cannot be placed inside columns")
        return v


for _model in (
    HeroSection,
    TextBlockSection,
    FeatureGridSection,
    ImageGallerySection,
    CTASection,
    TestimonialsSection,
    FAQSection,
    StatsSection,
    ColumnsSection,
):
    SECTION_MODELS[_model.model_fields["type"].default] = _model
