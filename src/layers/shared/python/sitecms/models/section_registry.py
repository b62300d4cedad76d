"""Section type registry.

Single source of truth for which section variants exist, what a valid
default instance of each looks like, and which field constraints the editing
UI and AI assistant should respect. Adding a variant means calling
``register_section_type`` with its model, default factory and constraints.
"""

import copy
import re
from collections.abc import Callable
from dataclasses import dataclass, field
from typing import Any

from pydantic import ValidationError as PydanticValidationError

from sitecms.models.base import generate_ulid
from sitecms.models.section import SECTION_MODELS, SectionBase
from sitecms.utils.exceptions import UnknownVariantError, ValidationError


@dataclass(frozen=True)
class FieldConstraint:
    """Presentation/validation hint for one field.

    ``path`` uses stored field names; ``[]`` marks "every item of a list",
    e.g. ``features[].title``.
    """

    path: str
    description: str
    max_length: int | None = None
    required: bool = False
    allowed_tags: tuple[str, ...] = ()

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {"path": self.path, "description": self.description, "required": self.required}
        if self.max_length is not None:
            data["maxLength"] = self.max_length
        if self.allowed_tags:
            data["allowedTags"] = list(self.allowed_tags)
        return data


@dataclass(frozen=True)
class SectionTypeSpec:
    """Registry entry for one section variant."""

    tag: str
    model: type[SectionBase]
    label: str
    description: str
    icon: str
    default_factory: Callable[[str], dict[str, Any]]
    constraints: tuple[FieldConstraint, ...] = field(default_factory=tuple)

    def metadata(self) -> dict[str, Any]:
        return {
            "type": self.tag,
            "label": self.label,
            "description": self.description,
            "icon": self.icon,
            "fieldConstraints": [c.to_dict() for c in self.constraints],
        }


SECTION_REGISTRY: dict[str, SectionTypeSpec] = {}

_INLINE_TAGS = ("p", "strong", "em", "a")
_RICH_TAGS = ("h2", "h3", "h4", "h5", "h6", "p", "ul", "ol", "li", "a", "strong", "em", "img", "blockquote")


def register_section_type(spec: SectionTypeSpec) -> SectionTypeSpec:
    """Register a section variant, making it available to every component."""
    SECTION_REGISTRY[spec.tag] = spec
    SECTION_MODELS[spec.tag] = spec.model
    return spec


def list_section_types() -> list[str]:
    """All registered variant tags, in registration order."""
    return list(SECTION_REGISTRY)


def get_spec(tag: str) -> SectionTypeSpec:
    """Look up a registry entry.

    Raises:
        UnknownVariantError: If the tag is not registered.
    """
    spec = SECTION_REGISTRY.get(tag)
    if spec is None:
        raise UnknownVariantError(str(tag), list_section_types())
    return spec


def metadata(tag: str) -> dict[str, Any]:
    """Icon, label and field constraints for a variant."""
    return get_spec(tag).metadata()


def new_section_id(tag: str) -> str:
    """Generate a section id of the form ``{tag}-{ulid}``."""
    return f"{tag}-{generate_ulid()}"


def default_instance(tag: str, order: int = 0, section_id: str | None = None) -> SectionBase:
    """Build a structurally valid, non-empty default section of a variant.

    Args:
        tag: Variant tag.
        order: Render position to assign.
        section_id: Section id; generated from the tag when omitted.

    Raises:
        UnknownVariantError: If the tag is not registered.
    """
    spec = get_spec(tag)
    section_id = section_id or new_section_id(tag)
    data = spec.default_factory(section_id)
    data.update({
        "id": section_id,
        "type": tag,
        "order": order,
        "seo": {"ariaLabel": "", "sectionId": section_id, "dataSectionName": tag},
    })
    return spec.model.model_validate(data)


def parse_section(data: dict[str, Any] | SectionBase) -> SectionBase:
    """Validate raw section data into its variant model.

    Raises:
        UnknownVariantError: If ``type`` is not registered.
        ValidationError: If the data does not fit the variant.
    """
    if isinstance(data, SectionBase):
        data = data.model_dump(mode="json", by_alias=True)
    if not isinstance(data, dict):
        raise ValidationError("Section must be an object")

    spec = get_spec(data.get("type"))
    try:
        return spec.model.model_validate(data)
    except PydanticValidationError as e:
        section_id = data.get("id", "?")
        raise ValidationError([
            {
                "field": f"{section_id}." + ".".join(str(x) for x in err["loc"]),
                "message": err["msg"],
            }
            for err in e.errors()
        ])


_SECTION_ID_PATTERN = re.compile(r"^(?P<tag>[a-z][a-z-]*?)-[A-Za-z0-9]+$")


def variant_from_section_id(section_id: str) -> str | None:
    """Infer a variant tag from a ``{tag}-{suffix}`` section id.

    Returns the longest registered tag that prefixes the id, or None.
    """
    if not _SECTION_ID_PATTERN.match(section_id or ""):
        return None
    candidates = [t for t in SECTION_REGISTRY if section_id.startswith(f"{t}-")]
    if not candidates:
        return None
    return max(candidates, key=len)


def _values_at(data: Any, segments: list[str]) -> list[Any]:
    """Resolve a constraint path against section data, fanning out over ``[]``."""
    if not segments:
        return [data]
    head, rest = segments[0], segments[1:]
    many = head.endswith("[]")
    key = head[:-2] if many else head
    if not isinstance(data, dict) or key not in data:
        return []
    value = data[key]
    if many:
        if not isinstance(value, list):
            return []
        return [v for item in value for v in _values_at(item, rest)]
    return _values_at(value, rest)


def check_constraints(section: SectionBase) -> list[dict[str, str]]:
    """Report field values that break the variant's constraints.

    Returns:
        List of ``{"field", "message"}`` dicts; empty when the section fits.
    """
    spec = get_spec(section.type)
    data = section.model_dump(mode="json", by_alias=True)
    violations: list[dict[str, str]] = []

    for constraint in spec.constraints:
        values = _values_at(data, constraint.path.split("."))
        if constraint.required and not any(values):
            violations.append({
                "field": f"{section.id}.{constraint.path}",
                "message": "is required",
            })
        if constraint.max_length is None:
            continue
        for value in values:
            if isinstance(value, str) and len(value) > constraint.max_length:
                violations.append({
                    "field": f"{section.id}.{constraint.path}",
                    "message": f"exceeds {constraint.max_length} characters ({len(value)})",
                })
    return violations


# ---------------------------------------------------------------------------
# Built-in variants
# ---------------------------------------------------------------------------

_IMAGE_CONSTRAINTS = (
    FieldConstraint("images[].alt", "Image alt text for accessibility and SEO.", max_length=125),
    FieldConstraint("images[].caption", "Optional image caption text.", max_length=200),
)


def _hero_default(section_id: str) -> dict[str, Any]:
    return {
        "variant": "full-height",
        "headline": "Your Headline Here",
        "subheadline": "Supporting subtitle text",
        "description": "",
        "buttons": [{"text": "Get Started", "href": "#", "variant": "primary"}],
    }


def _text_block_default(section_id: str) -> dict[str, Any]:
    return {"content": "<p>Enter your content here...</p>", "alignment": "left"}


def _feature_grid_default(section_id: str) -> dict[str, Any]:
    icons = [("Camera", "One"), ("Star", "Two"), ("Shield", "Three")]
    return {
        "columns": 3,
        "features": [
            {
                "id": f"{section_id}-card-{i}",
                "icon": icon,
                "title": f"Feature {name}",
                "description": "Describe this feature.",
            }
            for i, (icon, name) in enumerate(icons)
        ],
    }


def _image_gallery_default(section_id: str) -> dict[str, Any]:
    return {
        "layout": "grid",
        "images": [{
            "id": f"{section_id}-image-0",
            "src": "/images/placeholder.jpg",
            "alt": "Placeholder image",
        }],
    }


def _cta_default(section_id: str) -> dict[str, Any]:
    return {
        "headline": "Ready to Get Started?",
        "subtext": "Contact us today for a free consultation.",
        "backgroundType": "solid",
        "backgroundValue": "#0A0A0A",
        "primaryButton": {"text": "Contact Us", "href": "/contact", "variant": "primary"},
    }


def _testimonials_default(section_id: str) -> dict[str, Any]:
    return {
        "layout": "carousel",
        "testimonials": [{
            "id": f"{section_id}-testimonial-0",
            "quote": "Add a testimonial quote here.",
            "authorName": "Client Name",
            "authorTitle": "Position, Company",
        }],
    }


def _faq_default(section_id: str) -> dict[str, Any]:
    return {
        "items": [{
            "id": f"{section_id}-faq-0",
            "question": "What is your first question?",
            "answer": "<p>Provide a helpful answer here.</p>",
        }],
    }


def _stats_default(section_id: str) -> dict[str, Any]:
    return {
        "items": [
            {"id": f"{section_id}-stat-0", "value": "100+", "label": "Events covered"},
            {"id": f"{section_id}-stat-1", "value": "24h", "label": "Turnaround"},
        ],
    }


def _columns_default(section_id: str) -> dict[str, Any]:
    return {"layout": "equal-2", "columns": [{"sections": []}, {"sections": []}]}


_BUILTINS = (
    ("hero", "Hero Banner", "Full-width hero with headline, subheadline, image, and CTAs", "Layout",
     _hero_default, (
         FieldConstraint("headline", "Main page headline. Rendered as h1.", max_length=80, required=True),
         FieldConstraint("subheadline", "Supporting text below headline.", max_length=120),
         FieldConstraint("description", "Optional detail text with basic formatting.",
                         max_length=300, allowed_tags=_INLINE_TAGS),
         FieldConstraint("backgroundImage.alt", "Background image alt text.", max_length=125),
         FieldConstraint("buttons[].text", "Button label text.", max_length=40),
     )),
    ("text-block", "Text Block", "Free-form rich text content with optional heading", "Type",
     _text_block_default, (
         FieldConstraint("heading", "Section heading. Rendered as h2.", max_length=100),
         FieldConstraint("content", "Rich text HTML content.", required=True, allowed_tags=_RICH_TAGS),
     )),
    ("feature-grid", "Feature Grid", "Grid of feature cards with icons and descriptions", "Grid3X3",
     _feature_grid_default, (
         FieldConstraint("heading", "Grid section heading. Rendered as h2.", max_length=100),
         FieldConstraint("subheading", "Supporting text below grid heading.", max_length=200),
         FieldConstraint("features[].title", "Feature card title. Rendered as h3.", max_length=60),
         FieldConstraint("features[].description", "Feature card description text.", max_length=200),
     )),
    ("image-gallery", "Image Gallery", "Image collection in grid, slider, or masonry layout", "Images",
     _image_gallery_default, (
         FieldConstraint("heading", "Gallery heading. Rendered as h2.", max_length=100),
         *_IMAGE_CONSTRAINTS,
     )),
    ("cta", "Call to Action", "Prominent section with headline and action buttons", "MousePointerClick",
     _cta_default, (
         FieldConstraint("headline", "CTA headline, action-oriented. Rendered as h2.", max_length=80, required=True),
         FieldConstraint("subtext", "CTA supporting text.", max_length=200),
         FieldConstraint("primaryButton.text", "Button label text.", max_length=40, required=True),
         FieldConstraint("secondaryButton.text", "Button label text.", max_length=40),
     )),
    ("testimonials", "Testimonials", "Customer testimonials in various layouts", "Quote",
     _testimonials_default, (
         FieldConstraint("heading", "Section heading. Rendered as h2.", max_length=100),
         FieldConstraint("testimonials[].quote", "Customer testimonial quote text.", max_length=500),
         FieldConstraint("testimonials[].authorName", "Testimonial author name.", max_length=60),
         FieldConstraint("testimonials[].authorTitle", "Author title/role and company.", max_length=80),
     )),
    ("faq", "FAQ", "Frequently asked questions with accordion layout", "HelpCircle",
     _faq_default, (
         FieldConstraint("heading", "Section heading. Rendered as h2.", max_length=100),
         FieldConstraint("items[].question", "FAQ question in natural language.", max_length=150),
         FieldConstraint("items[].answer", "FAQ answer with basic rich text formatting.",
                         max_length=1000, allowed_tags=("p", "ul", "ol", "li", "a", "strong", "em")),
     )),
    ("stats", "Stats", "Row of headline numbers with labels", "BarChart3",
     _stats_default, (
         FieldConstraint("heading", "Section heading. Rendered as h2.", max_length=100),
         FieldConstraint("items[].value", "Stat value, e.g. '500+'.", max_length=12),
         FieldConstraint("items[].label", "Stat label.", max_length=60),
     )),
    ("columns", "Columns", "Multi-column layout with side-by-side content sections", "Columns",
     _columns_default, ()),
)

for _tag, _label, _description, _icon, _factory, _constraints in _BUILTINS:
    register_section_type(SectionTypeSpec(
        tag=_tag,
        model=SECTION_MODELS[_tag],
        label=_label,
        description=_description,
        icon=_icon,
        default_factory=_factory,
        constraints=_constraints,
    ))


def clone_section(section: SectionBase) -> SectionBase:
    """Deep copy a section through its variant model."""
    return parse_section(copy.deepcopy(section.model_dump(mode="json", by_alias=True)))
