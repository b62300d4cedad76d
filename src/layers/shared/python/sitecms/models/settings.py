"""Site-wide settings stored as a single row."""

from typing import Literal

from pydantic import BaseModel as PydanticBaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from sitecms.models.base import BaseModel, CamelModel

SETTINGS_PK = "SETTINGS#global"
SETTINGS_SK = "config"

DEFAULT_SEO_PROMPT = """You are an SEO and GEO (Generative Engine Optimization) expert for a
professional services business website.

When generating SEO metadata:
- Page titles: 50-60 characters, include primary keyword and brand
- Meta descriptions: 150-160 characters, include value proposition and CTA
- OpenGraph: optimize for social sharing engagement

For GEO optimization:
- Structure content for AI citation (clear facts, statistics, quotes)
- Include entity mentions (places, organizations, people)"""

SEO_PROMPT_PRESETS: dict[str, str] = {
    "default": DEFAULT_SEO_PROMPT,
    "blog-focused": """You are an SEO and GEO specialist focused on blog content.

- Write compelling headlines that stay accurate
- Focus on long-tail keywords relevant to the business
- Include questions in content for featured snippet optimization
- Use clear H2/H3 hierarchy and descriptive image alt text""",
    "local-seo": """You are a local SEO expert.

- Mention the service area and local venues where relevant
- Optimize for "near me" and location-based searches
- Keep business name, address and phone consistent""",
    "eeat": """You are an E-E-A-T (Experience, Expertise, Authoritativeness,
Trustworthiness) specialist.

- Highlight concrete experience, case studies and notable clients
- Use precise, verifiable, factual language""",
}

PresetName = Literal["default", "blog-focused", "local-seo", "eeat", "custom"]


class Integrations(CamelModel):
    ga4_measurement_id: str | None = None
    meta_pixel_id: str | None = None


class SEOPromptSettings(CamelModel):
    """System prompt the AI assistant uses for SEO suggestions."""

    system_prompt: str = DEFAULT_SEO_PROMPT
    active_preset: PresetName = "default"


class SiteSettings(BaseModel):
    """Global site configuration.

    Key Pattern:
        PK: SETTINGS#global
        SK: config
    """

    site_name: str = "My Site"
    site_tagline: str = ""
    contact_email: str = ""
    contact_phone: str = ""
    logo: str | None = None
    favicon: str | None = None
    og_image: str | None = None
    default_meta_title: str = Field(default="", max_length=70)
    default_meta_description: str = Field(default="", max_length=160)
    robots_directive: str = "index,follow"
    integrations: Integrations = Field(default_factory=Integrations)
    seo_prompt: SEOPromptSettings = Field(default_factory=SEOPromptSettings)
    updated_by: str | None = None

    def get_pk(self) -> str:
        return SETTINGS_PK

    def get_sk(self) -> str:
        return SETTINGS_SK

    def system_prompt(self) -> str:
        """Active SEO prompt, resolving named presets."""
        if self.seo_prompt.active_preset != "custom":
            return SEO_PROMPT_PRESETS.get(self.seo_prompt.active_preset, DEFAULT_SEO_PROMPT)
        return self.seo_prompt.system_prompt or DEFAULT_SEO_PROMPT


class UpdateSettingsRequest(PydanticBaseModel):
    """Partial settings update. Nested objects merge key by key."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, extra="forbid")

    site_name: str | None = Field(None, min_length=1, max_length=120)
    site_tagline: str | None = None
    contact_email: str | None = None
    contact_phone: str | None = None
    logo: str | None = None
    favicon: str | None = None
    og_image: str | None = None
    default_meta_title: str | None = Field(None, max_length=70)
    default_meta_description: str | None = Field(None, max_length=160)
    robots_directive: str | None = None
    integrations: dict | None = None
    seo_prompt: dict | None = None
