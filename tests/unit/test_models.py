"""Tests for Pydantic models."""

import pytest
from datetime import datetime
from pydantic import ValidationError as PydanticValidationError

from sitecms.models.base import generate_ulid
from sitecms.models.change import FieldChange, FieldType
from sitecms.models.media import MediaItem
from sitecms.models.page_record import LifecycleState, PageRecord, PageState, PageSummary
from sitecms.models.settings import DEFAULT_SEO_PROMPT, SEO_PROMPT_PRESETS, SiteSettings
from sitecms.utils.exceptions import MalformedKeyError


class TestBaseModel:
    """Tests for BaseModel."""

    def test_generate_ulid(self):
        """Test ULID generation."""
        ulid1 = generate_ulid()
        ulid2 = generate_ulid()

        assert len(ulid1) == 26
        assert ulid1 != ulid2

    def test_model_timestamps(self):
        """Test automatic timestamps and initial version."""
        record = PageRecord(page_id="home")

        assert record.created_at is not None
        assert record.updated_at is not None
        assert record.version == 1

    def test_model_serialization(self, sample_sections):
        """Test DynamoDB serialization uses stored camelCase names."""
        record = PageRecord(page_id="home", sections=sample_sections)

        db_item = record.to_dynamodb()

        assert db_item["pageId"] == "home"
        assert db_item["status"] == "draft"
        assert db_item["sections"][0]["backgroundImage"]["src"] == "/images/hero.jpg"
        assert "publishedAt" not in db_item
        assert isinstance(db_item["createdAt"], str)

    def test_model_deserialization(self, sample_sections):
        """Test DynamoDB deserialization restores variant models."""
        record = PageRecord(page_id="home", sections=sample_sections, version=4)
        db_item = record.to_dynamodb()
        db_item.update(record.get_keys())

        restored = PageRecord.from_dynamodb(db_item)

        assert restored.version == 4
        assert isinstance(restored.created_at, datetime)
        assert [type(s).__name__ for s in restored.sections] == ["HeroSection", "TextBlockSection", "CTASection"]
        assert restored.sections == record.sections


class TestPageRecord:
    """Tests for PageRecord."""

    def test_keys(self):
        draft = PageRecord(page_id="about")
        published = PageRecord(page_id="about", status=LifecycleState.PUBLISHED)

        assert draft.get_keys() == {"PK": "PAGE#about", "SK": "draft"}
        assert published.get_sk() == "published"
        assert draft.is_draft is True
        assert published.is_draft is False

    def test_order_must_match_position(self, sample_sections):
        shuffled = [sample_sections[1], sample_sections[0]]

        with pytest.raises(PydanticValidationError):
            PageRecord(page_id="home", sections=shuffled)

    def test_duplicate_section_ids_rejected(self, sample_sections):
        duplicate = sample_sections[1].model_copy(update={"order": 1})
        hero = sample_sections[0]

        with pytest.raises(PydanticValidationError):
            PageRecord(page_id="home", sections=[hero, duplicate, duplicate.model_copy(update={"order": 2})])

    def test_replace_sections_renumbers(self, sample_sections):
        record = PageRecord(page_id="home", sections=sample_sections)

        record.replace_sections(list(reversed(record.sections)))

        assert [s.id for s in record.sections] == ["cta-1", "text-block-1", "hero-1"]
        assert [s.order for s in record.sections] == [0, 1, 2]

    def test_invalid_page_id(self):
        with pytest.raises(PydanticValidationError):
            PageRecord(page_id="Home Page")

    def test_snapshot_is_deep_copy(self, sample_sections):
        draft = PageRecord(page_id="home", sections=sample_sections, version=3)

        published = draft.snapshot(LifecycleState.PUBLISHED, author="editor-1")
        published.sections[0].headline = "Changed"

        assert published.status == "published"
        assert published.version == 3
        assert published.published_at is not None
        assert published.updated_by == "editor-1"
        assert draft.sections[0].headline == "Original headline"

    def test_public_api_body(self, sample_sections):
        record = PageRecord(page_id="home", sections=sample_sections, created_by="someone")

        body = record.to_api(public=True)

        assert set(body) == {"pageId", "sections", "seo", "version", "updatedAt"}


class TestPageSummary:
    def test_unpublished_changes(self):
        summary = PageSummary(page_id="home", state=PageState.HAS_DRAFT_AND_PUBLISHED,
                              draft_version=3, published_version=2)

        data = summary.to_api()

        assert data["hasDraft"] is True
        assert data["hasPublished"] is True
        assert data["hasUnpublishedChanges"] is True
        assert data["state"] == "has_draft_and_published"

    def test_never_saved(self):
        summary = PageSummary(page_id="faqs", state=PageState.NO_DRAFT)

        assert summary.has_draft is False
        assert summary.has_unpublished_changes is False


class TestFieldChange:
    """Tests for FieldChange parsing."""

    def test_from_components(self):
        change = FieldChange.model_validate({
            "pageId": "home",
            "sectionId": "hero-1",
            "fieldKey": "headline",
            "value": "New",
        })

        assert change.key.token == "home:hero-1:headline"
        assert change.field_type == FieldType.TEXT

    def test_from_content_key(self):
        change = FieldChange.model_validate({
            "contentKey": "home:hero-1:backgroundImage",
            "value": "https://cdn.example.com/a.jpg",
            "fieldType": "image",
        })

        assert change.page_id == "home"
        assert change.section_id == "hero-1"
        assert change.field_key == "backgroundImage"
        assert change.field_type == FieldType.IMAGE

    def test_malformed_content_key(self):
        with pytest.raises(MalformedKeyError):
            FieldChange.model_validate({"contentKey": "home:hero-1", "value": "x"})

    def test_component_with_delimiter(self):
        with pytest.raises(MalformedKeyError):
            FieldChange(page_id="home", section_id="hero:1", field_key="headline", value="x")

    def test_unknown_field_type(self):
        with pytest.raises(PydanticValidationError):
            FieldChange(page_id="home", section_id="hero-1", field_key="headline", field_type="video")


class TestSiteSettings:
    def test_defaults(self):
        settings = SiteSettings()

        assert settings.get_keys() == {"PK": "SETTINGS#global", "SK": "config"}
        assert settings.system_prompt() == DEFAULT_SEO_PROMPT

    def test_preset_prompt(self):
        settings = SiteSettings.model_validate({"seoPrompt": {"activePreset": "local-seo"}})

        assert settings.system_prompt() == SEO_PROMPT_PRESETS["local-seo"]

    def test_custom_prompt(self):
        settings = SiteSettings.model_validate({
            "seoPrompt": {"activePreset": "custom", "systemPrompt": "Write like a pirate."},
        })

        assert settings.system_prompt() == "Write like a pirate."


class TestMediaItem:
    def test_references(self):
        item = MediaItem(
            media_id="01HX",
            filename="team.jpg",
            s3_key="media/01HX/team.jpg",
            public_url="https://cdn.example.com/media/01HX/team.jpg",
        )

        assert item.get_keys() == {"PK": "MEDIA#01HX", "SK": "metadata"}
        assert item.references() == {
            "01HX",
            "media/01HX/team.jpg",
            "https://cdn.example.com/media/01HX/team.jpg",
        }
