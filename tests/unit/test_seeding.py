"""Tests for the schema seeding pipeline."""

from unittest.mock import patch

import pytest

from sitecms.content import ALL_PAGE_IDS, get_page_schema
from sitecms.models.change import FieldChange
from sitecms.models.page_record import LifecycleState, PageSEO
from sitecms.models.section_registry import parse_section
from sitecms.services.seeding import SeedingService, merge_page, merge_section, merge_seo
from sitecms.utils.exceptions import UnknownPageError, ValidationError


@pytest.fixture
def seeding(publishing):
    return SeedingService(publishing=publishing)


def _saves(mock_save):
    return [(call.args[0].page_id, call.args[0].status) for call in mock_save.call_args_list]


class TestResolve:
    def test_all(self, seeding):
        assert seeding.resolve(["all"]) == ALL_PAGE_IDS

    def test_deduplicates(self, seeding):
        assert seeding.resolve(["home", "about", "home"]) == ["home", "about"]

    def test_empty(self, seeding):
        with pytest.raises(ValidationError):
            seeding.resolve([])

    def test_unknown(self, seeding):
        with pytest.raises(UnknownPageError) as exc_info:
            seeding.resolve(["home", "blog"])

        assert exc_info.value.unknown == ["blog"]
        assert exc_info.value.details["available"] == ALL_PAGE_IDS


class TestSeed:
    def test_seed_all_writes_draft_then_publish_per_page(self, seeding, page_repo):
        with patch.object(page_repo, "save", wraps=page_repo.save) as mock_save:
            report = seeding.seed(["all"])

        expected = []
        for page_id in ALL_PAGE_IDS:
            expected += [(page_id, "draft"), (page_id, "published")]
        assert _saves(mock_save) == expected
        assert report.succeeded == len(ALL_PAGE_IDS)
        assert report.failed == 0
        assert report.mode == "merge"

    def test_unknown_slug_writes_nothing(self, seeding, page_repo):
        with patch.object(page_repo, "save", wraps=page_repo.save) as mock_save:
            with pytest.raises(UnknownPageError):
                seeding.seed(["home", "nope"])

        assert mock_save.call_count == 0
        assert seeding.publishing.read("home") is None

    def test_seeded_page_matches_schema(self, seeding):
        seeding.seed(["home"])

        published = seeding.publishing.read("home")
        schema = get_page_schema("home")
        assert [s.id for s in published.sections] == [s["id"] for s in schema.sections]
        assert published.seo == schema.build_seo()
        assert published.created_by == "seed-api"

    def test_reseed_keeps_edited_content(self, seeding, publishing):
        seeding.seed(["home"])
        publishing.edit("home", FieldChange(
            page_id="home", section_id="hero-1", field_key="headline", value="Edited",
        ))
        publishing.publish("home")

        report = seeding.seed(["home"])

        assert report.results[0].merged is True
        assert publishing.read("home").find_section("hero-1").headline == "Edited"

    def test_force_overwrites(self, seeding, publishing):
        seeding.seed(["home"])
        publishing.edit("home", FieldChange(
            page_id="home", section_id="hero-1", field_key="headline", value="Edited",
        ))
        publishing.publish("home")

        report = seeding.seed(["home"], force=True)

        schema_headline = get_page_schema("home").sections[0]["headline"]
        assert report.mode == "overwrite"
        assert report.results[0].merged is False
        assert publishing.read("home").find_section("hero-1").headline == schema_headline

    def test_reseed_bumps_version(self, seeding, publishing):
        first = seeding.seed(["about"])
        second = seeding.seed(["about"])

        assert first.results[0].version == 1
        assert second.results[0].version == 2
        assert publishing.read("about", LifecycleState.DRAFT).version == 2

    def test_page_failure_is_reported_and_others_continue(self, seeding):
        original = seeding.seed_page

        def flaky(page_id, force=False, author="seed-api"):
            if page_id == "about":
                raise RuntimeError("boom")
            return original(page_id, force=force, author=author)

        with patch.object(seeding, "seed_page", side_effect=flaky):
            report = seeding.seed(["home", "about", "faqs"])

        assert [r.status for r in report.results] == ["ok", "error", "ok"]
        assert report.to_dict()["summary"] == {"total": 3, "succeeded": 2, "failed": 1}


class TestMerge:
    def test_type_change_schema_wins(self):
        schema = {"id": "s-1", "type": "cta", "headline": "New"}
        existing = {"id": "s-1", "type": "hero", "headline": "Old"}

        assert merge_section(schema, existing) == schema

    def test_existing_content_kept_and_missing_filled(self):
        schema = {"id": "hero-1", "type": "hero", "order": 2, "headline": "Schema", "subheadline": "Sub"}
        existing = {"id": "hero-1", "type": "hero", "order": 0, "headline": "Mine", "subheadline": None}

        merged = merge_section(schema, existing)

        assert merged["headline"] == "Mine"
        assert merged["subheadline"] == "Sub"
        assert merged["order"] == 2

    def test_new_list_items_appended(self):
        schema = {"id": "faq-1", "type": "faq", "items": [
            {"id": "q1", "question": "Schema Q1", "answer": "A"},
            {"id": "q2", "question": "Schema Q2", "answer": "A"},
        ]}
        existing = {"id": "faq-1", "type": "faq", "items": [
            {"id": "q1", "question": "Edited Q1", "answer": "A"},
        ]}

        merged = merge_section(schema, existing)

        assert [i["question"] for i in merged["items"]] == ["Edited Q1", "Schema Q2"]

    def test_placeholder_og_image_refreshed(self):
        schema = {"ogImage": "/images/generated/og-home-v2.jpg"}

        assert merge_seo(schema, {"ogImage": "/images/generated/og-home.jpg"})["ogImage"] == schema["ogImage"]
        assert merge_seo(schema, {"ogImage": "https://cdn.example.com/og.jpg"})["ogImage"] == (
            "https://cdn.example.com/og.jpg"
        )

    def test_merge_page_uses_schema_section_set(self):
        schema_sections = [
            parse_section({"id": "hero-1", "type": "hero", "order": 0, "headline": "Schema"}),
            parse_section({"id": "cta-1", "type": "cta", "order": 1, "headline": "CTA",
                           "primaryButton": {"text": "Go", "href": "/"}}),
        ]
        existing_sections = [
            parse_section({"id": "hero-1", "type": "hero", "order": 0, "headline": "Kept"}),
            parse_section({"id": "old-1", "type": "text-block", "order": 1, "content": "<p>gone</p>"}),
        ]

        sections, seo = merge_page(schema_sections, PageSEO(page_title="T"), existing_sections, None)

        assert [s.id for s in sections] == ["hero-1", "cta-1"]
        assert sections[0].headline == "Kept"
        assert seo.page_title == "T"
