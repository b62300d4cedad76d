"""Tests for SettingsRepository."""

from unittest.mock import patch

from sitecms.models.settings import UpdateSettingsRequest
from sitecms.repositories.settings import SettingsRepository


class TestSettingsRepository:
    def test_defaults_when_never_saved(self, dynamodb_table):
        settings = SettingsRepository().get_settings()

        assert settings.site_name == "My Site"
        assert settings.version == 1

    def test_update_merges_nested_objects(self, dynamodb_table):
        repo = SettingsRepository()
        repo.update_settings(UpdateSettingsRequest.model_validate({
            "siteName": "Northline Studio",
            "integrations": {"ga4MeasurementId": "G-123"},
        }), author="ed")

        updated = repo.update_settings(UpdateSettingsRequest.model_validate({
            "integrations": {"metaPixelId": "px-9"},
        }), author="ed")

        assert updated.site_name == "Northline Studio"
        assert updated.integrations.ga4_measurement_id == "G-123"
        assert updated.integrations.meta_pixel_id == "px-9"
        assert updated.version == 2
        assert updated.updated_by == "ed"

    def test_reads_are_cached_until_write(self, dynamodb_table):
        repo = SettingsRepository()
        repo.get_settings()

        with patch.object(repo, "get", wraps=repo.get) as mock_get:
            repo.get_settings()
            assert mock_get.call_count == 0

            repo.update_settings(UpdateSettingsRequest(site_name="Renamed"))
            settings = repo.get_settings()

        assert settings.site_name == "Renamed"

    def test_cached_copy_is_not_shared(self, dynamodb_table):
        repo = SettingsRepository()
        first = repo.get_settings()
        first.site_name = "Mutated"

        assert repo.get_settings().site_name == "My Site"
