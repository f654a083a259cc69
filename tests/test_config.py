"""Tests for environment-driven settings."""

from pathlib import Path

import pytest
from pydantic import ValidationError

from finance_tracker.config import AppSettings, StorageSettings, get_settings, validate_all_settings


class TestSettings:
    """Tests for the settings classes."""

    def test_defaults(self, monkeypatch):
        monkeypatch.delenv("FINANCE_TRACKER_STORAGE_BACKEND", raising=False)
        settings = StorageSettings(_env_file=None)
        assert settings.backend == "json"
        assert settings.data_dir == Path("data")

    def test_environment_overrides(self, monkeypatch):
        monkeypatch.setenv("FINANCE_TRACKER_STORAGE_BACKEND", "memory")
        monkeypatch.setenv("FINANCE_TRACKER_UNCATEGORIZED_LABEL", "Other")
        assert StorageSettings(_env_file=None).backend == "memory"
        assert AppSettings(_env_file=None).uncategorized_label == "Other"

    def test_data_dir_expands_home(self, monkeypatch):
        monkeypatch.setenv("FINANCE_TRACKER_STORAGE_DATA_DIR", "~/finance")
        assert "~" not in str(StorageSettings(_env_file=None).data_dir)

    def test_rejects_unknown_backend(self, monkeypatch):
        monkeypatch.setenv("FINANCE_TRACKER_STORAGE_BACKEND", "sheets")
        with pytest.raises(ValidationError):
            StorageSettings(_env_file=None)

    def test_validate_all_settings_reports_errors(self, monkeypatch):
        monkeypatch.setenv("FINANCE_TRACKER_LOG_LEVEL", "LOUD")
        get_settings.cache_clear()
        try:
            results = validate_all_settings()
        finally:
            get_settings.cache_clear()
        assert results["storage"] is True
        assert results["app"] is False
        assert "app_error" in results
