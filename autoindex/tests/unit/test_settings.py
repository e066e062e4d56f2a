"""Unit tests for environment-driven settings."""

import pytest
from pydantic import ValidationError

from autoindex.common.exceptions import AutoIndexError, ErrorCode
from autoindex.settings import EngineSettings, FeatureSettings, ProjectSettings
from autoindex.settings.main import _reload_settings, get_settings


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch):
    for name in ("AUTO_INDEX_COLUMNS_ENABLED", "PROJECT_TIME_COLUMN", "ENGINE_URL", "ENGINE_POOL_SIZE"):
        monkeypatch.delenv(name, raising=False)


class TestFeatureSettings:
    """The automatic indexing flag defaults to off."""

    def test_disabled_by_default(self):
        features = FeatureSettings()

        assert features.auto_index_columns_enabled is False
        assert features.get_enabled_features() == []
        assert features.check_feature("auto_index_columns", raise_on_disabled=False) is False

    def test_enabled_from_environment(self, monkeypatch):
        monkeypatch.setenv("AUTO_INDEX_COLUMNS_ENABLED", "true")

        features = FeatureSettings()

        assert features.check_feature("auto_index_columns") is True
        assert features.get_feature_status() == {"auto_index_columns": True}

    def test_disabled_feature_raises_when_asked(self):
        with pytest.raises(AutoIndexError) as exc_info:
            FeatureSettings().check_feature("auto_index_columns")

        assert exc_info.value.error_code == ErrorCode.FEATURE_DISABLED

    def test_unknown_feature(self):
        with pytest.raises(ValueError, match="Unknown feature"):
            FeatureSettings().check_feature("auto_vacuum")


class TestProjectSettings:

    def test_time_column_default(self):
        assert ProjectSettings().time_column == "_time"

    def test_time_column_from_environment(self, monkeypatch):
        monkeypatch.setenv("PROJECT_TIME_COLUMN", "event_time")
        assert ProjectSettings().time_column == "event_time"

    def test_blank_time_column_rejected(self):
        with pytest.raises(ValidationError):
            ProjectSettings(time_column="   ")


class TestEngineSettings:

    def test_defaults(self):
        engine = EngineSettings()

        assert engine.is_configured is False
        assert engine.get_url() is None
        assert engine.session_time_zone == "UTC"
        assert EngineSettings.get_env_prefix() == "ENGINE_"

    def test_url_from_environment_is_secret(self, monkeypatch):
        monkeypatch.setenv("ENGINE_URL", "postgresql://user:secret@db/analytics")
        monkeypatch.setenv("ENGINE_POOL_SIZE", "10")

        engine = EngineSettings()

        assert engine.is_configured is True
        assert engine.get_url() == "postgresql://user:secret@db/analytics"
        assert "secret" not in repr(engine)
        assert engine.pool_size == 10


class TestSettingsSingleton:

    def test_get_settings_is_cached(self):
        first = _reload_settings()
        assert get_settings() is first
        assert get_settings(force_reload=True) is not first

    def test_auto_index_enabled_property(self, monkeypatch):
        monkeypatch.setenv("AUTO_INDEX_COLUMNS_ENABLED", "1")
        assert _reload_settings().auto_index_enabled is True
