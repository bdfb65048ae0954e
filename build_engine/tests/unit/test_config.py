"""Unit tests for build_engine.config."""

from __future__ import annotations

import pytest
from pydantic import ValidationError

from build_engine.config import Settings, load_settings

# ---------------------------------------------------------------------------
# Settings - default values
# ---------------------------------------------------------------------------


class TestSettingsDefaults:
    def test_default_flags(self):
        settings = Settings()
        assert settings.debug is False
        assert settings.structured_logging is False

    def test_default_images(self):
        settings = Settings()
        assert settings.git_container_image.startswith("ghcr.io/shipwright-io/build/git")
        assert settings.git_container_command == "/ko-app/git"
        assert settings.remote_artifacts_image.startswith("quay.io/quay/busybox")

    def test_default_result_prefix(self):
        assert Settings().result_prefix == "shp"

    def test_default_validation_timeout(self):
        assert Settings().validation_timeout == 30.0

    def test_default_requeue(self):
        settings = Settings()
        assert settings.requeue_max_retries == 5
        assert settings.requeue_base_delay == 1.0
        assert settings.requeue_max_delay == 60.0


# ---------------------------------------------------------------------------
# Settings - environment overrides
# ---------------------------------------------------------------------------


class TestSettingsFromEnv:
    def test_env_var_overrides_result_prefix(self, monkeypatch: pytest.MonkeyPatch):
        monkeypatch.setenv("BUILD_RESULT_PREFIX", "acme")
        assert Settings().result_prefix == "acme"

    def test_env_var_overrides_git_image(self, monkeypatch: pytest.MonkeyPatch):
        monkeypatch.setenv("BUILD_GIT_CONTAINER_IMAGE", "registry.local/git:1.0")
        assert Settings().git_container_image == "registry.local/git:1.0"

    def test_case_insensitive(self, monkeypatch: pytest.MonkeyPatch):
        monkeypatch.setenv("build_structured_logging", "true")
        assert Settings().structured_logging is True


# ---------------------------------------------------------------------------
# Validation
# ---------------------------------------------------------------------------


class TestResultPrefix:
    def test_trailing_separator_stripped(self):
        assert Settings(result_prefix="acme-").result_prefix == "acme"

    def test_empty_rejected(self):
        with pytest.raises(ValidationError):
            Settings(result_prefix=" - ")


class TestLoadSettings:
    def test_overrides(self):
        settings = load_settings(debug=True, validation_timeout=None)
        assert settings.debug is True
        assert settings.validation_timeout is None

    def test_returns_settings_instance(self):
        assert isinstance(load_settings(), Settings)
