"""Tests for settings loading from the environment and app.yaml."""

import pytest

from formhandler.config import (
    CsrfConfig,
    Settings,
    build_settings,
    get_config_path,
    get_settings,
    interpolate_env_vars,
    load_app_config,
)


class TestDefaults:
    def test_defaults(self):
        settings = get_settings()
        assert settings.debug is False
        assert settings.secret_key == ""
        assert settings.csrf == CsrfConfig()
        assert settings.csrf.expire == 7200
        assert settings.csrf.max_tokens == 20
        assert settings.uploads.max_size == 8 * 1024 * 1024

    def test_settings_are_cached(self):
        assert get_settings() is get_settings()

    def test_environment(self, monkeypatch):
        monkeypatch.setenv("FORMHANDLER_SECRET_KEY", "from-env")
        monkeypatch.setenv("FORMHANDLER_CSRF__EXPIRE", "60")
        settings = Settings()
        assert settings.secret_key == "from-env"
        assert settings.csrf.expire == 60


class TestInterpolation:
    def test_nested_values(self, monkeypatch):
        monkeypatch.setenv("FORM_SECRET", "s3cret")
        config = {"secret_key": "$FORM_SECRET", "list": ["x-$FORM_SECRET"], "n": 3}
        assert interpolate_env_vars(config) == {"secret_key": "s3cret", "list": ["x-s3cret"], "n": 3}

    def test_missing_variable(self, monkeypatch):
        monkeypatch.delenv("FORM_MISSING", raising=False)
        with pytest.raises(ValueError, match=r"\$FORM_MISSING not set"):
            interpolate_env_vars("$FORM_MISSING")


class TestAppYaml:
    def test_missing_file(self):
        with pytest.raises(FileNotFoundError):
            load_app_config()

    def test_load(self, tmp_path, monkeypatch):
        monkeypatch.setenv("FORM_SECRET", "yaml-secret")
        (tmp_path / "app.yaml").write_text(
            "secret_key: $FORM_SECRET\n"
            "csrf:\n"
            "  expire: 600\n"
            "  max_tokens: 5\n"
            "uploads:\n"
            "  max_size: 1024\n"
        )

        assert get_config_path() == tmp_path / "app.yaml"
        settings = get_settings()

        assert settings.secret_key == "yaml-secret"
        assert settings.csrf.expire == 600
        assert settings.csrf.max_tokens == 5
        assert settings.csrf.field_name == "csrftoken"
        assert settings.uploads.max_size == 1024

    def test_empty_file(self, tmp_path):
        (tmp_path / "app.yaml").write_text("")
        assert load_app_config() == {}
        assert get_settings().csrf.expire == 7200

    def test_build_settings_without_sections(self):
        assert build_settings({"debug": True}).debug is True
        assert build_settings({}).debug is False
