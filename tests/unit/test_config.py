"""
Unit tests for Configuration module.

Covers defaults, validators, computed properties and the startup checks.
"""

import pytest

from app.core.config import ConfigValidator, EnvironmentEnum, Settings


class TestSettings:
    """Test cases for Settings configuration."""

    def test_default_settings(self):
        """Test default configuration values."""
        test_settings = Settings(_env_file=None)

        assert test_settings.app_name == "Chat API"
        assert test_settings.algorithm == "HS256"
        assert test_settings.session_max_age_days == 30
        assert test_settings.session_cookie_name == "session-token"
        assert test_settings.login_cookie_name == "token"
        assert test_settings.completion_api_base_url == "https://openrouter.ai/api/v1"
        assert test_settings.completion_default_model == "deepseek/deepseek-r1:free"
        assert test_settings.completion_max_tokens_ceiling == 4096
        assert test_settings.completion_default_max_tokens == 2000
        assert test_settings.completion_temperature == 0.7

    def test_environment_validation(self):
        """Test environment validation with shortcuts and mixed case."""
        assert Settings(environment="prod").environment == EnvironmentEnum.production
        assert Settings(environment="DEVELOPMENT").environment == EnvironmentEnum.development
        assert Settings(environment="dev").environment == EnvironmentEnum.development

    def test_app_url_trailing_slash_is_stripped(self):
        assert Settings(app_url="https://chat.example.com/").app_url == "https://chat.example.com"

    def test_tokens_ceiling_must_be_positive(self):
        with pytest.raises(ValueError):
            Settings(completion_max_tokens_ceiling=0)

    def test_generated_secrets_differ(self):
        config = Settings(session_secret="a" * 32)

        assert config.session_secret == "a" * 32
        assert config.jwt_secret
        assert config.jwt_secret != config.session_secret

    def test_allowed_origins_list(self):
        config = Settings(allowed_origins="http://a.com, http://b.com,")

        assert config.allowed_origins_list == ["http://a.com", "http://b.com"]

    def test_oauth_credentials_need_both_values(self):
        config = Settings(
            google_client_id="gid",
            google_client_secret="gsecret",
            github_client_id="hid",
            github_client_secret=None,
        )

        assert config.oauth_credentials("google") == ("gid", "gsecret")
        assert config.oauth_credentials("github") is None

    def test_feature_flags(self):
        config = Settings(
            completion_api_key="k", smtp_host="smtp.x.com", smtp_user="u", smtp_password="p"
        )

        assert config.has_completion_enabled is True
        assert config.has_email_enabled is True
        assert Settings(completion_api_key=None).has_completion_enabled is False


class TestConfigValidator:
    """Test cases for startup configuration checks."""

    def test_missing_database_url(self):
        with pytest.raises(ValueError, match="DATABASE_URL is required"):
            ConfigValidator.validate_required_settings(Settings(database_url=None))

    def test_production_requires_explicit_secrets(self, monkeypatch):
        monkeypatch.delenv("SESSION_SECRET", raising=False)
        monkeypatch.delenv("JWT_SECRET", raising=False)

        with pytest.raises(ValueError) as exc_info:
            ConfigValidator.validate_required_settings(
                Settings(
                    _env_file=None,
                    environment="production",
                    database_url="sqlite+aiosqlite:///./prod.db",
                    completion_api_key="k",
                    session_secret="s" * 32,
                )
            )

        assert "JWT_SECRET" in str(exc_info.value)
        assert "SESSION_SECRET" not in str(exc_info.value)

    def test_production_configuration_passes(self):
        ConfigValidator.validate_required_settings(
            Settings(
                environment="production",
                database_url="sqlite+aiosqlite:///./prod.db",
                completion_api_key="k",
                session_secret="s" * 32,
                jwt_secret="j" * 32,
            )
        )

    def test_feature_status(self):
        status = ConfigValidator.get_feature_status(
            Settings(
                completion_api_key=None,
                smtp_host=None,
                github_client_id="hid",
                github_client_secret="hsecret",
                google_client_id=None,
            )
        )

        assert status["completion_enabled"] is False
        assert status["email_enabled"] is False
        assert status["oauth_providers"] == ["github"]
