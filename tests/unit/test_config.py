"""Tests for transport configuration.

Test Organization:
- TestSettingsDefaults: Default configuration values
- TestSettingsFromEnvironment: Environment variable parsing
- TestSettingsValidation: Field validation
- TestProductionValidation: Production security validation
- TestGetSettingsCaching: Settings singleton caching
"""

import pytest
from pydantic import ValidationError

from mandrill_transport.infrastructure.config import Settings, get_settings


# ============================================================================
# Default Values Tests
# ============================================================================


class TestSettingsDefaults:
    """Test default configuration values."""

    def test_has_development_defaults(self, monkeypatch: pytest.MonkeyPatch) -> None:
        """Test defaults are development-appropriate.

        Arrange: No relevant environment variables
        Act: Create Settings instance
        Assert: Defaults are used
        """
        # Arrange
        for var in ("APP_ENV", "LOG_LEVEL", "MANDRILL_API_KEY", "HTTP_TIMEOUT"):
            monkeypatch.delenv(var, raising=False)

        # Act
        settings = Settings(_env_file=None)

        # Assert
        assert settings.app_env == "development"
        assert settings.log_level == "INFO"
        assert "dev-mandrill" in settings.mandrill_api_key
        assert settings.http_timeout == 10.0
        assert settings.is_development is True
        assert settings.is_production is False


# ============================================================================
# Environment Variable Tests
# ============================================================================


class TestSettingsFromEnvironment:
    """Test loading from environment variables."""

    def test_reads_mandrill_settings(self, monkeypatch: pytest.MonkeyPatch) -> None:
        """Test MANDRILL_API_KEY and HTTP_TIMEOUT are read."""
        # Arrange
        monkeypatch.setenv("MANDRILL_API_KEY", "md-live-key")
        monkeypatch.setenv("HTTP_TIMEOUT", "2.5")

        # Act
        settings = Settings(_env_file=None)

        # Assert
        assert settings.mandrill_api_key == "md-live-key"
        assert settings.http_timeout == 2.5

    def test_env_names_are_case_insensitive(self, monkeypatch: pytest.MonkeyPatch) -> None:
        """Test lowercase variable names are accepted."""
        # Arrange
        monkeypatch.setenv("log_level", "debug")

        # Act
        settings = Settings(_env_file=None)

        # Assert
        assert settings.log_level == "DEBUG"


# ============================================================================
# Validation Tests
# ============================================================================


class TestSettingsValidation:
    """Test field validators."""

    @pytest.mark.parametrize("timeout", [0, -1.0])
    def test_rejects_non_positive_timeout(self, timeout: float) -> None:
        """Test HTTP_TIMEOUT must be positive."""
        # Act & Assert
        with pytest.raises(ValidationError, match="HTTP_TIMEOUT must be positive"):
            Settings(_env_file=None, http_timeout=timeout)

    def test_rejects_unknown_log_level(self) -> None:
        """Test LOG_LEVEL must be a standard level."""
        # Act & Assert
        with pytest.raises(ValidationError, match="LOG_LEVEL must be one of"):
            Settings(_env_file=None, log_level="VERBOSE")


# ============================================================================
# Production Validation Tests
# ============================================================================


class TestProductionValidation:
    """Test production-only checks."""

    def test_rejects_development_key_in_production(self) -> None:
        """Test the placeholder key is refused in production."""
        # Act & Assert
        with pytest.raises(ValidationError, match="MANDRILL_API_KEY must be set"):
            Settings(_env_file=None, app_env="production")

    def test_rejects_blank_key_in_production(self) -> None:
        """Test a blank key is refused in production."""
        # Act & Assert
        with pytest.raises(ValidationError, match="MANDRILL_API_KEY must be set"):
            Settings(_env_file=None, app_env="production", mandrill_api_key="  ")

    def test_accepts_real_key_in_production(self) -> None:
        """Test a real key passes in production."""
        # Act
        settings = Settings(_env_file=None, app_env="production", mandrill_api_key="md-real")

        # Assert
        assert settings.is_production is True
        assert settings.mandrill_api_key == "md-real"

    def test_allows_development_key_outside_production(self) -> None:
        """Test the placeholder is fine in other environments."""
        # Act
        settings = Settings(_env_file=None, app_env="staging")

        # Assert
        assert settings.is_development is False
        assert settings.is_production is False


# ============================================================================
# Caching Tests
# ============================================================================


class TestGetSettingsCaching:
    """Test get_settings caching."""

    def test_returns_same_instance(self) -> None:
        """Test get_settings is cached."""
        assert get_settings() is get_settings()

    def test_cache_clear_reloads(self, monkeypatch: pytest.MonkeyPatch) -> None:
        """Test clearing the cache picks up new environment values."""
        # Arrange
        first = get_settings()
        monkeypatch.setenv("HTTP_TIMEOUT", "4")

        # Act
        get_settings.cache_clear()
        second = get_settings()

        # Assert
        assert second is not first
        assert second.http_timeout == 4.0
