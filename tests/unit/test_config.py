"""
Unit tests for Configuration module.

This module contains unit tests for the configuration settings,
validators, and computed properties.
"""

import os
from unittest.mock import patch

import pytest
from pydantic import ValidationError

from app.core.config import (
    ConfigValidator,
    EnvironmentEnum,
    LogLevelEnum,
    Settings,
    StorageBackendEnum,
    get_config_summary,
)


class TestSettings:
    """Test cases for Settings configuration."""

    def test_default_settings(self):
        """Test default configuration values."""
        with patch.dict(os.environ, {}, clear=True):
            test_settings = Settings(_env_file=None)

        assert test_settings.app_name == "Project Status Dashboard"
        assert test_settings.environment == EnvironmentEnum.development
        assert test_settings.debug is False
        assert test_settings.storage_backend == StorageBackendEnum.sql
        assert test_settings.database_url == "sqlite:///./dashboard.db"
        assert test_settings.projects_storage_key == "ppp-projects-storage"
        assert test_settings.ui_storage_key == "ppp-ui-storage"
        assert test_settings.seed_demo_projects is False
        assert test_settings.chart_project_limit == 8
        assert test_settings.owner_chart_limit == 8
        assert test_settings.recent_options_count == 12
        assert test_settings.presentation_item_limit == 4
        assert test_settings.log_level == LogLevelEnum.INFO

    def test_environment_validation(self):
        """Test environment validation with various inputs."""
        assert Settings(environment="production").environment == EnvironmentEnum.production
        assert Settings(environment="DEVELOPMENT").environment == EnvironmentEnum.development
        assert Settings(environment="dev").environment == EnvironmentEnum.development
        assert Settings(environment="prod").environment == EnvironmentEnum.production
        assert Settings(environment="test").environment == EnvironmentEnum.testing

    def test_invalid_environment(self):
        with pytest.raises(ValidationError):
            Settings(environment="moon")

    def test_computed_properties(self):
        """Test computed properties."""
        dev_settings = Settings(environment="development")
        assert dev_settings.is_development is True
        assert dev_settings.is_production is False
        assert dev_settings.is_testing is False

        prod_settings = Settings(environment="production")
        assert prod_settings.is_production is True

        test_settings = Settings(environment="testing")
        assert test_settings.is_testing is True

    def test_allowed_origins_list(self):
        test_settings = Settings(allowed_origins=" http://a.test , ,http://b.test")
        assert test_settings.allowed_origins_list == ["http://a.test", "http://b.test"]

    @pytest.mark.parametrize(
        "field", ["chart_project_limit", "owner_chart_limit", "recent_options_count"]
    )
    def test_limits_must_be_positive(self, field):
        with pytest.raises(ValidationError):
            Settings(**{field: 0})

    def test_storage_keys_must_differ(self):
        with pytest.raises(ValidationError):
            Settings(projects_storage_key="shared", ui_storage_key="shared")

    def test_reads_environment_variables(self):
        with patch.dict(os.environ, {"STORAGE_BACKEND": "memory", "CHART_PROJECT_LIMIT": "5"}):
            test_settings = Settings(_env_file=None)

        assert test_settings.storage_backend == StorageBackendEnum.memory
        assert test_settings.chart_project_limit == 5


class TestConfigValidator:
    """Test cases for ConfigValidator."""

    def test_memory_backend_rejected_in_production(self):
        prod = Settings(environment="production", storage_backend="memory")
        with patch("app.core.config.settings", prod):
            with pytest.raises(ValueError, match="memory storage backend"):
                ConfigValidator.validate_required_settings()

    def test_sql_backend_requires_url(self):
        broken = Settings(storage_backend="sql", database_url="")
        with patch("app.core.config.settings", broken):
            with pytest.raises(ValueError, match="DATABASE_URL"):
                ConfigValidator.validate_required_settings()

    def test_valid_configuration_passes(self):
        with patch("app.core.config.settings", Settings(storage_backend="memory")):
            ConfigValidator.validate_required_settings()

    def test_config_summary(self):
        with patch("app.core.config.settings", Settings(storage_backend="memory")):
            summary = get_config_summary()

        assert summary["app_name"] == "Project Status Dashboard"
        assert summary["features"]["storage_backend"] == StorageBackendEnum.memory
        assert summary["storage_configured"] is True
