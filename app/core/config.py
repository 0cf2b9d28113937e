# python
# app/core/config.py
"""Configuration settings for the Project Status Dashboard.

Uses Pydantic BaseSettings for environment variable management.
"""
from enum import Enum

from pydantic import Field, field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class EnvironmentEnum(str, Enum):
    development = "development"
    testing = "testing"
    staging = "staging"
    production = "production"


class LogLevelEnum(str, Enum):
    DEBUG = "DEBUG"
    INFO = "INFO"
    WARNING = "WARNING"
    ERROR = "ERROR"
    CRITICAL = "CRITICAL"


class StorageBackendEnum(str, Enum):
    memory = "memory"
    sql = "sql"


class Settings(BaseSettings):
    # Pydantic v2 settings configuration
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # ===== Application Settings =====
    app_name: str = Field(default="Project Status Dashboard", description="Application name")
    environment: EnvironmentEnum = Field(
        default=EnvironmentEnum.development, description="Environment type"
    )
    debug: bool = Field(default=False, description="Debug mode")
    version: str = Field(default="1.0.0", description="Application version")

    # ===== Storage Settings =====
    storage_backend: StorageBackendEnum = Field(
        default=StorageBackendEnum.sql, description="Where state blobs are persisted"
    )
    database_url: str = Field(
        default="sqlite:///./dashboard.db", description="SQLAlchemy URL for the sql backend"
    )
    projects_storage_key: str = Field(
        default="ppp-projects-storage", description="Storage key of the project state blob"
    )
    ui_storage_key: str = Field(
        default="ppp-ui-storage", description="Storage key of the UI preferences blob"
    )
    seed_demo_projects: bool = Field(
        default=False, description="Seed demo projects when no project state is stored"
    )

    # ===== Report Limits =====
    chart_project_limit: int = Field(default=8, description="Projects shown per chart")
    owner_chart_limit: int = Field(default=8, description="Owner groups shown in the owner chart")
    recent_options_count: int = Field(default=12, description="Entries in date pickers")
    presentation_item_limit: int = Field(
        default=4, description="List items per section on a project slide"
    )

    # ===== CORS Settings =====
    allowed_origins: str = Field(
        default="http://localhost:3000,http://localhost:5173,http://127.0.0.1:3000",
        description="Allowed CORS origins (comma-separated)",
    )

    @property
    def allowed_origins_list(self) -> list[str]:
        """Parse CORS origins from comma-separated string."""
        return [origin.strip() for origin in self.allowed_origins.split(",") if origin.strip()]

    # ===== Monitoring & Logging =====
    log_level: LogLevelEnum = Field(default=LogLevelEnum.INFO, description="Logging level")

    # ===== Server Settings =====
    host: str = Field(default="127.0.0.1", description="Host to bind the server")
    port: int = Field(default=8000, description="Port to bind the server")

    # ===== Computed Properties =====
    @property
    def is_development(self) -> bool:
        return self.environment == EnvironmentEnum.development

    @property
    def is_production(self) -> bool:
        return self.environment == EnvironmentEnum.production

    @property
    def is_testing(self) -> bool:
        return self.environment == EnvironmentEnum.testing

    # ===== Validation Methods =====
    @field_validator("environment", mode="before")
    @classmethod
    def validate_environment(cls, v):
        if v and isinstance(v, str):
            lv = v.lower()
            if lv in ["dev", "develop"]:
                return "development"
            if lv in ["prod"]:
                return "production"
            if lv in ["test"]:
                return "testing"
            return lv
        return v

    @field_validator(
        "chart_project_limit", "owner_chart_limit", "recent_options_count", "presentation_item_limit"
    )
    @classmethod
    def validate_positive_limit(cls, v):
        if v < 1:
            raise ValueError("Limits must be at least 1")
        return v

    @model_validator(mode="after")
    def check_storage_keys(self):
        if self.projects_storage_key == self.ui_storage_key:
            raise ValueError("Project and UI state must use distinct storage keys")
        return self


settings = Settings()


class ConfigValidator:
    @staticmethod
    def validate_required_settings():
        errors = []
        if settings.storage_backend == StorageBackendEnum.sql and not settings.database_url:
            errors.append("DATABASE_URL is required for the sql storage backend")
        if settings.is_production and settings.storage_backend == StorageBackendEnum.memory:
            errors.append("The memory storage backend cannot be used in production")
        if errors:
            raise ValueError(f"Configuration errors: {', '.join(errors)}")

    @staticmethod
    def get_feature_status() -> dict:
        return {
            "storage_backend": settings.storage_backend,
            "demo_seed": settings.seed_demo_projects,
            "environment": settings.environment,
        }


def get_config_summary() -> dict:
    return {
        "app_name": settings.app_name,
        "version": settings.version,
        "environment": settings.environment,
        "debug": settings.debug,
        "features": ConfigValidator.get_feature_status(),
        "storage_configured": bool(settings.database_url)
        or settings.storage_backend == StorageBackendEnum.memory,
    }


__all__ = [
    "settings",
    "Settings",
    "ConfigValidator",
    "get_config_summary",
    "EnvironmentEnum",
    "LogLevelEnum",
    "StorageBackendEnum",
]
