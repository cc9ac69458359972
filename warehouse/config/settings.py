"""
Sales Warehouse Gold Layer
Centralized Configuration Management

This module provides configuration management using Pydantic settings with
environment variable support, validation, and type safety.
"""

from functools import lru_cache
from typing import Optional
from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class DataLakeSettings(BaseSettings):
    """Data Lake Storage Configuration"""

    model_config = SettingsConfigDict(env_prefix="DATA_")

    lake_path: str = Field(default="./data", description="Data lake root path")
    silver_path: str = Field(default="./data/silver", description="Silver (cleansed) zone path")
    gold_path: str = Field(default="./data/gold", description="Gold (business-ready) zone path")


class MonitoringSettings(BaseSettings):
    """Logging Configuration"""

    model_config = SettingsConfigDict(env_prefix="")

    log_level: str = Field(default="INFO", alias="LOG_LEVEL", description="Logging level")
    log_format: str = Field(default="json", description="Log format: json or text")
    log_file: Optional[str] = Field(default=None, description="Log file path")


class GoldLayerSettings(BaseSettings):
    """Star Schema Build Configuration"""

    model_config = SettingsConfigDict(env_prefix="GOLD_")

    unknown_gender: str = Field(default="N/A", description="Sentinel for an unknown gender code")
    surrogate_key_base: int = Field(default=1, description="First surrogate key value of each dimension")
    parallel_dimensions: bool = Field(default=True, description="Build the two dimensions concurrently")
    max_workers: int = Field(default=2, description="Threads used for dimension builds")
    validate_inputs: bool = Field(default=False, description="Validate Silver preconditions before building")
    strict_references: bool = Field(default=False, description="Raise on ambiguous lookup keys instead of picking the first")

    @field_validator("max_workers")
    @classmethod
    def validate_max_workers(cls, v: int) -> int:
        """Validate worker count"""
        if v < 1:
            raise ValueError("max_workers must be at least 1")
        return v

    @field_validator("surrogate_key_base")
    @classmethod
    def validate_key_base(cls, v: int) -> int:
        """Validate surrogate key base"""
        if v < 0:
            raise ValueError("surrogate_key_base cannot be negative")
        return v


class Settings(BaseSettings):
    """
    Main Application Settings

    Aggregates all configuration sections and provides a single entry point
    for accessing application configuration.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Application
    app_name: str = Field(default="sales-warehouse-gold", alias="APP_NAME", description="Application name")
    app_env: str = Field(default="development", alias="APP_ENV", description="Environment")
    debug: bool = Field(default=False, alias="DEBUG", description="Debug mode")

    # Version
    version: str = Field(default="1.0.0", description="Application version")

    # Subsystem configurations
    data_lake: DataLakeSettings = Field(default_factory=DataLakeSettings)
    monitoring: MonitoringSettings = Field(default_factory=MonitoringSettings)
    gold: GoldLayerSettings = Field(default_factory=GoldLayerSettings)

    @field_validator("app_env")
    @classmethod
    def validate_env(cls, v: str) -> str:
        """Validate environment value"""
        allowed = ["development", "staging", "production", "testing"]
        if v.lower() not in allowed:
            raise ValueError(f"Environment must be one of: {allowed}")
        return v.lower()

    @property
    def is_production(self) -> bool:
        """Check if running in production"""
        return self.app_env == "production"

    @property
    def is_development(self) -> bool:
        """Check if running in development"""
        return self.app_env == "development"


@lru_cache()
def get_settings() -> Settings:
    """
    Get cached application settings.

    Uses LRU cache to ensure settings are only loaded once.

    Returns:
        Settings: Application settings instance
    """
    return Settings()


# Convenience function for accessing settings
settings = get_settings()
