"""Application configuration via Pydantic Settings."""

from functools import lru_cache

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class DetectionSettings(BaseSettings):
    """Throw detection thresholds, physics constants and session timing.

    Accelerations are in m/s², heights in meters, durations in the unit
    named by the field.
    """

    model_config = SettingsConfigDict(env_prefix="THROW_")

    gravity: float = Field(default=9.81, gt=0)
    throw_threshold: float = Field(default=14.0, gt=0)
    freefall_threshold: float = Field(default=4.0, gt=0)
    impact_threshold: float = Field(default=8.0, gt=0)
    max_realistic_height: float = Field(default=20.0, gt=0)
    min_freefall_time: float = Field(default=0.1, ge=0)
    settling_delay_ms: float = Field(default=1000.0, ge=0)
    session_timeout_ms: float = Field(default=20000.0, gt=0)
    history_size: int = Field(default=20, ge=1)


class GaugeSettings(BaseSettings):
    """Live acceleration gauge readout."""

    model_config = SettingsConfigDict(env_prefix="GAUGE_")

    full_scale: float = Field(default=20.0, gt=0)
    update_interval_ms: float = Field(default=100.0, ge=0)


class LoggingSettings(BaseSettings):
    """Logging configuration."""

    model_config = SettingsConfigDict(env_prefix="LOG_")

    level: str = "INFO"
    file: str | None = None


class Settings(BaseSettings):
    """Root settings aggregating all configuration sections."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    detection: DetectionSettings = Field(default_factory=DetectionSettings)
    gauge: GaugeSettings = Field(default_factory=GaugeSettings)
    logging: LoggingSettings = Field(default_factory=LoggingSettings)


@lru_cache
def get_settings() -> Settings:
    """Get cached application settings instance."""
    return Settings()
