"""
Configuration management for DStretch Studio.

Uses pydantic-settings for environment-based configuration with validation.
All settings can be overridden via environment variables with DSTRETCH_ prefix.
"""

from typing import Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict
from dotenv import load_dotenv

load_dotenv()


class StretchSettings(BaseSettings):
    """Settings for the decorrelation stretch engine."""

    model_config = SettingsConfigDict(env_prefix="DSTRETCH_STRETCH_")

    # Target standard deviation per unit of stretch amount (component units)
    sigma_scale: float = Field(default=100.0, gt=0.0, le=1000.0)

    # Statistics sampling (0 = use every pixel)
    max_sample_pixels: int = Field(default=0, ge=0, le=100_000_000)

    # Eigenvalues below this fraction of the largest count as zero
    eigenvalue_tolerance: float = Field(default=1e-10, ge=0.0, le=1e-3)


class ReliefSettings(BaseSettings):
    """Settings for relief enhancement."""

    model_config = SettingsConfigDict(env_prefix="DSTRETCH_RELIEF_")

    # Edge threshold (as a fraction of 255) used by directional sharpening
    directional_edge_threshold: float = Field(default=0.5, ge=0.0, le=1.0)

    # Fraction by which a full-strength edge darkens the image
    edge_darken: float = Field(default=0.5, ge=0.0, le=1.0)

    # Z component of the light vector before normalisation
    light_elevation: float = Field(default=0.5, gt=0.0, le=10.0)


class WorkerSettings(BaseSettings):
    """Settings for background pipeline execution and undo history."""

    model_config = SettingsConfigDict(env_prefix="DSTRETCH_WORKER_")

    debounce_seconds: float = Field(default=0.15, ge=0.0, le=5.0)
    history_size: int = Field(default=20, ge=1, le=500)


class Settings(BaseSettings):
    """Main application settings aggregating all subsettings."""

    model_config = SettingsConfigDict(
        env_prefix="DSTRETCH_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Application info
    app_name: str = Field(default="DStretch Studio")
    debug: bool = Field(default=False)
    log_level: str = Field(default="INFO")

    # Subsettings
    stretch: StretchSettings = Field(default_factory=StretchSettings)
    relief: ReliefSettings = Field(default_factory=ReliefSettings)
    worker: WorkerSettings = Field(default_factory=WorkerSettings)


# Global settings instance - lazy loaded
_settings: Optional[Settings] = None


def get_settings() -> Settings:
    """Get the global settings instance, creating it if necessary."""
    global _settings
    if _settings is None:
        _settings = Settings()
    return _settings


def configure(settings: Optional[Settings] = None, **kwargs) -> Settings:
    """
    Configure the global settings.

    Args:
        settings: Optional Settings instance to use directly
        **kwargs: Settings overrides

    Returns:
        The configured Settings instance
    """
    global _settings
    if settings is not None:
        _settings = settings
    elif kwargs:
        _settings = Settings(**kwargs)
    else:
        _settings = Settings()
    return _settings
