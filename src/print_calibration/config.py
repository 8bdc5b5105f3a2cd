"""
Configuration management for the print calibration engine.

Uses pydantic-settings for environment-based configuration with validation.
All settings can be overridden via environment variables with PRINTCAL_ prefix.
"""

from enum import Enum
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv
from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from print_calibration.core.types import Orientation, PaperSource

load_dotenv()


class ResampleMethod(str, Enum):
    """Resampling filters available for the final calibrated resize."""

    LANCZOS = "lanczos"
    BICUBIC = "bicubic"
    BILINEAR = "bilinear"
    NEAREST = "nearest"


class CalibrationSettings(BaseSettings):
    """Settings for scale/border correction and corrected image output."""

    model_config = SettingsConfigDict(env_prefix="PRINTCAL_CALIBRATION_")

    # Distance from paper edge to the outer edge of the test page border
    expected_border_inset_mm: float = Field(default=5.0, ge=0.0, le=50.0)

    # Resize filter for the stretch-to-final-size step
    resample: ResampleMethod = Field(default=ResampleMethod.LANCZOS)

    # PNG zlib level for corrected output
    png_compress_level: int = Field(default=6, ge=0, le=9)


class PrintSettings(BaseSettings):
    """Settings for submitting corrected images to a printer."""

    model_config = SettingsConfigDict(env_prefix="PRINTCAL_PRINT_")

    default_printer_name: Optional[str] = Field(default=None)
    default_paper_size: str = Field(default="letter")
    default_orientation: Orientation = Field(default=Orientation.LANDSCAPE)
    default_paper_source: PaperSource = Field(default=PaperSource.DEFAULT)

    # Where calibrated temp PNGs are written (system temp dir if unset)
    temp_dir: Optional[Path] = Field(default=None)
    cleanup_temp_files: bool = Field(default=True)


class Settings(BaseSettings):
    """Top-level settings; nested sections read their own env prefixes."""

    model_config = SettingsConfigDict(
        env_prefix="PRINTCAL_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    log_level: str = Field(default="INFO")

    # Data directories
    data_dir: Path = Field(default=Path.home() / ".print_calibration")
    database_path: Optional[Path] = Field(default=None)

    # Subsettings
    calibration: CalibrationSettings = Field(default_factory=CalibrationSettings)
    printing: PrintSettings = Field(default_factory=PrintSettings)

    @field_validator("database_path", mode="before")
    @classmethod
    def resolve_paths(cls, v: Optional[Path], info) -> Optional[Path]:
        """Resolve paths relative to data_dir if not absolute."""
        if v is None:
            return None
        path = Path(v)
        if not path.is_absolute():
            data = info.data if hasattr(info, "data") else {}
            data_dir = data.get("data_dir", Path.home() / ".print_calibration")
            return Path(data_dir) / path
        return path

    def get_database_path(self) -> Path:
        """Database file, defaulting to print_profiles.db inside data_dir."""
        return self.database_path or self.data_dir / "print_profiles.db"

    def ensure_directories(self) -> None:
        """Create required directories if they don't exist."""
        self.data_dir.mkdir(parents=True, exist_ok=True)
        self.get_database_path().parent.mkdir(parents=True, exist_ok=True)
        if self.printing.temp_dir:
            self.printing.temp_dir.mkdir(parents=True, exist_ok=True)


# Created on first use
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
