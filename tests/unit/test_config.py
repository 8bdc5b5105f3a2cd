"""
Tests for configuration management.
"""

from pathlib import Path

import pytest
from pydantic import ValidationError

from print_calibration.config import (
    CalibrationSettings,
    PrintSettings,
    ResampleMethod,
    Settings,
    configure,
    get_settings,
)
from print_calibration.core.types import Orientation, PaperSource


class TestCalibrationSettings:
    """Tests for CalibrationSettings."""

    def test_defaults(self):
        """Defaults should match the physical test page."""
        settings = CalibrationSettings()

        assert settings.expected_border_inset_mm == 5.0
        assert settings.resample == ResampleMethod.LANCZOS
        assert settings.png_compress_level == 6

    def test_env_override(self, monkeypatch):
        """Environment variables should override defaults."""
        monkeypatch.setenv("PRINTCAL_CALIBRATION_EXPECTED_BORDER_INSET_MM", "3.5")
        monkeypatch.setenv("PRINTCAL_CALIBRATION_RESAMPLE", "bicubic")

        settings = CalibrationSettings()

        assert settings.expected_border_inset_mm == 3.5
        assert settings.resample == ResampleMethod.BICUBIC

    def test_compress_level_bounds(self):
        """PNG compress level must be 0-9."""
        with pytest.raises(ValidationError):
            CalibrationSettings(png_compress_level=10)


class TestPrintSettings:
    """Tests for PrintSettings."""

    def test_defaults(self):
        """Defaults should be a single landscape Letter page from the default tray."""
        settings = PrintSettings()

        assert settings.default_printer_name is None
        assert settings.default_paper_size == "letter"
        assert settings.default_orientation == Orientation.LANDSCAPE
        assert settings.default_paper_source == PaperSource.DEFAULT
        assert settings.cleanup_temp_files is True

    def test_env_override(self, monkeypatch):
        """Environment variables should override defaults."""
        monkeypatch.setenv("PRINTCAL_PRINT_DEFAULT_PRINTER_NAME", "EPSON_ET_8550")
        monkeypatch.setenv("PRINTCAL_PRINT_DEFAULT_PAPER_SOURCE", "rear")

        settings = PrintSettings()

        assert settings.default_printer_name == "EPSON_ET_8550"
        assert settings.default_paper_source == PaperSource.REAR


class TestSettings:
    """Tests for the main Settings."""

    def test_database_path_defaults_into_data_dir(self, tmp_path):
        """Without a database path the file should live in data_dir."""
        settings = Settings(data_dir=tmp_path)

        assert settings.get_database_path() == tmp_path / "print_profiles.db"

    def test_relative_database_path_resolved(self, tmp_path):
        """A relative database path should resolve against data_dir."""
        settings = Settings(data_dir=tmp_path, database_path="profiles/shop.db")

        assert settings.get_database_path() == tmp_path / "profiles" / "shop.db"

    def test_absolute_database_path_kept(self, tmp_path):
        """An absolute database path should be used as given."""
        db = tmp_path / "elsewhere.db"
        settings = Settings(data_dir=tmp_path / "data", database_path=db)

        assert settings.get_database_path() == db

    def test_ensure_directories(self, tmp_path):
        """ensure_directories should create the data and temp dirs."""
        settings = Settings(
            data_dir=tmp_path / "data",
            printing=PrintSettings(temp_dir=tmp_path / "spool"),
        )

        settings.ensure_directories()

        assert (tmp_path / "data").is_dir()
        assert (tmp_path / "spool").is_dir()

    def test_configure_replaces_global(self, tmp_path):
        """configure should replace the global settings instance."""
        settings = configure(data_dir=tmp_path, log_level="DEBUG")

        assert get_settings() is settings
        assert get_settings().log_level == "DEBUG"
        assert isinstance(get_settings().data_dir, Path)
