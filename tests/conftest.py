"""
Shared fixtures for print calibration tests.
"""

import logging

import numpy as np
import pytest
from PIL import Image

from print_calibration import config
from print_calibration.config import PrintSettings, Settings
from print_calibration.core.logging import PACKAGE_LOGGER
from print_calibration.core.models import PrintProfile
from print_calibration.profiles import PrintProfileDatabase


@pytest.fixture(autouse=True)
def isolated_settings(tmp_path):
    """Point settings at a throwaway data dir and temp dir for every test."""
    settings = Settings(
        data_dir=tmp_path / "data",
        printing=PrintSettings(temp_dir=tmp_path / "spool"),
    )
    config.configure(settings)
    yield settings
    config._settings = None


@pytest.fixture(autouse=True)
def reset_package_logger():
    """Drop handlers added by setup_logging so they don't leak between tests."""
    yield
    package_logger = logging.getLogger(PACKAGE_LOGGER)
    for handler in package_logger.handlers:
        handler.close()
    package_logger.handlers.clear()
    package_logger.setLevel(logging.NOTSET)


@pytest.fixture
def sample_card_array():
    """A 600x400 RGB card: light background with a dark block in the middle."""
    arr = np.full((400, 600, 3), 230, dtype=np.uint8)
    arr[100:300, 150:450] = (20, 40, 60)
    return arr


@pytest.fixture
def sample_card_image(sample_card_array):
    """Sample card as a PIL image."""
    return Image.fromarray(sample_card_array)


@pytest.fixture
def sample_card_path(tmp_path, sample_card_image):
    """Sample card saved as PNG."""
    path = tmp_path / "adoption_card.png"
    sample_card_image.save(path)
    return path


@pytest.fixture
def letter_card_path(tmp_path):
    """A card rendered at 100 px/inch on landscape Letter (1100x850)."""
    arr = np.full((850, 1100, 3), 200, dtype=np.uint8)
    path = tmp_path / "letter_card.png"
    Image.fromarray(arr).save(path)
    return path


@pytest.fixture
def profile_db(tmp_path):
    """Fresh print profile database."""
    db = PrintProfileDatabase(tmp_path / "profiles.db")
    yield db
    db.close()


@pytest.fixture
def sample_profile():
    """A calibrated profile for a printer that prints slightly small and clips left."""
    return PrintProfile(
        name="Rear tray cardstock",
        printer_name="EPSON_ET_8550",
        copies=2,
        paper_size="letter",
        orientation="landscape",
        paper_source="rear",
        calibration_ab=98.0,
        calibration_bc=99.0,
        calibration_cd=98.0,
        calibration_da=99.0,
        border_top=5.0,
        border_right=6.0,
        border_bottom=5.0,
        border_left=3.0,
    )
