"""Calibration constants shared by the calculators, corrector and test page.

These values define the physical test page. Stored measurements were taken
against a page built from them, so changing any of them invalidates existing
print profiles.
"""

import math
from typing import Final

# =============================================================================
# PRINT GEOMETRY
# =============================================================================

# All page/pixel conversions are defined at this resolution
PRINT_DPI: Final[int] = 360

MM_PER_INCH: Final[float] = 25.4

# Nominal calibration page: US Letter, landscape
PAGE_WIDTH_INCHES: Final[float] = 11.0
PAGE_HEIGHT_INCHES: Final[float] = 8.5

# =============================================================================
# TEST PAGE FEATURES
# =============================================================================

# Distance between adjacent dots (A-B, B-C, C-D, D-A)
CALIBRATION_EXPECTED_DISTANCE_MM: Final[float] = 100.0

# Gap between paper edge and the outer edge of the black border
BORDER_INSET_MM: Final[float] = 5.0

BORDER_THICKNESS_MM: Final[float] = 5.0


def round_half_up(value: float) -> int:
    """Round to the nearest integer, with .5 going up.

    Python's round() uses banker's rounding; pixel sizes here follow
    the conventional half-up rule.
    """
    return int(math.floor(value + 0.5))


def mm_to_pixels(mm: float, dpi: int = PRINT_DPI) -> int:
    """Convert millimeters to whole pixels at the print resolution."""
    return round_half_up(mm / MM_PER_INCH * dpi)


def inches_to_pixels(inches: float, dpi: int = PRINT_DPI) -> int:
    """Convert inches to whole pixels at the print resolution."""
    return round_half_up(inches * dpi)


PAGE_WIDTH_PX: Final[int] = inches_to_pixels(PAGE_WIDTH_INCHES)  # 3960
PAGE_HEIGHT_PX: Final[int] = inches_to_pixels(PAGE_HEIGHT_INCHES)  # 3060
