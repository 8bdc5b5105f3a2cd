"""
Calibration calculators.

Example usage:

    from print_calibration.calibration import (
        calculate_calibration,
        calculate_border_compensation,
    )

    scale = calculate_calibration({"ab": 98, "bc": 99, "cd": 98, "da": 99})
    padding = calculate_border_compensation({"left": 3.0, "top": 6.5})
"""

from print_calibration.calibration.border import (
    calculate_border_compensation,
    get_border_compensation_from_profile,
)
from print_calibration.calibration.constants import (
    BORDER_INSET_MM,
    BORDER_THICKNESS_MM,
    CALIBRATION_EXPECTED_DISTANCE_MM,
    MM_PER_INCH,
    PAGE_HEIGHT_INCHES,
    PAGE_HEIGHT_PX,
    PAGE_WIDTH_INCHES,
    PAGE_WIDTH_PX,
    PRINT_DPI,
    inches_to_pixels,
    mm_to_pixels,
    round_half_up,
)
from print_calibration.calibration.scale import (
    calculate_calibration,
    get_calibration_from_profile,
)

__all__ = [
    # Calculators
    "calculate_border_compensation",
    "calculate_calibration",
    "get_border_compensation_from_profile",
    "get_calibration_from_profile",
    # Constants
    "BORDER_INSET_MM",
    "BORDER_THICKNESS_MM",
    "CALIBRATION_EXPECTED_DISTANCE_MM",
    "MM_PER_INCH",
    "PAGE_HEIGHT_INCHES",
    "PAGE_HEIGHT_PX",
    "PAGE_WIDTH_INCHES",
    "PAGE_WIDTH_PX",
    "PRINT_DPI",
    # Conversions
    "inches_to_pixels",
    "mm_to_pixels",
    "round_half_up",
]
