"""
Rescue Print Calibration - printer scale and border calibration.

Pre-compensates a printer's scaling error and edge clipping so rendered
cards and flyers come out at true physical size:

- Calibration test page generation
- Scale factors from measured dot distances
- Per-side padding from measured border gaps
- Image correction to print-ready 360 DPI PNGs
- Print profiles with stored calibration readings
- CUPS printing of calibrated images
"""

__version__ = "1.0.0"

# Core models
from print_calibration.core.models import (
    BorderCompensation,
    BorderMeasurement,
    CalibrationMeasurement,
    CorrectionOptions,
    PrintProfile,
    ScaleFactor,
)
from print_calibration.core.types import BorderSide, Orientation, PaperSource

# Configuration
from print_calibration.config import Settings, configure, get_settings

# Calibration
from print_calibration.calibration import (
    calculate_border_compensation,
    calculate_calibration,
    get_border_compensation_from_profile,
    get_calibration_from_profile,
)

# Imaging
from print_calibration.imaging import (
    CalibrationTestPageGenerator,
    CorrectionResult,
    ImageCorrector,
    apply_calibration_to_png,
    generate_calibration_test_page,
)

# Profiles
from print_calibration.profiles import PrintProfileDatabase

__all__ = [
    # Version
    "__version__",
    # Core models
    "BorderCompensation",
    "BorderMeasurement",
    "CalibrationMeasurement",
    "CorrectionOptions",
    "PrintProfile",
    "ScaleFactor",
    # Types
    "BorderSide",
    "Orientation",
    "PaperSource",
    # Configuration
    "Settings",
    "configure",
    "get_settings",
    # Calibration
    "calculate_border_compensation",
    "calculate_calibration",
    "get_border_compensation_from_profile",
    "get_calibration_from_profile",
    # Imaging
    "CalibrationTestPageGenerator",
    "CorrectionResult",
    "ImageCorrector",
    "apply_calibration_to_png",
    "generate_calibration_test_page",
    # Profiles
    "PrintProfileDatabase",
]
