"""
Imaging module for calibrated print output.

Provides the image corrector that pre-compensates printer scale and edge
clipping, and the generator for the printable calibration test page.
"""

from print_calibration.imaging.corrector import (
    CorrectionResult,
    ImageCorrector,
    apply_calibration_to_png,
    write_png,
)
from print_calibration.imaging.test_page import (
    CalibrationPageLayout,
    CalibrationTestPageGenerator,
    generate_calibration_test_page,
)

__all__ = [
    # Corrector
    "CorrectionResult",
    "ImageCorrector",
    "apply_calibration_to_png",
    "write_png",
    # Test page
    "CalibrationPageLayout",
    "CalibrationTestPageGenerator",
    "generate_calibration_test_page",
]
