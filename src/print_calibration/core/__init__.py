"""Core models, types, errors and logging for the print calibration engine."""

from print_calibration.core.exceptions import (
    ImageDecodeError,
    ImageEncodeError,
    ImageProcessingError,
    PrintCalibrationError,
    PrinterError,
    PrinterNotFoundError,
    PrintJobError,
    ProfileError,
    ProfileNotFoundError,
)
from print_calibration.core.models import (
    BorderCompensation,
    BorderMeasurement,
    CalibrationMeasurement,
    CorrectionOptions,
    PrintProfile,
    ScaleFactor,
)
from print_calibration.core.types import BorderSide, Orientation, PaperSource

__all__ = [
    # Models
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
    # Errors
    "ImageDecodeError",
    "ImageEncodeError",
    "ImageProcessingError",
    "PrintCalibrationError",
    "PrinterError",
    "PrinterNotFoundError",
    "PrintJobError",
    "ProfileError",
    "ProfileNotFoundError",
]
