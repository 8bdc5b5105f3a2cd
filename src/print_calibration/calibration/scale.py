"""
Measurement-to-scale calculator.

Turns the four dot distances a user measures on the printed test page into
horizontal and vertical scale factors. A printer that prints the 100mm
square at 98mm needs the image enlarged by 100/98; one that prints it at
102mm needs it shrunk by 100/102.
"""

from collections.abc import Mapping
from typing import Any, Optional, Union

from print_calibration.calibration.constants import CALIBRATION_EXPECTED_DISTANCE_MM
from print_calibration.core.logging import get_logger
from print_calibration.core.models import CalibrationMeasurement, PrintProfile, ScaleFactor

logger = get_logger(__name__)

MeasurementInput = Union[CalibrationMeasurement, Mapping[str, Any], None]


def calculate_calibration(measurement: MeasurementInput) -> ScaleFactor:
    """Compute scale factors from measured dot distances.

    Args:
        measurement: Measured A-B, B-C, C-D, D-A distances in mm, as a
            CalibrationMeasurement or a plain mapping with those keys.

    Returns:
        ScaleFactor. Missing, partial, or zero measurements yield the
        identity scale with ``is_calibrated=False``.
    """
    if measurement is None:
        return ScaleFactor.identity()
    if isinstance(measurement, Mapping):
        measurement = CalibrationMeasurement.model_validate(dict(measurement))
    if not measurement.is_complete:
        return ScaleFactor.identity()

    expected = CALIBRATION_EXPECTED_DISTANCE_MM

    # A-B and C-D are horizontal, B-C and D-A vertical
    horizontal_avg = (measurement.ab + measurement.cd) / 2
    vertical_avg = (measurement.bc + measurement.da) / 2

    scale_x = expected / horizontal_avg
    scale_y = expected / vertical_avg
    avg_scale = (scale_x + scale_y) / 2

    logger.debug(
        "Calibration calculated: horizontal avg %.3fmm -> scale_x %.4f, "
        "vertical avg %.3fmm -> scale_y %.4f, average %.4f",
        horizontal_avg,
        scale_x,
        vertical_avg,
        scale_y,
        avg_scale,
    )

    return ScaleFactor(
        scale_x=scale_x,
        scale_y=scale_y,
        avg_scale=avg_scale,
        is_calibrated=True,
    )


def get_calibration_from_profile(profile: Optional[PrintProfile]) -> ScaleFactor:
    """Scale factors for the readings stored on a print profile."""
    if profile is None:
        return ScaleFactor.identity()
    return calculate_calibration(profile.calibration_measurement)
