"""
Border compensation calculator.

The test page border sits BORDER_INSET_MM from every paper edge. The user
measures the actual white gap on each side:

- measured < expected: the printer clipped that edge, so content needs
  (expected - measured) of padding on that side to stay on the paper.
- measured > expected: the printer added margin there. Content cannot be
  pulled outward without cropping, so that side gets no padding and the
  printer's own margin stands.

Only clipping printers are compensated; added margins are left as-is.
"""

from collections.abc import Mapping
from typing import Any, Optional, Union

from print_calibration.calibration.constants import BORDER_INSET_MM, mm_to_pixels
from print_calibration.core.logging import get_logger
from print_calibration.core.models import BorderCompensation, BorderMeasurement, PrintProfile
from print_calibration.core.types import BorderSide

logger = get_logger(__name__)

BorderInput = Union[BorderMeasurement, Mapping[str, Any], None]


def _side_compensation_mm(measured: Optional[float], expected_inset_mm: float) -> float:
    # Zero is a valid reading; only a missing side is skipped
    if measured is None:
        return 0.0
    return expected_inset_mm - measured


def calculate_border_compensation(
    border_measurement: BorderInput,
    expected_inset_mm: float = BORDER_INSET_MM,
) -> BorderCompensation:
    """Convert measured border gaps into per-side pixel padding.

    Args:
        border_measurement: Measured gaps in mm (any side may be missing).
        expected_inset_mm: Gap the test page was drawn with.

    Returns:
        BorderCompensation with every ``*_px`` value >= 0.
    """
    if border_measurement is None:
        return BorderCompensation.none()
    if isinstance(border_measurement, Mapping):
        border_measurement = BorderMeasurement.model_validate(dict(border_measurement))

    compensation_mm = {
        side: _side_compensation_mm(getattr(border_measurement, side.value), expected_inset_mm)
        for side in BorderSide
    }
    signed_px = {side: mm_to_pixels(mm) for side, mm in compensation_mm.items()}

    result = BorderCompensation(
        **{f"{side.value}_px": max(0, px) for side, px in signed_px.items()},
        **{f"{side.value}_mm": mm for side, mm in compensation_mm.items()},
    )

    logger.debug(
        "Border compensation (expected inset %.2fmm): mm=%s px=%s padding=%s",
        expected_inset_mm,
        {side.value: round(mm, 3) for side, mm in compensation_mm.items()},
        {side.value: px for side, px in signed_px.items()},
        result.as_padding(),
    )
    return result


def get_border_compensation_from_profile(
    profile: Optional[PrintProfile],
    expected_inset_mm: float = BORDER_INSET_MM,
) -> BorderCompensation:
    """Padding for the border readings stored on a print profile."""
    if profile is None:
        return BorderCompensation.none()
    return calculate_border_compensation(profile.border_measurement, expected_inset_mm)
