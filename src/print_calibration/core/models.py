"""
Core data models for the print calibration engine.

All models use Pydantic for validation and serialization.
"""

from datetime import datetime
from typing import Any, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from print_calibration.core.types import Orientation, PaperSource


class CalibrationMeasurement(BaseModel):
    """Distances (mm) measured between the four dots on a printed test page.

    A-B and C-D run horizontally, B-C and D-A vertically. A measurement is
    only usable when all four sides are present and non-zero; anything
    less is treated as "not calibrated" rather than as an error.
    """

    ab: Optional[float] = Field(default=None, ge=0.0, description="A-B distance in mm")
    bc: Optional[float] = Field(default=None, ge=0.0, description="B-C distance in mm")
    cd: Optional[float] = Field(default=None, ge=0.0, description="C-D distance in mm")
    da: Optional[float] = Field(default=None, ge=0.0, description="D-A distance in mm")

    @property
    def is_complete(self) -> bool:
        """True when every side is present and non-zero."""
        return all((self.ab, self.bc, self.cd, self.da))


class ScaleFactor(BaseModel):
    """Per-axis multipliers that pre-compensate a printer's size error."""

    model_config = ConfigDict(frozen=True)

    scale_x: float = Field(default=1.0, gt=0.0)
    scale_y: float = Field(default=1.0, gt=0.0)
    avg_scale: float = Field(default=1.0, gt=0.0)
    is_calibrated: bool = Field(default=False)

    @classmethod
    def identity(cls) -> "ScaleFactor":
        """The no-op scale used whenever calibration data is missing."""
        return cls(scale_x=1.0, scale_y=1.0, avg_scale=1.0, is_calibrated=False)

    @model_validator(mode="before")
    @classmethod
    def fill_avg_scale(cls, data: Any) -> Any:
        """Derive avg_scale from the axis scales when it is not given.

        A missing axis counts as 1.0, the same default its field uses.
        """
        if isinstance(data, dict) and "avg_scale" not in data:
            if "scale_x" in data or "scale_y" in data:
                try:
                    scale_x = float(data.get("scale_x", 1.0))
                    scale_y = float(data.get("scale_y", 1.0))
                except (TypeError, ValueError):
                    # Left for field validation to report
                    return data
                data = {**data, "avg_scale": (scale_x + scale_y) / 2}
        return data


class BorderMeasurement(BaseModel):
    """Measured white gap (mm) between each paper edge and the printed border.

    Sides are independent: a missing side contributes no compensation, and
    zero is a real reading (the printer clipped right up to the border).
    """

    top: Optional[float] = Field(default=None, ge=0.0)
    right: Optional[float] = Field(default=None, ge=0.0)
    bottom: Optional[float] = Field(default=None, ge=0.0)
    left: Optional[float] = Field(default=None, ge=0.0)

    @property
    def is_empty(self) -> bool:
        """True when no side was measured."""
        return all(v is None for v in (self.top, self.right, self.bottom, self.left))


class BorderCompensation(BaseModel):
    """Padding (px) to add on each side of a corrected image.

    The ``*_mm`` fields keep the signed compensation before clamping:
    positive means the printer clipped that edge, negative means it added
    margin there.
    """

    model_config = ConfigDict(frozen=True)

    top_px: int = Field(default=0, ge=0)
    right_px: int = Field(default=0, ge=0)
    bottom_px: int = Field(default=0, ge=0)
    left_px: int = Field(default=0, ge=0)

    top_mm: float = 0.0
    right_mm: float = 0.0
    bottom_mm: float = 0.0
    left_mm: float = 0.0

    @classmethod
    def none(cls) -> "BorderCompensation":
        return cls()

    @property
    def is_zero(self) -> bool:
        return not (self.top_px or self.right_px or self.bottom_px or self.left_px)

    def as_padding(self) -> tuple[int, int, int, int]:
        """Padding as (left, top, right, bottom), the order Pillow uses."""
        return (self.left_px, self.top_px, self.right_px, self.bottom_px)


class PrintProfile(BaseModel):
    """Stored printer settings plus its calibration readings."""

    id: Optional[int] = Field(default=None)
    name: str = Field(..., min_length=1)
    printer_name: str = Field(..., min_length=1)
    copies: int = Field(default=1, ge=1)
    paper_size: str = Field(default="letter")
    orientation: Orientation = Field(default=Orientation.LANDSCAPE)
    paper_source: PaperSource = Field(default=PaperSource.DEFAULT)
    is_default: bool = Field(default=False)

    calibration_ab: Optional[float] = Field(default=None, ge=0.0)
    calibration_bc: Optional[float] = Field(default=None, ge=0.0)
    calibration_cd: Optional[float] = Field(default=None, ge=0.0)
    calibration_da: Optional[float] = Field(default=None, ge=0.0)

    border_top: Optional[float] = Field(default=None, ge=0.0)
    border_right: Optional[float] = Field(default=None, ge=0.0)
    border_bottom: Optional[float] = Field(default=None, ge=0.0)
    border_left: Optional[float] = Field(default=None, ge=0.0)

    created_at: Optional[datetime] = Field(default=None)
    updated_at: Optional[datetime] = Field(default=None)

    @property
    def calibration_measurement(self) -> CalibrationMeasurement:
        return CalibrationMeasurement(
            ab=self.calibration_ab,
            bc=self.calibration_bc,
            cd=self.calibration_cd,
            da=self.calibration_da,
        )

    @property
    def border_measurement(self) -> Optional[BorderMeasurement]:
        """Border readings, or None if no side has been measured."""
        border = BorderMeasurement(
            top=self.border_top,
            right=self.border_right,
            bottom=self.border_bottom,
            left=self.border_left,
        )
        return None if border.is_empty else border


class CorrectionOptions(BaseModel):
    """Everything the image corrector needs besides the image itself.

    ``calibration`` takes either raw dot measurements (converted to scale
    factors on use) or precomputed scale factors. Page size is only used
    when both dimensions are given; otherwise the source image size is the
    page size.
    """

    calibration: Optional[Union[CalibrationMeasurement, ScaleFactor]] = None
    border_calibration: Optional[BorderMeasurement] = None
    page_width_inches: Optional[float] = Field(default=None, gt=0.0)
    page_height_inches: Optional[float] = Field(default=None, gt=0.0)

    @field_validator("calibration", mode="before")
    @classmethod
    def dispatch_calibration(cls, v: Any) -> Any:
        """Pick the calibration model from a plain mapping.

        Raw readings win when all four are present and non-zero. Otherwise
        precomputed factors are used, but only when both axes are given.
        Anything else means no calibration.
        """
        if isinstance(v, dict):
            readings = {key: v.get(key) for key in ("ab", "bc", "cd", "da")}
            if all(readings.values()):
                return CalibrationMeasurement.model_validate(readings)
            if v.get("scale_x") is not None and v.get("scale_y") is not None:
                return ScaleFactor.model_validate(
                    {key: v[key] for key in ("scale_x", "scale_y", "avg_scale", "is_calibrated") if key in v}
                )
            return None
        return v

    @property
    def has_page_size(self) -> bool:
        return self.page_width_inches is not None and self.page_height_inches is not None

    @classmethod
    def from_profile(
        cls,
        profile: Optional[PrintProfile],
        page_width_inches: Optional[float] = None,
        page_height_inches: Optional[float] = None,
    ) -> "CorrectionOptions":
        """Build options from a stored profile's calibration readings."""
        if profile is None:
            return cls(
                page_width_inches=page_width_inches,
                page_height_inches=page_height_inches,
            )
        return cls(
            calibration=profile.calibration_measurement,
            border_calibration=profile.border_measurement,
            page_width_inches=page_width_inches,
            page_height_inches=page_height_inches,
        )
