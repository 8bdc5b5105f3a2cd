"""
Tests for core data models.
"""

import pytest
from pydantic import ValidationError

from print_calibration.core.models import (
    BorderCompensation,
    BorderMeasurement,
    CalibrationMeasurement,
    CorrectionOptions,
    PrintProfile,
    ScaleFactor,
)
from print_calibration.core.types import Orientation, PaperSource


class TestCalibrationMeasurement:
    """Tests for CalibrationMeasurement."""

    def test_complete(self):
        """All four non-zero sides should be complete."""
        assert CalibrationMeasurement(ab=98, bc=99, cd=98, da=99).is_complete

    def test_zero_side_is_incomplete(self):
        """A zero reading should count as missing."""
        assert not CalibrationMeasurement(ab=98, bc=0, cd=98, da=99).is_complete

    def test_empty_is_incomplete(self):
        """No readings should be incomplete."""
        assert not CalibrationMeasurement().is_complete


class TestScaleFactor:
    """Tests for ScaleFactor."""

    def test_identity(self):
        """Identity should be unit scale and not calibrated."""
        identity = ScaleFactor.identity()

        assert identity.scale_x == identity.scale_y == identity.avg_scale == 1.0
        assert identity.is_calibrated is False

    def test_avg_scale_filled_in(self):
        """avg_scale should default to the mean of the axis scales."""
        scale = ScaleFactor(scale_x=1.1, scale_y=0.9)

        assert scale.avg_scale == pytest.approx(1.0)

    def test_avg_scale_with_one_axis(self):
        """A missing axis should count as 1.0 in avg_scale."""
        scale = ScaleFactor(scale_x=1.1)

        assert scale.scale_y == 1.0
        assert scale.avg_scale == pytest.approx(1.05)

    def test_frozen(self):
        """ScaleFactor should be immutable."""
        scale = ScaleFactor.identity()

        with pytest.raises(ValidationError):
            scale.scale_x = 2.0

    def test_non_positive_rejected(self):
        """Zero scale makes no sense."""
        with pytest.raises(ValidationError):
            ScaleFactor(scale_x=0.0, scale_y=1.0)


class TestBorderModels:
    """Tests for BorderMeasurement and BorderCompensation."""

    def test_measurement_is_empty(self):
        """No sides measured should be empty; a zero side is not."""
        assert BorderMeasurement().is_empty
        assert not BorderMeasurement(left=0.0).is_empty

    def test_compensation_padding_order(self):
        """as_padding should be (left, top, right, bottom)."""
        comp = BorderCompensation(top_px=1, right_px=2, bottom_px=3, left_px=4)

        assert comp.as_padding() == (4, 1, 2, 3)
        assert not comp.is_zero

    def test_compensation_rejects_negative_pixels(self):
        """Padding cannot be negative."""
        with pytest.raises(ValidationError):
            BorderCompensation(left_px=-1)


class TestPrintProfile:
    """Tests for PrintProfile."""

    def test_defaults(self):
        """Defaults should match a single landscape Letter copy."""
        profile = PrintProfile(name="Default", printer_name="Office")

        assert profile.copies == 1
        assert profile.paper_size == "letter"
        assert profile.orientation == Orientation.LANDSCAPE
        assert profile.paper_source == PaperSource.DEFAULT
        assert profile.is_default is False

    def test_requires_name_and_printer(self):
        """Empty names are rejected."""
        with pytest.raises(ValidationError):
            PrintProfile(name="", printer_name="Office")

    def test_copies_at_least_one(self):
        """Zero copies is invalid."""
        with pytest.raises(ValidationError):
            PrintProfile(name="Cards", printer_name="Office", copies=0)

    def test_calibration_measurement(self, sample_profile):
        """Stored dot readings should be exposed as a measurement."""
        measurement = sample_profile.calibration_measurement

        assert measurement == CalibrationMeasurement(ab=98, bc=99, cd=98, da=99)

    def test_border_measurement_none_when_unset(self):
        """No border readings should give None."""
        profile = PrintProfile(name="Cards", printer_name="Office")

        assert profile.border_measurement is None

    def test_border_measurement_keeps_zero(self):
        """A zero border reading should be kept."""
        profile = PrintProfile(name="Cards", printer_name="Office", border_top=0.0)

        assert profile.border_measurement == BorderMeasurement(top=0.0)


class TestCorrectionOptions:
    """Tests for CorrectionOptions."""

    def test_measurement_dict_dispatch(self):
        """Dicts with dot keys should become measurements."""
        options = CorrectionOptions(calibration={"ab": 98, "bc": 99, "cd": 98, "da": 99})

        assert isinstance(options.calibration, CalibrationMeasurement)

    def test_scale_dict_dispatch(self):
        """Dicts with scale keys should become scale factors."""
        options = CorrectionOptions(calibration={"scale_x": 1.02, "scale_y": 1.01})

        assert isinstance(options.calibration, ScaleFactor)
        assert options.calibration.avg_scale == pytest.approx(1.015)

    def test_complete_readings_win_over_scale_keys(self):
        """Four usable readings should be used even when scale keys are present."""
        options = CorrectionOptions(
            calibration={"ab": 98, "bc": 98, "cd": 98, "da": 98, "scale_x": 1.1, "scale_y": 1.1}
        )

        assert isinstance(options.calibration, CalibrationMeasurement)
        assert options.calibration.ab == 98

    def test_partial_readings_fall_back_to_scale(self):
        """Incomplete readings should fall back to precomputed scale factors."""
        options = CorrectionOptions(calibration={"ab": 98, "scale_x": 1.1, "scale_y": 1.1})

        assert isinstance(options.calibration, ScaleFactor)
        assert options.calibration.scale_x == pytest.approx(1.1)
        assert options.calibration.scale_y == pytest.approx(1.1)

    def test_zero_reading_falls_back_to_scale(self):
        """A zero reading should not count as a usable measurement."""
        options = CorrectionOptions(
            calibration={"ab": 98, "bc": 0, "cd": 98, "da": 98, "scale_x": 1.05, "scale_y": 1.02}
        )

        assert isinstance(options.calibration, ScaleFactor)

    def test_single_scale_axis_is_none(self):
        """Scale factors need both axes."""
        assert CorrectionOptions(calibration={"scale_x": 1.1}).calibration is None
        assert CorrectionOptions(calibration={"ab": 98, "scale_y": 1.1}).calibration is None

    def test_unknown_dict_is_none(self):
        """Dicts with neither shape should mean no calibration."""
        assert CorrectionOptions(calibration={"foo": 1}).calibration is None

    def test_has_page_size(self):
        """Page size should need both dimensions."""
        assert CorrectionOptions(page_width_inches=11, page_height_inches=8.5).has_page_size
        assert not CorrectionOptions(page_width_inches=11).has_page_size
        assert not CorrectionOptions().has_page_size

    def test_from_profile(self, sample_profile):
        """Options should carry the profile's readings and the page size."""
        options = CorrectionOptions.from_profile(sample_profile, 11, 8.5)

        assert options.calibration == sample_profile.calibration_measurement
        assert options.border_calibration == sample_profile.border_measurement
        assert options.page_width_inches == 11
        assert options.page_height_inches == 8.5

    def test_from_no_profile(self):
        """No profile should give uncalibrated options."""
        options = CorrectionOptions.from_profile(None)

        assert options.calibration is None
        assert options.border_calibration is None
