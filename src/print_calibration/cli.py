"""
Command line interface for the print calibration engine.

Exposed as the ``print-calibration`` command:

    print-calibration test-page calibration.png
    print-calibration compute --ab 98 --bc 99 --cd 98 --da 99 --left 3
    print-calibration correct card.png card-print.png --profile-id 1
    print-calibration profiles calibrate 1 --ab 98 --bc 99 --cd 98 --da 99
    print-calibration print card.png --profile-id 1
"""

import argparse
import json
import sys
from pathlib import Path
from typing import Optional

from pydantic import ValidationError

from print_calibration import __version__
from print_calibration.calibration import (
    calculate_border_compensation,
    calculate_calibration,
)
from print_calibration.config import get_settings
from print_calibration.core.exceptions import PrintCalibrationError, ProfileNotFoundError
from print_calibration.core.logging import setup_logging
from print_calibration.core.models import (
    BorderMeasurement,
    CalibrationMeasurement,
    CorrectionOptions,
    PrintProfile,
)
from print_calibration.core.types import Orientation, PaperSource
from print_calibration.imaging import ImageCorrector, generate_calibration_test_page
from print_calibration.printing import (
    print_calibration_page,
    print_image,
    print_profile_image,
)
from print_calibration.profiles import PrintProfileDatabase

DOT_SIDES = ("ab", "bc", "cd", "da")
BORDER_SIDES = ("top", "right", "bottom", "left")


def _add_measurement_args(parser: argparse.ArgumentParser) -> None:
    group = parser.add_argument_group("dot distances (mm)")
    for side in DOT_SIDES:
        group.add_argument(f"--{side}", type=float, help=f"Measured {side.upper()} distance")

    group = parser.add_argument_group("border gaps (mm)")
    for side in BORDER_SIDES:
        group.add_argument(f"--{side}", type=float, help=f"Measured {side} border gap")


def _measurement_from_args(args: argparse.Namespace) -> Optional[CalibrationMeasurement]:
    values = {side: getattr(args, side) for side in DOT_SIDES}
    if all(v is None for v in values.values()):
        return None
    return CalibrationMeasurement(**values)


def _border_from_args(args: argparse.Namespace) -> Optional[BorderMeasurement]:
    border = BorderMeasurement(**{side: getattr(args, side) for side in BORDER_SIDES})
    return None if border.is_empty else border


def _load_profile(args: argparse.Namespace) -> PrintProfile:
    with PrintProfileDatabase(args.db) as db:
        profile = db.get_profile(args.profile_id)
    if profile is None:
        raise ProfileNotFoundError(profile_id=args.profile_id)
    return profile


def _validation_summary(error: ValidationError) -> str:
    return "; ".join(
        f"{'.'.join(str(part) for part in err['loc']) or 'input'}: {err['msg']}"
        for err in error.errors()
    )


def _print_json(data: object) -> None:
    print(json.dumps(data, indent=2, default=str))


# Commands


def cmd_test_page(args: argparse.Namespace) -> int:
    path = generate_calibration_test_page(args.output)
    print(path)
    return 0


def cmd_compute(args: argparse.Namespace) -> int:
    inset = args.inset if args.inset is not None else get_settings().calibration.expected_border_inset_mm
    scale = calculate_calibration(_measurement_from_args(args))
    padding = calculate_border_compensation(_border_from_args(args), expected_inset_mm=inset)
    _print_json({"scale": scale.model_dump(), "padding": padding.model_dump()})
    return 0


def cmd_correct(args: argparse.Namespace) -> int:
    if args.profile_id is not None:
        options = CorrectionOptions.from_profile(
            _load_profile(args),
            page_width_inches=args.page_width,
            page_height_inches=args.page_height,
        )
    else:
        options = CorrectionOptions(
            calibration=_measurement_from_args(args),
            border_calibration=_border_from_args(args),
            page_width_inches=args.page_width,
            page_height_inches=args.page_height,
        )

    corrector = ImageCorrector()
    result = corrector.correct(args.input, options)
    path = corrector.export(result, args.output)
    _print_json({"output": str(path), **result.get_info()})
    return 0


def cmd_profiles_list(args: argparse.Namespace) -> int:
    with PrintProfileDatabase(args.db) as db:
        profiles = (
            db.list_profiles_for_printer(args.printer) if args.printer else db.list_profiles()
        )

    if not profiles:
        print("No print profiles found.")
        return 0

    for profile in profiles:
        marker = "*" if profile.is_default else " "
        calibrated = "calibrated" if profile.calibration_measurement.is_complete else "uncalibrated"
        print(f"{marker} {profile.id:>4}  {profile.printer_name}  {profile.name}  ({calibrated})")
    return 0


def cmd_profiles_show(args: argparse.Namespace) -> int:
    print(_load_profile(args).model_dump_json(indent=2))
    return 0


def cmd_profiles_create(args: argparse.Namespace) -> int:
    profile = PrintProfile(
        name=args.name,
        printer_name=args.printer_name,
        copies=args.copies,
        paper_size=args.paper_size,
        orientation=args.orientation,
        paper_source=args.paper_source,
        is_default=args.default,
    )
    with PrintProfileDatabase(args.db) as db:
        created = db.create_profile(profile)
    print(created.model_dump_json(indent=2))
    return 0


def cmd_profiles_calibrate(args: argparse.Namespace) -> int:
    measurement = _measurement_from_args(args)
    border = _border_from_args(args)
    if measurement is None and border is None:
        print("Error: no measurements given", file=sys.stderr)
        return 2

    with PrintProfileDatabase(args.db) as db:
        profile = db.save_calibration(args.profile_id, measurement=measurement, border=border)

    scale = calculate_calibration(profile.calibration_measurement)
    _print_json({"profile_id": profile.id, "scale": scale.model_dump()})
    return 0


def cmd_profiles_default(args: argparse.Namespace) -> int:
    with PrintProfileDatabase(args.db) as db:
        profile = db.set_default_profile(args.profile_id)
    print(f"Profile {profile.id} is now the default for {profile.printer_name}")
    return 0


def cmd_profiles_delete(args: argparse.Namespace) -> int:
    with PrintProfileDatabase(args.db) as db:
        deleted = db.delete_profile(args.profile_id)
    if not deleted:
        raise ProfileNotFoundError(profile_id=args.profile_id)
    print(f"Deleted profile {args.profile_id}")
    return 0


def cmd_print(args: argparse.Namespace) -> int:
    if args.profile_id is not None:
        profile = _load_profile(args)
        overrides = {}
        if args.printer:
            overrides["printer_name"] = args.printer
        if args.copies is not None:
            overrides["copies"] = args.copies
        if overrides:
            profile = PrintProfile.model_validate({**profile.model_dump(), **overrides})
        result = print_profile_image(
            args.input,
            profile,
            page_width_inches=args.page_width,
            page_height_inches=args.page_height,
        )
    else:
        result = print_image(
            args.input,
            printer_name=args.printer,
            options=CorrectionOptions(
                page_width_inches=args.page_width,
                page_height_inches=args.page_height,
            ),
            copies=args.copies if args.copies is not None else 1,
        )
    _print_json(result.model_dump())
    return 0 if result.success else 1


def cmd_print_test_page(args: argparse.Namespace) -> int:
    result = print_calibration_page(printer_name=args.printer)
    _print_json(result.model_dump())
    return 0 if result.success else 1


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="print-calibration",
        description="Printer scale and border calibration for card and flyer printing",
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    parser.add_argument("--db", type=Path, default=None, help="Print profile database path")
    parser.add_argument("--log-level", default=None, help="Log level (DEBUG, INFO, ...)")
    parser.add_argument("--json-logs", action="store_true", help="Log as JSON lines")

    sub = parser.add_subparsers(dest="command", required=True)

    p = sub.add_parser("test-page", help="Write the calibration test page PNG")
    p.add_argument("output", type=Path)
    p.set_defaults(func=cmd_test_page)

    p = sub.add_parser("compute", help="Show scale factors and padding for measurements")
    _add_measurement_args(p)
    p.add_argument("--inset", type=float, default=None, help="Expected border gap (mm)")
    p.set_defaults(func=cmd_compute)

    p = sub.add_parser("correct", help="Write a calibrated copy of an image")
    p.add_argument("input", type=Path)
    p.add_argument("output", type=Path)
    _add_measurement_args(p)
    p.add_argument("--page-width", type=float, default=None, help="Page width (inches)")
    p.add_argument("--page-height", type=float, default=None, help="Page height (inches)")
    p.add_argument("--profile-id", type=int, default=None, help="Use a stored profile")
    p.set_defaults(func=cmd_correct)

    profiles = sub.add_parser("profiles", help="Manage print profiles")
    profile_sub = profiles.add_subparsers(dest="profiles_command", required=True)

    p = profile_sub.add_parser("list", help="List profiles")
    p.add_argument("--printer", default=None, help="Only this printer")
    p.set_defaults(func=cmd_profiles_list)

    p = profile_sub.add_parser("show", help="Show one profile")
    p.add_argument("profile_id", type=int)
    p.set_defaults(func=cmd_profiles_show)

    p = profile_sub.add_parser("create", help="Create a profile")
    p.add_argument("name")
    p.add_argument("printer_name")
    p.add_argument("--copies", type=int, default=1)
    p.add_argument("--paper-size", default="letter")
    p.add_argument(
        "--orientation",
        choices=[o.value for o in Orientation],
        default=Orientation.LANDSCAPE.value,
    )
    p.add_argument(
        "--paper-source",
        choices=[s.value for s in PaperSource],
        default=PaperSource.DEFAULT.value,
    )
    p.add_argument("--default", action="store_true", help="Make it the printer's default")
    p.set_defaults(func=cmd_profiles_create)

    p = profile_sub.add_parser("calibrate", help="Store test page measurements")
    p.add_argument("profile_id", type=int)
    _add_measurement_args(p)
    p.set_defaults(func=cmd_profiles_calibrate)

    p = profile_sub.add_parser("set-default", help="Make a profile its printer's default")
    p.add_argument("profile_id", type=int)
    p.set_defaults(func=cmd_profiles_default)

    p = profile_sub.add_parser("delete", help="Delete a profile")
    p.add_argument("profile_id", type=int)
    p.set_defaults(func=cmd_profiles_delete)

    p = sub.add_parser("print", help="Correct and print an image (CUPS)")
    p.add_argument("input", type=Path)
    p.add_argument("--printer", default=None, help="Printer (overrides the profile's)")
    p.add_argument("--profile-id", type=int, default=None)
    p.add_argument("--copies", type=int, default=None, help="Copies (overrides the profile's, default 1)")
    p.add_argument("--page-width", type=float, default=None)
    p.add_argument("--page-height", type=float, default=None)
    p.set_defaults(func=cmd_print)

    p = sub.add_parser("print-test-page", help="Print the calibration test page (CUPS)")
    p.add_argument("--printer", default=None)
    p.set_defaults(func=cmd_print_test_page)

    return parser


def main(argv: Optional[list[str]] = None) -> int:
    """
    Main entry point.

    This function is exposed as the 'print-calibration' command.
    """
    parser = build_parser()
    args = parser.parse_args(argv)

    setup_logging(level=args.log_level, json_format=args.json_logs)

    try:
        return args.func(args)
    except PrintCalibrationError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1
    except ValidationError as e:
        print(f"Error: invalid input: {_validation_summary(e)}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())
