"""
Calibrated printing workflow.

Ties the corrector, the test page generator and a printer driver together:

- print_image: correct an image into a temp PNG and submit it.
- print_profile_image: the same, with calibration and job settings taken
  from a stored print profile.
- print_calibration_page: print the uncorrected test page users measure.
"""

import tempfile
import time
from pathlib import Path
from typing import Optional, Union

from print_calibration.config import get_settings
from print_calibration.core.logging import LogContext, get_logger
from print_calibration.core.models import CorrectionOptions, PrintProfile
from print_calibration.core.types import Orientation, PaperSource
from print_calibration.imaging.corrector import ImageCorrector
from print_calibration.imaging.test_page import CalibrationTestPageGenerator
from print_calibration.printing.cups_printer import CUPSPrinterDriver
from print_calibration.printing.protocols import (
    DeviceStatus,
    PrinterProtocol,
    PrintJob,
    PrintResult,
)

logger = get_logger(__name__)


def _temp_dir() -> Path:
    temp_dir = get_settings().printing.temp_dir
    if temp_dir is None:
        return Path(tempfile.gettempdir())
    temp_dir.mkdir(parents=True, exist_ok=True)
    return temp_dir


def _timestamp_ms() -> int:
    return int(time.time() * 1000)


def _ready_printer(
    printer: Optional[PrinterProtocol],
    printer_name: Optional[str],
) -> PrinterProtocol:
    """Return a connected printer, creating a CUPS driver if none was given."""
    if printer is None:
        printer = CUPSPrinterDriver(printer_name)
    if printer.status != DeviceStatus.CONNECTED:
        printer.connect(printer_name)
    return printer


def print_image(
    image_path: Union[str, Path],
    printer: Optional[PrinterProtocol] = None,
    *,
    printer_name: Optional[str] = None,
    options: Optional[CorrectionOptions] = None,
    copies: int = 1,
    paper_size: Optional[str] = None,
    orientation: Optional[Orientation] = None,
    paper_source: Optional[PaperSource] = None,
    cleanup: Optional[bool] = None,
    corrector: Optional[ImageCorrector] = None,
) -> PrintResult:
    """Correct an image and print it.

    The corrected PNG is written to the temp directory as
    ``<stem>-calibrated-<ms>.png``. It is removed after a successful
    submission when cleanup is enabled, and kept otherwise so a failed
    job can be inspected or retried.

    Args:
        image_path: Image to print.
        printer: Printer to use. A CUPS driver is created if None.
        printer_name: Printer to connect to when not already connected.
        options: Calibration, border and page size options.
        copies: Number of copies.
        paper_size: Paper size name. Defaults to the configured size.
        orientation: Page orientation. Defaults to the configured orientation.
        paper_source: Input tray. Defaults to the configured source.
        cleanup: Remove the temp PNG after success. Defaults to config.
        corrector: Corrector to use. A default one is created if None.

    Returns:
        PrintResult from the printer, with ``output_path`` set to the
        corrected PNG.

    Raises:
        ImageProcessingError: If the image cannot be corrected.
        PrinterError: If the printer cannot be reached or rejects the job.
    """
    settings = get_settings().printing
    image_path = Path(image_path)
    cleanup = settings.cleanup_temp_files if cleanup is None else cleanup
    corrector = corrector or ImageCorrector()

    processed_path = _temp_dir() / f"{image_path.stem}-calibrated-{_timestamp_ms()}.png"
    corrector.apply_calibration_to_png(image_path, processed_path, options)

    job = PrintJob(
        name=image_path.name,
        image_path=str(processed_path),
        paper_size=paper_size or settings.default_paper_size,
        orientation=orientation or settings.default_orientation,
        paper_source=paper_source or settings.default_paper_source,
        copies=copies,
    )

    device = _ready_printer(printer, printer_name or settings.default_printer_name)
    result = device.print_image(job)
    result = result.model_copy(update={"output_path": str(processed_path)})

    if cleanup and result.success:
        processed_path.unlink(missing_ok=True)
        logger.info("Cleaned up temporary PNG: %s", processed_path)
    elif not result.success:
        logger.warning("Print failed (%s); kept %s", result.error, processed_path)

    return result


def print_profile_image(
    image_path: Union[str, Path],
    profile: PrintProfile,
    printer: Optional[PrinterProtocol] = None,
    *,
    page_width_inches: Optional[float] = None,
    page_height_inches: Optional[float] = None,
    cleanup: Optional[bool] = None,
    corrector: Optional[ImageCorrector] = None,
) -> PrintResult:
    """Print an image with a stored profile's calibration and job settings."""
    with LogContext(printer_name=profile.printer_name, profile_id=profile.id):
        logger.info("Printing %s with profile '%s'", Path(image_path).name, profile.name)
        return print_image(
            image_path,
            printer,
            printer_name=profile.printer_name,
            options=CorrectionOptions.from_profile(
                profile,
                page_width_inches=page_width_inches,
                page_height_inches=page_height_inches,
            ),
            copies=profile.copies,
            paper_size=profile.paper_size,
            orientation=profile.orientation,
            paper_source=profile.paper_source,
            cleanup=cleanup,
            corrector=corrector,
        )


def print_calibration_page(
    printer: Optional[PrinterProtocol] = None,
    *,
    printer_name: Optional[str] = None,
    paper_size: Optional[str] = None,
    paper_source: Optional[PaperSource] = None,
) -> PrintResult:
    """Print the calibration test page without any correction.

    Always one landscape copy. The generated page is kept on disk and its
    path returned in ``output_path``.
    """
    settings = get_settings().printing

    page_path = _temp_dir() / f"calibration-test-{_timestamp_ms()}.png"
    CalibrationTestPageGenerator().save(page_path)

    job = PrintJob(
        name="Calibration Test Page",
        image_path=str(page_path),
        paper_size=paper_size or settings.default_paper_size,
        orientation=Orientation.LANDSCAPE,
        paper_source=paper_source or settings.default_paper_source,
        copies=1,
    )

    device = _ready_printer(printer, printer_name or settings.default_printer_name)
    result = device.print_image(job)
    return result.model_copy(update={"output_path": str(page_path)})
