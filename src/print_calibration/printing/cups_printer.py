"""
CUPS printer driver for calibrated printing.

Calibrated PNGs go to CUPS (Linux and macOS) with page scaling switched
off and the print resolution pinned, so one image pixel lands on paper
at 1/360 inch and the calibration is not undone by fit-to-page.

Requires:
    - pycups (the ``cups`` extra), not available on Windows

Usage:
    from print_calibration.printing import CUPSPrinterDriver, PrintJob

    driver = CUPSPrinterDriver("EPSON_ET_8550")
    driver.connect()
    result = driver.print_image(PrintJob(name="Adoption card", image_path="card.png"))
"""

import platform
import re
import time
from pathlib import Path
from typing import Any

from print_calibration.config import get_settings
from print_calibration.core.exceptions import (
    PrinterError,
    PrinterNotFoundError,
    PrintJobError,
)
from print_calibration.core.logging import get_logger
from print_calibration.core.types import Orientation, PaperSource
from print_calibration.printing.protocols import (
    DeviceInfo,
    DeviceStatus,
    PrintJob,
    PrintResult,
)

logger = get_logger(__name__)

# Custom media names (e.g. "Custom.5x8in") are passed through if they match
_CUSTOM_MEDIA_RE = re.compile(r"^[a-zA-Z0-9.x]+$")


def _import_cups() -> Any:
    """Import pycups on demand."""
    if platform.system() == "Windows":
        raise ImportError("CUPS printing is not supported on Windows.")

    try:
        import cups

        return cups
    except ImportError as e:
        raise ImportError(
            "pycups is needed to print. Install with: pip install 'rescue-print-calibration[cups]'"
        ) from e


class CUPSPrinterDriver:
    """Submit print-ready PNGs to a CUPS queue at true size."""

    # Friendly paper names to CUPS media names
    PAPER_SIZE_MAP = {
        "letter": "Letter",
        "legal": "Legal",
        "tabloid": "Tabloid",
        "a4": "A4",
        "a5": "A5",
        "4x6": "4x6",
        "5x7": "5x7",
    }

    # Paper sources to CUPS InputSlot choices. DEFAULT has no entry so the
    # printer keeps its own feed.
    INPUT_SLOT_MAP = {
        PaperSource.REAR: "Manual",
        PaperSource.MANUAL: "Manual",
        PaperSource.TRAY1: "Upper",
        PaperSource.UPPER: "Upper",
        PaperSource.TRAY2: "Lower",
        PaperSource.LOWER: "Lower",
        PaperSource.MIDDLE: "Middle",
        PaperSource.ENVELOPE: "Envelope",
        PaperSource.MANUAL_ENVELOPE: "ManualEnvelope",
    }

    # IPP orientation-requested enum values
    ORIENTATION_MAP = {
        Orientation.PORTRAIT: "3",
        Orientation.LANDSCAPE: "4",
    }

    def __init__(self, printer_name: str | None = None):
        """
        Args:
            printer_name: Queue to print to. Falls back to the configured
                default printer, then to the CUPS default on connect.
        """
        self._printer_name = printer_name or get_settings().printing.default_printer_name
        self._cups_conn = None
        self._status = DeviceStatus.DISCONNECTED
        self._device_info: DeviceInfo | None = None

    @property
    def status(self) -> DeviceStatus:
        return self._status

    @property
    def device_info(self) -> DeviceInfo | None:
        """Make and model of the selected queue, None until connected."""
        return self._device_info

    @property
    def printer_name(self) -> str | None:
        return self._printer_name

    def connect(self, printer_name: str | None = None) -> bool:
        """Open a CUPS connection and select a queue.

        Args:
            printer_name: Queue to select. Uses the name given at construction,
                then the CUPS default, then the first queue CUPS reports.

        Returns:
            True once a queue is selected.

        Raises:
            PrinterNotFoundError: If the named queue does not exist.
            PrinterError: If CUPS is unreachable or has no queues.
        """
        wanted = printer_name or self._printer_name
        logger.info(f"Opening CUPS connection (printer={wanted or 'default'})")

        conn = self._open_connection()
        queues = conn.getPrinters()
        if not queues:
            raise PrinterError("CUPS reports no printers", operation="connect")

        selected = self._select_queue(conn, queues, wanted)

        self._cups_conn = conn
        self._printer_name = selected
        self._device_info = self._extract_device_info(queues[selected])
        self._status = DeviceStatus.CONNECTED

        logger.info(f"Using printer {selected} ({self._device_info.vendor} {self._device_info.model})")
        return True

    def disconnect(self) -> None:
        logger.info(f"Releasing CUPS connection for {self._printer_name}")
        self._cups_conn = None
        self._status = DeviceStatus.DISCONNECTED
        self._device_info = None

    def print_image(self, job: PrintJob) -> PrintResult:
        """Submit one PNG to the selected queue.

        A driver that is not connected, or a missing file, gives a failed
        PrintResult. Problems inside CUPS raise.

        Raises:
            PrintJobError: If the paper size is unusable or CUPS rejects the job.
        """
        if self._status != DeviceStatus.CONNECTED or self._cups_conn is None:
            return PrintResult(success=False, error="Printer not connected")

        image_path = Path(job.image_path)
        if not image_path.is_file():
            return PrintResult(success=False, error=f"Print file not found: {image_path}")

        options = self._build_print_options(job)
        logger.debug(f"CUPS options for '{job.name}': {options}")

        started = time.time()
        self._status = DeviceStatus.BUSY
        try:
            job_id = self._cups_conn.printFile(
                self._printer_name,
                str(image_path),
                job.name,
                options,
            )
        except Exception as e:
            logger.error(f"CUPS rejected '{job.name}' on {self._printer_name}: {e}")
            raise PrintJobError(
                f"CUPS rejected the job: {e}",
                job_name=job.name,
                printer_name=self._printer_name,
            ) from e
        finally:
            self._status = DeviceStatus.CONNECTED

        logger.info(f"Queued '{job.name}' as job {job_id} ({job.copies} copies)")
        return PrintResult(
            success=True,
            job_id=str(job_id),
            pages_printed=job.copies,
            duration_seconds=time.time() - started,
            output_path=str(image_path),
        )

    def get_paper_sizes(self) -> list[str]:
        """Page sizes from the queue's PPD, or the built-in names without one."""
        if self._cups_conn is not None and self._printer_name:
            try:
                sizes = self._ppd_page_sizes()
            except Exception as e:
                logger.warning(f"Could not read PPD page sizes for {self._printer_name}: {e}")
            else:
                if sizes:
                    return sizes
        return list(self.PAPER_SIZE_MAP)

    def get_printer_status(self) -> dict[str, Any]:
        """Queue state as reported by CUPS."""
        if self._cups_conn is None or not self._printer_name:
            return {"status": "disconnected"}

        try:
            attrs = self._cups_conn.getPrinterAttributes(self._printer_name)
        except Exception:
            logger.exception(f"Could not query CUPS attributes for {self._printer_name}")
            return {"status": "unknown", "error": "Printer attributes unavailable"}

        return {
            "status": attrs.get("printer-state", "unknown"),
            "state_message": attrs.get("printer-state-message", ""),
            "accepting_jobs": attrs.get("printer-is-accepting-jobs", False),
            "queued_jobs": attrs.get("queued-job-count", 0),
        }

    def _open_connection(self) -> Any:
        cups = _import_cups()
        try:
            return cups.Connection()
        except Exception as e:
            raise PrinterError(
                f"Cannot reach the CUPS server: {e}",
                operation="connect",
            ) from e

    @staticmethod
    def _select_queue(conn: Any, queues: dict, wanted: str | None) -> str:
        if wanted:
            if wanted not in queues:
                raise PrinterNotFoundError(
                    f"No CUPS printer named '{wanted}'",
                    printer_name=wanted,
                    available_printers=list(queues),
                )
            return wanted
        return conn.getDefault() or next(iter(queues))

    def _ppd_page_sizes(self) -> list[str]:
        ppd_file = self._cups_conn.getPPD(self._printer_name)
        if not ppd_file:
            return []
        option = _import_cups().PPD(ppd_file).findOption("PageSize")
        return [choice["choice"] for choice in option.choices] if option else []

    @staticmethod
    def _extract_device_info(queue: dict) -> DeviceInfo:
        """Split the make-and-model string into vendor and model."""
        make_model = queue.get("printer-make-and-model") or "Unknown Printer"
        vendor, _, model = make_model.partition(" ")

        capabilities = ["color", "grayscale"] if queue.get("color-supported") else ["grayscale"]
        return DeviceInfo(vendor=vendor, model=model or make_model, capabilities=capabilities)

    def _resolve_media(self, job: PrintJob) -> str:
        media = self.PAPER_SIZE_MAP.get(job.paper_size.lower())
        if media:
            return media
        if not _CUSTOM_MEDIA_RE.match(job.paper_size):
            raise PrintJobError(
                f"Unusable paper size: {job.paper_size!r}",
                job_name=job.name,
                printer_name=self._printer_name,
            )
        logger.warning(f"Passing custom media '{job.paper_size}' to CUPS")
        return job.paper_size

    def _build_print_options(self, job: PrintJob) -> dict[str, str]:
        """CUPS job options for a true-size print.

        Raises:
            PrintJobError: If the paper size is neither known nor a safe custom name.
        """
        options = {
            "media": self._resolve_media(job),
            "orientation-requested": self.ORIENTATION_MAP[job.orientation],
        }

        input_slot = self.INPUT_SLOT_MAP.get(job.paper_source)
        if input_slot:
            options["InputSlot"] = input_slot

        options["copies"] = str(job.copies)
        # No fit-to-page; the image already has its final pixel size
        options["ppi"] = str(job.resolution_dpi)
        options["print-scaling"] = "none"
        return options
