"""
Printer protocols for calibrated printing.

Defines the job/result models and the printer protocol the printing
workflow talks to. Implementations can be real spooler drivers or
in-memory fakes for testing.

Usage:
    from print_calibration.printing.protocols import (
        PrinterProtocol,
        PrintJob,
        DeviceStatus,
    )

    def submit(printer: PrinterProtocol, job: PrintJob):
        if printer.status != DeviceStatus.CONNECTED:
            printer.connect()
        return printer.print_image(job)
"""

from enum import Enum
from typing import Protocol, runtime_checkable

from pydantic import BaseModel, Field

from print_calibration.calibration.constants import PRINT_DPI
from print_calibration.core.types import Orientation, PaperSource


class DeviceStatus(str, Enum):
    """Printer connection status."""

    DISCONNECTED = "disconnected"
    CONNECTED = "connected"
    ERROR = "error"
    BUSY = "busy"


class DeviceInfo(BaseModel):
    """Make, model and capabilities of the selected printer."""

    vendor: str
    model: str
    capabilities: list[str] = Field(default_factory=list)

    def __str__(self) -> str:
        return f"{self.vendor} {self.model}"


class PrintJob(BaseModel):
    """One image to print and how to feed it.

    Attributes:
        name: Title shown in the print queue.
        image_path: Path to the image file to print.
        paper_size: Paper size (e.g., "letter", "a4", "4x6").
        orientation: Page orientation.
        paper_source: Input tray to feed from.
        copies: Number of copies.
        resolution_dpi: Resolution the image was rendered at. Printing at
            this resolution with scaling disabled gives 1:1 physical size.
    """

    name: str
    image_path: str
    paper_size: str = "letter"
    orientation: Orientation = Orientation.LANDSCAPE
    paper_source: PaperSource = PaperSource.DEFAULT
    copies: int = Field(default=1, ge=1)
    resolution_dpi: int = Field(default=PRINT_DPI, ge=72, le=5760)


class PrintResult(BaseModel):
    """Outcome of submitting a job.

    Attributes:
        success: Whether the job was accepted.
        job_id: Spooler identifier for the print job.
        pages_printed: Number of pages submitted.
        error: Why the job was not accepted.
        duration_seconds: Time taken to submit.
        output_path: Image file that was sent to the printer.
    """

    success: bool
    job_id: str | None = None
    pages_printed: int = 0
    error: str | None = None
    duration_seconds: float = 0.0
    output_path: str | None = None


@runtime_checkable
class PrinterProtocol(Protocol):
    """What the printing workflow needs from a printer.

    CUPSPrinterDriver is the real implementation; tests use in-memory fakes.
    """

    @property
    def status(self) -> DeviceStatus:
        """Connection state."""
        ...

    @property
    def device_info(self) -> DeviceInfo | None:
        """Make and model, None until connected."""
        ...

    def connect(self, printer_name: str | None = None) -> bool:
        """Select a printer, the system default when no name is given."""
        ...

    def disconnect(self) -> None:
        """Release the printer."""
        ...

    def print_image(self, job: PrintJob) -> PrintResult:
        """Submit one image at its rendered size."""
        ...

    def get_paper_sizes(self) -> list[str]:
        """Paper size names the printer accepts."""
        ...
