"""
Printing module for calibrated output.

Provides the printer protocol and job models, a CUPS driver, and the
workflow functions that correct an image before submitting it.
"""

from print_calibration.printing.cups_printer import CUPSPrinterDriver
from print_calibration.printing.protocols import (
    DeviceInfo,
    DeviceStatus,
    PrinterProtocol,
    PrintJob,
    PrintResult,
)
from print_calibration.printing.workflow import (
    print_calibration_page,
    print_image,
    print_profile_image,
)

__all__ = [
    # Protocols
    "DeviceInfo",
    "DeviceStatus",
    "PrinterProtocol",
    "PrintJob",
    "PrintResult",
    # Drivers
    "CUPSPrinterDriver",
    # Workflow
    "print_calibration_page",
    "print_image",
    "print_profile_image",
]
