"""
Exceptions for the print calibration engine.

Provides a hierarchy of exceptions:
- PrintCalibrationError (base)
  - ImageProcessingError
    - ImageDecodeError
    - ImageEncodeError
  - ProfileError
    - ProfileNotFoundError
  - PrinterError
    - PrinterNotFoundError
    - PrintJobError

All exceptions include context about the operation that failed.
"""

from pathlib import Path
from typing import Any


class PrintCalibrationError(Exception):
    """Base exception for calibration and printing errors.

    Attributes:
        operation: Operation that failed.
        details: Additional error details.
    """

    def __init__(
        self,
        message: str,
        operation: str | None = None,
        details: dict[str, Any] | None = None,
    ):
        """Initialize the error.

        Args:
            message: Human-readable error message.
            operation: Operation that was being performed.
            details: Additional context as key-value pairs.
        """
        super().__init__(message)
        self.operation = operation
        self.details = details or {}

    def __str__(self) -> str:
        parts = [super().__str__()]
        if self.operation:
            parts.append(f"Operation: {self.operation}")
        if self.details:
            details_str = ", ".join(f"{k}={v}" for k, v in self.details.items())
            parts.append(f"Details: {details_str}")
        return " | ".join(parts)


class ImageProcessingError(PrintCalibrationError):
    """Image could not be read or written.

    The failing file path (when there is one) is kept on ``path`` and in
    the details so callers can report which file broke.
    """

    def __init__(
        self,
        message: str = "Image processing failed",
        path: str | Path | None = None,
        **kwargs: Any,
    ):
        details = kwargs.pop("details", {})
        if path is not None:
            details["path"] = str(path)
        super().__init__(message, details=details, **kwargs)
        self.path = Path(path) if path is not None else None


class ImageDecodeError(ImageProcessingError):
    """Source image missing, unreadable, or not a decodable raster."""

    def __init__(
        self,
        message: str = "Failed to decode image",
        path: str | Path | None = None,
        **kwargs: Any,
    ):
        kwargs.setdefault("operation", "decode")
        super().__init__(message, path=path, **kwargs)


class ImageEncodeError(ImageProcessingError):
    """Corrected image could not be encoded or written."""

    def __init__(
        self,
        message: str = "Failed to encode image",
        path: str | Path | None = None,
        **kwargs: Any,
    ):
        kwargs.setdefault("operation", "encode")
        super().__init__(message, path=path, **kwargs)


class ProfileError(PrintCalibrationError):
    """Print profile storage error."""


class ProfileNotFoundError(ProfileError):
    """Requested print profile does not exist."""

    def __init__(
        self,
        message: str = "Profile not found",
        profile_id: int | None = None,
        **kwargs: Any,
    ):
        details = kwargs.pop("details", {})
        if profile_id is not None:
            details["profile_id"] = profile_id
        super().__init__(
            message,
            operation="find_profile",
            details=details,
            **kwargs,
        )
        self.profile_id = profile_id


class PrinterError(PrintCalibrationError):
    """Printer operation error.

    Base class for printer-related errors.
    """

    def __init__(
        self,
        message: str = "Printer error",
        printer_name: str | None = None,
        **kwargs: Any,
    ):
        details = kwargs.pop("details", {})
        if printer_name:
            details["printer_name"] = printer_name
        super().__init__(message, details=details, **kwargs)
        self.printer_name = printer_name


class PrinterNotFoundError(PrinterError):
    """Specified printer not found.

    Raised when the requested printer name does not exist in the system.
    """

    def __init__(
        self,
        message: str = "Printer not found",
        printer_name: str | None = None,
        available_printers: list[str] | None = None,
        **kwargs: Any,
    ):
        details = kwargs.pop("details", {})
        if available_printers:
            details["available_printers"] = available_printers[:5]  # Limit to 5
        super().__init__(
            message,
            printer_name=printer_name,
            operation="find_printer",
            details=details,
            **kwargs,
        )


class PrintJobError(PrinterError):
    """Print job submission failed."""

    def __init__(
        self,
        message: str = "Print job failed",
        job_name: str | None = None,
        **kwargs: Any,
    ):
        details = kwargs.pop("details", {})
        if job_name:
            details["job_name"] = job_name
        kwargs.setdefault("operation", "print")
        super().__init__(message, details=details, **kwargs)
        self.job_name = job_name
