"""
Printing-related types and enumerations.
"""

from enum import Enum


class Orientation(str, Enum):
    """Page orientation for a print job."""

    PORTRAIT = "portrait"
    LANDSCAPE = "landscape"


class PaperSource(str, Enum):
    """Paper feed selection, as stored on a print profile."""

    DEFAULT = "default"
    REAR = "rear"
    MANUAL = "manual"
    TRAY1 = "tray1"
    TRAY2 = "tray2"
    UPPER = "upper"
    LOWER = "lower"
    MIDDLE = "middle"
    ENVELOPE = "envelope"
    MANUAL_ENVELOPE = "manual_envelope"


class BorderSide(str, Enum):
    """Page edges measured on the calibration test page."""

    TOP = "top"
    RIGHT = "right"
    BOTTOM = "bottom"
    LEFT = "left"
