"""Persistent print profiles with stored calibration readings."""

from print_calibration.profiles.database import PrintProfileDatabase

__all__ = ["PrintProfileDatabase"]
