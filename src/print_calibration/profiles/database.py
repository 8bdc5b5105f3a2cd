"""
Print profile database.

Stores per-printer print settings together with the calibration readings
taken from that printer's test page. Each printer may have one default
profile; marking a profile as default clears the flag on the others for
the same printer.
"""

import sqlite3
from datetime import datetime
from pathlib import Path
from typing import Any, Optional, Union

from print_calibration.config import get_settings
from print_calibration.core.exceptions import ProfileNotFoundError
from print_calibration.core.logging import get_logger
from print_calibration.core.models import (
    BorderMeasurement,
    CalibrationMeasurement,
    PrintProfile,
)

logger = get_logger(__name__)

# Columns written on insert/update, in table order
PROFILE_COLUMNS = (
    "name",
    "printer_name",
    "copies",
    "paper_size",
    "orientation",
    "paper_source",
    "is_default",
    "calibration_ab",
    "calibration_bc",
    "calibration_cd",
    "calibration_da",
    "border_top",
    "border_right",
    "border_bottom",
    "border_left",
)


class PrintProfileDatabase:
    """SQLite-based print profile store."""

    def __init__(self, db_path: Optional[Union[str, Path]] = None) -> None:
        """
        Initialize the print profile database.

        Args:
            db_path: Path to SQLite database file, or ":memory:". If None,
                uses the configured database path.
        """
        if db_path is None:
            db_path = get_settings().get_database_path()
        self.db_path = db_path if db_path == ":memory:" else Path(db_path)
        self.conn: Optional[sqlite3.Connection] = None
        self._initialize_db()

    def _initialize_db(self) -> None:
        """Create database schema if it doesn't exist."""
        if isinstance(self.db_path, Path):
            self.db_path.parent.mkdir(parents=True, exist_ok=True)
        self.conn = sqlite3.connect(str(self.db_path))
        self.conn.row_factory = sqlite3.Row

        self.conn.execute(
            """
            CREATE TABLE IF NOT EXISTS print_profiles (
                id INTEGER PRIMARY KEY AUTOINCREMENT,
                name TEXT NOT NULL,
                printer_name TEXT NOT NULL,
                copies INTEGER DEFAULT 1,
                paper_size TEXT DEFAULT 'letter',
                orientation TEXT DEFAULT 'landscape',
                paper_source TEXT DEFAULT 'default',
                is_default INTEGER DEFAULT 0,

                -- Dot distances (mm)
                calibration_ab REAL,
                calibration_bc REAL,
                calibration_cd REAL,
                calibration_da REAL,

                -- Border gaps (mm)
                border_top REAL,
                border_right REAL,
                border_bottom REAL,
                border_left REAL,

                created_at TEXT NOT NULL,
                updated_at TEXT NOT NULL
            )
            """
        )
        self.conn.execute(
            "CREATE INDEX IF NOT EXISTS idx_print_profiles_printer "
            "ON print_profiles(printer_name)"
        )
        self.conn.commit()

    # Queries

    def get_profile(self, profile_id: int) -> Optional[PrintProfile]:
        """Get a profile by ID."""
        cursor = self.conn.execute(
            "SELECT * FROM print_profiles WHERE id = ?",
            (profile_id,),
        )
        row = cursor.fetchone()

        if row is None:
            return None

        return self._row_to_profile(row)

    def list_profiles(self) -> list[PrintProfile]:
        """All profiles, ordered by printer then name."""
        cursor = self.conn.execute(
            "SELECT * FROM print_profiles ORDER BY printer_name, name"
        )
        return [self._row_to_profile(row) for row in cursor.fetchall()]

    def list_profiles_for_printer(self, printer_name: str) -> list[PrintProfile]:
        """Profiles for one printer, the default first."""
        cursor = self.conn.execute(
            """
            SELECT * FROM print_profiles
            WHERE printer_name = ?
            ORDER BY is_default DESC, name
            """,
            (printer_name,),
        )
        return [self._row_to_profile(row) for row in cursor.fetchall()]

    def get_default_profile(self, printer_name: str) -> Optional[PrintProfile]:
        """The default profile for a printer, if one is set."""
        cursor = self.conn.execute(
            "SELECT * FROM print_profiles WHERE printer_name = ? AND is_default = 1",
            (printer_name,),
        )
        row = cursor.fetchone()
        return self._row_to_profile(row) if row is not None else None

    # Mutations

    def create_profile(self, profile: PrintProfile) -> PrintProfile:
        """
        Insert a new profile.

        Args:
            profile: Profile to store. Its ``id`` is ignored.

        Returns:
            The stored profile with ``id`` and timestamps filled in.
        """
        if profile.is_default:
            self._clear_defaults(profile.printer_name)

        now = datetime.now().isoformat()
        values = self._profile_values(profile)

        cursor = self.conn.execute(
            f"""
            INSERT INTO print_profiles ({", ".join(PROFILE_COLUMNS)}, created_at, updated_at)
            VALUES ({", ".join("?" for _ in PROFILE_COLUMNS)}, ?, ?)
            """,
            (*values, now, now),
        )
        self.conn.commit()

        logger.info(
            "Created print profile %s (%s) for printer %s",
            cursor.lastrowid,
            profile.name,
            profile.printer_name,
        )
        return self.get_profile(cursor.lastrowid)

    def update_profile(
        self,
        profile_id: int,
        updates: Union[PrintProfile, dict[str, Any]],
    ) -> bool:
        """
        Update a print profile.

        Args:
            profile_id: Profile to update.
            updates: A full replacement profile, or a dict of fields to change.

        Returns:
            False if the profile does not exist.
        """
        existing = self.get_profile(profile_id)
        if existing is None:
            return False

        if isinstance(updates, PrintProfile):
            fields = updates.model_dump(include=set(PROFILE_COLUMNS))
        else:
            fields = {k: v for k, v in updates.items() if k in PROFILE_COLUMNS}
        merged = PrintProfile.model_validate({**existing.model_dump(), **fields})

        if merged.is_default:
            self._clear_defaults(merged.printer_name, exclude_id=profile_id)

        set_sql = ", ".join(f"{column} = ?" for column in PROFILE_COLUMNS)
        self.conn.execute(
            f"UPDATE print_profiles SET {set_sql}, updated_at = ? WHERE id = ?",
            (*self._profile_values(merged), datetime.now().isoformat(), profile_id),
        )
        self.conn.commit()

        return True

    def delete_profile(self, profile_id: int) -> bool:
        """Delete a profile. Returns False if it did not exist."""
        cursor = self.conn.execute(
            "DELETE FROM print_profiles WHERE id = ?",
            (profile_id,),
        )
        self.conn.commit()

        deleted = cursor.rowcount > 0
        if deleted:
            logger.info("Deleted print profile %s", profile_id)
        return deleted

    def set_default_profile(self, profile_id: int) -> PrintProfile:
        """
        Make a profile the default for its printer.

        Raises:
            ProfileNotFoundError: If the profile does not exist.
        """
        profile = self.get_profile(profile_id)
        if profile is None:
            raise ProfileNotFoundError(profile_id=profile_id)

        self._clear_defaults(profile.printer_name)
        self.conn.execute(
            "UPDATE print_profiles SET is_default = 1, updated_at = ? WHERE id = ?",
            (datetime.now().isoformat(), profile_id),
        )
        self.conn.commit()

        return self.get_profile(profile_id)

    def save_calibration(
        self,
        profile_id: int,
        measurement: Optional[CalibrationMeasurement] = None,
        border: Optional[BorderMeasurement] = None,
    ) -> PrintProfile:
        """
        Store new test page readings on a profile.

        Only the readings passed in are replaced; sides left as None in
        ``border`` keep their stored value.

        Raises:
            ProfileNotFoundError: If the profile does not exist.
        """
        updates: dict[str, Any] = {}
        if measurement is not None:
            updates.update(
                {
                    f"calibration_{key}": value
                    for key, value in measurement.model_dump().items()
                }
            )
        if border is not None:
            updates.update(
                {
                    f"border_{side}": value
                    for side, value in border.model_dump().items()
                    if value is not None
                }
            )

        if not self.update_profile(profile_id, updates):
            raise ProfileNotFoundError(profile_id=profile_id)

        logger.info("Saved calibration for print profile %s", profile_id)
        return self.get_profile(profile_id)

    def close(self) -> None:
        """Close the database connection."""
        if self.conn is not None:
            self.conn.close()
            self.conn = None

    def __enter__(self) -> "PrintProfileDatabase":
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.close()

    # Helpers

    def _clear_defaults(self, printer_name: str, exclude_id: Optional[int] = None) -> None:
        if exclude_id is None:
            self.conn.execute(
                "UPDATE print_profiles SET is_default = 0 WHERE printer_name = ?",
                (printer_name,),
            )
        else:
            self.conn.execute(
                "UPDATE print_profiles SET is_default = 0 WHERE printer_name = ? AND id != ?",
                (printer_name, exclude_id),
            )

    @staticmethod
    def _profile_values(profile: PrintProfile) -> tuple[Any, ...]:
        data = profile.model_dump(include=set(PROFILE_COLUMNS), mode="json")
        data["is_default"] = 1 if profile.is_default else 0
        return tuple(data[column] for column in PROFILE_COLUMNS)

    def _row_to_profile(self, row: sqlite3.Row) -> PrintProfile:
        """Convert database row to PrintProfile."""
        data = dict(row)
        data["is_default"] = bool(data["is_default"])
        return PrintProfile.model_validate(data)
