"""
Database manager for Atlas Timeline.

This module persists the note collection and the calendar in a small
key-value table in DuckDB. Every mutation rewrites the whole collection;
there is no partial persistence.
"""

import duckdb
import json
import logging
from datetime import datetime
from typing import Any, List, Optional

from pydantic import ValidationError

from ..models import CalendarConfig, DEFAULT_CALENDAR, Note


NOTES_KEY = "atlas_timeline_notes"
CALENDAR_KEY = "atlas_timeline_calendar"


class DatabaseManager:
    """
    Manages the DuckDB key-value store holding notes and calendar.
    """

    def __init__(self, db_path: str = "atlas_timeline.db",
                 default_calendar: Optional[CalendarConfig] = None):
        """
        Initialize the database manager.

        Args:
            db_path: Path to the DuckDB database file
            default_calendar: Calendar returned when none has been saved yet
        """
        self.db_path = db_path
        self.default_calendar = default_calendar or DEFAULT_CALENDAR
        self.connection = None

    def connect(self):
        """Establish connection to the database."""
        self.connection = duckdb.connect(self.db_path)

    def disconnect(self):
        """Close the database connection."""
        if self.connection:
            self.connection.close()
            self.connection = None

    def __enter__(self):
        """Context manager entry."""
        self.connect()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        """Context manager exit."""
        self.disconnect()

    def _require_connection(self):
        if not self.connection:
            raise RuntimeError("Database connection not established")
        return self.connection

    def initialize_database(self):
        """
        Create the key-value table if it doesn't exist.
        """
        connection = self._require_connection()
        connection.execute("""
            CREATE TABLE IF NOT EXISTS kv_store (
                key VARCHAR PRIMARY KEY,
                value TEXT NOT NULL,
                updated_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP
            )
        """)

    # Raw key-value access

    def get_value(self, key: str) -> Optional[str]:
        """
        Read a raw stored value.

        Args:
            key: Storage key

        Returns:
            The stored text, or None if the key is absent
        """
        connection = self._require_connection()
        result = connection.execute(
            "SELECT value FROM kv_store WHERE key = ?", [key]
        ).fetchone()
        return result[0] if result else None

    def set_value(self, key: str, value: str):
        """Store a raw value, replacing any previous one."""
        connection = self._require_connection()
        connection.execute("""
            INSERT OR REPLACE INTO kv_store (key, value, updated_at)
            VALUES (?, ?, ?)
        """, [key, value, datetime.now()])

    def delete_value(self, key: str):
        """Remove a key if present."""
        connection = self._require_connection()
        connection.execute("DELETE FROM kv_store WHERE key = ?", [key])

    def _load_json(self, key: str) -> Any:
        raw = self.get_value(key)
        if raw is None:
            return None
        try:
            return json.loads(raw)
        except json.JSONDecodeError as e:
            logging.error(f"Stored value for {key} is not valid JSON, ignoring it: {e}")
            return None

    # Notes

    def load_notes(self) -> List[Note]:
        """
        Load the whole note collection.

        Legacy notes without a relative-era flag get one inferred from the
        sign of their year. Notes that fail validation are skipped.
        """
        data = self._load_json(NOTES_KEY)
        if not isinstance(data, list):
            return []

        notes = []
        for item in data:
            try:
                notes.append(Note.model_validate(item))
            except ValidationError as e:
                logging.warning(f"Skipping invalid stored note: {e}")
        return notes

    def save_notes(self, notes: List[Note]):
        """Persist the whole note collection."""
        payload = json.dumps([note.to_storage() for note in notes], ensure_ascii=False)
        self.set_value(NOTES_KEY, payload)
        logging.debug(f"Saved {len(notes)} notes")

    def add_note(self, note: Note) -> List[Note]:
        """
        Append a note and persist.

        Returns:
            The updated collection
        """
        notes = self.load_notes() + [note]
        self.save_notes(notes)
        logging.info(f"Added note {note.id}: {note.title}")
        return notes

    def get_note(self, note_id: str) -> Optional[Note]:
        """Retrieve a note by id."""
        for note in self.load_notes():
            if note.id == note_id:
                return note
        return None

    def update_note(self, updated: Note) -> bool:
        """
        Replace the note with the same id.

        Returns:
            True if the note was found and replaced, False otherwise
        """
        notes = self.load_notes()
        found = False
        for i, note in enumerate(notes):
            if note.id == updated.id:
                notes[i] = updated
                found = True
        if not found:
            return False
        self.save_notes(notes)
        logging.info(f"Updated note {updated.id}")
        return True

    def toggle_pin(self, note_id: str) -> Optional[Note]:
        """
        Flip the pinned flag of a note.

        Returns:
            The updated note, or None if no note has that id
        """
        note = self.get_note(note_id)
        if note is None:
            return None
        toggled = note.model_copy(update={"pinned": not note.pinned})
        self.update_note(toggled)
        return toggled

    def remove_note(self, note_id: str) -> bool:
        """
        Remove a note by id.

        Returns:
            True if a note was removed
        """
        notes = self.load_notes()
        remaining = [note for note in notes if note.id != note_id]
        if len(remaining) == len(notes):
            return False
        self.save_notes(remaining)
        logging.info(f"Removed note {note_id}")
        return True

    def replace_notes(self, notes: List[Note]):
        """Overwrite the collection, e.g. after an import."""
        self.save_notes(notes)
        logging.info(f"Replaced timeline with {len(notes)} notes")

    def clear_notes(self):
        """Delete the whole timeline."""
        self.delete_value(NOTES_KEY)
        logging.info("Timeline cleared")

    # Calendar

    def load_calendar(self) -> CalendarConfig:
        """Load the saved calendar, or the default one if none is stored."""
        data = self._load_json(CALENDAR_KEY)
        if not data:
            return self.default_calendar
        try:
            return CalendarConfig.model_validate(data)
        except ValidationError as e:
            logging.error(f"Stored calendar is invalid, using default: {e}")
            return self.default_calendar

    def save_calendar(self, calendar: CalendarConfig):
        """Persist a complete calendar configuration."""
        self.set_value(CALENDAR_KEY, json.dumps(calendar.to_storage(), ensure_ascii=False))

    def update_calendar(self, **changes) -> CalendarConfig:
        """
        Merge changes into the current calendar and persist the result.

        Returns:
            The new calendar
        """
        calendar = self.load_calendar().with_updates(**changes)
        self.save_calendar(calendar)
        logging.info("Calendar updated")
        return calendar
