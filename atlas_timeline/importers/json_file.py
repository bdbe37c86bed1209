"""
JSON importer and exporter for Atlas Timeline.

The file format is the persisted mirror of the note collection: a JSON list
of note objects with camelCase keys, as written by `export_json`.
"""

import json
import logging
from pathlib import Path
from typing import List, Sequence

from pydantic import ValidationError

from ..models import Note
from .base import BaseImporter, InvalidTimelineFile


class JsonImporter(BaseImporter):
    """
    Reads a timeline previously exported as JSON.
    """

    def __init__(self, path: str):
        """
        Initialize the JSON importer.

        Args:
            path: Path to the JSON file
        """
        self.path = Path(path)

    def get_all_notes(self) -> List[Note]:
        """
        Parse the file into notes.

        Raises:
            InvalidTimelineFile: If the file is missing, is not JSON, or holds
                anything other than a list of valid notes
        """
        logging.info(f"Importing timeline from {self.path}")
        try:
            with open(self.path, 'r', encoding='utf-8') as f:
                data = json.load(f)
        except (OSError, json.JSONDecodeError) as e:
            raise InvalidTimelineFile(f"Arquivo inválido: {self.path} ({e})") from e

        if not isinstance(data, list):
            raise InvalidTimelineFile(f"Arquivo inválido: {self.path} (expected a list of notes)")

        try:
            notes = [Note.model_validate(item) for item in data]
        except ValidationError as e:
            raise InvalidTimelineFile(f"Arquivo inválido: {self.path} ({e})") from e

        logging.info(f"Imported {len(notes)} notes")
        return notes


def export_json(path: str, notes: Sequence[Note]) -> Path:
    """
    Write notes as pretty-printed JSON.

    Returns:
        The path written
    """
    file_path = Path(path)
    file_path.parent.mkdir(parents=True, exist_ok=True)
    with open(file_path, 'w', encoding='utf-8') as f:
        json.dump([note.to_storage() for note in notes], f, indent=2, ensure_ascii=False)
    logging.info(f"Exported {len(notes)} notes to {file_path}")
    return file_path
