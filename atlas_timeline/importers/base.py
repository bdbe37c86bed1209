"""
Base importer interface for Atlas Timeline.

This module defines the abstract interface that all note importers must implement.
"""

from abc import ABC, abstractmethod
from typing import List

from ..models import Note


class InvalidTimelineFile(ValueError):
    """Raised when an imported file cannot be read as a timeline."""


class BaseImporter(ABC):
    """
    Abstract base class for all note importers.

    Each importer converts data from a specific source (an exported JSON
    file, built-in sample data, ...) into Note objects.
    """

    @abstractmethod
    def get_all_notes(self) -> List[Note]:
        """
        Retrieve all notes from the source.

        Returns:
            List of Note objects
        """
        pass
