"""
Sample importer for Atlas Timeline.

This module provides a hardcoded timeline used to try out the views and the
export without entering notes by hand.
"""

from typing import List

from ..models import AtlasDate, Level, Note, RelativeEra
from .base import BaseImporter


class SampleImporter(BaseImporter):
    """
    Importer that returns hardcoded demo notes.

    The notes span two eras, years on both sides of the Union and every
    granularity level.
    """

    def __init__(self):
        """Initialize the sample importer with demo data."""
        self._notes = self._create_sample_notes()

    def get_all_notes(self) -> List[Note]:
        """
        Return all demo notes.

        Returns:
            List of sample Note objects
        """
        return list(self._notes)

    def _create_sample_notes(self) -> List[Note]:
        """
        Create the demo notes.

        Returns:
            List of notes covering different eras and levels
        """
        notes = []

        # An era-level note with no numeric fields at all
        notes.append(Note(
            title="Era de Ouro",
            description="Tempo das grandes cidades flutuantes.",
            level=Level.ERA,
            date=AtlasDate(era="Ouro"),
            tags=["Humanos"],
        ))

        # Before the Union
        notes.append(Note(
            title="Guerra Antiga",
            description="Os clãs do norte enfrentam os reinos do sul.",
            level=Level.YEAR,
            date=AtlasDate(era="Ouro", millennium=1, century=3, decade=2,
                           year=20, relative_era=RelativeEra.AU),
            weight=3,
            tags=["Guerra"],
        ))

        notes.append(Note(
            title="Queda da Torre",
            level=Level.CENTURY,
            date=AtlasDate(era="Ouro", millennium=1, century=4),
            tags=["Religião"],
        ))

        # After the Union
        notes.append(Note(
            title="Tratado da União",
            description="Fim da guerra; início da contagem DU.",
            level=Level.YEAR,
            date=AtlasDate(era="Ferro", millennium=2, century=1, decade=1,
                           year=1, month=3, day=12),
            weight=2,
            pinned=True,
            tags=["Guerra", "Humanos"],
        ))

        notes.append(Note(
            title="Fundação de Lumen",
            level=Level.DECADE,
            date=AtlasDate(era="Ferro", millennium=2, century=1, decade=1, year=5),
            tags=["Cidades"],
        ))

        notes.append(Note(
            title="Segundo Concílio",
            level=Level.MILLENNIUM,
            date=AtlasDate(era="Ferro", millennium=2, century=5),
        ))

        return notes
