"""
Chronological ordering of notes.

Ordering looks at the year alone. Two notes that differ only in era,
millennium, century, decade, month or day compare as equal, and sorting
keeps them in the order they were given.
"""

from functools import cmp_to_key
from typing import Iterable, List

from ..models import Note, RelativeEra


def effective_year(note: Note) -> int:
    """
    Signed year used for ordering.

    Years before the Union count as negative; a missing or zero year is 0.
    """
    year = note.date.year
    if not year:
        return 0
    if note.date.relative_era == RelativeEra.AU:
        return -year
    return year


def compare_notes(a: Note, b: Note) -> int:
    """Negative when `a` comes first, zero on ties, positive otherwise."""
    return effective_year(a) - effective_year(b)


note_sort_key = cmp_to_key(compare_notes)


def sort_notes(notes: Iterable[Note]) -> List[Note]:
    """Return a new list sorted chronologically (stable)."""
    return sorted(notes, key=note_sort_key)
