"""
View filters applied before grouping: free-text search and tag filters.
"""

from typing import Dict, Iterable, List, Sequence

from ..models import Level, Note
from .grouping import NoteGroup, group_notes


def filter_notes(notes: Sequence[Note], search: str = "",
                 tags: Iterable[str] = ()) -> List[Note]:
    """
    Apply the search box and the tag filter.

    Search is a case-insensitive substring match on title or description and
    is ignored when blank. Active tags keep notes carrying at least one of
    them.
    """
    filtered = list(notes)
    if search.strip():
        needle = search.lower()
        filtered = [
            note for note in filtered
            if needle in note.title.lower() or needle in (note.description or "").lower()
        ]
    active = set(tags)
    if active:
        filtered = [note for note in filtered if note.tag_set & active]
    return filtered


def build_timeline(notes: Sequence[Note], zoom: Level, search: str = "",
                   tags: Iterable[str] = ()) -> List[NoteGroup]:
    """Filter the collection and group it for the chosen zoom level."""
    return group_notes(filter_notes(notes, search, tags), zoom)


def all_tags(notes: Iterable[Note]) -> List[str]:
    """Distinct tags in first-seen order."""
    return list(dict.fromkeys(tag for note in notes for tag in note.tags))


def pinned_notes(notes: Iterable[Note]) -> List[Note]:
    return [note for note in notes if note.pinned]


def known_values(notes: Iterable[Note]) -> Dict[str, list]:
    """
    Distinct eras, millennia, centuries and decades already in use.

    These feed the suggestion lists when entering a new date.
    """
    values: Dict[str, dict] = {"era": {}, "millennium": {}, "century": {}, "decade": {}}
    for note in notes:
        if note.date.era:
            values["era"][note.date.era] = None
        for name in ("millennium", "century", "decade"):
            value = getattr(note.date, name)
            if value is not None:
                values[name][value] = None
    return {name: list(seen) for name, seen in values.items()}
