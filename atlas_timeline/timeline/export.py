"""
Plain-text export of a note collection.

Each note renders as a block:

    4 a.U.
    Title
    Description
    Tags: a, b

Blocks are separated by a blank line. With grouping enabled, each group
starts with its label line.
"""

import logging
from pathlib import Path
from typing import Dict, List, Optional, Sequence

from ..models import CalendarConfig, ExportOptions, GroupLevel, Level, Note
from .compare import sort_notes
from .formatting import format_date


BLOCK_SEPARATOR = "\n\n"

GROUP_FALLBACK_LABELS = {
    GroupLevel.ERA: "Sem Era",
    GroupLevel.MILLENNIUM: "Milênio ?",
    GroupLevel.CENTURY: "Século ?",
    GroupLevel.DECADE: "Década ?",
}


def format_note_block(note: Note, calendar: CalendarConfig, options: ExportOptions) -> str:
    """Render a single note as its export block."""
    # Date line has no "Ano" prefix; "a.U." only appears for AU years
    lines = [format_date(note.date, calendar, Level.YEAR)]
    if note.title:
        lines.append(note.title)
    if options.include_description and note.description:
        lines.append(note.description)
    if options.include_tags and note.tags:
        lines.append("Tags: " + ", ".join(note.tags))
    return "\n".join(lines)


def export_group_label(note: Note, calendar: CalendarConfig, group_by: GroupLevel) -> str:
    """Header label of the export group a note belongs to."""
    group_by = GroupLevel(group_by)
    if group_by == GroupLevel.ERA:
        return note.date.era or GROUP_FALLBACK_LABELS[group_by]
    label = format_date(note.date, calendar, Level(group_by.value))
    return label or GROUP_FALLBACK_LABELS[group_by]


def build_export_text(notes: Sequence[Note], calendar: CalendarConfig,
                      options: Optional[ExportOptions] = None) -> str:
    """
    Build the export text for a collection.

    Args:
        notes: Notes to export, in any order
        calendar: Active calendar configuration
        options: Export options; defaults apply when omitted

    Returns:
        The full export text
    """
    options = options or ExportOptions()
    ordered = sort_notes(notes)

    if options.group_by == GroupLevel.NONE:
        return BLOCK_SEPARATOR.join(format_note_block(note, calendar, options) for note in ordered)

    groups: Dict[str, List[Note]] = {}
    for note in ordered:
        groups.setdefault(export_group_label(note, calendar, options.group_by), []).append(note)

    return BLOCK_SEPARATOR.join(
        f"{label}\n" + BLOCK_SEPARATOR.join(format_note_block(note, calendar, options) for note in members)
        for label, members in groups.items()
    )


def export_to_file(path: str, notes: Sequence[Note], calendar: CalendarConfig,
                   options: Optional[ExportOptions] = None) -> Path:
    """
    Write the export text to a UTF-8 file.

    Returns:
        The path written
    """
    text = build_export_text(notes, calendar, options)
    file_path = Path(path)
    file_path.parent.mkdir(parents=True, exist_ok=True)
    with open(file_path, 'w', encoding='utf-8') as f:
        f.write(text)
    logging.info(f"Exported {len(notes)} notes to {file_path}")
    return file_path
