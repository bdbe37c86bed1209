"""Temporal ordering, formatting, grouping and export for the timeline."""

from .compare import compare_notes, effective_year, sort_notes
from .formatting import format_date, format_day_month, format_full, to_roman
from .grouping import (
    DESCENT_CHAINS,
    NoteGroup,
    PeriodNode,
    TimelineTree,
    YearBucket,
    aggregate_by_year,
    build_key,
    expand,
    group_label,
    group_notes,
    iter_leaf_notes,
    marker_size,
)
from .filtering import all_tags, build_timeline, filter_notes, known_values, pinned_notes
from .export import build_export_text, export_to_file

__all__ = [
    "DESCENT_CHAINS",
    "NoteGroup",
    "PeriodNode",
    "TimelineTree",
    "YearBucket",
    "aggregate_by_year",
    "all_tags",
    "build_export_text",
    "build_key",
    "build_timeline",
    "compare_notes",
    "effective_year",
    "expand",
    "export_to_file",
    "filter_notes",
    "format_date",
    "format_day_month",
    "format_full",
    "group_label",
    "group_notes",
    "iter_leaf_notes",
    "known_values",
    "marker_size",
    "pinned_notes",
    "sort_notes",
    "to_roman",
]
