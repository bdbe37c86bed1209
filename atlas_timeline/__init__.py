"""
Atlas Timeline: notes on a fictional calendar.

Records events on a configurable, non-Gregorian calendar and groups them by
era, millennium, century, decade or year for browsing and export.
"""

__version__ = "0.1.0"
__author__ = "Atlas Timeline Project"

# Import main components
from .database import DatabaseManager
from .models import AtlasDate, CalendarConfig, ExportOptions, GroupLevel, Level, Note, RelativeEra
from .importers import BaseImporter, JsonImporter, SampleImporter
from .timeline import build_export_text, compare_notes, expand, format_date, group_notes

__all__ = [
    "AtlasDate",
    "BaseImporter",
    "CalendarConfig",
    "DatabaseManager",
    "ExportOptions",
    "GroupLevel",
    "JsonImporter",
    "Level",
    "Note",
    "RelativeEra",
    "SampleImporter",
    "build_export_text",
    "compare_notes",
    "expand",
    "format_date",
    "group_notes",
]
