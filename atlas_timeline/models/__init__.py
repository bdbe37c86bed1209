"""Data models for Atlas Timeline."""

from .calendar import CalendarConfig, MonthSpec, DEFAULT_CALENDAR, parse_days, parse_months
from .notes import AtlasDate, ExportOptions, GroupLevel, Level, LEVELS, Note, RelativeEra

__all__ = [
    "AtlasDate",
    "CalendarConfig",
    "DEFAULT_CALENDAR",
    "ExportOptions",
    "GroupLevel",
    "Level",
    "LEVELS",
    "MonthSpec",
    "Note",
    "RelativeEra",
    "parse_days",
    "parse_months",
]
