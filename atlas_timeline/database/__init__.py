"""Persistence for notes and calendar."""

from .manager import DatabaseManager, NOTES_KEY, CALENDAR_KEY

__all__ = ["DatabaseManager", "NOTES_KEY", "CALENDAR_KEY"]
