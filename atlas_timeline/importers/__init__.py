"""Note importers for various sources."""

from .base import BaseImporter, InvalidTimelineFile
from .sample import SampleImporter
from .json_file import JsonImporter, export_json

__all__ = ["BaseImporter", "InvalidTimelineFile", "SampleImporter", "JsonImporter", "export_json"]
