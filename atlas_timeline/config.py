"""
Configuration management for Atlas Timeline.

This module handles loading and accessing configuration values from config.yaml.
It provides a centralized way to manage all settings and makes it easy to
modify behavior without changing code.
"""

import yaml
from pathlib import Path
from typing import Any, Dict
import logging

from pydantic import ValidationError

from .models import CalendarConfig, DEFAULT_CALENDAR, ExportOptions, Level


class ConfigManager:
    """
    Manages configuration loading and access for Atlas Timeline.
    """

    def __init__(self, config_path: str = "config.yaml"):
        """
        Initialize the configuration manager.

        Args:
            config_path: Path to the configuration file
        """
        self.config_path = Path(config_path)
        self._config: Dict[str, Any] = {}
        self._load_config()

    def _load_config(self) -> None:
        """Load configuration from YAML file."""
        try:
            if not self.config_path.exists():
                raise FileNotFoundError(f"Configuration file not found: {self.config_path}")

            with open(self.config_path, 'r', encoding='utf-8') as f:
                self._config = yaml.safe_load(f) or {}

            logging.info(f"Configuration loaded from {self.config_path}")

        except (OSError, yaml.YAMLError) as e:
            logging.error(f"Failed to load configuration: {e}")
            # Fall back to default configuration
            self._config = self._get_default_config()

    def _get_default_config(self) -> Dict[str, Any]:
        """Get default configuration values as fallback."""
        return {
            "database": {
                "filename": "atlas_timeline.db"
            },
            "paths": {
                "log_file": "atlas_timeline.log"
            },
            "timeline": {
                "default_zoom": "YEAR"
            },
            "export": {
                "txt_filename": "atlas_timeline.txt",
                "json_filename": "timeline.json",
                "include_description": True,
                "include_tags": False,
                "group_by": "NONE"
            },
            "logging": {
                "level": "INFO",
                "format": "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
            },
            "calendar": {}
        }

    def get(self, key_path: str, default: Any = None) -> Any:
        """
        Get a configuration value using dot notation.

        Args:
            key_path: Dot-separated path to the configuration value (e.g., "export.group_by")
            default: Default value if key is not found

        Returns:
            The configuration value

        Examples:
            config.get("database.filename")  # Returns "atlas_timeline.db"
            config.get("timeline.default_zoom")  # Returns "YEAR"
        """
        keys = key_path.split('.')
        value = self._config

        for key in keys:
            if isinstance(value, dict) and key in value:
                value = value[key]
            else:
                return default

        return value

    def get_section(self, section: str) -> Dict[str, Any]:
        """
        Get an entire configuration section.

        Args:
            section: Name of the configuration section

        Returns:
            Dictionary containing the section configuration
        """
        return self._config.get(section) or {}

    def reload(self) -> None:
        """Reload configuration from file."""
        self._load_config()

    # Convenience properties for commonly used values

    @property
    def database_filename(self) -> str:
        """Get database filename."""
        return self.get("database.filename", "atlas_timeline.db")

    @property
    def log_filename(self) -> str:
        """Get log file name."""
        return self.get("paths.log_file", "atlas_timeline.log")

    @property
    def default_zoom(self) -> Level:
        """Get the zoom level used when none is given."""
        try:
            return Level(str(self.get("timeline.default_zoom", "YEAR")).upper())
        except ValueError:
            logging.warning("Invalid timeline.default_zoom in configuration, using YEAR")
            return Level.YEAR

    @property
    def export_filename(self) -> str:
        """Get the default text export file name."""
        return self.get("export.txt_filename", "atlas_timeline.txt")

    @property
    def json_export_filename(self) -> str:
        """Get the default JSON export file name."""
        return self.get("export.json_filename", "timeline.json")

    @property
    def export_options(self) -> ExportOptions:
        """Get the default export options."""
        section = self.get_section("export")
        try:
            return ExportOptions(
                include_description=section.get("include_description", True),
                include_tags=section.get("include_tags", False),
                group_by=str(section.get("group_by", "NONE")).upper(),
            )
        except ValidationError as e:
            logging.warning(f"Invalid export options in configuration, using defaults: {e}")
            return ExportOptions()

    @property
    def default_calendar(self) -> CalendarConfig:
        """
        Get the calendar used until the user saves one.

        Keys from the `calendar` section override the built-in calendar.
        """
        section = self.get_section("calendar")
        if not section:
            return DEFAULT_CALENDAR
        try:
            return DEFAULT_CALENDAR.with_updates(**section)
        except ValidationError as e:
            logging.warning(f"Invalid calendar in configuration, using built-in calendar: {e}")
            return DEFAULT_CALENDAR


# Global configuration instance
config = ConfigManager()


def get_config() -> ConfigManager:
    """
    Get the global configuration instance.

    Returns:
        The global ConfigManager instance
    """
    return config
