"""
Configuration module for Questline.

Uses pydantic-settings for environment variable and YAML loading.
"""

from questline.config.settings import (
    LoggingConfig,
    Settings,
    find_project_root,
)
from questline.config.sources import ConfigFileError

__all__ = ["ConfigFileError", "LoggingConfig", "Settings", "find_project_root"]
