"""
Configuration module for tcsetup.

Uses pydantic-settings for environment variable loading.
"""

from tcsetup.config.settings import Settings, find_project_root
from tcsetup.config.sources import ConfigFileError, YamlSettingsSource
from tcsetup.config.types import ConfigBase, LoggingConfig, MergeConfig

__all__ = [
    "ConfigBase",
    "ConfigFileError",
    "LoggingConfig",
    "MergeConfig",
    "Settings",
    "YamlSettingsSource",
    "find_project_root",
]
