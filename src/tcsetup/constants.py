"""
Shared constants for tcsetup.

This module provides a single source of truth for default values
that are used across multiple modules.
"""

# Serialization
INDENT_WIDTH = 2
"""Spaces per nesting level in serialized documents."""

# Merge command defaults
DEFAULT_BACKUP_SUFFIX = ".bak"
"""Suffix appended to the existing file's name when a backup is written."""

DEFAULT_ENCODING = "utf-8"
"""Encoding used to read and write document files."""

# Logging defaults
DEFAULT_LOG_LEVEL = "WARNING"
"""Default log level for the tcsetup logger hierarchy."""

# Config locations
PROJECT_CONFIG_DIR = ".tcsetup"
"""Directory holding project-level config, found by walking up from the cwd."""

CONFIG_FILE_NAME = "config.yaml"
"""Name of the YAML config file in the user and project config directories."""

ENV_PREFIX = "TCSETUP_"
"""Prefix for environment variable overrides."""
