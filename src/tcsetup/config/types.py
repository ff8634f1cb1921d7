"""Configuration type definitions for tcsetup settings.

This module defines the Pydantic models used to represent configuration
structures. These are "config section" types nested within the main
Settings class:

- MergeConfig: backup, backup_suffix, trailing_newline, encoding
- LoggingConfig: level

Design decision: All types use `extra="allow"` to preserve unknown fields,
so `tcsetup config show` can point out keys that are probably typos. Use
`collect_all_extra_fields()` to inspect them.
"""

import typing as _typing

import pydantic as _pydantic

import tcsetup.constants as constants

# =============================================================================
# Base class with introspection
# =============================================================================


class ConfigBase(_pydantic.BaseModel):
    """
    Base class for all config types.

    All config types use `extra="allow"` so unknown fields are preserved
    rather than silently dropped.
    """

    model_config = _pydantic.ConfigDict(extra="allow")

    def get_extra_fields(self) -> dict[str, _typing.Any]:
        """
        Return fields that were provided but not in the schema.

        Returns:
            Dict of field_name → value for all unrecognized fields.
        """
        return dict(self.model_extra) if self.model_extra else {}

    def collect_all_extra_fields(
        self,
        prefix: str = "",
    ) -> dict[str, _typing.Any]:
        """
        Recursively collect extra fields from this config and nested configs.

        Returns a flat dict with dotted paths as keys, e.g.:
            {"merge.bakup": True}

        Args:
            prefix: Dotted path prefix (used in recursion).
        """
        result: dict[str, _typing.Any] = {}

        for key, value in self.get_extra_fields().items():
            path = f"{prefix}.{key}" if prefix else key
            result[path] = value

        for field_name in self.__class__.model_fields:
            value = getattr(self, field_name, None)
            if isinstance(value, ConfigBase):
                child_prefix = f"{prefix}.{field_name}" if prefix else field_name
                result.update(value.collect_all_extra_fields(child_prefix))

        return result


# =============================================================================
# Merge Settings
# =============================================================================


class MergeConfig(ConfigBase):
    """
    Settings for `tcsetup merge`.

    YAML section: merge.*
    """

    backup: bool = False
    """Copy the existing file to <name><backup_suffix> before overwriting it."""

    backup_suffix: str = _pydantic.Field(default=constants.DEFAULT_BACKUP_SUFFIX, min_length=1)
    """Suffix for backup files."""

    trailing_newline: bool = True
    """End written documents with a newline."""

    encoding: str = constants.DEFAULT_ENCODING
    """Encoding for reading and writing documents."""


# =============================================================================
# Logging Settings
# =============================================================================


class LoggingConfig(ConfigBase):
    """
    Logging settings.

    YAML section: logging.*
    """

    level: _typing.Literal["DEBUG", "INFO", "WARNING", "ERROR"] = constants.DEFAULT_LOG_LEVEL
    """Log level for the tcsetup logger hierarchy."""

    @_pydantic.field_validator("level", mode="before")
    @classmethod
    def _normalize_level(cls, value: _typing.Any) -> _typing.Any:
        if isinstance(value, str):
            return value.upper()
        return value
