"""
Settings configuration using pydantic-settings.

Loads configuration from:
1. Constructor arguments (highest precedence)
2. Environment variables with TCSETUP_ prefix
3. .env file (if TCSETUP_ENV_FILE points at one)
4. Layered YAML config files:
   - Project config: .tcsetup/config.yaml (highest)
   - User config: ~/.config/tcsetup/config.yaml (lowest)

Nested config uses double underscore delimiter:
  TCSETUP_MERGE__BACKUP=true
  TCSETUP_LOGGING__LEVEL=DEBUG
"""

import os as _os
import pathlib as _pathlib
import typing as _typing

import pydantic as _pydantic
import pydantic_settings as _pydantic_settings

import tcsetup.config.sources as sources
import tcsetup.config.types as types
import tcsetup.constants as constants


def _get_env_file() -> str | None:
    """Determine which .env file to load.

    Only TCSETUP_ENV_FILE is honored. If it is set but the file does not
    exist, no .env is loaded rather than silently falling back.
    """
    if env_file := _os.environ.get("TCSETUP_ENV_FILE"):
        if _pathlib.Path(env_file).exists():
            return env_file
    return None


def find_project_root(start_path: _pathlib.Path | None = None) -> _pathlib.Path | None:
    """
    Find the project root directory.

    Walks up from start_path looking for a `.tcsetup` directory, then for
    the usual repository markers.

    Args:
        start_path: Starting path for search. Defaults to cwd.

    Returns:
        The first directory holding a marker, or None if none was found.
    """
    if start_path is None:
        start_path = _pathlib.Path.cwd()

    current = start_path.resolve()
    markers = [constants.PROJECT_CONFIG_DIR, ".git", "pyproject.toml"]

    while True:
        for marker in markers:
            if (current / marker).exists():
                return current
        if current == current.parent:
            return None
        current = current.parent


class Settings(_pydantic_settings.BaseSettings):
    """
    tcsetup configuration settings.

    All settings can be overridden via environment variables with TCSETUP_ prefix.
    For nested config, use double underscore: TCSETUP_MERGE__BACKUP=true

    Config precedence (highest to lowest):
    1. Constructor arguments
    2. Environment variables (TCSETUP_*)
    3. .env file
    4. Project config (.tcsetup/config.yaml)
    5. User config (~/.config/tcsetup/config.yaml)
    6. Field defaults
    """

    model_config = _pydantic_settings.SettingsConfigDict(
        env_prefix=constants.ENV_PREFIX,
        env_file=_get_env_file(),
        env_file_encoding="utf-8",
        env_nested_delimiter="__",  # TCSETUP_MERGE__BACKUP
        extra="allow",  # Preserve unknown fields so typos can be reported
    )

    merge: types.MergeConfig = _pydantic.Field(default_factory=types.MergeConfig)
    """Settings for the merge command."""

    logging: types.LoggingConfig = _pydantic.Field(default_factory=types.LoggingConfig)
    """Logging settings."""

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[_pydantic_settings.BaseSettings],
        init_settings: _pydantic_settings.PydanticBaseSettingsSource,
        env_settings: _pydantic_settings.PydanticBaseSettingsSource,
        dotenv_settings: _pydantic_settings.PydanticBaseSettingsSource,
        file_secret_settings: _pydantic_settings.PydanticBaseSettingsSource,
    ) -> tuple[_pydantic_settings.PydanticBaseSettingsSource, ...]:
        """
        Configure settings sources with precedence:
        1. init_settings (constructor args), highest
        2. env_settings (TCSETUP_* env vars)
        3. dotenv_settings (.env file)
        4. yaml_settings (project and user config.yaml)
        5. (defaults via Field definitions), lowest
        """
        return (
            init_settings,
            env_settings,
            dotenv_settings,
            sources.YamlSettingsSource(settings_cls, find_project_root()),
            file_secret_settings,
        )

    @classmethod
    def construct_without_dotenv(cls, **kwargs: _typing.Any) -> "Settings":
        """Create Settings without loading a .env file (for test isolation)."""
        return cls(_env_file=None, **kwargs)  # type: ignore[call-arg]

    # =========================================================================
    # Directory settings (computed at runtime)
    # =========================================================================

    @property
    def config_dir(self) -> _pathlib.Path:
        """User configuration directory (~/.config/tcsetup/)."""
        return sources.get_user_config_dir()

    @property
    def project_root(self) -> _pathlib.Path | None:
        """Project root directory, if one was found."""
        return find_project_root()

    # =========================================================================
    # Introspection
    # =========================================================================

    def collect_all_extra_fields(self) -> dict[str, _typing.Any]:
        """
        Recursively collect all unknown fields from Settings and nested configs.

        Returns a flat dict with dotted paths as keys, e.g.:
            {"merge.bakup": True, "colour": "red"}
        """
        result: dict[str, _typing.Any] = dict(self.model_extra) if self.model_extra else {}
        for field_name in ["merge", "logging"]:
            nested = getattr(self, field_name)
            result.update(nested.collect_all_extra_fields(prefix=field_name))
        return result

    # =========================================================================
    # Serialization
    # =========================================================================

    def to_dict(self) -> dict[str, _typing.Any]:
        """Convert settings to dictionary (for JSON output)."""
        project_root = self.project_root
        return {
            "merge": {
                "backup": self.merge.backup,
                "backup_suffix": self.merge.backup_suffix,
                "trailing_newline": self.merge.trailing_newline,
                "encoding": self.merge.encoding,
            },
            "logging": {
                "level": self.logging.level,
            },
            "config_dir": str(self.config_dir),
            "project_root": str(project_root) if project_root else None,
            "unknown_keys": sorted(self.collect_all_extra_fields()),
        }
