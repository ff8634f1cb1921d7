"""Custom pydantic-settings source for tcsetup configuration.

This module provides:

- YamlSettingsSource: A pydantic-settings source that loads configuration
  from layered YAML files and combines them with the merge engine.

Configuration layers (in precedence order, highest first):
1. Environment variables (handled by pydantic-settings)
2. Project config: .tcsetup/config.yaml in project root
3. User config: ~/.config/tcsetup/config.yaml (or TCSETUP_CONFIG_DIR)

Layers are combined with merge_mappings(), the same rules `tcsetup merge`
applies to documents: nested sections merge key by key, lists are unioned
and the project layer wins where scalars differ.

Environment variables:
- TCSETUP_CONFIG_DIR: Override user config directory (default: ~/.config/tcsetup)
"""

import collections.abc as _abc
import os as _os
import pathlib as _pathlib
import typing as _typing

import pydantic.fields as _pydantic_fields
import pydantic_settings as _pydantic_settings
import yaml as _yaml

import tcsetup.constants as constants
import tcsetup.yaml_merge as yaml_merge

# Environment variable for overriding user config directory
ENV_CONFIG_DIR = "TCSETUP_CONFIG_DIR"


class ConfigFileError(Exception):
    """Error loading or parsing a configuration file."""

    def __init__(self, path: _pathlib.Path, message: str) -> None:
        self.path = path
        super().__init__(f"Error in config file {path}: {message}")


class YamlSettingsSource(_pydantic_settings.PydanticBaseSettingsSource):
    """
    Settings source that loads layered YAML config files.

    Flow:
    1. Load each YAML file into a dict
    2. Convert to document values and merge them, lowest layer first
    3. Return the merged dict to pydantic-settings for validation
    """

    def __init__(
        self,
        settings_cls: type[_pydantic_settings.BaseSettings],
        project_root: _pathlib.Path | None = None,
        *,
        user_config_path: _pathlib.Path | None = None,
    ) -> None:
        """
        Initialize the settings source.

        Args:
            settings_cls: The Settings class being populated.
            project_root: Optional project root path for project-level config.
            user_config_path: Override path for user config file (for testing).
                If not provided, uses TCSETUP_CONFIG_DIR env var or default XDG path.
        """
        super().__init__(settings_cls)
        self._project_root = project_root
        self._user_config_path = user_config_path
        # Layers that were actually loaded, highest precedence first
        self._loaded_layers: list[tuple[str, _pathlib.Path]] = []
        self._data = self._load_config_layers()

    def _load_config_layers(self) -> dict[str, _typing.Any]:
        """
        Load config files and merge them.

        Returns:
            Merged configuration as a plain dict.
        """
        layers: list[tuple[str, _pathlib.Path]] = [("user", self._get_user_config_path())]
        if self._project_root:
            layers.append(("project", get_project_config_path(self._project_root)))

        merged = yaml_merge.Mapping()
        for name, path in layers:
            if not path.exists():
                continue
            content = self._load_yaml_file(path)
            if not content:
                continue
            try:
                layer = yaml_merge.from_python(content)
            except TypeError as e:
                raise ConfigFileError(path, f"unsupported value: {e}") from e
            merged = yaml_merge.merge_mappings(merged, layer)
            self._loaded_layers.insert(0, (name, path))

        result: dict[str, _typing.Any] = yaml_merge.to_python(merged)
        return result

    def get_loaded_layers(self) -> list[tuple[str, _pathlib.Path]]:
        """
        Get info about layers that were actually loaded.

        Returns:
            List of (layer_name, path) tuples, highest precedence first.
        """
        return list(self._loaded_layers)

    def get_layer_paths(self) -> list[tuple[str, _pathlib.Path, bool]]:
        """
        Get info about all config layers.

        Returns:
            List of (layer_name, path, exists) tuples in precedence order
            (highest first: project, user).
        """
        layers: list[tuple[str, _pathlib.Path, bool]] = []

        if self._project_root:
            project_path = get_project_config_path(self._project_root)
            layers.append(("project", project_path, project_path.exists()))

        user_path = self._get_user_config_path()
        layers.append(("user", user_path, user_path.exists()))

        return layers

    def _get_user_config_path(self) -> _pathlib.Path:
        """Get path to user config, respecting override and env var."""
        if self._user_config_path is not None:
            return self._user_config_path
        return get_user_config_path()

    def _load_yaml_file(
        self,
        path: _pathlib.Path,
    ) -> dict[str, _typing.Any] | None:
        """
        Load a YAML file and return its contents as a dict.

        Args:
            path: Path to the YAML file.

        Returns:
            Parsed YAML contents, or None if file is empty.

        Raises:
            ConfigFileError: If the file cannot be read, is malformed YAML,
                or contains non-dict content at the top level.
        """
        try:
            content = path.read_text(encoding=constants.DEFAULT_ENCODING)
        except PermissionError as e:
            raise ConfigFileError(path, f"permission denied: {e}") from e
        except OSError as e:
            raise ConfigFileError(path, f"cannot read file: {e}") from e

        try:
            parsed = _yaml.safe_load(content)
        except _yaml.YAMLError as e:
            raise ConfigFileError(path, f"invalid YAML: {e}") from e

        if parsed is None:
            return None

        if not isinstance(parsed, dict):
            type_name = type(parsed).__name__
            raise ConfigFileError(
                path,
                f"config must be a YAML mapping (dict), got {type_name}",
            )

        return parsed

    def get_field_value(
        self,
        field: _pydantic_fields.FieldInfo,  # noqa: ARG002 - required by pydantic-settings interface
        field_name: str,
    ) -> tuple[_typing.Any, str, bool]:
        """
        Get value for a field from the merged layers.

        Returns:
            Tuple of (value, field_name, is_complex).
        """
        value = self._data.get(field_name, None)

        if value is None:
            return None, field_name, False

        return value, field_name, isinstance(value, (_abc.Mapping, list))

    def __call__(self) -> dict[str, _typing.Any]:
        """
        Return merged config as a plain dict for Pydantic validation.

        Unknown keys are included so they end up in model_extra.
        """
        return dict(self._data)


def get_user_config_dir() -> _pathlib.Path:
    """
    Get the user config directory.

    Respects TCSETUP_CONFIG_DIR environment variable if set,
    otherwise uses XDG standard path.
    """
    config_dir_env = _os.environ.get(ENV_CONFIG_DIR)
    if config_dir_env:
        return _pathlib.Path(config_dir_env)
    return _pathlib.Path.home() / ".config" / "tcsetup"


def get_user_config_path() -> _pathlib.Path:
    """Get the path to the user config file."""
    return get_user_config_dir() / constants.CONFIG_FILE_NAME


def get_project_config_path(project_root: _pathlib.Path) -> _pathlib.Path:
    """
    Get the path to the project config file.

    Args:
        project_root: The project root directory.

    Returns:
        Path to .tcsetup/config.yaml within the project.
    """
    return project_root / constants.PROJECT_CONFIG_DIR / constants.CONFIG_FILE_NAME
