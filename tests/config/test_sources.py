"""Tests for the layered YAML settings source."""

import pathlib as _pathlib

import pytest as _pytest

import tcsetup.config as config
import tcsetup.config.sources as sources


def _source(
    project_root: _pathlib.Path | None,
    user_config: _pathlib.Path,
) -> sources.YamlSettingsSource:
    return sources.YamlSettingsSource(config.Settings, project_root, user_config_path=user_config)


class TestYamlSettingsSource:
    """Tests for YamlSettingsSource."""

    def test_no_files(self, tmp_path: _pathlib.Path) -> None:
        """Missing files contribute nothing."""
        source = _source(tmp_path, tmp_path / "missing.yaml")
        assert source() == {}
        assert source.get_loaded_layers() == []

    def test_layers_merge_structurally(self, tmp_path: _pathlib.Path) -> None:
        """Nested sections merge; lists are unioned; project scalars win."""
        user = tmp_path / "user.yaml"
        user.write_text("merge:\n  backup: true\n  encoding: utf-8\nextra_paths:\n  - a\n  - b\n")
        project = tmp_path / "project"
        (project / ".tcsetup").mkdir(parents=True)
        (project / ".tcsetup" / "config.yaml").write_text(
            "merge:\n  backup: false\nextra_paths:\n  - b\n  - c\n"
        )

        source = _source(project, user)

        assert source() == {
            "merge": {"backup": False, "encoding": "utf-8"},
            "extra_paths": ["a", "b", "c"],
        }

    def test_loaded_layers_highest_first(self, tmp_path: _pathlib.Path) -> None:
        """Loaded layers are listed project first."""
        user = tmp_path / "user.yaml"
        user.write_text("logging:\n  level: INFO\n")
        project = tmp_path / "project"
        (project / ".tcsetup").mkdir(parents=True)
        project_config = project / ".tcsetup" / "config.yaml"
        project_config.write_text("logging:\n  level: DEBUG\n")

        layers = _source(project, user).get_loaded_layers()

        assert layers == [("project", project_config), ("user", user)]

    def test_empty_file_is_skipped(self, tmp_path: _pathlib.Path) -> None:
        """An empty file is not a layer."""
        user = tmp_path / "user.yaml"
        user.write_text("")
        source = _source(None, user)
        assert source.get_loaded_layers() == []

    def test_non_mapping_file_raises(self, tmp_path: _pathlib.Path) -> None:
        """A top-level list is a config error."""
        user = tmp_path / "user.yaml"
        user.write_text("- a\n- b\n")
        with _pytest.raises(config.ConfigFileError, match="must be a YAML mapping"):
            _source(None, user)

    def test_unsupported_value_raises(self, tmp_path: _pathlib.Path) -> None:
        """Values with no document representation (dates) are a config error."""
        user = tmp_path / "user.yaml"
        user.write_text("released: 2024-01-01\n")
        with _pytest.raises(config.ConfigFileError, match="unsupported value"):
            _source(None, user)

    def test_get_field_value(self, tmp_path: _pathlib.Path) -> None:
        """Field lookups report whether the value is complex."""
        user = tmp_path / "user.yaml"
        user.write_text("merge:\n  backup: true\nname: x\n")
        source = _source(None, user)
        field = config.Settings.model_fields["merge"]
        assert source.get_field_value(field, "merge") == ({"backup": True}, "merge", True)
        assert source.get_field_value(field, "name") == ("x", "name", False)
        assert source.get_field_value(field, "missing") == (None, "missing", False)

    def test_layer_paths(self, tmp_path: _pathlib.Path) -> None:
        """get_layer_paths lists candidates whether or not they exist."""
        user = tmp_path / "user.yaml"
        layers = _source(tmp_path, user).get_layer_paths()
        assert layers == [
            ("project", tmp_path / ".tcsetup" / "config.yaml", False),
            ("user", user, False),
        ]


class TestConfigPaths:
    """Tests for the path helpers."""

    def test_user_config_dir_from_env(self, monkeypatch: _pytest.MonkeyPatch, tmp_path: _pathlib.Path) -> None:
        """TCSETUP_CONFIG_DIR overrides the user config directory."""
        monkeypatch.setenv("TCSETUP_CONFIG_DIR", str(tmp_path))
        assert sources.get_user_config_dir() == tmp_path
        assert sources.get_user_config_path() == tmp_path / "config.yaml"

    def test_user_config_dir_default(self, monkeypatch: _pytest.MonkeyPatch) -> None:
        """Without the variable, the XDG location is used."""
        monkeypatch.delenv("TCSETUP_CONFIG_DIR", raising=False)
        assert sources.get_user_config_dir() == _pathlib.Path.home() / ".config" / "tcsetup"
