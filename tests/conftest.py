"""
Shared pytest fixtures for tcsetup tests.

This file is automatically loaded by pytest. Fixtures defined here are
available to all test files without explicit imports.
"""

import os as _os
import pathlib as _pathlib
import unittest.mock as _mock

import pytest as _pytest

import tcsetup.config as config


def clean_env_dict() -> dict[str, str]:
    """Return the current environment without any TCSETUP_* variables."""
    return {k: v for k, v in _os.environ.items() if not k.startswith("TCSETUP_")}


@_pytest.fixture
def clean_env() -> dict[str, str]:
    """
    Return environment dict with tcsetup keys removed.

    Use with mock.patch.dict to isolate tests from the actual environment.
    """
    return clean_env_dict()


@_pytest.fixture
def isolated_env(clean_env: dict[str, str]):
    """
    Context manager that isolates tests from environment variables.

    Usage:
        def test_something(isolated_env):
            with isolated_env:
                settings = config.Settings.construct_without_dotenv()
    """
    return _mock.patch.dict(_os.environ, clean_env, clear=True)


@_pytest.fixture
def isolated_workspace(
    tmp_path: _pathlib.Path,
    monkeypatch: _pytest.MonkeyPatch,
) -> _pathlib.Path:
    """
    Project directory with its own user config dir, used as the cwd.

    TCSETUP_* variables are removed, TCSETUP_CONFIG_DIR points at
    tmp_path/user-config (empty), and the workspace holds a `.tcsetup`
    directory so it is detected as the project root.
    """
    for key in list(_os.environ):
        if key.startswith("TCSETUP_"):
            monkeypatch.delenv(key)

    user_dir = tmp_path / "user-config"
    user_dir.mkdir()
    monkeypatch.setenv("TCSETUP_CONFIG_DIR", str(user_dir))

    workspace = tmp_path / "workspace"
    (workspace / ".tcsetup").mkdir(parents=True)
    monkeypatch.chdir(workspace)
    return workspace


@_pytest.fixture
def clean_settings(isolated_workspace: _pathlib.Path) -> config.Settings:  # noqa: ARG001
    """
    Settings instance isolated from environment, config files and .env.

    This fixture ensures tests get predictable default settings.
    """
    return config.Settings.construct_without_dotenv()


# =============================================================================
# Documents
# =============================================================================


AGENT_DOCUMENT = """\
# Agent definition
agent:
  metadata:
    name: analyst
    version: 1.0
  menu:
    - trigger: help
      description: Show help
memories:
  - id: mem1
    text: Original
"""

AGENT_OVERLAY = """\
agent:
  metadata:
    icon: chart
  menu:
    - trigger: help
      description: Show help
    - trigger: report
      description: Build a report
memories:
  - id: mem2
    text: New
persona:
  role: Analyst
"""


@_pytest.fixture
def agent_document() -> str:
    """An existing agent config with nested sections and lists."""
    return AGENT_DOCUMENT


@_pytest.fixture
def agent_overlay() -> str:
    """An overlay adding menu entries, a memory and a new section."""
    return AGENT_OVERLAY
