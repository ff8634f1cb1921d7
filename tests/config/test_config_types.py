"""Tests for config section types."""

import pydantic as _pydantic
import pytest as _pytest

import tcsetup.config as config


class TestMergeConfig:
    """Tests for MergeConfig."""

    def test_backup_suffix_must_not_be_empty(self) -> None:
        """An empty suffix would overwrite the file itself."""
        with _pytest.raises(_pydantic.ValidationError):
            config.MergeConfig(backup_suffix="")

    def test_extra_fields_preserved(self) -> None:
        """Unknown keys are kept for auditing."""
        section = config.MergeConfig(bakup=True)  # type: ignore[call-arg]
        assert section.get_extra_fields() == {"bakup": True}
        assert section.collect_all_extra_fields("merge") == {"merge.bakup": True}


class TestLoggingConfig:
    """Tests for LoggingConfig."""

    def test_level_uppercased(self) -> None:
        """Levels are case-insensitive."""
        assert config.LoggingConfig(level="info").level == "INFO"  # type: ignore[arg-type]

    def test_level_must_be_known(self) -> None:
        """Only standard level names are accepted."""
        with _pytest.raises(_pydantic.ValidationError):
            config.LoggingConfig(level="TRACE")  # type: ignore[arg-type]
