"""Tests for tcsetup.report."""

import datetime as _datetime

import tcsetup.report as report
import tcsetup.yaml_merge as yaml_merge

GENERATED_AT = _datetime.datetime(2025, 12, 5, 12, 0, 0)


class TestFormatMarkdownTable:
    """Tests for format_markdown_table."""

    def test_aligned_columns(self) -> None:
        """Columns are padded to the widest cell."""
        table = report.format_markdown_table(["Section", "Count"], [["memories", "1"], ["agent.menu", "2"]])
        assert table == (
            "| Section    | Count |\n"
            "|------------|-------|\n"
            "| memories   | 1     |\n"
            "| agent.menu | 2     |\n"
        )

    def test_empty_rows(self) -> None:
        """No rows means no table."""
        assert report.format_markdown_table(["A"], []) == ""

    def test_short_rows_are_padded(self) -> None:
        """Missing cells render empty."""
        assert report.format_markdown_table(["A", "B"], [["x"]]).splitlines()[2] == "| x |   |"

    def test_extra_cells_are_dropped(self) -> None:
        """Cells beyond the header count are ignored, including for widths."""
        assert report.format_markdown_table(["A"], [["x", "much longer"]]) == "| A |\n|---|\n| x |\n"


class TestRenderMergeReport:
    """Tests for render_merge_report."""

    def test_successful_merge(self) -> None:
        """A merge report lists each changelog category that has entries."""
        result = yaml_merge.merge_documents(
            "agent:\n  name: a\ntags:\n  - x",
            "agent:\n  icon: b\ntags:\n  - x\n  - y\nmenu:\n  - help",
        )
        text = report.render_merge_report(result, "agent.yaml", "overlay.yaml", generated_at=GENERATED_AT)

        assert text.startswith("# Merge Report: agent.yaml\n")
        assert "**Overlay**: overlay.yaml" in text
        assert "**Generated**: 2025-12-05 12:00:00" in text
        assert "**Status**: success" in text
        assert "## Added" in text
        assert '| menu    | "help" |' in text
        assert "## Deduplicated" in text
        assert "| tags    | 1       |" in text
        assert "## Merged" in text
        assert "| agent   | icon |" in text
        assert "## Preserved" in text
        assert "| agent.name |" in text
        assert "## Errors" not in text
        assert text.endswith("\n")
        assert not text.endswith("\n\n")

    def test_failed_merge(self) -> None:
        """Errors are listed and the status says failed."""
        result = yaml_merge.merge_documents("a: 1\na: 2", "b: 1")
        text = report.render_merge_report(result, "agent.yaml", "overlay.yaml", generated_at=GENERATED_AT)
        assert "**Status**: failed" in text
        assert "## Errors" in text
        assert "- Existing document parse error: line 2: duplicate key 'a'" in text
        assert "No changes." not in text

    def test_warnings_section(self) -> None:
        """Warnings get their own section."""
        result = yaml_merge.merge_documents("a: 1", "a: 2")
        text = report.render_merge_report(result, "x", "y", generated_at=GENERATED_AT)
        assert "## Warnings\n\n- a: value replaced by update" in text
        assert "No changes." in text

    def test_pipe_in_cell_is_escaped(self) -> None:
        """Cell text cannot break the table."""
        result = yaml_merge.merge_documents("", "cmds:\n  - a | b")
        text = report.render_merge_report(result, "x", "y", generated_at=GENERATED_AT)
        assert '"a \\| b"' in text
