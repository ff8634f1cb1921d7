"""
Markdown reports for merge results.

Turns a MergeResult into a document a reviewer can read: what was merged
into what, whether it worked, and one table per changelog category.
"""

import datetime as _datetime
import json as _json

import tcsetup.yaml_merge as yaml_merge


def format_markdown_table(headers: list[str], rows: list[list[str]]) -> str:
    """
    Render rows under headers as a markdown table with padded columns.

    Rows shorter than the header get empty cells; extra cells are dropped.
    Returns "" when there are no rows, so empty changelog categories leave
    no trace in the report.
    """
    if not headers or not rows:
        return ""

    grid = [list(headers)] + [(row + [""] * len(headers))[: len(headers)] for row in rows]
    widths = [max(len(line[column]) for line in grid) for column in range(len(headers))]

    def render(cells: list[str]) -> str:
        return "| " + " | ".join(cell.ljust(width) for cell, width in zip(cells, widths)) + " |"

    separator = "|" + "|".join("-" * (width + 2) for width in widths) + "|"
    body = [render(line) for line in grid[1:]]
    return "\n".join([render(grid[0]), separator, *body]) + "\n"


def _escape_cell(text: str) -> str:
    """Keep cell text on one line and out of the table syntax."""
    return text.replace("|", "\\|").replace("\n", " ")


def _format_items(items: tuple[yaml_merge.Value, ...]) -> str:
    if not items:
        return "-"
    rendered = [_json.dumps(yaml_merge.to_python(item), ensure_ascii=False) for item in items]
    return _escape_cell(", ".join(rendered))


def render_merge_report(
    result: yaml_merge.MergeResult,
    existing_name: str,
    overlay_name: str,
    *,
    generated_at: _datetime.datetime | None = None,
) -> str:
    """
    Render a markdown report for one merge.

    Args:
        result: The merge result to describe.
        existing_name: Label for the existing document (usually its path).
        overlay_name: Label for the overlay document.
        generated_at: Timestamp for the header. Defaults to now.

    Returns:
        Markdown text ending in a newline.
    """
    if generated_at is None:
        generated_at = _datetime.datetime.now()

    changes = result.changelog
    lines: list[str] = [
        f"# Merge Report: {existing_name}",
        "",
        f"**Overlay**: {overlay_name}",
        f"**Generated**: {generated_at.strftime('%Y-%m-%d %H:%M:%S')}",
        f"**Status**: {'success' if result.success else 'failed'}",
        "",
    ]

    if result.errors:
        lines.append("## Errors")
        lines.append("")
        lines.extend(f"- {error}" for error in result.errors)
        lines.append("")

    if result.warnings:
        lines.append("## Warnings")
        lines.append("")
        lines.extend(f"- {warning}" for warning in result.warnings)
        lines.append("")

    sections: list[tuple[str, list[str], list[list[str]]]] = [
        (
            "Added",
            ["Section", "Items"],
            [[record.section, _format_items(record.items)] for record in changes.added],
        ),
        (
            "Deduplicated",
            ["Section", "Dropped"],
            [[record.section, str(record.count)] for record in changes.deduplicated],
        ),
        (
            "Merged",
            ["Section", "Keys"],
            [[record.section, _escape_cell(", ".join(record.keys)) or "-"] for record in changes.merged],
        ),
        (
            "Preserved",
            ["Section"],
            [[record.section] for record in changes.preserved],
        ),
    ]

    if result.success and changes.is_empty:
        lines.append("No changes.")
        lines.append("")

    for title, headers, rows in sections:
        if not rows:
            continue
        lines.append(f"## {title}")
        lines.append("")
        lines.append(format_markdown_table(headers, rows))

    return "\n".join(lines).rstrip("\n") + "\n"
