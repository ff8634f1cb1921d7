"""
Main CLI entry point for tcsetup.

Provides the command-line interface using Click:

    tcsetup merge EXISTING OVERLAY    # merge an overlay into a config file
    tcsetup validate FILE...          # check that files parse
    tcsetup config show               # show effective settings
"""

import json as _json
import logging as _logging
import os as _os
import pathlib as _pathlib
import shutil as _shutil
import sys as _sys
import typing as _typing

import click as _click
import pydantic as _pydantic
import rich.console as _rich_console
import rich.syntax as _rich_syntax
import yaml as _yaml

import tcsetup
import tcsetup.config as config
import tcsetup.report as report
import tcsetup.yaml_merge as yaml_merge

# Custom Click context settings for better help formatting
CONTEXT_SETTINGS: dict[str, _typing.Any] = {
    "help_option_names": ["-h", "--help"],
    "max_content_width": 100,
}

_LOG_FORMAT = "%(levelname)s %(name)s: %(message)s"

_log_handler: _logging.Handler | None = None


def _configure_logging(level: str) -> None:
    """Send tcsetup log records at `level` and above to the current stderr."""
    global _log_handler

    logger = _logging.getLogger("tcsetup")
    logger.setLevel(level)
    # Replace the handler from a previous invocation, whose stream may be gone
    if _log_handler is not None:
        logger.removeHandler(_log_handler)
    _log_handler = _logging.StreamHandler(_sys.stderr)
    _log_handler.setFormatter(_logging.Formatter(_LOG_FORMAT))
    logger.addHandler(_log_handler)


def _load_settings() -> config.Settings:
    """Load settings, turning config errors into a CLI error."""
    try:
        return config.Settings()
    except config.ConfigFileError as e:
        raise _click.ClickException(str(e)) from e
    except _pydantic.ValidationError as e:
        raise _click.ClickException(f"Invalid configuration:\n{e}") from e


def _should_use_color() -> bool:
    """Color only when writing to a terminal and NO_COLOR is unset."""
    if _os.environ.get("NO_COLOR") is not None:
        return False
    return _sys.stdout.isatty()


def _print_yaml(yaml_text: str) -> None:
    """Print YAML text, with syntax highlighting on a terminal."""
    if not _should_use_color():
        _click.echo(yaml_text)
        return

    console = _rich_console.Console()
    syntax = _rich_syntax.Syntax(
        yaml_text,
        "yaml",
        theme="monokai",
        background_color="default",
    )
    console.print(syntax)


def _read_text(path: _pathlib.Path, encoding: str) -> str:
    try:
        return path.read_text(encoding=encoding)
    except UnicodeDecodeError as e:
        raise _click.ClickException(f"{path}: not valid {encoding} text") from e
    except OSError as e:
        raise _click.ClickException(f"Cannot read {path}: {e}") from e


def _write_text(path: _pathlib.Path, text: str, encoding: str) -> None:
    try:
        path.write_text(text, encoding=encoding)
    except OSError as e:
        raise _click.ClickException(f"Cannot write {path}: {e}") from e


@_click.group(context_settings=CONTEXT_SETTINGS)
@_click.version_option(tcsetup.__version__, "-v", "--version", prog_name="tcsetup")
@_click.option(
    "--verbose",
    is_flag=True,
    help="Enable debug logging",
)
@_click.pass_context
def cli(ctx: _click.Context, verbose: bool) -> None:
    """
    tcsetup - merge configuration overlays without losing content.

    Keys only in the existing file are kept, new keys are added, nested
    sections merge recursively and lists are combined without duplicates.

    \b
    Examples:
        tcsetup merge agent.yaml overlay.yaml            # Merge in place
        tcsetup merge agent.yaml overlay.yaml --dry-run  # Preview only
        tcsetup validate agent.yaml                      # Check syntax
        tcsetup config show                              # Show settings
    """
    settings = _load_settings()
    _configure_logging("DEBUG" if verbose else settings.logging.level)

    ctx.ensure_object(dict)
    ctx.obj["settings"] = settings


# =============================================================================
# merge
# =============================================================================


@cli.command()
@_click.argument("existing", type=_click.Path(dir_okay=False, path_type=_pathlib.Path))
@_click.argument(
    "overlay",
    type=_click.Path(exists=True, dir_okay=False, path_type=_pathlib.Path),
)
@_click.option(
    "-o",
    "--output",
    type=_click.Path(dir_okay=False, path_type=_pathlib.Path),
    default=None,
    help="Write the merged document here instead of EXISTING",
)
@_click.option("--dry-run", is_flag=True, help="Print the merged document without writing")
@_click.option("--json", "json_output", is_flag=True, help="Print the result as JSON")
@_click.option(
    "--report",
    "report_path",
    type=_click.Path(dir_okay=False, path_type=_pathlib.Path),
    default=None,
    help="Write a markdown changelog report",
)
@_click.option(
    "--backup/--no-backup",
    default=None,
    help="Copy the output file aside before overwriting it (default from config)",
)
@_click.pass_context
def merge(
    ctx: _click.Context,
    existing: _pathlib.Path,
    overlay: _pathlib.Path,
    output: _pathlib.Path | None,
    dry_run: bool,
    json_output: bool,
    report_path: _pathlib.Path | None,
    backup: bool | None,
) -> None:
    """Merge OVERLAY into EXISTING.

    A missing EXISTING file is treated as an empty document. On failure
    nothing is written and the exit status is 1.

    \b
    Examples:
        tcsetup merge agent.yaml overlay.yaml
        tcsetup merge agent.yaml overlay.yaml -o merged.yaml
        tcsetup merge agent.yaml overlay.yaml --json --report changes.md
    """
    settings: config.Settings = ctx.obj["settings"]
    encoding = settings.merge.encoding
    target = output if output is not None else existing

    existing_text = _read_text(existing, encoding) if existing.exists() else ""
    overlay_text = _read_text(overlay, encoding)

    result = yaml_merge.merge_documents(existing_text, overlay_text)
    text = result.to_text() if result.success else ""

    if report_path is not None:
        _write_text(report_path, report.render_merge_report(result, str(existing), str(overlay)), "utf-8")

    if json_output:
        _click.echo(_json.dumps(result.to_dict(), indent=2))
    else:
        for warning in result.warnings:
            _click.echo(f"Warning: {warning}", err=True)

    if not result.success:
        if not json_output:
            for error in result.errors:
                _click.echo(f"Error: {error}", err=True)
        raise SystemExit(1)

    if dry_run:
        if not json_output:
            _print_yaml(text)
        return

    if settings.merge.trailing_newline and text:
        text += "\n"

    if (backup if backup is not None else settings.merge.backup) and target.exists():
        backup_path = target.with_name(target.name + settings.merge.backup_suffix)
        try:
            _shutil.copy2(target, backup_path)
        except OSError as e:
            raise _click.ClickException(f"Cannot back up {target}: {e}") from e
        if not json_output:
            _click.echo(f"Backed up {target} to {backup_path}")

    _write_text(target, text, encoding)

    if not json_output:
        changes = result.changelog
        _click.echo(
            f"Merged {overlay} into {target}: {len(changes.added)} added, "
            f"{sum(record.count for record in changes.deduplicated)} duplicates skipped, "
            f"{len(changes.merged)} sections merged"
        )


# =============================================================================
# validate
# =============================================================================


@cli.command()
@_click.argument(
    "files",
    nargs=-1,
    required=True,
    type=_click.Path(exists=True, dir_okay=False, path_type=_pathlib.Path),
)
@_click.option("--json", "json_output", is_flag=True, help="Print results as JSON")
@_click.pass_context
def validate(ctx: _click.Context, files: tuple[_pathlib.Path, ...], json_output: bool) -> None:
    """Check that each FILE parses.

    Exits with status 1 if any file is invalid.
    """
    settings: config.Settings = ctx.obj["settings"]

    reports: dict[str, yaml_merge.ValidationReport] = {}
    for path in files:
        reports[str(path)] = yaml_merge.validate_document(_read_text(path, settings.merge.encoding))

    if json_output:
        _click.echo(_json.dumps({name: r.to_dict() for name, r in reports.items()}, indent=2))
    else:
        for name, r in reports.items():
            if r.valid:
                _click.echo(f"✓ {name}")
            else:
                _click.echo(f"✗ {name}: {'; '.join(r.errors)}")

    if not all(r.valid for r in reports.values()):
        raise SystemExit(1)


# =============================================================================
# config
# =============================================================================


@cli.group(invoke_without_command=True)
@_click.option("--json", "as_json", is_flag=True, help="Output as JSON")
@_click.pass_context
def config_cmd(ctx: _click.Context, as_json: bool) -> None:
    """Configuration commands.

    Without a subcommand, shows the effective configuration.
    """
    if ctx.invoked_subcommand is None:
        _show_settings(ctx.obj["settings"], as_json=as_json)


# Register config_cmd with the name "config" to avoid shadowing the module
cli.add_command(config_cmd, name="config")


@config_cmd.command(name="show")
@_click.option("--json", "as_json", is_flag=True, help="Output as JSON")
@_click.pass_context
def config_show(ctx: _click.Context, as_json: bool) -> None:
    """Show effective configuration from all sources.

    \b
    Examples:
        tcsetup config show          # YAML (colorized on a terminal)
        tcsetup config show --json   # JSON
    """
    _show_settings(ctx.obj["settings"], as_json=as_json)


def _show_settings(settings: config.Settings, *, as_json: bool) -> None:
    data = settings.to_dict()
    if as_json:
        _click.echo(_json.dumps(data, indent=2))
        return
    _print_yaml(_yaml.safe_dump(data, default_flow_style=False, sort_keys=False).rstrip("\n"))


def main() -> None:
    """Main entry point with correct program name."""
    cli(prog_name="tcsetup")


if __name__ == "__main__":
    main()
