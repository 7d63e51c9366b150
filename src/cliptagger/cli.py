"""Command line interface for cliptagger."""

from __future__ import annotations

import difflib
import functools
from pathlib import Path
from typing import Any, Optional

import click
import yaml
from rich.console import Console
from rich.markup import escape
from rich.syntax import Syntax
from rich.table import Table

from cliptagger.config import ClipTaggerConfig, ConfigError, ConfigManager, resolve_with_precedence
from cliptagger.config.resolver import assign_path
from cliptagger.ingestion import ScanError
from cliptagger.logging_config import configure_logging
from cliptagger.organization import RenamePlanner, detect_change_type, detect_conflicts
from cliptagger.preview import open_file
from cliptagger.session import display_name, prepare_session, run_interactive
from cliptagger.state import SessionState, SortBy, StateError, StateRepository
from cliptagger.state.merger import clean_missing_files

console = Console()

SORT_CHOICES = {
    "name": SortBy.NAME,
    "modified": SortBy.MODIFIED_TIME,
    "created": SortBy.CREATED_TIME,
}


def _emit(message: Any, *, quiet: bool) -> None:
    if not quiet:
        console.print(message)


def _load_config() -> ClipTaggerConfig:
    try:
        return ConfigManager().load()
    except ConfigError as exc:
        raise click.ClickException(str(exc)) from exc


def _load_or_create_state(
    repository: StateRepository,
    directory: Path,
    *,
    sort_by: Optional[SortBy],
    default_sort: SortBy,
) -> tuple[SessionState, bool]:
    """Return the session for ``directory`` and whether it was resumed.

    Raises:
        click.ClickException: If an existing sidecar cannot be read.
    """
    if not repository.exists(directory):
        return SessionState.new(str(directory), sort_by or default_sort), False

    try:
        state = repository.load(directory)
    except StateError as exc:
        raise click.ClickException(f"Error loading state: {exc}") from exc
    if sort_by is not None:
        state.sort_by = sort_by
    state.directory = str(directory)
    return state, True


def _preview_payload(state: SessionState) -> dict[str, Any]:
    renames = RenamePlanner().build_plan(state)
    conflicts = detect_conflicts(renames)
    return {
        "directory": display_name(state.directory),
        "total": len(renames),
        "renames": [
            {
                "source": display_name(rename.source.name),
                "destination": display_name(rename.destination.name),
                "change": detect_change_type(rename.source, rename.destination),
            }
            for rename in renames
            if not rename.is_noop
        ],
        "conflicts": [
            {
                "source": display_name(rename.source.name),
                "destination": display_name(rename.destination.name),
            }
            for rename in conflicts
        ],
    }


def _show_preview(state: SessionState, *, json_output: bool) -> None:
    """Print the rename plan for ``state`` without touching any file."""
    payload = _preview_payload(state)
    if json_output:
        console.print_json(data=payload)
        return

    if not state.classifications:
        console.print("No classifications to preview")
        return

    table = Table(title=f"Rename preview for {escape(payload['directory'])}")
    table.add_column("Original")
    table.add_column("New")
    table.add_column("Change")
    for entry in payload["renames"]:
        table.add_row(escape(entry["source"]), escape(entry["destination"]), entry["change"])
    console.print(f"Total files to rename: {payload['total']}")
    console.print(table)

    if payload["conflicts"]:
        console.print(
            f"[yellow]Warning: {len(payload['conflicts'])} file(s) would overwrite existing "
            "files:[/yellow]"
        )
        for conflict in payload["conflicts"]:
            console.print(
                f"  {escape(conflict['source'])} -> {escape(conflict['destination'])} (CONFLICT)"
            )
    console.print("Run without --preview to apply these renames.")


@click.group(context_settings={"help_option_names": ["-h", "--help"]})
@click.version_option(package_name="cliptagger")
def cli() -> None:
    """Classify video clips into ordered groups and rename them by group and take."""


@cli.command()
@click.argument("directory", type=click.Path(exists=True, file_okay=False, path_type=Path))
@click.option(
    "--sort-by",
    type=click.Choice(sorted(SORT_CHOICES)),
    help="Order files by name, modified time or created time.",
)
@click.option("--reset", is_flag=True, help="Delete the saved session and start over.")
@click.option(
    "--clean-missing",
    is_flag=True,
    help="Remove classifications for files that no longer exist.",
)
@click.option("--preview", "preview_only", is_flag=True, help="Show planned renames and exit.")
@click.option("--json", "json_output", is_flag=True, help="Emit the preview as JSON.")
@click.option("--quiet", is_flag=True, help="Suppress non-error output.")
def tag(
    directory: Path,
    sort_by: Optional[str],
    reset: bool,
    clean_missing: bool,
    preview_only: bool,
    json_output: bool,
    quiet: bool,
) -> None:
    """Classify the video files in DIRECTORY interactively.

    Args:
        directory: Folder holding the clips and the session sidecar.
        sort_by: Optional sort order overriding the saved one.
        reset: Delete the sidecar before anything else.
        clean_missing: Drop classifications whose file is gone.
        preview_only: Print the rename plan instead of starting a session.
        json_output: Emit the preview as JSON.
        quiet: Suppress informational messages.

    Raises:
        click.ClickException: If the session cannot be loaded, saved or scanned.
    """
    settings = _load_config()
    quiet = quiet or settings.cli.quiet_default or json_output
    configure_logging(settings.logging)

    directory = directory.resolve()
    repository = StateRepository(settings.session.state_filename)

    if reset:
        try:
            repository.reset(directory)
        except StateError as exc:
            raise click.ClickException(f"Error deleting state file: {exc}") from exc
        _emit("State reset successfully", quiet=quiet)
        if not clean_missing and not preview_only:
            return

    state, resuming = _load_or_create_state(
        repository,
        directory,
        sort_by=SORT_CHOICES[sort_by] if sort_by else None,
        default_sort=settings.session.sort_by,
    )

    if clean_missing:
        cleaned = clean_missing_files(state)
        _emit(f"Cleaned {cleaned} missing file(s) from state", quiet=quiet)
        if cleaned:
            try:
                repository.save(directory, state)
            except StateError as exc:
                raise click.ClickException(f"Error saving state: {exc}") from exc
        if not preview_only:
            return

    if preview_only:
        _show_preview(state, json_output=json_output)
        return

    if resuming and settings.session.backup_on_resume:
        try:
            repository.backup(directory)
        except StateError as exc:
            raise click.ClickException(f"Error backing up state: {exc}") from exc

    try:
        engine = prepare_session(
            state,
            directory,
            repository=repository,
            autosave_interval=settings.session.autosave_interval,
            opener=functools.partial(open_file, command=settings.preview.command),
            output_dir_prefix=settings.session.output_dir_prefix,
        )
    except ScanError as exc:
        raise click.ClickException(str(exc)) from exc

    run_interactive(engine, console)


@cli.group()
def config() -> None:
    """Manage cliptagger configuration files and overrides."""


@config.command("view")
@click.option("--no-env", is_flag=True, help="Ignore environment overrides when displaying output.")
def config_view(no_env: bool) -> None:
    """Display the effective configuration after applying precedence rules.

    Raises:
        click.ClickException: If configuration cannot be loaded.
    """
    manager = ConfigManager()
    try:
        resolved = manager.load(include_env=not no_env)
    except ConfigError as exc:
        raise click.ClickException(str(exc)) from exc

    yaml_text = yaml.safe_dump(resolved.model_dump(mode="json"), sort_keys=False)
    console.print(Syntax(yaml_text, "yaml", word_wrap=True))


@config.command("set")
@click.argument("key")
@click.option("--value", required=True, help="Value to assign to KEY.")
def config_set(key: str, value: str) -> None:
    """Persist a configuration value expressed as a dotted KEY.

    Args:
        key: Dotted path such as ``session.autosave_interval``.
        value: YAML-literal value to write.

    Raises:
        click.ClickException: If parsing, assignment, or validation fails.
    """
    manager = ConfigManager()
    manager.ensure_exists()

    before = manager.read_text().splitlines()
    segments = [segment.strip() for segment in key.split(".") if segment.strip()]
    if not segments:
        raise click.ClickException(
            "KEY must specify a dotted path such as 'session.autosave_interval'."
        )

    try:
        parsed_value = yaml.safe_load(value)
        file_data = manager.load_file_overrides()
        assign_path(file_data, segments, parsed_value, source_name="cli")
        resolve_with_precedence(defaults=ClipTaggerConfig(), file_overrides=file_data)
    except yaml.YAMLError as exc:
        raise click.ClickException(f"Unable to parse value: {exc}") from exc
    except ConfigError as exc:
        raise click.ClickException(str(exc)) from exc

    manager.save(file_data)
    after = manager.read_text().splitlines()

    diff = [
        line
        for line in difflib.unified_diff(
            before,
            after,
            fromfile="config.yaml (before)",
            tofile="config.yaml (after)",
            lineterm="",
        )
        if not line.startswith(("-# Last updated", "+# Last updated"))
    ]

    if not any(line.startswith(("-", "+")) and not line.startswith(("---", "+++")) for line in diff):
        console.print("[yellow]No changes applied; value already up to date.[/yellow]")
        return

    console.print(Syntax("\n".join(diff), "diff", word_wrap=False))
    console.print(f"[green]Updated {'.'.join(segments)}.[/green]")


@config.command("edit")
def config_edit() -> None:
    """Open the configuration file in an editor and validate the result.

    Raises:
        click.ClickException: If edited content is invalid.
    """
    manager = ConfigManager()
    manager.ensure_exists()

    original = manager.read_text()
    edited = click.edit(original, extension=".yaml")

    if edited is None:
        console.print("[yellow]Edit cancelled; no changes applied.[/yellow]")
        return

    if edited == original:
        console.print("[yellow]No changes detected.[/yellow]")
        return

    try:
        parsed = yaml.safe_load(edited) or {}
    except yaml.YAMLError as exc:
        raise click.ClickException(f"Invalid YAML: {exc}") from exc

    if not isinstance(parsed, dict):
        raise click.ClickException("Configuration file must contain a top-level mapping.")

    try:
        resolve_with_precedence(defaults=ClipTaggerConfig(), file_overrides=parsed)
    except ConfigError as exc:
        raise click.ClickException(str(exc)) from exc

    manager.save(parsed)
    console.print("[green]Configuration updated successfully.[/green]")


def main() -> None:
    """Console script entry point."""
    cli()


if __name__ == "__main__":
    main()
