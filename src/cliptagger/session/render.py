"""Rich markup for each session screen."""

from __future__ import annotations

from typing import Optional

from rich.markup import escape

from cliptagger.organization.models import ExecutionMode
from cliptagger.state.models import SortBy

from .screens import (
    EXECUTION_MODES,
    ClassificationScreen,
    CompleteScreen,
    GroupInsertionScreen,
    GroupSelectionScreen,
    InsertionStep,
    ReviewScreen,
    Screen,
    StartupScreen,
)

_SORT_LABELS = {
    SortBy.NAME: "name",
    SortBy.MODIFIED_TIME: "modified time",
    SortBy.CREATED_TIME: "created time",
}


def display_name(text: str) -> str:
    """Return ``text`` printable, with undecodable filename bytes shown as U+FFFD."""
    return text.encode("utf-8", "surrogateescape").decode("utf-8", "replace")


def _safe(text: str) -> str:
    return escape(display_name(text))


def render(screen: Screen, error: Optional[str] = None) -> str:
    """Return the markup for ``screen`` with ``error`` appended when set."""
    if isinstance(screen, StartupScreen):
        lines = render_startup(screen)
    elif isinstance(screen, ClassificationScreen):
        lines = render_classification(screen)
    elif isinstance(screen, GroupSelectionScreen):
        lines = render_group_selection(screen)
    elif isinstance(screen, GroupInsertionScreen):
        lines = render_group_insertion(screen)
    elif isinstance(screen, ReviewScreen):
        lines = render_review(screen)
    else:
        lines = render_complete(screen)
    if error:
        lines.extend(["", f"[bold red]Error:[/bold red] {_safe(error)}"])
    return "\n".join(lines)


def render_startup(screen: StartupScreen) -> list[str]:
    lines = ["[bold]clip-tagger[/bold]", ""]
    if screen.is_resume:
        lines.append("Resuming previous session")
        lines.append(f"  Classified: {screen.classified_count}")
        lines.append(f"  Remaining: {screen.remaining_count}")
        if screen.new_files_count:
            lines.append(f"  [green]New files found: {screen.new_files_count}[/green]")
        if screen.missing_files_count:
            lines.append(f"  [yellow]Missing files: {screen.missing_files_count}[/yellow]")
        if screen.repaired_count:
            lines.append(f"  [cyan]Renamed files matched: {screen.repaired_count}[/cyan]")
    else:
        lines.append("Starting new session")
        lines.append(f"  Video files: {screen.total_files}")
    lines.append(f"  Sorted by: {_SORT_LABELS.get(screen.sort_by, screen.sort_by.value)}")
    lines.extend(["", "[dim]enter: start   q: quit[/dim]"])
    return lines


def render_classification(screen: ClassificationScreen) -> list[str]:
    lines = [
        f"[bold]File {screen.position} of {screen.total_files}[/bold]",
        "",
        f"  {_safe(screen.current_file)}",
    ]
    if screen.classified_as:
        lines.append(f"  [dim]Currently in: {_safe(screen.classified_as)}[/dim]")
    lines.append("")
    if screen.has_previous and screen.previous_group_name is not None:
        lines.append(f"  1  Same as previous ({_safe(screen.previous_group_name)})")
    else:
        lines.append("  [dim]1  Same as previous (none yet)[/dim]")
    lines.extend(
        [
            "  2  Choose existing group",
            "  3  New group",
            "  s  Skip",
            "  p  Preview",
            "",
            "[dim]q: save and quit[/dim]",
        ]
    )
    return lines


def render_group_selection(screen: GroupSelectionScreen) -> list[str]:
    lines = [
        f"[bold]Choose a group for[/bold] {_safe(screen.current_file)}",
        "",
        f"Filter: {_safe(screen.filter_text)}_",
        "",
    ]
    matches = screen.filtered
    if not matches:
        lines.append("  [dim]No matching groups[/dim]")
    window = screen.cursor.window(len(matches))
    if window.start > 0:
        lines.append("  [dim]...[/dim]")
    for index in window:
        group = matches[index]
        label = f"[{group.order:02d}] {group.name}"
        if index == screen.cursor.selected:
            lines.append(f"[reverse]> {_safe(label)}[/reverse]")
        else:
            lines.append(f"  {_safe(label)}")
    if window.stop < len(matches):
        lines.append("  [dim]...[/dim]")
    lines.extend(["", "[dim]enter: select   esc: back   type to filter[/dim]"])
    return lines


def render_group_insertion(screen: GroupInsertionScreen) -> list[str]:
    if screen.step is InsertionStep.NAME_ENTRY:
        return [
            f"[bold]New group for[/bold] {_safe(screen.current_file)}",
            "",
            f"Name: {_safe(screen.group_name)}_",
            "",
            "[dim]enter: choose position   esc: back[/dim]",
        ]

    lines = [f"[bold]Position for[/bold] {_safe(screen.group_name.strip())}", ""]
    for slot in range(len(screen.existing_groups) + 1):
        marker = "[reverse]> (insert here)[/reverse]" if slot == screen.selected_position else None
        if marker:
            lines.append(marker)
        if slot < len(screen.existing_groups):
            group = screen.existing_groups[slot]
            lines.append(f"  {_safe(f'[{group.order:02d}] {group.name}')}")
    lines.extend(["", "[dim]enter: create   esc: rename[/dim]"])
    return lines


def render_review(screen: ReviewScreen) -> list[str]:
    lines = [
        "[bold]Review[/bold]",
        f"  Classified: {screen.classified_count}   Skipped: {screen.skipped_count}",
        "",
    ]
    if not screen.items:
        lines.append("  [dim]Nothing to review[/dim]")
    window = screen.cursor.window(len(screen.items))
    for index in window:
        item = screen.items[index]
        prefix = ">" if index == screen.cursor.selected else " "
        if item.skipped:
            lines.append(f"{prefix} [dim]{_safe(item.original_name)} (skipped)[/dim]")
            continue
        suffix = f" [cyan]({item.change_type})[/cyan]" if item.change_type else ""
        lines.append(f"{prefix} {_safe(item.original_name)} -> {_safe(item.new_name)}{suffix}")
    if window.stop < len(screen.items):
        lines.append(f"  [dim]... {len(screen.items) - window.stop} more[/dim]")
    lines.extend(["", "[dim]enter: continue   esc: back to classification   q: quit[/dim]"])
    return lines


def render_complete(screen: CompleteScreen) -> list[str]:
    if screen.result is not None:
        return _render_result(screen)

    lines = ["[bold]Apply changes[/bold]", f"  {screen.pending_changes} file(s) to rename", ""]
    if screen.conflicts:
        lines.append(
            "[yellow]Warning: these targets already exist and may be overwritten:[/yellow]"
        )
        for rename in screen.conflicts:
            lines.append(f"  {_safe(rename.destination.name)}")
        lines.append("")
    if screen.collisions:
        lines.append("[yellow]Warning: several files map to the same name:[/yellow]")
        for name in sorted({rename.destination.name for rename in screen.collisions}):
            lines.append(f"  {_safe(name)}")
        lines.append("")
    for mode in EXECUTION_MODES:
        label = mode.label
        if mode is ExecutionMode.COPY_TO_DIRECTORY:
            label = f"{label} ({_safe(screen.output_directory.name)})"
        if mode is screen.selected_mode:
            lines.append(f"[reverse]> {label}[/reverse]")
        else:
            lines.append(f"  {label}")
    lines.extend(["", "[dim]enter: apply   esc: back to review   q: quit[/dim]"])
    return lines


def _render_result(screen: CompleteScreen) -> list[str]:
    result = screen.result
    assert result is not None
    if result.success:
        lines = [f"[green]{result.mode.label}: {result.files_changed} file(s) changed.[/green]"]
        if result.output_directory is not None:
            lines.append(f"  Output: {_safe(str(result.output_directory))}")
    else:
        lines = [
            f"[red]{result.mode.label} failed after {result.files_changed} file(s).[/red]",
            f"  {_safe(result.error or 'unknown error')}",
        ]
    lines.extend(["", "[dim]press any key to exit[/dim]"])
    return lines


__all__ = ["display_name", "render"]
