"""Session state machine driving the classification workflow."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime
from pathlib import Path
from typing import Callable, Optional, Sequence

from cliptagger.ingestion.discovery import DirectoryScanner
from cliptagger.organization.executor import OperationExecutor
from cliptagger.organization.models import ExecutionMode, RenameOperation
from cliptagger.organization.planner import (
    RenamePlanner,
    detect_change_type,
    detect_conflicts,
    generate_filename,
)
from cliptagger.preview import PreviewError, open_file
from cliptagger.state import StateError, StateRepository
from cliptagger.state.merger import MergeResult, merge_files, repair_renamed_files
from cliptagger.state.models import SessionState

from .actions import Action, ActionKind
from .screens import (
    EXECUTION_MODES,
    ClassificationScreen,
    CompleteScreen,
    GroupInsertionScreen,
    GroupSelectionScreen,
    InsertionStep,
    ReviewItem,
    ReviewScreen,
    Screen,
    StartupScreen,
    clean_group_name,
)

DEFAULT_AUTOSAVE_INTERVAL = 5
DEFAULT_OUTPUT_DIR_PREFIX = "renamed_"

LOGGER = logging.getLogger(__name__)

Opener = Callable[[Path], None]


@dataclass(slots=True)
class StepResult:
    """Outcome of dispatching one action.

    Attributes:
        screen: Screen the machine is on after the action.
        quit: Whether the caller should end the session.
        error: Message to display, if the action hit a problem.
    """

    screen: Screen
    quit: bool = False
    error: Optional[str] = None


class SessionEngine:
    """Sequence the classification workflow over a list of files.

    The engine owns the cursor into ``files`` and mutates ``state`` in response
    to one action at a time. It never raises out of :meth:`dispatch`: failures
    are attached to the returned :class:`StepResult` instead.

    State is saved after every group selection or insertion, whenever the
    machine leaves the classification screen, and after every
    ``autosave_interval`` same-as-previous or skip actions.
    """

    def __init__(
        self,
        state: SessionState,
        files: Sequence[str],
        *,
        directory: Path | None = None,
        repository: StateRepository | None = None,
        autosave_interval: int = DEFAULT_AUTOSAVE_INTERVAL,
        opener: Opener = open_file,
        executor: OperationExecutor | None = None,
        output_dir_prefix: str = DEFAULT_OUTPUT_DIR_PREFIX,
        startup: StartupScreen | None = None,
    ) -> None:
        self.state = state
        self.files = list(files)
        self.directory = Path(directory if directory is not None else state.directory)
        self.repository = repository
        self.autosave_interval = max(1, autosave_interval)
        self._opener = opener
        self._executor = executor or OperationExecutor()
        self._planner = RenamePlanner()
        self._output_dir_prefix = output_dir_prefix
        self._cursor = min(max(state.current_index, 0), len(self.files))
        self._last_group_id: Optional[str] = None
        self._actions_since_save = 0
        self._error: Optional[str] = None
        self._screen: Screen = startup or build_startup_screen(state, self.files)

    # ------------------------------------------------------------------ #
    # Public API                                                         #
    # ------------------------------------------------------------------ #

    @property
    def screen(self) -> Screen:
        return self._screen

    @property
    def cursor(self) -> int:
        return self._cursor

    @property
    def error(self) -> Optional[str]:
        return self._error

    @property
    def current_file(self) -> Optional[str]:
        if 0 <= self._cursor < len(self.files):
            return self.files[self._cursor]
        return None

    def dispatch(self, action: Action) -> StepResult:
        """Apply ``action`` to the current screen and return the new state."""
        self._error = None
        screen = self._screen
        if isinstance(screen, StartupScreen):
            quit_requested = self._on_startup(action)
        elif isinstance(screen, ClassificationScreen):
            quit_requested = self._on_classification(screen, action)
        elif isinstance(screen, GroupSelectionScreen):
            quit_requested = self._on_group_selection(screen, action)
        elif isinstance(screen, GroupInsertionScreen):
            quit_requested = self._on_group_insertion(screen, action)
        elif isinstance(screen, ReviewScreen):
            quit_requested = self._on_review(screen, action)
        else:
            quit_requested = self._on_complete(screen, action)
        return StepResult(screen=self._screen, quit=quit_requested, error=self._error)

    def save(self) -> bool:
        """Persist the state now; failures are kept as the current error.

        Returns:
            bool: True when the state was written (or there is no repository).
        """
        if self.repository is None:
            return True
        try:
            self.repository.save(self.directory, self.state)
        except StateError as exc:
            LOGGER.warning("Autosave failed: %s", exc)
            self._error = f"Failed to save state: {exc}"
            return False
        return True

    # ------------------------------------------------------------------ #
    # Screen handlers                                                    #
    # ------------------------------------------------------------------ #

    def _on_startup(self, action: Action) -> bool:
        if action.kind is ActionKind.QUIT:
            return True
        if action.kind is ActionKind.CONFIRM:
            self._cursor = min(max(self.state.current_index, 0), len(self.files))
            self._seek_unclassified()
            self.state.current_index = self._cursor
            self._show_cursor()
        return False

    def _on_classification(self, screen: ClassificationScreen, action: Action) -> bool:
        kind = action.kind
        if kind is ActionKind.QUIT:
            self.save()
            return True

        current = self.current_file
        if current is None:
            return False

        if kind is ActionKind.SAME_AS_PREVIOUS:
            group_id = screen.previous_group_id
            if group_id is None or self.state.find_group_by_id(group_id) is None:
                return False
            self._classify_current(group_id)
            self._after_quick_action()
        elif kind is ActionKind.SKIP:
            self.state.skip_file(current)
            self._after_quick_action()
        elif kind is ActionKind.OPEN_GROUP_PICKER:
            self.save()
            self._screen = GroupSelectionScreen(current_file=current, groups=list(self.state.groups))
        elif kind is ActionKind.OPEN_GROUP_CREATOR:
            self.save()
            self._screen = GroupInsertionScreen(
                current_file=current, existing_groups=list(self.state.groups)
            )
        elif kind is ActionKind.PREVIEW:
            try:
                self._opener(screen.file_path)
            except PreviewError as exc:
                self._error = f"Failed to preview file: {exc}"
        return False

    def _on_group_selection(self, screen: GroupSelectionScreen, action: Action) -> bool:
        kind = action.kind
        if kind is ActionKind.QUIT:
            return True
        if kind is ActionKind.CANCEL:
            self._show_cursor()
        elif kind is ActionKind.UP:
            screen.cursor.up()
        elif kind is ActionKind.DOWN:
            screen.cursor.down(len(screen.filtered))
        elif kind is ActionKind.TYPE:
            screen.type_text(action.text or "")
        elif kind is ActionKind.BACKSPACE:
            screen.backspace()
        elif kind is ActionKind.CONFIRM:
            group = screen.highlighted
            if group is not None:
                self._assign_existing_group(group.id)
        elif kind is ActionKind.PICK_GROUP and action.group_id:
            self._assign_existing_group(action.group_id)
        return False

    def _on_group_insertion(self, screen: GroupInsertionScreen, action: Action) -> bool:
        kind = action.kind
        if kind is ActionKind.QUIT:
            return True
        if kind is ActionKind.CREATE_GROUP:
            name = (action.text or "").strip()
            if name:
                slot = min(max(action.position or 0, 0), len(self.state.groups))
                self._create_group(name, slot + 1)
            return False

        if screen.step is InsertionStep.NAME_ENTRY:
            if kind is ActionKind.CANCEL:
                self._show_cursor()
            elif kind is ActionKind.TYPE:
                screen.type_text(action.text or "")
            elif kind is ActionKind.BACKSPACE:
                screen.backspace()
            elif kind is ActionKind.CONFIRM:
                screen.begin_position_selection()
            return False

        if kind is ActionKind.CANCEL:
            screen.step = InsertionStep.NAME_ENTRY
        elif kind is ActionKind.UP:
            screen.up()
        elif kind is ActionKind.DOWN:
            screen.down()
        elif kind is ActionKind.CONFIRM:
            self._create_group(screen.group_name.strip(), screen.selected_position + 1)
        return False

    def _on_review(self, screen: ReviewScreen, action: Action) -> bool:
        kind = action.kind
        if kind is ActionKind.QUIT:
            return True
        if kind is ActionKind.UP:
            screen.cursor.up()
        elif kind is ActionKind.DOWN:
            screen.cursor.down(len(screen.items))
        elif kind is ActionKind.CONFIRM:
            self._screen = self._complete_screen()
        elif kind is ActionKind.CANCEL:
            if not self.files:
                self._error = "No video files to classify."
                return False
            self._cursor = 0
            self.state.current_index = 0
            self._screen = self._classification_screen()
        return False

    def _on_complete(self, screen: CompleteScreen, action: Action) -> bool:
        if screen.result is not None:
            return True

        kind = action.kind
        if kind is ActionKind.QUIT:
            return True
        if kind is ActionKind.CANCEL:
            self._screen = self._review_screen()
        elif kind in (ActionKind.UP, ActionKind.DOWN):
            index = EXECUTION_MODES.index(screen.selected_mode)
            index += -1 if kind is ActionKind.UP else 1
            screen.selected_mode = EXECUTION_MODES[min(max(index, 0), len(EXECUTION_MODES) - 1)]
        elif kind is ActionKind.SELECT_MODE and action.mode is not None:
            screen.selected_mode = action.mode
        elif kind is ActionKind.CONFIRM:
            self._execute(screen, screen.selected_mode)
        elif kind is ActionKind.EXECUTE:
            self._execute(screen, action.mode or screen.selected_mode)
        return False

    # ------------------------------------------------------------------ #
    # Helpers                                                            #
    # ------------------------------------------------------------------ #

    def _classify_current(self, group_id: str) -> None:
        current = self.current_file
        if current is None:
            return
        self.state.add_or_update_classification(current, group_id)
        self._last_group_id = group_id

    def _after_quick_action(self) -> None:
        self._actions_since_save += 1
        periodic = self._actions_since_save >= self.autosave_interval
        left_classification = not self._advance()
        if periodic or left_classification:
            self.save()
        if periodic:
            self._actions_since_save = 0

    def _assign_existing_group(self, group_id: str) -> None:
        if self.state.find_group_by_id(group_id) is None or self.current_file is None:
            return
        self._classify_current(group_id)
        self._advance()
        self.save()

    def _create_group(self, name: str, order: int) -> None:
        name = clean_group_name(name).strip()
        if not name or self.current_file is None:
            return
        group = self.state.new_group(name, order)
        self.state.insert_group_at_position(group, order)
        self._classify_current(group.id)
        self._advance()
        self.save()

    def _advance(self) -> bool:
        """Move past the current file and any classified ones after it.

        Returns:
            bool: False when the end of the list was reached (now on Review).
        """
        self._cursor += 1
        has_next = self._seek_unclassified()
        self.state.current_index = self._cursor
        self._show_cursor()
        return has_next

    def _seek_unclassified(self) -> bool:
        while self._cursor < len(self.files) and self.state.is_classified(self.files[self._cursor]):
            self._cursor += 1
        return self._cursor < len(self.files)

    def _show_cursor(self) -> None:
        if self._cursor < len(self.files):
            self._screen = self._classification_screen()
        else:
            self._screen = self._review_screen()

    def _previous_group_id(self) -> Optional[str]:
        if self._last_group_id and self.state.find_group_by_id(self._last_group_id):
            return self._last_group_id
        for index in range(min(self._cursor, len(self.files)) - 1, -1, -1):
            classification = self.state.get_classification(self.files[index])
            if classification is not None:
                if self.state.find_group_by_id(classification.group_id) is None:
                    return None
                return classification.group_id
        return None

    def _classification_screen(self) -> ClassificationScreen:
        name = self.files[self._cursor]
        previous_id = self._previous_group_id()
        previous = self.state.find_group_by_id(previous_id) if previous_id else None

        classified_as = None
        existing = self.state.get_classification(name)
        if existing is not None:
            group = self.state.find_group_by_id(existing.group_id)
            classified_as = group.name if group else None

        return ClassificationScreen(
            current_file=name,
            position=self._cursor + 1,
            total_files=len(self.files),
            file_path=self.directory / name,
            previous_group_id=previous.id if previous else None,
            previous_group_name=previous.name if previous else None,
            classified_as=classified_as,
        )

    def _review_screen(self) -> ReviewScreen:
        items: list[ReviewItem] = []
        for classification in self.state.classifications:
            group = self.state.find_group_by_id(classification.group_id)
            if group is None:
                continue
            new_name = generate_filename(
                group.order,
                classification.take_number,
                group.name,
                Path(classification.file).suffix,
            )
            items.append(
                ReviewItem(
                    original_name=classification.file,
                    new_name=new_name,
                    change_type=detect_change_type(classification.file, new_name),
                )
            )
        for name in self.state.skipped:
            items.append(ReviewItem(original_name=name, new_name=name, skipped=True))

        return ReviewScreen(
            classified_count=len(self.state.classifications),
            skipped_count=len(self.state.skipped),
            items=items,
        )

    def _complete_screen(self) -> CompleteScreen:
        renames = self._planner.build_plan(self.state)
        stamp = datetime.now().strftime("%Y-%m-%d_%H-%M-%S")
        return CompleteScreen(
            renames=renames,
            conflicts=detect_conflicts(renames),
            collisions=self._planner.find_collisions(renames),
            output_directory=self.directory / f"{self._output_dir_prefix}{stamp}",
        )

    def _execute(self, screen: CompleteScreen, mode: ExecutionMode) -> None:
        screen.selected_mode = mode
        output_dir = screen.output_directory if mode is ExecutionMode.COPY_TO_DIRECTORY else None
        result, applied = self._executor.execute(screen.renames, mode, output_dir=output_dir)
        screen.result = result
        if mode is ExecutionMode.RENAME_IN_PLACE and applied:
            self._record_renames(applied)
            self.save()

    def _record_renames(self, applied: Sequence[RenameOperation]) -> None:
        renamed = {operation.source.name: operation.destination.name for operation in applied}
        for classification in self.state.classifications:
            new_name = renamed.get(classification.file)
            if new_name is not None:
                classification.file = new_name


def build_startup_screen(
    state: SessionState,
    files: Sequence[str],
    merge: MergeResult | None = None,
    repaired: int = 0,
) -> StartupScreen:
    """Summarize a session for the startup screen."""
    is_resume = bool(state.classifications)
    if merge is not None:
        remaining = len(merge.new_files)
    else:
        remaining = sum(1 for name in files if not state.is_classified(name))
    return StartupScreen(
        is_resume=is_resume,
        classified_count=len(state.classifications),
        remaining_count=remaining,
        total_files=len(files),
        sort_by=state.sort_by,
        new_files_count=len(merge.new_files) if merge else 0,
        missing_files_count=len(merge.missing_files) if merge else 0,
        repaired_count=repaired,
    )


def prepare_session(
    state: SessionState,
    directory: Path,
    *,
    repository: StateRepository | None = None,
    scanner: DirectoryScanner | None = None,
    autosave_interval: int = DEFAULT_AUTOSAVE_INTERVAL,
    opener: Opener = open_file,
    output_dir_prefix: str = DEFAULT_OUTPUT_DIR_PREFIX,
) -> SessionEngine:
    """Scan ``directory``, reconcile a resumed ``state`` and build the engine.

    Resumed sessions first have renamed files repaired, then are merged with
    the scan so the startup screen can report new and missing files.

    Raises:
        ScanError: If the directory cannot be listed.
    """
    scanner = scanner or DirectoryScanner(state.sort_by)
    files = scanner.scan_names(directory)

    merge: MergeResult | None = None
    repaired = 0
    if state.classifications:
        repaired = repair_renamed_files(state, files)
        merge = merge_files(state, files)
        LOGGER.info(
            "Resuming %s: %d new, %d missing, %d repaired",
            directory,
            len(merge.new_files),
            len(merge.missing_files),
            repaired,
        )

    engine = SessionEngine(
        state,
        files,
        directory=directory,
        repository=repository,
        autosave_interval=autosave_interval,
        opener=opener,
        output_dir_prefix=output_dir_prefix,
        startup=build_startup_screen(state, files, merge, repaired),
    )
    if repaired:
        engine.save()
    return engine


__all__ = [
    "DEFAULT_AUTOSAVE_INTERVAL",
    "SessionEngine",
    "StepResult",
    "build_startup_screen",
    "prepare_session",
]
