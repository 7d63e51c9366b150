"""Terminal loop feeding key presses to a :class:`SessionEngine`."""

from __future__ import annotations

import logging
from typing import Callable, Optional

import click
from rich.console import Console
from rich.markup import escape

from . import actions
from .engine import SessionEngine
from .keys import action_for_key
from .render import display_name, render

LOGGER = logging.getLogger(__name__)

KeyReader = Callable[[], str]


def run_interactive(
    engine: SessionEngine,
    console: Optional[Console] = None,
    *,
    read_key: KeyReader = click.getchar,
) -> None:
    """Render the current screen and dispatch keys until the session quits.

    Ctrl-C is treated like the quit key of the current screen, so leaving from
    classification still saves the state.

    Args:
        engine: Engine to drive.
        console: Output console; a fresh one is created when omitted.
        read_key: Blocking key reader returning one key press.
    """
    console = console or Console()
    error = engine.error
    while True:
        console.clear()
        console.print(render(engine.screen, error), highlight=False)

        try:
            key = read_key()
        except (KeyboardInterrupt, EOFError):
            key = None

        action = actions.QUIT if key is None else action_for_key(engine.screen, key)
        if action is None:
            error = None
            continue

        step = engine.dispatch(action)
        error = step.error
        if step.quit:
            LOGGER.info("Session ended on %s", type(step.screen).__name__)
            break

    if error:
        console.print(f"[bold red]Error:[/bold red] {escape(display_name(error))}", highlight=False)


__all__ = ["run_interactive"]
