"""Rich terminal frontend, the picture puzzle without the pictures.

Each tile is shown by the number of the picture piece it carries, so the
goal is the familiar 1…N²−1 order.  A cursor picks the cell to activate.
"""

from __future__ import annotations

import os
import sys

import rich.box
from loguru import logger
from rich.align import Align
from rich.console import Console, Group
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from backend.engine.partitioner import ImageLoadError
from backend.engine.session import PuzzleSession, SessionView

log = logger.bind(component="app")

console = Console()

_CURSOR_STEPS = {
    "up": (-1, 0),
    "down": (1, 0),
    "left": (0, -1),
    "right": (0, 1),
}

_KEYS: dict[str, str] = {
    "w": "up",
    "s": "down",
    "a": "left",
    "d": "right",
    " ": "enter",
    "\r": "enter",
    "\n": "enter",
    "c": "complete",
    "i": "image",
    "n": "next",
    "r": "restart",
    "+": "grow",
    "=": "grow",
    "-": "shrink",
    "_": "shrink",
    "q": "quit",
    "\x03": "quit",  # Ctrl-C
}

# Last character of the ``ESC [ x`` sequences arrow keys send on Unix, and
# of the two-character codes msvcrt returns for them on Windows.
_ANSI_ARROWS = {"A": "up", "B": "down", "C": "right", "D": "left"}
_WIN_ARROWS = {"H": "up", "P": "down", "K": "left", "M": "right"}


# -- key input ----------------------------------------------------------------


def _read_key() -> str:
    """Block until a key is pressed and return the characters it sent."""
    if os.name == "nt":
        import msvcrt  # type: ignore[import-not-found]

        keys = msvcrt.getwch()
        if keys in ("\x00", "\xe0"):
            keys += msvcrt.getwch()
        return keys

    import termios
    import tty

    fd = sys.stdin.fileno()
    old = termios.tcgetattr(fd)
    try:
        tty.setraw(fd)
        keys = sys.stdin.read(1)
        if keys == "\x1b":
            keys += sys.stdin.read(1)
            if keys == "\x1b[":
                keys += sys.stdin.read(1)
    finally:
        termios.tcsetattr(fd, termios.TCSADRAIN, old)
    return keys


def _action(keys: str) -> str:
    """Translate one keypress into a board action, or "" if it has none."""
    if not keys:
        return ""
    if keys.startswith("\x1b[") and len(keys) == 3:
        return _ANSI_ARROWS.get(keys[2], "")
    if keys[0] in ("\x00", "\xe0") and len(keys) == 2:
        return _WIN_ARROWS.get(keys[1], "")
    if keys.startswith("\x1b"):
        return "quit" if keys == "\x1b" else ""
    return _KEYS.get(keys.lower(), "")


# -- board rendering ----------------------------------------------------------


def _render_board(view: SessionView, cursor: tuple[int, int]) -> Table:
    """Return a Rich Table representing the puzzle grid."""
    size = view.grid_size
    width = len(str(size * size))
    table = Table(
        show_header=False,
        show_edge=True,
        pad_edge=True,
        box=rich.box.HEAVY,
        border_style="green" if view.solved else "bright_blue",
        padding=(0, 1),
    )
    for _ in range(size):
        table.add_column(width=width + 1, justify="center")

    for r in range(size):
        cells: list[str] = []
        for c in range(size):
            if view.show_reference and not view.solved:
                label = "" if (r, c) == (size - 1, size - 1) else str(r * size + c + 1)
                cells.append(f"[yellow]{label:>{width}}[/yellow]")
                continue
            tile = view.slots[r][c]
            if tile is None:
                text = str(size * size) if view.revealed_piece is not None else "·"
                style = "bold green" if view.revealed_piece is not None else "dim"
            else:
                text = str(tile.home_row * size + tile.home_col + 1)
                style = "bold green" if tile.home == (r, c) else "bold white"
            if (r, c) == cursor and not view.solved:
                style += " reverse"
            cells.append(f"[{style}]{text:>{width}}[/{style}]")
        table.add_row(*cells)

    return table


def _controls(view: SessionView) -> Text:
    controls = Text()
    if view.solved:
        controls.append("  N", style="bold green")
        controls.append("  next level   ", style="dim")
    else:
        controls.append("  ↑↓←→", style="bold cyan")
        controls.append(" / ", style="dim")
        controls.append("WASD", style="bold cyan")
        controls.append("  cursor   ", style="dim")
        controls.append("Enter", style="bold cyan")
        controls.append("  slide   ", style="dim")
        controls.append("C", style="bold cyan")
        controls.append("  complete   ", style="dim")
        controls.append("I", style="bold cyan")
        controls.append("  hide image   " if view.show_reference else "  show image   ", style="dim")
    controls.append("R", style="bold yellow")
    controls.append("  reset   ", style="dim")
    controls.append("+/-", style="bold cyan")
    controls.append("  size   ", style="dim")
    controls.append("Q", style="bold cyan")
    controls.append("  quit", style="dim")
    return controls


def _draw(session: PuzzleSession, cursor: tuple[int, int], status: str = "") -> None:
    console.clear()
    view = session.view()
    size = view.grid_size
    name = view.level_path.stem

    if view.ready:
        body = Align.center(_render_board(view, cursor))
    else:
        body = Align.center(Text(view.last_error or "Loading…", style="red"))

    parts = [body]
    if view.solved:
        congrats = Text()
        congrats.append("\n  ★ ", style="bold yellow")
        congrats.append("SOLVED!", style="bold green")
        congrats.append(" ★", style="bold yellow")
        parts.append(Align.center(congrats))

    title_style = "bold green" if view.solved else "bold cyan"
    panel = Panel(
        Group(*parts),
        title=(
            f"[{title_style}]Level {view.level_index + 1}/{view.level_count}"
            f"  {name}  {size}×{size}[/{title_style}]"
        ),
        border_style="bold green" if view.solved else "bright_blue",
        padding=(1, 2),
    )

    console.print()
    console.print(Align.center(panel))
    if status:
        console.print(Align.center(Text.from_markup(f"  {status}")))
    console.print(Align.center(_controls(view)))


# -- game loop ----------------------------------------------------------------


def _regenerate(session: PuzzleSession) -> str:
    try:
        session.regenerate()
    except ImageLoadError as exc:
        return f"[red]{escape(str(exc))}[/red]"
    return ""


def _play(session: PuzzleSession) -> None:
    status = _regenerate(session)
    cursor = (session.grid_size - 1, session.grid_size - 1)

    while True:
        _draw(session, cursor, status)
        status = ""
        key = _action(_read_key())
        view = session.view()

        if key in _CURSOR_STEPS:
            dr, dc = _CURSOR_STEPS[key]
            last = view.grid_size - 1
            cursor = (
                min(max(cursor[0] + dr, 0), last),
                min(max(cursor[1] + dc, 0), last),
            )
        elif key == "enter":
            if not session.request_move(*cursor):
                status = "[dim]That tile cannot slide.[/dim]"
        elif key == "complete" and view.ready and not view.solved:
            try:
                session.auto_complete()
            except ImageLoadError as exc:
                status = f"[red]{escape(str(exc))}[/red]"
        elif key == "image" and not view.solved:
            session.toggle_reference()
        elif key == "next" and view.solved:
            session.next_level()
            status = _regenerate(session)
        elif key == "restart":
            status = _regenerate(session)
        elif key in ("grow", "shrink"):
            new_size = session.grid_size + (1 if key == "grow" else -1)
            try:
                session.set_grid_size(new_size)
            except ValueError:
                status = "[yellow]Grid size out of range.[/yellow]"
                continue
            cursor = (new_size - 1, new_size - 1)
            status = _regenerate(session)
        elif key == "quit":
            console.clear()
            console.print(Align.center(Text("\nGoodbye!\n", style="bold cyan")))
            return


# -- public entry point -------------------------------------------------------


def run(session: PuzzleSession) -> None:
    """Launch the Rich terminal frontend."""
    log.debug("starting rich frontend with {} levels", len(session.levels))
    _play(session)
