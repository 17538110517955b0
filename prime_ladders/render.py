"""Plain-text rendering of the board and side panels.

Reads engine state only through its query methods.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from prime_ladders.board import GRID_SIZE, grid_cell, is_bonus_square

if TYPE_CHECKING:
    from prime_ladders.game import GameEngine


def _pawn_marks(engine: GameEngine) -> dict[int, str]:
    marks: dict[int, str] = {}
    for i, p in enumerate(engine.get_all_players()):
        marks[p.position] = marks.get(p.position, "") + str(i + 1)
    return marks


def render_board(engine: GameEngine) -> str:
    """The serpentine grid, top row first.

    Each cell shows the label, a square marker and the seat numbers of
    any pawns on it: ``>`` shortcut start, ``<`` shortcut end, ``*``
    bonus square.
    """
    track = engine.track
    starts = {link.start for link in engine.links}
    ends = {link.end for link in engine.links}
    pawns = _pawn_marks(engine)
    pawn_width = max(1, len(engine.get_all_players()))

    rows = track.size // GRID_SIZE + (1 if track.size % GRID_SIZE else 0)
    grid = [[" " * (4 + pawn_width)] * GRID_SIZE for _ in range(rows)]
    for i in range(track.size):
        if i in starts:
            mark = ">"
        elif i in ends:
            mark = "<"
        elif is_bonus_square(i):
            mark = "*"
        else:
            mark = " "
        row, col = grid_cell(i)
        grid[row][col] = f"{track.label_of(i):>2}{mark} {pawns.get(i, ''):<{pawn_width}}"

    border = "+" + "+".join("-" * (4 + pawn_width) for _ in range(GRID_SIZE)) + "+"
    lines = [border]
    for row in reversed(grid):
        lines.append("|" + "|".join(row) + "|")
        lines.append(border)
    return "\n".join(lines)


def render_links(engine: GameEngine) -> str:
    track = engine.track
    parts = [
        f"{track.label_of(link.start)}→{track.label_of(link.end)}" for link in engine.links
    ]
    return "Shortcuts: " + ", ".join(parts)


def render_status(engine: GameEngine) -> str:
    current = engine.get_current_player()
    lines = [
        f"Current turn: {current.name}",
        f"  Roll count:  {current.roll_count}",
        f"  Total score: {current.total_score}",
        "  SHORTCUT UNLOCKED" if current.shortcut_unlocked else "  LOCKED",
    ]
    if engine.get_last_dice_roll():
        direction = "Moving Forward >>" if engine.was_last_move_forward() else "<< Moving Backward"
        lines.append(f"Last roll: {engine.get_last_dice_roll()}  {direction}")
    return "\n".join(lines)


def render_leaderboard(engine: GameEngine) -> str:
    lines = ["Leaderboard"]
    for rank, p in enumerate(engine.leaderboard(), start=1):
        lines.append(f"  {rank}. {p.name} ({p.total_score})")
    return "\n".join(lines)
