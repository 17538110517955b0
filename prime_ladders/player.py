"""Per-player game state and the read-only view handed to callers."""

from __future__ import annotations

from collections import deque
from dataclasses import dataclass, field

# fmt: off
PLAYER_PALETTE: tuple[tuple[int, int, int], ...] = (
    (220,  20,  60),   # crimson
    ( 30, 144, 255),   # dodger blue
    ( 50, 205,  50),   # lime green
    (255, 215,   0),   # gold
    (138,  43, 226),   # blue violet
    (255, 140,   0),   # dark orange
)
# fmt: on

MIN_PLAYERS = 2
MAX_PLAYERS = 6


@dataclass
class Player:
    """Mutable state owned by the rules engine.

    ``path`` is a stack of visited squares: forward moves push, backward
    moves pop back toward the start. It is never empty.
    """

    name: str
    color: tuple[int, int, int]
    position: int = 0
    path: list[int] = field(default_factory=lambda: [0])
    planned_path: deque[int] = field(default_factory=deque)
    roll_count: int = 0
    shortcut_unlocked: bool = False
    total_score: int = 0

    def view(self) -> PlayerView:
        return PlayerView(
            name=self.name,
            color=self.color,
            position=self.position,
            path=tuple(self.path),
            planned_path=tuple(self.planned_path),
            roll_count=self.roll_count,
            shortcut_unlocked=self.shortcut_unlocked,
            total_score=self.total_score,
        )


@dataclass(frozen=True)
class PlayerView:
    """Snapshot of a Player at one instant."""

    name: str
    color: tuple[int, int, int]
    position: int
    path: tuple[int, ...]
    planned_path: tuple[int, ...]
    roll_count: int
    shortcut_unlocked: bool
    total_score: int


def make_players(num_players: int) -> list[Player]:
    """Fresh players at the start square, colours cycling through the palette."""
    if num_players < 1:
        raise ValueError(f"Need at least one player, got {num_players}")
    return [
        Player(name=f"Player {i + 1}", color=PLAYER_PALETTE[i % len(PLAYER_PALETTE)])
        for i in range(num_players)
    ]
