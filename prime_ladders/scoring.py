"""Per-square point values, running totals, session wins and the leaderboard."""

from __future__ import annotations

import logging
import random
from typing import Iterable, Protocol, Sequence, TypeVar

from prime_ladders.board import TRACK_SIZE

logger = logging.getLogger(__name__)

MIN_SCORE = 1
MAX_SCORE = 10
DEFAULT_SCORE = 1


class Scored(Protocol):
    @property
    def total_score(self) -> int: ...


class Named(Protocol):
    @property
    def name(self) -> str: ...


S = TypeVar("S", bound=Scored)


class ScoreEngine:
    """Owns the square → points table and the session win counts.

    The table is drawn once, when the engine is built. Starting a new
    game zeroes player totals but keeps both the table and the wins.
    """

    def __init__(self, rng: random.Random | None = None, size: int = TRACK_SIZE):
        self._rng = rng or random.Random()
        self._size = size
        self._table: dict[int, int] = {}
        self._wins: dict[str, int] = {}
        self.generate()

    def generate(self) -> None:
        self._table = {
            i: self._rng.randint(MIN_SCORE, MAX_SCORE) for i in range(self._size)
        }

    def score_of(self, position: int) -> int:
        return self._table.get(position, DEFAULT_SCORE)

    def apply_landing(self, player, position: int) -> int:
        """Credit *player* with the points for *position*. Returns the points."""
        points = self.score_of(position)
        player.total_score += points
        logger.debug("%s scores %d on square %d (total %d)",
                     player.name, points, position, player.total_score)
        return points

    def record_win(self, player: Named | str) -> int:
        name = player if isinstance(player, str) else player.name
        self._wins[name] = self._wins.get(name, 0) + 1
        return self._wins[name]

    def session_win_count(self, name: str) -> int:
        return self._wins.get(name, 0)

    def session_wins(self) -> dict[str, int]:
        return dict(self._wins)

    def reset_scores(self, players: Iterable) -> None:
        for p in players:
            p.total_score = 0

    def leaderboard(self, players: Sequence[S]) -> list[S]:
        # sorted() is stable, so equal totals keep their original order
        return sorted(players, key=lambda p: p.total_score, reverse=True)
