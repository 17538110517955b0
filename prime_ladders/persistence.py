"""SQLite persistence for simulated game results.

The engine itself keeps everything in memory; this store is only used
by the command-line tools when asked to record a batch of games.
"""

from __future__ import annotations

import sqlite3
from dataclasses import dataclass
from pathlib import Path
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from prime_ladders.game import TurnRecord


@dataclass
class GameRow:
    id: int
    seed: int | None
    num_players: int
    winner: str | None
    reason: str
    rolls: int


class ResultsDB:
    """Thin wrapper around a SQLite database of finished games."""

    def __init__(self, path: Path | str):
        self.path = Path(path)
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self._conn = sqlite3.connect(self.path)
        self._conn.execute("PRAGMA journal_mode=WAL")
        self._create_tables()

    def _create_tables(self) -> None:
        self._conn.executescript("""
            CREATE TABLE IF NOT EXISTS games (
                id          INTEGER PRIMARY KEY AUTOINCREMENT,
                seed        INTEGER,
                num_players INTEGER NOT NULL,
                winner      TEXT,
                reason      TEXT NOT NULL,
                rolls       INTEGER NOT NULL,
                created_at  TIMESTAMP DEFAULT CURRENT_TIMESTAMP
            );
            CREATE TABLE IF NOT EXISTS turns (
                id              INTEGER PRIMARY KEY AUTOINCREMENT,
                game_id         INTEGER NOT NULL REFERENCES games(id),
                turn_number     INTEGER NOT NULL,
                player          TEXT NOT NULL,
                dice_value      INTEGER NOT NULL,
                forward         INTEGER NOT NULL,
                start_position  INTEGER NOT NULL,
                end_position    INTEGER NOT NULL,
                points          INTEGER NOT NULL,
                unlocked        INTEGER NOT NULL DEFAULT 0,
                extra_turn      INTEGER NOT NULL DEFAULT 0,
                won             INTEGER NOT NULL DEFAULT 0,
                UNIQUE(game_id, turn_number)
            );
        """)
        self._conn.commit()

    def record_game(
        self,
        num_players: int,
        winner: str | None,
        reason: str,
        rolls: int,
        seed: int | None = None,
    ) -> int:
        """Record a finished game. Returns its row id."""
        cur = self._conn.execute(
            "INSERT INTO games (seed, num_players, winner, reason, rolls) "
            "VALUES (?, ?, ?, ?, ?)",
            (seed, num_players, winner, reason, rolls),
        )
        self._conn.commit()
        return cur.lastrowid  # type: ignore[return-value]

    def record_turn(
        self,
        game_id: int,
        turn_number: int,
        player: str,
        dice_value: int,
        forward: bool,
        start_position: int,
        end_position: int,
        points: int,
        unlocked: bool = False,
        extra_turn: bool = False,
        won: bool = False,
    ) -> int:
        cur = self._conn.execute(
            "INSERT INTO turns (game_id, turn_number, player, dice_value, forward, "
            "start_position, end_position, points, unlocked, extra_turn, won) "
            "VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?)",
            (game_id, turn_number, player, dice_value, int(forward),
             start_position, end_position, points,
             int(unlocked), int(extra_turn), int(won)),
        )
        self._conn.commit()
        return cur.lastrowid  # type: ignore[return-value]

    def list_games(self) -> list[GameRow]:
        rows = self._conn.execute(
            "SELECT id, seed, num_players, winner, reason, rolls FROM games ORDER BY id"
        ).fetchall()
        return [GameRow(*r) for r in rows]

    def list_turns(self, game_id: int) -> list[dict]:
        self._conn.row_factory = sqlite3.Row
        try:
            rows = self._conn.execute(
                "SELECT turn_number, player, dice_value, forward, start_position, "
                "end_position, points, unlocked, extra_turn, won "
                "FROM turns WHERE game_id = ? ORDER BY turn_number",
                (game_id,),
            ).fetchall()
        finally:
            self._conn.row_factory = None
        turns = []
        for r in rows:
            d = dict(r)
            for key in ("forward", "unlocked", "extra_turn", "won"):
                d[key] = bool(d[key])
            turns.append(d)
        return turns

    def win_counts(self) -> dict[str, int]:
        """Wins per player name, most wins first."""
        rows = self._conn.execute(
            "SELECT winner, COUNT(*) FROM games WHERE winner IS NOT NULL "
            "GROUP BY winner ORDER BY COUNT(*) DESC, winner"
        ).fetchall()
        return {r[0]: r[1] for r in rows}

    def close(self) -> None:
        self._conn.close()


# ── Game log persistence ─────────────────────────────────────────────

def persist_game_log(db: ResultsDB, game_id: int, records: list[TurnRecord]) -> None:
    """Write one row per completed move to the turns table."""
    for rec in records:
        db.record_turn(
            game_id=game_id,
            turn_number=rec.turn_number,
            player=rec.player,
            dice_value=rec.dice_value,
            forward=rec.forward,
            start_position=rec.start_position,
            end_position=rec.end_position,
            points=rec.points,
            unlocked=rec.unlocked,
            extra_turn=rec.extra_turn,
            won=rec.won,
        )
