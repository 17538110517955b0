"""Rules engine: turn order, dice plans, step-by-step movement and scoring."""

from __future__ import annotations

import logging
import random
from collections import deque
from dataclasses import dataclass, field
from typing import Iterable, Protocol

from prime_ladders.board import (
    ShortcutLink,
    Track,
    default_links,
    is_bonus_square,
    is_prime,
    link_from,
)
from prime_ladders.player import Player, PlayerView, make_players
from prime_ladders.scoring import ScoreEngine

logger = logging.getLogger(__name__)

DICE_FACES = 6
FORWARD_PROBABILITY = 0.8
SHORTCUT_MIN_ROLLS = 2  # rolls taken before a prime square can unlock shortcuts
DEFAULT_MAX_ROLLS = 1000

# Rejection reasons
GAME_OVER = "game_over"
ANIMATING = "animating"


# ── Dice ─────────────────────────────────────────────────────────────

class Dice(Protocol):
    """Anything that yields (face value, moving forward?) per roll."""

    def roll(self) -> tuple[int, bool]: ...


@dataclass
class RandomDice:
    """A fair die plus an independent 80/20 direction draw.

    The direction does not depend on the face shown.
    """

    rng: random.Random = field(default_factory=random.Random)
    forward_probability: float = FORWARD_PROBABILITY

    def roll(self) -> tuple[int, bool]:
        value = self.rng.randint(1, DICE_FACES)
        forward = self.rng.random() < self.forward_probability
        return value, forward


# ── Structured results ───────────────────────────────────────────────

@dataclass(frozen=True)
class DiceOutcome:
    """A roll that was accepted and turned into a movement plan."""

    player: PlayerView
    dice_value: int
    forward: bool
    plan: tuple[int, ...]
    target: int  # where the plan ends up; informational only

    @property
    def ok(self) -> bool:
        return True


@dataclass(frozen=True)
class Rejected:
    """A roll that was refused. Falsy, so ``if engine.roll_dice():`` works."""

    reason: str  # GAME_OVER | ANIMATING

    @property
    def ok(self) -> bool:
        return False

    def __bool__(self) -> bool:
        return False


@dataclass(frozen=True)
class StepResult:
    """What one animation tick did.

    ``applied`` is True while the pawn is still moving. The tick that
    drains the plan returns ``applied=False, finished=True`` and carries
    the post-move effects.
    """

    applied: bool
    position: int | None = None
    backtrack: bool = False
    finished: bool = False
    points: int = 0
    unlocked: bool = False
    extra_turn: bool = False
    winner: PlayerView | None = None


@dataclass
class TurnRecord:
    """Record of one completed move."""

    turn_number: int
    player: str
    dice_value: int
    forward: bool
    start_position: int
    end_position: int
    points: int
    unlocked: bool = False
    extra_turn: bool = False
    won: bool = False


# ── Observer ────────────────────────────────────────────────────────

class GameObserver(Protocol):
    """Receives a record each time a move finishes."""

    def on_turn(self, record: TurnRecord) -> None: ...


@dataclass
class ListObserver:
    """Default observer, collects records into a list."""

    entries: list[TurnRecord] = field(default_factory=list)

    def on_turn(self, record: TurnRecord) -> None:
        self.entries.append(record)


# ── Engine ───────────────────────────────────────────────────────────

class GameEngine:
    """Owns the players, the turn queue and the move in flight.

    Drive it with one ``roll_dice()`` per turn followed by repeated
    ``advance_step()`` calls (one per animation tick) until a step comes
    back with ``applied=False``. The engine never sleeps or schedules
    anything itself.
    """

    def __init__(
        self,
        num_players: int = 2,
        *,
        rng: random.Random | None = None,
        dice: Dice | None = None,
        track: Track | None = None,
        links: Iterable[ShortcutLink] | None = None,
        score_engine: ScoreEngine | None = None,
        observer: GameObserver | None = None,
    ):
        self._rng = rng or random.Random()
        self.track = track or Track()
        if links is None:
            self.links = default_links(self._rng, self.track)
        else:
            self.links = tuple(link.check(self.track) for link in links)
        self.score_engine = score_engine or ScoreEngine(self._rng, self.track.size)
        self.dice = dice or RandomDice(self._rng)
        self.observer = observer or ListObserver()

        self._players: list[Player] = []
        self._turns: deque[Player] = deque()
        self._last_dice_roll = 0
        self._last_move_forward = True
        self._animating = False
        self._move_start = 0
        self._turn_number = 0
        self._win_recorded = False
        self.reset_game(num_players)

    # ── lifecycle ──

    def reset_game(self, num_players: int) -> None:
        """Replace every player and the turn queue. Safe mid-move."""
        self._players = make_players(num_players)
        self._turns = deque(self._players)
        self._last_dice_roll = 0
        self._last_move_forward = True
        self._animating = False
        self._move_start = 0
        self._turn_number = 0
        self._win_recorded = False
        logger.debug("new game with %d players", num_players)

    def new_game(self, num_players: int) -> None:
        """Reset players and zero totals. Square values and session wins stay."""
        self.reset_game(num_players)
        self.score_engine.reset_scores(self._players)

    # ── turn ──

    def roll_dice(self) -> DiceOutcome | Rejected:
        if self._find_winner() is not None:
            logger.debug("roll rejected: game over")
            return Rejected(GAME_OVER)
        if self._animating:
            logger.debug("roll rejected: move in progress")
            return Rejected(ANIMATING)

        player = self._turns[0]
        player.roll_count += 1
        value, forward = self.dice.roll()
        self._last_dice_roll = value
        self._last_move_forward = forward

        plan, target = self._plan_move(player, value, forward)
        player.planned_path.clear()
        player.planned_path.extend(plan)
        self._move_start = player.position
        self._animating = True

        logger.debug("%s rolled %d %s: plan %s",
                     player.name, value, "forward" if forward else "backward", plan)
        return DiceOutcome(
            player=player.view(),
            dice_value=value,
            forward=forward,
            plan=tuple(plan),
            target=target,
        )

    def _plan_move(self, player: Player, steps: int, forward: bool) -> tuple[list[int], int]:
        """Walk *steps* single moves over a scratch copy of the path stack."""
        stack = list(player.path)
        plan: list[int] = []
        last = self.track.last_index

        for _ in range(steps):
            current = stack[-1]
            if forward:
                link = link_from(self.links, current) if player.shortcut_unlocked else None
                nxt = min(link.end if link else current + 1, last)
                if nxt != current:
                    stack.append(nxt)
            elif len(stack) > 1:
                stack.pop()
                nxt = stack[-1]
            else:
                nxt = 0  # already at the bottom of the path
            plan.append(nxt)

        return plan, stack[-1]

    def advance_step(self) -> StepResult:
        """Apply one planned step, or the post-move effects once the plan is empty."""
        if not self._animating:
            return StepResult(applied=False)

        player = self._turns[0]
        if not player.planned_path:
            return self._finish_move(player)

        nxt = player.planned_path.popleft()
        backtrack = len(player.path) >= 2 and nxt == player.path[-2]
        if backtrack:
            player.path.pop()
        elif player.path[-1] != nxt:
            player.path.append(nxt)
        player.position = nxt
        return StepResult(applied=True, position=nxt, backtrack=backtrack)

    def _finish_move(self, player: Player) -> StepResult:
        position = player.position
        points = self.score_engine.apply_landing(player, position)

        unlocked = False
        if (
            is_prime(position + 1)
            and player.roll_count >= SHORTCUT_MIN_ROLLS
            and not player.shortcut_unlocked
        ):
            player.shortcut_unlocked = True
            unlocked = True
            logger.debug("%s unlocked shortcuts on square %s",
                         player.name, self.track.label_of(position))

        self._animating = False

        extra_turn = is_bonus_square(position) and position != self.track.last_index
        if extra_turn:
            logger.debug("%s landed on bonus square %s and rolls again",
                         player.name, self.track.label_of(position))
        else:
            self._turns.rotate(-1)

        winner = self._find_winner()
        if winner is not None and not self._win_recorded:
            self.score_engine.record_win(winner)
            self._win_recorded = True
            logger.debug("%s wins with %d points", winner.name, winner.total_score)

        self._turn_number += 1
        self.observer.on_turn(TurnRecord(
            turn_number=self._turn_number,
            player=player.name,
            dice_value=self._last_dice_roll,
            forward=self._last_move_forward,
            start_position=self._move_start,
            end_position=position,
            points=points,
            unlocked=unlocked,
            extra_turn=extra_turn,
            won=winner is player,
        ))

        return StepResult(
            applied=False,
            position=position,
            finished=True,
            points=points,
            unlocked=unlocked,
            extra_turn=extra_turn,
            winner=winner.view() if winner is not None else None,
        )

    def _find_winner(self) -> Player | None:
        for p in self._players:
            if p.position == self.track.last_index:
                return p
        return None

    # ── queries ──

    @property
    def is_animating(self) -> bool:
        return self._animating

    def get_winner(self) -> PlayerView | None:
        """First player in seating order sitting on the last square."""
        winner = self._find_winner()
        return winner.view() if winner is not None else None

    def get_all_players(self) -> list[PlayerView]:
        return [p.view() for p in self._players]

    def get_current_player(self) -> PlayerView:
        return self._turns[0].view()

    def get_turn_order(self) -> list[str]:
        return [p.name for p in self._turns]

    def get_last_dice_roll(self) -> int:
        return self._last_dice_roll

    def was_last_move_forward(self) -> bool:
        return self._last_move_forward

    def score_of(self, position: int) -> int:
        return self.score_engine.score_of(position)

    def leaderboard(self, players: list[PlayerView] | None = None) -> list[PlayerView]:
        if players is None:
            players = self.get_all_players()
        return self.score_engine.leaderboard(players)

    def session_win_count(self, name: str) -> int:
        return self.score_engine.session_win_count(name)


# ── Runner ───────────────────────────────────────────────────────────

@dataclass
class GameResult:
    winner: str | None  # player name, or None if the roll cap was hit
    reason: str  # "win" | "max_rolls"
    rolls: int = 0
    leaderboard: list[PlayerView] = field(default_factory=list)


class GameRunner:
    """Play one game to completion without any timing between ticks."""

    def __init__(self, engine: GameEngine, max_rolls: int = DEFAULT_MAX_ROLLS):
        self.engine = engine
        self.max_rolls = max_rolls

    def play(self) -> GameResult:
        rolls = 0
        while rolls < self.max_rolls:
            winner = self.engine.get_winner()
            if winner is not None:
                return self._result(winner.name, "win", rolls)

            if not self.engine.roll_dice():
                break
            rolls += 1
            while self.engine.advance_step().applied:
                pass

        winner = self.engine.get_winner()
        if winner is not None:
            return self._result(winner.name, "win", rolls)
        return self._result(None, "max_rolls", rolls)

    def _result(self, winner: str | None, reason: str, rolls: int) -> GameResult:
        return GameResult(
            winner=winner,
            reason=reason,
            rolls=rolls,
            leaderboard=self.engine.leaderboard(),
        )
