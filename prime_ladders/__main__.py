"""CLI entry point: python -m prime_ladders {play,simulate,wins,chart}."""

from __future__ import annotations

import argparse
import logging
import random
import sys
import time
from pathlib import Path

from prime_ladders.chart import make_wins_chart
from prime_ladders.game import (
    DEFAULT_MAX_ROLLS,
    GameEngine,
    GameRunner,
    ListObserver,
    StepResult,
)
from prime_ladders.persistence import ResultsDB, persist_game_log
from prime_ladders.player import MAX_PLAYERS, MIN_PLAYERS
from prime_ladders.render import (
    render_board,
    render_leaderboard,
    render_links,
    render_status,
)


RESULTS_DIR = Path("results")
DB_PATH = RESULTS_DIR / "games.db"
TICK_INTERVAL = 0.2  # seconds between animation steps


def _check_players(n: int) -> None:
    if not MIN_PLAYERS <= n <= MAX_PLAYERS:
        print(f"Players must be between {MIN_PLAYERS} and {MAX_PLAYERS}, got {n}.",
              file=sys.stderr)
        sys.exit(1)


def _print_session_wins(engine: GameEngine) -> None:
    print("\nSession Wins")
    print("=" * 40)
    wins = engine.score_engine.session_wins()
    if not wins:
        print("  (none)")
    for name, count in sorted(wins.items(), key=lambda kv: kv[1], reverse=True):
        print(f"  {name:30s} {count:4d}")


# ── play ─────────────────────────────────────────────────────────────

def _report_finish(engine: GameEngine, step: StepResult) -> None:
    if not step.finished:
        return
    track = engine.track
    msg = f"  landed on {track.label_of(step.position)} for +{step.points}"
    if step.unlocked:
        msg += ", shortcuts unlocked"
    if step.extra_turn:
        msg += ", bonus square: roll again"
    print(msg)


def _play_one(engine: GameEngine, args: argparse.Namespace) -> None:
    rolls = 0
    while engine.get_winner() is None and rolls < args.max_rolls:
        print()
        print(render_board(engine))
        print(render_status(engine))

        current = engine.get_current_player()
        if not args.auto:
            try:
                answer = input(f"{current.name}: press Enter to roll (q to quit) ")
            except EOFError:
                return
            if answer.strip().lower() == "q":
                return

        outcome = engine.roll_dice()
        if not outcome:
            print(f"Cannot roll: {outcome.reason}")
            return
        rolls += 1
        direction = "forward" if outcome.forward else "backward"
        print(f"{current.name} rolled {outcome.dice_value}, moving {direction}")

        while True:
            step = engine.advance_step()
            if not step.applied:
                break
            print(f"  → {engine.track.label_of(step.position)}")
            time.sleep(args.interval)
        _report_finish(engine, step)

    print()
    print(render_board(engine))
    print(render_leaderboard(engine))

    winner = engine.get_winner()
    if winner is None:
        print(f"No winner after {rolls} rolls.")
        return
    print(f"\n{winner.name} wins!")
    print(f"Final Score: {winner.total_score}")
    print(f"Session Wins: {engine.session_win_count(winner.name)}")


def cmd_play(args: argparse.Namespace) -> None:
    """Play games in the terminal, one tick per animation step."""
    _check_players(args.players)
    engine = GameEngine(args.players, rng=random.Random(args.seed))
    print(render_links(engine))

    for game_no in range(1, args.games + 1):
        if game_no > 1:
            engine.new_game(args.players)
        print(f"\n=== Game {game_no} ===")
        _play_one(engine, args)

    _print_session_wins(engine)


# ── simulate ─────────────────────────────────────────────────────────

def cmd_simulate(args: argparse.Namespace) -> None:
    """Play headless games on one engine and report session wins."""
    _check_players(args.players)
    engine = GameEngine(args.players, rng=random.Random(args.seed))
    db = None
    if args.db:
        db = ResultsDB(args.db)

    for i in range(args.games):
        if i > 0:
            engine.new_game(args.players)
        observer = ListObserver()
        engine.observer = observer

        result = GameRunner(engine, max_rolls=args.max_rolls).play()
        top = result.leaderboard[0] if result.leaderboard else None
        top_text = f", top score {top.name} ({top.total_score})" if top else ""
        print(f"[{i + 1}/{args.games}] {result.reason} → {result.winner or 'none'} "
              f"in {result.rolls} rolls{top_text}")

        if db is not None:
            game_id = db.record_game(
                num_players=args.players,
                winner=result.winner,
                reason=result.reason,
                rolls=result.rolls,
                seed=args.seed,
            )
            persist_game_log(db, game_id, observer.entries)

    if db is not None:
        db.close()
        print(f"Results saved to {args.db}")
    _print_session_wins(engine)


# ── wins ─────────────────────────────────────────────────────────────

def _load_wins(db_path: Path) -> dict[str, int]:
    if not db_path.exists():
        print(f"No database found at {db_path}. Run some games first.", file=sys.stderr)
        sys.exit(1)

    db = ResultsDB(db_path)
    wins = db.win_counts()
    db.close()

    if not wins:
        print("No completed games yet.", file=sys.stderr)
        sys.exit(1)
    return wins


def cmd_wins(args: argparse.Namespace) -> None:
    """Print win counts recorded in the database."""
    wins = _load_wins(Path(args.db))
    print("\nWins")
    print("=" * 40)
    for name, count in wins.items():
        print(f"  {name:30s} {count:4d}")


# ── chart ────────────────────────────────────────────────────────────

def cmd_chart(args: argparse.Namespace) -> None:
    """Generate a wins chart from the database."""
    wins = _load_wins(Path(args.db))
    out = args.output or "session_wins.png"
    make_wins_chart(wins, output_path=out)
    print(f"Chart saved to {out}")


# ── main ─────────────────────────────────────────────────────────────

def main(argv: list[str] | None = None) -> None:
    parser = argparse.ArgumentParser(
        prog="prime_ladders",
        description="Snake & Ladder: final node scoring",
    )
    parser.add_argument("--verbose", "-v", action="store_true", help="Debug logging")
    sub = parser.add_subparsers(dest="command")

    p_play = sub.add_parser("play", help="Play in the terminal")
    p_play.add_argument("--players", type=int, default=MIN_PLAYERS,
                        help=f"Number of players ({MIN_PLAYERS}-{MAX_PLAYERS})")
    p_play.add_argument("--games", type=int, default=1, help="Games in this session")
    p_play.add_argument("--seed", type=int, help="Random seed")
    p_play.add_argument("--interval", type=float, default=TICK_INTERVAL,
                        help="Seconds between animation steps")
    p_play.add_argument("--auto", action="store_true", help="Roll without waiting for Enter")
    p_play.add_argument("--max-rolls", type=int, default=DEFAULT_MAX_ROLLS,
                        help="Stop a game after this many rolls")

    p_sim = sub.add_parser("simulate", help="Play headless games")
    p_sim.add_argument("--players", type=int, default=MIN_PLAYERS)
    p_sim.add_argument("--games", type=int, default=10)
    p_sim.add_argument("--seed", type=int, help="Random seed")
    p_sim.add_argument("--max-rolls", type=int, default=DEFAULT_MAX_ROLLS)
    p_sim.add_argument("--db", nargs="?", const=str(DB_PATH),
                       help=f"Record results (default path {DB_PATH})")

    p_wins = sub.add_parser("wins", help="Show recorded win counts")
    p_wins.add_argument("--db", default=str(DB_PATH))

    p_chart = sub.add_parser("chart", help="Generate wins chart")
    p_chart.add_argument("--db", default=str(DB_PATH))
    p_chart.add_argument("--output", "-o", help="Output PNG path")

    args = parser.parse_args(argv)
    if args.verbose:
        logging.basicConfig(level=logging.DEBUG, format="%(name)s: %(message)s")

    if args.command == "play":
        cmd_play(args)
    elif args.command == "simulate":
        cmd_simulate(args)
    elif args.command == "wins":
        cmd_wins(args)
    elif args.command == "chart":
        cmd_chart(args)
    else:
        parser.print_help()


if __name__ == "__main__":
    main()
