"""Track layout, shortcut links and square rules for the 8×8 board."""

from __future__ import annotations

import logging
import math
import random
from dataclasses import dataclass

logger = logging.getLogger(__name__)

TRACK_SIZE = 64
GRID_SIZE = 8

# fmt: off
FIXED_LINKS: tuple[tuple[int, int], ...] = (
    ( 2, 21),
    ( 6, 29),
    (14, 55),
    (35, 48),
)
# fmt: on

# Random link: start in [0, 49], length in [3, 17]
RANDOM_LINK_START_RANGE = 50
RANDOM_LINK_MIN_LENGTH = 3
RANDOM_LINK_LENGTH_RANGE = 15

BONUS_EVERY = 5


@dataclass(frozen=True)
class Track:
    """The ordered run of playable squares. Index i is labelled ``i + 1``."""

    size: int = TRACK_SIZE

    def __post_init__(self) -> None:
        if self.size < 2:
            raise ValueError(f"Track needs at least 2 squares, got {self.size}")

    @property
    def last_index(self) -> int:
        return self.size - 1

    @property
    def labels(self) -> tuple[str, ...]:
        return tuple(self.label_of(i) for i in range(self.size))

    def label_of(self, index: int) -> str:
        if not 0 <= index < self.size:
            raise ValueError(f"Square {index} is off the track (0..{self.last_index})")
        return str(index + 1)

    def clamp(self, index: int) -> int:
        return max(0, min(index, self.last_index))


@dataclass(frozen=True)
class ShortcutLink:
    """A one-way jump from ``start`` to ``end``, taken only by unlocked players."""

    start: int
    end: int

    def check(self, track: Track) -> ShortcutLink:
        for sq in (self.start, self.end):
            if not 0 <= sq <= track.last_index:
                raise ValueError(f"Link {self.start}→{self.end} leaves the track")
        return self


def random_link(rng: random.Random, track: Track) -> ShortcutLink:
    start = rng.randrange(RANDOM_LINK_START_RANGE)
    end = start + rng.randrange(RANDOM_LINK_LENGTH_RANGE) + RANDOM_LINK_MIN_LENGTH
    return ShortcutLink(start, min(end, track.last_index))


def default_links(rng: random.Random, track: Track) -> tuple[ShortcutLink, ...]:
    """The four fixed links plus one placed at random."""
    links = [ShortcutLink(s, e).check(track) for s, e in FIXED_LINKS]
    extra = random_link(rng, track)
    logger.debug("random shortcut link %d→%d", extra.start, extra.end)
    links.append(extra)
    return tuple(links)


def link_from(links: tuple[ShortcutLink, ...], start: int) -> ShortcutLink | None:
    """First registered link leaving *start*, if any."""
    for link in links:
        if link.start == start:
            return link
    return None


def is_prime(n: int) -> bool:
    if n <= 1:
        return False
    for i in range(2, math.isqrt(n) + 1):
        if n % i == 0:
            return False
    return True


def is_bonus_square(index: int) -> bool:
    """Squares whose label is a multiple of 5 grant another roll."""
    return (index + 1) % BONUS_EVERY == 0


def grid_cell(index: int, grid: int = GRID_SIZE) -> tuple[int, int]:
    """(row, col) of *index* on the serpentine grid.

    Row 0 is the bottom row. Even rows run left to right, odd rows
    right to left, so consecutive squares always touch.
    """
    row, col = divmod(index, grid)
    if row % 2 == 1:
        col = grid - 1 - col
    return row, col
