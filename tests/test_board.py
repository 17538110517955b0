"""Tests for prime_ladders.board."""

import random

import pytest

from prime_ladders.board import (
    FIXED_LINKS,
    ShortcutLink,
    Track,
    default_links,
    grid_cell,
    is_bonus_square,
    is_prime,
    link_from,
    random_link,
)


# ── Track ────────────────────────────────────────────────────────────

def test_track_has_64_squares():
    t = Track()
    assert t.size == 64
    assert t.last_index == 63


def test_labels_are_one_based():
    t = Track()
    assert t.label_of(0) == "1"
    assert t.label_of(63) == "64"
    assert t.labels[:3] == ("1", "2", "3")
    assert len(t.labels) == 64


def test_label_off_track_raises():
    with pytest.raises(ValueError):
        Track().label_of(64)


def test_tiny_track_rejected():
    with pytest.raises(ValueError):
        Track(size=1)


def test_clamp():
    t = Track()
    assert t.clamp(-3) == 0
    assert t.clamp(70) == 63
    assert t.clamp(10) == 10


# ── links ────────────────────────────────────────────────────────────

def test_default_links_are_fixed_four_plus_one():
    links = default_links(random.Random(7), Track())
    assert len(links) == 5
    assert [(l.start, l.end) for l in links[:4]] == list(FIXED_LINKS)


@pytest.mark.parametrize("seed", range(50))
def test_random_link_within_bounds(seed):
    link = random_link(random.Random(seed), Track())
    assert 0 <= link.start <= 49
    length = link.end - link.start
    assert link.end == 63 or 3 <= length <= 17
    assert link.end <= 63


def test_link_off_track_rejected():
    with pytest.raises(ValueError):
        ShortcutLink(60, 70).check(Track())


def test_link_from_first_match_wins():
    links = (ShortcutLink(1, 20), ShortcutLink(1, 30), ShortcutLink(5, 9))
    assert link_from(links, 1) == ShortcutLink(1, 20)
    assert link_from(links, 5).end == 9
    assert link_from(links, 2) is None


# ── square rules ─────────────────────────────────────────────────────

def test_is_prime():
    assert [n for n in range(-2, 30) if is_prime(n)] == [2, 3, 5, 7, 11, 13, 17, 19, 23, 29]
    assert is_prime(61)
    assert not is_prime(49)
    assert not is_prime(64)


def test_bonus_squares_by_label():
    assert is_bonus_square(4)       # label 5
    assert is_bonus_square(9)       # label 10
    assert not is_bonus_square(5)   # label 6
    assert not is_bonus_square(63)  # label 64


def test_grid_cell_serpentine():
    assert grid_cell(0) == (0, 0)
    assert grid_cell(7) == (0, 7)
    assert grid_cell(8) == (1, 7)
    assert grid_cell(15) == (1, 0)
    assert grid_cell(16) == (2, 0)
    assert grid_cell(63) == (7, 0)
