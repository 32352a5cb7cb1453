"""Tests for theme rotation."""

import random

import pytest

from horror_tales.story.themes import THEMES, pick_theme, select_theme


class TestSelectTheme:
    """Tests for select_theme."""

    @pytest.mark.parametrize("count,draw,expected", [
        (0, 0, "a"),
        (0, 1, "b"),
        (1, 0, "b"),
        (1, 1, "a"),
        (7, 2, "b"),
    ])
    def test_index_is_count_plus_draw_mod_len(self, count, draw, expected):
        assert select_theme(["a", "b"], count, draw) == expected

    def test_empty_theme_list_raises(self):
        with pytest.raises(ValueError):
            select_theme([], 3, 0)

    def test_full_theme_list(self):
        assert select_theme(THEMES, 16, 0) == THEMES[1]


class TestPickTheme:
    """Tests for pick_theme."""

    def test_uses_rng_draw(self, fixed_rng):
        assert pick_theme(3, ["a", "b", "c"], fixed_rng(2)) == "c"

    def test_result_is_always_known(self):
        rng = random.Random(42)
        for count in range(50):
            assert pick_theme(count, rng=rng) in THEMES

    def test_empty_theme_list_raises(self):
        with pytest.raises(ValueError):
            pick_theme(0, [])


def test_theme_list_has_fifteen_unique_entries():
    assert len(THEMES) == 15
    assert len(set(THEMES)) == 15
