from __future__ import annotations

import pytest

from graphinate.text_layout import TextElement, _probe, measure_bounds, resolve_collisions, wrap
from graphinate.themes import TextStyle

STYLE = TextStyle(font_size=10.0)


def test_wrap_leaves_short_text_alone() -> None:
    assert wrap("Short") == "Short"
    assert wrap("Keep\nbreaks as they are") == "Keep\nbreaks as they are"


def test_wrap_breaks_on_words() -> None:
    assert wrap("Best Practices in Software") == "Best\nPractices in\nSoftware"


def test_wrap_breaks_after_hyphens() -> None:
    assert wrap("state-of-the-art design") == "state-of-\nthe-art\ndesign"


def test_wrap_never_returns_empty() -> None:
    for text in ["Supercalifragilistic", " " * 20, "a" * 40, "x -- y -- z -- w"]:
        assert wrap(text) != ""
    assert wrap("Supercalifragilistic") == "Supercalifragilistic"


def test_measure_bounds_centres_on_anchor() -> None:
    bounds = measure_bounds("abcd", STYLE, 50, 50)
    assert bounds.width == 24
    assert bounds.height == 12
    assert bounds.x == 38
    assert bounds.y == 44


def test_measure_bounds_respects_start_anchor() -> None:
    style = TextStyle(font_size=10.0, text_anchor="start")
    assert measure_bounds("abcd", style, 50, 50).x == 50


def test_separated_elements_keep_their_positions() -> None:
    elements = [
        TextElement("One", 100, 100, STYLE),
        TextElement("Two", 400, 100, STYLE),
        TextElement("Three", 100, 400, STYLE),
    ]
    placed = resolve_collisions(elements)
    assert [(item.x, item.y) for item in placed] == [(100, 100), (400, 100), (100, 400)]


def test_overlapping_element_is_moved_clear() -> None:
    first = TextElement("Hello", 100, 100, STYLE)
    second = TextElement("Hello", 100, 100, STYLE, element_id="second")
    placed = resolve_collisions([first, second])
    assert (placed[0].x, placed[0].y) == (100, 100)
    assert (placed[1].x, placed[1].y) != (100, 100)
    assert placed[1].element_id == "second"
    a = measure_bounds(placed[0].text, STYLE, placed[0].x, placed[0].y)
    b = measure_bounds(placed[1].text, STYLE, placed[1].x, placed[1].y)
    assert not a.overlaps(b)


def test_crowded_element_keeps_last_probe() -> None:
    blocker = TextElement("\n".join(["X" * 100] * 20), 100, 100, STYLE)
    crowded = TextElement("Hi", 100, 100, STYLE)
    placed = resolve_collisions([blocker, crowded])
    assert (placed[1].x, placed[1].y) == pytest.approx(_probe(crowded, 7))
    a = measure_bounds(placed[0].text, STYLE, placed[0].x, placed[0].y)
    b = measure_bounds(placed[1].text, STYLE, placed[1].x, placed[1].y)
    assert a.overlaps(b)
