"""Tests for grouping OCR words into reading lines."""

from __future__ import annotations

from receiptgrid.domain.document import BoundingPolygon, Word
from receiptgrid.receipt.line_grouping import group_words_into_lines, line_text


def _word(text: str, x: int, y: int, width: int = 40, height: int = 20) -> Word:
    return Word(text=text, bounding_polygon=BoundingPolygon.from_rect(x, y, x + width, y + height), confidence=0.9)


def test_words_join_line_of_first_anchor_within_tolerance() -> None:
    words = [
        _word("d", 10, 130),
        _word("c", 200, 109),
        _word("a", 100, 100),
        _word("b", 0, 101),
    ]

    lines = group_words_into_lines(words, tolerance=10)

    assert [[w.text for w in line] for line in lines] == [["b", "a", "c"], ["d"]]


def test_lines_compare_against_anchor_not_last_word() -> None:
    # Each step is within tolerance of the previous word, but the chain drifts.
    words = [_word("a", 0, 100), _word("b", 50, 108), _word("c", 100, 116)]

    lines = group_words_into_lines(words, tolerance=10)

    assert [[w.text for w in line] for line in lines] == [["a", "b"], ["c"]]


def test_line_text_joins_with_spaces() -> None:
    assert line_text([_word("Apples", 0, 0), _word("3.50", 300, 0)]) == "Apples 3.50"
    assert group_words_into_lines([]) == []
