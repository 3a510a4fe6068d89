"""Cluster OCR words into horizontal reading lines."""

from collections.abc import Iterable

from receiptgrid.domain.document import Word

from .geometry import DEFAULT_SAME_LINE_TOLERANCE, is_same_line, leftmost_x, top_y


def group_words_into_lines(
    words: Iterable[Word],
    tolerance: float = DEFAULT_SAME_LINE_TOLERANCE,
) -> list[list[Word]]:
    """
    Group words into lines by vertical-center proximity.

    Words are visited top to bottom. Each word joins the first existing line
    whose anchor (the line's first word) is on the same line within
    ``tolerance``; otherwise it starts a new line. Comparing against the
    anchor rather than the last word keeps lines from drifting down the page.

    Which words form a line depends on the confidence filter the caller
    applied beforehand.

    Returns:
        Lines in top-to-bottom order of their anchors, each sorted left to right
    """
    lines: list[list[Word]] = []
    for word in sorted(words, key=lambda w: top_y(w.bounding_polygon)):
        for line in lines:
            if is_same_line(word.bounding_polygon, line[0].bounding_polygon, tolerance):
                line.append(word)
                break
        else:
            lines.append([word])

    for line in lines:
        line.sort(key=lambda w: leftmost_x(w.bounding_polygon))
    return lines


def line_text(line: Iterable[Word]) -> str:
    """Join a line's word texts with single spaces."""
    return " ".join(w.text for w in line)
