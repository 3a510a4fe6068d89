"""Normalize raw Google Vision text-detection payloads into a VisionDocument.

Every field below ``responses[0].fullTextAnnotation`` may be missing from
the provider response. Missing confidences become 0, missing geometry
becomes a degenerate polygon, and words whose symbols reconstruct to an
empty string are dropped. The only unrecoverable input is a payload with no
annotation root at all.
"""

import math
from collections.abc import Iterator, Mapping, Sequence
from typing import Any

from receiptgrid.domain.document import (
    Block,
    BoundingPolygon,
    Page,
    Paragraph,
    Vertex,
    VisionDocument,
    Word,
)

from .geometry import top_y


class MissingAnnotationError(ValueError):
    """Raised when a payload has no fullTextAnnotation to extract from."""


def _as_list(value: Any) -> list[Any]:
    return value if isinstance(value, list) else []


def _as_mapping(value: Any) -> Mapping[str, Any]:
    return value if isinstance(value, Mapping) else {}


def _as_int(value: Any) -> int:
    if isinstance(value, bool):
        return 0
    if isinstance(value, int):
        return value
    if isinstance(value, float) and math.isfinite(value):
        return int(value)
    return 0


def _confidence(value: Any) -> float:
    """Coerce a provider confidence into [0, 1]; anything missing or invalid (NaN, infinity) is 0."""
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return 0.0
    if isinstance(value, int):
        return 1.0 if value >= 1 else 0.0
    if not math.isfinite(value):
        return 0.0
    return max(0.0, min(1.0, value))


def _bounding_polygon(raw: Any) -> BoundingPolygon:
    """
    Build a 4-vertex polygon from a Vision ``boundingBox``.

    Vision omits zero-valued coordinates, so a vertex without ``x`` sits at
    x=0. Polygons with a vertex count other than four are replaced by their
    axis-aligned bounding rectangle.
    """
    vertices = [
        Vertex(_as_int(_as_mapping(v).get("x")), _as_int(_as_mapping(v).get("y")))
        for v in _as_list(_as_mapping(raw).get("vertices"))
    ]
    if not vertices:
        return BoundingPolygon()
    if len(vertices) == 4:
        return BoundingPolygon(vertices=tuple(vertices))
    xs = [v.x for v in vertices]
    ys = [v.y for v in vertices]
    return BoundingPolygon.from_rect(min(xs), min(ys), max(xs), max(ys))


def _word_text(raw_word: Mapping[str, Any]) -> str:
    parts = []
    for symbol in _as_list(raw_word.get("symbols")):
        text = _as_mapping(symbol).get("text")
        if isinstance(text, str):
            parts.append(text)
    return "".join(parts)


def _normalize_paragraph(raw: Mapping[str, Any]) -> Paragraph:
    words: list[Word] = []
    for raw_word in _as_list(raw.get("words")):
        raw_word = _as_mapping(raw_word)
        text = _word_text(raw_word)
        if not text:
            continue
        words.append(
            Word(
                text=text,
                bounding_polygon=_bounding_polygon(raw_word.get("boundingBox")),
                confidence=_confidence(raw_word.get("confidence")),
            )
        )
    return Paragraph(
        text=" ".join(w.text for w in words),
        bounding_polygon=_bounding_polygon(raw.get("boundingBox")),
        confidence=_confidence(raw.get("confidence")),
        words=tuple(words),
    )


def _normalize_block(raw: Mapping[str, Any]) -> Block:
    paragraphs = tuple(_normalize_paragraph(_as_mapping(p)) for p in _as_list(raw.get("paragraphs")))
    block_type = raw.get("blockType")
    return Block(
        # Empty paragraphs stay in the tree but contribute no blank lines.
        text="\n".join(p.text for p in paragraphs if p.text),
        bounding_polygon=_bounding_polygon(raw.get("boundingBox")),
        confidence=_confidence(raw.get("confidence")),
        block_type=block_type if isinstance(block_type, str) and block_type else "TEXT",
        paragraphs=paragraphs,
    )


def _normalize_page(raw: Mapping[str, Any]) -> Page:
    return Page(
        width=_as_int(raw.get("width")),
        height=_as_int(raw.get("height")),
        confidence=_confidence(raw.get("confidence")),
        blocks=tuple(_normalize_block(_as_mapping(b)) for b in _as_list(raw.get("blocks"))),
    )


def normalize_vision_response(payload: Mapping[str, Any]) -> VisionDocument:
    """
    Convert a raw Vision ``images:annotate`` response into a VisionDocument.

    Args:
        payload: Decoded JSON shaped as ``{"responses": [{"fullTextAnnotation": ...}]}``

    Returns:
        Immutable normalized document tree

    Raises:
        MissingAnnotationError: if ``responses[0].fullTextAnnotation`` is absent
    """
    responses = _as_list(_as_mapping(payload).get("responses"))
    response = _as_mapping(responses[0]) if responses else {}
    annotation = response.get("fullTextAnnotation")
    if not isinstance(annotation, Mapping):
        raise MissingAnnotationError("No fullTextAnnotation found in Vision API response")

    text = annotation.get("text")
    return VisionDocument(
        pages=tuple(_normalize_page(_as_mapping(p)) for p in _as_list(annotation.get("pages"))),
        text=text if isinstance(text, str) else "",
        confidence=_confidence(response.get("confidence")),
    )


def iter_words(document: VisionDocument, min_confidence: float = 0.0) -> Iterator[Word]:
    """Yield words in document order, skipping blank or low-confidence tokens."""
    for page in document.pages:
        for block in page.blocks:
            for paragraph in block.paragraphs:
                for word in paragraph.words:
                    if word.confidence >= min_confidence and word.text.strip():
                        yield word


def top_blocks(document: VisionDocument, ratio: float) -> Sequence[Block]:
    """Return first-page blocks whose top edge lies within the top ``ratio`` of the page."""
    if not document.pages:
        return ()
    page = document.pages[0]
    cutoff_y = page.height * ratio
    return tuple(block for block in page.blocks if top_y(block.bounding_polygon) <= cutoff_y)
