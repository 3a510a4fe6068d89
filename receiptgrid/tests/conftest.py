"""Shared pytest fixtures for receiptgrid tests."""

from __future__ import annotations

from collections.abc import Callable
from typing import Any

import pytest

# (text, x0, y0, x1, y1, confidence)
WordSpec = tuple[str, int, int, int, int, float]


def _box(x0: int, y0: int, x1: int, y1: int) -> dict[str, Any]:
    return {"vertices": [{"x": x0, "y": y0}, {"x": x1, "y": y0}, {"x": x1, "y": y1}, {"x": x0, "y": y1}]}


def _vision_word(text: str, x0: int, y0: int, x1: int, y1: int, confidence: float) -> dict[str, Any]:
    return {
        "boundingBox": _box(x0, y0, x1, y1),
        "confidence": confidence,
        "symbols": [{"text": ch} for ch in text],
    }


def _vision_block(words: list[WordSpec], confidence: float) -> dict[str, Any]:
    x0 = min(w[1] for w in words)
    y0 = min(w[2] for w in words)
    x1 = max(w[3] for w in words)
    y1 = max(w[4] for w in words)
    return {
        "boundingBox": _box(x0, y0, x1, y1),
        "confidence": confidence,
        "blockType": "TEXT",
        "paragraphs": [
            {
                "boundingBox": _box(x0, y0, x1, y1),
                "confidence": confidence,
                "words": [_vision_word(*w) for w in words],
            }
        ],
    }


def build_vision_payload(
    blocks: list[tuple[list[WordSpec], float]],
    *,
    width: int = 600,
    height: int = 1000,
) -> dict[str, Any]:
    """Build a Vision ``images:annotate`` response from (words, block confidence) pairs."""
    return {
        "responses": [
            {
                "fullTextAnnotation": {
                    "text": "\n".join(" ".join(w[0] for w in words) for words, _ in blocks),
                    "pages": [
                        {
                            "width": width,
                            "height": height,
                            "confidence": 0.9,
                            "blocks": [_vision_block(words, conf) for words, conf in blocks],
                        }
                    ],
                }
            }
        ]
    }


GROCERY_BLOCKS: list[tuple[list[WordSpec], float]] = [
    ([("ACME", 50, 20, 200, 80, 0.95), ("MARKET", 220, 20, 400, 80, 0.95)], 0.95),
    ([("123", 50, 90, 90, 110, 0.9), ("Main", 100, 90, 160, 110, 0.9), ("St", 170, 90, 200, 110, 0.9)], 0.9),
    (
        [
            ("Apples", 50, 300, 150, 320, 0.9),
            ("3.50", 400, 300, 450, 320, 0.9),
            ("Bread", 50, 340, 140, 360, 0.9),
            ("2.25", 400, 340, 450, 360, 0.9),
            ("Milk", 50, 380, 120, 400, 0.9),
            ("4.00", 400, 380, 450, 400, 0.9),
            ("TOTAL", 50, 450, 130, 470, 0.9),
            ("$9.75", 390, 450, 450, 470, 0.9),
            ("DATE", 50, 500, 110, 520, 0.9),
            ("01/15/2024", 150, 500, 270, 520, 0.9),
        ],
        0.9,
    ),
]


@pytest.fixture
def make_vision_payload() -> Callable[..., dict[str, Any]]:
    return build_vision_payload


@pytest.fixture
def grocery_payload() -> dict[str, Any]:
    """A small, well-formed receipt: merchant, three items, total and date."""
    return build_vision_payload(GROCERY_BLOCKS)
