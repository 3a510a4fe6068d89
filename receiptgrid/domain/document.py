"""Data models for the normalized OCR document tree (Page -> Block -> Paragraph -> Word)."""

from dataclasses import dataclass, field


@dataclass(frozen=True)
class Vertex:
    """A polygon corner in image pixels."""

    x: int = 0
    y: int = 0


def _degenerate_vertices() -> tuple[Vertex, ...]:
    return (Vertex(), Vertex(), Vertex(), Vertex())


@dataclass(frozen=True)
class BoundingPolygon:
    """Quadrilateral locating a token on the page.

    Always exactly four vertices. Rotation is not handled: every consumer
    assumes the polygon is approximately axis-aligned.
    """

    vertices: tuple[Vertex, ...] = field(default_factory=_degenerate_vertices)

    def __post_init__(self) -> None:
        if len(self.vertices) != 4:
            raise ValueError(f"BoundingPolygon needs 4 vertices, got {len(self.vertices)}")

    @classmethod
    def from_rect(cls, x_min: int, y_min: int, x_max: int, y_max: int) -> "BoundingPolygon":
        """Build a clockwise polygon from an axis-aligned rectangle."""
        return cls(
            vertices=(
                Vertex(x_min, y_min),
                Vertex(x_max, y_min),
                Vertex(x_max, y_max),
                Vertex(x_min, y_max),
            )
        )

    @property
    def is_degenerate(self) -> bool:
        return all(v.x == 0 and v.y == 0 for v in self.vertices)


@dataclass(frozen=True)
class Word:
    """A single OCR token."""

    text: str
    bounding_polygon: BoundingPolygon
    confidence: float


@dataclass(frozen=True)
class Paragraph:
    text: str
    bounding_polygon: BoundingPolygon
    confidence: float
    words: tuple[Word, ...] = ()


@dataclass(frozen=True)
class Block:
    text: str
    bounding_polygon: BoundingPolygon
    confidence: float
    block_type: str = "TEXT"
    paragraphs: tuple[Paragraph, ...] = ()


@dataclass(frozen=True)
class Page:
    width: int
    height: int
    confidence: float
    blocks: tuple[Block, ...] = ()


@dataclass(frozen=True)
class VisionDocument:
    """Normalized OCR annotation for one document."""

    pages: tuple[Page, ...] = ()
    text: str = ""  # Provider-supplied full text, kept for reference
    confidence: float = 0.0
