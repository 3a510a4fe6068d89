"""Data models for spatial receipt extraction."""

from dataclasses import dataclass, field
from datetime import date
from decimal import Decimal
from typing import Literal

ColumnType = Literal["description", "quantity", "unit_price", "total_price"]


@dataclass(frozen=True)
class LineItem:
    """A single itemized entry on a receipt."""

    description: str
    total_price: Decimal
    confidence: float
    position: tuple[float, float]  # (x, y) centroid of the source line
    raw_text: str
    quantity: int | None = None
    unit_price: Decimal | None = None
    # Right edge of the price token, used for column alignment checks.
    price_x: int = 0


@dataclass(frozen=True)
class TableColumn:
    """An inferred column band and its semantic role."""

    type: ColumnType
    x_range: tuple[int, int]
    confidence: float


@dataclass(frozen=True)
class MerchantField:
    merchant: str
    confidence: float


@dataclass(frozen=True)
class TotalField:
    amount: Decimal
    confidence: float
    # keyword | largest_amount | keyword_fallback | none
    method: str = "none"


@dataclass(frozen=True)
class DateField:
    date: date
    confidence: float
    # keyword | fallback | placeholder
    method: str = "placeholder"
    raw_text: str = ""

    @property
    def is_placeholder(self) -> bool:
        return self.confidence == 0


@dataclass(frozen=True)
class LineItemsResult:
    items: tuple[LineItem, ...]
    table_structure: tuple[TableColumn, ...]
    confidence: float
    items_sum: Decimal


@dataclass(frozen=True)
class SpatialValidation:
    """Cross-checks between line items and the detected total."""

    mathematical_consistency: bool
    prices_aligned: bool
    vertically_ordered: bool

    @property
    def layout_consistent(self) -> bool:
        return self.prices_aligned and self.vertically_ordered

    @property
    def table_layout_valid(self) -> bool:
        """Stricter verdict used by the table-aware path."""
        return self.mathematical_consistency and self.layout_consistent


@dataclass(frozen=True)
class TotalCorrection:
    """Advisory replacement for a total that disagrees slightly with its items."""

    corrected_total: Decimal
    reason: str


@dataclass(frozen=True)
class ReceiptExtraction:
    """Structured receipt record with per-field confidences.

    A confidence of 0 always means "nothing real was found" for that field;
    the accompanying value is a placeholder (empty merchant, zero total,
    today's date, no items).
    """

    merchant: str
    merchant_confidence: float
    total: Decimal
    total_confidence: float
    date: date
    date_confidence: float
    line_items: tuple[LineItem, ...]
    line_items_confidence: float
    overall_confidence: float
    spatial_validation: bool
    validation: SpatialValidation
    table_structure: tuple[TableColumn, ...] = ()
    line_items_sum: Decimal = Decimal("0.00")
    total_method: str = "none"
    date_method: str = "placeholder"
    total_correction: TotalCorrection | None = None
    warnings: tuple[str, ...] = field(default_factory=tuple)
