"""
Reconciler
Decides, per category, whether the live ledger or the history determines current stock

When the live ledger holds stock for a category, that stock is the only
available quantity and the purchase/production history is kept as audit
trail. When it holds nothing, current stock is zero and the history is
flagged as not available.
"""
from dataclasses import dataclass, field
from datetime import datetime
from decimal import Decimal
from enum import Enum
from typing import Dict, Iterable, List, Optional

from .aggregator import CategoryHistory, OtherInventoryItem, OtherInventoryKey
from .records import Category, NormalizedRecord, TRACKED_CATEGORIES


class HistoryLabel(str, Enum):
    CURRENT_STOCK = "Current Stock"
    PURCHASE_HISTORY = "Purchase History"
    NOT_AVAILABLE = "Purchase History (Not Available)"


@dataclass
class HistoryEntry:
    origin_reference: str
    quantity: Decimal
    unit: Optional[str]
    timestamp: Optional[datetime]
    label: HistoryLabel
    source_type: str
    product_name: Optional[str] = None


@dataclass
class CategoryState:
    """Reconciled stock of one tracked category"""
    category: Category
    current_stock: Decimal = Decimal("0")
    historical_total: Decimal = Decimal("0")
    history: List[HistoryEntry] = field(default_factory=list)

    @property
    def has_live_stock(self) -> bool:
        return self.current_stock > 0


def _entry(record: NormalizedRecord, label: HistoryLabel) -> HistoryEntry:
    return HistoryEntry(
        origin_reference=record.origin_reference,
        quantity=record.quantity,
        unit=record.unit,
        timestamp=record.timestamp,
        label=label,
        source_type=record.source_type.value,
        product_name=record.product_name,
    )


def reconcile_category(
    category: Category,
    historical: CategoryHistory,
    live: List[NormalizedRecord],
) -> CategoryState:
    partition = [
        entry for entry in live
        if entry.category is category and entry.quantity is not None and entry.quantity > 0
    ]
    live_total = sum((entry.quantity for entry in partition), Decimal("0"))

    if live_total > 0:
        history = [_entry(entry, HistoryLabel.CURRENT_STOCK) for entry in partition]
        history.extend(_entry(record, HistoryLabel.PURCHASE_HISTORY) for record in historical.history)
        return CategoryState(
            category=category,
            current_stock=live_total,
            historical_total=historical.total,
            history=history,
        )

    return CategoryState(
        category=category,
        current_stock=Decimal("0"),
        historical_total=historical.total,
        history=[_entry(record, HistoryLabel.NOT_AVAILABLE) for record in historical.history],
    )


def reconcile(
    historical: Dict[Category, CategoryHistory],
    live: Iterable[NormalizedRecord],
) -> Dict[Category, CategoryState]:
    """
    Reconcile every tracked category independently.

    Categories missing from ``historical`` are treated as having no history.
    Every live entry counts once; entries for the same category are summed.
    """
    live = list(live)
    return {
        category: reconcile_category(category, historical.get(category) or CategoryHistory(), live)
        for category in TRACKED_CATEGORIES
    }


def reconcile_other_inventory(
    historical: Dict[OtherInventoryKey, OtherInventoryItem],
    live: Dict[OtherInventoryKey, OtherInventoryItem],
) -> List[OtherInventoryItem]:
    """
    Merge unclassified stock keyed by product and unit. A (product, unit)
    present in the live ledger reports the ledger quantity only; history-only
    keys keep their history total.
    """
    merged = list(live.values())
    merged.extend(item for key, item in historical.items() if key not in live)
    return merged
