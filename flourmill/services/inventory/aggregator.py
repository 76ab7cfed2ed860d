"""
Historical Aggregator
Folds normalized purchase/production records into per-category running totals
"""
from dataclasses import dataclass, field
from datetime import datetime
from decimal import Decimal
from typing import Dict, Iterable, List, Optional, Tuple

from .records import Category, NormalizedRecord, TRACKED_CATEGORIES, parse_timestamp

# Other inventory is keyed by product identity and unit; quantities in
# different units are never added together
OtherInventoryKey = Tuple[str, str]


@dataclass
class CategoryHistory:
    """Naive total and ordered history of one category"""
    total: Decimal = Decimal("0")
    history: List[NormalizedRecord] = field(default_factory=list)


@dataclass
class OtherInventoryItem:
    """Stock that does not belong to a tracked category"""
    product_id: Optional[str]
    product_name: str
    quantity: Decimal
    unit: Optional[str] = None


@dataclass
class HistoricalAggregate:
    categories: Dict[Category, CategoryHistory]
    other_inventory: Dict[OtherInventoryKey, OtherInventoryItem]


def order_newest_first(records: Iterable[NormalizedRecord]) -> List[NormalizedRecord]:
    """
    Sort records newest first within each source, keeping sources in the
    order they first appear. Records without a timestamp go last.
    """
    groups: Dict[object, List[NormalizedRecord]] = {}
    for record in records:
        groups.setdefault(record.source_type, []).append(record)

    ordered: List[NormalizedRecord] = []
    for group in groups.values():
        ordered.extend(sorted(group, key=lambda r: parse_timestamp(r.timestamp) or datetime.min, reverse=True))
    return ordered


def other_item_key(product_key: str, unit: Optional[str]) -> OtherInventoryKey:
    return product_key, (unit or "").strip().lower()


def add_other_item(bucket: Dict[OtherInventoryKey, OtherInventoryItem], record: NormalizedRecord) -> None:
    """Accumulate a record into the other-inventory bucket keyed by product and unit"""
    key = other_item_key(record.product_key, record.unit)
    item = bucket.get(key)
    if item is None:
        bucket[key] = OtherInventoryItem(
            product_id=record.product_id or record.product_key,
            product_name=record.product_name,
            quantity=record.quantity,
            unit=record.unit,
        )
    else:
        item.quantity += record.quantity


def aggregate(
    records: Iterable[NormalizedRecord],
    sorted_by_timestamp_desc: bool = False,
) -> HistoricalAggregate:
    """
    Group normalized historical records by category.

    ``total`` is the naive sum per category and is for display only.
    History keeps input order when ``sorted_by_timestamp_desc`` is True,
    otherwise records are ordered with order_newest_first first.
    Unclassified records go to the other-inventory bucket instead.
    """
    if not sorted_by_timestamp_desc:
        records = order_newest_first(records)

    categories = {category: CategoryHistory() for category in TRACKED_CATEGORIES}
    other_inventory: Dict[OtherInventoryKey, OtherInventoryItem] = {}

    for record in records:
        if record.quantity <= 0:
            continue
        if record.category is Category.UNCLASSIFIED:
            add_other_item(other_inventory, record)
            continue
        bucket = categories[record.category]
        bucket.total += record.quantity
        bucket.history.append(record)

    return HistoricalAggregate(categories=categories, other_inventory=other_inventory)
