"""
Inventory Record Types
Typed shapes for the stored source records and the normalized intermediate form
"""
from collections.abc import Mapping
from dataclasses import dataclass, field
from datetime import date, datetime, timezone
from decimal import Decimal, InvalidOperation
from enum import Enum
from typing import Any, List, Optional, Tuple


class Category(str, Enum):
    """Tracked product buckets"""
    WHEAT = "wheat"
    ATA = "ata"
    MAIDA = "maida"
    SUJI = "suji"
    FINE = "fine"
    UNCLASSIFIED = "unclassified"


# Keyword priority order
TRACKED_CATEGORIES = (
    Category.WHEAT,
    Category.ATA,
    Category.MAIDA,
    Category.SUJI,
    Category.FINE,
)

BAG_CATEGORIES = (Category.ATA, Category.MAIDA, Category.SUJI, Category.FINE)


class SourceType(str, Enum):
    """Where a record came from"""
    GENERIC_PURCHASE = "GenericPurchase"
    BAG_PURCHASE = "BagPurchase"
    FOOD_PURCHASE = "FoodPurchase"
    PRODUCTION_OUTPUT = "ProductionOutput"
    INVENTORY_LEDGER = "InventoryLedger"


class Provenance(str, Enum):
    HISTORY = "history"
    LIVE = "live"


@dataclass
class QuantityLine:
    """One quantity sub-document (a bag type, wheat, a breakdown entry)"""
    quantity: Any
    unit: Optional[str] = None
    quality: Optional[str] = None
    source: Optional[str] = None


# Keyed quantity breakdown, one (label, line) pair per stored entry
Breakdown = List[Tuple[str, QuantityLine]]


@dataclass
class WarehouseMeta:
    id: str
    name: str
    warehouse_number: Optional[str] = None
    location: Optional[str] = None
    status: Optional[str] = None
    total_capacity: Decimal = Decimal("0")
    capacity_unit: Optional[str] = None
    current_usage: Decimal = Decimal("0")


@dataclass
class GenericPurchaseRecord:
    """Purchase with fixed bag sub-fields (ata/maida/suji/fine) and a wheat sub-field"""
    purchase_number: str
    warehouse_id: str
    purchase_date: Optional[datetime] = None
    bags: Breakdown = field(default_factory=list)
    food: Breakdown = field(default_factory=list)
    status: Optional[str] = None


@dataclass
class BagPurchaseRecord:
    """Bag purchase with a breakdown keyed by free-text product label"""
    purchase_number: str
    warehouse_id: str
    purchase_date: Optional[datetime] = None
    bags: Breakdown = field(default_factory=list)
    status: Optional[str] = None


@dataclass
class FoodLineItem:
    name: str
    quantity: Any
    unit: Optional[str] = None
    category: Optional[str] = None
    quality: Optional[str] = None


@dataclass
class FoodPurchaseRecord:
    purchase_number: str
    warehouse_id: str
    purchase_date: Optional[datetime] = None
    items: List[FoodLineItem] = field(default_factory=list)
    status: Optional[str] = None


@dataclass
class ProductionOutputRecord:
    batch_number: str
    warehouse_id: str
    product_name: str
    quantity: Any
    unit: Optional[str] = None
    production_date: Optional[datetime] = None
    status: Optional[str] = None


@dataclass
class LiveLedgerRow:
    """One row of the live inventory ledger"""
    inventory_id: str
    warehouse_id: str
    product_name: str
    current_stock: Any
    product_id: Optional[str] = None
    category: Optional[str] = None
    unit: Optional[str] = None
    last_updated: Optional[datetime] = None


@dataclass(frozen=True)
class NormalizedRecord:
    """
    Uniform intermediate record

    Historical records carry provenance HISTORY; rows read from the live
    ledger carry provenance LIVE.
    """
    category: Category
    quantity: Decimal
    unit: Optional[str]
    timestamp: Optional[datetime]
    origin_reference: str
    product_key: str
    product_name: str
    source_type: SourceType
    provenance: Provenance = Provenance.HISTORY
    product_id: Optional[str] = None


def positive_quantity(value: Any) -> Optional[Decimal]:
    """
    Parse a stored quantity.

    Returns None for missing, non-numeric, non-finite, zero or negative
    values so that callers can skip the record.
    """
    if value is None or isinstance(value, bool):
        return None
    try:
        quantity = value if isinstance(value, Decimal) else Decimal(str(value).strip())
    except (InvalidOperation, ValueError):
        return None
    if not quantity.is_finite() or quantity <= 0:
        return None
    return quantity


def parse_timestamp(value: Any) -> Optional[datetime]:
    """Coerce a stored date into a naive UTC datetime"""
    if value is None or value == "":
        return None
    if isinstance(value, datetime):
        parsed = value
    elif isinstance(value, date):
        parsed = datetime(value.year, value.month, value.day)
    elif isinstance(value, str):
        text = value.strip()
        if text.endswith("Z"):
            text = text[:-1] + "+00:00"
        try:
            parsed = datetime.fromisoformat(text)
        except ValueError:
            return None
    else:
        return None
    if parsed.tzinfo is not None:
        parsed = parsed.astimezone(timezone.utc).replace(tzinfo=None)
    return parsed


def coerce_line(value: Any, default_unit: Optional[str] = None) -> QuantityLine:
    """Turn a stored sub-document (dict, number, or QuantityLine) into a QuantityLine"""
    if isinstance(value, QuantityLine):
        if value.unit is None and default_unit is not None:
            return QuantityLine(value.quantity, default_unit, value.quality, value.source)
        return value
    if isinstance(value, Mapping):
        return QuantityLine(
            quantity=value.get("quantity"),
            unit=value.get("unit") or default_unit,
            quality=value.get("quality"),
            source=value.get("source"),
        )
    return QuantityLine(quantity=value, unit=default_unit)


def coerce_breakdown(container: Any, default_unit: Optional[str] = None) -> Breakdown:
    """
    Normalize a keyed breakdown into a list of (label, QuantityLine) pairs.

    Accepts a mapping (``{"ATA": {...}}``) or the serialized map form, an
    iterable of ``[label, line]`` pairs or ``{"type": label, ...}`` entries.
    Every entry is kept in order, so a label repeated in the list form yields
    one pair per occurrence. Entries that fit neither shape are dropped.
    """
    if container is None:
        return []
    if isinstance(container, Mapping):
        pairs = container.items()
    elif isinstance(container, (str, bytes)):
        return []
    else:
        try:
            pairs = list(container)
        except TypeError:
            return []

    breakdown: Breakdown = []
    for pair in pairs:
        if isinstance(pair, Mapping):
            label = pair.get("key") or pair.get("type") or pair.get("name")
            line = pair.get("value", pair)
        else:
            try:
                label, line = pair
            except (TypeError, ValueError):
                continue
        if label is None or str(label).strip() == "":
            continue
        breakdown.append((str(label).strip(), coerce_line(line, default_unit)))
    return breakdown


def product_key(name: Optional[str]) -> str:
    """Identity key for a product name (case and whitespace insensitive)"""
    return " ".join((name or "").lower().split())
