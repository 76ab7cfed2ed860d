"""
Live Ledger Reader
Classifies the live inventory ledger rows of a warehouse
"""
import logging
from dataclasses import dataclass, field
from typing import Dict, Iterable, List

from .aggregator import OtherInventoryItem, OtherInventoryKey, add_other_item
from .classifier import classify
from .records import (
    Category,
    LiveLedgerRow,
    NormalizedRecord,
    Provenance,
    SourceType,
    positive_quantity,
    product_key,
)

logger = logging.getLogger(__name__)


@dataclass
class LedgerReading:
    """Live ledger rows with stock, their classified entries and the unclassified remainder"""
    rows: List[LiveLedgerRow] = field(default_factory=list)
    entries: List[NormalizedRecord] = field(default_factory=list)
    other_inventory: Dict[OtherInventoryKey, OtherInventoryItem] = field(default_factory=dict)


def ledger_entry(row: LiveLedgerRow) -> NormalizedRecord:
    """Build the live entry for a ledger row known to hold stock"""
    return NormalizedRecord(
        category=classify(row.product_name, explicit_category=row.category),
        quantity=positive_quantity(row.current_stock),
        unit=row.unit,
        timestamp=row.last_updated,
        origin_reference=row.inventory_id,
        product_key=product_key(row.product_name),
        product_name=row.product_name,
        source_type=SourceType.INVENTORY_LEDGER,
        provenance=Provenance.LIVE,
        product_id=row.product_id,
    )


def read_ledger(rows: Iterable[LiveLedgerRow]) -> LedgerReading:
    """
    Keep ledger rows whose current stock is above zero and classify them
    with the same classifier as historical records.

    Rows with zero, negative or missing stock are dropped entirely.
    Unclassified rows are carried into other inventory with their ledger
    quantity.
    """
    reading = LedgerReading()
    for row in rows:
        if positive_quantity(row.current_stock) is None:
            continue
        entry = ledger_entry(row)
        reading.rows.append(row)
        reading.entries.append(entry)
        if entry.category is Category.UNCLASSIFIED:
            add_other_item(reading.other_inventory, entry)

    logger.debug(
        f"Ledger: {len(reading.rows)} rows with stock, "
        f"{len(reading.other_inventory)} unclassified products"
    )
    return reading
