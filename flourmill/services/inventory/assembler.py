"""
Response Assembler
Packages reconciled category states into the WarehouseInventoryView
"""
from datetime import datetime
from decimal import Decimal
from typing import Dict, Iterable, List

from flourmill.schemas.inventory import (
    ActualStockItem,
    ActualStockTotals,
    CategoryStateOut,
    HistoryEntryOut,
    InventoryTotals,
    OtherInventoryItemOut,
    ProductionOutputOut,
    WarehouseCapacity,
    WarehouseInventoryView,
    WarehouseMetaOut,
)

from .aggregator import OtherInventoryItem
from .classifier import classify
from .reconciler import CategoryState
from .records import (
    BAG_CATEGORIES,
    Category,
    LiveLedgerRow,
    ProductionOutputRecord,
    TRACKED_CATEGORIES,
    WarehouseMeta,
    parse_timestamp,
    positive_quantity,
)


def _stock(states: Dict[Category, CategoryState], category: Category) -> Decimal:
    state = states.get(category)
    if state is None or state.current_stock <= 0:
        return Decimal("0")
    return state.current_stock


def _warehouse_out(meta: WarehouseMeta) -> WarehouseMetaOut:
    return WarehouseMetaOut(
        id=str(meta.id),
        warehouse_number=meta.warehouse_number,
        name=meta.name,
        location=meta.location,
        status=meta.status,
        capacity=WarehouseCapacity(
            total_capacity=float(meta.total_capacity or 0),
            unit=meta.capacity_unit,
            current_usage=float(meta.current_usage or 0),
        ),
    )


def _category_out(state: CategoryState) -> CategoryStateOut:
    return CategoryStateOut(
        current_stock=float(state.current_stock),
        historical_total=float(state.historical_total),
        history=[
            HistoryEntryOut(
                origin_reference=entry.origin_reference,
                quantity=float(entry.quantity),
                unit=entry.unit,
                timestamp=entry.timestamp,
                label=entry.label.value,
                source_type=entry.source_type,
                product_name=entry.product_name,
            )
            for entry in state.history
        ],
    )


def _actual_stock(rows: Iterable[LiveLedgerRow]) -> List[ActualStockItem]:
    items = []
    for row in rows:
        quantity = positive_quantity(row.current_stock)
        if quantity is None:
            continue
        items.append(ActualStockItem(
            inventory_id=str(row.inventory_id),
            product_id=row.product_id,
            product_name=row.product_name,
            category=classify(row.product_name, explicit_category=row.category).value,
            current_stock=float(quantity),
            unit=row.unit,
            last_updated=row.last_updated,
        ))
    return items


def _production(outputs: Iterable[ProductionOutputRecord]) -> List[ProductionOutputOut]:
    items = []
    for output in outputs:
        quantity = positive_quantity(output.quantity)
        if quantity is None:
            continue
        items.append(ProductionOutputOut(
            batch_number=output.batch_number,
            product_name=output.product_name,
            category=classify(output.product_name, exact=True).value,
            quantity=float(quantity),
            unit=output.unit,
            production_date=output.production_date,
        ))
    items.sort(key=lambda item: parse_timestamp(item.production_date) or datetime.min, reverse=True)
    return items


def assemble(
    category_states: Dict[Category, CategoryState],
    other_inventory: Iterable[OtherInventoryItem],
    warehouse_meta: WarehouseMeta,
    actual_stock: Iterable[LiveLedgerRow] = (),
    production: Iterable[ProductionOutputRecord] = (),
) -> WarehouseInventoryView:
    """Build the view and its totals"""
    other_items = [
        OtherInventoryItemOut(
            product_id=item.product_id,
            product_name=item.product_name,
            quantity=float(item.quantity),
            unit=item.unit,
        )
        for item in other_inventory
    ]

    total_bags = sum((_stock(category_states, category) for category in BAG_CATEGORIES), Decimal("0"))
    total_wheat = _stock(category_states, Category.WHEAT)

    stock_items = _actual_stock(actual_stock)

    return WarehouseInventoryView(
        warehouse_meta=_warehouse_out(warehouse_meta),
        categories={
            category.value: _category_out(category_states.get(category) or CategoryState(category=category))
            for category in TRACKED_CATEGORIES
        },
        other_inventory=other_items,
        totals=InventoryTotals(
            total_bags=float(total_bags),
            total_wheat=float(total_wheat),
            distinct_other_item_count=len(other_items),
        ),
        actual_stock=stock_items,
        actual_stock_totals=ActualStockTotals(
            total_items=len(stock_items),
            total_quantity=sum(item.current_stock for item in stock_items),
        ),
        production=_production(production),
        generated_at=datetime.utcnow(),
    )
