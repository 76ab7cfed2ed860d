"""
Record Normalizer
Converts the heterogeneous purchase and production records into NormalizedRecord
"""
import logging
from typing import Any, Callable, Dict, List

from .classifier import classify, is_ambiguous
from .records import (
    BAG_CATEGORIES,
    BagPurchaseRecord,
    Category,
    FoodPurchaseRecord,
    GenericPurchaseRecord,
    NormalizedRecord,
    ProductionOutputRecord,
    SourceType,
    coerce_breakdown,
    positive_quantity,
    product_key,
)

logger = logging.getLogger(__name__)

DEFAULT_BAG_UNIT = "bags"
DEFAULT_WHEAT_UNIT = "kg"

_BAG_FIELDS = {category.value: category for category in BAG_CATEGORIES}


def _skipped(source_type: SourceType, reference: str, detail: str, value: Any) -> None:
    logger.debug(f"Skipping {source_type.value} {reference} {detail}: quantity={value!r}")


def _with_quality(reference: str, quality: Any) -> str:
    if quality:
        return f"{reference} (Quality: {quality})"
    return reference


def normalize_generic_purchase(purchase: GenericPurchaseRecord) -> List[NormalizedRecord]:
    """One record per populated bag sub-field plus one for wheat"""
    records: List[NormalizedRecord] = []
    for label, line in coerce_breakdown(purchase.bags, "pcs"):
        category = _BAG_FIELDS.get(label.lower())
        if category is None:
            continue
        quantity = positive_quantity(line.quantity)
        if quantity is None:
            if line.quantity not in (None, 0):
                _skipped(SourceType.GENERIC_PURCHASE, purchase.purchase_number, f"bags.{category.value}", line.quantity)
            continue
        records.append(NormalizedRecord(
            category=classify(category.value, explicit_category=category.value),
            quantity=quantity,
            unit=line.unit,
            timestamp=purchase.purchase_date,
            origin_reference=purchase.purchase_number,
            product_key=category.value,
            product_name=category.value.capitalize(),
            source_type=SourceType.GENERIC_PURCHASE,
        ))

    for label, line in coerce_breakdown(purchase.food, DEFAULT_WHEAT_UNIT):
        if label.lower() != Category.WHEAT.value:
            continue
        quantity = positive_quantity(line.quantity)
        if quantity is not None:
            records.append(NormalizedRecord(
                category=Category.WHEAT,
                quantity=quantity,
                unit=line.unit,
                timestamp=purchase.purchase_date,
                origin_reference=_with_quality(purchase.purchase_number, line.quality),
                product_key=Category.WHEAT.value,
                product_name="Wheat",
                source_type=SourceType.GENERIC_PURCHASE,
            ))
        elif line.quantity not in (None, 0):
            _skipped(SourceType.GENERIC_PURCHASE, purchase.purchase_number, "food.wheat", line.quantity)

    return records


def normalize_bag_purchase(purchase: BagPurchaseRecord) -> List[NormalizedRecord]:
    """One record per breakdown entry, classified by its label"""
    records: List[NormalizedRecord] = []
    for label, line in coerce_breakdown(purchase.bags, DEFAULT_BAG_UNIT):
        quantity = positive_quantity(line.quantity)
        if quantity is None:
            if line.quantity not in (None, 0):
                _skipped(SourceType.BAG_PURCHASE, purchase.purchase_number, f"bags[{label}]", line.quantity)
            continue
        if is_ambiguous(label):
            logger.debug(f"Label {label!r} on {purchase.purchase_number} matches several categories")
        records.append(NormalizedRecord(
            category=classify(label),
            quantity=quantity,
            unit=line.unit,
            timestamp=purchase.purchase_date,
            origin_reference=purchase.purchase_number,
            product_key=product_key(label),
            product_name=label,
            source_type=SourceType.BAG_PURCHASE,
        ))
    return records


def normalize_food_purchase(purchase: FoodPurchaseRecord) -> List[NormalizedRecord]:
    """Food purchases are wheat-only: every line item counts as wheat"""
    records: List[NormalizedRecord] = []
    for item in purchase.items or []:
        quantity = positive_quantity(item.quantity)
        if quantity is None:
            _skipped(SourceType.FOOD_PURCHASE, purchase.purchase_number, f"item {item.name!r}", item.quantity)
            continue
        records.append(NormalizedRecord(
            category=Category.WHEAT,
            quantity=quantity,
            unit=item.unit or DEFAULT_WHEAT_UNIT,
            timestamp=purchase.purchase_date,
            origin_reference=_with_quality(purchase.purchase_number, item.quality),
            product_key=product_key(item.name) or Category.WHEAT.value,
            product_name=item.name,
            source_type=SourceType.FOOD_PURCHASE,
        ))
    return records


def normalize_production_output(output: ProductionOutputRecord) -> List[NormalizedRecord]:
    """Production outputs carry standard product names, matched exactly"""
    quantity = positive_quantity(output.quantity)
    if quantity is None:
        _skipped(SourceType.PRODUCTION_OUTPUT, output.batch_number, output.product_name, output.quantity)
        return []
    return [NormalizedRecord(
        category=classify(output.product_name, exact=True),
        quantity=quantity,
        unit=output.unit,
        timestamp=output.production_date,
        origin_reference=output.batch_number,
        product_key=product_key(output.product_name),
        product_name=output.product_name,
        source_type=SourceType.PRODUCTION_OUTPUT,
    )]


_NORMALIZERS: Dict[type, Callable[[Any], List[NormalizedRecord]]] = {
    GenericPurchaseRecord: normalize_generic_purchase,
    BagPurchaseRecord: normalize_bag_purchase,
    FoodPurchaseRecord: normalize_food_purchase,
    ProductionOutputRecord: normalize_production_output,
}


def normalize(record: Any) -> List[NormalizedRecord]:
    """
    Normalize any supported source record.

    Returns an empty list for records that yield nothing, including records
    of an unknown shape. Never raises for bad data.
    """
    handler = _NORMALIZERS.get(type(record))
    if handler is None:
        logger.debug(f"Skipping record of unknown shape: {type(record).__name__}")
        return []
    return handler(record)
