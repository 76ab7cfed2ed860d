"""
Inventory Data Sources
Read-only collaborators that fetch a warehouse and its source records

DatabaseDataSource reads through SQLAlchemy; FixtureDataSource reads a JSON
document and is used for offline development and tests.
"""
import json
import logging
from abc import ABC, abstractmethod
from collections.abc import Mapping
from contextlib import contextmanager
from datetime import datetime
from decimal import Decimal
from pathlib import Path
from typing import Any, Callable, Iterator, List, Optional, Sequence

from sqlalchemy import or_
from sqlalchemy.orm import Session, selectinload

from flourmill.core.exceptions import ConfigurationError
from flourmill.models import (
    BagPurchase,
    FoodPurchase,
    Inventory,
    Product,
    Production,
    Purchase,
    Warehouse,
)

from .records import (
    BagPurchaseRecord,
    FoodLineItem,
    FoodPurchaseRecord,
    GenericPurchaseRecord,
    LiveLedgerRow,
    ProductionOutputRecord,
    WarehouseMeta,
    coerce_breakdown,
    parse_timestamp,
)

logger = logging.getLogger(__name__)


class WarehouseDataSource(ABC):
    """Fetch operations the inventory engine depends on"""

    name = "abstract"

    @abstractmethod
    def fetch_warehouse(self, warehouse_id: str) -> Optional[WarehouseMeta]:
        """Return the warehouse, or None when the id does not resolve"""

    @abstractmethod
    def fetch_generic_purchases(self, warehouse_id: str, status_filter: Sequence[str]) -> List[GenericPurchaseRecord]:
        pass

    @abstractmethod
    def fetch_bag_purchases(self, warehouse_id: str, status_filter: Sequence[str]) -> List[BagPurchaseRecord]:
        pass

    @abstractmethod
    def fetch_food_purchases(self, warehouse_id: str, status_filter: Sequence[str]) -> List[FoodPurchaseRecord]:
        pass

    @abstractmethod
    def fetch_production_outputs(self, warehouse_id: str, status_filter: Sequence[str]) -> List[ProductionOutputRecord]:
        pass

    @abstractmethod
    def fetch_live_inventory(self, warehouse_id: str) -> List[LiveLedgerRow]:
        """Ledger rows of the warehouse"""


def _as_pk(warehouse_id: Any) -> Optional[int]:
    try:
        return int(str(warehouse_id).strip())
    except (TypeError, ValueError):
        return None


def _str_or_none(value: Any) -> Optional[str]:
    return None if value is None else str(value)


class DatabaseDataSource(WarehouseDataSource):
    """
    SQLAlchemy-backed source.

    Every fetch opens its own session from ``session_factory`` so fetches can
    run in parallel worker threads.
    """

    name = "database"

    def __init__(self, session_factory: Callable[[], Session]):
        self.session_factory = session_factory

    @contextmanager
    def _session(self) -> Iterator[Session]:
        db = self.session_factory()
        try:
            yield db
        finally:
            db.close()

    def fetch_warehouse(self, warehouse_id: str) -> Optional[WarehouseMeta]:
        pk = _as_pk(warehouse_id)
        if pk is None:
            return None
        with self._session() as db:
            warehouse = db.get(Warehouse, pk)
            if warehouse is None:
                return None
            return WarehouseMeta(
                id=str(warehouse.id),
                name=warehouse.name,
                warehouse_number=warehouse.warehouse_number,
                location=warehouse.location,
                status=warehouse.status,
                total_capacity=warehouse.total_capacity or Decimal("0"),
                capacity_unit=warehouse.capacity_unit,
                current_usage=warehouse.current_usage or Decimal("0"),
            )

    def fetch_generic_purchases(self, warehouse_id: str, status_filter: Sequence[str]) -> List[GenericPurchaseRecord]:
        pk = _as_pk(warehouse_id)
        if pk is None:
            return []
        with self._session() as db:
            query = db.query(Purchase).filter(Purchase.warehouse_id == pk)
            if status_filter:
                query = query.filter(Purchase.status.in_(list(status_filter)))
            rows = query.order_by(Purchase.purchase_date.desc(), Purchase.id.desc()).all()
            return [
                GenericPurchaseRecord(
                    purchase_number=row.purchase_number,
                    warehouse_id=str(row.warehouse_id),
                    purchase_date=parse_timestamp(row.purchase_date),
                    bags=coerce_breakdown(row.bags, "pcs"),
                    food=coerce_breakdown(row.food, "kg"),
                    status=row.status,
                )
                for row in rows
            ]

    def fetch_bag_purchases(self, warehouse_id: str, status_filter: Sequence[str]) -> List[BagPurchaseRecord]:
        pk = _as_pk(warehouse_id)
        if pk is None:
            return []
        with self._session() as db:
            query = db.query(BagPurchase).filter(BagPurchase.warehouse_id == pk)
            if status_filter:
                query = query.filter(BagPurchase.status.in_(list(status_filter)))
            rows = query.order_by(BagPurchase.purchase_date.desc(), BagPurchase.id.desc()).all()
            return [
                BagPurchaseRecord(
                    purchase_number=row.purchase_number,
                    warehouse_id=str(row.warehouse_id),
                    purchase_date=parse_timestamp(row.purchase_date),
                    bags=coerce_breakdown(row.bags, "bags"),
                    status=row.status,
                )
                for row in rows
            ]

    def fetch_food_purchases(self, warehouse_id: str, status_filter: Sequence[str]) -> List[FoodPurchaseRecord]:
        pk = _as_pk(warehouse_id)
        if pk is None:
            return []
        with self._session() as db:
            query = (
                db.query(FoodPurchase)
                .options(selectinload(FoodPurchase.items))
                .filter(FoodPurchase.warehouse_id == pk)
            )
            if status_filter:
                query = query.filter(FoodPurchase.status.in_(list(status_filter)))
            rows = query.order_by(FoodPurchase.purchase_date.desc(), FoodPurchase.id.desc()).all()
            return [
                FoodPurchaseRecord(
                    purchase_number=row.purchase_number,
                    warehouse_id=str(row.warehouse_id),
                    purchase_date=parse_timestamp(row.purchase_date),
                    items=[
                        FoodLineItem(
                            name=item.name,
                            quantity=item.quantity,
                            unit=item.unit,
                            category=item.category,
                            quality=item.quality,
                        )
                        for item in row.items
                    ],
                    status=row.status,
                )
                for row in rows
            ]

    def fetch_production_outputs(self, warehouse_id: str, status_filter: Sequence[str]) -> List[ProductionOutputRecord]:
        pk = _as_pk(warehouse_id)
        if pk is None:
            return []
        with self._session() as db:
            query = db.query(Production).filter(Production.warehouse_id == pk)
            if status_filter:
                query = query.filter(Production.status.in_(list(status_filter)))
            rows = query.order_by(Production.production_date.desc(), Production.id.desc()).all()
            return [
                ProductionOutputRecord(
                    batch_number=row.batch_number,
                    warehouse_id=str(row.warehouse_id),
                    product_name=row.product_name,
                    quantity=row.quantity_value,
                    unit=row.quantity_unit,
                    production_date=parse_timestamp(row.production_date),
                    status=row.status,
                )
                for row in rows
            ]

    def fetch_live_inventory(self, warehouse_id: str) -> List[LiveLedgerRow]:
        pk = _as_pk(warehouse_id)
        if pk is None:
            return []
        with self._session() as db:
            rows = (
                db.query(Inventory, Product)
                .outerjoin(Product, Inventory.product_id == Product.id)
                .filter(Inventory.warehouse_id == pk)
                .filter(or_(Inventory.current_stock > 0, Inventory.current_stock.is_(None)))
                .order_by(Inventory.last_updated.desc(), Inventory.id.desc())
                .all()
            )
            return [
                LiveLedgerRow(
                    inventory_id=str(inventory.id),
                    warehouse_id=str(inventory.warehouse_id),
                    product_name=(product.name if product is not None else None) or inventory.name or "",
                    current_stock=inventory.current_stock,
                    product_id=_str_or_none(inventory.product_id),
                    category=(product.category if product is not None else None) or inventory.category,
                    unit=inventory.unit or (product.unit if product is not None else None),
                    last_updated=parse_timestamp(inventory.last_updated),
                )
                for inventory, product in rows
            ]


def _matches(document: Mapping, warehouse_id: str, status_filter: Sequence[str] = ()) -> bool:
    if str(document.get("warehouse_id")) != str(warehouse_id):
        return False
    if status_filter and document.get("status") not in status_filter:
        return False
    return True


class FixtureDataSource(WarehouseDataSource):
    """
    Source backed by an in-memory document, typically loaded from JSON.

    Expected collections: ``warehouses``, ``purchases``, ``bag_purchases``,
    ``food_purchases``, ``productions`` and ``inventory``. Bag breakdowns may
    be JSON objects or lists of ``[label, line]`` pairs.
    """

    name = "fixture"

    def __init__(self, data: Mapping):
        self.data = data

    @classmethod
    def from_file(cls, path: Optional[Path]) -> "FixtureDataSource":
        if path is None:
            raise ConfigurationError("FIXTURE_FILE must be set when DATA_SOURCE is 'fixture'")
        try:
            with open(path, encoding="utf-8") as handle:
                data = json.load(handle)
        except (OSError, ValueError) as e:
            raise ConfigurationError(f"Cannot load fixture file {path}: {e}") from e
        if not isinstance(data, Mapping):
            raise ConfigurationError(f"Fixture file {path} must contain a JSON object")
        logger.info(f"Loaded inventory fixtures from {path}")
        return cls(data)

    def _collection(self, name: str) -> List[Mapping]:
        return [doc for doc in self.data.get(name) or [] if isinstance(doc, Mapping)]

    def fetch_warehouse(self, warehouse_id: str) -> Optional[WarehouseMeta]:
        for doc in self._collection("warehouses"):
            if str(doc.get("id")) != str(warehouse_id):
                continue
            capacity = doc.get("capacity") or {}
            return WarehouseMeta(
                id=str(doc.get("id")),
                name=doc.get("name") or "",
                warehouse_number=doc.get("warehouse_number"),
                location=doc.get("location"),
                status=doc.get("status"),
                total_capacity=Decimal(str(capacity.get("total_capacity") or 0)),
                capacity_unit=capacity.get("unit"),
                current_usage=Decimal(str(capacity.get("current_usage") or 0)),
            )
        return None

    def fetch_generic_purchases(self, warehouse_id: str, status_filter: Sequence[str]) -> List[GenericPurchaseRecord]:
        records = [
            GenericPurchaseRecord(
                purchase_number=str(doc.get("purchase_number") or ""),
                warehouse_id=str(doc.get("warehouse_id")),
                purchase_date=parse_timestamp(doc.get("purchase_date")),
                bags=coerce_breakdown(doc.get("bags"), "pcs"),
                food=coerce_breakdown(doc.get("food"), "kg"),
                status=doc.get("status"),
            )
            for doc in self._collection("purchases")
            if _matches(doc, warehouse_id, status_filter)
        ]
        return self._sorted(records, "purchase_date")

    def fetch_bag_purchases(self, warehouse_id: str, status_filter: Sequence[str]) -> List[BagPurchaseRecord]:
        records = [
            BagPurchaseRecord(
                purchase_number=str(doc.get("purchase_number") or ""),
                warehouse_id=str(doc.get("warehouse_id")),
                purchase_date=parse_timestamp(doc.get("purchase_date")),
                bags=coerce_breakdown(doc.get("bags"), "bags"),
                status=doc.get("status"),
            )
            for doc in self._collection("bag_purchases")
            if _matches(doc, warehouse_id, status_filter)
        ]
        return self._sorted(records, "purchase_date")

    def fetch_food_purchases(self, warehouse_id: str, status_filter: Sequence[str]) -> List[FoodPurchaseRecord]:
        records = [
            FoodPurchaseRecord(
                purchase_number=str(doc.get("purchase_number") or ""),
                warehouse_id=str(doc.get("warehouse_id")),
                purchase_date=parse_timestamp(doc.get("purchase_date")),
                items=[
                    FoodLineItem(
                        name=str(item.get("name") or ""),
                        quantity=item.get("quantity"),
                        unit=item.get("unit"),
                        category=item.get("category"),
                        quality=item.get("quality"),
                    )
                    for item in doc.get("items") or doc.get("food_items") or []
                    if isinstance(item, Mapping)
                ],
                status=doc.get("status"),
            )
            for doc in self._collection("food_purchases")
            if _matches(doc, warehouse_id, status_filter)
        ]
        return self._sorted(records, "purchase_date")

    def fetch_production_outputs(self, warehouse_id: str, status_filter: Sequence[str]) -> List[ProductionOutputRecord]:
        records = []
        for doc in self._collection("productions"):
            if not _matches(doc, warehouse_id, status_filter):
                continue
            quantity = doc.get("quantity")
            unit = doc.get("unit")
            if isinstance(quantity, Mapping):
                quantity, unit = quantity.get("value"), quantity.get("unit") or unit
            records.append(ProductionOutputRecord(
                batch_number=str(doc.get("batch_number") or ""),
                warehouse_id=str(doc.get("warehouse_id")),
                product_name=str(doc.get("product_name") or ""),
                quantity=quantity,
                unit=unit,
                production_date=parse_timestamp(doc.get("production_date")),
                status=doc.get("status"),
            ))
        return self._sorted(records, "production_date")

    def fetch_live_inventory(self, warehouse_id: str) -> List[LiveLedgerRow]:
        products = {str(doc.get("id")): doc for doc in self._collection("products")}
        rows = []
        for doc in self._collection("inventory"):
            if not _matches(doc, warehouse_id):
                continue
            product = products.get(str(doc.get("product_id")), {})
            rows.append(LiveLedgerRow(
                inventory_id=str(doc.get("id")),
                warehouse_id=str(doc.get("warehouse_id")),
                product_name=product.get("name") or doc.get("name") or "",
                current_stock=doc.get("current_stock"),
                product_id=_str_or_none(doc.get("product_id")),
                category=product.get("category") or doc.get("category"),
                unit=doc.get("unit") or product.get("unit"),
                last_updated=parse_timestamp(doc.get("last_updated")),
            ))
        return rows

    @staticmethod
    def _sorted(records: List[Any], attribute: str) -> List[Any]:
        return sorted(records, key=lambda record: getattr(record, attribute) or datetime.min, reverse=True)


def build_data_source(settings, session_factory: Optional[Callable[[], Session]] = None) -> WarehouseDataSource:
    """Select the data source named by settings.DATA_SOURCE"""
    if settings.DATA_SOURCE == "fixture":
        return FixtureDataSource.from_file(settings.FIXTURE_FILE)
    if settings.DATA_SOURCE == "database":
        if session_factory is None:
            from flourmill.core.database import SessionLocal

            session_factory = SessionLocal
        return DatabaseDataSource(session_factory)
    raise ConfigurationError(f"Unknown data source: {settings.DATA_SOURCE}")
