"""
Warehouse Inventory Services
Normalization, aggregation and reconciliation of warehouse stock
"""
from .classifier import classify
from .normalizer import normalize
from .aggregator import aggregate
from .ledger import read_ledger
from .reconciler import reconcile, reconcile_other_inventory
from .assembler import assemble
from .sources import (
    DatabaseDataSource,
    FixtureDataSource,
    WarehouseDataSource,
    build_data_source,
)
from .service import WarehouseInventoryService

__all__ = [
    "classify",
    "normalize",
    "aggregate",
    "read_ledger",
    "reconcile",
    "reconcile_other_inventory",
    "assemble",
    "DatabaseDataSource",
    "FixtureDataSource",
    "WarehouseDataSource",
    "build_data_source",
    "WarehouseInventoryService",
]
