"""Warehouse Inventory View Schemas"""

from pydantic import BaseModel, ConfigDict, Field
from typing import Dict, List, Optional
from datetime import datetime


class WarehouseCapacity(BaseModel):
    total_capacity: float = 0
    unit: Optional[str] = None
    current_usage: float = 0


class WarehouseMetaOut(BaseModel):
    id: str
    warehouse_number: Optional[str] = None
    name: str
    location: Optional[str] = None
    status: Optional[str] = None
    capacity: WarehouseCapacity = Field(default_factory=WarehouseCapacity)


class HistoryEntryOut(BaseModel):
    origin_reference: str
    quantity: float
    unit: Optional[str] = None
    timestamp: Optional[datetime] = None
    label: str
    source_type: str
    product_name: Optional[str] = None


class CategoryStateOut(BaseModel):
    current_stock: float = 0
    historical_total: float = Field(0, description="Sum of purchase/production history, display only")
    history: List[HistoryEntryOut] = []


class OtherInventoryItemOut(BaseModel):
    product_id: Optional[str] = None
    product_name: str
    quantity: float
    unit: Optional[str] = None


class InventoryTotals(BaseModel):
    total_bags: float = 0
    total_wheat: float = 0
    distinct_other_item_count: int = 0


class ActualStockItem(BaseModel):
    inventory_id: str
    product_id: Optional[str] = None
    product_name: str
    category: str
    current_stock: float
    unit: Optional[str] = None
    last_updated: Optional[datetime] = None


class ActualStockTotals(BaseModel):
    total_items: int = 0
    total_quantity: float = 0


class ProductionOutputOut(BaseModel):
    batch_number: str
    product_name: str
    category: str
    quantity: float
    unit: Optional[str] = None
    production_date: Optional[datetime] = None


class WarehouseInventoryView(BaseModel):
    """Reconciled inventory of one warehouse"""
    model_config = ConfigDict(use_enum_values=True)

    warehouse_meta: WarehouseMetaOut
    categories: Dict[str, CategoryStateOut]
    other_inventory: List[OtherInventoryItemOut] = []
    totals: InventoryTotals
    actual_stock: List[ActualStockItem] = []
    actual_stock_totals: ActualStockTotals = Field(default_factory=ActualStockTotals)
    production: List[ProductionOutputOut] = []
    generated_at: datetime
