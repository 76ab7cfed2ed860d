"""
Flour Mill Purchase Models
SQLAlchemy models for the three purchase record types

Each purchase type was introduced separately and stores its quantities in a
different shape:
- Purchase: fixed ``bags`` (ata/maida/suji/fine) and ``food`` (wheat) sub-documents
- BagPurchase: ``bags`` breakdown keyed by free-text product label
- FoodPurchase: list of food line items
"""
from sqlalchemy import (
    Column, String, Integer, Numeric, DateTime, Text, JSON, ForeignKey, Index
)
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
from flourmill.core.database import Base


class Purchase(Base):
    """Generic Purchase Record - bags and/or wheat in one document"""
    __tablename__ = "purchases"

    id = Column(Integer, primary_key=True, autoincrement=True)
    purchase_number = Column(String(30), unique=True, nullable=False, doc="Purchase number")
    purchase_type = Column(String(10), nullable=False, default='Other', doc="Bags / Food / Other")

    # {"ata": {"quantity": 10, "unit": "pcs"}, "maida": {...}, "suji": {...}, "fine": {...}}
    bags = Column(JSON, default=dict, doc="Bag sub-documents keyed by bag type")
    # {"wheat": {"quantity": 500, "unit": "kg", "source": "Government", "quality": "Standard"}}
    food = Column(JSON, default=dict, doc="Food sub-documents")

    supplier_name = Column(String(100), doc="Supplier name")
    purchase_date = Column(DateTime, nullable=False, default=func.current_timestamp(), doc="Purchase date")
    warehouse_id = Column(Integer, ForeignKey("warehouses.id"), nullable=False, index=True)
    status = Column(String(20), default='Draft', doc="Draft / Ordered / Received / Cancelled")
    notes = Column(Text)

    created_at = Column(DateTime(timezone=True), server_default=func.current_timestamp())

    __table_args__ = (
        Index('ix_purchases_warehouse_status', 'warehouse_id', 'status'),
    )


class BagPurchase(Base):
    """Bag Purchase Record - bag breakdown keyed by product label"""
    __tablename__ = "bag_purchases"

    id = Column(Integer, primary_key=True, autoincrement=True)
    purchase_number = Column(String(30), unique=True, nullable=False, doc="Purchase number")
    supplier_name = Column(String(100), doc="Supplier name")
    purchase_date = Column(DateTime, nullable=False, default=func.current_timestamp(), doc="Purchase date")

    # {"ATA": {"quantity": 100, "unit": "50kg bags"}, "MAIDA": {...}}
    # Older rows were written from a serialized map: [["ATA", {...}], ...]
    bags = Column(JSON, default=dict, doc="Bag breakdown keyed by product label")
    total_quantity = Column(Numeric(15, 3), default=0, doc="Total bags")

    status = Column(String(20), default='Pending', doc="Pending / Received / Cancelled / Completed")
    received_date = Column(DateTime)
    warehouse_id = Column(Integer, ForeignKey("warehouses.id"), nullable=False, index=True)
    notes = Column(Text)

    created_at = Column(DateTime(timezone=True), server_default=func.current_timestamp())

    __table_args__ = (
        Index('ix_bag_purchases_warehouse_status', 'warehouse_id', 'status'),
    )


class FoodPurchase(Base):
    """Food Purchase Record - wheat bought from government or private suppliers"""
    __tablename__ = "food_purchases"

    id = Column(Integer, primary_key=True, autoincrement=True)
    purchase_number = Column(String(30), unique=True, nullable=False, doc="Purchase number")
    supplier_name = Column(String(100), doc="Supplier name")
    purchase_date = Column(DateTime, nullable=False, default=func.current_timestamp(), doc="Purchase date")
    status = Column(String(20), default='Draft', doc="Draft / Pending / Approved / Completed / Cancelled")
    warehouse_id = Column(Integer, ForeignKey("warehouses.id"), nullable=True, index=True)
    notes = Column(Text)

    created_at = Column(DateTime(timezone=True), server_default=func.current_timestamp())

    items = relationship(
        "FoodPurchaseItem",
        back_populates="food_purchase",
        cascade="all, delete-orphan",
        order_by="FoodPurchaseItem.id",
    )


class FoodPurchaseItem(Base):
    """Food Purchase line item"""
    __tablename__ = "food_purchase_items"

    id = Column(Integer, primary_key=True, autoincrement=True)
    food_purchase_id = Column(Integer, ForeignKey("food_purchases.id", ondelete="CASCADE"), nullable=False, index=True)

    name = Column(String(100), nullable=False, doc="Item name")
    category = Column(String(30), default='Wheat Grain', doc="Wheat Grain / Raw Materials / Other")
    quantity = Column(Numeric(15, 3), doc="Quantity purchased")
    unit = Column(String(20), default='tons', doc="Unit of measure")
    quality = Column(String(20), default='Standard', doc="Premium / Standard / Basic")

    food_purchase = relationship("FoodPurchase", back_populates="items")
