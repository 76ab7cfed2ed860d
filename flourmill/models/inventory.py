"""
Flour Mill Inventory Models
Product catalog and the live per-warehouse stock ledger
"""
from sqlalchemy import (
    Column, String, Integer, Numeric, DateTime, ForeignKey, UniqueConstraint
)
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
from flourmill.core.database import Base


class Product(Base):
    """Product catalog entry"""
    __tablename__ = "products"

    id = Column(Integer, primary_key=True, autoincrement=True)
    code = Column(String(30), unique=True, doc="Product code")
    name = Column(String(100), nullable=False, doc="Product name")
    category = Column(String(50), doc="Product category")
    subcategory = Column(String(50), doc="Product subcategory")
    unit = Column(String(20), default='kg', doc="Default unit")
    status = Column(String(20), default='Active')


class Inventory(Base):
    """
    Inventory Record - live stock level of one product in one warehouse

    Maintained separately from the purchase and production history.
    """
    __tablename__ = "inventory"

    id = Column(Integer, primary_key=True, autoincrement=True)
    product_id = Column(Integer, ForeignKey("products.id"), nullable=True, index=True)
    warehouse_id = Column(Integer, ForeignKey("warehouses.id"), nullable=True, index=True)

    current_stock = Column(Numeric(15, 3), default=0, doc="Current stock quantity")
    minimum_stock = Column(Numeric(15, 3), default=0, doc="Low stock threshold")
    unit = Column(String(20), doc="Unit of measure")
    status = Column(String(20), default='Active')
    last_updated = Column(DateTime, default=func.current_timestamp(), onupdate=func.current_timestamp())

    # Legacy fields, filled from the product when present
    name = Column(String(100), doc="Product name")
    code = Column(String(30), doc="Product code")
    category = Column(String(50), doc="Product category")

    product = relationship("Product")

    __table_args__ = (
        UniqueConstraint('product_id', 'warehouse_id', name='uq_inventory_product_warehouse'),
    )
