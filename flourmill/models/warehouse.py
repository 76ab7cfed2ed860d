"""
Flour Mill Warehouse Models
SQLAlchemy model for warehouse master data
"""
from sqlalchemy import Column, String, Integer, Numeric, DateTime, Text
from sqlalchemy.sql import func
from flourmill.core.database import Base


class Warehouse(Base):
    """Warehouse Record - Warehouse master data"""
    __tablename__ = "warehouses"

    id = Column(Integer, primary_key=True, autoincrement=True, doc="Warehouse ID")
    warehouse_number = Column(String(20), unique=True, doc="Warehouse number (e.g. WH-0001)")

    # Warehouse Information
    name = Column(String(100), nullable=False, doc="Warehouse name")
    location = Column(String(200), nullable=False, doc="Warehouse location")
    status = Column(String(20), default='Active', doc="Active / Inactive")
    description = Column(Text, default='', doc="Warehouse description")

    # Capacity
    total_capacity = Column(Numeric(15, 3), default=0, doc="Total storage capacity")
    capacity_unit = Column(String(20), default='50kg bags', doc="Capacity unit")
    current_usage = Column(Numeric(15, 3), default=0, doc="Current capacity usage")

    # Audit Trail
    created_at = Column(DateTime(timezone=True), server_default=func.current_timestamp())
