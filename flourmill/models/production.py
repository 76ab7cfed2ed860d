"""
Flour Mill Production Models
"""
from sqlalchemy import Column, String, Integer, Numeric, DateTime, Text, ForeignKey
from sqlalchemy.sql import func
from flourmill.core.database import Base


class Production(Base):
    """Production batch output"""
    __tablename__ = "productions"

    id = Column(Integer, primary_key=True, autoincrement=True)
    batch_number = Column(String(30), unique=True, nullable=False, doc="Batch number")

    # Wheat Flour / Whole Wheat / Premium Flour / Maida / Suji / Fine / Chokhar / Refraction
    product_name = Column(String(50), nullable=False, doc="Output product name")
    product_type = Column(String(30), default='Finished Goods', doc="Raw Materials / Finished Goods / Repacked Product")
    production_date = Column(DateTime, nullable=False, default=func.current_timestamp())

    quantity_value = Column(Numeric(15, 3), doc="Output quantity")
    quantity_unit = Column(String(10), default='kg', doc="kg / tons / bags / pcs")

    warehouse_id = Column(Integer, ForeignKey("warehouses.id"), nullable=False, index=True)
    status = Column(String(20), default='In Progress', doc="Production status")
    notes = Column(Text)

    created_at = Column(DateTime(timezone=True), server_default=func.current_timestamp())
