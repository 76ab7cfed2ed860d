"""
Record builders shared by the database-backed tests
"""
from datetime import datetime
from typing import Any, Dict

from sqlalchemy.orm import Session

from flourmill.models import (
    BagPurchase,
    FoodPurchase,
    FoodPurchaseItem,
    Inventory,
    Product,
    Production,
    Purchase,
)


def add_bag_purchase(db: Session, warehouse_id: int, number: str, bags: Any,
                     status: str = "Received", purchase_date: datetime = None) -> BagPurchase:
    purchase = BagPurchase(
        purchase_number=number,
        warehouse_id=warehouse_id,
        bags=bags,
        status=status,
        purchase_date=purchase_date or datetime(2024, 1, 1),
    )
    db.add(purchase)
    db.commit()
    return purchase


def add_generic_purchase(db: Session, warehouse_id: int, number: str, bags: Dict = None,
                         food: Dict = None, status: str = "Received",
                         purchase_date: datetime = None) -> Purchase:
    purchase = Purchase(
        purchase_number=number,
        purchase_type="Other",
        warehouse_id=warehouse_id,
        bags=bags or {},
        food=food or {},
        status=status,
        purchase_date=purchase_date or datetime(2024, 1, 1),
    )
    db.add(purchase)
    db.commit()
    return purchase


def add_food_purchase(db: Session, warehouse_id: int, number: str, items: list,
                      status: str = "Approved", purchase_date: datetime = None) -> FoodPurchase:
    purchase = FoodPurchase(
        purchase_number=number,
        warehouse_id=warehouse_id,
        status=status,
        purchase_date=purchase_date or datetime(2024, 1, 1),
        items=[FoodPurchaseItem(**item) for item in items],
    )
    db.add(purchase)
    db.commit()
    return purchase


def add_production(db: Session, warehouse_id: int, batch: str, product_name: str,
                   quantity: Any, unit: str = "bags", status: str = "Completed",
                   production_date: datetime = None) -> Production:
    production = Production(
        batch_number=batch,
        warehouse_id=warehouse_id,
        product_name=product_name,
        quantity_value=quantity,
        quantity_unit=unit,
        status=status,
        production_date=production_date or datetime(2024, 1, 1),
    )
    db.add(production)
    db.commit()
    return production


def add_stock(db: Session, warehouse_id: int, name: str, current_stock: Any,
              category: str = None, unit: str = "bags") -> Inventory:
    product = Product(code=name.upper().replace(" ", "-"), name=name, category=category, unit=unit)
    db.add(product)
    db.flush()
    row = Inventory(
        product_id=product.id,
        warehouse_id=warehouse_id,
        current_stock=current_stock,
        unit=unit,
        last_updated=datetime(2024, 6, 1),
    )
    db.add(row)
    db.commit()
    return row
