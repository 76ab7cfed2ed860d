"""
Test Configuration and Fixtures
Shared testing infrastructure for the flour mill inventory service
"""
import os

# Settings are read at import time
os.environ.setdefault("DATABASE_URL", "sqlite:///./test_flourmill.db")
os.environ.setdefault("DATA_SOURCE", "database")
os.environ.setdefault("AUTO_CREATE_TABLES", "true")

import pytest
from decimal import Decimal
from typing import Any, Dict, Generator
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker, Session
from sqlalchemy.pool import StaticPool

from flourmill.main import app
from flourmill.api import deps
from flourmill.core.database import Base
from flourmill.models import Warehouse
from flourmill.services.inventory import (
    DatabaseDataSource,
    FixtureDataSource,
    WarehouseInventoryService,
)

# Test database URL - in-memory SQLite shared through a single connection
TEST_DATABASE_URL = "sqlite://"

# Create test engine
engine = create_engine(
    TEST_DATABASE_URL,
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)

# Create test session
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


@pytest.fixture(scope="function")
def db_session() -> Generator[Session, None, None]:
    """Create a fresh database session for each test"""
    Base.metadata.create_all(bind=engine)

    session = TestingSessionLocal()
    try:
        yield session
    finally:
        session.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture
def database_source(db_session: Session) -> DatabaseDataSource:
    return DatabaseDataSource(TestingSessionLocal)


@pytest.fixture
def database_service(database_source: DatabaseDataSource) -> WarehouseInventoryService:
    """Service over the test database; one worker since SQLite shares one connection"""
    return WarehouseInventoryService(database_source, max_workers=1)


@pytest.fixture(scope="function")
def client(database_service: WarehouseInventoryService) -> Generator[TestClient, None, None]:
    """Create a test client with the inventory service bound to the test database"""
    app.dependency_overrides[deps.get_inventory_service] = lambda: database_service
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


@pytest.fixture
def warehouse(db_session: Session) -> Warehouse:
    """Create a test warehouse"""
    warehouse = Warehouse(
        warehouse_number="WH-0001",
        name="Main Mill Store",
        location="Lahore",
        status="Active",
        total_capacity=Decimal("5000"),
        capacity_unit="50kg bags",
        current_usage=Decimal("1200"),
    )
    db_session.add(warehouse)
    db_session.commit()
    db_session.refresh(warehouse)
    return warehouse


@pytest.fixture
def fixture_data() -> Dict[str, Any]:
    """Offline fixture document for warehouse 'wh-1'"""
    return {
        "warehouses": [
            {
                "id": "wh-1",
                "warehouse_number": "WH-0001",
                "name": "Main Mill Store",
                "location": "Lahore",
                "status": "Active",
                "capacity": {"total_capacity": 5000, "unit": "50kg bags", "current_usage": 1200},
            }
        ],
        "purchases": [
            {
                "purchase_number": "PUR-001",
                "warehouse_id": "wh-1",
                "status": "Received",
                "purchase_date": "2024-02-01T10:00:00Z",
                "bags": {"maida": {"quantity": 50, "unit": "pcs"}, "suji": {"quantity": 0}},
                "food": {"wheat": {"quantity": 900, "unit": "kg", "quality": "Premium"}},
            },
            {
                "purchase_number": "PUR-002",
                "warehouse_id": "wh-1",
                "status": "Draft",
                "purchase_date": "2024-02-02",
                "bags": {"ata": {"quantity": 999}},
            },
        ],
        "bag_purchases": [
            {
                "purchase_number": "BAG-001",
                "warehouse_id": "wh-1",
                "status": "Received",
                "purchase_date": "2024-01-05",
                "bags": [["ATA", {"quantity": 200, "unit": "bags"}], ["Fine", {"quantity": 30}]],
            },
            {
                "purchase_number": "BAG-002",
                "warehouse_id": "wh-2",
                "status": "Received",
                "purchase_date": "2024-01-06",
                "bags": {"ATA": {"quantity": 7}},
            },
        ],
        "food_purchases": [
            {
                "purchase_number": "FP-001",
                "warehouse_id": "wh-1",
                "status": "Completed",
                "purchase_date": "2024-03-01",
                "items": [{"name": "Wheat Grain", "quantity": 2, "unit": "tons", "quality": "Standard"}],
            }
        ],
        "productions": [
            {
                "batch_number": "PROD-001",
                "warehouse_id": "wh-1",
                "product_name": "Chokhar",
                "quantity": {"value": 40, "unit": "bags"},
                "status": "Completed",
                "production_date": "2024-03-05",
            },
            {
                "batch_number": "PROD-002",
                "warehouse_id": "wh-1",
                "product_name": "Suji",
                "quantity": 15,
                "unit": "bags",
                "status": "Completed",
                "production_date": "2024-03-06",
            },
        ],
        "products": [
            {"id": "p-ata", "name": "Ata 50kg", "category": "Finished Goods", "unit": "bags"},
        ],
        "inventory": [
            {"id": "inv-1", "warehouse_id": "wh-1", "product_id": "p-ata", "current_stock": 120},
            {"id": "inv-2", "warehouse_id": "wh-1", "name": "Empty Sacks", "current_stock": 75, "unit": "pcs"},
            {"id": "inv-3", "warehouse_id": "wh-1", "name": "Maida", "current_stock": 0},
        ],
    }


@pytest.fixture
def fixture_source(fixture_data: Dict[str, Any]) -> FixtureDataSource:
    return FixtureDataSource(fixture_data)
