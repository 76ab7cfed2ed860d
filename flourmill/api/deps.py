"""
API Dependencies
Common dependencies for API endpoints
"""
from functools import lru_cache

from flourmill.core.config import settings
from flourmill.core.database import SessionLocal
from flourmill.services.inventory import WarehouseDataSource, WarehouseInventoryService, build_data_source


@lru_cache
def get_data_source() -> WarehouseDataSource:
    """Data source built once per process; a fixture file is parsed a single time"""
    return build_data_source(settings, session_factory=SessionLocal)


def get_inventory_service() -> WarehouseInventoryService:
    """
    Inventory service wired from settings.

    The database source opens its own sessions, one per read.
    """
    return WarehouseInventoryService(
        get_data_source(),
        status_filters=settings.status_filters(),
        max_workers=settings.SOURCE_READ_WORKERS,
    )
