"""
Custom Application Exceptions
"""
from typing import Any, Optional


class FlourMillException(Exception):
    """Base exception for the flour mill application"""
    pass


class WarehouseNotFoundError(FlourMillException):
    """Raised when a warehouse id does not resolve"""

    def __init__(self, warehouse_id: Any):
        self.warehouse_id = warehouse_id
        super().__init__(f"Warehouse {warehouse_id} not found")


class SourceReadFailure(FlourMillException):
    """Raised when one of the inventory sources cannot be read"""

    def __init__(self, source: str, warehouse_id: Any, cause: Optional[BaseException] = None):
        self.source = source
        self.warehouse_id = warehouse_id
        self.cause = cause
        message = f"Inventory source '{source}' could not be read for warehouse {warehouse_id}"
        if cause is not None:
            message = f"{message}: {cause}"
        super().__init__(message)


class ConfigurationError(FlourMillException):
    """Raised when the application is wired with invalid settings"""
    pass
