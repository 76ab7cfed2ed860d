"""
Warehouse Inventory API endpoints
"""
import logging

from fastapi import APIRouter, Depends, HTTPException, status

from flourmill.api import deps
from flourmill.core.exceptions import SourceReadFailure, WarehouseNotFoundError
from flourmill.schemas.inventory import WarehouseInventoryView
from flourmill.services.inventory import WarehouseInventoryService

logger = logging.getLogger("flourmill.api")

router = APIRouter()


@router.get("/{warehouse_id}/inventory", response_model=WarehouseInventoryView)
async def get_warehouse_inventory(
    warehouse_id: str,
    service: WarehouseInventoryService = Depends(deps.get_inventory_service),
):
    """
    Reconciled inventory of a warehouse.

    Current stock per category comes from the live ledger only; purchase and
    production history is returned for audit.
    """
    try:
        return await service.compute_warehouse_inventory_view(warehouse_id)
    except WarehouseNotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))
    except SourceReadFailure as e:
        logger.error(f"Inventory of warehouse {warehouse_id} unavailable: {e}")
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail=f"Inventory source '{e.source}' could not be read",
        )
