"""
Main API Router - Consolidates all module routes
"""

from fastapi import APIRouter
from flourmill.api.v1 import warehouses

api_router = APIRouter()

# Warehouse inventory routes
api_router.include_router(warehouses.router, prefix="/warehouses", tags=["warehouses"])
