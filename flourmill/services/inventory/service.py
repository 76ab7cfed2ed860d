"""
Warehouse Inventory Service
Fetches the sources of one warehouse concurrently and runs the reconciliation pipeline
"""
import asyncio
import logging
from concurrent.futures import ThreadPoolExecutor
from itertools import chain
from typing import Dict, List, Optional, Sequence

from flourmill.core.exceptions import SourceReadFailure, WarehouseNotFoundError
from flourmill.schemas.inventory import WarehouseInventoryView

from .aggregator import aggregate
from .assembler import assemble
from .ledger import read_ledger
from .normalizer import normalize
from .reconciler import reconcile, reconcile_other_inventory
from .sources import WarehouseDataSource

logger = logging.getLogger(__name__)

DEFAULT_STATUS_FILTERS: Dict[str, List[str]] = {
    "generic_purchases": ["Received"],
    "bag_purchases": ["Received", "Completed"],
    "food_purchases": ["Approved", "Completed"],
    "production_outputs": ["Completed", "Approved"],
}


class WarehouseInventoryService:
    """
    Computes the reconciled inventory view of a warehouse.

    The warehouse is resolved first. The five record reads then run in
    parallel on a thread pool; the first failing read cancels the others and
    surfaces as SourceReadFailure.
    """

    def __init__(
        self,
        source: WarehouseDataSource,
        status_filters: Optional[Dict[str, Sequence[str]]] = None,
        max_workers: Optional[int] = None,
    ):
        self.source = source
        self.status_filters = dict(DEFAULT_STATUS_FILTERS)
        if status_filters:
            self.status_filters.update({key: list(value) for key, value in status_filters.items()})
        self.max_workers = max_workers or 5

    def _status_filter(self, name: str) -> List[str]:
        return list(self.status_filters.get(name) or [])

    async def _read(self, loop, executor, name, func, warehouse_id, *args):
        logger.debug(f"Reading {name} for warehouse {warehouse_id}")
        try:
            result = await loop.run_in_executor(executor, func, warehouse_id, *args)
            logger.debug(f"Read {len(result)} {name} rows for warehouse {warehouse_id}")
            return result
        except Exception as e:
            raise SourceReadFailure(name, warehouse_id, cause=e) from e

    async def _fetch_all(self, warehouse_id: str) -> Dict[str, list]:
        loop = asyncio.get_running_loop()
        executor = ThreadPoolExecutor(max_workers=self.max_workers, thread_name_prefix="inventory-read")
        reads = {
            "generic_purchases": (self.source.fetch_generic_purchases, warehouse_id, self._status_filter("generic_purchases")),
            "bag_purchases": (self.source.fetch_bag_purchases, warehouse_id, self._status_filter("bag_purchases")),
            "food_purchases": (self.source.fetch_food_purchases, warehouse_id, self._status_filter("food_purchases")),
            "production_outputs": (self.source.fetch_production_outputs, warehouse_id, self._status_filter("production_outputs")),
            "live_inventory": (self.source.fetch_live_inventory, warehouse_id),
        }
        tasks = {
            name: asyncio.ensure_future(self._read(loop, executor, name, *call))
            for name, call in reads.items()
        }
        try:
            done, pending = await asyncio.wait(tasks.values(), return_when=asyncio.FIRST_EXCEPTION)
            failed = [task for task in tasks.values() if task in done and task.exception() is not None]
            if failed:
                for task in pending:
                    task.cancel()
                await asyncio.gather(*pending, return_exceptions=True)
                error = failed[0].exception()
                logger.error(f"Inventory read failed for warehouse {warehouse_id}: {error}")
                raise error
            return {name: task.result() for name, task in tasks.items()}
        except asyncio.CancelledError:
            for task in tasks.values():
                task.cancel()
            raise
        finally:
            executor.shutdown(wait=False, cancel_futures=True)

    async def compute_warehouse_inventory_view(self, warehouse_id: str) -> WarehouseInventoryView:
        """
        Build the WarehouseInventoryView of ``warehouse_id``.

        Raises WarehouseNotFoundError when the warehouse does not exist (no
        other read is issued) and SourceReadFailure when any read fails.
        """
        loop = asyncio.get_running_loop()
        try:
            warehouse = await loop.run_in_executor(None, self.source.fetch_warehouse, warehouse_id)
        except Exception as e:
            raise SourceReadFailure("warehouse", warehouse_id, cause=e) from e
        if warehouse is None:
            logger.info(f"Warehouse {warehouse_id} not found")
            raise WarehouseNotFoundError(warehouse_id)

        fetched = await self._fetch_all(warehouse_id)

        historical_sources = (
            fetched["generic_purchases"],
            fetched["bag_purchases"],
            fetched["food_purchases"],
            fetched["production_outputs"],
        )
        normalized = [record for item in chain(*historical_sources) for record in normalize(item)]
        historical = aggregate(normalized)
        ledger = read_ledger(fetched["live_inventory"])

        states = reconcile(historical.categories, ledger.entries)
        other_inventory = reconcile_other_inventory(historical.other_inventory, ledger.other_inventory)

        view = assemble(
            states,
            other_inventory,
            warehouse,
            actual_stock=ledger.rows,
            production=fetched["production_outputs"],
        )

        logger.info(
            f"Inventory view for warehouse {warehouse_id} ({self.source.name} source): "
            f"{len(normalized)} historical records, {len(ledger.rows)} ledger rows, "
            f"total_bags={view.totals.total_bags}, total_wheat={view.totals.total_wheat}"
        )
        return view
