"""
Tests for the inventory data sources
"""
import json
from datetime import datetime
from decimal import Decimal
from types import SimpleNamespace

import pytest

from flourmill.core.exceptions import ConfigurationError
from flourmill.services.inventory.records import QuantityLine
from flourmill.services.inventory.sources import (
    DatabaseDataSource,
    FixtureDataSource,
    build_data_source,
)

from .factories import (
    add_bag_purchase,
    add_food_purchase,
    add_generic_purchase,
    add_production,
    add_stock,
)


class TestDatabaseDataSource:
    """SQLAlchemy-backed reads"""

    def test_fetch_warehouse(self, database_source, warehouse):
        meta = database_source.fetch_warehouse(str(warehouse.id))

        assert meta.id == str(warehouse.id)
        assert meta.name == "Main Mill Store"
        assert meta.total_capacity == Decimal("5000")
        assert meta.capacity_unit == "50kg bags"

    def test_fetch_warehouse_unknown_or_malformed_id(self, database_source, warehouse):
        assert database_source.fetch_warehouse("999") is None
        assert database_source.fetch_warehouse("not-a-number") is None
        assert database_source.fetch_bag_purchases("not-a-number", ["Received"]) == []

    def test_bag_purchases_filtered_and_newest_first(self, db_session, database_source, warehouse):
        add_bag_purchase(db_session, warehouse.id, "BAG-1", {"ATA": {"quantity": 100}}, purchase_date=datetime(2024, 1, 1))
        add_bag_purchase(db_session, warehouse.id, "BAG-2", [["ATA", {"quantity": 50}]], purchase_date=datetime(2024, 3, 1))
        add_bag_purchase(db_session, warehouse.id, "BAG-3", {"ATA": {"quantity": 70}}, status="Pending")

        records = database_source.fetch_bag_purchases(str(warehouse.id), ["Received", "Completed"])

        assert [r.purchase_number for r in records] == ["BAG-2", "BAG-1"]
        assert records[0].bags == [("ATA", QuantityLine(quantity=50, unit="bags"))]

    def test_empty_status_filter_reads_everything(self, db_session, database_source, warehouse):
        add_bag_purchase(db_session, warehouse.id, "BAG-1", {"ATA": {"quantity": 1}}, status="Pending")
        add_bag_purchase(db_session, warehouse.id, "BAG-2", {"ATA": {"quantity": 1}}, status="Cancelled")

        assert len(database_source.fetch_bag_purchases(str(warehouse.id), [])) == 2

    def test_generic_and_food_purchases(self, db_session, database_source, warehouse):
        add_generic_purchase(db_session, warehouse.id, "PUR-1", bags={"maida": {"quantity": 5}},
                             food={"wheat": {"quantity": 300, "quality": "Standard"}})
        add_food_purchase(db_session, warehouse.id, "FP-1", [
            {"name": "Wheat Grain", "quantity": Decimal("2.5"), "unit": "tons", "quality": "Premium"},
        ])

        generic = database_source.fetch_generic_purchases(str(warehouse.id), ["Received"])
        food = database_source.fetch_food_purchases(str(warehouse.id), ["Approved", "Completed"])

        assert dict(generic[0].bags)["maida"].unit == "pcs"
        assert dict(generic[0].food)["wheat"].quality == "Standard"
        assert food[0].items[0].name == "Wheat Grain"
        assert food[0].items[0].quantity == Decimal("2.5")

    def test_production_outputs(self, db_session, database_source, warehouse):
        add_production(db_session, warehouse.id, "PROD-1", "Suji", Decimal("15"))
        add_production(db_session, warehouse.id, "PROD-2", "Maida", Decimal("9"), status="In Progress")

        outputs = database_source.fetch_production_outputs(str(warehouse.id), ["Completed", "Approved"])

        assert [o.batch_number for o in outputs] == ["PROD-1"]
        assert outputs[0].quantity == Decimal("15")
        assert outputs[0].unit == "bags"

    def test_live_inventory_joins_product(self, db_session, database_source, warehouse):
        add_stock(db_session, warehouse.id, "Ata 50kg", Decimal("120"), category="Finished Goods")
        add_stock(db_session, warehouse.id, "Maida", Decimal("0"))

        rows = database_source.fetch_live_inventory(str(warehouse.id))

        assert len(rows) == 1
        assert rows[0].product_name == "Ata 50kg"
        assert rows[0].category == "Finished Goods"
        assert rows[0].current_stock == Decimal("120")
        assert rows[0].product_id is not None


class TestFixtureDataSource:
    """Offline JSON-backed reads"""

    def test_fetch_warehouse(self, fixture_source):
        meta = fixture_source.fetch_warehouse("wh-1")
        assert meta.name == "Main Mill Store"
        assert meta.current_usage == Decimal("1200")
        assert fixture_source.fetch_warehouse("missing") is None

    def test_reads_filtered_by_warehouse_and_status(self, fixture_source):
        generic = fixture_source.fetch_generic_purchases("wh-1", ["Received"])
        bags = fixture_source.fetch_bag_purchases("wh-1", ["Received", "Completed"])

        assert [p.purchase_number for p in generic] == ["PUR-001"]
        assert generic[0].purchase_date == datetime(2024, 2, 1, 10, 0)
        assert [p.purchase_number for p in bags] == ["BAG-001"]
        assert [label for label, _ in bags[0].bags] == ["ATA", "Fine"]

    def test_production_quantity_shapes(self, fixture_source):
        outputs = fixture_source.fetch_production_outputs("wh-1", ["Completed"])

        assert [(o.batch_number, o.quantity, o.unit) for o in outputs] == [
            ("PROD-002", 15, "bags"),
            ("PROD-001", 40, "bags"),
        ]

    def test_live_inventory_resolves_products(self, fixture_source):
        rows = {row.inventory_id: row for row in fixture_source.fetch_live_inventory("wh-1")}

        assert rows["inv-1"].product_name == "Ata 50kg"
        assert rows["inv-1"].unit == "bags"
        assert rows["inv-2"].product_name == "Empty Sacks"
        assert rows["inv-2"].product_id is None

    def test_from_file(self, tmp_path, fixture_data):
        path = tmp_path / "fixtures.json"
        path.write_text(json.dumps(fixture_data), encoding="utf-8")

        source = FixtureDataSource.from_file(path)

        assert source.fetch_warehouse("wh-1") is not None

    def test_from_file_errors(self, tmp_path):
        with pytest.raises(ConfigurationError):
            FixtureDataSource.from_file(None)
        with pytest.raises(ConfigurationError):
            FixtureDataSource.from_file(tmp_path / "missing.json")

        broken = tmp_path / "broken.json"
        broken.write_text("[1, 2]", encoding="utf-8")
        with pytest.raises(ConfigurationError, match="JSON object"):
            FixtureDataSource.from_file(broken)


class TestBuildDataSource:

    def test_database_source(self):
        factory = object()
        source = build_data_source(SimpleNamespace(DATA_SOURCE="database"), session_factory=factory)
        assert isinstance(source, DatabaseDataSource)
        assert source.session_factory is factory

    def test_fixture_source(self, tmp_path, fixture_data):
        path = tmp_path / "fixtures.json"
        path.write_text(json.dumps(fixture_data), encoding="utf-8")

        source = build_data_source(SimpleNamespace(DATA_SOURCE="fixture", FIXTURE_FILE=path))

        assert isinstance(source, FixtureDataSource)

    def test_unknown_source(self):
        with pytest.raises(ConfigurationError):
            build_data_source(SimpleNamespace(DATA_SOURCE="redis"))


class TestDataSourceDependency:
    """Source wiring used by the API"""

    def test_fixture_file_parsed_once_per_process(self, tmp_path, fixture_data, monkeypatch):
        from flourmill.api import deps

        path = tmp_path / "fixtures.json"
        path.write_text(json.dumps(fixture_data), encoding="utf-8")
        monkeypatch.setattr(deps.settings, "DATA_SOURCE", "fixture")
        monkeypatch.setattr(deps.settings, "FIXTURE_FILE", path)
        deps.get_data_source.cache_clear()
        try:
            first = deps.get_inventory_service()
            path.unlink()
            second = deps.get_inventory_service()

            assert isinstance(first.source, FixtureDataSource)
            assert second.source is first.source
            assert second.source.fetch_warehouse("wh-1") is not None
        finally:
            deps.get_data_source.cache_clear()
