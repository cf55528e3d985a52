import logging

from config.database import engine_options, get_database_url, is_memory_url
from core.ids import MonotonicClock, new_id
from core.log_config import setup_logging
from db_models.asset import AssetStatus
from inventory.lifecycle.db_manager import set_asset_status
from inventory.store.models import AssetCreate
from main import create_inventory


def test_create_inventory_wires_notifications():
    inventory = create_inventory("sqlite+pysqlite:///:memory:", configure_logging=False)
    try:
        asset = inventory.store.add_asset(AssetCreate(name="Spare laptop"))
        assert len(inventory.notifications) == 0
        set_asset_status(inventory.store, asset.id, AssetStatus.LOST)
        assert [n.id for n in inventory.notifications.notifications] == [f"lost-{asset.id}"]
        assert inventory.admin_gate.is_logged_in is False
        assert inventory.qr_exporter.in_progress is False
    finally:
        inventory.close()


def test_setup_logging_is_idempotent():
    setup_logging("DEBUG")
    setup_logging("INFO")
    named = [h for h in logging.getLogger().handlers if h.get_name() == "asset-ledger-console"]
    assert len(named) == 1
    assert named[0].level == logging.INFO


def test_database_url_helpers():
    assert get_database_url("sqlite+pysqlite") == "sqlite+pysqlite:///:memory:"
    assert get_database_url("sqlite+pysqlite", "inventory.db") == "sqlite+pysqlite:///inventory.db"
    assert is_memory_url("sqlite+pysqlite:///:memory:")
    assert not is_memory_url("sqlite+pysqlite:///inventory.db")
    assert "poolclass" in engine_options("sqlite+pysqlite:///:memory:")
    assert engine_options("postgresql://localhost/db") == {}


def test_monotonic_clock_never_goes_back():
    ticks = iter([1000, 900, 1200, 1300])
    clock = MonotonicClock(lambda: next(ticks))
    assert [clock(), clock(), clock()] == [1000, 1000, 1200]
    clock.observe(5000)
    assert clock() == 5000


def test_new_id_format():
    asset_id = new_id("AST")
    assert asset_id.startswith("AST-")
    assert len(asset_id) == len("AST-") + 8
