import pytest
from pydantic import ValidationError

from db_models.asset import AssetStatus
from inventory.bulk.db_manager import bulk_update_assets
from inventory.bulk.models import BulkPatch


def test_bulk_status_skips_missing_ids(seeded_store):
    updated = bulk_update_assets(seeded_store, ["AST-001", "AST-999", "AST-005"], {"status": "Maintenance"})
    assert [a.id for a in updated] == ["AST-001", "AST-005"]
    assert all(a.status == AssetStatus.MAINTENANCE for a in updated)
    assert seeded_store.get_asset("AST-002").status == AssetStatus.AVAILABLE


def test_bulk_category_only(seeded_store):
    updated = bulk_update_assets(seeded_store, ["AST-001", "AST-004"], BulkPatch(category=" Computers "))
    assert len(updated) == 2
    assert {a.category for a in seeded_store.list_assets(["AST-001", "AST-004"])} == {"Computers"}
    # status untouched
    assert seeded_store.get_asset("AST-004").status == AssetStatus.LOST


def test_blank_fields_are_ignored(seeded_store, events):
    events.clear()
    patch = BulkPatch(status="", category="   ")
    assert patch.is_empty()
    assert bulk_update_assets(seeded_store, ["AST-001"], patch) == []
    assert events == []


def test_bulk_borrowed_rejected():
    with pytest.raises(ValidationError):
        BulkPatch(status=AssetStatus.BORROWED)


def test_bulk_clears_holder(seeded_store):
    seeded_store.update_asset("AST-002", {"status": AssetStatus.BORROWED, "current_holder": "Alice Chen"})
    (asset,) = bulk_update_assets(seeded_store, ["AST-002"], {"status": AssetStatus.AVAILABLE})
    assert asset.current_holder is None


def test_duplicate_ids_are_applied_once(seeded_store):
    updated = bulk_update_assets(seeded_store, ["AST-001", "AST-001"], {"category": "Mac"})
    assert len(updated) == 1
