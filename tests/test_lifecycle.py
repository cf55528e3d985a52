import random

import pytest

from core.exceptions import InvalidTransitionError, NotFoundError
from db_models.asset import AssetStatus
from db_models.transaction import TransactionType
from inventory.lifecycle.db_manager import (
    GUEST_USER_ID,
    asset_history,
    borrow_asset,
    log_maintenance,
    record_transaction,
    resolve_scan,
    return_asset,
    set_asset_status,
)

SIGNATURE = "data:image/png;base64,iVBORw0KGgo="


def _holder_invariant_holds(store):
    return all(
        (a.status == AssetStatus.BORROWED) == (a.current_holder is not None)
        for a in store.list_assets()
    )


def test_borrow_available_asset(seeded_store):
    tx = borrow_asset(seeded_store, "AST-002", "Alice Chen", SIGNATURE, "Product shoot")

    asset = seeded_store.get_asset("AST-002")
    assert asset.status == AssetStatus.BORROWED
    assert asset.current_holder == "Alice Chen"

    history = asset_history(seeded_store, "AST-002")
    assert len(history) == 1
    assert history[0].id == tx.id
    assert tx.type == TransactionType.BORROW
    assert tx.asset_name == "Sony Alpha a7 IV"
    assert tx.user_id == "U001"
    assert tx.signature_url == SIGNATURE
    assert tx.notes == "Product shoot"
    assert _holder_invariant_holds(seeded_store)


def test_borrow_then_return(seeded_store, clock):
    borrow = borrow_asset(seeded_store, "AST-002", "Alice Chen", SIGNATURE)
    clock.advance(days=1)
    ret = return_asset(seeded_store, "AST-002", "Alice Chen", SIGNATURE)

    asset = seeded_store.get_asset("AST-002")
    assert asset.status == AssetStatus.AVAILABLE
    assert asset.current_holder is None

    history = asset_history(seeded_store, "AST-002")
    assert [tx.id for tx in history] == [ret.id, borrow.id]
    assert history[0].type == TransactionType.RETURN
    assert history[0].timestamp > history[1].timestamp
    assert _holder_invariant_holds(seeded_store)


def test_borrow_requires_available(seeded_store):
    borrow_asset(seeded_store, "AST-002", "Alice Chen", SIGNATURE)
    with pytest.raises(InvalidTransitionError):
        borrow_asset(seeded_store, "AST-002", "Bob", SIGNATURE)
    for asset_id in ("AST-003", "AST-004"):
        with pytest.raises(InvalidTransitionError):
            borrow_asset(seeded_store, asset_id, "Bob", SIGNATURE)
    assert len(seeded_store.list_transactions()) == 1
    assert seeded_store.get_asset("AST-002").current_holder == "Alice Chen"


def test_return_requires_borrowed(seeded_store):
    with pytest.raises(InvalidTransitionError):
        return_asset(seeded_store, "AST-001", "Alice Chen", SIGNATURE)
    assert seeded_store.list_transactions() == []


def test_unknown_asset(seeded_store):
    with pytest.raises(NotFoundError):
        borrow_asset(seeded_store, "AST-999", "Alice Chen", SIGNATURE)
    with pytest.raises(NotFoundError):
        log_maintenance(seeded_store, "AST-999", "Alice Chen")


def test_blank_user_name_rejected(seeded_store):
    with pytest.raises(ValueError):
        borrow_asset(seeded_store, "AST-001", "   ", SIGNATURE)


def test_unregistered_signer_is_guest(seeded_store):
    tx = borrow_asset(seeded_store, "AST-001", "Visiting Contractor", SIGNATURE)
    assert tx.user_id == GUEST_USER_ID
    assert tx.user_name == "Visiting Contractor"


def test_return_by_someone_else(seeded_store):
    borrow_asset(seeded_store, "AST-001", "Alice Chen", SIGNATURE)
    tx = return_asset(seeded_store, "AST-001", "Admin User", SIGNATURE)
    assert tx.user_id == "U003"
    assert seeded_store.get_asset("AST-001").status == AssetStatus.AVAILABLE


def test_maintenance_log_keeps_status(seeded_store, events):
    events.clear()
    for asset_id, status in (("AST-001", AssetStatus.AVAILABLE), ("AST-003", AssetStatus.MAINTENANCE)):
        tx = log_maintenance(seeded_store, asset_id, "Admin User", "Firmware update")
        assert tx.type == TransactionType.MAINTENANCE_LOG
        assert tx.signature_url == ""
        assert seeded_store.get_asset(asset_id).status == status
    assert {e.entity for e in events} == {"transaction"}


def test_direct_status_edit_writes_no_ledger(seeded_store):
    asset = set_asset_status(seeded_store, "AST-001", AssetStatus.LOST)
    assert asset.status == AssetStatus.LOST
    assert seeded_store.list_transactions() == []

    asset = set_asset_status(seeded_store, "AST-001", AssetStatus.BORROWED, holder="Bob")
    assert asset.current_holder == "Bob"
    with pytest.raises(InvalidTransitionError):
        set_asset_status(seeded_store, "AST-005", AssetStatus.BORROWED)


def test_direct_edit_of_borrowed_asset_clears_holder(seeded_store):
    borrow_asset(seeded_store, "AST-002", "Alice Chen", SIGNATURE)
    asset = set_asset_status(seeded_store, "AST-002", AssetStatus.MAINTENANCE)
    assert asset.current_holder is None
    assert _holder_invariant_holds(seeded_store)


def test_denormalized_names_survive_rename(seeded_store):
    borrow_asset(seeded_store, "AST-002", "Alice Chen", SIGNATURE)
    seeded_store.update_asset("AST-002", {"name": "Sony A7 IV (Studio)"})
    (tx,) = asset_history(seeded_store, "AST-002")
    assert tx.asset_name == "Sony Alpha a7 IV"


def test_record_transaction_dispatch(seeded_store, clock):
    record_transaction(seeded_store, "AST-001", TransactionType.BORROW, "Alice Chen", SIGNATURE)
    clock.advance(ms=1)
    record_transaction(seeded_store, "AST-001", TransactionType.RETURN, "Alice Chen", SIGNATURE)
    clock.advance(ms=1)
    record_transaction(seeded_store, "AST-001", TransactionType.MAINTENANCE_LOG, "Alice Chen", notes="Battery")
    types = [tx.type for tx in asset_history(seeded_store, "AST-001")]
    assert types == [TransactionType.MAINTENANCE_LOG, TransactionType.RETURN, TransactionType.BORROW]


def test_resolve_scan(seeded_store):
    assert resolve_scan(seeded_store, "AST-003").name == "DJI Mavic 3 Pro"
    assert resolve_scan(seeded_store, "qr-AST-003").id == "AST-003"
    assert resolve_scan(seeded_store, "qr-NOPE") is None
    picked = resolve_scan(seeded_store, rng=random.Random(7))
    assert picked.id in {a.id for a in seeded_store.list_assets()}


def test_resolve_scan_empty_store(store):
    assert resolve_scan(store) is None
