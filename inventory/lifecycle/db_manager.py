# inventory/lifecycle/db_manager.py
"""
Borrow / Return / Maintenance-Log state machine.

    Available --borrow--> Borrowed --return--> Available

Maintenance and Lost are reached only through direct status edits, which do
not write a ledger entry. Logging maintenance never changes the status.
Nothing is undoable: a mistaken transition is corrected by its inverse, and
both stay in the ledger.
"""
import logging
import random

from core.exceptions import InvalidTransitionError, NotFoundError
from db_models.asset import AssetStatus
from db_models.transaction import TransactionType
from inventory.store.db_manager import EntityStore
from inventory.store.models import AssetRead, TransactionCreate, TransactionRead

logger = logging.getLogger(__name__)

# Ledger user id for signers who are not registered users
GUEST_USER_ID = "GUEST"

QR_PREFIX = "qr-"


def _require_asset(store: EntityStore, asset_id: str) -> AssetRead:
    asset = store.get_asset(asset_id)
    if asset is None:
        raise NotFoundError("Asset", asset_id)
    return asset


def _resolve_user_id(store: EntityStore, user_name: str, user_id: str | None) -> str:
    if user_id:
        return user_id
    user = store.find_user_by_name(user_name)
    return user.id if user is not None else GUEST_USER_ID


def _require_name(user_name: str) -> str:
    user_name = (user_name or "").strip()
    if not user_name:
        raise ValueError("user_name is required")
    return user_name


def borrow_asset(
    store: EntityStore,
    asset_id: str,
    user_name: str,
    signature: str,
    notes: str | None = None,
    *,
    user_id: str | None = None,
) -> TransactionRead:
    """
    Hand an Available asset to `user_name`.

    Raises:
        NotFoundError: unknown asset
        InvalidTransitionError: asset is not Available
    """
    user_name = _require_name(user_name)
    asset = _require_asset(store, asset_id)
    if asset.status != AssetStatus.AVAILABLE:
        raise InvalidTransitionError(f"Cannot borrow {asset_id}: asset is {asset.status.value}")

    tx = store.append_transition(
        TransactionCreate(
            asset_id=asset.id,
            asset_name=asset.name,
            user_id=_resolve_user_id(store, user_name, user_id),
            user_name=user_name,
            type=TransactionType.BORROW,
            signature_url=signature,
            notes=notes,
        ),
        {"status": AssetStatus.BORROWED, "current_holder": user_name},
        expected_status=AssetStatus.AVAILABLE,
    )
    logger.info("Borrow %s: %s -> %s", tx.id, asset.id, user_name)
    return tx


def return_asset(
    store: EntityStore,
    asset_id: str,
    user_name: str,
    signature: str,
    notes: str | None = None,
    *,
    user_id: str | None = None,
) -> TransactionRead:
    """
    Take a Borrowed asset back. The signer does not have to be the holder.

    Raises:
        NotFoundError: unknown asset
        InvalidTransitionError: asset is not Borrowed
    """
    user_name = _require_name(user_name)
    asset = _require_asset(store, asset_id)
    if asset.status != AssetStatus.BORROWED:
        raise InvalidTransitionError(f"Cannot return {asset_id}: asset is {asset.status.value}")

    tx = store.append_transition(
        TransactionCreate(
            asset_id=asset.id,
            asset_name=asset.name,
            user_id=_resolve_user_id(store, user_name, user_id),
            user_name=user_name,
            type=TransactionType.RETURN,
            signature_url=signature,
            notes=notes,
        ),
        {"status": AssetStatus.AVAILABLE, "current_holder": None},
        expected_status=AssetStatus.BORROWED,
    )
    logger.info("Return %s: %s from %s", tx.id, asset.id, asset.current_holder)
    return tx


def log_maintenance(
    store: EntityStore,
    asset_id: str,
    user_name: str,
    notes: str | None = None,
    *,
    user_id: str | None = None,
) -> TransactionRead:
    """Record a maintenance event. The asset status is left as it is."""
    user_name = _require_name(user_name)
    asset = _require_asset(store, asset_id)
    tx = store.append_transition(
        TransactionCreate(
            asset_id=asset.id,
            asset_name=asset.name,
            user_id=_resolve_user_id(store, user_name, user_id),
            user_name=user_name,
            type=TransactionType.MAINTENANCE_LOG,
            signature_url="",
            notes=notes,
        )
    )
    logger.info("Maintenance logged %s for %s", tx.id, asset.id)
    return tx


def record_transaction(
    store: EntityStore,
    asset_id: str,
    tx_type: TransactionType,
    user_name: str,
    signature: str = "",
    notes: str | None = None,
) -> TransactionRead:
    """Dispatch a signed hand-off by transaction type."""
    if tx_type == TransactionType.BORROW:
        return borrow_asset(store, asset_id, user_name, signature, notes)
    if tx_type == TransactionType.RETURN:
        return return_asset(store, asset_id, user_name, signature, notes)
    return log_maintenance(store, asset_id, user_name, notes)


def set_asset_status(
    store: EntityStore,
    asset_id: str,
    status: AssetStatus,
    holder: str | None = None,
) -> AssetRead:
    """
    Administrative status edit. No ledger entry is written; this is the only
    way to mark an asset Lost or under Maintenance.
    """
    asset = store.update_asset(asset_id, {"status": status, "current_holder": holder})
    logger.info("Status of %s set to %s by direct edit", asset_id, status.value)
    return asset


def asset_history(store: EntityStore, asset_id: str) -> list[TransactionRead]:
    """Ledger entries for one asset, newest first."""
    return store.list_transactions(asset_id)


def resolve_scan(store: EntityStore, payload: str | None = None, rng: random.Random | None = None) -> AssetRead | None:
    """
    Stand-in for optical QR decoding.

    `payload` may be an asset id or its `qr-<id>` string. With no payload a
    random asset is picked, as the mobile demo flow does.
    """
    if payload is None:
        assets = store.list_assets()
        if not assets:
            return None
        return (rng or random).choice(assets)
    payload = payload.strip()
    if payload.startswith(QR_PREFIX):
        payload = payload[len(QR_PREFIX):]
    return store.get_asset(payload)
