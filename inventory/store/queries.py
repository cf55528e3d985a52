# inventory/store/queries.py
"""
SQLAlchemy query builders for the entity store.
"""
from sqlalchemy import select, func, or_

from db_models.asset import Asset
from db_models.transaction import Transaction
from db_models.user import User
from db_models.reservation import Reservation


def select_asset_by_id(asset_id: str):
    """Select an asset by its public id."""
    return select(Asset).where(Asset.id == asset_id)


def select_assets_by_ids(asset_ids):
    return select(Asset).where(Asset.id.in_(list(asset_ids))).order_by(Asset.seq.asc())


def select_all_assets():
    """All assets in insertion order."""
    return select(Asset).order_by(Asset.seq.asc())


def select_transaction_by_id(tx_id: str):
    return select(Transaction).where(Transaction.id == tx_id)


def select_ledger(asset_id: str | None = None):
    """
    Ledger in canonical order: newest timestamp first, ties in insertion order.
    """
    stmt = select(Transaction)
    if asset_id is not None:
        stmt = stmt.where(Transaction.asset_id == asset_id)
    return stmt.order_by(Transaction.timestamp.desc(), Transaction.seq.asc())


def search_ledger(text: str):
    """Ledger entries whose asset name or user name contains `text` (case-insensitive)."""
    pattern = f"%{text.lower()}%"
    return (
        select(Transaction)
        .where(
            or_(
                func.lower(Transaction.asset_name).like(pattern),
                func.lower(Transaction.user_name).like(pattern),
            )
        )
        .order_by(Transaction.timestamp.desc(), Transaction.seq.asc())
    )


def select_latest_timestamp():
    return select(func.max(Transaction.timestamp))


def select_user_by_id(user_id: str):
    return select(User).where(User.id == user_id)


def select_user_by_name(name: str):
    """First user with exactly this name (insertion order)."""
    return select(User).where(User.name == name).order_by(User.seq.asc()).limit(1)


def select_all_users():
    return select(User).order_by(User.seq.asc())


def search_users(text: str):
    """Users whose name or email contains `text` (case-insensitive)."""
    pattern = f"%{text.lower()}%"
    return (
        select(User)
        .where(
            or_(
                func.lower(User.name).like(pattern),
                func.lower(User.email).like(pattern),
            )
        )
        .order_by(User.seq.asc())
    )


def select_reservation_by_id(reservation_id: str):
    return select(Reservation).where(Reservation.id == reservation_id)


def select_reservations(asset_id: str | None = None):
    stmt = select(Reservation)
    if asset_id is not None:
        stmt = stmt.where(Reservation.asset_id == asset_id)
    return stmt.order_by(Reservation.start_date.asc(), Reservation.seq.asc())
