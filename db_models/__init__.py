from db_models.asset import Asset, AssetStatus
from db_models.transaction import Transaction, TransactionType
from db_models.user import User, UserRole
from db_models.reservation import Reservation, ReservationStatus

__all__ = [
    "Asset",
    "AssetStatus",
    "Transaction",
    "TransactionType",
    "User",
    "UserRole",
    "Reservation",
    "ReservationStatus",
]
