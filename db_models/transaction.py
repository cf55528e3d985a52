# db_models/transaction.py
"""
Append-only ledger entry. Rows are inserted once and never updated.

`asset_name` and `user_name` are copied at creation time and are not kept in
sync with later renames.
"""
from enum import Enum

from sqlalchemy import String, Text, BigInteger, ForeignKey, Index
from sqlalchemy.orm import Mapped, mapped_column

from db_base import Base


class TransactionType(str, Enum):
    BORROW = "Borrow"
    RETURN = "Return"
    MAINTENANCE_LOG = "Maintenance"


class Transaction(Base):
    __tablename__ = "transactions"
    __table_args__ = (
        Index("ix_tx_asset_type", "asset_id", "type"),
    )

    # Insertion order, used to break timestamp ties
    seq: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)

    id: Mapped[str] = mapped_column(
        String(64),
        unique=True,
        index=True,
        nullable=False,
    )

    asset_id: Mapped[str] = mapped_column(
        ForeignKey("assets.id"),
        nullable=False,
        index=True,
    )
    asset_name: Mapped[str] = mapped_column(String(255), nullable=False)

    user_id: Mapped[str] = mapped_column(String(64), nullable=False)
    user_name: Mapped[str] = mapped_column(String(255), nullable=False)

    type: Mapped[str] = mapped_column(String(20), nullable=False)

    # Epoch milliseconds
    timestamp: Mapped[int] = mapped_column(BigInteger, nullable=False, index=True)

    # data:image/png;base64,... or "" for events without a signature
    signature_url: Mapped[str] = mapped_column(Text, nullable=False, default="")

    notes: Mapped[str | None] = mapped_column(Text, nullable=True)
