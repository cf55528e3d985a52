# db_models/reservation.py
"""
Advisory booking of an asset. No overlap or lifecycle check is applied, a
reservation can be Confirmed while the asset is borrowed by someone else.
"""
from datetime import date
from enum import Enum

from sqlalchemy import String, Date
from sqlalchemy.orm import Mapped, mapped_column

from db_base import Base


class ReservationStatus(str, Enum):
    PENDING = "Pending"
    CONFIRMED = "Confirmed"
    CANCELLED = "Cancelled"


class Reservation(Base):
    __tablename__ = "reservations"

    seq: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)

    id: Mapped[str] = mapped_column(
        String(64),
        unique=True,
        index=True,
        nullable=False,
    )

    asset_id: Mapped[str] = mapped_column(String(64), nullable=False, index=True)
    user_id: Mapped[str] = mapped_column(String(64), nullable=False, index=True)

    start_date: Mapped[date] = mapped_column(Date, nullable=False)
    end_date: Mapped[date] = mapped_column(Date, nullable=False)

    status: Mapped[str] = mapped_column(
        String(20),
        nullable=False,
        default=ReservationStatus.CONFIRMED.value,
    )
