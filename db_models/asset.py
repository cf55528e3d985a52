# db_models/asset.py
"""
Trackable physical item (laptop, camera, drone, ...).

Status lifecycle:
- AVAILABLE: on the shelf, can be borrowed
- BORROWED: held by `current_holder` (the only status that carries a holder)
- MAINTENANCE: set by direct edit, not by the maintenance log
- LOST: set by direct edit only
"""
from datetime import date
from enum import Enum

from sqlalchemy import String, Text, Date, JSON
from sqlalchemy.orm import Mapped, mapped_column

from db_base import Base


class AssetStatus(str, Enum):
    """Lifecycle status of an asset."""
    AVAILABLE = "Available"
    BORROWED = "Borrowed"
    MAINTENANCE = "Maintenance"
    LOST = "Lost"


class Asset(Base):
    __tablename__ = "assets"

    # Insertion order; the public identity is `id`
    seq: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)

    id: Mapped[str] = mapped_column(
        String(64),
        unique=True,
        index=True,
        nullable=False,
    )

    name: Mapped[str] = mapped_column(
        String(255),
        nullable=False,
    )

    # Free text, new values are created ad hoc
    category: Mapped[str] = mapped_column(
        String(120),
        nullable=False,
        index=True,
    )

    model: Mapped[str] = mapped_column(String(255), nullable=False)
    serial_number: Mapped[str] = mapped_column(String(255), nullable=False)
    purchase_date: Mapped[date] = mapped_column(Date, nullable=False)

    status: Mapped[str] = mapped_column(
        String(20),
        nullable=False,
        default=AssetStatus.AVAILABLE.value,
        index=True,
    )

    current_holder: Mapped[str | None] = mapped_column(
        String(255),
        nullable=True,
    )

    image_url: Mapped[str] = mapped_column(Text, nullable=False)
    qr_code: Mapped[str] = mapped_column(String(128), nullable=False)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)

    # name -> value; replaced as a whole on update
    custom_features: Mapped[dict[str, str] | None] = mapped_column(
        JSON,
        nullable=True,
    )
