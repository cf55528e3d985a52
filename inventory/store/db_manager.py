# inventory/store/db_manager.py
"""
Entity store: the single owner of assets, transactions, users and reservations.

Every committed write is published as a ChangeEvent to the subscribed
listeners (the notification center recomputes alerts from them). Reads return
pydantic snapshots, never ORM rows.
"""
import logging
from collections.abc import Callable, Iterable, Iterator
from contextlib import contextmanager
from datetime import date
from typing import Any

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session, sessionmaker

from config import settings
from core.exceptions import DuplicateIdError, InvalidTransitionError, NotFoundError
from core.ids import MonotonicClock, new_id
from core.security import get_password_hash
from db_models.asset import Asset, AssetStatus
from db_models.transaction import Transaction
from db_models.user import User, UserRole
from db_models.reservation import Reservation, ReservationStatus
from . import queries
from .models import (
    AssetCreate,
    AssetRead,
    AssetUpdate,
    ChangeEvent,
    ReservationCreate,
    ReservationRead,
    TransactionCreate,
    TransactionRead,
    UserCreate,
    UserRead,
    UserUpdate,
)

logger = logging.getLogger(__name__)

Listener = Callable[[ChangeEvent], None]

DEFAULT_USER_PASSWORD = "123"
DEFAULT_ADMIN_PASSWORD = "123456"


def apply_asset_changes(row: Asset, changes: dict[str, Any]) -> bool:
    """
    Apply field changes to an asset row and restore the holder invariant.

    Any status other than Borrowed clears the holder; Borrowed without a holder
    is rejected. Returns True when at least one column changed.
    """
    before = {key: getattr(row, key) for key in changes}
    before["current_holder"] = row.current_holder

    for key, value in changes.items():
        if isinstance(value, AssetStatus):
            value = value.value
        setattr(row, key, value)

    if row.status != AssetStatus.BORROWED.value:
        row.current_holder = None
    elif not row.current_holder:
        raise InvalidTransitionError(
            f"Asset {row.id} cannot be Borrowed without a current holder"
        )

    return any(getattr(row, key) != value for key, value in before.items())


class EntityStore:
    """
    Store object scoped to one application session.

    Pass it explicitly to the lifecycle engine, bulk mutator, codecs and the
    notification center; there is no module-level instance.
    """

    def __init__(self, session_factory: sessionmaker[Session], clock: Callable[[], int] | None = None):
        self._session_factory = session_factory
        self._listeners: list[Listener] = []
        self._clock = clock or MonotonicClock()
        if isinstance(self._clock, MonotonicClock):
            with self._session_factory() as db:
                latest = db.execute(queries.select_latest_timestamp()).scalar()
            if latest is not None:
                self._clock.observe(latest)

    # --- change events ---

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """Register a listener; returns a callable that unsubscribes it."""
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def _emit(self, *events: ChangeEvent) -> None:
        for event in events:
            for listener in list(self._listeners):
                listener(event)

    @contextmanager
    def _session(self) -> Iterator[Session]:
        db = self._session_factory()
        try:
            yield db
            db.commit()
        except Exception:
            db.rollback()
            raise
        finally:
            db.close()

    # --- assets ---

    def get_asset(self, asset_id: str) -> AssetRead | None:
        """Asset snapshot, or None when the id is unknown."""
        with self._session_factory() as db:
            row = db.execute(queries.select_asset_by_id(asset_id)).scalar_one_or_none()
            return AssetRead.model_validate(row) if row is not None else None

    def list_assets(self, asset_ids: Iterable[str] | None = None) -> list[AssetRead]:
        """All assets (or the given subset) in insertion order."""
        stmt = queries.select_all_assets() if asset_ids is None else queries.select_assets_by_ids(asset_ids)
        with self._session_factory() as db:
            return [AssetRead.model_validate(row) for row in db.execute(stmt).scalars()]

    def add_asset(self, payload: AssetCreate) -> AssetRead:
        """
        Insert a new asset.

        Raises:
            DuplicateIdError: if the id is already taken
        """
        asset_id = payload.id or new_id("AST")
        row = Asset(
            id=asset_id,
            name=payload.name,
            category=payload.category,
            model=payload.model,
            serial_number=payload.serial_number,
            purchase_date=payload.purchase_date or date.today(),
            status=payload.status.value,
            current_holder=payload.current_holder,
            image_url=payload.image_url or settings.PLACEHOLDER_IMAGE_URL,
            qr_code=f"qr-{asset_id}",
            description=payload.description,
            custom_features=payload.custom_features,
        )
        with self._session() as db:
            self._insert(db, row, queries.select_asset_by_id(asset_id), "Asset", asset_id)
            result = AssetRead.model_validate(row)
        self._emit(ChangeEvent("asset", "insert", (asset_id,)))
        return result

    def update_asset(self, asset_id: str, changes: AssetUpdate | dict[str, Any]) -> AssetRead:
        """
        Direct edit of an asset. No ledger entry is written.

        Raises:
            NotFoundError: if the asset does not exist
            InvalidTransitionError: if the result would be Borrowed without a holder
            ValidationError: if a required field is set to None
        """
        if not isinstance(changes, AssetUpdate):
            changes = AssetUpdate.model_validate(changes)
        changes = changes.model_dump(exclude_unset=True)
        with self._session() as db:
            row = self._get_row(db, queries.select_asset_by_id(asset_id), "Asset", asset_id)
            changed = apply_asset_changes(row, changes)
            result = AssetRead.model_validate(row)
        if changed:
            self._emit(ChangeEvent("asset", "update", (asset_id,)))
        return result

    def replace_asset(self, asset: AssetRead) -> AssetRead:
        """Keyed replace-by-id of every mutable field."""
        return self.update_asset(
            asset.id,
            asset.model_dump(exclude={"id", "qr_code"}),
        )

    # --- transactions ---

    def append_transition(
        self,
        payload: TransactionCreate,
        asset_changes: dict[str, Any] | None = None,
        *,
        expected_status: AssetStatus | None = None,
    ) -> TransactionRead:
        """
        Append a ledger entry and, in the same database transaction, apply
        `asset_changes` to the referenced asset.

        `expected_status` is re-checked inside the write so a stale snapshot
        cannot drive a transition.

        Raises:
            NotFoundError: if the asset does not exist
            InvalidTransitionError: if the asset is not in `expected_status`
            DuplicateIdError: if the transaction id is already taken
        """
        tx_id = payload.id or new_id("TX")
        if payload.timestamp is None:
            timestamp = self._clock()
        else:
            timestamp = payload.timestamp
            if isinstance(self._clock, MonotonicClock):
                self._clock.observe(timestamp)

        events = [ChangeEvent("transaction", "insert", (tx_id,))]
        with self._session() as db:
            asset = self._get_row(db, queries.select_asset_by_id(payload.asset_id), "Asset", payload.asset_id)
            if expected_status is not None and asset.status != expected_status.value:
                raise InvalidTransitionError(
                    f"Asset {asset.id} is {asset.status}, expected {expected_status.value}"
                )
            if asset_changes and apply_asset_changes(asset, asset_changes):
                events.append(ChangeEvent("asset", "update", (asset.id,)))

            row = Transaction(
                id=tx_id,
                asset_id=payload.asset_id,
                asset_name=payload.asset_name,
                user_id=payload.user_id,
                user_name=payload.user_name,
                type=payload.type.value,
                timestamp=timestamp,
                signature_url=payload.signature_url,
                notes=payload.notes,
            )
            self._insert(db, row, queries.select_transaction_by_id(tx_id), "Transaction", tx_id)
            result = TransactionRead.model_validate(row)
        self._emit(*events)
        return result

    def get_transaction(self, tx_id: str) -> TransactionRead | None:
        with self._session_factory() as db:
            row = db.execute(queries.select_transaction_by_id(tx_id)).scalar_one_or_none()
            return TransactionRead.model_validate(row) if row is not None else None

    def list_transactions(self, asset_id: str | None = None) -> list[TransactionRead]:
        """Ledger in canonical order (newest first, ties in insertion order)."""
        with self._session_factory() as db:
            rows = db.execute(queries.select_ledger(asset_id)).scalars()
            return [TransactionRead.model_validate(row) for row in rows]

    def search_transactions(self, text: str) -> list[TransactionRead]:
        if not text:
            return self.list_transactions()
        with self._session_factory() as db:
            rows = db.execute(queries.search_ledger(text)).scalars()
            return [TransactionRead.model_validate(row) for row in rows]

    # --- users ---

    def add_user(self, payload: UserCreate) -> UserRead:
        user_id = payload.id or new_id("U")
        password = payload.password or (
            DEFAULT_ADMIN_PASSWORD if payload.role == UserRole.ADMIN else DEFAULT_USER_PASSWORD
        )
        row = User(
            id=user_id,
            name=payload.name,
            email=str(payload.email),
            role=payload.role.value,
            department=payload.department,
            hashed_password=get_password_hash(password),
        )
        with self._session() as db:
            self._insert(db, row, queries.select_user_by_id(user_id), "User", user_id)
            result = UserRead.model_validate(row)
        self._emit(ChangeEvent("user", "insert", (user_id,)))
        return result

    def update_user(self, user_id: str, changes: UserUpdate) -> UserRead:
        data = changes.model_dump(exclude_unset=True)
        with self._session() as db:
            row = self._get_row(db, queries.select_user_by_id(user_id), "User", user_id)
            password = data.pop("password", None)
            if password:
                row.hashed_password = get_password_hash(password)
            for key, value in data.items():
                if isinstance(value, UserRole):
                    value = value.value
                setattr(row, key, str(value) if key == "email" and value is not None else value)
            result = UserRead.model_validate(row)
        self._emit(ChangeEvent("user", "update", (user_id,)))
        return result

    def get_user(self, user_id: str) -> UserRead | None:
        with self._session_factory() as db:
            row = db.execute(queries.select_user_by_id(user_id)).scalar_one_or_none()
            return UserRead.model_validate(row) if row is not None else None

    def find_user_by_name(self, name: str) -> UserRead | None:
        with self._session_factory() as db:
            row = db.execute(queries.select_user_by_name(name)).scalar_one_or_none()
            return UserRead.model_validate(row) if row is not None else None

    def get_password_hash(self, user_id: str) -> str | None:
        with self._session_factory() as db:
            row = db.execute(queries.select_user_by_id(user_id)).scalar_one_or_none()
            return row.hashed_password if row is not None else None

    def list_users(self, search: str = "") -> list[UserRead]:
        stmt = queries.search_users(search) if search else queries.select_all_users()
        with self._session_factory() as db:
            return [UserRead.model_validate(row) for row in db.execute(stmt).scalars()]

    # --- reservations ---

    def add_reservation(self, payload: ReservationCreate) -> ReservationRead:
        reservation_id = payload.id or new_id("RES")
        row = Reservation(
            id=reservation_id,
            asset_id=payload.asset_id,
            user_id=payload.user_id,
            start_date=payload.start_date,
            end_date=payload.end_date,
            status=payload.status.value,
        )
        with self._session() as db:
            self._insert(db, row, queries.select_reservation_by_id(reservation_id), "Reservation", reservation_id)
            result = ReservationRead.model_validate(row)
        self._emit(ChangeEvent("reservation", "insert", (reservation_id,)))
        return result

    def set_reservation_status(self, reservation_id: str, status: ReservationStatus) -> ReservationRead:
        with self._session() as db:
            row = self._get_row(db, queries.select_reservation_by_id(reservation_id), "Reservation", reservation_id)
            row.status = status.value
            result = ReservationRead.model_validate(row)
        self._emit(ChangeEvent("reservation", "update", (reservation_id,)))
        return result

    def get_reservation(self, reservation_id: str) -> ReservationRead | None:
        with self._session_factory() as db:
            row = db.execute(queries.select_reservation_by_id(reservation_id)).scalar_one_or_none()
            return ReservationRead.model_validate(row) if row is not None else None

    def list_reservations(self, asset_id: str | None = None) -> list[ReservationRead]:
        with self._session_factory() as db:
            rows = db.execute(queries.select_reservations(asset_id)).scalars()
            return [ReservationRead.model_validate(row) for row in rows]

    # --- helpers ---

    @staticmethod
    def _get_row(db: Session, stmt, kind: str, entity_id: str):
        row = db.execute(stmt).scalar_one_or_none()
        if row is None:
            raise NotFoundError(kind, entity_id)
        return row

    @staticmethod
    def _insert(db: Session, row, lookup, kind: str, entity_id: str) -> None:
        # Check uniqueness first (best-effort; DB unique constraint is final authority)
        if db.execute(lookup).scalar_one_or_none() is not None:
            raise DuplicateIdError(kind, entity_id)
        db.add(row)
        try:
            db.flush()
        except IntegrityError as exc:
            raise DuplicateIdError(kind, entity_id) from exc
