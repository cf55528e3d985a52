# inventory/notifications/deriver.py
"""
Alert derivation.

derive_notifications() is a pure function of (assets, transactions, now).
NotificationCenter keeps the current set and replaces it wholesale whenever
the store reports an asset or transaction change.
"""
import logging
from collections.abc import Callable, Iterable

from config import settings
from core.ids import MS_PER_DAY, now_ms
from db_models.asset import AssetStatus
from db_models.transaction import TransactionType
from inventory.store.db_manager import EntityStore
from inventory.store.models import AssetRead, ChangeEvent, TransactionRead
from .models import AlertKind, Notification, Severity

logger = logging.getLogger(__name__)

# Entities whose changes can affect alerts
_WATCHED = ("asset", "transaction")


def latest_borrows(transactions: Iterable[TransactionRead]) -> dict[str, TransactionRead]:
    """Most recent Borrow entry per asset id (max timestamp)."""
    latest: dict[str, TransactionRead] = {}
    for tx in transactions:
        if tx.type != TransactionType.BORROW:
            continue
        current = latest.get(tx.asset_id)
        if current is None or tx.timestamp > current.timestamp:
            latest[tx.asset_id] = tx
    return latest


def derive_notifications(
    assets: Iterable[AssetRead],
    transactions: Iterable[TransactionRead],
    now: int,
    *,
    overdue_days: int | None = None,
) -> list[Notification]:
    """
    Build the full alert set.

    Lost alerts (critical) come first, one per Lost asset. Overdue alerts
    (warning) follow, one per Borrowed asset whose latest Borrow entry is
    strictly older than `overdue_days`. A Borrowed asset with no Borrow entry
    produces nothing.
    """
    assets = list(assets)
    threshold_ms = (settings.OVERDUE_DAYS if overdue_days is None else overdue_days) * MS_PER_DAY
    notifications: list[Notification] = []

    for asset in assets:
        if asset.status == AssetStatus.LOST:
            notifications.append(
                Notification(
                    id=f"{AlertKind.LOST.value}-{asset.id}",
                    kind=AlertKind.LOST,
                    asset_id=asset.id,
                    title="Asset Lost Alert",
                    message=f"{asset.name} ({asset.id}) is marked as Lost.",
                    severity=Severity.CRITICAL,
                    timestamp=now,
                )
            )

    borrows = latest_borrows(transactions)
    for asset in assets:
        if asset.status != AssetStatus.BORROWED:
            continue
        last = borrows.get(asset.id)
        if last is None or now - last.timestamp <= threshold_ms:
            continue
        days = (now - last.timestamp) // MS_PER_DAY
        notifications.append(
            Notification(
                id=f"{AlertKind.OVERDUE.value}-{asset.id}",
                kind=AlertKind.OVERDUE,
                asset_id=asset.id,
                title="Overdue Alert",
                message=f"{asset.name} held by {last.user_name} for {days} days.",
                severity=Severity.WARNING,
                timestamp=now,
            )
        )

    return notifications


class NotificationCenter:
    """Holds the current alert set for one store."""

    def __init__(self, store: EntityStore, clock: Callable[[], int] = now_ms):
        self._store = store
        self._clock = clock
        self._notifications: list[Notification] = []
        self._unsubscribe = store.subscribe(self._on_change)
        self.refresh()

    @property
    def notifications(self) -> list[Notification]:
        return list(self._notifications)

    def __len__(self) -> int:
        return len(self._notifications)

    def refresh(self) -> list[Notification]:
        """Full recompute from the store; replaces the previous set."""
        self._notifications = derive_notifications(
            self._store.list_assets(),
            self._store.list_transactions(),
            self._clock(),
        )
        logger.debug("Recomputed %d notifications", len(self._notifications))
        return self.notifications

    def close(self) -> None:
        self._unsubscribe()

    def _on_change(self, event: ChangeEvent) -> None:
        if event.entity in _WATCHED:
            self.refresh()
