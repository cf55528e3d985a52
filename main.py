"""
Application session wiring.

create_inventory() builds one engine, one EntityStore and the components that
hang off it. Everything is scoped to the returned object; there is no global
store.
"""
import logging
from dataclasses import dataclass, field

from sqlalchemy import Engine

from config import settings
from core.log_config import setup_logging
from db import create_db_engine, create_session_factory, init_db
from inventory.auth.gate import AdminGate
from inventory.notifications.deriver import NotificationCenter
from inventory.qr_export.exporter import QrBatchExporter
from inventory.store.db_manager import EntityStore

logger = logging.getLogger(__name__)


@dataclass
class Inventory:
    engine: Engine
    store: EntityStore
    notifications: NotificationCenter
    admin_gate: AdminGate = field(default_factory=AdminGate)
    qr_exporter: QrBatchExporter = field(default_factory=QrBatchExporter)

    def close(self) -> None:
        self.notifications.close()
        self.engine.dispose()


def create_inventory(database_url: str | None = None, *, configure_logging: bool = True) -> Inventory:
    """Open (and create, if needed) the database and wire the components."""
    if configure_logging:
        setup_logging(settings.LOG_LEVEL)

    engine = create_db_engine(database_url)
    init_db(engine)
    store = EntityStore(create_session_factory(engine))
    inventory = Inventory(
        engine=engine,
        store=store,
        notifications=NotificationCenter(store),
    )
    logger.info("Inventory ready (%s, env=%s)", engine.url.render_as_string(hide_password=True), settings.APP_ENV)
    return inventory
