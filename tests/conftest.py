import csv
import os
from datetime import date
from pathlib import Path

import pytest

# Select the test settings before anything imports `config`
os.environ.setdefault("MODE", "test")

from core.ids import MS_PER_DAY
from db import create_db_engine, create_session_factory, init_db
from db_models.asset import AssetStatus
from db_models.user import UserRole
from inventory.store.db_manager import EntityStore
from inventory.store.models import AssetCreate, UserCreate

NOW = 1_760_000_000_000  # fixed "now" in epoch ms


class FakeClock:
    """Settable clock in epoch ms."""

    def __init__(self, now: int = NOW):
        self.now = now

    def __call__(self) -> int:
        return self.now

    def advance(self, days: float = 0, ms: int = 0) -> int:
        self.now += int(days * MS_PER_DAY) + ms
        return self.now


@pytest.fixture(scope="session")
def anyio_backend():
    return "asyncio"


@pytest.fixture
def engine():
    engine = create_db_engine("sqlite+pysqlite:///:memory:", echo=False)
    init_db(engine)
    yield engine
    engine.dispose()


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def store(engine, clock):
    return EntityStore(create_session_factory(engine), clock=clock)


@pytest.fixture
def seeded_store(store):
    """Store with the sample catalogue from sample_assets.csv and two users."""
    csv_path = Path(__file__).parent / "sample_assets.csv"
    with open(csv_path, newline='', encoding='utf-8') as f:
        reader = csv.DictReader(f)
        for row in reader:
            store.add_asset(
                AssetCreate(
                    id=row["id"],
                    name=row["name"],
                    category=row["category"],
                    model=row["model"],
                    serial_number=row["serial_number"],
                    purchase_date=date.fromisoformat(row["purchase_date"]),
                    status=AssetStatus(row["status"]),
                )
            )

    store.add_user(UserCreate(id="U001", name="Alice Chen", email="alice.c@company.com",
                              role=UserRole.STAFF, department="Design", password="alicepass"))
    store.add_user(UserCreate(id="U003", name="Admin User", email="admin@company.com",
                              role=UserRole.ADMIN))
    return store


@pytest.fixture
def events(store):
    """Change events emitted by `store` during the test."""
    received = []
    store.subscribe(received.append)
    return received
