"""Shared test fixtures for the save-data server tests."""

import base64
from datetime import datetime, timedelta, timezone

import pytest
import pytest_asyncio
from sqlalchemy.exc import SQLAlchemyError

from src.data import Account, AccountSession, Database, SessionSaveData, SystemSaveData

ALICE_UUID = bytes.fromhex("00112233445566778899aabbccddeeff")
ALICE_TOKEN = bytes(range(32))
EXPIRED_TOKEN = bytes(range(1, 33))


def auth_header(token: bytes = ALICE_TOKEN) -> dict:
    return {"Authorization": base64.b64encode(token).decode()}


def seed_rows():
    """Rows for one account with a system save and two session slots."""
    now = datetime.now(timezone.utc)
    return [
        Account(uuid=ALICE_UUID, username="alice", registered=now),
        AccountSession(token=ALICE_TOKEN, uuid=ALICE_UUID, expire=now + timedelta(days=7)),
        AccountSession(token=EXPIRED_TOKEN, uuid=ALICE_UUID, expire=now - timedelta(days=1)),
        SystemSaveData(uuid=ALICE_UUID, data={"trainerId": 1234, "dexData": {}}, timestamp=now),
        SessionSaveData(uuid=ALICE_UUID, slot=0, data={"waveIndex": 12}, timestamp=now),
        SessionSaveData(uuid=ALICE_UUID, slot=2, data={"waveIndex": 48}, timestamp=now),
    ]


class FakeStore:
    """Records every persistence call; optionally fails on demand."""

    def __init__(self, fail_activity: bool = False, error: Exception | None = None):
        self.calls = []
        self.fail_activity = fail_activity
        self.error = error
        self.system = {}
        self.sessions = {}

    def persistence_calls(self):
        return [c for c in self.calls if c[0] != "update_account_last_activity"]

    def _record(self, *call):
        self.calls.append(call)
        if self.error is not None:
            raise self.error

    async def update_account_last_activity(self, uuid):
        self.calls.append(("update_account_last_activity", uuid))
        if self.fail_activity:
            raise SQLAlchemyError("activity update failed")

    async def read_system_save_data(self, uuid):
        self._record("read_system_save_data", uuid)
        return self.system.get(uuid)

    async def store_system_save_data(self, uuid, data):
        self._record("store_system_save_data", uuid, data)
        self.system[uuid] = data

    async def delete_system_save_data(self, uuid):
        self._record("delete_system_save_data", uuid)
        self.system.pop(uuid, None)

    async def read_session_save_data(self, uuid, slot):
        self._record("read_session_save_data", uuid, slot)
        return self.sessions.get((uuid, slot))

    async def store_session_save_data(self, uuid, slot, data):
        self._record("store_session_save_data", uuid, slot, data)
        self.sessions[(uuid, slot)] = data

    async def delete_session_save_data(self, uuid, slot):
        self._record("delete_session_save_data", uuid, slot)
        self.sessions.pop((uuid, slot), None)


@pytest.fixture
def store():
    return FakeStore()


@pytest.fixture
def sqlite_url(tmp_path):
    return f"sqlite+aiosqlite:///{tmp_path / 'savedata.db'}"


@pytest_asyncio.fixture
async def database(sqlite_url):
    """Initialized database seeded with one account."""
    db = Database(sqlite_url)
    await db.init()
    async with db.session_scope() as session:
        session.add_all(seed_rows())
    yield db
    await db.close()
