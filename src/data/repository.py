"""
Repository pattern for account and save-data operations.

Each method runs in its own transaction so that a failure in one call
(for example the advisory last-activity update) never poisons the next.
"""

from __future__ import annotations

import logging
from typing import Any, Dict, Optional

from sqlalchemy import delete, select, update

from src.data.models import Account, AccountSession, SessionSaveData, SystemSaveData, utc_now
from src.data.session import Database

logger = logging.getLogger(__name__)


class SaveDataRepository:
    """
    Database operations backing the save-data API.

    Implements the persistence contract consumed by SaveDataService.
    """

    def __init__(self, db: Database):
        """
        Args:
            db: Initialized persistence client
        """
        self.db = db

    # ---- Account Operations ----

    async def fetch_uuid_from_token(self, token: bytes) -> Optional[bytes]:
        """
        Resolve a login token to its account uuid.

        Returns:
            Account uuid, or None if the token is unknown or expired
        """
        stmt = select(AccountSession.uuid).where(
            AccountSession.token == token,
            AccountSession.expire > utc_now(),
        )
        async with self.db.session_scope() as session:
            result = await session.execute(stmt)
            return result.scalar_one_or_none()

    async def update_account_last_activity(self, uuid: bytes) -> None:
        """Stamp the account's last activity with the current time."""
        stmt = update(Account).where(Account.uuid == uuid).values(last_activity=utc_now())
        async with self.db.session_scope() as session:
            await session.execute(stmt)

    # ---- System Save Data ----

    async def read_system_save_data(self, uuid: bytes) -> Optional[Dict[str, Any]]:
        async with self.db.session_scope() as session:
            record = await session.get(SystemSaveData, uuid)
            return record.data if record else None

    async def store_system_save_data(self, uuid: bytes, data: Dict[str, Any]) -> None:
        """Insert or replace the account-wide save record."""
        async with self.db.session_scope() as session:
            await session.merge(SystemSaveData(uuid=uuid, data=data, timestamp=utc_now()))
        logger.debug(f"Stored system save data for {uuid.hex()}")

    async def delete_system_save_data(self, uuid: bytes) -> None:
        async with self.db.session_scope() as session:
            await session.execute(delete(SystemSaveData).where(SystemSaveData.uuid == uuid))
        logger.info(f"Deleted system save data for {uuid.hex()}")

    # ---- Session Save Data ----

    async def read_session_save_data(self, uuid: bytes, slot: int) -> Optional[Dict[str, Any]]:
        async with self.db.session_scope() as session:
            record = await session.get(SessionSaveData, (uuid, slot))
            return record.data if record else None

    async def store_session_save_data(self, uuid: bytes, slot: int, data: Dict[str, Any]) -> None:
        """Insert or replace the save record in the given slot."""
        async with self.db.session_scope() as session:
            await session.merge(
                SessionSaveData(uuid=uuid, slot=slot, data=data, timestamp=utc_now())
            )
        logger.debug(f"Stored session save data for {uuid.hex()} slot {slot}")

    async def delete_session_save_data(self, uuid: bytes, slot: int) -> None:
        stmt = delete(SessionSaveData).where(
            SessionSaveData.uuid == uuid,
            SessionSaveData.slot == slot,
        )
        async with self.db.session_scope() as session:
            await session.execute(stmt)
        logger.info(f"Deleted session save data for {uuid.hex()} slot {slot}")
