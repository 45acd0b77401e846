"""
SaveDataService dispatches save-data requests to the repository by data type.

Routine failures (bad discriminator, slot out of range, missing record) and
persistence errors are returned as values; the API layer maps them to HTTP
status codes.
"""

from __future__ import annotations

import logging
from typing import Any, Dict, Optional, Protocol

from sqlalchemy.exc import SQLAlchemyError

from src.core import (
    SESSION_SLOT_COUNT,
    InvalidDataTypeError,
    SaveDataNotFoundError,
    SaveDataType,
    SlotOutOfRangeError,
)

logger = logging.getLogger(__name__)


class SaveDataStore(Protocol):
    """Persistence operations the service depends on."""

    async def update_account_last_activity(self, uuid: bytes) -> None: ...

    async def read_system_save_data(self, uuid: bytes) -> Optional[Dict[str, Any]]: ...

    async def store_system_save_data(self, uuid: bytes, data: Dict[str, Any]) -> None: ...

    async def delete_system_save_data(self, uuid: bytes) -> None: ...

    async def read_session_save_data(self, uuid: bytes, slot: int) -> Optional[Dict[str, Any]]: ...

    async def store_session_save_data(self, uuid: bytes, slot: int, data: Dict[str, Any]) -> None: ...

    async def delete_session_save_data(self, uuid: bytes, slot: int) -> None: ...


def validate_slot(slot: int) -> Optional[SlotOutOfRangeError]:
    if slot < 0 or slot >= SESSION_SLOT_COUNT:
        return SlotOutOfRangeError(slot)
    return None


class SaveDataService:
    """Use-case service for reading, writing and deleting save data."""

    def __init__(self, repo: SaveDataStore):
        self.repo = repo

    async def get(
        self, uuid: bytes, datatype: int, slot: int = 0
    ) -> tuple[Optional[Dict[str, Any]], Optional[Exception]]:
        """Fetch one save record. Returns (data, None) or (None, error)."""
        try:
            if datatype == SaveDataType.SYSTEM:
                data = await self.repo.read_system_save_data(uuid)
            elif datatype == SaveDataType.SESSION:
                err = validate_slot(slot)
                if err is not None:
                    return None, err
                data = await self.repo.read_session_save_data(uuid, slot)
            else:
                return None, InvalidDataTypeError(datatype)
        except SQLAlchemyError as e:
            return None, e

        if data is None:
            return None, SaveDataNotFoundError("save data not found")
        return data, None

    async def update(
        self, uuid: bytes, datatype: int, slot: int, data: Dict[str, Any]
    ) -> Optional[Exception]:
        """Insert or replace one save record."""
        await self._touch_account(uuid)

        try:
            if datatype == SaveDataType.SYSTEM:
                await self.repo.store_system_save_data(uuid, data)
            elif datatype == SaveDataType.SESSION:
                err = validate_slot(slot)
                if err is not None:
                    return err
                await self.repo.store_session_save_data(uuid, slot, data)
            else:
                return InvalidDataTypeError(datatype)
        except SQLAlchemyError as e:
            return e
        return None

    async def delete(self, uuid: bytes, datatype: int, slot: int = 0) -> Optional[Exception]:
        """
        Delete exactly one save record.

        System deletes ignore ``slot``. Session deletes validate ``slot``
        before touching the database. Returns None on success.
        """
        await self._touch_account(uuid)

        try:
            if datatype == SaveDataType.SYSTEM:
                await self.repo.delete_system_save_data(uuid)
            elif datatype == SaveDataType.SESSION:
                err = validate_slot(slot)
                if err is not None:
                    return err
                await self.repo.delete_session_save_data(uuid, slot)
            else:
                return InvalidDataTypeError(datatype)
        except SQLAlchemyError as e:
            return e
        return None

    async def _touch_account(self, uuid: bytes) -> None:
        # Advisory: a failure here must not block the save-data operation.
        try:
            await self.repo.update_account_last_activity(uuid)
        except Exception:
            logger.warning("failed to update account last activity", exc_info=True)
