"""
Tests for save-data dispatch by data type and slot.
"""

import pytest
from sqlalchemy.exc import SQLAlchemyError

from conftest import ALICE_UUID, FakeStore
from src.core import (
    SESSION_SLOT_COUNT,
    InvalidDataTypeError,
    SaveDataNotFoundError,
    SlotOutOfRangeError,
)
from src.services import SaveDataService


@pytest.mark.asyncio
@pytest.mark.parametrize("datatype", [-1, 2, 7])
async def test_delete_rejects_unknown_datatype(store, datatype):
    err = await SaveDataService(store).delete(ALICE_UUID, datatype, 0)

    assert isinstance(err, InvalidDataTypeError)
    assert str(err) == "invalid data type"
    assert store.persistence_calls() == []


@pytest.mark.asyncio
@pytest.mark.parametrize("slot", [-1, SESSION_SLOT_COUNT, 99])
async def test_delete_session_rejects_slot_out_of_range(store, slot):
    err = await SaveDataService(store).delete(ALICE_UUID, 1, slot)

    assert isinstance(err, SlotOutOfRangeError)
    assert err.slot == slot
    assert str(err) == f"slot id {slot} out of range"
    assert store.persistence_calls() == []


@pytest.mark.asyncio
async def test_delete_session_calls_store_once():
    store = FakeStore()
    store.sessions[(ALICE_UUID, 3)] = {"waveIndex": 5}

    err = await SaveDataService(store).delete(ALICE_UUID, 1, 3)

    assert err is None
    assert store.persistence_calls() == [("delete_session_save_data", ALICE_UUID, 3)]
    assert (ALICE_UUID, 3) not in store.sessions


@pytest.mark.asyncio
@pytest.mark.parametrize("slot", [0, -5, 1000])
async def test_delete_system_ignores_slot(store, slot):
    err = await SaveDataService(store).delete(ALICE_UUID, 0, slot)

    assert err is None
    assert store.persistence_calls() == [("delete_system_save_data", ALICE_UUID)]


@pytest.mark.asyncio
async def test_delete_records_activity_first(store):
    await SaveDataService(store).delete(ALICE_UUID, 0)

    assert store.calls[0] == ("update_account_last_activity", ALICE_UUID)


@pytest.mark.asyncio
async def test_activity_failure_does_not_block_delete(caplog):
    store = FakeStore(fail_activity=True)

    err = await SaveDataService(store).delete(ALICE_UUID, 1, 0)

    assert err is None
    assert store.persistence_calls() == [("delete_session_save_data", ALICE_UUID, 0)]
    assert "failed to update account last activity" in caplog.text


@pytest.mark.asyncio
async def test_persistence_error_returned_unchanged():
    boom = SQLAlchemyError("connection lost")
    store = FakeStore(error=boom)

    err = await SaveDataService(store).delete(ALICE_UUID, 0)

    assert err is boom
    assert len(store.persistence_calls()) == 1


@pytest.mark.asyncio
async def test_get_missing_record_is_not_found(store):
    data, err = await SaveDataService(store).get(ALICE_UUID, 0)

    assert data is None
    assert isinstance(err, SaveDataNotFoundError)


@pytest.mark.asyncio
async def test_get_session_validates_slot_before_reading(store):
    data, err = await SaveDataService(store).get(ALICE_UUID, 1, SESSION_SLOT_COUNT)

    assert data is None
    assert isinstance(err, SlotOutOfRangeError)
    assert store.calls == []


@pytest.mark.asyncio
async def test_update_then_get_session_slot(store):
    service = SaveDataService(store)

    assert await service.update(ALICE_UUID, 1, 4, {"waveIndex": 20}) is None
    data, err = await service.get(ALICE_UUID, 1, 4)

    assert err is None
    assert data == {"waveIndex": 20}


@pytest.mark.asyncio
async def test_update_rejects_unknown_datatype(store):
    err = await SaveDataService(store).update(ALICE_UUID, 5, 0, {})

    assert isinstance(err, InvalidDataTypeError)
    assert store.persistence_calls() == []
