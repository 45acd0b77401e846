from __future__ import annotations

import logging
from typing import Any, Dict

from fastapi import APIRouter, Body, Depends, HTTPException, Response, status

from src.core import InvalidDataTypeError, SaveDataNotFoundError, SlotOutOfRangeError
from src.services import SaveDataService

from .dependencies import get_savedata_service, uuid_from_request

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/savedata", tags=["savedata"])


def _raise_for(err: Exception, action: str) -> None:
    """Translate a service error value into an HTTP error response."""
    if isinstance(err, (InvalidDataTypeError, SlotOutOfRangeError)):
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(err))
    if isinstance(err, SaveDataNotFoundError):
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(err))

    logger.error(f"failed to {action} save data: {err}")
    raise HTTPException(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        detail=f"failed to {action} save data",
    )


@router.get("/get")
async def get_savedata(
    datatype: int,
    slot: int = 0,
    uuid: bytes = Depends(uuid_from_request),
    service: SaveDataService = Depends(get_savedata_service),
) -> Dict[str, Any]:
    data, err = await service.get(uuid, datatype, slot)
    if err is not None:
        _raise_for(err, "get")
    return data


@router.post("/update")
async def update_savedata(
    datatype: int,
    slot: int = 0,
    data: Dict[str, Any] = Body(...),
    uuid: bytes = Depends(uuid_from_request),
    service: SaveDataService = Depends(get_savedata_service),
) -> Response:
    err = await service.update(uuid, datatype, slot, data)
    if err is not None:
        _raise_for(err, "update")
    return Response(status_code=status.HTTP_200_OK)


@router.get("/delete")
async def delete_savedata(
    datatype: int,
    slot: int = 0,
    uuid: bytes = Depends(uuid_from_request),
    service: SaveDataService = Depends(get_savedata_service),
) -> Response:
    """Delete the system record (datatype=0) or one session slot (datatype=1)."""
    err = await service.delete(uuid, datatype, slot)
    if err is not None:
        _raise_for(err, "delete")
    return Response(status_code=status.HTTP_200_OK)
