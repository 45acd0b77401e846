"""FastAPI dependencies: persistence client, service and caller identity."""

from __future__ import annotations

import base64
import binascii
import logging

from fastapi import Depends, HTTPException, Request, status
from sqlalchemy.exc import SQLAlchemyError

from src.data import Database, SaveDataRepository
from src.services import SaveDataService

logger = logging.getLogger(__name__)

TOKEN_LENGTH = 32


def get_db(request: Request) -> Database:
    return request.app.state.db


def get_repo(db: Database = Depends(get_db)) -> SaveDataRepository:
    return SaveDataRepository(db)


def get_savedata_service(repo: SaveDataRepository = Depends(get_repo)) -> SaveDataService:
    return SaveDataService(repo)


async def uuid_from_request(
    request: Request,
    repo: SaveDataRepository = Depends(get_repo),
) -> bytes:
    """
    Resolve the calling account from the base64 token in ``Authorization``.

    Raises:
        HTTPException: 400 for a missing or malformed token, 401 when the
            token is unknown or expired
    """
    raw = request.headers.get("Authorization")
    if not raw:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="missing token")

    try:
        token = base64.b64decode(raw, validate=True)
    except (binascii.Error, ValueError):
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="failed to decode token")

    if len(token) != TOKEN_LENGTH:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="invalid token length")

    try:
        uuid = await repo.fetch_uuid_from_token(token)
    except SQLAlchemyError as e:
        logger.error(f"token lookup failed: {e}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="failed to validate token",
        )

    if uuid is None:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="failed to validate token")
    return uuid
