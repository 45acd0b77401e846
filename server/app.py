from __future__ import annotations

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI

from src.data import Database

from .cors import CORSPolicy, CORSPolicyMiddleware
from .savedata_api import router as savedata_router

logger = logging.getLogger(__name__)

DEFAULT_CORS_ORIGIN = "https://pokerogue.net"


def create_app(
    db: Database,
    *,
    debug: bool = False,
    cors_origin: str = DEFAULT_CORS_ORIGIN,
) -> FastAPI:
    """
    Build the ASGI application around an explicitly constructed database.

    The database is opened in the lifespan so the engine lives on the
    server's event loop.
    """

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        logger.info("Starting save-data server...")
        await db.init()
        logger.info("Database ready")

        yield

        logger.info("Shutting down server...")
        await db.close()
        logger.info("Shutdown complete")

    app = FastAPI(
        title="Rogue Save-Data Server",
        version="0.1.0",
        lifespan=lifespan,
    )
    app.state.db = db

    app.include_router(savedata_router)

    policy = CORSPolicy.debug() if debug else CORSPolicy.production(cors_origin)
    app.add_middleware(CORSPolicyMiddleware, policy=policy)

    if debug:
        logger.warning("Debug mode: CORS allows any origin")

    return app
