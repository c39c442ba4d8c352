# ---------------------------------------------------------------------------
# Author  : Kyle <kyle@hacking-linux.com>
# Version : 20260206v1
# ---------------------------------------------------------------------------
"""
FastAPI application factory.

Responsibilities
----------------
* Build the core services (database handle, stores, digest engine, session
  manager, auth gateway) and hang them on ``app.state``.
* Open the connection pool on startup and release it on shutdown.
* Register CORS and request-logging middleware.
* Mount the auth, session and entry routers.
* Expose a /health endpoint for container liveness checks.

Run with:
    uvicorn main:app --app-dir backend --host 0.0.0.0 --port 8080
"""

import time
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import PlainTextResponse, Response
from sqlalchemy.exc import SQLAlchemyError
from starlette.middleware.base import BaseHTTPMiddleware

from auth.router import router as auth_router
from core.config import settings
from core.digest import DigestEngine
from core.gateway import AuthGateway
from core.logger import logger
from core.session import SessionManager
from database import Database
from entries.router import router as entries_router
from sessions.router import router as sessions_router
from store.entries import EntryStore
from store.feed import ChangeFeed
from store.users import UserStore


# ---------------------------------------------------------------------------
# Request-logging middleware
# ---------------------------------------------------------------------------
# Logs method, path, client IP, status and latency.  Bodies are never
# echoed: they carry passwords and encrypted blobs.


class _RequestLogMiddleware(BaseHTTPMiddleware):
    """Log method, path, client IP, response status and latency (ms)."""

    async def dispatch(self, request: Request, call_next) -> Response:
        start = time.perf_counter()
        response: Response = await call_next(request)
        elapsed_ms = (time.perf_counter() - start) * 1000

        client_ip = request.client.host if request.client else "unknown"

        logger.info(
            "%s %s | client=%s status=%d latency=%.1fms",
            request.method,
            request.url.path,
            client_ip,
            response.status_code,
            elapsed_ms,
        )
        return response


def create_app(
    db: Optional[Database] = None,
    digests: Optional[DigestEngine] = None,
    sessions: Optional[SessionManager] = None,
) -> FastAPI:
    db = db or Database(settings.database_url)
    users = UserStore(db)
    entries = EntryStore(db)
    sessions = sessions or SessionManager(users.exists)
    gateway = AuthGateway(users, digests or DigestEngine.from_settings(), sessions)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        db.connect()
        logger.info("SyncVault service starting up")
        try:
            yield
        finally:
            db.dispose()
            logger.info("SyncVault service shutting down")

    app = FastAPI(title="SyncVault", version="1.0.0", lifespan=lifespan)

    app.state.db = db
    app.state.sessions = sessions
    app.state.gateway = gateway
    app.state.entries = entries
    app.state.feed = ChangeFeed(db, entries)

    # -----------------------------------------------------------------------
    # CORS – credentials are allowed because the session rides in a cookie
    # -----------------------------------------------------------------------
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["GET", "POST"],
        allow_headers=["Authorization", "Content-Type"],
    )
    app.add_middleware(_RequestLogMiddleware)

    # -----------------------------------------------------------------------
    # Infrastructure faults – surfaced as 500, never retried here
    # -----------------------------------------------------------------------
    @app.exception_handler(SQLAlchemyError)
    async def _database_error(request: Request, exc: SQLAlchemyError):
        logger.error("Database failure on %s %s: %s", request.method, request.url.path, exc)
        return PlainTextResponse("Internal Server Error", status_code=500)

    # -----------------------------------------------------------------------
    # Routers
    # -----------------------------------------------------------------------
    app.include_router(auth_router)
    app.include_router(sessions_router)
    app.include_router(entries_router)

    @app.get("/health")
    def health():
        return {"status": "ok"}

    return app


app = create_app()
