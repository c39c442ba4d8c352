# ---------------------------------------------------------------------------
# Author  : Kyle <kyle@hacking-linux.com>
# Version : 20260206v1
# ---------------------------------------------------------------------------
"""
Session transport.  The core session manager only knows ``(uid,
expiration)``; this module makes that pair tamper-evident and moves it in
and out of the session cookie.

Responsibilities
----------------
1. Session-token signing / verification      (PyJWT / HS256)
2. Cookie helpers                            (set / clear)
3. Accessors for the services on ``app.state``
4. FastAPI dependency guards                 (current_session, require_session)
"""

from datetime import datetime, timezone
from typing import Optional

import jwt as _jwt  # PyJWT
from fastapi import Depends, HTTPException, Request, Response, status

from core.config import settings
from core.gateway import AuthGateway
from core.session import Session, SessionManager
from store.entries import EntryStore
from store.feed import ChangeFeed

_ALGORITHM = "HS256"
_AUTH_REQUIRED = "This endpoints requires authentication"


# ---------------------------------------------------------------------------
# 1.  Token signing
# ---------------------------------------------------------------------------


def encode_session_token(session: Session) -> str:
    """Sign ``{uid, exp}`` with HS256."""
    return _jwt.encode(
        {"uid": session.uid, "exp": session.expiration},
        settings.secret_key,
        algorithm=_ALGORITHM,
    )


def decode_session_token(token: Optional[str]) -> Optional[Session]:
    """
    Verify the signature and rebuild the :class:`Session`.  Returns ``None``
    for a missing, malformed or forged token.

    Expiry is not checked here; the session manager owns that rule.
    """
    if not token:
        return None
    try:
        payload = _jwt.decode(
            token,
            settings.secret_key,
            algorithms=[_ALGORITHM],
            options={"verify_exp": False, "require": ["uid", "exp"]},
        )
        return Session(
            uid=int(payload["uid"]),
            expiration=datetime.fromtimestamp(int(payload["exp"]), tz=timezone.utc),
        )
    except (_jwt.InvalidTokenError, OverflowError, OSError, TypeError, ValueError):
        return None


# ---------------------------------------------------------------------------
# 2.  Cookie helpers
# ---------------------------------------------------------------------------


def set_session_cookie(response: Response, session: Session) -> None:
    response.set_cookie(
        settings.session_cookie_name,
        encode_session_token(session),
        httponly=True,
        secure=settings.session_cookie_secure,
        samesite="lax",
    )


def clear_session_cookie(response: Response) -> None:
    response.delete_cookie(
        settings.session_cookie_name,
        httponly=True,
        secure=settings.session_cookie_secure,
        samesite="lax",
    )


def _cleared_cookie_headers() -> dict:
    scratch = Response()
    clear_session_cookie(scratch)
    return {"set-cookie": scratch.headers["set-cookie"]}


# ---------------------------------------------------------------------------
# 3.  Service accessors
# ---------------------------------------------------------------------------


def get_gateway(request: Request) -> AuthGateway:
    return request.app.state.gateway


def get_session_manager(request: Request) -> SessionManager:
    return request.app.state.sessions


def get_entry_store(request: Request) -> EntryStore:
    return request.app.state.entries


def get_change_feed(request: Request) -> ChangeFeed:
    return request.app.state.feed


# ---------------------------------------------------------------------------
# 4.  FastAPI dependency guards
# ---------------------------------------------------------------------------


def current_session(
    request: Request,
    response: Response,
    sessions: SessionManager = Depends(get_session_manager),
) -> Optional[Session]:
    """
    Dependency: validate the session cookie and slide its expiration.

    On success the refreshed token is written back to the response.  A
    cookie that no longer validates is cleared.
    """
    token = request.cookies.get(settings.session_cookie_name)
    session = sessions.validate(decode_session_token(token))

    if session is None:
        if token is not None:
            clear_session_cookie(response)
        return None

    set_session_cookie(response, session)
    return session


def require_session(
    request: Request,
    session: Optional[Session] = Depends(current_session),
) -> Session:
    """Dependency: like :func:`current_session` but 401 when absent."""
    if session is None:
        headers = None
        if settings.session_cookie_name in request.cookies:
            headers = _cleared_cookie_headers()
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=_AUTH_REQUIRED,
            headers=headers,
        )
    return session
