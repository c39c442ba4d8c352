# ---------------------------------------------------------------------------
# Author  : Kyle <kyle@hacking-linux.com>
# Version : 20260206v1
# ---------------------------------------------------------------------------
"""Session endpoints – validity probe, whoami, logout."""

from typing import Optional

from fastapi import APIRouter, Depends, status
from fastapi.responses import PlainTextResponse, RedirectResponse

from core.gateway import AuthGateway
from core.security import clear_session_cookie, current_session, get_gateway, get_session_manager, require_session
from core.session import Session, SessionManager

router = APIRouter(prefix="/session", tags=["session"])


@router.get("/validate", response_class=PlainTextResponse)
def validate(session: Optional[Session] = Depends(current_session)):
    return "true" if session is not None else "false"


@router.get("/check", response_class=PlainTextResponse)
def check(
    session: Optional[Session] = Depends(current_session),
    gateway: AuthGateway = Depends(get_gateway),
):
    """Echo the username behind the session, or "No session"."""
    if session is None:
        return "No session"
    user = gateway.get_user(session.uid)
    return user.username if user else "No session"


@router.get("/expire")
def expire(
    session: Session = Depends(require_session),
    sessions: SessionManager = Depends(get_session_manager),
):
    sessions.clear(session)
    redirect = RedirectResponse("/session/check", status_code=status.HTTP_303_SEE_OTHER)
    clear_session_cookie(redirect)
    return redirect
