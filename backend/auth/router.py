# ---------------------------------------------------------------------------
# Author  : Kyle <kyle@hacking-linux.com>
# Version : 20260206v1
# ---------------------------------------------------------------------------
"""
Auth and account endpoints – registration, login, account deletion.

Security notes
--------------
* Both login flavours answer "Bad credentials" whether the username is
  unknown or the password is wrong.  This prevents user-enumeration.
* A successful login or registration sets the signed session cookie; the
  token itself never appears in a response body.
"""

from fastapi import APIRouter, Depends, Form, Response, status
from fastapi.responses import PlainTextResponse, RedirectResponse
from fastapi.security import HTTPBasic, HTTPBasicCredentials

from core.gateway import AuthGateway
from core.logger import logger
from core.security import clear_session_cookie, get_gateway, require_session, set_session_cookie
from core.session import Session

router = APIRouter(tags=["auth"])

_basic = HTTPBasic(realm="SyncVault")

# Generic message used for both "no such user" and "wrong password"
_LOGIN_FAIL = "Bad credentials"


def _login(username: str, password: str, response: Response, gateway: AuthGateway) -> str:
    session = gateway.authenticate(username, password)
    if session is None:
        response.status_code = status.HTTP_401_UNAUTHORIZED
        return _LOGIN_FAIL

    set_session_cookie(response, session)
    return "Authenticated!"


# ---------------------------------------------------------------------------
# POST /auth/create
# ---------------------------------------------------------------------------


@router.post("/auth/create", response_class=PlainTextResponse)
def create_account(
    response: Response,
    username: str = Form(...),
    password: str = Form(...),
    gateway: AuthGateway = Depends(get_gateway),
):
    """Register a new account and log it in straight away."""
    if not gateway.create_account(username, password):
        response.status_code = status.HTTP_401_UNAUTHORIZED
        return "Account already exists"

    user = gateway.users.get_by_username(username)
    set_session_cookie(response, gateway.sessions.issue(user.id))
    return "Account created"


# ---------------------------------------------------------------------------
# GET|POST /auth/login/basic  and  POST /auth/login/form
# ---------------------------------------------------------------------------


@router.api_route("/auth/login/basic", methods=["GET", "POST"], response_class=PlainTextResponse)
def login_basic(
    response: Response,
    credentials: HTTPBasicCredentials = Depends(_basic),
    gateway: AuthGateway = Depends(get_gateway),
):
    return _login(credentials.username, credentials.password, response, gateway)


@router.post("/auth/login/form", response_class=PlainTextResponse)
def login_form(
    response: Response,
    user: str = Form(...),
    password: str = Form(...),
    gateway: AuthGateway = Depends(get_gateway),
):
    return _login(user, password, response, gateway)


# ---------------------------------------------------------------------------
# GET /account/delete
# ---------------------------------------------------------------------------


@router.get("/account/delete")
def delete_account(
    session: Session = Depends(require_session),
    gateway: AuthGateway = Depends(get_gateway),
):
    """Delete the caller's account and every entry it owns."""
    if not gateway.delete_account(session.uid):
        # Session outlived its user between validation and deletion
        logger.warning("Account %d vanished before deletion", session.uid)

    redirect = RedirectResponse("/session/check", status_code=status.HTTP_303_SEE_OTHER)
    clear_session_cookie(redirect)
    return redirect
