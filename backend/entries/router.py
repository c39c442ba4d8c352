# ---------------------------------------------------------------------------
# Author  : Kyle <kyle@hacking-linux.com>
# Version : 20260206v1
# ---------------------------------------------------------------------------
"""
Entry endpoints – CRUD plus the sync feed.

Security invariants enforced by every handler
---------------------------------------------
* A valid session is required on every endpoint (via ``require_session``),
  and each call slides the session expiry forward.
* Every store call is scoped to ``session.uid``.  Another user's entry id
  behaves exactly like an id that does not exist.
* Blobs are opaque: they are base64-decoded, passed through and re-encoded.
  Nothing here looks inside them.
"""

from datetime import datetime, timezone
from typing import List, Optional

from fastapi import APIRouter, Depends, Response, status
from fastapi.responses import PlainTextResponse

from core.security import get_change_feed, get_entry_store, require_session, set_session_cookie
from core.session import Session
from entries.schemas import EntryChangeResponse, EntryResponse, IncomingEntry, epoch
from store.entries import EntryStore
from store.feed import ChangeFeed
from store.records import DBResult

router = APIRouter(prefix="/entries", tags=["entries"])

_CREATE_MESSAGES = {
    DBResult.SUCCESS: ("Entry created", status.HTTP_200_OK),
    DBResult.EXCEEDS_LIMIT: ("You have reached your limit for allowed entries", status.HTTP_400_BAD_REQUEST),
    # Possible race between two inserts
    DBResult.ALREADY_EXISTS: ("Entry already exists?", status.HTTP_500_INTERNAL_SERVER_ERROR),
    # Session outlived its account
    DBResult.NO_USER: ("Account doesn't exist?", status.HTTP_500_INTERNAL_SERVER_ERROR),
}


def _bad_request(message: str, session: Session) -> PlainTextResponse:
    # A returned Response bypasses the dependency's cookie headers
    resp = PlainTextResponse(message, status_code=status.HTTP_400_BAD_REQUEST)
    set_session_cookie(resp, session)
    return resp


# ---------------------------------------------------------------------------
# Sync feed
# ---------------------------------------------------------------------------


@router.get("/changes", response_model=List[EntryChangeResponse])
def list_changes(
    session: Session = Depends(require_session),
    feed: ChangeFeed = Depends(get_change_feed),
):
    """Manifest of ``{id, lastchange}`` for every entry the caller owns."""
    return [EntryChangeResponse.from_change(c) for c in feed.get_entry_changes(session.uid)]


@router.get("/latest")
def latest_change(
    session: Session = Depends(require_session),
    feed: ChangeFeed = Depends(get_change_feed),
) -> Optional[int]:
    """Newest ``lastchange`` of the caller's entries, ``null`` when empty."""
    latest = feed.latest_change(session.uid)
    return epoch(latest) if latest is not None else None


@router.get("/count", response_class=PlainTextResponse)
def count_entries(
    session: Session = Depends(require_session),
    store: EntryStore = Depends(get_entry_store),
):
    return str(store.get_entry_count(session.uid))


@router.get("/after/{timestamp}", response_model=List[EntryResponse])
def entries_after(
    timestamp: int,
    session: Session = Depends(require_session),
    feed: ChangeFeed = Depends(get_change_feed),
):
    """Full records changed strictly after the given UNIX timestamp."""
    try:
        if timestamp < 0:
            raise ValueError(timestamp)
        after = datetime.fromtimestamp(timestamp, tz=timezone.utc)
    except (OverflowError, OSError, ValueError):
        return _bad_request("Timestamp is not valid", session)
    return [EntryResponse.from_record(e) for e in feed.get_entries_after(session.uid, after)]


# ---------------------------------------------------------------------------
# CRUD
# ---------------------------------------------------------------------------


@router.post("/create", response_class=PlainTextResponse)
def create_entry(
    body: IncomingEntry,
    response: Response,
    session: Session = Depends(require_session),
    store: EntryStore = Depends(get_entry_store),
):
    result = store.create_entry(session.uid, body.salt, body.name, body.content)
    message, code = _CREATE_MESSAGES[result]
    response.status_code = code
    return message


@router.get("/{entry_id}", response_model=EntryResponse)
def get_entry(
    entry_id: int,
    session: Session = Depends(require_session),
    store: EntryStore = Depends(get_entry_store),
):
    entry = store.get_entry(session.uid, entry_id)
    if entry is None:
        return _bad_request("Cannot find entry", session)
    return EntryResponse.from_record(entry)


@router.post("/{entry_id}", response_class=PlainTextResponse)
def update_entry(
    entry_id: int,
    body: IncomingEntry,
    response: Response,
    session: Session = Depends(require_session),
    store: EntryStore = Depends(get_entry_store),
):
    """
    Replace salt, name and content.  An ``id`` in the body, when given,
    must agree with the one in the path.
    """
    if body.id is not None and body.id != entry_id:
        response.status_code = status.HTTP_400_BAD_REQUEST
        return "Entry could not be updated"

    if not store.update_entry(session.uid, entry_id, body.salt, body.name, body.content):
        response.status_code = status.HTTP_400_BAD_REQUEST
        return "Entry could not be updated"
    return "Entry updated"


@router.post("/{entry_id}/delete", response_class=PlainTextResponse)
def delete_entry(
    entry_id: int,
    response: Response,
    session: Session = Depends(require_session),
    store: EntryStore = Depends(get_entry_store),
):
    if not store.delete_entry(session.uid, entry_id):
        response.status_code = status.HTTP_400_BAD_REQUEST
        return "Cannot find entry"
    return "Entry deleted"
