"""
Tests for the sliding session manager and the signed session token.
"""
from datetime import timedelta

import jwt
import pytest

from core.security import decode_session_token, encode_session_token
from core.session import Session, SessionManager

TTL = timedelta(minutes=10)


@pytest.fixture
def uid(make_user):
    return make_user()


class TestIssue:

    def test_expiration_is_now_plus_ttl(self, sessions, clock, uid):
        session = sessions.issue(uid)
        assert session.uid == uid
        assert session.expiration == clock.now + TTL

    def test_default_ttl_is_ten_minutes(self, users):
        assert SessionManager(users.exists).ttl == TTL


class TestValidate:

    def test_none_is_no_session(self, sessions):
        assert sessions.validate(None) is None

    def test_valid_session_is_refreshed(self, sessions, clock, uid):
        session = sessions.issue(uid)
        now = clock.advance(minutes=9)
        refreshed = sessions.validate(session)
        assert refreshed is not None
        assert refreshed.uid == uid
        assert refreshed.expiration == now + TTL

    def test_original_token_is_not_mutated(self, sessions, clock, uid):
        session = sessions.issue(uid)
        expiration = session.expiration
        clock.advance(minutes=1)
        sessions.validate(session)
        assert session.expiration == expiration

    def test_expired_just_after_ttl(self, sessions, clock, uid):
        session = sessions.issue(uid)
        clock.advance(minutes=10, microseconds=1)
        assert sessions.validate(session) is None

    def test_expired_exactly_at_expiration(self, sessions, clock, uid):
        session = sessions.issue(uid)
        clock.advance(minutes=10)
        assert sessions.validate(session) is None

    def test_sliding_window_keeps_session_alive(self, sessions, clock, uid):
        session = sessions.issue(uid)
        for _ in range(5):
            clock.advance(minutes=8)
            session = sessions.validate(session)
            assert session is not None
        # 40 minutes after issue, still valid because it was used
        clock.advance(minutes=9, seconds=59)
        assert sessions.validate(session) is not None

    def test_refreshed_session_valid_until_refresh_plus_ttl(self, sessions, clock, uid):
        session = sessions.issue(uid)
        clock.advance(minutes=5)
        refreshed = sessions.validate(session)
        clock.advance(minutes=9, seconds=59)
        assert sessions.validate(refreshed) is not None
        assert sessions.validate(session) is None

    def test_deleted_owner_invalidates_session(self, sessions, users, uid):
        session = sessions.issue(uid)
        users.delete(uid)
        assert sessions.validate(session) is None

    def test_unknown_owner(self, sessions, clock):
        assert sessions.validate(Session(uid=999, expiration=clock.now + TTL)) is None

    def test_clear_returns_nothing(self, sessions, uid):
        assert sessions.clear(sessions.issue(uid)) is None


class TestSessionToken:

    def test_round_trip(self, sessions, uid):
        session = sessions.issue(uid)
        decoded = decode_session_token(encode_session_token(session))
        assert decoded.uid == uid
        # JWT "exp" carries whole seconds
        assert decoded.expiration == session.expiration.replace(microsecond=0)

    def test_expired_token_still_decodes(self, clock, uid):
        # expiry is the session manager's decision, not the decoder's
        stale = Session(uid=uid, expiration=clock.now - timedelta(days=365))
        assert decode_session_token(encode_session_token(stale)) == stale

    def test_forged_signature_rejected(self, sessions, uid):
        forged = jwt.encode(
            {"uid": uid, "exp": sessions.issue(uid).expiration},
            "not-the-server-secret-0123456789abcdef",
            algorithm="HS256",
        )
        assert decode_session_token(forged) is None

    def test_missing_claim_rejected(self):
        from core.config import settings

        token = jwt.encode({"uid": 1}, settings.secret_key, algorithm="HS256")
        assert decode_session_token(token) is None

    @pytest.mark.parametrize("token", [None, "", "garbage", "a.b.c"])
    def test_malformed_token(self, token):
        assert decode_session_token(token) is None
