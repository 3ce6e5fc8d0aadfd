"""Tests for magic-link decoding and the persisted session."""

import json

import pytest

from cms_shared.auth import decode_magic_link_token
from cms_shared.config import SESSION_NAMESPACE, TOKEN_STORAGE_KEY
from cms_shared.errors import TokenDecodeError
from cms_shared.models import User
from cms_shared.session import SessionContext
from tests.conftest import SECRET, make_token

EDITOR = User(id="user-1", email="editor@example.com", role="EDITOR")


# ── Token decoding ──────────────────────────────────────────────────────────────

class TestDecodeToken:
    def test_valid_token(self):
        user = decode_magic_link_token(make_token(role="ADMIN"), secret=SECRET)
        assert (user.id, user.email, user.role) == ("user-1", "editor@example.com", "ADMIN")

    def test_empty_token(self):
        with pytest.raises(TokenDecodeError) as exc_info:
            decode_magic_link_token("   ", secret=SECRET)
        assert exc_info.value.reason == "Token vacío"

    def test_garbage_token(self):
        with pytest.raises(TokenDecodeError):
            decode_magic_link_token("not-a-jwt", secret=SECRET)

    def test_wrong_signature(self):
        token = make_token(secret="another-secret-that-is-long-enough")
        with pytest.raises(TokenDecodeError):
            decode_magic_link_token(token, secret=SECRET)

    def test_expired(self):
        with pytest.raises(TokenDecodeError) as exc_info:
            decode_magic_link_token(make_token(expired=True), secret=SECRET)
        assert exc_info.value.reason == "Token expirado"

    def test_missing_role_has_no_fallback(self):
        with pytest.raises(TokenDecodeError):
            decode_magic_link_token(make_token(role=None), secret=SECRET)

    def test_unknown_role(self):
        with pytest.raises(TokenDecodeError):
            decode_magic_link_token(make_token(role="GUEST"), secret=SECRET)

    def test_missing_subject(self):
        with pytest.raises(TokenDecodeError):
            decode_magic_link_token(make_token(sub=None), secret=SECRET)

    def test_unverified_when_no_secret(self):
        token = make_token(secret="whatever-the-api-signs-with-1234")
        assert decode_magic_link_token(token, secret="").email == "editor@example.com"


# ── Session persistence ─────────────────────────────────────────────────────────

class TestSessionContext:
    def test_fresh_storage_is_logged_out(self, storage):
        session = SessionContext.hydrate(storage)
        assert session.is_authenticated is False
        assert session.token is None

    def test_login_persists_token_and_blob(self, storage):
        SessionContext(storage).login("tok-1", EDITOR)

        assert storage.get_item(TOKEN_STORAGE_KEY) == "tok-1"
        blob = json.loads(storage.get_item(SESSION_NAMESPACE))
        assert blob["version"] == 0
        assert blob["state"]["isAuthenticated"] is True
        assert blob["state"]["user"]["email"] == "editor@example.com"

    def test_hydrate_restores_session(self, storage):
        SessionContext(storage).login("tok-1", EDITOR)
        session = SessionContext.hydrate(storage)
        assert session.is_authenticated is True
        assert session.token == "tok-1"
        assert session.user == EDITOR

    def test_logout_clears_token_and_keeps_cleared_blob(self, storage):
        session = SessionContext(storage)
        session.login("tok-1", EDITOR)
        session.logout()

        assert storage.get_item(TOKEN_STORAGE_KEY) is None
        blob = json.loads(storage.get_item(SESSION_NAMESPACE))
        assert blob["state"] == {"token": None, "user": None, "isAuthenticated": False}
        assert SessionContext.hydrate(storage).is_authenticated is False

    def test_expire_removes_both_keys(self, storage):
        session = SessionContext(storage)
        session.login("tok-1", EDITOR)
        session.expire()

        assert storage.get_item(TOKEN_STORAGE_KEY) is None
        assert storage.get_item(SESSION_NAMESPACE) is None
        assert session.is_authenticated is False
        assert session.user is None

    def test_corrupt_blob_is_discarded(self, storage):
        storage.set_item(SESSION_NAMESPACE, "{not json")
        session = SessionContext.hydrate(storage)
        assert session.is_authenticated is False
        assert storage.get_item(SESSION_NAMESPACE) is None

    def test_authenticated_flag_without_token_is_ignored(self, storage):
        blob = {"state": {"token": None, "user": None, "isAuthenticated": True}, "version": 0}
        storage.set_item(SESSION_NAMESPACE, json.dumps(blob))
        assert SessionContext.hydrate(storage).is_authenticated is False
