"""Tests for the API gateway and the typed content/auth services."""

import pytest

from cms_shared.api_client import ApiGateway
from cms_shared.config import SESSION_NAMESPACE, TOKEN_STORAGE_KEY
from cms_shared.errors import GENERIC_ALERT, ApiError, AuthorizationExpired, NetworkError
from cms_shared.models import CreateRoutePayload, RouteStep, RouteStepsBody, UpdateContentPayload, User
from cms_shared.services import AuthService, ContentService
from cms_shared.session import SessionContext
from tests.conftest import FakeApi

EDITOR = User(id="user-1", email="editor@example.com", role="EDITOR")


@pytest.fixture()
def session(storage) -> SessionContext:
    s = SessionContext(storage)
    s.login("tok-1", EDITOR)
    return s


@pytest.fixture()
def api() -> FakeApi:
    return FakeApi()


@pytest.fixture()
def gateway(session, api):
    gw = ApiGateway(session, base_url="http://api.test/v1", transport=api.transport)
    yield gw
    gw.close()


# ── Gateway ─────────────────────────────────────────────────────────────────────

class TestGateway:
    def test_attaches_bearer_token(self, gateway, api):
        gateway.get("/content/catalog")
        assert api.calls[0].headers["Authorization"] == "Bearer tok-1"

    def test_no_token_no_header(self, storage, api):
        gw = ApiGateway(SessionContext(storage), base_url="http://api.test/v1", transport=api.transport)
        gw.get("/content/catalog")
        assert "Authorization" not in api.calls[0].headers

    def test_401_expires_session(self, gateway, api, session, storage):
        api.respond("GET", "/content/catalog", 401, {"message": "Unauthorized"})
        with pytest.raises(AuthorizationExpired):
            gateway.get("/content/catalog")
        assert session.is_authenticated is False
        assert storage.get_item(TOKEN_STORAGE_KEY) is None
        assert storage.get_item(SESSION_NAMESPACE) is None

    def test_server_message_is_surfaced(self, gateway, api):
        api.respond("POST", "/content", 400, {"message": "El slug ya existe"})
        with pytest.raises(ApiError) as exc_info:
            gateway.post("/content", json={})
        assert exc_info.value.status_code == 400
        assert exc_info.value.message == "El slug ya existe"

    def test_list_of_messages_joined(self, gateway, api):
        api.respond("POST", "/content", 400, {"message": ["title too short", "topic required"]})
        with pytest.raises(ApiError) as exc_info:
            gateway.post("/content", json={})
        assert exc_info.value.message == "title too short; topic required"

    def test_generic_fallback_without_message(self, gateway, api):
        api.respond("GET", "/content/catalog", 500)
        with pytest.raises(ApiError) as exc_info:
            gateway.get("/content/catalog")
        assert exc_info.value.message == GENERIC_ALERT

    def test_network_failure(self, gateway, api, session):
        api.offline = True
        with pytest.raises(NetworkError) as exc_info:
            gateway.get("/content/catalog")
        assert exc_info.value.message == "No se pudo conectar con el servidor"
        assert session.is_authenticated is True

    def test_empty_body_returns_none(self, gateway, api):
        api.respond("PATCH", "/content/r-1", 204)
        assert gateway.patch("/content/r-1", json={}) is None


# ── Services ────────────────────────────────────────────────────────────────────

class TestContentService:
    def test_get_routes(self, gateway):
        routes = ContentService(gateway).get_routes()
        assert [r.id for r in routes] == ["r-1", "r-2"]
        assert routes[0].model_extra["status"] == "published"

    def test_get_routes_unwraps_data_envelope(self, gateway, api):
        api.respond("GET", "/content/catalog", 200, {"data": [{"id": "r-9", "title": "T", "topic": "x"}]})
        assert [r.id for r in ContentService(gateway).get_routes()] == ["r-9"]

    def test_get_content_by_id(self, gateway):
        detail = ContentService(gateway).get_content_by_id("r-1")
        assert detail.type == "route"
        assert len(detail.body["days"]) == 2

    def test_create_content_drops_nulls(self, gateway, api):
        payload = CreateRoutePayload(
            title="Camino",
            topic="ansiedad",
            body=RouteStepsBody(
                intro="Introducción larga",
                steps=[RouteStep(day=1, title="Paso", type="journaling")],
            ),
        )
        assert ContentService(gateway).create_content(payload) == {"id": "c-new"}

        sent = FakeApi.body(api.calls_to("POST", "/content")[0])
        assert sent["type"] == "route"
        assert "description" not in sent
        assert sent["body"]["steps"][0] == {"day": 1, "title": "Paso", "type": "journaling", "content": {}}

    def test_update_content_sends_only_set_fields(self, gateway, api):
        ContentService(gateway).update_content("r-1", UpdateContentPayload(title="Nuevo"))
        assert FakeApi.body(api.calls_to("PATCH", "/content/r-1")[0]) == {"title": "Nuevo"}


class TestAuthService:
    def test_request_magic_link(self, gateway, api):
        AuthService(gateway).request_magic_link("editor@example.com")
        assert FakeApi.body(api.calls_to("POST", "/auth/login")[0]) == {"email": "editor@example.com"}

    def test_get_me(self, gateway):
        assert AuthService(gateway).get_me().role == "EDITOR"
