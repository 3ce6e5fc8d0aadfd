"""Typed wrappers over the content API endpoints."""

from pydantic import TypeAdapter

from cms_shared.api_client import ApiGateway
from cms_shared.models import (
    ContentDetail,
    CreateContentPayload,
    RouteListItem,
    UpdateContentPayload,
    User,
)

_catalog = TypeAdapter(list[RouteListItem])
_create_payload = TypeAdapter(CreateContentPayload)


class AuthService:
    def __init__(self, gateway: ApiGateway):
        self._gateway = gateway

    def request_magic_link(self, email: str) -> None:
        """POST /auth/login: the API emails a magic link; no body contract."""
        self._gateway.post("/auth/login", json={"email": email})

    def get_me(self) -> User:
        return User.model_validate(self._gateway.get("/auth/me"))


class ContentService:
    def __init__(self, gateway: ApiGateway):
        self._gateway = gateway

    def get_routes(self) -> list[RouteListItem]:
        data = self._gateway.get("/content/catalog")
        # some deployments wrap the array as {"data": [...]}
        if isinstance(data, dict):
            data = data.get("data", [])
        return _catalog.validate_python(data or [])

    def get_content_by_id(self, content_id: str) -> ContentDetail:
        return ContentDetail.model_validate(
            self._gateway.get(f"/content/routes/{content_id}")
        )

    def create_content(self, payload: CreateContentPayload) -> dict:
        body = _create_payload.dump_python(payload, mode="json", exclude_none=True)
        return self._gateway.post("/content", json=body) or {}

    def update_content(self, content_id: str, payload: UpdateContentPayload) -> dict:
        body = payload.model_dump(mode="json", exclude_none=True)
        return self._gateway.patch(f"/content/{content_id}", json=body) or {}
