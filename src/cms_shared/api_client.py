"""
HTTP gateway to the content REST API.

Every request carries `Authorization: Bearer <token>` when the session holds a
token. Responses are mapped onto the panel's error taxonomy:

  transport failure  → NetworkError
  401                → session.expire(), then AuthorizationExpired
  other 4xx/5xx      → ApiError(status, server message or fallback)
"""

import logging
from typing import Any

import httpx

from cms_shared.config import API_TIMEOUT, API_URL
from cms_shared.errors import ApiError, AuthorizationExpired, NetworkError
from cms_shared.session import SessionContext

logger = logging.getLogger(__name__)


def _error_message(response: httpx.Response) -> str | None:
    try:
        body = response.json()
    except ValueError:
        return None
    if isinstance(body, dict):
        message = body.get("message")
        if isinstance(message, list):
            return "; ".join(str(m) for m in message)
        if message:
            return str(message)
    return None


class ApiGateway:
    def __init__(
        self,
        session: SessionContext,
        base_url: str = API_URL,
        transport: httpx.BaseTransport | None = None,
        timeout: float = API_TIMEOUT,
    ):
        self.session = session
        self.base_url = base_url.rstrip("/")
        self._http = httpx.Client(
            base_url=self.base_url,
            headers={"Content-Type": "application/json"},
            timeout=timeout,
            transport=transport,
        )

    def close(self) -> None:
        self._http.close()

    def _headers(self) -> dict[str, str]:
        if self.session.token:
            return {"Authorization": f"Bearer {self.session.token}"}
        logger.debug("No token in session; sending unauthenticated request")
        return {}

    def request(self, method: str, path: str, json: Any = None) -> Any:
        try:
            response = self._http.request(method, path, json=json, headers=self._headers())
        except httpx.TransportError as exc:
            logger.error("%s %s failed before a response: %s", method, path, exc)
            raise NetworkError() from exc

        if response.status_code == 401:
            self.session.expire()
            raise AuthorizationExpired(f"{method} {path} answered 401")

        if response.status_code >= 400:
            message = _error_message(response)
            log = logger.error if response.status_code >= 500 else logger.warning
            log("%s %s answered %s: %s", method, path, response.status_code, message)
            raise ApiError(response.status_code, message)

        if not response.content:
            return None
        return response.json()

    def get(self, path: str) -> Any:
        return self.request("GET", path)

    def post(self, path: str, json: Any = None) -> Any:
        return self.request("POST", path, json=json)

    def patch(self, path: str, json: Any = None) -> Any:
        return self.request("PATCH", path, json=json)
