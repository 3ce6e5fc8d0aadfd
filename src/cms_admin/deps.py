"""
FastAPI dependencies: session, API gateway, services and the route guard.

The session is hydrated from persisted storage on every request, so a cold
start (or a second worker) sees the same operator session.
"""

from typing import Iterator

import httpx
from fastapi import Depends

from cms_shared.api_client import ApiGateway
from cms_shared.errors import LoginRequired
from cms_shared.services import AuthService, ContentService
from cms_shared.session import SessionContext
from cms_shared.storage import ClientStorage


def get_session() -> SessionContext:
    return SessionContext.hydrate(ClientStorage())


def get_transport() -> httpx.BaseTransport | None:
    """Overridden in tests with an httpx.MockTransport."""
    return None


def get_gateway(
    session: SessionContext = Depends(get_session),
    transport: httpx.BaseTransport | None = Depends(get_transport),
) -> Iterator[ApiGateway]:
    gateway = ApiGateway(session, transport=transport)
    try:
        yield gateway
    finally:
        gateway.close()


def get_auth_service(gateway: ApiGateway = Depends(get_gateway)) -> AuthService:
    return AuthService(gateway)


def get_content_service(gateway: ApiGateway = Depends(get_gateway)) -> ContentService:
    return ContentService(gateway)


def require_session(session: SessionContext = Depends(get_session)) -> SessionContext:
    """Guard for every /dashboard route."""
    if not session.is_authenticated:
        raise LoginRequired()
    return session
