"""
Shared pytest fixtures.

Environment variables are set at module level, before any src/ imports, so
config.py reads the test values when fixtures are first evaluated.
"""

import os

# Must be set before any cms_shared.* imports.
# Use setdefault so externally-passed env vars (integration tests) take precedence.
os.environ.setdefault("ENV", "test")
os.environ.setdefault("AWS_ACCESS_KEY_ID", "testing")
os.environ.setdefault("AWS_SECRET_ACCESS_KEY", "testing")
os.environ.setdefault("AWS_SESSION_TOKEN", "testing")
os.environ.setdefault("AWS_REGION", "us-west-2")
os.environ.setdefault("DYNAMODB_STORAGE_TABLE", "admin-storage")
os.environ.setdefault("S3_BUCKET", "dignemi-content-assets")
os.environ.setdefault("API_URL", "http://api.test/v1")
os.environ.setdefault("AUTH_TOKEN_SECRET", "test-secret-32-chars-exactly-ok!")

import json
from datetime import datetime, timedelta, timezone

import boto3
import httpx
import pytest
from fastapi.testclient import TestClient
from jose import jwt
from moto import mock_aws

SECRET = "test-secret-32-chars-exactly-ok!"


# ── Token helper ────────────────────────────────────────────────────────────────

def make_token(
    sub: str | None = "user-1",
    email: str | None = "editor@example.com",
    role: str | None = "EDITOR",
    secret: str = SECRET,
    expired: bool = False,
) -> str:
    exp = datetime.now(timezone.utc) + (
        timedelta(seconds=-1) if expired else timedelta(hours=1)
    )
    claims = {"sub": sub, "email": email, "role": role, "exp": exp}
    return jwt.encode(
        {k: v for k, v in claims.items() if v is not None},
        secret,
        algorithm="HS256",
    )


# ── Fake content API ────────────────────────────────────────────────────────────

CATALOG = [
    {
        "id": "r-1",
        "title": "Camino hacia la Calma",
        "description": "Siete días para bajar el ritmo.",
        "topic": "ansiedad",
        "version": 1,
        "status": "published",
        "duration_days": 7,
    },
    {
        "id": "r-2",
        "title": "Dormir Mejor",
        "description": None,
        "topic": "sueno",
        "version": 2,
    },
]

ROUTE_DETAIL = {
    "id": "r-1",
    "type": "route",
    "title": "Camino hacia la Calma",
    "description": "Siete días para bajar el ritmo.",
    "topic": "ansiedad",
    "isPremium": True,
    "isPublished": False,
    "version": 3,
    "body": {
        "intro": "Una semana para reconocer y soltar la tensión.",
        "duration": "14 días",
        "difficulty": "intermedio",
        "estimatedDailyTime": "12 min",
        "benefits": ["Dormir mejor"],
        "requirements": ["Cuaderno"],
        "days": [
            {
                "day": 2,
                "title": "Respirar",
                "description": "Practicar respiración",
                "exerciseId": "act-9",
                "estimatedTime": "8 min",
                "objectives": [],
            },
            {
                "day": 1,
                "title": "Señales tempranas",
                "description": "Reconocer el estrés",
                "objectives": ["Nombrar tres señales", "Registrar el nivel de tensión"],
                "blocks": [
                    {"id": "b-1", "type": "lesson", "title": "Qué es el estrés", "estimated_minutes": 4},
                    {"id": "b-2", "type": "reflection", "title": "Tu semana", "estimated_minutes": 6},
                ],
            },
        ],
    },
}


class FakeApi:
    """Records every request and answers from a (method, path) table."""

    def __init__(self):
        self.calls: list[httpx.Request] = []
        self.offline = False
        self.responses: dict[tuple[str, str], tuple[int, object]] = {
            ("POST", "/auth/login"): (200, {}),
            ("GET", "/auth/me"): (200, {"id": "user-1", "email": "editor@example.com", "role": "EDITOR"}),
            ("GET", "/content/catalog"): (200, CATALOG),
            ("GET", "/content/routes/r-1"): (200, ROUTE_DETAIL),
            ("POST", "/content"): (201, {"id": "c-new"}),
            ("PATCH", "/content/r-1"): (200, {"id": "r-1"}),
        }
        self.transport = httpx.MockTransport(self.handle)

    def respond(self, method: str, path: str, status_code: int, body: object = None) -> None:
        self.responses[(method, path)] = (status_code, body)

    def handle(self, request: httpx.Request) -> httpx.Response:
        self.calls.append(request)
        if self.offline:
            raise httpx.ConnectError("connection refused", request=request)
        path = request.url.path.removeprefix("/v1")
        status_code, body = self.responses.get((request.method, path), (404, {"message": "Not found"}))
        if body is None:
            return httpx.Response(status_code)
        return httpx.Response(status_code, json=body)

    def calls_to(self, method: str, path: str) -> list[httpx.Request]:
        return [
            c for c in self.calls
            if c.method == method and c.url.path.removeprefix("/v1") == path
        ]

    @staticmethod
    def body(request: httpx.Request) -> dict:
        return json.loads(request.content)


# ── AWS fixtures ────────────────────────────────────────────────────────────────

@pytest.fixture()
def aws_env():
    """Start moto mock, create the storage table + S3 bucket, yield, teardown."""
    with mock_aws():
        ddb = boto3.client("dynamodb", region_name="us-west-2")
        ddb.create_table(
            TableName="admin-storage",
            KeySchema=[
                {"AttributeName": "PK", "KeyType": "HASH"},
                {"AttributeName": "SK", "KeyType": "RANGE"},
            ],
            AttributeDefinitions=[
                {"AttributeName": "PK", "AttributeType": "S"},
                {"AttributeName": "SK", "AttributeType": "S"},
            ],
            BillingMode="PAY_PER_REQUEST",
        )

        s3 = boto3.client("s3", region_name="us-west-2")
        s3.create_bucket(
            Bucket="dignemi-content-assets",
            CreateBucketConfiguration={"LocationConstraint": "us-west-2"},
        )

        yield


@pytest.fixture()
def storage(aws_env):
    from cms_shared.storage import ClientStorage  # noqa: PLC0415

    return ClientStorage()


@pytest.fixture()
def fake_api():
    return FakeApi()


@pytest.fixture()
def client(aws_env, fake_api):
    """FastAPI TestClient with mocked AWS and a fake content API. Import app inside
    fixture so boto3 clients are always created inside the mock_aws context."""
    from cms_admin.deps import get_transport  # noqa: PLC0415
    from cms_admin.drafts import drafts  # noqa: PLC0415
    from cms_admin.handler import app  # noqa: PLC0415

    app.dependency_overrides[get_transport] = lambda: fake_api.transport
    yield TestClient(app, raise_server_exceptions=True, follow_redirects=False)
    app.dependency_overrides.clear()
    drafts.clear()


@pytest.fixture()
def logged_in(client):
    r = client.post("/verify", json={"token": make_token()})
    assert r.status_code == 200
    return client
