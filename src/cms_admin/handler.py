"""
Admin panel entry point.

Local dev:
    PYTHONPATH=src uv run uvicorn cms_admin.handler:app --reload --port 8001

Lambda handler:
    cms_admin.handler.handler
"""

import logging

from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse, RedirectResponse
from mangum import Mangum

from cms_admin.routes import activities, auth, builder, dashboard, routes, upload
from cms_shared.config import LOGIN_PATH
from cms_shared.errors import (
    ApiError,
    AuthorizationExpired,
    FormValidationError,
    LoginRequired,
    NetworkError,
    SaveInProgress,
    TokenDecodeError,
)

logging.basicConfig(level=logging.INFO)

app = FastAPI(
    title="Dignemi Admin API",
    description="Content admin for routes, activities and catalogs. Every /dashboard route requires a session.",
    version="0.1.0",
    docs_url="/docs",
    redoc_url="/redoc",
)

app.include_router(auth.router)
app.include_router(routes.router)
app.include_router(builder.router)
app.include_router(activities.router)
app.include_router(upload.router)
# Last: its /dashboard/{section} catch-all must not shadow the routers above
app.include_router(dashboard.router)


# ── Error boundary ─────────────────────────────────────────────────────────────

def _to_login(request: Request):
    if request.url.path.startswith(LOGIN_PATH):
        return JSONResponse(
            status_code=status.HTTP_401_UNAUTHORIZED,
            content={"alert": "Sesión expirada o inválida"},
        )
    return RedirectResponse(LOGIN_PATH, status_code=status.HTTP_303_SEE_OTHER)


@app.exception_handler(AuthorizationExpired)
def authorization_expired(request: Request, exc: AuthorizationExpired):
    return _to_login(request)


@app.exception_handler(LoginRequired)
def login_required(request: Request, exc: LoginRequired):
    return _to_login(request)


@app.exception_handler(FormValidationError)
def form_invalid(request: Request, exc: FormValidationError):
    return JSONResponse(
        status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
        content={"errors": exc.errors},
    )


@app.exception_handler(NetworkError)
def network_error(request: Request, exc: NetworkError):
    return JSONResponse(status_code=status.HTTP_502_BAD_GATEWAY, content={"alert": exc.message})


@app.exception_handler(ApiError)
def api_error(request: Request, exc: ApiError):
    return JSONResponse(status_code=exc.status_code, content={"alert": exc.message})


@app.exception_handler(TokenDecodeError)
def token_decode_error(request: Request, exc: TokenDecodeError):
    return JSONResponse(status_code=status.HTTP_400_BAD_REQUEST, content={"alert": exc.reason})


@app.exception_handler(SaveInProgress)
def save_in_progress(request: Request, exc: SaveInProgress):
    return JSONResponse(status_code=status.HTTP_409_CONFLICT, content={"alert": "Guardando..."})


@app.get("/health", include_in_schema=False)
def health():
    return {"status": "ok"}


# Mangum adapts the FastAPI ASGI app for AWS Lambda + API Gateway (HTTP API).
handler = Mangum(app, lifespan="off")
