"""Magic-link login flow: POST /login, GET|POST /verify, POST /logout, GET /me.

Flow:
  1. Operator submits their email; the API emails a magic link.
  2. The link lands on GET /verify?token=<jwt> (or the token is pasted into
     POST /verify during development).
  3. The token is decoded strictly; on success the session is persisted and
     the operator is sent to /dashboard.
"""

from fastapi import APIRouter, Body, Depends, Query, status
from fastapi.responses import RedirectResponse

from cms_admin.deps import get_auth_service, get_session, require_session
from cms_shared.auth import decode_magic_link_token
from cms_shared.schemas import LoginForm, VerifyForm, require_valid
from cms_shared.services import AuthService
from cms_shared.session import SessionContext

router = APIRouter()

DASHBOARD_PATH = "/dashboard"


@router.post("/login")
def request_magic_link(
    data: dict = Body(default_factory=dict),
    auth: AuthService = Depends(get_auth_service),
):
    form = require_valid(LoginForm, data)
    auth.request_magic_link(form.email)
    return {
        "sent": True,
        "message": "Revisa tu correo y haz clic en el enlace mágico para entrar.",
    }


@router.get("/verify")
def verify_from_link(
    token: str = Query(...),
    session: SessionContext = Depends(get_session),
):
    user = decode_magic_link_token(token)
    session.login(token, user)
    return RedirectResponse(DASHBOARD_PATH, status_code=status.HTTP_303_SEE_OTHER)


@router.post("/verify")
def verify_manual(
    data: dict = Body(default_factory=dict),
    session: SessionContext = Depends(get_session),
):
    form = require_valid(VerifyForm, data)
    user = decode_magic_link_token(form.token)
    session.login(form.token, user)
    return {"user": user.model_dump(), "redirect": DASHBOARD_PATH}


@router.post("/logout")
def logout(session: SessionContext = Depends(get_session)):
    session.logout()
    return {"redirect": "/login"}


@router.get("/me")
def me(
    _: SessionContext = Depends(require_session),
    auth: AuthService = Depends(get_auth_service),
):
    return auth.get_me().model_dump()
