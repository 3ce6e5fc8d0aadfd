"""Route catalog and the quick-create form: /dashboard/routes.

The quick-create form posts the legacy flat `steps[]` body. Day/block editing
goes through the builder drafts in `cms_admin.routes.builder`.
"""

import logging

from fastapi import APIRouter, Body, Depends, Query, status

from cms_admin.deps import get_content_service, require_session
from cms_admin.drafts import submit_guard
from cms_shared.listing import catalog_view
from cms_shared.payloads import route_steps_payload
from cms_shared.schemas import RouteStepsForm, require_valid
from cms_shared.services import ContentService
from cms_shared.session import SessionContext

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("/dashboard/routes")
def list_routes(
    search: str = Query(default=""),
    _: SessionContext = Depends(require_session),
    content: ContentService = Depends(get_content_service),
):
    return catalog_view(content.get_routes(), search)


@router.post("/dashboard/routes", status_code=status.HTTP_201_CREATED)
def create_route(
    data: dict = Body(default_factory=dict),
    _: SessionContext = Depends(require_session),
    content: ContentService = Depends(get_content_service),
):
    form = require_valid(RouteStepsForm, data)
    payload = route_steps_payload(form)

    with submit_guard.pending("route:new"):
        created = content.create_content(payload)

    logger.info("Created route %r with %d steps", form.title, len(form.steps))
    return {"id": created.get("id"), "message": "Ruta creada", "redirect": "/dashboard/routes"}


@router.get("/dashboard/routes/{content_id}")
def get_route(
    content_id: str,
    _: SessionContext = Depends(require_session),
    content: ContentService = Depends(get_content_service),
):
    return content.get_content_by_id(content_id).model_dump(exclude_none=True)
