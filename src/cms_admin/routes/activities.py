"""Activity catalog and editor: table, live preview and create.

    GET  /dashboard/activities?search=   seeded catalog table
    POST /dashboard/activities/preview   raw form values → phone mockup
    POST /dashboard/activities           validate → POST /content (type=exercise)
"""

import logging

from fastapi import APIRouter, Body, Depends, Query, status

from cms_admin.deps import get_content_service, require_session
from cms_admin.drafts import submit_guard
from cms_shared.listing import SEED_ACTIVITIES, activity_catalog_view
from cms_shared.payloads import activity_payload
from cms_shared.preview import preview_activity, render_phone
from cms_shared.schemas import ActivityForm, require_valid
from cms_shared.services import ContentService
from cms_shared.session import SessionContext

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("/dashboard/activities")
def list_activities(
    search: str = Query(default=""),
    _: SessionContext = Depends(require_session),
):
    return activity_catalog_view(SEED_ACTIVITIES, search)


@router.post("/dashboard/activities/preview")
def activity_preview(
    data: dict = Body(default_factory=dict),
    _: SessionContext = Depends(require_session),
):
    screen = preview_activity(data)
    return {"preview": screen.model_dump(), "phone": render_phone(screen)}


@router.post("/dashboard/activities", status_code=status.HTTP_201_CREATED)
def create_activity(
    data: dict = Body(default_factory=dict),
    _: SessionContext = Depends(require_session),
    content: ContentService = Depends(get_content_service),
):
    form = require_valid(ActivityForm, data)

    with submit_guard.pending(f"activity:{form.slug}"):
        created = content.create_content(activity_payload(form))

    logger.info("Created activity %r (%s)", form.title, form.type)
    return {"id": created.get("id"), "message": "Actividad guardada", "redirect": "/dashboard/activities"}
