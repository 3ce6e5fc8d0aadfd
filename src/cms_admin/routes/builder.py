"""Route builder drafts: /dashboard/builder.

A draft is the editor's working copy: form-bound metadata plus the
days[].blocks[] tree. Every mutation answers with the full draft state and a
fresh preview, so the client re-renders from one source of truth.

    POST   /dashboard/builder                     new draft (or ?content_id= to edit)
    GET    /dashboard/builder/{draft}
    PUT    /dashboard/builder/{draft}/metadata
    POST   /dashboard/builder/{draft}/days
    DELETE /dashboard/builder/{draft}/days/{index}
    PUT    /dashboard/builder/{draft}/days/active
    PATCH  /dashboard/builder/{draft}/days/active
    POST   /dashboard/builder/{draft}/blocks
    PATCH  /dashboard/builder/{draft}/blocks/{block_id}
    DELETE /dashboard/builder/{draft}/blocks/{block_id}
    POST   /dashboard/builder/{draft}/reorder
    POST   /dashboard/builder/{draft}/blocks/{block_id}/move
    GET    /dashboard/builder/{draft}/preview
    POST   /dashboard/builder/{draft}/save
    DELETE /dashboard/builder/{draft}
"""

import logging
import re
from typing import Optional

from fastapi import APIRouter, Body, Depends, Query, status
from pydantic import ValidationError

from cms_admin.deps import get_content_service, require_session
from cms_admin.drafts import Draft, drafts, submit_guard
from cms_shared.builder import RouteBuilder
from cms_shared.errors import ApiError, FormValidationError
from cms_shared.models import (
    BlockCreate,
    BlockFieldUpdate,
    ContentDetail,
    DayFieldUpdate,
    DaySelect,
    MoveRequest,
    ReorderRequest,
)
from cms_shared.payloads import DIFFICULTY_LABELS, route_draft_payload, route_update_payload
from cms_shared.preview import preview_route_day, render_phone
from cms_shared.schemas import RouteDraftForm, collect_errors, require_valid, slugify, validate_fields
from cms_shared.services import ContentService
from cms_shared.session import SessionContext

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/dashboard/builder")

METADATA_FIELDS = set(RouteDraftForm.model_fields) - {"days"}
_LEVELS = {label: level for level, label in DIFFICULTY_LABELS.items()}
_NUMBER = re.compile(r"\d+")


# ── Helpers ────────────────────────────────────────────────────────────────────

def _state(draft: Draft, changed: Optional[bool] = None) -> dict:
    state = {
        "draft_id": draft.id,
        "content_id": draft.content_id,
        "metadata": draft.metadata,
        "builder": draft.builder.snapshot(),
        "preview": preview_route_day(draft.builder, draft.metadata).model_dump(),
        "saving": submit_guard.is_pending(draft.id),
    }
    if changed is not None:
        state["changed"] = changed
    return state


def _first_number(text) -> Optional[int]:
    match = _NUMBER.search(str(text or ""))
    return int(match.group()) if match else None


def _metadata_from_content(detail: ContentDetail) -> dict:
    body = detail.body or {}
    metadata = {
        "title": detail.title,
        "slug": slugify(detail.title),
        "topic": detail.topic or "",
        "summary": detail.description or body.get("intro") or "",
        "paywall": "pro" if detail.isPremium else "free",
        "status": "published" if detail.isPublished else "draft",
        "version": detail.version or 1,
        "disclaimer_id": detail.disclaimerId,
        "locale": detail.locale or "es-LATAM",
        "level": _LEVELS.get(body.get("difficulty"), "basic"),
        "cover_image": body.get("coverImage") or None,
    }
    duration = _first_number(body.get("duration"))
    if duration in (7, 14, 21):
        metadata["duration_days"] = duration
    daily = _first_number(body.get("estimatedDailyTime"))
    if daily:
        metadata["estimated_daily_minutes"] = daily
    return {k: v for k, v in metadata.items() if v is not None}


# ── Draft lifecycle ────────────────────────────────────────────────────────────

@router.post("", status_code=status.HTTP_201_CREATED)
def open_draft(
    content_id: Optional[str] = Query(default=None),
    _: SessionContext = Depends(require_session),
    content: ContentService = Depends(get_content_service),
):
    if content_id is None:
        return _state(drafts.create())

    detail = content.get_content_by_id(content_id)
    if detail.type != "route":
        raise ApiError(status.HTTP_400_BAD_REQUEST, "El contenido no es una ruta")
    body = detail.body or {}
    try:
        builder = RouteBuilder.from_content(body)
    except ValidationError as exc:
        logger.warning("Route %s has an unreadable body: %s", detail.id, exc)
        raise ApiError(status.HTTP_502_BAD_GATEWAY, "La ruta guardada tiene un formato inválido")
    draft = drafts.create(
        builder=builder,
        metadata=_metadata_from_content(detail),
        content_id=detail.id,
        stored_body=body,
    )
    return _state(draft)


@router.get("/{draft_id}")
def get_draft(draft_id: str, _: SessionContext = Depends(require_session)):
    with drafts.editing(draft_id) as draft:
        return _state(draft)


@router.delete("/{draft_id}")
def discard_draft(draft_id: str, _: SessionContext = Depends(require_session)):
    drafts.get_or_404(draft_id)
    drafts.discard(draft_id)
    return {"draft_id": draft_id, "message": "Borrador descartado"}


@router.put("/{draft_id}/metadata")
def update_metadata(
    draft_id: str,
    data: dict = Body(default_factory=dict),
    _: SessionContext = Depends(require_session),
):
    with drafts.editing(draft_id) as draft:
        draft.metadata.update(validate_fields(RouteDraftForm, data, METADATA_FIELDS))
        return _state(draft)


# ── Days ───────────────────────────────────────────────────────────────────────

@router.post("/{draft_id}/days")
def add_day(draft_id: str, _: SessionContext = Depends(require_session)):
    with drafts.editing(draft_id) as draft:
        draft.builder.add_day()
        return _state(draft, changed=True)


@router.delete("/{draft_id}/days/{index}")
def remove_day(draft_id: str, index: int, _: SessionContext = Depends(require_session)):
    with drafts.editing(draft_id) as draft:
        return _state(draft, changed=draft.builder.remove_day(index))


@router.put("/{draft_id}/days/active")
def select_day(draft_id: str, req: DaySelect, _: SessionContext = Depends(require_session)):
    with drafts.editing(draft_id) as draft:
        return _state(draft, changed=draft.builder.select_day(req.index))


@router.patch("/{draft_id}/days/active")
def update_active_day(
    draft_id: str,
    req: DayFieldUpdate,
    _: SessionContext = Depends(require_session),
):
    with drafts.editing(draft_id) as draft:
        draft.builder.update_day(req.field, req.value)
        return _state(draft, changed=True)


# ── Blocks ─────────────────────────────────────────────────────────────────────

@router.post("/{draft_id}/blocks")
def add_block(draft_id: str, req: BlockCreate, _: SessionContext = Depends(require_session)):
    with drafts.editing(draft_id) as draft:
        block = draft.builder.add_block(req.type)
        return {**_state(draft, changed=True), "block_id": block.id}


@router.patch("/{draft_id}/blocks/{block_id}")
def update_block(
    draft_id: str,
    block_id: str,
    req: BlockFieldUpdate,
    _: SessionContext = Depends(require_session),
):
    with drafts.editing(draft_id) as draft:
        try:
            changed = draft.builder.update_block(block_id, req.field, req.value)
        except ValidationError as exc:
            raise FormValidationError(collect_errors(exc, {}))
        return _state(draft, changed=changed)


@router.delete("/{draft_id}/blocks/{block_id}")
def remove_block(draft_id: str, block_id: str, _: SessionContext = Depends(require_session)):
    with drafts.editing(draft_id) as draft:
        return _state(draft, changed=draft.builder.remove_block(block_id))


@router.post("/{draft_id}/reorder")
def reorder_blocks(
    draft_id: str,
    req: ReorderRequest,
    _: SessionContext = Depends(require_session),
):
    with drafts.editing(draft_id) as draft:
        return _state(draft, changed=draft.builder.reorder_blocks(req.active_id, req.over_id))


@router.post("/{draft_id}/blocks/{block_id}/move")
def move_block(
    draft_id: str,
    block_id: str,
    req: MoveRequest,
    _: SessionContext = Depends(require_session),
):
    offset = -1 if req.direction == "up" else 1
    with drafts.editing(draft_id) as draft:
        return _state(draft, changed=draft.builder.move_block(block_id, offset))


# ── Preview / save ─────────────────────────────────────────────────────────────

@router.get("/{draft_id}/preview")
def preview(draft_id: str, _: SessionContext = Depends(require_session)):
    with drafts.editing(draft_id) as draft:
        screen = preview_route_day(draft.builder, draft.metadata)
    return {"preview": screen.model_dump(), "phone": render_phone(screen)}


@router.post("/{draft_id}/save")
def save_draft(
    draft_id: str,
    _: SessionContext = Depends(require_session),
    content: ContentService = Depends(get_content_service),
):
    draft = drafts.get_or_404(draft_id)

    with submit_guard.pending(draft.id):
        # payload is built from a consistent snapshot; the request runs unlocked
        with draft.lock:
            form = require_valid(
                RouteDraftForm,
                {**draft.metadata, "days": draft.builder.to_form_days()},
            )
            if draft.content_id:
                payload = route_update_payload(form, draft.builder, draft.stored_body)
            else:
                payload = route_draft_payload(form, draft.builder)

        if draft.content_id:
            content.update_content(draft.content_id, payload)
            content_id = draft.content_id
            message = "Ruta actualizada exitosamente"
        else:
            created = content.create_content(payload)
            content_id = created.get("id")
            message = "Ruta creada"

    drafts.discard(draft.id)
    logger.info("Saved route %r (%d days)", form.title, len(form.days))
    return {"id": content_id, "message": message, "redirect": "/dashboard/routes"}
