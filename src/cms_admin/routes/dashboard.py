"""Dashboard home and the placeholder sections: GET /dashboard[/{section}]."""

from fastapi import APIRouter, Depends, HTTPException, status

from cms_admin.deps import get_content_service, require_session
from cms_shared.listing import MENU_ITEMS, UNDER_CONSTRUCTION_SECTIONS, under_construction
from cms_shared.services import ContentService
from cms_shared.session import SessionContext

router = APIRouter()


@router.get("/dashboard")
def home(
    session: SessionContext = Depends(require_session),
    content: ContentService = Depends(get_content_service),
):
    routes = content.get_routes()
    return {
        "user": session.user.model_dump() if session.user else None,
        "menu": MENU_ITEMS,
        "cards": [
            {"title": "Rutas activas", "value": len(routes), "hint": "En producción"},
            {"title": "Contenido en revisión", "value": None, "hint": "Requiere acción"},
            {"title": "Usuarios", "value": None, "hint": "Datos de solo lectura"},
        ],
    }


@router.get("/dashboard/{section}")
def placeholder_section(section: str, _: SessionContext = Depends(require_session)):
    title = UNDER_CONSTRUCTION_SECTIONS.get(section)
    if title is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Section not found")
    return under_construction(title)
