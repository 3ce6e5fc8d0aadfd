"""Table views: local search, status badges, editor links, dashboard menu."""

from typing import Iterable, Optional, TypeVar

from cms_shared.models import Activity, RouteListItem

T = TypeVar("T")

STATUS_LABELS = {
    "draft": "Borrador",
    "review": "En Revisión",
    "published": "Publicado",
    "archived": "Archivado",
}
STATUS_TONES = {
    "draft": "gray",
    "review": "yellow",
    "published": "green",
    "archived": "purple",
}

ROUTES_EMPTY_STATE = "No se encontraron rutas. Intenta crear una nueva."
ACTIVITIES_EMPTY_STATE = "No se encontraron actividades."
ACTIVITIES_SUMMARY = "Gestiona el catálogo de ejercicios y herramientas."
UNDER_CONSTRUCTION_MESSAGE = "Esta sección está en desarrollo y estará disponible pronto."

MENU_ITEMS = [
    {"name": "Dashboard", "href": "/dashboard"},
    {"name": "Rutas", "href": "/dashboard/routes"},
    {"name": "Actividades", "href": "/dashboard/activities"},
    {"name": "Biblioteca", "href": "/dashboard/library"},
    {"name": "Disclaimers", "href": "/dashboard/disclaimers"},
    {"name": "Ayuda Ahora", "href": "/dashboard/help"},
    {"name": "Temas y Tags", "href": "/dashboard/topics"},
    {"name": "Publicaciones", "href": "/dashboard/releases"},
    {"name": "Auditoría", "href": "/dashboard/audit"},
    {"name": "Configuración", "href": "/dashboard/settings"},
]

# Sections that only render a placeholder for now
UNDER_CONSTRUCTION_SECTIONS = {
    "library": "Biblioteca",
    "disclaimers": "Disclaimers",
    "help": "Ayuda Ahora",
    "topics": "Temas y Tags",
    "releases": "Publicaciones",
    "audit": "Auditoría",
    "settings": "Configuración",
}


def status_badge(status: Optional[str]) -> dict:
    status = status or "draft"
    return {
        "status": status,
        "label": STATUS_LABELS.get(status, status),
        "tone": STATUS_TONES.get(status, STATUS_TONES["draft"]),
    }


def filter_by_title(items: Iterable[T], term: str) -> list[T]:
    """Case-insensitive substring match on `title`; an empty term keeps everything."""
    needle = (term or "").strip().lower()
    return [
        item for item in items
        if needle in (getattr(item, "title", None) or "").lower()
    ]


def route_row(route: RouteListItem) -> dict:
    extra = route.model_extra or {}
    duration = extra.get("duration_days")
    return {
        "id": route.id,
        "title": route.title,
        "description": route.description,
        "level": extra.get("level"),
        "topic": route.topic or "General",
        "duration": f"{duration} días" if duration else None,
        "version": route.version,
        "badge": status_badge(extra.get("status")),
        "edit_href": f"/dashboard/routes/{route.id}",
    }


def catalog_view(routes: list[RouteListItem], search: str = "") -> dict:
    rows = [route_row(r) for r in filter_by_title(routes, search)]
    summary = (
        f"Mostrando {len(routes)} rutas del catálogo."
        if routes
        else "Gestiona las rutas de aprendizaje."
    )
    return {
        "summary": summary,
        "rows": rows,
        "empty_state": None if rows else ROUTES_EMPTY_STATE,
    }


# The content API has no activity listing yet; the table reads this seed catalog
SEED_ACTIVITIES = [
    Activity(
        id="1",
        title="Respiración Cuadrada",
        slug="respiracion-cuadrada",
        type="breathing_timer",
        topic_ids=["ansiedad"],
        duration_minutes=5,
        difficulty="basic",
        paywall="free",
        status="published",
        version=1,
        instructions={"intro_text": "Respira..."},
    ),
    Activity(
        id="2",
        title="Checklist de Sueño",
        slug="checklist-sueno",
        type="checklist",
        topic_ids=["sueno"],
        duration_minutes=3,
        difficulty="basic",
        paywall="pro",
        status="draft",
        version=1,
        instructions={"intro_text": "Antes de dormir..."},
    ),
]


def activity_row(activity: Activity) -> dict:
    return {
        "id": activity.id,
        "title": activity.title,
        "slug": activity.slug,
        "type": activity.type.replace("_", " "),
        "duration": f"{activity.duration_minutes} min",
        "paywall": activity.paywall,
        "badge": status_badge(activity.status),
        "edit_href": f"/dashboard/activities/{activity.id}",
    }


def activity_catalog_view(activities: list[Activity], search: str = "") -> dict:
    rows = [activity_row(a) for a in filter_by_title(activities, search)]
    return {
        "title": "Actividades",
        "summary": ACTIVITIES_SUMMARY,
        "new_href": "/dashboard/activities/new",
        "rows": rows,
        "empty_state": None if rows else ACTIVITIES_EMPTY_STATE,
    }


def under_construction(title: str, description: Optional[str] = None) -> dict:
    return {
        "title": title,
        "description": description or UNDER_CONSTRUCTION_MESSAGE,
        "back_href": "/dashboard",
    }
