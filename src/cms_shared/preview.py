"""
Mobile preview projections.

Pure functions from editor state to a read-only screen description. They never
mutate the builder or the form values, and they always return a non-blank
screen: unset titles and bodies fall back to placeholders, an empty day
renders an explicit empty-state message.
"""

from typing import Any, Mapping, Optional

from pydantic import BaseModel

from cms_shared.builder import RouteBuilder, calculate_total_minutes

UNTITLED = "(Sin título)"
EMPTY_DAY_MESSAGE = "La vista previa aparecerá aquí cuando agregues contenido."
ACTIVITY_TITLE_PLACEHOLDER = "Título del Ejercicio"
ACTIVITY_INTRO_PLACEHOLDER = "Aquí aparecerá la introducción..."
ROUTE_TITLE_PLACEHOLDER = "Nueva Ruta"
CTA_LABEL = "Comenzar"

# Timeline accent per block type
BLOCK_TONES = {
    "activity": "purple",
    "reflection": "orange",
}
DEFAULT_TONE = "blue"


class TimelineCard(BaseModel):
    block_id: str
    badge: str
    title: str
    duration_label: str
    tone: str


class RoutePreview(BaseModel):
    route_title: str
    header_title: str
    subtitle: str
    total_minutes: int
    cards: list[TimelineCard]
    empty_state: Optional[str] = None


class ActivityPreview(BaseModel):
    cover_image: Optional[str] = None
    title: str
    difficulty: str
    duration_label: str
    intro: str
    timer_label: Optional[str] = None
    interactive_placeholder: Optional[str] = None
    cta: str = CTA_LABEL


def preview_route_day(
    builder: RouteBuilder,
    metadata: Optional[Mapping[str, Any]] = None,
) -> RoutePreview:
    day = builder.active_day
    number = builder.day_number(builder.active_day_index)
    total = calculate_total_minutes(day)

    cards = [
        TimelineCard(
            block_id=block.id,
            badge="Práctica" if block.type == "activity" else block.type,
            title=block.title or UNTITLED,
            duration_label=f"{block.duration} min",
            tone=BLOCK_TONES.get(block.type, DEFAULT_TONE),
        )
        for block in day.blocks
    ]

    return RoutePreview(
        route_title=(metadata or {}).get("title") or ROUTE_TITLE_PLACEHOLDER,
        header_title=day.title or UNTITLED,
        subtitle=f"Día {number} • {total} min",
        total_minutes=total,
        cards=cards,
        empty_state=None if cards else EMPTY_DAY_MESSAGE,
    )


def timer_label(inhale: Any, hold: Any, exhale: Any) -> str:
    return f"{inhale}s - {hold}s - {exhale}s"


def _text(value: Any, default: Optional[str] = None) -> Optional[str]:
    return default if value is None or value == "" else str(value)


def preview_activity(values: Mapping[str, Any]) -> ActivityPreview:
    """Project raw (possibly invalid) activity form values into the phone mockup."""
    activity_type = _text(values.get("type"), "breathing_timer")

    preview = ActivityPreview(
        cover_image=_text(values.get("cover_image")),
        title=_text(values.get("title"), ACTIVITY_TITLE_PLACEHOLDER),
        difficulty=_text(values.get("difficulty"), "basic"),
        duration_label=f"{values.get('duration_minutes', 5)} min",
        intro=_text(values.get("intro_text"), ACTIVITY_INTRO_PLACEHOLDER),
    )
    if activity_type == "breathing_timer":
        preview.timer_label = timer_label(
            values.get("breathing_inhale", 4),
            values.get("breathing_hold", 4),
            values.get("breathing_exhale", 4),
        )
    else:
        preview.interactive_placeholder = f"[Componente interactivo: {activity_type}]"
    return preview


def render_phone(preview: RoutePreview | ActivityPreview, width: int = 36) -> str:
    """Plain-text phone frame, handy for logs and the CLI."""
    inner = width - 4

    def row(text: str = "") -> str:
        return f"│ {text[:inner].ljust(inner)} │"

    lines = ["╭" + "─" * (width - 2) + "╮"]
    if isinstance(preview, RoutePreview):
        lines += [row(preview.header_title), row(preview.subtitle), row()]
        for card in preview.cards:
            lines += [
                row(f"[{card.badge.upper()}]"),
                row(card.title),
                row(card.duration_label),
                row(),
            ]
        if preview.empty_state:
            lines.append(row(preview.empty_state))
    else:
        lines += [
            row(preview.title),
            row(f"{preview.difficulty} · {preview.duration_label}"),
            row(),
            row(preview.intro),
            row(),
            row(preview.timer_label or preview.interactive_placeholder or ""),
            row(),
            row(f"[ {preview.cta} ]"),
        ]
    lines.append("╰" + "─" * (width - 2) + "╯")
    return "\n".join(lines)
