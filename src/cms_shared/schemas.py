"""
Form schemas for every editor in the panel.

Each form is a pydantic model carrying the field constraints; `validate_form`
runs a schema against raw form values and returns either the parsed model or
a mapping of dotted field paths to messages:

    {"days.1.title": "Título requerido", "sources.0": "Fuente no puede estar vacía"}

Paths use list indices, so the builder can focus the exact day/block that
failed. Messages are looked up by the path pattern with indices replaced by
`*` and fall back to pydantic's own message.
"""

import re
import unicodedata
from typing import Annotated, Any, ClassVar, Literal, Optional, Union, get_args

from pydantic import (
    AfterValidator,
    BaseModel,
    EmailStr,
    Field,
    HttpUrl,
    StringConstraints,
    TypeAdapter,
    ValidationError,
)

from cms_shared.errors import FormValidationError
from cms_shared.models import (
    ActivityType,
    BlockType,
    ContentStatus,
    Difficulty,
    DurationDays,
    Locale,
    PaywallType,
    StepType,
)

_url_adapter = TypeAdapter(HttpUrl)


def _url_or_empty(value: Optional[str]) -> Optional[str]:
    if not value:
        return value
    try:
        _url_adapter.validate_python(value)
    except ValidationError:
        raise ValueError("URL inválida") from None
    return value


UrlOrEmpty = Annotated[Optional[str], AfterValidator(_url_or_empty)]
Slug = Annotated[str, StringConstraints(min_length=3, pattern=r"^[a-z0-9-]+$")]
NonEmpty = Annotated[str, StringConstraints(strip_whitespace=True, min_length=1)]


# ── Auth ──────────────────────────────────────────────────────────────────────

class LoginForm(BaseModel):
    messages: ClassVar[dict[str, str]] = {"email": "Ingresa un correo válido"}

    email: EmailStr


class VerifyForm(BaseModel):
    messages: ClassVar[dict[str, str]] = {"token": "Pega el token del enlace mágico"}

    token: NonEmpty


# ── Route: legacy steps form ──────────────────────────────────────────────────

class StepContentForm(BaseModel):
    instruction: Optional[str] = None
    extra_prompt: Optional[str] = None
    media_url: UrlOrEmpty = None
    article: Optional[str] = None
    task: Optional[str] = None


class StepForm(BaseModel):
    day: int = Field(ge=1)
    title: Annotated[str, StringConstraints(min_length=3)]
    type: StepType
    content: StepContentForm = StepContentForm()


class RouteStepsForm(BaseModel):
    messages: ClassVar[dict[str, str]] = {
        "title": "El título debe tener al menos 5 caracteres",
        "topic": "Selecciona un tema",
        "intro": "La introducción debe tener al menos 10 caracteres",
        "sources": "Agrega al menos una fuente",
        "sources.*": "Fuente no puede estar vacía",
        "steps": "Agrega al menos un paso",
        "steps.*.title": "Título requerido",
        "steps.*.content.media_url": "URL inválida",
    }

    title: Annotated[str, StringConstraints(min_length=5)]
    topic: Annotated[str, StringConstraints(min_length=1)]
    intro: Annotated[str, StringConstraints(min_length=10)]
    version: str = "1.0"
    sources: list[NonEmpty] = Field(min_length=1)
    steps: list[StepForm] = Field(min_length=1)


# ── Route: builder (days[].blocks[]) ──────────────────────────────────────────

class BlockForm(BaseModel):
    id: str
    type: BlockType
    title: Annotated[str, StringConstraints(strip_whitespace=True, min_length=1)]
    duration: int = Field(ge=1)
    content: Optional[str] = None
    activity_ref_id: Optional[str] = None


class DayForm(BaseModel):
    title: Annotated[str, StringConstraints(strip_whitespace=True, min_length=1)]
    learning_objective: str = ""
    blocks: list[BlockForm] = []


class RouteDraftForm(BaseModel):
    messages: ClassVar[dict[str, str]] = {
        "title": "Título requerido",
        "slug": "Slug inválido (solo a-z, 0-9, -)",
        "topic": "Selecciona un tema",
        "duration_days": "La duración debe ser 7, 14 o 21 días",
        "estimated_daily_minutes": "Debe ser al menos 1 minuto",
        "cover_image": "URL inválida",
        "days": "Agrega al menos un día",
        "days.*.title": "Título requerido",
        "days.*.blocks.*.title": "Título del bloque requerido",
        "days.*.blocks.*.duration": "Duración mínima: 1 min",
    }

    title: Annotated[str, StringConstraints(min_length=5)]
    slug: Slug
    topic: Annotated[str, StringConstraints(min_length=1)]
    summary: Optional[str] = None
    duration_days: DurationDays = 7
    estimated_daily_minutes: int = Field(default=10, ge=1)
    level: Difficulty = "basic"
    cover_image: UrlOrEmpty = None
    disclaimer_id: Optional[str] = None
    paywall: PaywallType = "free"
    status: ContentStatus = "draft"
    locale: Locale = "es-LATAM"
    version: int = Field(default=1, ge=1)
    days: list[DayForm] = Field(min_length=1)


# ── Activity (tagged union on `type`) ─────────────────────────────────────────

class _ActivityFormBase(BaseModel):
    title: Annotated[str, StringConstraints(min_length=3)]
    slug: Slug
    duration_minutes: int = Field(ge=1)
    difficulty: Difficulty = "basic"
    status: ContentStatus = "draft"
    intro_text: Annotated[str, StringConstraints(min_length=10)]
    cover_image: UrlOrEmpty = None
    topic: Optional[str] = None


class BreathingTimerActivityForm(_ActivityFormBase):
    type: Literal["breathing_timer"]
    breathing_inhale: int = Field(ge=1)
    breathing_hold: int = Field(ge=0)
    breathing_exhale: int = Field(ge=1)
    breathing_cycles: int = Field(default=4, ge=1)


class GeneralActivityForm(_ActivityFormBase):
    type: Literal["grounding", "checklist", "reflection", "psychoeducation", "habit_planner"]


ActivityForm = Annotated[
    Union[BreathingTimerActivityForm, GeneralActivityForm],
    Field(discriminator="type"),
]

ACTIVITY_MESSAGES = {
    "type": "Selecciona un tipo de actividad",
    "title": "El título es muy corto",
    "slug": "Slug inválido (solo a-z, 0-9, -)",
    "duration_minutes": "La duración debe ser al menos 1 minuto",
    "intro_text": "La introducción debe ser descriptiva",
    "cover_image": "URL inválida",
    "breathing_inhale": "Indica los segundos de inhalación",
    "breathing_hold": "Indica los segundos de retención",
    "breathing_exhale": "Indica los segundos de exhalación",
    "breathing_cycles": "Indica al menos un ciclo",
}

ACTIVITY_TYPES: tuple[str, ...] = get_args(ActivityType)


# ── Upload ─────────────────────────────────────────────────────────────────────

class UploadUrlRequest(BaseModel):
    filename: str         # e.g. "cover.jpg"
    content_type: str     # e.g. "image/jpeg"
    entity_type: str      # "route" | "activity"
    entity_slug: str


# ── Validation entry point ────────────────────────────────────────────────────

_INDEX = re.compile(r"^\d+$")


def _path(loc: tuple, tags: tuple[str, ...]) -> str:
    parts = [str(p) for p in loc]
    # discriminated unions prefix the location with the tag value
    if parts and parts[0] in tags:
        parts = parts[1:]
    return ".".join(parts)


def _pattern(path: str) -> str:
    return ".".join("*" if _INDEX.match(p) else p for p in path.split("."))


def collect_errors(
    exc: ValidationError,
    messages: dict[str, str],
    tags: tuple[str, ...] = (),
) -> dict[str, str]:
    errors: dict[str, str] = {}
    for err in exc.errors():
        if err["type"] in ("union_tag_invalid", "union_tag_not_found"):
            path = "type"
        else:
            path = _path(tuple(err["loc"]), tags)
        if path in errors:
            continue
        errors[path] = messages.get(_pattern(path), err["msg"])
    return errors


def validate_form(schema: Any, data: dict) -> tuple[Any, dict[str, str]]:
    """Validate raw form values. Returns (model, {}) or (None, errors)."""
    if isinstance(schema, type) and issubclass(schema, BaseModel):
        try:
            return schema.model_validate(data), {}
        except ValidationError as exc:
            return None, collect_errors(exc, getattr(schema, "messages", {}))

    try:
        return TypeAdapter(schema).validate_python(data), {}
    except ValidationError as exc:
        return None, collect_errors(exc, ACTIVITY_MESSAGES, ACTIVITY_TYPES)


def validate_activity_form(data: dict):
    return validate_form(ActivityForm, data)


def require_valid(schema: Any, data: Any):
    """Like `validate_form`, but raises FormValidationError so no request goes out."""
    model, errors = validate_form(schema, data if data is not None else {})
    if errors:
        raise FormValidationError(errors)
    return model


def validate_fields(schema: type[BaseModel], data: dict, fields: set[str]) -> dict:
    """
    Type-check a partial update against the field types of `schema`.

    Only the keys in `fields` are kept. Length and pattern rules are left for
    the full validation on submit, so an unfinished draft can still be edited.
    Raises FormValidationError and applies nothing when any value has the
    wrong type.
    """
    values: dict = {}
    errors: dict[str, str] = {}
    for name, value in data.items():
        if name not in fields:
            continue
        try:
            values[name] = TypeAdapter(schema.model_fields[name].annotation).validate_python(value)
        except ValidationError as exc:
            errors[name] = schema.messages.get(name, exc.errors()[0]["msg"])
    if errors:
        raise FormValidationError(errors)
    return values


def slugify(text: str) -> str:
    normalized = unicodedata.normalize("NFKD", text or "")
    ascii_text = normalized.encode("ascii", "ignore").decode("ascii").lower()
    return re.sub(r"[^a-z0-9]+", "-", ascii_text).strip("-")
