from typing import Annotated, Any, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field

ContentStatus = Literal["draft", "review", "published", "archived"]
PaywallType = Literal["free", "pro"]
Difficulty = Literal["basic", "intermediate", "advanced"]
Locale = Literal["es-LATAM", "pt-BR"]
Role = Literal["OWNER", "ADMIN", "EDITOR", "REVIEWER", "VIEWER"]

# Difficulty labels used by the content API bodies
BodyDifficulty = Literal["principiante", "intermedio", "avanzado"]

BlockType = Literal["lesson", "activity", "reflection", "checklist"]
ActivityType = Literal[
    "breathing_timer",
    "grounding",
    "checklist",
    "reflection",
    "psychoeducation",
    "habit_planner",
]
StepType = Literal[
    "reflection_exercise",
    "audio_meditation",
    "article_and_task",
    "journaling",
    "breathing_exercise",
    "video_lesson",
]
DurationDays = Literal[7, 14, 21]


class BaseEntity(BaseModel):
    model_config = ConfigDict(extra="ignore")

    id: str
    createdAt: Optional[str] = None
    updatedAt: Optional[str] = None


# ── Auth ──────────────────────────────────────────────────────────────────────

class User(BaseModel):
    id: str
    email: str
    role: Role
    name: Optional[str] = None


class SessionState(BaseModel):
    """Shape of the persisted session blob."""

    token: Optional[str] = None
    user: Optional[User] = None
    isAuthenticated: bool = False


# ── Catalogs ──────────────────────────────────────────────────────────────────

class Topic(BaseEntity):
    slug: str            # e.g. "ansiedad", "estres_laboral"
    display_name: str
    icon: Optional[str] = None
    active: bool = True


class Tag(BaseEntity):
    name: str
    type: Literal["trabajo", "familia", "rumiacion", "rutina_noche", "general"]
    active: bool = True


class Disclaimer(BaseEntity):
    title: str
    body: str
    scope: Literal["global", "cuestionarios", "rutas", "ejercicios", "ayuda"]
    version: int
    status: ContentStatus
    effective_date: str   # ISO date
    required: bool        # blocks usage until accepted


# ── Activities ────────────────────────────────────────────────────────────────

class ActivityStep(BaseModel):
    order: int
    text: str
    audio_url: Optional[str] = None


class BreathingConfig(BaseModel):
    inhale: int           # seconds
    hold_in: Optional[int] = None
    exhale: int
    hold_out: Optional[int] = None
    cycles: int


class ActivityInstructions(BaseModel):
    intro_text: str
    bullets: Optional[list[str]] = None
    timer_config: Optional[BreathingConfig] = None       # only for breathing_timer
    reflection_questions: Optional[list[str]] = None     # only for reflection


class Source(BaseModel):
    url: str
    citation: str


class Activity(BaseEntity):
    slug: str
    title: str
    topic_ids: list[str] = []
    type: ActivityType
    duration_minutes: int
    difficulty: Difficulty
    instructions: ActivityInstructions
    steps: Optional[list[ActivityStep]] = None
    contraindications_soft: Optional[str] = None
    disclaimer_id: Optional[str] = None
    assets: Optional[dict[str, str]] = None   # image_url / audio_url
    sources: Optional[list[Source]] = None
    paywall: PaywallType = "free"
    status: ContentStatus = "draft"
    version: int = 1


# ── Routes ────────────────────────────────────────────────────────────────────

class RouteListItem(BaseModel):
    """Row of GET /content/catalog."""

    model_config = ConfigDict(extra="allow")

    id: str
    title: str
    description: Optional[str] = None
    topic: str
    version: int = 1


class RouteBlock(BaseModel):
    id: str               # transient client id, unique within its day
    type: BlockType
    title: str
    estimated_minutes: int
    body: Optional[str] = None
    activity_ref_id: Optional[str] = None   # weak reference to an Activity
    disclaimer_id: Optional[str] = None


class RouteDay(BaseModel):
    day_number: int
    title: str
    learning_objective: str = ""
    blocks: list[RouteBlock] = []


class Route(BaseEntity):
    slug: str
    title: str
    topic_id: str
    summary: str = ""
    goal: Optional[str] = None
    duration_days: DurationDays = 7
    estimated_daily_minutes: int = 10
    level: Difficulty = "basic"
    cover_image: Optional[str] = None
    disclaimer_id: Optional[str] = None
    paywall: PaywallType = "free"
    status: ContentStatus = "draft"
    version: int = 1
    prerequisites: Optional[list[str]] = None
    safety_notes: Optional[str] = None
    days: list[RouteDay] = []


# ── Library / Help ────────────────────────────────────────────────────────────

class LibraryItem(BaseEntity):
    slug: str
    title: str
    topic_ids: list[str] = []
    reading_time_minutes: int
    content_type: Literal["article", "guide", "checklist", "faq"]
    body: str
    sources: list[Source] = []
    disclaimer_id: Optional[str] = None
    paywall: PaywallType = "free"
    status: ContentStatus = "draft"
    version: int = 1
    seo_meta: Optional[dict] = None


class EmergencyNumber(BaseModel):
    label: str            # "Policía", "Ambulancia"
    number: str


class OfficialLine(BaseModel):
    name: str
    phone: str
    hours: str            # free text: "24/7", "L-V 9-5"
    website: Optional[str] = None
    notes: Optional[str] = None


class HelpResource(BaseEntity):
    country_code: str     # ISO: "MX", "CO", "AR"
    locale: Locale
    emergency_numbers: list[EmergencyNumber] = []
    official_lines: list[OfficialLine] = []
    copy_header: str
    copy_body: str
    last_verified_at: str
    status: ContentStatus = "draft"
    version: int = 1


# ── Content API bodies ────────────────────────────────────────────────────────

class RouteBlockContent(BaseModel):
    id: str
    type: BlockType
    title: str
    estimated_minutes: int
    body: Optional[str] = None
    activity_ref_id: Optional[str] = None


class RouteDayContent(BaseModel):
    day: int
    title: str
    description: str = ""         # learning objective
    exerciseId: str = ""
    estimatedTime: str = ""
    objectives: list[str] = []
    blocks: list[RouteBlockContent] = []


class RouteBodyContent(BaseModel):
    """Canonical route body: days[].blocks[]."""

    intro: str
    duration: str = ""
    difficulty: BodyDifficulty = "principiante"
    estimatedDailyTime: str = ""
    coverImage: Optional[str] = None
    days: list[RouteDayContent]
    benefits: list[str] = []
    requirements: list[str] = []


class StepContent(BaseModel):
    instruction: Optional[str] = None
    extra_prompt: Optional[str] = None
    media_url: Optional[str] = None
    article: Optional[str] = None
    task: Optional[str] = None


class RouteStep(BaseModel):
    day: int
    title: str
    type: StepType
    content: StepContent = StepContent()


class RouteStepsBody(BaseModel):
    """Legacy flat route body: steps[]. Not convertible to days[]."""

    version: str = "1.0"
    intro: str
    steps: list[RouteStep]


class ExerciseStep(BaseModel):
    step: int
    title: str
    instruction: str
    duration: str
    imageUrl: Optional[str] = None
    hasTimer: Optional[bool] = None
    counterType: Optional[Literal["inhale", "hold", "exhale"]] = None
    repeatCycles: Optional[int] = None


class ExerciseBodyContent(BaseModel):
    introduction: str
    difficulty: BodyDifficulty = "principiante"
    duration: str
    audioUrl: Optional[str] = None
    videoUrl: Optional[str] = None
    thumbnailUrl: Optional[str] = None
    steps: list[ExerciseStep] = []
    tips: list[str] = []
    contraindications: list[str] = []
    expectedResults: str = ""


class ArticleSection(BaseModel):
    heading: str
    content: Optional[str] = None
    type: Literal["text", "list"] = "text"
    imageUrl: Optional[str] = None
    items: Optional[list[str]] = None


class ArticleBodyContent(BaseModel):
    coverImage: str
    author: str
    readingTime: str
    publishDate: str
    sections: list[ArticleSection] = []
    relatedExercises: list[str] = []
    tags: list[str] = []


# ── Content API payloads ──────────────────────────────────────────────────────

class _CreatePayloadBase(BaseModel):
    title: str
    description: Optional[str] = None
    topic: Optional[str] = None
    locale: Optional[Locale] = None
    isPremium: Optional[bool] = None
    isPublished: Optional[bool] = None
    version: Optional[int] = None
    sources: Optional[list[str]] = None


class CreateRoutePayload(_CreatePayloadBase):
    type: Literal["route"] = "route"
    body: Union[RouteBodyContent, RouteStepsBody]
    disclaimerId: Optional[str] = None


class CreateExercisePayload(_CreatePayloadBase):
    type: Literal["exercise"] = "exercise"
    body: ExerciseBodyContent


class CreateArticlePayload(_CreatePayloadBase):
    type: Literal["article"] = "article"
    body: ArticleBodyContent
    disclaimerId: Optional[str] = None


CreateContentPayload = Annotated[
    Union[CreateRoutePayload, CreateExercisePayload, CreateArticlePayload],
    Field(discriminator="type"),
]


class UpdateContentPayload(BaseModel):
    """PATCH /content/{id}: only the fields that are sent get modified."""

    title: Optional[str] = None
    description: Optional[str] = None
    topic: Optional[str] = None
    locale: Optional[Locale] = None
    isPremium: Optional[bool] = None
    isPublished: Optional[bool] = None
    version: Optional[int] = None
    disclaimerId: Optional[str] = None
    body: Optional[dict] = None     # partial of the type's body shape
    sources: Optional[list[str]] = None


class ContentDetail(BaseModel):
    """Response of GET /content/routes/{id}."""

    model_config = ConfigDict(extra="allow")

    id: str
    type: Literal["route", "exercise", "article"]
    title: str
    description: Optional[str] = None
    topic: Optional[str] = None
    locale: Optional[Locale] = None
    isPremium: Optional[bool] = None
    isPublished: Optional[bool] = None
    version: Optional[int] = None
    disclaimerId: Optional[str] = None
    body: Optional[dict] = None
    sources: Optional[list[str]] = None
    createdAt: Optional[str] = None
    updatedAt: Optional[str] = None


# ── Upload ─────────────────────────────────────────────────────────────────────

class UploadUrlResponse(BaseModel):
    url: str      # pre-signed S3 PUT URL (5 min expiry)
    s3Key: str    # full S3 object key, stored as cover_image
    key: str      # relative filename


# ── Builder requests ───────────────────────────────────────────────────────────

class BlockCreate(BaseModel):
    type: BlockType


class BlockFieldUpdate(BaseModel):
    field: Literal["type", "title", "duration", "content", "activity_ref_id"]
    value: Any = None


class DayFieldUpdate(BaseModel):
    field: Literal["title", "learning_objective"]
    value: str = ""


class DaySelect(BaseModel):
    index: int


class ReorderRequest(BaseModel):
    active_id: str
    over_id: str


class MoveRequest(BaseModel):
    direction: Literal["up", "down"]
