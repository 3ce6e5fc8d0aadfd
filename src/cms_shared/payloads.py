"""Serialize validated forms (and builder state) into content API payloads."""

from typing import Optional

from cms_shared.builder import RouteBuilder
from cms_shared.models import (
    CreateExercisePayload,
    CreateRoutePayload,
    ExerciseBodyContent,
    ExerciseStep,
    RouteBodyContent,
    RouteStep,
    RouteStepsBody,
    UpdateContentPayload,
)
from cms_shared.schemas import BreathingTimerActivityForm, RouteDraftForm, RouteStepsForm

# Form difficulty → label used inside API bodies
DIFFICULTY_LABELS = {
    "basic": "principiante",
    "intermediate": "intermedio",
    "advanced": "avanzado",
}


def route_steps_payload(form: RouteStepsForm) -> CreateRoutePayload:
    """Legacy quick-create form: flat steps[] body."""
    return CreateRoutePayload(
        title=form.title,
        topic=form.topic,
        sources=[s for s in form.sources if s.strip()],
        body=RouteStepsBody(
            version=form.version,
            intro=form.intro,
            steps=[RouteStep.model_validate(step.model_dump()) for step in form.steps],
        ),
    )


def _route_body(form: RouteDraftForm, builder: RouteBuilder) -> RouteBodyContent:
    return RouteBodyContent(
        intro=form.summary or "",
        duration=f"{form.duration_days} días",
        difficulty=DIFFICULTY_LABELS[form.level],
        estimatedDailyTime=f"{form.estimated_daily_minutes} min",
        coverImage=form.cover_image or None,
        days=builder.to_days_content(),
    )


def route_draft_payload(form: RouteDraftForm, builder: RouteBuilder) -> CreateRoutePayload:
    return CreateRoutePayload(
        title=form.title,
        description=form.summary or None,
        topic=form.topic,
        locale=form.locale,
        isPremium=form.paywall == "pro",
        isPublished=form.status == "published",
        version=form.version,
        disclaimerId=form.disclaimer_id or None,
        body=_route_body(form, builder),
    )


# Body keys the route editor owns; everything else in a stored body is kept as is
EDITOR_BODY_FIELDS = {"duration", "difficulty", "estimatedDailyTime", "coverImage", "days"}


def route_update_payload(
    form: RouteDraftForm,
    builder: RouteBuilder,
    stored_body: Optional[dict] = None,
) -> UpdateContentPayload:
    """PATCH payload that merges the editor's body fields into the stored body."""
    edited = _route_body(form, builder).model_dump(
        mode="json", exclude_none=True, include=EDITOR_BODY_FIELDS
    )
    body = {**(stored_body or {}), **edited}
    if not form.cover_image:
        body.pop("coverImage", None)
    if not body.get("intro"):
        body["intro"] = form.summary or ""
    return UpdateContentPayload(
        title=form.title,
        description=form.summary or None,
        topic=form.topic,
        locale=form.locale,
        isPremium=form.paywall == "pro",
        isPublished=form.status == "published",
        version=form.version,
        disclaimerId=form.disclaimer_id or None,
        body=body,
    )


def _breathing_steps(form: BreathingTimerActivityForm) -> list[ExerciseStep]:
    phases = [
        ("inhale", "Inhala", form.breathing_inhale),
        ("hold", "Sostén", form.breathing_hold),
        ("exhale", "Exhala", form.breathing_exhale),
    ]
    steps: list[ExerciseStep] = []
    for counter, label, seconds in phases:
        if seconds <= 0:
            continue
        steps.append(
            ExerciseStep(
                step=len(steps) + 1,
                title=label,
                instruction=f"{label} durante {seconds} segundos",
                duration=f"{seconds}s",
                hasTimer=True,
                counterType=counter,
                repeatCycles=form.breathing_cycles,
            )
        )
    return steps


def activity_payload(form) -> CreateExercisePayload:
    steps = _breathing_steps(form) if isinstance(form, BreathingTimerActivityForm) else []
    return CreateExercisePayload(
        title=form.title,
        topic=form.topic or None,
        isPublished=form.status == "published",
        body=ExerciseBodyContent(
            introduction=form.intro_text,
            difficulty=DIFFICULTY_LABELS[form.difficulty],
            duration=f"{form.duration_minutes} min",
            thumbnailUrl=form.cover_image or None,
            steps=steps,
        ),
    )
