"""
In-memory route builder: route → days → blocks, plus one active-day pointer.

Day numbers are never stored. They are derived from position (index + 1), so
adding or removing days cannot leave gaps or duplicates.

Every operation is synchronous and local. Missing ids or indices are no-ops;
nothing is persisted until the draft is explicitly saved.
"""

import re
import uuid
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict

from cms_shared.dnd import DragEndEvent, array_move
from cms_shared.models import BlockType, RouteBlockContent, RouteDayContent

DEFAULT_FIRST_DAY_TITLE = "Introducción"
DEFAULT_BLOCK_DURATION = 5

DEFAULT_BLOCK_TITLES: dict[str, str] = {
    "lesson": "Nueva Lección",
    "activity": "Nuevo Ejercicio",
    "reflection": "Nueva Reflexión",
    "checklist": "Nuevo Checklist",
}

BLOCK_FIELDS = {"type", "title", "duration", "content", "activity_ref_id"}
DAY_FIELDS = {"title", "learning_objective"}


def _new_id(prefix: str) -> str:
    return f"{prefix}-{uuid.uuid4().hex[:12]}"


class BuilderBlock(BaseModel):
    model_config = ConfigDict(validate_assignment=True)

    id: str
    type: BlockType
    title: str
    duration: int = DEFAULT_BLOCK_DURATION   # minutes
    content: Optional[str] = None
    activity_ref_id: Optional[str] = None


class BuilderDay(BaseModel):
    model_config = ConfigDict(validate_assignment=True)

    id: str
    title: str
    learning_objective: str = ""
    objectives: Optional[list[str]] = None   # stored list; None derives it from learning_objective
    blocks: list[BuilderBlock] = []


def calculate_total_minutes(day: BuilderDay) -> int:
    return sum(block.duration for block in day.blocks)


class RouteBuilder:
    def __init__(self, days: Optional[list[BuilderDay]] = None):
        self.days: list[BuilderDay] = days or [
            BuilderDay(id=_new_id("day"), title=DEFAULT_FIRST_DAY_TITLE)
        ]
        self.active_day_index = 0

    # ── Days ──────────────────────────────────────────────────────────────────

    @property
    def active_day(self) -> BuilderDay:
        return self.days[self.active_day_index]

    @staticmethod
    def day_number(index: int) -> int:
        return index + 1

    def numbered_days(self) -> list[tuple[int, BuilderDay]]:
        return [(self.day_number(i), day) for i, day in enumerate(self.days)]

    def add_day(self) -> BuilderDay:
        number = len(self.days) + 1
        day = BuilderDay(id=_new_id("day"), title=f"Día {number}")
        self.days.append(day)
        self.active_day_index = len(self.days) - 1
        return day

    def remove_day(self, index: int) -> bool:
        """Remove a day. The last remaining day can never be removed."""
        if len(self.days) <= 1 or not 0 <= index < len(self.days):
            return False
        del self.days[index]
        if index <= self.active_day_index:
            self.active_day_index = max(self.active_day_index - 1, 0)
        return True

    def select_day(self, index: int) -> bool:
        if not 0 <= index < len(self.days):
            return False
        self.active_day_index = index
        return True

    def update_day(self, field: str, value: Any) -> None:
        if field not in DAY_FIELDS:
            raise ValueError(f"Unknown day field: {field!r}")
        setattr(self.active_day, field, value)

    # ── Blocks (always on the active day) ─────────────────────────────────────

    def _find_block(self, block_id: str) -> Optional[BuilderBlock]:
        for block in self.active_day.blocks:
            if block.id == block_id:
                return block
        return None

    def add_block(self, block_type: BlockType) -> BuilderBlock:
        block = BuilderBlock(
            id=_new_id("blk"),
            type=block_type,
            title=DEFAULT_BLOCK_TITLES[block_type],
        )
        self.active_day.blocks = [*self.active_day.blocks, block]
        return block

    def update_block(self, block_id: str, field: str, value: Any) -> bool:
        if field not in BLOCK_FIELDS:
            raise ValueError(f"Unknown block field: {field!r}")
        block = self._find_block(block_id)
        if block is None:
            return False
        setattr(block, field, value)
        return True

    def remove_block(self, block_id: str) -> bool:
        blocks = self.active_day.blocks
        kept = [b for b in blocks if b.id != block_id]
        self.active_day.blocks = kept
        return len(kept) != len(blocks)

    def reorder_blocks(self, active_id: str, over_id: str) -> bool:
        """Move the dragged block to the drop target's position."""
        if active_id == over_id:
            return False
        ids = [b.id for b in self.active_day.blocks]
        if active_id not in ids or over_id not in ids:
            return False
        self.active_day.blocks = array_move(
            self.active_day.blocks, ids.index(active_id), ids.index(over_id)
        )
        return True

    def move_block(self, block_id: str, offset: int) -> bool:
        """Keyboard reordering: move a block up (<0) or down (>0) by `offset` slots."""
        ids = [b.id for b in self.active_day.blocks]
        if block_id not in ids:
            return False
        old_index = ids.index(block_id)
        new_index = min(max(old_index + offset, 0), len(ids) - 1)
        if new_index == old_index:
            return False
        return self.reorder_blocks(block_id, ids[new_index])

    def handle_drag_end(self, event: Optional[DragEndEvent]) -> bool:
        if event is None or event.over_id is None:
            return False
        return self.reorder_blocks(event.active_id, event.over_id)

    # ── Serialization ─────────────────────────────────────────────────────────

    def snapshot(self) -> dict:
        return {
            "active_day_index": self.active_day_index,
            "days": [
                {
                    "id": day.id,
                    "day_number": number,
                    "title": day.title,
                    "learning_objective": day.learning_objective,
                    "total_minutes": calculate_total_minutes(day),
                    "blocks": [b.model_dump() for b in day.blocks],
                }
                for number, day in self.numbered_days()
            ],
        }

    def to_form_days(self) -> list[dict]:
        return [day.model_dump(exclude={"id"}) for day in self.days]

    def to_days_content(self) -> list[RouteDayContent]:
        days: list[RouteDayContent] = []
        for number, day in self.numbered_days():
            activity_refs = [
                b.activity_ref_id for b in day.blocks
                if b.type == "activity" and b.activity_ref_id
            ]
            days.append(
                RouteDayContent(
                    day=number,
                    title=day.title,
                    description=day.learning_objective,
                    exerciseId=activity_refs[0] if activity_refs else "",
                    estimatedTime=f"{calculate_total_minutes(day)} min",
                    objectives=_objectives(day),
                    blocks=[
                        RouteBlockContent(
                            id=b.id,
                            type=b.type,
                            title=b.title,
                            estimated_minutes=b.duration,
                            body=b.content,
                            activity_ref_id=b.activity_ref_id,
                        )
                        for b in day.blocks
                    ],
                )
            )
        return days

    @classmethod
    def from_content(cls, body: dict) -> "RouteBuilder":
        """Hydrate a builder from a stored route body (`days[]`, ordered by `day`)."""
        raw_days = sorted(
            (d for d in body.get("days") or [] if isinstance(d, dict)),
            key=lambda d: d.get("day") or 0,
        )
        days = [_day_from_content(raw) for raw in raw_days]
        return cls(days or None)


_MINUTES = re.compile(r"\d+")


def _objectives(day: BuilderDay) -> list[str]:
    if day.objectives is not None:
        return day.objectives
    return [day.learning_objective] if day.learning_objective else []


def _day_from_content(raw: dict) -> BuilderDay:
    # stored JSON may carry explicit nulls; they fall back like missing keys
    seen: set[str] = set()
    blocks: list[BuilderBlock] = []
    for raw_block in raw.get("blocks") or []:
        if not isinstance(raw_block, dict):
            continue
        block_id = raw_block.get("id")
        if not block_id or block_id in seen:
            block_id = _new_id("blk")
        seen.add(block_id)
        minutes = raw_block.get("estimated_minutes")
        blocks.append(
            BuilderBlock(
                id=block_id,
                type=raw_block.get("type") or "lesson",
                title=raw_block.get("title") or "",
                duration=DEFAULT_BLOCK_DURATION if minutes is None else minutes,
                content=raw_block.get("body"),
                activity_ref_id=raw_block.get("activity_ref_id"),
            )
        )

    # Days stored before blocks existed only carry an exercise reference
    if not blocks and raw.get("exerciseId"):
        match = _MINUTES.search(raw.get("estimatedTime") or "")
        blocks.append(
            BuilderBlock(
                id=_new_id("blk"),
                type="activity",
                title=raw.get("title") or "",
                duration=int(match.group()) if match else DEFAULT_BLOCK_DURATION,
                activity_ref_id=raw["exerciseId"],
            )
        )

    objectives = raw.get("objectives")
    if isinstance(objectives, list):
        objectives = [o for o in objectives if isinstance(o, str)]
    else:
        objectives = None
    return BuilderDay(
        id=_new_id("day"),
        title=raw.get("title") or "",
        learning_objective=raw.get("description") or "",
        objectives=objectives,
        blocks=blocks,
    )
