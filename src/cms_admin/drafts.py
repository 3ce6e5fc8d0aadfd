"""
In-memory route drafts and the single in-flight save guard.

Drafts live only in this process: a restart or an expired draft loses the
unsaved tree, exactly like reloading the editor page.
"""

import logging
import threading
import time
import uuid
from contextlib import contextmanager
from dataclasses import dataclass, field
from typing import Callable, Iterator, Optional

from fastapi import HTTPException, status

from cms_shared.builder import RouteBuilder
from cms_shared.config import DRAFT_TTL_SECONDS, MAX_DRAFTS
from cms_shared.errors import SaveInProgress

logger = logging.getLogger(__name__)

DEFAULT_METADATA = {
    "status": "draft",
    "level": "basic",
    "paywall": "free",
    "duration_days": 7,
    "estimated_daily_minutes": 10,
    "locale": "es-LATAM",
    "version": 1,
}


@dataclass
class Draft:
    id: str
    builder: RouteBuilder
    metadata: dict = field(default_factory=lambda: dict(DEFAULT_METADATA))
    content_id: Optional[str] = None   # set when editing stored content
    stored_body: dict = field(default_factory=dict)   # body as loaded, merged back on save
    touched_at: float = 0.0
    lock: threading.RLock = field(default_factory=threading.RLock, repr=False, compare=False)


class DraftStore:
    """
    Drafts keyed by id. Idle drafts expire after `ttl_seconds`; past `max_drafts`
    the least recently touched ones are evicted when a new draft is opened.
    """

    def __init__(
        self,
        ttl_seconds: float = DRAFT_TTL_SECONDS,
        max_drafts: int = MAX_DRAFTS,
        clock: Callable[[], float] = time.monotonic,
    ):
        self.ttl_seconds = ttl_seconds
        self.max_drafts = max_drafts
        self._clock = clock
        self._lock = threading.Lock()
        self._drafts: dict[str, Draft] = {}

    def __len__(self) -> int:
        return len(self._drafts)

    def _purge(self, now: float) -> None:
        expired = [d.id for d in self._drafts.values() if now - d.touched_at > self.ttl_seconds]
        for draft_id in expired:
            del self._drafts[draft_id]
        overflow = len(self._drafts) - self.max_drafts + 1
        if overflow > 0:
            oldest = sorted(self._drafts.values(), key=lambda d: d.touched_at)[:overflow]
            for draft in oldest:
                del self._drafts[draft.id]
            expired.extend(d.id for d in oldest)
        if expired:
            logger.info("Dropped %d stale drafts", len(expired))

    def create(
        self,
        builder: Optional[RouteBuilder] = None,
        metadata: Optional[dict] = None,
        content_id: Optional[str] = None,
        stored_body: Optional[dict] = None,
    ) -> Draft:
        with self._lock:
            now = self._clock()
            self._purge(now)
            draft = Draft(
                id=f"draft-{uuid.uuid4().hex[:12]}",
                builder=builder or RouteBuilder(),
                metadata={**DEFAULT_METADATA, **(metadata or {})},
                content_id=content_id,
                stored_body=dict(stored_body or {}),
                touched_at=now,
            )
            self._drafts[draft.id] = draft
        return draft

    def get_or_404(self, draft_id: str) -> Draft:
        with self._lock:
            now = self._clock()
            draft = self._drafts.get(draft_id)
            if draft is not None and now - draft.touched_at > self.ttl_seconds:
                del self._drafts[draft_id]
                draft = None
            if draft is None:
                raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Draft not found")
            draft.touched_at = now
        return draft

    @contextmanager
    def editing(self, draft_id: str) -> Iterator[Draft]:
        """Yield the draft holding its lock, so concurrent edits apply one at a time."""
        draft = self.get_or_404(draft_id)
        with draft.lock:
            yield draft

    def discard(self, draft_id: str) -> None:
        with self._lock:
            self._drafts.pop(draft_id, None)

    def clear(self) -> None:
        with self._lock:
            self._drafts.clear()


class SubmitGuard:
    """At most one pending save per key; a second submit while pending is rejected."""

    def __init__(self):
        self._lock = threading.Lock()
        self._pending: set[str] = set()

    def is_pending(self, key: str) -> bool:
        with self._lock:
            return key in self._pending

    @contextmanager
    def pending(self, key: str) -> Iterator[None]:
        with self._lock:
            if key in self._pending:
                raise SaveInProgress(key)
            self._pending.add(key)
        try:
            yield
        finally:
            with self._lock:
                self._pending.discard(key)


drafts = DraftStore()
submit_guard = SubmitGuard()
