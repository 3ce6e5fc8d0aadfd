"""
Drag-and-drop adapter for sortable block lists.

Two input modalities produce the same `DragEndEvent(active_id, over_id)`:

  PointerSensor   press → move … → release. The drag only activates once the
                  pointer has travelled `activation_distance` px from the press
                  origin, so clicking into an input inside a card is not a drag.
  KeyboardSensor  Space/Enter picks the item up, arrow keys walk the drop
                  target through the list, Space/Enter drops, Escape cancels.

The builder applies the event with `array_move` semantics (move, not swap).
"""

import math
from dataclasses import dataclass
from typing import Optional, Sequence, TypeVar

T = TypeVar("T")

POINTER_ACTIVATION_DISTANCE = 8.0

PICK_UP_KEYS = {"Space", "Enter"}
DROP_KEYS = {"Space", "Enter"}
CANCEL_KEYS = {"Escape"}


def array_move(items: Sequence[T], from_index: int, to_index: int) -> list[T]:
    """Return a copy of `items` with one element moved; the ones in between shift by one."""
    moved = list(items)
    moved.insert(to_index, moved.pop(from_index))
    return moved


@dataclass(frozen=True)
class DragEndEvent:
    active_id: str
    over_id: Optional[str]


class PointerSensor:
    def __init__(self, activation_distance: float = POINTER_ACTIVATION_DISTANCE):
        self.activation_distance = activation_distance
        self._active_id: Optional[str] = None
        self._origin: tuple[float, float] = (0.0, 0.0)
        self.dragging = False

    def press(self, item_id: str, x: float, y: float) -> None:
        self._active_id = item_id
        self._origin = (x, y)
        self.dragging = False

    def move(self, x: float, y: float) -> bool:
        """Track pointer movement. Returns True once the drag is active."""
        if self._active_id is None:
            return False
        if not self.dragging:
            dx = x - self._origin[0]
            dy = y - self._origin[1]
            self.dragging = math.hypot(dx, dy) >= self.activation_distance
        return self.dragging

    def release(self, over_id: Optional[str]) -> Optional[DragEndEvent]:
        """End the gesture. A press that never activated is a click: no event."""
        active_id, was_dragging = self._active_id, self.dragging
        self._active_id = None
        self.dragging = False
        if active_id is None or not was_dragging or over_id is None:
            return None
        return DragEndEvent(active_id=active_id, over_id=over_id)


class KeyboardSensor:
    def __init__(self):
        self._ids: list[str] = []
        self._active_id: Optional[str] = None
        self._over_index = 0

    @property
    def active(self) -> bool:
        return self._active_id is not None

    @property
    def over_id(self) -> Optional[str]:
        if self._active_id is None:
            return None
        return self._ids[self._over_index]

    def pick_up(self, item_id: str, ids: Sequence[str]) -> bool:
        if item_id not in ids:
            return False
        self._ids = list(ids)
        self._active_id = item_id
        self._over_index = self._ids.index(item_id)
        return True

    def arrow_up(self) -> None:
        if self.active:
            self._over_index = max(self._over_index - 1, 0)

    def arrow_down(self) -> None:
        if self.active:
            self._over_index = min(self._over_index + 1, len(self._ids) - 1)

    def drop(self) -> Optional[DragEndEvent]:
        if self._active_id is None:
            return None
        event = DragEndEvent(active_id=self._active_id, over_id=self.over_id)
        self.cancel()
        return event

    def cancel(self) -> None:
        self._ids = []
        self._active_id = None
        self._over_index = 0

    def press_key(
        self,
        code: str,
        item_id: Optional[str] = None,
        ids: Sequence[str] = (),
    ) -> Optional[DragEndEvent]:
        """Feed one key press. Returns the drag-end event when the key drops the item."""
        if not self.active:
            if code in PICK_UP_KEYS and item_id is not None:
                self.pick_up(item_id, ids)
            return None

        if code in DROP_KEYS:
            return self.drop()
        if code in CANCEL_KEYS:
            self.cancel()
        elif code == "ArrowUp":
            self.arrow_up()
        elif code == "ArrowDown":
            self.arrow_down()
        return None
