from __future__ import annotations

import logging
from enum import Enum
from typing import Optional, Tuple

from pathfind.utils.timers import Timer

logger = logging.getLogger(__name__)

RELEASE_DELAY_SEC = 0.1


class Phase(str, Enum):
    IDLE = "idle"
    HOVERING = "hovering"
    POINTER_DOWN = "pointer_down"
    COMMITTED = "committed"
    CANCELLED = "cancelled"


class PointerInteraction:
    """Pointer activity over the dropdown, as one state machine.

    ``idle -> hovering -> pointer_down -> committed | cancelled``. While the
    pointer is over the dropdown, pressed, or inside the short release window
    after ``mouseup``/``mouseleave``, the interaction is *engaged* and an input
    blur must not close the dropdown. A press grants at most one commit, no
    matter how many of ``mouseup``/``click`` try to claim it.
    """

    def __init__(self, release_delay: float = RELEASE_DELAY_SEC) -> None:
        self.release_delay = release_delay
        self.phase = Phase.IDLE
        self.target_index: Optional[int] = None
        self.pointer: Optional[Tuple[float, float]] = None
        self._release = Timer()

    @property
    def engaged(self) -> bool:
        return self.phase in (Phase.HOVERING, Phase.POINTER_DOWN) or self._release.pending

    def move(self, x: Optional[float], y: Optional[float]) -> None:
        if x is not None and y is not None:
            self.pointer = (x, y)

    def enter(self) -> None:
        self._release.cancel()
        if self.phase != Phase.POINTER_DOWN:
            self.phase = Phase.HOVERING

    def press(self, index: Optional[int] = None) -> None:
        self._release.cancel()
        self.phase = Phase.POINTER_DOWN
        self.target_index = index

    def release(self) -> None:
        self._release.schedule(self.release_delay, self._settle)

    def leave(self) -> None:
        if self.phase == Phase.POINTER_DOWN:
            # dragged off the dropdown with the button held: the press is abandoned
            self.phase = Phase.CANCELLED
        self._release.schedule(self.release_delay, self._settle)

    def try_commit(self, index: int) -> bool:
        if self.phase == Phase.COMMITTED:
            return False
        if self.phase == Phase.POINTER_DOWN and self.target_index not in (None, index):
            logger.debug("Press on item %s released over item %s, ignoring", self.target_index, index)
            return False
        if self.phase == Phase.CANCELLED:
            return False
        self.phase = Phase.COMMITTED
        self.target_index = index
        return True

    def cancel(self) -> None:
        if self.phase == Phase.POINTER_DOWN:
            self.phase = Phase.CANCELLED

    def rearm(self) -> None:
        """Fresh results arrived: a finished press no longer blocks new commits."""
        if self.phase in (Phase.COMMITTED, Phase.CANCELLED):
            self.reset()

    def _settle(self) -> None:
        self.phase = Phase.IDLE
        self.target_index = None

    def reset(self) -> None:
        self._release.cancel()
        self._settle()
