"""Scroll-sync coordinator - keep the document pane and issue list aligned.

Both panes report the boxes of their issue-bearing elements. A scroll in
either pane selects the issue closest to that pane's vertical center; the
other pane then scrolls to it. A short lock stops the follow-up scroll
event from overwriting the selection it was reacting to.
"""

import logging
import time
from contextlib import contextmanager
from dataclasses import dataclass
from typing import Callable, Iterable, Iterator, List, Optional

from zenreview.models.selection import NO_SELECTION, Selection, SelectionSource

logger = logging.getLogger(__name__)

Clock = Callable[[], float]


@dataclass(frozen=True)
class ElementBox:
    """Vertical extent of an issue-bearing element in its pane"""
    issue_index: int
    top: float
    height: float

    @property
    def bottom(self) -> float:
        return self.top + self.height

    @property
    def center(self) -> float:
        return self.top + self.height / 2


def closest_to_center(boxes: Iterable[ElementBox], viewport_top: float, viewport_height: float) -> Optional[int]:
    """Issue whose element center is nearest the viewport center.

    Only elements intersecting the viewport are considered; the first one
    wins a tie.
    """
    viewport_bottom = viewport_top + viewport_height
    center = viewport_top + viewport_height / 2

    closest = None
    best = float("inf")
    for box in boxes:
        if box.bottom > viewport_top and box.top < viewport_bottom:
            distance = abs(box.center - center)
            if distance < best:
                best = distance
                closest = box.issue_index
    return closest


class Throttle:
    """Leading-edge throttle with a deferred trailing call.

    A call inside the window is not dropped: ``pending_delay`` tells the
    caller when to flush it.
    """

    def __init__(self, interval: float):
        self.interval = interval
        self.last_run: Optional[float] = None
        self.pending = False

    def ready(self, now: float) -> bool:
        """Claim a run slot; marks a pending call when throttled"""
        if self.last_run is None or now - self.last_run >= self.interval:
            self.last_run = now
            self.pending = False
            return True
        self.pending = True
        return False

    def pending_delay(self, now: float) -> Optional[float]:
        """Seconds until the deferred call may run, or None if nothing is pending"""
        if not self.pending or self.last_run is None:
            return None
        return max(0.0, self.interval - (now - self.last_run))


class ScrollSyncCoordinator:
    """Selection arbiter between two independently scrolling panes"""

    def __init__(self, throttle_interval: float = 0.2, lock_duration: float = 0.8, clock: Clock = time.monotonic):
        self.clock = clock
        self.lock_duration = lock_duration
        self.selection: Selection = NO_SELECTION
        self._throttles = {
            SelectionSource.DOCUMENT: Throttle(throttle_interval),
            SelectionSource.ISSUE_LIST: Throttle(throttle_interval),
        }
        self._locked_until = 0.0
        self._scrolling = False

    # ========== Re-entrancy lock ==========

    def is_locked(self, now: Optional[float] = None) -> bool:
        now = self.clock() if now is None else now
        return self._scrolling or now < self._locked_until

    @contextmanager
    def auto_scroll(self) -> Iterator[None]:
        """Hold the lock around a programmatic scroll.

        On success the lock stays held for ``lock_duration`` so the smooth
        scroll can settle; on error it is released at once.
        """
        self._scrolling = True
        try:
            yield
        except BaseException:
            self._locked_until = 0.0
            raise
        else:
            self._locked_until = self.clock() + self.lock_duration
        finally:
            self._scrolling = False

    def release(self) -> None:
        self._scrolling = False
        self._locked_until = 0.0

    # ========== Selection ==========

    def reset(self) -> None:
        self.selection = NO_SELECTION

    def select(self, issue_index: Optional[int], source: SelectionSource, toggle: bool = False) -> Selection:
        """Selection from a click; with ``toggle`` a second click clears it"""
        if toggle and issue_index is not None and issue_index == self.selection.issue_index:
            issue_index = None
        self.selection = Selection(issue_index=issue_index, source=source)
        return self.selection

    def on_scroll(
        self,
        source: SelectionSource,
        boxes: Iterable[ElementBox],
        viewport_top: float,
        viewport_height: float,
        now: Optional[float] = None,
    ) -> Optional[Selection]:
        """Handle a scroll event from ``source``.

        Returns:
            The new selection, or None when throttled, locked or unchanged
        """
        now = self.clock() if now is None else now
        if self.is_locked(now):
            return None
        if not self._throttles[source].ready(now):
            return None

        closest = closest_to_center(boxes, viewport_top, viewport_height)
        if closest is None or closest == self.selection.issue_index:
            return None

        logger.debug("Scroll in %s selected issue %d", source.value, closest)
        self.selection = Selection(issue_index=closest, source=source)
        return self.selection

    def pending_delay(self, source: SelectionSource, now: Optional[float] = None) -> Optional[float]:
        """Delay before a throttled scroll from ``source`` should be re-run"""
        now = self.clock() if now is None else now
        return self._throttles[source].pending_delay(now)

    def views_to_scroll(self, selection: Optional[Selection] = None) -> List[SelectionSource]:
        """Panes that must scroll to follow the selection (never its source)"""
        selection = selection or self.selection
        if selection.issue_index is None:
            return []
        return [view for view in SelectionSource if view != selection.source]
