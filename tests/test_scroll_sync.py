"""Tests for the scroll-sync coordinator"""

import pytest

from zenreview.core.scroll_sync import ElementBox, ScrollSyncCoordinator, Throttle, closest_to_center
from zenreview.models.selection import SelectionSource


class FakeClock:
    def __init__(self):
        self.now = 0.0

    def __call__(self):
        return self.now


BOXES = [
    ElementBox(issue_index=0, top=0, height=2),
    ElementBox(issue_index=1, top=4, height=2),
    ElementBox(issue_index=2, top=30, height=2),
]


def test_closest_to_center():
    assert closest_to_center(BOXES, 0, 10) == 1
    assert closest_to_center(BOXES, 25, 10) == 2
    # Nothing in view
    assert closest_to_center(BOXES, 10, 10) is None


def test_throttle_defers_calls():
    throttle = Throttle(0.2)

    assert throttle.ready(0.0)
    assert not throttle.ready(0.05)
    assert throttle.pending_delay(0.05) == pytest.approx(0.15)
    assert throttle.ready(0.25)
    assert throttle.pending_delay(0.25) is None


def test_scroll_selects_centered_issue():
    coordinator = ScrollSyncCoordinator(clock=FakeClock())

    selection = coordinator.on_scroll(SelectionSource.DOCUMENT, BOXES, 0, 10, now=0.0)

    assert selection.issue_index == 1
    assert selection.source == SelectionSource.DOCUMENT
    assert coordinator.views_to_scroll() == [SelectionSource.ISSUE_LIST]


def test_scroll_is_throttled():
    coordinator = ScrollSyncCoordinator(throttle_interval=0.2, clock=FakeClock())
    coordinator.on_scroll(SelectionSource.DOCUMENT, BOXES, 0, 10, now=0.0)

    assert coordinator.on_scroll(SelectionSource.DOCUMENT, BOXES, 25, 10, now=0.1) is None
    assert coordinator.pending_delay(SelectionSource.DOCUMENT, now=0.1) == pytest.approx(0.1)
    assert coordinator.on_scroll(SelectionSource.DOCUMENT, BOXES, 25, 10, now=0.3).issue_index == 2


def test_same_selection_is_not_reported():
    coordinator = ScrollSyncCoordinator(clock=FakeClock())
    coordinator.on_scroll(SelectionSource.DOCUMENT, BOXES, 0, 10, now=0.0)

    assert coordinator.on_scroll(SelectionSource.DOCUMENT, BOXES, 1, 10, now=1.0) is None


def test_auto_scroll_locks_both_panes():
    """Scroll events during and shortly after a programmatic scroll are ignored"""
    clock = FakeClock()
    coordinator = ScrollSyncCoordinator(lock_duration=0.8, clock=clock)

    clock.now = 1.0
    with coordinator.auto_scroll():
        assert coordinator.is_locked()
        assert coordinator.on_scroll(SelectionSource.ISSUE_LIST, BOXES, 0, 10, now=1.0) is None

    assert coordinator.is_locked(1.5)
    assert coordinator.on_scroll(SelectionSource.ISSUE_LIST, BOXES, 0, 10, now=1.5) is None
    assert not coordinator.is_locked(1.9)
    assert coordinator.on_scroll(SelectionSource.ISSUE_LIST, BOXES, 0, 10, now=1.9).issue_index == 1


def test_auto_scroll_releases_on_error():
    coordinator = ScrollSyncCoordinator(clock=FakeClock())

    with pytest.raises(RuntimeError):
        with coordinator.auto_scroll():
            raise RuntimeError("scroll failed")

    assert not coordinator.is_locked()


def test_click_toggles_selection():
    coordinator = ScrollSyncCoordinator(clock=FakeClock())

    selection = coordinator.select(2, SelectionSource.ISSUE_LIST, toggle=True)
    assert selection.issue_index == 2
    assert coordinator.views_to_scroll() == [SelectionSource.DOCUMENT]

    selection = coordinator.select(2, SelectionSource.ISSUE_LIST, toggle=True)
    assert selection.is_empty
    assert coordinator.views_to_scroll() == []
