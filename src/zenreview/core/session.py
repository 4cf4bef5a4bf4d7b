"""Review session - the live state behind the review screen"""

import logging
from typing import Callable, Dict, FrozenSet, List, Optional, Tuple

from zenreview.core.char_diff import DiffOp, diff
from zenreview.core.issue_state import (
    ActionOutcome,
    apply_action,
    apply_batch,
    category_counts,
    derive_current,
    visible_issues,
)
from zenreview.core.report import export_report
from zenreview.core.segments import DisplaySegment, render_segments, visible_segments
from zenreview.models.issue import ALL_CATEGORIES, Issue, IssueAction, IssueFilter
from zenreview.models.review import ReviewState
from zenreview.models.selection import NO_SELECTION, Selection, SelectionSource, ViewMode

logger = logging.getLogger(__name__)

SegmentKey = Tuple[str, Optional[int], str, FrozenSet[int]]


class ReviewSession:
    """Mutable wrapper over a ReviewState for interactive use.

    Holds the selection, the active filter and the view mode, and caches
    rendered segments keyed on everything they depend on.
    """

    def __init__(
        self,
        state: ReviewState,
        on_whitelist: Optional[Callable[[str], None]] = None,
        view_mode: ViewMode = ViewMode.CLEAN,
    ):
        self.state = state
        self.on_whitelist = on_whitelist
        self.view_mode = view_mode
        self.selection: Selection = NO_SELECTION
        self.active_filter: IssueFilter = ALL_CATEGORIES
        self.current = derive_current(state)
        self._segment_cache: Dict[SegmentKey, List[DisplaySegment]] = {}

    # ========== Derived views ==========

    @property
    def issues(self) -> List[Issue]:
        return self.state.issues

    def ops(self) -> List[DiffOp]:
        """Diff from the original text to the current text"""
        return diff(self.state.original, self.current)

    def visible_issues(self) -> List[Issue]:
        return visible_issues(self.state, self.active_filter)

    def counts(self) -> Dict[str, int]:
        return category_counts(self.state)

    def segments(self) -> List[DisplaySegment]:
        """Display segments for the current state, memoized"""
        key: SegmentKey = (
            self.current,
            self.selection.issue_index,
            str(getattr(self.active_filter, "value", self.active_filter)),
            frozenset(self.state.resolved_indices()),
        )
        cached = self._segment_cache.get(key)
        if cached is None:
            cached = render_segments(
                self.ops(),
                self.state.locations,
                self.state.issues,
                self.state.disposition,
                self.selection,
                self.active_filter,
            )
            self._segment_cache = {key: cached}
        return cached

    def display_segments(self) -> List[DisplaySegment]:
        """Segments after the view-mode policy"""
        return visible_segments(self.segments(), self.view_mode)

    # ========== Selection & filter ==========

    def select(self, issue_index: Optional[int], source: Optional[SelectionSource]) -> Selection:
        self.selection = Selection(issue_index=issue_index, source=source)
        return self.selection

    def set_filter(self, active_filter: IssueFilter) -> None:
        """Change the filter; the selection is dropped so it never points at a hidden issue"""
        self.active_filter = active_filter
        self.selection = NO_SELECTION

    def toggle_view_mode(self) -> ViewMode:
        self.view_mode = ViewMode.ANNOTATED if self.view_mode == ViewMode.CLEAN else ViewMode.CLEAN
        return self.view_mode

    def step_selection(self, delta: int, source: SelectionSource) -> Selection:
        """Move the selection to the next/previous visible issue"""
        visible = [issue.index for issue in self.visible_issues()]
        if not visible:
            return self.select(None, source)
        if self.selection.issue_index in visible:
            pos = visible.index(self.selection.issue_index) + delta
        else:
            pos = 0 if delta >= 0 else len(visible) - 1
        pos = max(0, min(pos, len(visible) - 1))
        return self.select(visible[pos], source)

    # ========== Actions ==========

    def _commit(self, outcome: ActionOutcome) -> ActionOutcome:
        self.state = outcome.state
        self.current = outcome.current
        if self.selection.issue_index in outcome.changed:
            self.selection = NO_SELECTION
        for word in outcome.whitelisted_words:
            if self.on_whitelist is not None:
                self.on_whitelist(word)
        return outcome

    def act(self, issue_index: int, action: IssueAction) -> ActionOutcome:
        return self._commit(apply_action(self.state, issue_index, action))

    def act_on_visible(self, action: IssueAction) -> ActionOutcome:
        return self._commit(apply_batch(self.state, action, self.active_filter))

    def report(self) -> str:
        return export_report(
            self.current,
            self.state.issues,
            self.state.disposition,
            self.state.summary,
            self.state.score,
        )
