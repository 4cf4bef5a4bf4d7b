"""Issue state machine - per-issue dispositions and the derived current text"""

import logging
from dataclasses import dataclass, field
from datetime import datetime
from typing import Dict, List, Optional

from zenreview.core.char_diff import diff
from zenreview.core.locator import locate_issues
from zenreview.models.issue import (
    Disposition,
    Issue,
    IssueAction,
    IssueCategory,
    IssueFilter,
    ProofreadResult,
    matches_filter,
)
from zenreview.models.review import ReviewState

logger = logging.getLogger(__name__)

_REVERTING = (Disposition.IGNORED, Disposition.WHITELISTED)


@dataclass
class ActionOutcome:
    """Result of applying one or more actions"""
    state: ReviewState
    current: str
    whitelisted_words: List[str] = field(default_factory=list)
    changed: List[int] = field(default_factory=list)

    @property
    def disposition(self) -> Dict[int, Disposition]:
        return self.state.disposition


def new_review_state(original: str, result: ProofreadResult, source_file: str = "", source_hash: str = "") -> ReviewState:
    """Create a fresh review: diff original against corrected and locate issues"""
    issues = [issue.model_copy(update={"index": i}) for i, issue in enumerate(result.issues)]
    locations = locate_issues(diff(original, result.corrected_text), issues)
    located = sum(1 for loc in locations if loc.located)
    logger.info("Located %d of %d issues", located, len(issues))

    return ReviewState(
        source_file=source_file,
        source_hash=source_hash,
        original=original,
        corrected=result.corrected_text,
        issues=issues,
        locations=locations,
        summary=result.summary,
        score=result.score,
    )


def derive_current(state: ReviewState) -> str:
    """Rebuild the current text from the corrected text and resolved issues.

    Every ignored or whitelisted issue puts its original wording back in
    place of its suggestion, using the suggestion's located range in the
    corrected text. Issues without such a range fall back to replacing the
    first occurrence of the suggestion, in resolution order; that fallback
    can hit an unrelated identical occurrence.
    """
    reverted = [
        i for i in state.history
        if state.disposition_of(i) in _REVERTING
    ]

    placed = []
    unplaced = []
    for i in reverted:
        loc = state.locations[i] if i < len(state.locations) else None
        if loc is not None and loc.placed_in_corrected:
            placed.append(loc)
        else:
            unplaced.append(state.issues[i])

    text = state.corrected
    placed.sort(key=lambda loc: loc.corrected_start, reverse=True)
    boundary = len(text)
    for loc in placed:
        if loc.corrected_end > boundary:
            logger.debug("Skipping overlapping revert for issue %d", loc.issue_index)
            continue
        issue = state.issues[loc.issue_index]
        text = text[:loc.corrected_start] + issue.original + text[loc.corrected_end:]
        boundary = loc.corrected_start

    for issue in unplaced:
        if issue.suggestion and issue.suggestion in text:
            text = text.replace(issue.suggestion, issue.original, 1)

    return text


def _with_dispositions(state: ReviewState, updates: Dict[int, Disposition]) -> ReviewState:
    disposition = dict(state.disposition)
    disposition.update(updates)
    return state.model_copy(update={
        "disposition": disposition,
        "history": state.history + list(updates),
        "modified_at": datetime.now(),
    })


def apply_action(state: ReviewState, issue_index: int, action: IssueAction) -> ActionOutcome:
    """Apply a user action to one issue.

    Pending issues move to a terminal disposition; acting on an already
    resolved issue changes nothing.

    Raises:
        IndexError: If ``issue_index`` is not a valid issue
    """
    if not 0 <= issue_index < len(state.issues):
        raise IndexError(f"No issue with index {issue_index}")

    if state.is_resolved(issue_index):
        logger.debug("Issue %d already %s", issue_index, state.disposition_of(issue_index).value)
        return ActionOutcome(state=state, current=derive_current(state))

    new_state = _with_dispositions(state, {issue_index: action.disposition})
    issue = state.issues[issue_index]
    logger.info("Issue %d %s: %s", issue_index, action.disposition.value, issue.display_name)

    words = [issue.original] if action == IssueAction.WHITELIST else []
    return ActionOutcome(
        state=new_state,
        current=derive_current(new_state),
        whitelisted_words=words,
        changed=[issue_index],
    )


def visible_issues(state: ReviewState, active_filter: Optional[IssueFilter] = "all") -> List[Issue]:
    """Unresolved issues that match the filter, in issue order"""
    return [
        issue for i, issue in enumerate(state.issues)
        if not state.is_resolved(i) and matches_filter(issue.category, active_filter)
    ]


def apply_batch(state: ReviewState, action: IssueAction, active_filter: Optional[IssueFilter] = "all") -> ActionOutcome:
    """Apply an action to every visible issue in one pass.

    Only accept and ignore are offered as batch actions.
    """
    if action == IssueAction.WHITELIST:
        raise ValueError("whitelist cannot be applied as a batch action")

    targets = [issue.index for issue in visible_issues(state, active_filter)]
    if not targets:
        return ActionOutcome(state=state, current=derive_current(state))

    new_state = _with_dispositions(state, {i: action.disposition for i in targets})
    logger.info("Batch %s on %d issues", action.value, len(targets))
    return ActionOutcome(
        state=new_state,
        current=derive_current(new_state),
        changed=targets,
    )


def category_counts(state: ReviewState) -> Dict[str, int]:
    """Count unresolved issues per filter button; style includes suggestions"""
    pending = [issue for i, issue in enumerate(state.issues) if not state.is_resolved(i)]
    counts = {"all": len(pending)}
    for category in IssueCategory:
        if category == IssueCategory.SUGGESTION:
            continue
        counts[category.value] = sum(1 for issue in pending if matches_filter(issue.category, category))
    return counts
