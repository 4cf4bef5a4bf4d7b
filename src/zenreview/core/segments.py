"""Segment renderer - split a diff into highlightable, clickable display segments"""

from dataclasses import dataclass
from typing import Dict, List, Mapping, Optional, Sequence, Set

from zenreview.core.char_diff import DiffKind, DiffOp
from zenreview.models.issue import (
    Disposition,
    Issue,
    IssueCategory,
    IssueFilter,
    IssueLocation,
    matches_filter,
)
from zenreview.models.selection import Selection, ViewMode


@dataclass(frozen=True)
class DisplaySegment:
    """Smallest unit of rendered text with its own highlight/click metadata"""
    text: str
    kind: DiffKind
    highlighted: bool = False
    issue_index: Optional[int] = None
    interactive: bool = False


# Rich styles keyed by issue category for inserted text
CATEGORY_STYLES: Dict[IssueCategory, str] = {
    IssueCategory.SENSITIVE: "bold white on #8b0000",
    IssueCategory.PRIVACY: "black on #ff8c00",
    IssueCategory.FORMAT: "white on #5f5f5f",
    IssueCategory.TYPO: "bold green on #262626",
    IssueCategory.GRAMMAR: "green on #262626",
    IssueCategory.PUNCTUATION: "cyan on #262626",
    IssueCategory.STYLE: "magenta on #262626",
    IssueCategory.SUGGESTION: "magenta on #262626",
}

INSERT_STYLE = "green underline"
DELETE_STYLE = "red strike"
DELETE_MARKER = "⌫"
HIGHLIGHT_STYLE = "bold black on yellow"
INTERACTIVE_STYLE = "underline"


class _IssueResolver:
    """Finds the active issue enclosing a range of the original text"""

    def __init__(
        self,
        locations: Sequence[IssueLocation],
        issues: Sequence[Issue],
        disposition: Mapping[int, Disposition],
        active_filter: Optional[IssueFilter],
    ):
        self.active = [
            loc for loc in locations
            if loc.located
            and disposition.get(loc.issue_index, Disposition.PENDING) == Disposition.PENDING
            and matches_filter(issues[loc.issue_index].category, active_filter)
        ]

    def is_active(self, issue_index: Optional[int]) -> bool:
        return any(loc.issue_index == issue_index for loc in self.active)

    def boundaries_within(self, start: int, end: int) -> Set[int]:
        """Range ends of active issues falling strictly inside ``[start, end)``"""
        return {
            point
            for loc in self.active
            for point in (loc.start, loc.end)
            if start < point < end
        }

    def enclosing(self, start: int, end: int, is_insert: bool) -> Optional[int]:
        """Narrowest active issue whose range contains ``[start, end)``.

        Inserts are zero-width and match a range touching their anchor.
        """
        best = None
        for loc in self.active:
            if is_insert:
                if not loc.start <= start <= loc.end:
                    continue
            elif not (loc.start <= start and end <= loc.end and loc.start < loc.end):
                continue
            if best is None or loc.end - loc.start < best.end - best.start:
                best = loc
        return best.issue_index if best is not None else None


def _plain(text: str, kind: DiffKind, issue_index: Optional[int]) -> DisplaySegment:
    return DisplaySegment(
        text=text,
        kind=kind,
        highlighted=False,
        issue_index=issue_index,
        interactive=issue_index is not None,
    )


def _split_ranged(
    op: DiffOp,
    chunk_start: int,
    target: Optional[IssueLocation],
    resolver: _IssueResolver,
) -> List[DisplaySegment]:
    """Split an equal/delete op at the range boundaries of every active issue"""
    chunk_end = chunk_start + len(op.text)
    bounds = sorted(resolver.boundaries_within(chunk_start, chunk_end) | {chunk_start, chunk_end})

    segments = []
    for start, end in zip(bounds, bounds[1:]):
        text = op.text[start - chunk_start:end - chunk_start]
        if target is not None and target.start <= start and end <= target.end:
            segments.append(DisplaySegment(
                text=text,
                kind=op.kind,
                highlighted=True,
                issue_index=target.issue_index,
                interactive=False,
            ))
        else:
            segments.append(_plain(text, op.kind, resolver.enclosing(start, end, False)))
    return segments


def _split_insert(
    op: DiffOp,
    anchor: int,
    target: Optional[IssueLocation],
    target_issue: Optional[Issue],
    resolver: _IssueResolver,
) -> List[DisplaySegment]:
    """Split an insert op anchored at ``anchor`` around the selected suggestion"""
    if target is None or not target.start <= anchor <= target.end:
        return [_plain(op.text, op.kind, resolver.enclosing(anchor, anchor, True))]

    suggestion = target_issue.suggestion if target_issue else ""
    idx = op.text.find(suggestion) if suggestion else -1
    if idx == -1:
        return [DisplaySegment(
            text=op.text,
            kind=op.kind,
            highlighted=True,
            issue_index=target.issue_index,
            interactive=False,
        )]

    segments = []
    end = idx + len(suggestion)
    around = resolver.enclosing(anchor, anchor, True)
    if idx > 0:
        segments.append(_plain(op.text[:idx], op.kind, around))
    segments.append(DisplaySegment(
        text=op.text[idx:end],
        kind=op.kind,
        highlighted=True,
        issue_index=target.issue_index,
        interactive=False,
    ))
    if end < len(op.text):
        segments.append(_plain(op.text[end:], op.kind, around))
    return segments


def render_segments(
    ops: Sequence[DiffOp],
    locations: Sequence[IssueLocation],
    issues: Sequence[Issue],
    disposition: Mapping[int, Disposition],
    selection: Selection,
    active_filter: Optional[IssueFilter] = "all",
) -> List[DisplaySegment]:
    """Turn the original-vs-current diff into display segments.

    Only the selected issue is highlighted. Every other segment is linked
    to the narrowest unresolved, filter-visible issue whose range encloses
    it; text outside every issue range is not linked.
    Resolved issues are those whose disposition is not pending.

    Args:
        ops: Diff from the original text to the current text
        locations: Issue ranges in original coordinates
        issues: The issue list, indexed like ``locations``
        disposition: Per-issue disposition
        selection: The single global selection
        active_filter: "all" or an issue category

    Returns:
        Ordered display segments covering every op
    """
    resolver = _IssueResolver(locations, issues, disposition, active_filter)

    target = None
    target_issue = None
    selected = selection.issue_index
    if selected is not None and resolver.is_active(selected):
        target = locations[selected]
        target_issue = issues[selected]

    segments: List[DisplaySegment] = []
    orig_cursor = 0

    for op in ops:
        if op.kind == DiffKind.INSERT:
            segments.extend(_split_insert(op, orig_cursor, target, target_issue, resolver))
        else:
            segments.extend(_split_ranged(op, orig_cursor, target, resolver))
            orig_cursor += len(op.text)

    return segments


def visible_segments(segments: Sequence[DisplaySegment], view_mode: ViewMode) -> List[DisplaySegment]:
    """Apply the view-mode policy: clean mode hides unrelated deletions"""
    if view_mode == ViewMode.ANNOTATED:
        return list(segments)
    return [
        s for s in segments
        if s.kind != DiffKind.DELETE or s.issue_index is not None
    ]


def segment_style(segment: DisplaySegment, issues: Sequence[Issue]) -> str:
    """Rich style for a segment; inserted text is styled by issue category"""
    if segment.highlighted:
        style = HIGHLIGHT_STYLE
    elif segment.kind == DiffKind.INSERT:
        if segment.issue_index is not None:
            style = CATEGORY_STYLES[issues[segment.issue_index].category]
        else:
            style = INSERT_STYLE
    elif segment.kind == DiffKind.DELETE:
        style = DELETE_STYLE
    else:
        style = ""

    if segment.interactive:
        style = f"{style} {INTERACTIVE_STYLE}".strip()
    return style


def segment_text(segment: DisplaySegment, view_mode: ViewMode) -> str:
    """Text to draw for a segment; unrelated deletions collapse to a marker"""
    if (
        view_mode == ViewMode.ANNOTATED
        and segment.kind == DiffKind.DELETE
        and segment.issue_index is None
    ):
        return DELETE_MARKER
    return segment.text
