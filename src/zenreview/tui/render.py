"""Markup builders for the review panes"""

from dataclasses import dataclass, field
from typing import List, Sequence

from rich.markup import escape

from zenreview.core.segments import DisplaySegment, segment_style, segment_text
from zenreview.models.issue import Issue
from zenreview.models.selection import ViewMode


@dataclass
class Paragraph:
    """One document line as markup, with the issues drawn inside it"""
    markup: str = ""
    issue_indices: List[int] = field(default_factory=list)

    def add(self, markup: str, issue_index) -> None:
        self.markup += markup
        if issue_index is not None and issue_index not in self.issue_indices:
            self.issue_indices.append(issue_index)


def segment_markup(text: str, segment: DisplaySegment, issues: Sequence[Issue]) -> str:
    """Styled markup for (part of) a segment; interactive ones carry a click action"""
    if not text:
        return ""
    body = escape(text)
    style = segment_style(segment, issues)
    if style:
        body = f"[{style}]{body}[/]"
    if segment.interactive:
        body = f"[@click=screen.select_issue({segment.issue_index})]{body}[/]"
    return body


def build_paragraphs(
    segments: Sequence[DisplaySegment],
    issues: Sequence[Issue],
    view_mode: ViewMode,
) -> List[Paragraph]:
    """Split display segments into per-line paragraphs"""
    paragraphs = [Paragraph()]
    for segment in segments:
        lines = segment_text(segment, view_mode).split("\n")
        for i, line in enumerate(lines):
            if i > 0:
                paragraphs.append(Paragraph())
            paragraphs[-1].add(segment_markup(line, segment, issues), segment.issue_index)
    return paragraphs


def issue_card_markup(number: int, issue: Issue, selected: bool = False) -> str:
    """Body of an issue card"""
    marker = "[reverse]" if selected else ""
    end = "[/reverse]" if selected else ""
    lines = [
        f"{marker}[bold]{number}. {escape(issue.label)}[/bold]{end}",
        f"[red strike]{escape(issue.original)}[/] -> [green]{escape(issue.suggestion)}[/]",
    ]
    if issue.reason:
        lines.append(f"[dim]{escape(issue.reason)}[/dim]")
    return "\n".join(lines)
