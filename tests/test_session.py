"""Tests for the interactive review session"""

from zenreview.core.session import ReviewSession
from zenreview.models.issue import IssueAction, IssueCategory
from zenreview.models.selection import NO_SELECTION, SelectionSource, ViewMode


def test_step_selection_walks_visible_issues(two_issue_state):
    session = ReviewSession(two_issue_state)

    assert session.step_selection(1, SelectionSource.ISSUE_LIST).issue_index == 0
    assert session.step_selection(1, SelectionSource.ISSUE_LIST).issue_index == 1
    # Clamped at the end
    assert session.step_selection(1, SelectionSource.ISSUE_LIST).issue_index == 1
    assert session.step_selection(-1, SelectionSource.ISSUE_LIST).issue_index == 0


def test_acting_on_selection_clears_it(two_issue_state):
    session = ReviewSession(two_issue_state)
    session.select(0, SelectionSource.DOCUMENT)

    session.act(0, IssueAction.IGNORE)

    assert session.selection == NO_SELECTION
    assert session.current == "我们会竟快修复，请耐心等待。"
    assert [issue.index for issue in session.visible_issues()] == [1]


def test_whitelist_calls_back(two_issue_state):
    words = []
    session = ReviewSession(two_issue_state, on_whitelist=words.append)

    session.act(1, IssueAction.WHITELIST)

    assert words == ["等侍"]


def test_set_filter_clears_selection(two_issue_state):
    session = ReviewSession(two_issue_state)
    session.select(1, SelectionSource.ISSUE_LIST)

    session.set_filter(IssueCategory.TYPO)

    assert session.selection.is_empty
    assert [issue.index for issue in session.visible_issues()] == [0]


def test_segments_follow_state(two_issue_state):
    session = ReviewSession(two_issue_state)
    session.select(0, SelectionSource.ISSUE_LIST)
    before = session.segments()

    assert session.segments() is before
    session.act_on_visible(IssueAction.ACCEPT)
    assert not any(s.highlighted for s in session.segments())


def test_toggle_view_mode(two_issue_state):
    session = ReviewSession(two_issue_state)

    assert session.toggle_view_mode() == ViewMode.ANNOTATED
    assert session.toggle_view_mode() == ViewMode.CLEAN


def test_report_lists_pending_issues(two_issue_state):
    session = ReviewSession(two_issue_state)
    session.act(0, IssueAction.ACCEPT)

    report = session.report()
    assert "等侍 -> 等待" in report
    assert "竟快 -> 尽快" not in report
