"""Tests for issue dispositions and the derived current text"""

import pytest

from zenreview.core.issue_state import (
    apply_action,
    apply_batch,
    category_counts,
    derive_current,
    new_review_state,
    visible_issues,
)
from zenreview.models.issue import Disposition, IssueAction, IssueCategory, ProofreadResult


def test_new_state_starts_from_corrected(two_issue_state):
    assert derive_current(two_issue_state) == two_issue_state.corrected
    assert two_issue_state.disposition == {}
    assert len(two_issue_state.locations) == 2


def test_ignore_restores_only_that_span(two_issue_state):
    """Ignoring puts back the original wording; other fixes stay"""
    outcome = apply_action(two_issue_state, 0, IssueAction.IGNORE)

    assert outcome.current == "我们会竟快修复，请耐心等待。"
    assert outcome.changed == [0]
    assert outcome.disposition[0] == Disposition.IGNORED
    assert [issue.index for issue in visible_issues(outcome.state)] == [1]


def test_ignore_single_issue_gives_original(single_result):
    state = new_review_state("我们会竟快修复", single_result)
    outcome = apply_action(state, 0, IssueAction.IGNORE)

    assert outcome.current == "我们会竟快修复"
    assert visible_issues(outcome.state) == []


def test_accept_keeps_correction(two_issue_state):
    outcome = apply_action(two_issue_state, 1, IssueAction.ACCEPT)

    assert outcome.current == two_issue_state.corrected
    assert outcome.state.history == [1]


def test_ignore_both_gives_original(two_issue_state):
    state = apply_action(two_issue_state, 1, IssueAction.IGNORE).state
    outcome = apply_action(state, 0, IssueAction.IGNORE)

    assert outcome.current == two_issue_state.original
    assert outcome.state.history == [1, 0]


def test_whitelist_reports_word(two_issue_state):
    outcome = apply_action(two_issue_state, 0, IssueAction.WHITELIST)

    assert outcome.whitelisted_words == ["竟快"]
    assert outcome.current.startswith("我们会竟快")


def test_repeat_action_is_noop(two_issue_state):
    """Acting on a resolved issue changes nothing"""
    first = apply_action(two_issue_state, 0, IssueAction.IGNORE)
    second = apply_action(first.state, 0, IssueAction.ACCEPT)

    assert second.changed == []
    assert second.state is first.state
    assert second.current == first.current
    assert second.disposition[0] == Disposition.IGNORED


def test_invalid_index_raises(two_issue_state):
    with pytest.raises(IndexError):
        apply_action(two_issue_state, 5, IssueAction.ACCEPT)
    with pytest.raises(IndexError):
        apply_action(two_issue_state, -1, IssueAction.ACCEPT)


def test_original_state_is_untouched(two_issue_state):
    apply_action(two_issue_state, 0, IssueAction.IGNORE)

    assert two_issue_state.disposition == {}
    assert two_issue_state.history == []


def test_batch_respects_filter(two_issue_state):
    outcome = apply_batch(two_issue_state, IssueAction.IGNORE, IssueCategory.GRAMMAR)

    assert outcome.changed == [1]
    assert outcome.current == "我们会尽快修复，请耐心等侍。"
    assert [issue.index for issue in visible_issues(outcome.state)] == [0]


def test_batch_accept_all(two_issue_state):
    outcome = apply_batch(two_issue_state, IssueAction.ACCEPT)

    assert outcome.changed == [0, 1]
    assert visible_issues(outcome.state) == []
    assert apply_batch(outcome.state, IssueAction.ACCEPT).changed == []


def test_batch_whitelist_rejected(two_issue_state):
    with pytest.raises(ValueError):
        apply_batch(two_issue_state, IssueAction.WHITELIST)


def test_unlocated_issue_falls_back_to_replace():
    """Issues that could not be placed revert the first occurrence of the suggestion"""
    result = ProofreadResult.model_validate({
        "correctedText": "今天天气很好",
        "issues": [{"original": "不错", "suggestion": "很好", "type": "style"}],
    })
    state = new_review_state("今天天气很好", result)

    assert not state.locations[0].located
    assert apply_action(state, 0, IssueAction.IGNORE).current == "今天天气不错"


def test_category_counts(two_issue_state):
    counts = category_counts(two_issue_state)

    assert counts["all"] == 2
    assert counts["typo"] == 1
    assert counts["grammar"] == 1
    assert "suggestion" not in counts

    state = apply_action(two_issue_state, 0, IssueAction.ACCEPT).state
    assert category_counts(state)["typo"] == 0
    assert category_counts(state)["all"] == 1
