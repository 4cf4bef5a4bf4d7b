"""Tests for zenreview models"""

import pytest
from pydantic import ValidationError

from zenreview.models.config import ZenConfig
from zenreview.models.issue import (
    Issue,
    IssueAction,
    IssueCategory,
    IssueLocation,
    Disposition,
    ProofreadResult,
    matches_filter,
)
from zenreview.models.mode import CheckModePreset
from zenreview.models.review import ReviewState
from zenreview.models.selection import NO_SELECTION, Selection, SelectionSource


def test_issue_accepts_type_alias():
    """Issue category can be given as 'type' like the model output"""
    issue = Issue.model_validate({"original": "竟快", "suggestion": "尽快", "type": "typo"})

    assert issue.category == IssueCategory.TYPO
    assert issue.label == "错别字"
    assert issue.display_name == "竟快 -> 尽快"


def test_issue_rejects_unknown_category():
    with pytest.raises(ValidationError):
        Issue.model_validate({"original": "a", "suggestion": "b", "type": "nonsense"})


def test_result_assigns_indices(two_issue_result):
    """Issues are numbered in the order they were reported"""
    assert [issue.index for issue in two_issue_result.issues] == [0, 1]
    assert two_issue_result.corrected_text.startswith("我们会尽快")


def test_result_defaults():
    result = ProofreadResult(corrected_text="好")

    assert result.issues == []
    assert result.summary == ""
    assert result.score == 0


def test_matches_filter_style_covers_suggestion():
    """The style filter also shows suggestions"""
    assert matches_filter(IssueCategory.SUGGESTION, IssueCategory.STYLE)
    assert matches_filter(IssueCategory.STYLE, IssueCategory.STYLE)
    assert not matches_filter(IssueCategory.TYPO, IssueCategory.STYLE)
    assert matches_filter(IssueCategory.TYPO, "all")
    assert matches_filter(IssueCategory.TYPO, None)
    assert not matches_filter(IssueCategory.SUGGESTION, IssueCategory.TYPO)


def test_issue_location_flags():
    assert not IssueLocation(issue_index=0).located
    placed = IssueLocation(issue_index=0, start=1, end=3, corrected_start=1, corrected_end=3)
    assert placed.located
    assert placed.placed_in_corrected


def test_issue_action_disposition():
    assert IssueAction.ACCEPT.disposition == Disposition.ACCEPTED
    assert IssueAction.IGNORE.disposition == Disposition.IGNORED
    assert IssueAction.WHITELIST.disposition == Disposition.WHITELISTED


def test_review_state_progress():
    state = ReviewState(
        original="a",
        corrected="b",
        issues=[Issue(original="a", suggestion="b", category=IssueCategory.TYPO, index=0)],
        disposition={0: Disposition.IGNORED},
    )

    assert state.is_resolved(0)
    assert state.disposition_of(5) == Disposition.PENDING
    assert state.get_review_progress() == (1, 1)


def test_selection_is_frozen():
    selection = Selection(issue_index=2, source=SelectionSource.DOCUMENT)

    assert not selection.is_empty
    assert NO_SELECTION.is_empty
    with pytest.raises(ValidationError):
        selection.issue_index = 3


def test_config_cleans_word_lists():
    """Whitelist entries are stripped and deduplicated in order"""
    config = ZenConfig(whitelist=[" 张三 ", "李四", "张三", ""])

    assert config.whitelist == ["张三", "李四"]


def test_config_validation():
    with pytest.raises(ValidationError):
        ZenConfig(scroll_throttle_ms=10)
    with pytest.raises(ValidationError):
        ZenConfig(auto_scroll_lock_ms=0)
    with pytest.raises(ValidationError):
        ZenConfig(command=[])

    config = ZenConfig(scroll_throttle_ms=250, auto_scroll_lock_ms=500)
    assert config.scroll_throttle == 0.25
    assert config.auto_scroll_lock == 0.5


def test_check_mode_render_tone():
    mode = CheckModePreset(id="x", name="X", description="", prompt_template="风格：{tone}")

    assert mode.render("学术严谨") == "风格：学术严谨"
    assert mode.render() == "风格：优美流畅"
