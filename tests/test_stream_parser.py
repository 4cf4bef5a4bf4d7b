"""Tests for the streaming result parser"""

import json

import pytest

from zenreview.core.stream_parser import (
    RECOVERED_SCORE,
    RECOVERED_SUMMARY,
    MalformedResultError,
    decode_json_string,
    enforce_whitelist,
    extract_issues,
    parse_final,
    parse_partial,
    scan_flat_objects,
    strip_code_fence,
)
from zenreview.models.issue import IssueCategory, ProofreadResult


FULL_OUTPUT = json.dumps({
    "correctedText": "我们会尽快修复",
    "issues": [
        {"original": "竟快", "suggestion": "尽快", "reason": "错别字", "type": "typo"},
    ],
    "summary": "一处错别字",
    "score": 92,
}, ensure_ascii=False)


def test_partial_growing_prefix_never_raises():
    """Every prefix of the stream parses; the text appears once its quote closes"""
    raw = '{"correctedText":"修复完成","issues":[{"orig'
    closed = raw.index('"修复完成"') + len('"修复完成"')

    for end in range(len(raw) + 1):
        partial = parse_partial(raw[:end])
        if end >= closed:
            assert partial.corrected_text == "修复完成"
            assert partial.issues == []


def test_partial_truncated_text_is_returned():
    partial = parse_partial('{"correctedText": "我们会尽')

    assert partial.corrected_text == "我们会尽"
    assert partial.summary is None
    assert partial.score is None


def test_partial_empty_input():
    partial = parse_partial("")

    assert partial.corrected_text is None
    assert partial.issues == []


def test_partial_collects_complete_issues_only():
    raw = FULL_OUTPUT[:FULL_OUTPUT.index("}") + 1] + ', {"original": "等'
    partial = parse_partial(raw)

    assert len(partial.issues) == 1
    assert partial.issues[0].suggestion == "尽快"
    assert partial.issues[0].index == 0


def test_partial_inside_code_fence():
    partial = parse_partial("```json\n" + FULL_OUTPUT + "\n```")

    assert partial.corrected_text == "我们会尽快修复"
    assert partial.score == 92
    assert partial.summary == "一处错别字"


def test_strip_code_fence():
    assert strip_code_fence("```json\n{}\n```") == "{}"
    assert strip_code_fence("{}") == "{}"


def test_decode_escapes():
    assert decode_json_string(r"a\nb\"c\\d") == 'a\nb"c\\d'
    assert decode_json_string(r"你好") == "你好"


def test_decode_drops_truncated_unicode_escape():
    """A half-received \\u escape at the end is dropped"""
    assert decode_json_string("好\\u4f") == "好"
    assert decode_json_string("好\\u") == "好"


def test_decode_surrogate_pair():
    assert decode_json_string(r"\ud83d\ude00") == "\U0001F600"


def test_scan_ignores_braces_in_strings():
    objects, closed = scan_flat_objects('{"a": "}{"}, {"b": 1}]')

    assert objects == ['{"a": "}{"}', '{"b": 1}']
    assert closed


def test_scan_skips_nested_objects():
    objects, closed = scan_flat_objects('{"a": {"x": 1}}, {"b": 2}')

    assert objects == ['{"b": 2}']
    assert not closed


def test_extract_issues_discards_incomplete_objects():
    """Objects missing required fields or with an unknown type are skipped"""
    content = (
        '"issues": ['
        '{"original": "a", "suggestion": "b", "type": "typo"},'
        '{"original": "", "suggestion": "b", "type": "typo"},'
        '{"original": "c", "suggestion": "d", "type": "weird"},'
        '{"original": "e", "suggestion": "f", "category": "privacy"}'
        ']'
    )
    issues = extract_issues(content)

    assert [issue.original for issue in issues] == ["a", "e"]
    assert [issue.index for issue in issues] == [0, 1]
    assert issues[1].category == IssueCategory.PRIVACY


def test_final_strict_parse():
    result = parse_final(FULL_OUTPUT)

    assert result.corrected_text == "我们会尽快修复"
    assert result.score == 92
    assert len(result.issues) == 1


def test_final_tolerates_surrounding_text():
    result = parse_final("Here is the result:\n" + FULL_OUTPUT + "\nDone.")

    assert result.summary == "一处错别字"


def test_final_recovers_truncated_output():
    """Truncated output falls back to tolerant extraction with defaults"""
    raw = FULL_OUTPUT[:FULL_OUTPUT.index('"summary"')]
    result = parse_final(raw)

    assert result.corrected_text == "我们会尽快修复"
    assert len(result.issues) == 1
    assert result.summary == RECOVERED_SUMMARY
    assert result.score == RECOVERED_SCORE


def test_final_without_text_raises():
    with pytest.raises(MalformedResultError):
        parse_final("I could not process this document.")


def test_enforce_whitelist_reverts_correction():
    result = ProofreadResult.model_validate({
        "correctedText": "张三说要尽快修复",
        "issues": [
            {"original": "张叁", "suggestion": "张三", "type": "typo"},
            {"original": "竟快", "suggestion": "尽快", "type": "typo"},
        ],
    })
    filtered = enforce_whitelist(result, ["张叁"])

    assert filtered.corrected_text == "张叁说要尽快修复"
    assert [issue.original for issue in filtered.issues] == ["竟快"]
    assert filtered.issues[0].index == 0


def test_enforce_whitelist_empty_is_noop(single_result):
    assert enforce_whitelist(single_result, []) is single_result
