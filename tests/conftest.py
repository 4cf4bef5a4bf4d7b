"""Shared fixtures for zenreview tests"""

import pytest

from zenreview.core.issue_state import new_review_state
from zenreview.models.issue import ProofreadResult


TWO_ISSUE_ORIGINAL = "我们会竟快修复，请耐心等侍。"
TWO_ISSUE_CORRECTED = "我们会尽快修复，请耐心等待。"


@pytest.fixture
def single_result():
    return ProofreadResult.model_validate({
        "correctedText": "我们会尽快修复",
        "issues": [
            {"original": "竟快", "suggestion": "尽快", "reason": "错别字", "type": "typo"},
        ],
        "summary": "一处错别字",
        "score": 92,
    })


@pytest.fixture
def two_issue_result():
    return ProofreadResult.model_validate({
        "correctedText": TWO_ISSUE_CORRECTED,
        "issues": [
            {"original": "竟快", "suggestion": "尽快", "reason": "错别字", "type": "typo"},
            {"original": "等侍", "suggestion": "等待", "reason": "用词", "type": "grammar"},
        ],
        "summary": "两处问题",
        "score": 85,
    })


@pytest.fixture
def two_issue_state(two_issue_result):
    return new_review_state(TWO_ISSUE_ORIGINAL, two_issue_result, source_file="doc.txt")
