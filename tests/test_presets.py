"""Tests for check modes and prompt assembly"""

import pytest

from zenreview.presets import CHECK_MODES, build_system_prompt, get_mode_by_id


def test_builtin_modes():
    ids = [mode.id for mode in CHECK_MODES]

    assert ids == ["fast", "professional", "sensitive", "official", "polishing", "format"]
    assert get_mode_by_id("fast").name == "Fast"
    assert get_mode_by_id("missing") is None


def test_prompt_includes_word_lists():
    prompt = build_system_prompt(
        "fast",
        whitelist=["张三", "GrammarZen"],
        sensitive_words=["最佳"],
        custom_rules=["数字统一用阿拉伯数字"],
        user_prompt="  注意人名  ",
    )

    assert "[张三, GrammarZen]" in prompt
    assert "[最佳]" in prompt
    assert "1. 数字统一用阿拉伯数字" in prompt
    assert "注意人名" in prompt
    assert '"correctedText"' in prompt


def test_prompt_omits_empty_sections():
    prompt = build_system_prompt("format")

    assert "白名单" not in prompt
    assert "违禁词库" not in prompt


def test_polishing_tone():
    assert "学术严谨" in build_system_prompt("polishing", tone="academic")
    assert "优美流畅" in build_system_prompt("polishing")


def test_unknown_mode_raises():
    with pytest.raises(ValueError):
        build_system_prompt("nope")
