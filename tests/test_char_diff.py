"""Tests for the character diff engine"""

from zenreview.core.char_diff import (
    DiffKind,
    DiffOp,
    diff,
    edit_distance,
    left_text,
    normalize,
    right_text,
)


def test_identical_texts_single_equal():
    assert diff("我们会尽快修复", "我们会尽快修复") == [DiffOp(DiffKind.EQUAL, "我们会尽快修复")]


def test_empty_texts():
    assert diff("", "") == []
    assert diff("", "新增") == [DiffOp(DiffKind.INSERT, "新增")]
    assert diff("删除", "") == [DiffOp(DiffKind.DELETE, "删除")]


def test_substitution_deletes_before_inserting():
    ops = diff("我们会竟快修复", "我们会尽快修复")

    assert ops == [
        DiffOp(DiffKind.EQUAL, "我们会"),
        DiffOp(DiffKind.DELETE, "竟"),
        DiffOp(DiffKind.INSERT, "尽"),
        DiffOp(DiffKind.EQUAL, "快修复"),
    ]
    assert edit_distance(ops) == 2


def test_reconstructs_both_sides():
    pairs = [
        ("他的跑得很快", "他跑得很快。"),
        ("标点,错误", "标点，错误"),
        ("abc", "xyz"),
        ("第一行\n第二行", "第一行\n\n第二行！"),
    ]
    for a, b in pairs:
        ops = diff(a, b)
        assert left_text(ops) == a
        assert right_text(ops) == b


def test_ops_are_merged():
    """No two adjacent ops share a kind, and no op is empty"""
    ops = diff("这是一个很长很长的句子", "这是个很长的句子啊")

    for prev, op in zip(ops, ops[1:]):
        assert prev.kind != op.kind
    assert all(op.text for op in ops)


def test_normalize_orders_change_runs():
    ops = normalize([
        DiffOp(DiffKind.EQUAL, "a"),
        DiffOp(DiffKind.INSERT, "x"),
        DiffOp(DiffKind.DELETE, "b"),
        DiffOp(DiffKind.EQUAL, ""),
        DiffOp(DiffKind.INSERT, "y"),
        DiffOp(DiffKind.EQUAL, "c"),
        DiffOp(DiffKind.EQUAL, "d"),
    ])

    assert ops == [
        DiffOp(DiffKind.EQUAL, "a"),
        DiffOp(DiffKind.DELETE, "b"),
        DiffOp(DiffKind.INSERT, "xy"),
        DiffOp(DiffKind.EQUAL, "cd"),
    ]


def test_diff_returns_fresh_list():
    first = diff("甲乙", "甲丙")
    first.clear()

    assert diff("甲乙", "甲丙") != []
