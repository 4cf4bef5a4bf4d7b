"""Character diff engine - minimal edit scripts between two strings"""

from dataclasses import dataclass
from enum import Enum
from functools import lru_cache
from typing import Iterable, List, Tuple

from diff_match_patch import diff_match_patch


class DiffKind(str, Enum):
    """Kind of a diff operation"""
    EQUAL = "equal"
    INSERT = "insert"
    DELETE = "delete"


@dataclass(frozen=True)
class DiffOp:
    """One run of an edit script"""
    kind: DiffKind
    text: str

    @property
    def is_change(self) -> bool:
        return self.kind != DiffKind.EQUAL


_KIND_BY_OP = {
    diff_match_patch.DIFF_EQUAL: DiffKind.EQUAL,
    diff_match_patch.DIFF_INSERT: DiffKind.INSERT,
    diff_match_patch.DIFF_DELETE: DiffKind.DELETE,
}


def _make_engine() -> diff_match_patch:
    engine = diff_match_patch()
    # No deadline: the bisection runs to completion, so the script is minimal
    engine.Diff_Timeout = 0
    return engine


_ENGINE = _make_engine()


def normalize(ops: Iterable[DiffOp]) -> List[DiffOp]:
    """Merge adjacent runs and order each change run as delete-then-insert.

    Empty runs are dropped. The result reproduces the same two texts.
    """
    result: List[DiffOp] = []
    deleted: List[str] = []
    inserted: List[str] = []

    def flush_change() -> None:
        if deleted:
            result.append(DiffOp(DiffKind.DELETE, "".join(deleted)))
        if inserted:
            result.append(DiffOp(DiffKind.INSERT, "".join(inserted)))
        deleted.clear()
        inserted.clear()

    for op in ops:
        if not op.text:
            continue
        if op.kind == DiffKind.DELETE:
            deleted.append(op.text)
        elif op.kind == DiffKind.INSERT:
            inserted.append(op.text)
        else:
            flush_change()
            if result and result[-1].kind == DiffKind.EQUAL:
                result[-1] = DiffOp(DiffKind.EQUAL, result[-1].text + op.text)
            else:
                result.append(op)
    flush_change()
    return result


@lru_cache(maxsize=64)
def _diff_cached(a: str, b: str) -> Tuple[DiffOp, ...]:
    raw = _ENGINE.diff_main(a, b, False)
    return tuple(normalize(DiffOp(_KIND_BY_OP[op], text) for op, text in raw))


def diff(a: str, b: str) -> List[DiffOp]:
    """Compute a minimal character-level edit script from ``a`` to ``b``.

    Deterministic: at any position deletions come before insertions.
    ``diff(a, a)`` is a single equal op (empty list when ``a`` is empty).
    """
    return list(_diff_cached(a, b))


def left_text(ops: Iterable[DiffOp]) -> str:
    """Rebuild the left input (everything but insertions)"""
    return "".join(op.text for op in ops if op.kind != DiffKind.INSERT)


def right_text(ops: Iterable[DiffOp]) -> str:
    """Rebuild the right input (everything but deletions)"""
    return "".join(op.text for op in ops if op.kind != DiffKind.DELETE)


def edit_distance(ops: Iterable[DiffOp]) -> int:
    """Number of inserted plus deleted characters in a script"""
    return sum(len(op.text) for op in ops if op.is_change)
