"""Data models for zenreview"""

from zenreview.models.config import ZenConfig
from zenreview.models.issue import (
    ALL_CATEGORIES,
    CATEGORY_LABELS,
    UNLOCATED,
    Disposition,
    Issue,
    IssueAction,
    IssueCategory,
    IssueFilter,
    IssueLocation,
    PartialResult,
    ProofreadResult,
    matches_filter,
)
from zenreview.models.mode import CheckModePreset
from zenreview.models.review import ReviewState
from zenreview.models.selection import NO_SELECTION, Selection, SelectionSource, ViewMode

__all__ = [
    "ALL_CATEGORIES",
    "CATEGORY_LABELS",
    "UNLOCATED",
    "CheckModePreset",
    "Disposition",
    "Issue",
    "IssueAction",
    "IssueCategory",
    "IssueFilter",
    "IssueLocation",
    "NO_SELECTION",
    "PartialResult",
    "ProofreadResult",
    "ReviewState",
    "Selection",
    "SelectionSource",
    "ViewMode",
    "ZenConfig",
    "matches_filter",
]
