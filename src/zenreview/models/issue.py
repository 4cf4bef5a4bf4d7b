"""Issue model - a single flagged problem and where it sits in the document"""

from enum import Enum
from typing import List, Literal, Optional, Union

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, model_validator


class IssueCategory(str, Enum):
    """Categories the proofreading model may assign to an issue"""
    TYPO = "typo"
    GRAMMAR = "grammar"
    PUNCTUATION = "punctuation"
    STYLE = "style"
    SUGGESTION = "suggestion"
    SENSITIVE = "sensitive"
    PRIVACY = "privacy"
    FORMAT = "format"


CATEGORY_LABELS = {
    IssueCategory.SENSITIVE: "敏感/合规",
    IssueCategory.PRIVACY: "隐私安全",
    IssueCategory.FORMAT: "格式/字体",
    IssueCategory.TYPO: "错别字",
    IssueCategory.GRAMMAR: "语病",
    IssueCategory.PUNCTUATION: "标点",
    IssueCategory.STYLE: "风格",
    IssueCategory.SUGGESTION: "建议",
}

ALL_CATEGORIES = "all"

IssueFilter = Union[Literal["all"], IssueCategory]


def matches_filter(category: IssueCategory, active_filter: Optional[IssueFilter]) -> bool:
    """Check whether an issue category is visible under the active filter.

    The style filter also covers suggestions.
    """
    if active_filter is None or active_filter == ALL_CATEGORIES:
        return True
    wanted = IssueCategory(active_filter)
    if wanted == IssueCategory.STYLE:
        return category in (IssueCategory.STYLE, IssueCategory.SUGGESTION)
    return category == wanted


class Issue(BaseModel):
    """A flagged snippet with its suggested replacement"""

    model_config = ConfigDict(populate_by_name=True)

    original: str
    suggestion: str
    reason: str = ""
    category: IssueCategory = Field(
        ..., validation_alias=AliasChoices("category", "type")
    )

    # Position in the issue sequence; the identity key for dispositions
    index: Optional[int] = None

    @property
    def label(self) -> str:
        """Display label for the category"""
        return CATEGORY_LABELS.get(self.category, self.category.value)

    @property
    def display_name(self) -> str:
        """Short one-line preview for lists"""
        return f"{self.original} -> {self.suggestion}".replace("\n", " ")


class ProofreadResult(BaseModel):
    """Complete structured result returned by the proofreading model"""

    model_config = ConfigDict(populate_by_name=True)

    corrected_text: str = Field(
        ..., validation_alias=AliasChoices("correctedText", "corrected_text")
    )
    issues: List[Issue] = Field(default_factory=list)
    summary: str = ""
    score: float = 0

    @model_validator(mode="after")
    def _assign_indices(self) -> "ProofreadResult":
        for i, issue in enumerate(self.issues):
            issue.index = i
        return self


class PartialResult(BaseModel):
    """Best-effort record recovered from an incomplete stream.

    Scalar fields stay None until recoverable; ``issues`` holds whatever
    complete issue objects have arrived so far.
    """
    corrected_text: Optional[str] = None
    issues: List[Issue] = Field(default_factory=list)
    summary: Optional[str] = None
    score: Optional[float] = None


UNLOCATED = -1


class IssueLocation(BaseModel):
    """Character range of an issue in original-text coordinates.

    ``start == end == -1`` means the issue could not be placed. The
    corrected range marks where the suggestion sits in the model's
    corrected text, and is -1 when unknown.
    """
    issue_index: int
    start: int = UNLOCATED
    end: int = UNLOCATED
    corrected_start: int = UNLOCATED
    corrected_end: int = UNLOCATED

    @property
    def located(self) -> bool:
        return self.start != UNLOCATED

    @property
    def placed_in_corrected(self) -> bool:
        return self.corrected_start != UNLOCATED


class Disposition(str, Enum):
    """User decision on an issue; anything but pending is terminal"""
    PENDING = "pending"
    ACCEPTED = "accepted"
    IGNORED = "ignored"
    WHITELISTED = "whitelisted"


class IssueAction(str, Enum):
    """Actions the user can take on a pending issue"""
    ACCEPT = "accept"
    IGNORE = "ignore"
    WHITELIST = "whitelist"

    @property
    def disposition(self) -> Disposition:
        return {
            IssueAction.ACCEPT: Disposition.ACCEPTED,
            IssueAction.IGNORE: Disposition.IGNORED,
            IssueAction.WHITELIST: Disposition.WHITELISTED,
        }[self]
