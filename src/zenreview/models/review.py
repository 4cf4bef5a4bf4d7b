"""Review state model - everything needed to rebuild a review session"""

from datetime import datetime
from typing import Dict, List, Set

from pydantic import BaseModel, Field

from zenreview.models.issue import Disposition, Issue, IssueLocation


class ReviewState(BaseModel):
    """Immutable-by-convention snapshot of one review.

    ``current`` text is never stored: it is derived from ``corrected`` and
    the ignored/whitelisted issues. ``history`` lists issue indices in the
    order they were resolved and is append-only.
    """

    version: str = "1.0"
    source_file: str = ""
    source_hash: str = ""
    created_at: datetime = Field(default_factory=datetime.now)
    modified_at: datetime = Field(default_factory=datetime.now)

    original: str
    corrected: str
    issues: List[Issue] = Field(default_factory=list)
    locations: List[IssueLocation] = Field(default_factory=list)
    summary: str = ""
    score: float = 0

    disposition: Dict[int, Disposition] = Field(default_factory=dict)
    history: List[int] = Field(default_factory=list)

    def disposition_of(self, issue_index: int) -> Disposition:
        """Get the disposition of an issue (pending when untouched)"""
        return self.disposition.get(issue_index, Disposition.PENDING)

    def is_resolved(self, issue_index: int) -> bool:
        return self.disposition_of(issue_index) != Disposition.PENDING

    def resolved_indices(self) -> Set[int]:
        """Indices of every issue that is no longer pending"""
        return {i for i, d in self.disposition.items() if d != Disposition.PENDING}

    def get_review_progress(self) -> tuple:
        """Get (resolved_count, total_count)"""
        return (len(self.resolved_indices()), len(self.issues))
