"""Selection model - the single highlighted issue shared by both review panes"""

from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict


class SelectionSource(str, Enum):
    """Which pane claimed the current selection"""
    DOCUMENT = "document"
    ISSUE_LIST = "issueList"


class ViewMode(str, Enum):
    """Document pane rendering mode"""
    CLEAN = "clean"          # Reading view, unrelated deletions hidden
    ANNOTATED = "annotated"  # Revision view, every deletion marked


class Selection(BaseModel):
    """Currently selected issue.

    ``source`` stops a scroll-driven selection from scrolling the pane
    that produced it.
    """

    model_config = ConfigDict(frozen=True)

    issue_index: Optional[int] = None
    source: Optional[SelectionSource] = None

    @property
    def is_empty(self) -> bool:
        return self.issue_index is None


NO_SELECTION = Selection()
