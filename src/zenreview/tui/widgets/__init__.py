"""Custom widgets for the zenreview TUI"""

from zenreview.tui.widgets.issue_card import IssueCard

__all__ = ["IssueCard"]
