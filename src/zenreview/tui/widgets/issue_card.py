"""Issue card - one entry in the issue list pane"""

from textual import events
from textual.widgets import Static

from zenreview.models.issue import Issue
from zenreview.tui.render import issue_card_markup


class IssueCard(Static):
    """Card for a single issue. Clicking it selects the issue."""

    DEFAULT_CSS = """
    IssueCard {
        padding: 0 1;
        margin-bottom: 1;
        border-left: tall $secondary;
    }

    IssueCard.selected {
        border-left: tall $warning;
        background: $warning 15%;
    }
    """

    def __init__(self, issue: Issue):
        super().__init__(id=f"issue-card-{issue.index}")
        self.issue = issue
        self.number = issue.index + 1

    def refresh_card(self, number: int, selected: bool) -> None:
        self.number = number
        self.set_class(selected, "selected")
        self.update(issue_card_markup(number, self.issue, selected))

    def on_click(self, event: events.Click) -> None:
        event.stop()
        self.screen.select_from_list(self.issue.index)
