"""Review screen - document pane and issue list kept in scroll sync"""

from typing import Dict, List, Optional

from rich.markup import escape
from textual.app import ComposeResult
from textual.binding import Binding
from textual.containers import Horizontal, Vertical, VerticalScroll
from textual.screen import Screen
from textual.widgets import Footer, Static

from zenreview.core.scroll_sync import ElementBox, ScrollSyncCoordinator
from zenreview.core.session import ReviewSession
from zenreview.models.issue import ALL_CATEGORIES, CATEGORY_LABELS, IssueAction, IssueCategory
from zenreview.models.selection import Selection, SelectionSource, ViewMode
from zenreview.tui.render import Paragraph, build_paragraphs
from zenreview.tui.widgets.issue_card import IssueCard

# Filter buttons; the style filter also covers suggestions
FILTER_ORDER = [ALL_CATEGORIES] + [c for c in IssueCategory if c != IssueCategory.SUGGESTION]


class DocumentParagraph(Static):
    """One line of the rendered document"""

    DEFAULT_CSS = """
    DocumentParagraph {
        padding: 0 1;
    }
    """

    def __init__(self, paragraph: Paragraph):
        super().__init__(paragraph.markup or " ")
        self.issue_indices = paragraph.issue_indices

    def set_paragraph(self, paragraph: Paragraph) -> None:
        self.issue_indices = paragraph.issue_indices
        self.update(paragraph.markup or " ")


class ReviewScreen(Screen):
    """Two-pane review of a proofreading result.

    - Left: the document with changes drawn inline
    - Right: cards for every unresolved issue under the active filter
    - Scrolling either pane selects the issue nearest its center
    """

    CSS = """
    #header {
        text-style: bold;
        padding: 0 2;
        background: $primary;
        color: $text;
    }

    #filter-bar {
        padding: 0 2;
        background: $surface-darken-1;
    }

    #main-container {
        height: 1fr;
    }

    #document-panel {
        width: 65%;
        border: solid $secondary;
    }

    #issue-panel {
        width: 35%;
        border: solid $accent;
        margin-left: 1;
    }

    .panel-title {
        background: $surface-darken-1;
        padding: 0 1;
        text-align: center;
        text-style: bold;
    }

    #document-view, #issue-list {
        height: 1fr;
    }

    #status-bar {
        padding: 0 2;
        color: $text-muted;
    }
    """

    BINDINGS = [
        Binding("n", "next_issue", "Next"),
        Binding("p", "prev_issue", "Previous"),
        Binding("a", "accept", "Accept"),
        Binding("i", "ignore", "Ignore"),
        Binding("w", "whitelist", "Whitelist"),
        Binding("A", "accept_all", "Accept all", show=False),
        Binding("I", "ignore_all", "Ignore all", show=False),
        Binding("f", "cycle_filter", "Filter"),
        Binding("v", "toggle_view", "View"),
        Binding("s", "save", "Save"),
        Binding("e", "export", "Export"),
        Binding("q", "quit_review", "Quit"),
    ]

    def __init__(self, session: ReviewSession, coordinator: Optional[ScrollSyncCoordinator] = None):
        super().__init__()
        self.session = session
        self.coordinator = coordinator or ScrollSyncCoordinator()
        self._cards: Dict[int, IssueCard] = {}
        self._deferred = set()

    def compose(self) -> ComposeResult:
        yield Static(id="header")
        yield Static(id="filter-bar")

        with Horizontal(id="main-container"):
            with Vertical(id="document-panel"):
                yield Static("[bold]DOCUMENT[/bold]", id="document-title", classes="panel-title")
                yield VerticalScroll(id="document-view")

            with Vertical(id="issue-panel"):
                yield Static("[bold]ISSUES[/bold]", classes="panel-title")
                with VerticalScroll(id="issue-list"):
                    for issue in self.session.issues:
                        card = IssueCard(issue)
                        self._cards[issue.index] = card
                        yield card

        yield Static(id="status-bar")
        yield Footer()

    async def on_mount(self) -> None:
        await self._refresh_document()
        self._refresh_issue_list()
        self._update_bars()

        document = self.query_one("#document-view", VerticalScroll)
        issue_list = self.query_one("#issue-list", VerticalScroll)
        self.watch(document, "scroll_y", lambda _: self._handle_scroll(SelectionSource.DOCUMENT), init=False)
        self.watch(issue_list, "scroll_y", lambda _: self._handle_scroll(SelectionSource.ISSUE_LIST), init=False)

    # ========== Rendering ==========

    async def _refresh_document(self) -> None:
        """Redraw the document pane, reusing paragraph widgets where possible"""
        view = self.query_one("#document-view", VerticalScroll)
        paragraphs = build_paragraphs(
            self.session.display_segments(), self.session.issues, self.session.view_mode
        )
        existing = list(view.query(DocumentParagraph))

        if len(existing) == len(paragraphs):
            for widget, paragraph in zip(existing, paragraphs):
                widget.set_paragraph(paragraph)
        else:
            await view.remove_children()
            await view.mount_all([DocumentParagraph(p) for p in paragraphs])

    def _refresh_issue_list(self) -> None:
        """Show cards for visible issues only, numbered in display order"""
        visible = {issue.index for issue in self.session.visible_issues()}
        selected = self.session.selection.issue_index
        number = 0
        for index, card in self._cards.items():
            card.display = index in visible
            if index in visible:
                number += 1
                card.refresh_card(number, index == selected)

    def _update_bars(self) -> None:
        header = self.query_one("#header", Static)
        resolved, total = self.session.state.get_review_progress()
        mode = "annotated" if self.session.view_mode == ViewMode.ANNOTATED else "clean"
        header.update(
            f"[bold]zenreview[/bold]  |  {escape(self.session.state.source_file or 'untitled')}"
            f"  |  score {self.session.state.score:g}  |  {resolved}/{total} resolved  |  {mode} view"
        )

        counts = self.session.counts()
        parts = []
        for key in FILTER_ORDER:
            name = "全部" if key == ALL_CATEGORIES else CATEGORY_LABELS[key]
            value = key if key == ALL_CATEGORIES else key.value
            label = f" {name} {counts[value]} "
            if key == self.session.active_filter:
                label = f"[reverse]{label}[/reverse]"
            parts.append(label)
        self.query_one("#filter-bar", Static).update("".join(parts))

        status = self.query_one("#status-bar", Static)
        summary = self.session.state.summary
        status.update(f"[dim]{escape(summary)}[/dim]" if summary else "")

    async def _refresh_all(self) -> None:
        await self._refresh_document()
        self._refresh_issue_list()
        self._update_bars()

    # ========== Selection ==========

    def _paragraph_for(self, issue_index: int) -> Optional[DocumentParagraph]:
        for widget in self.query_one("#document-view").query(DocumentParagraph):
            if issue_index in widget.issue_indices:
                return widget
        return None

    def _boxes(self, source: SelectionSource) -> List[ElementBox]:
        """Boxes of the issue-bearing elements in a pane"""
        boxes = []
        if source == SelectionSource.DOCUMENT:
            for widget in self.query_one("#document-view").query(DocumentParagraph):
                region = widget.virtual_region
                for index in widget.issue_indices:
                    boxes.append(ElementBox(index, region.y, region.height))
        else:
            for index, card in self._cards.items():
                if card.display:
                    region = card.virtual_region
                    boxes.append(ElementBox(index, region.y, region.height))
        return boxes

    def _scroll_to_selection(self, selection: Selection, views: List[SelectionSource]) -> None:
        """Smooth-scroll the given panes to the selected issue under the sync lock"""
        if selection.issue_index is None or not views:
            return
        with self.coordinator.auto_scroll():
            for view in views:
                if view == SelectionSource.DOCUMENT:
                    target = self._paragraph_for(selection.issue_index)
                    container = self.query_one("#document-view", VerticalScroll)
                else:
                    target = self._cards.get(selection.issue_index)
                    container = self.query_one("#issue-list", VerticalScroll)
                if target is not None and target.display:
                    container.scroll_to_center(target, animate=True)

    async def _apply_selection(self, selection: Selection, views: List[SelectionSource]) -> None:
        self.session.select(selection.issue_index, selection.source)
        await self._refresh_all()
        self._scroll_to_selection(selection, views)

    async def action_select_issue(self, issue_index: int) -> None:
        """Click on an issue inside the document"""
        selection = self.coordinator.select(issue_index, SelectionSource.DOCUMENT, toggle=True)
        await self._apply_selection(selection, self.coordinator.views_to_scroll(selection))

    def select_from_list(self, issue_index: int) -> None:
        """Click on an issue card"""
        selection = self.coordinator.select(issue_index, SelectionSource.ISSUE_LIST, toggle=True)
        self.run_worker(self._apply_selection(selection, self.coordinator.views_to_scroll(selection)))

    def _handle_scroll(self, source: SelectionSource) -> None:
        top, height = self._viewport(source)
        selection = self.coordinator.on_scroll(source, self._boxes(source), top, height)
        if selection is not None:
            self.run_worker(self._apply_selection(selection, self.coordinator.views_to_scroll(selection)))
            return

        delay = self.coordinator.pending_delay(source)
        if delay is not None and source not in self._deferred:
            self._deferred.add(source)
            self.set_timer(delay, lambda: self._flush_scroll(source))

    def _flush_scroll(self, source: SelectionSource) -> None:
        self._deferred.discard(source)
        self._handle_scroll(source)

    def _viewport(self, source: SelectionSource):
        view_id = "#document-view" if source == SelectionSource.DOCUMENT else "#issue-list"
        view = self.query_one(view_id, VerticalScroll)
        return view.scroll_y, view.scrollable_content_region.height

    async def _step(self, delta: int) -> None:
        selection = self.session.step_selection(delta, SelectionSource.ISSUE_LIST)
        self.coordinator.selection = selection
        await self._apply_selection(selection, [SelectionSource.DOCUMENT, SelectionSource.ISSUE_LIST])

    async def action_next_issue(self) -> None:
        await self._step(1)

    async def action_prev_issue(self) -> None:
        await self._step(-1)

    # ========== Actions ==========

    async def _act(self, action: IssueAction) -> None:
        index = self.session.selection.issue_index
        if index is None:
            self.notify("No issue selected", severity="warning")
            return
        outcome = self.session.act(index, action)
        if outcome.changed:
            self.notify(f"Issue {index + 1} {outcome.disposition[index].value}")
        self.coordinator.selection = self.session.selection
        await self._refresh_all()

    async def action_accept(self) -> None:
        await self._act(IssueAction.ACCEPT)

    async def action_ignore(self) -> None:
        await self._act(IssueAction.IGNORE)

    async def action_whitelist(self) -> None:
        await self._act(IssueAction.WHITELIST)

    async def _act_all(self, action: IssueAction) -> None:
        outcome = self.session.act_on_visible(action)
        self.notify(f"{len(outcome.changed)} issue(s) {action.disposition.value}")
        self.coordinator.selection = self.session.selection
        await self._refresh_all()

    async def action_accept_all(self) -> None:
        await self._act_all(IssueAction.ACCEPT)

    async def action_ignore_all(self) -> None:
        await self._act_all(IssueAction.IGNORE)

    async def action_cycle_filter(self) -> None:
        current = FILTER_ORDER.index(self.session.active_filter)
        self.session.set_filter(FILTER_ORDER[(current + 1) % len(FILTER_ORDER)])
        self.coordinator.reset()
        await self._refresh_all()

    async def action_toggle_view(self) -> None:
        self.session.toggle_view_mode()
        await self._refresh_all()

    def action_save(self) -> None:
        path = self.app.save_review_state(self.session.state)
        self.notify(f"Saved to {path.name}")

    def action_export(self) -> None:
        path = self.app.export_report(self.session)
        self.notify(f"Report written to {path.name}")

    def action_quit_review(self) -> None:
        resolved, total = self.session.state.get_review_progress()
        self.app.exit(message=f"Review paused. Resolved: {resolved}/{total}")
