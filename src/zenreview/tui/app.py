"""Main Textual application for zenreview"""

import logging
from pathlib import Path
from typing import Optional

from textual.app import App
from textual.binding import Binding

from zenreview.core.config import add_to_whitelist
from zenreview.core.issue_state import new_review_state
from zenreview.core.report import save_export
from zenreview.core.scroll_sync import ScrollSyncCoordinator
from zenreview.core.session import ReviewSession
from zenreview.core.sidecar import compute_file_hash, save_review
from zenreview.models.config import ZenConfig
from zenreview.models.issue import ProofreadResult
from zenreview.models.review import ReviewState
from zenreview.tui.screens.processing import ProcessingScreen
from zenreview.tui.screens.review import ReviewScreen

logger = logging.getLogger(__name__)


class ZenReviewApp(App):
    """Main zenreview TUI application.

    Starts on the processing screen when no review exists yet, otherwise
    goes straight to the review screen.
    """

    TITLE = "zenreview - Chinese proofreading review"
    CSS = """
    Screen {
        background: $surface;
    }

    Footer {
        background: $surface-darken-1;
    }
    """

    BINDINGS = [
        Binding("ctrl+s", "save", "Save", show=False),
    ]

    def __init__(
        self,
        source_file: Path,
        config: ZenConfig,
        state: Optional[ReviewState] = None,
        mode: Optional[str] = None,
        persist_whitelist: bool = True,
    ):
        super().__init__()
        self.source_file = source_file
        self.config = config
        self.state = state
        self.mode = mode or config.default_mode
        self.persist_whitelist = persist_whitelist
        self.session: Optional[ReviewSession] = None
        self.source_content = source_file.read_text(encoding="utf-8")

    def on_mount(self) -> None:
        if self.state is None:
            self.push_screen(ProcessingScreen(self.source_file, self.source_content, self.mode, self.config))
        else:
            self._push_review(self.state)

    def _push_review(self, state: ReviewState) -> None:
        self.session = ReviewSession(
            state,
            on_whitelist=self._whitelist_word,
            view_mode=self.config.view_mode,
        )
        coordinator = ScrollSyncCoordinator(
            throttle_interval=self.config.scroll_throttle,
            lock_duration=self.config.auto_scroll_lock,
        )
        self.push_screen(ReviewScreen(self.session, coordinator))

    def start_review(self, result: ProofreadResult) -> None:
        """Switch from processing to review once the result is complete"""
        state = new_review_state(
            self.source_content,
            result,
            source_file=str(self.source_file),
            source_hash=compute_file_hash(self.source_file),
        )
        self.pop_screen()
        self._push_review(state)

    def _whitelist_word(self, word: str) -> None:
        if word not in self.config.whitelist:
            self.config.whitelist.append(word)
        if self.persist_whitelist:
            add_to_whitelist(word)
            logger.info("Whitelisted %r", word)

    def save_review_state(self, state: ReviewState) -> Path:
        """Save the review to its sidecar file"""
        return save_review(self.source_file, state)

    def export_report(self, session: ReviewSession) -> Path:
        """Write the markdown report next to the source file"""
        return save_export(session.report(), self.source_file, "md")

    def action_save(self) -> None:
        if self.session is not None:
            path = self.save_review_state(self.session.state)
            self.notify(f"Saved to {path.name}")
