"""Processing screen - shows the model output while it streams in"""

import asyncio
from pathlib import Path

from rich.markup import escape
from textual import work
from textual.app import ComposeResult
from textual.binding import Binding
from textual.containers import Vertical
from textual.screen import Screen
from textual.widgets import Footer, Static, TextArea

from zenreview.core.proofread_stream import StreamCommandError, StreamProgress, stream_proofread
from zenreview.core.sidecar import save_raw_output
from zenreview.core.stream_parser import MalformedResultError
from zenreview.models.config import ZenConfig
from zenreview.models.issue import ProofreadResult


class ProcessingScreen(Screen):
    """Screen showing the live partial result during generation."""

    CSS = """
    #progress-header {
        text-style: bold;
        padding: 1 2;
        background: $primary;
        color: $text;
    }

    #stream-status {
        padding: 0 2;
        color: $text-muted;
        height: 1;
    }

    #stream-container {
        height: 1fr;
        margin: 1 2;
        border: solid $secondary;
    }

    #stream-header {
        background: $surface-darken-1;
        padding: 0 1;
        text-style: bold;
    }

    #stream-output {
        height: 1fr;
        border: none;
    }

    #cancel-hint {
        padding: 0 2;
        color: $text-muted;
        text-align: center;
    }
    """

    BINDINGS = [
        Binding("escape", "cancel", "Cancel", show=True),
        Binding("r", "retry", "Retry", show=False),
    ]

    def __init__(self, source_file: Path, document: str, mode: str, config: ZenConfig):
        super().__init__()
        self.source_file = source_file
        self.document = document
        self.mode = mode
        self.config = config
        self._cancelled = False
        self._failed = False
        self._raw = ""

    def compose(self) -> ComposeResult:
        yield Static(f"[bold]Proofreading {escape(self.source_file.name)} ({self.mode})[/bold]", id="progress-header")
        yield Static("Starting...", id="stream-status")

        with Vertical(id="stream-container"):
            yield Static("[bold]Corrected text[/bold]", id="stream-header")
            yield TextArea(id="stream-output", read_only=True)

        yield Static("[dim]Press Escape to cancel[/dim]", id="cancel-hint")
        yield Footer()

    def on_mount(self) -> None:
        """Start the async processing worker"""
        self.run_processing()

    @work(thread=True)
    def run_processing(self) -> None:
        """Run the model command in a background thread with its own event loop"""
        loop = asyncio.new_event_loop()
        asyncio.set_event_loop(loop)

        try:
            result = loop.run_until_complete(
                stream_proofread(self.document, self.mode, self.config, self._on_progress)
            )
        except (StreamCommandError, MalformedResultError) as e:
            if not self._cancelled:
                self.app.call_from_thread(self._processing_failed, str(e))
            return
        finally:
            loop.close()

        # Signal completion
        if not self._cancelled:
            self.app.call_from_thread(self._processing_complete, result)

    def _on_progress(self, progress: StreamProgress) -> None:
        """Handle progress updates from the streaming worker"""
        if self._cancelled:
            return
        self._raw = progress.raw_text
        self.app.call_from_thread(self._update_ui, progress)

    def _update_ui(self, progress: StreamProgress) -> None:
        """Update UI elements with progress (called on main thread)"""
        status = self.query_one("#stream-status", Static)
        issues = len(progress.partial.issues)
        if progress.status == "starting":
            status.update("[dim](starting...)[/dim]")
        elif progress.status == "streaming":
            status.update(f"[cyan](receiving...)[/cyan]  {issues} issue(s) so far")
        elif progress.status == "complete":
            status.update(f"[green](complete)[/green]  {issues} issue(s)")
        elif progress.status == "error":
            status.update("[red](error)[/red]")

        corrected = progress.partial.corrected_text
        if corrected is not None:
            stream_output = self.query_one("#stream-output", TextArea)
            stream_output.text = corrected
            # Auto-scroll to bottom
            stream_output.scroll_end(animate=False)

    def _processing_failed(self, message: str) -> None:
        self._failed = True
        self.query_one("#stream-status", Static).update(f"[red]Failed:[/red] {escape(message)}")
        self.query_one("#cancel-hint", Static).update("[dim]Press r to retry, Escape to cancel[/dim]")

    def _processing_complete(self, result: ProofreadResult) -> None:
        """Keep the raw output and transition to the review screen"""
        save_raw_output(self.source_file, self._raw)
        self.app.start_review(result)

    def action_retry(self) -> None:
        if not self._failed:
            return
        self._failed = False
        self.query_one("#stream-output", TextArea).text = ""
        self.query_one("#cancel-hint", Static).update("[dim]Press Escape to cancel[/dim]")
        self.run_processing()

    def action_cancel(self) -> None:
        """Cancel processing"""
        self._cancelled = True
        self.app.exit(message="Proofreading cancelled")
