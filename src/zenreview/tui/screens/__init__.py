"""TUI screens for zenreview"""

from zenreview.tui.screens.processing import ProcessingScreen
from zenreview.tui.screens.review import ReviewScreen

__all__ = ["ProcessingScreen", "ReviewScreen"]
