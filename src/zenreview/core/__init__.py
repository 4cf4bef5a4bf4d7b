"""Core functionality for zenreview"""

from zenreview.core.config import load_config, save_config, create_config, config_exists
from zenreview.core.sidecar import load_review, save_review
from zenreview.core.stream_parser import parse_final, parse_partial
from zenreview.core.session import ReviewSession

__all__ = [
    "load_config",
    "save_config",
    "create_config",
    "config_exists",
    "load_review",
    "save_review",
    "parse_final",
    "parse_partial",
    "ReviewSession",
]
