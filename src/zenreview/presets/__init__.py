"""Check mode presets"""

from zenreview.presets.modes import (
    CHECK_MODES,
    TONES,
    build_system_prompt,
    get_mode_by_id,
)

__all__ = ["CHECK_MODES", "TONES", "build_system_prompt", "get_mode_by_id"]
