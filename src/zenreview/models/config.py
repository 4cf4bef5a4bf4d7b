"""Config model for zenreview"""

from typing import List

from pydantic import BaseModel, Field, field_validator

from zenreview.models.selection import ViewMode


class ZenConfig(BaseModel):
    """Configuration for zenreview - stored in .zenreview/config.yaml"""

    whitelist: List[str] = Field(default_factory=list)
    sensitive_words: List[str] = Field(default_factory=list)
    custom_rules: List[str] = Field(default_factory=list)

    default_mode: str = "fast"
    command: List[str] = Field(default_factory=lambda: ["claude", "--print"])

    scroll_throttle_ms: int = 200
    auto_scroll_lock_ms: int = 800
    view_mode: ViewMode = ViewMode.CLEAN

    @field_validator("whitelist", "sensitive_words", "custom_rules")
    @classmethod
    def clean_words(cls, v: List[str]) -> List[str]:
        """Strip entries, drop blanks and duplicates, keep order"""
        seen = []
        for word in v:
            word = word.strip()
            if word and word not in seen:
                seen.append(word)
        return seen

    @field_validator("command")
    @classmethod
    def validate_command(cls, v: List[str]) -> List[str]:
        if not v:
            raise ValueError("command must name an executable")
        return v

    @field_validator("scroll_throttle_ms")
    @classmethod
    def validate_throttle(cls, v: int) -> int:
        if not 50 <= v <= 1000:
            raise ValueError(f"scroll_throttle_ms must be between 50 and 1000, got: {v}")
        return v

    @field_validator("auto_scroll_lock_ms")
    @classmethod
    def validate_lock(cls, v: int) -> int:
        if v <= 0:
            raise ValueError(f"auto_scroll_lock_ms must be positive, got: {v}")
        return v

    @property
    def scroll_throttle(self) -> float:
        """Throttle interval in seconds"""
        return self.scroll_throttle_ms / 1000

    @property
    def auto_scroll_lock(self) -> float:
        """Re-entrancy lock duration in seconds"""
        return self.auto_scroll_lock_ms / 1000
