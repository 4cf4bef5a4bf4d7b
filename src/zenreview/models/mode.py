"""Check mode model - proofreading instruction presets"""

from typing import Optional
from pydantic import BaseModel


class CheckModePreset(BaseModel):
    """A reusable proofreading instruction template"""
    id: str
    name: str
    description: str
    prompt_template: str

    def render(self, tone: Optional[str] = None) -> str:
        """Render the instruction, filling in the polishing tone if used"""
        if "{tone}" in self.prompt_template:
            return self.prompt_template.replace("{tone}", tone or "优美流畅")
        return self.prompt_template
