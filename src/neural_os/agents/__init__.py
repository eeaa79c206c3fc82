"""Model-facing agents: prompt construction and response handling."""

from .architect import Architect
from .prompt import RESPONSE_SCHEMA, SYSTEM_PROMPT, get_build_prompt

__all__ = ["Architect", "RESPONSE_SCHEMA", "SYSTEM_PROMPT", "get_build_prompt"]
