# AI INSTRUCTION:
# Define data models for the persona layer.
# These types represent a selectable persona and the inputs/outputs of prompt assembly.

from __future__ import annotations
from dataclasses import dataclass
from typing import Optional

OPTIMIZER_TOOL = "optimizer"
FOLLOWUP_TOOL = "followup"
MODE_TOOLS = (OPTIMIZER_TOOL, FOLLOWUP_TOOL)


@dataclass(frozen=True)
class Persona:
    """A fixed instruction block establishing the model's role for one tool."""
    key: str
    name: str
    text: str
    description: str = ""


@dataclass
class ConversationRequest:
    """One inbound question, as accepted by the request handler."""
    query: str
    tool: Optional[str] = None
    context: Optional[str] = None
    reasoning_enabled: bool = False


@dataclass(frozen=True)
class AssembledPrompt:
    """Prompt text sent upstream, plus the original query for the fallback path."""
    text: str
    query: str
    mode: str = "persona"  # persona | optimizer | followup
