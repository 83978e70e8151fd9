# Makes the folder importable as a package.
# Exports the persona registry and the prompt assembler for convenience.

from .registry import PersonaRegistry
from .prompts import assemble, build_fallback_prompt
from .types import AssembledPrompt, ConversationRequest, Persona

__all__ = [
    "PersonaRegistry",
    "assemble",
    "build_fallback_prompt",
    "AssembledPrompt",
    "ConversationRequest",
    "Persona",
]
