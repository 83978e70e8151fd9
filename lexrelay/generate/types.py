# AI INSTRUCTION:
# Define simple, typed dataclasses shared across generator modules.

from __future__ import annotations
from dataclasses import dataclass, field
from enum import Enum
from typing import Optional, Dict, Any


class ProviderError(Exception):
    """Upstream call failed: timeout, transport error, bad status or malformed body.

    Messages are built by the clients and must not carry the upstream URL,
    credentials or response body.
    """


class ErrorKind(str, Enum):
    PROVIDER_UNAVAILABLE = "ProviderUnavailable"


@dataclass
class ModelParams:
    """LLM parameters per request."""
    temperature: Optional[float] = None
    max_tokens: Optional[int] = None


@dataclass
class CompletionResult:
    """Either an answer or an error kind, never both."""
    answer_text: Optional[str] = None
    error_kind: Optional[ErrorKind] = None
    meta: Dict[str, Any] = field(default_factory=dict)

    def __post_init__(self):
        if (self.answer_text is None) == (self.error_kind is None):
            raise ValueError("CompletionResult needs exactly one of answer_text or error_kind")

    @property
    def ok(self) -> bool:
        return self.error_kind is None
