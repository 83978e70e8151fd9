# AI INSTRUCTION:
# Provide a Dispatcher class that:
# - accepts any model client (Gemini, Echo) exposing generate(prompt, params)
# - sends one assembled prompt upstream and returns a CompletionResult
# - re-asks once with a fallback prompt when the answer looks like a non-answer
# - maps provider failures on the first call to ProviderUnavailable

from __future__ import annotations
import logging
import re
from typing import Callable, Optional

from .types import CompletionResult, ErrorKind, ModelParams, ProviderError
from lexrelay.personas.prompts import build_fallback_prompt
from lexrelay.personas.types import AssembledPrompt

logger = logging.getLogger(__name__)

NO_ANSWER_TEXT = (
    "I'm sorry, I could not generate an answer to your question. "
    "Please try rephrasing it or adding more detail."
)

LOW_QUALITY_PATTERN = re.compile(
    r"i am ready|please provide|ready to assist|summarize|provide the case document|assist you",
    re.IGNORECASE,
)


def is_low_quality_answer(text: Optional[str]) -> bool:
    """True for empty answers and canned "send me more information" replies."""
    if not text or not text.strip():
        return True
    return bool(LOW_QUALITY_PATTERN.search(text))


class Dispatcher:
    def __init__(
        self,
        model_client,
        is_low_quality: Callable[[Optional[str]], bool] = is_low_quality_answer,
        params: Optional[ModelParams] = None,
    ):
        self.model_client = model_client
        self.is_low_quality = is_low_quality
        self.params = params or ModelParams()

    @property
    def configured(self) -> bool:
        return self.model_client is not None

    def dispatch(self, prompt: AssembledPrompt) -> CompletionResult:
        """Main entry point: one upstream call, plus at most one fallback call."""
        if self.model_client is None:
            logger.error("No model client configured; refusing to dispatch")
            return CompletionResult(error_kind=ErrorKind.PROVIDER_UNAVAILABLE)

        try:
            answer, meta = self.model_client.generate(prompt.text, self.params)
        except ProviderError as e:
            logger.warning("Upstream dispatch failed: %s", e)
            return CompletionResult(error_kind=ErrorKind.PROVIDER_UNAVAILABLE)

        meta = dict(meta or {}, fallback_used=False)
        if not self.is_low_quality(answer):
            return CompletionResult(answer_text=answer, meta=meta)

        logger.info("Low-quality answer (%d chars); issuing fallback dispatch", len(answer or ""))
        meta["fallback_used"] = True
        try:
            fallback, _ = self.model_client.generate(build_fallback_prompt(prompt.query), self.params)
        except ProviderError as e:
            logger.warning("Fallback dispatch failed: %s", e)
            fallback = ""

        if fallback and fallback.strip():
            return CompletionResult(answer_text=fallback, meta=meta)
        return CompletionResult(answer_text=NO_ANSWER_TEXT, meta=meta)
