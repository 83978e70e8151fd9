"""Request orchestration for ``POST /api/ask``.

Strict order per request: validate, extract attachments, look up the persona,
assemble the prompt, dispatch upstream (plus the optional fallback dispatch).
Nothing here knows about HTTP; :mod:`lexrelay.app` maps the outcome to a
response.
"""

from __future__ import annotations
import logging
from functools import partial
from typing import Optional, Sequence

from lexrelay.extract import UploadedFile, extract_text, extract_uploads, validate_uploads
from lexrelay.extract.uploads import Extractor
from lexrelay.generate import CompletionResult, Dispatcher, ErrorKind
from lexrelay.personas import ConversationRequest, PersonaRegistry, assemble
from lexrelay.personas.types import MODE_TOOLS

logger = logging.getLogger(__name__)


class InvalidRequest(ValueError):
    """The request cannot be processed as sent (e.g. empty query)."""


class AskPipeline:
    def __init__(
        self,
        registry: PersonaRegistry,
        dispatcher: Dispatcher,
        extractor: Optional[Extractor] = None,
        max_files: int = 10,
        max_bytes: int = 10 * 1024 * 1024,
        ocr_lang: str = "eng",
    ):
        self.registry = registry
        self.dispatcher = dispatcher
        self.extractor = extractor or partial(extract_text, ocr_lang=ocr_lang)
        self.max_files = max_files
        self.max_bytes = max_bytes

    def run(self, req: ConversationRequest, files: Sequence[UploadedFile] = ()) -> CompletionResult:
        if not req.query or not req.query.strip():
            raise InvalidRequest("Please enter a query.")
        validate_uploads(files, self.max_files, self.max_bytes)
        if not self.dispatcher.configured:
            logger.error("ask: no model client configured; skipping extraction and dispatch")
            return CompletionResult(error_kind=ErrorKind.PROVIDER_UNAVAILABLE)

        tool = (req.tool or "").strip()
        logger.info(
            "ask: tool=%s known=%s reasoning=%s context=%s files=%d",
            tool or "-",
            self.registry.is_known(tool) or tool in MODE_TOOLS,
            req.reasoning_enabled,
            bool(req.context),
            len(files),
        )

        extracted = ""
        if files and tool not in MODE_TOOLS:
            extracted = extract_uploads(files, self.extractor)

        prompt = assemble(req, self.registry, extracted)
        result = self.dispatcher.dispatch(prompt)
        if result.ok:
            logger.info("ask: answered mode=%s fallback=%s", prompt.mode, result.meta.get("fallback_used"))
        return result
