# AI INSTRUCTION:
# Turn a request's uploaded files into one ordered text block.
# - Validate count, size and MIME type before any extraction
# - Write each file into a per-request temp dir, removed on every exit path
# - One file failing never aborts the batch: it becomes a placeholder note

from __future__ import annotations
import logging
import os
import re
import tempfile
from dataclasses import dataclass
from typing import Callable, List, Sequence

from .extractor import ALLOWED_MIME_TYPES, ExtractionError, extract_text

logger = logging.getLogger(__name__)

Extractor = Callable[[str, str], str]

_UNSAFE_NAME = re.compile(r"[^0-9A-Za-z._-]+")


@dataclass
class UploadedFile:
    """One received file, held in memory until extraction."""
    original_name: str
    mime_type: str
    content: bytes

    @property
    def byte_size(self) -> int:
        return len(self.content)


class UploadLimitError(ValueError):
    """An upload batch breaks the transport limits (count, size or type)."""

    def __init__(self, message: str, status_code: int = 400):
        super().__init__(message)
        self.status_code = status_code


def validate_uploads(files: Sequence[UploadedFile], max_files: int, max_bytes: int) -> None:
    if len(files) > max_files:
        raise UploadLimitError(f"Too many files: at most {max_files} may be attached.", 400)
    for f in files:
        if f.byte_size > max_bytes:
            raise UploadLimitError(
                f"File '{f.original_name}' exceeds the {max_bytes // (1024 * 1024)} MB limit.", 413
            )
        mime = (f.mime_type or "").split(";", 1)[0].strip().lower()
        if mime not in ALLOWED_MIME_TYPES:
            raise UploadLimitError(f"File type not allowed for '{f.original_name}'.", 415)


def _safe_name(index: int, name: str) -> str:
    base = _UNSAFE_NAME.sub("_", os.path.basename(name or "")) or "upload"
    return f"{index:02d}_{base}"


def extract_uploads(files: Sequence[UploadedFile], extractor: Extractor = extract_text) -> str:
    """Extract every file in order and join the labelled results."""
    if not files:
        return ""

    blocks: List[str] = []
    with tempfile.TemporaryDirectory(prefix="lexrelay-") as tmp:
        for i, f in enumerate(files, start=1):
            label = f"[File {i}: {f.original_name}]"
            path = os.path.join(tmp, _safe_name(i, f.original_name))
            try:
                with open(path, "wb") as out:
                    out.write(f.content)
                text = extractor(path, f.mime_type)
                if not text or not text.strip():
                    raise ExtractionError("no readable text found")
                blocks.append(f"{label}\n{text.strip()}")
            except ExtractionError as e:
                logger.warning("Extraction failed for file %d (%s): %s", i, f.mime_type, e)
                blocks.append(f"{label}\n[Could not extract text: {e}]")
            except Exception as e:
                # class name only; messages may carry temp paths
                logger.warning("Extraction failed for file %d (%s): %s", i, f.mime_type, type(e).__name__)
                blocks.append(f"{label}\n[Could not extract text: could not read file ({type(e).__name__})]")
            finally:
                if os.path.exists(path):
                    os.remove(path)

    return "\n\n".join(blocks)
