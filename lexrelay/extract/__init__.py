# Makes extract/ importable and exposes the document-to-text helpers.

from .extractor import ALLOWED_MIME_TYPES, ExtractionError, extract_text
from .uploads import UploadedFile, UploadLimitError, extract_uploads, validate_uploads

__all__ = [
    "ALLOWED_MIME_TYPES",
    "ExtractionError",
    "extract_text",
    "UploadedFile",
    "UploadLimitError",
    "extract_uploads",
    "validate_uploads",
]
