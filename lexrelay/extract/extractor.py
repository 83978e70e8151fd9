# AI INSTRUCTION:
# Extract readable text from a single uploaded document on disk.
#
# Supported (by MIME type):
# - text/plain                                  (read as UTF-8)
# - application/pdf                             (pdfminer.six)
# - application/vnd...wordprocessingml.document (python-docx)
# - image/jpeg, image/png, image/gif, image/bmp (OCR via pytesseract + pillow)
#
# Any failure, including an empty result, raises ExtractionError.

from __future__ import annotations
from pathlib import Path
from typing import Union

PDF_MIME = "application/pdf"
DOCX_MIME = "application/vnd.openxmlformats-officedocument.wordprocessingml.document"
TEXT_MIME = "text/plain"
IMAGE_MIMES = {"image/jpeg", "image/png", "image/gif", "image/bmp"}

ALLOWED_MIME_TYPES = frozenset({PDF_MIME, DOCX_MIME, TEXT_MIME} | IMAGE_MIMES)


class ExtractionError(Exception):
    """The file could not be turned into text (unsupported, corrupt or empty)."""


def _read_text_file(p: Path) -> str:
    return p.read_text(encoding="utf-8", errors="ignore")

def _extract_pdf(p: Path) -> str:
    from pdfminer.high_level import extract_text
    return extract_text(str(p))

def _extract_docx(p: Path) -> str:
    from docx import Document  # python-docx
    doc = Document(str(p))
    parts = [para.text for para in doc.paragraphs]
    # tables (lightweight)
    for table in doc.tables:
        for row in table.rows:
            parts.append("\t".join(cell.text for cell in row.cells))
    return "\n".join(parts)

def _extract_image_ocr(p: Path, lang: str = "eng") -> str:
    # Requires: Tesseract binary installed on system
    import pytesseract
    from PIL import Image
    with Image.open(str(p)) as img:
        return pytesseract.image_to_string(img, lang=lang)


def extract_text(path: Union[str, Path], mime_type: str, ocr_lang: str = "eng") -> str:
    p = Path(path)
    mime = (mime_type or "").split(";", 1)[0].strip().lower()
    if mime not in ALLOWED_MIME_TYPES:
        raise ExtractionError(f"unsupported file type {mime or 'unknown'}")

    try:
        if mime == TEXT_MIME:
            text = _read_text_file(p)
        elif mime == PDF_MIME:
            text = _extract_pdf(p)
        elif mime == DOCX_MIME:
            text = _extract_docx(p)
        else:
            text = _extract_image_ocr(p, lang=ocr_lang)
    except Exception as e:
        raise ExtractionError(f"could not read {mime} file ({type(e).__name__})") from e

    text = (text or "").strip()
    if not text:
        raise ExtractionError("no readable text found")
    return text
