"""
Artifact: syllabus_ingest/services/document_text_service.py
Purpose: Converts an uploaded syllabus document (PDF, DOCX, TXT) into one normalized text string.
Created: 2026-10-12
Revised:
- 2026-10-12: Added page-aware PDF extraction with text normalization.
- 2026-10-13: Added DOCX paragraph/table extraction and charset-aware TXT decoding.
- 2026-10-15: Added size guard and optional OCR fallback for image-only PDF pages.
- 2026-10-17: Kept DOCX tables in place between the paragraphs around them.
Preconditions:
- PyMuPDF and python-docx are installed; OCR additionally needs a tesseract binary.
Inputs:
- Acceptable: UploadedDocument with a .pdf, .docx or .txt filename (any case).
- Unacceptable: Other extensions, zero-byte or oversized content, encrypted/corrupted files.
Postconditions:
- Returns non-empty text with pages/paragraphs in document order.
Returns:
- Extracted text string.
Errors/Exceptions:
- UnsupportedFormat, DocumentTooLarge, CorruptDocument, EmptyContent.
"""

import codecs
import io
import os
import re
from dataclasses import dataclass
from typing import Callable, Dict, Optional

import docx
import fitz
import pytesseract
from docx.table import Table
from PIL import Image, ImageOps

from ..core.config import settings
from ..core.errors import CorruptDocument, DocumentTooLarge, EmptyContent, UnsupportedFormat
from ..core.logging import get_logger
from ..schemas.drafts import UploadedDocument

logger = get_logger("syllabus.extract")

MIN_NATIVE_TEXT_CHARS = 48
MIN_NATIVE_WORDS = 8
MIN_ALNUM_RATIO = 0.45
MAX_SYMBOL_RATIO = 0.40

OCR_RENDER_DPI = 240
OCR_TESSERACT_CONFIG = "--oem 3 --psm 6"

_BOMS = (
    (codecs.BOM_UTF32_LE, "utf-32"),
    (codecs.BOM_UTF32_BE, "utf-32"),
    (codecs.BOM_UTF8, "utf-8-sig"),
    (codecs.BOM_UTF16_LE, "utf-16"),
    (codecs.BOM_UTF16_BE, "utf-16"),
)
_CHARSET_RE = re.compile(r"charset\s*=\s*\"?([\w.:-]+)\"?", re.IGNORECASE)


@dataclass
class ExtractedPage:
    number: int
    method: str
    text: str


def _compute_text_quality(text: str) -> dict:
    """Return lightweight metrics used to decide native extraction quality."""
    compact = "".join(ch for ch in (text or "") if not ch.isspace())
    chars = len(compact)
    alnum = sum(ch.isalnum() for ch in compact)
    symbols = sum(not ch.isalnum() for ch in compact)
    words = re.findall(r"[A-Za-z0-9]{2,}", text or "")
    return {
        "chars": chars,
        "words": len(words),
        "alnum_ratio": (alnum / chars) if chars else 0.0,
        "symbol_ratio": (symbols / chars) if chars else 1.0,
    }


def _should_ocr_page(native_text: str) -> bool:
    """Decide if a page should use OCR instead of native extraction."""
    metrics = _compute_text_quality(native_text)
    if metrics["chars"] < MIN_NATIVE_TEXT_CHARS:
        return True
    if metrics["words"] < MIN_NATIVE_WORDS:
        return True
    if metrics["alnum_ratio"] < MIN_ALNUM_RATIO:
        return True
    if metrics["symbol_ratio"] > MAX_SYMBOL_RATIO:
        return True
    return False


def _normalize_page_text(text: str) -> str:
    """Normalize line endings and wrapping artifacts without merging table rows."""
    if not text:
        return ""
    normalized = text.replace("\r\n", "\n").replace("\r", "\n").replace("\u00a0", " ")
    # Words broken by PDF line wrapping, e.g. "assign-\nment".
    normalized = re.sub(r"(?<=\w)-\n(?=\w)", "", normalized)
    normalized = "\n".join(line.rstrip() for line in normalized.split("\n"))
    normalized = re.sub(r"\n{3,}", "\n\n", normalized)
    return normalized.strip()


def _extract_ocr_text_from_page(page, filename: str, page_number: int) -> str:
    """OCR fallback for image-heavy pages. Returns empty text when OCR fails."""
    try:
        pix = page.get_pixmap(dpi=OCR_RENDER_DPI, alpha=False)
        image = Image.open(io.BytesIO(pix.tobytes("png")))
        processed = ImageOps.autocontrast(image.convert("L"))
        text = pytesseract.image_to_string(processed, config=OCR_TESSERACT_CONFIG)
        return (text or "").strip()
    except Exception as e:
        logger.warning("OCR failed for %r page %d: %s", filename, page_number, e)
        return ""


def _extract_pdf_pages(pdf_bytes: bytes, filename: str, use_ocr: bool) -> list[ExtractedPage]:
    try:
        doc = fitz.open(stream=pdf_bytes, filetype="pdf")
    except Exception as e:
        raise CorruptDocument(
            "Could not read PDF file. The file may be corrupted or password-protected.",
            detail=f"{filename}: {e!r}",
        ) from e

    pages: list[ExtractedPage] = []
    with doc:
        if doc.needs_pass:
            raise CorruptDocument(
                "Could not read PDF file. The file may be corrupted or password-protected.",
                detail=f"{filename}: document is encrypted",
            )
        try:
            for idx, page in enumerate(doc, start=1):
                page_text = page.get_text("text") or ""
                method = "native"
                if use_ocr and _should_ocr_page(page_text):
                    ocr_text = _extract_ocr_text_from_page(page, filename=filename, page_number=idx)
                    if ocr_text:
                        method = "ocr"
                        page_text = ocr_text
                pages.append(ExtractedPage(number=idx, method=method, text=_normalize_page_text(page_text)))
        except Exception as e:
            raise CorruptDocument(
                "Could not read PDF file. The file may be corrupted or password-protected.",
                detail=f"{filename}: failed on page {len(pages) + 1}: {e!r}",
            ) from e
    return pages


def extract_text_from_pdf_bytes(pdf_bytes: bytes, filename: str, use_ocr: Optional[bool] = None) -> str:
    """Join every page's text in page order, one newline between pages."""
    if use_ocr is None:
        use_ocr = settings.ocr_enabled()
    pages = _extract_pdf_pages(pdf_bytes, filename, use_ocr)
    text = "\n".join(p.text for p in pages if p.text)
    logger.info(
        "Extracted %d chars from PDF %r (%d pages, %d via OCR)",
        len(text),
        filename,
        len(pages),
        sum(1 for p in pages if p.method == "ocr"),
    )
    return text


def _table_lines(table) -> list[str]:
    lines = []
    for row in table.rows:
        cells = []
        for cell in row.cells:
            value = cell.text.strip()
            # Merged cells repeat the same text once per grid column.
            if value and (not cells or cells[-1] != value):
                cells.append(value)
        if cells:
            lines.append(" | ".join(cells))
    return lines


def extract_text_from_docx_bytes(docx_bytes: bytes, filename: str) -> str:
    """Walk the body in document order; tables become pipe-separated rows."""
    try:
        document = docx.Document(io.BytesIO(docx_bytes))
        lines = []
        for block in document.iter_inner_content():
            if isinstance(block, Table):
                lines.extend(_table_lines(block))
            else:
                lines.append(block.text)
    except Exception as e:
        raise CorruptDocument(
            "Could not read DOCX file. The file may be corrupted.",
            detail=f"{filename}: {e!r}",
        ) from e
    text = "\n".join(lines)
    logger.info("Extracted %d chars from DOCX %r (%d lines)", len(text), filename, len(lines))
    return text


def _declared_charset(content_type: Optional[str]) -> Optional[str]:
    match = _CHARSET_RE.search(content_type or "")
    if not match:
        return None
    try:
        return codecs.lookup(match.group(1)).name
    except LookupError:
        logger.debug("Ignoring unknown declared charset %r", match.group(1))
        return None


def decode_text_bytes(raw: bytes, content_type: Optional[str] = None) -> str:
    """Decode with the declared charset, else a BOM, else UTF-8, else cp1252/latin-1."""
    declared = _declared_charset(content_type)
    if declared:
        try:
            return raw.decode(declared)
        except UnicodeDecodeError:
            logger.warning("Text is not valid %s despite declaration; detecting instead", declared)

    for bom, encoding in _BOMS:
        if raw.startswith(bom):
            return raw.decode(encoding)

    for encoding in ("utf-8", "cp1252"):
        try:
            return raw.decode(encoding)
        except UnicodeDecodeError:
            continue
    return raw.decode("latin-1")


def _extract_txt(document: UploadedDocument) -> str:
    text = decode_text_bytes(document.content, document.content_type)
    return text.replace("\r\n", "\n").replace("\r", "\n")


_EXTRACTORS: Dict[str, Callable[[UploadedDocument], str]] = {
    ".pdf": lambda d: extract_text_from_pdf_bytes(d.content, d.filename),
    ".docx": lambda d: extract_text_from_docx_bytes(d.content, d.filename),
    ".txt": _extract_txt,
}


def extract_text(document: UploadedDocument, max_bytes: Optional[int] = None) -> str:
    """Dispatch on the filename extension and return non-empty text."""
    extension = os.path.splitext(document.filename or "")[1].lower()
    extractor = _EXTRACTORS.get(extension)
    if extractor is None:
        raise UnsupportedFormat(
            f"File type {extension or '(none)'} is not supported. Please use PDF, DOCX, or TXT.",
            detail=document.filename,
        )

    limit = settings.max_upload_bytes() if max_bytes is None else max_bytes
    if document.size > limit:
        raise DocumentTooLarge(
            f"File size exceeds the {limit // (1024 * 1024)}MB limit",
            detail=f"{document.filename}: {document.size} bytes",
        )
    if document.size == 0:
        raise EmptyContent("The uploaded file is empty.", detail=document.filename)

    logger.debug("Extracting %r (%d bytes) as %s", document.filename, document.size, extension)
    text = extractor(document)
    if not text or not text.strip():
        raise EmptyContent("Could not extract text from file", detail=document.filename)
    return text.strip()
