from __future__ import annotations

import io
import os

from .models import ParsedResume

SUPPORTED_EXTENSIONS = {".txt", ".md", ".pdf", ".docx"}


def resume_extension(filename: str | None) -> str:
    return os.path.splitext((filename or "").strip().lower())[1]


def _read_plain(content: bytes) -> ParsedResume:
    return ParsedResume(text=content.decode("utf-8", errors="replace").strip())


def _read_pdf(content: bytes) -> ParsedResume:
    from pypdf import PdfReader

    try:
        reader = PdfReader(io.BytesIO(content))
        pages = [(page.extract_text() or "").strip() for page in reader.pages]
    except Exception as exc:
        return ParsedResume(parsing_warnings=[f"PDF parsing failed: {exc}"])
    text = "\n".join(page for page in pages if page)
    warnings = [] if text else ["No extractable text found in PDF."]
    return ParsedResume(text=text, parsing_warnings=warnings)


def _read_docx(content: bytes) -> ParsedResume:
    from docx import Document

    try:
        document = Document(io.BytesIO(content))
        paragraphs = [p.text.strip() for p in document.paragraphs if p.text and p.text.strip()]
    except Exception as exc:
        return ParsedResume(parsing_warnings=[f"DOCX parsing failed: {exc}"])
    warnings = [] if paragraphs else ["No extractable text found in DOCX."]
    return ParsedResume(text="\n".join(paragraphs), parsing_warnings=warnings)


_READERS = {
    ".txt": _read_plain,
    ".md": _read_plain,
    ".pdf": _read_pdf,
    ".docx": _read_docx,
}


def parse_resume_file(filename: str | None, content: bytes) -> ParsedResume:
    """Extract plain text from an uploaded resume.

    Extraction failures come back as warnings with empty text; only an
    unsupported extension raises.
    """
    extension = resume_extension(filename)
    reader = _READERS.get(extension)
    if reader is None:
        raise ValueError(
            f"Unsupported file type '{extension or filename}'. Supported types: .txt, .md, .pdf, .docx"
        )
    return reader(content)
