"""
Extracts readable text from uploaded requirement documents.

Supports PDF, DOCX, TXT/Markdown and JSON files.
"""
import json
import mimetypes
from io import BytesIO
from pathlib import Path
from typing import Optional

import docx
from PyPDF2 import PdfReader

DOCX_MIME_TYPE = "application/vnd.openxmlformats-officedocument.wordprocessingml.document"
TEXT_EXTENSIONS = {".txt", ".md", ".markdown"}


class AttachmentParserError(Exception):
    """Error during attachment parsing."""
    pass


def extract_text_from_attachment(
    file_content: bytes,
    filename: str,
    mime_type: Optional[str] = None
) -> str:
    """
    Extract readable text from an uploaded document.

    Args:
        file_content: Raw file content as bytes
        filename: Original filename (used for format detection)
        mime_type: Optional MIME type (if not provided, inferred from filename)

    Returns:
        Extracted text as string

    Raises:
        AttachmentParserError: If file format is unsupported or parsing fails
    """
    if not mime_type:
        mime_type, _ = mimetypes.guess_type(filename)

    file_ext = Path(filename).suffix.lower()

    try:
        if file_ext in TEXT_EXTENSIONS or mime_type in ("text/plain", "text/markdown"):
            return _extract_text_from_txt(file_content)
        elif file_ext == ".json" or mime_type == "application/json":
            return _extract_text_from_json(file_content)
        elif file_ext == ".pdf" or mime_type == "application/pdf":
            return _extract_text_from_pdf(file_content)
        elif file_ext == ".docx" or mime_type == DOCX_MIME_TYPE:
            return _extract_text_from_docx(file_content)
        else:
            raise AttachmentParserError(
                f"Unsupported file format: {filename} (MIME type: {mime_type}). "
                f"Supported formats: PDF, DOCX, TXT, MD, JSON"
            )
    except AttachmentParserError:
        raise
    except Exception as e:
        raise AttachmentParserError(f"Failed to parse attachment {filename}: {str(e)}")


def _extract_text_from_txt(file_content: bytes) -> str:
    """Extract text from plain text file."""
    try:
        return file_content.decode("utf-8")
    except UnicodeDecodeError:
        return file_content.decode("latin-1", errors="ignore")


def _extract_text_from_json(file_content: bytes) -> str:
    """Extract text from JSON file (pretty-printed)."""
    text = file_content.decode("utf-8", errors="ignore")
    try:
        return json.dumps(json.loads(text), indent=2, ensure_ascii=False)
    except json.JSONDecodeError:
        return text


def _extract_text_from_pdf(file_content: bytes) -> str:
    """Extract text from PDF file, page by page."""
    reader = PdfReader(BytesIO(file_content))

    text_parts = []
    for page_num, page in enumerate(reader.pages, start=1):
        page_text = page.extract_text() or ""
        if page_text.strip():
            text_parts.append(f"[Page {page_num}]\n{page_text}")

    if not text_parts:
        raise AttachmentParserError("PDF contains no extractable text")
    return "\n\n".join(text_parts)


def _extract_text_from_docx(file_content: bytes) -> str:
    """Extract text from DOCX paragraphs and tables."""
    document = docx.Document(BytesIO(file_content))

    text_parts = [p.text for p in document.paragraphs if p.text.strip()]
    for table in document.tables:
        for row in table.rows:
            row_text = " | ".join(cell.text.strip() for cell in row.cells if cell.text.strip())
            if row_text:
                text_parts.append(row_text)

    if not text_parts:
        raise AttachmentParserError("DOCX contains no extractable text")
    return "\n".join(text_parts)
