"""
Uploaded document handling: text extraction and legal metadata parsing.
"""

from .extractors import DocumentExtractionError, extract_attachment_text, extract_document_text
from .metadata import LawFields, build_law, extract_law_fields, resolve_title

__all__ = [
    "DocumentExtractionError",
    "LawFields",
    "build_law",
    "extract_attachment_text",
    "extract_document_text",
    "extract_law_fields",
    "resolve_title",
]
