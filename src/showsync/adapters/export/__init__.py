"""Markdown export documents with YAML frontmatter."""

from __future__ import annotations

from .document import ExportDocument, export_filename, render_document, split_document
from .translator import (
    EXPORT_VERSION,
    export_document_filename,
    export_frontmatter,
    parse_export_document,
    record_from_show,
    render_export_document,
)

__all__ = [
    "EXPORT_VERSION",
    "ExportDocument",
    "export_document_filename",
    "export_filename",
    "export_frontmatter",
    "parse_export_document",
    "record_from_show",
    "render_export_document",
    "split_document",
]
