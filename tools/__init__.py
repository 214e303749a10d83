"""DocForge Tools - template scanning and text extraction"""

from .document_tools import (
    TemplateReader,
    TemplateContent,
    TemplateFile,
    scan_templates,
    docx_text,
    create_template_reader
)

__all__ = [
    "TemplateReader",
    "TemplateContent",
    "TemplateFile",
    "scan_templates",
    "docx_text",
    "create_template_reader",
]
