"""
DocForge Template Tools
Reads Word templates into the plain-text view used for header discovery

Key capabilities:
- Template directory scanning
- DOCX text extraction in body order (tables and TOC included)
- Header candidate detection for the content writer
"""

import io
import logging
import os
from typing import List, Optional, Union
from dataclasses import dataclass, field
from pathlib import Path

from docx import Document
from docx.oxml.ns import qn
from docx.text.paragraph import Paragraph

from injection.header_extractor import extract_headers
from injection.template_cache import TemplateCache

logger = logging.getLogger(__name__)


DOCX_EXTENSIONS = {".docx"}


@dataclass
class TemplateFile:
    """A file found under the template root"""
    path: Path
    relative_path: str
    extension: str


@dataclass
class TemplateContent:
    """Plain-text view of a template"""
    type: str                                  # "docx" or "other"
    content: str = ""
    headers: List[str] = field(default_factory=list)


def scan_templates(root: Union[str, Path]) -> List[TemplateFile]:
    """
    Recursively list template files under root

    Hidden files and Word lock files (~$name.docx) are ignored. The
    result is sorted by relative path so runs are reproducible.
    """
    root = Path(root)
    if not root.is_dir():
        raise FileNotFoundError(f"Template directory not found: {root}")

    files = []
    for dirpath, dirnames, filenames in os.walk(root):
        dirnames[:] = [d for d in dirnames if not d.startswith(".")]
        for name in filenames:
            if name.startswith(".") or name.startswith("~$"):
                continue
            path = Path(dirpath) / name
            files.append(TemplateFile(
                path=path,
                relative_path=path.relative_to(root).as_posix(),
                extension=path.suffix.lower(),
            ))

    files.sort(key=lambda f: f.relative_path)
    return files


def docx_text(source: bytes) -> str:
    """
    Flatten a .docx into text, one line per paragraph

    Every w:p in the body is visited in document order, including table
    cells and content controls. Tabs come out as "\\t" and manual line
    breaks as newlines, which is what the TOC page-number filter expects.
    """
    document = Document(io.BytesIO(source))
    lines = []
    for p in document.element.body.iter(qn("w:p")):
        lines.append(Paragraph(p, document).text)
    return "\n".join(lines)


class TemplateReader:
    """
    Reads templates for the generation pipeline

    Usage:
        reader = TemplateReader(cache=TemplateCache())
        info = reader.read_template("templates/01立项/xx项目建议书.docx")
        info.headers   # -> ["项目概述", "项目目标", ...]
    """

    def __init__(self, cache: Optional[TemplateCache] = None):
        self.cache = cache

    def _load(self, path: Path) -> bytes:
        if self.cache is not None:
            return self.cache.get(path)
        return path.read_bytes()

    def read_template(self, file_path: Union[str, Path]) -> TemplateContent:
        """Read a template and extract its text and header candidates"""
        path = Path(file_path)
        if path.suffix.lower() not in DOCX_EXTENSIONS:
            return TemplateContent(type="other")

        content = docx_text(self._load(path)).strip()
        headers = extract_headers(content)
        logger.debug("Read %s: %d chars, %d headers", path.name, len(content), len(headers))
        return TemplateContent(type="docx", content=content, headers=headers)


def create_template_reader(cache: Optional[TemplateCache] = None) -> TemplateReader:
    """Factory function to create template reader"""
    return TemplateReader(cache=cache)
