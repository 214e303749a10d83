"""
DocForge Test Configuration
===========================

Fixtures:
- Minimal .docx archives built from raw WordprocessingML bodies
- The two-section sample template used throughout the injection tests
- A template tree for the generation pipeline
"""

import pytest
import sys
import os
import io
import zipfile
from pathlib import Path
from typing import Dict, List, Optional

# Add parent directory to path
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from injection.stream_matcher import iter_tokens


# =============================================================================
# Pytest Configuration
# =============================================================================

def pytest_configure(config):
    """Configure pytest markers"""
    config.addinivalue_line("markers", "unit: Unit tests (fast, isolated)")
    config.addinivalue_line("markers", "integration: Integration tests (real archives on disk)")


# =============================================================================
# WordprocessingML builders
# =============================================================================

W_NS = "http://schemas.openxmlformats.org/wordprocessingml/2006/main"

CONTENT_TYPES = (
    '<?xml version="1.0" encoding="UTF-8" standalone="yes"?>'
    '<Types xmlns="http://schemas.openxmlformats.org/package/2006/content-types">'
    '<Default Extension="rels" ContentType="application/vnd.openxmlformats-package.relationships+xml"/>'
    '<Default Extension="xml" ContentType="application/xml"/>'
    '<Override PartName="/word/document.xml" '
    'ContentType="application/vnd.openxmlformats-officedocument.wordprocessingml.document.main+xml"/>'
    '</Types>'
)

ROOT_RELS = (
    '<?xml version="1.0" encoding="UTF-8" standalone="yes"?>'
    '<Relationships xmlns="http://schemas.openxmlformats.org/package/2006/relationships">'
    '<Relationship Id="rId1" '
    'Type="http://schemas.openxmlformats.org/officeDocument/2006/relationships/officeDocument" '
    'Target="word/document.xml"/>'
    '</Relationships>'
)

SECT_PR = '<w:sectPr><w:pgSz w:w="11906" w:h="16838"/></w:sectPr>'


def p(text: str, style: Optional[str] = None) -> str:
    """A single-run paragraph, optionally styled"""
    ppr = f'<w:pPr><w:pStyle w:val="{style}"/></w:pPr>' if style else ""
    return f'<w:p>{ppr}<w:r><w:t>{text}</w:t></w:r></w:p>'


def toc_entry(title: str, page: int, style: str = "TOC1") -> str:
    """A TOC line: title, tab, page number"""
    return (
        f'<w:p><w:pPr><w:pStyle w:val="{style}"/></w:pPr>'
        f'<w:r><w:t>{title}</w:t></w:r><w:r><w:tab/></w:r><w:r><w:t>{page}</w:t></w:r></w:p>'
    )


def textbox(text: str) -> str:
    """A paragraph anchoring a text box that holds its own paragraph"""
    return (
        '<w:p><w:r><w:pict><w:txbxContent>'
        f'<w:p><w:r><w:t>{text}</w:t></w:r></w:p>'
        '</w:txbxContent></w:pict></w:r><w:r><w:t>锚点</w:t></w:r></w:p>'
    )


def section_break(text: str = "") -> str:
    """A paragraph carrying section properties, optionally with body text"""
    run = f'<w:r><w:t>{text}</w:t></w:r>' if text else ""
    return (
        '<w:p><w:pPr><w:sectPr><w:type w:val="nextPage"/></w:sectPr></w:pPr>'
        f'{run}</w:p>'
    )


def document_xml(body: str) -> str:
    return (
        '<?xml version="1.0" encoding="UTF-8" standalone="yes"?>\n'
        f'<w:document xmlns:w="{W_NS}"><w:body>{body}{SECT_PR}</w:body></w:document>'
    )


def make_docx_bytes(body: str, extra_parts: Optional[Dict[str, str]] = None) -> bytes:
    """Build a minimal but valid .docx package around a body fragment"""
    buffer = io.BytesIO()
    with zipfile.ZipFile(buffer, "w", compression=zipfile.ZIP_DEFLATED) as zf:
        zf.writestr("[Content_Types].xml", CONTENT_TYPES)
        zf.writestr("_rels/.rels", ROOT_RELS)
        zf.writestr("word/document.xml", document_xml(body))
        for name, data in (extra_parts or {}).items():
            zf.writestr(name, data)
    return buffer.getvalue()


def paragraph_texts(xml: str) -> List[str]:
    """Visible text of every paragraph in a markup stream"""
    return [t.text for t in iter_tokens(xml) if t.is_paragraph]


def read_part(docx: bytes, name: str = "word/document.xml") -> str:
    with zipfile.ZipFile(io.BytesIO(docx)) as zf:
        return zf.read(name).decode("utf-8")


# =============================================================================
# Sample template
# =============================================================================

SAMPLE_BODY = "".join([
    p("1 项目说明", "Heading1"),
    p("这是旧内容第一行"),
    p("这是旧内容第二行"),
    p("2 项目目标", "Heading1"),
    p("旧目标内容"),
])

SAMPLE_CONTENT = {
    "项目说明": "新内容第一行\n新内容第二行",
    "项目目标": "新目标",
}


@pytest.fixture
def sample_body() -> str:
    return SAMPLE_BODY


@pytest.fixture
def sample_content() -> Dict[str, str]:
    return dict(SAMPLE_CONTENT)


@pytest.fixture
def sample_docx(tmp_path) -> Path:
    path = tmp_path / "templates" / "xx项目建议书.docx"
    path.parent.mkdir(parents=True)
    path.write_bytes(make_docx_bytes(SAMPLE_BODY))
    return path


@pytest.fixture
def template_tree(tmp_path) -> Path:
    """
    templates/
      01立项/xx项目建议书.docx     two sections
      01立项/说明.docx              no detectable headers
      02计划/进度表.xlsx            non-docx, copied as-is
      .hidden.docx                  ignored
    """
    root = tmp_path / "templates"
    (root / "01立项").mkdir(parents=True)
    (root / "02计划").mkdir(parents=True)

    (root / "01立项" / "xx项目建议书.docx").write_bytes(make_docx_bytes(SAMPLE_BODY))
    (root / "01立项" / "说明.docx").write_bytes(
        make_docx_bytes(p("This template only has prose, nothing that looks like a title."))
    )
    (root / "02计划" / "进度表.xlsx").write_bytes(b"not really a workbook")
    (root / ".hidden.docx").write_bytes(b"ignored")
    return root
