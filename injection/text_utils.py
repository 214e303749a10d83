"""
Text heuristics for section-anchored injection.

Every comparison between a header string and a paragraph goes through
essence(). The TOC and header predicates live here so they can be tuned
without touching the stream matcher.
"""

import re
from typing import Iterable, Optional


# CJK unified ideographs (basic block) plus ASCII alphanumerics
_NON_ESSENCE = re.compile(r"[^\u4e00-\u9fa5a-zA-Z0-9]")

_TAG = re.compile(r"<[^>]+>")

_ENTITY = re.compile(r"&(#x[0-9a-fA-F]+|#\d+|amp|lt|gt|quot|apos);")

_NAMED_ENTITIES = {
    "amp": "&",
    "lt": "<",
    "gt": ">",
    "quot": '"',
    "apos": "'",
}

# Trailing page number after a tab, whitespace, ".." leaders or ellipsis/dot leaders
_TOC_PAGE_NUMBER = re.compile(r"(?:\s+|\.{2,}|[…·•]+)\s*\d+$")

_TOC_FIELD = re.compile(r"<w:instrText\b[^>]*>[^<]*\bTOC\b", re.IGNORECASE)

_TOC_STYLE = re.compile(r'<w:pStyle\s+w:val="TOC\s?\d+"', re.IGNORECASE)

_PARAGRAPH_OPEN = re.compile(r"<w:p\b[^>]*>")

_PARAGRAPH_PROPERTIES = re.compile(r"<w:pPr\b[^>]*>.*?</w:pPr>", re.DOTALL)


def essence(text: str) -> str:
    """
    Canonical form used for fuzzy header equality.

    Keeps only CJK ideographs and ASCII letters/digits. No case folding.

    >>> essence("1.1 项目说明：")
    '11项目说明'
    """
    if not text:
        return ""
    return _NON_ESSENCE.sub("", text)


def _unescape_entity(match: "re.Match[str]") -> str:
    ref = match.group(1)
    if ref.startswith("#x"):
        return chr(int(ref[2:], 16))
    if ref.startswith("#"):
        return chr(int(ref[1:]))
    return _NAMED_ENTITIES[ref]


def strip_tags(xml: str) -> str:
    """Visible text of a markup fragment: tags removed, entities decoded."""
    return _ENTITY.sub(_unescape_entity, _TAG.sub("", xml))


def escape_xml(text: str) -> str:
    """Escape the five markup-significant characters."""
    return (
        text.replace("&", "&amp;")
        .replace("<", "&lt;")
        .replace(">", "&gt;")
        .replace('"', "&quot;")
        .replace("'", "&apos;")
    )


def is_toc_page_line(line: str) -> bool:
    """True for table-of-contents lines that end in a page number."""
    return bool(_TOC_PAGE_NUMBER.search(line.strip()))


def is_toc_paragraph(paragraph_xml: str) -> bool:
    """
    True if the paragraph belongs to an auto-generated table of contents.

    Either it holds a TOC field instruction, or it uses a TOC outline
    style (TOC1, TOC2, "TOC 1", toc1 ...).
    """
    if "instrText" in paragraph_xml and _TOC_FIELD.search(paragraph_xml):
        return True
    return bool(_TOC_STYLE.search(paragraph_xml))


def has_section_properties(paragraph_xml: str) -> bool:
    """Paragraph carries a section break (w:sectPr inside w:pPr)."""
    return "<w:sectPr" in paragraph_xml


def match_header(paragraph_essence: str, keys: Iterable[str]) -> Optional[str]:
    """
    Find the header key a paragraph stands for.

    A key matches when its essence equals the paragraph essence, or when
    the paragraph essence ends with it and it is longer than one character
    ("1.1项目说明" matches "项目说明"). Paragraph essences of one character
    or less never match.

    When several keys match, the longest key essence wins; ties keep the
    first key in iteration order.
    """
    if len(paragraph_essence) <= 1:
        return None

    best_key = None
    best_length = -1
    for key in keys:
        key_essence = essence(key)
        if not key_essence:
            continue
        exact = paragraph_essence == key_essence
        suffix = len(key_essence) > 1 and paragraph_essence.endswith(key_essence)
        if (exact or suffix) and len(key_essence) > best_length:
            best_key = key
            best_length = len(key_essence)
    return best_key


def section_properties_only(paragraph_xml: str) -> str:
    """
    Reduce a section-break paragraph to its opening tag and w:pPr.

    Runs, hyperlinks and any other inline content are dropped, so the page
    setup survives a skip region without the paragraph's old text.
    """
    opening = _PARAGRAPH_OPEN.match(paragraph_xml)
    properties = _PARAGRAPH_PROPERTIES.search(paragraph_xml)
    if opening is None or properties is None:
        return paragraph_xml
    return opening.group(0) + properties.group(0) + "</w:p>"
