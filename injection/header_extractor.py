"""
Header Candidate Extractor

Turns the flattened text of a template into the ordered list of section
titles that the content writer is asked to fill. The list is the contract
with the ContentMap producer: keys must come back verbatim.

Heuristics, per non-empty trimmed line:
1. Lines ending in a page number (TOC artifacts) are rejected.
2. "1 Title", "1.1 Title", "1.1.1. Title": the numeric prefix is stripped
   and the remainder kept if it is shorter than MAX_TITLE_LENGTH.
3. "一、Title" / "(一) Title": the whole line is kept if it is shorter
   than MAX_TITLE_LENGTH.
4. Otherwise short lines starting with a CJK character and not ending in
   sentence punctuation are taken as un-numbered titles.
"""

import logging
import re
from typing import Iterable, List

from .text_utils import is_toc_page_line

logger = logging.getLogger(__name__)


MAX_TITLE_LENGTH = 50
SHORT_TITLE_MIN = 2
SHORT_TITLE_MAX = 20

NUMBERED_HEADING = re.compile(r"^(\d+(?:\.\d+)*\.?)\s*(.*)$")

CJK_ORDINAL_HEADING = re.compile(
    r"^(?:[一二三四五六七八九十]+、|[(（][一二三四五六七八九十]+[)）])"
)

CJK_START = re.compile(r"^[\u4e00-\u9fa5]")

SENTENCE_END = re.compile(r"[。，、；：.!?,;:]$")


def classify_line(line: str) -> str:
    """
    Return the header candidate for one line, or "" if it is not one.

    Exposed separately so each heuristic can be checked in isolation.
    """
    trimmed = line.strip()
    if not trimmed:
        return ""

    if is_toc_page_line(trimmed):
        return ""

    numbered = NUMBERED_HEADING.match(trimmed)
    if numbered:
        title = numbered.group(2).strip()
        if 0 < len(title) < MAX_TITLE_LENGTH:
            return title
        return ""

    if CJK_ORDINAL_HEADING.match(trimmed):
        return trimmed if len(trimmed) < MAX_TITLE_LENGTH else ""

    if (
        SHORT_TITLE_MIN <= len(trimmed) <= SHORT_TITLE_MAX
        and CJK_START.match(trimmed)
        and not SENTENCE_END.search(trimmed)
    ):
        return trimmed

    return ""


def extract_headers_from_lines(lines: Iterable[str]) -> List[str]:
    """Ordered, duplicate-free header candidates from an iterable of lines."""
    # dict keeps insertion order and drops repeats
    headers = {}
    for line in lines:
        candidate = classify_line(line)
        if candidate:
            headers.setdefault(candidate, None)
    return list(headers)


def extract_headers(text: str) -> List[str]:
    """
    Header candidates from plain document text.

    Args:
        text: Document text, one paragraph or manual line break per line

    Returns:
        Header strings in document order. An empty list means no sections
        were detected and injection should be skipped.
    """
    headers = extract_headers_from_lines(text.splitlines())
    logger.debug("Detected %d header candidates", len(headers))
    return headers
