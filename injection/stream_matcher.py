"""
Paragraph Stream Matcher

Rewrites a WordprocessingML body as a linear token stream, without building
a document tree:

- A paragraph whose text matches a ContentMap key is kept verbatim and the
  generated content is inserted right after it; the matcher then starts
  SKIPPING.
- While SKIPPING, body paragraphs are dropped until a paragraph that matches
  a known header, or a TOC paragraph, is reached. That paragraph is kept and
  the matcher returns to KEEPING.
- Non-paragraph tokens are always emitted unchanged.
- A section-break paragraph inside a skip region keeps only its w:pPr.
- Paragraphs nested in text boxes travel with their anchoring paragraph.

Only known headers end a skip region. A generic "looks numbered" test would
stop early on body text such as "1. 本项目的名称：".
"""

import logging
import re
from typing import Iterator, List, Optional, Set

from .content_serializer import ContentSerializer
from .models import ContentMap, InjectionReport, MatchState, ParagraphToken
from .text_utils import (
    essence,
    has_section_properties,
    is_toc_paragraph,
    match_header,
    section_properties_only,
    strip_tags,
)

logger = logging.getLogger(__name__)


# Self-closing first; "<w:p\b" excludes <w:pPr>, <w:proofErr> ...
PARAGRAPH_TAG = re.compile(r"<w:p\b[^>]*/>|<w:p\b[^>]*>|</w:p>")

# Innermost table cell with no paragraph left in it
EMPTY_CELL_PATTERN = re.compile(
    r"(<w:tc\b[^>]*>(?:(?!<w:p\b|</w:tc>).)*?)(</w:tc>)", re.DOTALL
)


def _paragraph_token(xml: str) -> ParagraphToken:
    return ParagraphToken(xml=xml, is_paragraph=True, text=strip_tags(xml).strip())


def iter_tokens(document_xml: str) -> Iterator[ParagraphToken]:
    """
    Split the markup stream into alternating non-paragraph/paragraph tokens.

    A paragraph token runs from a top-level <w:p> to its matching </w:p>,
    so paragraphs nested in text boxes (w:txbxContent) stay inside the
    paragraph that anchors them.
    """
    depth = 0
    # start of the pending non-paragraph text, or of the open paragraph
    start = 0
    for tag in PARAGRAPH_TAG.finditer(document_xml):
        markup = tag.group(0)
        if markup.startswith("</"):
            if depth == 0:
                continue
            depth -= 1
            if depth == 0:
                yield _paragraph_token(document_xml[start:tag.end()])
                start = tag.end()
        elif markup.endswith("/>"):
            if depth == 0:
                if tag.start() > start:
                    yield ParagraphToken(xml=document_xml[start:tag.start()], is_paragraph=False)
                yield _paragraph_token(markup)
                start = tag.end()
        else:
            if depth == 0 and tag.start() > start:
                yield ParagraphToken(xml=document_xml[start:tag.start()], is_paragraph=False)
                start = tag.start()
            depth += 1

    # Unclosed paragraph or trailing markup passes through untouched
    if start < len(document_xml):
        yield ParagraphToken(xml=document_xml[start:], is_paragraph=False)


def repair_empty_cells(document_xml: str) -> str:
    """Give every table cell emptied by the walk a blank paragraph."""
    return EMPTY_CELL_PATTERN.sub(r"\1<w:p/>\2", document_xml)


class ParagraphStreamMatcher:
    """
    Single-pass filter over the paragraph stream.

    Usage:
        matcher = ParagraphStreamMatcher(content_map)
        new_xml = matcher.rewrite(document_xml)
        matcher.report.matched_headers

    Args:
        content_map: Header -> content block. Iteration order is the
            tie-break for equally long key matches.
        serializer: Renders content blocks as paragraphs.
        consume_keys: If True a key injects only at its first occurrence;
            later occurrences still end a skip region.
    """

    def __init__(
        self,
        content_map: ContentMap,
        serializer: Optional[ContentSerializer] = None,
        consume_keys: bool = False,
    ):
        self.content_map = dict(content_map)
        self.serializer = serializer or ContentSerializer()
        self.consume_keys = consume_keys
        self.state = MatchState.KEEPING
        self.report = InjectionReport()
        self._consumed: Set[str] = set()

    def _injectable_keys(self) -> List[str]:
        if not self.consume_keys:
            return list(self.content_map)
        return [key for key in self.content_map if key not in self._consumed]

    def process(self, token: ParagraphToken) -> List[str]:
        """Advance the state machine by one token; return fragments to emit."""
        if not token.is_paragraph:
            return [token.xml]

        self.report.paragraphs_seen += 1
        paragraph_essence = essence(token.text)

        matched = match_header(paragraph_essence, self._injectable_keys())
        if matched is not None:
            return self._on_header(token, matched)

        if self.state is MatchState.SKIPPING:
            known = match_header(paragraph_essence, self.content_map) is not None
            if known or is_toc_paragraph(token.xml):
                logger.debug("Stop skipping at: %s", token.text[:30])
                self.state = MatchState.KEEPING
                return [token.xml]
            if has_section_properties(token.xml):
                # page setup stays, the paragraph's old text goes
                if token.text:
                    self.report.paragraphs_dropped += 1
                return [section_properties_only(token.xml)]
            self.report.paragraphs_dropped += 1
            return []

        return [token.xml]

    def _on_header(self, token: ParagraphToken, header: str) -> List[str]:
        logger.debug("Matched header [%s] at paragraph: %s", header, token.text[:30])
        if header not in self.report.matched_headers:
            self.report.matched_headers.append(header)
        if self.consume_keys:
            self._consumed.add(header)

        fragments = [token.xml]
        content = self.content_map.get(header)
        if content:
            injected = self.serializer.paragraphs(content)
            self.report.paragraphs_injected += len(injected)
            fragments.extend(injected)

        self.state = MatchState.SKIPPING
        return fragments

    def rewrite(self, document_xml: str) -> str:
        """Run the whole stream and return the rewritten markup."""
        output: List[str] = []
        for token in iter_tokens(document_xml):
            output.extend(self.process(token))

        self.report.unused_keys = [
            key for key in self.content_map if key not in self.report.matched_headers
        ]

        new_xml = "".join(output)
        if self.report.paragraphs_dropped:
            new_xml = repair_empty_cells(new_xml)
        return new_xml


def rewrite_document_xml(
    document_xml: str,
    content_map: ContentMap,
    serializer: Optional[ContentSerializer] = None,
    consume_keys: bool = False,
) -> str:
    """Convenience wrapper returning only the rewritten markup."""
    matcher = ParagraphStreamMatcher(content_map, serializer=serializer, consume_keys=consume_keys)
    return matcher.rewrite(document_xml)
