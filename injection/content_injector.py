"""
DocForge ContentInjector

Injects generated section content into a Word template while keeping the
template's own headers, numbering and styles.

This component:
- Loads the template package (optionally through a TemplateCache)
- Runs the ParagraphStreamMatcher over word/document.xml
- Re-packages the archive and writes it to the output path

Key Principle: the source template is IMMUTABLE. Every run produces a new
archive, so re-running with the same ContentMap is safe.
"""

import logging
from pathlib import Path
from typing import Optional, Tuple, Union

from .container import read_document_xml, replace_document_xml, write_bytes_atomic
from .content_serializer import ContentSerializer
from .models import ContentMap, InjectionReport
from .stream_matcher import ParagraphStreamMatcher
from .template_cache import TemplateCache

logger = logging.getLogger(__name__)


class ContentInjector:
    """
    Replaces the body under each known header with generated content.

    Usage:
        injector = ContentInjector(cache=TemplateCache())
        report = injector.inject_file(
            "templates/01立项/xx项目建议书.docx",
            "output/Demo/01立项/Demo建议书.docx",
            {"项目说明": "新内容第一行\\n新内容第二行"},
        )
        report.unused_keys   # keys that never matched a paragraph
    """

    def __init__(
        self,
        serializer: Optional[ContentSerializer] = None,
        cache: Optional[TemplateCache] = None,
        consume_keys: bool = False,
    ):
        self.serializer = serializer or ContentSerializer()
        self.cache = cache
        self.consume_keys = consume_keys

    def inject_xml(self, document_xml: str, content_map: ContentMap) -> Tuple[str, InjectionReport]:
        """Rewrite a document body; returns (new_xml, report)."""
        matcher = ParagraphStreamMatcher(
            content_map,
            serializer=self.serializer,
            consume_keys=self.consume_keys,
        )
        new_xml = matcher.rewrite(document_xml)
        return new_xml, matcher.report

    def inject_bytes(
        self,
        source: bytes,
        content_map: ContentMap,
        label: str = "",
    ) -> Tuple[bytes, InjectionReport]:
        """
        Rewrite a .docx held in memory.

        Raises:
            MalformedInputError: source has no word/document.xml
        """
        document_xml = read_document_xml(source, label=label)
        new_xml, report = self.inject_xml(document_xml, content_map)
        report.source = label
        return replace_document_xml(source, new_xml, label=label), report

    def inject_file(
        self,
        source_path: Union[str, Path],
        output_path: Union[str, Path],
        content_map: ContentMap,
    ) -> InjectionReport:
        """
        Inject content_map into source_path and write the result to output_path.

        Intermediate directories are created. Nothing is written if the
        source is malformed.
        """
        source_path = Path(source_path)
        if self.cache is not None:
            source = self.cache.get(source_path)
        else:
            source = source_path.read_bytes()

        data, report = self.inject_bytes(source, content_map, label=str(source_path))
        write_bytes_atomic(output_path, data)
        report.output = str(output_path)

        for key in report.unused_keys:
            logger.warning("No paragraph matched header [%s] in %s", key, source_path.name)

        logger.info(
            "Injected %d/%d sections into %s (%d paragraphs dropped, %d inserted)",
            len(report.matched_headers),
            len(content_map),
            output_path,
            report.paragraphs_dropped,
            report.paragraphs_injected,
        )
        return report


def create_content_injector(
    cache: Optional[TemplateCache] = None,
    config=None,
) -> ContentInjector:
    """Build an injector from InjectionConfig (defaults when config is None)."""
    if config is None:
        return ContentInjector(cache=cache)
    serializer = ContentSerializer(
        normal_style=config.normal_style,
        heading2_style=config.heading2_style,
        heading3_style=config.heading3_style,
    )
    return ContentInjector(serializer=serializer, cache=cache, consume_keys=config.consume_keys)
