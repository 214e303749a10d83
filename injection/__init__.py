"""DocForge Injection - section-anchored content injection for Word templates"""

from .exceptions import InjectionError, MalformedInputError, EmptyHeaderSetWarning
from .models import ContentMap, InjectionReport, MatchState, ParagraphToken
from .text_utils import essence, is_toc_paragraph, is_toc_page_line, match_header
from .header_extractor import extract_headers
from .content_serializer import ContentSerializer, serialize_content
from .stream_matcher import ParagraphStreamMatcher, rewrite_document_xml
from .template_cache import TemplateCache
from .content_injector import ContentInjector, create_content_injector

__all__ = [
    "InjectionError",
    "MalformedInputError",
    "EmptyHeaderSetWarning",
    "ContentMap",
    "InjectionReport",
    "MatchState",
    "ParagraphToken",
    "essence",
    "is_toc_paragraph",
    "is_toc_page_line",
    "match_header",
    "extract_headers",
    "ContentSerializer",
    "serialize_content",
    "ParagraphStreamMatcher",
    "rewrite_document_xml",
    "TemplateCache",
    "ContentInjector",
    "create_content_injector",
]
