"""DocForge Agents - content writers that fill detected template sections"""

from .content_writer import (
    ContentProvider,
    StaticContentProvider,
    LLMContentWriter,
    build_prompt,
    parse_content_map,
    create_content_writer,
)

__all__ = [
    "ContentProvider",
    "StaticContentProvider",
    "LLMContentWriter",
    "build_prompt",
    "parse_content_map",
    "create_content_writer",
]
