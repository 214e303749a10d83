"""
Content Serializer

Converts a generated content block (plain lines plus "##"/"###" heading
markers) into WordprocessingML paragraphs ready to splice after a header.
Bulleted lines become plain paragraphs; blank lines are dropped.
"""

import re
from typing import List, Optional, Tuple

from .text_utils import escape_xml


BULLET_MARKER = re.compile(r"^[-*]\s+")

HEADING_MARKER = re.compile(r"^(###|##)(?:\s+|$)(.*)$")

DEFAULT_NORMAL_STYLE = "Normal"
DEFAULT_HEADING2_STYLE = "Heading2"
DEFAULT_HEADING3_STYLE = "Heading3"


class ContentSerializer:
    """
    Renders content blocks with configurable paragraph style ids.

    Chinese Word templates often use numeric style ids ("2", "3") for
    headings, so the ids are injectable rather than fixed.
    """

    def __init__(
        self,
        normal_style: str = DEFAULT_NORMAL_STYLE,
        heading2_style: str = DEFAULT_HEADING2_STYLE,
        heading3_style: str = DEFAULT_HEADING3_STYLE,
    ):
        self.normal_style = normal_style
        self.heading2_style = heading2_style
        self.heading3_style = heading3_style

    def classify(self, line: str) -> Optional[Tuple[str, str]]:
        """Return (style_id, text) for one content line, or None if blank."""
        text = line.strip()
        if not text:
            return None

        text = BULLET_MARKER.sub("", text, count=1)

        heading = HEADING_MARKER.match(text)
        if heading:
            style_id = self.heading3_style if heading.group(1) == "###" else self.heading2_style
            return style_id, heading.group(2).strip()
        return self.normal_style, text

    def paragraph(self, style_id: str, text: str) -> str:
        return (
            f'<w:p><w:pPr><w:pStyle w:val="{escape_xml(style_id)}"/></w:pPr>'
            f'<w:r><w:t xml:space="preserve">{escape_xml(text)}</w:t></w:r></w:p>'
        )

    def paragraphs(self, content: str) -> List[str]:
        """One paragraph fragment per non-empty line."""
        fragments = []
        for line in (content or "").splitlines():
            classified = self.classify(line)
            if classified is None:
                continue
            style_id, text = classified
            if not text:
                continue
            fragments.append(self.paragraph(style_id, text))
        return fragments

    def serialize(self, content: str) -> str:
        return "".join(self.paragraphs(content))


_default_serializer = ContentSerializer()


def serialize_content(content: str) -> str:
    """Serialize with the default style ids."""
    return _default_serializer.serialize(content)
