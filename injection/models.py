"""
Data models for section-anchored injection.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, List


# Header string (verbatim, pre-normalization) -> generated content block
ContentMap = Dict[str, str]


class MatchState(str, Enum):
    """State carried across the paragraph walk"""
    KEEPING = "keeping"      # Emit paragraphs as-is
    SKIPPING = "skipping"    # Drop body paragraphs under a replaced header


@dataclass(frozen=True)
class ParagraphToken:
    """
    One slice of the markup stream.

    Paragraph tokens carry their visible text; everything between
    paragraphs (body/table/sdt tags, whitespace) is a non-paragraph token
    and passes through untouched.
    """
    xml: str
    is_paragraph: bool
    text: str = ""


@dataclass
class InjectionReport:
    """Outcome of one injection pass over a document body."""
    matched_headers: List[str] = field(default_factory=list)
    unused_keys: List[str] = field(default_factory=list)
    paragraphs_seen: int = 0
    paragraphs_dropped: int = 0
    paragraphs_injected: int = 0
    source: str = ""
    output: str = ""

    @property
    def changed(self) -> bool:
        return bool(self.matched_headers)

    def to_dict(self) -> Dict[str, object]:
        return {
            "source": self.source,
            "output": self.output,
            "matched_headers": list(self.matched_headers),
            "unused_keys": list(self.unused_keys),
            "paragraphs_seen": self.paragraphs_seen,
            "paragraphs_dropped": self.paragraphs_dropped,
            "paragraphs_injected": self.paragraphs_injected,
        }
