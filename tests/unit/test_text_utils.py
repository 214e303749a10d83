"""
DocForge Unit Tests: matching heuristics
========================================

Tests:
- essence() normalization
- Visible-text extraction from paragraph markup
- TOC line / TOC paragraph detection
- Header matching rule and tie-break
"""

import pytest
import sys
import os

sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.dirname(os.path.abspath(__file__)))))

from injection.text_utils import (
    essence,
    escape_xml,
    has_section_properties,
    is_toc_page_line,
    is_toc_paragraph,
    match_header,
    section_properties_only,
    strip_tags,
)
from tests.conftest import p, toc_entry


@pytest.mark.unit
class TestEssence:

    def test_strips_numbering_punctuation_and_space(self):
        assert essence("1.1 项目说明：") == "11项目说明"
        assert essence("（一）、 背景") == "一背景"

    def test_keeps_ascii_alphanumerics_case_sensitive(self):
        assert essence("API Gateway v2") == "APIGatewayv2"
        assert essence("api") != essence("API")

    def test_empty_and_punctuation_only(self):
        assert essence("") == ""
        assert essence("……——，。") == ""

    def test_numbered_header_is_not_equal_but_is_suffix(self):
        assert essence("1.1 项目说明") != essence("项目说明")
        assert essence("1.1项目说明").endswith(essence("项目说明"))


@pytest.mark.unit
class TestStripTags:

    def test_joins_runs(self):
        xml = '<w:p><w:r><w:t>项目</w:t></w:r><w:r><w:t xml:space="preserve">说明</w:t></w:r></w:p>'
        assert strip_tags(xml) == "项目说明"

    def test_decodes_entities(self):
        assert strip_tags("<w:t>R&amp;D &lt;plan&gt; &#x4E00;</w:t>") == "R&D <plan> 一"

    def test_escape_roundtrip_of_specials(self):
        assert escape_xml("""<a & 'b' "c">""") == "&lt;a &amp; &apos;b&apos; &quot;c&quot;&gt;"
        assert strip_tags(escape_xml("A&B")) == "A&B"


@pytest.mark.unit
class TestTocDetection:

    @pytest.mark.parametrize("line", [
        "1 项目说明\t3",
        "项目目标   12",
        "目录……10",
        "项目范围..........7",
        "项目范围 · · · 7",
    ])
    def test_page_numbered_lines(self, line):
        assert is_toc_page_line(line)

    @pytest.mark.parametrize("line", [
        "1 项目概述",
        "1.1",
        "项目说明",
        "版本V2",
    ])
    def test_ordinary_lines(self, line):
        assert not is_toc_page_line(line)

    def test_toc_style_paragraph(self):
        assert is_toc_paragraph(toc_entry("项目说明", 3))
        assert is_toc_paragraph(toc_entry("项目说明", 3, style="toc2"))
        assert is_toc_paragraph(toc_entry("项目说明", 3, style="TOC 1"))

    def test_toc_field_paragraph(self):
        xml = (
            '<w:p><w:r><w:fldChar w:fldCharType="begin"/></w:r>'
            '<w:r><w:instrText xml:space="preserve"> TOC \\o "1-3" \\h \\z \\u </w:instrText></w:r></w:p>'
        )
        assert is_toc_paragraph(xml)

    def test_pageref_field_is_not_toc_field(self):
        xml = '<w:p><w:r><w:instrText> PAGEREF _Toc123456 \\h </w:instrText></w:r></w:p>'
        assert not is_toc_paragraph(xml)

    def test_body_paragraph(self):
        assert not is_toc_paragraph(p("目录结构说明", "Normal"))

    def test_section_properties(self):
        assert has_section_properties('<w:p><w:pPr><w:sectPr/></w:pPr></w:p>')
        assert not has_section_properties(p("正文"))

    def test_section_properties_only_drops_inline_content(self):
        ppr = '<w:pPr><w:pStyle w:val="Normal"/><w:sectPr><w:type w:val="nextPage"/></w:sectPr></w:pPr>'
        xml = (
            f'<w:p w:rsidR="00A1">{ppr}<w:r><w:t>旧正文末段</w:t></w:r>'
            '<w:hyperlink r:id="rId9"><w:r><w:t>链接</w:t></w:r></w:hyperlink></w:p>'
        )
        assert section_properties_only(xml) == f'<w:p w:rsidR="00A1">{ppr}</w:p>'

    def test_section_properties_only_without_ppr_is_unchanged(self):
        assert section_properties_only(p("正文")) == p("正文")


@pytest.mark.unit
class TestMatchHeader:

    def test_exact_essence_match(self):
        assert match_header(essence("项目说明"), ["项目目标", "项目说明"]) == "项目说明"

    def test_suffix_match_with_numbering(self):
        assert match_header(essence("1.1项目说明"), ["项目说明"]) == "项目说明"

    def test_single_character_paragraph_never_matches(self):
        assert match_header(essence("1"), ["1"]) is None
        assert match_header(essence("— 说 —"), ["说"]) is None

    def test_single_character_key_only_matches_exactly(self):
        # "A1说" ends with "说" but a one-char key is not allowed as suffix
        assert match_header(essence("A1说"), ["说"]) is None

    def test_longest_key_wins(self):
        keys = ["说明", "项目说明"]
        assert match_header(essence("1.1项目说明"), keys) == "项目说明"
        assert match_header(essence("1.1项目说明"), list(reversed(keys))) == "项目说明"

    def test_equal_length_tie_keeps_first(self):
        keys = ["1.1 目标", "11目标"]
        assert match_header(essence("1.1 目标"), keys) == "1.1 目标"

    def test_no_match(self):
        assert match_header(essence("这是正文内容"), ["项目说明"]) is None

