"""
Tests for header candidate extraction from template text.
"""

import pytest
import sys
import os

sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.dirname(os.path.abspath(__file__)))))

from injection.header_extractor import classify_line, extract_headers


@pytest.mark.unit
class TestClassifyLine:

    def test_numbered_prefix_is_stripped(self):
        assert classify_line("1 项目概述") == "项目概述"
        assert classify_line("1.1项目说明") == "项目说明"
        assert classify_line("2.3.1. 风险管理") == "风险管理"

    def test_numbered_title_length_limits(self):
        assert classify_line("3.2") == ""
        assert classify_line("4 " + "长" * 49) == "长" * 49
        assert classify_line("4 " + "长" * 50) == ""

    def test_toc_lines_are_rejected(self):
        assert classify_line("目录……10") == ""
        assert classify_line("1 项目概述\t3") == ""
        assert classify_line("项目目标    12") == ""

    def test_cjk_ordinal_keeps_whole_line(self):
        assert classify_line("一、项目背景") == "一、项目背景"
        assert classify_line("(二) 建设内容") == "(二) 建设内容"
        assert classify_line("（三）实施计划") == "（三）实施计划"

    def test_cjk_ordinal_too_long(self):
        line = "一、" + "很" * 48
        assert classify_line(line) == ""

    def test_short_cjk_title_fallback(self):
        assert classify_line("项目背景") == "项目背景"
        assert classify_line("  附录  ") == "附录"

    def test_fallback_rejects_sentences_and_non_cjk(self):
        assert classify_line("本项目的名称：") == ""
        assert classify_line("这是一句话。") == ""
        assert classify_line("Background") == ""
        assert classify_line("项") == ""
        assert classify_line("这是一段超过二十个字符长度的普通正文内容没有标点") == ""

    def test_blank(self):
        assert classify_line("   ") == ""


@pytest.mark.unit
class TestExtractHeaders:

    def test_order_and_dedup(self):
        text = "\n".join([
            "目录",
            "1 项目说明\t3",
            "2 项目目标\t5",
            "",
            "1 项目说明",
            "这是旧内容第一行，描述项目的来龙去脉。",
            "2 项目目标",
            "项目说明",
        ])
        assert extract_headers(text) == ["目录", "项目说明", "项目目标"]

    def test_empty_text_gives_no_headers(self):
        assert extract_headers("") == []
        assert extract_headers("Only English prose here, nothing else.") == []

    def test_manual_line_breaks_are_lines(self):
        assert extract_headers("1 总体设计\n1.1 架构") == ["总体设计", "架构"]
