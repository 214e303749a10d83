"""
Content Writers - produce the ContentMap for a template

The injector only needs a mapping of header -> content block whose keys
repeat the detected headers verbatim. Writers:
- StaticContentProvider: fixed mapping (tests, hand-written content, replays)
- LLMContentWriter: OpenAI-compatible chat model, with a mock fallback when
  no API key is configured
"""

import json
import logging
import re
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

from injection.models import ContentMap

logger = logging.getLogger(__name__)


PREVIEW_CHARS = 500

_CODE_FENCE = re.compile(r"```(?:json)?", re.IGNORECASE)


def build_prompt(headers: List[str], context: Dict[str, Any], preview: str = "") -> str:
    """Default section-writing prompt for a Word template"""
    project_name = context.get("projectName", "")
    description = context.get("projectDescription", "")
    header_lines = "\n".join(f"- {h}" for h in headers)

    return (
        "你是一个专业的项目文档编写助手。\n"
        f"请根据以下章节标题列表，结合项目背景\"{description}\"，为项目\"{project_name}\"编写对应的内容。\n"
        "请返回一个 JSON 对象，Key 是章节标题（必须完全匹配），Value 是对应的内容。\n\n"
        "要求：\n"
        "1. **不要** 在 Value 内容中重复包含 Key（标题）本身。\n"
        "2. **不要** 生成章节目录（TOC）。\n"
        "3. **不要** 使用 Markdown 列表格式（如 \"- \" 或 \"* \"）来分段。请使用常规的段落文本，段落之间用换行符分隔。\n"
        "4. 内容应专业、详实，符合商业计划书或项目文档规范。\n\n"
        f"章节列表:\n{header_lines}\n\n"
        "参考语境（原文档内容，仅供参考风格，请重新生成）：\n"
        f"{preview[:PREVIEW_CHARS]}...\n\n"
        "请只返回纯 JSON 格式的数据，不要包含 markdown 代码块标记，不要包含其他解释文字。"
    )


def parse_content_map(raw: str) -> ContentMap:
    """
    Parse a model reply into a ContentMap

    Code fences are stripped first. Anything that is not a JSON object
    yields an empty map. Non-string values are rendered as text.
    """
    cleaned = _CODE_FENCE.sub("", raw or "").strip()
    try:
        data = json.loads(cleaned)
    except json.JSONDecodeError as e:
        logger.error("Content reply is not valid JSON: %s", e)
        return {}

    if not isinstance(data, dict):
        logger.error("Content reply is a %s, expected a JSON object", type(data).__name__)
        return {}

    content_map = {}
    for key, value in data.items():
        if isinstance(value, list):
            value = "\n".join(str(v) for v in value)
        elif not isinstance(value, str):
            value = json.dumps(value, ensure_ascii=False)
        content_map[str(key)] = value
    return content_map


class ContentProvider(ABC):
    """Produces the ContentMap for one template"""

    @abstractmethod
    async def generate(
        self,
        headers: List[str],
        context: Dict[str, Any],
        preview: str = "",
    ) -> ContentMap:
        """Return header -> content for the given headers"""
        pass


class StaticContentProvider(ContentProvider):
    """Serves content from a fixed mapping, restricted to requested headers"""

    def __init__(self, content: ContentMap):
        self.content = dict(content)

    @classmethod
    def from_json(cls, path: Union[str, Path]) -> "StaticContentProvider":
        with open(path, "r", encoding="utf-8") as f:
            return cls(parse_content_map(f.read()))

    async def generate(self, headers, context, preview=""):
        wanted = set(headers)
        return {k: v for k, v in self.content.items() if k in wanted}


class LLMContentWriter(ContentProvider):
    """
    Writes section content with an OpenAI-compatible chat model

    Without an API key every header gets deterministic placeholder text,
    so the whole pipeline can run offline.
    """

    def __init__(self, config=None, client: Optional[Any] = None):
        if config is None:
            from core.config import get_config
            config = get_config().llm
        self.config = config
        self._client = client

    @property
    def client(self):
        if self._client is None and self.config.openai_api_key:
            from openai import AsyncOpenAI
            self._client = AsyncOpenAI(
                api_key=self.config.openai_api_key,
                base_url=self.config.openai_base_url,
            )
            logger.info(
                "AI writer using OpenAI mode (model: %s, base URL: %s)",
                self.config.model_name,
                self.config.openai_base_url,
            )
        return self._client

    async def generate(self, headers, context, preview=""):
        if not headers:
            return {}

        client = self.client
        if client is None:
            return self.mock_generate(headers, context)

        from openai import OpenAIError

        prompt = build_prompt(headers, context, preview)
        try:
            response = await client.chat.completions.create(
                model=self.config.model_name,
                messages=[{"role": "user", "content": prompt}],
                temperature=self.config.temperature,
            )
        except OpenAIError as e:
            logger.error("AI generation failed, falling back to mock: %s", e)
            return self.mock_generate(headers, context)

        reply = response.choices[0].message.content or ""
        return parse_content_map(reply)

    @staticmethod
    def mock_generate(headers: List[str], context: Dict[str, Any]) -> ContentMap:
        """Placeholder content, one short block per header"""
        project_name = context.get("projectName") or "示例项目"
        logger.info("AI writer using mock mode (no OPENAI_API_KEY), %d headers", len(headers))
        return {
            header: f"{project_name}：{header}的内容待补充。\n本段由离线模式生成。"
            for header in headers
        }


def create_content_writer(content_file: Optional[Union[str, Path]] = None, config=None) -> ContentProvider:
    """Static provider when a content JSON file is given, otherwise the LLM writer"""
    if content_file:
        return StaticContentProvider.from_json(content_file)
    return LLMContentWriter(config=config)
