"""
DocForge Generation Pipeline

Copies a template tree into a per-project output tree and fills every Word
template with generated section content:

- Scan the template root
- Read each .docx template's text and detect its section headers
- Ask the content provider for a ContentMap keyed by those headers
- Inject the content, one task per file, bounded by the configured
  concurrency

A failure on one file is logged and recorded; the other files carry on.
"""

import asyncio
import logging
import re
import shutil
from pathlib import Path
from typing import Optional, Union

from agents.content_writer import ContentProvider, create_content_writer
from core.config import DocForgeConfig, get_config
from core.state import FileOutcome, FileResult, GenerationResult, ProjectData
from injection.content_injector import ContentInjector, create_content_injector
from injection.exceptions import EmptyHeaderSetWarning
from injection.template_cache import TemplateCache
from tools.document_tools import TemplateFile, TemplateReader, scan_templates

logger = logging.getLogger(__name__)


# Template file names carry a placeholder project name
PLACEHOLDER_NAME = re.compile(r"xxx项目|xx项目|XX", re.IGNORECASE)


def resolve_output_name(relative_path: str, project_name: str) -> str:
    """
    Replace the placeholder project name in a template path

    >>> resolve_output_name("01立项/xx项目建议书.docx", "智慧园区项目")
    '01立项/智慧园区项目建议书.docx'
    """
    if not project_name:
        return relative_path
    resolved = PLACEHOLDER_NAME.sub(lambda _: project_name, relative_path)
    return resolved.replace("项目项目", "项目")


class DocumentGenerator:
    """
    Generates a project's document set from a template tree

    Usage:
        generator = DocumentGenerator(provider=create_content_writer())
        result = await generator.generate_all(ProjectData(project_name="Demo"))
        result.generated_files
    """

    def __init__(
        self,
        provider: ContentProvider,
        config: Optional[DocForgeConfig] = None,
        cache: Optional[TemplateCache] = None,
        injector: Optional[ContentInjector] = None,
        reader: Optional[TemplateReader] = None,
    ):
        self.provider = provider
        self.config = config or get_config()
        self.cache = cache if cache is not None else TemplateCache()
        self.injector = injector or create_content_injector(cache=self.cache, config=self.config.injection)
        self.reader = reader or TemplateReader(cache=self.cache)

    async def generate_all(
        self,
        project: ProjectData,
        template_root: Optional[Union[str, Path]] = None,
        output_root: Optional[Union[str, Path]] = None,
    ) -> GenerationResult:
        """Generate every template under template_root into output_root/<project>"""
        template_root = Path(template_root or self.config.paths.templates)
        output_root = Path(output_root or self.config.paths.output) / (project.project_name or "GeneratedProject")

        logger.info("Generating documents from %s into %s", template_root, output_root)
        files = scan_templates(template_root)

        semaphore = asyncio.Semaphore(max(1, self.config.generator.concurrency))

        async def run(template: TemplateFile) -> FileResult:
            async with semaphore:
                return await self.generate_file(template, project, output_root)

        results = await asyncio.gather(*(run(f) for f in files))

        result = GenerationResult(output_root=str(output_root), files=list(results))
        logger.info(
            "Generation complete: %d injected, %d skipped, %d failed",
            len(result.generated_files),
            len(result.skipped_files),
            len(result.errors),
        )
        return result

    async def generate_file(
        self,
        template: TemplateFile,
        project: ProjectData,
        output_root: Path,
    ) -> FileResult:
        """Process one template; never raises"""
        target = output_root / resolve_output_name(template.relative_path, project.project_name)
        result = FileResult(
            template_path=str(template.path),
            output_path=str(target),
            outcome=FileOutcome.COPIED,
        )
        logger.info("Processing %s -> %s", template.relative_path, target)

        try:
            if template.extension != ".docx":
                await asyncio.to_thread(self._copy, template.path, target)
                return result

            info = await asyncio.to_thread(self.reader.read_template, template.path)
            if not info.headers:
                logger.warning(
                    "%s: no headers detected in %s, skipping injection",
                    EmptyHeaderSetWarning.__name__,
                    template.relative_path,
                )
                await asyncio.to_thread(self._copy, template.path, target)
                result.outcome = FileOutcome.SKIPPED
                return result

            content_map = await self.provider.generate(info.headers, project.to_context(), info.content)
            if not content_map:
                logger.warning("No content generated for %s, copying template", template.relative_path)
                await asyncio.to_thread(self._copy, template.path, target)
                result.outcome = FileOutcome.SKIPPED
                return result

            logger.debug("Content keys for %s: %s", template.relative_path, list(content_map))
            report = await asyncio.to_thread(self.injector.inject_file, template.path, target, content_map)
            result.outcome = FileOutcome.INJECTED
            result.matched_headers = report.matched_headers
            result.unused_keys = report.unused_keys

        except Exception as e:
            logger.exception("Failed to process %s", template.relative_path)
            result.outcome = FileOutcome.FAILED
            result.error = str(e)

        return result

    @staticmethod
    def _copy(source: Path, target: Path) -> None:
        target.parent.mkdir(parents=True, exist_ok=True)
        shutil.copy2(source, target)


def create_document_generator(
    content_file: Optional[Union[str, Path]] = None,
    config: Optional[DocForgeConfig] = None,
    cache: Optional[TemplateCache] = None,
) -> DocumentGenerator:
    """Factory: static content when content_file is given, else the LLM writer"""
    config = config or get_config()
    provider = create_content_writer(content_file, config=config.llm)
    return DocumentGenerator(provider=provider, config=config, cache=cache)
