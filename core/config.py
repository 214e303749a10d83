"""
DocForge Configuration
Environment-based configuration for the document generation pipeline
"""

import os
from typing import Optional
from dataclasses import dataclass, field


def _env_flag(name: str, default: bool) -> bool:
    value = os.getenv(name)
    if value is None:
        return default
    return value.strip().lower() in ("1", "true", "yes", "on")


@dataclass
class LLMConfig:
    """Configuration for the content-writing model"""
    openai_api_key: Optional[str] = None
    openai_base_url: str = "https://api.openai.com/v1"
    model_name: str = "gpt-3.5-turbo"
    temperature: float = 0.7

    def __post_init__(self):
        """Load from environment variables"""
        self.openai_api_key = os.getenv("OPENAI_API_KEY", self.openai_api_key)
        self.openai_base_url = os.getenv("OPENAI_BASE_URL", self.openai_base_url)
        self.model_name = os.getenv("MODEL_NAME", self.model_name)


@dataclass
class PathsConfig:
    """Template and output locations"""
    templates: str = "./templates"
    output: str = "./output"

    def __post_init__(self):
        """Load from environment variables"""
        self.templates = os.getenv("DOCFORGE_TEMPLATES", self.templates)
        self.output = os.getenv("DOCFORGE_OUTPUT", self.output)


@dataclass
class InjectionConfig:
    """Paragraph styles and key handling for section injection"""
    normal_style: str = "Normal"
    heading2_style: str = "Heading2"
    heading3_style: str = "Heading3"

    # Inject a header's content only at its first occurrence
    consume_keys: bool = False

    def __post_init__(self):
        """Load from environment variables"""
        self.consume_keys = _env_flag("DOCFORGE_CONSUME_KEYS", self.consume_keys)


@dataclass
class GeneratorConfig:
    """Pipeline behaviour"""
    concurrency: int = 2

    def __post_init__(self):
        """Load from environment variables"""
        self.concurrency = int(os.getenv("DOCFORGE_CONCURRENCY", self.concurrency))


@dataclass
class DocForgeConfig:
    """Master configuration for DocForge"""
    llm: LLMConfig = field(default_factory=LLMConfig)
    paths: PathsConfig = field(default_factory=PathsConfig)
    injection: InjectionConfig = field(default_factory=InjectionConfig)
    generator: GeneratorConfig = field(default_factory=GeneratorConfig)

    @classmethod
    def from_env(cls) -> "DocForgeConfig":
        """Create configuration from environment variables"""
        return cls(
            llm=LLMConfig(),
            paths=PathsConfig(),
            injection=InjectionConfig(),
            generator=GeneratorConfig()
        )

    def validate(self) -> list:
        """Validate configuration and return list of issues"""
        issues = []

        if not self.llm.openai_api_key:
            issues.append("OPENAI_API_KEY not set (mock writer will be used)")
        if self.generator.concurrency < 1:
            issues.append("DOCFORGE_CONCURRENCY must be at least 1")
        if not os.path.isdir(self.paths.templates):
            issues.append(f"Template directory not found: {self.paths.templates}")

        return issues


# Global configuration instance
_config: Optional[DocForgeConfig] = None


def get_config() -> DocForgeConfig:
    """Get the global configuration instance"""
    global _config
    if _config is None:
        _config = DocForgeConfig.from_env()
    return _config


def set_config(config: DocForgeConfig) -> None:
    """Set the global configuration instance"""
    global _config
    _config = config
