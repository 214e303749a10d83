"""DocForge Core - configuration, state and the generation pipeline"""

from .config import DocForgeConfig, get_config, set_config
from .state import (
    ProjectData,
    FileOutcome,
    FileResult,
    GenerationResult,
)

__all__ = [
    "DocForgeConfig",
    "get_config",
    "set_config",
    "ProjectData",
    "FileOutcome",
    "FileResult",
    "GenerationResult",
]
