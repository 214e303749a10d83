"""
DocForge Core State
Project input and generation results shared by the pipeline and the CLI
"""

from typing import List, Dict, Optional, Any
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum


class FileOutcome(str, Enum):
    """What happened to one template file"""
    INJECTED = "injected"          # Sections rewritten with generated content
    COPIED = "copied"              # Copied unchanged (non-docx template)
    SKIPPED = "skipped"            # No headers or no content; copied unchanged
    FAILED = "failed"


@dataclass
class ProjectData:
    """The project a document set is generated for"""
    project_name: str
    project_code: str = ""
    project_manager: str = ""
    project_description: Optional[str] = None
    project_objective: Optional[str] = None
    project_scope: Optional[str] = None
    extra: Dict[str, Any] = field(default_factory=dict)

    def to_context(self) -> Dict[str, Any]:
        """Flat dict handed to content providers"""
        context = {
            "projectName": self.project_name,
            "projectCode": self.project_code,
            "projectManager": self.project_manager,
        }
        optional = {
            "projectDescription": self.project_description,
            "projectObjective": self.project_objective,
            "projectScope": self.project_scope,
        }
        context.update({k: v for k, v in optional.items() if v})
        context.update(self.extra)
        return context

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "ProjectData":
        """Accepts camelCase (web form) or snake_case keys"""
        known = {
            "project_name": ("projectName", "project_name"),
            "project_code": ("projectCode", "project_code"),
            "project_manager": ("projectManager", "project_manager"),
            "project_description": ("projectDescription", "project_description"),
            "project_objective": ("projectObjective", "project_objective"),
            "project_scope": ("projectScope", "project_scope"),
        }
        kwargs: Dict[str, Any] = {}
        used = set()
        for attr, aliases in known.items():
            for alias in aliases:
                if alias in data:
                    kwargs[attr] = data[alias]
                    used.add(alias)
                    break
        if not kwargs.get("project_name"):
            raise ValueError("projectName is required")
        kwargs["extra"] = {k: v for k, v in data.items() if k not in used}
        return cls(**kwargs)


@dataclass
class FileResult:
    """Result for a single template"""
    template_path: str
    output_path: str
    outcome: FileOutcome
    matched_headers: List[str] = field(default_factory=list)
    unused_keys: List[str] = field(default_factory=list)
    error: Optional[str] = None


@dataclass
class GenerationResult:
    """Result of generating a whole document set"""
    output_root: str
    files: List[FileResult] = field(default_factory=list)
    generated_at: str = field(default_factory=lambda: datetime.now().isoformat())

    @property
    def success(self) -> bool:
        return not any(f.outcome is FileOutcome.FAILED for f in self.files)

    @property
    def generated_files(self) -> List[str]:
        return [f.output_path for f in self.files if f.outcome is FileOutcome.INJECTED]

    @property
    def skipped_files(self) -> List[str]:
        return [f.output_path for f in self.files if f.outcome is FileOutcome.SKIPPED]

    @property
    def errors(self) -> Dict[str, str]:
        return {f.template_path: f.error for f in self.files if f.outcome is FileOutcome.FAILED}

    def to_dict(self) -> Dict[str, Any]:
        return {
            "success": self.success,
            "outputPath": self.output_root,
            "documentCount": len(self.generated_files),
            "generatedAt": self.generated_at,
            "skipped": self.skipped_files,
            "errors": self.errors,
        }
