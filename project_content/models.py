"""Core data models shared across project content components."""

import json
from dataclasses import dataclass, field
from typing import Dict, List


@dataclass
class FileEntry:
    """A regular file discovered during traversal."""

    path: str
    root: str
    content: str


@dataclass
class SkippedPath:
    """A filesystem node that was left out of the result."""

    path: str
    reason: str


@dataclass
class ProjectSnapshot:
    """Relative path to normalized content for one project."""

    project_id: str
    files: Dict[str, str] = field(default_factory=dict)
    skipped: List[SkippedPath] = field(default_factory=list)
    collisions: List[str] = field(default_factory=list)

    def to_json(self) -> str:
        return json.dumps(self.files, indent=2, ensure_ascii=False)


@dataclass
class ToolResponse:
    """Outcome of a tool invocation: one text payload plus an error flag."""

    text: str
    is_error: bool = False

    @classmethod
    def ok(cls, text: str) -> "ToolResponse":
        return cls(text=text, is_error=False)

    @classmethod
    def error(cls, text: str) -> "ToolResponse":
        return cls(text=text, is_error=True)

    def to_payload(self) -> Dict[str, object]:
        """Return the tool result in its wire shape."""
        return {
            "content": [{"type": "text", "text": self.text}],
            "isError": self.is_error,
        }
