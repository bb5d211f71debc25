"""Error taxonomy for project content requests."""

from __future__ import annotations


class ProjectContentError(RuntimeError):
    """Base class for failures raised while serving project content."""


class ValidationError(ProjectContentError):
    """Raised when tool arguments are missing or malformed."""


class ConfigurationError(ProjectContentError):
    """Raised when the settings document is unusable or lacks a mapping."""


class TraversalError(ProjectContentError):
    """Describes a single filesystem node that could not be processed."""

    def __init__(self, path: str, cause: BaseException) -> None:
        super().__init__(f"Error processing path {path}: {cause}")
        self.path = path
        self.cause = cause


class ProtocolMisuseError(ProjectContentError):
    """Raised when a caller invokes a tool that is not declared."""


__all__ = [
    "ConfigurationError",
    "ProjectContentError",
    "ProtocolMisuseError",
    "TraversalError",
    "ValidationError",
]
