"""Tool-facing entrypoint: argument validation, dispatch and response shaping."""

from __future__ import annotations

import asyncio
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional

import pydantic
from pydantic import BaseModel, Field, StrictStr

from .aggregator import Aggregator
from .config import DEFAULT_SERVER_NAME, ConfigResolver
from .errors import ProtocolMisuseError, ValidationError
from .logging import get_logger
from .models import ProjectSnapshot, ToolResponse
from .walker import LocalFileSystem, TreeWalker

TOOL_NAME = "latest_project_data"
TOOL_DESCRIPTION = "Get latest project data including file names and contents"
TOOL_INPUT_SCHEMA: Dict[str, Any] = {
    "type": "object",
    "properties": {
        "projectPath": {
            "type": "string",
            "description": "Path to the project directory",
        },
    },
    "required": ["projectPath"],
}

logger = get_logger("gateway")


@dataclass
class ToolSpec:
    """Declared tool: name, description and JSON schema for its arguments."""

    name: str
    description: str
    input_schema: Dict[str, Any] = field(default_factory=dict)


class LatestProjectDataArgs(BaseModel):
    project_path: StrictStr = Field(alias="projectPath", min_length=1)


def parse_arguments(arguments: Optional[Mapping[str, Any]]) -> LatestProjectDataArgs:
    """Validate raw tool arguments, raising ``ValidationError`` on bad input."""
    if arguments is None or not isinstance(arguments, Mapping):
        raise ValidationError("Invalid arguments provided")
    try:
        return LatestProjectDataArgs.model_validate(dict(arguments))
    except pydantic.ValidationError as exc:
        raise ValidationError("projectPath must be a valid string") from exc


class ToolGateway:
    """Stateless facade over resolution and aggregation."""

    def __init__(
        self,
        resolver: ConfigResolver | None = None,
        aggregator: Aggregator | None = None,
    ) -> None:
        self.resolver = resolver or ConfigResolver()
        self.aggregator = aggregator or Aggregator()

    def list_tools(self) -> List[ToolSpec]:
        return [ToolSpec(TOOL_NAME, TOOL_DESCRIPTION, dict(TOOL_INPUT_SCHEMA))]

    def list_resources(self) -> List[Any]:
        return []

    async def call(
        self, name: str, arguments: Optional[Mapping[str, Any]]
    ) -> ToolResponse:
        """Dispatch a tool invocation by name."""
        if name != TOOL_NAME:
            raise ProtocolMisuseError(f"Unknown tool: {name}")
        return await self.latest_project_data(arguments)

    async def latest_project_data(
        self, arguments: Optional[Mapping[str, Any]]
    ) -> ToolResponse:
        try:
            args = parse_arguments(arguments)
        except ValidationError as exc:
            logger.info("Rejected %s call: %s", TOOL_NAME, exc)
            return ToolResponse.error(str(exc))

        try:
            snapshot = await self.collect(args.project_path)
        except Exception as exc:
            logger.error("Failed to collect %s: %s", args.project_path, exc)
            logger.debug("Collection failure details", exc_info=True)
            return ToolResponse.error(f"Error: Failed to process project files: {exc}")
        return ToolResponse.ok(snapshot.to_json())

    async def collect(self, project_id: str) -> ProjectSnapshot:
        """Resolve ``project_id`` and aggregate its files."""
        loop = asyncio.get_running_loop()
        roots = await loop.run_in_executor(None, self.resolver.resolve, project_id)
        return await self.aggregator.aggregate(project_id, roots)


def build_gateway(
    settings_path: Optional[Path] = None,
    server_name: str = DEFAULT_SERVER_NAME,
    filesystem: LocalFileSystem | None = None,
) -> ToolGateway:
    """Wire a gateway with its collaborators at process startup."""
    resolver = ConfigResolver(settings_path, server_name)
    aggregator = Aggregator(TreeWalker(filesystem))
    logger.debug("Using settings at %s (server %s)", resolver.settings_path, server_name)
    return ToolGateway(resolver, aggregator)


__all__ = [
    "LatestProjectDataArgs",
    "TOOL_DESCRIPTION",
    "TOOL_INPUT_SCHEMA",
    "TOOL_NAME",
    "ToolGateway",
    "ToolSpec",
    "build_gateway",
    "parse_arguments",
]
