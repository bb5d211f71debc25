"""Settings loading and project identifier resolution."""

from __future__ import annotations

import json
import os
import sys
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional

import yaml

from .errors import ConfigurationError
from .logging import get_logger

DEFAULT_SERVER_NAME = "ProjectContentServer"
SETTINGS_ENV_VAR = "PROJECT_CONTENT_SETTINGS"

_CLINE_SETTINGS = Path(
    "Code",
    "User",
    "globalStorage",
    "saoudrizwan.claude-dev",
    "settings",
    "cline_mcp_settings.json",
)

logger = get_logger("config")


@dataclass
class ServerSettings:
    """Directory mapping configured for one server entry."""

    name: str
    directory_mapping: Dict[str, Any] = field(default_factory=dict)

    def roots_for(self, project_id: str) -> Optional[List[str]]:
        """Return the roots mapped to ``project_id`` or ``None`` when unmapped."""
        if project_id not in self.directory_mapping:
            return None
        return _as_root_list(project_id, self.directory_mapping[project_id])


def default_settings_path() -> Path:
    """Return the settings location from the environment or the editor's default."""
    override = os.environ.get(SETTINGS_ENV_VAR)
    if override:
        return Path(override).expanduser()

    home = Path.home()
    if sys.platform.startswith("win"):
        appdata = os.environ.get("APPDATA")
        base = Path(appdata) if appdata else home / "AppData" / "Roaming"
    elif sys.platform == "darwin":
        base = home / "Library" / "Application Support"
    else:
        xdg = os.environ.get("XDG_CONFIG_HOME")
        base = Path(xdg) if xdg else home / ".config"
    return base / _CLINE_SETTINGS


def load_settings(
    settings_path: Path, server_name: str = DEFAULT_SERVER_NAME
) -> ServerSettings:
    """Read the settings document and return the entry for ``server_name``."""
    data = _read_settings(settings_path)
    if not isinstance(data, dict):
        raise ConfigurationError(
            f"Settings file at {settings_path} must contain a mapping at the root"
        )

    servers = _as_dict(data.get("mcpServers")) or data
    entry = _as_dict(servers.get(server_name))
    mapping_data = _as_dict(entry.get("directoryMapping"))

    directory_mapping = {str(key): value for key, value in mapping_data.items()}
    return ServerSettings(name=server_name, directory_mapping=directory_mapping)


def _read_settings(path: Path) -> Any:
    try:
        text = path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as exc:
        raise ConfigurationError(
            f"Failed to read settings file at {path}: {exc}"
        ) from exc

    try:
        if path.suffix.lower() == ".json":
            return json.loads(text)
        return yaml.safe_load(text) or {}
    except (ValueError, yaml.YAMLError) as exc:
        raise ConfigurationError(
            f"Failed to read settings file at {path}: {exc}"
        ) from exc


def _as_dict(value: Any) -> Dict[str, Any]:
    return value if isinstance(value, dict) else {}


def _as_root_list(project_id: str, value: Any) -> List[str]:
    if not value and not isinstance(value, list):
        raise ConfigurationError(
            f"No directory mapping found for project path: {project_id}"
        )
    if isinstance(value, str):
        return [value]
    if isinstance(value, list) and all(isinstance(item, str) for item in value):
        return list(value)
    raise ConfigurationError(
        f"Directory mapping for project path {project_id} must be a list of paths"
    )


class ConfigResolver:
    """Resolves project identifiers to root paths using the settings document."""

    def __init__(
        self,
        settings_path: Optional[Path] = None,
        server_name: str = DEFAULT_SERVER_NAME,
    ) -> None:
        self.settings_path = Path(settings_path) if settings_path else default_settings_path()
        self.server_name = server_name

    def load(self) -> ServerSettings:
        """Read the settings document afresh."""
        return load_settings(self.settings_path, self.server_name)

    def resolve(self, project_id: str) -> List[str]:
        """Return the configured roots for ``project_id`` in their stored order."""
        roots = self.load().roots_for(project_id)
        if roots is None:
            raise ConfigurationError(
                f"No directory mapping found for project path: {project_id}"
            )
        logger.debug("Resolved %s to %d root(s)", project_id, len(roots))
        return list(roots)

    def project_ids(self) -> List[str]:
        """Return every configured project identifier."""
        return list(self.load().directory_mapping)


__all__ = [
    "ConfigResolver",
    "DEFAULT_SERVER_NAME",
    "SETTINGS_ENV_VAR",
    "ServerSettings",
    "default_settings_path",
    "load_settings",
]
