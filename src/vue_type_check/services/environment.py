"""Workspace environment resolution.

Collects the paths and settings the language server needs for one run and
fails early on configuration files that cannot be parsed.
"""

from __future__ import annotations

import json
import re
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from vue_type_check.errors import WorkspaceConfigError

# Strings are matched first so comment markers inside them survive
_JSONC_TOKENS = re.compile(r'"(?:\\.|[^"\\])*"|//[^\n]*|/\*.*?\*/', re.DOTALL)
_TRAILING_COMMA = re.compile(r",(\s*[}\]])")


def get_default_vls_config() -> dict[str, Any]:
    """Settings sent to the Vue language server as its configuration."""
    return {
        "vetur": {
            "useWorkspaceDependencies": False,
            "validation": {
                "template": True,
                "templateProps": True,
                "interpolation": True,
                "style": False,
                "script": True,
            },
            "experimental": {
                "templateInterpolationService": True,
            },
        },
    }


def parse_jsonc(text: str) -> Any:
    """Parse JSON that may contain comments and trailing commas (tsconfig style).

    Raises:
        json.JSONDecodeError: If the text is not valid once comments are removed.
    """

    def _strip(match: re.Match[str]) -> str:
        token = match.group(0)
        return token if token.startswith('"') else ""

    return json.loads(_TRAILING_COMMA.sub(r"\1", _JSONC_TOKENS.sub(_strip, text)))


def _read_json_file(path: Path, *, allow_comments: bool) -> dict[str, Any] | None:
    if not path.is_file():
        return None
    try:
        text = path.read_text(encoding="utf-8")
        data = parse_jsonc(text) if allow_comments else json.loads(text)
    except (OSError, UnicodeDecodeError, json.JSONDecodeError) as e:
        raise WorkspaceConfigError(path, str(e)) from e
    if not isinstance(data, dict):
        raise WorkspaceConfigError(path, "expected a JSON object at the top level")
    return data


@dataclass
class EnvironmentService:
    """Resolved workspace information shared by both validators.

    Attributes:
        root_path: Workspace root directory.
        src_path: Directory the sources are collected from.
        tsconfig_path: Location of the compiler configuration file.
        package_path: Location of the package manifest.
        tsconfig: Parsed compiler configuration, or None if absent.
        package: Parsed package manifest, or None if absent.
        config: Language server settings.
    """

    root_path: Path
    src_path: Path
    tsconfig_path: Path
    package_path: Path
    tsconfig: dict[str, Any] | None = None
    package: dict[str, Any] | None = None
    config: dict[str, Any] = field(default_factory=get_default_vls_config)

    @property
    def root_uri(self) -> str:
        return self.root_path.as_uri()

    def get_config_section(self, section: str | None) -> Any:
        """Look up a dotted configuration section ("vetur.validation")."""
        if not section:
            return self.config
        value: Any = self.config
        for part in section.split("."):
            if not isinstance(value, dict) or part not in value:
                return None
            value = value[part]
        return value

    def has_typescript(self) -> bool:
        """Whether the workspace declares TypeScript as a dependency."""
        if self.tsconfig is not None:
            return True
        if not self.package:
            return False
        for key in ("dependencies", "devDependencies"):
            if "typescript" in (self.package.get(key) or {}):
                return True
        return False


def create_environment_service(
    root_path: Path,
    src_path: Path,
    tsconfig_path: Path,
    package_path: Path,
    config: dict[str, Any] | None = None,
) -> EnvironmentService:
    """Resolve the workspace environment.

    Missing tsconfig.json or package.json files are allowed; files that exist
    but cannot be parsed are fatal.

    Raises:
        WorkspaceConfigError: If a directory is missing or a configuration
            file is invalid. The parser message is kept verbatim.
    """
    if not root_path.is_dir():
        raise WorkspaceConfigError(root_path, "workspace root is not a directory")
    if not src_path.is_dir():
        raise WorkspaceConfigError(src_path, "source directory is not a directory")

    return EnvironmentService(
        root_path=root_path,
        src_path=src_path,
        tsconfig_path=tsconfig_path,
        package_path=package_path,
        tsconfig=_read_json_file(tsconfig_path, allow_comments=True),
        package=_read_json_file(package_path, allow_comments=False),
        config=config if config is not None else get_default_vls_config(),
    )
