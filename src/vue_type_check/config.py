"""Configuration management for vue-type-check.

Handles configuration loading from multiple sources with precedence:
CLI args > environment variables > .vuetypecheckrc > pyproject.toml > defaults
"""

from __future__ import annotations

import os
import shlex
import sys
from dataclasses import dataclass, fields
from pathlib import Path
from typing import Any

# tomllib is only available in Python 3.11+
if sys.version_info >= (3, 11):
    import tomllib
else:
    import tomli as tomllib  # type: ignore[import-not-found]

RC_FILE_NAME = ".vuetypecheckrc"
PYPROJECT_SECTION = "vue-type-check"
ENV_PREFIX = "VUE_TYPE_CHECK_"


@dataclass
class CheckConfig:
    """Configuration for a check run.

    Attributes:
        server_command: Command line that starts the language server over
            stdio (default: "vls --stdio").
        tsconfig_name: Compiler configuration file name, relative to the
            workspace (default: "tsconfig.json").
        package_name: Package manifest file name, relative to the workspace
            (default: "package.json").
        cache_max_entries: Documents kept per region cache (default: 10).
        cache_ttl_seconds: Seconds an unused cache entry survives (default: 60).
        response_timeout: Seconds to wait for any single language server
            reply (default: 120).
    """

    server_command: str = "vls --stdio"
    tsconfig_name: str = "tsconfig.json"
    package_name: str = "package.json"
    cache_max_entries: int = 10
    cache_ttl_seconds: float = 60
    response_timeout: float = 120.0

    def __post_init__(self) -> None:
        """Validate configuration after initialization."""
        self._validate()

    def _validate(self) -> None:
        """Validate configuration values.

        Raises:
            ValueError: If any configuration value is invalid.
        """
        if not self.server_command or not isinstance(self.server_command, str):
            raise ValueError("server_command must be a non-empty string")
        if not self.server_args:
            raise ValueError("server_command must name an executable")

        if not self.tsconfig_name or not isinstance(self.tsconfig_name, str):
            raise ValueError("tsconfig_name must be a non-empty string")
        if not self.package_name or not isinstance(self.package_name, str):
            raise ValueError("package_name must be a non-empty string")

        self.cache_max_entries = int(self.cache_max_entries)
        if self.cache_max_entries < 1:
            raise ValueError("cache_max_entries must be at least 1")

        self.cache_ttl_seconds = float(self.cache_ttl_seconds)
        if self.cache_ttl_seconds <= 0:
            raise ValueError("cache_ttl_seconds must be positive")

        self.response_timeout = float(self.response_timeout)
        if self.response_timeout <= 0:
            raise ValueError("response_timeout must be positive")

    @property
    def server_args(self) -> list[str]:
        """The server command split into an argument vector."""
        return shlex.split(self.server_command)

    def get_tsconfig_path(self, workspace: Path) -> Path:
        return workspace / self.tsconfig_name

    def get_package_path(self, workspace: Path) -> Path:
        return workspace / self.package_name


def _get_config_field_names() -> set[str]:
    """Get the set of valid configuration field names."""
    return {f.name for f in fields(CheckConfig)}


def find_config_file(filename: str, start_dir: Path | None = None) -> Path | None:
    """Find a configuration file by traversing up the directory tree.

    Args:
        filename: Name of the config file to find.
        start_dir: Directory to start searching from. Defaults to current directory.

    Returns:
        Path to the config file if found, None otherwise.
    """
    current = (start_dir or Path.cwd()).resolve()

    while True:
        config_path = current / filename
        if config_path.is_file():
            return config_path

        parent = current.parent
        if parent == current:
            return None
        current = parent


def _load_toml_file(path: Path) -> dict[str, Any]:
    with open(path, "rb") as f:
        result: dict[str, Any] = tomllib.load(f)
        return result


def _load_from_rc(start_dir: Path | None = None) -> dict[str, Any]:
    """Load configuration from the .vuetypecheckrc TOML file, if any."""
    config_path = find_config_file(RC_FILE_NAME, start_dir)
    if config_path is None:
        return {}

    try:
        data = _load_toml_file(config_path)
    except (tomllib.TOMLDecodeError, OSError):
        return {}
    valid_fields = _get_config_field_names()
    return {k: v for k, v in data.items() if k in valid_fields}


def _load_from_pyproject(start_dir: Path | None = None) -> dict[str, Any]:
    """Load configuration from pyproject.toml [tool.vue-type-check] section."""
    config_path = find_config_file("pyproject.toml", start_dir)
    if config_path is None:
        return {}

    try:
        data = _load_toml_file(config_path)
    except (tomllib.TOMLDecodeError, OSError):
        return {}
    section = data.get("tool", {}).get(PYPROJECT_SECTION, {})
    valid_fields = _get_config_field_names()
    return {k.replace("-", "_"): v for k, v in section.items() if k.replace("-", "_") in valid_fields}


def _load_from_env() -> dict[str, Any]:
    """Load configuration from environment variables.

    Variables use the VUE_TYPE_CHECK_ prefix and the upper-cased field name,
    e.g. VUE_TYPE_CHECK_SERVER_COMMAND.
    """
    result: dict[str, Any] = {}
    for name in _get_config_field_names():
        value = os.environ.get(f"{ENV_PREFIX}{name.upper()}")
        if value is not None:
            result[name] = value
    return result


def _merge_configs(*configs: dict[str, Any]) -> dict[str, Any]:
    """Merge configuration dictionaries; later ones take precedence."""
    result: dict[str, Any] = {}
    for config in configs:
        for key, value in config.items():
            if value is not None:
                result[key] = value
    return result


def load_config(
    cli_overrides: dict[str, Any] | None = None,
    start_dir: Path | None = None,
) -> CheckConfig:
    """Load configuration with full precedence chain.

    Precedence (highest to lowest):
    1. CLI arguments (cli_overrides)
    2. Environment variables (VUE_TYPE_CHECK_*)
    3. .vuetypecheckrc file
    4. pyproject.toml [tool.vue-type-check] section
    5. Default values

    Args:
        cli_overrides: Configuration overrides from CLI arguments.
        start_dir: Directory to start searching for config files, usually
            the workspace root.

    Returns:
        Fully resolved CheckConfig instance.

    Raises:
        ValueError: If the resulting configuration is invalid.
    """
    valid_fields = _get_config_field_names()
    cli_config = {
        k: v for k, v in (cli_overrides or {}).items() if k in valid_fields and v is not None
    }

    merged = _merge_configs(
        _load_from_pyproject(start_dir),
        _load_from_rc(start_dir),
        _load_from_env(),
        cli_config,
    )
    return CheckConfig(**merged)
