"""CLI utility functions for vue-type-check.

Provides helper functions for:
- Output: shared consoles and consistent, styled status messages
- Path resolution: resolving user-supplied paths against the working directory
- Exit codes
"""

from __future__ import annotations

from collections.abc import Iterable
from pathlib import Path
from typing import NoReturn

import typer
from rich.console import Console

# Exit code conventions
EXIT_SUCCESS = 0
EXIT_FAILURE = 1  # Diagnostics found or the run aborted

# Rich consoles for output
console = Console()
err_console = Console(stderr=True)


# -----------------------------------------------------------------------------
# Output Helpers
# -----------------------------------------------------------------------------


def error(msg: str, *, exit_code: int = EXIT_FAILURE) -> NoReturn:
    """Print an error message and exit with the given exit code.

    Raises:
        typer.Exit: Always raises to exit the program.
    """
    styled_prefix = typer.style("Error:", fg=typer.colors.RED, bold=True)
    typer.echo(f"{styled_prefix} {msg}", err=True)
    raise typer.Exit(code=exit_code)


def warning(msg: str) -> None:
    """Print a warning message to stderr."""
    styled_prefix = typer.style("Warning:", fg=typer.colors.YELLOW, bold=True)
    typer.echo(f"{styled_prefix} {msg}", err=True)


def info(msg: str, verbose: bool = True) -> None:
    """Print an informational message to stderr when verbose output is on."""
    if verbose:
        typer.echo(msg, err=True)


# -----------------------------------------------------------------------------
# Path Resolution
# -----------------------------------------------------------------------------


def resolve_path(path: str | Path, base_path: Path | None = None) -> Path:
    """Resolve a path relative to a base path.

    Absolute paths are returned resolved; relative paths are resolved against
    base_path, or the current working directory.
    """
    p = Path(path)
    base = base_path or Path.cwd()
    return p.resolve() if p.is_absolute() else (base / p).resolve()


def resolve_paths(paths: Iterable[str | Path] | None, base_path: Path | None = None) -> list[Path]:
    return [resolve_path(p, base_path) for p in paths or ()]
