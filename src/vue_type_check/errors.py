"""Exceptions raised by vue-type-check.

Validation diagnostics are data, not exceptions. Everything defined here is
fatal for a run and surfaces through the single boundary in the runner.
"""

from __future__ import annotations

from pathlib import Path


class WorkspaceConfigError(Exception):
    """Raised when the workspace configuration cannot be resolved."""

    def __init__(self, path: Path, reason: str) -> None:
        self.path = path
        self.reason = reason
        super().__init__(f"Invalid workspace configuration at {path}: {reason}")


class LanguageServerError(Exception):
    """Raised when the language server fails or exits unexpectedly."""

    def __init__(self, message: str, *, code: int | None = None) -> None:
        self.code = code
        super().__init__(message)
