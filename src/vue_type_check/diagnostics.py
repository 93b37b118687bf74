"""Diagnostic models shared by the validators and the code-frame printer."""

from __future__ import annotations

from dataclasses import dataclass
from enum import IntEnum
from typing import Any


class DiagnosticSeverity(IntEnum):
    """Severity levels, numbered as on the language server wire."""

    ERROR = 1
    WARNING = 2
    INFORMATION = 3
    HINT = 4


@dataclass(frozen=True)
class Position:
    """Zero-based line and character offset within a document."""

    line: int
    character: int

    @classmethod
    def from_lsp(cls, data: dict[str, Any]) -> Position:
        return cls(line=int(data["line"]), character=int(data["character"]))


@dataclass(frozen=True)
class Range:
    """Half-open span between two positions."""

    start: Position
    end: Position

    @classmethod
    def from_lsp(cls, data: dict[str, Any]) -> Range:
        return cls(
            start=Position.from_lsp(data["start"]),
            end=Position.from_lsp(data["end"]),
        )

    @property
    def is_single_line(self) -> bool:
        return self.start.line == self.end.line


@dataclass(frozen=True)
class Diagnostic:
    """A problem reported by a validator for one document.

    Attributes:
        range: Source span the problem refers to.
        message: Human-readable description.
        severity: Severity level. Every reported diagnostic fails the run,
            whatever its severity.
        source: Name of the tool that produced it (e.g. "Vetur").
        code: Optional tool-specific code (e.g. 2339 for TypeScript).
    """

    range: Range
    message: str
    severity: DiagnosticSeverity = DiagnosticSeverity.ERROR
    source: str | None = None
    code: str | int | None = None

    @classmethod
    def from_lsp(cls, data: dict[str, Any]) -> Diagnostic:
        """Build a Diagnostic from a `textDocument/publishDiagnostics` entry."""
        severity = data.get("severity")
        return cls(
            range=Range.from_lsp(data["range"]),
            message=str(data["message"]),
            severity=DiagnosticSeverity(severity) if severity else DiagnosticSeverity.ERROR,
            source=data.get("source"),
            code=data.get("code"),
        )
