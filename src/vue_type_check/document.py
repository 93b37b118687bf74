"""In-memory text documents handed to the validators."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path

from vue_type_check.diagnostics import Position


@dataclass(frozen=True)
class TextDocument:
    """An addressable, read-only text document.

    Version is always 0: documents are checked once and never edited.

    Attributes:
        uri: ``file://`` URI of the document.
        language_id: Language identifier derived from the file extension
            ("vue", "ts", "tsx").
        version: Document version, fixed at 0.
        text: Full document content.
    """

    uri: str
    language_id: str
    version: int
    text: str
    _line_offsets: tuple[int, ...] = field(init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        offsets = [0]
        for index, char in enumerate(self.text):
            if char == "\n":
                offsets.append(index + 1)
        object.__setattr__(self, "_line_offsets", tuple(offsets))

    @classmethod
    def create(cls, uri: str, language_id: str, version: int, text: str) -> TextDocument:
        return cls(uri=uri, language_id=language_id, version=version, text=text)

    @classmethod
    def from_path(cls, path: Path, language_id: str, text: str) -> TextDocument:
        return cls.create(path.resolve().as_uri(), language_id, 0, text)

    @property
    def line_count(self) -> int:
        return len(self._line_offsets)

    def get_line(self, line: int) -> str:
        """Return the text of a line without its line terminator.

        Args:
            line: Zero-based line number.

        Raises:
            IndexError: If the line is outside the document.
        """
        if line < 0 or line >= self.line_count:
            raise IndexError(f"line {line} out of range (0..{self.line_count - 1})")
        start = self._line_offsets[line]
        end = self._line_offsets[line + 1] if line + 1 < self.line_count else len(self.text)
        return self.text[start:end].rstrip("\r\n")

    def offset_at(self, position: Position) -> int:
        """Convert a position to an absolute offset, clamping to the document."""
        if position.line >= self.line_count:
            return len(self.text)
        if position.line < 0:
            return 0
        line_start = self._line_offsets[position.line]
        line_end = (
            self._line_offsets[position.line + 1]
            if position.line + 1 < self.line_count
            else len(self.text)
        )
        return max(min(line_start + position.character, line_end), line_start)
