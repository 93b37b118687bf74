"""File discovery, loading and script-presence filtering.

Finds the component and script files to check under a source root, reads
them, and (in TypeScript-only mode) drops components whose script block is
plain JavaScript.
"""

from __future__ import annotations

import asyncio
import re
from collections.abc import Iterable, Sequence
from dataclasses import dataclass
from pathlib import Path

from vue_type_check.document import TextDocument

TEMPLATE_EXTENSION = "vue"
DEFAULT_EXTENSIONS = (TEMPLATE_EXTENSION,)
TYPESCRIPT_EXTENSIONS = ("ts", "tsx", TEMPLATE_EXTENSION)

# Directories never scanned for sources
IGNORED_DIRS = frozenset(
    {
        "node_modules",
        ".git",
        ".nuxt",
        ".output",
    }
)

_SCRIPT_TAG = re.compile(r".*<script.*>")
_TS_SCRIPT_TAG = re.compile(r'.*<script.*lang="tsx?".*>')
_SRC_SCRIPT_TAG = re.compile(r'.*<script.*src=".*".*>')


@dataclass(frozen=True)
class SourceFile:
    """A file read from disk, before it becomes a TextDocument.

    Attributes:
        path: Absolute path of the file.
        file_ext: Extension without the dot, used as the language id.
        src: Raw file content.
    """

    path: Path
    file_ext: str
    src: str

    def to_document(self) -> TextDocument:
        return TextDocument.from_path(self.path, self.file_ext, self.src)


def extract_target_file_extension(path: str | Path) -> str | None:
    """Return the extension of a path without the leading dot.

    Returns:
        The extension (e.g. "vue"), or None if the file has none.
    """
    suffix = Path(path).suffix
    return suffix[1:] if suffix else None


def _is_ignored(path: Path, root: Path) -> bool:
    try:
        rel_path = path.relative_to(root)
    except ValueError:
        return False
    return bool(set(rel_path.parts) & IGNORED_DIRS)


def _is_excluded(path: Path, exclude_prefixes: Sequence[str]) -> bool:
    text = str(path)
    return any(text.startswith(prefix) for prefix in exclude_prefixes)


def select_files(
    root: Path,
    extensions: Iterable[str] = DEFAULT_EXTENSIONS,
    exclude_dirs: Iterable[Path] | None = None,
) -> list[Path]:
    """Find the files to check under a source root.

    Excluded directories are plain path prefixes: a file is dropped when its
    absolute path starts with any of them.

    Args:
        root: Directory to search recursively.
        extensions: Extensions (without dot) to match.
        exclude_dirs: Absolute directories whose files are skipped.

    Returns:
        Sorted list of absolute file paths. Empty if nothing matches.
    """
    root = root.resolve()
    wanted = frozenset(extensions)
    exclude_prefixes = [str(Path(d).resolve()) for d in exclude_dirs or ()]

    selected: list[Path] = []
    for path in root.rglob("*"):
        if extract_target_file_extension(path) not in wanted:
            continue
        if not path.is_file() or _is_ignored(path, root):
            continue
        if _is_excluded(path, exclude_prefixes):
            continue
        selected.append(path)

    return sorted(selected)


async def read_source(path: Path) -> SourceFile:
    """Read a single file. Errors propagate to the caller."""
    src = (await asyncio.to_thread(path.read_bytes)).decode("utf-8")
    return SourceFile(path=path, file_ext=extract_target_file_extension(path) or "", src=src)


async def load_files(paths: Sequence[Path]) -> list[SourceFile]:
    """Read all files concurrently, keeping the input order.

    Raises:
        OSError: If any file cannot be read. The whole batch fails.
    """
    return list(await asyncio.gather(*(read_source(path) for path in paths)))


def has_script_tag(src: str) -> bool:
    return _SCRIPT_TAG.search(src) is not None


def is_ts(src: str) -> bool:
    """Check whether a script tag declares lang="ts" or lang="tsx"."""
    return _TS_SCRIPT_TAG.search(src) is not None


def is_import_other_ts(src: str) -> bool:
    """Check whether a script tag delegates to another file via src."""
    return _SRC_SCRIPT_TAG.search(src) is not None


def keep_source(source: SourceFile) -> bool:
    """Decide whether a file survives the TypeScript-only filter.

    Rules, in order:
    - files other than components always pass
    - components without a script block pass (their template is still checked)
    - components with a TypeScript script block pass
    - components whose script block points to another file pass
    - everything else (a plain JavaScript block) is dropped

    This is a textual heuristic, not a parse.
    """
    if source.file_ext != TEMPLATE_EXTENSION or not has_script_tag(source.src):
        return True
    return is_ts(source.src) or is_import_other_ts(source.src)


def filter_typescript_sources(sources: Iterable[SourceFile]) -> list[SourceFile]:
    return [source for source in sources if keep_source(source)]
