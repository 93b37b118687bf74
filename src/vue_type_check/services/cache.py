"""Bounded per-document cache for derived language models."""

from __future__ import annotations

import time
from collections.abc import Callable
from dataclasses import dataclass
from typing import Generic, TypeVar

from vue_type_check.document import TextDocument

T = TypeVar("T")


@dataclass
class _CacheEntry(Generic[T]):
    version: int
    language_id: str
    c_time: float
    model: T


class LanguageModelCache(Generic[T]):
    """Cache of models parsed from documents, keyed by document URI.

    An entry is reused while the document's version and language id match.
    When the cache is full the least recently used entry is evicted, and
    entries not used for ``cleanup_interval`` seconds are dropped whenever
    the cache is accessed.

    A disposed cache cannot be used again.
    """

    def __init__(
        self,
        max_entries: int,
        cleanup_interval: float,
        parse: Callable[[TextDocument], T],
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self.max_entries = max_entries
        self.cleanup_interval = cleanup_interval
        self._parse = parse
        self._clock = clock
        self._models: dict[str, _CacheEntry[T]] = {}
        self._disposed = False

    def __len__(self) -> int:
        return len(self._models)

    def __contains__(self, uri: object) -> bool:
        return uri in self._models

    @property
    def disposed(self) -> bool:
        return self._disposed

    def _check_alive(self) -> None:
        if self._disposed:
            raise RuntimeError("language model cache has been disposed")

    def _cleanup(self, now: float) -> None:
        cutoff = now - self.cleanup_interval
        for uri in [uri for uri, entry in self._models.items() if entry.c_time < cutoff]:
            del self._models[uri]

    def refresh_and_get(self, document: TextDocument) -> T:
        """Return the model for a document, parsing it when stale or missing."""
        self._check_alive()
        now = self._clock()
        self._cleanup(now)

        entry = self._models.get(document.uri)
        if (
            entry is not None
            and entry.version == document.version
            and entry.language_id == document.language_id
        ):
            entry.c_time = now
            return entry.model

        model = self._parse(document)
        if entry is None and len(self._models) >= self.max_entries:
            oldest = min(self._models, key=lambda uri: self._models[uri].c_time)
            del self._models[oldest]
        self._models[document.uri] = _CacheEntry(
            version=document.version,
            language_id=document.language_id,
            c_time=now,
            model=model,
        )
        return model

    def dispose(self) -> None:
        """Release every cached model. Safe to call more than once."""
        self._models.clear()
        self._disposed = True
