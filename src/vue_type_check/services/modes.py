"""Template and script validators backed by the language server session."""

from __future__ import annotations

from collections.abc import AsyncIterator, Awaitable, Callable
from contextlib import AbstractAsyncContextManager, asynccontextmanager
from dataclasses import dataclass
from typing import Protocol

from vue_type_check.config import CheckConfig
from vue_type_check.diagnostics import Diagnostic
from vue_type_check.document import TextDocument
from vue_type_check.services.cache import LanguageModelCache
from vue_type_check.services.environment import EnvironmentService
from vue_type_check.services.language_server import LanguageServerSession
from vue_type_check.services.regions import VueDocumentRegions, get_vue_document_regions


class TemplateValidator(Protocol):
    """Validates the template region of a document."""

    async def do_validation(self, document: TextDocument) -> list[Diagnostic]: ...


class ScriptValidator(Protocol):
    """Validates the script region of a document.

    ``do_validation`` may be None when the validator cannot validate; callers
    must check before calling.
    """

    do_validation: Callable[[TextDocument], Awaitable[list[Diagnostic]]] | None


class DiagnosticsSource(Protocol):
    async def diagnostics(self, document: TextDocument) -> list[Diagnostic]: ...


def _region_kind(document: TextDocument, regions: VueDocumentRegions, diagnostic: Diagnostic) -> str | None:
    return regions.kind_at(document.offset_at(diagnostic.range.start))


class VueInterpolationMode:
    """Template checks: markup and template expression errors of components.

    Keeps the diagnostics of a component that start inside its template
    block. Style blocks and text between blocks are not reported. Script
    files and components without a template yield nothing.
    """

    def __init__(
        self,
        document_regions: LanguageModelCache[VueDocumentRegions],
        source: DiagnosticsSource,
    ) -> None:
        self.document_regions = document_regions
        self.source = source

    async def do_validation(self, document: TextDocument) -> list[Diagnostic]:
        if document.language_id != "vue":
            return []
        regions = self.document_regions.refresh_and_get(document)
        if not regions.get_regions("template"):
            return []
        return [
            diagnostic
            for diagnostic in await self.source.diagnostics(document)
            if _region_kind(document, regions, diagnostic) == "template"
        ]


class JavascriptMode:
    """Script checks: type errors inside script blocks and script files."""

    def __init__(
        self,
        document_regions: LanguageModelCache[VueDocumentRegions],
        source: DiagnosticsSource,
    ) -> None:
        self.document_regions = document_regions
        self.source = source

    async def do_validation(self, document: TextDocument) -> list[Diagnostic]:
        regions = self.document_regions.refresh_and_get(document)
        if not regions.get_regions("script"):
            return []
        return [
            diagnostic
            for diagnostic in await self.source.diagnostics(document)
            if _region_kind(document, regions, diagnostic) == "script"
        ]


@dataclass
class LanguageModes:
    """The pair of validators used for a run."""

    template: TemplateValidator
    script: ScriptValidator


ModesFactory = Callable[[EnvironmentService, CheckConfig], AbstractAsyncContextManager[LanguageModes]]


@asynccontextmanager
async def create_language_modes(
    environment: EnvironmentService,
    config: CheckConfig,
) -> AsyncIterator[LanguageModes]:
    """Start the language server and yield validators bound to it.

    The region cache is disposed and the server stopped on every exit path.
    """
    document_regions: LanguageModelCache[VueDocumentRegions] = LanguageModelCache(
        config.cache_max_entries,
        config.cache_ttl_seconds,
        get_vue_document_regions,
    )
    try:
        async with LanguageServerSession(
            config.server_args,
            environment,
            response_timeout=config.response_timeout,
        ) as session:
            yield LanguageModes(
                template=VueInterpolationMode(document_regions, session),
                script=JavascriptMode(document_regions, session),
            )
    finally:
        document_regions.dispose()
