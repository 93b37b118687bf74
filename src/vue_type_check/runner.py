"""Validation driver: select, load, filter and check documents.

Documents are validated one at a time in selection order. The first
exception aborts the rest of the batch; output already printed stands.
"""

from __future__ import annotations

from collections.abc import Callable, Sequence
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import typer
from rich.progress import BarColumn, MofNCompleteColumn, Progress, TextColumn

from vue_type_check.cli_utils import EXIT_FAILURE, EXIT_SUCCESS, console, err_console, info, warning
from vue_type_check.config import CheckConfig, load_config
from vue_type_check.diagnostics import Diagnostic
from vue_type_check.document import TextDocument
from vue_type_check.files import (
    DEFAULT_EXTENSIONS,
    TYPESCRIPT_EXTENSIONS,
    filter_typescript_sources,
    load_files,
    select_files,
)
from vue_type_check.printer import print_diagnostic
from vue_type_check.services.environment import EnvironmentService, create_environment_service
from vue_type_check.services.modes import LanguageModes, ModesFactory, create_language_modes


@dataclass
class CheckOptions:
    """Options for a check run, as given on the command line.

    Attributes:
        workspace: Workspace root (absolute).
        src_dir: Directory to collect sources from. Defaults to the workspace.
        only_template: Skip script validation.
        only_typescript: Also check .ts/.tsx files and skip components whose
            script block is plain JavaScript.
        exclude_dirs: Absolute directories whose files are not checked.
        config_overrides: CheckConfig fields set on the command line.
        verbose: Print extra status information to stderr.
    """

    workspace: Path
    src_dir: Path | None = None
    only_template: bool = False
    only_typescript: bool = False
    exclude_dirs: list[Path] = field(default_factory=list)
    config_overrides: dict[str, Any] = field(default_factory=dict)
    verbose: bool = False


@dataclass
class RunContext:
    """State of one run, passed explicitly through each stage.

    ``has_error`` starts False and is set by the first diagnostic or fatal
    error; it decides the exit code.
    """

    workspace: Path
    src_dir: Path
    only_template: bool
    only_typescript: bool
    exclude_dirs: list[Path]
    extensions: tuple[str, ...]
    verbose: bool = False
    has_error: bool = False
    documents_checked: int = 0
    diagnostics_found: int = 0

    @classmethod
    def from_options(cls, options: CheckOptions) -> RunContext:
        return cls(
            workspace=options.workspace,
            src_dir=options.src_dir or options.workspace,
            only_template=options.only_template,
            only_typescript=options.only_typescript,
            exclude_dirs=list(options.exclude_dirs),
            extensions=TYPESCRIPT_EXTENSIONS if options.only_typescript else DEFAULT_EXTENSIONS,
            verbose=options.verbose,
        )

    @property
    def exit_code(self) -> int:
        return EXIT_FAILURE if self.has_error else EXIT_SUCCESS


def resolve_environment(context: RunContext, config: CheckConfig) -> EnvironmentService:
    return create_environment_service(
        context.workspace,
        context.src_dir,
        config.get_tsconfig_path(context.workspace),
        config.get_package_path(context.workspace),
    )


async def traverse(context: RunContext) -> list[TextDocument]:
    """Select, read and filter the documents of a run.

    Raises:
        OSError: If a selected file cannot be read.
    """
    paths = select_files(context.src_dir, context.extensions, context.exclude_dirs)
    sources = await load_files(paths)
    if context.only_typescript:
        sources = filter_typescript_sources(sources)
    return [source.to_document() for source in sources]


async def validate_document(
    document: TextDocument,
    modes: LanguageModes,
    only_template: bool = False,
) -> list[Diagnostic]:
    """Template diagnostics followed by script diagnostics for one document."""
    template_results = await modes.template.do_validation(document)
    script_results: list[Diagnostic] = []
    script_validation = getattr(modes.script, "do_validation", None)
    if not only_template and script_validation is not None:
        script_results = await script_validation(document)
    return [*template_results, *script_results]


def _make_progress(total: int) -> Progress:
    return Progress(
        TextColumn("checking"),
        BarColumn(bar_width=20),
        MofNCompleteColumn(),
        console=console,
        transient=True,
        disable=total == 0,
    )


async def get_diagnostics(
    context: RunContext,
    docs: Sequence[TextDocument],
    modes: LanguageModes,
    echo: Callable[..., None] = typer.echo,
) -> None:
    """Validate documents sequentially and print a code frame per diagnostic."""
    with _make_progress(len(docs)) as progress:
        task = progress.add_task("checking", total=len(docs))
        for doc in docs:
            results = await validate_document(doc, modes, context.only_template)
            if results:
                context.has_error = True
                context.diagnostics_found += len(results)
                for result in results:
                    print_diagnostic(doc, result, echo)
            context.documents_checked += 1
            progress.advance(task)


async def check(
    options: CheckOptions,
    modes_factory: ModesFactory = create_language_modes,
) -> int:
    """Run a full check and return the process exit code.

    This is the only place exceptions are caught: any failure marks the run
    as failed and is dumped to stderr.

    Returns:
        EXIT_SUCCESS (0) if no diagnostics were found and nothing failed,
        EXIT_FAILURE (1) otherwise.
    """
    context = RunContext.from_options(options)
    try:
        config = load_config(options.config_overrides, start_dir=context.workspace)
        environment = resolve_environment(context, config)
        if context.only_typescript and not environment.has_typescript():
            warning(f"No tsconfig.json or typescript dependency found in {context.workspace}")

        docs = await traverse(context)
        info(f"Checking {len(docs)} file(s) under {context.src_dir}", context.verbose)
        if docs:
            info(f"Starting language server: {config.server_command}", context.verbose)
            async with modes_factory(environment, config) as modes:
                await get_diagnostics(context, docs, modes)
    except Exception:
        context.has_error = True
        err_console.print_exception()

    info(
        f"Checked {context.documents_checked} file(s), "
        f"found {context.diagnostics_found} problem(s)",
        context.verbose,
    )
    return context.exit_code
