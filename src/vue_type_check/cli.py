"""vue-type-check CLI - Main entry point."""

from __future__ import annotations

import asyncio

import typer

from vue_type_check import __version__
from vue_type_check.cli_utils import error, resolve_path, resolve_paths
from vue_type_check.runner import CheckOptions, check

app = typer.Typer(
    name="vue-type-check",
    help="Type-check the templates and scripts of Vue single file components.",
    add_completion=False,
)


def version_callback(value: bool) -> None:
    """Print version and exit."""
    if value:
        typer.echo(f"vue-type-check version {__version__}")
        raise typer.Exit()


@app.command()
def main(
    root_dir: str | None = typer.Option(
        None,
        "--root-dir",
        "--rootDir",
        help="Workspace root containing tsconfig.json and package.json. Required.",
    ),
    src_dir: str | None = typer.Option(
        None,
        "--src-dir",
        "--srcDir",
        help="Directory to collect sources from. Defaults to the workspace root.",
    ),
    only_template: bool = typer.Option(
        False,
        "--only-template",
        "--onlyTemplate",
        help="Only validate templates; skip script type checking.",
    ),
    only_typescript: bool = typer.Option(
        False,
        "--only-typescript",
        "--onlyTypeScript",
        help="Also check .ts/.tsx files and skip components with a plain JavaScript script block.",
    ),
    exclude_dir: list[str] | None = typer.Option(
        None,
        "--exclude-dir",
        "--excludeDir",
        help="Skip files under this directory. Can be repeated.",
    ),
    server_command: str | None = typer.Option(
        None,
        "--server-command",
        help='Command that starts the language server over stdio (default: "vls --stdio").',
    ),
    timeout: float | None = typer.Option(
        None,
        "--timeout",
        help="Seconds to wait for each language server reply.",
    ),
    verbose: bool = typer.Option(
        False,
        "--verbose",
        help="Print extra status information to stderr.",
    ),
    version: bool | None = typer.Option(
        None,
        "--version",
        "-v",
        help="Show version and exit.",
        callback=version_callback,
        is_eager=True,
    ),
) -> None:
    """Check every component under the workspace and print a code frame per problem.

    Exits with status 1 if any problem is found or the run fails, 0 otherwise.
    """
    if not root_dir:
        error("--root-dir is required")

    options = CheckOptions(
        workspace=resolve_path(root_dir),
        src_dir=resolve_path(src_dir) if src_dir else None,
        only_template=only_template,
        only_typescript=only_typescript,
        exclude_dirs=resolve_paths(exclude_dir),
        config_overrides={"server_command": server_command, "response_timeout": timeout},
        verbose=verbose,
    )
    raise typer.Exit(code=asyncio.run(check(options)))


if __name__ == "__main__":
    app()
