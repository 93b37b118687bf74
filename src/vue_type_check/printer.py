"""Code-frame rendering for diagnostics.

Turns a diagnostic into a block like::

    Error in file:///app/src/ComponentOne.vue
    2:40 Property 'property' does not exist on type '{ value: number; }'.
      0 | <template>
      1 |   <div id="app">
    > 2 |     <p v-for="item in items" :key="item.property">{{ item.value }}</p>
        |                                         ^^^^^^^
      3 |   </div>
      4 | </template>
"""

from __future__ import annotations

from collections.abc import Callable

import typer

from vue_type_check.diagnostics import Diagnostic, Range
from vue_type_check.document import TextDocument

# Lines of context shown above and below the diagnostic range
CONTEXT_LINES = 2


def get_lines(start: int, end: int, total: int, context: int = CONTEXT_LINES) -> list[int]:
    """Line numbers to show for a range, clamped to the document.

    Args:
        start: First line of the diagnostic range.
        end: Last line of the diagnostic range.
        total: Number of lines in the document.
        context: Extra lines shown on each side.

    Returns:
        Ascending line numbers; empty if the range lies outside the document.
    """
    first = max(start - context, 0)
    last = min(max(end, start) + context, total - 1)
    return list(range(first, last + 1))


def format_line(number: int, code: str, is_error: bool, width: int) -> str:
    marker = ">" if is_error else " "
    gutter = f"{marker} {str(number).rjust(width)} |"
    return f"{gutter} {code}" if code else gutter


def format_cursor(range_: Range, width: int, line_length: int) -> str:
    """Caret line placed under the error line.

    A single-line range gets one caret per character (at least one). A range
    spanning several lines is marked from its start to the end of the start
    line.
    """
    start = range_.start.character
    if range_.is_single_line:
        size = range_.end.character - start
    else:
        size = line_length - start
    return f"  {' ' * width} | {' ' * start}{'^' * max(size, 1)}"


def format_header(document: TextDocument) -> str:
    return f"Error in {document.uri}"


def format_message(diagnostic: Diagnostic) -> str:
    start = diagnostic.range.start
    return f"{start.line}:{start.character} {diagnostic.message}"


def render_frame(document: TextDocument, diagnostic: Diagnostic) -> list[str]:
    """Source lines around a diagnostic, with the caret under the start line."""
    range_ = diagnostic.range
    lines = get_lines(range_.start.line, range_.end.line, document.line_count)
    if not lines:
        return []
    width = len(str(lines[-1]))

    frame: list[str] = []
    for number in lines:
        code = document.get_line(number)
        is_error = number == range_.start.line
        frame.append(format_line(number, code, is_error, width))
        if is_error:
            frame.append(format_cursor(range_, width, len(code)))
    return frame


def render_code_frame(document: TextDocument, diagnostic: Diagnostic) -> list[str]:
    """Full block for a diagnostic: header, message and frame."""
    return [
        format_header(document),
        format_message(diagnostic),
        *render_frame(document, diagnostic),
    ]


def print_error(msg: str, echo: Callable[..., None] = typer.echo) -> None:
    echo(typer.style(msg, fg=typer.colors.RED, bold=True))


def print_message(msg: str, echo: Callable[..., None] = typer.echo) -> None:
    echo(msg)


def print_log(msg: str, echo: Callable[..., None] = typer.echo) -> None:
    echo(msg)


def print_diagnostic(
    document: TextDocument,
    diagnostic: Diagnostic,
    echo: Callable[..., None] = typer.echo,
) -> None:
    """Write the code frame for a diagnostic to stdout."""
    header, message, *frame = render_code_frame(document, diagnostic)
    print_error(header, echo)
    print_message(message, echo)
    for line in frame:
        print_log(line, echo)
