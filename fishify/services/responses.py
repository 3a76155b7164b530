"""Construction and rendering of command results."""

from collections.abc import Iterable

from fishify.models.response import CommandResponse, CommandResult

QUOTE_PREFIX = "> "


def listing(lines: Iterable[str]) -> CommandResult:
    """Verbose result for operations that list things."""
    return CommandResult(lines=tuple(lines), verbose=True)


def acknowledgement(*lines: str) -> CommandResult:
    """Terse result for operations that just confirm an action."""
    return CommandResult(lines=lines, verbose=False)


def render_terse(result: CommandResult) -> str:
    return "\n".join(result.lines)


def render_quoted(result: CommandResult) -> str:
    return "\n".join(f"{QUOTE_PREFIX}{line}" for line in result.lines)


def render(result: CommandResult) -> str:
    """Render for a chat message: listings quoted, acknowledgements plain."""
    if result.verbose:
        return render_quoted(result)
    return render_terse(result)


def to_response(result: CommandResult) -> CommandResponse:
    return CommandResponse(lines=list(result.lines), verbose=result.verbose, text=render(result))
