"""Command results returned by every top-level operation."""

from pydantic import BaseModel, ConfigDict, Field


class CommandResult(BaseModel):
    """Ordered output lines plus a verbosity hint.

    ``verbose`` results are listings meant to be shown quoted line by line;
    terse results are short acknowledgements. The hint depends only on
    which operation produced the result.
    """

    model_config = ConfigDict(frozen=True)

    lines: tuple[str, ...] = ()
    verbose: bool = True


class CommandResponse(BaseModel):
    """Command result as returned by the HTTP API."""

    lines: list[str] = Field(..., description="Output lines in display order")
    verbose: bool = Field(..., description="Whether the result is a listing")
    text: str = Field(..., description="Chat-ready rendering of the lines")
