"""
templatevisitor exceptions. Errors that point into template or program source
wrap a Diagnostic and render with the same rich code-frame formatting as
warnings; plain misuse errors subclass the builtin exception they refine.

A failed match is never an exception: the match engine answers with a bool.
"""

from __future__ import annotations

from dataclasses import dataclass

from rich.console import Console, ConsoleOptions, RenderResult

from templatevisitor.reporting.diagnostics import Diagnostic, format_plain, render_diagnostic

__all__ = [
    "TVException",
    "ParseError",
    "TemplateSyntaxError",
    "SpreadPositionError",
    "ForeignVariableError",
    "ReentrantMatchError",
]


@dataclass(slots=True, eq=False)
class TVException(Exception):
    """
    Base templatevisitor exception that carries a Diagnostic and renders nicely with Rich.
    """

    diagnostic: Diagnostic

    # Plain-text fallback (CI/log files; or if user didn't use Console)
    def __str__(self) -> str:
        return format_plain(self.diagnostic)

    @property
    def code(self) -> str | None:
        return self.diagnostic.code

    # Pretty rendering when printed via Rich Console
    def __rich_console__(self, console: Console, options: ConsoleOptions) -> RenderResult:
        _ = console
        _ = options
        yield render_diagnostic(self.diagnostic)


class ParseError(TVException):
    """Source text is not valid for the configured grammar edition and source type."""


class TemplateSyntaxError(ParseError):
    """Template source failed to parse. Raised once, at template creation."""


class SpreadPositionError(TVException):
    """A spread variable was placed somewhere other than a whole array position."""


class ForeignVariableError(ValueError):
    """A variable created by another TemplateManager was interpolated into a template."""


class ReentrantMatchError(RuntimeError):
    """A template's handler was dispatched again while its previous dispatch was still running."""
